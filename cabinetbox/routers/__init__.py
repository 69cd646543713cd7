"""API routers for CabinetBox."""

from cabinetbox.routers import import_router

__all__ = ["import_router"]
