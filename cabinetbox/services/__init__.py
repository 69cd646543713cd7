"""Services for CabinetBox."""

from cabinetbox.services.product_client import ProductServiceClient

__all__ = ["ProductServiceClient"]
