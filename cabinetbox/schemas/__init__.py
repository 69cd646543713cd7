"""Pydantic schemas for CabinetBox API."""

from cabinetbox.schemas.import_schemas import (
    ImportDefaults,
    ImportResultResponse,
    ImportStatusResponse,
    ImportUploadResponse,
)

__all__ = [
    "ImportDefaults",
    "ImportResultResponse",
    "ImportStatusResponse",
    "ImportUploadResponse",
]
