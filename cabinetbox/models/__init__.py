"""Data models for CabinetBox."""

from cabinetbox.models.cabinet_product import CabinetProduct
from cabinetbox.models.import_session import ImportSession, ImportStatus, RecordResult

__all__ = [
    "CabinetProduct",
    "ImportSession",
    "ImportStatus",
    "RecordResult",
]
