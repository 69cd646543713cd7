"""Transient state for one spreadsheet import run."""

from enum import Enum

from pydantic import BaseModel, Field

from cabinetbox.exceptions import ImportInProgressError
from cabinetbox.models.cabinet_product import CabinetProduct


class ImportStatus(str, Enum):
    """Lifecycle state of an import session."""

    IDLE = "idle"
    PARSING = "parsing"
    PARSED = "parsed"
    IMPORTING = "importing"
    COMPLETED = "completed"
    PARTIAL = "partial"
    FAILED = "failed"


class RecordResult(BaseModel):
    """Outcome of one create call against the product service."""

    sku: str
    success: bool
    error: str | None = None


class ImportSession(BaseModel):
    """Holds parsed rows, mapped products, progress and messages for one import.

    A session belongs to a single interactive surface. It is reset before each
    new file is parsed and keeps its terminal state until then.
    """

    status: ImportStatus = ImportStatus.IDLE
    filename: str | None = None

    # Raw rows keyed by header, and the products mapped from them
    parsed_rows: list[dict[str, str]] = Field(default_factory=list)
    mapped_rows: list[CabinetProduct] = Field(default_factory=list)
    preview_rows: list[CabinetProduct] = Field(default_factory=list)
    low_confidence_count: int = 0

    is_parsing: bool = False
    is_importing: bool = False

    # Progress (0-100), refreshed after every batch
    progress: int = 0
    imported_count: int = 0
    total_count: int = 0
    failures: list[RecordResult] = Field(default_factory=list)

    success_message: str | None = None
    error_message: str | None = None

    def reset(self) -> None:
        """Return every attribute to its initial value.

        Raises:
            ImportInProgressError: If an import run is still active.
        """
        if self.is_importing:
            raise ImportInProgressError("Cannot reset the session while an import is running")

        for name, field in type(self).model_fields.items():
            setattr(self, name, field.get_default(call_default_factory=True))

    @property
    def message(self) -> str | None:
        """The message to show the operator, errors first."""
        return self.error_message or self.success_message
