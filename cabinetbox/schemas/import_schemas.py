"""Pydantic schemas for spreadsheet import functionality."""

from pydantic import BaseModel, Field

from cabinetbox.models.cabinet_product import CabinetProduct
from cabinetbox.models.import_session import ImportSession, RecordResult


class ImportDefaults(BaseModel):
    """Import-time overrides applied to every product before it is created."""

    default_publish: bool | None = Field(
        None, description="When set, overrides every product's publish flag"
    )
    default_discount: float | None = Field(
        None, ge=0, le=100, description="When set, overrides every product's discount (percent)"
    )


class ImportUploadResponse(BaseModel):
    """Response after uploading and mapping an export file."""

    filename: str
    parsed_count: int
    mapped_count: int
    low_confidence_count: int
    preview_rows: list[CabinetProduct]
    message: str | None = None


class ImportResultResponse(BaseModel):
    """Response after running an import."""

    status: str
    imported_count: int
    total_count: int
    progress: int
    failures: list[RecordResult]
    message: str | None = None


class ImportStatusResponse(BaseModel):
    """Snapshot of the current import session."""

    status: str
    filename: str | None
    is_parsing: bool
    is_importing: bool
    progress: int
    imported_count: int
    total_count: int
    mapped_count: int
    failures: list[RecordResult]
    message: str | None = None

    @classmethod
    def from_session(cls, session: ImportSession) -> "ImportStatusResponse":
        return cls(
            status=session.status.value,
            filename=session.filename,
            is_parsing=session.is_parsing,
            is_importing=session.is_importing,
            progress=session.progress,
            imported_count=session.imported_count,
            total_count=session.total_count,
            mapped_count=len(session.mapped_rows),
            failures=session.failures,
            message=session.message,
        )
