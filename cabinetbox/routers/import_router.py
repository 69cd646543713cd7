"""Import endpoints for WooCommerce product export import."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from cabinetbox.config import settings
from cabinetbox.exceptions import ImportFileError, ImportInProgressError, ImportPreconditionError
from cabinetbox.models.import_session import ImportSession
from cabinetbox.schemas.import_schemas import (
    ImportDefaults,
    ImportResultResponse,
    ImportStatusResponse,
    ImportUploadResponse,
)
from cabinetbox.services.import_service import CreateRecord, load_file, run_import

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)

UPLOAD_CHUNK_SIZE = 64 * 1024


def get_import_session(request: Request) -> ImportSession:
    """The import session owned by this application instance."""
    return request.app.state.import_session


def get_create_record(request: Request) -> CreateRecord:
    """The product service create operation."""
    return request.app.state.product_client.create_cabinet_product


ImportSessionDep = Annotated[ImportSession, Depends(get_import_session)]
CreateRecordDep = Annotated[CreateRecord, Depends(get_create_record)]


def _in_progress(e: ImportInProgressError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post("/upload", response_model=ImportUploadResponse)
@limiter.limit("30/minute")
async def upload_export(
    request: Request,  # Required for rate limiting
    session: ImportSessionDep,
    file: UploadFile = File(..., description="WooCommerce product export (CSV or XLSX)"),
) -> ImportUploadResponse:
    """Upload a product export, then parse and map it into the session.

    Returns counts and a preview of the mapped products.
    """
    import_config = settings.import_config
    max_bytes = import_config.max_upload_bytes

    # Stop reading once past the limit; load_file resets the session and
    # rejects the oversized content
    chunks: list[bytes] = []
    total_size = 0
    while total_size <= max_bytes:
        chunk = await file.read(UPLOAD_CHUNK_SIZE)
        if not chunk:
            break
        total_size += len(chunk)
        chunks.append(chunk)
    content = b"".join(chunks)

    try:
        load_file(session, file.filename, content, import_config, settings.mapping)
    except ImportInProgressError as e:
        raise _in_progress(e)
    except ImportFileError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return ImportUploadResponse(
        filename=session.filename or "unknown",
        parsed_count=len(session.parsed_rows),
        mapped_count=len(session.mapped_rows),
        low_confidence_count=session.low_confidence_count,
        preview_rows=session.preview_rows,
        message=session.message,
    )


@router.post("/run", response_model=ImportResultResponse)
async def run_session_import(
    session: ImportSessionDep,
    create_record: CreateRecordDep,
    overrides: ImportDefaults | None = None,
) -> ImportResultResponse:
    """Create every mapped product through the product service.

    Overrides not given in the request fall back to the configured import defaults.
    """
    import_config = settings.import_config
    defaults = ImportDefaults(
        default_publish=import_config.default_publish,
        default_discount=import_config.default_discount,
    )
    if overrides is not None:
        defaults = defaults.model_copy(update=overrides.model_dump(exclude_unset=True))

    try:
        result = await run_import(session, create_record, defaults, batch_size=import_config.batch_size)
    except ImportInProgressError as e:
        raise _in_progress(e)
    except ImportPreconditionError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return ImportResultResponse(
        status=session.status.value,
        imported_count=result.imported_count,
        total_count=result.total,
        progress=session.progress,
        failures=result.failures,
        message=session.message,
    )


@router.get("/status", response_model=ImportStatusResponse)
async def get_import_status(session: ImportSessionDep) -> ImportStatusResponse:
    """Get progress, counts and messages for the current import."""
    return ImportStatusResponse.from_session(session)


@router.post("/reset", response_model=ImportStatusResponse)
async def reset_import(session: ImportSessionDep) -> ImportStatusResponse:
    """Clear the session. Rejected while an import is running."""
    try:
        session.reset()
    except ImportInProgressError as e:
        raise _in_progress(e)
    return ImportStatusResponse.from_session(session)
