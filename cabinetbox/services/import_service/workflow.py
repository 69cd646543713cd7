"""Drive an ImportSession through file loading and the batch import run."""

import logging
from collections.abc import Callable

from cabinetbox.config.schema import ImportConfig, MappingConfig
from cabinetbox.exceptions import ImportFileError, ImportInProgressError, ImportPreconditionError
from cabinetbox.models.import_session import ImportSession, ImportStatus
from cabinetbox.schemas.import_schemas import ImportDefaults

from .constants import DEFAULT_BATCH_SIZE
from .converters import map_rows
from .parsers import parse_product_file
from .processor import BatchProgress, CreateRecord, ImportResult, import_products, validate_preconditions

logger = logging.getLogger(__name__)


def load_file(
    session: ImportSession,
    filename: str | None,
    file_content: bytes,
    import_config: ImportConfig | None = None,
    mapping: MappingConfig | None = None,
) -> ImportSession:
    """Reset the session, then parse and map a product export into it.

    On a structural parse error the session keeps no rows, records the
    message, and the ImportFileError is re-raised.

    Raises:
        ImportInProgressError: If an import run is active on this session.
        ImportFileError: If the file is rejected or cannot be parsed.
    """
    import_config = import_config or ImportConfig()
    mapping = mapping or MappingConfig()

    session.reset()
    session.filename = filename
    session.is_parsing = True
    session.status = ImportStatus.PARSING

    try:
        if len(file_content) > import_config.max_upload_bytes:
            raise ImportFileError(f"File exceeds maximum size of {import_config.max_upload_mb} MB")
        rows = parse_product_file(
            filename,
            file_content,
            allowed_extensions=import_config.allowed_extensions,
            encodings=import_config.encodings,
        )
    except ImportFileError as e:
        session.is_parsing = False
        session.status = ImportStatus.FAILED
        session.error_message = str(e)
        logger.warning("Rejected import file %s: %s", filename, e)
        raise

    products = map_rows(rows, mapping)

    session.is_parsing = False
    session.parsed_rows = rows
    session.mapped_rows = products
    session.preview_rows = products[: import_config.preview_size]
    session.low_confidence_count = sum(1 for p in products if p.low_confidence)
    session.status = ImportStatus.PARSED
    session.success_message = f"{len(products)} rows mapped successfully from {len(rows)} parsed."

    if session.low_confidence_count:
        logger.info(
            "%s: %d of %d products used default brand/style (title did not match)",
            filename, session.low_confidence_count, len(products),
        )
    return session


async def run_import(
    session: ImportSession,
    create_record: CreateRecord,
    defaults: ImportDefaults | None = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    on_batch: Callable[[BatchProgress], None] | None = None,
) -> ImportResult:
    """Import the session's mapped products, updating progress after each batch.

    ``on_batch`` is called after the session has been updated for each batch.

    Raises:
        ImportInProgressError: If an import run is already active.
        ImportPreconditionError: If there is nothing to import or defaults are invalid.
    """
    if session.is_importing:
        raise ImportInProgressError("An import is already running")

    defaults = defaults or ImportDefaults()
    try:
        validate_preconditions(session.mapped_rows, defaults)
        if batch_size < 1:
            raise ImportPreconditionError(f"Batch size must be at least 1, got {batch_size}")
    except ImportPreconditionError as e:
        session.status = ImportStatus.FAILED
        session.error_message = str(e)
        session.success_message = None
        raise

    session.is_importing = True
    session.status = ImportStatus.IMPORTING
    session.progress = 0
    session.imported_count = 0
    session.total_count = len(session.mapped_rows)
    session.failures = []
    session.error_message = None
    session.success_message = None

    def update_session(batch: BatchProgress) -> None:
        session.progress = max(session.progress, batch.progress)
        session.imported_count = batch.imported_count
        if on_batch is not None:
            on_batch(batch)

    try:
        result = await import_products(
            list(session.mapped_rows),
            create_record,
            defaults=defaults,
            batch_size=batch_size,
            on_batch=update_session,
        )
    finally:
        session.is_importing = False

    session.imported_count = result.imported_count
    session.failures = result.failures

    if result.is_complete:
        session.status = ImportStatus.COMPLETED
        session.success_message = f"Successfully imported {result.imported_count} rows!"
    else:
        session.status = ImportStatus.PARTIAL
        session.error_message = (
            f"Imported {result.imported_count} of {result.total} rows. Check logs for errors."
        )
        logger.warning(
            "Partial import of %s: %d failed (%s)",
            session.filename,
            len(result.failures),
            ", ".join(f.sku for f in result.failures[:10]),
        )

    return result
