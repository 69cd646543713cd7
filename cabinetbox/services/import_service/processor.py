"""Batched creation of cabinet products through the product service."""

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from pydantic import BaseModel, Field

from cabinetbox.exceptions import ImportPreconditionError
from cabinetbox.models.cabinet_product import CabinetProduct
from cabinetbox.models.import_session import RecordResult
from cabinetbox.schemas.import_schemas import ImportDefaults

from .constants import DEFAULT_BATCH_SIZE

logger = logging.getLogger(__name__)

# Creates one product remotely; returns the created object, or None/raises on failure
CreateRecord = Callable[[CabinetProduct], Awaitable[Any]]


class BatchProgress(BaseModel):
    """Progress reported after a batch has fully settled."""

    batch_number: int
    batch_size: int
    processed: int
    total: int
    imported_count: int
    progress: int


class ImportResult(BaseModel):
    """Outcome of a whole import run."""

    total: int
    imported_count: int = 0
    results: list[RecordResult] = Field(default_factory=list)

    @property
    def failures(self) -> list[RecordResult]:
        return [r for r in self.results if not r.success]

    @property
    def is_complete(self) -> bool:
        """True when every record was created."""
        return self.imported_count == self.total


def compute_discount_price(retail_price: float, discount: float) -> float:
    """Price after applying a percentage discount, never below zero."""
    return max(0.0, retail_price * (1 - discount / 100))


def apply_defaults(product: CabinetProduct, defaults: ImportDefaults) -> CabinetProduct:
    """Return the create input for ``product`` with import-time overrides applied.

    An override replaces the product's own value only when it is set.
    ``discount_price`` is always recomputed from the effective discount.
    """
    publish = product.publish if defaults.default_publish is None else defaults.default_publish
    discount = product.discount if defaults.default_discount is None else defaults.default_discount
    return product.model_copy(
        update={
            "publish": publish,
            "discount": discount,
            "discount_price": compute_discount_price(product.retail_price, discount),
        }
    )


def validate_preconditions(products: Sequence[CabinetProduct], defaults: ImportDefaults) -> None:
    """Refuse to run with nothing to import or with out-of-range defaults.

    Raises:
        ImportPreconditionError: If the run must not start.
    """
    if not products:
        raise ImportPreconditionError("Invalid form or no rows to import.")
    discount = defaults.default_discount
    if discount is not None and not (0 <= discount <= 100):
        raise ImportPreconditionError(
            f"Invalid form or no rows to import. Discount must be between 0 and 100, got {discount}"
        )


def percent_complete(processed: int, total: int) -> int:
    """Whole-number percentage, rounding halves up."""
    return (processed * 200 + total) // (2 * total)


async def _create_one(create_record: CreateRecord, product: CabinetProduct) -> RecordResult:
    """Create one product; failures become a failed result, never an exception."""
    try:
        created = await create_record(product)
    except Exception as e:
        logger.warning("Error importing row %s: %s", product.primary_sku, e)
        return RecordResult(sku=product.primary_sku, success=False, error=str(e) or type(e).__name__)

    if created is None:
        logger.warning("Error importing row %s: product service returned no record", product.primary_sku)
        return RecordResult(sku=product.primary_sku, success=False, error="No record returned")
    return RecordResult(sku=product.primary_sku, success=True)


async def import_products(
    products: Sequence[CabinetProduct],
    create_record: CreateRecord,
    defaults: ImportDefaults | None = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    on_batch: Callable[[BatchProgress], None] | None = None,
) -> ImportResult:
    """Create products in sequential batches of concurrent create calls.

    Batch ``k + 1`` is not started until every call in batch ``k`` has
    settled. Progress and counts are updated once per batch.

    Args:
        products: Mapped products, in import order.
        create_record: The product service create operation.
        defaults: Import-time publish/discount overrides.
        batch_size: Maximum number of create calls in flight.
        on_batch: Called after each batch settles.

    Returns:
        ImportResult with per-record results.

    Raises:
        ImportPreconditionError: If there is nothing to import or defaults are invalid.
    """
    defaults = defaults or ImportDefaults()
    validate_preconditions(products, defaults)
    if batch_size < 1:
        raise ImportPreconditionError(f"Batch size must be at least 1, got {batch_size}")

    total = len(products)
    result = ImportResult(total=total)
    batch_count = math.ceil(total / batch_size)

    for batch_number, start in enumerate(range(0, total, batch_size), start=1):
        batch = products[start:start + batch_size]
        inputs = [apply_defaults(product, defaults) for product in batch]

        batch_results = await asyncio.gather(*(_create_one(create_record, p) for p in inputs))

        result.results.extend(batch_results)
        result.imported_count += sum(1 for r in batch_results if r.success)
        processed = start + len(batch)
        progress = percent_complete(processed, total)

        logger.debug(
            "Batch %d/%d settled: %d/%d processed, %d imported",
            batch_number, batch_count, processed, total, result.imported_count,
        )
        if on_batch is not None:
            on_batch(
                BatchProgress(
                    batch_number=batch_number,
                    batch_size=len(batch),
                    processed=processed,
                    total=total,
                    imported_count=result.imported_count,
                    progress=progress,
                )
            )

        # Let observers of the session see this batch before the next one starts
        await asyncio.sleep(0)

    logger.info("Import finished: %d of %d products created", result.imported_count, total)
    return result
