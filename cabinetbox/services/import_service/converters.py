"""Mapping of WooCommerce export rows to CabinetProduct records."""

from collections.abc import Iterable

from cabinetbox.config.schema import MappingConfig
from cabinetbox.models.cabinet_product import CabinetProduct

from . import extractors as ex
from .constants import (
    ASSEMBLY_COST_META_KEY,
    ASSEMBLY_FEE_META_KEY,
    CATEGORIES_COLUMN,
    NAME_COLUMN,
    PRICE_COLUMNS,
    PUBLISHED_COLUMN,
    SKU_COLUMN,
    TAGS_COLUMN,
)

_DEFAULT_OPTIONS = MappingConfig()

# Door style: explicit tag marker, stated door count, title collection
DOOR_STYLE_CANDIDATES = (ex.tag_door_style, ex.door_count_label, ex.title_door_style)
# Explicit description fields win over the size suffix in the title
WIDTH_CANDIDATES = (ex.description_width, ex.title_width)
HEIGHT_CANDIDATES = (ex.description_height, ex.title_height)
PRICE_CANDIDATES = tuple(ex.price_column(name) for name in PRICE_COLUMNS)


def derive_skus(source_sku: str, options: MappingConfig = _DEFAULT_OPTIONS) -> tuple[str, str]:
    """Derive the primary and secondary SKUs from one export SKU.

    The source prefix (``AZ-``) is swapped for the primary (``W-``) and
    secondary (``V-``) prefixes. A SKU without the source prefix is used
    unchanged for both.
    """
    prefix = options.sku_source_prefix
    if not source_sku.startswith(prefix):
        return source_sku, source_sku
    stem = source_sku[len(prefix):]
    return f"{options.primary_sku_prefix}{stem}", f"{options.secondary_sku_prefix}{stem}"


def row_to_cabinet_product(
    row: ex.RawRow,
    options: MappingConfig = _DEFAULT_OPTIONS,
) -> CabinetProduct | None:
    """Convert a WooCommerce export row to a CabinetProduct.

    Args:
        row: Raw row dict keyed by export column name.
        options: Fixed prefixes and defaults used by the mapping.

    Returns:
        CabinetProduct, or None if the row has no SKU.
    """
    sku = ex.column(row, SKU_COLUMN)
    if not sku:
        return None

    primary_sku, secondary_sku = derive_skus(sku, options)
    title = ex.parse_title(ex.column(row, NAME_COLUMN))

    return CabinetProduct(
        primary_sku=primary_sku,
        secondary_sku=secondary_sku,
        brand=title.brand if title else options.default_brand,
        door_style=ex.first_of(row, DOOR_STYLE_CANDIDATES, options.default_door_style),
        discount=options.default_discount,
        cost_factor=options.default_cost_factor,
        assembly_fee=ex.first_of(row, (ex.meta_number(ASSEMBLY_FEE_META_KEY),), 0.0),
        assembly_cost=ex.first_of(row, (ex.meta_number(ASSEMBLY_COST_META_KEY),), 0.0),
        retail_price=ex.first_of(row, PRICE_CANDIDATES, 0.0),
        discount_price=0.0,
        height=ex.first_of(row, HEIGHT_CANDIDATES, 0.0),
        width=ex.first_of(row, WIDTH_CANDIDATES, 0.0),
        weight=ex.first_of(row, (ex.weight,), 0.0),
        species=options.default_species,
        image_path=ex.first_of(row, (ex.first_image,), ""),
        categories=ex.column(row, CATEGORIES_COLUMN),
        tags=ex.column(row, TAGS_COLUMN),
        publish=ex.column(row, PUBLISHED_COLUMN) == options.publish_sentinel,
        low_confidence=title is None,
    )


def map_rows(
    rows: Iterable[ex.RawRow],
    options: MappingConfig = _DEFAULT_OPTIONS,
) -> list[CabinetProduct]:
    """Map rows in order, dropping rows that have no SKU."""
    products = []
    for row in rows:
        product = row_to_cabinet_product(row, options)
        if product is not None:
            products.append(product)
    return products
