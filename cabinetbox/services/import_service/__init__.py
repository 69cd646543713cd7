"""Import service package for parsing product exports and creating cabinet products."""

from .constants import (
    ALLOWED_EXTENSIONS,
    DEFAULT_BATCH_SIZE,
    PRICE_COLUMNS,
    SKU_COLUMN,
)
from .converters import derive_skus, map_rows, row_to_cabinet_product
from .extractors import coerce_float, coerce_int, first_of, parse_title
from .parsers import (
    filter_identified,
    get_file_extension,
    parse_csv,
    parse_product_file,
    parse_xlsx,
    validate_filename,
)
from .processor import (
    BatchProgress,
    CreateRecord,
    ImportResult,
    apply_defaults,
    compute_discount_price,
    import_products,
    percent_complete,
    validate_preconditions,
)
from .workflow import load_file, run_import

__all__ = [
    # Constants
    "ALLOWED_EXTENSIONS",
    "DEFAULT_BATCH_SIZE",
    "PRICE_COLUMNS",
    "SKU_COLUMN",
    # Parsers
    "filter_identified",
    "get_file_extension",
    "parse_csv",
    "parse_product_file",
    "parse_xlsx",
    "validate_filename",
    # Mapping
    "coerce_float",
    "coerce_int",
    "derive_skus",
    "first_of",
    "map_rows",
    "parse_title",
    "row_to_cabinet_product",
    # Processor
    "BatchProgress",
    "CreateRecord",
    "ImportResult",
    "apply_defaults",
    "compute_discount_price",
    "import_products",
    "percent_complete",
    "validate_preconditions",
    # Session workflow
    "load_file",
    "run_import",
]
