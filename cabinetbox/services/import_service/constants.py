"""Constants for the cabinet product import service."""

import re

# Number of create calls in flight at once; batches run one after another
DEFAULT_BATCH_SIZE = 10

ALLOWED_EXTENSIONS = {"csv", "xlsx"}

# WooCommerce product export column names
SKU_COLUMN = "SKU"
NAME_COLUMN = "Name"
SHORT_DESCRIPTION_COLUMN = "Short description"
TAGS_COLUMN = "Tags"
CATEGORIES_COLUMN = "Categories"
IMAGES_COLUMN = "Images"
WEIGHT_COLUMN = "Weight (lbs)"
PUBLISHED_COLUMN = "Published"

# Candidate price columns, highest priority first
PRICE_COLUMNS = ("Regular price", "Sale price")

# Custom meta fields are exported as "Meta: <key>" columns
META_COLUMN_PREFIX = "Meta: "
ASSEMBLY_FEE_META_KEY = "assembly_fee"
ASSEMBLY_COST_META_KEY = "assembly_cost"

# Tag markers that force an explicit door style label
DOOR_STYLE_TAG_MARKERS = (
    ("double-door", "Double Door"),
    ("single-door", "Single Door"),
)

# "<brand> <collection words> <category words> Cabinet <size>", e.g.
# "Forevermark Champagne Shaker Wall Cabinet 9W X 30H"
TITLE_PATTERN = re.compile(
    r"^(?P<brand>\S+)\s+(?P<collection>.+?)\s+(?P<category>\S+\s+Cabinet)\b\s*(?P<suffix>.*)$",
    re.IGNORECASE,
)

# "9W X 30H" at the end of the title
TITLE_SIZE_PATTERN = re.compile(r"(\d+)W\s+X\s+(\d+)H$", re.IGNORECASE)

# Short description fields, e.g. "Width: 9 Height: 30 Depth: 12 Door: 1"
WIDTH_PATTERN = re.compile(r"Width:\s*(\d+(?:\.\d+)?)", re.IGNORECASE)
HEIGHT_PATTERN = re.compile(r"Height:\s*(\d+(?:\.\d+)?)", re.IGNORECASE)
DOOR_PATTERN = re.compile(r"Door:\s*(\d+)", re.IGNORECASE)
