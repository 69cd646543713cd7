"""Candidate extractors for cabinet product fields.

Each extractor takes one raw export row and returns a value, or None when its
source column is missing or unusable. A field is resolved by trying its
extractors in priority order with ``first_of`` and falling back to a default.
"""

import math
from collections.abc import Callable, Mapping, Sequence
from typing import NamedTuple, TypeVar

from .constants import (
    DOOR_PATTERN,
    DOOR_STYLE_TAG_MARKERS,
    HEIGHT_PATTERN,
    IMAGES_COLUMN,
    META_COLUMN_PREFIX,
    NAME_COLUMN,
    SHORT_DESCRIPTION_COLUMN,
    TAGS_COLUMN,
    TITLE_PATTERN,
    TITLE_SIZE_PATTERN,
    WEIGHT_COLUMN,
    WIDTH_PATTERN,
)

T = TypeVar("T")

RawRow = Mapping[str, str]
Extractor = Callable[[RawRow], T | None]


class TitleParts(NamedTuple):
    """Pieces of a structured product title."""

    brand: str
    collection: str
    category: str
    suffix: str

    @property
    def style_token(self) -> str:
        """Door style implied by the collection words."""
        if "shaker" in self.collection.lower():
            return "Shaker"
        return self.collection.split()[-1]


def first_of(row: RawRow, candidates: Sequence[Extractor[T]], default: T) -> T:
    """Return the first non-None candidate value for ``row``, else ``default``."""
    for candidate in candidates:
        value = candidate(row)
        if value is not None:
            return value
    return default


def coerce_float(value: str | None) -> float | None:
    """Try to coerce a string to a finite float."""
    if not value:
        return None
    cleaned = value.replace("$", "").replace(",", "").strip()
    try:
        number = float(cleaned)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def coerce_int(value: str | None) -> int | None:
    """Try to coerce a string to an int."""
    number = coerce_float(value)
    if number is None:
        return None
    return int(number)


def column(row: RawRow, name: str) -> str:
    """Get a column value, treating missing columns as empty."""
    return (row.get(name) or "").strip()


def parse_title(title: str) -> TitleParts | None:
    """Split a product title into brand, collection, category and size suffix.

    Returns None when the title does not follow the naming pattern.
    """
    match = TITLE_PATTERN.match(title.strip())
    if not match:
        return None
    return TitleParts(
        brand=match.group("brand"),
        collection=match.group("collection"),
        category=match.group("category"),
        suffix=match.group("suffix"),
    )


def _title_size(row: RawRow) -> tuple[float, float] | None:
    match = TITLE_SIZE_PATTERN.search(column(row, NAME_COLUMN))
    if not match:
        return None
    return float(match.group(1)), float(match.group(2))


def _description_number(row: RawRow, pattern) -> float | None:
    match = pattern.search(column(row, SHORT_DESCRIPTION_COLUMN))
    if not match:
        return None
    return coerce_float(match.group(1))


# Brand and style


def title_brand(row: RawRow) -> str | None:
    parts = parse_title(column(row, NAME_COLUMN))
    return parts.brand if parts else None


def title_door_style(row: RawRow) -> str | None:
    parts = parse_title(column(row, NAME_COLUMN))
    return parts.style_token if parts else None


def tag_door_style(row: RawRow) -> str | None:
    """Door style forced by a "double-door"/"single-door" tag."""
    tags = column(row, TAGS_COLUMN).lower()
    for marker, label in DOOR_STYLE_TAG_MARKERS:
        if marker in tags:
            return label
    return None


def door_count_label(row: RawRow) -> str | None:
    """``"<n> Door"`` when the description states a door count."""
    doors = description_doors(row)
    if doors is None:
        return None
    return f"{doors} Door"


# Dimensions


def title_width(row: RawRow) -> float | None:
    size = _title_size(row)
    return size[0] if size else None


def title_height(row: RawRow) -> float | None:
    size = _title_size(row)
    return size[1] if size else None


def description_width(row: RawRow) -> float | None:
    return _description_number(row, WIDTH_PATTERN)


def description_height(row: RawRow) -> float | None:
    return _description_number(row, HEIGHT_PATTERN)


def description_doors(row: RawRow) -> int | None:
    match = DOOR_PATTERN.search(column(row, SHORT_DESCRIPTION_COLUMN))
    if not match:
        return None
    return coerce_int(match.group(1))


def weight(row: RawRow) -> float | None:
    return coerce_float(column(row, WEIGHT_COLUMN))


# Prices and metadata


def price_column(name: str) -> Extractor[float]:
    """Build an extractor reading a price from column ``name``."""

    def extract(row: RawRow) -> float | None:
        return coerce_float(column(row, name))

    extract.__name__ = f"price_column[{name}]"
    return extract


def meta_value(row: RawRow, key: str) -> str | None:
    """Look up a custom meta field exported as a ``"Meta: <key>"`` column."""
    return row.get(f"{META_COLUMN_PREFIX}{key}")


def meta_number(key: str) -> Extractor[float]:
    """Build an extractor reading a numeric meta field."""

    def extract(row: RawRow) -> float | None:
        return coerce_float(meta_value(row, key))

    extract.__name__ = f"meta_number[{key}]"
    return extract


def first_image(row: RawRow) -> str | None:
    """First URL of the comma-separated image list."""
    images = column(row, IMAGES_COLUMN)
    if not images:
        return None
    return images.split(",")[0].strip()
