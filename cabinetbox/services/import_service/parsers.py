"""File parsing functions for CSV and XLSX product exports."""

import csv
import io
import logging
import zipfile
from collections.abc import Sequence
from xml.etree import ElementTree

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from cabinetbox.exceptions import ImportFileError

from .constants import ALLOWED_EXTENSIONS, SKU_COLUMN

logger = logging.getLogger(__name__)

DEFAULT_ENCODINGS = ("utf-8-sig",)


def get_file_extension(filename: str | None) -> str:
    """Extract the lowercase file extension from a filename."""
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def validate_filename(filename: str | None, allowed: Sequence[str] = tuple(ALLOWED_EXTENSIONS)) -> str:
    """Check the file has an accepted extension.

    Returns:
        The lowercase extension.

    Raises:
        ImportFileError: If the extension is not accepted.
    """
    ext = get_file_extension(filename)
    if ext not in {a.lower() for a in allowed}:
        names = ", ".join(sorted(a.upper() for a in allowed))
        raise ImportFileError(f"Please select a valid file. Unsupported file type '.{ext}'. Allowed: {names}")
    return ext


def _decode(file_content: bytes, encodings: Sequence[str]) -> str:
    for encoding in encodings:
        try:
            return file_content.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            continue
    raise ImportFileError(f"File is not valid text in any of: {', '.join(encodings)}")


def parse_csv(
    file_content: bytes,
    encodings: Sequence[str] = DEFAULT_ENCODINGS,
) -> tuple[list[str], list[dict[str, str]]]:
    """Parse CSV file content into headers and rows.

    Rows shorter than the header are padded with empty strings. Values are
    kept as stripped strings; nothing is type-coerced.

    Args:
        file_content: Raw CSV file bytes.
        encodings: Encodings to try, in order.

    Returns:
        Tuple of (headers, rows) where rows are dicts keyed by header name.

    Raises:
        ImportFileError: If the file has no headers, cannot be decoded, has
            malformed quoting, or a row has more fields than the header.
    """
    text = _decode(file_content, encodings)
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)

    try:
        # The first non-blank record is the header
        raw_headers = next((values for values in reader if not _is_blank(values)), None)
        if raw_headers is None:
            raise ImportFileError("CSV file has no headers")

        headers = [h.strip() for h in raw_headers]
        if not any(headers):
            raise ImportFileError("CSV file has no valid headers")

        rows: list[dict[str, str]] = []
        for values in reader:
            if _is_blank(values):
                continue
            if len(values) > len(headers):
                raise ImportFileError(
                    f"Parse errors: row {reader.line_num} has {len(values)} fields, "
                    f"expected {len(headers)}"
                )
            # Short rows: missing trailing fields resolve to ""
            padded = list(values) + [""] * (len(headers) - len(values))
            rows.append({h: v.strip() for h, v in zip(headers, padded) if h})
    except csv.Error as e:
        raise ImportFileError(f"Parse errors: line {reader.line_num}: {e}") from e

    return [h for h in headers if h], rows


def _is_blank(values: list[str]) -> bool:
    return not values or (len(values) == 1 and not values[0].strip())


def parse_xlsx(file_content: bytes) -> tuple[list[str], list[dict[str, str]]]:
    """Parse XLSX file content into headers and rows (first sheet only).

    Args:
        file_content: Raw XLSX file bytes.

    Returns:
        Tuple of (headers, rows) where rows are dicts keyed by header name.

    Raises:
        ImportFileError: If the workbook cannot be read or has no headers.
    """
    try:
        wb = load_workbook(filename=io.BytesIO(file_content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise ImportFileError(f"Failed to parse file: {e}") from e

    # Read-only worksheets are parsed lazily, so damaged sheet XML only
    # surfaces while iterating rows
    try:
        ws = wb.active
        if ws is None:
            raise ImportFileError("XLSX file has no worksheets")
        headers, rows = _read_sheet(ws)
    except ImportFileError:
        raise
    except (ElementTree.ParseError, zipfile.BadZipFile, KeyError, ValueError) as e:
        raise ImportFileError(f"Failed to parse file: {e}") from e
    finally:
        wb.close()

    return headers, rows


def _read_sheet(ws) -> tuple[list[str], list[dict[str, str]]]:
    row_iter = ws.iter_rows(values_only=True)
    try:
        raw_headers = next(row_iter)
    except StopIteration:
        raise ImportFileError("XLSX file is empty")

    headers = [str(h).strip() if h is not None else "" for h in raw_headers]
    if not any(headers):
        raise ImportFileError("XLSX file has no valid headers")

    rows: list[dict[str, str]] = []
    for row_values in row_iter:
        row_dict: dict[str, str] = {}
        for j, header in enumerate(headers):
            if not header:
                continue
            val = row_values[j] if j < len(row_values) else None
            row_dict[header] = _cell_to_str(val)
        if any(row_dict.values()):
            rows.append(row_dict)

    return [h for h in headers if h], rows


def _cell_to_str(value: object) -> str:
    """Render a cell as the text a CSV export would contain."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def filter_identified(rows: list[dict[str, str]], identifier: str = SKU_COLUMN) -> list[dict[str, str]]:
    """Keep only rows with a non-empty identifier column."""
    return [row for row in rows if row.get(identifier, "").strip()]


def parse_product_file(
    filename: str | None,
    file_content: bytes,
    allowed_extensions: Sequence[str] = tuple(ALLOWED_EXTENSIONS),
    encodings: Sequence[str] = DEFAULT_ENCODINGS,
) -> list[dict[str, str]]:
    """Validate, parse and pre-filter a product export file.

    Returns:
        Rows with a non-empty SKU, in file order.

    Raises:
        ImportFileError: On an unsupported extension or a structural parse error.
    """
    ext = validate_filename(filename, allowed_extensions)
    if ext == "xlsx":
        headers, rows = parse_xlsx(file_content)
    else:
        headers, rows = parse_csv(file_content, encodings)

    identified = filter_identified(rows)
    logger.debug(
        "Parsed %s: %d columns, %d rows, %d with %s",
        filename, len(headers), len(rows), len(identified), SKU_COLUMN,
    )
    return identified
