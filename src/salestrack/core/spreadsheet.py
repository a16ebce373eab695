# File: src/salestrack/core/spreadsheet.py
"""Decode uploaded workbooks into header-keyed row mappings."""

import io
import os
from datetime import date, datetime, time
from typing import Any, Iterable

import xlrd
from openpyxl import load_workbook

from salestrack.core.errors import DecodeError, SizeLimitError
from salestrack.core.logging import get_logger

logger = get_logger(__name__)

RawRow = dict[str, Any]

MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

# Container signatures: xlsx is a zip archive, legacy xls is an OLE2 compound file
_ZIP_MAGIC = b"PK\x03\x04"
_OLE2_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


def ensure_within_size_limit(size: int, limit: int = MAX_UPLOAD_BYTES) -> None:
    """Reject an upload before parsing if it exceeds the size guard."""
    if size > limit:
        raise SizeLimitError(size=size, limit=limit)


def _display_value(value: Any) -> Any:
    """Coerce a raw cell value to what the sheet shows."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    return value


def _header_names(header_cells: Iterable[Any]) -> list[str | None]:
    """Normalize header labels; duplicates get _1, _2 suffixes, blanks are dropped."""
    names: list[str | None] = []
    seen: dict[str, int] = {}
    for cell in header_cells:
        label = "" if cell is None else str(_display_value(cell)).strip()
        if not label:
            names.append(None)
            continue
        count = seen.get(label, 0)
        seen[label] = count + 1
        names.append(label if count == 0 else f"{label}_{count}")
    return names


def _rows_to_mappings(rows: Iterable[Iterable[Any]]) -> list[RawRow]:
    iterator = iter(rows)
    try:
        headers = _header_names(next(iterator))
    except StopIteration:
        return []

    mappings: list[RawRow] = []
    for raw in iterator:
        values = [_display_value(v) for v in raw]
        if all(str(v).strip() == "" for v in values):
            continue

        row: RawRow = {}
        for idx, header in enumerate(headers):
            if header is None:
                continue
            row[header] = values[idx] if idx < len(values) else ""
        mappings.append(row)
    return mappings


def _read_xlsx(content: bytes) -> list[RawRow]:
    workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    try:
        if not workbook.sheetnames:
            raise DecodeError("Workbook has no sheets.")
        sheet = workbook[workbook.sheetnames[0]]
        return _rows_to_mappings(sheet.iter_rows(values_only=True))
    finally:
        workbook.close()


def _read_xls(content: bytes) -> list[RawRow]:
    book = xlrd.open_workbook(file_contents=content, on_demand=True)
    try:
        if book.nsheets == 0:
            raise DecodeError("Workbook has no sheets.")
        sheet = book.sheet_by_index(0)

        def cell_value(cell: xlrd.sheet.Cell) -> Any:
            if cell.ctype == xlrd.XL_CELL_DATE:
                return xlrd.xldate_as_datetime(cell.value, book.datemode)
            if cell.ctype == xlrd.XL_CELL_BOOLEAN:
                return bool(cell.value)
            if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
                return None
            return cell.value

        rows = ([cell_value(c) for c in sheet.row(i)] for i in range(sheet.nrows))
        return _rows_to_mappings(rows)
    finally:
        book.release_resources()


def read_first_sheet(content: bytes) -> list[RawRow]:
    """
    Decode the first worksheet of an .xlsx or .xls file.

    Args:
        content: Raw file bytes

    Returns:
        Data rows in source order, keyed by header label. Missing cells are "".

    Raises:
        DecodeError: If the bytes are not a readable workbook or it has no sheets
    """
    if content.startswith(_ZIP_MAGIC):
        reader = _read_xlsx
        file_format = "xlsx"
    elif content.startswith(_OLE2_MAGIC):
        reader = _read_xls
        file_format = "xls"
    else:
        raise DecodeError(details={"reason": "unrecognized file signature"})

    try:
        rows = reader(content)
    except DecodeError:
        raise
    except Exception as exc:
        logger.warning(
            "spreadsheet.decode_failed",
            file_format=file_format,
            error=type(exc).__name__,
        )
        raise DecodeError(details={"reason": type(exc).__name__}) from exc

    logger.info("spreadsheet.decoded", file_format=file_format, row_count=len(rows))
    return rows
