# File: src/salestrack/core/sales_import.py
"""Map raw spreadsheet rows into validated sales entries.

Row-level problems never raise. A row either becomes one entry or is
excluded with human-readable messages collected in ``ImportResult.errors``.
Only file-level failures (see ``read_first_sheet``) propagate.
"""

import uuid
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Callable, Sequence

from salestrack.core.categories import CategoryExtractor, get_category_extractor
from salestrack.core.logging import get_logger
from salestrack.core.parsing import (
    MAX_MONEY,
    finite_or,
    fits_money,
    fits_qty,
    is_finite,
    parse_day_number,
    parse_loose_number,
    round2,
    round_half_up,
)
from salestrack.core.spreadsheet import RawRow, read_first_sheet
from salestrack.models.sales_entry_schemas import ImportResult, SalesEntryRecord, compute_amount
from salestrack.utils.datetime import now_utc, today_local

logger = get_logger(__name__)

MAX_REPORTED_ERRORS = 10

# Header row is spreadsheet row 1, so data row i is reported as row i + 2
FIRST_DATA_ROW = 2

# Ordered header aliases per logical field; the first non-empty match wins
SALES_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("Name", "name", "NAME"),
    "product": ("Product", "product", "PRODUCT"),
    "branch": ("Branch", "branch", "BRANCH"),
    "qty": ("Quantity", "QTY", "qty", "QUANTITY"),
    "price": ("Price", "price", "PRICE"),
    "discount": ("Discount", "Discount %", "discount", "DISCOUNT"),
    "amount": ("Amount", "amount", "AMOUNT"),
    "date": ("Date", "date", "DATE"),
}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def lookup_field(
    row: RawRow,
    field: str,
    aliases: dict[str, tuple[str, ...]] = SALES_FIELD_ALIASES,
) -> Any:
    """
    Resolve a logical field from a raw row through its alias list.

    Exact header matches are tried first in alias order, then the same
    aliases case-insensitively (so "Qty" or "Branch " still resolve).

    Returns:
        The first non-empty cell value, or "" if none of the aliases match
    """
    names = aliases[field]
    for alias in names:
        value = row.get(alias)
        if not _is_blank(value):
            return value

    folded = {
        str(key).strip().lower(): value for key, value in row.items() if not _is_blank(value)
    }
    for alias in names:
        value = folded.get(alias.lower())
        if value is not None:
            return value
    return ""


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def resolve_entry_date(base_year: int, base_month: int, day: int) -> date:
    """First of the base month plus (day - 1) days; may roll into the next month."""
    return date(base_year, base_month, 1) + timedelta(days=day - 1)


def sanitize_qty(raw: float) -> int:
    """Non-finite or non-positive quantities default to 1."""
    if not is_finite(raw) or raw <= 0:
        return 1
    return max(1, round_half_up(raw))


def sanitize_price(raw: float) -> float:
    """
    Default unparseable prices to 0 and clamp negatives to 0.

    A parseable negative such as "(250)" is clamped as well.
    """
    price = finite_or(raw, 0)
    return price if price > 0 else 0


def sanitize_discount(raw: float) -> float:
    """
    Default unparseable discounts to 0 and clamp the rest to 0..100.

    Parseable values outside the range are clamped too: "-5%" becomes 0
    and "150" becomes 100.
    """
    discount = finite_or(raw, 0)
    return min(discount, 100) if discount > 0 else 0


def map_sales_row(
    row: RawRow,
    index: int,
    *,
    base_year: int,
    base_month: int,
    extract_category: CategoryExtractor,
    id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
    clock: Callable[[], datetime] = now_utc,
) -> tuple[SalesEntryRecord | None, list[str]]:
    """
    Validate and map one raw row.

    Args:
        row: Header-keyed cell values
        index: 0-based data row index (reported as index + 2)
        base_year: Year the bare day-of-month resolves against
        base_month: Month (1-12) the bare day-of-month resolves against
        extract_category: Strategy deriving the category from the name
        id_factory: Source of fresh entry ids
        clock: Source of created_at timestamps

    Returns:
        (entry or None, error messages for this row)
    """
    row_num = index + FIRST_DATA_ROW

    name = _text(lookup_field(row, "name"))
    product = _text(lookup_field(row, "product"))
    branch = _text(lookup_field(row, "branch"))

    # Separator / blank rows are skipped without an error
    if not name and not product and not branch:
        return None, []

    qty_cell = lookup_field(row, "qty")
    price_cell = lookup_field(row, "price")
    amount_cell = lookup_field(row, "amount")
    qty_raw = parse_loose_number(qty_cell)
    price_raw = parse_loose_number(price_cell)
    discount_raw = parse_loose_number(lookup_field(row, "discount"))
    amount_raw = parse_loose_number(amount_cell)

    date_cell = lookup_field(row, "date")
    day = parse_day_number(date_cell)
    if day is None:
        if not _is_blank(date_cell):
            return None, [f'Row {row_num}: Invalid Date value "{_text(date_cell)}" (skipped)']
        day = 1

    errors: list[str] = []
    if not name:
        errors.append(f"Row {row_num}: Missing name")
    if not product:
        errors.append(f"Row {row_num}: Missing product")
    if not branch:
        errors.append(f"Row {row_num}: Missing branch")
    if errors:
        return None, errors

    # Values past the storage columns are rejected, not clamped
    if is_finite(qty_raw) and qty_raw > 0 and not fits_qty(qty_raw):
        errors.append(f'Row {row_num}: Invalid QTY value "{_text(qty_cell)}" (skipped)')
    if is_finite(price_raw) and price_raw > 0 and not fits_money(price_raw):
        errors.append(f'Row {row_num}: Invalid Price value "{_text(price_cell)}" (skipped)')
    if is_finite(amount_raw) and amount_raw != 0 and not fits_money(amount_raw):
        errors.append(f'Row {row_num}: Invalid Amount value "{_text(amount_cell)}" (skipped)')
    if errors:
        return None, errors

    qty = sanitize_qty(qty_raw)
    price = sanitize_price(price_raw)
    discount = sanitize_discount(discount_raw)
    computed_amount = compute_amount(Decimal(str(price)), qty, Decimal(str(discount)))
    # An explicit Amount cell wins; an explicit 0 counts as absent
    if is_finite(amount_raw) and amount_raw != 0:
        amount = round2(amount_raw)
    else:
        amount = computed_amount
    if abs(amount) > MAX_MONEY:
        return None, [f"Row {row_num}: Amount exceeds maximum allowed: {MAX_MONEY} (skipped)"]

    entry = SalesEntryRecord(
        id=id_factory(),
        date=resolve_entry_date(base_year, base_month, day),
        upc="",
        name=name,
        description=product,
        qty=qty,
        category=extract_category(name),
        price=round2(price),
        discount_percent=round2(discount),
        amount=amount,
        branch=branch,
        created_at=clock(),
    )
    return entry, []


def map_sales_rows(
    rows: Sequence[RawRow],
    base_date: date | None = None,
    *,
    extract_category: CategoryExtractor | None = None,
    id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
    clock: Callable[[], datetime] = now_utc,
    max_errors: int = MAX_REPORTED_ERRORS,
) -> ImportResult:
    """
    Validate every row against a base month.

    Every row is processed; only the returned error list is truncated.

    Args:
        rows: Decoded rows in source order
        base_date: Any date in the month bare day numbers refer to (default: today)
        extract_category: Category strategy (default: configured strategy)
        max_errors: How many error messages to return for display
    """
    base = base_date or today_local()
    extractor = extract_category or get_category_extractor()

    entries: list[SalesEntryRecord] = []
    errors: list[str] = []
    for index, row in enumerate(rows):
        entry, row_errors = map_sales_row(
            row,
            index,
            base_year=base.year,
            base_month=base.month,
            extract_category=extractor,
            id_factory=id_factory,
            clock=clock,
        )
        if entry is not None:
            entries.append(entry)
        errors.extend(row_errors)

    logger.info(
        "sales_import.mapped",
        row_count=len(rows),
        entry_count=len(entries),
        error_count=len(errors),
        base_month=f"{base.year}-{base.month:02d}",
    )

    return ImportResult(
        success=len(entries) > 0,
        data=entries,
        errors=errors[:max_errors],
        total_errors=len(errors),
    )


def parse_sales_workbook(
    content: bytes,
    base_date: date | None = None,
    *,
    extract_category: CategoryExtractor | None = None,
) -> ImportResult:
    """
    Decode a sales workbook and validate its rows.

    Raises:
        DecodeError: If the file is not a readable spreadsheet
    """
    rows = read_first_sheet(content)
    return map_sales_rows(rows, base_date, extract_category=extract_category)
