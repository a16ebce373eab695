# File: src/salestrack/core/parsing.py
"""Tolerant parsing of human-formatted spreadsheet cells.

Spreadsheets exported by branch staff carry currency symbols, thousands
separators, percent signs and free-text annotations. These helpers never
raise: failures come back as sentinels (``nan`` / ``None``) and callers
decide which default to apply with :func:`finite_or`.
"""

import math
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

_WHITESPACE_RE = re.compile(r"\s+")
_CURRENCY_RE = re.compile(r"₱|PHP", re.IGNORECASE)
_PARENTHESIZED_RE = re.compile(r"^\((.*)\)$")
_LEADING_DAY_RE = re.compile(r"^(\d{1,2})")
# float() accepts "inf", "nan", "1e5", "1_000"; spreadsheet cells should not
_PLAIN_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)")

TWO_PLACES = Decimal("0.01")

# Upper bounds of the NUMERIC(12, 2) money columns and the INTEGER qty column
MAX_MONEY = Decimal("9999999999.99")
MAX_QTY = 2_147_483_647


def parse_loose_number(value: Any) -> float:
    """
    Parse a loosely formatted numeric cell.

    Examples:
        "19,666,101.24" -> 19666101.24
        "₱1,200.00"     -> 1200.0
        "50%"           -> 50.0
        "(123.45)"      -> -123.45
        "abc"           -> nan

    Numbers pass through unchanged. Trailing text after a leading number is
    ignored, matching how the sheets are typed by hand ("12 pcs").

    Returns:
        The parsed value, or ``math.nan`` when nothing numeric is found
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, Decimal):
        return float(value)
    if value is None:
        return math.nan

    text = _WHITESPACE_RE.sub("", str(value).strip())
    text = _CURRENCY_RE.sub("", text)
    text = text.replace("%", "").replace(",", "")

    match = _PARENTHESIZED_RE.match(text)
    if match:
        text = f"-{match.group(1)}"

    number = _PLAIN_NUMBER_RE.match(text)
    if not number:
        return math.nan
    return float(number.group(0))


def parse_day_number(value: Any) -> int | None:
    """
    Parse a day-of-month cell that may carry trailing annotations.

    Examples:
        "9"          -> 9
        "09"         -> 9
        "9 (EA)"     -> 9
        "31 - promo" -> 31
        "32"         -> None
        ""           -> None

    Returns:
        Day in 1..31, or None if the cell is empty or not a day
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)

    text = str(value).strip()
    if not text:
        return None

    match = _LEADING_DAY_RE.match(text)
    if not match:
        return None

    day = int(match.group(1))
    if day < 1 or day > 31:
        return None
    return day


def is_finite(value: float) -> bool:
    """True for real numbers, False for nan/inf."""
    return math.isfinite(value)


def finite_or(value: float, default: float) -> float:
    """Apply a default when a loose parse failed."""
    return value if math.isfinite(value) else default


def fits_money(value: float) -> bool:
    """True when a finite value fits a money column (|value| <= MAX_MONEY)."""
    return math.isfinite(value) and abs(value) <= MAX_MONEY


def fits_qty(value: float) -> bool:
    """True when a finite value rounds into the qty column range."""
    return math.isfinite(value) and abs(value) < MAX_QTY


def round2(value: float | Decimal) -> Decimal:
    """
    Round a currency amount to two decimals, half away from zero.

    Raises:
        ValueError: If the value is not finite or too large to quantize
    """
    try:
        return Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValueError(f"Invalid currency format: {value}") from e


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    try:
        return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except InvalidOperation as e:
        raise ValueError(f"Invalid number: {value}") from e
