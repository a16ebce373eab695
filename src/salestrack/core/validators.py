# File: src/salestrack/core/validators.py
"""Reusable validation utilities for input sanitization."""

import re
from datetime import date

from salestrack.core.errors import ValidationError
from salestrack.utils.datetime import parse_month_key

_TAG_RE = re.compile(r"<[^>]+>")


def sanitize_text(value: str | None) -> str:
    """
    Strip HTML tags and surrounding whitespace from free text.

    Args:
        value: Text that may contain HTML

    Returns:
        Cleaned text ("" if nothing remains)
    """
    if not value:
        return ""
    return _TAG_RE.sub("", value).strip()


def validate_month(value: str | None) -> date | None:
    """
    Validate an optional ``YYYY-MM`` query value.

    Returns:
        First day of the month, or None if no month was given

    Raises:
        ValidationError: If the value is not a valid month key
    """
    if value is None or not value.strip():
        return None
    try:
        return parse_month_key(value)
    except ValueError as exc:
        raise ValidationError(
            "Month must use the YYYY-MM format",
            details={"month": value},
        ) from exc
