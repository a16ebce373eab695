# File: src/salestrack/core/categories.py
"""Category inference from encoded product-code names.

The branch exports have changed format over time: older sheets start the
item name with the collection code ("MHB-1042 TOTE"), newer ones embed it
at a fixed offset ("24-MSH-0113"). Both are supported as interchangeable
extractor callables; which one a deployment uses is configuration.
"""

import os
from typing import Callable

from salestrack.models.enums import Category

CategoryExtractor = Callable[[str], str]

ALLOWED_CATEGORIES: tuple[str, ...] = tuple(c.value for c in Category)

# Legacy codes that roll up into a current category
CATEGORY_ALIASES: dict[str, str] = {"MLX": Category.MLP.value}

CODE_LENGTH = 3

CATEGORY_STRATEGY = os.getenv("CATEGORY_STRATEGY", "prefix")
CATEGORY_POSITION = int(os.getenv("CATEGORY_POSITION", "0"))


def _resolve_code(code: str) -> str:
    code = CATEGORY_ALIASES.get(code, code)
    return code if code in ALLOWED_CATEGORIES else ""


def extract_category_by_prefix(value: str) -> str:
    """
    Infer the category from the leading code, then anywhere in the text.

    Examples:
        "MHB-1042 TOTE"  -> "MHB"
        "mlx pouch"      -> "MLP"
        "TOTE MUM BLACK" -> "MUM"
        "GENERIC"        -> ""
    """
    if not value:
        return ""

    upper = value.strip().upper()
    category = _resolve_code(upper[:CODE_LENGTH])
    if category:
        return category

    for code in ALLOWED_CATEGORIES:
        if code in upper:
            return code
    return ""


def make_position_extractor(start: int, length: int = CODE_LENGTH) -> CategoryExtractor:
    """Build an extractor reading the code at a fixed character offset."""
    if start < 0:
        raise ValueError("Category position cannot be negative")

    def extract_category_at_position(value: str) -> str:
        if not value:
            return ""
        code = value.strip().upper()[start : start + length]
        if len(code) < length:
            return ""
        return _resolve_code(code)

    return extract_category_at_position


def get_category_extractor(
    strategy: str | None = None, position: int | None = None
) -> CategoryExtractor:
    """
    Resolve the configured extraction strategy.

    Args:
        strategy: "prefix" or "position" (default: CATEGORY_STRATEGY env)
        position: Offset for the "position" strategy (default: CATEGORY_POSITION env)

    Raises:
        ValueError: If the strategy name is unknown
    """
    strategy = (strategy or CATEGORY_STRATEGY).strip().lower()
    if strategy == "prefix":
        return extract_category_by_prefix
    if strategy == "position":
        return make_position_extractor(CATEGORY_POSITION if position is None else position)
    raise ValueError(f"Unknown category strategy: {strategy}")
