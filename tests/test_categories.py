# File: tests/test_categories.py
"""Tests for category extraction strategies."""

import pytest

from salestrack.core.categories import (
    extract_category_by_prefix,
    get_category_extractor,
    make_position_extractor,
)


class TestPrefixStrategy:
    """Test leading-code category extraction."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("MHB-1042 TOTE", "MHB"),
            ("msh shirt", "MSH"),
            ("MLX pouch", "MLP"),
            ("TOTE MUM BLACK", "MUM"),
            ("GENERIC ITEM", ""),
            ("", ""),
        ],
    )
    def test_extracts_known_codes(self, name, expected):
        """Test prefix match, alias and substring fallback."""
        assert extract_category_by_prefix(name) == expected


class TestPositionStrategy:
    """Test fixed-offset category extraction."""

    def test_reads_code_at_offset(self):
        """Test the code is taken from the configured window."""
        extract = make_position_extractor(3)
        assert extract("24-MSH-0113") == "MSH"
        assert extract("24-MLX-0001") == "MLP"

    def test_unknown_or_short_code_is_empty(self):
        """Test unresolvable windows give an empty category."""
        extract = make_position_extractor(3)
        assert extract("24-ABC-0113") == ""
        assert extract("24-M") == ""
        assert extract("") == ""

    def test_negative_offset_rejected(self):
        """Test a negative offset is a configuration error."""
        with pytest.raises(ValueError, match="cannot be negative"):
            make_position_extractor(-1)


class TestGetCategoryExtractor:
    """Test strategy resolution."""

    def test_prefix_strategy(self):
        assert get_category_extractor("prefix") is extract_category_by_prefix

    def test_position_strategy(self):
        extract = get_category_extractor("position", position=0)
        assert extract("MUM-77") == "MUM"

    def test_unknown_strategy_fails(self):
        """Test an unknown strategy name is rejected."""
        with pytest.raises(ValueError, match="Unknown category strategy"):
            get_category_extractor("regex")
