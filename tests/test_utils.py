"""Tests for shared utility functions."""

from concierge.utils import format_money, normalize_phone, truncate


class TestNormalizePhone:
    def test_strips_spaces(self):
        assert normalize_phone("0712 345 678") == "0712345678"

    def test_strips_dashes(self):
        assert normalize_phone("0712-345-678") == "0712345678"

    def test_strips_parentheses(self):
        assert normalize_phone("(0712) 345678") == "0712345678"

    def test_preserves_leading_plus(self):
        assert normalize_phone("+254 700 123 456") == "+254700123456"

    def test_strips_whitespace(self):
        assert normalize_phone("  0712345678  ") == "0712345678"


class TestFormatMoney:
    def test_thousands_separators(self):
        assert format_money(85_000_000) == "KES 85,000,000"

    def test_fraction_dropped(self):
        assert format_money(250_000.4) == "KES 250,000"

    def test_other_currency(self):
        assert format_money(1200, "USD") == "USD 1,200"


class TestTruncate:
    def test_short_text_unchanged(self):
        assert truncate("Karen villa", 20) == "Karen villa"

    def test_long_text_cut(self):
        assert truncate("A lovely villa in Karen", 8) == "A lovely..."

    def test_trailing_space_removed_before_ellipsis(self):
        assert truncate("A lovely villa", 9) == "A lovely..."
