"""Tests for rugguard.core.units — fixed-point amount parsing."""

from __future__ import annotations

import pytest

from rugguard.core.units import InvalidAmountError, format_units, parse_units


class TestParseUnits:
    def test_whole_tokens(self):
        assert parse_units("600") == 600 * 10**18

    def test_fractional_tokens(self):
        assert parse_units("1.5") == 1_500_000_000_000_000_000

    def test_leading_dot(self):
        assert parse_units(".25", decimals=2) == 25

    def test_beyond_64_bits(self):
        amount = "1000000000000000000000"  # 1e21 tokens
        assert parse_units(amount) == 10**39
        assert parse_units(amount) > 2**64

    def test_none_and_empty_are_zero(self):
        assert parse_units(None) == 0
        assert parse_units("") == 0
        assert parse_units("   ") == 0

    def test_int_input(self):
        assert parse_units(3, decimals=6) == 3_000_000

    def test_custom_decimals(self):
        assert parse_units("12.345678", decimals=6) == 12_345_678

    def test_zero_decimals(self):
        assert parse_units("42", decimals=0) == 42

    def test_trailing_zero_beyond_precision(self):
        assert parse_units("1.500", decimals=2) == 150

    @pytest.mark.parametrize("value", ["invalid", "-1", "1e18", "0x10", "1.2.3", ".", "1,000"])
    def test_invalid_strings(self, value: str):
        with pytest.raises(InvalidAmountError):
            parse_units(value)

    def test_too_many_decimals(self):
        with pytest.raises(InvalidAmountError, match="more than 2 decimals"):
            parse_units("1.001", decimals=2)

    def test_negative_int(self):
        with pytest.raises(InvalidAmountError):
            parse_units(-5)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError, match="Invalid amount 'abc'"):
            parse_units("abc")


class TestFormatUnits:
    def test_whole(self):
        assert format_units(600 * 10**18) == "600"

    def test_fraction(self):
        assert format_units(1_500_000_000_000_000_000) == "1.5"

    def test_small_fraction(self):
        assert format_units(1) == "0.000000000000000001"

    def test_negative(self):
        assert format_units(-150, decimals=2) == "-1.5"
