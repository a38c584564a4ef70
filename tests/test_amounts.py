import sys
import os
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from amounts import format_amount, parse_amount, round_amount
from exceptions import InvalidAmount


class TestRoundAmount:
    def test_four_places(self):
        assert round_amount(Decimal("1.23456")) == Decimal("1.2346")
        assert round_amount(Decimal("2")) == Decimal("2.0000")

    def test_half_even(self):
        assert round_amount(Decimal("0.00005")) == Decimal("0.0000")
        assert round_amount(Decimal("0.00015")) == Decimal("0.0002")

    def test_no_float_drift(self):
        total = Decimal("0")
        for _ in range(1000):
            total = round_amount(total + Decimal("0.1"))
        assert total == Decimal("100")


class TestParseAmount:
    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_missing(self, text):
        assert parse_amount(text) is None

    def test_parses_decimal(self):
        assert parse_amount(" 2.5 ") == Decimal("2.5")
        assert parse_amount("-1") == Decimal("-1")

    @pytest.mark.parametrize("text", ["abc", "NaN", "inf", "1.2.3"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_amount(text)


class TestFormatAmount:
    @pytest.mark.parametrize("value, expected", [
        (Decimal("1.5000"), "1.5"),
        (Decimal("0"), "0"),
        (Decimal("0.0000"), "0"),
        (Decimal("-2.0"), "-2"),
        (Decimal("100"), "100"),
        (Decimal("0.00001"), "0"),
        (Decimal("3.14159"), "3.1416"),
    ])
    def test_format(self, value, expected):
        assert format_amount(value) == expected


class TestOversizedAmounts:
    def test_round_amount_raises_invalid_amount(self):
        with pytest.raises(InvalidAmount):
            round_amount(Decimal("1000000000000000000000000"))

    def test_largest_representable_amount(self):
        largest = Decimal("999999999999999999999999.9999")
        assert round_amount(largest) == largest

    def test_parse_amount_rejects_oversized(self):
        with pytest.raises(ValueError):
            parse_amount("1000000000000000000000000")

    def test_parse_amount_rounds(self):
        assert parse_amount("1.23456") == Decimal("1.2346")
