"""Rounding and tolerance tests for the money primitives."""

from decimal import Decimal

import pytest

from group_settle.money import EPSILON, is_zero, round2, to_decimal


class TestRound2:
    """round2 rounds half away from zero to cents."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2.345", "2.35"),
            ("-2.345", "-2.35"),
            ("2.344", "2.34"),
            ("0.005", "0.01"),
            ("-0.005", "-0.01"),
            ("33.333333", "33.33"),
            ("100", "100.00"),
        ],
    )
    def test_half_away_from_zero(self, value, expected):
        assert round2(Decimal(value)) == Decimal(expected)

    def test_always_two_places(self):
        assert str(round2(Decimal("7"))) == "7.00"

    def test_float_input_uses_its_decimal_repr(self):
        """1.005 as a float is 1.00499...; going through str keeps it 1.005."""
        assert round2(1.005) == Decimal("1.01")

    def test_int_and_str_input(self):
        assert round2(3) == Decimal("3.00")
        assert round2("4.125") == Decimal("4.13")


class TestTolerance:
    def test_epsilon_is_one_cent(self):
        assert EPSILON == Decimal("0.01")

    @pytest.mark.parametrize("value", ["0", "0.01", "-0.01", "0.004"])
    def test_within_epsilon_is_zero(self, value):
        assert is_zero(Decimal(value))

    @pytest.mark.parametrize("value", ["0.011", "-0.02", "5"])
    def test_outside_epsilon_is_not_zero(self, value):
        assert not is_zero(Decimal(value))


class TestToDecimal:
    def test_decimal_passthrough(self):
        value = Decimal("1.23")
        assert to_decimal(value) is value

    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")
