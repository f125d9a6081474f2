"""Tests for static currency conversion and location lookup."""

import logging
from decimal import Decimal
from types import MappingProxyType

import pytest

from group_settle.currency import (
    DEFAULT_RATES,
    convert,
    currency_for_location,
    get_rate,
)


class TestConvert:
    def test_usd_to_cad(self):
        assert convert(Decimal("100"), "USD", "CAD") == Decimal("135.00")

    def test_cad_to_usd(self):
        """135 CAD is exactly 100 USD at 1.35."""
        assert convert(Decimal("135"), "CAD", "USD") == Decimal("100.00")

    def test_colones(self):
        assert convert(Decimal("10000"), "CRC", "CAD") == Decimal("25.00")

    def test_cross_rate_goes_through_anchor(self):
        # 100 EUR = 147 CAD = 108.888... USD
        assert convert(Decimal("100"), "EUR", "USD") == Decimal("108.89")

    def test_identity_returns_input_unchanged(self):
        assert convert(Decimal("12.345"), "JPY", "jpy") == Decimal("12.345")

    def test_codes_are_case_insensitive(self):
        assert convert(Decimal("100"), "usd", "cad") == Decimal("135.00")

    def test_accepts_strings(self):
        assert convert("100", "USD", "CAD") == Decimal("135.00")

    def test_unknown_code_treated_as_one(self, caplog):
        with caplog.at_level(logging.WARNING, logger="group_settle.currency"):
            result = convert(Decimal("50"), "XYZ", "CAD")

        assert result == Decimal("50.00")
        assert "XYZ" in caplog.text

    def test_injected_rate_table(self):
        rates = MappingProxyType({"CAD": Decimal("1"), "USD": Decimal("1.40")})

        assert convert(Decimal("10"), "USD", "CAD", rates) == Decimal("14.00")

    def test_default_table_is_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_RATES["USD"] = Decimal("2")  # type: ignore[index]


class TestGetRate:
    def test_known(self):
        assert get_rate("gbp", DEFAULT_RATES) == Decimal("1.71")

    def test_unknown(self):
        assert get_rate("ZZZ", DEFAULT_RATES) == Decimal("1")


class TestCurrencyForLocation:
    @pytest.mark.parametrize(
        ("location", "expected"),
        [
            ("Dinner in Tokyo", "JPY"),
            ("road trip to Las Vegas", "USD"),
            ("Mexico City tacos", "MXN"),
            ("beach week in Costa Rica", "CRC"),
            ("London pub", "GBP"),
            ("香港 dim sum", "HKD"),
            ("東京 ramen", "JPY"),
        ],
    )
    def test_lookup(self, location, expected):
        assert currency_for_location(location) == expected

    def test_whole_words_only(self):
        """Latin-script names only match as whole words."""
        assert currency_for_location("Fukuoka") is None

    def test_unknown_place(self):
        assert currency_for_location("somewhere nice") is None
