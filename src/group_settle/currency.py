"""Static currency conversion for display, plus location-to-currency lookup.

Conversion is only ever used to present amounts in another currency. Balance
and settlement math always stays within a single currency.
"""

import logging
import re
from collections.abc import Mapping
from decimal import Decimal
from types import MappingProxyType

from .money import round2, to_decimal

logger = logging.getLogger(__name__)

ANCHOR_CURRENCY = "CAD"

# Units of the anchor currency per 1 unit of each currency
DEFAULT_RATES: Mapping[str, Decimal] = MappingProxyType(
    {
        "CAD": Decimal("1"),
        "USD": Decimal("1.35"),
        "EUR": Decimal("1.47"),
        "GBP": Decimal("1.71"),
        "MXN": Decimal("0.078"),
        "CRC": Decimal("0.0025"),  # Costa Rican colones
        "JPY": Decimal("0.0091"),
    }
)

KNOWN_CURRENCIES: tuple[str, ...] = (
    "CAD",
    "USD",
    "EUR",
    "GBP",
    "MXN",
    "CRC",
    "JPY",
    "HKD",
    "SGD",
    "KRW",
    "THB",
)

LOCATION_CURRENCY: Mapping[str, str] = MappingProxyType(
    {
        # Japan
        "tokyo": "JPY",
        "osaka": "JPY",
        "kyoto": "JPY",
        "japan": "JPY",
        "東京": "JPY",
        "日本": "JPY",
        # USA
        "new york": "USD",
        "nyc": "USD",
        "los angeles": "USD",
        "usa": "USD",
        "seattle": "USD",
        "san francisco": "USD",
        "sf": "USD",
        "vegas": "USD",
        "las vegas": "USD",
        "hawaii": "USD",
        # Europe
        "london": "GBP",
        "uk": "GBP",
        "england": "GBP",
        "paris": "EUR",
        "france": "EUR",
        "germany": "EUR",
        "berlin": "EUR",
        "italy": "EUR",
        "rome": "EUR",
        "spain": "EUR",
        "barcelona": "EUR",
        "amsterdam": "EUR",
        "netherlands": "EUR",
        # Mexico / Central America
        "mexico": "MXN",
        "cancun": "MXN",
        "mexico city": "MXN",
        "costa rica": "CRC",
        "san jose": "CRC",
        # Asia
        "hong kong": "HKD",
        "hk": "HKD",
        "香港": "HKD",
        "singapore": "SGD",
        "新加坡": "SGD",
        "korea": "KRW",
        "seoul": "KRW",
        "韩国": "KRW",
        "thailand": "THB",
        "bangkok": "THB",
    }
)


def get_rate(currency: str, rates: Mapping[str, Decimal]) -> Decimal:
    """
    Look up a currency's rate, falling back to 1 for unknown codes.

    An unknown code is treated as worth exactly one unit of the anchor
    currency rather than rejected.
    """
    rate = rates.get(currency.upper())
    if rate is None:
        logger.warning(f"No exchange rate for {currency}; treating it as 1:1")
        return Decimal("1")
    return rate


def convert(
    amount: Decimal | int | float | str,
    from_currency: str,
    to_currency: str,
    rates: Mapping[str, Decimal] = DEFAULT_RATES,
) -> Decimal:
    """
    Convert an amount between currencies through the anchor currency.

    Args:
        amount: Amount in ``from_currency``
        from_currency: Source currency code
        to_currency: Target currency code
        rates: Anchor units per 1 unit of each currency

    Returns:
        Converted amount rounded to cents. When both codes are the same the
        input is returned untouched.
    """
    amount = to_decimal(amount)
    if from_currency.upper() == to_currency.upper():
        return amount

    in_anchor = amount * get_rate(from_currency, rates)
    return round2(in_anchor / get_rate(to_currency, rates))


def currency_for_location(location: str) -> str | None:
    """
    Guess the local currency for a free-form location string.

    Longer place names are tried first so "mexico city" wins over "mexico".
    Latin-script names must appear as whole words ("uk" does not match
    "fukuoka"); CJK names match anywhere.

    Returns:
        Currency code, or None if no known place is mentioned
    """
    text = location.lower()
    for place in sorted(LOCATION_CURRENCY, key=len, reverse=True):
        if place.isascii():
            found = re.search(rf"(?<!\w){re.escape(place)}(?!\w)", text) is not None
        else:
            found = place in text
        if found:
            return LOCATION_CURRENCY[place]
    return None
