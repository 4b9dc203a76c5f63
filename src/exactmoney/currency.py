"""
currency.py — Currency registry

================================================================================
DESIGN
================================================================================

A closed, statically defined table of currencies. Each member carries:
- symbol (ISO 4217 alphabetic code)
- minor_units: how many minor units make one major unit (100 for cents,
  5 for the Malagasy iraimbilanja, 1 for currencies without a minor unit)
- display_name

The scale is validated once, when the enum is built. An invalid entry makes
the module fail at import time, so every Currency reachable at runtime has
a strictly positive integral scale.

Python has no generics over constants, so the currency is a runtime tag
stored on every amount. Binary operations compare tags and raise
CurrencyMismatchError when they differ.

================================================================================
"""

from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .dense import DenseMoney


def _power_of_ten_exponent(value: int) -> int | None:
    """Exact k such that value == 10**k, or None. Integer arithmetic only."""
    exponent = 0
    while value % 10 == 0:
        value //= 10
        exponent += 1
    return exponent if value == 1 else None


class Currency(Enum):
    """
    Supported currencies with their minor-unit scale.

    Member value: (symbol, minor_units, display_name).
    """
    GBP = ("GBP", 100, "Pound sterling")
    MGA = ("MGA", 5, "Malagasy ariary")
    MYR = ("MYR", 100, "Malaysian ringgit")
    SGD = ("SGD", 100, "Singapore dollar")
    USD = ("USD", 100, "United States dollar")
    EUR = ("EUR", 100, "Euro")
    JPY = ("JPY", 1, "Japanese yen")
    KWD = ("KWD", 1000, "Kuwaiti dinar")

    def __init__(self, symbol: str, minor_units: int, display_name: str):
        if not isinstance(minor_units, int) or isinstance(minor_units, bool) or minor_units <= 0:
            raise ValueError(
                f"minor-unit scale of {symbol} must be a positive integer, got {minor_units!r}"
            )
        self._symbol = symbol
        self._minor_units = minor_units
        self._display_name = display_name
        self._decimal_exponent = _power_of_ten_exponent(minor_units)

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def minor_units(self) -> int:
        """Minor units per major unit (the denominator of one minor unit)."""
        return self._minor_units

    @property
    def display_name(self) -> str:
        return self._display_name

    @property
    def decimal_exponent(self) -> int | None:
        """
        Number of decimal places of the minor unit: k with minor_units == 10**k.

        None when the scale is not a power of ten (e.g. MGA, scale 5); such
        currencies have no exact fixed-point decimal form.
        """
        return self._decimal_exponent

    @classmethod
    def from_symbol(cls, symbol: str) -> Currency:
        """Look up a currency by its symbol."""
        for currency in cls:
            if currency.symbol == symbol:
                return currency
        raise ValueError(
            f"Currency with symbol '{symbol}' not found in registry. "
            f"Available currencies: {[c.symbol for c in cls]}"
        )

    def new(self, numer: int, denom: int = 1) -> DenseMoney:
        """Shorthand for DenseMoney.of(numer, denom, self)."""
        from .dense import DenseMoney

        return DenseMoney.of(numer, denom, self)

    def __str__(self) -> str:
        return self._symbol
