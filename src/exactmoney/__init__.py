"""
exactmoney — Exact and discrete monetary amounts

Two representations of an amount of money in a fixed set of currencies:

- DenseMoney: an exact 64-bit rational, never rounded behind your back
- DiscreteMoney: an unsigned 32-bit count of minor units (cents, pence, ...)

and a lossless bridge between them.

================================================================================
QUICK START
================================================================================

Basic usage:

    from exactmoney import Currency, DenseMoney, DiscreteMoney

    price = Currency.GBP.new(1243, 1000)      # £1.243, exactly
    pence, rest = price.round()               # 124p and £0.003 left over
    assert pence.to_dense() + rest == price   # nothing lost

    half = DiscreteMoney.of(50, Currency.USD).to_dense()
    assert half == DenseMoney.of(1, 2, Currency.USD)

Strict rounding (input must already be whole minor units):

    cents = Currency.USD.new(199, 100).round_exact()   # 199 cents
    Currency.USD.new(1, 3).round_exact()               # NonExactRoundingError

Persistence:

    row = price.to_db_array()                  # ["1243", "1000", "GBP"]
    DenseMoney.from_db_array(row, Currency.GBP)

    doc = price.to_dict()   # {"amount": {"numer": "1243", "denom": "1000"}, "currency": "GBP"}
    DenseMoney.from_dict(doc, Currency.GBP)

================================================================================
"""

import logging

from .currency import Currency
from .dense import DenseMoney, RoundingResult
from .discrete import DiscreteMoney
from .errors import (
    MoneyError,
    AmountOverflowError,
    NonExactRoundingError,
    CurrencyMismatchError,
    MalformedMoneyError,
    UnsupportedScaleError,
)
from .rational import Rational64

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Registry
    "Currency",
    # Amounts
    "DenseMoney",
    "DiscreteMoney",
    "RoundingResult",
    "Rational64",
    # Errors
    "MoneyError",
    "AmountOverflowError",
    "NonExactRoundingError",
    "CurrencyMismatchError",
    "MalformedMoneyError",
    "UnsupportedScaleError",
]
