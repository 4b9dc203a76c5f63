"""
dense.py — Exact monetary amounts ("dense" money)

================================================================================
DESIGN PRINCIPLES
================================================================================

1. INTERNAL REPRESENTATION
   An exact rational number (Rational64) plus a Currency. Never rounded
   until round() is called explicitly.

2. TYPE SAFETY
   Amounts of different currencies never combine: arithmetic and ordering
   raise CurrencyMismatchError, equality is simply False.

3. IMMUTABILITY
   Frozen dataclass. Every operation returns a new instance.

4. NO SILENT OVERFLOW
   checked_add / checked_sub return None when the result does not fit the
   64-bit numerator/denominator. The + and - operators raise instead.

5. LOSSLESS ROUNDING
   round() returns (discrete, remainder) with
       discrete.to_dense() + remainder == original
   so nothing is ever lost, only set aside.

================================================================================
SERIALIZATION
================================================================================

Two external formats, both exact and both currency-checked on decode:

    to_db_array()  ->  ["1243", "1000", "GBP"]
    to_dict()      ->  {"amount": {"numer": "1243", "denom": "1000"},
                        "currency": "GBP"}

Integers travel as decimal strings so consumers with 53-bit numbers
(JavaScript, some JSON parsers) cannot truncate them.

================================================================================
"""

from __future__ import annotations
from dataclasses import dataclass
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, NamedTuple
from decimal import Decimal
import json
import logging
import re

from .config import DB_ARRAY_LENGTH, I64_MAX, I64_MIN, U32_MAX
from .currency import Currency
from .errors import (
    AmountOverflowError,
    CurrencyMismatchError,
    MalformedMoneyError,
    NonExactRoundingError,
)
from .rational import Rational64

if TYPE_CHECKING:
    from .discrete import DiscreteMoney

logger = logging.getLogger(__name__)

_INTEGER_TEXT = re.compile(r"([+-]?)([0-9]+)")
_I64_MAX_DIGITS = len(str(I64_MAX))


class RoundingResult(NamedTuple):
    """Outcome of DenseMoney.round(): discrete.to_dense() + remainder == original."""
    discrete: DiscreteMoney
    remainder: DenseMoney


# ==============================================================================
# DECODING HELPERS
# ==============================================================================

def _malformed(message: str) -> MalformedMoneyError:
    logger.debug(f"Rejected external money value: {message}")
    return MalformedMoneyError(message)


def _parse_i64(text: Any, field: str, source: str) -> int:
    """Parse a decimal integer string the way a strict i64 parser would."""
    match = _INTEGER_TEXT.fullmatch(text) if isinstance(text, str) else None
    if match is None:
        raise _malformed(f"invalid {field} {text!r} in money {source}")
    sign, digits = match.groups()
    # leading zeros are valid; anything longer is out of range before int()
    digits = digits.lstrip("0") or "0"
    if len(digits) > _I64_MAX_DIGITS:
        raise _malformed(f"{field} in money {source} does not fit in 64 bits")
    value = int(sign + digits)
    if not I64_MIN <= value <= I64_MAX:
        raise _malformed(f"{field} {sign}{digits} in money {source} does not fit in 64 bits")
    return value


def _check_symbol(found: Any, currency: Currency, source: str) -> None:
    if found != currency.symbol:
        logger.debug(f"Rejected money {source}: currency {found!r}, expected {currency.symbol}")
        raise CurrencyMismatchError(expected=currency.symbol, found=str(found))


def _display_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    # positional, never scientific notation
    return format(Decimal(repr(value)), "f")


# ==============================================================================
# DENSE MONEY
# ==============================================================================

@dataclass(frozen=True, slots=True, order=False)
class DenseMoney:
    """
    Exact monetary amount: a reduced 64-bit rational tagged with a Currency.

    INVARIANTS:
    1. _amount is always in lowest terms with a positive denominator
    2. _currency is always a Currency
    3. amounts of different currencies never combine

    USAGE:
        price = DenseMoney.of(1243, 1000, Currency.GBP)   # £1.243
        pence, rest = price.round()                       # 124p + £0.003
    """
    _amount: Rational64
    _currency: Currency

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def of(cls, numer: int, denom: int, currency: Currency) -> DenseMoney:
        """
        Build numer/denom of a currency, reduced to lowest terms.

        Raises:
            ZeroDivisionError: if denom == 0
            AmountOverflowError: if numer or denom do not fit in 64 bits
            TypeError: if currency is not a Currency
        """
        if not isinstance(currency, Currency):
            raise TypeError(f"currency must be a Currency, not {type(currency).__name__}")
        return cls(_amount=Rational64.new(numer, denom), _currency=currency)

    @classmethod
    def zero(cls, currency: Currency) -> DenseMoney:
        return cls.of(0, 1, currency)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def numer(self) -> int:
        """Numerator in lowest terms (carries the sign)."""
        return self._amount.numer

    @property
    def denom(self) -> int:
        """Denominator in lowest terms (always positive)."""
        return self._amount.denom

    @property
    def currency(self) -> Currency:
        return self._currency

    @property
    def amount(self) -> Rational64:
        return self._amount

    def is_zero(self) -> bool:
        return self._amount.is_zero()

    # -------------------------------------------------------------------------
    # Checked arithmetic
    # -------------------------------------------------------------------------

    def checked_add(self, other: DenseMoney) -> DenseMoney | None:
        """Exact sum, or None if it overflows the 64-bit representation."""
        self._check_same_currency(other)
        amount = self._amount.checked_add(other._amount)
        if amount is None:
            return None
        return DenseMoney(_amount=amount, _currency=self._currency)

    def checked_sub(self, other: DenseMoney) -> DenseMoney | None:
        """Exact difference, or None if it overflows the 64-bit representation."""
        self._check_same_currency(other)
        amount = self._amount.checked_sub(other._amount)
        if amount is None:
            return None
        return DenseMoney(_amount=amount, _currency=self._currency)

    def __add__(self, other: DenseMoney) -> DenseMoney:
        if not isinstance(other, DenseMoney):
            raise TypeError(
                f"Operation not allowed: DenseMoney + {type(other).__name__}. "
                f"Use DenseMoney.of() to convert explicitly."
            )
        result = self.checked_add(other)
        if result is None:
            raise AmountOverflowError(f"{self!r} + {other!r} overflows 64-bit rational range")
        return result

    def __sub__(self, other: DenseMoney) -> DenseMoney:
        if not isinstance(other, DenseMoney):
            raise TypeError(
                f"Operation not allowed: DenseMoney - {type(other).__name__}."
            )
        result = self.checked_sub(other)
        if result is None:
            raise AmountOverflowError(f"{self!r} - {other!r} overflows 64-bit rational range")
        return result

    def __neg__(self) -> DenseMoney:
        amount = self._amount.checked_neg()
        if amount is None:
            raise AmountOverflowError(f"-{self!r} overflows 64-bit rational range")
        return DenseMoney(_amount=amount, _currency=self._currency)

    # -------------------------------------------------------------------------
    # Rounding
    # -------------------------------------------------------------------------

    def round(self) -> RoundingResult:
        """
        Round to the nearest minor unit, keeping what was rounded off.

        Algorithm:
        1. scale the amount to minor units (amount * currency.minor_units)
        2. round to the nearest integer, ties away from zero
        3. that integer is the discrete amount (must fit in unsigned 32 bits)
        4. remainder = amount - discrete.to_dense(), exact

        INVARIANT: discrete.to_dense() + remainder == self

        Raises:
            AmountOverflowError: if the rounded count is negative or above
                the unsigned 32-bit range, or an intermediate leaves the
                64-bit rational range
        """
        from .discrete import DiscreteMoney

        scale = Rational64.from_integer(self._currency.minor_units)
        scaled = self._amount.checked_mul(scale)
        if scaled is None:
            logger.debug(f"Cannot round {self!r}: scaling by {scale} overflows")
            raise AmountOverflowError(f"{self!r} scaled to minor units overflows 64-bit range")

        approx = scaled.round()
        if not 0 <= approx <= U32_MAX:
            logger.debug(f"Cannot round {self!r}: {approx} minor units out of discrete range")
            raise AmountOverflowError(
                f"{self!r} rounds to {approx} minor units, outside [0, {U32_MAX}]"
            )

        discrete = DiscreteMoney.of(approx, self._currency)
        remainder = self._amount.checked_sub(discrete.to_dense()._amount)
        if remainder is None:
            raise AmountOverflowError(f"remainder of rounding {self!r} overflows 64-bit range")

        return RoundingResult(discrete, DenseMoney(_amount=remainder, _currency=self._currency))

    def round_exact(self) -> DiscreteMoney:
        """
        Round, requiring the amount to be a whole number of minor units.

        Raises:
            NonExactRoundingError: carrying the non-zero remainder
        """
        rounded, remainder = self.round()
        if not remainder.is_zero():
            raise NonExactRoundingError(remainder)
        return rounded

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DenseMoney):
            return self._amount == other._amount and self._currency == other._currency
        return NotImplemented

    def __lt__(self, other: DenseMoney) -> bool:
        self._check_same_currency(other)
        return self._amount < other._amount

    def __le__(self, other: DenseMoney) -> bool:
        self._check_same_currency(other)
        return self._amount <= other._amount

    def __gt__(self, other: DenseMoney) -> bool:
        self._check_same_currency(other)
        return self._amount > other._amount

    def __ge__(self, other: DenseMoney) -> bool:
        self._check_same_currency(other)
        return self._amount >= other._amount

    def _check_same_currency(self, other: DenseMoney) -> None:
        if not isinstance(other, DenseMoney):
            raise TypeError(f"Cannot combine DenseMoney with {type(other).__name__}")
        if self._currency != other._currency:
            raise CurrencyMismatchError(
                expected=self._currency.symbol,
                found=other._currency.symbol,
                message=(
                    f"Cannot combine different currencies: "
                    f"{self._currency.symbol} vs {other._currency.symbol}"
                ),
            )

    def __hash__(self) -> int:
        return hash((self._amount, self._currency))

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        """
        Human display, e.g. "GBP 1.243".

        ATTENTION: goes through float, lossy. Never parse it back.
        """
        return f"{self._currency.symbol} {_display_number(float(self._amount))}"

    def __repr__(self) -> str:
        return f"DenseMoney({self._amount.numer}/{self._amount.denom} {self._currency.symbol})"

    # -------------------------------------------------------------------------
    # Relational-store wire format
    # -------------------------------------------------------------------------

    def to_db_array(self) -> list[str]:
        """Encode as a text array: [numer, denom, currency symbol]."""
        return [str(self.numer), str(self.denom), self._currency.symbol]

    @classmethod
    def from_db_array(cls, values: Sequence[Any], currency: Currency) -> DenseMoney:
        """
        Decode a text array written by to_db_array().

        Raises:
            MalformedMoneyError: missing fields, bad integers, zero denominator
            CurrencyMismatchError: stored symbol is not currency.symbol
        """
        if (
            not isinstance(values, Sequence)
            or isinstance(values, (str, bytes))
            or len(values) < DB_ARRAY_LENGTH
        ):
            raise _malformed("invalid money array from DB")

        numer = _parse_i64(values[0], "numerator", "array from DB")
        denom = _parse_i64(values[1], "denominator", "array from DB")
        _check_symbol(values[2], currency, "array from DB")
        if denom == 0:
            raise _malformed("zero denom returned from DB")

        return cls.of(numer, denom, currency)

    # -------------------------------------------------------------------------
    # Structured-document format
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict:
        """
        Encode as {"amount": {"numer": str, "denom": str}, "currency": str}.

        NOTE: numerator and denominator are strings, never JSON numbers.
        """
        return {
            "amount": {
                "numer": str(self.numer),
                "denom": str(self.denom),
            },
            "currency": self._currency.symbol,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], currency: Currency) -> DenseMoney:
        """
        Decode a document written by to_dict().

        The currency is checked before the numbers are parsed.

        Raises:
            MalformedMoneyError: wrong shape, bad integers, zero denominator
            CurrencyMismatchError: document currency is not currency.symbol
        """
        if not isinstance(data, Mapping):
            raise _malformed(f"money document must be an object, not {type(data).__name__}")
        try:
            amount = data["amount"]
            found = data["currency"]
            raw_numer = amount["numer"]
            raw_denom = amount["denom"]
        except (KeyError, TypeError) as e:
            raise _malformed(f"missing field {e} in money document") from e

        if not isinstance(found, str):
            raise _malformed(f"currency must be a string, not {type(found).__name__}")
        _check_symbol(found, currency, "document")

        numer = _parse_i64(raw_numer, "numerator", "document")
        denom = _parse_i64(raw_denom, "denominator", "document")
        if denom == 0:
            raise _malformed("number would be zero for non-zero denominator")

        return cls.of(numer, denom, currency)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)

    @classmethod
    def from_json(cls, text: str, currency: Currency) -> DenseMoney:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise _malformed(f"invalid JSON money document: {e}") from e
        return cls.from_dict(data, currency)
