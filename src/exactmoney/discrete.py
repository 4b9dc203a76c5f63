"""
discrete.py — Whole numbers of minor units ("discrete" money)

A DiscreteMoney is what gets persisted or shown: an unsigned 32-bit count of
minor units (cents, pence, fils, ...) in a currency. It has no denominator of
its own; the scale always comes from the currency.

Conversions:
    to_dense()          exact, never fails
    to_decimal()        exact decimal.Decimal, power-of-ten scales only
    to_fixed_decimal()  same value, bounded 28-digit fixed-point form
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import Context, Decimal, DecimalTuple, Inexact, InvalidOperation, Rounded
import logging

from .config import FIXED_POINT_PRECISION, U32_MAX
from .currency import Currency
from .dense import DenseMoney
from .errors import AmountOverflowError, CurrencyMismatchError, UnsupportedScaleError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, order=False)
class DiscreteMoney:
    """
    Non-negative count of minor units tagged with a Currency.

    INVARIANTS:
    1. 0 <= _minor_units <= 2**32 - 1
    2. _currency is always a Currency
    """
    _minor_units: int
    _currency: Currency

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def of(cls, minor_units: int, currency: Currency) -> DiscreteMoney:
        """
        Build from a count of minor units.

        Raises:
            TypeError: if minor_units is not an int, or currency not a Currency
            AmountOverflowError: if minor_units is outside [0, 2**32 - 1]
        """
        if not isinstance(minor_units, int) or isinstance(minor_units, bool):
            raise TypeError(f"minor_units must be int, not {type(minor_units).__name__}")
        if not isinstance(currency, Currency):
            raise TypeError(f"currency must be a Currency, not {type(currency).__name__}")
        if not 0 <= minor_units <= U32_MAX:
            raise AmountOverflowError(
                f"{minor_units} minor units outside the discrete range [0, {U32_MAX}]"
            )
        return cls(_minor_units=minor_units, _currency=currency)

    @classmethod
    def zero(cls, currency: Currency) -> DiscreteMoney:
        return cls.of(0, currency)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def minor_units(self) -> int:
        return self._minor_units

    @property
    def currency(self) -> Currency:
        return self._currency

    def is_zero(self) -> bool:
        return self._minor_units == 0

    # -------------------------------------------------------------------------
    # Conversions
    # -------------------------------------------------------------------------

    def to_dense(self) -> DenseMoney:
        """Exact embedding: minor_units / currency.minor_units, in lowest terms."""
        return DenseMoney.of(self._minor_units, self._currency.minor_units, self._currency)

    def _require_exponent(self) -> int:
        exponent = self._currency.decimal_exponent
        if exponent is None:
            logger.debug(
                f"No decimal form for {self._currency.symbol}: "
                f"scale {self._currency.minor_units} is not a power of ten"
            )
            raise UnsupportedScaleError(
                f"cannot convert {self._currency.symbol} to a decimal: "
                f"minor-unit scale {self._currency.minor_units} is not a power of ten"
            )
        return exponent

    def to_decimal(self) -> Decimal:
        """
        Exact decimal value, minor_units as coefficient and the currency's
        decimal places as exponent (124 GBP minor units -> Decimal("1.24")).

        Raises:
            UnsupportedScaleError: if the scale is not a power of ten
        """
        exponent = self._require_exponent()
        digits = tuple(int(d) for d in str(self._minor_units))
        return Decimal(DecimalTuple(sign=0, digits=digits, exponent=-exponent))

    def to_fixed_decimal(self) -> Decimal:
        """
        The same value in bounded fixed-point form: 28 significant digits,
        exactly `decimal_exponent` fractional digits.

        Computed in a private context that traps any rounding, so the result
        is exact or an error. The thread's default context is untouched.

        Raises:
            UnsupportedScaleError: if the scale is not a power of ten
        """
        exponent = self._require_exponent()
        context = Context(
            prec=FIXED_POINT_PRECISION,
            traps=[Inexact, Rounded, InvalidOperation],
        )
        quantum = Decimal(DecimalTuple(sign=0, digits=(1,), exponent=-exponent))
        return context.create_decimal(self.to_decimal()).quantize(quantum, context=context)

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DiscreteMoney):
            return (
                self._minor_units == other._minor_units
                and self._currency == other._currency
            )
        return NotImplemented

    def __lt__(self, other: DiscreteMoney) -> bool:
        self._check_same_currency(other)
        return self._minor_units < other._minor_units

    def __le__(self, other: DiscreteMoney) -> bool:
        self._check_same_currency(other)
        return self._minor_units <= other._minor_units

    def __gt__(self, other: DiscreteMoney) -> bool:
        self._check_same_currency(other)
        return self._minor_units > other._minor_units

    def __ge__(self, other: DiscreteMoney) -> bool:
        self._check_same_currency(other)
        return self._minor_units >= other._minor_units

    def _check_same_currency(self, other: DiscreteMoney) -> None:
        if not isinstance(other, DiscreteMoney):
            raise TypeError(f"Cannot compare DiscreteMoney with {type(other).__name__}")
        if self._currency != other._currency:
            raise CurrencyMismatchError(
                expected=self._currency.symbol,
                found=other._currency.symbol,
                message=(
                    f"Cannot compare different currencies: "
                    f"{self._currency.symbol} vs {other._currency.symbol}"
                ),
            )

    def __hash__(self) -> int:
        return hash((self._minor_units, self._currency))

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        symbol = self._currency.symbol
        exponent = self._currency.decimal_exponent
        if exponent is None:
            return f"{symbol} {self._minor_units}/{self._currency.minor_units}"
        if exponent == 0:
            return f"{symbol} {self._minor_units}"

        major = self._minor_units // self._currency.minor_units
        minor = self._minor_units % self._currency.minor_units
        return f"{symbol} {major}.{minor:0{exponent}d}"

    def __repr__(self) -> str:
        return f"DiscreteMoney({self._minor_units}, {self._currency.symbol})"
