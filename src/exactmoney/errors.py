"""
errors.py — Exception hierarchy for monetary operations.

Every error is a local, deterministic condition: retrying with the same
input gives the same failure. Each class also derives from the builtin
exception a caller would naturally catch (OverflowError, ValueError, ...).
"""

from __future__ import annotations
from typing import Any


class MoneyError(Exception):
    """Base class for all exactmoney errors."""


class AmountOverflowError(MoneyError, OverflowError):
    """
    Raised when a value cannot be represented in the 64-bit rational range
    or the unsigned 32-bit discrete range.

    checked_add / checked_sub never raise this: they return None instead.
    """


class NonExactRoundingError(MoneyError, ValueError):
    """Raised by round_exact() when rounding leaves a non-zero remainder."""

    def __init__(self, remainder: Any):
        self.remainder = remainder
        super().__init__(
            f"tried to round dense money exactly, but {remainder} was left over"
        )


class CurrencyMismatchError(MoneyError, TypeError):
    """
    Raised when amounts of different currencies meet, either in an
    operation or when decoded data carries an unexpected currency symbol.
    """

    def __init__(self, expected: str, found: str, message: str | None = None):
        self.expected = expected
        self.found = found
        super().__init__(
            message or f"invalid currency {found}, expected {expected}"
        )


class MalformedMoneyError(MoneyError, ValueError):
    """
    Raised when external data cannot be decoded: missing fields, unparsable
    or out-of-range integers, zero denominator.
    """


class UnsupportedScaleError(MoneyError, NotImplementedError):
    """Raised when a decimal bridge meets a minor-unit scale that is not a power of ten."""
