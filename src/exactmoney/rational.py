"""
rational.py — Overflow-checked rational numbers over the signed 64-bit range

================================================================================
DESIGN PRINCIPLES
================================================================================

1. CANONICAL FORM
   Always in lowest terms, denominator > 0, sign carried by the numerator.
   Two equal values therefore have identical (numer, denom) pairs.

2. FIXED RANGE
   Numerator and denominator are bounded to [-2**63, 2**63 - 1], even though
   Python integers are unbounded. Persisted amounts must fit a 64-bit column.

3. CHECKED ARITHMETIC
   checked_* operations compute with Python integers and verify every
   intermediate against the range. The result is None when anything falls
   outside it. Nothing wraps around.

4. EXACT COMPARISON
   Ordering uses integer cross-multiplication, never floating point.

================================================================================
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import total_ordering
import math

from .config import I64_MAX, I64_MIN
from .errors import AmountOverflowError


def _fits(value: int) -> bool:
    return I64_MIN <= value <= I64_MAX


def _reduce(numer: int, denom: int) -> tuple[int, int] | None:
    """Lowest terms with positive denominator, or None if out of range."""
    g = math.gcd(numer, denom)
    numer //= g
    denom //= g
    if denom < 0:
        numer = -numer
        denom = -denom
    if not (_fits(numer) and _fits(denom)):
        return None
    return numer, denom


@total_ordering
@dataclass(frozen=True, slots=True, eq=False)
class Rational64:
    """
    Exact rational number with 64-bit numerator and denominator.

    INVARIANTS:
    1. denom > 0
    2. gcd(numer, denom) == 1
    3. both components fit in a signed 64-bit integer

    Use Rational64.new() to build one; the raw constructor trusts its input.
    """
    numer: int
    denom: int

    @classmethod
    def new(cls, numer: int, denom: int) -> Rational64:
        """
        Build a reduced rational.

        Raises:
            TypeError: if a component is not an int
            ZeroDivisionError: if denom == 0
            AmountOverflowError: if a component (or its normalization) leaves the range
        """
        for name, value in (("numer", numer), ("denom", denom)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be int, not {type(value).__name__}")
        if denom == 0:
            raise ZeroDivisionError("denominator must be non-zero")
        if not (_fits(numer) and _fits(denom)):
            raise AmountOverflowError(
                f"{numer}/{denom} does not fit in a 64-bit numerator/denominator"
            )
        reduced = _reduce(numer, denom)
        if reduced is None:
            raise AmountOverflowError(f"cannot normalize {numer}/{denom} within 64 bits")
        return cls(*reduced)

    @classmethod
    def from_integer(cls, value: int) -> Rational64:
        return cls.new(value, 1)

    # -------------------------------------------------------------------------
    # Checked arithmetic
    # -------------------------------------------------------------------------

    def checked_add(self, other: Rational64) -> Rational64 | None:
        """Exact sum, or None if it cannot be represented."""
        if self.denom == other.denom:
            numer = self.numer + other.numer
            if not _fits(numer):
                return None
            return self._checked(numer, self.denom)

        g = math.gcd(self.denom, other.denom)
        lcm = (self.denom // g) * other.denom
        if not _fits(lcm):
            return None
        lhs = (lcm // self.denom) * self.numer
        rhs = (lcm // other.denom) * other.numer
        if not (_fits(lhs) and _fits(rhs)):
            return None
        numer = lhs + rhs
        if not _fits(numer):
            return None
        return self._checked(numer, lcm)

    def checked_sub(self, other: Rational64) -> Rational64 | None:
        """Exact difference, or None if it cannot be represented."""
        negated = other.checked_neg()
        if negated is None:
            # -other overflows only for numer == I64_MIN; go through the
            # unbounded difference instead
            return self._checked(
                self.numer * other.denom - other.numer * self.denom,
                self.denom * other.denom,
            )
        return self.checked_add(negated)

    def checked_mul(self, other: Rational64) -> Rational64 | None:
        """Exact product, or None if it cannot be represented."""
        # cross-reduce first to keep intermediates small
        g1 = math.gcd(self.numer, other.denom)
        g2 = math.gcd(other.numer, self.denom)
        numer = (self.numer // g1) * (other.numer // g2)
        denom = (self.denom // g2) * (other.denom // g1)
        if not (_fits(numer) and _fits(denom)):
            return None
        return self._checked(numer, denom)

    def checked_neg(self) -> Rational64 | None:
        if self.numer == I64_MIN:
            return None
        return Rational64(-self.numer, self.denom)

    @staticmethod
    def _checked(numer: int, denom: int) -> Rational64 | None:
        reduced = _reduce(numer, denom)
        return None if reduced is None else Rational64(*reduced)

    # -------------------------------------------------------------------------
    # Rounding and predicates
    # -------------------------------------------------------------------------

    def round(self) -> int:
        """Nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)."""
        quotient, rest = divmod(abs(self.numer), self.denom)
        if 2 * rest >= self.denom:
            quotient += 1
        return quotient if self.numer >= 0 else -quotient

    def is_zero(self) -> bool:
        return self.numer == 0

    def is_integer(self) -> bool:
        return self.denom == 1

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Rational64):
            # canonical form makes component equality value equality
            return self.numer == other.numer and self.denom == other.denom
        return NotImplemented

    def __lt__(self, other: Rational64) -> bool:
        if not isinstance(other, Rational64):
            return NotImplemented
        return self.numer * other.denom < other.numer * self.denom

    def __hash__(self) -> int:
        return hash((self.numer, self.denom))

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def __float__(self) -> float:
        """Lossy. For display only."""
        return self.numer / self.denom

    def __str__(self) -> str:
        if self.denom == 1:
            return str(self.numer)
        return f"{self.numer}/{self.denom}"

    def __repr__(self) -> str:
        return f"Rational64({self.numer}, {self.denom})"
