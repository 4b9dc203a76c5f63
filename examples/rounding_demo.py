#!/usr/bin/env python3
"""
rounding_demo.py — Exact amounts, rounding with remainder, persistence

================================================================================
THE PROBLEM
================================================================================

    >>> round(1.243, 2)
    1.24

Where did the 0.003 go? It was silently dropped. Do that on every line of
an invoice and the total no longer matches.

================================================================================
THE APPROACH
================================================================================

Keep amounts exact (rationals) until they must become whole minor units,
and when they do, keep what was rounded off:

    from exactmoney import Currency

    price = Currency.GBP.new(1243, 1000)
    pence, rest = price.round()
    assert pence.to_dense() + rest == price

================================================================================
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from exactmoney import (
    Currency,
    DenseMoney,
    DiscreteMoney,
    CurrencyMismatchError,
    NonExactRoundingError,
    UnsupportedScaleError,
)


def demonstrate_rounding():
    """Round an exact amount and carry the remainder."""
    print("=" * 60)
    print("ROUNDING WITH REMAINDER")
    print("=" * 60)
    print()

    price = Currency.GBP.new(1243, 1000)
    pence, rest = price.round()
    print(f"Exact:     {price!r}")
    print(f"Rounded:   {pence}")
    print(f"Remainder: {rest!r}")
    print(f"Rounded + remainder == exact: {pence.to_dense() + rest == price}")
    print()

    # Carry remainders across a series of lines so the total stays exact
    lines = [Currency.USD.new(1, 3)] * 3
    carried = DenseMoney.zero(Currency.USD)
    cents = []
    for line in lines:
        discrete, carried = (line + carried).round()
        cents.append(discrete.minor_units)
    print(f"Three thirds of a dollar in cents: {cents} (sum {sum(cents)})")
    print(f"Left to carry: {carried!r}")
    print()


def demonstrate_strict_rounding():
    """round_exact() refuses to lose anything."""
    print("=" * 60)
    print("STRICT ROUNDING")
    print("=" * 60)
    print()

    print(f"USD 199/100 -> {Currency.USD.new(199, 100).round_exact()}")
    try:
        Currency.USD.new(1, 3).round_exact()
    except NonExactRoundingError as e:
        print(f"USD 1/3 -> {e}")
    print()


def demonstrate_decimals():
    """Decimal bridges work for power-of-ten scales only."""
    print("=" * 60)
    print("DECIMAL BRIDGES")
    print("=" * 60)
    print()

    for minor, currency in [(124, Currency.GBP), (1500, Currency.KWD), (7, Currency.JPY), (7, Currency.MGA)]:
        amount = DiscreteMoney.of(minor, currency)
        try:
            print(f"{amount!r:>28} -> {amount.to_decimal()!r}")
        except UnsupportedScaleError as e:
            print(f"{amount!r:>28} -> {e}")
    print()


def demonstrate_serialization():
    """Both external formats, and the currency check on decode."""
    print("=" * 60)
    print("SERIALIZATION")
    print("=" * 60)
    print()

    price = Currency.GBP.new(1243, 1000)
    row = price.to_db_array()
    print(f"DB array: {row}")
    print(f"JSON:     {price.to_json()}")
    print(f"Restored: {DenseMoney.from_db_array(row, Currency.GBP)!r}")

    try:
        DenseMoney.from_db_array(row, Currency.USD)
    except CurrencyMismatchError as e:
        print(f"Decoded as USD: {e}")
    print()


def main():
    """Run all demonstrations."""
    demonstrate_rounding()
    demonstrate_strict_rounding()
    demonstrate_decimals()
    demonstrate_serialization()


if __name__ == "__main__":
    main()
