"""
test_dense.py — Test suite for DenseMoney and the rounding engine

================================================================================
TEST STRUCTURE
================================================================================

1. UNIT TESTS
   Deterministic tests for specific values and edge cases.

2. PROPERTY-BASED TESTS (Hypothesis)
   The rounding decomposition law and the exactness flag, checked over
   generated amounts in every currency.

================================================================================
"""

import pytest
from hypothesis import given, settings, HealthCheck
from hypothesis import strategies as st

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from exactmoney import (
    Currency,
    DenseMoney,
    DiscreteMoney,
    AmountOverflowError,
    CurrencyMismatchError,
    NonExactRoundingError,
)
from exactmoney.config import I64_MAX, U32_MAX


# ==============================================================================
# TEST HELPERS
# ==============================================================================

@st.composite
def dense_strategy(draw, currency=None, max_major=1_000_000):
    """Non-negative DenseMoney whose rounding always fits the discrete range."""
    if currency is None:
        currency = draw(st.sampled_from(list(Currency)))
    denom = draw(st.integers(min_value=1, max_value=10_000))
    numer = draw(st.integers(min_value=0, max_value=denom * max_major))
    return DenseMoney.of(numer, denom, currency)


# ==============================================================================
# UNIT TESTS: Constructors
# ==============================================================================

class TestConstructors:
    """Tests for DenseMoney constructors."""

    def test_of_reduces(self):
        m = DenseMoney.of(2, 4, Currency.USD)
        assert (m.numer, m.denom) == (1, 2)
        assert m.currency == Currency.USD

    def test_currency_shorthand(self):
        assert Currency.GBP.new(1243, 1000) == DenseMoney.of(1243, 1000, Currency.GBP)
        assert Currency.GBP.new(5) == DenseMoney.of(5, 1, Currency.GBP)

    def test_zero_denominator_raises(self):
        with pytest.raises(ZeroDivisionError):
            DenseMoney.of(1, 0, Currency.USD)

    def test_out_of_range_raises(self):
        with pytest.raises(AmountOverflowError):
            DenseMoney.of(I64_MAX + 1, 1, Currency.USD)

    def test_non_currency_raises(self):
        with pytest.raises(TypeError):
            DenseMoney.of(1, 1, "USD")

    def test_zero(self):
        m = DenseMoney.zero(Currency.EUR)
        assert m.is_zero()
        assert (m.numer, m.denom) == (0, 1)


# ==============================================================================
# UNIT TESTS: Arithmetic
# ==============================================================================

class TestArithmetic:
    """Tests for checked and operator arithmetic."""

    def test_checked_add(self):
        a = Currency.MYR.new(20)  # RM 20
        b = Currency.MYR.new(40)  # RM 40
        assert a.checked_add(b) == Currency.MYR.new(60)

    def test_checked_add_fractions(self):
        a = Currency.USD.new(1, 3)
        b = Currency.USD.new(1, 6)
        assert a.checked_add(b) == Currency.USD.new(1, 2)

    def test_checked_add_overflow_returns_none(self):
        a = Currency.USD.new(I64_MAX)
        b = Currency.USD.new(1)
        assert a.checked_add(b) is None

    def test_checked_sub(self):
        a = Currency.USD.new(1, 2)
        b = Currency.USD.new(3, 4)
        assert a.checked_sub(b) == Currency.USD.new(-1, 4)

    def test_checked_sub_overflow_returns_none(self):
        a = Currency.USD.new(-I64_MAX)
        b = Currency.USD.new(2)
        assert a.checked_sub(b) is None

    def test_checked_add_different_currency_raises(self):
        with pytest.raises(CurrencyMismatchError):
            Currency.USD.new(1).checked_add(Currency.EUR.new(1))

    def test_operators(self):
        a = Currency.GBP.new(3, 2)
        b = Currency.GBP.new(1, 2)
        assert a + b == Currency.GBP.new(2)
        assert a - b == Currency.GBP.new(1)
        assert -a == Currency.GBP.new(-3, 2)

    def test_operator_overflow_raises(self):
        with pytest.raises(AmountOverflowError):
            Currency.USD.new(I64_MAX) + Currency.USD.new(1)

    def test_operator_different_currency_raises_type_error(self):
        with pytest.raises(TypeError):
            Currency.USD.new(1) + Currency.EUR.new(1)

    def test_operator_non_money_raises(self):
        with pytest.raises(TypeError):
            Currency.USD.new(1) + 1

        with pytest.raises(TypeError):
            Currency.USD.new(1) - 0.5


# ==============================================================================
# UNIT TESTS: Comparison
# ==============================================================================

class TestComparison:
    """Tests for equality and ordering."""

    def test_equal_independent_of_input_form(self):
        assert Currency.USD.new(2, 4) == Currency.USD.new(1, 2)
        assert Currency.USD.new(-1, -2) == Currency.USD.new(1, 2)

    def test_different_currency_not_equal(self):
        assert Currency.USD.new(1) != Currency.SGD.new(1)

    def test_ordering(self):
        assert Currency.USD.new(1, 3) < Currency.USD.new(1, 2)
        assert Currency.USD.new(1, 2) <= Currency.USD.new(2, 4)
        assert Currency.USD.new(-1, 2) < Currency.USD.new(0)
        assert Currency.USD.new(7, 5) > Currency.USD.new(4, 3)
        assert max(Currency.USD.new(1, 3), Currency.USD.new(2, 5)) == Currency.USD.new(2, 5)

    def test_ordering_different_currency_raises(self):
        with pytest.raises(CurrencyMismatchError) as exc_info:
            Currency.USD.new(1) < Currency.EUR.new(2)

        assert exc_info.value.expected == "USD"
        assert exc_info.value.found == "EUR"

    def test_hash_consistent_with_equality(self):
        amounts = {Currency.USD.new(1, 2), Currency.USD.new(2, 4), Currency.EUR.new(1, 2)}
        assert len(amounts) == 2


# ==============================================================================
# UNIT TESTS: Display
# ==============================================================================

class TestDisplay:
    """str() is a lossy human rendering, repr() is exact."""

    def test_str_fraction(self):
        assert str(Currency.GBP.new(1243, 1000)) == "GBP 1.243"
        assert str(Currency.USD.new(1, 2)) == "USD 0.5"

    def test_str_integral(self):
        assert str(Currency.MYR.new(60)) == "MYR 60"

    def test_str_negative(self):
        assert str(Currency.USD.new(-3, 4)) == "USD -0.75"

    def test_str_small_amount_is_positional(self):
        assert str(Currency.USD.new(1, 10**7)) == "USD 0.0000001"
        assert str(Currency.USD.new(-1, 10**7)) == "USD -0.0000001"

    def test_repr_is_exact(self):
        assert repr(Currency.USD.new(1, 3)) == "DenseMoney(1/3 USD)"


# ==============================================================================
# UNIT TESTS: Rounding
# ==============================================================================

class TestRound:
    """Tests for round() and round_exact()."""

    def test_round_retains_value(self):
        amount = Currency.GBP.new(1243, 1000)  # £1.243
        approx, rest = amount.round()

        assert approx == DiscreteMoney.of(124, Currency.GBP)  # £1.24
        assert rest == Currency.GBP.new(3, 1000)  # 0.3p

    def test_round_result_fields(self):
        result = Currency.GBP.new(1243, 1000).round()
        assert result.discrete.minor_units == 124
        assert result.remainder == Currency.GBP.new(3, 1000)

    def test_round_up_gives_negative_remainder(self):
        approx, rest = Currency.USD.new(1249, 1000).round()
        assert approx.minor_units == 125
        assert rest == Currency.USD.new(-1, 1000)

    def test_tie_rounds_away_from_zero(self):
        """0.025 USD = 2.5 cents -> 3 cents, not 2 (no banker's rounding)."""
        approx, rest = Currency.USD.new(25, 1000).round()
        assert approx.minor_units == 3
        assert rest == Currency.USD.new(-5, 1000)

    def test_exact_amount_has_zero_remainder(self):
        approx, rest = Currency.USD.new(199, 100).round()
        assert approx.minor_units == 199
        assert rest.is_zero()

    def test_non_decimal_scale(self):
        """MGA has 5 minor units per ariary: 1/2 ariary -> 2.5 -> 3."""
        approx, rest = Currency.MGA.new(1, 2).round()
        assert approx.minor_units == 3
        assert rest == Currency.MGA.new(-1, 10)

    def test_small_negative_rounds_to_zero(self):
        approx, rest = Currency.USD.new(-1, 1000).round()
        assert approx.is_zero()
        assert rest == Currency.USD.new(-1, 1000)

    def test_negative_amount_raises(self):
        with pytest.raises(AmountOverflowError):
            Currency.USD.new(-1).round()

    def test_above_discrete_range_raises(self):
        with pytest.raises(AmountOverflowError):
            Currency.USD.new(U32_MAX).round()

    def test_upper_edge_of_discrete_range(self):
        approx, rest = Currency.JPY.new(U32_MAX).round()
        assert approx.minor_units == U32_MAX
        assert rest.is_zero()

    def test_scaling_overflow_raises(self):
        with pytest.raises(AmountOverflowError):
            Currency.USD.new(I64_MAX).round()

    def test_round_exact_success(self):
        assert Currency.USD.new(199, 100).round_exact() == DiscreteMoney.of(199, Currency.USD)
        assert Currency.MGA.new(7, 5).round_exact() == DiscreteMoney.of(7, Currency.MGA)

    def test_round_exact_failure_carries_remainder(self):
        with pytest.raises(NonExactRoundingError) as exc_info:
            Currency.USD.new(1, 3).round_exact()

        assert exc_info.value.remainder == Currency.USD.new(1, 300)
        assert "left over" in str(exc_info.value)

    def test_round_exact_failure_is_value_error(self):
        with pytest.raises(ValueError):
            Currency.GBP.new(1243, 1000).round_exact()


# ==============================================================================
# PROPERTY-BASED TESTS (Hypothesis)
# ==============================================================================

class TestRoundProperties:
    """Properties of round() that must hold for any amount."""

    @given(amount=dense_strategy())
    @settings(max_examples=1000, suppress_health_check=[HealthCheck.too_slow])
    def test_decomposition_law(self, amount: DenseMoney):
        """
        PROPERTY: for every amount a:
            d, r = a.round()
            d.to_dense() + r == a
        """
        discrete, remainder = amount.round()
        assert discrete.to_dense() + remainder == amount

    @given(amount=dense_strategy())
    @settings(max_examples=500)
    def test_remainder_is_at_most_half_a_minor_unit(self, amount: DenseMoney):
        _, remainder = amount.round()
        scale = amount.currency.minor_units
        assert 2 * abs(remainder.numer) * scale <= remainder.denom

    @given(amount=dense_strategy())
    @settings(max_examples=500)
    def test_exactness_flag(self, amount: DenseMoney):
        """PROPERTY: round_exact() succeeds iff amount * scale is an integer."""
        is_whole = (amount.numer * amount.currency.minor_units) % amount.denom == 0
        if is_whole:
            assert amount.round_exact().to_dense() == amount
        else:
            with pytest.raises(NonExactRoundingError):
                amount.round_exact()

    @given(amount=dense_strategy(currency=Currency.USD))
    @settings(max_examples=300)
    def test_round_is_idempotent_on_discrete_part(self, amount: DenseMoney):
        discrete, _ = amount.round()
        assert discrete.to_dense().round_exact() == discrete
