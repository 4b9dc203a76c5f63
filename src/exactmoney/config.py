"""
config.py — Numeric limits and wire-format constants (single source of truth).
"""

# --- Rational range (signed 64-bit numerator / denominator) ---
I64_MIN: int = -(2 ** 63)
I64_MAX: int = 2 ** 63 - 1

# --- Discrete range (unsigned 32-bit minor-unit count) ---
U32_MAX: int = 2 ** 32 - 1

# --- Decimal bridges ---
FIXED_POINT_PRECISION: int = 28  # significant digits of the bounded fixed-point form

# --- Wire formats ---
DB_ARRAY_LENGTH: int = 3  # [numer, denom, symbol]
