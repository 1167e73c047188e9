"""
Core math modules

Безопасные decimal-примитивы: деление, степень, корень, округление, форматирование.
"""

from src.core.math.numerical_safeguards import (
    # Constants
    EPS_FLOAT_COMPARE_ABS,
    HUNDRED,
    ONE,
    ZERO,
    # Float bridge
    decimal_from_float,
    decimal_to_float,
    # Formatting
    format_decimal,
    format_fixed,
    # Safe arithmetic
    ceil_decimal,
    round_significant,
    safe_divide,
    safe_modulo,
    safe_power,
    safe_sqrt,
    # Comparisons
    is_close,
    # Validation
    validate_in_range,
    validate_non_negative,
    validate_positive,
)

__all__ = [
    # Constants
    "ZERO",
    "ONE",
    "HUNDRED",
    "EPS_FLOAT_COMPARE_ABS",
    # Float bridge
    "decimal_from_float",
    "decimal_to_float",
    # Formatting
    "format_decimal",
    "format_fixed",
    # Safe arithmetic
    "safe_divide",
    "safe_modulo",
    "safe_power",
    "safe_sqrt",
    "ceil_decimal",
    "round_significant",
    # Comparisons
    "is_close",
    # Validation
    "validate_non_negative",
    "validate_positive",
    "validate_in_range",
]
