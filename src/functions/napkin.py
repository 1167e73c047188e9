"""
Napkin Math — грубое округление до значащих цифр

Две формы:
- display (format_napkin): строка с суффиксом K/M/B/T — "~1.2M"
- computational (napkin_value): Number, пригодный для дальнейшей арифметики

|v| < 0.01 отображается как "~0".
"""

from decimal import Decimal
from typing import Final

from src.core.domain.time_units import to_seconds
from src.core.domain.values import Currency, Duration, Number, Quantity, Rate, Value, type_name
from src.core.errors import ArgumentTypeError
from src.core.math.numerical_safeguards import format_decimal, round_significant

DEFAULT_SIG_FIGS: Final[int] = 2

_NEGLIGIBLE: Final[Decimal] = Decimal("0.01")

_SCALES: Final[tuple[tuple[Decimal, str], ...]] = (
    (Decimal("1e12"), "T"),
    (Decimal("1e9"), "B"),
    (Decimal("1e6"), "M"),
    (Decimal("1e3"), "K"),
)


def format_napkin(value: Decimal, sig_figs: int = DEFAULT_SIG_FIGS) -> str:
    """
    Display-форма.

    Examples:
        >>> format_napkin(Decimal("1234567"))
        '~1.2M'
        >>> format_napkin(Decimal("347234"))
        '~350K'
        >>> format_napkin(Decimal("123"))
        '~120'
        >>> format_napkin(Decimal("-1234567"))
        '~-1.2M'
    """
    magnitude = abs(value)
    if magnitude < _NEGLIGIBLE:
        return "~0"
    sign = "-" if value < 0 else ""
    for divisor, suffix in _SCALES:
        if magnitude >= divisor:
            scaled = round_significant(magnitude / divisor, sig_figs)
            return f"~{sign}{format_decimal(scaled)}{suffix}"
    return f"~{sign}{format_decimal(round_significant(magnitude, sig_figs))}"


def napkin_magnitude(value: Value) -> Decimal:
    """
    Числовая величина Value для napkin-округления.

    Duration — в секундах, Rate — числитель.
    """
    if isinstance(value, (Number, Quantity, Currency)):
        return value.value
    if isinstance(value, Duration):
        return to_seconds(value.value, value.unit)
    if isinstance(value, Rate):
        return value.amount_value
    raise ArgumentTypeError(f"napkin conversion requires a numeric value, got {type_name(value)}")


def napkin_value(value: Value, sig_figs: int = DEFAULT_SIG_FIGS) -> Number:
    """
    Computational-форма: Number, округлённый до sig_figs значащих цифр.

    Examples:
        1234567 → 1200000
    """
    return Number(value=round_significant(napkin_magnitude(value), sig_figs))
