"""
Numerical Safeguards — Safe Decimal Primitives

Модуль обеспечивает корректность всех decimal-операций вычислителя:
- Безопасное деление с явной ошибкой деления на ноль (без fallback)
- Мост float → Decimal через кратчайшее repr (конверсии единиц работают во float)
- Каноническое строковое представление Decimal (без экспоненты и хвостовых нулей)
- Округление до значащих цифр и ceiling для capacity-расчётов
- Валидация знака и диапазона с типизированными ошибками

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Деление на ноль никогда не возвращает значение по умолчанию — только DivisionByZeroError
2. NaN/Inf из float-конверсий никогда не попадают в Decimal
3. Все операции детерминированы при фиксированном decimal-контексте
"""

import math
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal, InvalidOperation, Overflow
from typing import Final

from src.core.errors import (
    DivisionByZeroError,
    IncompatibleUnitsError,
    NegativeValueError,
    OutOfRangeError,
)

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

ZERO: Final[Decimal] = Decimal(0)
ONE: Final[Decimal] = Decimal(1)
HUNDRED: Final[Decimal] = Decimal(100)

# Абсолютная толерантность для сравнения float-результатов конверсий
EPS_FLOAT_COMPARE_ABS: Final[float] = 1e-9


# =============================================================================
# FLOAT ↔ DECIMAL
# =============================================================================


def decimal_from_float(value: float) -> Decimal:
    """
    Конверсия float → Decimal через кратчайшее repr.

    Decimal(0.1) хранит двоичный шум; Decimal(repr(0.1)) == Decimal("0.1").
    Так результаты конверсий единиц отображаются так, как их ожидает пользователь.

    Raises:
        IncompatibleUnitsError: если float не конечный (NaN/Inf после конверсии)

    Examples:
        >>> decimal_from_float(1.524)
        Decimal('1.524')
        >>> decimal_from_float(212.0)
        Decimal('212.0')
    """
    if not math.isfinite(value):
        raise IncompatibleUnitsError(f"conversion produced a non-finite value: {value}")
    return Decimal(repr(value))


def decimal_to_float(value: Decimal) -> float:
    """Конверсия Decimal → float для функций конверсии единиц."""
    return float(value)


def format_decimal(value: Decimal) -> str:
    """
    Каноническое строковое представление Decimal.

    Без экспоненты, без хвостовых нулей, без "-0".

    Examples:
        >>> format_decimal(Decimal("43.200"))
        '43.2'
        >>> format_decimal(Decimal("1.2E+6"))
        '1200000'
        >>> format_decimal(Decimal("-0"))
        '0'
    """
    if value.is_zero():
        return "0"
    text = format(value.normalize(), "f")
    return text


def format_fixed(value: Decimal, places: int = 2) -> str:
    """
    Фиксированное число знаков после запятой, округление half-up.

    Examples:
        >>> format_fixed(Decimal("1.005"))
        '1.01'
        >>> format_fixed(Decimal("100"))
        '100.00'
    """
    quantum = Decimal(1).scaleb(-places)
    rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    if rounded.is_zero():
        rounded = abs(rounded)
    return format(rounded, "f")


# =============================================================================
# БЕЗОПАСНАЯ АРИФМЕТИКА
# =============================================================================


def safe_divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    """
    Деление с явной ошибкой при нулевом делителе.

    Raises:
        DivisionByZeroError: если denominator == 0
    """
    if denominator.is_zero():
        raise DivisionByZeroError("division by zero")
    return numerator / denominator


def safe_modulo(numerator: Decimal, denominator: Decimal) -> Decimal:
    """
    Остаток от деления с явной ошибкой при нулевом делителе.

    Raises:
        DivisionByZeroError: если denominator == 0
    """
    if denominator.is_zero():
        raise DivisionByZeroError("division by zero")
    return numerator % denominator


def safe_power(base: Decimal, exponent: Decimal) -> Decimal:
    """
    Возведение в степень.

    Raises:
        DivisionByZeroError: 0 в отрицательной степени
        OutOfRangeError: дробная степень отрицательного числа или переполнение
    """
    if base.is_zero() and exponent < 0:
        raise DivisionByZeroError("division by zero: 0 raised to a negative power")
    try:
        return base ** exponent
    except (InvalidOperation, Overflow) as e:
        raise OutOfRangeError(
            f"cannot raise {format_decimal(base)} to the power {format_decimal(exponent)}"
        ) from e


def safe_sqrt(value: Decimal) -> Decimal:
    """
    Квадратный корень в текущем decimal-контексте.

    Raises:
        NegativeValueError: если value < 0
    """
    if value < 0:
        raise NegativeValueError(
            f"sqrt() argument must be non-negative, got {format_decimal(value)}"
        )
    return value.sqrt()


def ceil_decimal(value: Decimal) -> Decimal:
    """
    Ceiling до целого без потери точности.

    Examples:
        >>> ceil_decimal(Decimal("22.22"))
        Decimal('23')
        >>> ceil_decimal(Decimal("5"))
        Decimal('5')
    """
    return value.to_integral_value(rounding=ROUND_CEILING)


def round_significant(value: Decimal, sig_figs: int) -> Decimal:
    """
    Округление до sig_figs значащих цифр (half-up, от нуля).

    Examples:
        >>> round_significant(Decimal("1234567"), 2)
        Decimal('1.2E+6')
        >>> round_significant(Decimal("0.0123"), 2)
        Decimal('0.012')
        >>> round_significant(Decimal("999"), 2)
        Decimal('1.0E+3')
    """
    if sig_figs < 1:
        raise ValueError(f"sig_figs must be >= 1, got {sig_figs}")
    if value.is_zero():
        return ZERO
    exponent = value.adjusted() - sig_figs + 1
    return value.quantize(Decimal(1).scaleb(exponent), rounding=ROUND_HALF_UP)


# =============================================================================
# СРАВНЕНИЯ
# =============================================================================


def is_close(a: float, b: float, abs_tol: float = EPS_FLOAT_COMPARE_ABS) -> bool:
    """Сравнение float-результатов конверсий с абсолютной и относительной толерантностью."""
    return math.isclose(a, b, rel_tol=abs_tol, abs_tol=abs_tol)


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_non_negative(value: Decimal, name: str) -> Decimal:
    """
    Проверка value >= 0.

    Raises:
        NegativeValueError: если value < 0
    """
    if value < 0:
        raise NegativeValueError(f"{name} must be non-negative, got {format_decimal(value)}")
    return value


def validate_positive(value: Decimal, name: str) -> Decimal:
    """
    Проверка value > 0.

    Raises:
        DivisionByZeroError: если value == 0 (value используется как делитель)
        NegativeValueError: если value < 0
    """
    if value.is_zero():
        raise DivisionByZeroError(f"{name} cannot be zero")
    if value < 0:
        raise NegativeValueError(f"{name} must be positive, got {format_decimal(value)}")
    return value


def validate_in_range(value: Decimal, min_val: Decimal, max_val: Decimal, name: str) -> Decimal:
    """
    Проверка min_val <= value <= max_val.

    Raises:
        OutOfRangeError: если value вне диапазона
    """
    if value < min_val or value > max_val:
        raise OutOfRangeError(
            f"{name} must be in [{format_decimal(min_val)}, {format_decimal(max_val)}], "
            f"got {format_decimal(value)}"
        )
    return value
