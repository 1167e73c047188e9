"""
Data size helpers для сетевых и storage функций.
"""

from decimal import Decimal
from typing import Final

from src.core.domain.time_units import TimeUnit, from_seconds
from src.core.domain.values import Duration, Quantity, Value, type_name
from src.core.errors import ArgumentTypeError
from src.core.math.numerical_safeguards import validate_non_negative
from src.core.units.registry import UNIT_REGISTRY, UnitCategory, is_throughput_unit

MEGABYTE: Final[str] = "MB"

_MINUTE_THRESHOLD: Final[Decimal] = Decimal(60)


def require_data_size(value: Value, function: str) -> Quantity:
    """
    Проверка, что аргумент — неотрицательный объём данных (не throughput).

    Raises:
        ArgumentTypeError: не Quantity или не data size
        NegativeValueError: отрицательный объём
    """
    if not isinstance(value, Quantity):
        raise ArgumentTypeError(f"{function}() size must be a data size, got {type_name(value)}")
    if UNIT_REGISTRY.category_of(value.unit) != UnitCategory.DATA_SIZE or is_throughput_unit(
        value.unit
    ):
        raise ArgumentTypeError(f"{function}() size must be a data size, got unit {value.unit!r}")
    validate_non_negative(value.value, f"{function}() size")
    return value


def megabytes(size: Quantity) -> Decimal:
    """Объём в MB (1024-based, как и остальные SI-написания)."""
    if size.unit.lower() == MEGABYTE.lower():
        return size.value
    return UNIT_REGISTRY.convert_value(size.value, size.unit, MEGABYTE)


def escalated_duration(seconds: Decimal) -> Duration:
    """Секунды до 60 s, иначе минуты."""
    if seconds < _MINUTE_THRESHOLD:
        return Duration(value=seconds, unit=TimeUnit.SECOND)
    return Duration(value=from_seconds(seconds, TimeUnit.MINUTE), unit=TimeUnit.MINUTE)
