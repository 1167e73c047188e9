"""
Rate functions — accumulate / convert_rate

accumulate:   total = amount × period_seconds / per_unit_seconds
convert_rate: amount' = amount × target_seconds / source_seconds

Денежная ставка накапливается в Currency, остальные — в Quantity
в единице числителя.
"""

from decimal import Decimal

from src.core.domain.time_units import normalize_time_unit, seconds_in
from src.core.domain.values import Currency, Quantity, Rate, Value, type_name
from src.core.errors import ArgumentTypeError
from src.functions.availability import period_seconds


def _require_rate(value: Value, function: str) -> Rate:
    if not isinstance(value, Rate):
        raise ArgumentTypeError(f"{function}() requires a rate, got {type_name(value)}")
    return value


def accumulate_over(rate: Rate, seconds: Decimal) -> Quantity | Currency:
    """Накопление ставки за seconds секунд."""
    total = rate.amount_value * seconds / seconds_in(rate.per_unit)
    return rate.amount.with_value(total)


def accumulate(rate: Value, period: Value | str) -> Quantity | Currency:
    """
    Сколько накопится за период.

    Examples:
        100 MB/s over 1 day → 8640000 MB
        $0.10/hour over 30 days → $72.00
        5 GB/day over 1 year → 1825 GB
    """
    return accumulate_over(_require_rate(rate, "accumulate"), period_seconds(period))


def convert_rate(rate: Value, target: Value | str) -> Rate:
    """
    Пересчёт ставки на другую временную базу.

    Examples:
        1000 req/s per hour → 3600000 req/h
        5M/day per second → 57.87.../s

    Raises:
        ArgumentTypeError: rate не Rate или target не единица времени
    """
    source = _require_rate(rate, "convert_rate")
    if not isinstance(target, str):
        raise ArgumentTypeError(
            f"convert_rate() target must be a time unit, got {type_name(target)}"
        )
    unit = normalize_time_unit(target)
    if unit is None:
        raise ArgumentTypeError(f"convert_rate() target must be a time unit, got {target!r}")
    if unit == source.per_unit:
        return source
    scaled = source.amount_value * seconds_in(unit) / seconds_in(source.per_unit)
    return Rate(amount=source.amount.with_value(scaled), per_unit=unit)
