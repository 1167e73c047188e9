"""
Availability — бюджет простоя по SLA

downtime = (1 − availability) × period

Единица результата выбирается по величине:
< 60 s → second, < 3600 s → minute, иначе hour.
"""

from decimal import Decimal
from typing import Final

from src.core.domain.time_units import TimeUnit, from_seconds, normalize_time_unit, to_seconds
from src.core.domain.values import Duration, Number, Quantity, Value, type_name
from src.core.errors import ArgumentTypeError
from src.core.math.numerical_safeguards import ONE, ZERO, validate_in_range

_MINUTE_THRESHOLD: Final[Decimal] = Decimal(60)
_HOUR_THRESHOLD: Final[Decimal] = Decimal(3600)


def period_seconds(period: Value | str) -> Decimal:
    """
    Длительность периода в секундах.

    period — голое слово ("month" = 1 month), Duration или Quantity
    с единицей времени ("30 days").

    Raises:
        ArgumentTypeError: period не является единицей времени
    """
    if isinstance(period, str):
        unit = normalize_time_unit(period)
        if unit is None:
            raise ArgumentTypeError(f"time period must be a time unit, got {period!r}")
        return to_seconds(ONE, unit)
    if isinstance(period, Duration):
        return to_seconds(period.value, period.unit)
    if isinstance(period, Quantity):
        unit = normalize_time_unit(period.unit)
        if unit is None:
            raise ArgumentTypeError(f"time period must be a time unit, got {period.unit!r}")
        return to_seconds(period.value, unit)
    raise ArgumentTypeError(
        f"time period must be a duration or time unit, got {type_name(period)}"
    )


def downtime_unit(seconds: Decimal) -> TimeUnit:
    if seconds >= _HOUR_THRESHOLD:
        return TimeUnit.HOUR
    if seconds >= _MINUTE_THRESHOLD:
        return TimeUnit.MINUTE
    return TimeUnit.SECOND


def downtime(availability: Value, period: Value | str) -> Duration:
    """
    Допустимый простой за период при заданной доступности.

    Args:
        availability: Number-доля в [0, 1] (99.9% = 0.999)
        period: Период (слово, Duration или Quantity времени)

    Raises:
        ArgumentTypeError: availability не Number
        OutOfRangeError: availability вне [0, 1]

    Examples:
        downtime(99.9%, month) → 43.2 minute
        downtime(99.99%, year) → 52.56 minute
    """
    if not isinstance(availability, Number):
        raise ArgumentTypeError(
            f"downtime availability must be a percentage, got {type_name(availability)}"
        )
    fraction = validate_in_range(availability.value, ZERO, ONE, "downtime availability")
    seconds = period_seconds(period) * (ONE - fraction)
    unit = downtime_unit(seconds)
    return Duration(value=from_seconds(seconds, unit), unit=unit)
