"""
Time Units — единая таблица единиц времени

Общая таблица для Duration.unit и Rate.per_unit: любые операции между
длительностями и ставками проходят через одни и те же коэффициенты.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. month = 30 дней, year = 365 дней (фиксированное приближение, не календарь)
2. Канонические имена: second, minute, hour, day, week, month, year
3. Неизвестное написание — ошибка, а не fallback на секунды
"""

from decimal import Decimal
from enum import Enum
from typing import Final


class TimeUnit(str, Enum):
    """Каноническая единица времени"""

    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


SECONDS_PER_UNIT: Final[dict[TimeUnit, Decimal]] = {
    TimeUnit.SECOND: Decimal(1),
    TimeUnit.MINUTE: Decimal(60),
    TimeUnit.HOUR: Decimal(3600),
    TimeUnit.DAY: Decimal(86400),
    TimeUnit.WEEK: Decimal(604800),
    TimeUnit.MONTH: Decimal(2592000),
    TimeUnit.YEAR: Decimal(31536000),
}

SECONDS_PER_DAY: Final[Decimal] = SECONDS_PER_UNIT[TimeUnit.DAY]

# Сокращения для отображения Rate ("100 MB/s")
RATE_ABBREVIATIONS: Final[dict[TimeUnit, str]] = {
    TimeUnit.SECOND: "s",
    TimeUnit.MINUTE: "min",
    TimeUnit.HOUR: "h",
    TimeUnit.DAY: "day",
    TimeUnit.WEEK: "week",
    TimeUnit.MONTH: "month",
    TimeUnit.YEAR: "year",
}

_ALIASES: Final[dict[str, TimeUnit]] = {
    "s": TimeUnit.SECOND,
    "sec": TimeUnit.SECOND,
    "secs": TimeUnit.SECOND,
    "second": TimeUnit.SECOND,
    "seconds": TimeUnit.SECOND,
    "m": TimeUnit.MINUTE,
    "min": TimeUnit.MINUTE,
    "mins": TimeUnit.MINUTE,
    "minute": TimeUnit.MINUTE,
    "minutes": TimeUnit.MINUTE,
    "h": TimeUnit.HOUR,
    "hr": TimeUnit.HOUR,
    "hrs": TimeUnit.HOUR,
    "hour": TimeUnit.HOUR,
    "hours": TimeUnit.HOUR,
    "d": TimeUnit.DAY,
    "day": TimeUnit.DAY,
    "days": TimeUnit.DAY,
    "w": TimeUnit.WEEK,
    "wk": TimeUnit.WEEK,
    "week": TimeUnit.WEEK,
    "weeks": TimeUnit.WEEK,
    "mo": TimeUnit.MONTH,
    "month": TimeUnit.MONTH,
    "months": TimeUnit.MONTH,
    "y": TimeUnit.YEAR,
    "yr": TimeUnit.YEAR,
    "year": TimeUnit.YEAR,
    "years": TimeUnit.YEAR,
}


def normalize_time_unit(name: str) -> TimeUnit | None:
    """
    Нормализация написания единицы времени.

    Регистр и пробелы по краям игнорируются.

    Returns:
        TimeUnit или None, если написание не распознано

    Examples:
        >>> normalize_time_unit("Hours")
        <TimeUnit.HOUR: 'hour'>
        >>> normalize_time_unit("fortnight") is None
        True
    """
    return _ALIASES.get(name.strip().lower())


def is_time_unit(name: str) -> bool:
    return normalize_time_unit(name) is not None


def seconds_in(unit: TimeUnit) -> Decimal:
    """Количество секунд в одной единице."""
    return SECONDS_PER_UNIT[unit]


def to_seconds(value: Decimal, unit: TimeUnit) -> Decimal:
    return value * SECONDS_PER_UNIT[unit]


def from_seconds(seconds: Decimal, unit: TimeUnit) -> Decimal:
    return seconds / SECONDS_PER_UNIT[unit]
