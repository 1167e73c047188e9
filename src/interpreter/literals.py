"""
Literals — разбор текстовых payload литералов в Value

Правила чисел:
- разделители тысяч "," и "_" удаляются
- научная нотация: "1.2e10"
- процент: "20%" → 0.20
- суффиксы: k/K = 1e3, M = 1e6, B = 1e9, T = 1e12

Булевы ключевые слова (регистр не важен): true/false/yes/no.

Ошибки разбора — InvalidLiteralError с исходным текстом в сообщении.
"""

import datetime
from decimal import Decimal, InvalidOperation
from typing import Final

from src.core.domain.values import Boolean, Date, Time
from src.core.errors import InvalidLiteralError
from src.interpreter.ast import UTCOffset

_MULTIPLIERS: Final[dict[str, Decimal]] = {
    "k": Decimal(1000),
    "K": Decimal(1000),
    "M": Decimal(1000000),
    "B": Decimal(1000000000),
    "T": Decimal(1000000000000),
}

BOOLEAN_KEYWORDS: Final[dict[str, bool]] = {
    "true": True,
    "false": False,
    "yes": True,
    "no": False,
}

_MONTHS: Final[dict[str, int]] = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

_RELATIVE_DAYS: Final[dict[str, int]] = {
    "today": 0,
    "now": 0,
    "tomorrow": 1,
    "yesterday": -1,
}


def _to_decimal(text: str, original: str) -> Decimal:
    try:
        value = Decimal(text)
    except InvalidOperation as e:
        raise InvalidLiteralError(f"invalid number literal {original!r}") from e
    if not value.is_finite():
        raise InvalidLiteralError(f"invalid number literal {original!r}")
    return value


def parse_number(text: str) -> Decimal:
    """
    Разбор числового литерала.

    Examples:
        >>> parse_number("1.2k")
        Decimal('1200.0')
        >>> parse_number("20%")
        Decimal('0.2')
        >>> parse_number("1,000,000")
        Decimal('1000000')

    Raises:
        InvalidLiteralError: пустой или нечисловой текст
    """
    cleaned = text.strip().replace(",", "").replace("_", "")
    if not cleaned:
        raise InvalidLiteralError("empty number literal")

    if "e" in cleaned or "E" in cleaned:
        return _to_decimal(cleaned, text)

    if cleaned.endswith("%"):
        return _to_decimal(cleaned[:-1], text) / Decimal(100)

    multiplier = _MULTIPLIERS.get(cleaned[-1])
    if multiplier is not None:
        return _to_decimal(cleaned[:-1], text) * multiplier

    return _to_decimal(cleaned, text)


def is_boolean_keyword(text: str) -> bool:
    return text.strip().lower() in BOOLEAN_KEYWORDS


def parse_boolean(text: str) -> Boolean:
    """true/false/yes/no → Boolean."""
    normalized = text.strip().lower()
    if normalized not in BOOLEAN_KEYWORDS:
        raise InvalidLiteralError(f"invalid boolean value {text!r}")
    return Boolean(value=BOOLEAN_KEYWORDS[normalized])


def parse_int(text: str, field: str) -> int:
    try:
        return int(text.strip())
    except ValueError as e:
        raise InvalidLiteralError(f"invalid {field} {text!r}") from e


def parse_month(text: str) -> int:
    month = _MONTHS.get(text.strip().lower())
    if month is None:
        raise InvalidLiteralError(f"invalid month {text!r}")
    return month


def build_date(month: str, day: str, year: str | None, today: datetime.date) -> Date:
    """
    Дата из частей литерала. Без года — текущий год (по today).

    Raises:
        InvalidLiteralError: несуществующая дата (Feb 30)
    """
    month_number = parse_month(month)
    day_number = parse_int(day, "day")
    year_number = parse_int(year, "year") if year is not None else today.year
    try:
        value = datetime.date(year_number, month_number, day_number)
    except ValueError as e:
        raise InvalidLiteralError(
            f"invalid date: year={year_number}, month={month_number}, day={day_number}"
        ) from e
    return Date(value=value)


def relative_date(keyword: str, today: datetime.date) -> Date:
    """today/now, tomorrow, yesterday относительно today."""
    offset = _RELATIVE_DAYS.get(keyword.strip().lower())
    if offset is None:
        raise InvalidLiteralError(f"unknown relative date keyword {keyword!r}")
    return Date(value=today + datetime.timedelta(days=offset))


def utc_offset_minutes(offset: UTCOffset) -> int:
    """
    Смещение UTC в минутах.

    Examples:
        UTC+5:30 → 330, UTC-7 → -420
    """
    total = parse_int(offset.hours, "utc offset hours") * 60
    if offset.minutes is not None:
        total += parse_int(offset.minutes, "utc offset minutes")
    if offset.sign == "-":
        total = -total
    elif offset.sign != "+":
        raise InvalidLiteralError(f"invalid utc offset sign {offset.sign!r}")
    return total


def build_time(
    hour: str,
    minute: str,
    second: str | None,
    period: str | None,
    offset: UTCOffset | None,
) -> Time:
    """
    Время из частей литерала; 12-часовой формат с AM/PM переводится в 24-часовой.

    Raises:
        InvalidLiteralError: час/минута/секунда вне диапазона
    """
    hour_number = parse_int(hour, "hour")
    minute_number = parse_int(minute, "minute")
    second_number = parse_int(second, "second") if second is not None else None

    if period is not None:
        marker = period.strip().upper()
        if marker not in ("AM", "PM"):
            raise InvalidLiteralError(f"invalid time period {period!r}")
        if not 1 <= hour_number <= 12:
            raise InvalidLiteralError(f"invalid hour: {hour_number} (must be 1-12 with {marker})")
        if marker == "PM" and hour_number != 12:
            hour_number += 12
        elif marker == "AM" and hour_number == 12:
            hour_number = 0

    if not 0 <= hour_number <= 23:
        raise InvalidLiteralError(f"invalid hour: {hour_number} (must be 0-23)")
    if not 0 <= minute_number <= 59:
        raise InvalidLiteralError(f"invalid minute: {minute_number} (must be 0-59)")
    if second_number is not None and not 0 <= second_number <= 59:
        raise InvalidLiteralError(f"invalid second: {second_number} (must be 0-59)")

    return Time(
        hour=hour_number,
        minute=minute_number,
        second=second_number,
        utc_offset_minutes=utc_offset_minutes(offset) if offset is not None else None,
    )
