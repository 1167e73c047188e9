"""
Domain value model.

Contains the closed set of result types (Number, Currency, Quantity, Rate,
Duration, Date, Time, Boolean) and the shared time-unit table.
"""

from src.core.domain.time_units import (
    RATE_ABBREVIATIONS,
    SECONDS_PER_DAY,
    SECONDS_PER_UNIT,
    TimeUnit,
    from_seconds,
    is_time_unit,
    normalize_time_unit,
    seconds_in,
    to_seconds,
)
from src.core.domain.values import (
    CODE_TO_SYMBOL,
    SYMBOL_TO_CODE,
    VALUE_TYPES,
    Boolean,
    Currency,
    Date,
    Duration,
    Number,
    Quantity,
    Rate,
    Time,
    Value,
    from_payload,
    is_currency_marker,
    normalize_currency_code,
    to_payload,
    type_name,
)

__all__ = [
    # Time units
    "TimeUnit",
    "SECONDS_PER_UNIT",
    "SECONDS_PER_DAY",
    "RATE_ABBREVIATIONS",
    "normalize_time_unit",
    "is_time_unit",
    "seconds_in",
    "to_seconds",
    "from_seconds",
    # Values
    "Number",
    "Currency",
    "Quantity",
    "Rate",
    "Duration",
    "Date",
    "Time",
    "Boolean",
    "Value",
    "VALUE_TYPES",
    # Currency symbols
    "SYMBOL_TO_CODE",
    "CODE_TO_SYMBOL",
    "normalize_currency_code",
    "is_currency_marker",
    # Serialization
    "to_payload",
    "from_payload",
    "type_name",
]
