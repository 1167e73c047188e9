"""
Values — закрытая модель результатов вычислителя

Immutable Pydantic модели для каждого варианта Value:
Number, Currency, Quantity, Rate, Duration, Date, Time, Boolean.

Каждая модель несёт поле `kind` (дискриминатор) и каноническое строковое
представление через __str__. Эти строки используются для отображения и
в тестах, поэтому формат фиксирован:

- Number:   "1200", "0.2" (без экспоненты и хвостовых нулей)
- Currency: "$100.00", "EUR5.50" (символ + 2 знака, half-up)
- Quantity: "5 disk"
- Rate:     "100 MB/s", "$0.10/h"
- Duration: "43.2 minute"
- Date:     "Friday, November 22, 2024"
- Time:     "14:30:00" или "14:30:00 +0530"
- Boolean:  "true" / "false"

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все модели frozen — операции возвращают новые значения
2. Duration.unit и Rate.per_unit проходят через общую таблицу time_units
3. Currency.code всегда в верхнем регистре; известный символ → ISO код
"""

import datetime
from decimal import Decimal
from typing import Annotated, Any, Final, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from src.core.domain.time_units import RATE_ABBREVIATIONS, TimeUnit, normalize_time_unit
from src.core.math.numerical_safeguards import format_decimal, format_fixed


# =============================================================================
# CURRENCY SYMBOLS
# =============================================================================

SYMBOL_TO_CODE: Final[dict[str, str]] = {
    "$": "USD",
    "€": "EUR",
    "£": "GBP",
    "¥": "JPY",
}

CODE_TO_SYMBOL: Final[dict[str, str]] = {code: symbol for symbol, code in SYMBOL_TO_CODE.items()}


def normalize_currency_code(symbol_or_code: str) -> str:
    """
    Символ или код → ISO код.

    Examples:
        >>> normalize_currency_code("€")
        'EUR'
        >>> normalize_currency_code("usd")
        'USD'
    """
    marker = symbol_or_code.strip()
    return SYMBOL_TO_CODE.get(marker, marker.upper())


def is_currency_marker(text: str) -> bool:
    """Известный символ ($ € £ ¥) или ISO код (USD, EUR, GBP, JPY)."""
    marker = text.strip()
    return marker in SYMBOL_TO_CODE or marker.upper() in CODE_TO_SYMBOL


_MONTH_NAMES: Final[tuple[str, ...]] = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

_WEEKDAY_NAMES: Final[tuple[str, ...]] = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)


def _validate_time_unit(v: Any) -> TimeUnit:
    if isinstance(v, TimeUnit):
        return v
    if not isinstance(v, str):
        raise ValueError(f"time unit must be a string, got {type(v).__name__}")
    unit = normalize_time_unit(v)
    if unit is None:
        raise ValueError(f"unknown time unit: {v!r}")
    return unit


# =============================================================================
# SCALAR VALUES
# =============================================================================


class Number(BaseModel):
    """Безразмерное decimal-число произвольной точности."""

    kind: Literal["number"] = "number"
    value: Decimal = Field(..., description="Значение")

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return format_decimal(self.value)


class Currency(BaseModel):
    """
    Денежная сумма.

    symbol сохраняется для отображения ("$" против "USD"), code используется
    для сравнения совместимости в арифметике.
    """

    kind: Literal["currency"] = "currency"
    value: Decimal = Field(..., description="Сумма")
    code: str = Field(..., min_length=1, description="ISO 4217 код (USD, EUR, ...)")
    symbol: str = Field(..., min_length=1, description="Символ для отображения")

    model_config = {"frozen": True}

    @field_validator("code")
    @classmethod
    def validate_code_upper(cls, v: str) -> str:
        """Код всегда в верхнем регистре"""
        return v.strip().upper()

    @classmethod
    def of(cls, value: Decimal, symbol_or_code: str) -> "Currency":
        """
        Создание из символа или кода.

        Известный символ ($, €, £, ¥) отображается в ISO код;
        иначе строка используется и как символ, и как код.
        """
        marker = symbol_or_code.strip()
        return cls(value=value, code=normalize_currency_code(marker), symbol=marker)

    @classmethod
    def in_code(cls, value: Decimal, code: str) -> "Currency":
        """Создание по ISO коду с каноническим символом (USD → $)."""
        upper = code.strip().upper()
        return cls(value=value, code=upper, symbol=CODE_TO_SYMBOL.get(upper, upper))

    def with_value(self, value: Decimal) -> "Currency":
        return self.model_copy(update={"value": value})

    def __str__(self) -> str:
        return f"{self.symbol}{format_fixed(self.value, 2)}"


class Quantity(BaseModel):
    """
    Физическая или произвольная величина.

    unit — известная единица реестра или произвольная строка
    ("disk", "server"), сравниваемая только по точному совпадению.
    """

    kind: Literal["quantity"] = "quantity"
    value: Decimal = Field(..., description="Значение")
    unit: str = Field(..., description="Имя единицы (пустая строка — безразмерный счётчик)")

    model_config = {"frozen": True}

    def with_value(self, value: Decimal) -> "Quantity":
        return self.model_copy(update={"value": value})

    def __str__(self) -> str:
        if not self.unit:
            return format_decimal(self.value)
        return f"{format_decimal(self.value)} {self.unit}"


class Duration(BaseModel):
    """Длительность в одной из канонических единиц времени."""

    kind: Literal["duration"] = "duration"
    value: Decimal = Field(..., description="Значение")
    unit: TimeUnit = Field(..., description="Каноническая единица времени")

    model_config = {"frozen": True}

    @field_validator("unit", mode="before")
    @classmethod
    def validate_unit(cls, v: Any) -> TimeUnit:
        """Нормализация написания (hrs → hour)"""
        return _validate_time_unit(v)

    def __str__(self) -> str:
        return f"{format_decimal(self.value)} {self.unit.value}"


RateAmount = Annotated[Union[Quantity, Currency], Field(discriminator="kind")]


class Rate(BaseModel):
    """
    Величина за единицу времени: 100 MB/s, $0.10/hour, 1000 req/s.

    amount — Quantity (включая безразмерную) или Currency.
    """

    kind: Literal["rate"] = "rate"
    amount: RateAmount = Field(..., description="Числитель ставки")
    per_unit: TimeUnit = Field(..., description="Знаменатель (единица времени)")

    model_config = {"frozen": True}

    @field_validator("per_unit", mode="before")
    @classmethod
    def validate_per_unit(cls, v: Any) -> TimeUnit:
        """Нормализация написания (s → second)"""
        return _validate_time_unit(v)

    @property
    def amount_value(self) -> Decimal:
        return self.amount.value

    @property
    def amount_unit(self) -> str:
        """Единица числителя; для денежной ставки — ISO код."""
        if isinstance(self.amount, Currency):
            return self.amount.code
        return self.amount.unit

    def with_amount_value(self, value: Decimal) -> "Rate":
        return self.model_copy(update={"amount": self.amount.with_value(value)})

    def __str__(self) -> str:
        return f"{self.amount}/{RATE_ABBREVIATIONS[self.per_unit]}"


class Date(BaseModel):
    """Календарная дата без времени суток."""

    kind: Literal["date"] = "date"
    value: datetime.date = Field(..., description="Дата")

    model_config = {"frozen": True}

    def __str__(self) -> str:
        d = self.value
        return f"{_WEEKDAY_NAMES[d.weekday()]}, {_MONTH_NAMES[d.month - 1]} {d.day}, {d.year}"


class Time(BaseModel):
    """
    Время суток с необязательными секундами и смещением от UTC.

    Смещение хранится в минутах; при наличии отображается как "+0530".
    """

    kind: Literal["time"] = "time"
    hour: int = Field(..., ge=0, le=23, description="Час (0-23)")
    minute: int = Field(..., ge=0, le=59, description="Минута (0-59)")
    second: int | None = Field(None, ge=0, le=59, description="Секунда (0-59), если указана")
    utc_offset_minutes: int | None = Field(
        None, ge=-14 * 60, le=14 * 60, description="Смещение от UTC в минутах"
    )

    model_config = {"frozen": True}

    def __str__(self) -> str:
        text = f"{self.hour:02d}:{self.minute:02d}:{self.second or 0:02d}"
        if self.utc_offset_minutes is None:
            return text
        sign = "-" if self.utc_offset_minutes < 0 else "+"
        hours, minutes = divmod(abs(self.utc_offset_minutes), 60)
        return f"{text} {sign}{hours:02d}{minutes:02d}"


class Boolean(BaseModel):
    kind: Literal["boolean"] = "boolean"
    value: bool

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return "true" if self.value else "false"


# =============================================================================
# VALUE UNION & SERIALIZATION
# =============================================================================

Value = Annotated[
    Union[Number, Currency, Quantity, Rate, Duration, Date, Time, Boolean],
    Field(discriminator="kind"),
]

VALUE_TYPES: Final[tuple[type, ...]] = (
    Number, Currency, Quantity, Rate, Duration, Date, Time, Boolean,
)

_VALUE_ADAPTER: TypeAdapter = TypeAdapter(Value)


def type_name(value: Any) -> str:
    """Имя варианта для сообщений об ошибках ("Quantity", "Boolean")."""
    return type(value).__name__


def to_payload(value: BaseModel) -> dict[str, Any]:
    """
    Сериализация Value в JSON-совместимый dict.

    Decimal → строка, дата → ISO-8601, TimeUnit → каноническое имя.
    """
    return value.model_dump(mode="json")


def from_payload(data: dict[str, Any]) -> BaseModel:
    """
    Восстановление Value из payload.

    Raises:
        pydantic.ValidationError: если payload не описывает Value
    """
    return _VALUE_ADAPTER.validate_python(data)
