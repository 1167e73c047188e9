"""
Expression tree — узлы, которые производит parser

Закрытый набор типов узлов. Evaluator обрабатывает только их;
любой другой объект — внутренняя ошибка (InternalEvaluationError).

Литералы несут исходный текст payload (например, NumberLiteral("1.2k")),
разбор в Value выполняет evaluator.
"""

from dataclasses import dataclass, field
from typing import Union


# =============================================================================
# LITERALS
# =============================================================================


@dataclass(frozen=True)
class NumberLiteral:
    """Число: "1200", "1,200", "1.2k", "20%", "1.5e3"."""

    value: str


@dataclass(frozen=True)
class CurrencyLiteral:
    """Денежная сумма: symbol "$" / "USD", value "100"."""

    symbol: str
    value: str


@dataclass(frozen=True)
class BooleanLiteral:
    value: str


@dataclass(frozen=True)
class DateLiteral:
    """Дата "Dec 25" или "December 25 2024"; year=None — текущий год."""

    month: str
    day: str
    year: str | None = None


@dataclass(frozen=True)
class RelativeDateLiteral:
    """today / tomorrow / yesterday / now."""

    keyword: str


@dataclass(frozen=True)
class UTCOffset:
    """UTC+5:30 → sign "+", hours "5", minutes "30"."""

    sign: str
    hours: str
    minutes: str | None = None


@dataclass(frozen=True)
class TimeLiteral:
    """Время "10:30", "10:30:45PM", "14:30 UTC-7"."""

    hour: str
    minute: str
    second: str | None = None
    period: str | None = None
    utc_offset: UTCOffset | None = None


@dataclass(frozen=True)
class DurationLiteral:
    value: str
    unit: str


@dataclass(frozen=True)
class QuantityLiteral:
    value: str
    unit: str


@dataclass(frozen=True)
class RateLiteral:
    """amount — узел числителя (Quantity, Number или Currency), per_unit — единица времени."""

    amount: "Node"
    per_unit: str


# =============================================================================
# NAMES & ASSIGNMENT
# =============================================================================


@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class Assignment:
    name: str
    value: "Node"


@dataclass(frozen=True)
class FrontmatterAssignment:
    """@namespace.property = value, namespace ∈ {global, exchange}."""

    namespace: str
    property: str
    value: "Node"


# =============================================================================
# OPERATORS
# =============================================================================


@dataclass(frozen=True)
class BinaryOp:
    """operator ∈ {+, -, *, /, %, ^}."""

    operator: str
    left: "Node"
    right: "Node"


@dataclass(frozen=True)
class UnaryOp:
    """operator ∈ {-, +}."""

    operator: str
    operand: "Node"


@dataclass(frozen=True)
class ComparisonOp:
    """operator ∈ {>, <, >=, <=, ==, !=}."""

    operator: str
    left: "Node"
    right: "Node"


# =============================================================================
# CONVERSIONS & CALLS
# =============================================================================


@dataclass(frozen=True)
class UnitConversion:
    """
    "X in Y".

    target_time_unit задаётся для целей вида "GB per hour":
    target_unit — единица числителя, target_time_unit — знаменатель.
    """

    expression: "Node"
    target_unit: str
    target_time_unit: str | None = None


@dataclass(frozen=True)
class PercentageOf:
    """"10% of 200"."""

    percentage: "Node"
    value: "Node"


@dataclass(frozen=True)
class NapkinConversion:
    """"1234567 as napkin"."""

    expression: "Node"


@dataclass(frozen=True)
class FunctionCall:
    name: str
    arguments: tuple["Node", ...] = field(default_factory=tuple)


Node = Union[
    NumberLiteral,
    CurrencyLiteral,
    BooleanLiteral,
    DateLiteral,
    RelativeDateLiteral,
    TimeLiteral,
    DurationLiteral,
    QuantityLiteral,
    RateLiteral,
    Identifier,
    Assignment,
    FrontmatterAssignment,
    BinaryOp,
    UnaryOp,
    ComparisonOp,
    UnitConversion,
    PercentageOf,
    NapkinConversion,
    FunctionCall,
]
