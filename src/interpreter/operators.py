"""
Operator Dispatch — матрица приведения типов

Результат бинарной операции определяется ПАРОЙ типов операндов.
Фиксированный case analysis по (type(left), type(right)):

- Number ⊕ Number → Number
- Currency ± Currency → Currency (разные коды — через курс, иначе ошибка)
- Currency / Currency → Number (отношение)
- Currency ⊕ Number → Currency; Number × Currency → Currency
- Quantity ± Quantity → first-unit-wins
- Quantity ⊕ Number, Number ⊕ Quantity → единица Quantity сохраняется
- Rate ± Rate → first-rate-wins; Rate × ÷ Number; Rate × Duration → накопленная величина
- Date ± Duration → Date; Date − Date → Duration (дни, left − right)
- Duration ± Duration → Duration в единице левого операнда; Duration × ÷ Number
- Всё остальное → UnsupportedOperationError

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. First-unit-wins: a U1 + b U2 несёт U1, b U2 + a U1 несёт U2
2. Несовместимые измерения — всегда ошибка, никогда не молчаливое приведение
3. Ошибка конверсии никогда не заменяется исходным числом
"""

import datetime
from decimal import Decimal
from typing import Callable, Final, Protocol

from src.core.domain.time_units import SECONDS_PER_DAY, from_seconds, seconds_in, to_seconds
from src.core.domain.values import (
    Boolean,
    Currency,
    Date,
    Duration,
    Number,
    Quantity,
    Rate,
    Value,
    type_name,
)
from src.core.errors import (
    IncompatibleCurrenciesError,
    OutOfRangeError,
    UnsupportedOperationError,
)
from src.core.math.numerical_safeguards import (
    safe_divide,
    safe_modulo,
    safe_power,
)
from src.core.units.registry import UNIT_REGISTRY, UnitRegistry
from src.functions.rates import accumulate_over

ARITHMETIC_OPERATORS: Final[frozenset[str]] = frozenset({"+", "-", "*", "/", "%", "^"})
COMPARISON_OPERATORS: Final[frozenset[str]] = frozenset({">", "<", ">=", "<=", "==", "!="})


class ExchangeRates(Protocol):
    """Источник курсов валют (Environment)."""

    def get_exchange_rate(self, from_code: str, to_code: str) -> Decimal | None:
        ...


class _NoRates:
    def get_exchange_rate(self, from_code: str, to_code: str) -> Decimal | None:
        return None


NO_RATES: Final[ExchangeRates] = _NoRates()


def _unsupported(left: Value, operator: str, right: Value) -> UnsupportedOperationError:
    return UnsupportedOperationError(
        f"unsupported operation: {type_name(left)} {operator} {type_name(right)}"
    )


# =============================================================================
# SCALAR ARITHMETIC
# =============================================================================


def apply_arithmetic(left: Decimal, right: Decimal, operator: str) -> Decimal:
    """
    Decimal-арифметика для + - * / % ^.

    Raises:
        DivisionByZeroError: / или % на ноль
        OutOfRangeError: невычислимая степень
        UnsupportedOperationError: неизвестный оператор
    """
    if operator == "+":
        return left + right
    if operator == "-":
        return left - right
    if operator == "*":
        return left * right
    if operator == "/":
        return safe_divide(left, right)
    if operator == "%":
        return safe_modulo(left, right)
    if operator == "^":
        return safe_power(left, right)
    raise UnsupportedOperationError(f"unknown operator: {operator!r}")


# =============================================================================
# CURRENCY
# =============================================================================


def convert_currency(amount: Currency, target_code: str, rates: ExchangeRates) -> Currency:
    """
    Перевод суммы в другую валюту.

    Используется прямой курс FROM_TO, иначе обратный к TO_FROM.
    Результат несёт канонический символ целевой валюты.

    Raises:
        IncompatibleCurrenciesError: курс не задан
    """
    target = target_code.strip().upper()
    if amount.code == target:
        return amount
    direct = rates.get_exchange_rate(amount.code, target)
    if direct is not None:
        return Currency.in_code(amount.value * direct, target)
    inverse = rates.get_exchange_rate(target, amount.code)
    if inverse is not None and not inverse.is_zero():
        return Currency.in_code(amount.value / inverse, target)
    raise IncompatibleCurrenciesError(
        f"no exchange rate defined between {amount.code} and {target}"
    )


def _align_currency(left: Currency, right: Currency, operator: str, rates: ExchangeRates) -> Decimal:
    """Значение right в валюте left."""
    if left.code == right.code:
        return right.value
    try:
        return convert_currency(right, left.code, rates).value
    except IncompatibleCurrenciesError as e:
        raise IncompatibleCurrenciesError(
            f"cannot apply {operator!r} to different currencies {left.code} and {right.code} "
            f"without an exchange rate"
        ) from e


def _currency_currency(left: Currency, right: Currency, operator: str, rates: ExchangeRates) -> Value:
    if operator in ("+", "-"):
        aligned = _align_currency(left, right, operator, rates)
        return left.with_value(apply_arithmetic(left.value, aligned, operator))
    if operator == "/":
        aligned = _align_currency(left, right, operator, rates)
        return Number(value=safe_divide(left.value, aligned))
    raise _unsupported(left, operator, right)


def _currency_number(left: Currency, right: Number, operator: str, rates: ExchangeRates) -> Value:
    if operator in ("+", "-", "*", "/"):
        return left.with_value(apply_arithmetic(left.value, right.value, operator))
    raise _unsupported(left, operator, right)


def _number_currency(left: Number, right: Currency, operator: str, rates: ExchangeRates) -> Value:
    if operator == "*":
        return right.with_value(left.value * right.value)
    raise _unsupported(left, operator, right)


# =============================================================================
# QUANTITY
# =============================================================================


def convert_quantity_value(
    quantity: Quantity, target_unit: str, registry: UnitRegistry = UNIT_REGISTRY
) -> Decimal:
    """Значение quantity в target_unit (identity при текстуальном совпадении)."""
    if quantity.unit == target_unit:
        return quantity.value
    return registry.convert_value(quantity.value, quantity.unit, target_unit)


def _quantity_quantity(left: Quantity, right: Quantity, operator: str, rates: ExchangeRates) -> Value:
    if operator not in ("+", "-"):
        raise UnsupportedOperationError(
            f"unsupported operation: Quantity {operator} Quantity ({left.unit!r}, {right.unit!r})"
        )
    aligned = convert_quantity_value(right, left.unit)
    return left.with_value(apply_arithmetic(left.value, aligned, operator))


def _quantity_number(left: Quantity, right: Number, operator: str, rates: ExchangeRates) -> Value:
    if operator in ("+", "-", "*", "/"):
        return left.with_value(apply_arithmetic(left.value, right.value, operator))
    raise _unsupported(left, operator, right)


def _number_quantity(left: Number, right: Quantity, operator: str, rates: ExchangeRates) -> Value:
    if operator in ("+", "-", "*"):
        return right.with_value(apply_arithmetic(left.value, right.value, operator))
    raise _unsupported(left, operator, right)


# =============================================================================
# RATE
# =============================================================================


def _align_rate_amount(left: Rate, right: Rate, rates: ExchangeRates) -> Decimal:
    """Числитель right в единице числителя left и на временной базе left."""
    if isinstance(left.amount, Currency) and isinstance(right.amount, Currency):
        amount = _align_currency(left.amount, right.amount, "+", rates)
    elif isinstance(left.amount, Quantity) and isinstance(right.amount, Quantity):
        amount = convert_quantity_value(right.amount, left.amount.unit)
    else:
        raise UnsupportedOperationError(
            f"cannot combine rates {left} and {right}: currency and quantity amounts"
        )
    if left.per_unit == right.per_unit:
        return amount
    return amount * seconds_in(left.per_unit) / seconds_in(right.per_unit)


def _rate_rate(left: Rate, right: Rate, operator: str, rates: ExchangeRates) -> Value:
    if operator not in ("+", "-"):
        raise _unsupported(left, operator, right)
    aligned = _align_rate_amount(left, right, rates)
    return left.with_amount_value(apply_arithmetic(left.amount_value, aligned, operator))


def _rate_number(left: Rate, right: Number, operator: str, rates: ExchangeRates) -> Value:
    if operator in ("*", "/"):
        return left.with_amount_value(apply_arithmetic(left.amount_value, right.value, operator))
    raise _unsupported(left, operator, right)


def _number_rate(left: Number, right: Rate, operator: str, rates: ExchangeRates) -> Value:
    if operator == "*":
        return right.with_amount_value(left.value * right.amount_value)
    raise _unsupported(left, operator, right)


def _rate_duration(left: Rate, right: Duration, operator: str, rates: ExchangeRates) -> Value:
    if operator == "*":
        return accumulate_over(left, to_seconds(right.value, right.unit))
    raise _unsupported(left, operator, right)


def _duration_rate(left: Duration, right: Rate, operator: str, rates: ExchangeRates) -> Value:
    if operator == "*":
        return accumulate_over(right, to_seconds(left.value, left.unit))
    raise _unsupported(left, operator, right)


# =============================================================================
# DATE & DURATION
# =============================================================================


def duration_to_whole_days(duration: Duration) -> int:
    """Длительность в целых днях (усечение к нулю): 36 hours → 1."""
    return int(to_seconds(duration.value, duration.unit) / SECONDS_PER_DAY)


def _date_duration(left: Date, right: Duration, operator: str, rates: ExchangeRates) -> Value:
    if operator not in ("+", "-"):
        raise _unsupported(left, operator, right)
    days = duration_to_whole_days(right)
    if operator == "-":
        days = -days
    try:
        return Date(value=left.value + datetime.timedelta(days=days))
    except OverflowError as e:
        raise OutOfRangeError(f"date out of range: {left} {operator} {right}") from e


def _date_date(left: Date, right: Date, operator: str, rates: ExchangeRates) -> Value:
    if operator != "-":
        raise UnsupportedOperationError(f"can only subtract dates, not {operator!r}")
    days = (left.value - right.value).days
    return Duration(value=Decimal(days), unit="day")


def _duration_duration(left: Duration, right: Duration, operator: str, rates: ExchangeRates) -> Value:
    if operator not in ("+", "-"):
        raise _unsupported(left, operator, right)
    total = apply_arithmetic(
        to_seconds(left.value, left.unit), to_seconds(right.value, right.unit), operator
    )
    return Duration(value=from_seconds(total, left.unit), unit=left.unit)


def _duration_number(left: Duration, right: Number, operator: str, rates: ExchangeRates) -> Value:
    if operator in ("*", "/"):
        return Duration(value=apply_arithmetic(left.value, right.value, operator), unit=left.unit)
    raise _unsupported(left, operator, right)


def _number_duration(left: Number, right: Duration, operator: str, rates: ExchangeRates) -> Value:
    if operator == "*":
        return Duration(value=left.value * right.value, unit=right.unit)
    raise _unsupported(left, operator, right)


def _number_number(left: Number, right: Number, operator: str, rates: ExchangeRates) -> Value:
    return Number(value=apply_arithmetic(left.value, right.value, operator))


# =============================================================================
# DISPATCH
# =============================================================================

_Handler = Callable[[Value, Value, str, ExchangeRates], Value]

_BINARY_HANDLERS: Final[dict[tuple[type, type], _Handler]] = {
    (Number, Number): _number_number,
    (Currency, Currency): _currency_currency,
    (Currency, Number): _currency_number,
    (Number, Currency): _number_currency,
    (Quantity, Quantity): _quantity_quantity,
    (Quantity, Number): _quantity_number,
    (Number, Quantity): _number_quantity,
    (Rate, Rate): _rate_rate,
    (Rate, Number): _rate_number,
    (Number, Rate): _number_rate,
    (Rate, Duration): _rate_duration,
    (Duration, Rate): _duration_rate,
    (Date, Duration): _date_duration,
    (Date, Date): _date_date,
    (Duration, Duration): _duration_duration,
    (Duration, Number): _duration_number,
    (Number, Duration): _number_duration,
}


def binary_operation(
    left: Value, right: Value, operator: str, rates: ExchangeRates = NO_RATES
) -> Value:
    """
    Бинарная операция над двумя Value.

    Args:
        left: Левый операнд
        right: Правый операнд
        operator: Один из + - * / % ^
        rates: Источник курсов для операций над разными валютами

    Raises:
        UnsupportedOperationError: пара типов или оператор не определены
        IncompatibleUnitsError: единицы разных категорий или произвольные
        IncompatibleCurrenciesError: разные валюты без курса
        DivisionByZeroError: деление на ноль
    """
    if operator not in ARITHMETIC_OPERATORS:
        raise UnsupportedOperationError(f"unknown operator: {operator!r}")
    handler = _BINARY_HANDLERS.get((type(left), type(right)))
    if handler is None:
        raise _unsupported(left, operator, right)
    return handler(left, right, operator, rates)


def unary_operation(operand: Value, operator: str) -> Value:
    """Унарные - и + — только для Number и Currency."""
    if operator not in ("-", "+"):
        raise UnsupportedOperationError(f"unknown unary operator: {operator!r}")
    if isinstance(operand, (Number, Currency)):
        if operator == "-":
            return operand.model_copy(update={"value": -operand.value})
        return operand
    raise UnsupportedOperationError(
        f"unsupported unary operation: {operator}{type_name(operand)}"
    )


def _compare_decimals(left: Decimal, right: Decimal, operator: str) -> bool:
    if operator == ">":
        return left > right
    if operator == "<":
        return left < right
    if operator == ">=":
        return left >= right
    if operator == "<=":
        return left <= right
    if operator == "==":
        return left == right
    return left != right


def comparison_operation(left: Value, right: Value, operator: str) -> Boolean:
    """
    Сравнение: Number/Number, Currency/Currency одного кода, Boolean/Boolean (== и !=).

    Raises:
        IncompatibleCurrenciesError: валюты с разными кодами
        UnsupportedOperationError: любая другая пара типов
    """
    if operator not in COMPARISON_OPERATORS:
        raise UnsupportedOperationError(f"unknown comparison operator: {operator!r}")

    if isinstance(left, Number) and isinstance(right, Number):
        return Boolean(value=_compare_decimals(left.value, right.value, operator))

    if isinstance(left, Currency) and isinstance(right, Currency):
        if left.code != right.code:
            raise IncompatibleCurrenciesError(
                f"cannot compare different currencies: {left.code} and {right.code}"
            )
        return Boolean(value=_compare_decimals(left.value, right.value, operator))

    if isinstance(left, Boolean) and isinstance(right, Boolean):
        if operator == "==":
            return Boolean(value=left.value == right.value)
        if operator == "!=":
            return Boolean(value=left.value != right.value)
        raise UnsupportedOperationError(f"unsupported boolean comparison: {operator!r}")

    raise UnsupportedOperationError(
        f"unsupported comparison: {type_name(left)} {operator} {type_name(right)}"
    )
