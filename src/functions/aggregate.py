"""
Aggregate — avg/average и sqrt.
"""

from decimal import Decimal
from typing import Sequence

from src.core.domain.values import Currency, Number, Value, type_name
from src.core.errors import ArgumentCountError, ArgumentTypeError, IncompatibleCurrenciesError
from src.core.math.numerical_safeguards import safe_sqrt


def average(*args: Value) -> Number | Currency:
    """
    Среднее арифметическое.

    Все аргументы Number → Number; все Currency одного кода → Currency.

    Raises:
        ArgumentCountError: нет аргументов
        ArgumentTypeError: аргумент не Number/Currency или смешаны Number и Currency
        IncompatibleCurrenciesError: разные коды валют
    """
    if not args:
        raise ArgumentCountError("avg() requires at least one argument")

    values: Sequence[Value] = args
    first = values[0]
    if isinstance(first, Number):
        for arg in values:
            if not isinstance(arg, Number):
                raise ArgumentTypeError(
                    f"avg() arguments must all be numbers, got {type_name(arg)}"
                )
        total = sum((arg.value for arg in values), Decimal(0))
        return Number(value=total / len(values))

    if isinstance(first, Currency):
        for arg in values:
            if not isinstance(arg, Currency):
                raise ArgumentTypeError(
                    f"avg() arguments must all be currency amounts, got {type_name(arg)}"
                )
            if arg.code != first.code:
                raise IncompatibleCurrenciesError(
                    f"avg() cannot mix currencies {first.code} and {arg.code}"
                )
        total = sum((arg.value for arg in values), Decimal(0))
        return first.with_value(total / len(values))

    raise ArgumentTypeError(
        f"avg() arguments must be numbers or currency amounts, got {type_name(first)}"
    )


def square_root(value: Value) -> Number:
    """
    Квадратный корень неотрицательного Number.

    Raises:
        ArgumentTypeError: аргумент не Number
        NegativeValueError: отрицательный аргумент
    """
    if not isinstance(value, Number):
        raise ArgumentTypeError(f"sqrt() argument must be a number, got {type_name(value)}")
    return Number(value=safe_sqrt(value.value))
