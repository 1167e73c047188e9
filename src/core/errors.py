"""
Errors — таксономия ошибок вычислителя

Каждая пользовательская ошибка — подкласс CalcError с фиксированным ErrorKind.
Вызывающая сторона (документ, CLI, редактор) может различать ошибки по kind,
не разбирая текст сообщения.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Любая CalcError прерывает текущий batch evaluate целиком
2. Ошибка никогда не заменяется значением по умолчанию
3. InternalEvaluationError — ошибка реализации, НЕ пользовательская
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Вид ошибки вычисления"""

    UNDEFINED_IDENTIFIER = "undefined_identifier"
    UNKNOWN_FUNCTION = "unknown_function"
    WRONG_ARGUMENT_COUNT = "wrong_argument_count"
    WRONG_ARGUMENT_TYPE = "wrong_argument_type"
    DIVISION_BY_ZERO = "division_by_zero"
    NEGATIVE_VALUE = "negative_value"
    OUT_OF_RANGE = "out_of_range"
    INCOMPATIBLE_UNITS = "incompatible_units"
    INCOMPATIBLE_CURRENCIES = "incompatible_currencies"
    UNKNOWN_KEYWORD = "unknown_keyword"
    UNSUPPORTED_OPERATION = "unsupported_operation"
    MALFORMED_EXCHANGE_KEY = "malformed_exchange_key"
    INVALID_LITERAL = "invalid_literal"


class CalcError(Exception):
    """
    Базовая пользовательская ошибка вычисления.

    Сообщение должно содержать достаточно контекста (оператор, типы/единицы
    операндов, ключевое слово) для диагностики без stack trace.
    """

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UndefinedIdentifierError(CalcError):
    kind = ErrorKind.UNDEFINED_IDENTIFIER


class UnknownFunctionError(CalcError):
    kind = ErrorKind.UNKNOWN_FUNCTION


class ArgumentCountError(CalcError):
    kind = ErrorKind.WRONG_ARGUMENT_COUNT


class ArgumentTypeError(CalcError):
    kind = ErrorKind.WRONG_ARGUMENT_TYPE


class DivisionByZeroError(CalcError):
    kind = ErrorKind.DIVISION_BY_ZERO


class NegativeValueError(CalcError):
    kind = ErrorKind.NEGATIVE_VALUE


class OutOfRangeError(CalcError):
    kind = ErrorKind.OUT_OF_RANGE


class IncompatibleUnitsError(CalcError):
    kind = ErrorKind.INCOMPATIBLE_UNITS


class IncompatibleCurrenciesError(CalcError):
    kind = ErrorKind.INCOMPATIBLE_CURRENCIES


class UnknownKeywordError(CalcError):
    kind = ErrorKind.UNKNOWN_KEYWORD


class UnsupportedOperationError(CalcError):
    kind = ErrorKind.UNSUPPORTED_OPERATION


class MalformedExchangeKeyError(CalcError):
    kind = ErrorKind.MALFORMED_EXCHANGE_KEY


class InvalidLiteralError(CalcError):
    kind = ErrorKind.INVALID_LITERAL


class InternalEvaluationError(RuntimeError):
    """
    Внутренняя ошибка evaluator (например, неизвестный тип узла дерева).

    Не является CalcError: сигнализирует о рассогласовании parser и evaluator,
    а не об ошибке пользователя.
    """
    pass
