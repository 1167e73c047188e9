"""
Evaluator — рекурсивный обход дерева выражений

Interpreter отображает каждый тип узла на правило вычисления:
- литералы → разбор payload в Value
- Identifier → переменная окружения, затем булево слово, иначе ошибка
- Assignment → вычислить, сохранить, вернуть сохранённое значение
- операторы → Operator Dispatch
- "X in Y", "N% of X", "X as napkin", вызовы функций

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Каждый узел batch даёт ровно одно Value; первая ошибка прерывает весь batch
2. Неизвестный тип узла — InternalEvaluationError, а не пользовательская ошибка
3. Вся decimal-арифметика идёт в localcontext с заданной точностью
4. Вычисление синхронное, без I/O; единственное состояние — Environment
"""

import logging
from decimal import InvalidOperation, Overflow, localcontext
from typing import Any, Callable, Iterable

from pydantic import ValidationError

from src.core.config import DEFAULT_CONFIG, InterpreterConfig
from src.core.domain.time_units import from_seconds, normalize_time_unit, seconds_in, to_seconds
from src.core.domain.values import (
    Currency,
    Duration,
    Number,
    Quantity,
    Rate,
    Value,
    normalize_currency_code,
    type_name,
)
from src.core.errors import (
    ArgumentTypeError,
    InternalEvaluationError,
    InvalidLiteralError,
    OutOfRangeError,
    UndefinedIdentifierError,
    UnknownKeywordError,
    UnsupportedOperationError,
)
from src.core.math.numerical_safeguards import validate_positive
from src.core.units.registry import UNIT_REGISTRY
from src.functions.library import lookup_function
from src.functions.napkin import napkin_value
from src.functions.rates import convert_rate
from src.interpreter import ast
from src.interpreter.environment import Environment
from src.interpreter.frontmatter import EXCHANGE_NAMESPACE, GLOBAL_NAMESPACE, parse_exchange_key
from src.interpreter.literals import (
    build_date,
    build_time,
    is_boolean_keyword,
    parse_boolean,
    parse_number,
    relative_date,
)
from src.interpreter.operators import (
    binary_operation,
    comparison_operation,
    convert_currency,
    convert_quantity_value,
    unary_operation,
)

logger = logging.getLogger(__name__)


def _build(model: Callable[..., Value], **fields: Any) -> Value:
    """Конструирование Value из литерала; ошибки валидации → InvalidLiteralError."""
    try:
        return model(**fields)
    except ValidationError as e:
        details = "; ".join(error["msg"] for error in e.errors())
        raise InvalidLiteralError(f"invalid {model.__name__.lower()} literal: {details}") from e


class Interpreter:
    """
    Вычислитель дерева выражений для одной сессии.

    Args:
        environment: Окружение сессии (по умолчанию — новое)
        config: Параметры вычисления (по умолчанию — DEFAULT_CONFIG)
    """

    def __init__(
        self,
        environment: Environment | None = None,
        config: InterpreterConfig | None = None,
    ):
        self.environment = environment if environment is not None else Environment()
        self.config = config if config is not None else DEFAULT_CONFIG
        self._handlers: dict[type, Callable[[Any], Value]] = {
            ast.NumberLiteral: self._eval_number,
            ast.CurrencyLiteral: self._eval_currency,
            ast.BooleanLiteral: self._eval_boolean,
            ast.DateLiteral: self._eval_date,
            ast.RelativeDateLiteral: self._eval_relative_date,
            ast.TimeLiteral: self._eval_time,
            ast.DurationLiteral: self._eval_duration,
            ast.QuantityLiteral: self._eval_quantity,
            ast.RateLiteral: self._eval_rate,
            ast.Identifier: self._eval_identifier,
            ast.Assignment: self._eval_assignment,
            ast.FrontmatterAssignment: self._eval_frontmatter_assignment,
            ast.BinaryOp: self._eval_binary,
            ast.UnaryOp: self._eval_unary,
            ast.ComparisonOp: self._eval_comparison,
            ast.UnitConversion: self._eval_unit_conversion,
            ast.PercentageOf: self._eval_percentage_of,
            ast.NapkinConversion: self._eval_napkin,
            ast.FunctionCall: self._eval_function_call,
        }

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def evaluate(self, nodes: Iterable[Any]) -> list[Value]:
        """
        Вычисление batch узлов по порядку.

        Returns:
            Список Value — по одному на узел

        Raises:
            CalcError: первая ошибка прерывает весь batch
            InternalEvaluationError: неизвестный тип узла
        """
        results: list[Value] = []
        with localcontext() as ctx:
            ctx.prec = self.config.decimal_precision
            for node in nodes:
                results.append(self._evaluate_guarded(node))
        logger.debug("evaluated batch of %d nodes", len(results))
        return results

    def evaluate_node(self, node: Any) -> Value:
        """Вычисление одного узла верхнего уровня."""
        with localcontext() as ctx:
            ctx.prec = self.config.decimal_precision
            return self._evaluate_guarded(node)

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def _evaluate_guarded(self, node: Any) -> Value:
        try:
            return self._eval(node)
        except (InvalidOperation, Overflow) as e:
            raise OutOfRangeError(f"arithmetic result out of range: {e!r}") from e

    def _eval(self, node: Any) -> Value:
        handler = self._handlers.get(type(node))
        if handler is None:
            raise InternalEvaluationError(f"unknown expression node: {type(node).__name__}")
        return handler(node)

    # =========================================================================
    # LITERALS
    # =========================================================================

    def _eval_number(self, node: ast.NumberLiteral) -> Value:
        return Number(value=parse_number(node.value))

    def _eval_currency(self, node: ast.CurrencyLiteral) -> Value:
        return Currency.of(parse_number(node.value), node.symbol)

    def _eval_boolean(self, node: ast.BooleanLiteral) -> Value:
        return parse_boolean(node.value)

    def _eval_date(self, node: ast.DateLiteral) -> Value:
        return build_date(node.month, node.day, node.year, self.config.today())

    def _eval_relative_date(self, node: ast.RelativeDateLiteral) -> Value:
        return relative_date(node.keyword, self.config.today())

    def _eval_time(self, node: ast.TimeLiteral) -> Value:
        try:
            return build_time(node.hour, node.minute, node.second, node.period, node.utc_offset)
        except ValidationError as e:
            raise InvalidLiteralError(f"invalid time literal: {e.errors()[0]['msg']}") from e

    def _eval_duration(self, node: ast.DurationLiteral) -> Value:
        return _build(Duration, value=parse_number(node.value), unit=node.unit)

    def _eval_quantity(self, node: ast.QuantityLiteral) -> Value:
        return Quantity(value=parse_number(node.value), unit=node.unit)

    def _eval_rate(self, node: ast.RateLiteral) -> Value:
        amount = self._eval(node.amount)
        if isinstance(amount, Number):
            amount = Quantity(value=amount.value, unit="")
        elif not isinstance(amount, (Quantity, Currency)):
            raise InvalidLiteralError(
                f"rate amount must be a number, quantity, or currency, got {type_name(amount)}"
            )
        return _build(Rate, amount=amount, per_unit=node.per_unit)

    # =========================================================================
    # NAMES
    # =========================================================================

    def _eval_identifier(self, node: ast.Identifier) -> Value:
        value = self.environment.get(node.name)
        if value is not None:
            return value
        if is_boolean_keyword(node.name):
            return parse_boolean(node.name)
        raise UndefinedIdentifierError(f"undefined variable: {node.name!r}")

    def _eval_assignment(self, node: ast.Assignment) -> Value:
        value = self._eval(node.value)
        self.environment.set(node.name, value)
        return value

    def _eval_frontmatter_assignment(self, node: ast.FrontmatterAssignment) -> Value:
        namespace = node.namespace.strip().lower()
        value = self._eval(node.value)
        if namespace == GLOBAL_NAMESPACE:
            self.environment.set(node.property, value)
            return value
        if namespace == EXCHANGE_NAMESPACE:
            if not isinstance(value, Number):
                raise ArgumentTypeError(
                    f"exchange rate {node.property!r} must be a number, got {type_name(value)}"
                )
            from_code, to_code = parse_exchange_key(node.property)
            rate = validate_positive(value.value, f"exchange rate {node.property!r}")
            self.environment.set_exchange_rate(from_code, to_code, rate)
            return value
        raise UnknownKeywordError(
            f"unknown frontmatter namespace '{node.namespace}' (valid namespaces: global, exchange)"
        )

    # =========================================================================
    # OPERATORS
    # =========================================================================

    def _eval_binary(self, node: ast.BinaryOp) -> Value:
        left = self._eval(node.left)
        right = self._eval(node.right)
        return binary_operation(left, right, node.operator, self.environment)

    def _eval_unary(self, node: ast.UnaryOp) -> Value:
        return unary_operation(self._eval(node.operand), node.operator)

    def _eval_comparison(self, node: ast.ComparisonOp) -> Value:
        left = self._eval(node.left)
        right = self._eval(node.right)
        return comparison_operation(left, right, node.operator)

    # =========================================================================
    # CONVERSIONS
    # =========================================================================

    def _eval_unit_conversion(self, node: ast.UnitConversion) -> Value:
        value = self._eval(node.expression)

        if isinstance(value, Currency):
            return convert_currency(
                value, normalize_currency_code(node.target_unit), self.environment
            )

        if node.target_time_unit is not None:
            if not isinstance(value, Rate):
                raise UnsupportedOperationError(
                    f"rate conversion requires a rate, got {type_name(value)}"
                )
            return self._convert_rate_units(value, node.target_unit, node.target_time_unit)

        if isinstance(value, Rate):
            if normalize_time_unit(node.target_unit) is None:
                raise UnsupportedOperationError(
                    f"rate conversion requires a time unit or rate target, got {node.target_unit!r}"
                )
            return convert_rate(value, node.target_unit)

        if isinstance(value, Duration):
            unit = normalize_time_unit(node.target_unit)
            if unit is None:
                raise UnsupportedOperationError(
                    f"cannot convert duration {value} to {node.target_unit!r}"
                )
            return Duration(value=from_seconds(to_seconds(value.value, value.unit), unit), unit=unit)

        if isinstance(value, Quantity):
            return UNIT_REGISTRY.convert(value, node.target_unit)

        raise UnsupportedOperationError(
            f"'in' conversion is not defined for {type_name(value)}"
        )

    def _convert_rate_units(self, rate: Rate, target_unit: str, target_time_unit: str) -> Value:
        time_unit = normalize_time_unit(target_time_unit)
        if time_unit is None:
            raise UnsupportedOperationError(
                f"rate conversion target time unit must be a time unit, got {target_time_unit!r}"
            )
        if isinstance(rate.amount, Currency):
            amount = convert_currency(
                rate.amount, normalize_currency_code(target_unit), self.environment
            )
        else:
            amount = Quantity(
                value=convert_quantity_value(rate.amount, target_unit), unit=target_unit
            )
        if time_unit != rate.per_unit:
            amount = amount.with_value(
                amount.value * seconds_in(time_unit) / seconds_in(rate.per_unit)
            )
        return Rate(amount=amount, per_unit=time_unit)

    def _eval_percentage_of(self, node: ast.PercentageOf) -> Value:
        percentage = self._eval(node.percentage)
        value = self._eval(node.value)
        if not isinstance(percentage, Number):
            raise ArgumentTypeError(f"percentage must be a number, got {type_name(percentage)}")
        if isinstance(value, (Number, Quantity, Currency)):
            return value.model_copy(update={"value": value.value * percentage.value})
        raise UnsupportedOperationError(f"cannot take percentage of {type_name(value)}")

    def _eval_napkin(self, node: ast.NapkinConversion) -> Value:
        return napkin_value(self._eval(node.expression), self.config.napkin_sig_figs)

    # =========================================================================
    # FUNCTIONS
    # =========================================================================

    def _eval_function_call(self, node: ast.FunctionCall) -> Value:
        spec = lookup_function(node.name)
        spec.check_arity(len(node.arguments))
        args: list[Any] = []
        for position, argument in enumerate(node.arguments):
            if spec.is_keyword_position(position) and isinstance(argument, ast.Identifier):
                args.append(argument.name)
            else:
                args.append(self._eval(argument))
        return spec.handler(args, self.config)


def evaluate(
    nodes: Iterable[Any],
    environment: Environment | None = None,
    config: InterpreterConfig | None = None,
) -> list[Value]:
    """
    Вычисление batch узлов в окружении (abort-on-first-error).

    Examples:
        >>> env = Environment()
        >>> [str(v) for v in evaluate([ast.Assignment("x", ast.NumberLiteral("1.2k"))], env)]
        ['1200']
    """
    return Interpreter(environment, config).evaluate(nodes)
