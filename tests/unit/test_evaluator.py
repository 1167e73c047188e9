"""
Тесты для Evaluator

Проверяет правила вычисления каждого типа узла:
1. Литералы и ошибки разбора
2. Идентификаторы, присваивания, frontmatter
3. Конверсии "X in Y"
4. Percentage-of, napkin, вызовы функций
5. Abort-on-first-error и decimal-контекст
"""

import datetime
from decimal import Decimal

import pytest

from src.core.config import InterpreterConfig
from src.core.domain import Boolean, Currency, Date, Number, Quantity, TimeUnit
from src.core.errors import (
    ArgumentCountError,
    ArgumentTypeError,
    CalcError,
    DivisionByZeroError,
    IncompatibleCurrenciesError,
    InternalEvaluationError,
    InvalidLiteralError,
    MalformedExchangeKeyError,
    NegativeValueError,
    OutOfRangeError,
    UndefinedIdentifierError,
    UnknownFunctionError,
    UnknownKeywordError,
    UnsupportedOperationError,
)
from src.interpreter.ast import (
    Assignment,
    BinaryOp,
    BooleanLiteral,
    ComparisonOp,
    CurrencyLiteral,
    DateLiteral,
    DurationLiteral,
    FrontmatterAssignment,
    FunctionCall,
    Identifier,
    NapkinConversion,
    NumberLiteral,
    PercentageOf,
    QuantityLiteral,
    RateLiteral,
    RelativeDateLiteral,
    TimeLiteral,
    UnaryOp,
    UnitConversion,
    UTCOffset,
)
from src.interpreter.environment import Environment
from src.interpreter.evaluator import Interpreter, evaluate

TODAY = datetime.date(2024, 11, 22)


@pytest.fixture
def config() -> InterpreterConfig:
    return InterpreterConfig(today=lambda: TODAY)


@pytest.fixture
def env() -> Environment:
    return Environment()


@pytest.fixture
def interp(env: Environment, config: InterpreterConfig) -> Interpreter:
    return Interpreter(env, config)


def n(text: str) -> NumberLiteral:
    return NumberLiteral(text)


def q(value: str, unit: str) -> QuantityLiteral:
    return QuantityLiteral(value, unit)


# =============================================================================
# LITERALS
# =============================================================================


class TestLiterals:
    """Тесты литералов"""

    def test_number(self, interp: Interpreter) -> None:
        assert str(interp.evaluate_node(n("1.2k"))) == "1200"

    def test_invalid_number(self, interp: Interpreter) -> None:
        with pytest.raises(InvalidLiteralError):
            interp.evaluate_node(n("1.2.3"))

    def test_currency(self, interp: Interpreter) -> None:
        result = interp.evaluate_node(CurrencyLiteral("€", "5.5"))
        assert isinstance(result, Currency)
        assert str(result) == "€5.50"
        assert result.code == "EUR"

    def test_boolean(self, interp: Interpreter) -> None:
        assert interp.evaluate_node(BooleanLiteral("yes")) == Boolean(value=True)

    def test_date_without_year(self, interp: Interpreter) -> None:
        assert str(interp.evaluate_node(DateLiteral("Dec", "25"))) == "Wednesday, December 25, 2024"

    def test_relative_date(self, interp: Interpreter) -> None:
        assert str(interp.evaluate_node(RelativeDateLiteral("tomorrow"))) == "Saturday, November 23, 2024"

    def test_time_with_offset(self, interp: Interpreter) -> None:
        node = TimeLiteral("2", "30", period="PM", utc_offset=UTCOffset("+", "5", "30"))
        assert str(interp.evaluate_node(node)) == "14:30:00 +0530"

    def test_time_offset_out_of_range(self, interp: Interpreter) -> None:
        node = TimeLiteral("14", "30", utc_offset=UTCOffset("+", "15"))
        with pytest.raises(InvalidLiteralError, match="invalid time literal"):
            interp.evaluate_node(node)

    def test_duration(self, interp: Interpreter) -> None:
        assert str(interp.evaluate_node(DurationLiteral("90", "mins"))) == "90 minute"

    def test_duration_unknown_unit(self, interp: Interpreter) -> None:
        with pytest.raises(InvalidLiteralError, match="invalid duration literal"):
            interp.evaluate_node(DurationLiteral("2", "fortnights"))

    def test_quantity(self, interp: Interpreter) -> None:
        assert interp.evaluate_node(q("5", "disk")) == Quantity(value=Decimal(5), unit="disk")

    def test_rate_of_quantity(self, interp: Interpreter) -> None:
        assert str(interp.evaluate_node(RateLiteral(q("100", "MB"), "s"))) == "100 MB/s"

    def test_rate_of_number(self, interp: Interpreter) -> None:
        assert str(interp.evaluate_node(RateLiteral(n("5M"), "day"))) == "5000000/day"

    def test_rate_of_currency(self, interp: Interpreter) -> None:
        rate = interp.evaluate_node(RateLiteral(CurrencyLiteral("$", "0.10"), "hour"))
        assert str(rate) == "$0.10/h"

    def test_rate_of_boolean(self, interp: Interpreter) -> None:
        with pytest.raises(InvalidLiteralError, match="rate amount"):
            interp.evaluate_node(RateLiteral(BooleanLiteral("true"), "s"))

    def test_rate_unknown_time_unit(self, interp: Interpreter) -> None:
        with pytest.raises(InvalidLiteralError):
            interp.evaluate_node(RateLiteral(n("1"), "parsec"))


# =============================================================================
# NAMES
# =============================================================================


class TestNames:
    """Тесты идентификаторов и присваиваний"""

    def test_assignment_binds_and_returns(self, interp: Interpreter, env: Environment) -> None:
        result = interp.evaluate_node(Assignment("x", n("42")))
        assert result == Number(value=Decimal(42))
        assert env.get("x") == result

    def test_identifier(self, interp: Interpreter) -> None:
        interp.evaluate_node(Assignment("x", n("42")))
        assert interp.evaluate_node(Identifier("x")) == Number(value=Decimal(42))

    def test_undefined(self, interp: Interpreter) -> None:
        with pytest.raises(UndefinedIdentifierError, match="undefined variable: 'nope'"):
            interp.evaluate_node(Identifier("nope"))

    def test_boolean_keyword_identifier(self, interp: Interpreter) -> None:
        assert interp.evaluate_node(Identifier("No")) == Boolean(value=False)

    def test_variable_shadows_boolean_keyword(self, interp: Interpreter) -> None:
        interp.evaluate_node(Assignment("yes", n("5")))
        assert interp.evaluate_node(Identifier("yes")) == Number(value=Decimal(5))

    def test_constants(self, interp: Interpreter) -> None:
        result = interp.evaluate_node(BinaryOp("*", n("2"), Identifier("PI")))
        assert float(result.value) == pytest.approx(6.283185307179586)


class TestFrontmatterAssignment:
    """Тесты frontmatter-присваиваний"""

    def test_global(self, interp: Interpreter, env: Environment) -> None:
        interp.evaluate_node(FrontmatterAssignment("global", "budget", CurrencyLiteral("$", "1000")))
        assert str(env.get("budget")) == "$1000.00"

    def test_exchange(self, interp: Interpreter, env: Environment) -> None:
        result = interp.evaluate_node(FrontmatterAssignment("exchange", "usd_eur", n("0.92")))
        assert result == Number(value=Decimal("0.92"))
        assert env.get_exchange_rate("USD", "EUR") == Decimal("0.92")

    def test_exchange_requires_number(self, interp: Interpreter) -> None:
        with pytest.raises(ArgumentTypeError, match="must be a number"):
            interp.evaluate_node(FrontmatterAssignment("exchange", "USD_EUR", CurrencyLiteral("$", "1")))

    def test_exchange_malformed_key(self, interp: Interpreter) -> None:
        with pytest.raises(MalformedExchangeKeyError):
            interp.evaluate_node(FrontmatterAssignment("exchange", "USDEUR", n("0.92")))

    def test_exchange_zero_rate(self, interp: Interpreter, env: Environment) -> None:
        with pytest.raises(DivisionByZeroError, match="exchange rate 'USD_EUR' cannot be zero"):
            interp.evaluate_node(FrontmatterAssignment("exchange", "USD_EUR", n("0")))
        assert env.get_exchange_rate("USD", "EUR") is None

    def test_exchange_negative_rate(self, interp: Interpreter, env: Environment) -> None:
        with pytest.raises(NegativeValueError, match="must be positive"):
            interp.evaluate_node(FrontmatterAssignment("exchange", "USD_EUR", n("-0.9")))
        assert env.get_exchange_rate("USD", "EUR") is None

    def test_unknown_namespace(self, interp: Interpreter) -> None:
        with pytest.raises(UnknownKeywordError, match="unknown frontmatter namespace 'local'"):
            interp.evaluate_node(FrontmatterAssignment("local", "x", n("1")))


# =============================================================================
# CONVERSIONS
# =============================================================================


class TestUnitConversion:
    """Тесты конверсий X in Y"""

    def test_quantity(self, interp: Interpreter) -> None:
        result = interp.evaluate_node(UnitConversion(q("5", "feet"), "meters"))
        assert result.unit == "meters"
        assert float(result.value) == pytest.approx(1.524)

    def test_temperature(self, interp: Interpreter) -> None:
        result = interp.evaluate_node(UnitConversion(q("100", "celsius"), "fahrenheit"))
        assert float(result.value) == pytest.approx(212.0)

    def test_incompatible_quantity(self, interp: Interpreter) -> None:
        with pytest.raises(CalcError):
            interp.evaluate_node(UnitConversion(q("5", "meters"), "kg"))

    def test_currency(self, interp: Interpreter, env: Environment) -> None:
        env.set_exchange_rate("USD", "EUR", Decimal("0.92"))
        assert str(interp.evaluate_node(UnitConversion(CurrencyLiteral("$", "100"), "EUR"))) == "€92.00"
        assert str(interp.evaluate_node(UnitConversion(CurrencyLiteral("$", "100"), "€"))) == "€92.00"

    def test_currency_without_rate(self, interp: Interpreter) -> None:
        with pytest.raises(IncompatibleCurrenciesError):
            interp.evaluate_node(UnitConversion(CurrencyLiteral("$", "100"), "GBP"))

    def test_rate_to_rate(self, interp: Interpreter) -> None:
        node = UnitConversion(RateLiteral(q("100", "MB"), "s"), "GB", "minute")
        assert str(interp.evaluate_node(node)) == "5.859375 GB/min"

    def test_currency_rate_to_rate(self, interp: Interpreter, env: Environment) -> None:
        env.set_exchange_rate("USD", "EUR", Decimal("0.5"))
        node = UnitConversion(RateLiteral(CurrencyLiteral("$", "0.10"), "hour"), "EUR", "day")
        assert str(interp.evaluate_node(node)) == "€1.20/day"

    def test_rate_time_unit_only(self, interp: Interpreter) -> None:
        node = UnitConversion(RateLiteral(q("1000", "req"), "s"), "hour")
        assert str(interp.evaluate_node(node)) == "3600000 req/h"

    def test_rate_to_non_time_target(self, interp: Interpreter) -> None:
        with pytest.raises(UnsupportedOperationError):
            interp.evaluate_node(UnitConversion(RateLiteral(q("1", "req"), "s"), "GB"))

    def test_rate_target_requires_rate(self, interp: Interpreter) -> None:
        with pytest.raises(UnsupportedOperationError, match="requires a rate"):
            interp.evaluate_node(UnitConversion(q("1", "GB"), "MB", "second"))

    def test_duration(self, interp: Interpreter) -> None:
        result = interp.evaluate_node(UnitConversion(DurationLiteral("90", "minutes"), "hours"))
        assert str(result) == "1.5 hour"
        assert result.unit == TimeUnit.HOUR

    def test_duration_to_non_time(self, interp: Interpreter) -> None:
        with pytest.raises(UnsupportedOperationError):
            interp.evaluate_node(UnitConversion(DurationLiteral("1", "hour"), "meters"))

    def test_number_unsupported(self, interp: Interpreter) -> None:
        with pytest.raises(UnsupportedOperationError, match="Number"):
            interp.evaluate_node(UnitConversion(n("5"), "km"))


class TestPercentageOf:
    """Тесты N% of X"""

    def test_number(self, interp: Interpreter) -> None:
        assert interp.evaluate_node(PercentageOf(n("20%"), n("50"))) == Number(value=Decimal(10))

    def test_currency(self, interp: Interpreter) -> None:
        assert str(interp.evaluate_node(PercentageOf(n("15%"), CurrencyLiteral("$", "200")))) == "$30.00"

    def test_quantity(self, interp: Interpreter) -> None:
        assert str(interp.evaluate_node(PercentageOf(n("10%"), q("5", "GB")))) == "0.5 GB"

    def test_percentage_must_be_number(self, interp: Interpreter) -> None:
        with pytest.raises(ArgumentTypeError):
            interp.evaluate_node(PercentageOf(q("10", "GB"), n("5")))

    def test_unsupported_target(self, interp: Interpreter) -> None:
        with pytest.raises(UnsupportedOperationError):
            interp.evaluate_node(PercentageOf(n("10%"), BooleanLiteral("true")))


class TestNapkin:
    """Тесты X as napkin"""

    def test_default_sig_figs(self, interp: Interpreter) -> None:
        result = interp.evaluate_node(NapkinConversion(n("1234567")))
        assert result == Number(value=Decimal(1200000))

    def test_configured_sig_figs(self, env: Environment) -> None:
        interp = Interpreter(env, InterpreterConfig(napkin_sig_figs=3))
        assert interp.evaluate_node(NapkinConversion(n("1234567"))).value == Decimal(1230000)


# =============================================================================
# FUNCTIONS
# =============================================================================


class TestFunctionCall:
    """Тесты вызовов функций"""

    def test_keyword_argument_not_resolved(self, interp: Interpreter) -> None:
        """month в позиции ключевого слова: слово, даже если есть переменная month"""
        interp.evaluate_node(Assignment("month", n("7")))
        node = FunctionCall("downtime", (n("99.9%"), Identifier("month")))
        assert str(interp.evaluate_node(node)) == "43.2 minute"

    def test_value_argument_resolved(self, interp: Interpreter) -> None:
        interp.evaluate_node(Assignment("load", q("10", "TB")))
        interp.evaluate_node(Assignment("disk_size", q("2", "TB")))
        node = FunctionCall("capacity_at", (Identifier("load"), Identifier("disk_size"), Identifier("disk")))
        assert str(interp.evaluate_node(node)) == "5 disk"

    def test_unknown_function_before_arguments(self, interp: Interpreter) -> None:
        with pytest.raises(UnknownFunctionError):
            interp.evaluate_node(FunctionCall("median", (Identifier("undefined_thing"),)))

    def test_arity_before_arguments(self, interp: Interpreter) -> None:
        with pytest.raises(ArgumentCountError):
            interp.evaluate_node(FunctionCall("sqrt", (Identifier("a"), Identifier("b"))))

    def test_case_insensitive_name(self, interp: Interpreter) -> None:
        assert interp.evaluate_node(FunctionCall("SQRT", (n("16"),))) == Number(value=Decimal(4))


# =============================================================================
# OPERATORS & BATCHES
# =============================================================================


class TestOperatorsThroughEvaluator:
    """Тесты операторов через evaluator"""

    def test_unary(self, interp: Interpreter) -> None:
        assert interp.evaluate_node(UnaryOp("-", n("5"))) == Number(value=Decimal(-5))

    def test_comparison(self, interp: Interpreter) -> None:
        assert interp.evaluate_node(ComparisonOp(">", n("5"), n("3"))) == Boolean(value=True)

    def test_date_arithmetic(self, interp: Interpreter) -> None:
        node = BinaryOp("+", DateLiteral("Dec", "25", "2024"), DurationLiteral("7", "days"))
        assert interp.evaluate_node(node) == Date(value=datetime.date(2025, 1, 1))

    def test_days_until(self, interp: Interpreter) -> None:
        node = BinaryOp("-", DateLiteral("Dec", "25"), RelativeDateLiteral("today"))
        assert str(interp.evaluate_node(node)) == "33 day"

    def test_power_overflow(self, interp: Interpreter) -> None:
        with pytest.raises(OutOfRangeError):
            interp.evaluate_node(BinaryOp("^", n("10"), n("1e10")))


class TestBatch:
    """Тесты batch-вычисления"""

    def test_results_in_order(self, env: Environment, config: InterpreterConfig) -> None:
        results = evaluate(
            [Assignment("x", n("1.2k")), Assignment("y", BinaryOp("*", Identifier("x"), n("2")))],
            env,
            config,
        )
        assert [str(r) for r in results] == ["1200", "2400"]

    def test_abort_on_first_error(self, env: Environment) -> None:
        """Ошибка прерывает batch; последующие узлы не вычисляются"""
        nodes = [
            Assignment("a", n("1")),
            Identifier("missing"),
            Assignment("b", n("2")),
        ]
        with pytest.raises(UndefinedIdentifierError):
            evaluate(nodes, env)
        assert env.has("a")
        assert not env.has("b")

    def test_default_environment(self) -> None:
        assert evaluate([Identifier("E")])[0].value > Decimal(2)

    def test_unknown_node(self, interp: Interpreter) -> None:
        """Неизвестный тип узла — внутренняя ошибка, не CalcError"""
        with pytest.raises(InternalEvaluationError, match="unknown expression node: str"):
            interp.evaluate(["not a node"])
        assert not issubclass(InternalEvaluationError, CalcError)

    def test_decimal_precision(self, env: Environment) -> None:
        interp = Interpreter(env, InterpreterConfig(decimal_precision=5))
        assert interp.evaluate_node(BinaryOp("/", n("1"), n("3"))).value == Decimal("0.33333")

    def test_default_precision(self, interp: Interpreter) -> None:
        result = interp.evaluate_node(BinaryOp("/", n("1"), n("3")))
        assert len(result.value.as_tuple().digits) == 28
