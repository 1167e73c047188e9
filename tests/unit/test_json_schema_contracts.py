"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema контрактов:
- Валидность самих схем (meta-validation)
- Payload каждого варианта Value проходит схему value
- Детекция нарушений kind / required / диапазонов
- Frontmatter: структура, курсы, глобальные переменные
- apply_frontmatter: применение к Environment
"""

import datetime
import json
from decimal import Decimal

import pytest
from jsonschema import ValidationError

from src.core.contracts import (
    FrontmatterValidator,
    SchemaLoader,
    ValuePayloadValidator,
    validate_frontmatter,
    validate_value_payload,
)
from src.core.domain import (
    Boolean,
    Currency,
    Date,
    Duration,
    Number,
    Quantity,
    Rate,
    Time,
    to_payload,
)
from src.core.errors import MalformedExchangeKeyError
from src.interpreter.environment import Environment
from src.interpreter.frontmatter import apply_frontmatter, parse_exchange_key


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def valid_frontmatter():
    """Валидный frontmatter для тестирования."""
    return {
        "global": {
            "servers": 12,
            "growth": 0.25,
            "price": {"kind": "currency", "value": "9.99", "code": "USD", "symbol": "$"},
            "storage": {"kind": "quantity", "value": "10", "unit": "TB"},
        },
        "exchange": {
            "USD_EUR": 0.92,
            "gbp_usd": 1.27,
        },
    }


@pytest.fixture
def env() -> Environment:
    return Environment()


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class TestSchemaLoader:
    """Тесты загрузчика схем"""

    def test_schemas_are_valid(self) -> None:
        loader = SchemaLoader()
        for name in ("value", "frontmatter"):
            schema = loader.load_schema(name)
            assert schema["$schema"] == "https://json-schema.org/draft/2020-12/schema"

    def test_schema_cached(self) -> None:
        loader = SchemaLoader()
        assert loader.load_schema("value") is loader.load_schema("value")

    def test_missing_schema(self) -> None:
        with pytest.raises(FileNotFoundError, match="Schema not found"):
            SchemaLoader().load_schema("does_not_exist")

    def test_missing_directory(self, tmp_path) -> None:
        with pytest.raises(RuntimeError, match="Schema directory not found"):
            SchemaLoader(tmp_path / "nowhere")

    def test_invalid_schema_rejected(self, tmp_path) -> None:
        (tmp_path / "broken.json").write_text(json.dumps({"type": 12}), encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON Schema in broken.json"):
            SchemaLoader(tmp_path).load_schema("broken")


# =============================================================================
# VALUE PAYLOADS
# =============================================================================


class TestValuePayloadContract:
    """Тесты схемы value"""

    @pytest.mark.parametrize(
        "value",
        [
            Number(value=Decimal("1.2E+3")),
            Currency.of(Decimal("9.99"), "$"),
            Quantity(value=Decimal(5), unit="disk"),
            Rate(amount=Quantity(value=Decimal(100), unit="MB"), per_unit="s"),
            Rate(amount=Currency.of(Decimal("0.10"), "$"), per_unit="hour"),
            Duration(value=Decimal("43.2"), unit="minute"),
            Date(value=datetime.date(2024, 11, 22)),
            Time(hour=14, minute=30, utc_offset_minutes=330),
            Boolean(value=False),
        ],
    )
    def test_payloads_conform(self, value) -> None:
        validate_value_payload(to_payload(value))

    def test_unknown_kind(self) -> None:
        assert not ValuePayloadValidator().is_valid({"kind": "matrix", "value": "1"})

    def test_missing_value(self) -> None:
        with pytest.raises(ValidationError):
            validate_value_payload({"kind": "number"})

    def test_bad_decimal_string(self) -> None:
        with pytest.raises(ValidationError):
            validate_value_payload({"kind": "number", "value": "twelve"})

    def test_unknown_time_unit(self) -> None:
        with pytest.raises(ValidationError):
            validate_value_payload({"kind": "duration", "value": "1", "unit": "fortnight"})

    def test_time_hour_out_of_range(self) -> None:
        errors = list(ValuePayloadValidator().iter_errors({"kind": "time", "hour": 24, "minute": 0}))
        assert errors


# =============================================================================
# FRONTMATTER
# =============================================================================


class TestFrontmatterContract:
    """Тесты схемы frontmatter"""

    def test_valid(self, valid_frontmatter) -> None:
        validate_frontmatter(valid_frontmatter)

    def test_empty_is_valid(self) -> None:
        assert FrontmatterValidator().is_valid({})

    def test_unknown_namespace(self) -> None:
        with pytest.raises(ValidationError):
            validate_frontmatter({"locals": {"x": 1}})

    def test_non_positive_rate(self) -> None:
        with pytest.raises(ValidationError):
            validate_frontmatter({"exchange": {"USD_EUR": 0}})

    def test_rate_must_be_number(self) -> None:
        with pytest.raises(ValidationError):
            validate_frontmatter({"exchange": {"USD_EUR": "0.92"}})

    def test_invalid_variable_name(self) -> None:
        with pytest.raises(ValidationError):
            validate_frontmatter({"global": {"2fast": 1}})


class TestParseExchangeKey:
    """Тесты формы ключа курса"""

    def test_valid(self) -> None:
        assert parse_exchange_key("usd_eur") == ("USD", "EUR")

    @pytest.mark.parametrize("key", ["USDEUR", "USD_EUR_GBP", "_EUR", "USD_", ""])
    def test_malformed(self, key: str) -> None:
        with pytest.raises(MalformedExchangeKeyError, match="expected FROM_TO"):
            parse_exchange_key(key)


class TestApplyFrontmatter:
    """Тесты применения frontmatter к окружению"""

    def test_globals(self, env: Environment, valid_frontmatter) -> None:
        apply_frontmatter(env, valid_frontmatter)
        assert env.get("servers") == Number(value=Decimal(12))
        assert env.get("growth") == Number(value=Decimal("0.25"))
        assert str(env.get("price")) == "$9.99"
        assert str(env.get("storage")) == "10 TB"

    def test_exchange_rates(self, env: Environment, valid_frontmatter) -> None:
        apply_frontmatter(env, valid_frontmatter)
        assert env.get_exchange_rate("USD", "EUR") == Decimal("0.92")
        assert env.get_exchange_rate("GBP", "USD") == Decimal("1.27")

    def test_malformed_key(self, env: Environment) -> None:
        with pytest.raises(MalformedExchangeKeyError):
            apply_frontmatter(env, {"exchange": {"USDEUR": 0.9}})

    def test_invalid_structure_leaves_env_untouched(self, env: Environment) -> None:
        with pytest.raises(ValidationError):
            apply_frontmatter(env, {"global": {"x": 1}, "exchange": {"USD_EUR": -1}})
        assert not env.has("x")

    def test_malformed_key_leaves_env_untouched(self, env: Environment) -> None:
        """Ошибка в ключе курса: ни globals, ни предыдущие курсы не применяются"""
        data = {"global": {"x": 1}, "exchange": {"USD_EUR": 0.9, "USDGBP": 0.8}}
        with pytest.raises(MalformedExchangeKeyError):
            apply_frontmatter(env, data)
        assert not env.has("x")
        assert env.get_exchange_rate("USD", "EUR") is None

    def test_bad_second_global_leaves_env_untouched(self, env: Environment) -> None:
        """Ошибка во второй глобальной переменной: первая не привязывается"""
        data = {
            "global": {"first": 1, "second": {"kind": "duration", "value": "1", "unit": "fortnight"}},
            "exchange": {"USD_EUR": 0.9},
        }
        with pytest.raises(ValidationError):
            apply_frontmatter(env, data)
        assert not env.has("first")
        assert not env.has("second")
        assert env.get_exchange_rate("USD", "EUR") is None

    def test_invalid_value_payload(self, env: Environment) -> None:
        with pytest.raises(ValidationError):
            apply_frontmatter(env, {"global": {"x": {"kind": "number"}}})
