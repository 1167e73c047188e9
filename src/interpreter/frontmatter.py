"""
Frontmatter — объявления уровня документа

Два пространства имён:
- global   — переменные, видимые всему документу
- exchange — курсы валют, ключ "FROM_TO" (1 FROM = rate TO)

Структура блока проверяется JSON Schema контрактом frontmatter.json;
форма ключа курса проверяется здесь (MalformedExchangeKeyError).
"""

import logging
from decimal import Decimal
from typing import Any, Final, Mapping

from pydantic import ValidationError

from src.core.contracts.validators import validate_frontmatter, validate_value_payload
from src.core.domain.values import Number, Value, from_payload
from src.core.errors import InvalidLiteralError, MalformedExchangeKeyError
from src.interpreter.environment import Environment

logger = logging.getLogger(__name__)

GLOBAL_NAMESPACE: Final[str] = "global"
EXCHANGE_NAMESPACE: Final[str] = "exchange"


def parse_exchange_key(key: str) -> tuple[str, str]:
    """
    Разбор ключа курса.

    Examples:
        >>> parse_exchange_key("usd_eur")
        ('USD', 'EUR')

    Raises:
        MalformedExchangeKeyError: не ровно две непустые части через "_"
    """
    parts = key.strip().split("_")
    if len(parts) != 2 or not all(parts):
        raise MalformedExchangeKeyError(
            f"invalid exchange rate key {key!r} (expected FROM_TO, e.g. USD_EUR)"
        )
    return parts[0].upper(), parts[1].upper()


def _json_decimal(raw: Any, name: str) -> Decimal:
    if isinstance(raw, int):
        return Decimal(raw)
    value = Decimal(repr(raw))
    if not value.is_finite():
        raise InvalidLiteralError(f"invalid number for {name!r}: {raw!r}")
    return value


def _global_value(name: str, raw: Any) -> Value:
    if isinstance(raw, (int, float)):
        return Number(value=_json_decimal(raw, name))
    validate_value_payload(raw)
    try:
        return from_payload(raw)
    except ValidationError as e:
        raise InvalidLiteralError(f"invalid value for {name!r}: {e.errors()[0]['msg']}") from e


def apply_frontmatter(env: Environment, data: Mapping[str, Any]) -> None:
    """
    Применение блока frontmatter к окружению.

    Args:
        env: Окружение сессии
        data: {"global": {name: number | payload}, "exchange": {"FROM_TO": rate}}

    Все значения и курсы строятся до изменения env: при любой ошибке
    окружение остаётся нетронутым.

    Raises:
        jsonschema.ValidationError: структура блока не соответствует контракту
        MalformedExchangeKeyError: ключ курса не вида FROM_TO
        InvalidLiteralError: payload глобальной переменной не описывает Value
    """
    validate_frontmatter(data)

    bindings: list[tuple[str, Value]] = [
        (name, _global_value(name, raw)) for name, raw in data.get(GLOBAL_NAMESPACE, {}).items()
    ]
    rates: list[tuple[str, str, Decimal]] = [
        (*parse_exchange_key(key), _json_decimal(raw, key))
        for key, raw in data.get(EXCHANGE_NAMESPACE, {}).items()
    ]

    for name, value in bindings:
        env.set(name, value)
    for from_code, to_code, rate in rates:
        env.set_exchange_rate(from_code, to_code, rate)

    logger.debug("applied frontmatter: %d globals, %d exchange rates", len(bindings), len(rates))
