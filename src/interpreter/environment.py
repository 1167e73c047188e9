"""
Environment — состояние сессии вычисления

Хранит привязки переменных (имя → Value) и таблицу курсов валют
("FROM_TO" → Decimal). При создании засеваются константы PI и E.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Ни одна операция не выбрасывает ошибку: отсутствие — это None
2. Ключ курса всегда "FROM_TO" в верхнем регистре
3. clone() даёт независимые словари; сами Value разделяются (они immutable)
4. Один экземпляр принадлежит одной сессии; внутренних блокировок нет
"""

import logging
from decimal import Decimal
from types import MappingProxyType
from typing import Final, Mapping

from src.core.domain.values import Number, Value

logger = logging.getLogger(__name__)

PI: Final[Decimal] = Decimal("3.14159265358979323846264338327950288419716939937510")
E: Final[Decimal] = Decimal("2.71828182845904523536028747135266249775724709369995")


def exchange_key(from_code: str, to_code: str) -> str:
    """
    Ключ таблицы курсов.

    Examples:
        >>> exchange_key("usd", "eur")
        'USD_EUR'
    """
    return f"{from_code.strip().upper()}_{to_code.strip().upper()}"


class Environment:
    """Переменные и курсы валют одной сессии."""

    def __init__(self) -> None:
        self._variables: dict[str, Value] = {}
        self._exchange_rates: dict[str, Decimal] = {}
        self._seed_constants()

    def _seed_constants(self) -> None:
        self._variables["PI"] = Number(value=PI)
        self._variables["E"] = Number(value=E)

    # -------------------------------------------------------------------------
    # Variables
    # -------------------------------------------------------------------------

    def set(self, name: str, value: Value) -> None:
        logger.debug("bind %s = %s", name, value)
        self._variables[name] = value

    def get(self, name: str) -> Value | None:
        return self._variables.get(name)

    def has(self, name: str) -> bool:
        return name in self._variables

    def variables(self) -> Mapping[str, Value]:
        """Read-only снимок текущих привязок."""
        return MappingProxyType(dict(self._variables))

    # -------------------------------------------------------------------------
    # Exchange rates
    # -------------------------------------------------------------------------

    def set_exchange_rate(self, from_code: str, to_code: str, rate: Decimal) -> None:
        key = exchange_key(from_code, to_code)
        logger.debug("exchange rate %s = %s", key, rate)
        self._exchange_rates[key] = rate

    def get_exchange_rate(self, from_code: str, to_code: str) -> Decimal | None:
        return self._exchange_rates.get(exchange_key(from_code, to_code))

    def has_exchange_rates(self) -> bool:
        return bool(self._exchange_rates)

    # -------------------------------------------------------------------------
    # Clone
    # -------------------------------------------------------------------------

    def clone(self) -> "Environment":
        """
        Независимая копия для спекулятивного или инкрементального пересчёта.

        Изменения клона не видны оригиналу и наоборот.
        """
        copy = Environment.__new__(Environment)
        copy._variables = dict(self._variables)
        copy._exchange_rates = dict(self._exchange_rates)
        return copy

    def __repr__(self) -> str:
        return (
            f"Environment(variables={len(self._variables)}, "
            f"exchange_rates={len(self._exchange_rates)})"
        )
