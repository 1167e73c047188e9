"""
Interpreter Configuration

Frozen конфигурация сессии вычисления. Значения по умолчанию подходят
для интерактивного использования; тесты подменяют today для детерминизма.
"""

import datetime
from dataclasses import dataclass, field
from typing import Callable, Final

DEFAULT_DECIMAL_PRECISION: Final[int] = 28
DEFAULT_NAPKIN_SIG_FIGS: Final[int] = 2


@dataclass(frozen=True)
class InterpreterConfig:
    """
    Параметры вычисления.

    Attributes:
        decimal_precision: Точность decimal-контекста (значащих цифр)
        napkin_sig_figs: Значащие цифры для napkin-округления
        today: Источник текущей даты (даты без года, today/tomorrow/yesterday)
    """

    decimal_precision: int = DEFAULT_DECIMAL_PRECISION
    napkin_sig_figs: int = DEFAULT_NAPKIN_SIG_FIGS
    today: Callable[[], datetime.date] = field(default=datetime.date.today)

    def __post_init__(self):
        if self.decimal_precision < 1:
            raise ValueError(f"decimal_precision must be >= 1, got {self.decimal_precision}")
        if self.napkin_sig_figs < 1:
            raise ValueError(f"napkin_sig_figs must be >= 1, got {self.napkin_sig_figs}")


DEFAULT_CONFIG: Final[InterpreterConfig] = InterpreterConfig()
