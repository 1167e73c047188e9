"""
Function Library — реестр встроенных функций

Каждая функция описана FunctionSpec: допустимое число аргументов и позиции,
в которых голый идентификатор передаётся как ключевое слово (строка),
а не разрешается как переменная. Пример: в downtime(99.9%, month)
"month" — слово, а не переменная month.

Реестр неизменяем и строится при импорте.
"""

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Callable, Final, Mapping, Sequence

from src.core.config import InterpreterConfig
from src.core.domain.values import Number, Value, type_name
from src.core.errors import ArgumentCountError, ArgumentTypeError, UnknownFunctionError
from src.functions.aggregate import average, square_root
from src.functions.availability import downtime
from src.functions.capacity import capacity_at, requires
from src.functions.compression import compress
from src.functions.napkin import napkin_value
from src.functions.network import rtt, throughput, transfer_time
from src.functions.rates import accumulate, convert_rate
from src.functions.storage import read, seek

# Аргумент функции: Value или голое ключевое слово
Argument = Any

Handler = Callable[[Sequence[Argument], InterpreterConfig], Value]


@dataclass(frozen=True)
class FunctionSpec:
    """
    Описание встроенной функции.

    Attributes:
        name: Каноническое имя
        min_args: Минимум аргументов
        max_args: Максимум аргументов (None — без ограничения)
        keyword_positions: Позиции (0-based), где идентификатор — ключевое слово
        handler: Реализация (args, config) → Value
    """

    name: str
    min_args: int
    max_args: int | None
    keyword_positions: frozenset[int]
    handler: Handler

    def check_arity(self, count: int) -> None:
        """
        Raises:
            ArgumentCountError: число аргументов вне [min_args, max_args]
        """
        if count >= self.min_args and (self.max_args is None or count <= self.max_args):
            return
        if self.max_args is None:
            expected = f"at least {self.min_args}"
        elif self.min_args == self.max_args:
            expected = f"exactly {self.min_args}"
        else:
            expected = f"{self.min_args} to {self.max_args}"
        noun = "argument" if expected.endswith(" 1") else "arguments"
        raise ArgumentCountError(f"{self.name}() takes {expected} {noun}, got {count}")

    def is_keyword_position(self, position: int) -> bool:
        return position in self.keyword_positions


# =============================================================================
# ARGUMENT HELPERS
# =============================================================================


def _keyword(args: Sequence[Argument], position: int, function: str) -> str:
    arg = args[position]
    if not isinstance(arg, str):
        raise ArgumentTypeError(
            f"{function}() argument {position + 1} must be a keyword, got {type_name(arg)}"
        )
    return arg


def _value(args: Sequence[Argument], position: int, function: str) -> Value:
    arg = args[position]
    if isinstance(arg, str):
        raise ArgumentTypeError(
            f"{function}() argument {position + 1} must be a value, got keyword {arg!r}"
        )
    return arg


def _buffer(args: Sequence[Argument], position: int, function: str) -> Decimal:
    if len(args) <= position:
        return Decimal(0)
    arg = _value(args, position, function)
    if not isinstance(arg, Number):
        raise ArgumentTypeError(
            f"{function}() buffer must be a number or percentage, got {type_name(arg)}"
        )
    return arg.value


# =============================================================================
# HANDLERS
# =============================================================================


def _avg(args: Sequence[Argument], config: InterpreterConfig) -> Value:
    return average(*(_value(args, i, "avg") for i in range(len(args))))


def _sqrt(args: Sequence[Argument], config: InterpreterConfig) -> Value:
    return square_root(_value(args, 0, "sqrt"))


def _requires(args: Sequence[Argument], config: InterpreterConfig) -> Value:
    return requires(
        _value(args, 0, "requires"),
        _value(args, 1, "requires"),
        _buffer(args, 2, "requires"),
    )


def _capacity_at(args: Sequence[Argument], config: InterpreterConfig) -> Value:
    return capacity_at(
        _value(args, 0, "capacity_at"),
        _value(args, 1, "capacity_at"),
        _keyword(args, 2, "capacity_at"),
        _buffer(args, 3, "capacity_at"),
    )


def _downtime(args: Sequence[Argument], config: InterpreterConfig) -> Value:
    return downtime(_value(args, 0, "downtime"), args[1])


def _accumulate(args: Sequence[Argument], config: InterpreterConfig) -> Value:
    return accumulate(_value(args, 0, "accumulate"), args[1])


def _convert_rate(args: Sequence[Argument], config: InterpreterConfig) -> Value:
    return convert_rate(_value(args, 0, "convert_rate"), args[1])


def _rtt(args: Sequence[Argument], config: InterpreterConfig) -> Value:
    return rtt(_keyword(args, 0, "rtt"))


def _throughput(args: Sequence[Argument], config: InterpreterConfig) -> Value:
    return throughput(_keyword(args, 0, "throughput"))


def _transfer_time(args: Sequence[Argument], config: InterpreterConfig) -> Value:
    return transfer_time(
        _value(args, 0, "transfer_time"),
        _keyword(args, 1, "transfer_time"),
        _keyword(args, 2, "transfer_time"),
    )


def _read(args: Sequence[Argument], config: InterpreterConfig) -> Value:
    return read(_value(args, 0, "read"), _keyword(args, 1, "read"))


def _seek(args: Sequence[Argument], config: InterpreterConfig) -> Value:
    return seek(_keyword(args, 0, "seek"))


def _compress(args: Sequence[Argument], config: InterpreterConfig) -> Value:
    return compress(_value(args, 0, "compress"), _keyword(args, 1, "compress"))


def _napkin(args: Sequence[Argument], config: InterpreterConfig) -> Value:
    return napkin_value(_value(args, 0, "napkin"), config.napkin_sig_figs)


# =============================================================================
# REGISTRY
# =============================================================================


def _spec(
    name: str,
    min_args: int,
    max_args: int | None,
    handler: Handler,
    keyword_positions: tuple[int, ...] = (),
) -> FunctionSpec:
    return FunctionSpec(
        name=name,
        min_args=min_args,
        max_args=max_args,
        keyword_positions=frozenset(keyword_positions),
        handler=handler,
    )


_AVG_SPEC: Final[FunctionSpec] = _spec("avg", 1, None, _avg)

FUNCTIONS: Final[Mapping[str, FunctionSpec]] = MappingProxyType(
    {
        "avg": _AVG_SPEC,
        "average": _AVG_SPEC,
        "sqrt": _spec("sqrt", 1, 1, _sqrt),
        "requires": _spec("requires", 2, 3, _requires),
        "capacity_at": _spec("capacity_at", 3, 4, _capacity_at, (2,)),
        "downtime": _spec("downtime", 2, 2, _downtime, (1,)),
        "accumulate": _spec("accumulate", 2, 2, _accumulate, (1,)),
        "convert_rate": _spec("convert_rate", 2, 2, _convert_rate, (1,)),
        "rtt": _spec("rtt", 1, 1, _rtt, (0,)),
        "throughput": _spec("throughput", 1, 1, _throughput, (0,)),
        "transfer_time": _spec("transfer_time", 3, 3, _transfer_time, (1, 2)),
        "read": _spec("read", 2, 2, _read, (1,)),
        "seek": _spec("seek", 1, 1, _seek, (0,)),
        "compress": _spec("compress", 2, 2, _compress, (1,)),
        "napkin": _spec("napkin", 1, 1, _napkin),
    }
)


def lookup_function(name: str) -> FunctionSpec:
    """
    Raises:
        UnknownFunctionError: имя не зарегистрировано
    """
    spec = FUNCTIONS.get(name.strip().lower())
    if spec is None:
        raise UnknownFunctionError(f"unknown function: {name!r}")
    return spec


def call_function(name: str, args: Sequence[Argument], config: InterpreterConfig) -> Value:
    """Проверка арности и вызов функции с уже вычисленными аргументами."""
    spec = lookup_function(name)
    spec.check_arity(len(args))
    return spec.handler(args, config)
