"""
Capacity Planning — requires / capacity_at

Сколько единиц ёмкости нужно для нагрузки:

    count = ceil(load × (1 + buffer) / capacity)

buffer — доля (0.2 = 20%). Нулевой buffer — множитель 1.

Нормализация операндов перед делением:
- Quantity / Quantity: нагрузка переводится в единицу ёмкости через реестр
- Rate / Rate: числитель нагрузки → единица числителя ёмкости; при разных
  временных базах обе стороны приводятся к «в секунду»
- Rate / throughput Quantity (bps, kbps, mbps, gbps, tbps): обе стороны в битах в секунду
- Number с чем угодно: сырые значения

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Результат — неотрицательное целое (точный ceiling в Decimal)
2. Неудачная нормализация — ошибка, НЕ fallback на сырые числа
3. capacity <= 0, buffer < 0, load < 0 — ошибки
"""

from decimal import Decimal

from src.core.domain.time_units import seconds_in
from src.core.domain.values import Currency, Number, Quantity, Rate, Value, type_name
from src.core.errors import ArgumentTypeError, IncompatibleCurrenciesError, IncompatibleUnitsError
from src.core.math.numerical_safeguards import (
    ONE,
    ZERO,
    ceil_decimal,
    validate_non_negative,
    validate_positive,
)
from src.core.units.registry import UNIT_REGISTRY, UnitCategory, is_throughput_unit

_BIT = "bit"


def _rate_amounts(demand: Rate, capacity: Rate) -> tuple[Decimal, Decimal]:
    if isinstance(demand.amount, Currency) or isinstance(capacity.amount, Currency):
        if not (isinstance(demand.amount, Currency) and isinstance(capacity.amount, Currency)):
            raise IncompatibleUnitsError(
                f"cannot compare rates {demand} and {capacity}: currency and quantity amounts"
            )
        if demand.amount.code != capacity.amount.code:
            raise IncompatibleCurrenciesError(
                f"cannot compare rates in {demand.amount.code} and {capacity.amount.code}"
            )
        demand_value = demand.amount_value
    elif demand.amount_unit == capacity.amount_unit:
        demand_value = demand.amount_value
    else:
        demand_value = UNIT_REGISTRY.convert_value(
            demand.amount_value, demand.amount_unit, capacity.amount_unit
        )

    capacity_value = capacity.amount_value
    if demand.per_unit != capacity.per_unit:
        demand_value = demand_value / seconds_in(demand.per_unit)
        capacity_value = capacity_value / seconds_in(capacity.per_unit)
    return demand_value, capacity_value


def _rate_bits_per_second(rate: Rate) -> Decimal:
    if UNIT_REGISTRY.category_of(rate.amount_unit) != UnitCategory.DATA_SIZE or isinstance(
        rate.amount, Currency
    ):
        raise IncompatibleUnitsError(
            f"cannot compare rate {rate} with a network throughput: amount is not a data size"
        )
    bits = UNIT_REGISTRY.convert_value(rate.amount_value, rate.amount_unit, _BIT)
    return bits / seconds_in(rate.per_unit)


def _throughput_bits_per_second(quantity: Quantity) -> Decimal:
    return UNIT_REGISTRY.convert_value(quantity.value, quantity.unit, _BIT)


def normalize_load(demand: Value, capacity: Value) -> tuple[Decimal, Decimal]:
    """
    Приведение нагрузки и ёмкости к сопоставимым числам.

    Returns:
        (demand_value, capacity_value) в общей единице

    Raises:
        ArgumentTypeError: операнд не Number/Quantity/Rate
        IncompatibleUnitsError: единицы нельзя привести друг к другу
    """
    for role, value in (("demand", demand), ("capacity", capacity)):
        if not isinstance(value, (Number, Quantity, Rate)):
            raise ArgumentTypeError(
                f"capacity {role} must be a number, quantity, or rate, got {type_name(value)}"
            )

    if isinstance(demand, Number):
        if isinstance(capacity, Rate):
            return demand.value, capacity.amount_value
        return demand.value, capacity.value

    if isinstance(capacity, Number):
        if isinstance(demand, Rate):
            return demand.amount_value, capacity.value
        return demand.value, capacity.value

    if isinstance(demand, Quantity) and isinstance(capacity, Quantity):
        if demand.unit == capacity.unit:
            return demand.value, capacity.value
        return UNIT_REGISTRY.convert_value(demand.value, demand.unit, capacity.unit), capacity.value

    if isinstance(demand, Rate) and isinstance(capacity, Rate):
        return _rate_amounts(demand, capacity)

    if isinstance(demand, Rate) and isinstance(capacity, Quantity):
        if is_throughput_unit(capacity.unit):
            return _rate_bits_per_second(demand), _throughput_bits_per_second(capacity)
        raise IncompatibleUnitsError(
            f"cannot compare rate {demand} with quantity {capacity}: "
            f"{capacity.unit!r} is not a throughput unit"
        )

    # Quantity demand, Rate capacity
    if is_throughput_unit(demand.unit):
        return _throughput_bits_per_second(demand), _rate_bits_per_second(capacity)
    raise IncompatibleUnitsError(
        f"cannot compare quantity {demand} with rate {capacity}: "
        f"{demand.unit!r} is not a throughput unit"
    )


def required_count(demand: Value, capacity: Value, buffer: Decimal = ZERO) -> Decimal:
    """
    ceil(demand × (1 + buffer) / capacity).

    Args:
        demand: Нагрузка (Number, Quantity, Rate)
        capacity: Ёмкость одной единицы (Number, Quantity, Rate)
        buffer: Запас как доля (0.2 = 20%)

    Returns:
        Неотрицательное целое как Decimal

    Raises:
        DivisionByZeroError: ёмкость равна нулю
        NegativeValueError: отрицательная ёмкость, нагрузка или buffer

    Examples:
        10 TB, 2 TB → 5
        10000 req/s, 450 req/s → 23
        1 GB/s, 100 Mbps → 86
    """
    validate_non_negative(buffer, "capacity buffer")
    demand_value, capacity_value = normalize_load(demand, capacity)
    validate_positive(capacity_value, "capacity")
    validate_non_negative(demand_value, "capacity demand")
    return ceil_decimal(demand_value * (ONE + buffer) / capacity_value)


def requires(demand: Value, capacity: Value, buffer: Decimal = ZERO) -> Number:
    """Количество единиц ёмкости как Number."""
    return Number(value=required_count(demand, capacity, buffer))


def capacity_at(demand: Value, capacity: Value, unit: str, buffer: Decimal = ZERO) -> Quantity:
    """
    Количество единиц ёмкости как Quantity с единицей, заданной вызывающим.

    Examples:
        capacity_at(10 TB, 2 TB, "disk") → 5 disk
    """
    return Quantity(value=required_count(demand, capacity, buffer), unit=unit)
