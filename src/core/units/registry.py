"""
Unit Registry — статический реестр единиц измерения

Отображение имя (lowercase) → UnitInfo{category, to_base, from_base}.
Строится один раз при импорте модуля и далее только читается:
таблица завёрнута в MappingProxyType, пути мутации нет.

Категории и базовые единицы:
- length       → meter
- mass         → kilogram
- volume       → liter
- temperature  → celsius (конверсия со смещением, НЕ линейная)
- speed        → m/s
- energy       → joule
- power        → watt
- area         → m²
- data_size    → bit

Data size поддерживает три конвенции одновременно:
- IEC binary (KiB, MiB, ... — 1024-based)
- SI-написания (KB, MB, ... — намеренно алиасы binary значений)
- сетевые биты (kbit, Mbps, ... — 1000-based)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Категория известной единицы никогда не меняется после построения
2. Произвольные (неизвестные) единицы никогда не конвертируются
3. Конверсия всегда идёт через базовую единицу категории
4. Результат конверсии сохраняет написание целевой единицы, запрошенное вызывающим
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Callable, Final, Iterable, Mapping

from src.core.domain.values import Quantity
from src.core.errors import IncompatibleUnitsError
from src.core.math.numerical_safeguards import decimal_from_float, decimal_to_float


# =============================================================================
# TYPES
# =============================================================================


class UnitCategory(str, Enum):
    """Семейство взаимно конвертируемых единиц"""

    LENGTH = "length"
    MASS = "mass"
    VOLUME = "volume"
    TEMPERATURE = "temperature"
    SPEED = "speed"
    ENERGY = "energy"
    POWER = "power"
    AREA = "area"
    DATA_SIZE = "data_size"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class UnitInfo:
    """Категория и функции конверсии в/из базовой единицы категории."""

    category: UnitCategory
    to_base: Callable[[float], float]
    from_base: Callable[[float], float]


def make_linear(category: UnitCategory, factor: float) -> UnitInfo:
    """
    Линейная единица: base = value × factor.

    Args:
        category: Категория единицы
        factor: Количество базовых единиц в одной данной единице
    """
    return UnitInfo(
        category=category,
        to_base=lambda v: v * factor,
        from_base=lambda v: v / factor,
    )


# =============================================================================
# UNIT TABLES
# =============================================================================

# (factor, spellings)
_LENGTH_UNITS: Final[tuple[tuple[float, tuple[str, ...]], ...]] = (
    (1.0, ("m", "meter", "meters", "metre", "metres")),
    (1000.0, ("km", "kilometer", "kilometers", "kilometre", "kilometres")),
    (0.01, ("cm", "centimeter", "centimeters", "centimetre", "centimetres")),
    (0.001, ("mm", "millimeter", "millimeters", "millimetre", "millimetres")),
    (0.3048, ("ft", "foot", "feet")),
    (0.0254, ("in", "inch", "inches")),
    (0.9144, ("yd", "yard", "yards")),
    (1609.344, ("mi", "mile", "miles")),
    (1852.0, ("nmi", "nautical mile", "nautical miles")),
)

_MASS_UNITS: Final[tuple[tuple[float, tuple[str, ...]], ...]] = (
    (1.0, ("kg", "kilogram", "kilograms")),
    (0.001, ("g", "gram", "grams")),
    (0.000001, ("mg", "milligram", "milligrams")),
    (1000.0, ("t", "tonne", "tonnes", "metric ton", "metric tons")),
    (0.45359237, ("lb", "lbs", "pound", "pounds")),
    (0.028349523125, ("oz", "ounce", "ounces")),
)

_VOLUME_UNITS: Final[tuple[tuple[float, tuple[str, ...]], ...]] = (
    (1.0, ("l", "liter", "liters", "litre", "litres")),
    (0.001, ("ml", "milliliter", "milliliters", "millilitre", "millilitres")),
    (3.785411784, ("gal", "gallon", "gallons")),
    (0.473176473, ("pt", "pint", "pints")),
    (0.946352946, ("qt", "quart", "quarts")),
    (0.24, ("cup", "cups")),
    (0.01478676478125, ("tbsp", "tablespoon", "tablespoons")),
    (0.00492892159375, ("tsp", "teaspoon", "teaspoons")),
)

_SPEED_UNITS: Final[tuple[tuple[float, tuple[str, ...]], ...]] = (
    (1.0, ("m/s", "mps", "meters per second", "metres per second")),
    (1000.0 / 3600.0, ("km/h", "kph", "kmh", "kilometers per hour", "kilometres per hour")),
    (0.44704, ("mph", "miles per hour")),
    (0.3048, ("ft/s", "fps", "feet per second")),
    (1852.0 / 3600.0, ("knot", "knots", "kn")),
)

_ENERGY_UNITS: Final[tuple[tuple[float, tuple[str, ...]], ...]] = (
    (1.0, ("j", "joule", "joules")),
    (1000.0, ("kj", "kilojoule", "kilojoules")),
    (4.184, ("cal", "calorie", "calories")),
    (4184.0, ("kcal", "kilocalorie", "kilocalories")),
    (3600.0, ("wh", "watt hour", "watt hours", "watt-hour", "watt-hours")),
    (3600000.0, ("kwh", "kilowatt hour", "kilowatt hours", "kilowatt-hour", "kilowatt-hours")),
    (1055.05585262, ("btu", "btus")),
)

_POWER_UNITS: Final[tuple[tuple[float, tuple[str, ...]], ...]] = (
    (1.0, ("w", "watt", "watts")),
    (1000.0, ("kw", "kilowatt", "kilowatts")),
    (1000000.0, ("mw", "megawatt", "megawatts")),
    (745.69987158227022, ("hp", "horsepower")),
)

_AREA_UNITS: Final[tuple[tuple[float, tuple[str, ...]], ...]] = (
    (1.0, ("m²", "m2", "sq m", "square meter", "square meters", "square metre", "square metres")),
    (1000000.0, ("km²", "km2", "sq km", "square kilometer", "square kilometers")),
    (0.09290304, ("ft²", "ft2", "sq ft", "square foot", "square feet")),
    (4046.8564224, ("acre", "acres")),
    (10000.0, ("ha", "hectare", "hectares")),
    (2589988.110336, ("mi²", "mi2", "sq mi", "square mile", "square miles")),
)

# Base unit: bit. KB/MB/... намеренно алиасы KiB/MiB/... (1024-based)
_DATA_SIZE_UNITS: Final[tuple[tuple[float, tuple[str, ...]], ...]] = (
    (1.0, ("bit", "bits")),
    (8.0, ("b", "byte", "bytes")),
    (8.0 * 1024, ("kib", "kibibyte", "kibibytes", "kb", "kilobyte", "kilobytes")),
    (8.0 * 1024**2, ("mib", "mebibyte", "mebibytes", "mb", "megabyte", "megabytes")),
    (8.0 * 1024**3, ("gib", "gibibyte", "gibibytes", "gb", "gigabyte", "gigabytes")),
    (8.0 * 1024**4, ("tib", "tebibyte", "tebibytes", "tb", "terabyte", "terabytes")),
    (8.0 * 1024**5, ("pib", "pebibyte", "pebibytes", "pb", "petabyte", "petabytes")),
    (8.0 * 1024**6, ("eib", "exbibyte", "exbibytes", "eb", "exabyte", "exabytes")),
    (1e3, ("kbit", "kbits", "kilobit", "kilobits")),
    (1e6, ("mbit", "mbits", "megabit", "megabits")),
    (1e9, ("gbit", "gbits", "gigabit", "gigabits")),
    (1e12, ("tbit", "tbits", "terabit", "terabits")),
    (1.0, ("bps",)),
    (1e3, ("kbps",)),
    (1e6, ("mbps",)),
    (1e9, ("gbps",)),
    (1e12, ("tbps",)),
)

THROUGHPUT_UNITS: Final[frozenset[str]] = frozenset({"bps", "kbps", "mbps", "gbps", "tbps"})

_ABSOLUTE_ZERO_OFFSET: Final[float] = 273.15


def _temperature_units() -> dict[str, UnitInfo]:
    """Температура: база — celsius, конверсии со смещением."""
    celsius = UnitInfo(
        category=UnitCategory.TEMPERATURE,
        to_base=lambda v: v,
        from_base=lambda v: v,
    )
    fahrenheit = UnitInfo(
        category=UnitCategory.TEMPERATURE,
        to_base=lambda v: (v - 32.0) * 5.0 / 9.0,
        from_base=lambda v: v * 9.0 / 5.0 + 32.0,
    )
    kelvin = UnitInfo(
        category=UnitCategory.TEMPERATURE,
        to_base=lambda v: v - _ABSOLUTE_ZERO_OFFSET,
        from_base=lambda v: v + _ABSOLUTE_ZERO_OFFSET,
    )
    table: dict[str, UnitInfo] = {}
    for name in ("celsius", "°c", "degc", "degrees celsius"):
        table[name] = celsius
    for name in ("fahrenheit", "°f", "degf", "degrees fahrenheit"):
        table[name] = fahrenheit
    for name in ("kelvin", "kelvins"):
        table[name] = kelvin
    return table


def _build_table() -> dict[str, UnitInfo]:
    table: dict[str, UnitInfo] = {}
    linear_groups: tuple[tuple[UnitCategory, tuple[tuple[float, tuple[str, ...]], ...]], ...] = (
        (UnitCategory.LENGTH, _LENGTH_UNITS),
        (UnitCategory.MASS, _MASS_UNITS),
        (UnitCategory.VOLUME, _VOLUME_UNITS),
        (UnitCategory.SPEED, _SPEED_UNITS),
        (UnitCategory.ENERGY, _ENERGY_UNITS),
        (UnitCategory.POWER, _POWER_UNITS),
        (UnitCategory.AREA, _AREA_UNITS),
        (UnitCategory.DATA_SIZE, _DATA_SIZE_UNITS),
    )
    for category, units in linear_groups:
        for factor, spellings in units:
            info = make_linear(category, factor)
            for spelling in spellings:
                if spelling in table:
                    raise RuntimeError(f"duplicate unit spelling in registry: {spelling!r}")
                table[spelling] = info
    for spelling, info in _temperature_units().items():
        if spelling in table:
            raise RuntimeError(f"duplicate unit spelling in registry: {spelling!r}")
        table[spelling] = info
    return table


# =============================================================================
# REGISTRY
# =============================================================================


class UnitRegistry:
    """
    Read-only реестр единиц.

    Поиск регистронезависимый. Безопасен для совместного использования
    любым числом сессий вычисления без блокировок.
    """

    def __init__(self, table: Mapping[str, UnitInfo]):
        self._table: Mapping[str, UnitInfo] = MappingProxyType(dict(table))

    def get(self, name: str) -> UnitInfo | None:
        return self._table.get(name.strip().lower())

    def is_known(self, name: str) -> bool:
        return self.get(name) is not None

    def category_of(self, name: str) -> UnitCategory:
        """Категория единицы; UNKNOWN для произвольных единиц."""
        info = self.get(name)
        return info.category if info is not None else UnitCategory.UNKNOWN

    def names(self, category: UnitCategory | None = None) -> list[str]:
        """Все зарегистрированные написания (опционально — одной категории), отсортированные."""
        return sorted(
            name
            for name, info in self._table.items()
            if category is None or info.category == category
        )

    def convert_value(self, value: Decimal, from_unit: str, to_unit: str) -> Decimal:
        """
        Конверсия числового значения между единицами одной категории.

        Raises:
            IncompatibleUnitsError: единица неизвестна или категории различаются
        """
        if from_unit == to_unit:
            return value
        source = self.get(from_unit)
        target = self.get(to_unit)
        if source is None or target is None:
            unknown = from_unit if source is None else to_unit
            raise IncompatibleUnitsError(
                f"cannot convert {from_unit!r} to {to_unit!r}: {unknown!r} is not a convertible unit"
            )
        if source.category != target.category:
            raise IncompatibleUnitsError(
                f"cannot convert {from_unit!r} ({source.category.value}) "
                f"to {to_unit!r} ({target.category.value})"
            )
        return decimal_from_float(target.from_base(source.to_base(decimal_to_float(value))))

    def convert(self, quantity: Quantity, target_unit: str) -> Quantity:
        """
        Конверсия Quantity в целевую единицу.

        Identity, если единицы текстуально равны. Результат несёт
        написание target_unit, как его передал вызывающий.

        Raises:
            IncompatibleUnitsError: единица неизвестна или категории различаются

        Examples:
            >>> str(UNIT_REGISTRY.convert(Quantity(value=Decimal(1000), unit="m"), "km"))
            '1 km'
        """
        if quantity.unit == target_unit:
            return quantity
        converted = self.convert_value(quantity.value, quantity.unit, target_unit)
        return Quantity(value=converted, unit=target_unit)

    def are_compatible(self, first: str, second: str) -> bool:
        """Обе единицы известны и принадлежат одной категории (или текстуально равны)."""
        if first == second:
            return True
        a, b = self.get(first), self.get(second)
        return a is not None and b is not None and a.category == b.category

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.is_known(name)

    def __len__(self) -> int:
        return len(self._table)


def is_throughput_unit(name: str) -> bool:
    """bps/kbps/mbps/gbps/tbps — data-size единицы, трактуемые как биты в секунду."""
    return name.strip().lower() in THROUGHPUT_UNITS


def build_registry(extra: Iterable[tuple[str, UnitInfo]] = ()) -> UnitRegistry:
    """Построение реестра из встроенных таблиц (плюс дополнительные записи для тестов)."""
    table = _build_table()
    for name, info in extra:
        table[name.strip().lower()] = info
    return UnitRegistry(table)


# Глобальный экземпляр, построенный один раз при импорте
UNIT_REGISTRY: Final[UnitRegistry] = build_registry()
