"""
Unit Registry

Статический реестр единиц измерения: категории, конверсии через базовую единицу.
"""

from src.core.units.registry import (
    THROUGHPUT_UNITS,
    UNIT_REGISTRY,
    UnitCategory,
    UnitInfo,
    UnitRegistry,
    build_registry,
    is_throughput_unit,
    make_linear,
)

__all__ = [
    # Types
    "UnitCategory",
    "UnitInfo",
    "UnitRegistry",
    # Registry
    "UNIT_REGISTRY",
    "THROUGHPUT_UNITS",
    "build_registry",
    "make_linear",
    "is_throughput_unit",
]
