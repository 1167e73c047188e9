"""
Тесты для accumulate() и convert_rate()
"""

from decimal import Decimal

import pytest

from src.core.domain import Currency, Duration, Number, Quantity, Rate, TimeUnit
from src.core.errors import ArgumentTypeError
from src.functions.rates import accumulate, convert_rate


def rate(value, unit: str, per: str) -> Rate:
    return Rate(amount=Quantity(value=Decimal(str(value)), unit=unit), per_unit=per)


class TestAccumulate:
    """Тесты накопления"""

    def test_throughput_over_day(self) -> None:
        result = accumulate(rate(100, "MB", "s"), Duration(value=Decimal(1), unit="day"))
        assert str(result) == "8640000 MB"

    def test_currency_rate_stays_currency(self) -> None:
        hourly = Rate(amount=Currency.of(Decimal("0.10"), "$"), per_unit="hour")
        result = accumulate(hourly, Duration(value=Decimal(30), unit="days"))
        assert isinstance(result, Currency)
        assert str(result) == "$72.00"

    def test_keyword_period(self) -> None:
        result = accumulate(rate(5, "GB", "day"), "year")
        assert result == Quantity(value=Decimal(1825), unit="GB")

    def test_requires_rate(self) -> None:
        with pytest.raises(ArgumentTypeError, match="accumulate\\(\\) requires a rate"):
            accumulate(Number(value=Decimal(5)), "day")


class TestConvertRate:
    """Тесты пересчёта временной базы"""

    def test_per_second_to_per_hour(self) -> None:
        result = convert_rate(rate(1000, "req", "s"), "hour")
        assert result.per_unit == TimeUnit.HOUR
        assert result.amount_value == Decimal(3600000)
        assert str(result) == "3600000 req/h"

    def test_per_day_to_per_second(self) -> None:
        result = convert_rate(rate(5000000, "", "day"), "second")
        assert float(result.amount_value) == pytest.approx(57.87, abs=0.01)

    def test_same_base_identity(self) -> None:
        source = rate(10, "MB", "s")
        assert convert_rate(source, "sec") is source

    def test_target_must_be_time_unit(self) -> None:
        with pytest.raises(ArgumentTypeError, match="must be a time unit"):
            convert_rate(rate(1, "req", "s"), "parsec")

    def test_target_must_be_keyword(self) -> None:
        with pytest.raises(ArgumentTypeError):
            convert_rate(rate(1, "req", "s"), Number(value=Decimal(1)))
