"""
Тесты для downtime()

Проверяет:
1. (1 − availability) × period для стандартных SLA
2. Выбор единицы результата по величине
3. Формы периода: слово, Duration, Quantity времени
4. Ошибки диапазона и типа
"""

from decimal import Decimal

import pytest

from src.core.domain import Duration, Number, Quantity, TimeUnit
from src.core.errors import ArgumentTypeError, OutOfRangeError
from src.functions.availability import downtime, downtime_unit, period_seconds


def pct(value: str) -> Number:
    return Number(value=Decimal(value))


class TestDowntime:
    """Тесты бюджета простоя"""

    @pytest.mark.parametrize(
        "availability,period,expected",
        [
            ("0.999", "month", "43.2 minute"),
            ("0.9999", "year", "52.56 minute"),
            ("0.99999", "day", "0.864 second"),
            ("0.99", "week", "1.68 hour"),
            ("0", "day", "24 hour"),
        ],
    )
    def test_standard_slas(self, availability: str, period: str, expected: str) -> None:
        assert str(downtime(pct(availability), period)) == expected

    def test_full_availability(self) -> None:
        """100% — нулевой простой"""
        result = downtime(pct("1"), "month")
        assert result.value == Decimal(0)
        assert result.unit == TimeUnit.SECOND

    def test_duration_period(self) -> None:
        period = Duration(value=Decimal(30), unit="days")
        assert str(downtime(pct("0.999"), period)) == "43.2 minute"

    def test_quantity_period(self) -> None:
        period = Quantity(value=Decimal(2), unit="hours")
        assert str(downtime(pct("0.5"), period)) == "1 hour"

    def test_period_keyword_case(self) -> None:
        assert str(downtime(pct("0.999"), "Month")) == "43.2 minute"


class TestDowntimeErrors:
    """Тесты ошибок"""

    def test_above_one(self) -> None:
        with pytest.raises(OutOfRangeError, match="availability"):
            downtime(pct("1.5"), "month")

    def test_negative(self) -> None:
        with pytest.raises(OutOfRangeError):
            downtime(pct("-0.1"), "month")

    def test_non_number_availability(self) -> None:
        with pytest.raises(ArgumentTypeError, match="percentage"):
            downtime(Quantity(value=Decimal("0.999"), unit="req"), "month")

    def test_unknown_period_keyword(self) -> None:
        with pytest.raises(ArgumentTypeError, match="'fortnight'"):
            downtime(pct("0.999"), "fortnight")

    def test_non_time_quantity_period(self) -> None:
        with pytest.raises(ArgumentTypeError):
            period_seconds(Quantity(value=Decimal(1), unit="GB"))

    def test_number_period(self) -> None:
        with pytest.raises(ArgumentTypeError, match="got Number"):
            period_seconds(pct("30"))


class TestDowntimeUnit:
    """Тесты выбора единицы"""

    def test_thresholds(self) -> None:
        assert downtime_unit(Decimal("59.9")) == TimeUnit.SECOND
        assert downtime_unit(Decimal(60)) == TimeUnit.MINUTE
        assert downtime_unit(Decimal(3599)) == TimeUnit.MINUTE
        assert downtime_unit(Decimal(3600)) == TimeUnit.HOUR
