"""
Network — rtt / throughput / transfer_time

transfer_time = rtt + size_MB / throughput_MBps,
результат в секундах, от 60 s — в минутах.
"""

from decimal import Decimal

from src.core.domain.time_units import TimeUnit
from src.core.domain.values import Duration, Quantity, Rate, Value
from src.functions.data_size import MEGABYTE, escalated_duration, megabytes, require_data_size
from src.functions.keywords import NETWORK_RTT_MS, NETWORK_THROUGHPUT_MBPS, NetworkScope, NetworkType

_MS_PER_SECOND = Decimal(1000)


def rtt_seconds(scope: str) -> Decimal:
    return NETWORK_RTT_MS[NetworkScope.parse(scope)] / _MS_PER_SECOND


def rtt(scope: str) -> Duration:
    """
    Типичная задержка туда-обратно для масштаба сети.

    Examples:
        rtt(local) → 0.0005 second
        rtt(global) → 0.15 second
    """
    return Duration(value=rtt_seconds(scope), unit=TimeUnit.SECOND)


def throughput(network_type: str) -> Rate:
    """Пропускная способность канала как Rate в MB/s."""
    mbps = NETWORK_THROUGHPUT_MBPS[NetworkType.parse(network_type)]
    return Rate(amount=Quantity(value=mbps, unit=MEGABYTE), per_unit=TimeUnit.SECOND)


def transfer_time(size: Value, scope: str, network_type: str) -> Duration:
    """
    Время передачи объёма: задержка + объём / пропускная способность.

    Raises:
        ArgumentTypeError: size не объём данных
        UnknownKeywordError: неизвестный scope или тип сети
    """
    quantity = require_data_size(size, "transfer_time")
    latency = rtt_seconds(scope)
    rate = NETWORK_THROUGHPUT_MBPS[NetworkType.parse(network_type)]
    return escalated_duration(latency + megabytes(quantity) / rate)
