"""
Storage — read / seek

read: size_MB / throughput_MBps (секунды, от 60 s — минуты)
seek: типичная задержка доступа носителя
"""

from decimal import Decimal

from src.core.domain.time_units import TimeUnit
from src.core.domain.values import Duration, Value
from src.functions.data_size import escalated_duration, megabytes, require_data_size
from src.functions.keywords import STORAGE_READ_MBPS, STORAGE_SEEK_MS, StorageType

_MS_PER_SECOND = Decimal(1000)


def read(size: Value, storage_type: str) -> Duration:
    """
    Время последовательного чтения.

    Examples:
        read(100 MB, ssd) → ~0.182 second
        read(1 GB, nvme) → ~0.293 second
    """
    quantity = require_data_size(size, "read")
    mbps = STORAGE_READ_MBPS[StorageType.parse(storage_type)]
    return escalated_duration(megabytes(quantity) / mbps)


def seek(storage_type: str) -> Duration:
    """Задержка доступа: seek(hdd) → 0.01 second."""
    latency = STORAGE_SEEK_MS[StorageType.parse(storage_type)] / _MS_PER_SECOND
    return Duration(value=latency, unit=TimeUnit.SECOND)
