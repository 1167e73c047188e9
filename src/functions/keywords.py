"""
Keywords — закрытые перечисления ключевых слов функций

Scope сети, тип сети, тип хранилища, тип сжатия. Каждое перечисление
разбирается одной точкой parse(): регистр не важен, пробелы по краям
обрезаются; неизвестное слово — UnknownKeywordError со списком
допустимых значений.

Таблицы констант (latency, throughput, ratio) — рядом с перечислениями.
"""

from decimal import Decimal
from enum import Enum
from typing import Final

from src.core.errors import UnknownKeywordError


class _KeywordEnum(str, Enum):
    """Базовый класс: parse() из текста с единым сообщением об ошибке."""

    @classmethod
    def _label(cls) -> str:
        raise NotImplementedError

    @classmethod
    def _plural(cls) -> str:
        raise NotImplementedError

    @classmethod
    def parse(cls, text: str):
        normalized = text.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        valid = ", ".join(member.value for member in cls)
        raise UnknownKeywordError(
            f"unknown {cls._label()} '{text}' (valid {cls._plural()}: {valid})"
        )


class NetworkScope(_KeywordEnum):
    """Географический масштаб сетевого пути"""

    LOCAL = "local"
    REGIONAL = "regional"
    CONTINENTAL = "continental"
    GLOBAL = "global"

    @classmethod
    def _label(cls) -> str:
        return "network scope"

    @classmethod
    def _plural(cls) -> str:
        return "scopes"


class NetworkType(_KeywordEnum):
    """Тип сетевого канала"""

    GIGABIT = "gigabit"
    TEN_GIG = "ten_gig"
    HUNDRED_GIG = "hundred_gig"
    WIFI = "wifi"
    FOUR_G = "four_g"
    FIVE_G = "five_g"

    @classmethod
    def _label(cls) -> str:
        return "network type"

    @classmethod
    def _plural(cls) -> str:
        return "types"


class StorageType(_KeywordEnum):
    """Тип носителя"""

    SSD = "ssd"
    SATA_SSD = "sata_ssd"
    NVME = "nvme"
    PCIE_SSD = "pcie_ssd"
    HDD = "hdd"

    @classmethod
    def _label(cls) -> str:
        return "storage type"

    @classmethod
    def _plural(cls) -> str:
        return "types"


class CompressionType(_KeywordEnum):
    """Алгоритм сжатия"""

    GZIP = "gzip"
    LZ4 = "lz4"
    ZSTD = "zstd"
    BZIP2 = "bzip2"
    SNAPPY = "snappy"
    NONE = "none"

    @classmethod
    def _label(cls) -> str:
        return "compression type"

    @classmethod
    def _plural(cls) -> str:
        return "types"


# =============================================================================
# CONSTANT TABLES
# =============================================================================

# Round-trip latency, ms
NETWORK_RTT_MS: Final[dict[NetworkScope, Decimal]] = {
    NetworkScope.LOCAL: Decimal("0.5"),
    NetworkScope.REGIONAL: Decimal("10"),
    NetworkScope.CONTINENTAL: Decimal("50"),
    NetworkScope.GLOBAL: Decimal("150"),
}

# Sustained throughput, MB/s
NETWORK_THROUGHPUT_MBPS: Final[dict[NetworkType, Decimal]] = {
    NetworkType.GIGABIT: Decimal("125"),
    NetworkType.TEN_GIG: Decimal("1250"),
    NetworkType.HUNDRED_GIG: Decimal("12500"),
    NetworkType.WIFI: Decimal("12.5"),
    NetworkType.FOUR_G: Decimal("2.5"),
    NetworkType.FIVE_G: Decimal("50"),
}

# Sequential read throughput, MB/s
STORAGE_READ_MBPS: Final[dict[StorageType, Decimal]] = {
    StorageType.SSD: Decimal("550"),
    StorageType.SATA_SSD: Decimal("550"),
    StorageType.NVME: Decimal("3500"),
    StorageType.PCIE_SSD: Decimal("7000"),
    StorageType.HDD: Decimal("150"),
}

# Access latency, ms
STORAGE_SEEK_MS: Final[dict[StorageType, Decimal]] = {
    StorageType.HDD: Decimal("10"),
    StorageType.SATA_SSD: Decimal("0.1"),
    StorageType.SSD: Decimal("0.1"),
    StorageType.NVME: Decimal("0.01"),
    StorageType.PCIE_SSD: Decimal("0.01"),
}

COMPRESSION_RATIOS: Final[dict[CompressionType, Decimal]] = {
    CompressionType.GZIP: Decimal("3.0"),
    CompressionType.LZ4: Decimal("2.0"),
    CompressionType.ZSTD: Decimal("3.5"),
    CompressionType.BZIP2: Decimal("4.0"),
    CompressionType.SNAPPY: Decimal("2.5"),
    CompressionType.NONE: Decimal("1.0"),
}
