"""
Domain Function Library

Capacity planning, SLA downtime, rate accumulation and conversion,
network/storage timing, compression estimates and napkin rounding.
"""

from src.functions.aggregate import average, square_root
from src.functions.availability import downtime, period_seconds
from src.functions.capacity import capacity_at, normalize_load, required_count, requires
from src.functions.compression import compress
from src.functions.keywords import (
    COMPRESSION_RATIOS,
    NETWORK_RTT_MS,
    NETWORK_THROUGHPUT_MBPS,
    STORAGE_READ_MBPS,
    STORAGE_SEEK_MS,
    CompressionType,
    NetworkScope,
    NetworkType,
    StorageType,
)
from src.functions.library import FUNCTIONS, FunctionSpec, call_function, lookup_function
from src.functions.napkin import DEFAULT_SIG_FIGS, format_napkin, napkin_magnitude, napkin_value
from src.functions.network import rtt, throughput, transfer_time
from src.functions.rates import accumulate, accumulate_over, convert_rate
from src.functions.storage import read, seek

__all__ = [
    # Registry
    "FunctionSpec",
    "FUNCTIONS",
    "lookup_function",
    "call_function",
    # Keywords
    "NetworkScope",
    "NetworkType",
    "StorageType",
    "CompressionType",
    "NETWORK_RTT_MS",
    "NETWORK_THROUGHPUT_MBPS",
    "STORAGE_READ_MBPS",
    "STORAGE_SEEK_MS",
    "COMPRESSION_RATIOS",
    # Aggregate
    "average",
    "square_root",
    # Capacity
    "requires",
    "capacity_at",
    "required_count",
    "normalize_load",
    # Availability
    "downtime",
    "period_seconds",
    # Rates
    "accumulate",
    "accumulate_over",
    "convert_rate",
    # Network
    "rtt",
    "throughput",
    "transfer_time",
    # Storage
    "read",
    "seek",
    # Compression
    "compress",
    # Napkin
    "DEFAULT_SIG_FIGS",
    "format_napkin",
    "napkin_magnitude",
    "napkin_value",
]
