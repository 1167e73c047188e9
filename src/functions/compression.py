"""
Compression — оценка сжатого объёма: size / ratio в той же единице.
"""

from src.core.domain.values import Quantity, Value, type_name
from src.core.errors import ArgumentTypeError
from src.core.math.numerical_safeguards import validate_non_negative
from src.functions.keywords import COMPRESSION_RATIOS, CompressionType


def compress(size: Value, compression_type: str) -> Quantity:
    """
    Объём после сжатия.

    Examples:
        compress(1 GB, gzip) → 0.333... GB
        compress(100 MB, none) → 100 MB

    Raises:
        ArgumentTypeError: size не Quantity
        NegativeValueError: отрицательный объём
        UnknownKeywordError: неизвестный алгоритм
    """
    if not isinstance(size, Quantity):
        raise ArgumentTypeError(f"compress() size must be a quantity, got {type_name(size)}")
    validate_non_negative(size.value, "compress() size")
    ratio = COMPRESSION_RATIOS[CompressionType.parse(compression_type)]
    return size.with_value(size.value / ratio)
