"""High-level API for float array compression and decompression.

Provides user-friendly compress() and decompress() functions plus a small
wrapper class for callers that keep the original array around.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from fpquant.components.header import parse_header
from fpquant.components.precision import Precision
from fpquant.config import load_config
from fpquant.core.codec import IntegerQuantization, default_lane_width
from fpquant.core.strategy import QuantizationStrategy
from fpquant.errors import InvalidArgumentError
from fpquant.metrics import compression_ratio


def _strategy_for(dtype: Any, lane_bytes: int) -> IntegerQuantization:
    return IntegerQuantization(dtype=dtype, lane_width=default_lane_width(dtype, lane_bytes))


def _input_dtype(values: Any) -> np.dtype[Any]:
    if isinstance(values, np.ndarray) and values.dtype == np.float32:
        return np.dtype(np.float32)
    return np.dtype(np.float64)


def compress(
    values: Any,
    precision: Precision | float | None = None,
    *,
    config_path: str | None = None,
) -> bytes:
    """Compress a 1-D float array to bytes.

    Args:
        values: 1-D array-like; float32 arrays stay float32, anything else
            is processed as float64
        precision: Precision level or positive tolerance (config default if None)
        config_path: Path to fpquant.toml (auto-detected if None)

    Returns:
        Compressed payload, empty for an empty array

    Example:
        >>> import numpy as np
        >>> from fpquant import compress, decompress
        >>> data = compress(np.array([1.23, 4.56, 7.89]), Precision.HUNDREDTHS)
        >>> decompress(data)
        array([1.23, 4.56, 7.89])
    """
    if values is None:
        raise InvalidArgumentError("values must not be None")
    config = load_config(config_path)
    if precision is None:
        precision = config.precision
    strategy = _strategy_for(_input_dtype(values), config.lane_bytes)
    return strategy.compress(values, precision)


def decompress(
    data: bytes,
    value_count: int | None = None,
    precision: Precision | float | None = None,
    *,
    dtype: Any = None,
    config_path: str | None = None,
) -> np.ndarray:
    """Decompress bytes to a float array.

    Args:
        data: Payload from compress()
        value_count: If given, must match the payload's value count
        precision: If given, must match the payload's scale
        dtype: float32 or float64 (config default if None)
        config_path: Path to fpquant.toml (auto-detected if None)

    Returns:
        Reconstructed 1-D array
    """
    config = load_config(config_path)
    strategy = _strategy_for(dtype or config.dtype, config.lane_bytes)
    return strategy.decompress(data, value_count=value_count, precision=precision)


def get_compression_info(data: bytes) -> dict[str, Any]:
    """Get header fields of a payload without decompressing it.

    Returns:
        Dictionary with keys: version, flags, bits_per_value, value_count,
        scale, tolerance, payload_size
    """
    if len(data) == 0:
        return {
            "version": None,
            "flags": None,
            "bits_per_value": 0,
            "value_count": 0,
            "scale": None,
            "tolerance": None,
            "payload_size": 0,
        }
    header = parse_header(data)
    info = header.model_dump()
    info["tolerance"] = 1.0 / header.scale if header.scale > 0 else None
    info["payload_size"] = header.payload_size
    return info


def get_compression_ratio(original: Any, compressed_data: bytes) -> float:
    """Calculate compression ratio (original bytes / compressed bytes)."""
    return compression_ratio(np.asarray(original).nbytes, len(compressed_data))


class FloatCompressor:
    """Holds an array and its precision for repeated compress/decompress.

    decompress() pins the payload to the held array's length and precision.

    Example:
        >>> compressor = FloatCompressor(values, Precision.THOUSANDTHS)
        >>> restored = compressor.decompress(compressor.compress())
    """

    def __init__(
        self,
        values: Any,
        precision: Precision | float,
        strategy: QuantizationStrategy | None = None,
    ) -> None:
        if values is None:
            raise InvalidArgumentError("values must not be None")
        self.values = np.asarray(values)
        self.precision = precision
        self.strategy = strategy or IntegerQuantization(_input_dtype(self.values))

    def compress(self) -> bytes:
        return self.strategy.compress(self.values, self.precision)

    def decompress(self, data: bytes) -> np.ndarray:
        return self.strategy.decompress(
            data, value_count=len(self.values), precision=self.precision
        )


def compress_with_precision(
    values: Any,
    precision: Precision | float,
    strategy: QuantizationStrategy | None = None,
) -> bytes:
    """Compress ``values`` with an explicit precision and optional strategy."""
    return FloatCompressor(values, precision, strategy).compress()


def _decompress_with_precision(
    data: bytes,
    original_length: int,
    precision: Precision | float,
    strategy: QuantizationStrategy | None,
    dtype: Any,
) -> np.ndarray:
    if strategy is None:
        strategy = IntegerQuantization(dtype)
    elif strategy.dtype != np.dtype(dtype):
        raise InvalidArgumentError(
            f"Strategy produces {strategy.dtype}, expected {np.dtype(dtype)}"
        )
    return strategy.decompress(data, value_count=original_length, precision=precision)


def decompress_float_with_precision(
    data: bytes,
    original_length: int,
    precision: Precision | float,
    strategy: QuantizationStrategy | None = None,
) -> np.ndarray:
    """Decompress to float32, checking length and precision against the payload."""
    return _decompress_with_precision(data, original_length, precision, strategy, np.float32)


def decompress_double_with_precision(
    data: bytes,
    original_length: int,
    precision: Precision | float,
    strategy: QuantizationStrategy | None = None,
) -> np.ndarray:
    """Decompress to float64, checking length and precision against the payload."""
    return _decompress_with_precision(data, original_length, precision, strategy, np.float64)


__all__ = [
    "FloatCompressor",
    "compress",
    "compress_with_precision",
    "decompress",
    "decompress_double_with_precision",
    "decompress_float_with_precision",
    "get_compression_info",
    "get_compression_ratio",
]
