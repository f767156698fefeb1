"""Lossy fixed-precision compression for float arrays.

Values are scaled by ``round(1 / precision)``, rounded to integers and packed
with one uniform sign-magnitude bit width into a self-describing payload.

Quick Start:
    >>> import numpy as np
    >>> from fpquant import Precision, compress, decompress
    >>>
    >>> values = np.array([1.2354878, -4.6659936, 7.3111189], dtype=np.float32)
    >>> data = compress(values, Precision.TEN_THOUSANDTHS)
    >>> restored = decompress(data, dtype=np.float32)

For more control, use a strategy directly:
    >>> from fpquant import IntegerQuantization
    >>>
    >>> codec = IntegerQuantization(np.float64, lane_width=8)
    >>> data = codec.compress(values, 0.001)
    >>> codec.decompress(data, value_count=3, precision=0.001)
"""

__version__ = "0.1.0"

from fpquant.api import (
    FloatCompressor,
    compress,
    compress_with_precision,
    decompress,
    decompress_double_with_precision,
    decompress_float_with_precision,
    get_compression_info,
    get_compression_ratio,
)
from fpquant.components.header import HEADER_SIZE, PayloadHeader
from fpquant.components.precision import Precision
from fpquant.core.codec import IntegerQuantization
from fpquant.core.strategy import QuantizationStrategy
from fpquant.errors import (
    BitWidthOverflowError,
    CorruptPayloadError,
    FpQuantError,
    InvalidArgumentError,
    NonFiniteValueError,
    RangeOverflowError,
    ScaleOverflowError,
    TruncatedPayloadError,
    UnsupportedVersionError,
)

__all__ = [
    "__version__",
    "compress",
    "decompress",
    "compress_with_precision",
    "decompress_float_with_precision",
    "decompress_double_with_precision",
    "get_compression_info",
    "get_compression_ratio",
    "FloatCompressor",
    "IntegerQuantization",
    "QuantizationStrategy",
    "Precision",
    "PayloadHeader",
    "HEADER_SIZE",
    "FpQuantError",
    "InvalidArgumentError",
    "NonFiniteValueError",
    "RangeOverflowError",
    "ScaleOverflowError",
    "BitWidthOverflowError",
    "UnsupportedVersionError",
    "CorruptPayloadError",
    "TruncatedPayloadError",
]
