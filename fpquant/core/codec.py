"""Integer quantization codec.

Compression scales every value by ``round(1 / precision)``, rounds half to
even, clamps to the signed 64-bit range and packs the integers with one
uniform sign-magnitude width derived from the largest magnitude. The payload
is the 15-byte header followed by the bitstream.

Values are processed in lanes of ``lane_width`` elements with numpy; the
remainder that does not fill a lane goes through a scalar path performing
the same float operations in the same order, so the two agree bit for bit
and the payload never depends on the lane width.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from fpquant.components.header import (
    FORMAT_VERSION,
    I32_MAX,
    I64_MAX,
    PayloadHeader,
    parse_header,
    write_header,
)
from fpquant.components.precision import Precision, resolve_tolerance
from fpquant.core.bitpack import pack_lane, pack_value, unpack_lane, unpack_value
from fpquant.core.bitwidth import MAX_BITS_PER_VALUE, MIN_BITS_PER_VALUE, bits_per_value
from fpquant.core.strategy import QuantizationStrategy
from fpquant.errors import (
    CorruptPayloadError,
    InvalidArgumentError,
    NonFiniteValueError,
    ScaleOverflowError,
    TruncatedPayloadError,
    UnsupportedVersionError,
)

logger = logging.getLogger(__name__)

SUPPORTED_DTYPES = (np.dtype(np.float32), np.dtype(np.float64))
DEFAULT_LANE_BYTES = 32768

_I64_MAX_AS_FLOAT = float(2**63)
_I64_MIN_AS_FLOAT = -float(2**63)
_BELOW_I64_MAX = float(np.nextafter(_I64_MAX_AS_FLOAT, 0.0))


def default_lane_width(dtype: Any, lane_bytes: int = DEFAULT_LANE_BYTES) -> int:
    """Number of elements of ``dtype`` that fit in ``lane_bytes`` (at least 1)."""
    return max(1, lane_bytes // np.dtype(dtype).itemsize)


def scale_for(precision: Precision | float) -> int:
    """Integer scale ``round(1 / tolerance)``.

    Raises:
        InvalidArgumentError: If the tolerance is not positive, or so coarse
            the scale rounds to zero
        ScaleOverflowError: If the scale does not fit in a signed 64-bit int
    """
    tolerance = resolve_tolerance(precision)
    scale = 1.0 / tolerance
    if scale >= _I64_MAX_AS_FLOAT:
        raise ScaleOverflowError(
            f"Precision value too small, scale overflows int64: {scale}"
        )
    rounded = round(scale)
    if rounded < 1:
        raise InvalidArgumentError(
            f"Precision value too large, scale rounds to {rounded}: {tolerance}"
        )
    return rounded


def _quantize_lane(chunk: np.ndarray, scale_t: np.floating) -> np.ndarray:
    with np.errstate(over="ignore"):
        rounded = np.rint(chunk * scale_t).astype(np.float64)
    clamped = np.clip(rounded, _I64_MIN_AS_FLOAT, _I64_MAX_AS_FLOAT)
    ints = np.minimum(clamped, _BELOW_I64_MAX).astype(np.int64)
    ints[clamped >= _I64_MAX_AS_FLOAT] = I64_MAX
    return ints


def _quantize_scalar(value: np.floating, scale_t: np.floating) -> int:
    with np.errstate(over="ignore"):
        rounded = float(np.rint(value * scale_t))
    clamped = max(min(rounded, _I64_MAX_AS_FLOAT), _I64_MIN_AS_FLOAT)
    if clamped >= _I64_MAX_AS_FLOAT:
        return I64_MAX
    return int(clamped)


class IntegerQuantization(QuantizationStrategy):
    """Fixed-tolerance quantizer with uniform-width bit packing.

    Generic over the float kind: ``dtype`` selects float32 or float64
    arithmetic for scaling, rounding and reconstruction.

    Attributes:
        dtype: float32 or float64
        lane_width: Elements processed per numpy batch

    Example:
        >>> codec = IntegerQuantization(np.float32)
        >>> data = codec.compress([1.2354878, -4.6659936], Precision.TEN_THOUSANDTHS)
        >>> codec.decompress(data)
        array([ 1.2355, -4.666 ], dtype=float32)
    """

    def __init__(self, dtype: Any = np.float64, lane_width: int | None = None) -> None:
        super().__init__(dtype=dtype)
        if self.dtype not in SUPPORTED_DTYPES:
            raise InvalidArgumentError(
                f"dtype must be float32 or float64, got {self.dtype}"
            )
        if lane_width is None:
            lane_width = default_lane_width(self.dtype)
        if isinstance(lane_width, bool) or not isinstance(lane_width, (int, np.integer)):
            raise InvalidArgumentError(f"lane_width must be an int, got {lane_width!r}")
        if lane_width < 1:
            raise InvalidArgumentError(f"lane_width must be >= 1, got {lane_width}")
        self.lane_width = int(lane_width)

    def compress(self, values: Any, precision: Precision | float) -> bytes:
        """Compress a 1-D float array.

        Args:
            values: 1-D array-like, cast to ``self.dtype``
            precision: Precision level or positive tolerance

        Returns:
            Header plus packed bitstream, or ``b""`` for an empty array

        Raises:
            InvalidArgumentError: If values are missing, not 1-D, or the
                precision is not positive
            NonFiniteValueError: If values contain NaN or Infinity
            ScaleOverflowError: If the scale overflows int64
            BitWidthOverflowError: If the derived width is outside [1, 64]
        """
        array = self._validate_values(values)
        if array.size == 0:
            return b""

        scale = scale_for(precision)
        bits = bits_per_value(array, scale)
        count = int(array.size)
        if count > I32_MAX:
            raise InvalidArgumentError(
                f"Too many values for one payload: {count} > {I32_MAX}"
            )

        header = PayloadHeader(bits_per_value=bits, value_count=count, scale=scale)
        buffer = bytearray(header.payload_size)
        write_header(header, buffer)

        scale_t = self.dtype.type(scale)
        lane = self.lane_width
        batched = count - count % lane
        position = 0
        for start in range(0, batched, lane):
            ints = _quantize_lane(array[start : start + lane], scale_t)
            position = pack_lane(buffer, position, ints, bits)
        for value in array[batched:]:
            position = pack_value(buffer, position, _quantize_scalar(value, scale_t), bits)

        logger.debug(
            "Compressed %d %s values: scale=%d bits_per_value=%d payload=%d bytes",
            count,
            self.dtype.name,
            scale,
            bits,
            len(buffer),
        )
        return bytes(buffer)

    def decompress(
        self,
        data: bytes,
        value_count: int | None = None,
        precision: Precision | float | None = None,
    ) -> np.ndarray:
        """Reconstruct values from a payload.

        ``value_count`` and ``precision`` are optional; when given they pin
        the payload to a previously agreed contract.

        Raises:
            InvalidArgumentError: If data is None or a pinned field mismatches
            TruncatedPayloadError: If the payload is shorter than declared
            UnsupportedVersionError: If the header version is not supported
            CorruptPayloadError: If header fields are out of range
        """
        if data is None:
            raise InvalidArgumentError("data must not be None")
        if len(data) == 0:
            return np.zeros(0, dtype=self.dtype)

        header = parse_header(data)
        self._check_header(header, value_count, precision)
        if len(data) < header.payload_size:
            raise TruncatedPayloadError(
                f"Payload truncated: header declares {header.payload_size} bytes, got {len(data)}"
            )

        raw = np.frombuffer(data, dtype=np.uint8)
        count = header.value_count
        bits = header.bits_per_value
        scale_t = self.dtype.type(header.scale)
        lane = self.lane_width
        batched = count - count % lane

        out = np.empty(count, dtype=self.dtype)
        position = 0
        for start in range(0, batched, lane):
            ints, position = unpack_lane(raw, position, lane, bits)
            out[start : start + lane] = ints.astype(self.dtype) / scale_t
        for i in range(batched, count):
            value, position = unpack_value(raw, position, bits)
            out[i] = np.int64(value).astype(self.dtype) / scale_t

        logger.debug(
            "Decompressed %d %s values: scale=%d bits_per_value=%d",
            count,
            self.dtype.name,
            header.scale,
            bits,
        )
        return out

    def _validate_values(self, values: Any) -> np.ndarray:
        if values is None:
            raise InvalidArgumentError("values must not be None")
        array = np.asarray(values)
        if array.ndim != 1:
            raise InvalidArgumentError(f"Expected 1-D array, got shape {array.shape}")
        if array.size and array.dtype.kind not in "biuf":
            raise InvalidArgumentError(f"Expected numeric values, got dtype {array.dtype}")
        with np.errstate(over="ignore"):
            array = array.astype(self.dtype, copy=False)
        finite = np.isfinite(array)
        if not finite.all():
            index = int(np.flatnonzero(~finite)[0])
            raise NonFiniteValueError(
                f"Cannot quantize non-finite value {array[index]} at index {index}"
            )
        return array

    def _check_header(
        self,
        header: PayloadHeader,
        value_count: int | None,
        precision: Precision | float | None,
    ) -> None:
        if header.version != FORMAT_VERSION:
            raise UnsupportedVersionError(
                f"Unsupported version {header.version}. Expected {FORMAT_VERSION}"
            )
        if not MIN_BITS_PER_VALUE <= header.bits_per_value <= MAX_BITS_PER_VALUE:
            raise CorruptPayloadError(
                f"bits per value must be in [{MIN_BITS_PER_VALUE}, {MAX_BITS_PER_VALUE}], "
                f"got {header.bits_per_value}"
            )
        if header.value_count < 0:
            raise CorruptPayloadError(f"Negative value count: {header.value_count}")
        if header.scale < 1:
            raise CorruptPayloadError(f"Scale must be >= 1, got {header.scale}")

        if value_count is not None and value_count != header.value_count:
            raise InvalidArgumentError(
                f"Value count mismatch: expected {value_count}, payload has {header.value_count}"
            )
        if precision is not None:
            expected_scale = scale_for(precision)
            if expected_scale != header.scale:
                raise InvalidArgumentError(
                    f"Precision mismatch: expected scale {expected_scale}, payload has {header.scale}"
                )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(dtype={self.dtype.name}, lane_width={self.lane_width})"
