"""Uniform bit width derivation.

A single width covers every value in the array, so one large outlier raises
the cost of all the others. Per-block widths would need a different header.
"""

from __future__ import annotations

import math

import numpy as np

from fpquant.components.header import I64_MAX
from fpquant.errors import BitWidthOverflowError, NonFiniteValueError

MIN_BITS_PER_VALUE = 1
MAX_BITS_PER_VALUE = 64

# long.MaxValue widened to double rounds up to 2**63
_I64_MAX_AS_FLOAT = float(2**63)


def max_scaled_magnitude(values: np.ndarray, scale: int) -> int:
    """Return ``ceil(max(|v|) * scale)`` clamped to ``[0, 2**63 - 1]``.

    The product is taken in the array's own float kind, the same arithmetic
    the quantizer uses, so no rounded value can exceed the result.
    """
    if values.size == 0:
        return 0
    kind = values.dtype.type
    with np.errstate(over="ignore"):
        scaled = float(np.abs(values).max() * kind(scale))
    if math.isnan(scaled):
        raise NonFiniteValueError("Cannot derive bit width from NaN values")
    clamped = min(abs(scaled), _I64_MAX_AS_FLOAT)
    return min(math.ceil(clamped), I64_MAX)


def bits_per_value(values: np.ndarray, scale: int) -> int:
    """Minimum uniform width (magnitude bits + sign bit) for ``values``.

    Args:
        values: 1-D float32 or float64 array
        scale: Integer scale applied before rounding

    Returns:
        Bit width in ``[1, 64]``; an all-zero or empty array needs only the
        sign bit

    Raises:
        BitWidthOverflowError: If the width falls outside ``[1, 64]``
    """
    magnitude = max_scaled_magnitude(values, scale)
    # ceil(log2(m + 1)) == m.bit_length() for m >= 0
    bits = magnitude.bit_length() + 1
    if not MIN_BITS_PER_VALUE <= bits <= MAX_BITS_PER_VALUE:
        raise BitWidthOverflowError(
            f"bits per value must be in [{MIN_BITS_PER_VALUE}, {MAX_BITS_PER_VALUE}], got {bits}"
        )
    return bits
