"""Reconstruction quality and size metrics."""

from __future__ import annotations

from typing import Any

import numpy as np
from skimage.metrics import mean_squared_error as _skimage_mse

from fpquant.errors import InvalidArgumentError


def _paired(original: Any, decompressed: Any) -> tuple[np.ndarray, np.ndarray]:
    a = np.asarray(original, dtype=np.float64)
    b = np.asarray(decompressed, dtype=np.float64)
    if a.shape != b.shape:
        raise InvalidArgumentError(
            f"Shape mismatch: original {a.shape}, decompressed {b.shape}"
        )
    return a, b


def mean_error(original: Any, decompressed: Any) -> float:
    """Signed mean of ``decompressed - original`` (0.0 for empty arrays)."""
    a, b = _paired(original, decompressed)
    if a.size == 0:
        return 0.0
    return float(np.mean(b - a))


def max_abs_error(original: Any, decompressed: Any) -> float:
    """Largest absolute reconstruction error."""
    a, b = _paired(original, decompressed)
    if a.size == 0:
        return 0.0
    return float(np.max(np.abs(b - a)))


def mean_squared_error(original: Any, decompressed: Any) -> float:
    a, b = _paired(original, decompressed)
    if a.size == 0:
        return 0.0
    return float(_skimage_mse(a, b))


def compression_ratio(original_size: int, compressed_size: int) -> float:
    """``original_size / compressed_size``, or 0.0 when nothing was produced."""
    if compressed_size == 0:
        return 0.0
    return original_size / compressed_size
