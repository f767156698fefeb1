"""Quantization strategy interface.

A strategy turns a float array into a byte payload and back. Strategies are
stateless between calls: nothing on the instance changes during
``compress`` or ``decompress``, so one instance can serve any number of
callers.

Example:
    >>> class MyStrategy(QuantizationStrategy):
    ...     def compress(self, values, precision):
    ...         ...
    ...     def decompress(self, data, value_count=None, precision=None):
    ...         ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from fpquant.components.precision import Precision


class QuantizationStrategy(ABC):
    """Base class for all quantization strategies.

    Attributes:
        dtype: Float kind produced by ``decompress``
    """

    def __init__(self, dtype: Any = np.float64) -> None:
        self.dtype = np.dtype(dtype)

    @abstractmethod
    def compress(self, values: Any, precision: Precision | float) -> bytes:
        """Compress ``values`` so each reconstructs within ``precision``.

        Args:
            values: 1-D array-like of floats
            precision: Precision level or positive tolerance

        Returns:
            Self-describing payload bytes
        """

    @abstractmethod
    def decompress(
        self,
        data: bytes,
        value_count: int | None = None,
        precision: Precision | float | None = None,
    ) -> np.ndarray:
        """Reconstruct values from a payload.

        Args:
            data: Payload produced by ``compress``
            value_count: If given, must match the payload's count
            precision: If given, must match the payload's scale

        Returns:
            1-D array of ``self.dtype``
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(dtype={self.dtype.name})"
