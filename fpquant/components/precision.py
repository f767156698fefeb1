"""Precision levels for lossy quantization.

Each level names a decimal tolerance: the largest absolute error a
reconstructed value may carry. 9, 10 and 11 decimal places are not offered.
"""

from __future__ import annotations

import math
import numbers
from enum import Enum

from fpquant.errors import InvalidArgumentError


class Precision(Enum):
    """Closed set of decimal tolerances.

    Example:
        >>> Precision.TEN_THOUSANDTHS.tolerance
        0.0001
        >>> Precision.from_decimal_places(3)
        <Precision.THOUSANDTHS: 0.001>
    """

    TENTHS = 0.1
    HUNDREDTHS = 0.01
    THOUSANDTHS = 0.001
    TEN_THOUSANDTHS = 0.0001
    HUNDRED_THOUSANDTHS = 0.00001
    MILLIONTHS = 0.000001
    TEN_MILLIONTHS = 0.0000001
    HUNDRED_MILLIONTHS = 0.00000001
    TRILLIONTHS = 1e-12
    TEN_TRILLIONTHS = 1e-13

    @property
    def tolerance(self) -> float:
        """Maximum absolute reconstruction error."""
        return float(self.value)

    @property
    def decimal_places(self) -> int:
        return _DECIMAL_PLACES[self]

    @classmethod
    def from_decimal_places(cls, places: int) -> Precision:
        """Look up the level for a number of decimal places.

        Raises:
            InvalidArgumentError: If no level has that many places
        """
        for member, member_places in _DECIMAL_PLACES.items():
            if member_places == places:
                return member
        available = sorted(_DECIMAL_PLACES.values())
        raise InvalidArgumentError(
            f"No precision level with {places} decimal places; available: {available}"
        )

    @classmethod
    def parse(cls, text: str | int) -> Precision:
        """Parse a member name (any case) or a decimal place count.

        Raises:
            InvalidArgumentError: If ``text`` names no level or is neither
                a string nor an integer
        """
        if isinstance(text, Precision):
            return text
        if isinstance(text, numbers.Integral) and not isinstance(text, bool):
            return cls.from_decimal_places(int(text))
        if not isinstance(text, str):
            raise InvalidArgumentError(
                f"Precision level must be a name or decimal place count, got {type(text).__name__}"
            )
        normalized = text.strip().upper().replace("-", "_").replace(" ", "_")
        if normalized.isdigit():
            return cls.from_decimal_places(int(normalized))
        try:
            return cls[normalized]
        except KeyError as e:
            raise InvalidArgumentError(f"Unknown precision level: {text!r}") from e


_DECIMAL_PLACES: dict[Precision, int] = {
    Precision.TENTHS: 1,
    Precision.HUNDREDTHS: 2,
    Precision.THOUSANDTHS: 3,
    Precision.TEN_THOUSANDTHS: 4,
    Precision.HUNDRED_THOUSANDTHS: 5,
    Precision.MILLIONTHS: 6,
    Precision.TEN_MILLIONTHS: 7,
    Precision.HUNDRED_MILLIONTHS: 8,
    Precision.TRILLIONTHS: 12,
    Precision.TEN_TRILLIONTHS: 13,
}


def resolve_tolerance(precision: Precision | float) -> float:
    """Return the tolerance for a level or a bare positive number.

    Raises:
        InvalidArgumentError: If the tolerance is not a positive finite number
    """
    if isinstance(precision, Precision):
        return precision.tolerance
    if precision is None or isinstance(precision, bool):
        raise InvalidArgumentError(f"Expected Precision or float, got {precision!r}")
    try:
        tolerance = float(precision)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(
            f"Expected Precision or float, got {type(precision).__name__}"
        ) from e
    if not math.isfinite(tolerance) or tolerance <= 0:
        raise InvalidArgumentError(f"precision must be > 0, got {precision!r}")
    return tolerance
