"""Exception types raised by the codec.

Every error subclasses both ``FpQuantError`` and the builtin exception a
caller would naturally expect (``ValueError`` or ``OverflowError``), so
``except ValueError`` keeps working for code that does not care about the
finer categories.
"""


class FpQuantError(Exception):
    """Base class for all codec errors."""


class InvalidArgumentError(FpQuantError, ValueError):
    """Missing array, non-positive precision, or a caller-pinned field mismatch."""


class NonFiniteValueError(InvalidArgumentError):
    """Input contains NaN or Infinity, which have no quantized form."""


class RangeOverflowError(FpQuantError, OverflowError):
    """A derived quantity does not fit the payload's integer fields."""


class ScaleOverflowError(RangeOverflowError):
    """``1 / precision`` does not fit in a signed 64-bit integer."""


class BitWidthOverflowError(RangeOverflowError):
    """Derived bits per value falls outside ``[1, 64]``."""


class UnsupportedVersionError(FpQuantError, ValueError):
    """Payload header carries a format version this codec cannot read."""


class CorruptPayloadError(FpQuantError, ValueError):
    """Payload header fields are inconsistent with any valid payload."""


class TruncatedPayloadError(CorruptPayloadError):
    """Payload is shorter than its header declares."""
