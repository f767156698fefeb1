"""Fixed-size payload header.

Layout (15 bytes, little-endian):
  - version: u8          format version, currently 1
  - flags: u8            reserved, round-trips unchanged
  - bits_per_value: u8   uniform width of every packed value (1-64)
  - value_count: i32     number of packed values
  - scale: i64           integer scale = round(1 / precision)

The packed bitstream starts immediately after the header.
"""

from __future__ import annotations

import struct

from pydantic import BaseModel, Field

from fpquant.errors import TruncatedPayloadError

FORMAT_VERSION = 1
HEADER_FORMAT = "<BBBiq"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)  # 15

I32_MIN = -(2**31)
I32_MAX = 2**31 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


def packed_byte_count(value_count: int, bits_per_value: int) -> int:
    """Bytes needed for ``value_count`` values of ``bits_per_value`` bits."""
    return (value_count * bits_per_value + 7) // 8


class PayloadHeader(BaseModel):
    """Immutable description of a compressed payload.

    Only the storage range of each field is enforced here so that a header
    read from a damaged buffer can still be inspected; the codec validates
    the semantic ranges.

    Attributes:
        version: Payload format version
        flags: Reserved bits, preserved as-is
        bits_per_value: Magnitude bits plus one sign bit
        value_count: Number of packed values
        scale: Integer multiplier applied before rounding
    """

    model_config = {"frozen": True}

    version: int = Field(default=FORMAT_VERSION, ge=0, le=255)
    flags: int = Field(default=0, ge=0, le=255)
    bits_per_value: int = Field(ge=0, le=255)
    value_count: int = Field(ge=I32_MIN, le=I32_MAX)
    scale: int = Field(ge=I64_MIN, le=I64_MAX)

    @property
    def packed_size(self) -> int:
        """Size in bytes of the bitstream this header declares."""
        return packed_byte_count(max(self.value_count, 0), self.bits_per_value)

    @property
    def payload_size(self) -> int:
        """Header plus declared bitstream size."""
        return HEADER_SIZE + self.packed_size

    def to_bytes(self) -> bytes:
        return struct.pack(
            HEADER_FORMAT,
            self.version,
            self.flags,
            self.bits_per_value,
            self.value_count,
            self.scale,
        )


def write_header(header: PayloadHeader, dest: bytearray | memoryview) -> bool:
    """Write ``header`` at the start of ``dest``.

    Returns:
        False (nothing written) if ``dest`` is shorter than HEADER_SIZE
    """
    if len(dest) < HEADER_SIZE:
        return False
    struct.pack_into(
        HEADER_FORMAT,
        dest,
        0,
        header.version,
        header.flags,
        header.bits_per_value,
        header.value_count,
        header.scale,
    )
    return True


def read_header(src: bytes | bytearray | memoryview) -> PayloadHeader | None:
    """Read a header from the start of ``src``, or None if it is too short."""
    if len(src) < HEADER_SIZE:
        return None
    version, flags, bits_per_value, value_count, scale = struct.unpack_from(
        HEADER_FORMAT, src, 0
    )
    return PayloadHeader(
        version=version,
        flags=flags,
        bits_per_value=bits_per_value,
        value_count=value_count,
        scale=scale,
    )


def parse_header(src: bytes | bytearray | memoryview) -> PayloadHeader:
    """Read a header, raising instead of returning None.

    Raises:
        TruncatedPayloadError: If ``src`` is shorter than HEADER_SIZE
    """
    header = read_header(src)
    if header is None:
        raise TruncatedPayloadError(
            f"Data too short: need {HEADER_SIZE} header bytes, got {len(src)}"
        )
    return header
