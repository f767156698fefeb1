"""Sign-magnitude bit packing at arbitrary bit offsets.

Every value occupies ``bits_per_value`` consecutive bits: ``bits_per_value - 1``
magnitude bits, least significant first, followed by one sign bit (1 means
negative). Bit ``i`` of the stream lives in byte ``offset + i // 8`` at bit
``i % 8`` (LSB first).

Packing only ever sets bits, so the destination buffer must start zeroed.
None of these functions keep a cursor: the bit position goes in and the
advanced position comes back out.

The ``*_lane`` functions handle a whole batch with numpy and produce exactly
the bits the scalar functions would.
"""

from __future__ import annotations

from typing import Union

import numpy as np

from fpquant.components.header import HEADER_SIZE, I64_MAX, I64_MIN
from fpquant.errors import TruncatedPayloadError

Buffer = Union[bytearray, bytes, memoryview, np.ndarray]
WritableBuffer = Union[bytearray, memoryview, np.ndarray]


def _as_uint8(buffer: Buffer) -> np.ndarray:
    if isinstance(buffer, np.ndarray):
        return buffer
    return np.frombuffer(buffer, dtype=np.uint8)


def _magnitude_capacity(bits_per_value: int) -> int:
    return (1 << (bits_per_value - 1)) - 1


def write_bit(buffer: WritableBuffer, bit_index: int, offset: int = HEADER_SIZE) -> None:
    """Set stream bit ``bit_index``."""
    buffer[offset + (bit_index >> 3)] |= 1 << (bit_index & 7)


def read_bit(buffer: Buffer, bit_index: int, offset: int = HEADER_SIZE) -> bool:
    return bool(buffer[offset + (bit_index >> 3)] & (1 << (bit_index & 7)))


def pack_value(
    buffer: WritableBuffer,
    bit_position: int,
    value: int,
    bits_per_value: int,
    offset: int = HEADER_SIZE,
) -> int:
    """Pack one signed integer at ``bit_position``.

    A magnitude wider than ``bits_per_value - 1`` bits saturates to the
    largest one that fits; the codec only reaches this for ``-2**63``.

    Args:
        buffer: Zero-filled writable buffer
        bit_position: Stream bit where the value starts
        value: Signed 64-bit integer
        bits_per_value: Total width including the sign bit
        offset: Byte where bit 0 of the stream lives

    Returns:
        Bit position just past the packed value
    """
    value = int(value)
    negative = value < 0
    magnitude = (-(value + 1)) + 1 if negative else value
    magnitude = min(magnitude, _magnitude_capacity(bits_per_value))

    for i in range(bits_per_value - 1):
        if (magnitude >> i) & 1:
            write_bit(buffer, bit_position + i, offset)
    bit_position += bits_per_value - 1

    if negative:
        write_bit(buffer, bit_position, offset)
    return bit_position + 1


def unpack_value(
    buffer: Buffer,
    bit_position: int,
    bits_per_value: int,
    offset: int = HEADER_SIZE,
) -> tuple[int, int]:
    """Unpack one signed integer at ``bit_position``.

    Returns:
        (value, bit position just past the value)
    """
    magnitude = 0
    for i in range(bits_per_value - 1):
        if read_bit(buffer, bit_position + i, offset):
            magnitude |= 1 << i
    bit_position += bits_per_value - 1

    negative = read_bit(buffer, bit_position, offset)
    bit_position += 1
    if not negative:
        return magnitude, bit_position
    if magnitude > I64_MAX:
        return I64_MIN, bit_position
    return -magnitude, bit_position


def pack_lane(
    buffer: WritableBuffer,
    bit_position: int,
    values: np.ndarray,
    bits_per_value: int,
    offset: int = HEADER_SIZE,
) -> int:
    """Pack a batch of int64 values starting at ``bit_position``.

    Args:
        buffer: Zero-filled writable bytearray or uint8 array
        bit_position: Stream bit where the first value starts
        values: 1-D int64 array
        bits_per_value: Total width including the sign bit
        offset: Byte where bit 0 of the stream lives

    Returns:
        Bit position just past the last packed value
    """
    count = len(values)
    if count == 0:
        return bit_position

    values = np.asarray(values, dtype=np.int64)
    negative = values < 0
    # ~v == -(v + 1) never overflows, and 2**63 fits in uint64
    magnitude = np.where(
        negative,
        (~values).astype(np.uint64) + np.uint64(1),
        values.astype(np.uint64),
    )
    magnitude = np.minimum(magnitude, np.uint64(_magnitude_capacity(bits_per_value)))

    shifts = np.arange(bits_per_value - 1, dtype=np.uint64)
    magnitude_bits = ((magnitude[:, None] >> shifts) & np.uint64(1)).astype(np.uint8)
    sign_bits = negative.astype(np.uint8)[:, None]
    stream = np.concatenate([magnitude_bits, sign_bits], axis=1).ravel()

    lead = bit_position & 7
    if lead:
        stream = np.concatenate([np.zeros(lead, dtype=np.uint8), stream])
    packed = np.packbits(stream, bitorder="little")

    start = offset + (bit_position >> 3)
    target = _as_uint8(buffer)
    target[start : start + len(packed)] |= packed
    return bit_position + count * bits_per_value


def unpack_lane(
    buffer: Buffer,
    bit_position: int,
    count: int,
    bits_per_value: int,
    offset: int = HEADER_SIZE,
) -> tuple[np.ndarray, int]:
    """Unpack ``count`` int64 values starting at ``bit_position``.

    Returns:
        (int64 array, bit position just past the last value)

    Raises:
        TruncatedPayloadError: If the buffer ends before the last value
    """
    if count == 0:
        return np.zeros(0, dtype=np.int64), bit_position

    lead = bit_position & 7
    total_bits = count * bits_per_value
    start = offset + (bit_position >> 3)
    nbytes = (lead + total_bits + 7) >> 3

    chunk = _as_uint8(buffer)[start : start + nbytes]
    if len(chunk) < nbytes:
        raise TruncatedPayloadError(
            f"Bitstream ends early: need {nbytes} bytes at {start}, got {len(chunk)}"
        )
    bits = np.unpackbits(chunk, bitorder="little")[lead : lead + total_bits]
    bits = bits.reshape(count, bits_per_value)

    shifts = np.arange(bits_per_value - 1, dtype=np.uint64)
    # bits are disjoint, so the sum is the bitwise OR
    magnitude = (bits[:, :-1].astype(np.uint64) << shifts).sum(axis=1, dtype=np.uint64)
    negative = bits[:, -1].astype(bool)

    signed = magnitude.astype(np.int64)
    values = np.where(negative, -signed, signed)
    saturated = negative & (magnitude > np.uint64(I64_MAX))
    if saturated.any():
        values[saturated] = I64_MIN
    return values, bit_position + total_bits
