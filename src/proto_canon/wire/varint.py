"""
Base-128 varint primitives.

Varints are little-endian groups of 7 bits; the high bit of each byte
signals that another byte follows.
"""

from typing import Tuple

from ..errors import MalformedVarintError

MAX_VARINT_BYTES = 10


def read_varint(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """
    Read a varint starting at offset.

    Returns (value, bytes_consumed).

    Raises MalformedVarintError if the varint runs past MAX_VARINT_BYTES
    or the buffer ends before the terminating byte.
    """
    result = 0
    shift = 0
    pos = offset
    end = len(data)

    while True:
        if pos >= end:
            raise MalformedVarintError("buffer ends mid-varint", offset)
        if pos - offset >= MAX_VARINT_BYTES:
            raise MalformedVarintError(
                f"varint longer than {MAX_VARINT_BYTES} bytes", offset
            )
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result, pos - offset
        shift += 7


def write_varint(value: int) -> bytes:
    """
    Encode a non-negative integer as a minimal varint.

    Raises ValueError for negative values.
    """
    if value < 0:
        raise ValueError("Encoded varint must be non-negative")

    out = bytearray()
    while value > 0x7F:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def decodes_to(raw: bytes, value: int) -> bool:
    """
    Check whether raw holds exactly one varint equal to value.

    Used to decide whether original (possibly non-minimal) varint bytes can
    be re-emitted unchanged.
    """
    if not raw:
        return False
    try:
        decoded, consumed = read_varint(raw)
    except MalformedVarintError:
        return False
    return consumed == len(raw) and decoded == value
