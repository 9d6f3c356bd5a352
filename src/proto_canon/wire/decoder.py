"""
Schema-less wire-format decoder.

Splits a serialized message into its top-level field occurrences using only
the self-describing parts of the encoding (field number and wire type).
Nested payloads are not interpreted here.
"""

from typing import Iterator, List

from ..errors import (
    TrailingBytesError,
    TruncatedError,
    UnknownWireTypeError,
)
from ..model.entry import (
    FIXED_WIDTHS,
    MAX_FIELD_NUMBER,
    WireEntry,
    WireType,
    is_valid_field_number,
)
from .varint import read_varint


def _take(data: bytes, pos: int, length: int, what: str, entry_offset: int) -> bytes:
    """Slice exactly length bytes at pos or raise TruncatedError."""
    available = len(data) - pos
    if length > available:
        raise TruncatedError(what, entry_offset, needed=length, available=available)
    return data[pos:pos + length]


def read_entry(data: bytes, offset: int) -> WireEntry:
    """
    Decode the single entry starting at offset.

    The returned entry records its offset and raw prefixes; the number of
    bytes consumed is the length of tag, length prefix and payload.
    """
    tag, tag_len = read_varint(data, offset)
    raw_tag = data[offset:offset + tag_len]
    field_number = tag >> 3
    wire_code = tag & 0x7
    pos = offset + tag_len

    if not is_valid_field_number(field_number):
        raise TrailingBytesError(
            f"field number {field_number} outside 1..{MAX_FIELD_NUMBER}", offset
        )

    try:
        wire_type = WireType(wire_code)
    except ValueError:
        raise UnknownWireTypeError(wire_code, offset)

    raw_length = None

    if wire_type == WireType.VARINT:
        _, value_len = read_varint(data, pos)
        payload = data[pos:pos + value_len]

    elif wire_type in FIXED_WIDTHS:
        payload = _take(data, pos, FIXED_WIDTHS[wire_type], f"{wire_type.name.lower()} value", offset)

    elif wire_type == WireType.LENGTH_DELIMITED:
        length, length_len = read_varint(data, pos)
        raw_length = data[pos:pos + length_len]
        payload = _take(data, pos + length_len, length, "length-delimited value", offset)

    else:
        # Group markers carry no payload; boundaries are not matched.
        payload = b''

    return WireEntry(
        field_number,
        wire_type,
        payload,
        raw_tag_bytes=raw_tag,
        raw_length_bytes=raw_length,
        offset=offset,
    )


def entry_size(entry: WireEntry) -> int:
    """Number of wire bytes a decoded entry occupied."""
    size = len(entry.raw_tag_bytes) + len(entry.payload)
    if entry.raw_length_bytes is not None:
        size += len(entry.raw_length_bytes)
    return size


def iter_entries(data: bytes) -> Iterator[WireEntry]:
    """
    Yield entries of a serialized message in wire order.

    Raises a DecodeError subclass as soon as a malformed entry is reached.
    Entries already yielded remain valid, so callers that need all-or-nothing
    semantics should use decode().
    """
    data = bytes(data)
    offset = 0
    end = len(data)

    while offset < end:
        entry = read_entry(data, offset)
        offset += entry_size(entry)
        yield entry


def decode(data: bytes) -> List[WireEntry]:
    """
    Decode a whole buffer into its ordered list of entries.

    The buffer must be consumed exactly: any malformed, truncated or
    unparseable trailing bytes raise a DecodeError and no partial result is
    returned. An empty buffer decodes to an empty list.
    """
    return list(iter_entries(data))
