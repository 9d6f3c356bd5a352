"""
Wire-format encoder.

Serializes entries back to bytes in the order given, re-emitting original
tag and length prefixes whenever they still describe the entry.
"""

from typing import Iterable

from ..errors import InvalidEntryError, MalformedVarintError
from ..model.entry import (
    FIXED_WIDTHS,
    MAX_FIELD_NUMBER,
    WireEntry,
    WireType,
    is_valid_field_number,
)
from .varint import decodes_to, read_varint, write_varint


def validate_entry(entry: WireEntry) -> None:
    """
    Check that an entry can be written as valid wire bytes.

    Entries produced by the decoder always pass; hand-built ones may not.

    Raises InvalidEntryError describing the first problem found.
    """
    if not is_valid_field_number(entry.field_number):
        raise InvalidEntryError(
            f"field number must be within 1..{MAX_FIELD_NUMBER}",
            entry.field_number,
        )

    if entry.wire_type == WireType.VARINT:
        try:
            _, consumed = read_varint(entry.payload)
        except MalformedVarintError as e:
            raise InvalidEntryError(f"varint payload is malformed: {e.reason}", entry.field_number)
        if consumed != len(entry.payload):
            raise InvalidEntryError("varint payload has trailing bytes", entry.field_number)

    elif entry.wire_type in FIXED_WIDTHS:
        width = FIXED_WIDTHS[entry.wire_type]
        if len(entry.payload) != width:
            raise InvalidEntryError(
                f"{entry.wire_type.name} payload must be {width} bytes, got {len(entry.payload)}",
                entry.field_number,
            )

    elif entry.wire_type.is_group_marker and entry.payload:
        raise InvalidEntryError("group markers carry no payload", entry.field_number)


def encode_entry(entry: WireEntry) -> bytes:
    """Serialize a single entry."""
    validate_entry(entry)

    tag = entry.tag
    if entry.raw_tag_bytes is not None and decodes_to(entry.raw_tag_bytes, tag):
        out = bytearray(entry.raw_tag_bytes)
    else:
        out = bytearray(write_varint(tag))

    if entry.wire_type == WireType.LENGTH_DELIMITED:
        length = len(entry.payload)
        if entry.raw_length_bytes is not None and decodes_to(entry.raw_length_bytes, length):
            out += entry.raw_length_bytes
        else:
            out += write_varint(length)

    out += entry.payload
    return bytes(out)


def encode(entries: Iterable[WireEntry]) -> bytes:
    """
    Serialize entries in the order given.

    Raises InvalidEntryError for entries that cannot be encoded.
    """
    return b''.join(encode_entry(entry) for entry in entries)
