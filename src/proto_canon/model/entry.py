"""
Wire entry model.

A wire entry is one field occurrence of a serialized message: the tag
(field number and wire type) plus the exact bytes of its value.
"""

from enum import IntEnum
from typing import Optional

MIN_FIELD_NUMBER = 1
MAX_FIELD_NUMBER = (1 << 29) - 1


class WireType(IntEnum):
    """Physical encoding class of a field value (low 3 bits of the tag)."""

    VARINT = 0
    FIXED64 = 1
    LENGTH_DELIMITED = 2
    START_GROUP = 3
    END_GROUP = 4
    FIXED32 = 5

    @property
    def is_group_marker(self) -> bool:
        return self in (WireType.START_GROUP, WireType.END_GROUP)


FIXED_WIDTHS = {
    WireType.FIXED64: 8,
    WireType.FIXED32: 4,
}


def is_valid_field_number(field_number: int) -> bool:
    """Check that a field number fits the 29-bit tag range."""
    return MIN_FIELD_NUMBER <= field_number <= MAX_FIELD_NUMBER


class WireEntry:
    """
    Single field occurrence, never mutated once built.

    The payload holds only the value bytes:
    - varint: the varint bytes
    - fixed64 / fixed32: the 8 / 4 raw bytes
    - length-delimited: the body, without its length prefix
    - group markers: empty

    raw_tag_bytes and raw_length_bytes keep the prefixes exactly as they
    were read so that re-encoding is byte-identical, even for non-minimal
    varints. Either may be None for hand-built entries.
    """

    __slots__ = (
        'field_number',
        'wire_type',
        'payload',
        'raw_tag_bytes',
        'raw_length_bytes',
        'offset',
    )

    def __init__(
        self,
        field_number: int,
        wire_type: WireType,
        payload: bytes = b'',
        raw_tag_bytes: Optional[bytes] = None,
        raw_length_bytes: Optional[bytes] = None,
        offset: Optional[int] = None,
    ):
        """
        Create a wire entry.

        Args:
            field_number: schema field number, the sort key
            wire_type: WireType (or its integer code)
            payload: value bytes
            raw_tag_bytes: tag varint as read from the wire
            raw_length_bytes: length prefix as read (length-delimited only)
            offset: position of the entry in the buffer it came from
        """
        self.field_number = field_number
        self.wire_type = WireType(wire_type)
        self.payload = bytes(payload)
        self.raw_tag_bytes = raw_tag_bytes
        self.raw_length_bytes = raw_length_bytes
        self.offset = offset

    @property
    def tag(self) -> int:
        """Numeric tag value: field number shifted left 3, OR wire type."""
        return (self.field_number << 3) | int(self.wire_type)

    def with_payload(self, payload: bytes) -> 'WireEntry':
        """Return a copy of this entry carrying a different payload."""
        return WireEntry(
            self.field_number,
            self.wire_type,
            payload,
            raw_tag_bytes=self.raw_tag_bytes,
            raw_length_bytes=self.raw_length_bytes,
            offset=self.offset,
        )

    def to_dict(self) -> dict:
        """
        Convert entry to a JSON-friendly dictionary.

        Byte fields are hex-encoded. Useful for debugging and logging.
        """
        obj = {
            'field_number': self.field_number,
            'wire_type': self.wire_type.name,
            'payload': self.payload.hex(),
        }

        if self.raw_tag_bytes is not None:
            obj['raw_tag_bytes'] = self.raw_tag_bytes.hex()
        if self.raw_length_bytes is not None:
            obj['raw_length_bytes'] = self.raw_length_bytes.hex()
        if self.offset is not None:
            obj['offset'] = self.offset

        return obj

    @classmethod
    def from_dict(cls, data: dict) -> 'WireEntry':
        """
        Reconstruct an entry from its dictionary form.

        Raises ValueError if data is invalid.
        """
        if 'field_number' not in data or 'wire_type' not in data:
            raise ValueError("Entry missing field_number or wire_type")

        try:
            wire_type = WireType[data['wire_type']]
        except KeyError:
            raise ValueError(f"Invalid wire type: {data['wire_type']}")

        def _hex(key):
            value = data.get(key)
            return bytes.fromhex(value) if value is not None else None

        return cls(
            data['field_number'],
            wire_type,
            _hex('payload') or b'',
            raw_tag_bytes=_hex('raw_tag_bytes'),
            raw_length_bytes=_hex('raw_length_bytes'),
            offset=data.get('offset'),
        )

    def __eq__(self, other) -> bool:
        """
        Compare decoded values: field number, wire type and payload.

        raw_tag_bytes, raw_length_bytes and offset are ignored, so two equal
        entries may still encode to different bytes. Compare encode() output
        when the exact wire form matters.
        """
        if not isinstance(other, WireEntry):
            return NotImplemented
        return (
            self.field_number == other.field_number
            and self.wire_type == other.wire_type
            and self.payload == other.payload
        )

    def __hash__(self) -> int:
        return hash((self.field_number, self.wire_type, self.payload))

    def __repr__(self) -> str:
        return (
            f"WireEntry(field={self.field_number}, "
            f"type={self.wire_type.name}, size={len(self.payload)})"
        )
