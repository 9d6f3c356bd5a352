"""
Test wire-format encoding.

Verifies byte-exact re-emission of decoded entries and validation of
hand-built ones.
"""

import pytest

from proto_canon import InvalidEntryError, WireEntry, WireType, decode, encode
from proto_canon.model.entry import MAX_FIELD_NUMBER


class TestEncode:
    """Test serialization of entries."""

    def test_empty(self):
        assert encode([]) == b""

    def test_hand_built_varint(self):
        entry = WireEntry(1, WireType.VARINT, b"\x96\x01")
        assert encode([entry]) == b"\x08\x96\x01"

    def test_hand_built_length_delimited(self):
        entry = WireEntry(2, WireType.LENGTH_DELIMITED, b"hi")
        assert encode([entry]) == b"\x12\x02hi"

    def test_fixed_widths(self):
        entries = [
            WireEntry(1, WireType.FIXED64, b"\x00" * 8),
            WireEntry(2, WireType.FIXED32, b"\x01" * 4),
        ]
        assert encode(entries) == b"\x09" + b"\x00" * 8 + b"\x15" + b"\x01" * 4

    def test_group_markers_write_tag_only(self):
        entries = [
            WireEntry(5, WireType.START_GROUP),
            WireEntry(5, WireType.END_GROUP),
        ]
        assert encode(entries) == b"\x2b\x2c"

    def test_integer_wire_type(self):
        entry = WireEntry(1, 0, b"\x01")
        assert entry.wire_type is WireType.VARINT

    def test_keeps_input_order(self):
        entries = [
            WireEntry(2, WireType.VARINT, b"\x01"),
            WireEntry(1, WireType.VARINT, b"\x02"),
        ]
        assert encode(entries) == b"\x10\x01\x08\x02"


class TestByteExactness:
    """Test that original prefixes survive a decode/encode cycle."""

    def test_decoded_message_reencodes_identically(self):
        data = (
            b"\x08\x96\x01"
            + b"\x11" + bytes(range(8))
            + b"\x1a\x03abc"
            + b"\x2b\x2c"
            + b"\x35\x01\x02\x03\x04"
        )
        assert encode(decode(data)) == data

    def test_non_minimal_tag_preserved(self):
        data = b"\x88\x00\x01"
        assert encode(decode(data)) == data

    def test_non_minimal_length_preserved(self):
        data = b"\x12\x82\x00hi"
        assert encode(decode(data)) == data

    def test_stale_length_recomputed(self):
        """A raw length that no longer matches the payload is not reused."""
        entry = decode(b"\x12\x82\x00hi")[0].with_payload(b"xyz")
        assert encode([entry]) == b"\x12\x03xyz"

    def test_stale_tag_recomputed(self):
        entry = WireEntry(3, WireType.VARINT, b"\x01", raw_tag_bytes=b"\x08")
        assert encode([entry]) == b"\x18\x01"


class TestValidation:
    """Test rejection of entries that cannot be encoded."""

    def test_field_number_zero(self):
        with pytest.raises(InvalidEntryError) as exc:
            encode([WireEntry(0, WireType.VARINT, b"\x01")])

        assert exc.value.field_number == 0

    def test_field_number_too_large(self):
        with pytest.raises(InvalidEntryError):
            encode([WireEntry(MAX_FIELD_NUMBER + 1, WireType.VARINT, b"\x01")])

    def test_wrong_fixed_width(self):
        with pytest.raises(InvalidEntryError):
            encode([WireEntry(1, WireType.FIXED32, b"\x00\x00\x00")])
        with pytest.raises(InvalidEntryError):
            encode([WireEntry(1, WireType.FIXED64, b"\x00" * 4)])

    def test_malformed_varint_payload(self):
        with pytest.raises(InvalidEntryError):
            encode([WireEntry(1, WireType.VARINT, b"\x80")])

    def test_varint_payload_with_trailing_bytes(self):
        with pytest.raises(InvalidEntryError):
            encode([WireEntry(1, WireType.VARINT, b"\x01\x02")])

    def test_group_marker_with_payload(self):
        with pytest.raises(InvalidEntryError):
            encode([WireEntry(1, WireType.START_GROUP, b"\x01")])


class TestEntryModel:
    """Test the WireEntry model helpers."""

    def test_tag(self):
        assert WireEntry(1, WireType.LENGTH_DELIMITED, b"").tag == 0x0A

    def test_dict_round_trip(self):
        entry = decode(b"\x12\x82\x00hi")[0]
        restored = WireEntry.from_dict(entry.to_dict())

        assert restored == entry
        assert restored.raw_tag_bytes == b"\x12"
        assert restored.raw_length_bytes == b"\x82\x00"
        assert encode([restored]) == b"\x12\x82\x00hi"
        assert restored.offset == 0

    def test_from_dict_rejects_bad_wire_type(self):
        with pytest.raises(ValueError):
            WireEntry.from_dict({'field_number': 1, 'wire_type': 'BOGUS'})

    def test_equality_ignores_offset(self):
        a = WireEntry(1, WireType.VARINT, b"\x01", offset=0)
        b = WireEntry(1, WireType.VARINT, b"\x01", offset=10)

        assert a == b
        assert hash(a) == hash(b)

    def test_equal_entries_may_encode_differently(self):
        """Equality covers the decoded value, not the raw prefixes."""
        padded = decode(b"\x88\x00\x01")[0]
        minimal = decode(b"\x08\x01")[0]

        assert padded == minimal
        assert encode([padded]) == b"\x88\x00\x01"
        assert encode([minimal]) == b"\x08\x01"
