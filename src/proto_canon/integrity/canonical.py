"""
Canonical field ordering for serialized protobuf messages.

Ensures messages that differ only in field order produce identical bytes.

Rules:
- Fields are ordered by field number, ascending
- Fields sharing a number keep their relative input order
- Length-delimited payloads that decode cleanly as messages are
  canonicalized recursively; anything else is copied through opaque
- Tag and length prefixes are re-emitted byte-exactly, so the canonical
  form always has the same length as the input

A string or bytes payload that happens to parse as wire bytes is treated as
a message. Without a schema this cannot be told apart, and it is accepted.
"""

import logging
from operator import attrgetter
from typing import List, Optional, Sequence

from ..config import CanonConfig, DEFAULT_CONFIG
from ..errors import DecodeError, InvariantViolationError, MessageTooLargeError
from ..model.entry import WireEntry, WireType
from ..wire.decoder import decode
from ..wire.encoder import encode

logger = logging.getLogger(__name__)


def _has_group_markers(entries: Sequence[WireEntry]) -> bool:
    return any(entry.wire_type.is_group_marker for entry in entries)


def _is_ordered(entries: Sequence[WireEntry]) -> bool:
    return all(
        prev.field_number <= cur.field_number
        for prev, cur in zip(entries, entries[1:])
    )


class _Level:
    """One message level awaiting canonicalization."""

    __slots__ = ('entries', 'depth', 'owner', 'index', 'result')

    def __init__(self, entries: Sequence[WireEntry], depth: int, owner: Optional[WireEntry] = None):
        self.entries = entries
        self.depth = depth
        self.owner = owner
        self.index = 0
        self.result: List[WireEntry] = []


def _decode_submessage(entry: WireEntry, depth: int) -> Optional[List[WireEntry]]:
    """
    Decode a length-delimited payload as a submessage.

    Returns None when the payload does not decode cleanly, or decodes to
    nothing (an empty string and an empty message look alike).
    """
    try:
        inner = decode(entry.payload)
    except DecodeError as e:
        logger.debug(
            "Keeping %d-byte payload of field %d opaque at depth %d: %s",
            len(entry.payload), entry.field_number, depth, e,
        )
        return None
    return inner or None


def _order(level: _Level, config: CanonConfig) -> List[WireEntry]:
    if not config.sort_groups and _has_group_markers(level.result):
        logger.debug("Group markers at depth %d, keeping input order", level.depth)
        return level.result
    return sorted(level.result, key=attrgetter('field_number'))


def canonicalize(
    entries: Sequence[WireEntry],
    config: Optional[CanonConfig] = None,
    depth: int = 0,
) -> List[WireEntry]:
    """
    Put decoded entries into canonical order.

    Length-delimited payloads are canonicalized first (depth + 1), then the
    entries are stably sorted by field number. Wire type is not part of the
    sort key.

    Nested levels are walked with an explicit stack, so nesting depth is
    bounded by the input size only (or config.max_depth when set).

    A level containing group markers keeps its input order unless
    config.sort_groups is set. Group boundaries are never matched.
    """
    config = config or DEFAULT_CONFIG
    stack = [_Level(entries, depth)]

    while True:
        level = stack[-1]

        if level.index < len(level.entries):
            entry = level.entries[level.index]
            level.index += 1

            if entry.wire_type == WireType.LENGTH_DELIMITED and entry.payload:
                child_depth = level.depth + 1
                if config.allows_depth(child_depth):
                    inner = _decode_submessage(entry, child_depth)
                    if inner is not None:
                        stack.append(_Level(inner, child_depth, owner=entry))
                        continue
                else:
                    logger.debug(
                        "Depth limit %d reached, field %d copied through",
                        config.max_depth, entry.field_number,
                    )

            level.result.append(entry)
            continue

        ordered = _order(level, config)
        stack.pop()
        if not stack:
            return ordered

        owner = level.owner
        payload = encode(ordered)
        if payload != owner.payload:
            owner = owner.with_payload(payload)
        stack[-1].result.append(owner)


def _check_size(data: bytes, config: CanonConfig) -> None:
    limit = config.max_message_size
    if limit is not None and len(data) > limit:
        raise MessageTooLargeError(len(data), limit)


def sort_protobuf_message(msg: bytes, config: Optional[CanonConfig] = None) -> bytes:
    """
    Sort the fields of a serialized message into canonical order.

    Nested messages are sorted too. Returns the input bytes themselves when
    they are already canonical.

    Raises a DecodeError subclass if msg is not valid wire format, and
    MessageTooLargeError if it exceeds config.max_message_size.
    """
    config = config or DEFAULT_CONFIG
    data = bytes(msg)
    _check_size(data, config)

    canonical = encode(canonicalize(decode(data), config))
    if canonical == data:
        return data
    return canonical


def is_protobuf_message_sorted(
    msg: bytes,
    recursive: bool = True,
    config: Optional[CanonConfig] = None,
) -> bool:
    """
    Check whether a serialized message is already in canonical order.

    With recursive=False only the top-level field order is inspected.

    Raises a DecodeError subclass if msg is not valid wire format.
    """
    config = config or DEFAULT_CONFIG
    data = bytes(msg)

    if recursive:
        return sort_protobuf_message(data, config) == data

    _check_size(data, config)
    entries = decode(data)
    if not config.sort_groups and _has_group_markers(entries):
        return True
    return _is_ordered(entries)


def sort_protobuf_message_inplace(buf, config: Optional[CanonConfig] = None) -> None:
    """
    Sort a writable buffer (bytearray or writable memoryview) in place.

    Raises TypeError for read-only buffers and a DecodeError subclass if the
    contents are not valid wire format; the buffer is left untouched on error.
    """
    view = memoryview(buf).cast('B')
    if view.readonly:
        raise TypeError("sort_protobuf_message_inplace requires a writable buffer")

    original = view.tobytes()
    canonical = sort_protobuf_message(original, config)
    if canonical == original:
        return

    if len(canonical) != len(original):
        raise InvariantViolationError(
            "length_preservation",
            f"canonical form is {len(canonical)} bytes, input is {len(original)}",
        )
    view[:] = canonical
