"""
Error types for protobuf canonicalization.

All errors are explicit and never silent. Decode failures are raised only
for the top-level buffer; a nested payload that fails to decode is kept
opaque instead.
"""

from enum import Enum
from typing import Optional


class DecodeErrorKind(str, Enum):
    """Classification of wire-format decode failures."""

    MALFORMED_VARINT = "MalformedVarint"
    TRUNCATED = "Truncated"
    UNKNOWN_WIRE_TYPE = "UnknownWireType"
    TRAILING_OR_UNEXPECTED_BYTES = "TrailingOrUnexpectedBytes"


class ProtoCanonError(Exception):
    """Base exception for all canonicalization errors."""
    pass


class DecodeError(ProtoCanonError):
    """Raised when a buffer is not valid protobuf wire format."""

    kind: DecodeErrorKind = None

    def __init__(self, reason: str, offset: int):
        self.reason = reason
        self.offset = offset
        label = self.kind.value if self.kind else "DecodeError"
        super().__init__(f"{label} at offset {offset}: {reason}")


class MalformedVarintError(DecodeError):
    """Raised when a varint is longer than 10 bytes or ends with the buffer."""

    kind = DecodeErrorKind.MALFORMED_VARINT


class TruncatedError(DecodeError):
    """Raised when a field extends past the end of the buffer."""

    kind = DecodeErrorKind.TRUNCATED

    def __init__(self, reason: str, offset: int, needed: int = None, available: int = None):
        self.needed = needed
        self.available = available
        if needed is not None:
            reason = f"{reason} (need {needed} bytes, {available} left)"
        super().__init__(reason, offset)


class UnknownWireTypeError(DecodeError):
    """Raised when a tag carries a wire type outside the six defined ones."""

    kind = DecodeErrorKind.UNKNOWN_WIRE_TYPE

    def __init__(self, wire_type: int, offset: int):
        self.wire_type = wire_type
        super().__init__(f"wire type {wire_type} is not defined", offset)


class TrailingBytesError(DecodeError):
    """Raised when leftover bytes cannot start a valid entry."""

    kind = DecodeErrorKind.TRAILING_OR_UNEXPECTED_BYTES


class InvalidEntryError(ProtoCanonError):
    """Raised when an entry cannot be encoded."""

    def __init__(self, reason: str, field_number: Optional[int] = None):
        self.reason = reason
        self.field_number = field_number
        msg = f"Invalid entry: {reason}"
        if field_number is not None:
            msg += f" (field {field_number})"
        super().__init__(msg)


class MessageTooLargeError(ProtoCanonError):
    """Raised when a message exceeds the configured size limit."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Message of {size} bytes exceeds limit of {limit} bytes")


class ConfigError(ProtoCanonError):
    """Raised when a configuration value is invalid."""

    def __init__(self, key: str, value, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid configuration {key}={value!r}: {reason}")


class InvariantViolationError(ProtoCanonError):
    """Raised when a canonicalization invariant is violated."""

    def __init__(self, invariant: str, details: str):
        self.invariant = invariant
        self.details = details
        super().__init__(f"Invariant violation: {invariant}\nDetails: {details}")
