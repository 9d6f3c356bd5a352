"""
proto_canon - Deterministic field ordering for serialized protobuf messages.

This package provides:
- Schema-less decoding of protobuf wire format
- Recursive canonical ordering of fields by field number
- Byte-exact re-encoding
- Canonical hashing and semantic verification

Main entry points:
    sort_protobuf_message - canonical form of a serialized message
    ProtoCanonEngine - the same operations bound to one configuration

Example usage:
    from proto_canon import sort_protobuf_message, canonical_hash

    canonical = sort_protobuf_message(raw_bytes)
    digest = canonical_hash(raw_bytes)
"""

from .config import CanonConfig, DEFAULT_CONFIG
from .engine import ProtoCanonEngine
from .errors import (
    ProtoCanonError,
    DecodeError,
    DecodeErrorKind,
    MalformedVarintError,
    TruncatedError,
    UnknownWireTypeError,
    TrailingBytesError,
    InvalidEntryError,
    MessageTooLargeError,
    ConfigError,
    InvariantViolationError,
)
from .integrity.canonical import (
    canonicalize,
    is_protobuf_message_sorted,
    sort_protobuf_message,
    sort_protobuf_message_inplace,
)
from .integrity.hashing import canonical_hash, compute_hash, verify_canonical_hash
from .integrity.verification import field_value_map, verify_semantic_equivalence
from .model.entry import WireEntry, WireType
from .wire.decoder import decode
from .wire.encoder import encode

__version__ = '0.1.0'

__all__ = [
    # Main API
    'sort_protobuf_message',
    'sort_protobuf_message_inplace',
    'is_protobuf_message_sorted',
    'canonicalize',
    'decode',
    'encode',
    'ProtoCanonEngine',

    # Config
    'CanonConfig',
    'DEFAULT_CONFIG',

    # Integrity
    'canonical_hash',
    'compute_hash',
    'verify_canonical_hash',
    'field_value_map',
    'verify_semantic_equivalence',

    # Models
    'WireEntry',
    'WireType',

    # Errors
    'ProtoCanonError',
    'DecodeError',
    'DecodeErrorKind',
    'MalformedVarintError',
    'TruncatedError',
    'UnknownWireTypeError',
    'TrailingBytesError',
    'InvalidEntryError',
    'MessageTooLargeError',
    'ConfigError',
    'InvariantViolationError',
]
