"""
Test package structure and exports.

Verifies that the package is correctly structured and exposes the right API.
"""

import pytest
import proto_canon
from proto_canon import (
    ProtoCanonEngine,
    WireEntry,
    WireType,
    ProtoCanonError,
    DecodeError,
    sort_protobuf_message,
)


def test_package_exports():
    """Verify that the package exposes the expected names."""
    assert ProtoCanonEngine is not None
    assert WireEntry is not None
    assert WireType is not None
    assert ProtoCanonError is not None
    assert sort_protobuf_message is not None

    for name in proto_canon.__all__:
        assert hasattr(proto_canon, name), name


def test_error_hierarchy():
    """All decode errors derive from the package base error."""
    assert issubclass(DecodeError, ProtoCanonError)
    assert issubclass(proto_canon.TruncatedError, DecodeError)
    assert issubclass(proto_canon.MalformedVarintError, DecodeError)
    assert issubclass(proto_canon.UnknownWireTypeError, DecodeError)
    assert issubclass(proto_canon.TrailingBytesError, DecodeError)
    assert not issubclass(proto_canon.InvalidEntryError, DecodeError)


def test_engine_initialization():
    """Verify that the engine can be initialized with defaults."""
    engine = ProtoCanonEngine()

    assert engine.config is proto_canon.DEFAULT_CONFIG
    assert engine.sort(b"") == b""


def test_subpackage_imports():
    """Verify that subpackages are importable (even if not exposed directly)."""
    import proto_canon.wire.varint
    import proto_canon.wire.decoder
    import proto_canon.integrity.hashing
    import proto_canon.model.entry

    assert proto_canon.wire.varint.read_varint is not None
    assert proto_canon.integrity.hashing.compute_hash is not None
