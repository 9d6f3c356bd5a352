"""
Canonical message hashing using BLAKE3 or SHA-256.

Messages that differ only in field order hash identically.
"""

import hashlib
from typing import Optional

try:
    import blake3
    HAS_BLAKE3 = True
except ImportError:
    HAS_BLAKE3 = False

from ..config import CanonConfig
from .canonical import sort_protobuf_message


def hash_algorithm() -> str:
    """Name of the digest algorithm compute_hash uses."""
    return "blake3" if HAS_BLAKE3 else "sha256"


def compute_hash(data: bytes) -> str:
    """
    Compute hash of raw bytes.

    Uses BLAKE3 if available, otherwise SHA-256.
    Returns hex-encoded hash string.
    """
    if HAS_BLAKE3:
        return blake3.blake3(data).hexdigest()
    else:
        return hashlib.sha256(data).hexdigest()


def canonical_hash(msg: bytes, config: Optional[CanonConfig] = None) -> str:
    """
    Compute hash of a message's canonical form.

    This ensures deterministic hashing:
    - Independent of top-level and nested field order
    - Sensitive to the order of repeated occurrences of one field

    Raises a DecodeError subclass if msg is not valid wire format.
    """
    return compute_hash(sort_protobuf_message(msg, config))


def verify_canonical_hash(msg: bytes, expected_hash: str, config: Optional[CanonConfig] = None) -> bool:
    """
    Verify that a message's canonical form matches expected hash.

    Returns True if match, False otherwise.
    """
    return canonical_hash(msg, config) == expected_hash
