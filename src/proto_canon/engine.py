"""
Protobuf Canonicalization Engine.

Main entry point coordinating all components under one configuration.
"""

import logging
from typing import Iterable, List, Optional

from .config import CanonConfig, DEFAULT_CONFIG
from .integrity.canonical import (
    canonicalize,
    is_protobuf_message_sorted,
    sort_protobuf_message,
    sort_protobuf_message_inplace,
)
from .integrity.hashing import canonical_hash, verify_canonical_hash
from .integrity.verification import verify_semantic_equivalence
from .invariants import verify_canonicalization
from .model.entry import WireEntry
from .wire.decoder import decode
from .wire.encoder import encode

logger = logging.getLogger(__name__)


class ProtoCanonEngine:
    """
    Main engine for canonicalization operations.

    This is the primary interface for:
    - Sorting serialized messages (copying or in place)
    - Checking whether a message is already canonical
    - Hashing canonical forms
    - Verifying canonicalization results
    - Raw decoding and encoding of wire entries

    The engine holds only its configuration and is safe to share between
    threads.
    """

    def __init__(self, config: Optional[CanonConfig] = None):
        """
        Initialize engine.

        Args:
            config: canonicalization settings, DEFAULT_CONFIG if omitted
        """
        self.config = config or DEFAULT_CONFIG

    @classmethod
    def from_env(cls) -> 'ProtoCanonEngine':
        """Create an engine configured from PROTO_CANON_* environment variables."""
        config = CanonConfig.from_env()
        logger.debug("Engine configured from environment: %s", config)
        return cls(config)

    # ========== Canonicalization ==========

    def sort(self, msg: bytes) -> bytes:
        """Return the canonical form of a serialized message."""
        return sort_protobuf_message(msg, self.config)

    def sort_inplace(self, buf) -> None:
        """Canonicalize a writable buffer in place."""
        sort_protobuf_message_inplace(buf, self.config)

    def is_sorted(self, msg: bytes, recursive: bool = True) -> bool:
        """Check whether a message is already canonical."""
        return is_protobuf_message_sorted(msg, recursive=recursive, config=self.config)

    def canonicalize_entries(self, entries: Iterable[WireEntry]) -> List[WireEntry]:
        """Canonicalize already decoded top-level entries."""
        return canonicalize(list(entries), self.config)

    # ========== Wire Access ==========

    def decode(self, msg: bytes) -> List[WireEntry]:
        """Decode a message into its top-level entries."""
        return decode(msg)

    def encode(self, entries: Iterable[WireEntry]) -> bytes:
        """Encode entries in the order given."""
        return encode(entries)

    # ========== Integrity ==========

    def hash(self, msg: bytes) -> str:
        """Hash the canonical form of a message."""
        return canonical_hash(msg, self.config)

    def verify_hash(self, msg: bytes, expected_hash: str) -> bool:
        """Check a message against a previously computed canonical hash."""
        return verify_canonical_hash(msg, expected_hash, self.config)

    def verify_equivalent(self, original: bytes, canonical: bytes) -> dict:
        """
        Verify that two messages carry the same fields.

        Returns dict with:
            - valid: bool
            - errors: list of error messages
        """
        is_valid, errors = verify_semantic_equivalence(original, canonical)
        return {
            'valid': is_valid,
            'errors': errors,
        }

    def verify(self, msg: bytes, checks: Optional[Iterable[str]] = None) -> dict:
        """
        Canonicalize msg and check the core invariants on the result.

        checks limits verification to the named invariants.

        Returns dict with:
            - passed: list of invariant names that held
            - failed: list of (name, details) tuples
            - all_passed: bool
        """
        result = verify_canonicalization(msg, self.config, checks)
        if not result['all_passed']:
            logger.warning("Canonicalization invariants failed: %s", result['failed'])
        return result

    def __repr__(self) -> str:
        return f"ProtoCanonEngine(config={self.config!r})"
