"""
Configuration for canonicalization.

Limits are opt-in hardening for untrusted input; the defaults leave every
realistic well-formed message untouched.
"""

import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigError

ENV_MAX_DEPTH = "PROTO_CANON_MAX_DEPTH"
ENV_MAX_MESSAGE_SIZE = "PROTO_CANON_MAX_MESSAGE_SIZE"
ENV_SORT_GROUPS = "PROTO_CANON_SORT_GROUPS"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")
_UNBOUNDED_VALUES = ("", "none", "unbounded")


@dataclass(frozen=True)
class CanonConfig:
    """
    Canonicalization settings.

    Attributes:
        max_depth: deepest submessage level that is canonicalized; payloads
            nested deeper are copied through opaque. None means unbounded.
        max_message_size: largest top-level buffer accepted, in bytes.
            None means unbounded.
        sort_groups: when False, a nesting level containing group markers
            keeps its input order. When True, markers are sorted like any
            other entry.
    """

    max_depth: Optional[int] = None
    max_message_size: Optional[int] = None
    sort_groups: bool = False

    def __post_init__(self):
        if self.max_depth is not None and self.max_depth < 0:
            raise ConfigError("max_depth", self.max_depth, "must be non-negative")
        if self.max_message_size is not None and self.max_message_size < 0:
            raise ConfigError("max_message_size", self.max_message_size, "must be non-negative")

    def allows_depth(self, depth: int) -> bool:
        """Check whether a submessage at the given depth may be canonicalized."""
        return self.max_depth is None or depth <= self.max_depth

    @classmethod
    def from_env(cls, environ=None) -> 'CanonConfig':
        """
        Build a config from environment variables.

        PROTO_CANON_MAX_DEPTH and PROTO_CANON_MAX_MESSAGE_SIZE take an integer
        or "none"; PROTO_CANON_SORT_GROUPS takes a boolean flag. Unset
        variables keep their defaults.
        """
        environ = os.environ if environ is None else environ
        kwargs = {}

        if ENV_MAX_DEPTH in environ:
            kwargs['max_depth'] = _parse_limit(ENV_MAX_DEPTH, environ[ENV_MAX_DEPTH])
        if ENV_MAX_MESSAGE_SIZE in environ:
            kwargs['max_message_size'] = _parse_limit(
                ENV_MAX_MESSAGE_SIZE, environ[ENV_MAX_MESSAGE_SIZE]
            )
        if ENV_SORT_GROUPS in environ:
            kwargs['sort_groups'] = _parse_flag(ENV_SORT_GROUPS, environ[ENV_SORT_GROUPS])

        return cls(**kwargs)


def _parse_limit(key: str, raw: str) -> Optional[int]:
    value = raw.strip().lower()
    if value in _UNBOUNDED_VALUES:
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigError(key, raw, "expected an integer or 'none'")


def _parse_flag(key: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(key, raw, "expected a boolean flag")


DEFAULT_CONFIG = CanonConfig()
