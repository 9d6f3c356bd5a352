"""
Canonicalization invariants and their verification.

Each invariant relates an input message to its canonical form. Invariants
are declared once, in CORE_INVARIANTS, and evaluated per message.
"""

from collections import OrderedDict
from typing import Callable, Iterable, List, Optional

from .config import CanonConfig, DEFAULT_CONFIG
from .errors import InvariantViolationError
from .integrity.canonical import is_protobuf_message_sorted, sort_protobuf_message
from .integrity.verification import verify_semantic_equivalence

# A check returns the problems it found; an empty list means it holds.
Check = Callable[[bytes, bytes, CanonConfig], List[str]]


class Invariant:
    """
    A named guarantee about a message and its canonical form.
    """

    def __init__(self, name: str, description: str, check: Check):
        self.name = name
        self.description = description
        self.check = check

    def verify(self, msg: bytes, canonical: bytes, config: CanonConfig) -> None:
        """
        Raise InvariantViolationError unless the invariant holds.

        A check that raises is reported as a violation, not propagated.
        """
        try:
            problems = self.check(msg, canonical, config)
        except Exception as e:
            raise InvariantViolationError(self.name, f"{self.description}: check raised {e!r}")
        if problems:
            raise InvariantViolationError(self.name, "; ".join(problems))


class InvariantRegistry:
    """
    Ordered, name-keyed collection of invariants.
    """

    def __init__(self):
        self._invariants = OrderedDict()

    def __contains__(self, name: str) -> bool:
        return name in self._invariants

    @property
    def names(self) -> List[str]:
        return list(self._invariants)

    def register(self, name: str, description: str):
        """
        Decorator registering a check under name.

        Raises ValueError if name is already registered.
        """
        def decorator(check: Check) -> Check:
            if name in self._invariants:
                raise ValueError(f"Invariant already registered: {name}")
            self._invariants[name] = Invariant(name, description, check)
            return check
        return decorator

    def _select(self, names: Optional[Iterable[str]]) -> List[Invariant]:
        if names is None:
            return list(self._invariants.values())
        selected = []
        for name in names:
            if name not in self._invariants:
                raise ValueError(f"Unknown invariant: {name}")
            selected.append(self._invariants[name])
        return selected

    def verify_all(
        self,
        msg: bytes,
        canonical: bytes,
        config: Optional[CanonConfig] = None,
        names: Optional[Iterable[str]] = None,
    ) -> dict:
        """
        Verify the registered invariants, or only those in names.

        Returns dict with:
            - passed: list of invariant names that passed
            - failed: list of (name, details) tuples for failed invariants
            - all_passed: bool indicating if all passed

        Raises ValueError if names contains an unregistered invariant.
        """
        config = config or DEFAULT_CONFIG
        result = {
            'passed': [],
            'failed': [],
            'all_passed': True,
        }

        for invariant in self._select(names):
            try:
                invariant.verify(msg, canonical, config)
                result['passed'].append(invariant.name)
            except InvariantViolationError as e:
                result['failed'].append((invariant.name, e.details))
                result['all_passed'] = False

        return result


CORE_INVARIANTS = InvariantRegistry()


@CORE_INVARIANTS.register("idempotence", "Canonicalizing a canonical form changes nothing")
def _idempotence(msg, canonical, config):
    again = sort_protobuf_message(canonical, config)
    if again != canonical:
        return [f"second pass changed {len(canonical)} bytes into {again.hex()}"]
    return []


@CORE_INVARIANTS.register("canonical_order", "Top-level fields are in ascending field-number order")
def _canonical_order(msg, canonical, config):
    if not is_protobuf_message_sorted(canonical, recursive=False, config=config):
        return ["top-level field numbers are not ascending"]
    return []


@CORE_INVARIANTS.register("semantic_equivalence", "Every field keeps its ordered list of values")
def _semantic_equivalence(msg, canonical, config):
    _, errors = verify_semantic_equivalence(msg, canonical)
    return errors


@CORE_INVARIANTS.register("length_preservation", "Canonical form has the same length as the input")
def _length_preservation(msg, canonical, config):
    if len(canonical) != len(msg):
        return [f"canonical form is {len(canonical)} bytes, input is {len(msg)}"]
    return []


def verify_canonicalization(
    msg: bytes,
    config: Optional[CanonConfig] = None,
    checks: Optional[Iterable[str]] = None,
) -> dict:
    """
    Canonicalize msg and verify the core invariants on the result.

    checks limits verification to the named invariants.

    Raises a DecodeError subclass if msg is not valid wire format, and
    ValueError if checks names an unknown invariant.
    """
    msg = bytes(msg)
    canonical = sort_protobuf_message(msg, config)
    return CORE_INVARIANTS.verify_all(msg, canonical, config, names=checks)
