"""
Semantic verification of canonicalized messages.

Checks, without a schema, that two buffers carry the same fields: the same
field-number to ordered-value mapping, with nested messages compared
recursively.
"""

from collections import OrderedDict
from typing import Dict, List, Tuple

from ..errors import DecodeError
from ..model.entry import WireEntry, WireType
from ..wire.decoder import decode


def field_value_map(msg: bytes) -> Dict[int, List[WireEntry]]:
    """
    Group the top-level entries of a message by field number.

    Each list keeps the wire order of that field's occurrences; the mapping
    itself is keyed in order of first appearance.

    Raises a DecodeError subclass if msg is not valid wire format.
    """
    fields = OrderedDict()
    for entry in decode(msg):
        fields.setdefault(entry.field_number, []).append(entry)
    return fields


def _same_value(left: WireEntry, right: WireEntry, path: str, errors: List[str]) -> bool:
    """Return True when the two values still need comparing as messages."""
    if left.wire_type != right.wire_type:
        errors.append(
            f"{path}: wire type {left.wire_type.name} != {right.wire_type.name}"
        )
        return False

    if left.payload == right.payload:
        return False

    if left.wire_type != WireType.LENGTH_DELIMITED:
        errors.append(f"{path}: payload differs")
        return False

    return True


def _compare(original: bytes, canonical: bytes, errors: List[str]) -> None:
    pending = [(original, canonical, "")]

    while pending:
        original, canonical, path = pending.pop()
        try:
            left = field_value_map(original)
            right = field_value_map(canonical)
        except DecodeError as e:
            errors.append(f"{path or '<root>'}: {e}")
            continue

        if set(left) != set(right):
            missing = sorted(set(left) - set(right))
            extra = sorted(set(right) - set(left))
            errors.append(f"{path or '<root>'}: missing fields {missing}, extra fields {extra}")
            continue

        for field_number, values in left.items():
            others = right[field_number]
            if len(values) != len(others):
                errors.append(
                    f"{path}/{field_number}: {len(values)} occurrences != {len(others)}"
                )
                continue
            for index, (a, b) in enumerate(zip(values, others)):
                value_path = f"{path}/{field_number}[{index}]"
                if _same_value(a, b, value_path, errors):
                    pending.append((a.payload, b.payload, value_path))


def verify_semantic_equivalence(original: bytes, canonical: bytes) -> Tuple[bool, List[str]]:
    """
    Verify that canonical carries exactly the fields of original.

    Length-delimited values that differ byte-wise are decoded and compared
    as nested messages; if either side does not decode, they differ.

    Returns (is_equivalent, errors) where errors is list of error messages.
    """
    errors = []
    _compare(bytes(original), bytes(canonical), errors)
    return len(errors) == 0, errors
