"""
cborvalue.compare
=================

The canonical total order over Value trees.

Determine the canonical order of two values:
  1. Smaller major type sorts first.
  2. Integers (any variant mix) compare by magnitude.
  3. Byte and text strings: shorter sorts first, then lexical by content.
  4. Arrays and maps: fewer elements / entries sorts first.
  5. Otherwise compare the canonical serializations of both values.

Step 5 is the only general tie-break for nested structures and for the
null/bool/float group, and it is expensive: both operands are encoded in
full. It is kept behind an explicit function so call sites can see the cost.

Equality *is* `compare(a, b) == Ordering.EQUAL`. `UnsignedInteger(5)`,
`SignedInteger(5)` and `LargeSignedInteger(5)` are the same value.

Serialization failure inside step 5 means the tree holds something public
construction cannot produce in a comparable form (an out-of-range large
integer, the reserved variant). That is raised as InvariantViolation and is
never turned into an ordering.
"""

from __future__ import annotations

import functools
import logging
from enum import IntEnum
from typing import Callable

from .encoding.cbor import canonical_bytes
from .errors import EncodeError, InvariantViolation
from .logging import get_logger
from .value import INTEGER_TYPES, Array, Bytes, Map, Text, Value

log = get_logger(__name__)


class Ordering(IntEnum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


def _cmp(a, b) -> Ordering:
    if a < b:
        return Ordering.LESS
    if a > b:
        return Ordering.GREATER
    return Ordering.EQUAL


def compare(a: Value, b: Value) -> Ordering:
    """Canonical ordering of `a` relative to `b`."""
    ra, rb = a.major_type, b.major_type
    if ra != rb:
        return _cmp(ra, rb)

    if isinstance(a, INTEGER_TYPES) and isinstance(b, INTEGER_TYPES):
        # Python ints are unbounded, so abs(-2**63) cannot overflow.
        return _cmp(abs(a.value), abs(b.value))
    if isinstance(a, Bytes) and isinstance(b, Bytes):
        return _cmp_strings(a.value, b.value)
    if isinstance(a, Text) and isinstance(b, Text):
        # Length is the UTF-8 byte length, and UTF-8 byte order equals code point order.
        return _cmp_strings(a.value.encode("utf-8", "surrogatepass"), b.value.encode("utf-8", "surrogatepass"))
    if isinstance(a, Array) and isinstance(b, Array) and len(a.items) != len(b.items):
        return _cmp(len(a.items), len(b.items))
    if isinstance(a, Map) and isinstance(b, Map) and len(a.entries) != len(b.entries):
        return _cmp(len(a.entries), len(b.entries))

    return _compare_encoded(a, b)


def _cmp_strings(a: bytes, b: bytes) -> Ordering:
    if len(a) != len(b):
        return _cmp(len(a), len(b))
    return _cmp(a, b)


def _compare_encoded(a: Value, b: Value) -> Ordering:
    if log.isEnabledFor(logging.DEBUG):
        log.debug(
            "fallback comparison",
            extra={"lhs_type": type(a).__name__, "rhs_type": type(b).__name__},
        )
    try:
        ea = canonical_bytes(a)
        eb = canonical_bytes(b)
    except EncodeError as exc:
        err = InvariantViolation(
            "value is not serializable during comparison",
            lhs_type=type(a).__name__,
            rhs_type=type(b).__name__,
        ).with_cause(exc)
        log.critical("comparison fallback failed", extra={"error": exc.message})
        raise err from exc
    return _cmp(ea, eb)


def equals(a: Value, b: Value) -> bool:
    return compare(a, b) is Ordering.EQUAL


# sorted(values, key=sort_key)
sort_key: Callable[[Value], object] = functools.cmp_to_key(compare)


__all__ = ["Ordering", "compare", "equals", "sort_key"]
