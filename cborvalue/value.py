"""
cborvalue.value
===============

The `Value` tree: a loosely typed way of representing any CBOR data item.

Variants
--------
- Null                   absence of a value (also CBOR `undefined`)
- Bool(value)
- UnsignedInteger(value) 0 .. 2^64-1
- SignedInteger(value)   -2^63 .. 2^63-1 (non-negative values are allowed)
- LargeSignedInteger(value)
                         integers whose magnitude needs more than 64 bits;
                         only -2^64 .. 2^64-1 can be serialized
- Float(value)           IEEE-754 double, compared by its canonical encoding
- Bytes(value)
- Text(value)
- Array(items)           list of Value
- Map(entries)           CanonicalMap, always iterated in canonical key order

Maps are sorted according to the canonical ordering of RFC 7049bis §2, so a
value tree always serializes to one canonical byte string.

Construction never validates integer ranges. The value tree is a free-form
AST; whether it fits the wire format is decided by the serializer.

Equality and ordering operators delegate to `cborvalue.compare.compare`.
Some comparisons (same-length arrays and maps, and null/bool/float) fall back
to serializing both operands, so prefer scalar keys in hot maps.
"""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .errors import InvariantViolation

# Major-type ranks used as the primary sort key.
MT_UNSIGNED = 0
MT_NEGATIVE = 1
MT_BYTES = 2
MT_TEXT = 3
MT_ARRAY = 4
MT_MAP = 5
MT_SIMPLE = 7


class Value:
    """Abstract base of every variant. Not instantiated directly."""

    __slots__ = ()

    @property
    def major_type(self) -> int:
        raise NotImplementedError

    # Ordering is the canonical comparator; there is no other equality.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return _compare(self, other) == 0

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return _compare(self, other) != 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return _compare(self, other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return _compare(self, other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return _compare(self, other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return _compare(self, other) >= 0

    def __hash__(self) -> int:
        from .encoding.cbor import canonical_bytes

        return hash(canonical_bytes(self))


def _compare(a: Value, b: Value) -> int:
    from .compare import compare

    return int(compare(a, b))


@dataclass(frozen=True, eq=False)
class Null(Value):
    @property
    def major_type(self) -> int:
        return MT_SIMPLE


@dataclass(frozen=True, eq=False)
class Bool(Value):
    value: bool

    @property
    def major_type(self) -> int:
        return MT_SIMPLE


class _Integer(Value):
    """Shared behaviour of the three integer variants: sign decides the rank."""

    __slots__ = ()
    value: int

    @property
    def major_type(self) -> int:
        return MT_UNSIGNED if self.value >= 0 else MT_NEGATIVE

    def __hash__(self) -> int:
        # Equal magnitudes within a rank are equal values whatever the variant.
        return hash(self.value)

    def __int__(self) -> int:
        return self.value


@dataclass(frozen=True, eq=False)
class UnsignedInteger(_Integer):
    value: int


@dataclass(frozen=True, eq=False)
class SignedInteger(_Integer):
    value: int


@dataclass(frozen=True, eq=False)
class LargeSignedInteger(_Integer):
    value: int


@dataclass(frozen=True, eq=False)
class Float(Value):
    """
    Floats compare bit-by-bit through their canonical encoding: NaNs with
    different payloads differ, and -0.0 differs from 0.0.
    """

    value: float

    @property
    def major_type(self) -> int:
        return MT_SIMPLE

    def __float__(self) -> float:
        return self.value


@dataclass(frozen=True, eq=False)
class Bytes(Value):
    value: bytes

    @property
    def major_type(self) -> int:
        return MT_BYTES

    def __len__(self) -> int:
        return len(self.value)

    def __hash__(self) -> int:
        return hash((MT_BYTES, self.value))


@dataclass(frozen=True, eq=False)
class Text(Value):
    value: str

    @property
    def major_type(self) -> int:
        return MT_TEXT

    def __str__(self) -> str:
        return self.value

    def __hash__(self) -> int:
        return hash((MT_TEXT, self.value))


@dataclass(eq=False)
class Array(Value):
    items: List[Value] = field(default_factory=list)

    @property
    def major_type(self) -> int:
        return MT_ARRAY

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Value:
        return self.items[index]

    def __setitem__(self, index: int | slice, item: Any) -> None:
        if isinstance(index, slice):
            self.items[index] = [_check_value(x) for x in item]
        else:
            self.items[index] = _check_value(item)

    def __delitem__(self, index: int) -> None:
        del self.items[index]

    def append(self, item: Value) -> None:
        self.items.append(_check_value(item))

    def insert(self, index: int, item: Value) -> None:
        self.items.insert(index, _check_value(item))

    __hash__ = None  # type: ignore[assignment]


class CanonicalMap(MutableMapping):
    """
    Mapping from Value to Value kept in canonical key order.

    Keys live in a sorted list searched with `bisect`; iteration, `keys()`,
    `values()` and `items()` always follow comparator order. Setting a key
    that compares equal to a stored one replaces the value and keeps the
    stored key, so `UnsignedInteger(1)` and `SignedInteger(1)` address the
    same entry.
    """

    __slots__ = ("_keys", "_vals")

    def __init__(self, entries: Optional[Mapping[Value, Value] | Iterable[Tuple[Value, Value]]] = None) -> None:
        self._keys: List[Value] = []
        self._vals: List[Value] = []
        if entries is not None:
            self.update(entries)

    def _index(self, key: Value) -> Tuple[int, bool]:
        if not isinstance(key, Value):
            raise TypeError(f"map keys must be Value, not {type(key).__name__}")
        i = bisect_left(self._keys, key)
        return i, i < len(self._keys) and self._keys[i] == key

    def __getitem__(self, key: Value) -> Value:
        i, found = self._index(key)
        if not found:
            raise KeyError(key)
        return self._vals[i]

    def __setitem__(self, key: Value, value: Value) -> None:
        _check_value(value)
        i, found = self._index(key)
        if found:
            self._vals[i] = value
        else:
            self._keys.insert(i, key)
            self._vals.insert(i, value)

    def __delitem__(self, key: Value) -> None:
        i, found = self._index(key)
        if not found:
            raise KeyError(key)
        del self._keys[i]
        del self._vals[i]

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, Value):
            return False
        return self._index(key)[1]

    def __iter__(self) -> Iterator[Value]:
        return iter(list(self._keys))

    def __len__(self) -> int:
        return len(self._keys)

    def keys(self):  # type: ignore[override]
        return list(self._keys)

    def values(self):  # type: ignore[override]
        return list(self._vals)

    def items(self):  # type: ignore[override]
        return list(zip(self._keys, self._vals))

    def copy(self) -> "CanonicalMap":
        new = CanonicalMap()
        new._keys = list(self._keys)
        new._vals = list(self._vals)
        return new

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CanonicalMap):
            return NotImplemented
        return len(self) == len(other) and all(
            k1 == k2 and v1 == v2 for (k1, v1), (k2, v2) in zip(self.items(), other.items())
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        inner = ", ".join(f"{k!r}: {v!r}" for k, v in zip(self._keys, self._vals))
        return f"CanonicalMap({{{inner}}})"


@dataclass(eq=False)
class Map(Value):
    entries: CanonicalMap = field(default_factory=CanonicalMap)

    def __post_init__(self) -> None:
        if not isinstance(self.entries, CanonicalMap):
            self.entries = CanonicalMap(self.entries)

    @property
    def major_type(self) -> int:
        return MT_MAP

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.entries)

    def __getitem__(self, key: Value) -> Value:
        return self.entries[key]

    def __setitem__(self, key: Value, value: Value) -> None:
        self.entries[key] = value

    def __delitem__(self, key: Value) -> None:
        del self.entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def get(self, key: Value, default: Any = None) -> Any:
        return self.entries.get(key, default)

    def keys(self):
        return self.entries.keys()

    def values(self):
        return self.entries.values()

    def items(self):
        return self.entries.items()

    __hash__ = None  # type: ignore[assignment]


@dataclass(frozen=True, eq=False)
class _Reserved(Value):
    # Placeholder kept so tags and simple values can be added later without
    # changing every dispatch. Nothing public constructs it.

    @property
    def major_type(self) -> int:
        raise InvariantViolation("reserved value variant reached", variant="_Reserved")


def _check_value(item: Any) -> Value:
    if not isinstance(item, Value):
        raise TypeError(f"expected Value, got {type(item).__name__}")
    return item


INTEGER_TYPES = (UnsignedInteger, SignedInteger, LargeSignedInteger)

__all__ = [
    "Value",
    "Null",
    "Bool",
    "UnsignedInteger",
    "SignedInteger",
    "LargeSignedInteger",
    "Float",
    "Bytes",
    "Text",
    "Array",
    "Map",
    "CanonicalMap",
    "INTEGER_TYPES",
]
