"""
Generic conversion between Value trees and plain Python data.

- to_value(obj)             deep and fallible (EncodeError)
- from_value(value, cls)    deep and fallible (DecodeError)

`to_value` is the explicit path for integers the lifting layer refuses:
anything within -2^64 .. 2^64-1 that does not fit the 64-bit classes
becomes a LargeSignedInteger, anything beyond raises EncodeError.
Dataclass instances are written as maps of field name -> value.

`from_value` returns builtins (None, bool, int, float, bytes, str, list,
dict). Array keys come back as tuples so they stay hashable; map keys that
are themselves maps cannot be represented and raise DecodeError. Passing a
dataclass type as `cls` builds that dataclass from a text-keyed map.
"""

from __future__ import annotations

import dataclasses
import typing
from collections.abc import Mapping
from typing import Any, Dict, Optional, Type, TypeVar

from .config import get_config
from .errors import DecodeError, EncodeError
from .lift import I64_MIN, I64_MAX, U64_MAX
from .value import (
    INTEGER_TYPES,
    Array,
    Bool,
    Bytes,
    CanonicalMap,
    Float,
    LargeSignedInteger,
    Map,
    Null,
    SignedInteger,
    Text,
    UnsignedInteger,
    Value,
)

T = TypeVar("T")

NEG_MIN = -(1 << 64)


def _int_to_value(n: int) -> Value:
    if 0 <= n <= U64_MAX:
        return UnsignedInteger(n)
    if I64_MIN <= n <= I64_MAX:
        return SignedInteger(n)
    if NEG_MIN <= n < 0:
        return LargeSignedInteger(n)
    raise EncodeError("integer out of CBOR range", value=n)


def to_value(obj: Any) -> Value:
    """Convert plain Python data (recursively) into a Value tree."""
    max_depth = get_config().max_depth
    try:
        return _to_value(obj, 0, max_depth)
    except RecursionError as e:
        raise EncodeError("maximum nesting exceeded", max_depth=max_depth).with_cause(e) from e


def _to_value(obj: Any, depth: int, max_depth: int) -> Value:
    if depth > max_depth:
        raise EncodeError("maximum nesting exceeded", max_depth=max_depth)
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return Null()
    if isinstance(obj, bool):
        return Bool(obj)
    if isinstance(obj, int):
        return _int_to_value(obj)
    if isinstance(obj, float):
        return Float(obj)
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return Bytes(bytes(obj))
    if isinstance(obj, str):
        return Text(obj)
    if isinstance(obj, (list, tuple)):
        items = []
        for x in obj:
            items.append(_to_value(x, depth + 1, max_depth))
        return Array(items)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        obj = {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    if isinstance(obj, Mapping):
        entries = CanonicalMap()
        for k, v in obj.items():
            entries[_to_value(k, depth + 1, max_depth)] = _to_value(v, depth + 1, max_depth)
        if len(entries) != len(obj):
            raise EncodeError("map keys collide after conversion", size=len(obj))
        return Map(entries)
    raise EncodeError(f"unsupported type for CBOR value: {type(obj).__name__}")


def from_value(value: Value, cls: Optional[Type[T]] = None) -> Any:
    """Convert a Value tree to plain Python data, or to dataclass `cls`."""
    try:
        if cls is not None and dataclasses.is_dataclass(cls):
            return _to_dataclass(value, cls)
        return _plain(value, key=False)
    except RecursionError as e:
        raise DecodeError("maximum nesting exceeded").with_cause(e) from e


def _plain(value: Value, *, key: bool) -> Any:
    if isinstance(value, Null):
        return None
    if isinstance(value, Bool):
        return value.value
    if isinstance(value, INTEGER_TYPES):
        return value.value
    if isinstance(value, Float):
        return value.value
    if isinstance(value, Bytes):
        return value.value
    if isinstance(value, Text):
        return value.value
    if isinstance(value, Array):
        items = []
        for v in value.items:
            items.append(_plain(v, key=key))
        return tuple(items) if key else items
    if isinstance(value, Map):
        if key:
            raise DecodeError("map used as a map key has no hashable native form")
        out: Dict[Any, Any] = {}
        for k, v in value.entries.items():
            out[_plain(k, key=True)] = _plain(v, key=False)
        return out
    raise DecodeError("value variant has no native form", variant=type(value).__name__)


def _to_dataclass(value: Value, cls: Type[T]) -> T:
    if not isinstance(value, Map):
        raise DecodeError(f"expected a map for {cls.__name__}", got=type(value).__name__)
    hints = typing.get_type_hints(cls)
    fields = {f.name: f for f in dataclasses.fields(cls) if f.init}
    kwargs: Dict[str, Any] = {}
    for k, v in value.entries.items():
        if not isinstance(k, Text):
            raise DecodeError(f"{cls.__name__} keys must be text", got=type(k).__name__)
        if k.value not in fields:
            raise DecodeError(f"unknown field for {cls.__name__}", field=k.value)
        hint = hints.get(k.value)
        if isinstance(hint, type) and dataclasses.is_dataclass(hint):
            kwargs[k.value] = _to_dataclass(v, hint)
        else:
            kwargs[k.value] = _plain(v, key=False)
    missing = [
        name
        for name, f in fields.items()
        if name not in kwargs
        and f.default is dataclasses.MISSING
        and f.default_factory is dataclasses.MISSING
    ]
    if missing:
        raise DecodeError(f"missing fields for {cls.__name__}", fields=missing)
    return cls(**kwargs)


__all__ = ["to_value", "from_value"]
