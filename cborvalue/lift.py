"""
One-way lifting of native primitives into Value.

Each helper mirrors a native width class:

    from_bool        bool                    -> Bool
    from_signed      i8 / i16 / i32 / i64    -> SignedInteger
    from_unsigned    u8 / u16 / u32 / u64    -> UnsignedInteger
    from_float       f32 / f64               -> Float
    from_bytes       bytes-like              -> Bytes
    from_text        str                     -> Text
    from_array       iterable of Value       -> Array
    from_map         mapping Value -> Value  -> Map (canonically re-sorted)

`lift(obj)` picks the helper from the type of `obj`.

There is deliberately no lifting path for integers wider than 64 bits: not
every such number fits the wire format, so they go through the fallible
`cborvalue.native.to_value` instead. Lifting is shallow; containers must
already hold Value items.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .value import Array, Bool, Bytes, CanonicalMap, Float, Map, SignedInteger, Text, UnsignedInteger, Value

I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1
U64_MAX = (1 << 64) - 1


def from_bool(b: bool) -> Bool:
    return Bool(bool(b))


def from_signed(n: int) -> SignedInteger:
    if not I64_MIN <= n <= I64_MAX:
        raise OverflowError(f"{n} does not fit a 64-bit signed integer; use to_value()")
    return SignedInteger(int(n))


def from_unsigned(n: int) -> UnsignedInteger:
    if not 0 <= n <= U64_MAX:
        raise OverflowError(f"{n} does not fit a 64-bit unsigned integer; use to_value()")
    return UnsignedInteger(int(n))


def from_float(x: float) -> Float:
    return Float(float(x))


def from_bytes(b: bytes | bytearray | memoryview) -> Bytes:
    return Bytes(bytes(b))


def from_text(s: str) -> Text:
    return Text(str(s))


def from_array(items: Iterable[Value]) -> Array:
    items = list(items)
    for i, item in enumerate(items):
        if not isinstance(item, Value):
            raise TypeError(f"array item {i} is {type(item).__name__}, not Value")
    return Array(items)


def from_map(entries: Mapping[Value, Value]) -> Map:
    # CanonicalMap enforces Value keys/values and re-sorts on insert.
    return Map(CanonicalMap(entries))


def lift(obj: Any) -> Value:
    """Lift a native primitive or a shallow container of Values."""
    if isinstance(obj, Value):
        return obj
    # bool before int: bool is an int subclass.
    if isinstance(obj, bool):
        return from_bool(obj)
    if isinstance(obj, int):
        return from_unsigned(obj) if obj >= 0 else from_signed(obj)
    if isinstance(obj, float):
        return from_float(obj)
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return from_bytes(obj)
    if isinstance(obj, str):
        return from_text(obj)
    if isinstance(obj, (list, tuple)):
        return from_array(obj)
    if isinstance(obj, Mapping):
        return from_map(obj)
    raise TypeError(f"no lifting conversion for {type(obj).__name__}")


__all__ = [
    "lift",
    "from_bool",
    "from_signed",
    "from_unsigned",
    "from_float",
    "from_bytes",
    "from_text",
    "from_array",
    "from_map",
]
