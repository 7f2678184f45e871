from __future__ import annotations

"""
Canonical CBOR codec for Value trees
------------------------------------

Encoder/decoder between `cborvalue.value.Value` and deterministic CBOR bytes
(RFC 8949 §4.2 core deterministic encoding, with RFC 7049bis map ordering):

- every head uses the shortest argument encoding
- floats use the shortest of half/single/double that is exact
- map entries are written in the order `CanonicalMap` keeps them, which is
  the canonical comparator order
- definite lengths only

Supported items:
- unsigned / negative integers whose argument fits in 64 bits
  (-2^64 .. 2^64-1; bignum tags are not produced)
- byte and text strings, arrays, maps
- false, true, null (undefined decodes as null), floats

Not supported:
- tags and other simple values (DecodeError)
- indefinite-length items (DecodeError)

Public API:
- serialize(value) -> bytes
- canonical_bytes(value) -> bytes   (no nesting cap; used by the comparator)
- deserialize(data, *, strict=None, max_depth=None) -> Value
"""

import logging
from itertools import chain
from typing import Iterator, List, Optional, Tuple

from ..config import get_config
from ..errors import DecodeError, EncodeError
from ..logging import get_logger
from ..value import (
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
from . import floats

log = get_logger(__name__)

U64_MAX = (1 << 64) - 1
I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1
NEG_MIN = -(1 << 64)

MT_UINT, MT_NINT, MT_BYTES, MT_TEXT, MT_ARRAY, MT_MAP, MT_TAG, MT_SIMPLE = range(8)

_FALSE, _TRUE, _NULL, _UNDEFINED = 20, 21, 22, 23
_AI_FLOAT = {25: floats.HALF, 26: floats.SINGLE, 27: floats.DOUBLE}
_FLOAT_AI = {2: 25, 4: 26, 8: 27}

# ------------------------
# Low-level encode helpers
# ------------------------


def _head(major: int, n: int) -> bytes:
    """Encode initial byte + additional-info for a non-negative integer length/value."""
    if n < 24:
        return bytes([(major << 5) | n])
    elif n <= 0xFF:
        return bytes([(major << 5) | 24, n])
    elif n <= 0xFFFF:
        return bytes([(major << 5) | 25]) + n.to_bytes(2, "big")
    elif n <= 0xFFFFFFFF:
        return bytes([(major << 5) | 26]) + n.to_bytes(4, "big")
    elif n <= U64_MAX:
        return bytes([(major << 5) | 27]) + n.to_bytes(8, "big")
    raise EncodeError("argument too large for a CBOR head", value=n)


def _encode_int(n: int, lo: int, hi: int, variant: str) -> bytes:
    if not lo <= n <= hi:
        raise EncodeError("the number can't be stored in CBOR", value=n, variant=variant)
    if n >= 0:
        return _head(MT_UINT, n)
    # Negative integer n is encoded as major type 1 with argument -(n+1)
    return _head(MT_NINT, -1 - n)


# ------------------------
# Canonical encoder
# ------------------------


def _encode_scalar(v: Value, out: bytearray) -> None:
    if isinstance(v, UnsignedInteger):
        out += _encode_int(v.value, 0, U64_MAX, "UnsignedInteger")
    elif isinstance(v, SignedInteger):
        out += _encode_int(v.value, I64_MIN, I64_MAX, "SignedInteger")
    elif isinstance(v, LargeSignedInteger):
        out += _encode_int(v.value, NEG_MIN, U64_MAX, "LargeSignedInteger")
    elif isinstance(v, Bytes):
        out += _head(MT_BYTES, len(v.value))
        out += v.value
    elif isinstance(v, Text):
        try:
            b = v.value.encode("utf-8", "strict")
        except UnicodeEncodeError as e:
            raise EncodeError("text is not valid UTF-8", reason=e.reason).with_cause(e) from e
        out += _head(MT_TEXT, len(b))
        out += b
    elif isinstance(v, Bool):
        out.append(0xF5 if v.value else 0xF4)
    elif isinstance(v, Null):
        out.append(0xF6)
    elif isinstance(v, Float):
        payload = floats.shortest(v.value)
        out.append((MT_SIMPLE << 5) | _FLOAT_AI[len(payload)])
        out += payload
    else:
        # Includes the reserved placeholder variant.
        raise EncodeError("value variant cannot be serialized", variant=type(v).__name__)


def _encode(root: Value, max_depth: Optional[int]) -> bytes:
    # Explicit stack of child iterators; its height is the current nesting depth.
    out = bytearray()
    stack: List[Iterator[Value]] = [iter((root,))]
    while stack:
        v = next(stack[-1], None)
        if v is None:
            stack.pop()
            continue
        if max_depth is not None and len(stack) - 1 > max_depth:
            raise EncodeError("maximum nesting exceeded", max_depth=max_depth)
        if isinstance(v, Array):
            out += _head(MT_ARRAY, len(v.items))
            stack.append(iter(list(v.items)))
        elif isinstance(v, Map):
            out += _head(MT_MAP, len(v.entries))
            stack.append(chain.from_iterable(v.entries.items()))
        else:
            _encode_scalar(v, out)
    return bytes(out)


def serialize(value: Value, *, max_depth: Optional[int] = None) -> bytes:
    """
    Encode `value` to canonical CBOR bytes.

    Raises EncodeError for integers outside their variant's range, text that
    is not valid Unicode, nesting deeper than `max_depth` (default from
    config) or the reserved variant.
    """
    if max_depth is None:
        max_depth = get_config().max_depth
    return _encode(value, max_depth)


def canonical_bytes(value: Value) -> bytes:
    """Canonical encoding with no nesting cap; what the comparator orders by."""
    return _encode(value, None)


# ------------------------
# Decoder
# ------------------------


class _Buf:
    __slots__ = ("b", "i", "n")

    def __init__(self, b: bytes):
        self.b = memoryview(b)
        self.i = 0
        self.n = len(b)

    def get(self, k: int) -> bytes:
        if self.i + k > self.n:
            raise DecodeError("truncated", offset=self.i, wanted=k)
        out = self.b[self.i:self.i + k].tobytes()
        self.i += k
        return out

    def get1(self) -> int:
        if self.i >= self.n:
            raise DecodeError("truncated", offset=self.i, wanted=1)
        v = self.b[self.i]
        self.i += 1
        return int(v)


def _read_head(buf: _Buf, strict: bool) -> Tuple[int, int, int]:
    """Return (major, additional-info, argument)."""
    start = buf.i
    ib = buf.get1()
    major = ib >> 5
    ai = ib & 0x1F
    if ai < 24:
        return major, ai, ai
    if major == MT_SIMPLE and ai in _AI_FLOAT:
        # Float payloads are raw bits, not an integer argument.
        return major, ai, int.from_bytes(buf.get(_AI_FLOAT[ai].width), "big")
    if ai in (24, 25, 26, 27):
        arg = int.from_bytes(buf.get(1 << (ai - 24)), "big")
        if strict and major != MT_SIMPLE and len(_head(0, arg)) != 1 + (1 << (ai - 24)):
            raise DecodeError("non-minimal head encoding", offset=start)
        return major, ai, arg
    if ai == 31:
        raise DecodeError("indefinite lengths are not allowed", offset=start)
    raise DecodeError("reserved additional information", offset=start, ai=ai)


def _decode(buf: _Buf, depth: int, strict: bool, max_depth: int) -> Value:
    if depth > max_depth:
        raise DecodeError("maximum nesting exceeded", max_depth=max_depth, offset=buf.i)
    start = buf.i
    major, ai, arg = _read_head(buf, strict)

    if major == MT_UINT:
        return UnsignedInteger(arg)
    if major == MT_NINT:
        n = -1 - arg
        return SignedInteger(n) if n >= I64_MIN else LargeSignedInteger(n)
    if major == MT_BYTES:
        return Bytes(buf.get(arg))
    if major == MT_TEXT:
        data = buf.get(arg)
        try:
            return Text(data.decode("utf-8", "strict"))
        except UnicodeDecodeError as e:
            raise DecodeError("invalid UTF-8", offset=start).with_cause(e) from e
    # Containers recurse straight back into _decode: one frame per nesting level.
    if major == MT_ARRAY:
        items: List[Value] = []
        for _ in range(arg):
            items.append(_decode(buf, depth + 1, strict, max_depth))
        return Array(items)
    if major == MT_MAP:
        entries = CanonicalMap()
        last_key_enc: Optional[bytes] = None
        for _ in range(arg):
            key_start = buf.i
            key = _decode(buf, depth + 1, strict, max_depth)
            key_enc = buf.b[key_start:buf.i].tobytes()
            if strict:
                # Equal keys can have different bytes (undefined vs null), so
                # duplicates are checked by value, order by encoded key bytes.
                if key in entries:
                    raise DecodeError("duplicate map key", offset=key_start)
                if last_key_enc is not None and key_enc <= last_key_enc:
                    raise DecodeError("map keys not in canonical order", offset=key_start)
            elif log.isEnabledFor(logging.DEBUG) and key in entries:
                log.debug("duplicate map key overwritten", extra={"offset": key_start})
            last_key_enc = key_enc
            entries[key] = _decode(buf, depth + 1, strict, max_depth)
        return Map(entries)
    if major == MT_TAG:
        raise DecodeError("tags are not supported", offset=start, tag=arg)

    # major 7: simple values and floats
    if ai in _AI_FLOAT:
        fmt = _AI_FLOAT[ai]
        bits = arg if fmt is floats.DOUBLE else floats.widen(arg, fmt)
        value = floats.bits_to_float(bits)
        if strict and len(floats.shortest(value)) != fmt.width:
            raise DecodeError("float not in shortest form", offset=start)
        return Float(value)
    if ai == _FALSE:
        return Bool(False)
    if ai == _TRUE:
        return Bool(True)
    if ai in (_NULL, _UNDEFINED):
        return Null()
    raise DecodeError("unsupported simple value", offset=start, simple=arg)


def deserialize(data: bytes, *, strict: Optional[bool] = None, max_depth: Optional[int] = None) -> Value:
    """
    Decode one CBOR data item into a Value.

    strict (default from config) additionally rejects anything that is not
    the canonical encoding: long heads, wide floats, unsorted or duplicate
    map keys. Raises DecodeError on malformed input or trailing bytes.
    """
    cfg = get_config()
    strict = cfg.strict if strict is None else strict
    max_depth = cfg.max_depth if max_depth is None else max_depth
    buf = _Buf(bytes(data))
    try:
        value = _decode(buf, 0, strict, max_depth)
    except RecursionError as e:
        raise DecodeError("maximum nesting exceeded", max_depth=max_depth).with_cause(e) from e
    if buf.i != buf.n:
        raise DecodeError("trailing bytes", offset=buf.i, length=buf.n)
    return value


__all__ = ["serialize", "canonical_bytes", "deserialize", "EncodeError", "DecodeError"]
