"""
Bit-exact conversions between binary64 and the narrower IEEE-754 formats.

CBOR's preferred serialization writes a float in the shortest of half,
single or double precision that reproduces the original value *exactly*.
`struct` can pack half/single floats but rounds, and NaN payload handling
varies by platform, so the narrowing here works on the raw bit patterns:

- narrow(bits64, fmt) -> narrower bit pattern, or None if not exact
- widen(bits, fmt)    -> binary64 bit pattern

NaN payloads and the sign of zero are preserved in both directions.
"""

from __future__ import annotations

import struct
from typing import NamedTuple, Optional


class FloatFormat(NamedTuple):
    width: int  # bytes on the wire
    exp_bits: int
    man_bits: int

    @property
    def bias(self) -> int:
        return (1 << (self.exp_bits - 1)) - 1

    @property
    def exp_max(self) -> int:
        return (1 << self.exp_bits) - 1


HALF = FloatFormat(2, 5, 10)
SINGLE = FloatFormat(4, 8, 23)
DOUBLE = FloatFormat(8, 11, 52)


def float_to_bits(x: float) -> int:
    return struct.unpack(">Q", struct.pack(">d", x))[0]


def bits_to_float(bits: int) -> float:
    return struct.unpack(">d", bits.to_bytes(8, "big"))[0]


def narrow(bits: int, fmt: FloatFormat) -> Optional[int]:
    """Return `bits` (a binary64 pattern) re-expressed in `fmt`, or None if lossy."""
    sign = bits >> 63
    exp = (bits >> 52) & DOUBLE.exp_max
    man = bits & ((1 << 52) - 1)
    drop = 52 - fmt.man_bits
    out_sign = sign << (fmt.exp_bits + fmt.man_bits)

    if exp == DOUBLE.exp_max:
        # inf / NaN: payload must survive the truncation
        if man & ((1 << drop) - 1):
            return None
        return out_sign | (fmt.exp_max << fmt.man_bits) | (man >> drop)

    if exp == 0:
        # zero survives; binary64 subnormals are far below any narrower range
        return out_sign if man == 0 else None

    e = exp - DOUBLE.bias
    if 1 - fmt.bias <= e <= fmt.bias:
        if man & ((1 << drop) - 1):
            return None
        return out_sign | ((e + fmt.bias) << fmt.man_bits) | (man >> drop)

    # Subnormal in the target format: value = frac * 2^(1 - bias - man_bits)
    shift = (1 - fmt.bias - fmt.man_bits) - (e - 52)
    if e < 1 - fmt.bias and shift <= 52:
        sig = (1 << 52) | man
        if sig & ((1 << shift) - 1):
            return None
        return out_sign | (sig >> shift)
    return None


def widen(bits: int, fmt: FloatFormat) -> int:
    """Expand a `fmt` bit pattern to the equivalent binary64 pattern."""
    total = fmt.exp_bits + fmt.man_bits
    sign = (bits >> total) & 1
    exp = (bits >> fmt.man_bits) & fmt.exp_max
    man = bits & ((1 << fmt.man_bits) - 1)
    drop = 52 - fmt.man_bits

    if exp == fmt.exp_max:
        return (sign << 63) | (DOUBLE.exp_max << 52) | (man << drop)
    if exp == 0:
        if man == 0:
            return sign << 63
        # Normalise the subnormal: highest set bit becomes the implicit one.
        top = man.bit_length() - 1
        e = top + (1 - fmt.bias - fmt.man_bits)
        frac = (man - (1 << top)) << (52 - top)
        return (sign << 63) | ((e + DOUBLE.bias) << 52) | frac
    e = exp - fmt.bias
    return (sign << 63) | ((e + DOUBLE.bias) << 52) | (man << drop)


def shortest(x: float) -> bytes:
    """Big-endian payload of `x` in the narrowest exact format (2, 4 or 8 bytes)."""
    bits = float_to_bits(x)
    for fmt in (HALF, SINGLE):
        n = narrow(bits, fmt)
        if n is not None:
            return n.to_bytes(fmt.width, "big")
    return bits.to_bytes(8, "big")


__all__ = [
    "FloatFormat",
    "HALF",
    "SINGLE",
    "DOUBLE",
    "float_to_bits",
    "bits_to_float",
    "narrow",
    "widen",
    "shortest",
]
