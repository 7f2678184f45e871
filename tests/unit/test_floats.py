# SPDX-License-Identifier: Apache-2.0
"""
Bit-exact half/single/double conversions behind canonical float encoding.
"""
from __future__ import annotations

import math
import struct

import pytest

from cborvalue.encoding import floats


@pytest.mark.parametrize(
    "x, width",
    [
        (0.0, 2),
        (1.0, 2),
        (65504.0, 2),
        (65536.0, 4),  # 2^16 overflows half
        (2.0**-24, 2),  # smallest half subnormal
        (2.0**-25, 4),
        (2.0**-149, 4),  # smallest single subnormal
        (2.0**-150, 8),
        (0.1, 8),
        (math.inf, 2),
    ],
)
def test_shortest_width(x, width):
    assert len(floats.shortest(x)) == width


@pytest.mark.parametrize("x", [1.5, -2.75, 2.0**-20, 2.0**-24, 3.0 * 2.0**-23, 65504.0, -0.0])
def test_half_round_trip_is_exact(x):
    bits = floats.float_to_bits(x)
    h = floats.narrow(bits, floats.HALF)
    assert h is not None
    assert floats.widen(h, floats.HALF) == bits
    assert struct.unpack(">e", h.to_bytes(2, "big"))[0] == x


@pytest.mark.parametrize("x", [100000.0, 2.0**-140, 3.4028234663852886e38, -3 * 2.0**-130])
def test_single_round_trip_is_exact(x):
    bits = floats.float_to_bits(x)
    s = floats.narrow(bits, floats.SINGLE)
    assert s is not None
    assert floats.widen(s, floats.SINGLE) == bits
    assert struct.unpack(">f", s.to_bytes(4, "big"))[0] == x


def test_lossy_narrowing_returns_none():
    assert floats.narrow(floats.float_to_bits(0.1), floats.SINGLE) is None
    assert floats.narrow(floats.float_to_bits(1.0e300), floats.SINGLE) is None
    # binary64 subnormal
    assert floats.narrow(1, floats.HALF) is None


def test_nan_payload_survives_when_representable():
    quiet = 0x7FF8000000000000
    with_payload = quiet | (0x3 << 42)
    h = floats.narrow(with_payload, floats.HALF)
    assert h == 0x7E03
    assert floats.widen(h, floats.HALF) == with_payload
    # payload bits below the half mantissa force a wider form
    assert floats.narrow(quiet | 1, floats.HALF) is None
    assert floats.narrow(quiet | 1, floats.SINGLE) is None


def test_bits_helpers_are_inverse():
    for bits in (0, 1 << 63, 0x3FF0000000000000, 0x7FF8000000000001):
        assert floats.float_to_bits(floats.bits_to_float(bits)) == bits
