# SPDX-License-Identifier: Apache-2.0
"""
CanonicalMap: iteration always follows the canonical comparator, keys are
unique under it, and equal keys overwrite values in place.
"""
from __future__ import annotations

import pytest

from cborvalue import (
    Array,
    Bytes,
    CanonicalMap,
    LargeSignedInteger,
    Map,
    Null,
    SignedInteger,
    Text,
    UnsignedInteger,
    serialize,
)


def test_insertion_order_is_irrelevant():
    m = CanonicalMap()
    m[Text("b")] = UnsignedInteger(1)
    m[Text("a")] = UnsignedInteger(2)
    assert [k.value for k in m] == ["a", "b"]
    assert serialize(Map(m)) == bytes.fromhex("a2616102616201")


def test_mixed_key_kinds_follow_rank_and_magnitude():
    m = CanonicalMap(
        [
            (Null(), Text("null")),
            (Text("t"), Text("text")),
            (SignedInteger(-1), Text("neg1")),
            (Array([]), Text("arr")),
            (UnsignedInteger(24), Text("24")),
            (Bytes(b"\x00"), Text("bytes")),
            (UnsignedInteger(10), Text("10")),
            (SignedInteger(-100), Text("neg100")),
        ]
    )
    assert [v.value for v in m.values()] == ["10", "24", "neg1", "neg100", "bytes", "text", "arr", "null"]


def test_equal_key_overwrites_value_and_keeps_stored_key():
    m = CanonicalMap()
    m[UnsignedInteger(7)] = Text("first")
    m[SignedInteger(7)] = Text("second")
    assert len(m) == 1
    (key,) = m.keys()
    assert type(key) is UnsignedInteger
    assert m[LargeSignedInteger(7)] == Text("second")


def test_delete_and_membership():
    m = CanonicalMap({Text("a"): Null(), Text("b"): Null()})
    assert Text("a") in m
    assert "a" not in m
    del m[Text("a")]
    assert Text("a") not in m
    with pytest.raises(KeyError):
        del m[Text("a")]
    with pytest.raises(KeyError):
        m[Text("zz")]


def test_mutable_mapping_mixins():
    m = CanonicalMap()
    assert m.setdefault(Text("k"), Null()) == Null()
    m.update({Text("j"): UnsignedInteger(1)})
    assert [k.value for k in m] == ["j", "k"]
    assert m.pop(Text("j")) == UnsignedInteger(1)
    assert m.get(Text("j")) is None
    m.clear()
    assert len(m) == 0


def test_non_value_keys_and_values_are_rejected():
    m = CanonicalMap()
    with pytest.raises(TypeError):
        m["a"] = Null()  # type: ignore[index]
    with pytest.raises(TypeError):
        m[Text("a")] = "a"  # type: ignore[assignment]


def test_copy_is_independent_and_equal():
    m = CanonicalMap({Text("a"): UnsignedInteger(1)})
    c = m.copy()
    assert c == m
    c[Text("b")] = Null()
    assert c != m
    assert len(m) == 1


def test_container_keys_sort_by_size_then_encoding():
    m = CanonicalMap()
    m[Array([UnsignedInteger(2)])] = Null()
    m[Array([UnsignedInteger(1), UnsignedInteger(1)])] = Null()
    m[Array([UnsignedInteger(1)])] = Null()
    assert [serialize(k) for k in m] == [
        bytes.fromhex("8101"),
        bytes.fromhex("8102"),
        bytes.fromhex("820101"),
    ]


def test_repr_lists_entries_in_order():
    m = CanonicalMap({Text("b"): Null(), Text("a"): Null()})
    assert repr(m).index("'a'") < repr(m).index("'b'")
