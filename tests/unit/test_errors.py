# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import json

import pytest

from cborvalue.errors import (
    CborError,
    CborErrorCode,
    ConfigError,
    DecodeError,
    EncodeError,
    InvariantViolation,
    Severity,
)


def test_codes_and_builtin_bases():
    e, d = EncodeError("bad"), DecodeError("worse")
    assert e.code is CborErrorCode.ENCODE and isinstance(e, TypeError)
    assert d.code is CborErrorCode.DECODE and isinstance(d, ValueError)
    assert isinstance(e, CborError) and isinstance(d, CborError)
    assert ConfigError().code is CborErrorCode.CONFIG


def test_invariant_violation_is_critical():
    err = InvariantViolation("reserved variant reached", variant="_Reserved")
    assert err.severity is Severity.CRITICAL
    assert not isinstance(err, (TypeError, ValueError))


def test_to_dict_is_json_safe():
    err = DecodeError("truncated", offset=3, raw=b"\x01\xff", kind=object)
    d = err.to_dict()
    assert d["code"] == "CBOR/DECODE"
    assert d["message"] == "truncated"
    assert d["data"]["offset"] == 3
    assert d["data"]["raw"] == "01ff"
    assert isinstance(d["data"]["kind"], str)
    assert d["severity"] == 40
    json.dumps(d)


def test_with_context_returns_new_instance():
    base = EncodeError("integer out of range", value=1)
    more = base.with_context(path="a.b", blob=b"\x00")
    assert more is not base
    assert type(more) is EncodeError
    assert base.data == {"value": 1}
    assert more.data == {"value": 1, "path": "a.b", "blob": "00"}
    assert more.message == base.message


def test_with_cause_is_reported_on_request():
    root = ValueError("boom")
    err = InvariantViolation("fallback failed").with_cause(root)
    assert err.cause is root
    assert err.severity is Severity.CRITICAL
    assert "cause" not in err.to_dict()
    assert err.to_dict(include_cause=True)["cause"] == {"type": "ValueError", "message": "boom"}


def test_str_includes_code_and_data():
    s = str(DecodeError("trailing bytes", offset=2))
    assert s.startswith("CBOR/DECODE: trailing bytes")
    assert "offset=2" in s


def test_raise_and_catch_by_builtin_type():
    with pytest.raises(ValueError) as ei:
        raise DecodeError("invalid UTF-8", offset=0)
    assert ei.value.data == {"offset": 0}
