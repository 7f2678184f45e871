"""
cborvalue: canonical in-memory CBOR values.

A dynamically typed Value tree for every CBOR major type, plus the total
order that keeps map keys (and therefore whole encoded messages)
byte-for-byte deterministic. Useful wherever a value must have exactly one
encoding: hashing, signing, diffing, reproducible transport.

    from cborvalue import Map, Text, UnsignedInteger, compare, serialize

    m = Map()
    m[Text("b")] = UnsignedInteger(1)
    m[Text("a")] = UnsignedInteger(2)
    list(m.keys())  # [Text('a'), Text('b')]
    serialize(m)    # b'\\xa2aa\\x02ab\\x01'

Only re-exports here; importing the package configures no logging.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

from .compare import Ordering, compare, equals, sort_key
from .encoding import canonical_sha3_256, deserialize, serialize
from .errors import CborError, ConfigError, DecodeError, EncodeError, InvariantViolation
from .lift import lift
from .native import from_value, to_value
from .value import (
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

try:
    __version__ = _pkg_version("cbor-value")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0+local"


def get_version() -> str:
    """Return the semantic version string for this package."""
    return __version__


__all__ = [
    "__version__",
    "get_version",
    # model
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
    # ordering
    "Ordering",
    "compare",
    "equals",
    "sort_key",
    # conversions
    "lift",
    "to_value",
    "from_value",
    # codec
    "serialize",
    "deserialize",
    "canonical_sha3_256",
    # errors
    "CborError",
    "EncodeError",
    "DecodeError",
    "InvariantViolation",
    "ConfigError",
]
