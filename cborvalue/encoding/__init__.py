"""
cborvalue.encoding
==================

Canonical CBOR bytes for Value trees.

Modules
-------
- cbor.py:   serialize/deserialize (shortest heads and floats, canonical map order)
- floats.py: bit-exact half/single/double conversions used by the codec

The comparator depends on `serialize` for its last-resort tie-break, so any
change to the encoding rules here changes comparison results too.
"""

from __future__ import annotations

import hashlib

from ..value import Value
from .cbor import DecodeError, EncodeError, deserialize, serialize


def canonical_sha3_256(value: Value) -> bytes:
    """
    sha3_256(serialize(value)): content address of a value; equal values hash alike.
    """
    return hashlib.sha3_256(serialize(value)).digest()


__all__ = [
    "serialize",
    "deserialize",
    "EncodeError",
    "DecodeError",
    "canonical_sha3_256",
]
