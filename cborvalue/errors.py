"""
cborvalue.errors
----------------

A small, consistent error system for the value model and its codec.

Design goals
------------
- One root `CborError` with machine-friendly `code` and optional `data`.
- Concrete subclasses for the three failure domains: encoding, decoding and
  broken internal invariants (plus configuration).
- Safe JSON representation (`to_dict`) suitable for logs.
- Every failure is deterministic and data-dependent; nothing is retryable.

`EncodeError` and `DecodeError` also derive from `TypeError` / `ValueError`
so callers that only know the builtin hierarchy can still catch them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, Mapping, Optional


class Severity(IntEnum):
    """Optional severity hint for operators."""

    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50


class CborErrorCode(str, Enum):
    INTERNAL = "CBOR/INTERNAL"
    CONFIG = "CBOR/CONFIG"
    ENCODE = "CBOR/ENCODE"
    DECODE = "CBOR/DECODE"
    INVARIANT = "CBOR/INVARIANT"


@dataclass(eq=False)
class CborError(Exception):
    """
    Root error for cborvalue.

    Attributes
    ----------
    code: str
        Machine-stable error code (see CborErrorCode).
    message: str
        Human hint suitable for logs.
    data: dict
        Optional machine data (offsets, depths, type names). JSON-serializable.
    severity: Severity
        Optional severity hint (default ERROR).
    cause: Optional[BaseException]
        Wrapped original exception; not part of the repr.
    """

    code: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    severity: Severity = Severity.ERROR
    cause: Optional[BaseException] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        super().__init__(f"{self.code}: {self.message}")

    def with_context(self, **ctx: Any) -> "CborError":
        """Return a *new* error with extra context merged (does not mutate)."""
        d = dict(self.data)
        for k, v in ctx.items():
            d[k] = _coerce_json(v)
        return self._clone(data=d, cause=self.cause)

    def with_cause(self, exc: BaseException) -> "CborError":
        """Attach/replace the causal exception (returns a new instance)."""
        return self._clone(data=dict(self.data), cause=exc)

    def to_dict(self, include_cause: bool = False) -> Dict[str, Any]:
        """JSON-safe shape suitable for logs."""
        out = {
            "code": str(self.code.value if isinstance(self.code, Enum) else self.code),
            "message": self.message,
            "data": _coerce_json(self.data),
            "severity": int(self.severity),
        }
        if include_cause and self.cause is not None:
            out["cause"] = {
                "type": type(self.cause).__name__,
                "message": str(self.cause),
            }
        return out

    def _clone(self, *, data: Dict[str, Any], cause: Optional[BaseException]) -> "CborError":
        # Subclasses take (message, **data); bypass them and rebuild the dataclass fields.
        new = type(self).__new__(type(self))
        CborError.__init__(
            new,
            code=self.code,
            message=self.message,
            data=data,
            severity=self.severity,
            cause=cause,
        )
        return new

    def __str__(self) -> str:  # pragma: no cover - human formatting
        code = self.code.value if isinstance(self.code, Enum) else self.code
        parts = [f"{code}: {self.message}"]
        if self.data:
            preview = ", ".join(f"{k}={_preview(v)}" for k, v in self.data.items())
            parts.append(f"[{preview}]")
        return " ".join(parts)


class EncodeError(CborError, TypeError):
    """A value cannot be represented in canonical CBOR."""

    def __init__(self, message="encoding failed", **data: Any) -> None:
        super().__init__(code=CborErrorCode.ENCODE, message=message, data=_jsonmap(data))


class DecodeError(CborError, ValueError):
    """Input bytes are malformed, unsupported or not canonical."""

    def __init__(self, message="decoding failed", **data: Any) -> None:
        super().__init__(code=CborErrorCode.DECODE, message=message, data=_jsonmap(data))


class InvariantViolation(CborError):
    """A logic fault: the value tree reached a state public construction cannot produce."""

    def __init__(self, message="invariant violated", **data: Any) -> None:
        super().__init__(
            code=CborErrorCode.INVARIANT,
            message=message,
            data=_jsonmap(data),
            severity=Severity.CRITICAL,
        )


class ConfigError(CborError):
    def __init__(self, message="invalid configuration", **data: Any) -> None:
        super().__init__(code=CborErrorCode.CONFIG, message=message, data=_jsonmap(data))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _jsonmap(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: _coerce_json(v) for k, v in data.items()}


def _coerce_json(v: Any) -> Any:
    # Keep JSON primitives; stringify the rest; hex-encode bytes.
    if v is None or isinstance(v, (bool, int, float, str, list, dict)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return v.hex()
    return str(v)


def _preview(v: Any, limit: int = 96) -> str:
    s = str(_coerce_json(v))
    return s if len(s) <= limit else s[:limit] + "…"


__all__ = [
    "Severity",
    "CborErrorCode",
    "CborError",
    "EncodeError",
    "DecodeError",
    "InvariantViolation",
    "ConfigError",
]
