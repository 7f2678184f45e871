"""
cborvalue configuration loader.

Goals
-----
- Zero external deps (stdlib only).
- Layered config with clear precedence:
    1) Explicit overrides passed to `load()` (highest)
    2) Environment variables (CBORVALUE_*)
    3) Config file (TOML or JSON)
    4) Built-in defaults (lowest)
- A typed dataclass with validation.

Only codec-level knobs live here:
  - nesting limit shared by the encoder and decoder
  - strict (canonical-only) decoding
  - log level / format used by `cborvalue.logging.configure_from_config`
"""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigError

DEFAULT_MAX_DEPTH = 512
DEFAULT_LOG_LEVEL = "WARNING"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}
_LOG_FORMATS = {"json", "text"}


def _parse_bool(v: str) -> bool:
    return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _env_int(env: Mapping[str, str], name: str) -> int:
    v = env[name]
    try:
        return int(v, 0)
    except ValueError as e:
        raise ConfigError(f"{name} must be int", name=name, got=v).with_cause(e) from e


@dataclass
class Config:
    max_depth: int = DEFAULT_MAX_DEPTH
    strict: bool = True
    log_level: str = DEFAULT_LOG_LEVEL
    log_format: Optional[str] = None  # "json" | "text" | None (auto)

    def validate(self) -> None:
        if not isinstance(self.max_depth, int) or isinstance(self.max_depth, bool) or self.max_depth < 1:
            raise ConfigError("max_depth must be a positive int", max_depth=self.max_depth)
        if not isinstance(self.strict, bool):
            raise ConfigError("strict must be a bool", strict=self.strict)
        if not isinstance(self.log_level, str) or self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigError("unknown log level", log_level=self.log_level)
        if self.log_format is not None and self.log_format not in _LOG_FORMATS:
            raise ConfigError("log_format must be 'json' or 'text'", log_format=self.log_format)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ------------------------------
# File loader (TOML / JSON)
# ------------------------------

def _load_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError("config file not found", path=str(path))
    suffix = path.suffix.lower()
    with path.open("rb") as f:
        if suffix in {".toml", ".tml"}:
            data = tomllib.load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise ConfigError(f"unsupported config format: {suffix}", path=str(path))
    # Allow either a flat table or a [cborvalue] section.
    section = data.get("cborvalue", data)
    if not isinstance(section, dict):
        raise ConfigError("config root must be a table", path=str(path))
    return dict(section)


def _from_env(env: Mapping[str, str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if "CBORVALUE_MAX_DEPTH" in env:
        out["max_depth"] = _env_int(env, "CBORVALUE_MAX_DEPTH")
    if "CBORVALUE_STRICT" in env:
        out["strict"] = _parse_bool(env["CBORVALUE_STRICT"])
    if "CBORVALUE_LOG_LEVEL" in env:
        out["log_level"] = env["CBORVALUE_LOG_LEVEL"].strip().upper()
    if "CBORVALUE_LOG_FORMAT" in env:
        out["log_format"] = env["CBORVALUE_LOG_FORMAT"].strip().lower() or None
    return out


# ------------------------------
# Main loader
# ------------------------------

def load(
    config_file: Optional[str | Path] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> Config:
    """
    Load the codec configuration.

    Precedence: overrides > env > file > defaults.

    Parameters
    ----------
    config_file : str | Path | None
        Optional TOML or JSON file with keys max_depth, strict, log_level,
        log_format (flat, or under a `cborvalue` table). Falls back to the
        CBORVALUE_CONFIG environment variable.
    env : Mapping | None
        Environment to read (defaults to os.environ).
    overrides : Any
        Keyword overrides, e.g. load(max_depth=64, strict=False)
    """
    env = os.environ if env is None else env
    base: Dict[str, Any] = asdict(Config())

    path = config_file or env.get("CBORVALUE_CONFIG")
    if path:
        base.update(_load_file(Path(path).expanduser()))

    base.update(_from_env(env))
    base.update(overrides)

    unknown = set(base) - set(asdict(Config()))
    if unknown:
        raise ConfigError("unknown config keys", keys=sorted(unknown))

    cfg = Config(**base)
    cfg.validate()
    return cfg


_ACTIVE: Optional[Config] = None


def get_config() -> Config:
    """Return the process-wide config, loading it from the environment on first use."""
    global _ACTIVE
    if _ACTIVE is None:
        _ACTIVE = load()
    return _ACTIVE


def set_config(cfg: Optional[Config]) -> None:
    """Install `cfg` as the process-wide config (None forces a reload on next use)."""
    global _ACTIVE
    if cfg is not None:
        cfg.validate()
    _ACTIVE = cfg


__all__ = ["Config", "load", "get_config", "set_config", "DEFAULT_MAX_DEPTH"]
