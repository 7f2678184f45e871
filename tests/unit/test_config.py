# SPDX-License-Identifier: Apache-2.0
"""
Layered configuration: overrides > env > file > defaults.
"""
from __future__ import annotations

import json

import pytest

from cborvalue import config as cfgmod
from cborvalue.config import Config, get_config, load, set_config
from cborvalue.errors import ConfigError


def test_defaults():
    cfg = load(env={})
    assert cfg == Config()
    assert cfg.max_depth == cfgmod.DEFAULT_MAX_DEPTH
    assert cfg.strict is True
    assert cfg.log_level == "WARNING"
    assert cfg.log_format is None


def test_env_values_are_parsed():
    cfg = load(
        env={
            "CBORVALUE_MAX_DEPTH": "0x40",
            "CBORVALUE_STRICT": "no",
            "CBORVALUE_LOG_LEVEL": "debug",
            "CBORVALUE_LOG_FORMAT": "JSON",
        }
    )
    assert cfg.max_depth == 64
    assert cfg.strict is False
    assert cfg.log_level == "DEBUG"
    assert cfg.log_format == "json"


def test_bad_env_int_raises():
    with pytest.raises(ConfigError) as ei:
        load(env={"CBORVALUE_MAX_DEPTH": "deep"})
    assert isinstance(ei.value.cause, ValueError)


def test_toml_file_with_section(tmp_path):
    p = tmp_path / "cbor.toml"
    p.write_text('[cborvalue]\nmax_depth = 32\nstrict = false\n', encoding="utf-8")
    cfg = load(p, env={})
    assert cfg.max_depth == 32
    assert cfg.strict is False


def test_json_file_flat(tmp_path):
    p = tmp_path / "cbor.json"
    p.write_text(json.dumps({"log_level": "INFO"}), encoding="utf-8")
    assert load(str(p), env={}).log_level == "INFO"


def test_file_from_env_variable(tmp_path):
    p = tmp_path / "cbor.toml"
    p.write_text("max_depth = 8\n", encoding="utf-8")
    assert load(env={"CBORVALUE_CONFIG": str(p)}).max_depth == 8


def test_precedence(tmp_path):
    p = tmp_path / "cbor.toml"
    p.write_text("max_depth = 8\nstrict = false\nlog_level = 'ERROR'\n", encoding="utf-8")
    cfg = load(p, env={"CBORVALUE_MAX_DEPTH": "16", "CBORVALUE_STRICT": "1"}, max_depth=24)
    assert cfg.max_depth == 24  # override beats env
    assert cfg.strict is True  # env beats file
    assert cfg.log_level == "ERROR"  # file beats default


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_depth": 0},
        {"max_depth": True},
        {"strict": "yes"},
        {"log_level": "LOUD"},
        {"log_format": "xml"},
        {"colour": True},
    ],
)
def test_invalid_values_raise(overrides):
    with pytest.raises(ConfigError):
        load(env={}, **overrides)


def test_missing_and_unsupported_files(tmp_path):
    with pytest.raises(ConfigError):
        load(tmp_path / "nope.toml", env={})
    p = tmp_path / "cbor.yaml"
    p.write_text("max_depth: 3\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load(p, env={})


def test_active_config_is_cached_and_replaceable(monkeypatch):
    monkeypatch.setenv("CBORVALUE_MAX_DEPTH", "99")
    first = get_config()
    assert first.max_depth == 99
    monkeypatch.setenv("CBORVALUE_MAX_DEPTH", "7")
    assert get_config() is first
    set_config(None)
    assert get_config().max_depth == 7
    mine = Config(strict=False)
    set_config(mine)
    assert get_config() is mine


def test_set_config_validates():
    with pytest.raises(ConfigError):
        set_config(Config(max_depth=-1))
