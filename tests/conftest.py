# SPDX-License-Identifier: Apache-2.0
"""
Shared pytest fixtures:
- Isolated cborvalue configuration per test (no CBORVALUE_* env leakage)
- A `lenient` fixture for non-canonical decoding
"""
from __future__ import annotations

import pytest

from cborvalue import config as cconfig


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "CBORVALUE_CONFIG",
        "CBORVALUE_MAX_DEPTH",
        "CBORVALUE_STRICT",
        "CBORVALUE_LOG_LEVEL",
        "CBORVALUE_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    cconfig.set_config(None)
    yield
    cconfig.set_config(None)


@pytest.fixture
def lenient():
    """Install a config with strict decoding turned off."""
    cconfig.set_config(cconfig.Config(strict=False))
    return cconfig.get_config()
