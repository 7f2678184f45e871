# SPDX-License-Identifier: Apache-2.0
"""
Hypothesis settings for the property suites.

Two profiles: "dev" (random, 100 examples) and "ci" (derandomized, 300
examples). HYPOTHESIS_PROFILE picks one explicitly; otherwise a truthy CI
env var selects "ci".
"""
from __future__ import annotations

import os

from hypothesis import HealthCheck, settings

# Recursive Value trees are slow to generate and draw large examples.
_SUPPRESSED = (HealthCheck.too_slow, HealthCheck.data_too_large)

settings.register_profile("dev", max_examples=100, deadline=None, suppress_health_check=_SUPPRESSED)
settings.register_profile(
    "ci",
    max_examples=300,
    deadline=None,
    derandomize=True,
    suppress_health_check=_SUPPRESSED,
    print_blob=True,
)

_ci = (os.getenv("CI") or "").lower() not in ("", "0", "false", "no", "off")
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE") or ("ci" if _ci else "dev"))
