# -*- coding: utf-8 -*-
"""
Hypothesis profiles for the vault property tests.

Importing this package registers the named profiles below and loads one:
HYPOTHESIS_PROFILE wins, otherwise "ci" when the CI env var is truthy and
"dev" locally. Per-test overrides go through @settings(...) as usual.

    HYPOTHESIS_PROFILE=dev|ci|fast|stress
"""
from __future__ import annotations

import os
from typing import Final

from hypothesis import HealthCheck, Verbosity, settings

_QUIET_CHECKS = (HealthCheck.too_slow, HealthCheck.filter_too_much)

settings.register_profile(
    "dev",
    max_examples=100,
    deadline=None,
    suppress_health_check=_QUIET_CHECKS,
)

settings.register_profile(
    "ci",
    max_examples=300,
    deadline=None,
    suppress_health_check=_QUIET_CHECKS,
    verbosity=Verbosity.verbose,
    derandomize=True,
)

settings.register_profile(
    "fast",
    max_examples=25,
    deadline=None,
    suppress_health_check=(HealthCheck.too_slow,),
)

settings.register_profile(
    "stress",
    max_examples=2000,
    deadline=None,
    suppress_health_check=_QUIET_CHECKS + (HealthCheck.data_too_large,),
    derandomize=True,
)


def _env_truthy(name: str) -> bool:
    return (os.getenv(name) or "").lower() not in ("", "0", "false", "no", "off")


ACTIVE_PROFILE: Final[str] = os.getenv("HYPOTHESIS_PROFILE") or ("ci" if _env_truthy("CI") else "dev")
settings.load_profile(ACTIVE_PROFILE)

__all__ = ["ACTIVE_PROFILE"]
