"""
sharevault.config - metadata defaults, compatibility flags and size caps.

This module centralizes configuration for the vault engine. It has NO
third-party deps and is safe to import very early.

Configuration precedence:
  1) Environment variables (SHAREVAULT_*)
  2) Hardcoded safe defaults below

Env vars:
  - SHAREVAULT_DEFAULT_NAME            (str)    default: "Vault"
  - SHAREVAULT_DEFAULT_SYMBOL          (str)    default: "VAULT"
  - SHAREVAULT_DEFAULT_DECIMALS        (int)    default: 18   (clamped to 0..36)
  - SHAREVAULT_LEGACY_ERROR_CODES      (bool)   default: false
  - SHAREVAULT_MAX_EVENTS_PER_TX       (int)    default: 1024
  - SHAREVAULT_MAX_STORAGE_KEY_BYTES   (int)    default: 256
  - SHAREVAULT_LOG_LEVEL               (str)    default: "WARNING"

The name/symbol/decimals defaults are what an uninitialized vault reports.
`legacy_error_codes` makes a second `initialize` fail with INVALID_ADDRESS
(code 5) instead of ALREADY_INITIALIZED, for callers that match on the
pre-1.0 numeric codes.

Usage:
    from sharevault.config import load_config
    CFG = load_config()
    if CFG.legacy_error_codes: ...
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Any, Dict

# ----------------------------- helpers ---------------------------------------

_BOOL_TRUE = {"1", "true", "t", "yes", "y", "on"}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _BOOL_TRUE


def _env_int(name: str, default: int, *, min_v: int, max_v: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = int(raw, 0)
    except ValueError:
        return default
    if v < min_v:
        return min_v
    if v > max_v:
        return max_v
    return v


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _env_log_level(name: str, default: str) -> str:
    val = _env_str(name, default).upper()
    return val if val in _LOG_LEVELS else default


# ------------------------------- config --------------------------------------


@dataclass(frozen=True)
class VaultConfig:
    # Metadata reported before initialize()
    default_name: str
    default_symbol: str
    default_decimals: int

    # Compatibility
    legacy_error_codes: bool

    # Caps
    max_events_per_tx: int
    max_storage_key_bytes: int

    # Logging (applied by the CLI only; the library installs no handlers)
    log_level: str

    def with_overrides(self, **changes: Any) -> "VaultConfig":
        """Return a copy with selected fields replaced (tests, embedding hosts)."""
        return replace(self, **changes)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "default_name": self.default_name,
            "default_symbol": self.default_symbol,
            "default_decimals": self.default_decimals,
            "legacy_error_codes": self.legacy_error_codes,
            "max_events_per_tx": self.max_events_per_tx,
            "max_storage_key_bytes": self.max_storage_key_bytes,
            "log_level": self.log_level,
        }


@lru_cache(maxsize=1)
def load_config() -> VaultConfig:
    """
    Build and cache a VaultConfig from environment + safe defaults.
    """
    return VaultConfig(
        default_name=_env_str("SHAREVAULT_DEFAULT_NAME", "Vault"),
        default_symbol=_env_str("SHAREVAULT_DEFAULT_SYMBOL", "VAULT"),
        default_decimals=_env_int("SHAREVAULT_DEFAULT_DECIMALS", 18, min_v=0, max_v=36),
        legacy_error_codes=_env_bool("SHAREVAULT_LEGACY_ERROR_CODES", False),
        max_events_per_tx=_env_int("SHAREVAULT_MAX_EVENTS_PER_TX", 1024, min_v=16, max_v=100_000),
        max_storage_key_bytes=_env_int("SHAREVAULT_MAX_STORAGE_KEY_BYTES", 256, min_v=32, max_v=4096),
        log_level=_env_log_level("SHAREVAULT_LOG_LEVEL", "WARNING"),
    )


__all__ = ["VaultConfig", "load_config"]
