"""sharevault.version - semantic version for the vault engine.

Resolution order (first match wins):
- SHAREVAULT_VERSION environment override (exact value)
- installed distribution metadata for 'sharevault'
- BASE_VERSION + '+dev'
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import metadata as importlib_metadata
from typing import Optional

# Bump when storage layout, rounding or event shapes change.
BASE_VERSION = "0.1.0"


def _pkg_metadata_version(dist_name: str = "sharevault") -> Optional[str]:
    """Read the installed package version; None if not installed."""
    try:
        v = importlib_metadata.version(dist_name)
    except importlib_metadata.PackageNotFoundError:
        return None
    return v if v and v != "0.0.0" else None


@lru_cache(maxsize=1)
def compute_version() -> str:
    val = os.getenv("SHAREVAULT_VERSION")
    if val:
        return val

    meta_v = _pkg_metadata_version()
    if meta_v:
        return meta_v

    return f"{BASE_VERSION}+dev"


__version__ = compute_version()

__all__ = ["__version__", "BASE_VERSION", "compute_version"]
