"""
sharevault.runtime - the host-facing APIs contracts run against.

Convenience re-exports live here so callers can do:

    from sharevault.runtime import Env, InMemoryAssetToken, MockAllAuths
    from sharevault.runtime import storage, events, auth  # module namespaces

Notes
-----
- Nothing in this package keeps module-level state; each `Env` is independent.
- Every mutating contract call goes through `Env.transaction`.
"""

from __future__ import annotations

from . import address as address
from . import auth as auth
from . import custodian as custodian
from . import events_api as events
from . import storage_api as storage
from .address import derive_address, require_address, to_bytes, to_hex
from .auth import Authorizer, MockAllAuths, SignerSet
from .custodian import AssetCustodian, InMemoryAssetToken
from .env import Env
from .events_api import Event, EventSink
from .storage_api import ContractStorage

__all__ = [
    # Core classes
    "Env",
    "ContractStorage",
    "Event",
    "EventSink",
    "Authorizer",
    "MockAllAuths",
    "SignerSet",
    "AssetCustodian",
    "InMemoryAssetToken",
    # Address helpers
    "derive_address",
    "require_address",
    "to_bytes",
    "to_hex",
    # Namespaces (modules)
    "address",
    "auth",
    "custodian",
    "events",
    "storage",
]
