"""
sharevault - tokenized vault share/asset accounting engine.

This module exposes a small, stable façade over the internal packages:

- __version__ / version(): semantic version string
- Env: execution environment (journaled store, auth, events, transactions)
- InMemoryAssetToken: reference asset custodian living on an Env
- Vault: deposit / mint / withdraw / redeem, previews and share-token surface
- errors: typed, coded failures (`VaultError` and subclasses)

Quick start:

    from sharevault import Env, InMemoryAssetToken, Vault, derive_address

    env = Env()
    token = InMemoryAssetToken(env)
    vault = Vault(env)
    vault.initialize(token.address, "Vault Shares", "vSHR", 18)

    alice = derive_address("alice")
    token.mint(alice, 1_000)
    vault.deposit(100, alice, caller=alice)      # -> 100 shares
"""

from __future__ import annotations

from . import errors as errors
from .config import VaultConfig, load_config
from .errors import ErrorCode, VaultError
from .math import I128_MAX, UNLIMITED
from .runtime import (Env, EventSink, InMemoryAssetToken, MockAllAuths,
                      SignerSet, derive_address)
from .token.fungible import FungibleShares
from .token.ledger import Ledger
from .vault import Vault, to_assets, to_shares
from .version import __version__


def version() -> str:
    """Return the sharevault semantic version string."""
    return __version__


__all__ = [
    "__version__",
    "version",
    "errors",
    "ErrorCode",
    "VaultError",
    "VaultConfig",
    "load_config",
    "I128_MAX",
    "UNLIMITED",
    "Env",
    "EventSink",
    "MockAllAuths",
    "SignerSet",
    "InMemoryAssetToken",
    "derive_address",
    "Ledger",
    "FungibleShares",
    "Vault",
    "to_shares",
    "to_assets",
]
