# -*- coding: utf-8 -*-
"""
Shared pytest fixtures:
- A config built from safe defaults (environment overrides ignored)
- A fresh Env per test (journaled store, MockAllAuths, event sink)
- The in-memory asset token and an initialized vault on that Env
- Stable, label-derived account addresses, some pre-funded with assets
"""
from __future__ import annotations

import typing as t

import pytest

from sharevault.config import VaultConfig
from sharevault.runtime import Env, InMemoryAssetToken, derive_address
from sharevault.vault import Vault

# ---------- CONFIG ----------

DEFAULTS = VaultConfig(
    default_name="Vault",
    default_symbol="VAULT",
    default_decimals=18,
    legacy_error_codes=False,
    max_events_per_tx=1024,
    max_storage_key_bytes=256,
    log_level="WARNING",
)

FUNDING = 10_000


@pytest.fixture
def config() -> VaultConfig:
    return DEFAULTS


# ---------- ENV & CONTRACTS ----------

@pytest.fixture
def env(config: VaultConfig) -> Env:
    return Env(config=config)


@pytest.fixture
def token(env: Env) -> InMemoryAssetToken:
    return InMemoryAssetToken(env)


@pytest.fixture
def bare_vault(env: Env) -> Vault:
    """A vault registered on the env but not yet initialized."""
    return Vault(env)


@pytest.fixture
def vault(bare_vault: Vault, token: InMemoryAssetToken) -> Vault:
    bare_vault.initialize(token.address, "Vault Shares", "vSHR", 18)
    return bare_vault


# ---------- ACCOUNTS ----------

@pytest.fixture
def accounts() -> t.Dict[str, bytes]:
    return {name: derive_address(name) for name in ("alice", "bob", "carol", "dave")}


@pytest.fixture
def alice(accounts: t.Dict[str, bytes]) -> bytes:
    return accounts["alice"]


@pytest.fixture
def bob(accounts: t.Dict[str, bytes]) -> bytes:
    return accounts["bob"]


@pytest.fixture
def carol(accounts: t.Dict[str, bytes]) -> bytes:
    return accounts["carol"]


@pytest.fixture
def funded(token: InMemoryAssetToken, alice: bytes, bob: bytes) -> t.Dict[bytes, int]:
    """Give alice and bob FUNDING asset units each."""
    token.mint(alice, FUNDING)
    token.mint(bob, FUNDING)
    return {alice: FUNDING, bob: FUNDING}
