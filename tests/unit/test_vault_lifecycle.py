# -*- coding: utf-8 -*-
"""
One-time initialization, metadata and the share-token surface of the vault.
"""

from __future__ import annotations

import pytest

from sharevault.config import VaultConfig
from sharevault.errors import (AlreadyInitialized, ErrorCode, InvalidAddress,
                               InvalidMetadata)
from sharevault.runtime import Env, InMemoryAssetToken, derive_address
from sharevault.token import META_ASSET, META_TOTAL
from sharevault.vault import Vault


def test_initialize_stores_metadata(vault: Vault, token: InMemoryAssetToken, env: Env) -> None:
    assert vault.is_initialized()
    assert vault.asset() == token.address
    assert vault.name() == "Vault Shares"
    assert vault.symbol() == "vSHR"
    assert vault.decimals() == 18
    assert vault.total_supply() == 0
    st = env.storage(vault.address)
    assert st.get(META_ASSET) == token.address
    assert st.has(META_TOTAL)


def test_initialize_is_durable(vault: Vault, env: Env) -> None:
    assert env.journal.base.get(vault.address, META_ASSET) is not None


def test_second_initialize_fails(vault: Vault, token: InMemoryAssetToken) -> None:
    with pytest.raises(AlreadyInitialized) as ei:
        vault.initialize(token.address, "Other", "OTH", 6)
    assert ei.value.number == ErrorCode.ALREADY_INITIALIZED
    assert vault.name() == "Vault Shares"
    assert vault.decimals() == 18


def test_second_initialize_legacy_code(config: VaultConfig) -> None:
    env = Env(config=config.with_overrides(legacy_error_codes=True))
    token = InMemoryAssetToken(env)
    vault = Vault(env)
    vault.initialize(token.address, "Vault Shares", "vSHR", 18)
    with pytest.raises(InvalidAddress) as ei:
        vault.initialize(token.address, "Vault Shares", "vSHR", 18)
    assert ei.value.number == 5


def test_metadata_defaults_come_from_config(config: VaultConfig) -> None:
    env = Env(config=config.with_overrides(default_name="Pool", default_symbol="POOL", default_decimals=6))
    vault = Vault(env)
    assert (vault.name(), vault.symbol(), vault.decimals()) == ("Pool", "POOL", 6)


@pytest.mark.parametrize(
    "name,symbol,decimals",
    [
        ("", "vSHR", 18),
        ("x" * 65, "vSHR", 18),
        ("Vault\n", "vSHR", 18),
        ("Vault Shares", "", 18),
        ("Vault Shares", "S" * 33, 18),
        ("Vault Shares", "vSHR", "18"),
        ("Vault Shares", "vSHR", True),
        (b"Vault", "vSHR", 18),
    ],
)
def test_initialize_rejects_bad_metadata(bare_vault: Vault, token: InMemoryAssetToken, name, symbol, decimals) -> None:
    with pytest.raises(InvalidMetadata):
        bare_vault.initialize(token.address, name, symbol, decimals)
    assert not bare_vault.is_initialized()


@pytest.mark.parametrize("decimals,stored", [(-3, 0), (0, 0), (36, 36), (99, 36)])
def test_initialize_clamps_decimals(bare_vault: Vault, token: InMemoryAssetToken, decimals: int, stored: int) -> None:
    bare_vault.initialize(token.address, "Vault Shares", "vSHR", decimals)
    assert bare_vault.decimals() == stored


@pytest.mark.parametrize("asset", [b"", "asset", None])
def test_initialize_rejects_bad_asset(bare_vault: Vault, asset: object) -> None:
    with pytest.raises(InvalidAddress):
        bare_vault.initialize(asset, "Vault Shares", "vSHR", 18)  # type: ignore[arg-type]
    assert not bare_vault.is_initialized()


def test_share_token_surface(vault: Vault, funded, alice: bytes, bob: bytes, carol: bytes) -> None:
    vault.deposit(100, alice, caller=alice)
    assert vault.transfer(alice, bob, 30) is True
    assert vault.approve(bob, carol, 10) is True
    assert vault.transfer_from(carol, bob, carol, 10) is True
    assert (vault.balance_of(alice), vault.balance_of(bob), vault.balance_of(carol)) == (70, 20, 10)
    assert vault.total_supply() == 100


def test_two_vaults_share_one_env(env: Env, token: InMemoryAssetToken, funded, alice: bytes) -> None:
    a = Vault(env, derive_address("vault-a"))
    b = Vault(env, derive_address("vault-b"))
    a.initialize(token.address, "A", "A", 18)
    b.initialize(token.address, "B", "B", 18)
    a.deposit(10, alice, caller=alice)
    assert a.balance_of(alice) == 10
    assert b.balance_of(alice) == 0
    assert b.total_assets() == 0
