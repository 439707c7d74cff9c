# -*- coding: utf-8 -*-
"""
Error taxonomy, env-driven configuration and version resolution.
"""

from __future__ import annotations

import importlib

import pytest

from sharevault import config as config_mod
from sharevault import errors
version_mod = importlib.import_module("sharevault.version")

# -------------------------------- errors ------------------------------------


@pytest.mark.parametrize(
    "exc,code,number",
    [
        (errors.ZeroAssets(), "ZERO_ASSETS", 1),
        (errors.ZeroShares(), "ZERO_SHARES", 2),
        (errors.InsufficientBalance(), "INSUFFICIENT_BALANCE", 3),
        (errors.InsufficientAllowance(), "INSUFFICIENT_ALLOWANCE", 4),
        (errors.InvalidAddress(), "INVALID_ADDRESS", 5),
        (errors.AlreadyInitialized(), "ALREADY_INITIALIZED", 6),
        (errors.NotInitialized(), "NOT_INITIALIZED", 7),
        (errors.InvalidAmount(), "INVALID_AMOUNT", 8),
        (errors.ArithmeticOverflow(), "ARITHMETIC_OVERFLOW", 9),
        (errors.Unauthorized(), "UNAUTHORIZED", 10),
        (errors.InsufficientFunds(), "INSUFFICIENT_FUNDS", 11),
        (errors.InvalidMetadata(), "INVALID_METADATA", 12),
    ],
)
def test_error_codes(exc: errors.VaultError, code: str, number: int) -> None:
    assert isinstance(exc, errors.VaultError)
    assert exc.code == code
    assert exc.number == number
    assert exc.to_dict()["number"] == number


def test_error_data_hex_encodes_addresses() -> None:
    e = errors.InsufficientAllowance(owner=b"\x01\x02", spender=b"\xff", allowance=0, needed=5)
    assert e.data == {"owner": "0x0102", "spender": "0xff", "allowance": 0, "needed": 5}
    d = e.to_dict()
    assert d["code"] == "INSUFFICIENT_ALLOWANCE"
    assert d["message"] == "insufficient allowance"
    assert d["data"]["needed"] == 5


def test_invalid_amount_reprs_non_ints() -> None:
    assert errors.InvalidAmount(amount=1.5).data == {"amount": "1.5"}
    assert errors.InvalidAmount(amount=-3).data == {"amount": -3}


def test_error_to_result() -> None:
    assert errors.error_to_result(errors.Unauthorized())["status"] == "UNAUTHORIZED"
    res = errors.error_to_result(errors.ZeroShares(shares=0))
    assert res["status"] == "REVERT"
    assert res["error"]["data"] == {"shares": 0}


def test_unknown_code_has_no_number() -> None:
    assert errors.VaultError(message="x", code="CUSTOM").number is None
    assert "number" not in errors.VaultError().to_dict()


# -------------------------------- config ------------------------------------


@pytest.fixture
def fresh_config(monkeypatch: pytest.MonkeyPatch):
    config_mod.load_config.cache_clear()
    yield monkeypatch
    config_mod.load_config.cache_clear()


def test_config_defaults(fresh_config: pytest.MonkeyPatch) -> None:
    for name in (
        "SHAREVAULT_DEFAULT_NAME",
        "SHAREVAULT_DEFAULT_SYMBOL",
        "SHAREVAULT_DEFAULT_DECIMALS",
        "SHAREVAULT_LEGACY_ERROR_CODES",
        "SHAREVAULT_MAX_EVENTS_PER_TX",
        "SHAREVAULT_MAX_STORAGE_KEY_BYTES",
        "SHAREVAULT_LOG_LEVEL",
    ):
        fresh_config.delenv(name, raising=False)
    cfg = config_mod.load_config()
    assert cfg.as_dict() == {
        "default_name": "Vault",
        "default_symbol": "VAULT",
        "default_decimals": 18,
        "legacy_error_codes": False,
        "max_events_per_tx": 1024,
        "max_storage_key_bytes": 256,
        "log_level": "WARNING",
    }


def test_config_env_overrides_and_clamps(fresh_config: pytest.MonkeyPatch) -> None:
    fresh_config.setenv("SHAREVAULT_DEFAULT_NAME", "Pool")
    fresh_config.setenv("SHAREVAULT_DEFAULT_DECIMALS", "99")
    fresh_config.setenv("SHAREVAULT_LEGACY_ERROR_CODES", "yes")
    fresh_config.setenv("SHAREVAULT_MAX_EVENTS_PER_TX", "not-a-number")
    fresh_config.setenv("SHAREVAULT_LOG_LEVEL", "debug")
    cfg = config_mod.load_config()
    assert cfg.default_name == "Pool"
    assert cfg.default_decimals == 36
    assert cfg.legacy_error_codes is True
    assert cfg.max_events_per_tx == 1024
    assert cfg.log_level == "DEBUG"


def test_config_is_cached_and_frozen(fresh_config: pytest.MonkeyPatch) -> None:
    cfg = config_mod.load_config()
    assert config_mod.load_config() is cfg
    with pytest.raises(Exception):
        cfg.default_name = "x"  # type: ignore[misc]
    assert cfg.with_overrides(default_name="x").default_name == "x"


# -------------------------------- version -----------------------------------


def test_version_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    version_mod.compute_version.cache_clear()
    monkeypatch.setenv("SHAREVAULT_VERSION", "9.9.9")
    try:
        assert version_mod.compute_version() == "9.9.9"
    finally:
        version_mod.compute_version.cache_clear()


def test_version_is_a_string() -> None:
    assert isinstance(version_mod.__version__, str)
    assert version_mod.__version__
