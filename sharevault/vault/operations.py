# -*- coding: utf-8 -*-
"""
Tokenized vault
===============

ERC-4626 style vault: depositors hand units of an external asset to the vault
and receive proportional shares, and later burn shares to get assets back.
The shares themselves are a fungible token (`transfer`, `approve`,
`transfer_from`) kept in the vault's own storage.

Public interface
----------------
# metadata / share token (pure)
name() -> str
symbol() -> str
decimals() -> int
asset() -> bytes
is_initialized() -> bool
total_supply() -> int
balance_of(account: bytes) -> int
allowance(owner: bytes, spender: bytes) -> int

# accounting queries (pure, never fail on amounts)
total_assets() -> int
convert_to_shares(assets) / convert_to_assets(shares) -> int
max_deposit(receiver) / max_mint(receiver) -> int          # I128_MAX
max_withdraw(owner) / max_redeem(owner) -> int
preview_deposit / preview_mint / preview_withdraw / preview_redeem -> int

# state-changing
initialize(asset, name, symbol, decimals) -> None
deposit(assets, receiver, caller=None) -> shares
mint(shares, receiver, caller=None) -> assets
withdraw(assets, receiver, owner, caller=None) -> shares
redeem(shares, receiver, owner, caller=None) -> assets
transfer / approve / transfer_from -> bool

Ordering
--------
Every entry operation runs in one `Env.transaction` scope and authorizes
`caller` before anything else. Deposit/mint pull assets from `caller` through
the custodian *before* minting shares. Withdraw/redeem spend the delegate's
allowance and burn shares *before* the custodian pays out. Any failure, the
payout included, rolls back every write and event of the call.

Queries hold the env lock (`Env.read`), so they see either the state before an
in-flight call or the state after it, never a half-applied one.

`caller` defaults to the vault's own address. That address is checked with
the authorizer like any other; the vault only authorizes itself as the
invoker of its own custodian payouts.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Optional, TypeVar

from ..config import VaultConfig
from ..errors import (AlreadyInitialized, InvalidAddress, InvalidAmount,
                      NotInitialized, ZeroAssets, ZeroShares)
from ..math import I128_MAX
from ..math.safe_int import require_amount
from ..runtime.address import derive_address, require_address
from ..runtime.custodian import AssetCustodian
from ..runtime.env import Env
from ..runtime.events_api import TOPIC_DEPOSIT, TOPIC_WITHDRAW
from ..token import (META_ASSET, META_DECIMALS, META_NAME, META_SYMBOL,
                     clamp_decimals, require_name, require_symbol)
from ..token.fungible import FungibleShares
from ..token.ledger import Ledger
from .conversion import to_assets, to_shares

log = logging.getLogger(__name__)

_F = TypeVar("_F", bound=Callable[..., Any])


def _query(fn: _F) -> _F:
    """Run a read-only method under the env lock."""

    @functools.wraps(fn)
    def wrapper(self: "Vault", *args: Any, **kwargs: Any) -> Any:
        with self.env.read():
            return fn(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


def _require_int(value: Any) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidAmount(amount=value)
    return value


def _entry_assets(assets: Any) -> int:
    if _require_int(assets) <= 0:
        raise ZeroAssets(assets=assets)
    return require_amount(assets)


def _entry_shares(shares: Any) -> int:
    if _require_int(shares) <= 0:
        raise ZeroShares(shares=shares)
    return require_amount(shares)


class Vault:
    def __init__(self, env: Env, address: Optional[bytes] = None, config: Optional[VaultConfig] = None) -> None:
        self.env = env
        self.config = config or env.config
        self.address = env.register_contract(address or derive_address("vault"), self)
        self.storage = env.storage(self.address)
        self.ledger = Ledger(self.storage, env.events)
        self.shares = FungibleShares(env, self.address, self.ledger)

    def __repr__(self) -> str:  # pragma: no cover (human-only)
        return f"Vault(address=0x{self.address.hex()}, initialized={self.is_initialized()})"

    # ------------------------------------------------------------------
    # Init (one-time)
    # ------------------------------------------------------------------

    def initialize(self, asset: bytes, name: str, symbol: str, decimals: int) -> None:
        with self.env.transaction("vault.initialize", contract=self.address):
            if self.is_initialized():
                if self.config.legacy_error_codes:
                    raise InvalidAddress("vault already initialized", address=self.address)
                raise AlreadyInitialized()
            asset = require_address(asset)
            name = require_name(name)
            symbol = require_symbol(symbol)
            decimals = clamp_decimals(decimals)

            self.storage.set(META_ASSET, asset)
            self.storage.set_str(META_NAME, name)
            self.storage.set_str(META_SYMBOL, symbol)
            self.storage.set_i128(META_DECIMALS, decimals)
            self.ledger.set_total_supply(0)
        log.debug("vault %s initialized asset=%s symbol=%s", self.address.hex(), asset.hex(), symbol)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    @_query
    def is_initialized(self) -> bool:
        return self.storage.has(META_ASSET)

    @_query
    def name(self) -> str:
        return self.storage.get_str(META_NAME, self.config.default_name)

    @_query
    def symbol(self) -> str:
        return self.storage.get_str(META_SYMBOL, self.config.default_symbol)

    @_query
    def decimals(self) -> int:
        return self.storage.get_i128(META_DECIMALS, self.config.default_decimals)

    @_query
    def asset(self) -> bytes:
        raw = self.storage.get(META_ASSET)
        if raw is None:
            raise NotInitialized()
        return raw

    # ------------------------------------------------------------------
    # Share token
    # ------------------------------------------------------------------

    @_query
    def total_supply(self) -> int:
        return self.ledger.total_supply()

    @_query
    def balance_of(self, account: bytes) -> int:
        return self.ledger.balance_of(account)

    @_query
    def allowance(self, owner: bytes, spender: bytes) -> int:
        return self.ledger.allowance(owner, spender)

    def transfer(self, from_: bytes, to: bytes, amount: int) -> bool:
        return self.shares.transfer(from_, to, amount)

    def approve(self, from_: bytes, spender: bytes, amount: int) -> bool:
        return self.shares.approve(from_, spender, amount)

    def transfer_from(self, spender: bytes, from_: bytes, to: bytes, amount: int) -> bool:
        return self.shares.transfer_from(spender, from_, to, amount)

    # ------------------------------------------------------------------
    # Custodian
    # ------------------------------------------------------------------

    def _find_custodian(self) -> Optional[AssetCustodian]:
        raw = self.storage.get(META_ASSET)
        if raw is None:
            return None
        return self.env.contract(raw)

    def _custodian(self) -> AssetCustodian:
        custodian = self._find_custodian()
        if custodian is None:
            if self.is_initialized():
                raise NotInitialized("asset custodian is not registered with this env")
            raise NotInitialized()
        return custodian

    # ------------------------------------------------------------------
    # Accounting queries
    # ------------------------------------------------------------------

    @_query
    def total_assets(self) -> int:
        """Asset units the custodian holds for the vault (0 before initialize)."""
        custodian = self._find_custodian()
        if custodian is None:
            return 0
        return custodian.balance(self.address)

    def _to_shares(self, assets: int, round_up: bool) -> int:
        return to_shares(assets, self.total_supply(), self.total_assets(), round_up)

    def _to_assets(self, shares: int, round_up: bool) -> int:
        return to_assets(shares, self.total_supply(), self.total_assets(), round_up)

    @_query
    def convert_to_shares(self, assets: int) -> int:
        return self._to_shares(assets, False)

    @_query
    def convert_to_assets(self, shares: int) -> int:
        return self._to_assets(shares, False)

    def max_deposit(self, receiver: bytes) -> int:
        return I128_MAX

    def max_mint(self, receiver: bytes) -> int:
        return I128_MAX

    @_query
    def max_withdraw(self, owner: bytes) -> int:
        return self._to_assets(self.balance_of(owner), False)

    @_query
    def max_redeem(self, owner: bytes) -> int:
        return self.balance_of(owner)

    @_query
    def preview_deposit(self, assets: int) -> int:
        return self._to_shares(assets, False)

    @_query
    def preview_mint(self, shares: int) -> int:
        return self._to_assets(shares, True)

    @_query
    def preview_withdraw(self, assets: int) -> int:
        return self._to_shares(assets, True)

    @_query
    def preview_redeem(self, shares: int) -> int:
        return self._to_assets(shares, False)

    # ------------------------------------------------------------------
    # Entry operations
    # ------------------------------------------------------------------

    def deposit(self, assets: int, receiver: bytes, caller: Optional[bytes] = None) -> int:
        """
        Pull `assets` from `caller` and mint the rounded-down shares to `receiver`.

        Omitting `caller` makes the vault pay from its own asset balance. That
        balance already backs the outstanding shares, so a self-funded
        deposit mints new shares with no inflow and dilutes every holder.
        Hosts whose authorizer admits the vault address must pass `caller`
        explicitly.
        """
        caller = self.address if caller is None else caller
        with self.env.transaction("vault.deposit", contract=self.address):
            self.env.require_auth(caller)
            caller = require_address(caller)
            receiver = require_address(receiver)
            assets = _entry_assets(assets)
            custodian = self._custodian()

            shares = self.preview_deposit(assets)
            if shares <= 0:
                raise ZeroShares(shares=shares)
            require_amount(shares)

            custodian.transfer(caller, self.address, assets)
            self.ledger.mint(receiver, shares)
            self.env.publish(self.address, TOPIC_DEPOSIT, (caller, receiver), {"assets": assets, "shares": shares})
        log.debug("vault deposit caller=%s assets=%d shares=%d", caller.hex(), assets, shares)
        return shares

    def mint(self, shares: int, receiver: bytes, caller: Optional[bytes] = None) -> int:
        """
        Mint exactly `shares` to `receiver` for the rounded-up asset cost,
        pulled from `caller`. Omitting `caller` has the same dilution hazard
        as `deposit`.
        """
        caller = self.address if caller is None else caller
        with self.env.transaction("vault.mint", contract=self.address):
            self.env.require_auth(caller)
            caller = require_address(caller)
            receiver = require_address(receiver)
            shares = _entry_shares(shares)
            custodian = self._custodian()

            assets = self.preview_mint(shares)
            if assets <= 0:
                raise ZeroAssets(assets=assets)
            require_amount(assets)

            custodian.transfer(caller, self.address, assets)
            self.ledger.mint(receiver, shares)
            self.env.publish(self.address, TOPIC_DEPOSIT, (caller, receiver), {"assets": assets, "shares": shares})
        log.debug("vault mint caller=%s assets=%d shares=%d", caller.hex(), assets, shares)
        return assets

    def withdraw(self, assets: int, receiver: bytes, owner: bytes, caller: Optional[bytes] = None) -> int:
        caller = self.address if caller is None else caller
        with self.env.transaction("vault.withdraw", contract=self.address):
            self.env.require_auth(caller)
            caller = require_address(caller)
            receiver = require_address(receiver)
            owner = require_address(owner)
            assets = _entry_assets(assets)
            custodian = self._custodian()

            shares = self.preview_withdraw(assets)
            if shares <= 0:
                raise ZeroShares(shares=shares)
            require_amount(shares)

            self._exit(custodian, caller, receiver, owner, assets, shares)
        log.debug("vault withdraw caller=%s owner=%s assets=%d shares=%d", caller.hex(), owner.hex(), assets, shares)
        return shares

    def redeem(self, shares: int, receiver: bytes, owner: bytes, caller: Optional[bytes] = None) -> int:
        caller = self.address if caller is None else caller
        with self.env.transaction("vault.redeem", contract=self.address):
            self.env.require_auth(caller)
            caller = require_address(caller)
            receiver = require_address(receiver)
            owner = require_address(owner)
            shares = _entry_shares(shares)
            custodian = self._custodian()

            assets = self.preview_redeem(shares)
            if assets <= 0:
                raise ZeroAssets(assets=assets)
            require_amount(assets)

            self._exit(custodian, caller, receiver, owner, assets, shares)
        log.debug("vault redeem caller=%s owner=%s assets=%d shares=%d", caller.hex(), owner.hex(), assets, shares)
        return assets

    def _exit(
        self,
        custodian: AssetCustodian,
        caller: bytes,
        receiver: bytes,
        owner: bytes,
        assets: int,
        shares: int,
    ) -> None:
        """Shared tail of withdraw/redeem: allowance, burn, then payout."""
        if caller != owner:
            self.ledger.spend_allowance(owner, caller, shares)
        self.ledger.burn(owner, shares)
        custodian.transfer(self.address, receiver, assets)
        self.env.publish(
            self.address,
            TOPIC_WITHDRAW,
            (caller, receiver, owner),
            {"assets": assets, "shares": shares},
        )


__all__ = ["Vault"]
