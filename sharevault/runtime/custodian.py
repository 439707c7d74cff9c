"""
sharevault.runtime.custodian - the underlying asset the vault holds.

The vault never keeps asset balances itself; it asks an *asset custodian* to
move units and to report how many units an address holds. Anything with the
`AssetCustodian` shape works.

`InMemoryAssetToken` is a minimal, deterministic asset ledger for local runs
and tests. It lives on the same `Env` as the vault, so its writes share the
vault's journal and roll back with the vault's transaction:

- balance(addr) -> int
- total_supply() -> int
- transfer(from_, to, amount)   # requires auth of `from_`
- mint(to, amount)              # test hook, no auth

Units held at the vault's address move only while the vault itself invokes
`transfer` (see `Env.require_auth`).

Storage keys: b"asset:bal:" + address, b"asset:total".
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, runtime_checkable

from ..errors import InsufficientFunds
from ..math.safe_int import i128_add, require_amount
from .address import derive_address, require_address
from .env import Env
from .events_api import TOPIC_MINT, TOPIC_TRANSFER

log = logging.getLogger(__name__)

KEY_ASSET_BAL_PREFIX = b"asset:bal:"
KEY_ASSET_TOTAL = b"asset:total"


@runtime_checkable
class AssetCustodian(Protocol):
    address: bytes

    def balance(self, address: bytes) -> int: ...

    def transfer(self, from_: bytes, to: bytes, amount: int) -> None: ...


def _bal_key(address: bytes) -> bytes:
    return KEY_ASSET_BAL_PREFIX + address


class InMemoryAssetToken:
    """Asset token contract hosted on an `Env`."""

    def __init__(self, env: Env, address: Optional[bytes] = None) -> None:
        self.env = env
        self.address = env.register_contract(address or derive_address("asset-token"), self)
        self._storage = env.storage(self.address)

    def balance(self, address: bytes) -> int:
        key = _bal_key(require_address(address))
        with self.env.read():
            return self._storage.get_i128(key)

    def total_supply(self) -> int:
        with self.env.read():
            return self._storage.get_i128(KEY_ASSET_TOTAL)

    def mint(self, to: bytes, amount: int) -> None:
        to = require_address(to)
        require_amount(amount)
        with self.env.transaction("asset.mint", contract=self.address):
            self._storage.set_i128(_bal_key(to), i128_add(self.balance(to), amount))
            self._storage.set_i128(KEY_ASSET_TOTAL, i128_add(self.total_supply(), amount))
            self.env.publish(self.address, TOPIC_MINT, (to,), {"amount": amount})

    def transfer(self, from_: bytes, to: bytes, amount: int) -> None:
        with self.env.transaction("asset.transfer", contract=self.address):
            self.env.require_auth(from_)
            from_ = require_address(from_)
            to = require_address(to)
            require_amount(amount)
            have = self.balance(from_)
            if have < amount:
                raise InsufficientFunds(account=from_, balance=have, needed=amount)
            self._storage.set_i128(_bal_key(from_), have - amount)
            self._storage.set_i128(_bal_key(to), i128_add(self.balance(to), amount))
            self.env.publish(self.address, TOPIC_TRANSFER, (from_, to), {"amount": amount})
            log.debug("asset transfer %s -> %s amount=%d", from_.hex(), to.hex(), amount)


__all__ = ["AssetCustodian", "InMemoryAssetToken", "KEY_ASSET_BAL_PREFIX", "KEY_ASSET_TOTAL"]
