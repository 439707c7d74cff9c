# -*- coding: utf-8 -*-
"""
Vault shares as a fungible token
================================

User-facing transfer and delegation of vault shares. Every mutating call:

1. opens an `Env.transaction` scope,
2. proves control of the acting address via `require_auth` (first action),
3. validates addresses and the amount (negative amounts fail `InvalidAmount`),
4. updates the `Ledger`,
5. publishes one event.

Public interface
----------------
transfer(from_: bytes, to: bytes, amount: int) -> bool
approve(from_: bytes, spender: bytes, amount: int) -> bool
transfer_from(spender: bytes, from_: bytes, to: bytes, amount: int) -> bool

Notes
-----
- A self-transfer succeeds and leaves balances unchanged.
- `approve` overwrites the previous allowance; `UNLIMITED` makes it a
  standing approval that `transfer_from` never decrements.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..math.safe_int import require_amount
from . import EVT_APPROVE, EVT_TRANSFER, require_address
from .ledger import Ledger

if TYPE_CHECKING:  # pragma: no cover
    from ..runtime.env import Env

log = logging.getLogger(__name__)


class FungibleShares:
    def __init__(self, env: "Env", address: bytes, ledger: Ledger) -> None:
        self.env = env
        self.address = bytes(address)
        self.ledger = ledger

    def _move(self, from_: bytes, to: bytes, amount: int) -> None:
        # Debit first so a self-transfer nets out.
        self.ledger.debit_balance(from_, amount)
        self.ledger.credit_balance(to, amount)
        self.env.publish(self.address, EVT_TRANSFER, (from_, to), {"amount": amount})

    def transfer(self, from_: bytes, to: bytes, amount: int) -> bool:
        with self.env.transaction("shares.transfer", contract=self.address):
            self.env.require_auth(from_)
            require_address(to)
            require_amount(amount)
            self._move(from_, to, amount)
        log.debug("shares transfer %s -> %s amount=%d", from_.hex(), to.hex(), amount)
        return True

    def approve(self, from_: bytes, spender: bytes, amount: int) -> bool:
        with self.env.transaction("shares.approve", contract=self.address):
            self.env.require_auth(from_)
            require_address(spender)
            require_amount(amount)
            self.ledger.set_allowance(from_, spender, amount)
            self.env.publish(self.address, EVT_APPROVE, (from_, spender), {"amount": amount})
        return True

    def transfer_from(self, spender: bytes, from_: bytes, to: bytes, amount: int) -> bool:
        """
        `spender` moves `amount` shares from `from_` to `to` against the
        (from_, spender) allowance.
        """
        with self.env.transaction("shares.transfer_from", contract=self.address):
            self.env.require_auth(spender)
            require_address(from_)
            require_address(to)
            require_amount(amount)
            self.ledger.spend_allowance(from_, spender, amount)
            self._move(from_, to, amount)
        return True


__all__ = ["FungibleShares"]
