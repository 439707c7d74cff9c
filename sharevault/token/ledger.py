# -*- coding: utf-8 -*-
"""
Share ledger
============

Storage-backed bookkeeping for the vault's shares: balances, allowances and
the total supply. The ledger is bound to one `ContractStorage` handle and one
`EventSink`; it holds no state of its own, so any number of `Ledger` objects
over the same handle see the same numbers.

Invariants kept here:
- `total_supply() == sum(balance_of(a))` after every completed call, since
  supply only changes inside `mint`/`burn` together with the matching balance.
- Balances and allowances are never negative.
- An allowance of `UNLIMITED` is never decremented by `spend_allowance`.

The ledger does not check authorization and does not open transactions; the
callers (`FungibleShares`, `Vault`) do both.
"""

from __future__ import annotations

import logging

from ..errors import InsufficientAllowance, InsufficientBalance
from ..math.safe_int import i128_add, i128_sub, require_amount
from ..runtime.events_api import EventSink
from ..runtime.storage_api import ContractStorage
from . import (EVT_BURN, EVT_MINT, META_TOTAL, is_unlimited, key_allow,
               key_balance)

log = logging.getLogger(__name__)


class Ledger:
    def __init__(self, storage: ContractStorage, events: EventSink) -> None:
        self.storage = storage
        self.events = events

    @property
    def address(self) -> bytes:
        return self.storage.address

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def balance_of(self, account: bytes) -> int:
        return self.storage.get_i128(key_balance(account))

    def allowance(self, owner: bytes, spender: bytes) -> int:
        return self.storage.get_i128(key_allow(owner, spender))

    def total_supply(self) -> int:
        return self.storage.get_i128(META_TOTAL)

    # ------------------------------------------------------------------
    # Raw setters
    # ------------------------------------------------------------------

    def set_balance(self, account: bytes, amount: int) -> None:
        self.storage.set_i128(key_balance(account), require_amount(amount))

    def set_allowance(self, owner: bytes, spender: bytes, amount: int) -> None:
        self.storage.set_i128(key_allow(owner, spender), require_amount(amount))

    def set_total_supply(self, amount: int) -> None:
        self.storage.set_i128(META_TOTAL, require_amount(amount))

    # ------------------------------------------------------------------
    # Balance moves
    # ------------------------------------------------------------------

    def credit_balance(self, account: bytes, amount: int) -> None:
        require_amount(amount)
        self.set_balance(account, i128_add(self.balance_of(account), amount))

    def debit_balance(self, account: bytes, amount: int) -> None:
        require_amount(amount)
        have = self.balance_of(account)
        if have < amount:
            raise InsufficientBalance(account=account, balance=have, needed=amount)
        self.set_balance(account, i128_sub(have, amount))

    # ------------------------------------------------------------------
    # Supply control
    # ------------------------------------------------------------------

    def mint(self, account: bytes, amount: int) -> None:
        """Credit `account` and grow the supply by `amount`."""
        self.credit_balance(account, amount)
        self.set_total_supply(i128_add(self.total_supply(), amount))
        self.events.publish(self.address, EVT_MINT, (account,), {"amount": amount})
        log.debug("ledger mint %s amount=%d", account.hex(), amount)

    def burn(self, account: bytes, amount: int) -> None:
        """Debit `account` and shrink the supply by `amount`."""
        self.debit_balance(account, amount)
        self.set_total_supply(i128_sub(self.total_supply(), amount))
        self.events.publish(self.address, EVT_BURN, (account,), {"amount": amount})
        log.debug("ledger burn %s amount=%d", account.hex(), amount)

    # ------------------------------------------------------------------
    # Allowances
    # ------------------------------------------------------------------

    def spend_allowance(self, owner: bytes, spender: bytes, amount: int) -> None:
        """
        Consume `amount` of the (owner, spender) allowance.

        Fails with `InsufficientAllowance` when the allowance is below
        `amount`. The unlimited sentinel is checked but left untouched.
        """
        require_amount(amount)
        current = self.allowance(owner, spender)
        if current < amount:
            raise InsufficientAllowance(owner=owner, spender=spender, allowance=current, needed=amount)
        if is_unlimited(current):
            return
        self.set_allowance(owner, spender, current - amount)


__all__ = ["Ledger"]
