"""
sharevault.runtime.env - the execution environment shared by contracts.

An `Env` bundles the collaborators every operation needs and owns the
transaction boundary:

- a `Journal` over the durable `StorageView` (per-contract `ContractStorage`
  handles are cut from it),
- an `Authorizer` (`require_auth`),
- an `EventSink`,
- a registry of contracts living on this env (the vault, its asset token),
  so an address stored in state can be resolved back to a callable object.

Transactions
------------
Each public mutating operation runs inside `env.transaction(label)`. The scope
opens a journal checkpoint and marks the event log. On normal exit the
checkpoint merges into its parent (or into the base store for the outermost
scope). On any exception the checkpoint is reverted, events published inside
it are dropped, and the exception propagates unchanged. Calls are serialized
with a re-entrant lock, so a contract may call into another contract (the
vault into its custodian) inside the same scope. Read-only helpers take the
same lock through `env.read()`, so a query never observes the writes of a
call that is still in flight.

Authorization
-------------
`transaction(label, contract=addr)` pushes `addr` onto the frame stack for
the duration of the scope. A contract address authorizes itself only as the
invoker of a nested call: `require_auth(addr)` passes without consulting the
authorizer when `addr` executes in a frame *below* the current one (the vault
paying out through its custodian). Outside code naming a contract address,
or a contract naming itself at the top frame, goes to the authorizer like any
other address.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from ..config import VaultConfig, load_config
from ..state.journal import Journal
from ..state.storage import StorageView
from .address import require_address, to_hex
from .auth import Authorizer, MockAllAuths
from .events_api import EventSink
from .storage_api import ContractStorage

log = logging.getLogger(__name__)


class Env:
    def __init__(
        self,
        *,
        storage: Optional[StorageView] = None,
        auth: Optional[Authorizer] = None,
        events: Optional[EventSink] = None,
        config: Optional[VaultConfig] = None,
    ) -> None:
        self.config = config or load_config()
        base = storage if storage is not None else StorageView(max_key_len=self.config.max_storage_key_bytes)
        self.journal = Journal(base)
        self.auth: Authorizer = auth if auth is not None else MockAllAuths()
        self.events = events if events is not None else EventSink(max_events_per_tx=self.config.max_events_per_tx)
        self._contracts: Dict[bytes, Any] = {}
        self._lock = threading.RLock()
        # One entry per open transaction scope: the executing contract or None.
        self._frames: List[Optional[bytes]] = []

    # ------------------------------------------------------------------ #
    # Contracts
    # ------------------------------------------------------------------ #

    def register_contract(self, address: bytes, contract: Any) -> bytes:
        addr = require_address(address)
        existing = self._contracts.get(addr)
        if existing is not None and existing is not contract:
            raise ValueError(f"address {to_hex(addr)} already hosts a contract")
        self._contracts[addr] = contract
        return addr

    def contract(self, address: bytes) -> Optional[Any]:
        return self._contracts.get(bytes(address))

    def is_contract(self, address: bytes) -> bool:
        return bytes(address) in self._contracts

    def storage(self, address: bytes) -> ContractStorage:
        return ContractStorage(self.journal, address, max_key_len=self.config.max_storage_key_bytes)

    # ------------------------------------------------------------------ #
    # Authorization
    # ------------------------------------------------------------------ #

    def require_auth(self, address: bytes) -> None:
        addr = require_address(address)
        with self._lock:
            if addr in self._frames[:-1]:
                return
            self.auth.require_auth(addr)

    # ------------------------------------------------------------------ #
    # Events
    # ------------------------------------------------------------------ #

    def publish(self, contract: bytes, name: bytes, topics: Any = (), data: Any = None) -> None:
        self.events.publish(contract, name, topics, data)

    # ------------------------------------------------------------------ #
    # Transactions
    # ------------------------------------------------------------------ #

    @property
    def in_transaction(self) -> bool:
        return bool(self._frames)

    @property
    def current_contract(self) -> Optional[bytes]:
        """Contract executing in the innermost open scope, if any."""
        return self._frames[-1] if self._frames else None

    @contextmanager
    def read(self) -> Iterator["Env"]:
        """Hold the env lock for a consistent multi-key read."""
        with self._lock:
            yield self

    @contextmanager
    def transaction(self, label: str = "call", contract: Optional[bytes] = None) -> Iterator["Env"]:
        with self._lock:
            outermost = not self._frames
            if outermost:
                self.events.start_window()
            marker = self.journal.begin()
            ev_mark = self.events.mark()
            self._frames.append(None if contract is None else bytes(contract))
            try:
                yield self
            except BaseException as e:
                self.journal.revert_to(marker)
                self.events.rollback(ev_mark)
                log.debug("tx %s reverted at depth %d: %s", label, marker, e)
                raise
            else:
                self.journal.commit_to(marker)
                if outermost:
                    self.journal.commit()
                log.debug("tx %s committed at depth %d", label, marker)
            finally:
                self._frames.pop()


__all__ = ["Env"]
