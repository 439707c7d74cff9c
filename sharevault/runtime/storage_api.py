"""
sharevault.runtime.storage_api - the contract-facing durable key/value store.

`ContractStorage` is the store handle threaded through the ledger and the
asset token: a view of the environment's journal bound to one contract
address. Nothing here is global; two environments never share state.

Public API
----------
- has(key: bytes) -> bool
- get(key: bytes) -> Optional[bytes]
- set(key: bytes, value: bytes) -> None
- delete(key: bytes) -> None
- get_i128(key, default=0) -> int           # 16-byte big-endian, signed
- set_i128(key, value) -> None
- get_str(key, default) -> str              # UTF-8
- set_str(key, value) -> None

Writes land in the journal's top overlay and only reach the base store when
the enclosing transaction commits.
"""

from __future__ import annotations

from typing import Optional

from ..math.safe_int import decode_i128, encode_i128
from ..state.journal import Journal


class ContractStorage:
    """Storage handle for one contract address."""

    def __init__(self, journal: Journal, address: bytes, *, max_key_len: int = 256) -> None:
        self._journal = journal
        self.address = bytes(address)
        self._max_key_len = max_key_len

    def __repr__(self) -> str:  # pragma: no cover (human-only)
        return f"ContractStorage(address=0x{self.address.hex()})"

    # --------------------------- validation --------------------------- #

    def _check_key(self, key: bytes) -> bytes:
        if not isinstance(key, (bytes, bytearray)):
            raise TypeError("storage key must be bytes")
        if len(key) == 0:
            raise ValueError("storage key must be non-empty")
        if len(key) > self._max_key_len:
            raise ValueError(f"storage key too long (>{self._max_key_len} bytes)")
        return bytes(key)

    # --------------------------- raw bytes ---------------------------- #

    def has(self, key: bytes) -> bool:
        return self._journal.storage_has(self.address, self._check_key(key))

    def get(self, key: bytes) -> Optional[bytes]:
        """Return the value for `key`, or None if not set."""
        return self._journal.storage_get(self.address, self._check_key(key))

    def set(self, key: bytes, value: bytes) -> None:
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError("storage value must be bytes")
        self._journal.storage_set(self.address, self._check_key(key), bytes(value))

    def delete(self, key: bytes) -> None:
        self._journal.storage_delete(self.address, self._check_key(key))

    # ------------------------- typed helpers -------------------------- #

    def get_i128(self, key: bytes, default: int = 0) -> int:
        raw = self.get(key)
        if raw is None:
            return default
        return decode_i128(raw)

    def set_i128(self, key: bytes, value: int) -> None:
        self.set(key, encode_i128(value))

    def get_str(self, key: bytes, default: str = "") -> str:
        raw = self.get(key)
        if raw is None:
            return default
        return raw.decode("utf-8")

    def set_str(self, key: bytes, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError("value must be str")
        self.set(key, value.encode("utf-8"))


__all__ = ["ContractStorage"]
