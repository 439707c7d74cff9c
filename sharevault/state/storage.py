"""
sharevault.state.storage - durable per-contract key/value view

A minimal, deterministic key/value store keyed by contract address (`bytes`)
and storage key (`bytes`) with `bytes` values. This is the base layer beneath
the write journal; hosts that persist state elsewhere can pass their own
`backend` mapping with the same {address: {key: value}} shape.

Design goals
------------
- Pure Python, no I/O; deterministic semantics.
- Bytes-in / bytes-out API; all inputs are copied to immutable `bytes`.
- "Empty means absent": storing an empty value deletes the key.
- Bounded key length (config `max_storage_key_bytes`).

Typical usage
-------------
    sv = StorageView()
    sv.set(addr, b"vault:meta:name", b"Vault")
    sv.get(addr, b"vault:meta:name")   # b"Vault"
    sv.has(addr, b"missing")           # False
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, MutableMapping, Optional, Tuple

# ------------------------------- helpers -------------------------------------


def _as_bytes(x: bytes | bytearray | memoryview, *, name: str) -> bytes:
    if not isinstance(x, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes-like")
    return bytes(x)


# ------------------------------- StorageView ---------------------------------


@dataclass
class StorageView:
    """
    A per-contract key/value store.

    Parameters
    ----------
    backend :
        Optional external mapping to store state. If not provided, an internal
        dict is used.
    max_key_len :
        Reject keys longer than this many bytes. Keys must be non-empty.
    """
    backend: Optional[MutableMapping[bytes, Dict[bytes, bytes]]] = None
    max_key_len: int = 256

    _store: MutableMapping[bytes, Dict[bytes, bytes]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._store = self.backend if self.backend is not None else {}

    def _check_key(self, key: bytes) -> None:
        if len(key) == 0:
            raise ValueError("storage key must be non-empty")
        if len(key) > self.max_key_len:
            raise ValueError(f"storage key too long (>{self.max_key_len} bytes)")

    # ------------------------------ core ops --------------------------------

    def get(self, address: bytes | bytearray | memoryview,
            key: bytes | bytearray | memoryview,
            default: Optional[bytes] = None) -> Optional[bytes]:
        addr_b = _as_bytes(address, name="address")
        key_b = _as_bytes(key, name="key")
        self._check_key(key_b)
        return self._store.get(addr_b, {}).get(key_b, default)

    def has(self, address: bytes | bytearray | memoryview,
            key: bytes | bytearray | memoryview) -> bool:
        addr_b = _as_bytes(address, name="address")
        key_b = _as_bytes(key, name="key")
        self._check_key(key_b)
        return key_b in self._store.get(addr_b, {})

    def set(self, address: bytes | bytearray | memoryview,
            key: bytes | bytearray | memoryview,
            value: bytes | bytearray | memoryview) -> None:
        """
        Set value for (address, key). An empty value deletes the key.
        """
        addr_b = _as_bytes(address, name="address")
        key_b = _as_bytes(key, name="key")
        self._check_key(key_b)
        val_b = _as_bytes(value, name="value")

        if len(val_b) == 0:
            self.delete(addr_b, key_b)
            return

        acc = self._store.get(addr_b)
        if acc is None:
            acc = {}
            self._store[addr_b] = acc
        acc[key_b] = val_b

    def delete(self, address: bytes | bytearray | memoryview,
               key: bytes | bytearray | memoryview) -> bool:
        """
        Delete (address, key). Returns True if a key existed and was removed.
        """
        addr_b = _as_bytes(address, name="address")
        key_b = _as_bytes(key, name="key")
        acc = self._store.get(addr_b)
        if acc is None:
            return False
        removed = acc.pop(key_b, None) is not None
        if not acc:
            self._store.pop(addr_b, None)
        return removed

    # ------------------------------ iteration -------------------------------

    def items(self, address: bytes | bytearray | memoryview) -> Iterator[Tuple[bytes, bytes]]:
        """
        Iterate (key, value) pairs for an address in lexicographic key order.
        """
        addr_b = _as_bytes(address, name="address")
        acc = self._store.get(addr_b, {})
        for k in sorted(acc.keys()):
            yield k, acc[k]

    def total_keys(self) -> int:
        """Total number of keys across all addresses."""
        return sum(len(acc) for acc in self._store.values())


__all__ = ["StorageView"]
