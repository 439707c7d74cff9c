"""
sharevault.state.journal - journaled writes with nested checkpoints.

The journal layers a stack of overlays over a base `StorageView`. Writes go to
the top overlay; reads consult overlays from top → base. `commit()` merges the
top overlay into the next layer (or the base when it is the last one).
`revert()` discards the top overlay.

This is the undo log behind `Env.transaction()`: a vault operation that fails
after some ledger writes (for example, the custodian payout after a burn)
reverts its checkpoint and leaves the base untouched.

Intended usage
--------------
    j = Journal(StorageView())
    marker = j.begin()
    j.storage_set(addr, b"k", b"v")
    j.commit()            # or j.revert()

Notes
-----
- No economic rules here; callers validate before writing.
- `None` in an overlay is a deletion marker.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .storage import StorageView


def _b(x: bytes | bytearray | memoryview, *, name: str) -> bytes:
    if not isinstance(x, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes-like")
    return bytes(x)


# =============================================================================
# Overlay model
# =============================================================================


@dataclass
class _Overlay:
    """A single journal layer: address -> key -> value (None = deleted)."""

    storage: Dict[bytes, Dict[bytes, Optional[bytes]]] = field(default_factory=dict)

    def lookup(self, addr: bytes, key: bytes) -> Tuple[bool, Optional[bytes]]:
        """(found, value). `found` is True for staged deletions too."""
        m = self.storage.get(addr)
        if m is None or key not in m:
            return False, None
        return True, m[key]

    def put(self, addr: bytes, key: bytes, value: Optional[bytes]) -> None:
        self.storage.setdefault(addr, {})[key] = value

    def size(self) -> int:
        return sum(len(m) for m in self.storage.values())


# =============================================================================
# Journal
# =============================================================================


class Journal:
    """
    A copy-on-write write journal with nested checkpoints.

    API highlights
    --------------
    - begin() / commit() / revert()
    - commit_to(marker) / revert_to(marker) / flush()
    - storage_get(), storage_has(), storage_set(), storage_delete(), storage_items()
    """

    def __init__(self, base: Optional[StorageView] = None) -> None:
        self._base = base if base is not None else StorageView()
        # The root overlay is always present; depth() >= 1.
        self._layers: List[_Overlay] = [_Overlay()]

    @property
    def base(self) -> StorageView:
        return self._base

    # --------------------------------------------------------------------- #
    # Checkpointing
    # --------------------------------------------------------------------- #

    def depth(self) -> int:
        """Number of overlays (>= 1)."""
        return len(self._layers)

    def begin(self) -> int:
        """Start a new checkpoint. Returns the depth *before* it (a revert marker)."""
        marker = len(self._layers)
        self._layers.append(_Overlay())
        return marker

    def commit(self) -> None:
        """
        Merge the top overlay into its parent, or into the base state when the
        root layer is committed.
        """
        if len(self._layers) == 1:
            self._apply_to_base(self._layers[0])
            self._layers[0] = _Overlay()
            return
        top = self._layers.pop()
        self._merge_into(self._layers[-1], top)

    def revert(self) -> None:
        """Discard the top overlay (or clear the root)."""
        if len(self._layers) > 1:
            self._layers.pop()
        else:
            self._layers[0] = _Overlay()

    def commit_to(self, marker: int) -> None:
        """Commit until depth equals `marker`. `commit_to(1)` leaves only the root."""
        if marker < 1:
            raise ValueError("marker must be >= 1")
        while len(self._layers) > marker:
            self.commit()

    def revert_to(self, marker: int) -> None:
        """Revert until depth equals `marker`."""
        if marker < 1:
            raise ValueError("marker must be >= 1")
        while len(self._layers) > marker:
            self.revert()

    def flush(self) -> None:
        """Commit every open layer down to the base."""
        self.commit_to(1)
        self.commit()

    # --------------------------------------------------------------------- #
    # Storage API
    # --------------------------------------------------------------------- #

    def storage_get(
        self,
        address: bytes | bytearray | memoryview,
        key: bytes | bytearray | memoryview,
        default: Optional[bytes] = None,
    ) -> Optional[bytes]:
        """Read with overlay precedence. Returns `default` if absent."""
        addr = _b(address, name="address")
        key_b = _b(key, name="key")
        for layer in reversed(self._layers):
            found, value = layer.lookup(addr, key_b)
            if found:
                return default if value is None else value
        return self._base.get(addr, key_b, default=default)

    def storage_has(
        self,
        address: bytes | bytearray | memoryview,
        key: bytes | bytearray | memoryview,
    ) -> bool:
        return self.storage_get(address, key) is not None

    def storage_set(
        self,
        address: bytes | bytearray | memoryview,
        key: bytes | bytearray | memoryview,
        value: bytes | bytearray | memoryview,
    ) -> None:
        """Stage a write in the top overlay. Empty value is a deletion."""
        addr = _b(address, name="address")
        key_b = _b(key, name="key")
        val_b = _b(value, name="value")
        self._layers[-1].put(addr, key_b, val_b if val_b else None)

    def storage_delete(
        self,
        address: bytes | bytearray | memoryview,
        key: bytes | bytearray | memoryview,
    ) -> None:
        addr = _b(address, name="address")
        key_b = _b(key, name="key")
        self._layers[-1].put(addr, key_b, None)

    def storage_items(
        self, address: bytes | bytearray | memoryview
    ) -> Iterator[Tuple[bytes, bytes]]:
        """
        Visible (key, value) pairs for an address, sorted by key, with staged
        writes and deletions applied.
        """
        addr = _b(address, name="address")
        visible: Dict[bytes, bytes] = dict(self._base.items(addr))
        for layer in self._layers:
            for k, v in layer.storage.get(addr, {}).items():
                if v is None:
                    visible.pop(k, None)
                else:
                    visible[k] = v
        for k in sorted(visible):
            yield k, visible[k]

    # --------------------------------------------------------------------- #
    # Internal merge/apply
    # --------------------------------------------------------------------- #

    @staticmethod
    def _merge_into(dst: _Overlay, src: _Overlay) -> None:
        for addr, writes in src.storage.items():
            dm = dst.storage.setdefault(addr, {})
            dm.update(writes)

    def _apply_to_base(self, layer: _Overlay) -> None:
        for addr, writes in layer.storage.items():
            for k, v in writes.items():
                if v is None:
                    self._base.delete(addr, k)
                else:
                    self._base.set(addr, k, v)

    # --------------------------------------------------------------------- #
    # Introspection
    # --------------------------------------------------------------------- #

    def pending_storage_keys(self) -> int:
        """Total number of staged (addr, key) entries across layers."""
        return sum(layer.size() for layer in self._layers)


__all__ = ["Journal"]
