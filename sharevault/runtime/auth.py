"""
sharevault.runtime.auth - the authorization capability.

A mutating call proves control of an address through `require_auth(address)`
before it reads any state it acts on. How control is proven (signatures, a
session, a host-side allowlist) is the host's business; the engine only needs
an object with this one method.

Bundled implementations:
- `MockAllAuths` accepts every address and records each check, for local runs
  and tests.
- `SignerSet` accepts only the addresses it was given.
"""

from __future__ import annotations

from typing import Iterable, List, Protocol, Set, runtime_checkable

from ..errors import Unauthorized


@runtime_checkable
class Authorizer(Protocol):
    """Fails the whole call if the executing context cannot prove control of `address`."""

    def require_auth(self, address: bytes) -> None: ...


class MockAllAuths:
    """Authorize everything; keep an ordered record of the checks made."""

    def __init__(self) -> None:
        self.calls: List[bytes] = []

    def require_auth(self, address: bytes) -> None:
        self.calls.append(bytes(address))

    def reset(self) -> None:
        self.calls.clear()


class SignerSet:
    """Authorize only the listed signers."""

    def __init__(self, signers: Iterable[bytes] = ()) -> None:
        self._signers: Set[bytes] = {bytes(s) for s in signers}

    def add(self, address: bytes) -> None:
        self._signers.add(bytes(address))

    def remove(self, address: bytes) -> None:
        self._signers.discard(bytes(address))

    def __contains__(self, address: object) -> bool:
        return isinstance(address, (bytes, bytearray)) and bytes(address) in self._signers

    def require_auth(self, address: bytes) -> None:
        if bytes(address) not in self._signers:
            raise Unauthorized(address=address)


__all__ = ["Authorizer", "MockAllAuths", "SignerSet"]
