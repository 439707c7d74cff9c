"""
sharevault.runtime.address - address coercion and validation.

Addresses are raw `bytes` everywhere inside the engine. Hex strings (with or
without "0x") are accepted at the edges and normalized. Tooling that wants
readable fixtures derives stable 32-byte addresses from labels.
"""

from __future__ import annotations

import hashlib
from typing import Any, Union

from ..errors import InvalidAddress

ADDRESS_LEN = 32


def _strip_0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def to_bytes(value: Union[bytes, bytearray, memoryview, str]) -> bytes:
    """
    Coerce `value` to address bytes.
    - str is hex (with or without '0x'); odd-length or non-hex input is rejected.
    - bytes-like objects are copied to immutable bytes.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        h = _strip_0x(value.strip())
        if len(h) % 2 != 0:
            raise InvalidAddress("hex address must have even length", address=value)
        try:
            return bytes.fromhex(h)
        except ValueError as e:
            raise InvalidAddress("address is not valid hex", address=value) from e
    raise InvalidAddress(f"cannot convert {type(value).__name__} to an address")


def to_hex(b: Union[bytes, bytearray, memoryview]) -> str:
    """Encode bytes as 0x-prefixed lowercase hex."""
    return "0x" + bytes(b).hex()


def require_address(addr: Any) -> bytes:
    """
    Return `addr` as bytes if it is a non-empty bytes-like value.
    No fixed width is enforced; hosts may use any address length.
    """
    if not isinstance(addr, (bytes, bytearray)) or len(addr) == 0:
        raise InvalidAddress(address=addr if isinstance(addr, (bytes, bytearray)) else repr(addr))
    return bytes(addr)


def derive_address(label: str) -> bytes:
    """Stable 32-byte address for a human label (fixtures, CLI scenarios)."""
    return hashlib.sha3_256(b"sharevault-addr|" + label.encode("utf-8")).digest()[:ADDRESS_LEN]


__all__ = ["ADDRESS_LEN", "to_bytes", "to_hex", "require_address", "derive_address"]
