# -*- coding: utf-8 -*-
"""
sharevault.token
================

Shared conventions for the vault's share token. This package **does not**
perform storage or event emission by itself: it only provides prefixes, event
names and validation, shared by `sharevault.token.ledger` (bookkeeping) and
`sharevault.token.fungible` (user-facing transfer/approve).

Conventions
-----------
Storage keys (prefixed bytes):
  - metadata:   META_* constants below
  - balances:   BAL_PREFIX || <addr>
  - allowances: ALLOW_PREFIX || <owner> || b"|" || <spender>
Addresses are raw `bytes`.

Events (names as bytes, see `sharevault.runtime.events_api`):
  - b"transfer" topics (from, to)       data {"amount": int}
  - b"approve"  topics (from, spender)  data {"amount": int}
  - b"mint"     topics (account,)       data {"amount": int}
  - b"burn"     topics (account,)       data {"amount": int}

Numeric domain:
  - Amounts are signed 128-bit ints restricted to [0, I128_MAX]. Use
    `sharevault.math.safe_int` for arithmetic inside token code.
  - An allowance of `UNLIMITED` (== I128_MAX) is never decremented.
"""

from __future__ import annotations

from typing import Any, Final

from ..errors import InvalidMetadata
from ..math import UNLIMITED
from ..math.safe_int import require_amount
from ..runtime.address import require_address
from ..runtime.events_api import (TOPIC_APPROVE, TOPIC_BURN, TOPIC_MINT,
                                  TOPIC_TRANSFER)

# -----------------------------------------------------------------------------
# Public constants: storage prefixes, event names, limits
# -----------------------------------------------------------------------------

BAL_PREFIX: Final[bytes] = b"vault:bal:"
ALLOW_PREFIX: Final[bytes] = b"vault:allow:"

META_ASSET: Final[bytes] = b"vault:meta:asset"
META_NAME: Final[bytes] = b"vault:meta:name"
META_SYMBOL: Final[bytes] = b"vault:meta:symbol"
META_DECIMALS: Final[bytes] = b"vault:meta:decimals"
META_TOTAL: Final[bytes] = b"vault:meta:total"

EVT_TRANSFER: Final[bytes] = TOPIC_TRANSFER
EVT_APPROVE: Final[bytes] = TOPIC_APPROVE
EVT_MINT: Final[bytes] = TOPIC_MINT
EVT_BURN: Final[bytes] = TOPIC_BURN

MAX_NAME_LEN: Final[int] = 64
MAX_SYMBOL_LEN: Final[int] = 32
MAX_DECIMALS: Final[int] = 36


# -----------------------------------------------------------------------------
# Key derivation helpers (no storage I/O here)
# -----------------------------------------------------------------------------


def key_balance(addr: bytes) -> bytes:
    """
    Derive the canonical balance key for an address.
    """
    return BAL_PREFIX + require_address(addr)


def key_allow(owner: bytes, spender: bytes) -> bytes:
    """
    Derive the canonical allowance key for (owner, spender).
    """
    return ALLOW_PREFIX + require_address(owner) + b"|" + require_address(spender)


# -----------------------------------------------------------------------------
# Validation helpers
# -----------------------------------------------------------------------------


def require_name(name: Any) -> str:
    """
    Name must be a str of 1..64 printable characters.
    """
    if not isinstance(name, str) or not (1 <= len(name) <= MAX_NAME_LEN) or not name.isprintable():
        raise InvalidMetadata("name must be 1..64 printable characters", field_name="name", value=name)
    return name


def require_symbol(sym: Any) -> str:
    """
    Symbol must be a str of 1..32 printable characters (typ. uppercase, not enforced).
    """
    if not isinstance(sym, str) or not (1 <= len(sym) <= MAX_SYMBOL_LEN) or not sym.isprintable():
        raise InvalidMetadata("symbol must be 1..32 printable characters", field_name="symbol", value=sym)
    return sym


def clamp_decimals(n: Any) -> int:
    """
    Clamp decimals to a sane range [0, 36]. (36 is common upper bound in practice.)
    """
    if not isinstance(n, int) or isinstance(n, bool):
        raise InvalidMetadata("decimals must be an int", field_name="decimals", value=n)
    if n < 0:
        return 0
    if n > MAX_DECIMALS:
        return MAX_DECIMALS
    return n


def is_unlimited(allowance: int) -> bool:
    return allowance == UNLIMITED


# -----------------------------------------------------------------------------
# Public exports
# -----------------------------------------------------------------------------

__all__ = [
    # prefixes & keys
    "BAL_PREFIX",
    "ALLOW_PREFIX",
    "META_ASSET",
    "META_NAME",
    "META_SYMBOL",
    "META_DECIMALS",
    "META_TOTAL",
    # events
    "EVT_TRANSFER",
    "EVT_APPROVE",
    "EVT_MINT",
    "EVT_BURN",
    # limits
    "MAX_NAME_LEN",
    "MAX_SYMBOL_LEN",
    "MAX_DECIMALS",
    "UNLIMITED",
    # key derivation
    "key_balance",
    "key_allow",
    # validators
    "require_address",
    "require_amount",
    "require_name",
    "require_symbol",
    "clamp_decimals",
    "is_unlimited",
]
