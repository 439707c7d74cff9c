# -*- coding: utf-8 -*-
"""
sharevault.math.safe_int
========================

Checked signed 128-bit helpers for ledger arithmetic.

- **Checked**: raise `ArithmeticOverflow` when a result leaves the I128 range.
- Amount guards raise `InvalidAmount` for negatives and non-ints (bool counts
  as a non-int here; `True` is not an amount).
- Integer-only; no saturating variants, since the ledger must never clamp
  silently.
"""

from __future__ import annotations

from typing import Any

from ..errors import ArithmeticOverflow, InvalidAmount
from . import I128_MAX, I128_MIN, in_i128


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------


def _is_int(x: Any) -> bool:
    return isinstance(x, int) and not isinstance(x, bool)


def require_i128(x: Any) -> int:
    """Return x if it is an int within I128, else raise."""
    if not _is_int(x):
        raise InvalidAmount(amount=x)
    if not in_i128(x):
        raise ArithmeticOverflow(value=x)
    return x


def require_amount(x: Any) -> int:
    """Return x if it is an int in [0, I128_MAX], else raise."""
    if not _is_int(x) or x < 0:
        raise InvalidAmount(amount=x)
    if x > I128_MAX:
        raise ArithmeticOverflow(value=x)
    return x


# ---------------------------------------------------------------------------
# Checked arithmetic
# ---------------------------------------------------------------------------


def i128_add(x: int, y: int) -> int:
    """Checked add: raise on leaving [I128_MIN, I128_MAX]."""
    s = x + y
    if s > I128_MAX or s < I128_MIN:
        raise ArithmeticOverflow("i128 add overflow", value=s)
    return s


def i128_sub(x: int, y: int) -> int:
    """Checked sub: raise on leaving [I128_MIN, I128_MAX]."""
    d = x - y
    if d > I128_MAX or d < I128_MIN:
        raise ArithmeticOverflow("i128 sub overflow", value=d)
    return d


# ---------------------------------------------------------------------------
# Storage codec (16-byte big-endian two's complement)
# ---------------------------------------------------------------------------

I128_BYTES = 16


def encode_i128(x: int) -> bytes:
    require_i128(x)
    return x.to_bytes(I128_BYTES, "big", signed=True)


def decode_i128(raw: bytes) -> int:
    if len(raw) != I128_BYTES:
        raise ArithmeticOverflow(f"i128 value must be {I128_BYTES} bytes, got {len(raw)}")
    return int.from_bytes(raw, "big", signed=True)


__all__ = [
    "require_i128",
    "require_amount",
    "i128_add",
    "i128_sub",
    "I128_BYTES",
    "encode_i128",
    "decode_i128",
]
