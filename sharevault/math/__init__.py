# -*- coding: utf-8 -*-
"""
sharevault.math
===============

Deterministic, integer-only math helpers for the share/asset accounting.

Conventions
-----------
- All functions are **pure** and deterministic. No floats anywhere.
- Python ints are unbounded, so `a * b` is always an exact double-width
  intermediate: products are formed first and divided once.
- Rounding is explicit. `mul_div` divides toward zero (fixed-width integer
  semantics) and, with `round_up`, bumps a positive inexact quotient by one.
- The I128 envelope mirrors the storage width of every ledger value.

Examples
--------
    from sharevault.math import mul_div, I128_MAX

    mul_div(7, 3, 2)                  # 10  (21 / 2, truncated)
    mul_div(7, 3, 2, round_up=True)   # 11
"""

from __future__ import annotations

from typing import Final, Tuple

# ---------------------------------------------------------------------------
# Numeric envelopes
# ---------------------------------------------------------------------------

I128_MIN: Final[int] = -(1 << 127)
I128_MAX: Final[int] = (1 << 127) - 1

# Allowance value that is never decremented.
UNLIMITED: Final[int] = I128_MAX


def in_i128(x: int) -> bool:
    """True iff x fits the signed 128-bit range."""
    return I128_MIN <= x <= I128_MAX


# ---------------------------------------------------------------------------
# Rounding primitives
# ---------------------------------------------------------------------------


def require_divisor(d: int) -> None:
    if d == 0:
        raise ZeroDivisionError("mul_div: divisor is zero")


def div_trunc(n: int, d: int) -> Tuple[int, int]:
    """
    Quotient and remainder with truncation toward zero.

    The remainder carries the sign of the dividend, so `q * d + r == n`
    always holds. Python's `divmod` floors instead, which differs for
    negative operands.
    """
    require_divisor(d)
    q = abs(n) // abs(d)
    if (n < 0) != (d < 0):
        q = -q
    return q, n - q * d


def mul_div(a: int, b: int, d: int, *, round_up: bool = False) -> int:
    """
    (a * b) / d truncated toward zero.

    With `round_up`, 1 is added when the remainder is strictly positive, i.e.
    for positive inexact results this is a ceiling.
    """
    q, r = div_trunc(a * b, d)
    if round_up and r > 0:
        return q + 1
    return q


__all__ = [
    "I128_MIN",
    "I128_MAX",
    "UNLIMITED",
    "in_i128",
    "require_divisor",
    "div_trunc",
    "mul_div",
]
