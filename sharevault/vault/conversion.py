# -*- coding: utf-8 -*-
"""
sharevault.vault.conversion
===========================

Pure asset <-> share conversion over explicit readings of the vault state.

Both directions use the same shape:

    to_shares: assets * total_supply / total_assets
    to_assets: shares * total_assets / total_supply

- If `total_supply == 0` or `total_assets == 0` the input is returned
  unchanged (bootstrap 1:1).
- The product is formed before the division; Python ints are unbounded, so
  there is no intermediate overflow.
- Division truncates toward zero. With `round_up=True`, 1 is added when the
  remainder is strictly positive. Negative inputs therefore never round up.

Rounding policy (always in the vault's favour):

    deposit  -> shares  round down      mint   -> assets round up
    redeem   -> assets  round down      withdraw -> shares round up
"""

from __future__ import annotations

from ..math import mul_div


def to_shares(assets: int, total_supply: int, total_assets: int, round_up: bool = False) -> int:
    if total_supply == 0 or total_assets == 0:
        return assets
    return mul_div(assets, total_supply, total_assets, round_up=round_up)


def to_assets(shares: int, total_supply: int, total_assets: int, round_up: bool = False) -> int:
    if total_supply == 0 or total_assets == 0:
        return shares
    return mul_div(shares, total_assets, total_supply, round_up=round_up)


__all__ = ["to_shares", "to_assets"]
