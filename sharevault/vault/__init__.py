"""
sharevault.vault - deposit/mint/withdraw/redeem over the share ledger.

    from sharevault.vault import Vault, to_shares, to_assets
"""

from .conversion import to_assets, to_shares
from .operations import Vault

__all__ = ["Vault", "to_shares", "to_assets"]
