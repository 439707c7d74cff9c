"""
sharevault.state - base key/value storage and the write journal layered on it.

    from sharevault.state import StorageView, Journal
"""

from .journal import Journal
from .storage import StorageView

__all__ = ["StorageView", "Journal"]
