"""
sharevault.errors - typed failures of vault and share-token operations.

Every public operation reports failure by raising one of the exceptions below.
Errors are terminal for the invoking call: the enclosing transaction scope
(`Env.transaction`) has already rolled back storage writes and events by the
time the exception reaches the caller. Nothing in this package retries.

Hierarchy
---------
VaultError (base)
 ├─ ZeroAssets            : input or computed asset amount is <= 0
 ├─ ZeroShares            : input or computed share amount is <= 0
 ├─ InsufficientBalance   : a share debit would go negative
 ├─ InsufficientAllowance : delegated spend exceeds the granted allowance
 ├─ InvalidAddress        : malformed address (and, in legacy mode, double init)
 ├─ AlreadyInitialized    : initialize() called twice
 ├─ NotInitialized        : vault entry point used before initialize()
 ├─ InvalidAmount         : negative or non-integer amount
 ├─ ArithmeticOverflow    : a stored value would leave the i128 range
 ├─ Unauthorized          : require_auth() rejected an address
 ├─ InsufficientFunds     : the asset custodian could not cover a transfer
 └─ InvalidMetadata       : name, symbol or decimals rejected at initialize()

Numeric codes (`ErrorCode`) 1..5 are stable across releases so hosts can
match on them.

These classes intentionally avoid importing other sharevault modules so they
can be used from the lowest layers (math, state) without cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Optional


class ErrorCode(IntEnum):
    ZERO_ASSETS = 1
    ZERO_SHARES = 2
    INSUFFICIENT_BALANCE = 3
    INSUFFICIENT_ALLOWANCE = 4
    INVALID_ADDRESS = 5
    ALREADY_INITIALIZED = 6
    NOT_INITIALIZED = 7
    INVALID_AMOUNT = 8
    ARITHMETIC_OVERFLOW = 9
    UNAUTHORIZED = 10
    INSUFFICIENT_FUNDS = 11
    INVALID_METADATA = 12


def _hex(addr: Any) -> Any:
    if isinstance(addr, (bytes, bytearray)):
        return "0x" + bytes(addr).hex()
    return addr


def _merge(data: Optional[Dict[str, Any]], **fields: Any) -> Optional[Dict[str, Any]]:
    d: Dict[str, Any] = dict(data or {})
    for k, v in fields.items():
        if v is not None:
            d.setdefault(k, _hex(v))
    return d or None


@dataclass
class VaultError(Exception):
    """
    Base vault error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (an `ErrorCode` member name).
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "vault error"
    code: str = "VAULT_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    @property
    def number(self) -> Optional[int]:
        """Numeric error code, or None for codes outside `ErrorCode`."""
        member = ErrorCode.__members__.get(self.code)
        return int(member) if member is not None else None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for logs/CLI output."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.number is not None:
            out["number"] = self.number
        if self.data is not None:
            out["data"] = self.data
        return out


class ZeroAssets(VaultError):
    def __init__(self, message: str = "asset amount must be positive", *,
                 assets: Optional[int] = None, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="ZERO_ASSETS", data=_merge(data, assets=assets))


class ZeroShares(VaultError):
    def __init__(self, message: str = "share amount must be positive", *,
                 shares: Optional[int] = None, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="ZERO_SHARES", data=_merge(data, shares=shares))


class InsufficientBalance(VaultError):
    def __init__(
        self,
        message: str = "insufficient share balance",
        *,
        account: Optional[bytes] = None,
        balance: Optional[int] = None,
        needed: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code="INSUFFICIENT_BALANCE",
            data=_merge(data, account=account, balance=balance, needed=needed),
        )


class InsufficientAllowance(VaultError):
    def __init__(
        self,
        message: str = "insufficient allowance",
        *,
        owner: Optional[bytes] = None,
        spender: Optional[bytes] = None,
        allowance: Optional[int] = None,
        needed: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code="INSUFFICIENT_ALLOWANCE",
            data=_merge(data, owner=owner, spender=spender, allowance=allowance, needed=needed),
        )


class InvalidAddress(VaultError):
    def __init__(self, message: str = "invalid address", *,
                 address: Any = None, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="INVALID_ADDRESS", data=_merge(data, address=address))


class AlreadyInitialized(VaultError):
    def __init__(self, message: str = "vault already initialized", *,
                 data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="ALREADY_INITIALIZED", data=data)


class NotInitialized(VaultError):
    def __init__(self, message: str = "vault not initialized", *,
                 data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="NOT_INITIALIZED", data=data)


class InvalidAmount(VaultError):
    def __init__(self, message: str = "amount must be a non-negative integer", *,
                 amount: Any = None, data: Optional[Dict[str, Any]] = None):
        if amount is not None and not isinstance(amount, int):
            amount = repr(amount)
        super().__init__(message=message, code="INVALID_AMOUNT", data=_merge(data, amount=amount))


class ArithmeticOverflow(VaultError):
    def __init__(self, message: str = "value outside i128 range", *,
                 value: Optional[int] = None, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="ARITHMETIC_OVERFLOW", data=_merge(data, value=value))


class Unauthorized(VaultError):
    def __init__(self, message: str = "authorization required", *,
                 address: Optional[bytes] = None, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="UNAUTHORIZED", data=_merge(data, address=address))


class InsufficientFunds(VaultError):
    """Raised by the asset custodian; propagates through vault operations unchanged."""

    def __init__(
        self,
        message: str = "insufficient asset funds",
        *,
        account: Optional[bytes] = None,
        balance: Optional[int] = None,
        needed: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code="INSUFFICIENT_FUNDS",
            data=_merge(data, account=account, balance=balance, needed=needed),
        )


class InvalidMetadata(VaultError):
    def __init__(self, message: str = "invalid token metadata", *,
                 field_name: Optional[str] = None, value: Any = None,
                 data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="INVALID_METADATA",
                         data=_merge(data, field=field_name, value=value if value is None else repr(value)))


# -------- helper utilities ---------------------------------------------------


def error_to_result(err: VaultError) -> Dict[str, Any]:
    """
    Map a VaultError to a result envelope for tooling:

        {"status": "REVERT" | "UNAUTHORIZED", "error": {code, message, number?, data?}}
    """
    status = "UNAUTHORIZED" if isinstance(err, Unauthorized) else "REVERT"
    return {"status": status, "error": err.to_dict()}


__all__ = [
    "ErrorCode",
    "VaultError",
    "ZeroAssets",
    "ZeroShares",
    "InsufficientBalance",
    "InsufficientAllowance",
    "InvalidAddress",
    "AlreadyInitialized",
    "NotInitialized",
    "InvalidAmount",
    "ArithmeticOverflow",
    "Unauthorized",
    "InsufficientFunds",
    "InvalidMetadata",
    "error_to_result",
]
