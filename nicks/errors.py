"""
nicks.errors — typed exceptions for the name registry.

The service communicates failures via *typed exceptions*. The dispatcher and
the CLI convert them into structured outcome payloads.

Hierarchy
---------
NicksError (base)
 ├─ TooShort            : name shorter than the configured minimum (set_name only)
 ├─ TooLong             : name longer than the configured maximum (any naming path)
 ├─ Unnamed             : clear/kill on an account that holds no name
 ├─ InsufficientFunds   : ledger cannot reserve the fee (raised by the ledger)
 ├─ NotSigned           : origin is not a signed account
 ├─ NotAuthorized       : origin is neither root nor a configured delegate
 ├─ BadTarget           : account descriptor does not resolve
 └─ InvariantViolation  : recorded deposit disagreed with the ledger (internal)

Every class carries a `category` (validation, authorization, resource, state,
internal) so callers can tell user errors from accounting defects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class NicksError(Exception):
    """
    Base registry error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g., 'NAME_TOO_LONG', 'UNNAMED').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "name registry error"
    code: str = "NICKS_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    category = "internal"

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for outcomes/logs/CLI output."""
        out: Dict[str, Any] = {
            "code": self.code,
            "category": self.category,
            "message": self.message,
        }
        if self.data is not None:
            out["data"] = self.data
        return out


# -------- validation --------------------------------------------------------


class TooShort(NicksError):
    """Name is shorter than `min_length`. Only the unprivileged path checks this."""
    category = "validation"

    def __init__(self, length: int, minimum: int):
        super().__init__(
            message="name too short",
            code="NAME_TOO_SHORT",
            data={"length": length, "min_length": minimum},
        )


class TooLong(NicksError):
    """Name exceeds `max_length`."""
    category = "validation"

    def __init__(self, length: int, maximum: int):
        super().__init__(
            message="name too long",
            code="NAME_TOO_LONG",
            data={"length": length, "max_length": maximum},
        )


# -------- state -------------------------------------------------------------


class Unnamed(NicksError):
    """The account has no name record to clear or kill."""
    category = "state"

    def __init__(self, account: Optional[bytes] = None):
        super().__init__(
            message="account is not named",
            code="UNNAMED",
            data={"account": "0x" + account.hex()} if account is not None else None,
        )


# -------- resource ----------------------------------------------------------


class InsufficientFunds(NicksError):
    """
    Free balance cannot cover a reservation.

    Raised by ledger implementations; the service lets it propagate unchanged.
    """
    category = "resource"

    def __init__(self, account: bytes, needed: int, available: int):
        super().__init__(
            message="insufficient free balance",
            code="INSUFFICIENT_FUNDS",
            data={
                "account": "0x" + account.hex(),
                "needed": needed,
                "available": available,
            },
        )


# -------- authorization -----------------------------------------------------


class NotSigned(NicksError):
    category = "authorization"

    def __init__(self, message: str = "origin must be a signed account"):
        super().__init__(message=message, code="NOT_SIGNED")


class NotAuthorized(NicksError):
    category = "authorization"

    def __init__(self, message: str = "origin is not authorized for privileged calls"):
        super().__init__(message=message, code="NOT_AUTHORIZED")


class BadTarget(NicksError):
    """Account descriptor could not be resolved to a known identity."""
    category = "authorization"

    def __init__(self, descriptor: Any):
        super().__init__(
            message="target does not resolve to an account",
            code="BAD_TARGET",
            data={"descriptor": _describe(descriptor)},
        )


# -------- internal ----------------------------------------------------------


class InvariantViolation(NicksError):
    """
    The deposit-equals-reservation invariant was found broken.

    Not a caller error. Only raised when `strict_invariants` is enabled.
    """
    category = "internal"

    def __init__(self, message: str, *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="INVARIANT_VIOLATION", data=data)


# -------- helpers -----------------------------------------------------------


def _describe(x: Any) -> Any:
    if isinstance(x, (bytes, bytearray)):
        return "0x" + bytes(x).hex()
    if x is None or isinstance(x, (int, str)):
        return x
    return repr(x)


def error_to_outcome_fields(err: NicksError) -> Dict[str, Any]:
    """
    Map a NicksError to canonical outcome fields.

    Returns:
        {"status": "failed", "error": {code, category, message, data?}}
    """
    return {"status": "failed", "error": err.to_dict()}


__all__ = [
    "NicksError",
    "TooShort",
    "TooLong",
    "Unnamed",
    "InsufficientFunds",
    "NotSigned",
    "NotAuthorized",
    "BadTarget",
    "InvariantViolation",
    "error_to_outcome_fields",
]
