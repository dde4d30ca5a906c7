"""
nicks.state.ledger — reservable balances and forfeiture sinks.

This module provides:
- ReservationLedger: the narrow protocol the name service depends on.
- InMemoryLedger: a deterministic free/reserved balance book for devnets,
  the CLI and tests.
- SlashedSink implementations receiving the Imbalance produced by a slash:
  BurnSink (funds leave circulation) and AccountSink (funds credited to a
  treasury account).

Amounts are integers in base units. Every mutating call checks non-negativity
and sufficiency up-front so a failing call leaves the books untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Protocol, Tuple, runtime_checkable

from ..errors import InsufficientFunds, NicksError

# =============================================================================
# Types & protocols
# =============================================================================


@dataclass(frozen=True)
class Imbalance:
    """Funds removed from an account by a slash that must be dealt with elsewhere."""

    amount: int

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("imbalance must be non-negative")


@runtime_checkable
class ReservationLedger(Protocol):
    def reserve(self, account: bytes, amount: int) -> None:
        """Move `amount` from free to reserved; raise InsufficientFunds if it can't."""

    def unreserve(self, account: bytes, amount: int) -> int:
        """Move up to `amount` from reserved to free; return the part that was not reserved."""

    def slash_reserved(self, account: bytes, amount: int) -> Tuple[Imbalance, int]:
        """Remove up to `amount` from reserved; return (imbalance, remainder)."""

    def free_balance(self, account: bytes) -> int:
        ...

    def reserved_balance(self, account: bytes) -> int:
        ...


@runtime_checkable
class SlashedSink(Protocol):
    def on_unbalanced(self, imbalance: Imbalance) -> None:
        ...


# =============================================================================
# Helpers
# =============================================================================


class NegativeAmount(NicksError):
    """Raised when a negative amount is passed to a ledger operation."""

    def __init__(self, amount: int):
        super().__init__(
            message=f"amount must be >= 0, got {amount}",
            code="NEGATIVE_AMOUNT",
            data={"amount": amount},
        )


def _ensure_non_negative(amount: int) -> None:
    if amount < 0:
        raise NegativeAmount(amount)


def _key(account: bytes) -> bytes:
    if not isinstance(account, (bytes, bytearray, memoryview)):
        raise TypeError("account must be bytes-like")
    return bytes(account)


# =============================================================================
# In-memory ledger
# =============================================================================


@dataclass
class Balances:
    free: int = 0
    reserved: int = 0

    @property
    def total(self) -> int:
        return self.free + self.reserved


class InMemoryLedger:
    """
    Free/reserved balance book.

    Total issuance only changes through `endow` (credit from outside) and
    `slash_reserved` (funds handed to a sink as an Imbalance).
    """

    def __init__(self) -> None:
        self._accounts: Dict[bytes, Balances] = {}

    def _get(self, account: bytes) -> Balances:
        return self._accounts.get(_key(account)) or Balances()

    def _put(self, account: bytes, bal: Balances) -> None:
        k = _key(account)
        if bal.free == 0 and bal.reserved == 0:
            self._accounts.pop(k, None)
        else:
            self._accounts[k] = bal

    # ----------------------- funding -------------------------------------- #

    def endow(self, account: bytes, amount: int) -> int:
        """Credit `amount` to the free balance; return the new free balance."""
        _ensure_non_negative(amount)
        bal = self._get(account)
        new = Balances(free=bal.free + amount, reserved=bal.reserved)
        self._put(account, new)
        return new.free

    # ----------------------- ReservationLedger ---------------------------- #

    def reserve(self, account: bytes, amount: int) -> None:
        _ensure_non_negative(amount)
        bal = self._get(account)
        if bal.free < amount:
            raise InsufficientFunds(_key(account), needed=amount, available=bal.free)
        self._put(account, Balances(free=bal.free - amount, reserved=bal.reserved + amount))

    def unreserve(self, account: bytes, amount: int) -> int:
        _ensure_non_negative(amount)
        bal = self._get(account)
        actual = min(amount, bal.reserved)
        self._put(account, Balances(free=bal.free + actual, reserved=bal.reserved - actual))
        return amount - actual

    def slash_reserved(self, account: bytes, amount: int) -> Tuple[Imbalance, int]:
        _ensure_non_negative(amount)
        bal = self._get(account)
        actual = min(amount, bal.reserved)
        self._put(account, Balances(free=bal.free, reserved=bal.reserved - actual))
        return Imbalance(actual), amount - actual

    def free_balance(self, account: bytes) -> int:
        return self._get(account).free

    def reserved_balance(self, account: bytes) -> int:
        return self._get(account).reserved

    def total_issuance(self) -> int:
        return sum(b.total for b in self._accounts.values())

    # ----------------------- (de)serialization ----------------------------- #

    def dump(self) -> Dict[str, Dict[str, int]]:
        return {
            "0x" + k.hex(): {"free": b.free, "reserved": b.reserved}
            for k, b in sorted(self._accounts.items())
        }

    @classmethod
    def load(cls, data: Dict[str, Dict[str, Any]]) -> "InMemoryLedger":
        led = cls()
        for k, v in data.items():
            h = k[2:] if k.startswith(("0x", "0X")) else k
            free = int(v.get("free", 0))
            reserved = int(v.get("reserved", 0))
            _ensure_non_negative(free)
            _ensure_non_negative(reserved)
            led._put(bytes.fromhex(h), Balances(free=free, reserved=reserved))
        return led


# =============================================================================
# Slashed sinks
# =============================================================================


class BurnSink:
    """Drops slashed funds; keeps a running total for accounting/reporting."""

    def __init__(self, burned: int = 0) -> None:
        self.burned = burned

    def on_unbalanced(self, imbalance: Imbalance) -> None:
        self.burned += imbalance.amount


class AccountSink:
    """Credits slashed funds to a treasury account's free balance."""

    def __init__(self, ledger: InMemoryLedger, account: bytes) -> None:
        self.ledger = ledger
        self.account = _key(account)

    def on_unbalanced(self, imbalance: Imbalance) -> None:
        if imbalance.amount:
            self.ledger.endow(self.account, imbalance.amount)


__all__ = [
    "Imbalance",
    "ReservationLedger",
    "SlashedSink",
    "NegativeAmount",
    "Balances",
    "InMemoryLedger",
    "BurnSink",
    "AccountSink",
]
