"""
nicks.runtime.service — the name registry state machine.

Per-account states are `Unnamed` and `Named(deposit)`:

  set_name   (signed)      Unnamed  -> Named(fee)   reserve fee           NameSet
                           Named(d) -> Named(d)     rename only           NameChanged
  clear_name (signed)      Named(d) -> Unnamed      unreserve d           NameCleared
  kill_name  (privileged)  Named(d) -> Unnamed      slash d to the sink   NameKilled
  force_name (privileged)  Unnamed  -> Named(0)     nothing reserved      NameForced
                           Named(d) -> Named(d)     rename only           NameForced

The unprivileged path enforces both length bounds and always funds its own
deposit. The privileged path enforces only the upper bound and never touches
the deposit, inheriting whatever was recorded before (possibly zero).

Every check runs before the first mutation, so a failing call leaves registry,
ledger and event sink exactly as they were. Calls are serialized by the
surrounding engine; the service holds no locks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from .. import metrics
from ..config import NicksConfig, get_config
from ..errors import InvariantViolation, TooLong, TooShort, Unnamed
from ..state.events import EventSink
from ..state.ledger import ReservationLedger, SlashedSink
from ..state.registry import NameRegistry
from ..types.events import (NameChanged, NameCleared, NameEvent, NameForced,
                            NameKilled, NameSet)
from ..types.origin import Origin
from ..types.record import NameRecord
from .auth import AuthorizationGate

log = logging.getLogger(__name__)


def _hex(b: bytes) -> str:
    return "0x" + b.hex()


def _as_name(name: Any) -> bytes:
    if not isinstance(name, (bytes, bytearray, memoryview)):
        raise TypeError("name must be bytes-like")
    return bytes(name)


@dataclass(frozen=True)
class DepositDrift:
    """A record whose deposit is not fully backed by the ledger's reserve."""

    account: bytes
    recorded: int
    reserved: int

    def to_dict(self) -> dict:
        return {"account": _hex(self.account), "recorded": self.recorded, "reserved": self.reserved}


class NameService:
    def __init__(
        self,
        *,
        ledger: ReservationLedger,
        gate: AuthorizationGate,
        events: EventSink,
        slashed: SlashedSink,
        registry: Optional[NameRegistry] = None,
        config: Optional[NicksConfig] = None,
    ) -> None:
        self.ledger = ledger
        self.gate = gate
        self.events = events
        self.slashed = slashed
        self.registry = registry if registry is not None else NameRegistry()
        self.config = config or get_config()
        self.last_event: Optional[NameEvent] = None

    # ------------------------------------------------------------------ #
    # Calls
    # ------------------------------------------------------------------ #

    def set_name(self, origin: Origin, name: bytes) -> NameRecord:
        """
        Set the caller's name. Bounded by `min_length` and `max_length` bytes.
        Reserves `reservation_fee` if the caller was unnamed.
        """
        who = self.gate.resolve_signed(origin)
        name = _as_name(name)
        self._check_max(name)
        if len(name) < self.config.min_length:
            raise TooShort(len(name), self.config.min_length)

        current = self.registry.get(who)
        if current is not None:
            record = current.with_name(name)
            event: NameEvent = NameChanged(who=who)
        else:
            fee = self.config.reservation_fee
            self.ledger.reserve(who, fee)
            record = NameRecord(name=name, deposit=fee)
            event = NameSet(who=who)
            metrics.observe_deposit("reserved", fee)

        self.registry.insert(who, record)
        self._emit(event)
        log.info(
            "name %s", "changed" if current is not None else "set",
            extra={"who": _hex(who), "deposit": record.deposit},
        )
        return record

    def clear_name(self, origin: Origin) -> int:
        """Clear the caller's name and return the refunded deposit."""
        who = self.gate.resolve_signed(origin)
        record = self.registry.get(who)
        if record is None:
            raise Unnamed(who)

        self.registry.remove(who)
        deposit = record.deposit
        remainder = self.ledger.unreserve(who, deposit)
        violation = None
        if remainder:
            violation = self._alarm(
                "unreserve left a remainder", who, recorded=deposit, remainder=remainder
            )
        metrics.observe_deposit("refunded", deposit - remainder)

        self._emit(NameCleared(who=who, deposit=deposit))
        log.info("name cleared", extra={"who": _hex(who), "deposit": deposit})
        if violation is not None and self.config.strict_invariants:
            raise violation
        return deposit

    def kill_name(self, origin: Origin, target: Any) -> int:
        """
        Remove `target`'s name and slash its deposit to the configured sink.
        Returns the recorded deposit.
        """
        self.gate.resolve_privileged(origin)
        who = self.gate.resolve_target(target)
        record = self.registry.get(who)
        if record is None:
            raise Unnamed(who)

        self.registry.remove(who)
        deposit = record.deposit
        imbalance, remainder = self.ledger.slash_reserved(who, deposit)
        self.slashed.on_unbalanced(imbalance)
        if remainder:
            log.debug(
                "slash remainder discarded",
                extra={"target": _hex(who), "remainder": remainder},
            )
        metrics.observe_deposit("slashed", imbalance.amount)

        self._emit(NameKilled(target=who, deposit=deposit))
        log.info("name killed", extra={"target": _hex(who), "deposit": deposit})
        return deposit

    def force_name(self, origin: Origin, target: Any, name: bytes) -> NameRecord:
        """
        Set `target`'s name without a deposit. Only `max_length` is enforced.
        An existing deposit is kept as recorded; the ledger is not consulted.
        """
        self.gate.resolve_privileged(origin)
        name = _as_name(name)
        self._check_max(name)
        who = self.gate.resolve_target(target)

        current = self.registry.get(who)
        deposit = current.deposit if current is not None else 0
        record = NameRecord(name=name, deposit=deposit)
        self.registry.insert(who, record)
        self._emit(NameForced(target=who))
        log.info("name forced", extra={"target": _hex(who), "deposit": deposit})
        return record

    # ------------------------------------------------------------------ #
    # Read-only
    # ------------------------------------------------------------------ #

    def query(self, account: bytes) -> Optional[NameRecord]:
        return self.registry.get(account)

    def balance_of(self, account: bytes) -> int:
        """Free balance of `account` as seen by the ledger."""
        return self.ledger.free_balance(account)

    def audit(self) -> List[DepositDrift]:
        """
        Report records whose deposit exceeds the amount reserved on the ledger.

        Reserves held for other reasons may legitimately exceed a deposit, so
        only shortfalls are reported.
        """
        drifts: List[DepositDrift] = []
        for account, record in self.registry.items():
            reserved = self.ledger.reserved_balance(account)
            if reserved < record.deposit:
                drifts.append(DepositDrift(account, record.deposit, reserved))
        return drifts

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _check_max(self, name: bytes) -> None:
        if len(name) > self.config.max_length:
            raise TooLong(len(name), self.config.max_length)

    def _emit(self, event: NameEvent) -> None:
        self.events.deposit(event)
        self.last_event = event
        metrics.set_names_registered(len(self.registry))

    def _alarm(self, message: str, who: bytes, **data: int) -> InvariantViolation:
        metrics.observe_invariant_violation()
        log.error(message, extra={"who": _hex(who), **data})
        return InvariantViolation(message, data={"account": _hex(who), **data})


__all__ = ["NameService", "DepositDrift"]
