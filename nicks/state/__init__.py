"""
nicks.state — registry storage, reservable balances and event sinks.
"""

from .events import (EventRecord, EventSink, InMemoryEventSink,
                     JsonlEventSink, NullEventSink)
from .ledger import (AccountSink, BurnSink, Imbalance, InMemoryLedger,
                     ReservationLedger, SlashedSink)
from .registry import NameRegistry
from .snapshot import StateSnapshot, load_snapshot, save_snapshot

__all__ = [
    "NameRegistry",
    "ReservationLedger",
    "SlashedSink",
    "Imbalance",
    "InMemoryLedger",
    "BurnSink",
    "AccountSink",
    "EventRecord",
    "EventSink",
    "InMemoryEventSink",
    "JsonlEventSink",
    "NullEventSink",
    "StateSnapshot",
    "load_snapshot",
    "save_snapshot",
]
