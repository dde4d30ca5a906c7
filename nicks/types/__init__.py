"""
nicks.types — plain data types shared by the registry, service and tooling.
"""

from .events import (EVENT_TYPES, NameChanged, NameCleared, NameEvent,
                     NameForced, NameKilled, NameSet, event_from_dict)
from .origin import Origin, Root, Signed, Unsigned, origin_from_str
from .outcome import CallOutcome, CallStatus
from .record import NameRecord

AccountId = bytes
Balance = int

__all__ = [
    "AccountId",
    "Balance",
    "NameRecord",
    "NameEvent",
    "NameSet",
    "NameChanged",
    "NameCleared",
    "NameKilled",
    "NameForced",
    "EVENT_TYPES",
    "event_from_dict",
    "Origin",
    "Signed",
    "Root",
    "Unsigned",
    "origin_from_str",
    "CallOutcome",
    "CallStatus",
]
