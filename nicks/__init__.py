"""
nicks — a ledger-backed registry of account names.

An account may hold one name (an opaque byte string). Setting a name bonds a
refundable deposit against the account; clearing it returns the deposit.
A privileged origin may kill a name (the deposit is slashed) or force one
(no deposit is taken).

    from nicks import NameService, InMemoryLedger, StaticAuthorizationGate
    from nicks import InMemoryEventSink, BurnSink, Signed

    ledger = InMemoryLedger()
    ledger.endow(alice, 100)
    svc = NameService(
        ledger=ledger,
        gate=StaticAuthorizationGate(),
        events=InMemoryEventSink(),
        slashed=BurnSink(),
    )
    svc.set_name(Signed(alice), b"alice")
"""

from .config import NicksConfig, get_config, load_config
from .errors import (BadTarget, InsufficientFunds, InvariantViolation,
                     NicksError, NotAuthorized, NotSigned, TooLong, TooShort,
                     Unnamed)
from .runtime import NameService, StaticAuthorizationGate, dispatch
from .state import (AccountSink, BurnSink, InMemoryEventSink, InMemoryLedger,
                    JsonlEventSink, NameRegistry)
from .types import NameRecord, Root, Signed, Unsigned
from .version import __version__

__all__ = [
    "__version__",
    "NicksConfig",
    "get_config",
    "load_config",
    "NicksError",
    "TooShort",
    "TooLong",
    "Unnamed",
    "InsufficientFunds",
    "NotSigned",
    "NotAuthorized",
    "BadTarget",
    "InvariantViolation",
    "NameService",
    "StaticAuthorizationGate",
    "dispatch",
    "NameRegistry",
    "InMemoryLedger",
    "BurnSink",
    "AccountSink",
    "InMemoryEventSink",
    "JsonlEventSink",
    "NameRecord",
    "Signed",
    "Root",
    "Unsigned",
]
