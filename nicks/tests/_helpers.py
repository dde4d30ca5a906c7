from __future__ import annotations

ALICE = b"\xaa" * 32
BOB = b"\xbb" * 32
CAROL = b"\xcc" * 32
DELEGATE = b"\xdd" * 32
TREASURY = b"\xee" * 32

FEE = 5
START_BALANCE = 100


def hx(b: bytes) -> str:
    return "0x" + b.hex()


def state_of(service):
    """Comparable view of registry + ledger + event log."""
    return (
        service.registry.dump(),
        service.ledger.dump(),
        [e.to_dict() for e in service.events.events],
    )
