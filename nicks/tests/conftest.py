from __future__ import annotations

import pytest

from nicks.config import load_config
from nicks.runtime.auth import StaticAuthorizationGate
from nicks.runtime.service import NameService
from nicks.state.events import InMemoryEventSink
from nicks.state.ledger import BurnSink, InMemoryLedger
from nicks.state.registry import NameRegistry

from ._helpers import ALICE, BOB, CAROL, DELEGATE, FEE, START_BALANCE


@pytest.fixture
def cfg():
    return load_config(
        env={},
        overrides={
            "min_length": 3,
            "max_length": 10,
            "reservation_fee": FEE,
            "force_delegates": ["0x" + DELEGATE.hex()],
        },
    )


@pytest.fixture
def ledger() -> InMemoryLedger:
    led = InMemoryLedger()
    for acct in (ALICE, BOB):
        led.endow(acct, START_BALANCE)
    return led


@pytest.fixture
def events() -> InMemoryEventSink:
    return InMemoryEventSink()


@pytest.fixture
def burn() -> BurnSink:
    return BurnSink()


@pytest.fixture
def gate(cfg) -> StaticAuthorizationGate:
    return StaticAuthorizationGate(cfg.force_delegates, aliases={7: CAROL})


@pytest.fixture
def service(cfg, ledger, events, burn, gate) -> NameService:
    return NameService(
        ledger=ledger,
        gate=gate,
        events=events,
        slashed=burn,
        registry=NameRegistry(),
        config=cfg,
    )

