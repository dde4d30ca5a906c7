from __future__ import annotations

import pytest

from nicks.errors import BadTarget, NotAuthorized, TooLong
from nicks.types.events import NameChanged, NameForced
from nicks.types.origin import Root, Signed
from nicks.types.record import NameRecord

from ._helpers import ALICE, BOB, CAROL, DELEGATE, FEE, START_BALANCE, state_of


def test_force_on_unnamed_creates_zero_deposit_record(service, ledger, events) -> None:
    rec = service.force_name(Root(), CAROL, b"carol")

    assert rec == NameRecord(b"carol", 0)
    assert service.query(CAROL) == NameRecord(b"carol", 0)
    assert ledger.reserved_balance(CAROL) == 0
    assert ledger.free_balance(CAROL) == 0
    assert events.events == [NameForced(target=CAROL)]


def test_force_on_named_keeps_deposit(service, ledger, events) -> None:
    service.set_name(Signed(ALICE), b"alice")
    rec = service.force_name(Root(), ALICE, b"renamed")

    assert rec == NameRecord(b"renamed", FEE)
    assert ledger.reserved_balance(ALICE) == FEE
    assert ledger.free_balance(ALICE) == START_BALANCE - FEE
    assert events.events[-1] == NameForced(target=ALICE)
    assert not any(isinstance(e, NameChanged) for e in events.events)


def test_force_skips_minimum_length(service) -> None:
    service.force_name(Root(), BOB, b"")
    assert service.query(BOB) == NameRecord(b"", 0)


def test_force_enforces_maximum_length(service) -> None:
    before = state_of(service)
    with pytest.raises(TooLong):
        service.force_name(Root(), BOB, b"x" * 11)
    assert state_of(service) == before


def test_force_by_delegate_and_by_stranger(service) -> None:
    service.force_name(Signed(DELEGATE), BOB, b"bob")
    with pytest.raises(NotAuthorized):
        service.force_name(Signed(ALICE), BOB, b"mallory")
    assert service.query(BOB).name == b"bob"


def test_force_bad_target(service) -> None:
    with pytest.raises(BadTarget):
        service.force_name(Root(), "0x1234", b"abc")


def test_forced_record_clears_with_zero_refund(service, ledger) -> None:
    service.force_name(Root(), BOB, b"bob")
    assert service.clear_name(Signed(BOB)) == 0
    assert ledger.free_balance(BOB) == START_BALANCE


def test_set_after_force_is_a_rename(service, ledger, events) -> None:
    service.force_name(Root(), BOB, b"bob")
    rec = service.set_name(Signed(BOB), b"bobby")
    # still the forced zero deposit: no reservation on the rename path
    assert rec == NameRecord(b"bobby", 0)
    assert ledger.reserved_balance(BOB) == 0
    assert events.events[-1] == NameChanged(who=BOB)


def test_audit_reports_drift_after_reserve_is_moved(service, ledger) -> None:
    service.set_name(Signed(ALICE), b"alice")
    assert service.audit() == []

    # reservation released behind the registry's back
    ledger.unreserve(ALICE, FEE)
    service.force_name(Root(), ALICE, b"forced")

    drifts = service.audit()
    assert len(drifts) == 1
    assert drifts[0].account == ALICE
    assert drifts[0].recorded == FEE
    assert drifts[0].reserved == 0
