from __future__ import annotations

import pytest

from nicks.errors import InsufficientFunds, NotSigned, TooLong, TooShort
from nicks.types.events import NameChanged, NameSet
from nicks.types.origin import Root, Signed, Unsigned
from nicks.types.record import NameRecord

from ._helpers import ALICE, BOB, CAROL, FEE, START_BALANCE, state_of


def test_first_set_reserves_fee_and_emits_name_set(service, ledger, events) -> None:
    rec = service.set_name(Signed(ALICE), b"abc")

    assert rec == NameRecord(b"abc", FEE)
    assert service.query(ALICE) == NameRecord(b"abc", FEE)
    assert ledger.free_balance(ALICE) == START_BALANCE - FEE
    assert ledger.reserved_balance(ALICE) == FEE
    assert events.events == [NameSet(who=ALICE)]


def test_rename_keeps_deposit_and_emits_name_changed(service, ledger, events) -> None:
    service.set_name(Signed(ALICE), b"abc")
    rec = service.set_name(Signed(ALICE), b"xyz")

    assert rec == NameRecord(b"xyz", FEE)
    # no additional reservation on rename
    assert ledger.reserved_balance(ALICE) == FEE
    assert ledger.free_balance(ALICE) == START_BALANCE - FEE
    assert events.events == [NameSet(who=ALICE), NameChanged(who=ALICE)]


def test_bounds_are_inclusive(service) -> None:
    service.set_name(Signed(ALICE), b"a" * 3)
    service.set_name(Signed(BOB), b"b" * 10)
    assert service.query(ALICE).name == b"aaa"
    assert service.query(BOB).name == b"b" * 10


def test_too_short_leaves_state_unchanged(service) -> None:
    before = state_of(service)
    with pytest.raises(TooShort) as ei:
        service.set_name(Signed(ALICE), b"ab")
    assert ei.value.data == {"length": 2, "min_length": 3}
    assert state_of(service) == before


def test_too_long_leaves_state_unchanged(service) -> None:
    before = state_of(service)
    with pytest.raises(TooLong):
        service.set_name(Signed(ALICE), b"x" * 11)
    assert state_of(service) == before


def test_too_short_on_rename_keeps_old_name(service) -> None:
    service.set_name(Signed(ALICE), b"abc")
    before = state_of(service)
    with pytest.raises(TooShort):
        service.set_name(Signed(ALICE), b"")
    assert state_of(service) == before
    assert service.query(ALICE).name == b"abc"


def test_insufficient_funds_propagates_from_ledger(service, events) -> None:
    # CAROL was never endowed
    with pytest.raises(InsufficientFunds) as ei:
        service.set_name(Signed(CAROL), b"carol")
    assert ei.value.category == "resource"
    assert service.query(CAROL) is None
    assert events.events == []


def test_rename_needs_no_free_balance(service, ledger) -> None:
    service.set_name(Signed(ALICE), b"abc")
    # drain the remaining free balance elsewhere
    ledger.reserve(ALICE, ledger.free_balance(ALICE))
    service.set_name(Signed(ALICE), b"abcd")
    assert service.query(ALICE) == NameRecord(b"abcd", FEE)


@pytest.mark.parametrize(
    "origin", [Root(), Unsigned(), Signed(b"\x01" * 5), Signed(ALICE + b"\x00")]
)
def test_requires_signed_origin(service, origin) -> None:
    before = state_of(service)
    with pytest.raises(NotSigned):
        service.set_name(origin, b"abc")
    assert state_of(service) == before


def test_name_is_opaque_bytes(service) -> None:
    raw = b"\xff\x00\xfe"
    service.set_name(Signed(ALICE), raw)
    rec = service.query(ALICE)
    assert rec.name == raw
    assert "\ufffd" in rec.text


def test_non_bytes_name_rejected(service) -> None:
    with pytest.raises(TypeError):
        service.set_name(Signed(ALICE), "abc")  # type: ignore[arg-type]
