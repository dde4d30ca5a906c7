from __future__ import annotations

import pytest

from nicks.config import BURN, NicksConfig, load_config, parse_account_id, summary

from ._helpers import DELEGATE, TREASURY, hx


def test_defaults() -> None:
    cfg = load_config(env={})
    assert cfg == NicksConfig()
    assert (cfg.min_length, cfg.max_length, cfg.reservation_fee) == (3, 16, 2)
    assert cfg.burns_slashed
    assert not cfg.strict_invariants


def test_env_parsing() -> None:
    cfg = load_config(
        env={
            "NICKS_MIN_LENGTH": "1",
            "NICKS_MAX_LENGTH": "32",
            "NICKS_RESERVATION_FEE": "100",
            "NICKS_FORCE_DELEGATES": f"{hx(DELEGATE)}, {hx(TREASURY)}",
            "NICKS_SLASHED_SINK": hx(TREASURY),
            "NICKS_STRICT_INVARIANTS": "yes",
        }
    )
    assert (cfg.min_length, cfg.max_length, cfg.reservation_fee) == (1, 32, 100)
    assert cfg.force_delegates == frozenset({DELEGATE, TREASURY})
    assert cfg.slashed_sink == TREASURY
    assert not cfg.burns_slashed
    assert cfg.strict_invariants


def test_overrides_win_over_env() -> None:
    cfg = load_config(
        env={"NICKS_MAX_LENGTH": "32", "NICKS_STRICT_INVARIANTS": "1"},
        overrides={"max_length": 8, "strict_invariants": False, "slashed_sink": "BURN"},
    )
    assert cfg.max_length == 8
    assert not cfg.strict_invariants
    assert cfg.slashed_sink == BURN


@pytest.mark.parametrize(
    "overrides",
    [
        {"min_length": 5, "max_length": 4},
        {"max_length": 0},
        {"min_length": -1},
        {"reservation_fee": -1},
        {"force_delegates": ["0x1234"]},
        {"slashed_sink": "treasury"},
    ],
)
def test_invalid_values_rejected(overrides) -> None:
    with pytest.raises(ValueError):
        load_config(env={}, overrides=overrides)


def test_parse_account_id() -> None:
    assert parse_account_id(hx(DELEGATE)) == DELEGATE
    assert parse_account_id(DELEGATE.hex()) == DELEGATE
    with pytest.raises(ValueError):
        parse_account_id("0x00")


def test_to_dict_and_summary() -> None:
    cfg = load_config(env={}, overrides={"force_delegates": [hx(DELEGATE)]})
    d = cfg.to_dict()
    assert d["force_delegates"] == [hx(DELEGATE)]
    assert d["slashed_sink"] == "burn"
    assert summary(cfg).startswith("nicks{len=[3,16], fee=2, delegates=1")
