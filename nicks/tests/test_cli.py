from __future__ import annotations

import json
import logging

import pytest
from typer.testing import CliRunner

from nicks.cli import main as cli
from nicks.cli.main import app
from nicks.state.snapshot import StateSnapshot, save_snapshot
from nicks.types.record import NameRecord

from ._helpers import ALICE, BOB, CAROL, DELEGATE, hx

ENV = {
    "NICKS_MIN_LENGTH": "3",
    "NICKS_MAX_LENGTH": "10",
    "NICKS_RESERVATION_FEE": "5",
    "NICKS_FORCE_DELEGATES": hx(DELEGATE),
    "NICKS_SLASHED_SINK": "burn",
    "NICKS_STRICT_INVARIANTS": "0",
}


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()
    state = str(tmp_path / "nicks.json")

    def _run(*args: str, code: int = 0, **env: str):
        r = runner.invoke(app, ["--state", state, *args], env={**ENV, **env})
        assert r.exit_code == code, r.output
        if code == 2:
            return None
        return json.loads(r.stdout)

    _run("init", "--endow", f"{hx(ALICE)}=100", "--endow", f"{hx(BOB)}=3")
    return _run


def test_set_rename_clear_flow(run) -> None:
    out = run("set-name", "alice", "--signer", hx(ALICE))
    assert out["status"] == "success"
    assert out["event"] == {"kind": "NameSet", "who": hx(ALICE)}
    assert run("balance", hx(ALICE)) == {"account": hx(ALICE), "free": 95, "reserved": 5}

    out = run("set-name", "alicia", "--signer", hx(ALICE))
    assert out["event"]["kind"] == "NameChanged"
    rec = run("query", hx(ALICE))["record"]
    assert rec == {"name": "0x" + b"alicia".hex(), "deposit": 5, "text": "alicia"}

    out = run("clear-name", "--signer", hx(ALICE))
    assert out["value"] == 5
    assert run("balance", hx(ALICE))["free"] == 100
    assert run("query", hx(ALICE))["record"] is None

    kinds = [e["kind"] for e in run("events")]
    assert kinds == ["NameSet", "NameChanged", "NameCleared"]


def test_failures_exit_nonzero_and_do_not_persist(run) -> None:
    out = run("set-name", "ab", "--signer", hx(ALICE), code=1)
    assert out["error"]["code"] == "NAME_TOO_SHORT"

    out = run("set-name", "bobby", "--signer", hx(BOB), code=1)
    assert out["error"]["code"] == "INSUFFICIENT_FUNDS"

    out = run("clear-name", "--signer", hx(ALICE), code=1)
    assert out["error"]["code"] == "UNNAMED"

    out = run("set-name", "alice", code=1)
    assert out["error"]["code"] == "NOT_SIGNED"

    assert run("events") == []
    assert run("balance", hx(BOB)) == {"account": hx(BOB), "free": 3, "reserved": 0}


def test_privileged_calls(run) -> None:
    run("set-name", "alice", "--signer", hx(ALICE))

    out = run("kill-name", hx(ALICE), "--signer", hx(BOB), code=1)
    assert out["error"]["code"] == "NOT_AUTHORIZED"

    out = run("kill-name", hx(ALICE), "--root")
    assert out["value"] == 5
    assert run("balance", hx(ALICE)) == {"account": hx(ALICE), "free": 95, "reserved": 0}

    out = run("force-name", hx(CAROL), "c", "--signer", hx(DELEGATE))
    assert out["event"] == {"kind": "NameForced", "target": hx(CAROL)}
    assert run("query", hx(CAROL))["record"]["deposit"] == 0

    assert [e["index"] for e in run("events", "--account", hx(ALICE))] == [0, 1]
    assert len(run("events", "--kind", "NameForced")) == 1


def test_audit_clean_state(run) -> None:
    run("set-name", "alice", "--signer", hx(ALICE))
    assert run("audit") == {"drifts": []}


def test_bad_account_is_usage_error(tmp_path) -> None:
    r = CliRunner().invoke(
        app, ["--state", str(tmp_path / "s.json"), "query", "0x1234"], env=ENV
    )
    assert r.exit_code == 2


def test_init_refuses_to_overwrite(run) -> None:
    run("init", code=2)
    out = run("init", "--force")
    assert out["ledger"] == {}


def test_config_command(run) -> None:
    out = run("config", NICKS_GIT_DESCRIBE="v0.1.0-3-gabc123-dirty")
    assert out["version"] == "0.1.0"
    assert out["build"] == "v0.1.0-3-gabc123-dirty"
    assert out["dirty"] is True
    assert out["config"]["max_length"] == 10
    assert out["config"]["force_delegates"] == [hx(DELEGATE)]


def _write_drifted_state(tmp_path) -> None:
    """ALICE's record claims a deposit of 5 but only 2 is reserved."""
    snap = StateSnapshot()
    snap.ledger.endow(ALICE, 100)
    snap.ledger.reserve(ALICE, 2)
    snap.registry.insert(ALICE, NameRecord(b"abc", 5))
    save_snapshot(tmp_path / "nicks.json", snap)


def test_strict_invariant_violation_still_commits(run, tmp_path) -> None:
    _write_drifted_state(tmp_path)

    out = run(
        "--log-level", "CRITICAL", "clear-name", "--signer", hx(ALICE),
        code=1, NICKS_STRICT_INVARIANTS="1",
    )
    assert out["status"] == "failed"
    assert out["error"]["code"] == "INVARIANT_VIOLATION"
    assert out["event"] == {"kind": "NameCleared", "who": hx(ALICE), "deposit": 5}

    # snapshot and event log agree
    assert run("query", hx(ALICE))["record"] is None
    assert run("balance", hx(ALICE)) == {"account": hx(ALICE), "free": 102, "reserved": 0}
    assert [e["kind"] for e in run("events")] == ["NameCleared"]


def test_drift_is_logged_not_raised_by_default(run, tmp_path) -> None:
    _write_drifted_state(tmp_path)
    assert run("audit", code=1)["drifts"] == [
        {"account": hx(ALICE), "recorded": 5, "reserved": 2}
    ]
    out = run("--log-level", "CRITICAL", "clear-name", "--signer", hx(ALICE))
    assert out["value"] == 5
    assert run("audit") == {"drifts": []}


def test_failed_save_writes_no_events(run, tmp_path, monkeypatch) -> None:
    def boom(path, snap):
        raise OSError("disk full")

    monkeypatch.setattr(cli, "save_snapshot", boom)
    args = ["--state", str(tmp_path / "nicks.json"), "set-name", "alice", "--signer", hx(ALICE)]
    r = CliRunner().invoke(app, args, env=ENV)
    assert isinstance(r.exception, OSError)
    monkeypatch.undo()

    assert run("events") == []
    assert run("query", hx(ALICE))["record"] is None


def test_read_only_commands_do_not_create_event_log(run, tmp_path) -> None:
    log = tmp_path / "nicks.json.events.jsonl"
    run("query", hx(ALICE))
    run("balance", hx(ALICE))
    run("audit")
    run("events")
    assert not log.exists()

    run("set-name", "alice", "--signer", hx(ALICE))
    assert log.exists()
