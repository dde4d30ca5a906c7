"""
nicks.cli.main
--------------

Devnet utility to drive the name registry against a JSON state file.

The state file holds the ledger and registry snapshots (see
nicks.state.snapshot); a call's events are appended to `<state>.events.jsonl`
only after its snapshot has been saved.
Deployment knobs come from NICKS_* environment variables (see nicks.config).

Examples
--------
# Fund two accounts
python -m nicks.cli.main init --endow 0xaa…aa=100 --endow 0xbb…bb=5

# Set, rename and clear a name as a signed account
python -m nicks.cli.main set-name alice --signer 0xaa…aa
python -m nicks.cli.main set-name 0x616c6963653 --signer 0xaa…aa
python -m nicks.cli.main clear-name --signer 0xaa…aa

# Privileged calls (root, or a signer listed in NICKS_FORCE_DELEGATES)
python -m nicks.cli.main force-name 0xbb…bb bob --root
python -m nicks.cli.main kill-name 0xbb…bb --root

# Inspect
python -m nicks.cli.main query 0xaa…aa
python -m nicks.cli.main events --kind NameSet --limit 10
python -m nicks.cli.main audit
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import typer

from .. import logging as nlog
from ..config import load_config, parse_account_id, summary
from ..errors import InvariantViolation
from ..runtime.auth import StaticAuthorizationGate
from ..runtime.dispatcher import DispatchError, decode_call, dispatch
from ..runtime.service import NameService
from ..state.events import EventSink, InMemoryEventSink, JsonlEventSink, NullEventSink
from ..state.ledger import AccountSink, BurnSink
from ..state.snapshot import StateSnapshot, load_snapshot, save_snapshot
from ..types.origin import Origin, Root, Signed, Unsigned
from ..types.outcome import CallOutcome, CallStatus
from ..version import version_metadata

app = typer.Typer(
    name="nicks",
    add_completion=False,
    no_args_is_help=True,
    help="Account name registry (devnet/test tooling).",
)

DEFAULT_STATE = "nicks_state.json"

# -------------------- utils --------------------


def _echo_json(obj: Any) -> None:
    typer.echo(json.dumps(obj, indent=2, sort_keys=True))


def _state_path(ctx: typer.Context) -> Path:
    return Path(ctx.obj["state"])


def _events_path(state: Path) -> str:
    return str(state) + ".events.jsonl"


def _account(value: str, param: str = "account") -> bytes:
    try:
        return parse_account_id(value)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint=param) from None


def _origin(signer: Optional[str], root: bool) -> Origin:
    if root and signer:
        raise typer.BadParameter("use either --signer or --root, not both")
    if root:
        return Root()
    if signer:
        return Signed(_account(signer, "--signer"))
    return Unsigned()


def _parse_endowment(spec: str) -> Tuple[bytes, int]:
    acct, sep, amount = spec.partition("=")
    if not sep:
        raise typer.BadParameter(f"expected ACCOUNT=AMOUNT, got {spec!r}", param_hint="--endow")
    try:
        value = int(amount)
    except ValueError:
        raise typer.BadParameter(f"amount must be an integer: {amount!r}", param_hint="--endow") from None
    if value < 0:
        raise typer.BadParameter("amount must be non-negative", param_hint="--endow")
    return _account(acct, "--endow"), value


def _build_service(state: Path, events: EventSink) -> Tuple[NameService, StateSnapshot]:
    cfg = load_config()
    snap = load_snapshot(state)
    if cfg.burns_slashed:
        sink: Any = BurnSink(burned=snap.burned)
    else:
        sink = AccountSink(snap.ledger, cfg.slashed_sink)  # type: ignore[arg-type]
    svc = NameService(
        ledger=snap.ledger,
        gate=StaticAuthorizationGate(cfg.force_delegates),
        events=events,
        slashed=sink,
        registry=snap.registry,
        config=cfg,
    )
    return svc, snap


def _commit(state: Path, svc: NameService, snap: StateSnapshot, pending: InMemoryEventSink) -> None:
    """Save the snapshot, then append the call's events to the log."""
    if isinstance(svc.slashed, BurnSink):
        snap.burned = svc.slashed.burned
    save_snapshot(state, snap)
    log = JsonlEventSink(_events_path(state))
    try:
        for event in pending.events:
            log.deposit(event)
        log.flush()
    finally:
        log.close()


def _submit(ctx: typer.Context, origin: Origin, call: Dict[str, Any]) -> None:
    state = _state_path(ctx)
    try:
        decoded = decode_call(call)
    except DispatchError as err:
        _echo_json({"call": call.get("call"), "status": "failed", "error": err.to_dict()})
        raise typer.Exit(1)

    pending = InMemoryEventSink()
    svc, snap = _build_service(state, pending)
    try:
        outcome = dispatch(svc, origin, decoded)
    except InvariantViolation as err:
        # the transition committed before the violation was raised
        _commit(state, svc, snap, pending)
        outcome = CallOutcome(
            call=decoded.call_name,
            status=CallStatus.FAILED,
            event=svc.last_event,
            error=err.to_dict(),
        )
    else:
        if outcome.is_success:
            _commit(state, svc, snap, pending)
    _echo_json(outcome.to_dict())
    if not outcome.is_success:
        raise typer.Exit(1)


# -------------------- commands --------------------


@app.callback()
def main(
    ctx: typer.Context,
    state: str = typer.Option(DEFAULT_STATE, "--state", help="Path to the JSON state file."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level (DEBUG, INFO, ...)."),
    log_json: Optional[bool] = typer.Option(None, "--log-json/--log-text", help="Log format."),
) -> None:
    nlog.configure(json=log_json, level=log_level, stream=sys.stderr)
    ctx.obj = {"state": state}


@app.command("init")
def init_cmd(
    ctx: typer.Context,
    endow: List[str] = typer.Option([], "--endow", help="ACCOUNT=AMOUNT free balance to credit (repeatable)."),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing state file."),
) -> None:
    """Create a state file, optionally crediting initial balances."""
    state = _state_path(ctx)
    if state.exists() and not force:
        typer.echo(f"{state} already exists (use --force to overwrite)", err=True)
        raise typer.Exit(2)
    snap = StateSnapshot()
    for spec in endow:
        acct, amount = _parse_endowment(spec)
        snap.ledger.endow(acct, amount)
    save_snapshot(state, snap)
    events = Path(_events_path(state))
    if force and events.exists():
        events.unlink()
    _echo_json({"state": str(state), "ledger": snap.ledger.dump()})


@app.command("set-name")
def set_name_cmd(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name as text, or 0x-hex bytes."),
    signer: Optional[str] = typer.Option(None, "--signer", help="Signing account (0x-hex)."),
) -> None:
    """Set the signer's name, reserving the fee on first use."""
    _submit(ctx, _origin(signer, False), {"call": "set_name", "name": name})


@app.command("clear-name")
def clear_name_cmd(
    ctx: typer.Context,
    signer: Optional[str] = typer.Option(None, "--signer", help="Signing account (0x-hex)."),
) -> None:
    """Clear the signer's name and refund the deposit."""
    _submit(ctx, _origin(signer, False), {"call": "clear_name"})


@app.command("kill-name")
def kill_name_cmd(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Target account (0x-hex)."),
    signer: Optional[str] = typer.Option(None, "--signer", help="Delegate account (0x-hex)."),
    root: bool = typer.Option(False, "--root", help="Submit with the root origin."),
) -> None:
    """Remove a target's name and slash its deposit."""
    _submit(ctx, _origin(signer, root), {"call": "kill_name", "target": target})


@app.command("force-name")
def force_name_cmd(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Target account (0x-hex)."),
    name: str = typer.Argument(..., help="Name as text, or 0x-hex bytes."),
    signer: Optional[str] = typer.Option(None, "--signer", help="Delegate account (0x-hex)."),
    root: bool = typer.Option(False, "--root", help="Submit with the root origin."),
) -> None:
    """Set a target's name without taking a deposit."""
    _submit(ctx, _origin(signer, root), {"call": "force_name", "target": target, "name": name})


@app.command("query")
def query_cmd(
    ctx: typer.Context,
    account: str = typer.Argument(..., help="Account (0x-hex)."),
) -> None:
    """Show an account's name record (null when unnamed)."""
    acct = _account(account)
    svc, _snap = _build_service(_state_path(ctx), NullEventSink())
    rec = svc.query(acct)
    if rec is None:
        _echo_json({"account": account, "record": None})
        return
    _echo_json({"account": account, "record": {**rec.to_dict(), "text": rec.text}})


@app.command("balance")
def balance_cmd(
    ctx: typer.Context,
    account: str = typer.Argument(..., help="Account (0x-hex)."),
) -> None:
    """Show an account's free and reserved balance."""
    acct = _account(account)
    svc, _snap = _build_service(_state_path(ctx), NullEventSink())
    _echo_json(
        {
            "account": account,
            "free": svc.balance_of(acct),
            "reserved": svc.ledger.reserved_balance(acct),
        }
    )


@app.command("events")
def events_cmd(
    ctx: typer.Context,
    kind: Optional[str] = typer.Option(None, "--kind", help="Filter by event kind (e.g. NameSet)."),
    account: Optional[str] = typer.Option(None, "--account", help="Filter by account (0x-hex)."),
    limit: Optional[int] = typer.Option(None, "--limit", min=1, help="Max events to show."),
) -> None:
    """List recorded events in commit order."""
    acct = _account(account, "--account") if account else None
    sink = JsonlEventSink(_events_path(_state_path(ctx)))
    try:
        rows = [r.to_dict() for r in sink.get_events(kind=kind, account=acct, limit=limit)]
    finally:
        sink.close()
    _echo_json(rows)


@app.command("audit")
def audit_cmd(ctx: typer.Context) -> None:
    """Report name records whose deposit is not backed by a reservation."""
    svc, _snap = _build_service(_state_path(ctx), NullEventSink())
    drifts = [d.to_dict() for d in svc.audit()]
    _echo_json({"drifts": drifts})
    if drifts:
        raise typer.Exit(1)


@app.command("config")
def config_cmd() -> None:
    """Print the build and the effective configuration."""
    cfg = load_config()
    _echo_json({**version_metadata(), "summary": summary(cfg), "config": cfg.to_dict()})


if __name__ == "__main__":  # pragma: no cover
    app()
