"""
nicks.runtime.dispatcher — route a call to the name service.

Calls are small frozen dataclasses (the registry's call enum):

  SetName(name)            -> NameService.set_name
  ClearName()              -> NameService.clear_name
  KillName(target)         -> NameService.kill_name
  ForceName(target, name)  -> NameService.force_name

`dispatch` runs one call and folds its result, or its NicksError, into a
CallOutcome. InvariantViolation (raised only in strict mode, after the call
committed) and errors that are not NicksError propagate.
`decode_call` builds a call from a JSON-friendly mapping such as

  {"call": "force_name", "target": "0x…", "name": "0x616c696365"}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Union

from .. import metrics
from ..errors import InvariantViolation, NicksError, error_to_outcome_fields
from ..logging import trace_scope
from ..types.origin import Origin
from ..types.outcome import CallOutcome, CallStatus
from .service import NameService

log = logging.getLogger(__name__)


class DispatchError(NicksError):
    """Raised when a call mapping cannot be decoded."""
    category = "validation"

    def __init__(self, message: str):
        super().__init__(message=message, code="BAD_CALL")


@dataclass(frozen=True)
class SetName:
    name: bytes
    call_name = "set_name"


@dataclass(frozen=True)
class ClearName:
    call_name = "clear_name"


@dataclass(frozen=True)
class KillName:
    target: Any
    call_name = "kill_name"


@dataclass(frozen=True)
class ForceName:
    target: Any
    name: bytes
    call_name = "force_name"


Call = Union[SetName, ClearName, KillName, ForceName]

_CALLS = {c.call_name: c for c in (SetName, ClearName, KillName, ForceName)}


def _as_name(x: Any) -> bytes:
    if isinstance(x, (bytes, bytearray)):
        return bytes(x)
    if isinstance(x, str):
        s = x.strip()
        if s.startswith(("0x", "0X")):
            try:
                return bytes.fromhex(s[2:])
            except ValueError:
                raise DispatchError(f"invalid hex name: {x!r}") from None
        return s.encode("utf-8")
    raise DispatchError(f"name must be bytes or string, got {type(x).__name__}")


def decode_call(d: Mapping[str, Any]) -> Call:
    """
    Build a call from a mapping. Names given as '0x…' are hex-decoded; any
    other string is UTF-8 encoded.
    """
    kind = d.get("call")
    if kind not in _CALLS:
        raise DispatchError(f"unknown call: {kind!r}")
    try:
        if kind == "set_name":
            return SetName(name=_as_name(d["name"]))
        if kind == "clear_name":
            return ClearName()
        if kind == "kill_name":
            return KillName(target=d["target"])
        return ForceName(target=d["target"], name=_as_name(d["name"]))
    except KeyError as e:
        raise DispatchError(f"{kind}: missing field {e.args[0]!r}") from None


def _run(service: NameService, origin: Origin, call: Call) -> Any:
    if isinstance(call, SetName):
        return service.set_name(origin, call.name)
    if isinstance(call, ClearName):
        return service.clear_name(origin)
    if isinstance(call, KillName):
        return service.kill_name(origin, call.target)
    if isinstance(call, ForceName):
        return service.force_name(origin, call.target, call.name)
    raise DispatchError(f"unsupported call object: {type(call).__name__}")


def dispatch(service: NameService, origin: Origin, call: Call) -> CallOutcome:
    name = getattr(call, "call_name", type(call).__name__)
    with trace_scope(call=name):
        service.last_event = None
        try:
            value = _run(service, origin, call)
        except InvariantViolation:
            raise
        except NicksError as err:
            log.debug("call rejected", extra={"code": err.code})
            metrics.observe_call(call=name, result=err.category)
            return CallOutcome(
                call=name,
                status=CallStatus.FAILED,
                error=error_to_outcome_fields(err)["error"],
            )

    metrics.observe_call(call=name, result="success")
    return CallOutcome(
        call=name,
        status=CallStatus.SUCCESS,
        event=service.last_event,
        value=value if isinstance(value, int) else None,
    )


__all__ = [
    "Call",
    "SetName",
    "ClearName",
    "KillName",
    "ForceName",
    "DispatchError",
    "decode_call",
    "dispatch",
]
