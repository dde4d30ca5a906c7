"""
nicks.types.outcome — CallOutcome container returned by the dispatcher.

Fields
------
* call    : str — call name ('set_name', 'clear_name', 'kill_name', 'force_name')
* status  : CallStatus — SUCCESS / FAILED
* event   : Optional[NameEvent] — the single event emitted on success
* value   : Optional[int] — deposit refunded/slashed, when the call returns one
* error   : Optional[dict] — NicksError.to_dict() on failure
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .events import NameEvent, event_from_dict


class CallStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


@dataclass(frozen=True)
class CallOutcome:
    call: str
    status: CallStatus
    event: Optional[NameEvent] = None
    value: Optional[int] = None
    error: Optional[Dict[str, Any]] = None

    @property
    def is_success(self) -> bool:
        return self.status is CallStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"call": self.call, "status": self.status.value}
        if self.event is not None:
            out["event"] = self.event.to_dict()
        if self.value is not None:
            out["value"] = self.value
        if self.error is not None:
            out["error"] = self.error
        return out

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CallOutcome":
        ev = d.get("event")
        return cls(
            call=str(d["call"]),
            status=CallStatus(d["status"]),
            event=event_from_dict(ev) if ev else None,
            value=d.get("value"),
            error=d.get("error"),
        )


__all__ = ["CallStatus", "CallOutcome"]
