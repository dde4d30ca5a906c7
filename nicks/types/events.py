"""
nicks.types.events — transition outcome events.

One event is emitted per successful mutating call:

  NameSet{who}                 — first name set by a signed account (fee reserved)
  NameChanged{who}             — signed account renamed itself (deposit unchanged)
  NameCleared{who, deposit}    — name cleared, deposit returned
  NameKilled{target, deposit}  — name removed by a privileged origin, deposit slashed
  NameForced{target}           — name set by a privileged origin

`to_dict()` / `event_from_dict()` convert to/from JSON-friendly hex forms.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Type


def _h(b: bytes) -> str:
    return "0x" + b.hex()


def _b(s: str) -> bytes:
    return bytes.fromhex(s[2:] if s.startswith(("0x", "0X")) else s)


@dataclass(frozen=True)
class NameEvent:
    kind: ClassVar[str] = "NameEvent"

    @property
    def account(self) -> bytes:
        """The account the event is about (`who` or `target`)."""
        raise NotImplementedError

    @property
    def deposit_moved(self) -> Optional[int]:
        return None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": self.kind}
        for k, v in self.__dict__.items():
            out[k] = _h(v) if isinstance(v, bytes) else v
        return out


@dataclass(frozen=True)
class NameSet(NameEvent):
    kind: ClassVar[str] = "NameSet"
    who: bytes

    @property
    def account(self) -> bytes:
        return self.who


@dataclass(frozen=True)
class NameChanged(NameEvent):
    kind: ClassVar[str] = "NameChanged"
    who: bytes

    @property
    def account(self) -> bytes:
        return self.who


@dataclass(frozen=True)
class NameCleared(NameEvent):
    kind: ClassVar[str] = "NameCleared"
    who: bytes
    deposit: int

    @property
    def account(self) -> bytes:
        return self.who

    @property
    def deposit_moved(self) -> Optional[int]:
        return self.deposit


@dataclass(frozen=True)
class NameKilled(NameEvent):
    kind: ClassVar[str] = "NameKilled"
    target: bytes
    deposit: int

    @property
    def account(self) -> bytes:
        return self.target

    @property
    def deposit_moved(self) -> Optional[int]:
        return self.deposit


@dataclass(frozen=True)
class NameForced(NameEvent):
    kind: ClassVar[str] = "NameForced"
    target: bytes

    @property
    def account(self) -> bytes:
        return self.target


EVENT_TYPES: Dict[str, Type[NameEvent]] = {
    cls.kind: cls for cls in (NameSet, NameChanged, NameCleared, NameKilled, NameForced)
}


def event_from_dict(d: Dict[str, Any]) -> NameEvent:
    """Inverse of `NameEvent.to_dict()`."""
    try:
        cls = EVENT_TYPES[d["kind"]]
    except KeyError:
        raise ValueError(f"unknown event kind: {d.get('kind')!r}") from None
    fields: Dict[str, Any] = {}
    for k, v in d.items():
        if k == "kind":
            continue
        fields[k] = int(v) if k == "deposit" else _b(v)
    return cls(**fields)


__all__ = [
    "NameEvent",
    "NameSet",
    "NameChanged",
    "NameCleared",
    "NameKilled",
    "NameForced",
    "EVENT_TYPES",
    "event_from_dict",
]
