"""
nicks.types.origin — the caller's origin, as handed over by the execution engine.

An origin is a tagged variant consumed once at the start of each call:

  Signed(who)  — an authenticated account
  Root()       — the administrative origin (always privileged)
  Unsigned()   — no identity (e.g., an inherent or an unsigned extrinsic)

`origin_from_str` parses the CLI/JSON spelling: "root", "unsigned" or a
0x-hex account id (signed).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Signed:
    who: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.who, (bytes, bytearray)) or not self.who:
            raise ValueError("signed origin needs a non-empty account id")
        object.__setattr__(self, "who", bytes(self.who))

    def __str__(self) -> str:  # pragma: no cover - cosmetic
        return "signed:0x" + self.who.hex()


@dataclass(frozen=True)
class Root:
    def __str__(self) -> str:  # pragma: no cover - cosmetic
        return "root"


@dataclass(frozen=True)
class Unsigned:
    def __str__(self) -> str:  # pragma: no cover - cosmetic
        return "unsigned"


Origin = Union[Signed, Root, Unsigned]


def origin_from_str(s: str) -> Origin:
    v = s.strip()
    if v.lower() == "root":
        return Root()
    if v.lower() in ("unsigned", "none"):
        return Unsigned()
    h = v[2:] if v.startswith(("0x", "0X")) else v
    try:
        return Signed(bytes.fromhex(h))
    except ValueError as e:
        raise ValueError(f"invalid origin: {s!r}") from e


__all__ = ["Signed", "Root", "Unsigned", "Origin", "origin_from_str"]
