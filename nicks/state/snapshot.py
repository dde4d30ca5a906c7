"""
nicks.state.snapshot — JSON state file for the CLI and devnet tooling.

Layout:

    {
      "version": 1,
      "ledger":   {"0x…": {"free": 100, "reserved": 2}, …},
      "registry": {"0x…": {"name": "0x616263", "deposit": 2}, …},
      "burned":   0
    }

Writes go to a temp file in the same directory and are moved into place with
os.replace, so a crash never leaves a half-written snapshot.
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Union

from .ledger import InMemoryLedger
from .registry import NameRegistry

SNAPSHOT_VERSION = 1


@dataclass
class StateSnapshot:
    ledger: InMemoryLedger = field(default_factory=InMemoryLedger)
    registry: NameRegistry = field(default_factory=NameRegistry)
    burned: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": SNAPSHOT_VERSION,
            "ledger": self.ledger.dump(),
            "registry": self.registry.dump(),
            "burned": self.burned,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "StateSnapshot":
        version = int(d.get("version", SNAPSHOT_VERSION))
        if version != SNAPSHOT_VERSION:
            raise ValueError(f"unsupported snapshot version: {version}")
        return cls(
            ledger=InMemoryLedger.load(d.get("ledger", {})),
            registry=NameRegistry.load(d.get("registry", {})),
            burned=int(d.get("burned", 0)),
        )


def load_snapshot(path: Union[str, Path]) -> StateSnapshot:
    """Load a snapshot; a missing file yields an empty state."""
    p = Path(path).expanduser()
    if not p.exists():
        return StateSnapshot()
    with p.open("r", encoding="utf-8") as fh:
        return StateSnapshot.from_dict(json.load(fh))


def save_snapshot(path: Union[str, Path], snap: StateSnapshot) -> None:
    p = Path(path).expanduser()
    p.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=p.name + ".", suffix=".tmp", dir=str(p.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(snap.to_dict(), fh, indent=2, sort_keys=True)
            fh.write("\n")
        os.replace(tmp, p)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


__all__ = ["SNAPSHOT_VERSION", "StateSnapshot", "load_snapshot", "save_snapshot"]
