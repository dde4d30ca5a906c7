"""
nicks.state.registry — the account → NameRecord map.

The registry is a thin wrapper over a mutable mapping (a dict by default).
It holds no locks and does no validation of its own: `NameService` is its only
writer and checks every precondition before calling `insert`/`remove`.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, MutableMapping, Optional, Tuple

from ..types.record import NameRecord


def _key(account: bytes) -> bytes:
    if not isinstance(account, (bytes, bytearray, memoryview)):
        raise TypeError("account must be bytes-like")
    return bytes(account)


class NameRegistry:
    def __init__(self, store: Optional[MutableMapping[bytes, NameRecord]] = None) -> None:
        self._store: MutableMapping[bytes, NameRecord] = {} if store is None else store

    def get(self, account: bytes) -> Optional[NameRecord]:
        return self._store.get(_key(account))

    def insert(self, account: bytes, record: NameRecord) -> None:
        if not isinstance(record, NameRecord):
            raise TypeError("record must be a NameRecord")
        self._store[_key(account)] = record

    def remove(self, account: bytes) -> Optional[NameRecord]:
        """Remove and return the record at `account`, or None if unnamed."""
        return self._store.pop(_key(account), None)

    def __contains__(self, account: object) -> bool:
        return isinstance(account, (bytes, bytearray)) and bytes(account) in self._store

    def __len__(self) -> int:
        return len(self._store)

    def items(self) -> Iterator[Tuple[bytes, NameRecord]]:
        """Entries in ascending account order."""
        for k in sorted(self._store):
            yield k, self._store[k]

    # ----------------------- (de)serialization ----------------------------- #

    def dump(self) -> Dict[str, Dict[str, Any]]:
        return {"0x" + k.hex(): rec.to_dict() for k, rec in self.items()}

    @classmethod
    def load(cls, data: Dict[str, Dict[str, Any]]) -> "NameRegistry":
        reg = cls()
        for k, v in data.items():
            h = k[2:] if k.startswith(("0x", "0X")) else k
            reg.insert(bytes.fromhex(h), NameRecord.from_dict(v))
        return reg


__all__ = ["NameRegistry"]
