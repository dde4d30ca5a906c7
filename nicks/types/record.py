"""
nicks.types.record — the stored (name, deposit) pair.

`name` is an opaque byte string. Treating it as UTF-8 is a convention only;
`text` decodes with replacement characters for display.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Union

HexLike = Union[str, bytes, bytearray, memoryview]


def _hex_to_bytes(v: HexLike) -> bytes:
    if isinstance(v, (bytes, bytearray, memoryview)):
        return bytes(v)
    if isinstance(v, str):
        s = v.strip()
        if s.startswith(("0x", "0X")):
            s = s[2:]
        try:
            return bytes.fromhex(s)
        except ValueError as e:
            raise ValueError(f"invalid hex string: {v!r}") from e
    raise TypeError(f"expected hex-like value, got {type(v).__name__}")


@dataclass(frozen=True)
class NameRecord:
    """
    A registry entry.

    Invariants:
    - name is bytes (never validated as text)
    - deposit is a non-negative integer in base units
    """

    name: bytes
    deposit: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.name, (bytes, bytearray, memoryview)):
            raise TypeError("name must be bytes-like")
        object.__setattr__(self, "name", bytes(self.name))
        if not isinstance(self.deposit, int) or isinstance(self.deposit, bool):
            raise TypeError("deposit must be int")
        if self.deposit < 0:
            raise ValueError("deposit must be non-negative")

    @property
    def text(self) -> str:
        return self.name.decode("utf-8", "replace")

    def with_name(self, name: bytes) -> "NameRecord":
        return NameRecord(name=name, deposit=self.deposit)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": "0x" + self.name.hex(), "deposit": self.deposit}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "NameRecord":
        return cls(name=_hex_to_bytes(d["name"]), deposit=int(d.get("deposit", 0)))


__all__ = ["NameRecord"]
