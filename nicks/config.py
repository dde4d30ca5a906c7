"""
nicks.config — deployment configuration for the name registry.

This module centralizes the knobs fixed at deployment time:
  • Name bounds (min/max length in bytes)
  • Reservation fee bonded while a name is held
  • Privileged delegates allowed to kill/force names (root is always allowed)
  • Forfeiture sink for slashed deposits
  • Strict invariant checking (raise instead of only alarming)

Environment variables (all optional):
  NICKS_MIN_LENGTH         -> integer (default: 3)
  NICKS_MAX_LENGTH         -> integer (default: 16)
  NICKS_RESERVATION_FEE    -> integer base units (default: 2)
  NICKS_FORCE_DELEGATES    -> comma-separated 0x-hex account ids (default: none)
  NICKS_SLASHED_SINK       -> "burn" or a 0x-hex treasury account id (default: burn)
  NICKS_STRICT_INVARIANTS  -> 0/1/true/false (default: 0)

Programmatic usage:
    from nicks.config import get_config
    cfg = get_config()
    if len(name) > cfg.max_length:
        ...

Values are read once; a config object is immutable after construction.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from functools import lru_cache
from typing import Any, Dict, FrozenSet, Mapping, Optional, Union

ACCOUNT_ID_LENGTH = 32
BURN = "burn"

# ----------------------------- helpers -------------------------------------


_BOOL_TRUE = {"1", "true", "t", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "f", "no", "n", "off"}


def _bool_env(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    v = value.strip().lower()
    if v in _BOOL_TRUE:
        return True
    if v in _BOOL_FALSE:
        return False
    return bool(v) if v != "" else default


def parse_account_id(s: Union[str, bytes, bytearray]) -> bytes:
    """Parse a 0x-hex (or raw bytes) account id; must be exactly 32 bytes."""
    if isinstance(s, (bytes, bytearray)):
        b = bytes(s)
    else:
        h = s.strip()
        if h.startswith(("0x", "0X")):
            h = h[2:]
        try:
            b = bytes.fromhex(h)
        except ValueError as e:
            raise ValueError(f"invalid account id: {s!r}") from e
    if len(b) != ACCOUNT_ID_LENGTH:
        raise ValueError(f"account id must be {ACCOUNT_ID_LENGTH} bytes, got {len(b)}")
    return b


def _parse_delegates(raw: Any) -> FrozenSet[bytes]:
    if raw is None:
        return frozenset()
    if isinstance(raw, str):
        items = [t for t in (p.strip() for p in raw.split(",")) if t]
    else:
        items = list(raw)
    return frozenset(parse_account_id(t) for t in items)


def _parse_sink(raw: Any) -> Union[str, bytes]:
    if raw is None:
        return BURN
    if isinstance(raw, str) and raw.strip().lower() == BURN:
        return BURN
    return parse_account_id(raw)


# ------------------------------ dataclass -----------------------------------


@dataclass(frozen=True)
class NicksConfig:
    min_length: int = 3
    max_length: int = 16
    reservation_fee: int = 2
    force_delegates: FrozenSet[bytes] = frozenset()
    slashed_sink: Union[str, bytes] = BURN
    strict_invariants: bool = False

    @property
    def burns_slashed(self) -> bool:
        return self.slashed_sink == BURN

    def to_dict(self) -> Dict[str, object]:
        d = asdict(self)
        d["force_delegates"] = sorted("0x" + a.hex() for a in self.force_delegates)
        if isinstance(self.slashed_sink, bytes):
            d["slashed_sink"] = "0x" + self.slashed_sink.hex()
        return d


def _validate(cfg: NicksConfig) -> NicksConfig:
    if cfg.min_length < 0:
        raise ValueError("min_length must be ≥ 0")
    if cfg.max_length <= 0:
        raise ValueError("max_length must be > 0")
    if cfg.min_length > cfg.max_length:
        raise ValueError("min_length must be ≤ max_length")
    if cfg.reservation_fee < 0:
        raise ValueError("reservation_fee must be ≥ 0")
    return cfg


# ------------------------------ loader --------------------------------------


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    overrides: Optional[Mapping[str, Any]] = None,
) -> NicksConfig:
    """
    Build a NicksConfig from environment and optional overrides.

    Args:
        env: mapping to read variables from (default: os.environ)
        overrides: explicit field overrides; keys support:
          'min_length', 'max_length', 'reservation_fee', 'force_delegates',
          'slashed_sink', 'strict_invariants'
    """
    env = os.environ if env is None else env
    overrides = dict(overrides or {})

    cfg = NicksConfig(
        min_length=int(overrides.get("min_length", env.get("NICKS_MIN_LENGTH", 3))),
        max_length=int(overrides.get("max_length", env.get("NICKS_MAX_LENGTH", 16))),
        reservation_fee=int(
            overrides.get("reservation_fee", env.get("NICKS_RESERVATION_FEE", 2))
        ),
        force_delegates=_parse_delegates(
            overrides.get("force_delegates", env.get("NICKS_FORCE_DELEGATES"))
        ),
        slashed_sink=_parse_sink(
            overrides.get("slashed_sink", env.get("NICKS_SLASHED_SINK"))
        ),
        strict_invariants=(
            bool(overrides["strict_invariants"])
            if "strict_invariants" in overrides
            else _bool_env(env.get("NICKS_STRICT_INVARIANTS"), False)
        ),
    )
    return _validate(cfg)


@lru_cache(maxsize=1)
def get_config() -> NicksConfig:
    """
    Cached global config. Suitable for application bootstraps and module-level consumers.
    """
    return load_config()


def summary(cfg: Optional[NicksConfig] = None) -> str:
    """
    Return a human-friendly one-line summary of the registry knobs.
    """
    cfg = cfg or get_config()
    sink = cfg.slashed_sink if cfg.burns_slashed else "0x" + cfg.slashed_sink.hex()[:8] + "…"
    return (
        "nicks{"
        f"len=[{cfg.min_length},{cfg.max_length}], fee={cfg.reservation_fee}, "
        f"delegates={len(cfg.force_delegates)}, sink={sink}, "
        f"strict={int(cfg.strict_invariants)}"
        "}"
    )


__all__ = [
    "ACCOUNT_ID_LENGTH",
    "BURN",
    "NicksConfig",
    "load_config",
    "get_config",
    "parse_account_id",
    "summary",
]
