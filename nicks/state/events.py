"""
nicks.state.events — pluggable append-only event sinks.

The service deposits exactly one event per successful mutating call and never
reads back. Sinks assign a monotonically increasing `index` in deposit order
and support simple querying for tooling:

- InMemoryEventSink: keeps all records in RAM (tests, devnets).
- JsonlEventSink: append-only JSONL file; durable and simple to operate.
- NullEventSink: no-op sink for setups that ignore events.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import dataclass
from typing import (Any, Dict, Iterable, List, Optional, Protocol, TextIO,
                    runtime_checkable)

from ..types.events import NameEvent, event_from_dict

# =============================================================================
# Public data model
# =============================================================================


@dataclass(frozen=True)
class EventRecord:
    """An event together with its position in the log (0-based, deposit order)."""

    index: int
    event: NameEvent

    @property
    def kind(self) -> str:
        return self.event.kind

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, **self.event.to_dict()}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "EventRecord":
        body = {k: v for k, v in d.items() if k != "index"}
        return cls(index=int(d["index"]), event=event_from_dict(body))


# =============================================================================
# Sink interface
# =============================================================================


@runtime_checkable
class EventSink(Protocol):
    def deposit(self, event: NameEvent) -> EventRecord:
        """Append a single event. Returns the stored record."""

    def get_events(
        self,
        *,
        kind: Optional[str] = None,
        account: Optional[bytes] = None,
        limit: Optional[int] = None,
    ) -> Iterable[EventRecord]:
        """Iterate matching events in deposit order."""

    def close(self) -> None:
        """Release resources (files, buffers)."""


def _matches(rec: EventRecord, kind: Optional[str], account: Optional[bytes]) -> bool:
    if kind is not None and rec.kind != kind:
        return False
    if account is not None and rec.event.account != account:
        return False
    return True


def _take(it: Iterable[EventRecord], limit: Optional[int]) -> Iterable[EventRecord]:
    n = 0
    for rec in it:
        if limit is not None and n >= limit:
            break
        yield rec
        n += 1


# =============================================================================
# In-memory sink
# =============================================================================


class InMemoryEventSink:
    """
    A simple in-memory sink.

    Keeps all events in RAM; do not use unbounded in long-running deployments.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records: List[EventRecord] = []

    def deposit(self, event: NameEvent) -> EventRecord:
        with self._lock:
            rec = EventRecord(index=len(self._records), event=event)
            self._records.append(rec)
        return rec

    def get_events(
        self,
        *,
        kind: Optional[str] = None,
        account: Optional[bytes] = None,
        limit: Optional[int] = None,
    ) -> Iterable[EventRecord]:
        with self._lock:
            snapshot = list(self._records)
        return list(_take((r for r in snapshot if _matches(r, kind, account)), limit))

    @property
    def events(self) -> List[NameEvent]:
        with self._lock:
            return [r.event for r in self._records]

    def __len__(self) -> int:
        return len(self._records)

    def close(self) -> None:
        with self._lock:
            self._records.clear()


# =============================================================================
# JSONL sink (durable)
# =============================================================================


class JsonlEventSink:
    """
    Append-only JSONL sink. Each line is one EventRecord:

        {"index": 3, "kind": "NameCleared", "who": "0x…", "deposit": 2}

    Reopening an existing file continues the index sequence. Every non-blank
    line takes an index, malformed ones included, so indices are never reused.
    The file is created on the first deposit.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        self._lock = threading.RLock()
        self._log = logging.getLogger(__name__)
        self._next = self._count_lines()
        self._fh: Optional[TextIO] = None

    def _count_lines(self) -> int:
        if not os.path.exists(self._path):
            return 0
        with open(self._path, "r", encoding="utf-8") as fh:
            return sum(1 for line in fh if line.strip())

    def _scan(self) -> Iterable[EventRecord]:
        if not os.path.exists(self._path):
            return
        with open(self._path, "r", encoding="utf-8") as fh:
            for line in fh:
                if not line.strip():
                    continue
                try:
                    yield EventRecord.from_dict(json.loads(line))
                except (ValueError, KeyError) as e:
                    self._log.warning("Skipping malformed event line: %s (%r)", line[:120], e)

    def _handle(self) -> TextIO:
        if self._fh is None:
            os.makedirs(os.path.dirname(self._path) or ".", exist_ok=True)
            self._fh = open(self._path, "a", encoding="utf-8", buffering=1)  # line-buffered
        return self._fh

    def deposit(self, event: NameEvent) -> EventRecord:
        with self._lock:
            rec = EventRecord(index=self._next, event=event)
            self._handle().write(json.dumps(rec.to_dict(), separators=(",", ":")) + "\n")
            self._next += 1
        return rec

    def get_events(
        self,
        *,
        kind: Optional[str] = None,
        account: Optional[bytes] = None,
        limit: Optional[int] = None,
    ) -> Iterable[EventRecord]:
        with self._lock:
            if self._fh is not None:
                self._fh.flush()
            return list(_take((r for r in self._scan() if _matches(r, kind, account)), limit))

    def flush(self) -> None:
        with self._lock:
            if self._fh is not None:
                self._fh.flush()
                os.fsync(self._fh.fileno())

    def close(self) -> None:
        with self._lock:
            if self._fh is not None and not self._fh.closed:
                self._fh.flush()
                self._fh.close()


# =============================================================================
# Null sink
# =============================================================================


class NullEventSink:
    """A sink that drops everything."""

    def __init__(self) -> None:
        self._next = 0

    def deposit(self, event: NameEvent) -> EventRecord:
        rec = EventRecord(index=self._next, event=event)
        self._next += 1
        return rec

    def get_events(
        self,
        *,
        kind: Optional[str] = None,
        account: Optional[bytes] = None,
        limit: Optional[int] = None,
    ) -> Iterable[EventRecord]:
        return []

    def close(self) -> None:
        return


__all__ = [
    "EventRecord",
    "EventSink",
    "InMemoryEventSink",
    "JsonlEventSink",
    "NullEventSink",
]
