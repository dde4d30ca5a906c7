"""
nicks.metrics — Prometheus counters & gauges for the name registry.

Exposed metrics (names are prefixed with `nicks_`):
  - calls_total{call,result}           : Counter — dispatched calls by outcome
  - deposit_moved_total{direction}     : Counter — base units reserved/refunded/slashed
  - names_registered                   : Gauge   — records currently in the registry
  - invariant_violations_total         : Counter — deposit/reservation mismatches seen

Labels:
  - call      ∈ {set_name, clear_name, kill_name, force_name}
  - result    ∈ {success, validation, authorization, resource, state, internal}
  - direction ∈ {reserved, refunded, slashed}

Consumers expose the registry with `generate_latest_text()`.
"""

from __future__ import annotations

from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    generate_latest,
)

_PREFIX = "nicks_"

_registry: Optional[CollectorRegistry] = None

# Metric singletons (bound during _build_metrics)
CALLS_TOTAL: Counter
DEPOSIT_MOVED_TOTAL: Counter
NAMES_REGISTERED: Gauge
INVARIANT_VIOLATIONS_TOTAL: Counter


def set_registry(registry: CollectorRegistry) -> None:
    """
    Inject a custom CollectorRegistry (e.g., an app-global one).
    Must be called before the first metric is touched; later calls are ignored.
    """
    global _registry
    if _registry is not None:
        return
    _registry = registry
    _build_metrics(registry)


def get_registry() -> CollectorRegistry:
    """Return the metrics registry, creating one on first use."""
    global _registry
    if _registry is None:
        _registry = CollectorRegistry()
        _build_metrics(_registry)
    return _registry


def _build_metrics(reg: CollectorRegistry) -> None:
    global CALLS_TOTAL, DEPOSIT_MOVED_TOTAL, NAMES_REGISTERED, INVARIANT_VIOLATIONS_TOTAL

    CALLS_TOTAL = Counter(
        _PREFIX + "calls_total",
        "Registry calls dispatched (by call and result).",
        labelnames=("call", "result"),
        registry=reg,
    )
    DEPOSIT_MOVED_TOTAL = Counter(
        _PREFIX + "deposit_moved_total",
        "Base units moved by the registry (by direction).",
        labelnames=("direction",),
        registry=reg,
    )
    NAMES_REGISTERED = Gauge(
        _PREFIX + "names_registered",
        "Name records currently held.",
        registry=reg,
    )
    INVARIANT_VIOLATIONS_TOTAL = Counter(
        _PREFIX + "invariant_violations_total",
        "Deposit/reservation mismatches detected.",
        registry=reg,
    )


# ------------------------------ helpers -------------------------------------


def observe_call(*, call: str, result: str) -> None:
    get_registry()
    CALLS_TOTAL.labels(call=call, result=result).inc()


def observe_deposit(direction: str, amount: int) -> None:
    if amount <= 0:
        return
    get_registry()
    DEPOSIT_MOVED_TOTAL.labels(direction=direction).inc(amount)


def set_names_registered(count: int) -> None:
    get_registry()
    NAMES_REGISTERED.set(count)


def observe_invariant_violation() -> None:
    get_registry()
    INVARIANT_VIOLATIONS_TOTAL.inc()


def generate_latest_text() -> bytes:
    """Prometheus text exposition of the registry."""
    return generate_latest(get_registry())


__all__ = [
    "CONTENT_TYPE_LATEST",
    "set_registry",
    "get_registry",
    "observe_call",
    "observe_deposit",
    "set_names_registered",
    "observe_invariant_violation",
    "generate_latest_text",
]
