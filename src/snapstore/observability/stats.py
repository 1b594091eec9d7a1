"""Dispatch latency statistics computed from the event log."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from snapstore.observability.events import ActionDispatched

if TYPE_CHECKING:
    from snapstore.observability.log import EventLog


def compute_dispatch_stats(
    log: EventLog,
    *,
    limit: int = 100,
    state: str | None = None,
) -> dict[str, Any]:
    """Compute aggregate latency statistics from recent ``ActionDispatched`` events.

    Returns a dict with p50, p95, p99, the failure count, and per-action
    average durations.

    """
    events = log.query(event_type=ActionDispatched, limit=limit, state=state)
    if not events:
        return {"count": 0}

    totals = sorted(e.duration_ms for e in events)
    count = len(totals)

    def percentile(data: list[float], pct: float) -> float:
        idx = int(len(data) * pct / 100)
        return data[min(idx, len(data) - 1)]

    per_action: dict[str, list[float]] = {}
    for e in events:
        per_action.setdefault(e.action, []).append(e.duration_ms)

    return {
        "count": count,
        "failed": sum(1 for e in events if not e.ok),
        "duration_ms": {
            "p50": round(percentile(totals, 50), 3),
            "p95": round(percentile(totals, 95), 3),
            "p99": round(percentile(totals, 99), 3),
            "min": round(totals[0], 3),
            "max": round(totals[-1], 3),
        },
        "avg_by_action_ms": {
            name: round(sum(values) / len(values), 3)
            for name, values in sorted(per_action.items())
        },
    }
