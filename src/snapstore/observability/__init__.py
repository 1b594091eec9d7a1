"""Runtime observability — a queryable trace of what the runtime did.

Tracing is off by default.  Enable it with ``RuntimeConfig(trace=True)``
and read the events back from ``runtime.collector.log``.

Quick Start:
    >>> from snapstore import RuntimeConfig, StoreRuntime
    >>> runtime = StoreRuntime(config=RuntimeConfig(trace=True))
    >>> # ... register states, dispatch actions ...
    >>> runtime.collector.log.stats()

"""

from snapstore.observability.collector import RuntimeCollector
from snapstore.observability.events import (
    ActionDispatched,
    ReactionRegistered,
    ReactionsNotified,
    RuntimeEvent,
    StateMerged,
    StateRegistered,
    now_ns,
)
from snapstore.observability.log import EventLog
from snapstore.observability.stats import compute_dispatch_stats

__all__ = [
    "ActionDispatched",
    "EventLog",
    "ReactionRegistered",
    "ReactionsNotified",
    "RuntimeCollector",
    "RuntimeEvent",
    "StateMerged",
    "StateRegistered",
    "compute_dispatch_stats",
    "now_ns",
]
