"""Runtime event model for tracing.

Every state registration, reaction registration, merge, fan-out, and
action dispatch can be recorded as an event.  Events are frozen dataclasses
with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- ``state``: Name of the state type involved
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Registration events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class StateRegistered:
    """A state container was created.

    Attributes:
        state: State type name.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    state: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ReactionRegistered:
    """A reaction subscribed to topics of a state type.

    Attributes:
        state: State type name.
        kind: Reaction variant.
        topics: Subscribed topics, sorted.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    state: str
    kind: Literal["value", "effect"]
    topics: tuple[str, ...]
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Mutation events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class StateMerged:
    """A merge committed a new snapshot.

    Attributes:
        state: State type name.
        topics: Emitted topics, in emission order.
        duration_ms: Time spent deriving and committing.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    state: str
    topics: tuple[str, ...]
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ReactionsNotified:
    """Fan-out for one merge finished.

    Attributes:
        state: State type name.
        topics: Emitted topics, in emission order.
        reactions_notified: Number of reaction ``notify`` calls.
        duration_ms: Time spent in reactions.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    state: str
    topics: tuple[str, ...]
    reactions_notified: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ActionDispatched:
    """An action ran to completion (or failed) through the runtime.

    Attributes:
        state: State type name.
        action: Action name (class or function name).
        duration_ms: Wall time from dispatch to completion.
        ok: False if the action raised.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    state: str
    action: str
    duration_ms: float
    ok: bool
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type RuntimeEvent = (
    StateRegistered
    | ReactionRegistered
    | StateMerged
    | ReactionsNotified
    | ActionDispatched
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
