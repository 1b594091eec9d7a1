"""Runtime collector — typed recording helpers over the event log.

The runtime and its containers call these methods when tracing is enabled.
Each helper stamps the event with ``now_ns()`` and the state type's name.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from snapstore.observability.events import (
    ActionDispatched,
    ReactionRegistered,
    ReactionsNotified,
    StateMerged,
    StateRegistered,
    now_ns,
)
from snapstore.observability.log import EventLog

if TYPE_CHECKING:
    from collections.abc import Iterable


class RuntimeCollector:
    """Event collector for one runtime.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Registration -----

    def record_state(self, state_type: type) -> None:
        """Record creation of a state container."""
        self._log.append(
            StateRegistered(state=state_type.__name__, timestamp_ns=now_ns())
        )

    def record_reaction(
        self,
        state_type: type,
        kind: str,
        topics: Iterable[str],
    ) -> None:
        """Record a reaction subscription."""
        self._log.append(
            ReactionRegistered(
                state=state_type.__name__,
                kind=kind,  # type: ignore[arg-type]
                topics=tuple(sorted(topics)),
                timestamp_ns=now_ns(),
            )
        )

    # ----- Mutation -----

    def record_merge(
        self,
        state_type: type,
        topics: Iterable[str],
        *,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a committed merge."""
        self._log.append(
            StateMerged(
                state=state_type.__name__,
                topics=tuple(topics),
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_notify(
        self,
        state_type: type,
        topics: Iterable[str],
        *,
        reactions_notified: int = 0,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a finished fan-out."""
        self._log.append(
            ReactionsNotified(
                state=state_type.__name__,
                topics=tuple(topics),
                reactions_notified=reactions_notified,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    # ----- Dispatch -----

    def record_dispatch(
        self,
        state_type: type,
        action: str,
        *,
        duration_ms: float = 0.0,
        ok: bool = True,
    ) -> None:
        """Record a completed (or failed) action dispatch."""
        self._log.append(
            ActionDispatched(
                state=state_type.__name__,
                action=action,
                duration_ms=duration_ms,
                ok=ok,
                timestamp_ns=now_ns(),
            )
        )
