"""State container — the single owner of one state type's live snapshot.

The container is the only place a snapshot is ever replaced.  Each merge
derives a new snapshot, commits it, and hands the emitted topic set to the
notification sink (the runtime's reaction registry).

Commit is all-or-nothing: if derivation raises or produces a value of the
wrong type, the current snapshot is left exactly as it was and nothing is
notified.

Reentrancy:
    Fan-out is synchronous.  A reaction that merges into the *same*
    container while it is notifying raises :class:`ReentrantMutation`
    unless the container was built with ``allow_reentrant=True``, in which
    case the nested merge commits and fans out depth-first.

"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Protocol

from snapstore._errors import ReentrantMutation, TypeMismatch
from snapstore.state.snapshot import emitted_topics

if TYPE_CHECKING:
    from snapstore._types import Changes, ReactionsNotifier, Topic
    from snapstore.observability.collector import RuntimeCollector


class StateProvider[S](Protocol):
    """Read access to the current snapshot."""

    @property
    def state(self) -> S: ...


class StateMutator(Protocol):
    """Update handle passed to actions.

    All forms route through the same derive-and-commit path::

        mutator["counter"] = 3
        mutator.set("counter", 3)
        mutator.merge({"counter": 3, "enabled": True})
        mutator.changes = {"counter": 3}

    """

    def merge(self, changes: Changes) -> None: ...

    def set(self, topic: Topic, value: Any) -> None: ...

    def __setitem__(self, topic: Topic, value: Any) -> None: ...


class StateContainer[S]:
    """Owns the current snapshot for one state type.

    Args:
        state_type: The snapshot class this container is responsible for.
        initial: Seed snapshot (must be an instance of ``state_type``).
        notifier: Called as ``notifier(state_type, snapshot, topics)`` after
            every successful commit.
        allow_reentrant: Permit merges from inside this container's own
            notification fan-out.
        collector: Optional event collector for tracing merges.

    """

    __slots__ = (
        "_allow_reentrant",
        "_collector",
        "_notifier",
        "_notifying",
        "_state",
        "_state_type",
    )

    def __init__(
        self,
        state_type: type[S],
        initial: S,
        notifier: ReactionsNotifier,
        *,
        allow_reentrant: bool = False,
        collector: RuntimeCollector | None = None,
    ) -> None:
        if not isinstance(initial, state_type):
            msg = (
                f"initial state {type(initial).__name__} is not an instance "
                f"of {state_type.__name__}"
            )
            raise TypeMismatch(msg)
        self._state_type = state_type
        self._state = initial
        self._notifier = notifier
        self._allow_reentrant = allow_reentrant
        self._collector = collector
        self._notifying = 0

    @property
    def state_type(self) -> type[S]:
        """The snapshot class owned by this container."""
        return self._state_type

    @property
    def state(self) -> S:
        """The current snapshot."""
        return self._state

    def read(self) -> S:
        """Return the current snapshot."""
        return self._state

    @property
    def is_notifying(self) -> bool:
        """True while a fan-out triggered by this container is running."""
        return self._notifying > 0

    # ----- StateMutator -----

    def merge(self, changes: Changes) -> None:
        """Apply ``changes`` atomically and notify interested reactions."""
        self._merge(changes)

    def set(self, topic: Topic, value: Any) -> None:
        """Apply a single field change."""
        self._merge({topic: value})

    def __setitem__(self, topic: Topic, value: Any) -> None:
        self._merge({topic: value})

    @property
    def changes(self) -> None:
        msg = "changes is write-only; read fields from the state instead"
        raise AttributeError(msg)

    @changes.setter
    def changes(self, changes: Changes) -> None:
        self._merge(changes)

    # ----- internals -----

    def _merge(self, changes: Changes) -> None:
        if self._notifying and not self._allow_reentrant:
            msg = (
                f"merge into {self._state_type.__name__} while its reactions "
                "are being notified"
            )
            raise ReentrantMutation(msg)

        t0 = time.perf_counter()
        new_state = self._state.derive(changes)
        if not isinstance(new_state, self._state_type):
            msg = (
                f"{self._state_type.__name__}.derive() returned "
                f"{type(new_state).__name__}"
            )
            raise TypeMismatch(msg)

        self._state = new_state
        topics = emitted_topics(changes)
        if self._collector is not None:
            self._collector.record_merge(
                self._state_type,
                topics,
                duration_ms=(time.perf_counter() - t0) * 1000,
            )

        t1 = time.perf_counter()
        self._notifying += 1
        try:
            notified = self._notifier(self._state_type, new_state, topics)
        finally:
            self._notifying -= 1

        if self._collector is not None:
            self._collector.record_notify(
                self._state_type,
                topics,
                reactions_notified=notified,
                duration_ms=(time.perf_counter() - t1) * 1000,
            )

    def __repr__(self) -> str:
        return f"StateContainer({self._state_type.__name__}, {self._state!r})"
