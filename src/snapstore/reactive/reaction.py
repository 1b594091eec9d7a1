"""Reactions — subscribers bound to a set of topics of one state type.

Two variants:
- ValueReaction: projects the snapshot to a derived value, caches it, and
  tells its own listeners only when the value actually changes.
- EffectReaction: runs a side effect on every relevant notification.

Both expose ``notify(snapshot)``, which is all the registry relies on.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from snapstore.state.snapshot import SELF

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from snapstore._types import Topic, ValueListener

# Marker for "projection never ran"
_UNSET: Any = object()


def normalize_topics(topics: Iterable[Topic] | None) -> frozenset[Topic]:
    """Return ``topics`` as a frozenset, defaulting to ``{SELF}``.

    A bare string is treated as a single topic, not as a set of characters.
    An empty collection also falls back to ``{SELF}``.
    """
    if topics is None:
        return frozenset({SELF})
    if isinstance(topics, str):
        return frozenset({topics})
    result = frozenset(topics)
    return result or frozenset({SELF})


class Reaction[S](ABC):
    """Base for everything the registry can notify.

    Attributes:
        topics: Topics this reaction is subscribed to (never empty).

    """

    __slots__ = ("topics",)

    def __init__(self, topics: Iterable[Topic] | None = None) -> None:
        self.topics = normalize_topics(topics)

    @abstractmethod
    def notify(self, snapshot: S) -> None:
        """Deliver a freshly committed snapshot."""


class ValueReaction[S, T](Reaction[S]):
    """A derived value recomputed from the snapshot on relevant changes.

    Listeners receive the new value and are only called when the projection
    result differs (``!=``) from the cached one::

        enabled = runtime.value_reaction(CounterState, lambda s: s.enabled,
                                         topics={"enabled"})
        enabled.add_listener(lambda value: print("enabled ->", value))
        enabled.value  # always the latest projection

    """

    __slots__ = ("_listeners", "_value", "projection")

    def __init__(
        self,
        projection: Callable[[S], T],
        topics: Iterable[Topic] | None = None,
    ) -> None:
        super().__init__(topics)
        self.projection = projection
        self._value: T = _UNSET
        self._listeners: list[ValueListener] = []

    @property
    def value(self) -> T:
        """The latest projected value (``None`` before the first delivery)."""
        return None if self._value is _UNSET else self._value  # type: ignore[return-value]

    @property
    def has_value(self) -> bool:
        """True once the projection has run at least once."""
        return self._value is not _UNSET

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_listener(self, listener: ValueListener) -> None:
        """Call ``listener(new_value)`` whenever the value changes."""
        self._listeners.append(listener)

    def remove_listener(self, listener: ValueListener) -> None:
        """Stop calling ``listener``.  Unknown listeners are ignored."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def notify(self, snapshot: S) -> None:
        new_value = self.projection(snapshot)
        if self._value is not _UNSET and new_value == self._value:
            return
        self._value = new_value
        # Copy: a listener may unsubscribe itself while being called
        for listener in tuple(self._listeners):
            listener(new_value)

    def __repr__(self) -> str:
        topics = ", ".join(sorted(self.topics))
        return f"ValueReaction(value={self.value!r}, topics={{{topics}}})"


class EffectReaction[S](Reaction[S]):
    """A side effect run on every notification for a subscribed topic.

    Errors raised by the effect propagate to whoever triggered the merge.

    """

    __slots__ = ("effect",)

    def __init__(
        self,
        effect: Callable[[S], None],
        topics: Iterable[Topic] | None = None,
    ) -> None:
        super().__init__(topics)
        self.effect = effect

    def notify(self, snapshot: S) -> None:
        self.effect(snapshot)

    def __repr__(self) -> str:
        name = getattr(self.effect, "__name__", type(self.effect).__name__)
        topics = ", ".join(sorted(self.topics))
        return f"EffectReaction({name}, topics={{{topics}}})"
