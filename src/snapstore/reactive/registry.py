"""Reaction registry — routes committed snapshots to interested reactions.

Layout::

    state type -> topic -> [reaction, reaction, ...]   (registration order)

A reaction subscribed to ``{"a", "b"}`` appears once in the ``a`` list and
once in the ``b`` list.  When a container commits, it hands the registry the
emitted topic set (``SELF`` first, then the changed fields) and the registry
walks those lists in order.

Fan-out modes:
    ``"once"``       Each reaction is notified at most once per commit, at the
                     position of the first touched topic it subscribes to.
    ``"per_topic"``  Each reaction is notified once per touched topic it
                     subscribes to, so a reaction on ``{"a", "b"}`` fires
                     twice for a merge of ``{"a": .., "b": ..}``.

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from snapstore._errors import ConfigError, UnregisteredState

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from snapstore._types import FanoutMode, Topic
    from snapstore.reactive.reaction import Reaction
    from snapstore.state.container import StateContainer

_FANOUT_MODES = ("once", "per_topic")


class ReactionRegistry:
    """Type-indexed table of topic subscriptions.

    Args:
        containers: Live view of the runtime's state containers, used to
            check registration and to deliver the initial snapshot.
        fanout: ``"once"`` or ``"per_topic"`` (see module docstring).

    """

    __slots__ = ("_containers", "_fanout", "_reactions")

    def __init__(
        self,
        containers: Mapping[type, StateContainer[Any]],
        *,
        fanout: FanoutMode = "once",
    ) -> None:
        if fanout not in _FANOUT_MODES:
            msg = f"fanout must be one of {_FANOUT_MODES}, got {fanout!r}"
            raise ConfigError(msg)
        self._containers = containers
        self._fanout = fanout
        self._reactions: dict[type, dict[Topic, list[Reaction[Any]]]] = {}

    @property
    def fanout(self) -> FanoutMode:
        return self._fanout

    def register(
        self,
        state_type: type,
        reaction: Reaction[Any],
    ) -> None:
        """Deliver the current snapshot to ``reaction`` once, then subscribe it.

        The reaction is subscribed to ``reaction.topics``.  If the first
        delivery raises, the error propagates and nothing is recorded.

        Raises:
            UnregisteredState: No container exists for ``state_type``.  Nothing
                is recorded in that case.

        """
        container = self._containers.get(state_type)
        if container is None:
            msg = f"state of type {state_type.__name__} not registered"
            raise UnregisteredState(msg)

        reaction.notify(container.state)

        by_topic = self._reactions.setdefault(state_type, {})
        for topic in reaction.topics:
            bucket = by_topic.setdefault(topic, [])
            if reaction not in bucket:
                bucket.append(reaction)

    def notify(
        self,
        state_type: type,
        snapshot: Any,
        topics: Iterable[Topic],
    ) -> int:
        """Deliver ``snapshot`` to every reaction on a touched topic.

        Unknown state types are a no-op, so a state may be mutated before
        anything subscribes to it.

        Returns:
            Number of ``notify`` calls made.

        """
        by_topic = self._reactions.get(state_type)
        if not by_topic:
            return 0

        # Snapshot the buckets first: a reaction may register another one
        # while being notified.
        targets: list[Reaction[Any]] = []
        if self._fanout == "per_topic":
            for topic in topics:
                targets.extend(by_topic.get(topic, ()))
        else:
            seen: set[int] = set()
            for topic in topics:
                for reaction in by_topic.get(topic, ()):
                    if id(reaction) not in seen:
                        seen.add(id(reaction))
                        targets.append(reaction)

        for reaction in targets:
            reaction.notify(snapshot)
        return len(targets)

    def reactions_for(self, state_type: type, topic: Topic) -> tuple[Reaction[Any], ...]:
        """Reactions subscribed to ``topic`` of ``state_type``, in order."""
        return tuple(self._reactions.get(state_type, {}).get(topic, ()))

    def topics_for(self, state_type: type) -> frozenset[Topic]:
        """Topics of ``state_type`` that have at least one subscriber."""
        return frozenset(
            topic
            for topic, bucket in self._reactions.get(state_type, {}).items()
            if bucket
        )

    def remove_reaction(self, reaction: Reaction[Any]) -> bool:
        """Unsubscribe ``reaction`` from every topic of every state type.

        Returns:
            True if it was subscribed anywhere.

        """
        removed = False
        for by_topic in self._reactions.values():
            for topic in list(by_topic):
                bucket = by_topic[topic]
                if reaction in bucket:
                    bucket.remove(reaction)
                    removed = True
                if not bucket:
                    del by_topic[topic]
        return removed

    def remove_all_reactions(self, state_type: type | None = None) -> int:
        """Drop every subscription (for one state type, or all of them).

        Returns:
            Number of distinct reactions removed.

        """
        if state_type is None:
            tables = list(self._reactions.values())
            self._reactions.clear()
        else:
            table = self._reactions.pop(state_type, None)
            tables = [table] if table is not None else []

        distinct = {
            id(reaction)
            for by_topic in tables
            for bucket in by_topic.values()
            for reaction in bucket
        }
        return len(distinct)

    def __len__(self) -> int:
        return len(
            {
                id(reaction)
                for by_topic in self._reactions.values()
                for bucket in by_topic.values()
                for reaction in bucket
            }
        )
