"""Store runtime — the top-level coordinator.

Owns one StateContainer per state type and the ReactionRegistry, and is the
single entry point for mutating state: ``dispatch(store, action)``.

Lifecycle::

    runtime = StoreRuntime(services=locator)
    container = runtime.register_state(CounterState(counter=1))
    enabled = runtime.value_reaction(CounterState, lambda s: s.enabled)
    await runtime.dispatch(store, MultiplyCounter(3))

There is no global runtime.  Stores and actions receive the runtime (or the
app state that owns it) explicitly.

Concurrency:
    Everything runs on one logical thread.  Within a dispatch, each merge
    commits and fans out immediately.  Two actions dispatched concurrently
    against the same state may interleave at their ``await`` points unless
    ``RuntimeConfig.serialize_dispatch`` is set, in which case a
    per-state-type ``asyncio.Lock`` is held for the whole action.  In that
    mode an action must not dispatch against its own state type.

"""

from __future__ import annotations

import asyncio
import inspect
import time
from contextlib import nullcontext
from typing import TYPE_CHECKING, Any

from snapstore._errors import DuplicateRegistration, TypeMismatch, UnregisteredState
from snapstore.config import RuntimeConfig
from snapstore.observability.collector import RuntimeCollector
from snapstore.observability.log import EventLog
from snapstore.reactive.reaction import EffectReaction, Reaction, ValueReaction
from snapstore.reactive.registry import ReactionRegistry
from snapstore.state.container import StateContainer
from snapstore.state.snapshot import Derivable

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from contextlib import AbstractAsyncContextManager

    from snapstore._types import ActionCallable, ServiceProvider, Topic


def _action_name(action: Any) -> str:
    """Human-readable action name for tracing."""
    name = getattr(action, "name", None) or getattr(action, "__name__", None)
    return name if isinstance(name, str) else type(action).__name__


class StoreRuntime:
    """Registry of state containers and reactions, plus action dispatch.

    Args:
        services: Service lookup passed through, untouched, to every action.
        config: Runtime behaviour switches.  Defaults to ``RuntimeConfig()``.
        collector: Event collector.  Created automatically when
            ``config.trace`` is set and none is given.

    """

    __slots__ = ("_collector", "_config", "_containers", "_locks", "_registry", "_services")

    def __init__(
        self,
        services: ServiceProvider | None = None,
        *,
        config: RuntimeConfig | None = None,
        collector: RuntimeCollector | None = None,
    ) -> None:
        self._services = services
        self._config = config if config is not None else RuntimeConfig()
        if collector is None and self._config.trace:
            collector = RuntimeCollector(EventLog(max_events=self._config.max_events))
        self._collector = collector
        self._containers: dict[type, StateContainer[Any]] = {}
        self._registry = ReactionRegistry(self._containers, fanout=self._config.fanout)
        self._locks: dict[type, asyncio.Lock] = {}

    @property
    def services(self) -> ServiceProvider | None:
        return self._services

    @property
    def config(self) -> RuntimeConfig:
        return self._config

    @property
    def collector(self) -> RuntimeCollector | None:
        """The event collector, or None when tracing is off."""
        return self._collector

    @property
    def registry(self) -> ReactionRegistry:
        return self._registry

    # ----- States -----

    def register_state[S](self, initial: S) -> StateContainer[S]:
        """Create the container for ``type(initial)``, seeded with ``initial``.

        Raises:
            DuplicateRegistration: A container for this type already exists.
            TypeMismatch: ``initial`` has no ``derive`` method.

        """
        state_type = type(initial)
        if state_type in self._containers:
            msg = f"state of type {state_type.__name__} already registered"
            raise DuplicateRegistration(msg)
        if not isinstance(initial, Derivable):
            msg = f"{state_type.__name__} does not implement derive()"
            raise TypeMismatch(msg)

        container = StateContainer(
            state_type,
            initial,
            self.notify_reactions,
            allow_reentrant=self._config.allow_reentrant_mutation,
            collector=self._collector,
        )
        self._containers[state_type] = container
        if self._collector is not None:
            self._collector.record_state(state_type)
        return container

    def container[S](self, state_type: type[S]) -> StateContainer[S]:
        """Return the container for ``state_type``.

        Raises:
            UnregisteredState: No container exists for ``state_type``.

        """
        try:
            return self._containers[state_type]
        except KeyError:
            msg = f"state of type {state_type.__name__} not registered"
            raise UnregisteredState(msg) from None

    def has_state(self, state_type: type) -> bool:
        return state_type in self._containers

    @property
    def state_types(self) -> tuple[type, ...]:
        """Registered state types, in registration order."""
        return tuple(self._containers)

    def unregister_state(self, state_type: type) -> bool:
        """Drop the container for ``state_type`` and every reaction on it.

        Returns False if ``state_type`` was not registered.
        """
        if self._containers.pop(state_type, None) is None:
            return False
        self._registry.remove_all_reactions(state_type)
        self._locks.pop(state_type, None)
        return True

    # ----- Reactions -----

    def value_reaction[S, T](
        self,
        state_type: type[S],
        projection: Callable[[S], T],
        *,
        topics: Iterable[Topic] | None = None,
    ) -> ValueReaction[S, T]:
        """Register a derived value over ``state_type``.

        Raises:
            UnregisteredState: ``state_type`` has not been registered yet.

        """
        reaction: ValueReaction[S, T] = ValueReaction(projection, topics)
        self.register_reaction(state_type, reaction)
        return reaction

    def effect_reaction[S](
        self,
        state_type: type[S],
        effect: Callable[[S], None],
        *,
        topics: Iterable[Topic] | None = None,
    ) -> EffectReaction[S]:
        """Register a side effect over ``state_type``.

        Raises:
            UnregisteredState: ``state_type`` has not been registered yet.

        """
        reaction: EffectReaction[S] = EffectReaction(effect, topics)
        self.register_reaction(state_type, reaction)
        return reaction

    def register_reaction(self, state_type: type, reaction: Reaction[Any]) -> None:
        """Subscribe an already-built reaction and deliver the current state."""
        self._registry.register(state_type, reaction)
        if self._collector is not None:
            kind = "value" if isinstance(reaction, ValueReaction) else "effect"
            self._collector.record_reaction(state_type, kind, reaction.topics)

    def remove_reaction(self, reaction: Reaction[Any]) -> bool:
        return self._registry.remove_reaction(reaction)

    def remove_all_reactions(self, state_type: type | None = None) -> int:
        return self._registry.remove_all_reactions(state_type)

    def notify_reactions(
        self,
        state_type: type,
        snapshot: Any,
        topics: Iterable[Topic],
    ) -> int:
        """Fan ``snapshot`` out to reactions on ``topics``.  Used by containers."""
        return self._registry.notify(state_type, snapshot, topics)

    # ----- Dispatch -----

    async def dispatch(self, store: Any, action: ActionCallable) -> None:
        """Run ``action(store, mutator, services)`` against the store's state.

        The state type is taken from ``type(store.state)``.  Errors raised by
        the action, or by reactions it triggers, propagate unchanged; the
        state stays as of the last merge that committed.

        Raises:
            UnregisteredState: The store's state type has no container.

        """
        state_type = type(store.state)
        container = self.container(state_type)

        lock: AbstractAsyncContextManager[Any] = nullcontext()
        if self._config.serialize_dispatch:
            if state_type not in self._locks:
                self._locks[state_type] = asyncio.Lock()
            lock = self._locks[state_type]

        t0 = time.perf_counter()
        ok = False
        try:
            async with lock:
                result = action(store, container, self._services)
                if inspect.isawaitable(result):
                    await result
            ok = True
        finally:
            if self._collector is not None:
                self._collector.record_dispatch(
                    state_type,
                    _action_name(action),
                    duration_ms=(time.perf_counter() - t0) * 1000,
                    ok=ok,
                )

    def __repr__(self) -> str:
        names = ", ".join(t.__name__ for t in self._containers)
        return f"StoreRuntime(states=[{names}], reactions={len(self._registry)})"
