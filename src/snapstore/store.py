"""Stores and actions — the user-facing layer over the runtime.

A store owns one state type.  It seeds the state, declares its reactions,
and mutates the state only by running actions::

    class CounterStore(BaseStore[CounterState]):
        def init_state(self) -> CounterState:
            return CounterState(counter=1)

        def init_reactions(self) -> None:
            self.enabled = self.value_of(lambda s: s.enabled, topics={"enabled"})

        async def multiply(self, by: int) -> None:
            await self.run(MultiplyCounter(by))

Actions receive ``(store, mutator, services)``.  They may be plain or
async functions wrapped with :func:`action`, or :class:`StoreAction`
subclasses overriding ``perform``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from snapstore._errors import DuplicateRegistration, UnregisteredState

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from snapstore._types import ServiceProvider, Topic
    from snapstore.reactive.reaction import EffectReaction, Reaction, ValueReaction
    from snapstore.runtime import StoreRuntime
    from snapstore.state.container import StateContainer, StateMutator


class BaseStore[S](ABC):
    """A store bound to exactly one state type.

    The store is inert until :meth:`attach` binds it to a runtime, which
    registers the initial state and then runs :meth:`init_reactions`.
    Reading ``state`` or running actions before that raises
    ``UnregisteredState``.

    """

    def __init__(self) -> None:
        self._runtime: StoreRuntime | None = None
        self._container: StateContainer[S] | None = None
        self._reactions: list[Reaction[Any]] = []

    @abstractmethod
    def init_state(self) -> S:
        """Return the initial snapshot."""

    def init_reactions(self) -> None:  # noqa: B027
        """Declare reactions.  Called once, right after the state is registered."""

    def attach(self, runtime: StoreRuntime) -> None:
        """Register this store's state with ``runtime`` and declare reactions.

        If :meth:`init_reactions` raises, the reactions it had already
        declared and the state are removed from ``runtime``, and the store is
        left detached.

        Raises:
            DuplicateRegistration: The store is already attached, or its state
                type is already owned by another store.

        """
        if self._runtime is not None:
            msg = f"{type(self).__name__} is already attached to a runtime"
            raise DuplicateRegistration(msg)
        container = runtime.register_state(self.init_state())
        self._container = container
        self._runtime = runtime
        try:
            self.init_reactions()
        except BaseException:
            for reaction in self._reactions:
                runtime.remove_reaction(reaction)
            self._reactions.clear()
            runtime.unregister_state(container.state_type)
            self._runtime = None
            self._container = None
            raise

    @property
    def is_attached(self) -> bool:
        return self._runtime is not None

    @property
    def runtime(self) -> StoreRuntime:
        if self._runtime is None:
            msg = f"{type(self).__name__} is not attached to a runtime"
            raise UnregisteredState(msg)
        return self._runtime

    @property
    def state(self) -> S:
        """The current snapshot of this store's state."""
        if self._container is None:
            msg = f"{type(self).__name__} is not attached to a runtime"
            raise UnregisteredState(msg)
        return self._container.state

    @property
    def state_type(self) -> type[S]:
        return type(self.state)

    def value_of[T](
        self,
        projection: Callable[[S], T],
        topics: Iterable[Topic] | None = None,
    ) -> ValueReaction[S, T]:
        """Declare a derived value over this store's state."""
        reaction = self.runtime.value_reaction(self.state_type, projection, topics=topics)
        self._reactions.append(reaction)
        return reaction

    def effect_of(
        self,
        effect: Callable[[Any], None],
        topics: Iterable[Topic] | None = None,
        *,
        state_type: type | None = None,
    ) -> EffectReaction[Any]:
        """Declare a side effect, on this store's state or on ``state_type``.

        Observing another store's state requires that store to be attached
        first.
        """
        target = state_type if state_type is not None else self.state_type
        reaction = self.runtime.effect_reaction(target, effect, topics=topics)
        self._reactions.append(reaction)
        return reaction

    async def run(self, action: Callable[..., Awaitable[None] | None]) -> None:
        """Dispatch ``action`` against this store through the runtime."""
        await self.runtime.dispatch(self, action)


class StoreAction[T]:
    """A reusable unit of work against a store of type ``T``.

    Wrap a function::

        toggle = StoreAction(lambda store, mutator, services: ...)

    or subclass and override :meth:`perform`::

        class MultiplyCounter(StoreAction[CounterStore]):
            def __init__(self, multiplier: int) -> None:
                super().__init__()
                self.multiplier = multiplier

            def perform(self, store, mutator, services=None) -> None:
                mutator["counter"] = store.state.counter * self.multiplier

    ``perform`` may be a coroutine function; the runtime awaits it.

    """

    __slots__ = ("effect",)

    def __init__(
        self,
        effect: Callable[..., Awaitable[None] | None] | None = None,
    ) -> None:
        self.effect = effect

    @property
    def name(self) -> str:
        if type(self) is not StoreAction or self.effect is None:
            return type(self).__name__
        return getattr(self.effect, "__name__", type(self.effect).__name__)

    def perform(
        self,
        store: T,
        mutator: StateMutator,
        services: ServiceProvider | None = None,
    ) -> Awaitable[None] | None:
        if self.effect is None:
            msg = f"{type(self).__name__} has no effect; pass one or override perform()"
            raise NotImplementedError(msg)
        return self.effect(store, mutator, services)

    def __call__(
        self,
        store: T,
        mutator: StateMutator,
        services: ServiceProvider | None = None,
    ) -> Awaitable[None] | None:
        return self.perform(store, mutator, services)

    def __repr__(self) -> str:
        return f"StoreAction({self.name})"


def action[T](
    fn: Callable[[T, StateMutator, ServiceProvider | None], Awaitable[None] | None],
) -> StoreAction[T]:
    """Wrap ``fn(store, mutator, services)`` as a :class:`StoreAction`.

    Usable as a decorator.
    """
    return StoreAction(fn)
