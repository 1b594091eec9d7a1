"""Counter demo — a small store exercising every runtime feature.

Used by ``snapstore demo`` and handy as a reference for writing stores.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from snapstore.app import AppState
from snapstore.state.snapshot import Snapshot
from snapstore.store import BaseStore, StoreAction, action

if TYPE_CHECKING:
    from snapstore._types import ServiceProvider
    from snapstore.config import RuntimeConfig
    from snapstore.reactive.reaction import EffectReaction, ValueReaction
    from snapstore.state.container import StateMutator


@dataclass(frozen=True, slots=True)
class CounterState(Snapshot):
    counter: int = 1
    enabled: bool = False

    @property
    def controllable_counter(self) -> int:
        """The counter when enabled, otherwise zero."""
        return self.counter if self.enabled else 0


class CounterStore(BaseStore[CounterState]):
    """Counter with an on/off switch.

    Reactions:
        enabled: tracks ``enabled`` only.
        controllable_counter: recomputed on ``enabled`` or ``counter``.
        whole: the full snapshot, on any change.
        on_counter_change: appends to ``log`` whenever ``counter`` is merged.

    """

    enabled: ValueReaction[CounterState, bool]
    controllable_counter: ValueReaction[CounterState, int]
    whole: ValueReaction[CounterState, CounterState]
    on_counter_change: EffectReaction[CounterState]

    def __init__(self, initial: CounterState | None = None) -> None:
        super().__init__()
        self._initial = initial if initial is not None else CounterState()
        self.log: list[str] = []

    def init_state(self) -> CounterState:
        return self._initial

    def init_reactions(self) -> None:
        self.enabled = self.value_of(lambda s: s.enabled, topics={"enabled"})
        self.controllable_counter = self.value_of(
            lambda s: s.controllable_counter,
            topics={"enabled", "counter"},
        )
        self.whole = self.value_of(lambda s: s)
        self.on_counter_change = self.effect_of(
            lambda s: self.log.append(f"counter changed: {s.counter}"),
            topics={"counter"},
        )

    async def multiply(self, multiplier: int) -> None:
        await self.run(MultiplyCounter(multiplier))

    async def toggle(self) -> None:
        await self.run(toggle)


class MultiplyCounter(StoreAction[CounterStore]):
    """Multiply the counter by a fixed factor."""

    def __init__(self, multiplier: int) -> None:
        super().__init__()
        self.multiplier = multiplier

    def perform(
        self,
        store: CounterStore,
        mutator: StateMutator,
        services: ServiceProvider | None = None,
    ) -> None:
        mutator["counter"] = store.state.counter * self.multiplier


@action
def toggle(
    store: CounterStore,
    mutator: StateMutator,
    services: ServiceProvider | None = None,
) -> None:
    """Flip ``enabled``."""
    mutator.set("enabled", not store.state.enabled)


@dataclass(slots=True)
class DemoResult:
    """What ``run_demo`` observed."""

    final_state: CounterState
    log: list[str] = field(default_factory=list)
    enabled_values: list[bool] = field(default_factory=list)
    controllable_values: list[int] = field(default_factory=list)
    events: dict[str, Any] = field(default_factory=dict)


async def _run(app: AppState, multiplier: int) -> DemoResult:
    store = app.store(CounterStore)
    result = DemoResult(final_state=store.state, log=store.log)
    store.enabled.add_listener(result.enabled_values.append)
    store.controllable_counter.add_listener(result.controllable_values.append)

    await store.multiply(multiplier)
    await store.toggle()
    await store.multiply(multiplier)

    result.final_state = store.state
    collector = app.runtime.collector
    if collector is not None:
        result.events = collector.log.stats()
    return result


def run_demo(multiplier: int = 3, *, config: RuntimeConfig | None = None) -> DemoResult:
    """Multiply, toggle, multiply again; return what the reactions saw."""
    app = AppState(
        lambda app: app.register_store(CounterStore()),
        config=config,
    )
    return asyncio.run(_run(app, multiplier))
