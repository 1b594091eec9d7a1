"""Tests for snapstore.demo — the bundled counter store."""

from __future__ import annotations

import pytest

from snapstore.app import AppState
from snapstore.config import RuntimeConfig
from snapstore.demo import CounterState, CounterStore, run_demo


@pytest.fixture
def store() -> CounterStore:
    app = AppState(lambda app: app.register_store(CounterStore()))
    return app.store(CounterStore)


class TestCounterStore:
    def test_initial_reaction_values(self, store: CounterStore) -> None:
        assert store.enabled.value is False
        assert store.controllable_counter.value == 0
        assert store.whole.value == CounterState()
        assert store.log == ["counter changed: 1"]

    @pytest.mark.asyncio
    async def test_multiply_updates_counter_reactions_only(self, store: CounterStore) -> None:
        enabled: list[bool] = []
        store.enabled.add_listener(enabled.append)

        await store.multiply(3)

        assert store.state == CounterState(counter=3, enabled=False)
        assert store.log[-1] == "counter changed: 3"
        assert enabled == []
        assert store.controllable_counter.value == 0  # disabled, unchanged
        assert store.whole.value == store.state

    @pytest.mark.asyncio
    async def test_toggle_does_not_fire_counter_effect(self, store: CounterStore) -> None:
        await store.toggle()
        assert store.log == ["counter changed: 1"]
        assert store.enabled.value is True
        assert store.controllable_counter.value == 1


class TestRunDemo:
    def test_run_demo(self) -> None:
        result = run_demo(3)
        assert result.final_state == CounterState(counter=9, enabled=True)
        assert result.log == [
            "counter changed: 1",
            "counter changed: 3",
            "counter changed: 9",
        ]
        assert result.enabled_values == [True]
        assert result.controllable_values == [3, 9]
        assert result.events == {}

    def test_run_demo_traced(self) -> None:
        result = run_demo(2, config=RuntimeConfig(trace=True))
        assert result.events["by_type"]["ActionDispatched"] == 3
