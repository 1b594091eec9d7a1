"""Shared test fixtures for snapstore."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from snapstore.runtime import StoreRuntime
from snapstore.state.container import StateContainer
from snapstore.state.snapshot import Snapshot


@dataclass(frozen=True, slots=True)
class Counter(Snapshot):
    """Minimal two-field state used across the test suite."""

    counter: int = 1
    enabled: bool = False


@dataclass(frozen=True, slots=True)
class Profile(Snapshot):
    """A second, independent state type."""

    name: str = ""
    age: int = 0


class Holder:
    """Bare store: anything exposing ``state`` can be dispatched against."""

    def __init__(self, container: StateContainer[Counter]) -> None:
        self._container = container

    @property
    def state(self) -> Counter:
        return self._container.state


@pytest.fixture
def runtime() -> StoreRuntime:
    return StoreRuntime()


@pytest.fixture
def container(runtime: StoreRuntime) -> StateContainer[Counter]:
    """Counter(counter=1, enabled=False) registered on ``runtime``."""
    return runtime.register_state(Counter())


@pytest.fixture
def holder(container: StateContainer[Counter]) -> Holder:
    return Holder(container)
