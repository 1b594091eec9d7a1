"""Tests for snapstore.state.container — atomic derive-and-commit."""

from __future__ import annotations

from typing import Any

import pytest

from snapstore._errors import ReentrantMutation, TypeMismatch, UnknownField
from snapstore.state.container import StateContainer
from snapstore.state.snapshot import SELF
from tests.conftest import Counter, Profile

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class Sink:
    """Records every notification a container sends."""

    def __init__(self) -> None:
        self.calls: list[tuple[type, Any, tuple[str, ...]]] = []

    def __call__(self, state_type: type, snapshot: Any, topics: tuple[str, ...]) -> int:
        self.calls.append((state_type, snapshot, topics))
        return 0


def _container(initial: Counter | None = None) -> tuple[StateContainer[Counter], Sink]:
    sink = Sink()
    return StateContainer(Counter, initial or Counter(), sink), sink


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestRead:
    def test_read_and_state_agree(self) -> None:
        c, _ = _container(Counter(counter=4))
        assert c.read() is c.state
        assert c.state == Counter(counter=4)

    def test_initial_must_match_type(self) -> None:
        with pytest.raises(TypeMismatch):
            StateContainer(Counter, Profile(), Sink())  # type: ignore[arg-type]


class TestMergeForms:
    """Every mutator form routes through the same commit path."""

    def test_merge(self) -> None:
        c, sink = _container()
        c.merge({"counter": 3, "enabled": True})
        assert c.state == Counter(counter=3, enabled=True)
        assert sink.calls[-1][2] == (SELF, "counter", "enabled")

    def test_set(self) -> None:
        c, sink = _container()
        c.set("counter", 7)
        assert c.state.counter == 7
        assert sink.calls[-1][2] == (SELF, "counter")

    def test_setitem(self) -> None:
        c, _ = _container()
        c["enabled"] = True
        assert c.state.enabled is True

    def test_changes_setter(self) -> None:
        c, _ = _container()
        c.changes = {"counter": 9}
        assert c.state.counter == 9

    def test_changes_is_write_only(self) -> None:
        c, _ = _container()
        with pytest.raises(AttributeError):
            c.changes  # noqa: B018


class TestCommit:
    def test_each_merge_replaces_snapshot(self) -> None:
        c, _ = _container()
        first = c.state
        c.set("counter", 2)
        assert c.state is not first
        assert first.counter == 1

    def test_notifies_with_new_snapshot(self) -> None:
        c, sink = _container()
        c.set("counter", 5)
        state_type, snapshot, _ = sink.calls[0]
        assert state_type is Counter
        assert snapshot is c.state

    def test_equal_snapshot_still_notifies(self) -> None:
        """No short-circuit at the container level."""
        c, sink = _container()
        c.set("counter", 1)
        c.set("counter", 1)
        assert len(sink.calls) == 2

    def test_unknown_field_leaves_state_unchanged(self) -> None:
        c, sink = _container(Counter(counter=2))
        before = c.state
        with pytest.raises(UnknownField):
            c.merge({"counter": 3, "bogus": 1})
        assert c.state is before
        assert sink.calls == []

    def test_derive_returning_wrong_type_is_rejected(self) -> None:
        class Bad:
            def derive(self, changes: Any) -> Any:
                return Profile()

        c = StateContainer(Bad, Bad(), Sink())
        before = c.state
        with pytest.raises(TypeMismatch, match="Bad.derive"):
            c.set("anything", 1)
        assert c.state is before

    def test_failing_notifier_keeps_committed_state(self) -> None:
        """The snapshot is committed before fan-out; a failing reaction does not roll it back."""

        def boom(*_: Any) -> int:
            raise RuntimeError("reaction failed")

        c = StateContainer(Counter, Counter(), boom)
        with pytest.raises(RuntimeError):
            c.set("counter", 4)
        assert c.state.counter == 4
        assert not c.is_notifying


class TestReentrancy:
    def test_reentrant_merge_rejected_by_default(self) -> None:
        holder: list[StateContainer[Counter]] = []

        def notifier(state_type: type, snapshot: Counter, topics: tuple[str, ...]) -> int:
            holder[0].set("enabled", True)
            return 1

        c = StateContainer(Counter, Counter(), notifier)
        holder.append(c)
        with pytest.raises(ReentrantMutation):
            c.set("counter", 2)
        assert c.state == Counter(counter=2, enabled=False)

    def test_reentrant_merge_allowed_when_enabled(self) -> None:
        holder: list[StateContainer[Counter]] = []
        seen: list[Counter] = []

        def notifier(state_type: type, snapshot: Counter, topics: tuple[str, ...]) -> int:
            seen.append(snapshot)
            if "counter" in topics:
                holder[0].set("enabled", True)
            return 1

        c = StateContainer(Counter, Counter(), notifier, allow_reentrant=True)
        holder.append(c)
        c.set("counter", 2)
        assert c.state == Counter(counter=2, enabled=True)
        assert seen == [Counter(counter=2), Counter(counter=2, enabled=True)]
