"""Tests for snapstore.reactive.reaction — value and effect reactions."""

from __future__ import annotations

import pytest

from snapstore.reactive.reaction import EffectReaction, ValueReaction, normalize_topics
from snapstore.state.snapshot import SELF
from tests.conftest import Counter


class TestNormalizeTopics:
    def test_none_defaults_to_self(self) -> None:
        assert normalize_topics(None) == frozenset({SELF})

    def test_empty_defaults_to_self(self) -> None:
        assert normalize_topics(set()) == frozenset({SELF})

    def test_string_is_one_topic(self) -> None:
        assert normalize_topics("counter") == frozenset({"counter"})

    def test_iterable(self) -> None:
        assert normalize_topics(["a", "b", "a"]) == frozenset({"a", "b"})


class TestValueReaction:
    """Cached projection; listeners only see actual changes."""

    def test_value_none_before_first_notify(self) -> None:
        r = ValueReaction(lambda s: s.counter)
        assert r.value is None
        assert r.has_value is False

    def test_notify_computes_value(self) -> None:
        r = ValueReaction(lambda s: s.counter * 10)
        r.notify(Counter(counter=2))
        assert r.value == 20
        assert r.has_value is True

    def test_listener_receives_new_value(self) -> None:
        r = ValueReaction(lambda s: s.counter)
        r.notify(Counter(counter=1))
        seen: list[int] = []
        r.add_listener(seen.append)
        r.notify(Counter(counter=5))
        assert seen == [5]

    def test_unchanged_value_does_not_fire(self) -> None:
        r = ValueReaction(lambda s: s.enabled)
        r.notify(Counter())
        seen: list[bool] = []
        r.add_listener(seen.append)
        r.notify(Counter(counter=2))
        r.notify(Counter(counter=3))
        assert seen == []

    def test_dedup_fires_once_for_repeated_value(self) -> None:
        r = ValueReaction(lambda s: s.enabled)
        r.notify(Counter())
        seen: list[bool] = []
        r.add_listener(seen.append)
        r.notify(Counter(enabled=True))
        r.notify(Counter(enabled=True, counter=9))
        assert seen == [True]

    def test_first_projection_of_none_is_cached(self) -> None:
        """A projection that starts at None still counts as computed."""
        r = ValueReaction(lambda s: None if not s.enabled else s.counter)
        r.notify(Counter())
        assert r.has_value is True
        seen: list[object] = []
        r.add_listener(seen.append)
        r.notify(Counter(counter=4))
        assert seen == []

    def test_remove_listener(self) -> None:
        r = ValueReaction(lambda s: s.counter)
        seen: list[int] = []
        r.add_listener(seen.append)
        r.remove_listener(seen.append)
        r.notify(Counter(counter=3))
        assert seen == []
        assert r.listener_count == 0

    def test_remove_unknown_listener_is_ignored(self) -> None:
        r = ValueReaction(lambda s: s.counter)
        r.remove_listener(print)

    def test_listener_can_unsubscribe_itself(self) -> None:
        r = ValueReaction(lambda s: s.counter)
        calls: list[int] = []

        def once(value: int) -> None:
            calls.append(value)
            r.remove_listener(once)

        r.add_listener(once)
        r.notify(Counter(counter=2))
        r.notify(Counter(counter=3))
        assert calls == [2]

    def test_listener_error_propagates(self) -> None:
        r = ValueReaction(lambda s: s.counter)

        def fail(_: int) -> None:
            raise ValueError("listener")

        r.add_listener(fail)
        with pytest.raises(ValueError, match="listener"):
            r.notify(Counter(counter=2))

    def test_default_topics(self) -> None:
        assert ValueReaction(lambda s: s).topics == frozenset({SELF})


class TestEffectReaction:
    """Unconditional side effects."""

    def test_runs_every_time(self) -> None:
        seen: list[Counter] = []
        r = EffectReaction(seen.append, topics={"counter"})
        r.notify(Counter())
        r.notify(Counter())
        assert seen == [Counter(), Counter()]

    def test_error_propagates(self) -> None:
        def fail(_: Counter) -> None:
            raise RuntimeError("effect")

        r = EffectReaction(fail)
        with pytest.raises(RuntimeError, match="effect"):
            r.notify(Counter())

    def test_repr_names_effect(self) -> None:
        def on_change(_: Counter) -> None:
            pass

        assert "on_change" in repr(EffectReaction(on_change, topics={"counter"}))
