"""Shared type definitions for snapstore."""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Literal

# Symbolic name of one field (or grouping of fields) of a snapshot
type Topic = str

# Field-name -> new value, applied by a single merge
type Changes = Mapping[Topic, Any]

# Notification fan-out strategy
type FanoutMode = Literal["once", "per_topic"]

# External service lookup, passed through to actions untouched
type ServiceProvider = Callable[..., Any]

# Listener on a derived value, called with the new value
type ValueListener = Callable[[Any], None]

# (store, mutator, services) -> None or awaitable
type ActionCallable = Callable[..., Awaitable[None] | None]

# Sink the containers call after every commit; returns reactions notified
type ReactionsNotifier = Callable[[type, Any, tuple[Topic, ...]], int]
