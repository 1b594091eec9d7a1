"""Snapstore configuration.

RuntimeConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass

from snapstore._errors import ConfigError
from snapstore._types import FanoutMode

_FANOUT_MODES = ("once", "per_topic")


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Configuration for a StoreRuntime.

    Attributes:
        fanout: ``"once"`` notifies each reaction at most once per merge;
            ``"per_topic"`` notifies it once for every touched topic it
            subscribes to.
        allow_reentrant_mutation: Allow reactions to merge into the state
            that is currently notifying them.  Off by default, in which case
            such merges raise ``ReentrantMutation``.
        serialize_dispatch: Hold a per-state-type ``asyncio.Lock`` for the
            whole of each dispatch so concurrent actions on one state never
            interleave.
        trace: Record runtime events in the collector's event log.
        max_events: Capacity of the event log ring buffer.

    """

    fanout: FanoutMode = "once"
    allow_reentrant_mutation: bool = False
    serialize_dispatch: bool = False
    trace: bool = False
    max_events: int = 10_000

    def __post_init__(self) -> None:
        if self.fanout not in _FANOUT_MODES:
            msg = f"fanout must be one of {_FANOUT_MODES}, got {self.fanout!r}"
            raise ConfigError(msg)
        if not isinstance(self.max_events, int) or self.max_events <= 0:
            msg = f"max_events must be a positive integer, got {self.max_events!r}"
            raise ConfigError(msg)
