"""State layer — immutable snapshots and the containers that own them."""

from snapstore.state.container import StateContainer, StateMutator, StateProvider
from snapstore.state.snapshot import SELF, Derivable, Snapshot, emitted_topics

__all__ = [
    "SELF",
    "Derivable",
    "Snapshot",
    "StateContainer",
    "StateMutator",
    "StateProvider",
    "emitted_topics",
]
