"""Reactive layer — topic-scoped subscribers and their registry.

Containers announce which topics a merge touched; the registry routes the
new snapshot to every reaction subscribed to one of those topics.
"""

from snapstore.reactive.reaction import EffectReaction, Reaction, ValueReaction
from snapstore.reactive.registry import ReactionRegistry

__all__ = [
    "EffectReaction",
    "Reaction",
    "ReactionRegistry",
    "ValueReaction",
]
