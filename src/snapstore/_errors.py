"""Snapstore error hierarchy.

All snapstore-specific errors inherit from SnapStoreError for easy catching.
They signal programmer errors and are raised at the point of violation.
"""


class SnapStoreError(Exception):
    """Base error for all snapstore operations."""


class ConfigError(SnapStoreError):
    """Invalid or unreadable runtime configuration."""


class DuplicateRegistration(SnapStoreError):
    """A state type or store type was registered twice."""


class UnregisteredState(SnapStoreError):
    """A state or store type was referenced before it was registered."""


class TypeMismatch(SnapStoreError, TypeError):
    """A derive operation returned a value not of the owning state type."""


class UnknownField(SnapStoreError, KeyError):
    """A change map named a field the snapshot does not have."""


class ReentrantMutation(SnapStoreError):
    """A merge was issued on a container while it was notifying reactions."""
