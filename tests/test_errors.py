"""Tests for snapstore._errors."""

from snapstore._errors import (
    ConfigError,
    DuplicateRegistration,
    ReentrantMutation,
    SnapStoreError,
    TypeMismatch,
    UnknownField,
    UnregisteredState,
)


class TestErrorHierarchy:
    """All snapstore errors inherit from SnapStoreError."""

    def test_snapstore_error_is_exception(self) -> None:
        assert issubclass(SnapStoreError, Exception)

    def test_type_mismatch_is_type_error(self) -> None:
        assert issubclass(TypeMismatch, TypeError)

    def test_unknown_field_is_key_error(self) -> None:
        assert issubclass(UnknownField, KeyError)

    def test_catch_all_snapstore_errors(self) -> None:
        """All specific errors are catchable via SnapStoreError."""
        for error_cls in (
            ConfigError,
            DuplicateRegistration,
            ReentrantMutation,
            TypeMismatch,
            UnknownField,
            UnregisteredState,
        ):
            try:
                raise error_cls("test")
            except SnapStoreError:
                pass
