"""Immutable snapshots and field-level derivation.

A snapshot is a frozen value.  State never changes in place: every merge
derives a brand-new snapshot from a mapping of field name to new value and
leaves the previous one untouched.

Snapshot types declare themselves as frozen dataclasses and inherit
``derive`` from :class:`Snapshot`::

    @dataclass(frozen=True, slots=True)
    class CounterState(Snapshot):
        counter: int = 0
        enabled: bool = False

    CounterState().derive({"counter": 3})  # CounterState(counter=3, enabled=False)

Types that are not dataclasses (or that need custom rules, e.g. derived
fields) override ``derive`` themselves.  Anything with a compatible
``derive`` method satisfies :class:`Derivable`.
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any, Protocol, Self, runtime_checkable

from snapstore._errors import UnknownField

if TYPE_CHECKING:
    from snapstore._types import Changes, Topic

# Reserved topic: "any change at all".  Part of every emitted topic set.
SELF: Topic = "self"


@runtime_checkable
class Derivable(Protocol):
    """Anything that can produce a new value from named field changes."""

    def derive(self, changes: Changes) -> Any: ...


class Snapshot:
    """Base for immutable state types.

    Subclasses are expected to be frozen dataclasses.  ``derive`` validates
    the requested field names before copying, so a typo in a topic name
    fails loudly instead of silently producing an unchanged snapshot.

    """

    __slots__ = ()

    def derive(self, changes: Changes) -> Self:
        """Return a copy of this snapshot with ``changes`` applied.

        Fields not named in ``changes`` are carried over unchanged.

        Raises:
            UnknownField: If ``changes`` names a field this snapshot lacks.
            TypeError: If the subclass is not a dataclass.

        """
        if not dataclasses.is_dataclass(self):
            msg = (
                f"{type(self).__name__} is not a dataclass; "
                "override derive() to build new snapshots"
            )
            raise TypeError(msg)

        names = {f.name for f in dataclasses.fields(self) if f.init}
        unknown = [key for key in changes if key not in names]
        if unknown:
            msg = f"{type(self).__name__} has no field(s) {', '.join(sorted(unknown))}"
            raise UnknownField(msg)

        return dataclasses.replace(self, **changes)


def emitted_topics(changes: Changes) -> tuple[Topic, ...]:
    """Topics announced by a merge: ``SELF`` first, then each changed field.

    Order is stable (change-map insertion order) and duplicates are dropped.
    """
    topics: list[Topic] = [SELF]
    for key in changes:
        if key not in topics:
            topics.append(key)
    return tuple(topics)
