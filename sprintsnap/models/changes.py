"""Change records, field patches and snapshots.

A snapshot log is a baseline of full ``Item`` values followed by snapshots of
change records.  Change records form a closed variant:

    Added     -- an item appeared; carries the whole item.
    Modified  -- an item changed; every field is a patch.
    Removed   -- an item disappeared; carries id and title only.

Each field of a ``Modified`` record is one of ``Unchanged``, ``Cleared`` or
``SetTo(value)``, so "not touched" and "explicitly emptied" never share a
representation.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from enum import StrEnum
from typing import Any, ClassVar, Generic, TypeAlias, TypeVar

from sprintsnap.models.items import Comment, Item, Milestone, Sprint

T = TypeVar("T")


class ChangeType(StrEnum):
    """Kind of a snapshot entry."""

    BASELINE = "baseline"  # full item, serialized without a changeType key
    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"


@dataclass(frozen=True)
class Unchanged:
    """Field keeps its base value."""


@dataclass(frozen=True)
class Cleared:
    """Field becomes unset."""


@dataclass(frozen=True)
class SetTo(Generic[T]):
    """Field takes ``value``."""

    value: T


UNCHANGED = Unchanged()
CLEARED = Cleared()

Patch: TypeAlias = Unchanged | Cleared | SetTo[Any]


@dataclass(frozen=True)
class ContentPatch:
    """Changed leaves of an item's content.  Only body and title are tracked."""

    body: Unchanged | SetTo[str] = UNCHANGED
    title: Unchanged | SetTo[str] = UNCHANGED

    def is_empty(self) -> bool:
        return self.body == UNCHANGED and self.title == UNCHANGED


@dataclass(frozen=True)
class Added:
    """An item that was not part of the previous state."""

    change_type: ClassVar[ChangeType] = ChangeType.ADDED

    item: Item

    @property
    def id(self) -> str:
        return self.item.id


@dataclass(frozen=True)
class Modified:
    """The fields of an existing item that differ from the previous state."""

    change_type: ClassVar[ChangeType] = ChangeType.MODIFIED

    id: str
    title: Unchanged | SetTo[str] = UNCHANGED
    content: ContentPatch | None = None
    estimate: Unchanged | Cleared | SetTo[int] = UNCHANGED
    labels: Unchanged | SetTo[tuple[str, ...]] = UNCHANGED
    milestone: Unchanged | Cleared | SetTo[Milestone] = UNCHANGED
    sprint: Unchanged | Cleared | SetTo[Sprint] = UNCHANGED
    status: Unchanged | Cleared | SetTo[str] = UNCHANGED
    assignees: Unchanged | SetTo[tuple[str, ...]] = UNCHANGED
    comments: Unchanged | SetTo[tuple[Comment, ...]] = UNCHANGED

    def is_noop(self) -> bool:
        """True when the record would not change any item."""
        for f in fields(self):
            if f.name == "id":
                continue
            value = getattr(self, f.name)
            if f.name == "content":
                if value is not None and not value.is_empty():
                    return False
            elif value != UNCHANGED:
                return False
        return True


@dataclass(frozen=True)
class Removed:
    """Tombstone for an item that disappeared.  ``title`` is informational."""

    change_type: ClassVar[ChangeType] = ChangeType.REMOVED

    id: str
    title: str = ""


ChangeRecord: TypeAlias = Added | Modified | Removed
SnapshotEntry: TypeAlias = Item | Added | Modified | Removed


def change_type_of(entry: SnapshotEntry) -> ChangeType:
    """Return the change type of a snapshot entry; full items are baseline."""
    if isinstance(entry, Item):
        return ChangeType.BASELINE
    return entry.change_type


@dataclass(frozen=True)
class Snapshot:
    """One element of the snapshot log."""

    timestamp: datetime
    entries: tuple[SnapshotEntry, ...] = ()

    @property
    def is_baseline(self) -> bool:
        return all(isinstance(e, Item) for e in self.entries)
