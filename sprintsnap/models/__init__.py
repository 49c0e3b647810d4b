"""Core data structures for sprintsnap."""

from sprintsnap.models.changes import (
    CLEARED,
    UNCHANGED,
    Added,
    ChangeRecord,
    ChangeType,
    Cleared,
    ContentPatch,
    Modified,
    Patch,
    Removed,
    SetTo,
    Snapshot,
    SnapshotEntry,
    Unchanged,
    change_type_of,
)
from sprintsnap.models.config import SprintSnapConfig
from sprintsnap.models.items import Comment, Content, Item, Milestone, Sprint

__all__ = [
    "CLEARED",
    "UNCHANGED",
    "Added",
    "ChangeRecord",
    "ChangeType",
    "Cleared",
    "Comment",
    "Content",
    "ContentPatch",
    "Item",
    "Milestone",
    "Modified",
    "Patch",
    "Removed",
    "SetTo",
    "Snapshot",
    "SnapshotEntry",
    "Sprint",
    "SprintSnapConfig",
    "Unchanged",
    "change_type_of",
]
