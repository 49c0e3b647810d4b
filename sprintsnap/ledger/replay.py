"""State reconstruction by replaying a snapshot log.

The first snapshot is the baseline and is taken as-is: every entry seeds an
item whatever its change type, a tombstone contributing its id and title.
Every later snapshot is replayed entry by entry in log order:

    Removed   -- the id is dropped.
    Added     -- the item is inserted unless the id already exists, so a
                 duplicate add replayed twice never overwrites newer state.
    Modified  -- merged onto the current item.  A record for an id that is
                 not present is treated as an implicit add onto an empty item.
    Item      -- a baseline-shaped entry after the baseline; its non-empty
                 fields are overlaid onto the current item.

Reconstructed states are returned sorted by id.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

import structlog

from sprintsnap.errors import EmptyLogError
from sprintsnap.ledger.diff import compute_changes
from sprintsnap.ledger.merge import apply_change, overlay_item
from sprintsnap.models.changes import Added, Modified, Removed, Snapshot, SnapshotEntry
from sprintsnap.models.items import Item

_log = structlog.get_logger(component="ledger.replay")


def reconstruct(snapshots: Sequence[Snapshot]) -> list[Item]:
    """Replay ``snapshots`` and return the resulting full state.

    Raises:
        EmptyLogError: ``snapshots`` is empty.
    """
    if not snapshots:
        raise EmptyLogError()

    state: dict[str, Item] = {}
    for entry in snapshots[0].entries:
        _seed(state, entry)

    for snapshot in snapshots[1:]:
        for entry in snapshot.entries:
            _replay(state, entry, snapshot.timestamp)

    return [state[item_id] for item_id in sorted(state)]


def reconstruct_at(snapshots: Sequence[Snapshot], at: datetime) -> list[Item]:
    """Reconstruct the state as it was at ``at``.

    Only snapshots taken at or before ``at`` are replayed.

    Raises:
        EmptyLogError: no snapshot was taken at or before ``at``.
    """
    return reconstruct([s for s in snapshots if s.timestamp <= at])


def next_snapshot(snapshots: Sequence[Snapshot], observed: Sequence[Item], timestamp: datetime) -> Snapshot | None:
    """Return the snapshot to append for ``observed``, or None when nothing changed.

    An empty log gets a baseline holding every observed item verbatim.
    """
    if not snapshots:
        return Snapshot(timestamp=timestamp, entries=tuple(observed))

    previous = reconstruct(snapshots)
    changes = compute_changes(previous, observed)
    if not changes:
        return None
    return Snapshot(timestamp=timestamp, entries=tuple(changes))


def _seed(state: dict[str, Item], entry: SnapshotEntry) -> None:
    match entry:
        case Item():
            state[entry.id] = entry
        case Added(item=item):
            state[item.id] = item
        case Modified():
            state[entry.id] = apply_change(Item(id=entry.id), entry)
        case Removed():
            state[entry.id] = Item(id=entry.id, title=entry.title)


def _replay(state: dict[str, Item], entry: SnapshotEntry, timestamp: datetime) -> None:
    if not entry.id:
        _log.warning("entry_without_id_skipped", snapshot=timestamp.isoformat())
        return

    match entry:
        case Removed():
            state.pop(entry.id, None)
        case Added(item=item):
            if item.id not in state:
                state[item.id] = item
        case Modified():
            base = state.get(entry.id)
            if base is None:
                _log.warning("modified_unknown_item", item_id=entry.id, snapshot=timestamp.isoformat())
                base = Item(id=entry.id)
            state[entry.id] = apply_change(base, entry)
        case Item():
            state[entry.id] = apply_change(state.get(entry.id, Item(id=entry.id)), overlay_item(entry))
