"""Change computation between two full board states.

compute_changes() produces the minimal list of change records that turns
``old_state`` into ``new_state``: one ``Added`` per new id, one ``Modified``
per changed id (only the differing fields are patched) and one ``Removed``
per vanished id.  Unchanged items produce nothing, so re-observing an
unchanged board never grows the log.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from sprintsnap.models.changes import (
    CLEARED,
    UNCHANGED,
    Added,
    ChangeRecord,
    Cleared,
    ContentPatch,
    Modified,
    Removed,
    SetTo,
    Unchanged,
)
from sprintsnap.models.items import Item, Milestone, Sprint

_log = structlog.get_logger(component="ledger.diff")


def compute_changes(old_state: Sequence[Item], new_state: Sequence[Item]) -> list[ChangeRecord]:
    """Diff two full states.

    Records for ``new_state`` items come first, in input order, followed by
    tombstones sorted by id.
    """
    old_by_id = {item.id: item for item in old_state}
    new_ids = {item.id for item in new_state}

    changes: list[ChangeRecord] = []
    for new_item in new_state:
        old_item = old_by_id.get(new_item.id)
        if old_item is None:
            _log.debug("item_added", item_id=new_item.id, title=new_item.title)
            changes.append(Added(item=new_item))
            continue
        record = diff_item(old_item, new_item)
        if record is not None:
            changes.append(record)

    for item_id in sorted(old_by_id.keys() - new_ids):
        old_item = old_by_id[item_id]
        _log.debug("item_removed", item_id=item_id, title=old_item.title)
        changes.append(Removed(id=item_id, title=old_item.title))

    return changes


def diff_item(old: Item, new: Item) -> Modified | None:
    """Return a ``Modified`` record for the fields that differ, or None."""
    record = Modified(
        id=new.id,
        title=SetTo(new.title) if old.title != new.title else UNCHANGED,
        content=_diff_content(old, new),
        estimate=_diff_estimate(old, new),
        labels=SetTo(new.labels) if old.labels != new.labels else UNCHANGED,
        milestone=_diff_titled(old.milestone, new.milestone, new.id, "milestone"),
        sprint=_diff_titled(old.sprint, new.sprint, new.id, "sprint"),
        status=_diff_status(old, new),
        assignees=SetTo(new.assignees) if old.assignees != new.assignees else UNCHANGED,
        comments=SetTo(new.comments) if old.comments != new.comments else UNCHANGED,
    )
    if record.is_noop():
        return None
    _log.debug("item_modified", item_id=new.id, record=repr(record))
    return record


def _diff_content(old: Item, new: Item) -> ContentPatch | None:
    old_body = old.content.body if old.content else ""
    old_title = old.content.title if old.content else ""
    new_body = new.content.body if new.content else ""
    new_title = new.content.title if new.content else ""

    patch = ContentPatch(
        body=SetTo(new_body) if old_body != new_body else UNCHANGED,
        title=SetTo(new_title) if old_title != new_title else UNCHANGED,
    )
    return None if patch.is_empty() else patch


def _diff_estimate(old: Item, new: Item) -> Unchanged | Cleared | SetTo[int]:
    if old.estimate is None and new.estimate is not None:
        _log.debug("estimate_added", item_id=new.id, estimate=new.estimate)
        return SetTo(new.estimate)
    if old.estimate is not None and new.estimate is None:
        _log.debug("estimate_removed", item_id=new.id)
        return CLEARED
    if old.estimate != new.estimate:
        _log.debug("estimate_updated", item_id=new.id, old=old.estimate, new=new.estimate)
        return SetTo(new.estimate)
    return UNCHANGED


def _diff_titled(
    old: Milestone | Sprint | None,
    new: Milestone | Sprint | None,
    item_id: str,
    kind: str,
) -> Unchanged | Cleared | SetTo[Milestone | Sprint]:
    # Milestones and sprints are identified by title; other sub-fields are not tracked.
    if old is None and new is not None:
        _log.debug(f"{kind}_added", item_id=item_id, title=new.title)
        return SetTo(new)
    if old is not None and new is None:
        _log.debug(f"{kind}_removed", item_id=item_id)
        return CLEARED
    if old is not None and new is not None and old.title != new.title:
        _log.debug(f"{kind}_updated", item_id=item_id, old=old.title, new=new.title)
        return SetTo(new)
    return UNCHANGED


def _diff_status(old: Item, new: Item) -> Unchanged | Cleared | SetTo[str]:
    if old.status is None and new.status is not None:
        _log.debug("status_added", item_id=new.id, status=new.status)
        return SetTo(new.status)
    if old.status is not None and new.status is None:
        _log.debug("status_removed", item_id=new.id)
        return CLEARED
    if old.status != new.status:
        _log.debug("status_updated", item_id=new.id, old=old.status, new=new.status)
        return SetTo(new.status)
    return UNCHANGED
