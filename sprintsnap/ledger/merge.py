"""Apply a ``Modified`` change record onto a base item."""

from __future__ import annotations

import dataclasses
from typing import Any

from sprintsnap.models.changes import UNCHANGED, Cleared, ContentPatch, Modified, SetTo, Unchanged
from sprintsnap.models.items import Content, Item


def apply_change(base: Item, record: Modified) -> Item:
    """Return a copy of ``base`` with every patched field of ``record`` applied.

    ``base`` is never mutated.  Only ``Modified`` records are accepted:
    ``Added`` and ``Removed`` change which ids exist, which is the
    reconstructor's job.
    """
    if not isinstance(record, Modified):
        raise TypeError(f"apply_change expects a Modified record, got {type(record).__name__}")

    updates: dict[str, Any] = {}
    for name in ("title", "estimate", "labels", "milestone", "sprint", "status", "assignees", "comments"):
        patch = getattr(record, name)
        match patch:
            case Unchanged():
                continue
            case Cleared():
                updates[name] = None
            case SetTo(value):
                updates[name] = value

    if record.content is not None and not record.content.is_empty():
        updates["content"] = _apply_content(base.content, record.content)

    if not updates:
        return base
    return dataclasses.replace(base, **updates)


def _apply_content(base: Content | None, patch: ContentPatch) -> Content:
    content = base or Content()
    if isinstance(patch.body, SetTo):
        content = dataclasses.replace(content, body=patch.body.value)
    if isinstance(patch.title, SetTo):
        content = dataclasses.replace(content, title=patch.title.value)
    return content


def overlay_item(item: Item) -> Modified:
    """Convert a full item into a ``Modified`` record of its non-empty fields.

    Used when a baseline-shaped item shows up after the baseline: fields it
    carries overwrite the current item, fields it omits are left alone.
    """
    content = None
    if item.content is not None:
        content = ContentPatch(
            body=SetTo(item.content.body) if item.content.body else UNCHANGED,
            title=SetTo(item.content.title) if item.content.title else UNCHANGED,
        )
    return Modified(
        id=item.id,
        title=SetTo(item.title) if item.title else UNCHANGED,
        content=content,
        estimate=SetTo(item.estimate) if item.estimate is not None else UNCHANGED,
        labels=SetTo(item.labels) if item.labels else UNCHANGED,
        milestone=SetTo(item.milestone) if item.milestone is not None else UNCHANGED,
        sprint=SetTo(item.sprint) if item.sprint is not None else UNCHANGED,
        status=SetTo(item.status) if item.status is not None else UNCHANGED,
        assignees=SetTo(item.assignees) if item.assignees else UNCHANGED,
        comments=SetTo(item.comments) if item.comments else UNCHANGED,
    )
