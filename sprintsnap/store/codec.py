"""JSON codec for board items, change records and snapshot logs.

Keys follow the camel-case shape of the board export.  Empty values are
omitted from items the way the export omits them.

Change records come in two encodings, selected per snapshot by its
``encoding`` key:

    explicit  -- written by sprintsnap.  A missing key means unchanged,
                 ``null`` means cleared, any other value is the new value.
    sentinel  -- logs written before the encoding key existed.  Estimate 0,
                 status "" and a milestone/sprint with an empty title mean
                 cleared; an empty title or content leaf means unchanged.
"""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from sprintsnap.errors import ParseError
from sprintsnap.models.changes import (
    CLEARED,
    UNCHANGED,
    Added,
    ChangeType,
    Cleared,
    ContentPatch,
    Modified,
    Removed,
    SetTo,
    Snapshot,
    SnapshotEntry,
    Unchanged,
)
from sprintsnap.models.items import Comment, Content, Item, Milestone, Sprint


class LogEncoding(StrEnum):
    """How cleared fields are represented in a snapshot's change records."""

    SENTINEL = "sentinel"
    EXPLICIT = "explicit"


_RE_TIMESTAMP = re.compile(r"^(?P<base>[^.]+?)(?:\.(?P<frac>\d+))?(?P<tz>Z|[+-]\d{2}:?\d{2})?$")


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------


def parse_timestamp(value: str, source: str = "snapshot log") -> datetime:
    """Parse an RFC 3339 timestamp.  Fractions beyond microseconds are truncated."""
    match = _RE_TIMESTAMP.match(value) if isinstance(value, str) else None
    if match is None:
        raise ParseError(source, f"invalid timestamp {value!r}")
    text = match.group("base")
    if match.group("frac"):
        text += "." + match.group("frac")[:6].ljust(6, "0")
    tz = match.group("tz")
    if tz and tz != "Z":
        text += tz
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ParseError(source, f"invalid timestamp {value!r}") from exc
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_timestamp(value: datetime) -> str:
    """Format a timestamp as RFC 3339 UTC with a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def _expect_dict(value: Any, what: str, source: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ParseError(source, f"{what} must be an object, got {type(value).__name__}")
    return value


def _as_str(value: Any, key: str, source: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ParseError(source, f"{key!r} must be a string, got {type(value).__name__}")
    return value


def _str(data: dict[str, Any], key: str, source: str) -> str:
    return _as_str(data.get(key), key, source)


def _int(value: Any, key: str, source: str) -> int:
    # bool is an int subclass but never a valid count or estimate
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ParseError(source, f"{key!r} must be an integer, got {value!r}")


def _str_list(value: Any, key: str, source: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ParseError(source, f"{key!r} must be a list of strings")
    return tuple(value)


def _omit_empty(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v not in ("", 0, None, [], {})}


# ---------------------------------------------------------------------------
# Nested values
# ---------------------------------------------------------------------------


def content_from_dict(data: Any, source: str = "items") -> Content:
    data = _expect_dict(data, "content", source)
    return Content(
        body=_str(data, "body", source),
        number=_int(data.get("number") or 0, "number", source),
        repository=_str(data, "repository", source),
        title=_str(data, "title", source),
        type=_str(data, "type", source),
        url=_str(data, "url", source),
    )


def content_to_dict(content: Content) -> dict[str, Any]:
    return _omit_empty(
        {
            "body": content.body,
            "number": content.number,
            "repository": content.repository,
            "title": content.title,
            "type": content.type,
            "url": content.url,
        }
    )


def milestone_from_dict(data: Any, source: str = "items") -> Milestone:
    data = _expect_dict(data, "milestone", source)
    return Milestone(
        title=_str(data, "title", source),
        description=_str(data, "description", source),
        due_on=_str(data, "dueOn", source),
    )


def milestone_to_dict(milestone: Milestone) -> dict[str, Any]:
    return _omit_empty(
        {
            "description": milestone.description,
            "dueOn": milestone.due_on,
            "title": milestone.title,
        }
    )


def sprint_from_dict(data: Any, source: str = "items") -> Sprint:
    data = _expect_dict(data, "sprint", source)
    return Sprint(
        title=_str(data, "title", source),
        iteration_id=_str(data, "iterationId", source),
        start_date=_str(data, "startDate", source),
        duration=_int(data.get("duration") or 0, "duration", source),
    )


def sprint_to_dict(sprint: Sprint) -> dict[str, Any]:
    return _omit_empty(
        {
            "duration": sprint.duration,
            "iterationId": sprint.iteration_id,
            "startDate": sprint.start_date,
            "title": sprint.title,
        }
    )


def comment_from_dict(data: Any, source: str = "comments") -> Comment:
    data = _expect_dict(data, "comment", source)
    author = data.get("author") or {}
    if isinstance(author, dict):
        login = _str(author, "login", source)
    elif isinstance(author, str):
        login = author
    else:
        raise ParseError(source, "comment author must be an object")
    return Comment(author=login, body=_str(data, "body", source))


def comment_to_dict(comment: Comment) -> dict[str, Any]:
    return {"author": {"login": comment.author}, "body": comment.body}


def _comments(value: Any, source: str) -> tuple[Comment, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ParseError(source, "'comments' must be a list")
    return tuple(comment_from_dict(c, source) for c in value)


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


def item_from_dict(data: Any, source: str = "items") -> Item:
    """Build an Item from its export shape.  Unknown keys are ignored."""
    data = _expect_dict(data, "item", source)
    content = data.get("content")
    milestone = data.get("milestone")
    sprint = data.get("sprint")
    estimate = data.get("estimate")
    status = data.get("status")
    if status is not None and not isinstance(status, str):
        raise ParseError(source, "'status' must be a string")
    return Item(
        id=_str(data, "id", source),
        title=_str(data, "title", source),
        content=content_from_dict(content, source) if content is not None else None,
        estimate=_int(estimate, "estimate", source) if estimate is not None else None,
        labels=_str_list(data.get("labels"), "labels", source),
        milestone=milestone_from_dict(milestone, source) if milestone is not None else None,
        sprint=sprint_from_dict(sprint, source) if sprint is not None else None,
        status=status,
        assignees=_str_list(data.get("assignees"), "assignees", source),
        repository=_str(data, "repository", source),
        comments=_comments(data.get("comments"), source),
    )


def item_to_dict(item: Item) -> dict[str, Any]:
    """Serialize an Item, omitting unset and empty fields."""
    data: dict[str, Any] = {}
    if item.assignees:
        data["assignees"] = list(item.assignees)
    if item.content is not None:
        data["content"] = content_to_dict(item.content)
    if item.estimate is not None:
        data["estimate"] = item.estimate
    if item.id:
        data["id"] = item.id
    if item.labels:
        data["labels"] = list(item.labels)
    if item.milestone is not None:
        data["milestone"] = milestone_to_dict(item.milestone)
    if item.repository:
        data["repository"] = item.repository
    if item.sprint is not None:
        data["sprint"] = sprint_to_dict(item.sprint)
    if item.status is not None:
        data["status"] = item.status
    if item.title:
        data["title"] = item.title
    if item.comments:
        data["comments"] = [comment_to_dict(c) for c in item.comments]
    return data


# ---------------------------------------------------------------------------
# Change records
# ---------------------------------------------------------------------------


def _patch_from_json(data: dict[str, Any], key: str, decode: Any, *, clearable: bool, source: str) -> Any:
    if key not in data:
        return UNCHANGED
    value = data[key]
    if value is None:
        if not clearable:
            raise ParseError(source, f"{key!r} cannot be cleared")
        return CLEARED
    return SetTo(decode(value))


def _modified_explicit(data: dict[str, Any], source: str) -> Modified:
    content = None
    if data.get("content") is not None:
        raw = _expect_dict(data["content"], "content", source)
        content = ContentPatch(
            body=SetTo(_str(raw, "body", source)) if "body" in raw else UNCHANGED,
            title=SetTo(_str(raw, "title", source)) if "title" in raw else UNCHANGED,
        )

    def patch(key: str, decode: Any, clearable: bool = False) -> Any:
        return _patch_from_json(data, key, decode, clearable=clearable, source=source)

    return Modified(
        id=_str(data, "id", source),
        title=patch("title", lambda v: _as_str(v, "title", source)),
        content=content,
        estimate=patch("estimate", lambda v: _int(v, "estimate", source), clearable=True),
        labels=patch("labels", lambda v: _str_list(v, "labels", source)),
        milestone=patch("milestone", lambda v: milestone_from_dict(v, source), clearable=True),
        sprint=patch("sprint", lambda v: sprint_from_dict(v, source), clearable=True),
        status=patch("status", lambda v: _as_str(v, "status", source), clearable=True),
        assignees=patch("assignees", lambda v: _str_list(v, "assignees", source)),
        comments=patch("comments", lambda v: _comments(v, source)),
    )


def _modified_sentinel(data: dict[str, Any], source: str) -> Modified:
    item = item_from_dict(data, source)

    content = None
    if item.content is not None:
        content = ContentPatch(
            body=SetTo(item.content.body) if item.content.body else UNCHANGED,
            title=SetTo(item.content.title) if item.content.title else UNCHANGED,
        )

    def titled(value: Milestone | Sprint | None) -> Unchanged | Cleared | SetTo[Any]:
        if value is None:
            return UNCHANGED
        return SetTo(value) if value.title else CLEARED

    estimate: Unchanged | Cleared | SetTo[int] = UNCHANGED
    if item.estimate is not None:
        estimate = SetTo(item.estimate) if item.estimate != 0 else CLEARED

    status: Unchanged | Cleared | SetTo[str] = UNCHANGED
    if item.status is not None:
        status = SetTo(item.status) if item.status else CLEARED

    return Modified(
        id=item.id,
        title=SetTo(item.title) if item.title else UNCHANGED,
        content=content,
        estimate=estimate,
        labels=SetTo(item.labels) if "labels" in data else UNCHANGED,
        milestone=titled(item.milestone),
        sprint=titled(item.sprint),
        status=status,
        assignees=SetTo(item.assignees) if "assignees" in data else UNCHANGED,
        comments=SetTo(item.comments) if "comments" in data else UNCHANGED,
    )


def _patch_to_json(patch: Unchanged | Cleared | SetTo[Any], encode: Any = None) -> tuple[bool, Any]:
    match patch:
        case Unchanged():
            return False, None
        case Cleared():
            return True, None
        case SetTo(value):
            return True, encode(value) if encode is not None else value
    raise TypeError(f"not a field patch: {patch!r}")


def modified_to_dict(record: Modified) -> dict[str, Any]:
    """Serialize a Modified record in the explicit encoding."""
    data: dict[str, Any] = {}
    fields: list[tuple[str, Unchanged | Cleared | SetTo[Any], Any]] = [
        ("assignees", record.assignees, list),
        ("estimate", record.estimate, None),
        ("labels", record.labels, list),
        ("milestone", record.milestone, milestone_to_dict),
        ("sprint", record.sprint, sprint_to_dict),
        ("status", record.status, None),
        ("title", record.title, None),
        ("comments", record.comments, lambda cs: [comment_to_dict(c) for c in cs]),
    ]
    for key, patch, encode in fields:
        present, value = _patch_to_json(patch, encode)
        if present:
            data[key] = value
    if record.content is not None and not record.content.is_empty():
        content: dict[str, Any] = {}
        for key in ("body", "title"):
            present, value = _patch_to_json(getattr(record.content, key))
            if present:
                content[key] = value
        data["content"] = content
    data["id"] = record.id
    data["changeType"] = ChangeType.MODIFIED.value
    return dict(sorted(data.items(), key=lambda kv: (kv[0] == "changeType", kv[0])))


def entry_from_dict(
    data: Any,
    encoding: LogEncoding = LogEncoding.EXPLICIT,
    source: str = "snapshot log",
) -> SnapshotEntry:
    """Decode one element of a snapshot's ``items`` list."""
    data = _expect_dict(data, "snapshot entry", source)
    change_type = data.get("changeType") or ""
    match change_type:
        case "":
            return item_from_dict(data, source)
        case ChangeType.ADDED:
            return Added(item=item_from_dict(data, source))
        case ChangeType.REMOVED:
            return Removed(id=_str(data, "id", source), title=_str(data, "title", source))
        case ChangeType.MODIFIED:
            if encoding == LogEncoding.SENTINEL:
                return _modified_sentinel(data, source)
            return _modified_explicit(data, source)
    raise ParseError(source, f"unknown changeType {change_type!r}")


def entry_to_dict(entry: SnapshotEntry) -> dict[str, Any]:
    """Encode one snapshot entry."""
    match entry:
        case Item():
            return item_to_dict(entry)
        case Added(item=item):
            return {**item_to_dict(item), "changeType": ChangeType.ADDED.value}
        case Removed():
            data: dict[str, Any] = {"id": entry.id}
            if entry.title:
                data["title"] = entry.title
            data["changeType"] = ChangeType.REMOVED.value
            return data
        case Modified():
            return modified_to_dict(entry)
    raise TypeError(f"not a snapshot entry: {entry!r}")


# ---------------------------------------------------------------------------
# Snapshots and logs
# ---------------------------------------------------------------------------


def snapshot_from_dict(data: Any, source: str = "snapshot log") -> Snapshot:
    data = _expect_dict(data, "snapshot", source)
    raw_encoding = data.get("encoding") or LogEncoding.SENTINEL.value
    try:
        encoding = LogEncoding(raw_encoding)
    except ValueError as exc:
        raise ParseError(source, f"unknown snapshot encoding {raw_encoding!r}") from exc
    entries = data.get("items")
    if entries is None:
        entries = []
    if not isinstance(entries, list):
        raise ParseError(source, "'items' must be a list")
    return Snapshot(
        timestamp=parse_timestamp(data.get("timestamp"), source),
        entries=tuple(entry_from_dict(e, encoding, source) for e in entries),
    )


def snapshot_to_dict(snapshot: Snapshot) -> dict[str, Any]:
    return {
        "timestamp": format_timestamp(snapshot.timestamp),
        "encoding": LogEncoding.EXPLICIT.value,
        "items": [entry_to_dict(e) for e in snapshot.entries],
    }


def decode_log(text: str, source: str = "snapshot log") -> list[Snapshot]:
    """Decode a snapshot log (a JSON array of snapshots).

    Raises:
        ParseError: the text is not JSON or not a list of snapshot objects.
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(source, str(exc)) from exc
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ParseError(source, "snapshot log must be a JSON array")
    return [snapshot_from_dict(s, source) for s in raw]


def encode_log(snapshots: Sequence[Snapshot]) -> str:
    """Encode a snapshot log as indented JSON in the explicit encoding."""
    return json.dumps([snapshot_to_dict(s) for s in snapshots], indent=2, ensure_ascii=False) + "\n"
