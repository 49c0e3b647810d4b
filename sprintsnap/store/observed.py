"""Reader for the exported board items.

The export step leaves ``items.json`` (``{"items": [...]}``) in the items
directory, plus one ``comments-<issue number>.json`` per issue whose comments
were fetched.  Comments are attached to items whose content is an Issue; a
comments file that cannot be read only costs that item its comments.
"""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path

import structlog

from sprintsnap.errors import ObservationError, ParseError
from sprintsnap.models.items import Comment, Item
from sprintsnap.store.codec import comment_from_dict, item_from_dict

_log = structlog.get_logger(component="store.observed")

ITEMS_FILE = "items.json"


def load_observed_items(items_dir: Path) -> list[Item]:
    """Load the observed items from ``items_dir`` and attach issue comments.

    Raises:
        ObservationError: ``items.json`` cannot be read.
        ParseError: ``items.json`` is malformed.
    """
    path = Path(items_dir) / ITEMS_FILE
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(str(path), str(exc)) from exc
    except OSError as exc:
        raise ObservationError(str(path), exc) from exc

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(str(path), str(exc)) from exc
    if not isinstance(raw, dict):
        raise ParseError(str(path), "expected an object with an 'items' list")
    entries = raw.get("items")
    if entries is None:
        entries = []
    if not isinstance(entries, list):
        raise ParseError(str(path), "expected an object with an 'items' list")

    items = [item_from_dict(entry, str(path)) for entry in entries]
    return [_with_comments(item, items_dir) for item in items]


def load_comments(issue_number: int, items_dir: Path) -> tuple[Comment, ...]:
    """Read the comments file for ``issue_number``.  A missing file means no comments.

    Raises:
        OSError: the file exists but cannot be read.
        ParseError: the file is not valid UTF-8 JSON or not a comments document.
    """
    path = Path(items_dir) / f"comments-{issue_number}.json"
    if not path.exists():
        return ()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ParseError(str(path), str(exc)) from exc
    if not isinstance(raw, dict):
        raise ParseError(str(path), "expected an object with a 'comments' list")
    comments = raw.get("comments") or []
    if not isinstance(comments, list):
        raise ParseError(str(path), "'comments' must be a list")
    return tuple(comment_from_dict(c, str(path)) for c in comments)


def _with_comments(item: Item, items_dir: Path) -> Item:
    if not item.is_issue:
        return item
    assert item.content is not None
    try:
        comments = load_comments(item.content.number, items_dir)
    except (OSError, ParseError) as exc:
        _log.warning(
            "comments_skipped",
            item_id=item.id,
            issue_number=item.content.number,
            error=str(exc),
        )
        return dataclasses.replace(item, comments=())
    return dataclasses.replace(item, comments=comments)
