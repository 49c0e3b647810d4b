"""Snapshot log persistence.

One JSON file per sprint holds the whole log.  Writes go to a temporary
sibling file that is then renamed over the log, so a failed run never leaves
a truncated log behind.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

import structlog

from sprintsnap.errors import ParseError
from sprintsnap.models.changes import Snapshot
from sprintsnap.store.codec import decode_log, encode_log

_log = structlog.get_logger(component="store.snapshot_log")


def load_log(path: Path) -> list[Snapshot]:
    """Load the snapshot log at ``path``.

    A missing or unreadable file means there is no history yet and yields an
    empty list.

    Raises:
        ParseError: the file exists but is not a valid snapshot log.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        _log.info("snapshot_log_missing", path=str(path))
        return []
    except UnicodeDecodeError as exc:
        raise ParseError(str(path), str(exc)) from exc
    except OSError as exc:
        _log.warning("snapshot_log_unreadable", path=str(path), error=str(exc))
        return []

    if not text.strip():
        return []
    snapshots = decode_log(text, source=str(path))
    _log.debug("snapshot_log_loaded", path=str(path), snapshots=len(snapshots))
    return snapshots


def set_aside_unreadable(path: Path, timestamp: datetime) -> Path | None:
    """Move an existing log that cannot be read out of the way of a new baseline.

    The file is renamed to ``<stem>.unreadable-<timestamp><suffix>`` next to
    the log.  Returns the new path, or None when ``path`` is missing or
    readable.
    """
    try:
        path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as exc:
        aside = path.with_name(f"{path.stem}.unreadable-{timestamp.strftime('%Y%m%dT%H%M%SZ')}{path.suffix}")
        os.replace(path, aside)
        _log.error("snapshot_log_set_aside", path=str(path), moved_to=str(aside), error=str(exc))
        return aside
    return None


def save_log(path: Path, snapshots: Sequence[Snapshot]) -> None:
    """Atomically replace the log at ``path`` with ``snapshots``."""
    data = encode_log(snapshots)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    _log.debug("snapshot_log_saved", path=str(path), snapshots=len(snapshots))
