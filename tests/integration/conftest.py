"""Shared fixtures for sprintsnap integration tests.

Provides a throwaway workspace (items export directory + snapshot directory)
and helpers that write board exports the way the export step does, so tests
can exercise full runs without touching a real project board.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from sprintsnap.models.config import SnapshotConfig, SprintSnapConfig

SPRINT = "Sprint 7"

# ---------------------------------------------------------------------------
# Export factory helpers
# ---------------------------------------------------------------------------


def make_item(
    item_id: str = "PVTI_1",
    title: str = "Fix bug",
    status: str | None = "Todo",
    estimate: int | None = 3,
    issue_number: int = 1,
    sprint: str | None = SPRINT,
    **extra: Any,
) -> dict[str, Any]:
    """Create an exported item dict with sensible defaults for testing."""
    item: dict[str, Any] = {
        "id": item_id,
        "title": title,
        "content": {"number": issue_number, "title": title, "type": "Issue", "body": f"Body of {title}"},
        "assignees": ["alice"],
        "labels": ["bug"],
    }
    if status is not None:
        item["status"] = status
    if estimate is not None:
        item["estimate"] = estimate
    if sprint is not None:
        item["sprint"] = {"title": sprint, "iterationId": "it-7", "duration": 14, "startDate": "2025-06-02"}
    item.update(extra)
    return item


def write_items(items_dir: Path, items: list[dict[str, Any]]) -> None:
    items_dir.mkdir(parents=True, exist_ok=True)
    (items_dir / "items.json").write_text(json.dumps({"items": items}), encoding="utf-8")


def write_comments(items_dir: Path, issue_number: int, comments: list[tuple[str, str]]) -> None:
    payload = {"comments": [{"author": {"login": a}, "body": b} for a, b in comments]}
    (items_dir / f"comments-{issue_number}.json").write_text(json.dumps(payload), encoding="utf-8")


def read_log(path: Path) -> list[dict[str, Any]]:
    return json.loads(path.read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# Workspace fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def items_dir(tmp_path: Path) -> Path:
    path = tmp_path / ".tmp"
    path.mkdir()
    return path


@pytest.fixture
def snapshot_dir(tmp_path: Path) -> Path:
    return tmp_path / "snapshots"


@pytest.fixture
def config(items_dir: Path, snapshot_dir: Path) -> SprintSnapConfig:
    return SprintSnapConfig(
        snapshot=SnapshotConfig(sprint_name=SPRINT, snapshot_dir=snapshot_dir, items_dir=items_dir),
    )
