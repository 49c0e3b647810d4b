"""Tests for environment configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from sprintsnap.config import load_config, snapshot_log_path, sprint_slug
from sprintsnap.models.config import DEFAULT_DONE_STATUSES, SnapshotConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("SPRINT_NAME", "SNAPSHOT_PATH", "ITEMS_PATH", "DONE_STATUSES", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SPRINT_NAME", "Sprint 7")
    config = load_config()
    assert config.snapshot.sprint_name == "Sprint 7"
    assert config.snapshot.snapshot_dir == Path("./snapshots")
    assert config.snapshot.items_dir == Path(".tmp")
    assert config.burndown.done_statuses == DEFAULT_DONE_STATUSES
    assert config.log.level == "info"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SPRINT_NAME", "Sprint 7")
    monkeypatch.setenv("SNAPSHOT_PATH", "/data/snapshots")
    monkeypatch.setenv("ITEMS_PATH", "/work/export")
    monkeypatch.setenv("DONE_STATUSES", "Done, Shipped ,")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    config = load_config()

    assert config.snapshot.snapshot_dir == Path("/data/snapshots")
    assert config.snapshot.items_dir == Path("/work/export")
    assert config.burndown.done_statuses == ("Done", "Shipped")
    assert config.log.level == "debug"


def test_arguments_take_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SPRINT_NAME", "Sprint 7")
    assert load_config(sprint_name="Sprint 8").snapshot.sprint_name == "Sprint 8"


def test_missing_sprint_name_raises() -> None:
    with pytest.raises(ValueError, match="SPRINT_NAME"):
        load_config()


def test_invalid_log_level_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SPRINT_NAME", "Sprint 7")
    with pytest.raises(ValueError, match="log level"):
        load_config(log_level="verbose")


def test_sprint_slug_trims_and_hyphenates() -> None:
    assert sprint_slug("  Sprint 7 (June) ") == "Sprint-7-(June)"


def test_snapshot_log_path() -> None:
    config = SnapshotConfig(sprint_name="Sprint 7", snapshot_dir=Path("/data"))
    assert snapshot_log_path(config) == Path("/data/Sprint-7.json")
