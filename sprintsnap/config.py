"""Configuration loading from environment variables.

The variable names are shared with the CI workflow that exports the board
items, so they carry no prefix.
"""

from __future__ import annotations

import os
from pathlib import Path

from sprintsnap.models.config import (
    DEFAULT_DONE_STATUSES,
    BurndownConfig,
    LogConfig,
    SnapshotConfig,
    SprintSnapConfig,
)


def _env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


def _env_list(key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    val = _env(key)
    if not val.strip():
        return default
    return tuple(part.strip() for part in val.split(",") if part.strip())


def _validate_sprint_name(value: str) -> str:
    if not value.strip():
        raise ValueError("SPRINT_NAME is required")
    return value


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def sprint_slug(sprint_name: str) -> str:
    """Normalize a sprint name for use as a file name."""
    return sprint_name.strip().replace(" ", "-")


def snapshot_log_path(config: SnapshotConfig) -> Path:
    """Return the snapshot log file for the configured sprint."""
    return Path(config.snapshot_dir) / f"{sprint_slug(config.sprint_name)}.json"


def load_config(
    sprint_name: str | None = None,
    snapshot_dir: str | None = None,
    items_dir: str | None = None,
    log_level: str | None = None,
) -> SprintSnapConfig:
    """Load configuration from the environment.  Non-None arguments take precedence."""
    return SprintSnapConfig(
        snapshot=SnapshotConfig(
            sprint_name=_validate_sprint_name(sprint_name or _env("SPRINT_NAME")),
            snapshot_dir=Path(snapshot_dir or _env("SNAPSHOT_PATH", "./snapshots")),
            items_dir=Path(items_dir or _env("ITEMS_PATH", ".tmp")),
        ),
        burndown=BurndownConfig(
            done_statuses=_env_list("DONE_STATUSES", DEFAULT_DONE_STATUSES),
        ),
        log=LogConfig(
            level=_validate_log_level(log_level or _env("LOG_LEVEL", "info")),
        ),
    )
