"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_DONE_STATUSES: tuple[str, ...] = ("✔️Awaiting QA", "Done", "✅ Ready for release")


@dataclass
class SnapshotConfig:
    """Where observations are read from and where the log is kept."""

    sprint_name: str = ""
    snapshot_dir: Path = Path("./snapshots")
    items_dir: Path = Path(".tmp")


@dataclass
class BurndownConfig:
    """Burndown totals configuration."""

    done_statuses: tuple[str, ...] = DEFAULT_DONE_STATUSES


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class SprintSnapConfig:
    """Top-level sprintsnap configuration."""

    snapshot: SnapshotConfig = field(default_factory=SnapshotConfig)
    burndown: BurndownConfig = field(default_factory=BurndownConfig)
    log: LogConfig = field(default_factory=LogConfig)
