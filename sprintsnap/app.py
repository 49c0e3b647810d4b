"""Run orchestration for sprintsnap.

A snapshot run is:
    observed items → snapshot log → reconstruct → diff → append → persist

The ledger package does the computation; this module owns the file I/O
around it.  Nothing is written unless the run produces a new snapshot, and a
parse failure anywhere aborts before the log is touched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from pathlib import Path

import structlog

from sprintsnap.config import snapshot_log_path
from sprintsnap.ledger import compute_changes, next_snapshot, reconstruct, reconstruct_at
from sprintsnap.models.changes import ChangeRecord, Snapshot, change_type_of
from sprintsnap.models.config import SprintSnapConfig
from sprintsnap.models.items import Item
from sprintsnap.store import load_log, load_observed_items, save_log, set_aside_unreadable

_log = structlog.get_logger(component="app")


class RunOutcome(StrEnum):
    """What a snapshot run did to the log."""

    BASELINE_CREATED = "baseline_created"
    APPENDED = "appended"
    UNCHANGED = "unchanged"


@dataclass
class RunResult:
    """Summary of a snapshot run."""

    outcome: RunOutcome
    log_path: Path
    snapshot: Snapshot | None = None
    counts: dict[str, int] = field(default_factory=dict)
    set_aside: Path | None = None


class SnapshotRecorder:
    """Records one observation of the board into the sprint's snapshot log."""

    def __init__(self, config: SprintSnapConfig) -> None:
        self.config = config
        self.log_path = snapshot_log_path(config.snapshot)

    def run(self, now: datetime | None = None) -> RunResult:
        """Append the current observation to the log if anything changed."""
        timestamp = now or datetime.now(tz=UTC)
        log = _log.bind(sprint=self.config.snapshot.sprint_name, path=str(self.log_path))

        observed = load_observed_items(self.config.snapshot.items_dir)
        snapshots = load_log(self.log_path)
        log.debug("run_inputs_loaded", observed=len(observed), snapshots=len(snapshots))

        snapshot = next_snapshot(snapshots, observed, timestamp)
        if snapshot is None:
            log.info("no_changes", snapshots=len(snapshots))
            return RunResult(outcome=RunOutcome.UNCHANGED, log_path=self.log_path)

        outcome = RunOutcome.BASELINE_CREATED if not snapshots else RunOutcome.APPENDED
        set_aside = None
        if outcome is RunOutcome.BASELINE_CREATED:
            set_aside = set_aside_unreadable(self.log_path, timestamp)
        save_log(self.log_path, [*snapshots, snapshot])

        counts = _count_entries(snapshot)
        if outcome is RunOutcome.BASELINE_CREATED:
            log.info("baseline_created", items=len(snapshot.entries))
        else:
            log.info("snapshot_appended", snapshots=len(snapshots) + 1, **counts)
        return RunResult(
            outcome=outcome,
            log_path=self.log_path,
            snapshot=snapshot,
            counts=counts,
            set_aside=set_aside,
        )

    def state(self, at: datetime | None = None) -> list[Item]:
        """Reconstruct the sprint's state from the log, optionally as of ``at``.

        Raises:
            EmptyLogError: there is no history (before ``at``).
        """
        snapshots = load_log(self.log_path)
        if at is None:
            return reconstruct(snapshots)
        return reconstruct_at(snapshots, at)

    def pending_changes(self) -> list[ChangeRecord]:
        """Changes the next run would append, without writing anything.

        With no history yet every observed item is reported as added.
        """
        observed = load_observed_items(self.config.snapshot.items_dir)
        snapshots = load_log(self.log_path)
        previous = reconstruct(snapshots) if snapshots else []
        return compute_changes(previous, observed)


def _count_entries(snapshot: Snapshot) -> dict[str, int]:
    counts: dict[str, int] = {}
    for entry in snapshot.entries:
        key = change_type_of(entry).value
        counts[key] = counts.get(key, 0) + 1
    return counts
