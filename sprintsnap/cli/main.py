"""Click entry point for the ``sprintsnap`` command."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

import click

from sprintsnap.app import RunOutcome, SnapshotRecorder
from sprintsnap.burndown import compute_burndown
from sprintsnap.config import load_config
from sprintsnap.errors import SnapshotError
from sprintsnap.models.config import SprintSnapConfig
from sprintsnap.observability.logging import bind_sprint, get_logger, setup_logging
from sprintsnap.store import load_observed_items
from sprintsnap.store.codec import entry_to_dict, item_to_dict, parse_timestamp

_log = get_logger("cli")


def _config(ctx: click.Context) -> SprintSnapConfig:
    opts: dict[str, Any] = ctx.obj
    try:
        config = load_config(
            sprint_name=opts.get("sprint"),
            snapshot_dir=opts.get("snapshot_dir"),
            items_dir=opts.get("items_dir"),
            log_level=opts.get("log_level"),
        )
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    setup_logging(config.log)
    bind_sprint(config.snapshot.sprint_name)
    return config


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@click.group()
@click.option("--sprint", envvar="SPRINT_NAME", help="Sprint name; selects the snapshot log.")
@click.option("--snapshot-dir", envvar="SNAPSHOT_PATH", help="Directory holding snapshot logs.")
@click.option("--items-dir", envvar="ITEMS_PATH", help="Directory holding items.json and comment files.")
@click.option(
    "--log-level",
    envvar="LOG_LEVEL",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    show_default=True,
)
@click.pass_context
def cli(
    ctx: click.Context,
    sprint: str | None,
    snapshot_dir: str | None,
    items_dir: str | None,
    log_level: str,
) -> None:
    """Track board items across observations as an append-only change log."""
    setup_logging(log_level)
    ctx.obj = {
        "sprint": sprint,
        "snapshot_dir": snapshot_dir,
        "items_dir": items_dir,
        "log_level": log_level.lower(),
    }


@cli.command()
@click.pass_context
def snapshot(ctx: click.Context) -> None:
    """Append the current observation to the sprint's snapshot log."""
    recorder = SnapshotRecorder(_config(ctx))
    try:
        result = recorder.run()
    except SnapshotError as exc:
        _log.error("snapshot_failed", error=str(exc))
        raise click.ClickException(str(exc)) from exc

    if result.outcome is RunOutcome.BASELINE_CREATED:
        click.echo(f"Created initial snapshot at {result.log_path}")
    elif result.outcome is RunOutcome.APPENDED:
        click.echo(f"Appended new snapshot to {result.log_path}")
    else:
        click.echo("No changes since last snapshot, nothing to append.")


@cli.command()
@click.option("--at", "at", help="RFC 3339 timestamp; reconstruct the state as of this moment.")
@click.pass_context
def reconstruct(ctx: click.Context, at: str | None) -> None:
    """Print the reconstructed state of the sprint as JSON."""
    recorder = SnapshotRecorder(_config(ctx))
    try:
        moment: datetime | None = parse_timestamp(at, "--at") if at else None
        items = recorder.state(moment)
    except SnapshotError as exc:
        _log.error("reconstruct_failed", error=str(exc))
        raise click.ClickException(str(exc)) from exc
    _echo_json([item_to_dict(item) for item in items])


@cli.command()
@click.pass_context
def diff(ctx: click.Context) -> None:
    """Print the change records the next snapshot would append."""
    recorder = SnapshotRecorder(_config(ctx))
    try:
        changes = recorder.pending_changes()
    except SnapshotError as exc:
        _log.error("diff_failed", error=str(exc))
        raise click.ClickException(str(exc)) from exc
    _echo_json([entry_to_dict(change) for change in changes])


@cli.command()
@click.option("--from-log", is_flag=True, help="Use the reconstructed state instead of items.json.")
@click.pass_context
def burndown(ctx: click.Context, from_log: bool) -> None:
    """Print total and remaining estimate for the sprint as JSON."""
    config = _config(ctx)
    try:
        if from_log:
            items = SnapshotRecorder(config).state()
        else:
            items = load_observed_items(config.snapshot.items_dir)
    except SnapshotError as exc:
        _log.error("burndown_failed", error=str(exc))
        raise click.ClickException(str(exc)) from exc

    totals = compute_burndown(items, config.snapshot.sprint_name, config.burndown.done_statuses)
    if totals.is_empty:
        _log.info("burndown_no_items", sprint=totals.sprint)
    _echo_json({"sprint": totals.sprint, "total": totals.total, "remaining": totals.remaining, "items": totals.items})
