"""Entry point for `python -m sprintsnap`.

Usage:
    python -m sprintsnap snapshot
    uv run python -m sprintsnap reconstruct --at 2025-06-01T00:00:00Z
"""

from __future__ import annotations

from sprintsnap.cli import cli

cli(prog_name="sprintsnap")
