"""sprintsnap: append-only change logs for project board items."""

__version__ = "0.1.0"
