"""Exceptions raised by sprintsnap."""

from __future__ import annotations


class SnapshotError(Exception):
    """Base class for every sprintsnap failure."""


class ParseError(SnapshotError):
    """Raised when the snapshot log or observed input is not valid JSON or has an unexpected shape."""

    def __init__(self, source: str, detail: str) -> None:
        super().__init__(f"parsing {source}: {detail}")
        self.source = source
        self.detail = detail


class EmptyLogError(SnapshotError):
    """Raised when reconstruction is requested over an empty snapshot log.

    Callers must create a baseline instead of reconstructing.
    """

    def __init__(self) -> None:
        super().__init__("cannot reconstruct state from an empty snapshot log")


class ObservationError(SnapshotError):
    """Raised when the observed items export cannot be read."""

    def __init__(self, path: str, cause: Exception) -> None:
        super().__init__(f"reading {path}: {cause}")
        self.path = path
        self.cause = cause
