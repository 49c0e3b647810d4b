"""Board item data structures.

Items are immutable: the change applier returns updated copies instead of
mutating a base item in place.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Content:
    """The external artifact (issue, pull request, draft) behind an item."""

    body: str = ""
    number: int = 0
    repository: str = ""
    title: str = ""
    type: str = ""  # "Issue", "PullRequest", "DraftIssue"
    url: str = ""


@dataclass(frozen=True)
class Milestone:
    """Milestone the linked artifact belongs to."""

    title: str = ""
    description: str = ""
    due_on: str = ""


@dataclass(frozen=True)
class Sprint:
    """Iteration field value of a board item."""

    title: str = ""
    iteration_id: str = ""
    start_date: str = ""
    duration: int = 0


@dataclass(frozen=True)
class Comment:
    """A single issue comment."""

    author: str
    body: str


@dataclass(frozen=True)
class Item:
    """A tracked work unit as observed on the board.

    ``estimate``, ``milestone``, ``sprint`` and ``status`` use ``None`` for
    "not set"; an estimate of 0 is a real value.
    """

    id: str
    title: str = ""
    content: Content | None = None
    estimate: int | None = None
    labels: tuple[str, ...] = ()
    milestone: Milestone | None = None
    sprint: Sprint | None = None
    status: str | None = None
    assignees: tuple[str, ...] = ()
    repository: str = ""
    comments: tuple[Comment, ...] = ()

    @property
    def is_issue(self) -> bool:
        return self.content is not None and self.content.type == "Issue"
