"""Burndown totals for one sprint.

Sums estimates over the items assigned to the sprint.  ``remaining`` leaves
out items whose status counts as done.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sprintsnap.models.config import DEFAULT_DONE_STATUSES
from sprintsnap.models.items import Item


@dataclass(frozen=True)
class BurndownTotals:
    """Estimate totals of a sprint at one point in time."""

    sprint: str
    total: int = 0
    remaining: int = 0
    items: int = 0

    @property
    def is_empty(self) -> bool:
        return self.total == 0


def compute_burndown(
    items: Iterable[Item],
    sprint_name: str,
    done_statuses: Sequence[str] = DEFAULT_DONE_STATUSES,
) -> BurndownTotals:
    """Sum estimates of the items whose sprint title equals ``sprint_name``.

    Items without an estimate count as zero.
    """
    done = set(done_statuses)
    total = remaining = count = 0
    for item in items:
        if item.sprint is None or item.sprint.title != sprint_name:
            continue
        count += 1
        estimate = item.estimate or 0
        total += estimate
        if item.status not in done:
            remaining += estimate
    return BurndownTotals(sprint=sprint_name, total=total, remaining=remaining, items=count)
