"""Change ledger for sprintsnap.

Turns repeated full observations of a board into an append-only log of
minimal change records, and replays that log back into full states.

Submodules:
    diff    -- compute_changes(): minimal change records between two states.
    merge   -- apply_change(): apply a Modified record onto an item.
    replay  -- reconstruct(): replay a snapshot log into a full state.
"""

from sprintsnap.ledger.diff import compute_changes, diff_item
from sprintsnap.ledger.merge import apply_change
from sprintsnap.ledger.replay import next_snapshot, reconstruct, reconstruct_at

__all__ = [
    "apply_change",
    "compute_changes",
    "diff_item",
    "next_snapshot",
    "reconstruct",
    "reconstruct_at",
]
