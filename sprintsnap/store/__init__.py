"""File-backed storage for sprintsnap.

Submodules:
    codec         -- JSON <-> model mapping for items, change records and logs.
    snapshot_log  -- Load and atomically persist a sprint's snapshot log.
    observed      -- Read the exported board items and their issue comments.
"""

from sprintsnap.store.observed import load_observed_items
from sprintsnap.store.snapshot_log import load_log, save_log, set_aside_unreadable

__all__ = ["load_log", "load_observed_items", "save_log", "set_aside_unreadable"]
