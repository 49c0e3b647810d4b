"""Property-based tests for the diff/merge/replay engine.

Uses hypothesis to generate board states and validates that:
 1. Diffing a state against itself yields nothing
 2. Applying a diffed Modified record reproduces the new item
 3. Every vanished id gets exactly one tombstone and nothing else
 4. Replaying a log equals replaying its reconstructed prefix as a new baseline
 5. Encoding and decoding a log preserves every snapshot
"""

from __future__ import annotations

from collections import Counter
from datetime import UTC, datetime, timedelta

from hypothesis import given, settings
from hypothesis import strategies as st

from sprintsnap.ledger.diff import compute_changes
from sprintsnap.ledger.merge import apply_change
from sprintsnap.ledger.replay import reconstruct
from sprintsnap.models.changes import Modified, Removed, Snapshot
from sprintsnap.models.items import Comment, Content, Item, Milestone, Sprint
from sprintsnap.store.codec import decode_log, encode_log

_T0 = datetime(2025, 6, 2, 9, 0, 0, tzinfo=UTC)

# ---------------------------------------------------------------------------
# Hypothesis strategies
# ---------------------------------------------------------------------------

_IDS = [f"PVTI_{n}" for n in range(8)]

_text = st.text(
    alphabet=st.characters(codec="utf-8", exclude_categories=("Cs",)),
    max_size=20,
)

# Only title identifies a milestone or sprint, so generated values carry
# nothing else; likewise content varies only in its tracked leaves.
_milestones = st.none() | st.builds(Milestone, title=st.sampled_from(["", "v1.0", "v2.0"]))
_sprints = st.none() | st.builds(Sprint, title=st.sampled_from(["", "Sprint 7", "Sprint 8"]))
_statuses = st.none() | st.sampled_from(["", "Todo", "In Progress", "Done"])
_names = st.lists(st.sampled_from(["alice", "bob", "carol"]), max_size=3).map(tuple)
_labels = st.lists(st.sampled_from(["bug", "feature", "p1"]), max_size=3).map(tuple)
_comments = st.lists(st.builds(Comment, author=st.sampled_from(["bob", "dave"]), body=_text), max_size=2).map(tuple)


def _items(item_id: str) -> st.SearchStrategy[Item]:
    return st.builds(
        Item,
        id=st.just(item_id),
        title=_text,
        content=st.builds(Content, body=_text, title=_text, number=st.just(7), type=st.just("Issue")),
        estimate=st.none() | st.integers(min_value=0, max_value=13),
        labels=_labels,
        milestone=_milestones,
        sprint=_sprints,
        status=_statuses,
        assignees=_names,
        comments=_comments,
    )


_states = st.lists(st.sampled_from(_IDS), unique=True, max_size=6).flatmap(
    lambda ids: st.tuples(*[_items(i) for i in ids]).map(list)
)
_item_pairs = st.sampled_from(_IDS).flatmap(lambda i: st.tuples(_items(i), _items(i)))


def _by_id(state: list[Item]) -> list[Item]:
    return sorted(state, key=lambda item: item.id)


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


@given(state=_states)
def test_diff_of_identical_states_is_empty(state: list[Item]) -> None:
    assert compute_changes(state, state) == []


@given(pair=_item_pairs)
def test_applying_diff_reproduces_new_item(pair: tuple[Item, Item]) -> None:
    old, new = pair
    changes = compute_changes([old], [new])

    if old == new:
        assert changes == []
        return
    assert len(changes) == 1
    record = changes[0]
    assert isinstance(record, Modified)
    assert not record.is_noop()
    assert apply_change(old, record) == new


@given(old=_states, new=_states)
def test_each_vanished_id_gets_exactly_one_tombstone(old: list[Item], new: list[Item]) -> None:
    changes = compute_changes(old, new)
    vanished = {item.id for item in old} - {item.id for item in new}

    per_id = Counter(change.id for change in changes)
    tombstones = [change for change in changes if isinstance(change, Removed)]

    assert {t.id for t in tombstones} == vanished
    for item_id in vanished:
        assert per_id[item_id] == 1
    assert all(per_id[item.id] <= 1 for item in new)


@settings(max_examples=50)
@given(baseline=_states, first=_states, second=_states)
def test_replay_is_associative_over_log_prefixes(
    baseline: list[Item], first: list[Item], second: list[Item]
) -> None:
    log = [Snapshot(timestamp=_T0, entries=tuple(baseline))]
    log.append(Snapshot(timestamp=_T0 + timedelta(days=1), entries=tuple(compute_changes(reconstruct(log), first))))
    log.append(Snapshot(timestamp=_T0 + timedelta(days=2), entries=tuple(compute_changes(reconstruct(log), second))))

    rebased = [Snapshot(timestamp=_T0, entries=tuple(reconstruct(log[:2]))), log[2]]

    assert reconstruct(log) == reconstruct(rebased)
    assert reconstruct(log) == _by_id(second)


@settings(max_examples=50)
@given(baseline=_states, observed=_states)
def test_log_survives_encoding(baseline: list[Item], observed: list[Item]) -> None:
    log = [Snapshot(timestamp=_T0, entries=tuple(baseline))]
    log.append(Snapshot(timestamp=_T0 + timedelta(hours=6), entries=tuple(compute_changes(baseline, observed))))

    decoded = decode_log(encode_log(log))

    assert decoded == log
    assert reconstruct(decoded) == _by_id(observed)
