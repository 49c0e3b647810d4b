"""Tests for apply_change() and overlay_item()."""

from __future__ import annotations

import dataclasses

import pytest

from sprintsnap.ledger.merge import apply_change, overlay_item
from sprintsnap.models.changes import CLEARED, UNCHANGED, Added, ContentPatch, Modified, Removed, SetTo
from sprintsnap.models.items import Comment, Content, Item, Milestone, Sprint

_BASE = Item(
    id="1",
    title="Fix bug",
    content=Content(body="old body", number=7, title="Fix bug", type="Issue", url="https://example.test/7"),
    estimate=5,
    labels=("bug", "p1"),
    milestone=Milestone(title="v1.0", due_on="2025-07-01"),
    sprint=Sprint(title="Sprint 7"),
    status="Todo",
    assignees=("alice",),
    comments=(Comment(author="bob", body="first"),),
)


class TestApplyChange:
    def test_empty_record_returns_base_unchanged(self) -> None:
        assert apply_change(_BASE, Modified(id="1")) == _BASE

    def test_base_is_not_mutated(self) -> None:
        before = repr(_BASE)
        apply_change(_BASE, Modified(id="1", status=SetTo("Done"), labels=SetTo(())))
        assert repr(_BASE) == before

    def test_status_replaced(self) -> None:
        assert apply_change(_BASE, Modified(id="1", status=SetTo("Done"))).status == "Done"

    def test_status_cleared(self) -> None:
        assert apply_change(_BASE, Modified(id="1", status=CLEARED)).status is None

    def test_estimate_cleared_becomes_absent(self) -> None:
        assert apply_change(_BASE, Modified(id="1", estimate=CLEARED)).estimate is None

    def test_estimate_set_to_zero_is_kept(self) -> None:
        assert apply_change(_BASE, Modified(id="1", estimate=SetTo(0))).estimate == 0

    def test_milestone_and_sprint_cleared(self) -> None:
        merged = apply_change(_BASE, Modified(id="1", milestone=CLEARED, sprint=CLEARED))
        assert merged.milestone is None
        assert merged.sprint is None

    def test_sprint_replaced(self) -> None:
        merged = apply_change(_BASE, Modified(id="1", sprint=SetTo(Sprint(title="Sprint 8"))))
        assert merged.sprint == Sprint(title="Sprint 8")

    def test_sequences_replaced_wholesale_even_when_empty(self) -> None:
        merged = apply_change(_BASE, Modified(id="1", labels=SetTo(()), assignees=SetTo(("carol", "dave"))))
        assert merged.labels == ()
        assert merged.assignees == ("carol", "dave")
        assert merged.comments == _BASE.comments

    def test_content_leaf_overwrite_keeps_other_leaves(self) -> None:
        merged = apply_change(_BASE, Modified(id="1", content=ContentPatch(title=SetTo("Fix crash"))))
        assert merged.content == Content(
            body="old body", number=7, title="Fix crash", type="Issue", url="https://example.test/7"
        )

    def test_content_patch_on_item_without_content(self) -> None:
        merged = apply_change(Item(id="2"), Modified(id="2", content=ContentPatch(body=SetTo("draft"))))
        assert merged.content == Content(body="draft")

    def test_title_set_to_empty_is_applied(self) -> None:
        assert apply_change(_BASE, Modified(id="1", title=SetTo(""))).title == ""

    def test_untouched_fields_survive(self) -> None:
        merged = apply_change(_BASE, Modified(id="1", status=SetTo("Done")))
        assert merged == dataclasses.replace(_BASE, status="Done")

    @pytest.mark.parametrize("record", [Added(item=Item(id="1")), Removed(id="1")])
    def test_rejects_non_modified_records(self, record) -> None:
        with pytest.raises(TypeError):
            apply_change(_BASE, record)


class TestOverlayItem:
    def test_present_fields_become_patches(self) -> None:
        record = overlay_item(Item(id="1", title="New", status="Done", estimate=0))
        assert record.title == SetTo("New")
        assert record.status == SetTo("Done")
        assert record.estimate == SetTo(0)
        assert record.labels == UNCHANGED
        assert record.milestone == UNCHANGED

    def test_overlay_keeps_fields_the_item_omits(self) -> None:
        merged = apply_change(_BASE, overlay_item(Item(id="1", status="Done")))
        assert merged.status == "Done"
        assert merged.title == "Fix bug"
        assert merged.labels == ("bug", "p1")
