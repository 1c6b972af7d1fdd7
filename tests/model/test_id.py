"""Tests for prefixed short-UUID identifiers."""

from __future__ import annotations

import pytest

from seezee.model import AssignmentID, Assignment, LearningResourceID, ToolID, UserID


def test_new_ids_are_prefixed() -> None:
    u = UserID()

    assert u.startswith("user$")
    assert len(u.key) == 22
    assert UserID(str(u)) == u
    assert UserID(key=u.key) == u


@pytest.mark.parametrize(
    "s",
    [
        "user$short",
        "tool$" + "a" * 22,
        "user$" + "0" * 22,  # 0 is outside the shortuuid alphabet
    ],
)
def test_rejects_malformed(s: str) -> None:
    with pytest.raises(ValueError):
        UserID(s)


def test_item_ids_resolve_by_prefix() -> None:
    tool = ToolID()
    assignment = Assignment.model_validate(
        {
            "assignment_id": str(AssignmentID()),
            "item_kind": "tool",
            "item_id": str(tool),
            "audience_type": "role",
            "role": "DEV",
            "create_time": "2026-03-02T09:30:00+00:00",
        }
    )

    assert isinstance(assignment.item_id, ToolID)
    assert not isinstance(assignment.item_id, LearningResourceID)
    assert assignment.model_dump(mode="json")["item_id"] == str(tool)
