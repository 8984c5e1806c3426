"""Unit tests for the task permission resolver."""

from datetime import UTC, datetime

import pytest

from homeboard.domain.house import Actor, Role
from homeboard.domain.task import Task, TaskAssignee
from homeboard.modules.tasks.permissions import can_delete, can_modify


NOW = datetime(2025, 6, 1, tzinfo=UTC)


@pytest.fixture
def task() -> Task:
    """Task created by member X and assigned to member Y."""
    return Task(
        id="task-1",
        created=NOW,
        updated=NOW,
        title="Hoover the stairs",
        house_id="house-1",
        created_by_id="member-x",
        assignees=[TaskAssignee(id="assign-1", house_member_id="member-y", display_name="Y", user_id="user-y")],
    )


def _actor(membership_id: str, role: Role = Role.MEMBER) -> Actor:
    return Actor(user_id=f"user-{membership_id}", membership_id=membership_id, role=role)


@pytest.mark.unit
class TestCanModify:
    """Tests for can_modify."""

    def test_creator_can_modify(self, task):
        assert can_modify(task, _actor("member-x")) is True

    def test_assignee_can_modify(self, task):
        assert can_modify(task, _actor("member-y")) is True

    def test_owner_can_modify(self, task):
        assert can_modify(task, _actor("member-owner", Role.OWNER)) is True

    def test_unrelated_member_cannot_modify(self, task):
        assert can_modify(task, _actor("member-z")) is False

    def test_removed_creator_matches_nobody(self, task):
        """Test a task whose creator left the house grants nothing through the creator rule."""
        orphan = task.model_copy(update={"created_by_id": None, "assignees": []})

        assert can_modify(orphan, _actor("member-x")) is False
        assert can_modify(orphan, _actor("member-owner", Role.OWNER)) is True


@pytest.mark.unit
class TestCanDelete:
    """Tests for can_delete."""

    def test_creator_can_delete(self, task):
        assert can_delete(task, _actor("member-x")) is True

    def test_owner_can_delete(self, task):
        assert can_delete(task, _actor("member-owner", Role.OWNER)) is True

    def test_assignee_alone_cannot_delete(self, task):
        """Test deletion is stricter than modification."""
        assert can_modify(task, _actor("member-y")) is True
        assert can_delete(task, _actor("member-y")) is False

    def test_unrelated_member_cannot_delete(self, task):
        assert can_delete(task, _actor("member-z")) is False
