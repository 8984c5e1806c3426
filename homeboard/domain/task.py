"""Task domain models and enums."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from homeboard.core.config import constants


class TaskStatus(StrEnum):
    """Task lifecycle state."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


class TaskPriority(StrEnum):
    """Task urgency."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class TaskAssignee(BaseModel):
    """Assignment of a task to a house member."""

    id: str = Field(..., description="Assignment ID")
    house_member_id: str = Field(..., description="Assigned membership ID")
    display_name: str = Field(..., description="Assigned member's display name")
    user_id: str = Field(..., description="Assigned member's user ID")


class Task(BaseModel):
    """Task data transfer object."""

    id: str = Field(..., description="Unique task ID")
    created: datetime = Field(..., description="Creation timestamp")
    updated: datetime = Field(..., description="Last update timestamp")
    title: str = Field(..., description="Task title")
    description: str | None = Field(default=None, description="Detailed task description")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Current lifecycle state")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Urgency")
    due_date: datetime | None = Field(default=None, description="Due date (UTC)")
    completed_at: datetime | None = Field(default=None, description="Set iff status is COMPLETED")
    house_id: str = Field(..., description="Owning house ID")
    category_id: str | None = Field(default=None, description="Category in the same house")
    created_by_id: str | None = Field(
        default=None,
        description="Creating membership ID; None once that member has left the house",
    )
    assignees: list[TaskAssignee] = Field(default_factory=list, description="Current assignees")

    @property
    def assignee_ids(self) -> list[str]:
        """Membership IDs of the current assignees."""
        return [assignee.house_member_id for assignee in self.assignees]


class TaskFilters(BaseModel):
    """Conjunctive filters and offset pagination for task listings."""

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    category_id: str | None = None
    assigned_to_me: bool = False
    created_by_me: bool = False
    overdue: bool = False
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=constants.DEFAULT_PAGE_LIMIT, ge=1)

    @property
    def effective_limit(self) -> int:
        """Page size capped at the configured maximum."""
        return min(self.limit, constants.MAX_PAGE_LIMIT)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class TaskPage(BaseModel):
    """One page of tasks plus pagination metadata."""

    tasks: list[Task]
    pagination: Pagination
