"""Update models for database operations.

Partial updates rely on pydantic's ``model_fields_set``: a field that was not
sent is left unchanged, while an explicit ``null`` clears it.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from homeboard.domain.create_models import (
    validate_display_name,
    validate_due_date,
    validate_house_name,
    validate_task_description,
    validate_task_title,
)
from homeboard.domain.house import Role
from homeboard.domain.task import TaskPriority, TaskStatus


class HouseUpdate(BaseModel):
    """Partial update payload for house details."""

    name: str | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("House name cannot be null")
        return validate_house_name(v)


class MemberRoleUpdate(BaseModel):
    """Update payload for a member's role."""

    role: Role


class DisplayNameUpdate(BaseModel):
    """Update payload for a member's display name."""

    display_name: str

    @field_validator("display_name")
    @classmethod
    def check_display_name(cls, v: str) -> str:
        return validate_display_name(v)


class TaskUpdate(BaseModel):
    """Partial update payload for task details."""

    title: str | None = None
    description: str | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    category_id: str | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("Task title cannot be null")
        return validate_task_title(v)

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str | None) -> str | None:
        return validate_task_description(v)

    @field_validator("due_date")
    @classmethod
    def check_due_date(cls, v: datetime | None) -> datetime | None:
        return validate_due_date(v)


class TaskStatusUpdate(BaseModel):
    """Update payload for task status."""

    status: TaskStatus


class TaskAssigneesUpdate(BaseModel):
    """Full-replace payload for a task's assignees."""

    assignee_ids: list[str] = Field(default_factory=list)
