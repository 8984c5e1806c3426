"""Pydantic models for creating records."""

import re
from datetime import UTC, datetime

from pydantic import BaseModel, Field, field_validator

from homeboard.core.config import constants
from homeboard.domain.task import TaskPriority


def validate_house_name(v: str) -> str:
    """Validate a house name: 3-20 letters, numbers or spaces."""
    v = v.strip()

    if len(v) < constants.HOUSE_NAME_MIN_LENGTH:
        raise ValueError(f"House name must be at least {constants.HOUSE_NAME_MIN_LENGTH} characters")

    if len(v) > constants.HOUSE_NAME_MAX_LENGTH:
        raise ValueError(f"House name must be at most {constants.HOUSE_NAME_MAX_LENGTH} characters")

    if not re.match(constants.HOUSE_NAME_PATTERN, v):
        raise ValueError("House name can only contain letters, numbers, and spaces")

    return v


def validate_display_name(v: str) -> str:
    """Validate a display name: 1-12 characters after trimming."""
    v = v.strip()

    if not v:
        raise ValueError("Display name is required")

    if len(v) > constants.DISPLAY_NAME_MAX_LENGTH:
        raise ValueError(f"Display name must be at most {constants.DISPLAY_NAME_MAX_LENGTH} characters")

    return v


def validate_task_title(v: str) -> str:
    """Validate a task title: 1-100 characters after trimming."""
    v = v.strip()

    if not v:
        raise ValueError("Task title is required")

    if len(v) > constants.TASK_TITLE_MAX_LENGTH:
        raise ValueError(f"Task title must be at most {constants.TASK_TITLE_MAX_LENGTH} characters")

    return v


def validate_task_description(v: str | None) -> str | None:
    """Validate an optional task description of at most 500 characters."""
    if v is None:
        return None

    v = v.strip()
    if len(v) > constants.TASK_DESCRIPTION_MAX_LENGTH:
        raise ValueError(f"Task description must be at most {constants.TASK_DESCRIPTION_MAX_LENGTH} characters")

    return v


def validate_due_date(v: datetime | None) -> datetime | None:
    """Validate an optional due date lies in the future. Naive values are taken as UTC."""
    if v is None:
        return None

    aware = v if v.tzinfo is not None else v.replace(tzinfo=UTC)
    if aware <= datetime.now(UTC):
        raise ValueError("Due date must be in the future")

    return v


class UserCreate(BaseModel):
    """Pydantic model for creating a user record."""

    email: str = Field(..., description="Login email address")
    name: str = Field(..., description="Full name")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Validate the email has a plausible shape and normalise its case."""
        v = v.strip().lower()
        if not re.match(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", v):
            raise ValueError("Invalid email address")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate name is not blank."""
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v


class HouseCreate(BaseModel):
    """Pydantic model for creating a house record."""

    name: str = Field(..., description="House name")
    description: str | None = Field(default=None, description="Free-form description")

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return validate_house_name(v)

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else None


class MembershipCreate(BaseModel):
    """Pydantic model for adding a user to a house."""

    user_id: str = Field(..., description="User joining the house")
    display_name: str = Field(..., description="Display name within the house")

    @field_validator("display_name")
    @classmethod
    def check_display_name(cls, v: str) -> str:
        return validate_display_name(v)


class CategoryCreate(BaseModel):
    """Pydantic model for creating a category record."""

    name: str = Field(..., min_length=1, max_length=30, description="Category name")
    color: str | None = Field(default=None, description="Hex color, e.g. #ff8800")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Category name is required")
        return v

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str | None) -> str | None:
        """Validate color is a #rrggbb hex string."""
        if v is not None and not re.match(r"^#[0-9a-fA-F]{6}$", v):
            raise ValueError("Color must be a hex value like #ff8800")
        return v


class TaskCreate(BaseModel):
    """Pydantic model for creating a task record."""

    title: str = Field(..., description="Task title")
    description: str | None = Field(default=None, description="Detailed description")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Urgency")
    due_date: datetime | None = Field(default=None, description="Due date")
    category_id: str | None = Field(default=None, description="Category in the same house")
    assignee_ids: list[str] = Field(default_factory=list, description="Membership IDs to assign")

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str) -> str:
        return validate_task_title(v)

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str | None) -> str | None:
        return validate_task_description(v)

    @field_validator("due_date")
    @classmethod
    def check_due_date(cls, v: datetime | None) -> datetime | None:
        return validate_due_date(v)
