"""User domain model."""

from datetime import datetime

from pydantic import BaseModel, Field


class User(BaseModel):
    """User data transfer object."""

    id: str = Field(..., description="Unique user ID")
    email: str = Field(..., description="Login email address")
    name: str = Field(..., description="Full name of the user")
    created: datetime = Field(..., description="Registration timestamp")


class UserSummary(BaseModel):
    """User projection embedded in membership listings."""

    id: str
    email: str
    name: str
