"""Category domain model."""

from datetime import datetime

from pydantic import BaseModel, Field


class Category(BaseModel):
    """House-scoped task category."""

    id: str = Field(..., description="Unique category ID")
    name: str = Field(..., description="Category name, unique within the house")
    color: str | None = Field(default=None, description="Display color (e.g. #ff8800)")
    house_id: str = Field(..., description="Owning house ID")
    created: datetime = Field(..., description="Creation timestamp")
