"""House and membership domain models and enums."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from homeboard.domain.user import UserSummary


class Role(StrEnum):
    """Member role within a house."""

    OWNER = "OWNER"
    MEMBER = "MEMBER"


class House(BaseModel):
    """House data transfer object."""

    id: str = Field(..., description="Unique house ID")
    name: str = Field(..., description="House name")
    description: str | None = Field(default=None, description="Free-form description")
    created: datetime = Field(..., description="Creation timestamp")
    updated: datetime = Field(..., description="Last update timestamp")


class Membership(BaseModel):
    """A user's membership in a house."""

    id: str = Field(..., description="Unique membership ID")
    user_id: str = Field(..., description="Member user ID")
    house_id: str = Field(..., description="House ID")
    display_name: str = Field(..., description="Display name, unique within the house")
    role: Role = Field(default=Role.MEMBER, description="Role within the house")
    created: datetime = Field(..., description="Join timestamp")


class MemberWithUser(Membership):
    """Membership with the owning user's projection."""

    user: UserSummary


class MemberInfo(BaseModel):
    """The calling user's own membership details for a house."""

    display_name: str
    role: Role
    joined_at: datetime


class HouseWithMemberInfo(House):
    """House annotated with the requesting user's membership."""

    member_info: MemberInfo


class HouseCounts(BaseModel):
    members: int
    tasks: int


class HouseDetail(House):
    """House with its members and aggregate counts."""

    members: list[MemberWithUser]
    counts: HouseCounts


class Actor(BaseModel):
    """Identity on whose behalf a house-scoped operation runs."""

    user_id: str
    membership_id: str
    role: Role
