"""Domain models and DTOs."""

from homeboard.domain.category import Category
from homeboard.domain.create_models import CategoryCreate, HouseCreate, MembershipCreate, TaskCreate, UserCreate
from homeboard.domain.house import (
    Actor,
    House,
    HouseCounts,
    HouseDetail,
    HouseWithMemberInfo,
    MemberInfo,
    Membership,
    MemberWithUser,
    Role,
)
from homeboard.domain.task import Pagination, Task, TaskAssignee, TaskFilters, TaskPage, TaskPriority, TaskStatus
from homeboard.domain.update_models import (
    DisplayNameUpdate,
    HouseUpdate,
    MemberRoleUpdate,
    TaskAssigneesUpdate,
    TaskStatusUpdate,
    TaskUpdate,
)
from homeboard.domain.user import User, UserSummary


__all__ = [
    "Actor",
    "Category",
    "CategoryCreate",
    "DisplayNameUpdate",
    "House",
    "HouseCounts",
    "HouseCreate",
    "HouseDetail",
    "HouseUpdate",
    "HouseWithMemberInfo",
    "MemberInfo",
    "MemberRoleUpdate",
    "MemberWithUser",
    "Membership",
    "MembershipCreate",
    "Pagination",
    "Role",
    "Task",
    "TaskAssignee",
    "TaskAssigneesUpdate",
    "TaskCreate",
    "TaskFilters",
    "TaskPage",
    "TaskPriority",
    "TaskStatus",
    "TaskStatusUpdate",
    "TaskUpdate",
    "User",
    "UserCreate",
    "UserSummary",
]
