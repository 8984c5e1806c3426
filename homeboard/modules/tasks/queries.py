"""SQL for task listings: conjunctive filters and urgency ordering."""

from datetime import datetime
from typing import Any

from homeboard.core.db_client import to_iso
from homeboard.domain.task import TaskFilters, TaskStatus


# HIGH first; LOW and anything unexpected last
PRIORITY_RANK_SQL = "CASE t.priority WHEN 'HIGH' THEN 3 WHEN 'MEDIUM' THEN 2 ELSE 1 END"

TASK_ORDER_SQL = f"{PRIORITY_RANK_SQL} DESC, t.due_date IS NULL, t.due_date ASC, t.created DESC, t.rowid DESC"


def build_task_where(
    *,
    house_id: str,
    filters: TaskFilters,
    actor_membership_id: str,
    now: datetime,
) -> tuple[str, list[Any]]:
    """Build the WHERE clause for a house's task listing. All filters are ANDed."""
    conditions = ["t.house_id = ?"]
    params: list[Any] = [house_id]

    if filters.status is not None:
        conditions.append("t.status = ?")
        params.append(filters.status.value)

    if filters.priority is not None:
        conditions.append("t.priority = ?")
        params.append(filters.priority.value)

    if filters.category_id is not None:
        conditions.append("t.category_id = ?")
        params.append(filters.category_id)

    if filters.created_by_me:
        conditions.append("t.created_by_id = ?")
        params.append(actor_membership_id)

    if filters.assigned_to_me:
        conditions.append(
            "EXISTS (SELECT 1 FROM task_assignees a WHERE a.task_id = t.id AND a.house_member_id = ?)"
        )
        params.append(actor_membership_id)

    if filters.overdue:
        conditions.append("t.status = ? AND t.due_date IS NOT NULL AND t.due_date < ?")
        params.extend([TaskStatus.PENDING.value, to_iso(now)])

    return "WHERE " + " AND ".join(conditions), params


def task_page_query(where_clause: str) -> str:
    return f"SELECT t.* FROM tasks t {where_clause} ORDER BY {TASK_ORDER_SQL} LIMIT ? OFFSET ?"  # noqa: S608 - clause is built from fixed fragments


def task_count_query(where_clause: str) -> str:
    return f"SELECT COUNT(*) FROM tasks t {where_clause}"  # noqa: S608 - clause is built from fixed fragments


def assignees_query(task_count: int) -> str:
    placeholders = ", ".join("?" for _ in range(task_count))
    return f"""
        SELECT a.id, a.task_id, a.house_member_id, m.display_name, m.user_id
        FROM task_assignees a
        JOIN house_members m ON m.id = a.house_member_id
        WHERE a.task_id IN ({placeholders})
        ORDER BY a.rowid ASC
    """  # noqa: S608 - only placeholders are interpolated
