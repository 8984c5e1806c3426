"""Task service for CRUD operations, status changes and assignments."""

import logging
import math
from datetime import UTC, datetime
from typing import Any

from homeboard.core.config import constants
from homeboard.core.db_client import Database
from homeboard.core.errors import BusinessRuleError, ForbiddenError, NotFoundError
from homeboard.core.logging import span
from homeboard.domain.create_models import TaskCreate
from homeboard.domain.house import Actor
from homeboard.domain.task import Pagination, Task, TaskAssignee, TaskFilters, TaskPage, TaskStatus
from homeboard.domain.update_models import TaskUpdate
from homeboard.modules.categories import service as category_service
from homeboard.modules.houses import service as house_service
from homeboard.modules.tasks import queries, state_machine
from homeboard.modules.tasks.permissions import can_delete, can_modify


logger = logging.getLogger(__name__)


async def _hydrate(db: Database, records: list[dict[str, Any]]) -> list[Task]:
    """Attach assignees to raw task records."""
    if not records:
        return []

    task_ids = [record["id"] for record in records]
    rows = await db.fetch_all(queries.assignees_query(len(task_ids)), task_ids)

    assignees: dict[str, list[TaskAssignee]] = {task_id: [] for task_id in task_ids}
    for row in rows:
        assignees[row["task_id"]].append(TaskAssignee.model_validate(row))

    return [Task.model_validate({**record, "assignees": assignees[record["id"]]}) for record in records]


async def _validate_assignees(db: Database, house_id: str, assignee_ids: list[str]) -> list[str]:
    """Check the cap and house scoping of an assignee list.

    The cap applies to the list as sent, and a repeated ID is rejected.

    Raises:
        BusinessRuleError: If over the cap, an ID repeats, or any ID is not a
            member of the house
    """
    if len(assignee_ids) > constants.TASK_MAX_ASSIGNEES:
        raise BusinessRuleError(f"Cannot assign more than {constants.TASK_MAX_ASSIGNEES} members to a task")

    if not assignee_ids:
        return []

    unique_ids = list(dict.fromkeys(assignee_ids))
    if len(unique_ids) != len(assignee_ids):
        raise BusinessRuleError(
            "Assignee list contains duplicate members",
            fields={"assignee_ids": "must not repeat"},
        )

    placeholders = ", ".join("?" for _ in unique_ids)
    rows = await db.fetch_all(
        f"SELECT id FROM house_members WHERE house_id = ? AND id IN ({placeholders})",  # noqa: S608 - only placeholders are interpolated
        [house_id, *unique_ids],
    )
    found = {row["id"] for row in rows}
    foreign = [assignee_id for assignee_id in unique_ids if assignee_id not in found]

    if foreign:
        logger.warning("Rejected assignees outside house %s: %s", house_id, foreign)
        raise BusinessRuleError(
            "Some assignees are not members of this house",
            fields={"assignee_ids": ", ".join(foreign)},
        )

    return unique_ids


async def _validate_category(db: Database, house_id: str, category_id: str) -> None:
    category = await category_service.find_category(db=db, house_id=house_id, category_id=category_id)
    if category is None:
        raise BusinessRuleError("Category does not belong to this house", fields={"category_id": category_id})


async def create_task(*, db: Database, house_id: str, created_by_id: str, data: TaskCreate) -> Task:
    """Create a task and its assignments in a house.

    All scoping checks run before anything is written; the task row and its
    assignment rows are then inserted in one transaction.

    Args:
        db: Database handle
        house_id: Owning house
        created_by_id: Membership ID of the creator
        data: Validated task payload

    Returns:
        Created task with assignees

    Raises:
        BusinessRuleError: If an assignee or the category is outside the house,
            or there are too many assignees
    """
    with span("task_service.create_task"):
        assignee_ids = await _validate_assignees(db, house_id, data.assignee_ids)

        if data.category_id is not None:
            await _validate_category(db, house_id, data.category_id)

        async with db.transaction():
            record = await db.create_record(
                collection="tasks",
                data={
                    "title": data.title,
                    "description": data.description,
                    "priority": data.priority,
                    "due_date": data.due_date,
                    "status": TaskStatus.PENDING,
                    "house_id": house_id,
                    "category_id": data.category_id,
                    "created_by_id": created_by_id,
                },
            )
            await db.create_records(
                collection="task_assignees",
                rows=[{"task_id": record["id"], "house_member_id": member_id} for member_id in assignee_ids],
            )

        logger.info(
            "Created task '%s' in house %s (assignees: %d)",
            data.title,
            house_id,
            len(assignee_ids),
        )
        return await get_task(db=db, task_id=record["id"], house_id=house_id)


async def list_tasks(*, db: Database, house_id: str, actor_user_id: str, filters: TaskFilters) -> TaskPage:
    """List a house's tasks with conjunctive filters and offset pagination.

    Ordered by priority (high first), then due date (soonest first, undated
    last), then newest first.

    Raises:
        ForbiddenError: If the user is not a member of the house
    """
    with span("task_service.list_tasks"):
        membership = await house_service.get_membership(db=db, house_id=house_id, user_id=actor_user_id)
        if membership is None:
            raise ForbiddenError("You are not a member of this house")

        limit = filters.effective_limit
        where_clause, params = queries.build_task_where(
            house_id=house_id,
            filters=filters,
            actor_membership_id=membership.id,
            now=datetime.now(UTC),
        )

        total = int(await db.fetch_value(queries.task_count_query(where_clause), params) or 0)
        records = await db.fetch_all(
            queries.task_page_query(where_clause),
            [*params, limit, (filters.page - 1) * limit],
        )
        tasks = await _hydrate(db, records)

        logger.debug("Listed %d of %d tasks in house %s", len(tasks), total, house_id)
        return TaskPage(
            tasks=tasks,
            pagination=Pagination(page=filters.page, limit=limit, total=total, pages=math.ceil(total / limit)),
        )


async def get_task(*, db: Database, task_id: str, house_id: str) -> Task:
    """Get a task by ID within a house.

    Raises:
        NotFoundError: If no such task exists in that house
    """
    record = await db.get_first_record(collection="tasks", where={"id": task_id, "house_id": house_id})
    if record is None:
        raise NotFoundError("Task not found")

    tasks = await _hydrate(db, [record])
    return tasks[0]


async def _get_modifiable_task(db: Database, task_id: str, house_id: str, actor: Actor, action: str) -> Task:
    task = await get_task(db=db, task_id=task_id, house_id=house_id)
    if not can_modify(task, actor):
        logger.warning("Member %s may not %s task %s", actor.membership_id, action, task_id)
        raise ForbiddenError(f"Only task creator, assignees, or house owner can {action} this task")
    return task


async def update_task(*, db: Database, task_id: str, house_id: str, actor: Actor, data: TaskUpdate) -> Task:
    """Apply a partial update to a task.

    Omitted fields stay unchanged; an explicit null clears description,
    due date or category.

    Raises:
        NotFoundError: If the task is not in the house
        ForbiddenError: If the actor may not modify the task
        BusinessRuleError: If the new category is outside the house
    """
    with span("task_service.update_task"):
        await _get_modifiable_task(db, task_id, house_id, actor, "update")

        provided = data.model_fields_set
        changes: dict[str, Any] = {}

        if "title" in provided and data.title is not None:
            changes["title"] = data.title
        if "priority" in provided and data.priority is not None:
            changes["priority"] = data.priority
        if "description" in provided:
            changes["description"] = data.description
        if "due_date" in provided:
            changes["due_date"] = data.due_date
        if "category_id" in provided:
            if data.category_id is not None:
                await _validate_category(db, house_id, data.category_id)
            changes["category_id"] = data.category_id

        if changes:
            await db.update_record(collection="tasks", record_id=task_id, data=changes)
            logger.info("Updated task %s fields %s", task_id, sorted(changes))

        return await get_task(db=db, task_id=task_id, house_id=house_id)


async def update_status(*, db: Database, task_id: str, house_id: str, actor: Actor, status: TaskStatus) -> Task:
    """Move a task to PENDING or COMPLETED, stamping or clearing completed_at.

    Raises:
        NotFoundError: If the task is not in the house
        ForbiddenError: If the actor may not modify the task
    """
    with span("task_service.update_status"):
        await _get_modifiable_task(db, task_id, house_id, actor, "update the status of")

        await db.update_record(
            collection="tasks",
            record_id=task_id,
            data=state_machine.status_update_data(status=status),
        )

        logger.info("Task %s is now %s", task_id, status)
        return await get_task(db=db, task_id=task_id, house_id=house_id)


async def update_assignees(
    *,
    db: Database,
    task_id: str,
    house_id: str,
    actor: Actor,
    assignee_ids: list[str],
) -> Task:
    """Replace a task's assignee set. An empty list unassigns everyone.

    Raises:
        NotFoundError: If the task is not in the house
        ForbiddenError: If the actor may not modify the task
        BusinessRuleError: If over the cap or an assignee is outside the house
    """
    with span("task_service.update_assignees"):
        await _get_modifiable_task(db, task_id, house_id, actor, "update the assignees of")
        member_ids = await _validate_assignees(db, house_id, assignee_ids)

        async with db.transaction():
            await db.delete_records(collection="task_assignees", where={"task_id": task_id})
            await db.create_records(
                collection="task_assignees",
                rows=[{"task_id": task_id, "house_member_id": member_id} for member_id in member_ids],
            )

        logger.info("Task %s now has %d assignees", task_id, len(member_ids))
        return await get_task(db=db, task_id=task_id, house_id=house_id)


async def delete_task(*, db: Database, task_id: str, house_id: str, actor: Actor) -> None:
    """Delete a task and its assignments. Assignees alone may not delete.

    Raises:
        NotFoundError: If the task is not in the house
        ForbiddenError: If the actor is neither the creator nor an owner
    """
    with span("task_service.delete_task"):
        task = await get_task(db=db, task_id=task_id, house_id=house_id)

        if not can_delete(task, actor):
            logger.warning("Member %s may not delete task %s", actor.membership_id, task_id)
            raise ForbiddenError("Only task creator or house owner can delete this task")

        await db.delete_record(collection="tasks", record_id=task_id)
        logger.info("Deleted task %s from house %s", task_id, house_id)
