"""Task endpoints nested under a house."""

from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from homeboard.domain.create_models import TaskCreate
from homeboard.domain.task import Task, TaskFilters, TaskPage
from homeboard.domain.update_models import TaskAssigneesUpdate, TaskStatusUpdate, TaskUpdate
from homeboard.interface.dependencies import DbDep, MemberDep
from homeboard.modules.tasks import service as task_service


router = APIRouter(prefix="/houses/{house_id}/tasks", tags=["tasks"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(house_id: str, body: TaskCreate, db: DbDep, actor: MemberDep) -> Task:
    return await task_service.create_task(
        db=db,
        house_id=house_id,
        created_by_id=actor.membership_id,
        data=body,
    )


@router.get("")
async def list_tasks(
    house_id: str,
    filters: Annotated[TaskFilters, Query()],
    db: DbDep,
    actor: MemberDep,
) -> TaskPage:
    """List the house's tasks, most urgent first."""
    return await task_service.list_tasks(db=db, house_id=house_id, actor_user_id=actor.user_id, filters=filters)


@router.get("/{task_id}")
async def get_task(house_id: str, task_id: str, db: DbDep, _actor: MemberDep) -> Task:
    return await task_service.get_task(db=db, task_id=task_id, house_id=house_id)


@router.put("/{task_id}")
async def update_task(house_id: str, task_id: str, body: TaskUpdate, db: DbDep, actor: MemberDep) -> Task:
    return await task_service.update_task(db=db, task_id=task_id, house_id=house_id, actor=actor, data=body)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(house_id: str, task_id: str, db: DbDep, actor: MemberDep) -> Response:
    await task_service.delete_task(db=db, task_id=task_id, house_id=house_id, actor=actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{task_id}/status")
async def update_task_status(
    house_id: str,
    task_id: str,
    body: TaskStatusUpdate,
    db: DbDep,
    actor: MemberDep,
) -> Task:
    return await task_service.update_status(
        db=db,
        task_id=task_id,
        house_id=house_id,
        actor=actor,
        status=body.status,
    )


@router.put("/{task_id}/assignees")
async def update_task_assignees(
    house_id: str,
    task_id: str,
    body: TaskAssigneesUpdate,
    db: DbDep,
    actor: MemberDep,
) -> Task:
    """Replace the task's assignees; an empty list unassigns everyone."""
    return await task_service.update_assignees(
        db=db,
        task_id=task_id,
        house_id=house_id,
        actor=actor,
        assignee_ids=body.assignee_ids,
    )
