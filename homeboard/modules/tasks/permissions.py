"""Task permission resolver.

Every task mutation is authorised through ``can_modify`` or ``can_delete``.
"""

from homeboard.domain.house import Actor, Role
from homeboard.domain.task import Task


def can_modify(task: Task, actor: Actor) -> bool:
    """Creator, any assignee, or a house owner may update a task, its status and assignees."""
    if task.created_by_id is not None and task.created_by_id == actor.membership_id:
        return True

    if actor.membership_id in task.assignee_ids:
        return True

    return actor.role == Role.OWNER


def can_delete(task: Task, actor: Actor) -> bool:
    """Only the creator or a house owner may delete a task; assignees may not."""
    if task.created_by_id is not None and task.created_by_id == actor.membership_id:
        return True

    return actor.role == Role.OWNER
