"""Pure state transition functions for the task lifecycle.

PENDING and COMPLETED are open to each other in both directions; there is no
terminal state, so every status change is accepted and only its side effects
on ``completed_at`` differ.
"""

from datetime import UTC, datetime
from typing import Any

from homeboard.domain.task import TaskStatus


def status_update_data(*, status: TaskStatus, now: datetime | None = None) -> dict[str, Any]:
    """Build the field changes for entering ``status``.

    Entering COMPLETED stamps ``completed_at`` with the current time on every
    call, including repeated completions. Entering PENDING clears it.
    """
    if status == TaskStatus.COMPLETED:
        return {"status": status, "completed_at": now or datetime.now(UTC)}
    return {"status": status, "completed_at": None}
