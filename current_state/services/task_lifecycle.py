"""Status transitions for tasks.

active -> in_progress -> completed, active -> deferred -> active (once the
deferral date arrives), active -> archived.
"""

from datetime import date, datetime, timedelta, timezone
from uuid import UUID

import structlog
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from current_state.models.task import Task
from current_state.models.user import User

logger = structlog.get_logger()


async def reactivate_due_tasks(db: AsyncSession, user_id: UUID, today: date) -> int:
    """Move deferred tasks whose date has arrived back to active."""
    result = await db.execute(
        update(Task)
        .where(
            Task.user_id == user_id,
            Task.status == "deferred",
            Task.deferred_until <= today,
        )
        .values(status="active", deferred_until=None)
    )
    if result.rowcount:
        logger.info("deferred_tasks_reactivated", user_id=str(user_id), count=result.rowcount)
    return result.rowcount or 0


def complete_task(task: Task, user: User, now: datetime | None = None) -> None:
    now = now or datetime.now(timezone.utc)
    task.status = "completed"
    task.completed_at = now
    task.deferred_until = None
    if user.first_task_completed_at is None:
        user.first_task_completed_at = now


def defer_task(task: Task, today: date, until: date | None = None) -> date:
    until = until or today + timedelta(days=1)
    if until <= today:
        raise ValueError("Deferral date must be in the future")
    task.status = "deferred"
    task.deferred_until = until
    return until


def archive_task(task: Task) -> None:
    task.status = "archived"


def change_status(task: Task, new_status: str, user: User, today: date) -> None:
    """Route a plain status change through the matching transition."""
    if new_status == task.status:
        return
    if new_status == "completed":
        complete_task(task, user)
    elif new_status == "deferred":
        defer_task(task, today)
    elif new_status == "archived":
        archive_task(task)
    else:
        # Reopened or restarted: no leftover deferral or completion stamp.
        task.status = new_status
        task.deferred_until = None
        task.completed_at = None
