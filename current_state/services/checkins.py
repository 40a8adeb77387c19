"""Check-in flow: record the user's state, match tasks, remember what was suggested."""

from datetime import date, datetime, timezone

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from current_state.core.config import get_settings
from current_state.models.checkin import DailyResponse, TaskSuggestion
from current_state.models.task import Task
from current_state.models.user import User
from current_state.schemas.checkin import CheckinCreate
from current_state.services.matching import RankedMatch, UserState, match_tasks
from current_state.services.streaks import advance_daily_streak, today_in
from current_state.services.task_lifecycle import complete_task, defer_task, reactivate_due_tasks

logger = structlog.get_logger()


async def load_active_tasks(db: AsyncSession, user_id) -> list[Task]:
    # Oldest first: ties in the ranking go to the task that has waited longest.
    result = await db.execute(
        select(Task)
        .options(selectinload(Task.goal))
        .where(Task.user_id == user_id, Task.status == "active")
        .order_by(Task.created_at, Task.id)
    )
    return list(result.scalars().all())


async def record_checkin(
    db: AsyncSession, user: User, data: CheckinCreate
) -> tuple[DailyResponse, list[tuple[TaskSuggestion, RankedMatch]]]:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    today = today_in(user.timezone)

    await reactivate_due_tasks(db, user.id, today)

    state = UserState(
        energy_level=data.energy_level,
        mental_clarity=data.mental_clarity,
        emotional_state=data.emotional_state,
        available_time=data.available_time,
        environment_quality=data.environment_quality,
    )
    response = DailyResponse(
        user_id=user.id,
        responded_at=now,
        energy_level=data.energy_level,
        mental_clarity=data.mental_clarity,
        emotional_state=data.emotional_state,
        available_time=data.available_time,
        environment_quality=data.environment_quality,
        composite_score=state.composite_score,
        notes=data.notes,
    )
    db.add(response)
    await db.flush()

    tasks = await load_active_tasks(db, user.id)
    matches = match_tasks(tasks, state, limit=settings.MAX_SUGGESTIONS)

    suggestions = []
    for rank, match in enumerate(matches, start=1):
        suggestion = TaskSuggestion(
            user_id=user.id,
            daily_response_id=response.id,
            task_id=match.task.id,
            suggested_at=now,
            match_score=match.score,
            match_reasons=list(match.reasons),
            suggestion_rank=rank,
        )
        db.add(suggestion)
        match.task.times_suggested = (match.task.times_suggested or 0) + 1
        suggestions.append((suggestion, match))

    response.suggested_task_ids = [str(match.task.id) for match in matches]

    user.last_active_at = now
    user.streak_current, user.streak_longest = advance_daily_streak(
        user.streak_current or 0, user.streak_longest or 0, user.last_checkin_date, today
    )
    user.last_checkin_date = today
    await db.flush()

    logger.info(
        "checkin_recorded",
        user_id=str(user.id),
        composite=state.composite_score,
        band=state.energy_band,
        candidates=len(tasks),
        suggested=len(matches),
    )
    return response, suggestions


def apply_suggestion_action(
    suggestion: TaskSuggestion,
    task: Task,
    user: User,
    action: str,
    today: date,
    decline_reason: str | None = None,
) -> None:
    """Record the user's answer to a suggestion and update the task's history."""
    now = datetime.now(timezone.utc)
    suggestion.user_action = action
    suggestion.responded_at = now

    if action == "accepted":
        task.times_accepted += 1
        task.status = "in_progress"
    elif action == "declined":
        task.times_declined += 1
        suggestion.decline_reason = decline_reason
    elif action == "deferred":
        task.times_declined += 1
        suggestion.decline_reason = decline_reason
        defer_task(task, today)
    elif action == "completed":
        task.times_accepted += 1
        complete_task(task, user, now)
    else:
        raise ValueError(f"Unknown suggestion action: {action}")
