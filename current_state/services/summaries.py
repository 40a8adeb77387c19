"""Daily roll-up of a user's activity, used by the review screens."""

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from current_state.models.checkin import DailyResponse, TaskSuggestion
from current_state.models.summary import DailySummary
from current_state.models.task import Task
from current_state.models.user import User

logger = structlog.get_logger()


def day_bounds(day: date, tz: str) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min, tzinfo=ZoneInfo(tz or "UTC"))
    return start, start + timedelta(days=1)


def _mean(values: list[int]) -> float | None:
    if not values:
        return None
    return round(sum(values) / len(values), 2)


def rollup_day(session: Session, user: User, day: date) -> DailySummary:
    """Create or refresh the summary row for one user and one local day."""
    start, end = day_bounds(day, user.timezone)

    completed = session.execute(
        select(Task).where(
            Task.user_id == user.id,
            Task.completed_at >= start,
            Task.completed_at < end,
        )
    ).scalars().all()

    actions = session.execute(
        select(TaskSuggestion.user_action).where(
            TaskSuggestion.user_id == user.id,
            TaskSuggestion.responded_at >= start,
            TaskSuggestion.responded_at < end,
        )
    ).scalars().all()

    responses = session.execute(
        select(DailyResponse).where(
            DailyResponse.user_id == user.id,
            DailyResponse.responded_at >= start,
            DailyResponse.responded_at < end,
        )
    ).scalars().all()

    summary = session.execute(
        select(DailySummary).where(
            DailySummary.user_id == user.id,
            DailySummary.summary_date == day,
        )
    ).scalar_one_or_none()
    if summary is None:
        summary = DailySummary(user_id=user.id, summary_date=day)
        session.add(summary)

    goal_ids = sorted({str(t.goal_id) for t in completed if t.goal_id is not None})

    summary.tasks_completed = len(completed)
    summary.tasks_accepted = sum(1 for a in actions if a in ("accepted", "completed"))
    summary.tasks_deferred = sum(1 for a in actions if a == "deferred")
    summary.value_generated = float(sum(t.estimated_value or 0 for t in completed))
    summary.avg_energy_level = _mean([r.energy_level for r in responses])
    summary.avg_mental_clarity = _mean([r.mental_clarity for r in responses])
    summary.checkins_count = len(responses)
    summary.goals_worked_on = goal_ids or None
    summary.is_active_day = bool(completed or responses)

    logger.info(
        "daily_summary_rolled_up",
        user_id=str(user.id),
        day=day.isoformat(),
        tasks_completed=summary.tasks_completed,
        checkins=summary.checkins_count,
    )
    return summary
