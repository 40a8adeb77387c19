from datetime import date, datetime, timedelta, timezone
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from current_state.core.database import get_db
from current_state.core.dependencies import get_current_user
from current_state.models.checkin import DailyResponse
from current_state.models.goal import Goal
from current_state.models.planning import DailyCommitment, WeeklyPlan
from current_state.models.task import Task
from current_state.models.user import User
from current_state.schemas.planning import (
    CommitmentResponse,
    CommitmentsUpsert,
    GoalProgress,
    WeeklyPlanResponse,
    WeeklyPlanUpsert,
    WeeklyReview,
)
from current_state.services.streaks import today_in
from current_state.services.summaries import day_bounds
from current_state.services.task_lifecycle import complete_task

logger = structlog.get_logger()
router = APIRouter(prefix="/planning", tags=["planning"])


def week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def _build_plan_response(plan: WeeklyPlan) -> WeeklyPlanResponse:
    return WeeklyPlanResponse(
        id=str(plan.id),
        week_start_date=plan.week_start_date,
        focus_goal_ids=list(plan.focus_goal_ids or []),
        intentions=plan.intentions,
    )


def _build_commitment_response(commitment: DailyCommitment) -> CommitmentResponse:
    return CommitmentResponse(
        id=str(commitment.id),
        task_id=str(commitment.task_id),
        task_title=commitment.task.title,
        commitment_date=commitment.commitment_date,
        completed=commitment.completed,
        completed_at=commitment.completed_at,
        abandoned=commitment.abandoned,
    )


async def _get_plan(db: AsyncSession, user_id: UUID, monday: date) -> WeeklyPlan | None:
    result = await db.execute(
        select(WeeklyPlan).where(WeeklyPlan.user_id == user_id, WeeklyPlan.week_start_date == monday)
    )
    return result.scalar_one_or_none()


async def _commitments_for(db: AsyncSession, user_id: UUID, day: date) -> list[DailyCommitment]:
    result = await db.execute(
        select(DailyCommitment)
        .options(selectinload(DailyCommitment.task))
        .where(DailyCommitment.user_id == user_id, DailyCommitment.commitment_date == day)
        .order_by(DailyCommitment.created_at)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def _get_commitment(db: AsyncSession, commitment_id: UUID, user_id: UUID) -> DailyCommitment:
    result = await db.execute(
        select(DailyCommitment)
        .options(selectinload(DailyCommitment.task))
        .where(DailyCommitment.id == commitment_id, DailyCommitment.user_id == user_id)
    )
    commitment = result.scalar_one_or_none()
    if commitment is None:
        raise HTTPException(status_code=404, detail="Commitment not found")
    return commitment


# --- Weekly plan ---


@router.get("/weeks/current", response_model=WeeklyPlanResponse)
async def get_current_week(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    monday = week_start(today_in(current_user.timezone))
    plan = await _get_plan(db, current_user.id, monday)
    if plan is None:
        return WeeklyPlanResponse(id=None, week_start_date=monday, focus_goal_ids=[], intentions=None)
    return _build_plan_response(plan)


@router.put("/weeks/current", response_model=WeeklyPlanResponse)
async def upsert_current_week(
    data: WeeklyPlanUpsert,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    goal_ids = list(dict.fromkeys(data.focus_goal_ids))
    if goal_ids:
        result = await db.execute(
            select(Goal.id).where(Goal.id.in_(goal_ids), Goal.user_id == current_user.id)
        )
        if len(result.scalars().all()) != len(goal_ids):
            raise HTTPException(status_code=400, detail="Goal not found")

    monday = week_start(today_in(current_user.timezone))
    plan = await _get_plan(db, current_user.id, monday)
    if plan is None:
        plan = WeeklyPlan(user_id=current_user.id, week_start_date=monday)
        db.add(plan)

    plan.focus_goal_ids = [str(g) for g in goal_ids]
    plan.intentions = data.intentions
    await db.flush()

    return _build_plan_response(plan)


@router.get("/weeks/current/review", response_model=WeeklyReview)
async def review_current_week(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """What the week produced so far, grouped by goal."""
    monday = week_start(today_in(current_user.timezone))
    sunday = monday + timedelta(days=6)
    start, _ = day_bounds(monday, current_user.timezone)
    _, end = day_bounds(sunday, current_user.timezone)

    result = await db.execute(
        select(Task)
        .options(selectinload(Task.goal))
        .where(
            Task.user_id == current_user.id,
            Task.completed_at >= start,
            Task.completed_at < end,
        )
        .order_by(Task.completed_at)
    )
    completed = result.scalars().all()

    plan = await _get_plan(db, current_user.id, monday)
    focus_ids = set(plan.focus_goal_ids or []) if plan else set()

    groups: dict[str | None, GoalProgress] = {}
    for task in completed:
        key = str(task.goal_id) if task.goal_id else None
        if key not in groups:
            groups[key] = GoalProgress(
                goal_id=key,
                goal_title=task.goal.title if task.goal else "No goal",
                is_focus=key in focus_ids,
                completed_tasks=[],
            )
        groups[key].completed_tasks.append(task.title)

    commitments = await db.execute(
        select(DailyCommitment.completed).where(
            DailyCommitment.user_id == current_user.id,
            DailyCommitment.commitment_date >= monday,
            DailyCommitment.commitment_date <= sunday,
        )
    )
    commitment_flags = commitments.scalars().all()

    energy = await db.execute(
        select(func.count(DailyResponse.id), func.avg(DailyResponse.energy_level)).where(
            DailyResponse.user_id == current_user.id,
            DailyResponse.responded_at >= start,
            DailyResponse.responded_at < end,
        )
    )
    checkins_count, avg_energy = energy.one()

    return WeeklyReview(
        week_start_date=monday,
        week_end_date=sunday,
        tasks_completed=len(completed),
        value_generated=float(sum(t.estimated_value or 0 for t in completed)),
        commitments_made=len(commitment_flags),
        commitments_fulfilled=sum(1 for c in commitment_flags if c),
        checkins_count=checkins_count or 0,
        avg_energy_level=round(float(avg_energy), 2) if avg_energy is not None else None,
        goals=sorted(groups.values(), key=lambda g: (not g.is_focus, -len(g.completed_tasks))),
    )


# --- Daily commitments ---


@router.get("/commitments/{commitment_date}", response_model=list[CommitmentResponse])
async def list_commitments(
    commitment_date: date,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    commitments = await _commitments_for(db, current_user.id, commitment_date)
    return [_build_commitment_response(c) for c in commitments]


@router.put("/commitments/{commitment_date}", response_model=list[CommitmentResponse])
async def replace_commitments(
    commitment_date: date,
    data: CommitmentsUpsert,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Replace the committed tasks for a day. Existing rows for kept tasks survive."""
    task_ids = list(dict.fromkeys(data.task_ids))
    existing = {c.task_id: c for c in await _commitments_for(db, current_user.id, commitment_date)}

    if task_ids:
        result = await db.execute(
            select(Task.id, Task.status).where(Task.id.in_(task_ids), Task.user_id == current_user.id)
        )
        statuses = dict(result.all())
        if len(statuses) != len(task_ids):
            raise HTTPException(status_code=400, detail="Task not found")
        # Already-committed tasks may have been finished since; only new ones must be open.
        closed = [
            task_id
            for task_id, task_status in statuses.items()
            if task_id not in existing and task_status in ("completed", "archived")
        ]
        if closed:
            raise HTTPException(status_code=400, detail="Cannot commit to a closed task")

    for task_id, commitment in existing.items():
        if task_id not in task_ids:
            await db.delete(commitment)
    for task_id in task_ids:
        if task_id not in existing:
            db.add(
                DailyCommitment(
                    user_id=current_user.id,
                    task_id=task_id,
                    commitment_date=commitment_date,
                    completed=False,
                    abandoned=False,
                )
            )
    await db.flush()

    logger.info(
        "commitments_replaced",
        user_id=str(current_user.id),
        date=commitment_date.isoformat(),
        count=len(task_ids),
    )

    commitments = await _commitments_for(db, current_user.id, commitment_date)
    return [_build_commitment_response(c) for c in commitments]


@router.post("/commitments/{commitment_id}/complete", response_model=CommitmentResponse)
async def complete_commitment(
    commitment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    commitment = await _get_commitment(db, commitment_id, current_user.id)
    if commitment.completed:
        raise HTTPException(status_code=409, detail="Commitment already completed")

    now = datetime.now(timezone.utc)
    commitment.completed = True
    commitment.completed_at = now
    commitment.abandoned = False
    if commitment.task.status != "completed":
        complete_task(commitment.task, current_user, now)
    await db.flush()

    return _build_commitment_response(commitment)


@router.post("/commitments/{commitment_id}/abandon", response_model=CommitmentResponse)
async def abandon_commitment(
    commitment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    commitment = await _get_commitment(db, commitment_id, current_user.id)
    if commitment.completed:
        raise HTTPException(status_code=409, detail="Commitment already completed")
    if commitment.abandoned:
        raise HTTPException(status_code=409, detail="Commitment already abandoned")

    commitment.abandoned = True
    await db.flush()

    return _build_commitment_response(commitment)
