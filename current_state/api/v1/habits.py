from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from current_state.core.database import get_db
from current_state.core.dependencies import check_goal_owned, get_current_user, get_owned_or_404
from current_state.models.habit import Habit, HabitCompletion
from current_state.models.user import User
from current_state.schemas.habit import (
    HabitCompleteRequest,
    HabitCompletionResponse,
    HabitCreate,
    HabitResponse,
    HabitStatsResponse,
    HabitUpdate,
)
from current_state.services.streaks import HabitStats, compute_habit_stats, today_in

router = APIRouter(prefix="/habits", tags=["habits"])


def _stats_response(stats: HabitStats) -> HabitStatsResponse:
    return HabitStatsResponse(
        total_completions=stats.total_completions,
        current_streak=stats.current_streak,
        best_streak=stats.best_streak,
        last_completed=stats.last_completed,
        last_7_days=stats.last_7_days,
        weekly_rate=stats.weekly_rate,
        completed_today=stats.completed_today,
    )


def _build_habit_response(habit: Habit, stats: HabitStats | None = None) -> HabitResponse:
    return HabitResponse(
        id=str(habit.id),
        title=habit.title,
        habit_type=habit.habit_type,
        full_version=habit.full_version,
        scaled_version=habit.scaled_version,
        minimal_version=habit.minimal_version,
        target_frequency=habit.target_frequency,
        target_days=habit.target_days,
        linked_goal_id=str(habit.linked_goal_id) if habit.linked_goal_id else None,
        why_this_helps=habit.why_this_helps,
        best_time_of_day=habit.best_time_of_day,
        display_order=habit.display_order,
        created_at=habit.created_at,
        stats=_stats_response(stats) if stats is not None else None,
    )


async def _stats_for(db: AsyncSession, habit_id: UUID, user: User) -> HabitStats:
    result = await db.execute(
        select(HabitCompletion.completed_at).where(HabitCompletion.habit_id == habit_id)
    )
    return compute_habit_stats(list(result.scalars().all()), today_in(user.timezone), user.timezone)


@router.get("", response_model=list[HabitResponse])
async def list_habits(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Habit)
        .where(Habit.user_id == current_user.id, Habit.is_active.is_(True))
        .order_by(Habit.display_order, Habit.created_at)
    )
    habits = result.scalars().all()

    completions: dict[UUID, list[datetime]] = {h.id: [] for h in habits}
    if habits:
        rows = await db.execute(
            select(HabitCompletion.habit_id, HabitCompletion.completed_at).where(
                HabitCompletion.habit_id.in_(list(completions))
            )
        )
        for habit_id, completed_at in rows.all():
            completions[habit_id].append(completed_at)

    today = today_in(current_user.timezone)
    return [
        _build_habit_response(h, compute_habit_stats(completions[h.id], today, current_user.timezone))
        for h in habits
    ]


@router.post("", response_model=HabitResponse, status_code=status.HTTP_201_CREATED)
async def create_habit(
    data: HabitCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    title = data.title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="Title cannot be blank")
    await check_goal_owned(db, data.linked_goal_id, current_user.id)

    count_result = await db.execute(
        select(func.count()).select_from(Habit).where(
            Habit.user_id == current_user.id, Habit.is_active.is_(True)
        )
    )

    habit = Habit(
        user_id=current_user.id,
        title=title,
        habit_type=data.habit_type,
        full_version=(data.full_version or title).strip(),
        scaled_version=data.scaled_version,
        minimal_version=data.minimal_version,
        target_frequency=data.target_frequency,
        target_days=data.target_days,
        linked_goal_id=data.linked_goal_id,
        why_this_helps=data.why_this_helps,
        best_time_of_day=data.best_time_of_day,
        is_active=True,
        display_order=count_result.scalar() or 0,
    )
    db.add(habit)
    await db.flush()

    return _build_habit_response(habit, HabitStats())


@router.put("/{habit_id}", response_model=HabitResponse)
async def update_habit(
    habit_id: UUID,
    data: HabitUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    habit = await get_owned_or_404(db, Habit, habit_id, current_user.id, "Habit")

    update_data = data.model_dump(exclude_unset=True)
    if "title" in update_data:
        update_data["title"] = update_data["title"].strip()
        if not update_data["title"]:
            raise HTTPException(status_code=400, detail="Title cannot be blank")
    if "linked_goal_id" in update_data:
        await check_goal_owned(db, update_data["linked_goal_id"], current_user.id)
    for field, value in update_data.items():
        setattr(habit, field, value)
    await db.flush()

    return _build_habit_response(habit, await _stats_for(db, habit.id, current_user))


@router.delete("/{habit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_habit(
    habit_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    # Completion history stays; the habit just stops being listed.
    habit = await get_owned_or_404(db, Habit, habit_id, current_user.id, "Habit")
    habit.is_active = False


@router.post(
    "/{habit_id}/complete",
    response_model=HabitCompletionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def complete_habit(
    habit_id: UUID,
    data: HabitCompleteRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    habit = await get_owned_or_404(db, Habit, habit_id, current_user.id, "Habit")
    if not habit.is_active:
        raise HTTPException(status_code=404, detail="Habit not found")

    stats = await _stats_for(db, habit.id, current_user)
    if stats.completed_today:
        raise HTTPException(status_code=409, detail="Habit already completed today")

    completion = HabitCompletion(
        habit_id=habit.id,
        user_id=current_user.id,
        completed_at=datetime.now(timezone.utc),
        version_completed=data.version_completed,
        energy_level_before=data.energy_level_before,
        energy_level_after=data.energy_level_after,
        notes=data.notes,
    )
    db.add(completion)
    await db.flush()

    return HabitCompletionResponse(
        id=str(completion.id),
        habit_id=str(habit.id),
        completed_at=completion.completed_at,
        version_completed=completion.version_completed,
        stats=_stats_response(await _stats_for(db, habit.id, current_user)),
    )


@router.get("/{habit_id}/stats", response_model=HabitStatsResponse)
async def habit_stats(
    habit_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    habit = await get_owned_or_404(db, Habit, habit_id, current_user.id, "Habit")
    return _stats_response(await _stats_for(db, habit.id, current_user))
