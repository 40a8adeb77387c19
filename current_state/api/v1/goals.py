from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from current_state.api.v1.tasks import build_task_response
from current_state.core.database import get_db
from current_state.core.dependencies import get_current_user, get_owned_or_404
from current_state.models.goal import Goal
from current_state.models.task import Task
from current_state.models.user import User
from current_state.schemas.goal import (
    GOAL_CATEGORIES,
    CreateFromSuggestionsRequest,
    GoalCreate,
    GoalResponse,
    GoalUpdate,
    TaskTemplate,
)
from current_state.schemas.task import TaskResponse
from current_state.services.audit import log_action
from current_state.services.task_templates import GOAL_TASK_TEMPLATES, suggest_tasks_for_goal

router = APIRouter(prefix="/goals", tags=["goals"])


def _build_goal_response(goal: Goal, task_count: int = 0) -> GoalResponse:
    return GoalResponse(
        id=str(goal.id),
        title=goal.title,
        category=goal.category,
        description=goal.description,
        success_metric=goal.success_metric,
        target_date=goal.target_date,
        estimated_value=goal.estimated_value,
        income_stream_name=goal.income_stream_name,
        is_active=goal.is_active,
        is_archived=goal.is_archived,
        completed_at=goal.completed_at,
        display_order=goal.display_order,
        created_at=goal.created_at,
        task_count=task_count,
    )


async def _active_task_count(db: AsyncSession, goal_id: UUID) -> int:
    result = await db.execute(
        select(func.count()).select_from(Task).where(Task.goal_id == goal_id, Task.status == "active")
    )
    return result.scalar() or 0


@router.get("", response_model=list[GoalResponse])
async def list_goals(
    include_archived: bool = False,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    query = select(Goal).where(Goal.user_id == current_user.id)
    if not include_archived:
        query = query.where(Goal.is_active.is_(True), Goal.is_archived.is_(False))
    query = query.order_by(Goal.display_order, Goal.created_at)

    result = await db.execute(query)
    goals = result.scalars().all()

    counts_result = await db.execute(
        select(Task.goal_id, func.count())
        .where(Task.user_id == current_user.id, Task.status == "active", Task.goal_id.isnot(None))
        .group_by(Task.goal_id)
    )
    counts = dict(counts_result.all())

    return [_build_goal_response(g, task_count=counts.get(g.id, 0)) for g in goals]


@router.post("", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def create_goal(
    data: GoalCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    display_order = data.display_order
    if display_order is None:
        count_result = await db.execute(
            select(func.count()).select_from(Goal).where(
                Goal.user_id == current_user.id, Goal.is_active.is_(True)
            )
        )
        display_order = count_result.scalar() or 0

    goal = Goal(
        user_id=current_user.id,
        title=data.title,
        category=data.category,
        description=data.description,
        success_metric=data.success_metric,
        target_date=data.target_date,
        estimated_value=data.estimated_value,
        income_stream_name=data.income_stream_name,
        display_order=display_order,
        is_active=True,
        is_archived=False,
    )
    db.add(goal)
    await db.flush()

    await log_action(
        db,
        user_id=current_user.id,
        action="create_goal",
        entity_type="goal",
        entity_id=str(goal.id),
        details={"title": data.title, "category": data.category},
    )

    return _build_goal_response(goal)


@router.get("/suggestions/{category}", response_model=list[TaskTemplate])
async def list_category_suggestions(
    category: str,
    current_user: User = Depends(get_current_user),
):
    """Starter tasks for a goal category."""
    if category not in GOAL_CATEGORIES:
        raise HTTPException(status_code=404, detail="Unknown goal category")
    return GOAL_TASK_TEMPLATES[category]


@router.get("/{goal_id}", response_model=GoalResponse)
async def get_goal(
    goal_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    goal = await get_owned_or_404(db, Goal, goal_id, current_user.id, "Goal")
    return _build_goal_response(goal, task_count=await _active_task_count(db, goal.id))


@router.put("/{goal_id}", response_model=GoalResponse)
async def update_goal(
    goal_id: UUID,
    data: GoalUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    goal = await get_owned_or_404(db, Goal, goal_id, current_user.id, "Goal")

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(goal, field, value)
    await db.flush()

    return _build_goal_response(goal, task_count=await _active_task_count(db, goal.id))


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(
    goal_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    # Soft delete: linked tasks and habits keep their history.
    goal = await get_owned_or_404(db, Goal, goal_id, current_user.id, "Goal")
    goal.is_active = False
    goal.is_archived = True

    await log_action(
        db,
        user_id=current_user.id,
        action="archive_goal",
        entity_type="goal",
        entity_id=str(goal.id),
        details={"title": goal.title},
    )


@router.post("/{goal_id}/complete", response_model=GoalResponse)
async def complete_goal(
    goal_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    goal = await get_owned_or_404(db, Goal, goal_id, current_user.id, "Goal")
    if goal.completed_at is not None:
        raise HTTPException(status_code=409, detail="Goal already completed")
    goal.completed_at = datetime.now(timezone.utc)
    await db.flush()
    return _build_goal_response(goal, task_count=await _active_task_count(db, goal.id))


@router.get("/{goal_id}/suggestions", response_model=list[TaskTemplate])
async def list_goal_suggestions(
    goal_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    goal = await get_owned_or_404(db, Goal, goal_id, current_user.id, "Goal")
    return suggest_tasks_for_goal(goal.title, goal.category)


@router.post(
    "/{goal_id}/tasks/from-suggestions",
    response_model=list[TaskResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_tasks_from_suggestions(
    goal_id: UUID,
    data: CreateFromSuggestionsRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    goal = await get_owned_or_404(db, Goal, goal_id, current_user.id, "Goal")

    available = {t["title"]: t for t in suggest_tasks_for_goal(goal.title, goal.category)}
    for template in GOAL_TASK_TEMPLATES.get(goal.category, []):
        available.setdefault(template["title"], template)

    unknown = [title for title in data.titles if title not in available]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown suggestions: {', '.join(unknown)}")

    created = []
    for title in dict.fromkeys(data.titles):
        template = available[title]
        task = Task(
            user_id=current_user.id,
            goal_id=goal.id,
            title=template["title"],
            energy_required=template["energy_required"],
            work_type=template["work_type"],
            time_estimate=template["time_estimate"],
            priority=template["priority"],
            status="active",
            times_suggested=0,
            times_accepted=0,
            times_declined=0,
        )
        db.add(task)
        created.append(task)
    await db.flush()

    return [build_task_response(task, goal_title=goal.title) for task in created]
