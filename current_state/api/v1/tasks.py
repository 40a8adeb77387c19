from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from current_state.core.database import get_db
from current_state.core.dependencies import check_goal_owned, get_current_user, get_owned_or_404
from current_state.models.goal import Goal
from current_state.models.task import Task
from current_state.models.user import User
from current_state.schemas.task import (
    DeferRequest,
    PaginatedTasks,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)
from current_state.services.audit import log_action
from current_state.services.streaks import today_in
from current_state.services.task_lifecycle import (
    archive_task,
    change_status,
    complete_task,
    defer_task,
    reactivate_due_tasks,
)

router = APIRouter(prefix="/tasks", tags=["tasks"])


def build_task_response(task: Task, goal_title: str | None = None) -> TaskResponse:
    return TaskResponse(
        id=str(task.id),
        title=task.title,
        description=task.description,
        goal_id=str(task.goal_id) if task.goal_id else None,
        goal_title=goal_title,
        energy_required=task.energy_required,
        work_type=task.work_type,
        time_estimate=task.time_estimate,
        priority=task.priority,
        estimated_value=task.estimated_value,
        is_billable=task.is_billable,
        status=task.status,
        completed_at=task.completed_at,
        deferred_until=task.deferred_until,
        times_suggested=task.times_suggested,
        times_accepted=task.times_accepted,
        times_declined=task.times_declined,
        created_at=task.created_at,
    )


async def _goal_title(db: AsyncSession, goal_id: UUID | None) -> str | None:
    if goal_id is None:
        return None
    goal = await db.get(Goal, goal_id)
    return goal.title if goal else None


@router.get("", response_model=PaginatedTasks)
async def list_tasks(
    status_filter: str = Query("active", alias="status"),
    work_type: str | None = None,
    priority: str | None = None,
    goal_id: UUID | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    today = today_in(current_user.timezone)
    await reactivate_due_tasks(db, current_user.id, today)

    filters = [Task.user_id == current_user.id]
    if status_filter != "all":
        filters.append(Task.status == status_filter)
    if status_filter == "active":
        filters.append(or_(Task.deferred_until.is_(None), Task.deferred_until <= today))
    if work_type:
        filters.append(Task.work_type == work_type)
    if priority:
        filters.append(Task.priority == priority)
    if goal_id:
        filters.append(Task.goal_id == goal_id)

    total = (await db.execute(select(func.count()).select_from(Task).where(*filters))).scalar()

    query = (
        select(Task)
        .options(selectinload(Task.goal))
        .where(*filters)
        .order_by(Task.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    result = await db.execute(query)
    tasks = result.scalars().all()

    return PaginatedTasks(
        items=[build_task_response(t, t.goal.title if t.goal else None) for t in tasks],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    data: TaskCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await check_goal_owned(db, data.goal_id, current_user.id)

    task = Task(
        user_id=current_user.id,
        goal_id=data.goal_id,
        title=data.title,
        description=data.description,
        energy_required=data.energy_required,
        work_type=data.work_type,
        time_estimate=data.time_estimate,
        priority=data.priority,
        estimated_value=data.estimated_value,
        is_billable=data.is_billable,
        ideal_context=data.ideal_context,
        status="active",
        times_suggested=0,
        times_accepted=0,
        times_declined=0,
    )
    db.add(task)
    await db.flush()

    await log_action(
        db,
        user_id=current_user.id,
        action="create_task",
        entity_type="task",
        entity_id=str(task.id),
        details={"title": data.title},
    )

    return build_task_response(task, await _goal_title(db, task.goal_id))


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    task = await get_owned_or_404(db, Task, task_id, current_user.id, "Task")
    return build_task_response(task, await _goal_title(db, task.goal_id))


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: UUID,
    data: TaskUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    task = await get_owned_or_404(db, Task, task_id, current_user.id, "Task")

    update_data = data.model_dump(exclude_unset=True)
    new_status = update_data.pop("status", None)
    if "goal_id" in update_data:
        await check_goal_owned(db, update_data["goal_id"], current_user.id)
    if update_data.get("title") is not None:
        update_data["title"] = update_data["title"].strip()
        if not update_data["title"]:
            raise HTTPException(status_code=400, detail="Title cannot be blank")

    for field, value in update_data.items():
        setattr(task, field, value)
    if new_status is not None:
        change_status(task, new_status, current_user, today_in(current_user.timezone))
    await db.flush()

    return build_task_response(task, await _goal_title(db, task.goal_id))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    task = await get_owned_or_404(db, Task, task_id, current_user.id, "Task")

    await log_action(
        db,
        user_id=current_user.id,
        action="delete_task",
        entity_type="task",
        entity_id=str(task.id),
        details={"title": task.title},
    )

    await db.delete(task)


@router.post("/{task_id}/complete", response_model=TaskResponse)
async def complete(
    task_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    task = await get_owned_or_404(db, Task, task_id, current_user.id, "Task")
    if task.status == "completed":
        raise HTTPException(status_code=409, detail="Task already completed")

    complete_task(task, current_user)
    await db.flush()

    return build_task_response(task, await _goal_title(db, task.goal_id))


@router.post("/{task_id}/defer", response_model=TaskResponse)
async def defer(
    task_id: UUID,
    data: DeferRequest | None = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    task = await get_owned_or_404(db, Task, task_id, current_user.id, "Task")
    if task.status in ("completed", "archived"):
        raise HTTPException(status_code=400, detail=f"Cannot defer a {task.status} task")

    today: date = today_in(current_user.timezone)
    try:
        defer_task(task, today, data.until if data else None)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    await db.flush()

    return build_task_response(task, await _goal_title(db, task.goal_id))


@router.post("/{task_id}/archive", response_model=TaskResponse)
async def archive(
    task_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    task = await get_owned_or_404(db, Task, task_id, current_user.id, "Task")
    archive_task(task)
    await db.flush()
    return build_task_response(task, await _goal_title(db, task.goal_id))
