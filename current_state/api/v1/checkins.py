from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from current_state.core.database import get_db
from current_state.core.dependencies import get_current_user, get_owned_or_404
from current_state.models.checkin import DailyResponse, TaskSuggestion
from current_state.models.task import Task
from current_state.models.user import User
from current_state.schemas.checkin import (
    CheckinCreate,
    CheckinResponse,
    CheckinResult,
    MatchedTask,
    SuggestionRespondRequest,
    SuggestionResponse,
)
from current_state.services.checkins import apply_suggestion_action, record_checkin
from current_state.services.matching import energy_band
from current_state.services.streaks import today_in

logger = structlog.get_logger()
router = APIRouter(prefix="/checkins", tags=["checkins"])


def _build_checkin_response(response: DailyResponse) -> CheckinResponse:
    return CheckinResponse(
        id=str(response.id),
        responded_at=response.responded_at,
        energy_level=response.energy_level,
        mental_clarity=response.mental_clarity,
        emotional_state=response.emotional_state,
        available_time=response.available_time,
        environment_quality=response.environment_quality,
        composite_score=response.composite_score,
        notes=response.notes,
        suggested_task_ids=response.suggested_task_ids,
    )


@router.post("", response_model=CheckinResult, status_code=status.HTTP_201_CREATED)
async def create_checkin(
    data: CheckinCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Record how the user feels right now and suggest up to three tasks."""
    response, suggestions = await record_checkin(db, current_user, data)

    matches = []
    for suggestion, match in suggestions:
        task = match.task
        matches.append(
            MatchedTask(
                suggestion_id=str(suggestion.id),
                task_id=str(task.id),
                title=task.title,
                goal_title=task.goal.title if task.goal else None,
                energy_required=task.energy_required,
                work_type=task.work_type,
                time_estimate=task.time_estimate,
                priority=task.priority,
                estimated_value=task.estimated_value,
                rank=suggestion.suggestion_rank,
                score=match.score,
                reasons=match.reasons,
            )
        )

    return CheckinResult(
        id=str(response.id),
        responded_at=response.responded_at,
        composite_score=response.composite_score,
        energy_band=energy_band(response.composite_score),
        matches=matches,
    )


@router.get("", response_model=list[CheckinResponse])
async def list_checkins(
    limit: int = Query(30, ge=1, le=365),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(DailyResponse)
        .where(DailyResponse.user_id == current_user.id)
        .order_by(DailyResponse.responded_at.desc())
        .limit(limit)
    )
    return [_build_checkin_response(r) for r in result.scalars().all()]


@router.get("/latest", response_model=CheckinResponse)
async def latest_checkin(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(DailyResponse)
        .where(DailyResponse.user_id == current_user.id)
        .order_by(DailyResponse.responded_at.desc())
        .limit(1)
    )
    response = result.scalar_one_or_none()
    if response is None:
        raise HTTPException(status_code=404, detail="No check-in yet")
    return _build_checkin_response(response)


@router.post("/suggestions/{suggestion_id}/respond", response_model=SuggestionResponse)
async def respond_to_suggestion(
    suggestion_id: UUID,
    data: SuggestionRespondRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    suggestion = await get_owned_or_404(db, TaskSuggestion, suggestion_id, current_user.id, "Suggestion")
    if suggestion.user_action is not None:
        raise HTTPException(status_code=409, detail="Suggestion already answered")

    task = await get_owned_or_404(db, Task, suggestion.task_id, current_user.id, "Task")
    if task.status in ("completed", "archived"):
        raise HTTPException(status_code=400, detail=f"Task is already {task.status}")

    apply_suggestion_action(
        suggestion,
        task,
        current_user,
        data.action,
        today_in(current_user.timezone),
        decline_reason=data.decline_reason,
    )
    await db.flush()

    logger.info(
        "suggestion_answered",
        user_id=str(current_user.id),
        suggestion_id=str(suggestion.id),
        action=data.action,
    )

    return SuggestionResponse(
        id=str(suggestion.id),
        task_id=str(task.id),
        match_score=suggestion.match_score,
        match_reasons=suggestion.match_reasons or [],
        suggestion_rank=suggestion.suggestion_rank,
        user_action=suggestion.user_action,
        responded_at=suggestion.responded_at,
        task_status=task.status,
    )
