from datetime import timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from current_state.core.database import get_db
from current_state.core.dependencies import get_current_user
from current_state.models.summary import DailySummary
from current_state.models.user import User
from current_state.schemas.summary import DailySummaryResponse
from current_state.services.streaks import today_in

router = APIRouter(prefix="/summaries", tags=["summaries"])


@router.get("", response_model=list[DailySummaryResponse])
async def list_summaries(
    days: int = Query(30, ge=1, le=365),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    since = today_in(current_user.timezone) - timedelta(days=days)
    result = await db.execute(
        select(DailySummary)
        .where(DailySummary.user_id == current_user.id, DailySummary.summary_date >= since)
        .order_by(DailySummary.summary_date.desc())
    )
    return [DailySummaryResponse.model_validate(s) for s in result.scalars().all()]
