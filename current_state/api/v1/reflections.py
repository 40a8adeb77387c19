from datetime import date, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from current_state.core.database import get_db
from current_state.core.dependencies import get_current_user
from current_state.models.reflection import DailyReflection
from current_state.models.user import User
from current_state.schemas.reflection import ReflectionResponse, ReflectionUpsert
from current_state.services.streaks import today_in

router = APIRouter(prefix="/reflections", tags=["reflections"])


def _build_reflection_response(reflection: DailyReflection) -> ReflectionResponse:
    return ReflectionResponse(
        id=str(reflection.id),
        reflection_date=reflection.reflection_date,
        rating=reflection.rating,
        went_well=reflection.went_well,
        would_change=reflection.would_change,
        updated_at=reflection.updated_at,
    )


@router.get("", response_model=list[ReflectionResponse])
async def list_reflections(
    days: int = Query(7, ge=1, le=365),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    since = today_in(current_user.timezone) - timedelta(days=days - 1)
    result = await db.execute(
        select(DailyReflection)
        .where(
            DailyReflection.user_id == current_user.id,
            DailyReflection.reflection_date >= since,
        )
        .order_by(DailyReflection.reflection_date.desc())
    )
    return [_build_reflection_response(r) for r in result.scalars().all()]


@router.put("/{reflection_date}", response_model=ReflectionResponse)
async def upsert_reflection(
    reflection_date: date,
    data: ReflectionUpsert,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """One reflection per local day; writing again replaces it."""
    if reflection_date > today_in(current_user.timezone):
        raise HTTPException(status_code=400, detail="Cannot reflect on a future day")

    result = await db.execute(
        select(DailyReflection).where(
            DailyReflection.user_id == current_user.id,
            DailyReflection.reflection_date == reflection_date,
        )
    )
    reflection = result.scalar_one_or_none()
    if reflection is None:
        reflection = DailyReflection(user_id=current_user.id, reflection_date=reflection_date)
        db.add(reflection)

    reflection.rating = data.rating
    reflection.went_well = data.went_well
    reflection.would_change = data.would_change
    await db.flush()
    await db.refresh(reflection)

    return _build_reflection_response(reflection)
