from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from current_state.core.database import Base, get_db
from current_state.core.security import decode_token
from current_state.models.goal import Goal
from current_state.models.user import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    payload = decode_token(token)
    if payload is None or payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    try:
        user_id = UUID(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return user


async def get_owned_or_404(db: AsyncSession, model: type[Base], obj_id: UUID, user_id: UUID, label: str):
    """Load a row by id, scoped to its owner. Foreign rows look missing."""
    result = await db.execute(select(model).where(model.id == obj_id, model.user_id == user_id))
    obj = result.scalar_one_or_none()
    if obj is None:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return obj


async def check_goal_owned(db: AsyncSession, goal_id: UUID | None, user_id: UUID) -> None:
    """Reject links to goals the user does not own."""
    if goal_id is None:
        return
    result = await db.execute(select(Goal.id).where(Goal.id == goal_id, Goal.user_id == user_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=400, detail="Goal not found")
