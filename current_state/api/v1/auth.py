from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from current_state.core.config import get_settings
from current_state.core.database import get_db
from current_state.core.dependencies import get_current_user
from current_state.core.rate_limit import limiter
from current_state.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from current_state.models.audit_log import AuditLog
from current_state.models.user import User
from current_state.schemas.auth import (
    AuditLogResponse,
    ChangePasswordRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UpdateProfileRequest,
    UserResponse,
)
from current_state.services.audit import log_action

router = APIRouter(prefix="/auth", tags=["auth"])


def _tokens_for(user: User) -> TokenResponse:
    token_data = {"sub": str(user.id)}
    return TokenResponse(
        access_token=create_access_token(token_data),
        refresh_token=create_refresh_token(token_data),
    )


def _build_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=str(user.id),
        email=user.email,
        full_name=user.full_name,
        country=user.country,
        avatar_url=user.avatar_url,
        timezone=user.timezone,
        onboarding_completed=user.onboarding_completed,
        onboarding_step=user.onboarding_step,
        notification_preferences=user.notification_preferences or {},
        streak_current=user.streak_current,
        streak_longest=user.streak_longest,
        first_task_completed_at=user.first_task_completed_at,
        last_active_at=user.last_active_at,
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("3/minute")
async def register(request: Request, data: RegisterRequest, db: AsyncSession = Depends(get_db)):
    existing = await db.execute(select(User).where(User.email == data.email))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(
        email=data.email,
        password_hash=hash_password(data.password),
        full_name=data.full_name,
        timezone=data.timezone or get_settings().DEFAULT_TIMEZONE,
    )
    db.add(user)
    await db.flush()

    await log_action(
        db,
        user_id=user.id,
        action="register",
        entity_type="user",
        entity_id=str(user.id),
    )

    return _tokens_for(user)


@router.post("/login", response_model=TokenResponse)
@limiter.limit("5/minute")
async def login(request: Request, data: LoginRequest, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.email == data.email))
    user = result.scalar_one_or_none()
    if not user or not verify_password(data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Incorrect email or password")

    await log_action(
        db,
        user_id=user.id,
        action="login",
        entity_type="user",
        entity_id=str(user.id),
    )

    return _tokens_for(user)


@router.post("/refresh", response_model=TokenResponse)
async def refresh(data: RefreshRequest, db: AsyncSession = Depends(get_db)):
    payload = decode_token(data.refresh_token)
    if not payload or payload.get("type") != "refresh":
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    token_data = {"sub": payload["sub"]}
    return TokenResponse(
        access_token=create_access_token(token_data),
        refresh_token=create_refresh_token(token_data),
    )


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return _build_user_response(current_user)


@router.put("/me", response_model=UserResponse)
async def update_profile(
    data: UpdateProfileRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    update_data = data.model_dump(exclude_unset=True)

    new_email = update_data.pop("email", None)
    if new_email is not None and new_email != current_user.email:
        existing = await db.execute(select(User).where(User.email == new_email))
        if existing.scalar_one_or_none():
            raise HTTPException(status_code=400, detail="Email already registered")
        current_user.email = new_email

    for field, value in update_data.items():
        if value is None and field in ("timezone", "notification_preferences", "onboarding_step"):
            continue
        setattr(current_user, field, value)
    await db.flush()

    await log_action(
        db,
        user_id=current_user.id,
        action="update_profile",
        entity_type="user",
        entity_id=str(current_user.id),
        details={"updated_fields": list(data.model_dump(exclude_unset=True).keys())},
    )

    return _build_user_response(current_user)


@router.post("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not verify_password(data.current_password, current_user.password_hash):
        raise HTTPException(status_code=400, detail="Current password is incorrect")
    if len(data.new_password) < 8:
        raise HTTPException(
            status_code=400,
            detail="New password must be at least 8 characters",
        )
    current_user.password_hash = hash_password(data.new_password)

    await log_action(
        db,
        user_id=current_user.id,
        action="change_password",
        entity_type="user",
        entity_id=str(current_user.id),
    )

    return {"status": "ok"}


@router.get("/audit-logs", response_model=list[AuditLogResponse])
async def list_audit_logs(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(AuditLog)
        .where(AuditLog.user_id == current_user.id)
        .order_by(AuditLog.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    return [
        AuditLogResponse(
            id=str(entry.id),
            action=entry.action,
            entity_type=entry.entity_type,
            entity_id=entry.entity_id,
            details=entry.details,
            created_at=entry.created_at,
        )
        for entry in result.scalars().all()
    ]
