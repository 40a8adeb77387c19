from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, EmailStr, Field, field_validator


def validate_timezone(v: str | None) -> str | None:
    if v is None:
        return v
    try:
        ZoneInfo(v)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {v}")
    return v


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    full_name: str | None = None
    timezone: str | None = None

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v):
        return validate_timezone(v)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    refresh_token: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str


class NotificationPreferences(BaseModel):
    daily_checkin: bool = True
    gentle_reminders: bool = True


class UpdateProfileRequest(BaseModel):
    full_name: str | None = None
    email: EmailStr | None = None
    country: str | None = None
    timezone: str | None = None
    avatar_url: str | None = None
    notification_preferences: NotificationPreferences | None = None
    onboarding_step: int | None = Field(None, ge=0)
    onboarding_completed: bool | None = None

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v):
        return validate_timezone(v)


class UserResponse(BaseModel):
    id: str
    email: str
    full_name: str | None
    country: str | None
    avatar_url: str | None
    timezone: str
    onboarding_completed: bool
    onboarding_step: int
    notification_preferences: dict
    streak_current: int
    streak_longest: int
    first_task_completed_at: datetime | None
    last_active_at: datetime | None

    model_config = {"from_attributes": True}


class AuditLogResponse(BaseModel):
    id: str
    action: str
    entity_type: str
    entity_id: str | None
    details: dict | None
    created_at: datetime
