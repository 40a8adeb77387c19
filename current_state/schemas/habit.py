from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

HabitType = Literal["performance", "foundational", "restorative"]
HabitVersion = Literal["full", "scaled", "minimal"]
Frequency = Literal["daily", "3x/week", "5x/week", "when_needed"]
TimeOfDay = Literal["morning", "afternoon", "evening", "night", "anytime"]


class HabitCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    habit_type: HabitType = "foundational"
    full_version: str | None = None
    scaled_version: str | None = None
    minimal_version: str | None = None
    target_frequency: Frequency = "daily"
    target_days: list[str] | None = None
    linked_goal_id: UUID | None = None
    why_this_helps: str | None = None
    best_time_of_day: TimeOfDay | None = None


class HabitUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    habit_type: HabitType | None = None
    full_version: str | None = None
    scaled_version: str | None = None
    minimal_version: str | None = None
    target_frequency: Frequency | None = None
    target_days: list[str] | None = None
    linked_goal_id: UUID | None = None
    why_this_helps: str | None = None
    best_time_of_day: TimeOfDay | None = None
    display_order: int | None = None

    @field_validator("title", "habit_type", "full_version", "target_frequency", "display_order")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class HabitCompleteRequest(BaseModel):
    version_completed: HabitVersion = "full"
    energy_level_before: int | None = Field(None, ge=1, le=5)
    energy_level_after: int | None = Field(None, ge=1, le=5)
    notes: str | None = None


class HabitStatsResponse(BaseModel):
    total_completions: int
    current_streak: int
    best_streak: int
    last_completed: datetime | None
    last_7_days: list[bool]
    weekly_rate: int
    completed_today: bool


class HabitResponse(BaseModel):
    id: str
    title: str
    habit_type: str
    full_version: str
    scaled_version: str | None
    minimal_version: str | None
    target_frequency: str
    target_days: list[str] | None
    linked_goal_id: str | None
    why_this_helps: str | None
    best_time_of_day: str | None
    display_order: int
    created_at: datetime
    stats: HabitStatsResponse | None = None


class HabitCompletionResponse(BaseModel):
    id: str
    habit_id: str
    completed_at: datetime
    version_completed: str
    stats: HabitStatsResponse
