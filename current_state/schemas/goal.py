from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

GoalCategory = Literal["career", "business", "finance", "health", "relationships", "personal"]
GOAL_CATEGORIES = ("career", "business", "finance", "health", "relationships", "personal")


class GoalCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    category: GoalCategory
    description: str | None = None
    success_metric: str | None = None
    target_date: date | None = None
    estimated_value: float | None = Field(None, ge=0)
    income_stream_name: str | None = None
    display_order: int | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be blank")
        return v


class GoalUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    category: GoalCategory | None = None
    description: str | None = None
    success_metric: str | None = None
    target_date: date | None = None
    estimated_value: float | None = Field(None, ge=0)
    income_stream_name: str | None = None
    display_order: int | None = None
    is_active: bool | None = None


class GoalResponse(BaseModel):
    id: str
    title: str
    category: str
    description: str | None
    success_metric: str | None
    target_date: date | None
    estimated_value: float | None
    income_stream_name: str | None
    is_active: bool
    is_archived: bool
    completed_at: datetime | None
    display_order: int
    created_at: datetime
    task_count: int = 0


class TaskTemplate(BaseModel):
    title: str
    energy_required: str
    work_type: str
    time_estimate: str
    priority: str


class CreateFromSuggestionsRequest(BaseModel):
    titles: list[str] = Field(min_length=1)
