from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

EnergyLevel = Literal["low", "medium", "high"]
WorkType = Literal[
    "deep_work",
    "admin",
    "creative",
    "communication",
    "learning",
    "physical",
    "light_lift",
    "steady_focus",
]
TimeEstimate = Literal["tiny", "short", "medium", "long", "extended"]
Priority = Literal["must_do", "should_do", "could_do", "someday"]
TaskStatus = Literal["active", "in_progress", "completed", "deferred", "archived"]


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    goal_id: UUID | None = None
    description: str | None = None
    energy_required: EnergyLevel = "medium"
    work_type: WorkType = "admin"
    time_estimate: TimeEstimate = "medium"
    priority: Priority = "should_do"
    estimated_value: float | None = Field(None, ge=0)
    is_billable: bool = False
    ideal_context: str | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be blank")
        return v


class TaskUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    goal_id: UUID | None = None
    description: str | None = None
    energy_required: EnergyLevel | None = None
    work_type: WorkType | None = None
    time_estimate: TimeEstimate | None = None
    priority: Priority | None = None
    estimated_value: float | None = Field(None, ge=0)
    is_billable: bool | None = None
    ideal_context: str | None = None
    status: TaskStatus | None = None

    # Omit a field to leave it alone; these columns cannot be cleared.
    @field_validator(
        "title", "energy_required", "work_type", "time_estimate", "priority", "is_billable", "status"
    )
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class DeferRequest(BaseModel):
    until: date | None = None


class TaskResponse(BaseModel):
    id: str
    title: str
    description: str | None
    goal_id: str | None
    goal_title: str | None = None
    energy_required: str
    work_type: str
    time_estimate: str
    priority: str
    estimated_value: float | None
    is_billable: bool
    status: str
    completed_at: datetime | None
    deferred_until: date | None
    times_suggested: int
    times_accepted: int
    times_declined: int
    created_at: datetime


class PaginatedTasks(BaseModel):
    items: list[TaskResponse]
    total: int
    page: int
    page_size: int
