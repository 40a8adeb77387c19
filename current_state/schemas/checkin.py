from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

SuggestionAction = Literal["accepted", "declined", "deferred", "completed"]


class CheckinCreate(BaseModel):
    energy_level: int = Field(ge=1, le=5)
    mental_clarity: int = Field(ge=1, le=5)
    emotional_state: int = Field(ge=1, le=5)
    available_time: int = Field(ge=1, le=5)
    environment_quality: int = Field(ge=1, le=5)
    notes: str | None = None


class MatchedTask(BaseModel):
    suggestion_id: str
    task_id: str
    title: str
    goal_title: str | None = None
    energy_required: str
    work_type: str
    time_estimate: str
    priority: str
    estimated_value: float | None = None
    rank: int
    score: int
    reasons: list[str]


class CheckinResult(BaseModel):
    id: str
    responded_at: datetime
    composite_score: float
    energy_band: str
    matches: list[MatchedTask]


class CheckinResponse(BaseModel):
    id: str
    responded_at: datetime
    energy_level: int
    mental_clarity: int
    emotional_state: int
    available_time: int
    environment_quality: int
    composite_score: float
    notes: str | None
    suggested_task_ids: list[str] | None

    model_config = {"from_attributes": True}


class SuggestionRespondRequest(BaseModel):
    action: SuggestionAction
    decline_reason: str | None = None


class SuggestionResponse(BaseModel):
    id: str
    task_id: str
    match_score: int
    match_reasons: list[str]
    suggestion_rank: int
    user_action: str | None
    responded_at: datetime | None
    task_status: str
