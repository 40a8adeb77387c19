from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel


class WeeklyPlanUpsert(BaseModel):
    focus_goal_ids: list[UUID] = []
    intentions: str | None = None


class WeeklyPlanResponse(BaseModel):
    id: str | None
    week_start_date: date
    focus_goal_ids: list[str]
    intentions: str | None


class CommitmentsUpsert(BaseModel):
    task_ids: list[UUID]


class CommitmentResponse(BaseModel):
    id: str
    task_id: str
    task_title: str
    commitment_date: date
    completed: bool
    completed_at: datetime | None
    abandoned: bool


class GoalProgress(BaseModel):
    goal_id: str | None
    goal_title: str
    is_focus: bool
    completed_tasks: list[str]


class WeeklyReview(BaseModel):
    week_start_date: date
    week_end_date: date
    tasks_completed: int
    value_generated: float
    commitments_made: int
    commitments_fulfilled: int
    checkins_count: int
    avg_energy_level: float | None
    goals: list[GoalProgress]
