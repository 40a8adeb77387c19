from datetime import date

from pydantic import BaseModel


class DailySummaryResponse(BaseModel):
    summary_date: date
    tasks_completed: int
    tasks_accepted: int
    tasks_deferred: int
    value_generated: float
    avg_energy_level: float | None
    avg_mental_clarity: float | None
    checkins_count: int
    goals_worked_on: list[str] | None
    is_active_day: bool

    model_config = {"from_attributes": True}
