from datetime import date, datetime

from pydantic import BaseModel, Field


class ReflectionUpsert(BaseModel):
    rating: int = Field(ge=1, le=5)
    went_well: str | None = None
    would_change: str | None = None


class ReflectionResponse(BaseModel):
    id: str
    reflection_date: date
    rating: int
    went_well: str | None
    would_change: str | None
    updated_at: datetime
