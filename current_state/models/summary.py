import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Boolean, Date, DateTime, Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from current_state.core.database import Base


class DailySummary(Base):
    __tablename__ = "daily_summaries"
    __table_args__ = (UniqueConstraint("user_id", "summary_date"),)

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), index=True)
    summary_date: Mapped[date] = mapped_column(Date)
    tasks_completed: Mapped[int] = mapped_column(Integer, default=0)
    tasks_accepted: Mapped[int] = mapped_column(Integer, default=0)
    tasks_deferred: Mapped[int] = mapped_column(Integer, default=0)
    value_generated: Mapped[float] = mapped_column(Float, default=0.0)
    avg_energy_level: Mapped[float | None] = mapped_column(Float, nullable=True)
    avg_mental_clarity: Mapped[float | None] = mapped_column(Float, nullable=True)
    checkins_count: Mapped[int] = mapped_column(Integer, default=0)
    goals_worked_on: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    is_active_day: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
