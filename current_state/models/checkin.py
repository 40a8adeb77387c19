import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from current_state.core.database import Base


class DailyResponse(Base):
    __tablename__ = "daily_responses"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), index=True)
    responded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    energy_level: Mapped[int] = mapped_column(Integer)
    mental_clarity: Mapped[int] = mapped_column(Integer)
    emotional_state: Mapped[int] = mapped_column(Integer)
    available_time: Mapped[int] = mapped_column(Integer)
    environment_quality: Mapped[int] = mapped_column(Integer)
    composite_score: Mapped[float] = mapped_column(Float)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    suggested_task_ids: Mapped[list | None] = mapped_column(JSONB, nullable=True)

    suggestions = relationship("TaskSuggestion", back_populates="daily_response")


class TaskSuggestion(Base):
    __tablename__ = "task_suggestions"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), index=True)
    daily_response_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("daily_responses.id", ondelete="CASCADE"), nullable=True
    )
    task_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("tasks.id", ondelete="CASCADE")
    )
    suggested_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    match_score: Mapped[int] = mapped_column(Integer)
    match_reasons: Mapped[list] = mapped_column(JSONB, default=list)
    suggestion_rank: Mapped[int] = mapped_column(Integer)
    user_action: Mapped[str | None] = mapped_column(String(20), nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    decline_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    daily_response = relationship("DailyResponse", back_populates="suggestions")
    task = relationship("Task")
