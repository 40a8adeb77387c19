"""Seed the database with a demo user, goals, tasks and habits."""

import os
import sys
from datetime import datetime, timedelta, timezone

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

from current_state.core.config import get_settings
from current_state.core.security import hash_password
from current_state.models import (
    AuditLog,
    DailyCommitment,
    DailyReflection,
    DailyResponse,
    DailySummary,
    Goal,
    Habit,
    HabitCompletion,
    Task,
    TaskSuggestion,
    User,
    WeeklyPlan,
)

settings = get_settings()
sync_url = settings.DATABASE_URL.replace("+asyncpg", "")
engine = create_engine(sync_url)

NOW = datetime.now(timezone.utc)

DEMO_TASKS = [
    # (title, goal key, energy, work type, time, priority, value)
    ("Send invoice to Acme", "income", "low", "admin", "tiny", "must_do", 1200),
    ("Draft proposal for new retainer", "income", "high", "creative", "medium", "should_do", 5000),
    ("Outline chapter 3", "writing", "high", "deep_work", "long", "should_do", None),
    ("Reply to editor email", "writing", "low", "communication", "tiny", "could_do", None),
    ("Book physio appointment", "health", "low", "admin", "tiny", "must_do", None),
    ("Plan meals for the week", "health", "medium", "admin", "short", "could_do", None),
    ("Clean up downloads folder", None, "low", "admin", "short", "someday", None),
]


def seed():
    with Session(engine) as session:
        existing = session.execute(select(User).limit(1)).scalar_one_or_none()
        if existing:
            print("DB already has data. Use --force to reset.")
            if "--force" not in sys.argv:
                return
            for tbl in [
                DailySummary, DailyCommitment, WeeklyPlan, DailyReflection,
                HabitCompletion, Habit, TaskSuggestion, DailyResponse,
                AuditLog, Task, Goal, User,
            ]:
                session.execute(tbl.__table__.delete())
            session.commit()
            print("Cleaned existing data.")

        user = User(
            email="demo@currentstate.app",
            password_hash=hash_password("Demo12345!"),
            full_name="Demo User",
            timezone=settings.DEFAULT_TIMEZONE,
            onboarding_completed=True,
            onboarding_step=5,
        )
        session.add(user)
        session.flush()

        goals = {
            "income": Goal(
                user_id=user.id, title="Grow freelance income", category="business",
                estimated_value=20000, display_order=0,
            ),
            "writing": Goal(
                user_id=user.id, title="Finish the book draft", category="personal",
                target_date=(NOW + timedelta(days=90)).date(), display_order=1,
            ),
            "health": Goal(
                user_id=user.id, title="Get back to running", category="health", display_order=2,
            ),
        }
        session.add_all(goals.values())
        session.flush()

        for i, (title, goal_key, energy, work_type, time_estimate, priority, value) in enumerate(DEMO_TASKS):
            session.add(
                Task(
                    user_id=user.id,
                    goal_id=goals[goal_key].id if goal_key else None,
                    title=title,
                    energy_required=energy,
                    work_type=work_type,
                    time_estimate=time_estimate,
                    priority=priority,
                    estimated_value=value,
                    created_at=NOW - timedelta(days=len(DEMO_TASKS) - i),
                )
            )

        habit = Habit(
            user_id=user.id,
            title="Morning walk",
            full_version="30 minute walk",
            scaled_version="10 minute walk",
            minimal_version="Step outside",
            linked_goal_id=goals["health"].id,
        )
        session.add(habit)
        session.flush()
        for days_back in (1, 2, 3, 5):
            session.add(
                HabitCompletion(
                    habit_id=habit.id,
                    user_id=user.id,
                    completed_at=NOW - timedelta(days=days_back),
                )
            )

        session.commit()
        print(f"Seeded demo user {user.email} with {len(DEMO_TASKS)} tasks.")


if __name__ == "__main__":
    seed()
