from current_state.models.audit_log import AuditLog
from current_state.models.checkin import DailyResponse, TaskSuggestion
from current_state.models.goal import Goal
from current_state.models.habit import Habit, HabitCompletion
from current_state.models.planning import DailyCommitment, WeeklyPlan
from current_state.models.reflection import DailyReflection
from current_state.models.summary import DailySummary
from current_state.models.task import Task
from current_state.models.user import User

__all__ = [
    "User",
    "Goal",
    "Task",
    "DailyResponse",
    "TaskSuggestion",
    "Habit",
    "HabitCompletion",
    "DailyReflection",
    "WeeklyPlan",
    "DailyCommitment",
    "DailySummary",
    "AuditLog",
]
