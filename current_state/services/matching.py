"""State/task matching for check-ins.

Given the five dimensions a user reports at check-in and their active tasks,
each task gets a score built from independent rule contributions. Some rules
also explain themselves with a short reason that is shown next to the
suggestion. The three best tasks are returned.

Everything in here is pure: no database, no clock, no logging. Callers load
the tasks, record the check-in and act on the result.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Sequence

DEFAULT_LIMIT = 3

BAND_LOW = "low"
BAND_MID = "mid"
BAND_HIGH = "high"

# band -> energy_required -> (points, reason)
ENERGY_PAYOFFS: dict[str, dict[str, tuple[int, str | None]]] = {
    BAND_LOW: {
        "low": (40, "Perfect for your current energy level"),
        "medium": (15, None),
        "high": (0, None),
    },
    BAND_MID: {
        "medium": (40, "Matches your current capacity"),
        "low": (25, None),
        "high": (15, None),
    },
    BAND_HIGH: {
        "high": (40, "Great time for challenging work"),
        "medium": (25, None),
        "low": (0, None),
    },
}

TIME_ESTIMATE_ORDINAL: dict[str, int] = {
    "tiny": 1,
    "short": 2,
    "medium": 3,
    "long": 4,
    "extended": 5,
}
DEFAULT_TIME_ORDINAL = 3

PRIORITY_PAYOFFS: dict[str, tuple[int, str | None]] = {
    "must_do": (10, "High priority task"),
    "should_do": (5, None),
}

ACCEPTANCE_BONUS = 10
VALUE_BONUS = 5

Contribution = tuple[int, str | None]


@dataclass(frozen=True)
class UserState:
    energy_level: int
    mental_clarity: int
    emotional_state: int
    available_time: int
    environment_quality: int

    @property
    def composite_score(self) -> float:
        return (
            self.energy_level
            + self.mental_clarity
            + self.emotional_state
            + self.available_time
            + self.environment_quality
        ) / 5

    @property
    def energy_band(self) -> str:
        return energy_band(self.composite_score)


@dataclass(frozen=True)
class RankedMatch:
    task: Any
    score: int
    reasons: list[str] = field(default_factory=list)


def energy_band(composite: float) -> str:
    if composite < 2.5:
        return BAND_LOW
    if composite < 4:
        return BAND_MID
    return BAND_HIGH


def format_value(value) -> str:
    """Render a monetary amount the way the user typed it: 500 -> '500', 12.5 -> '12.5'."""
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def energy_contribution(task, state: UserState) -> Contribution:
    payoffs = ENERGY_PAYOFFS[state.energy_band]
    return payoffs.get(task.energy_required, (0, None))


def time_contribution(task, state: UserState) -> Contribution:
    # Uses the raw available_time answer, not the composite.
    available = state.available_time
    task_time = TIME_ESTIMATE_ORDINAL.get(task.time_estimate, DEFAULT_TIME_ORDINAL)
    if available <= 2 and task_time <= 2:
        return 25, "Fits your available time"
    if available >= 4 and task_time >= 3:
        return 20, "Good use of your time block"
    if abs(available - task_time) <= 1:
        return 15, None
    return 0, None


def environment_contribution(task, state: UserState) -> Contribution:
    if state.environment_quality >= 4 and task.work_type == "deep_work":
        return 15, "Perfect environment for focus work"
    if state.environment_quality <= 2 and task.work_type == "admin":
        return 15, "Good for a distracting environment"
    return 0, None


def priority_contribution(task, state: UserState) -> Contribution:
    return PRIORITY_PAYOFFS.get(task.priority, (0, None))


def history_contribution(task, state: UserState) -> Contribution:
    if (task.times_accepted or 0) > (task.times_declined or 0):
        return ACCEPTANCE_BONUS, None
    return 0, None


def value_contribution(task, state: UserState) -> Contribution:
    value = task.estimated_value
    if value is not None and value > 0:
        return VALUE_BONUS, f"Worth ${format_value(value)}"
    return 0, None


# Evaluation order is also the order reasons are reported in.
RULES = (
    energy_contribution,
    time_contribution,
    environment_contribution,
    priority_contribution,
    history_contribution,
    value_contribution,
)


def score_task(task, state: UserState) -> RankedMatch:
    score = 0
    reasons: list[str] = []
    for rule in RULES:
        points, reason = rule(task, state)
        score += points
        if reason:
            reasons.append(reason)
    return RankedMatch(task=task, score=score, reasons=reasons)


def match_tasks(tasks: Sequence, state: UserState, limit: int = DEFAULT_LIMIT) -> list[RankedMatch]:
    """Score every task and return the best `limit` of them.

    Ties keep the order the tasks were given in. Tasks are never modified.
    """
    scored = [score_task(task, state) for task in tasks]
    scored.sort(key=lambda m: m.score, reverse=True)
    return scored[:limit]
