"""Streak and weekly-rate statistics for habits and check-ins."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

STREAK_LOOKBACK_DAYS = 100


@dataclass
class HabitStats:
    total_completions: int = 0
    current_streak: int = 0
    best_streak: int = 0
    last_completed: datetime | None = None
    last_7_days: list[bool] = field(default_factory=lambda: [False] * 7)
    weekly_rate: int = 0
    completed_today: bool = False


def local_date(moment: datetime, tz: str) -> date:
    return moment.astimezone(ZoneInfo(tz)).date()


def current_streak(days: set[date], today: date) -> int:
    """Consecutive days ending today. A missing today does not break the streak."""
    streak = 0
    for offset in range(STREAK_LOOKBACK_DAYS):
        day = today - timedelta(days=offset)
        if day in days:
            streak += 1
        elif offset > 0:
            break
    return streak


def best_streak(days: set[date]) -> int:
    if not days:
        return 0
    ordered = sorted(days)
    best = run = 1
    for prev, curr in zip(ordered, ordered[1:]):
        if (curr - prev).days == 1:
            run += 1
            best = max(best, run)
        else:
            run = 1
    return best


def last_n_days(days: set[date], today: date, n: int = 7) -> list[bool]:
    return [(today - timedelta(days=offset)) in days for offset in range(n - 1, -1, -1)]


def compute_habit_stats(completed_at: list[datetime], today: date, tz: str = "UTC") -> HabitStats:
    if not completed_at:
        return HabitStats()

    days = {local_date(moment, tz) for moment in completed_at}
    last_7 = last_n_days(days, today)

    return HabitStats(
        total_completions=len(completed_at),
        current_streak=current_streak(days, today),
        best_streak=best_streak(days),
        last_completed=max(completed_at),
        last_7_days=last_7,
        weekly_rate=round(sum(last_7) / 7 * 100),
        completed_today=today in days,
    )


def advance_daily_streak(
    streak_current: int, streak_longest: int, last_day: date | None, today: date
) -> tuple[int, int]:
    """Return the (current, longest) streak after activity on `today`."""
    if last_day == today:
        return streak_current, streak_longest
    if last_day == today - timedelta(days=1):
        streak_current += 1
    else:
        streak_current = 1
    return streak_current, max(streak_longest, streak_current)


def today_in(tz: str | None) -> date:
    return datetime.now(ZoneInfo(tz or "UTC")).date()
