"""
Consecutive qualifying-day streaks.

A streak has no stored "broken" state. A gap is only noticed on the next
qualifying day, which resets the run to 1; readers that need to know whether
a streak is currently broken use `is_streak_broken`.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Dict, Optional, Tuple

ONE_DAY = timedelta(days=1)

STREAK_DAY_XP = 20

STREAK_MILESTONE_XP: Dict[int, int] = {
    7: 50,
    14: 100,
    21: 150,
    30: 250,
    60: 500,
    90: 1000,
}

STREAK_MILESTONE_TITLES: Dict[int, str] = {
    7: "One Week Strong!",
    14: "Two Weeks In!",
    21: "Habit Formation Complete!",
    30: "Monthly Master!",
    60: "Disciplined Mind",
    90: "Transformation Complete",
}


@dataclass(frozen=True)
class StreakState:
    current_streak: int = 0
    longest_streak: int = 0
    last_qualifying_date: Optional[date] = None
    streak_started_at: Optional[date] = None

    @property
    def exists(self) -> bool:
        return self.last_qualifying_date is not None


@dataclass(frozen=True)
class StreakEvent:
    """Emitted when a qualifying day creates or extends a streak."""
    length: int
    day: date
    reset: bool = False


def advance_streak(state: StreakState, day: date) -> Tuple[StreakState, Optional[StreakEvent]]:
    """
    Apply one qualifying day to a streak snapshot.

    Returns the new state and the event to hand to the rewards side. Calling
    twice with the same day is a no-op the second time and returns no event.
    """
    if not state.exists:
        new_state = StreakState(
            current_streak=1,
            longest_streak=max(1, state.longest_streak),
            last_qualifying_date=day,
            streak_started_at=day,
        )
        return new_state, StreakEvent(length=1, day=day)

    if state.last_qualifying_date == day:
        return state, None

    if state.last_qualifying_date == day - ONE_DAY:
        current = state.current_streak + 1
        new_state = replace(
            state,
            current_streak=current,
            longest_streak=max(state.longest_streak, current),
            last_qualifying_date=day,
        )
        return new_state, StreakEvent(length=current, day=day)

    # Gap of two or more days, or a last date in the future
    new_state = StreakState(
        current_streak=1,
        longest_streak=max(state.longest_streak, 1),
        last_qualifying_date=day,
        streak_started_at=day,
    )
    return new_state, StreakEvent(length=1, day=day, reset=True)


def is_streak_broken(last_qualifying_date: Optional[date], today: date) -> bool:
    if last_qualifying_date is None:
        return False
    return today - last_qualifying_date > ONE_DAY


def effective_streak(state: StreakState, today: date) -> int:
    """The streak as it stands today: zero once a day has been missed."""
    if not state.exists or is_streak_broken(state.last_qualifying_date, today):
        return 0
    return state.current_streak


def streak_xp(length: int) -> int:
    return STREAK_DAY_XP + STREAK_MILESTONE_XP.get(length, 0)
