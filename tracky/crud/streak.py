from __future__ import annotations
from datetime import date
from typing import Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from tracky.models.user_streak import UserStreak
from tracky.engines.streaks import StreakEvent, StreakState, advance_streak
from tracky.crud.rewards import apply_streak_event
from tracky.crud.transaction import unit_of_work
from tracky.utils.logger import get_logger

logger = get_logger(__name__)


def _to_state(row: Optional[UserStreak]) -> StreakState:
    if row is None:
        return StreakState()
    return StreakState(
        current_streak=row.current_streak,
        longest_streak=row.longest_streak,
        last_qualifying_date=row.last_qualifying_date,
        streak_started_at=row.streak_started_at,
    )


def _apply(db: Session, user_id: str, day: date) -> Tuple[UserStreak, Optional[StreakEvent]]:
    # Row lock serializes concurrent qualifying calls for the same user
    row = db.query(UserStreak).filter(UserStreak.user_id == user_id).with_for_update().first()
    new_state, event = advance_streak(_to_state(row), day)
    if event is None:
        return row, None

    if row is None:
        row = UserStreak(user_id=user_id)
        db.add(row)
    row.current_streak = new_state.current_streak
    row.longest_streak = new_state.longest_streak
    row.last_qualifying_date = new_state.last_qualifying_date
    row.streak_started_at = new_state.streak_started_at

    apply_streak_event(db, user_id, event)
    return row, event


def record_qualifying_day(db: Session, user_id: str, day: date) -> Tuple[UserStreak, Optional[StreakEvent]]:
    """
    Count `day` toward the user's streak.

    Idempotent per date: a repeat call for the same day changes nothing and
    returns no event. The streak row and its XP award commit together.
    """
    try:
        with unit_of_work(db, "record_qualifying_day"):
            row, event = _apply(db, user_id, day)
    except IntegrityError:
        # Lost the race to create the first row; it exists now, so apply again
        logger.warning(f"Concurrent streak creation for user {user_id}; retrying as update")
        with unit_of_work(db, "record_qualifying_day"):
            row, event = _apply(db, user_id, day)

    if event is not None:
        logger.info(
            f"Streak for user {user_id} is now {row.current_streak} "
            f"(longest={row.longest_streak}, reset={event.reset})"
        )
    return row, event


def get_streak(db: Session, user_id: str) -> Optional[UserStreak]:
    with unit_of_work(db, "get_streak", commit=False):
        return db.query(UserStreak).filter(UserStreak.user_id == user_id).first()


def get_streak_state(db: Session, user_id: str) -> StreakState:
    return _to_state(get_streak(db, user_id))
