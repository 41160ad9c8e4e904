from __future__ import annotations
from datetime import date, timedelta
from typing import Callable, List, Optional, Tuple, TypeVar
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from tracky.models.activity import WorkoutLog, LearningLog
from tracky.models.discipline_score import DisciplineScore
from tracky.models.habit import Habit, HabitLog
from tracky.engines.scoring import (
    CompositeScore, DayFacts, HabitFact, LearningFact, PeriodSummary, WorkoutFact,
    calculate_composite, summarize_period,
)
from tracky.crud.transaction import unit_of_work
from tracky.errors import ValidationFailed
from tracky.utils.logger import get_logger

logger = get_logger(__name__)

TREND_PERIODS = ("week", "month")

T = TypeVar("T")


def get_day_habit_facts(db: Session, user_id: str, day: date) -> List[HabitFact]:
    """Completion of every active habit on a date; unlogged habits count as not done."""
    with unit_of_work(db, "get_day_habit_facts", commit=False):
        habits = db.query(Habit).filter(
            Habit.user_id == user_id, Habit.active.is_(True)
        ).order_by(Habit.sort_order, Habit.created_at).all()
        logs = {
            log.habit_id: log.completed
            for log in db.query(HabitLog).filter(HabitLog.user_id == user_id, HabitLog.date == day)
        }
    return [HabitFact(habit_id=h.id, completed=logs.get(h.id, False), weight=h.weight) for h in habits]


def get_workout_fact(db: Session, user_id: str, day: date) -> Optional[WorkoutFact]:
    with unit_of_work(db, "get_workout_fact", commit=False):
        workout = db.query(WorkoutLog).filter(WorkoutLog.user_id == user_id, WorkoutLog.date == day).first()
    if workout is None:
        return None
    return WorkoutFact(
        workout_type=workout.workout_type,
        effort=workout.effort,
        duration_minutes=workout.duration_minutes,
    )


def get_learning_fact(db: Session, user_id: str, day: date) -> Optional[LearningFact]:
    with unit_of_work(db, "get_learning_fact", commit=False):
        log = db.query(LearningLog).filter(LearningLog.user_id == user_id, LearningLog.date == day).first()
    if log is None:
        return None
    return LearningFact(
        leetcode_solved=log.leetcode_solved or 0,
        pages_read=log.pages_read or 0,
        study_hours=log.study_hours or 0.0,
    )


def gather_day_facts(db: Session, user_id: str, day: date) -> DayFacts:
    return DayFacts(
        habits=get_day_habit_facts(db, user_id, day),
        workout=get_workout_fact(db, user_id, day),
        learning=get_learning_fact(db, user_id, day),
    )


def _write_score(db: Session, user_id: str, day: date, score: CompositeScore) -> DisciplineScore:
    row = db.query(DisciplineScore).filter(
        DisciplineScore.user_id == user_id, DisciplineScore.date == day
    ).first()
    if row is None:
        row = DisciplineScore(user_id=user_id, date=day)
        db.add(row)
    row.habits_score = score.habits_score
    row.fitness_score = score.fitness_score
    row.learning_score = score.learning_score
    row.total_score = score.total_score
    return row


def _rescore_day(db: Session, user_id: str, day: date) -> DisciplineScore:
    # Pending fact writes must be visible to the fact queries
    db.flush()
    score = calculate_composite(gather_day_facts(db, user_id, day))
    row = _write_score(db, user_id, day, score)
    logger.info(
        f"Discipline score for user {user_id} on {day}: total={score.total_score} "
        f"(habits={score.habits_score}, fitness={score.fitness_score}, learning={score.learning_score})"
    )
    return row


def write_facts_and_rescore(
    db: Session,
    user_id: str,
    day: date,
    operation: str,
    write: Callable[[], T],
) -> Tuple[T, DisciplineScore]:
    """
    Apply a fact write and overwrite the day's cached score in one transaction.

    `write` stages rows on the session without committing. If the write or
    the score overwrite fails, neither is persisted, so the cached score never
    disagrees with the stored facts. Losing a first-insert race on either
    table is retried once as an update.
    """
    try:
        with unit_of_work(db, operation):
            result = write()
            row = _rescore_day(db, user_id, day)
    except IntegrityError:
        logger.warning(f"Concurrent insert during {operation} for user {user_id} on {day}; retrying")
        with unit_of_work(db, operation):
            result = write()
            row = _rescore_day(db, user_id, day)
    return result, row


def recompute_discipline_score(db: Session, user_id: str, day: date) -> DisciplineScore:
    """
    Recompute the composite score for a user-day and overwrite the cached row.

    Every write into discipline_scores goes through write_facts_and_rescore;
    this is the variant with no fact change. Concurrent recomputes are
    last-write-wins.
    """
    _, row = write_facts_and_rescore(db, user_id, day, "recompute_discipline_score", lambda: None)
    return row


def get_discipline_score(db: Session, user_id: str, day: date) -> Tuple[DisciplineScore, bool]:
    """
    Return the cached score for a day and whether it came from the cache.

    Fact writes always recompute, so a cached row is current; a missing row
    is computed on demand.
    """
    with unit_of_work(db, "get_discipline_score", commit=False):
        cached = db.query(DisciplineScore).filter(
            DisciplineScore.user_id == user_id, DisciplineScore.date == day
        ).first()
    if cached is not None:
        return cached, True
    return recompute_discipline_score(db, user_id, day), False


def period_start(period: str, today: date) -> date:
    if period == "week":
        return today - timedelta(days=6)
    if period == "month":
        return today.replace(day=1)
    raise ValidationFailed(f"Unknown period '{period}'", {"period": period, "allowed": list(TREND_PERIODS)})


def get_discipline_trend(db: Session, user_id: str, period: str, today: date) -> Tuple[List[DisciplineScore], PeriodSummary]:
    start = period_start(period, today)
    with unit_of_work(db, "get_discipline_trend", commit=False):
        scores = db.query(DisciplineScore).filter(
            DisciplineScore.user_id == user_id,
            DisciplineScore.date >= start,
            DisciplineScore.date <= today,
        ).order_by(DisciplineScore.date.asc()).all()
    return scores, summarize_period([s.total_score for s in scores])
