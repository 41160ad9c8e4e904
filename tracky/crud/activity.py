from __future__ import annotations
from datetime import date
from typing import Optional, Tuple, Type, TypeVar
from sqlalchemy.orm import Session

from tracky.models.activity import WorkoutLog, LearningLog, DisciplineCheckin
from tracky.models.discipline_score import DisciplineScore
from tracky.engines.scoring import FiveFactorInput
from tracky.crud.discipline import write_facts_and_rescore
from tracky.crud.transaction import unit_of_work
from tracky.errors import ValidationFailed
from tracky.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def _get_for_day(db: Session, model: Type[T], user_id: str, day: date) -> Optional[T]:
    return db.query(model).filter(model.user_id == user_id, model.date == day).first()


def _upsert_for_day(db: Session, model: Type[T], user_id: str, day: date, values: dict) -> T:
    row = _get_for_day(db, model, user_id, day)
    if row is None:
        row = model(user_id=user_id, date=day, **values)
        db.add(row)
    else:
        for key, value in values.items():
            setattr(row, key, value)
    return row


def log_workout(
    db: Session,
    user_id: str,
    day: date,
    workout_type: str,
    duration_minutes: Optional[int] = None,
    effort: Optional[int] = None,
    notes: Optional[str] = None,
) -> Tuple[WorkoutLog, DisciplineScore]:
    """
    Record the day's workout, replacing any earlier entry for that date, and
    rewrite the day's cached score in the same transaction.
    """
    if not workout_type or not workout_type.strip():
        raise ValidationFailed("workout_type is required")
    if effort is not None and not 1 <= effort <= 10:
        raise ValidationFailed("effort must be between 1 and 10", {"effort": effort})

    workout, score = write_facts_and_rescore(
        db, user_id, day, "log_workout",
        lambda: _upsert_for_day(db, WorkoutLog, user_id, day, {
            "workout_type": workout_type.strip().lower(),
            "duration_minutes": duration_minutes,
            "effort": effort,
            "notes": notes,
        }),
    )
    logger.info(f"Workout '{workout.workout_type}' logged on {day} for user {user_id}")
    return workout, score


def log_learning(
    db: Session,
    user_id: str,
    day: date,
    leetcode_solved: int = 0,
    pages_read: int = 0,
    study_hours: float = 0.0,
) -> Tuple[LearningLog, DisciplineScore]:
    if leetcode_solved < 0 or pages_read < 0 or study_hours < 0:
        raise ValidationFailed("Learning counts cannot be negative")

    log, score = write_facts_and_rescore(
        db, user_id, day, "log_learning",
        lambda: _upsert_for_day(db, LearningLog, user_id, day, {
            "leetcode_solved": leetcode_solved,
            "pages_read": pages_read,
            "study_hours": study_hours,
        }),
    )
    logger.info(
        f"Learning logged on {day} for user {user_id}: "
        f"leetcode={leetcode_solved}, pages={pages_read}, hours={study_hours}"
    )
    return log, score


def save_discipline_checkin(db: Session, user_id: str, day: date, checkin: FiveFactorInput) -> DisciplineCheckin:
    with unit_of_work(db, "save_discipline_checkin"):
        row = _upsert_for_day(db, DisciplineCheckin, user_id, day, {
            "woke_up_on_time": checkin.woke_up_on_time,
            "cold_shower": checkin.cold_shower,
            "no_phone_first_hour": checkin.no_phone_first_hour,
            "meditated": checkin.meditated,
            "planned_tomorrow": checkin.planned_tomorrow,
        })
    return row

