from __future__ import annotations
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from tracky.models.habit import Habit, HabitLog
from tracky.models.discipline_score import DisciplineScore
from tracky.engines.scoring import HabitFact
from tracky.crud.discipline import write_facts_and_rescore
from tracky.crud.transaction import unit_of_work
from tracky.errors import NotFound, ValidationFailed
from tracky.utils.logger import get_logger

logger = get_logger(__name__)


def create_habit(
    db: Session,
    user_id: str,
    name: str,
    weight: int = 10,
    domain: str = "personal",
    icon: Optional[str] = None,
    sort_order: int = 0,
) -> Habit:
    """Create a new active habit for the user."""
    if weight <= 0:
        raise ValidationFailed("Habit weight must be positive", {"weight": weight})

    habit = Habit(
        user_id=user_id,
        name=name,
        weight=weight,
        domain=domain,
        icon=icon,
        sort_order=sort_order,
        active=True,
    )
    try:
        with unit_of_work(db, "create_habit"):
            db.add(habit)
    except IntegrityError:
        raise ValidationFailed(f"Habit '{name}' already exists", {"name": name})
    db.refresh(habit)
    logger.info(f"Created habit {habit.id} ({name}) for user {user_id}")
    return habit


def get_habits(db: Session, user_id: str, include_inactive: bool = False) -> List[Habit]:
    with unit_of_work(db, "get_habits", commit=False):
        query = db.query(Habit).filter(Habit.user_id == user_id)
        if not include_inactive:
            query = query.filter(Habit.active.is_(True))
        return query.order_by(Habit.sort_order, Habit.created_at).all()


def get_habit(db: Session, user_id: str, habit_id: str) -> Habit:
    """Get a habit owned by the user, or raise NotFound."""
    with unit_of_work(db, "get_habit", commit=False):
        habit = db.query(Habit).filter(Habit.id == habit_id, Habit.user_id == user_id).first()
    if not habit:
        raise NotFound("Habit not found", {"habit_id": habit_id})
    return habit


def _upsert_log(db: Session, user_id: str, habit_id: str, day: date, completed: bool) -> HabitLog:
    log = db.query(HabitLog).filter(HabitLog.habit_id == habit_id, HabitLog.date == day).first()
    if log:
        log.completed = completed
    else:
        log = HabitLog(habit_id=habit_id, user_id=user_id, date=day, completed=completed)
        db.add(log)
    return log


def set_habit_completion(
    db: Session, user_id: str, habit_id: str, day: date, completed: bool = True
) -> Tuple[HabitLog, DisciplineScore]:
    """
    Record one habit's completion for a date, overwriting any earlier toggle.
    The day's cached score is rewritten in the same transaction.
    """
    get_habit(db, user_id, habit_id)
    log, score = write_facts_and_rescore(
        db, user_id, day, "set_habit_completion",
        lambda: _upsert_log(db, user_id, habit_id, day, completed),
    )
    logger.info(f"Habit {habit_id} on {day} set to completed={completed} for user {user_id}")
    return log, score


def set_habit_completions(
    db: Session, user_id: str, day: date, completions: Dict[str, bool]
) -> Tuple[List[HabitLog], DisciplineScore]:
    """
    Bulk toggle. Every habit id is checked for ownership before anything is
    written, so an unknown id leaves the day untouched.
    """
    with unit_of_work(db, "set_habit_completions", commit=False):
        owned = {
            h.id for h in db.query(Habit.id).filter(
                Habit.user_id == user_id, Habit.id.in_(list(completions))
            )
        }
    missing = sorted(set(completions) - owned)
    if missing:
        raise NotFound("Habit not found", {"habit_ids": missing})

    logs, score = write_facts_and_rescore(
        db, user_id, day, "set_habit_completions",
        lambda: [
            _upsert_log(db, user_id, habit_id, day, completed)
            for habit_id, completed in completions.items()
        ],
    )
    logger.info(f"Bulk habit update on {day} for user {user_id}: {len(logs)} habits")
    return logs, score


def all_habits_completed(facts: Sequence[HabitFact]) -> bool:
    """The streak qualification condition: at least one active habit, all done."""
    return bool(facts) and all(f.completed for f in facts)


def seed_habits(db: Session, user_id: str, habits: Iterable[dict]) -> int:
    """
    Add habits by name, skipping names the user already has.

    Runs inside the caller's transaction and does not commit.
    """
    existing = {name for (name,) in db.query(Habit.name).filter(Habit.user_id == user_id)}
    added = 0
    for entry in habits:
        if entry["name"] in existing:
            continue
        db.add(Habit(user_id=user_id, active=True, **entry))
        added += 1
    return added
