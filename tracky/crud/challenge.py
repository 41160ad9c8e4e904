from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from datetime import date
from typing import Dict, List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from tracky.models.challenge import ChallengeSession, ChallengeDailyLog
from tracky.engines import challenge as rules
from tracky.engines.challenge import ChallengeType, DayEvaluation, SessionStatus, TASK_COLUMNS
from tracky.engines.scoring import round_half_up
from tracky.crud.habits import seed_habits
from tracky.crud.rewards import apply_challenge_evaluation, award_xp, notify
from tracky.crud.transaction import unit_of_work
from tracky.errors import ConflictingActiveSession, NoActiveSession, ValidationFailed
from tracky.utils.logger import get_logger

logger = get_logger(__name__)

_BASE_HABITS = [
    {"name": "Workout 1", "icon": "🏋️", "weight": 20, "domain": "health", "sort_order": 100},
    {"name": "Follow Diet", "icon": "🥗", "weight": 15, "domain": "health", "sort_order": 101},
    {"name": "Hydration Goal", "icon": "💧", "weight": 10, "domain": "health", "sort_order": 102},
    {"name": "Read 10 Pages", "icon": "📖", "weight": 15, "domain": "learning", "sort_order": 103},
]

CHALLENGE_HABITS: Dict[ChallengeType, List[dict]] = {
    ChallengeType.STRICT: _BASE_HABITS + [
        {"name": "Workout 2 (Outdoor)", "icon": "🏃", "weight": 20, "domain": "health", "sort_order": 104},
        {"name": "Progress Photo", "icon": "📸", "weight": 10, "domain": "health", "sort_order": 105},
        {"name": "No Alcohol", "icon": "🚫", "weight": 10, "domain": "discipline", "sort_order": 106},
    ],
    ChallengeType.RELAXED: _BASE_HABITS + [
        {"name": "Daily Reflection", "icon": "✍️", "weight": 10, "domain": "personal", "sort_order": 104},
    ],
}


def parse_challenge_type(value: str) -> ChallengeType:
    try:
        return ChallengeType(value)
    except ValueError:
        raise ValidationFailed(
            "Invalid challenge type",
            {"challenge_type": value, "allowed": [t.value for t in ChallengeType]},
        )


def get_active_session(db: Session, user_id: str) -> Optional[ChallengeSession]:
    with unit_of_work(db, "get_active_session", commit=False):
        return db.query(ChallengeSession).filter(
            ChallengeSession.user_id == user_id,
            ChallengeSession.status == SessionStatus.ACTIVE.value,
        ).order_by(ChallengeSession.created_at.desc()).first()


def start_challenge(db: Session, user_id: str, challenge_type: ChallengeType, start_date: date) -> ChallengeSession:
    """
    Start a new challenge session.

    Raises ConflictingActiveSession with the existing session's id when the
    user already has one active; the existing session is left untouched. The
    partial unique index on active sessions backs up the check against a
    concurrent start.
    """
    existing = get_active_session(db, user_id)
    if existing:
        raise ConflictingActiveSession(existing.id)

    session = ChallengeSession(
        user_id=user_id,
        challenge_type=challenge_type.value,
        start_date=start_date,
        current_day=1,
        status=SessionStatus.ACTIVE.value,
    )
    start_xp = rules.START_XP[challenge_type]
    try:
        with unit_of_work(db, "start_challenge"):
            db.add(session)
            db.flush()
            seed_habits(db, user_id, CHALLENGE_HABITS[challenge_type])
            award_xp(db, user_id, start_xp, "challenge_started", start_date, day_number=1)
            notify(
                db, user_id,
                title="Challenge Started!",
                message=f"You've begun {challenge_type.display_name}. Day 1 starts today. No excuses.",
            )
    except IntegrityError:
        winner = get_active_session(db, user_id)
        if winner is None:
            raise
        raise ConflictingActiveSession(winner.id)

    logger.info(f"User {user_id} started {challenge_type.value} session {session.id} on {start_date}")
    return session


def _task_flags(log: Optional[ChallengeDailyLog]) -> Dict[str, bool]:
    if log is None:
        return {}
    return {task_id: bool(getattr(log, column)) for task_id, column in TASK_COLUMNS.items()}


@dataclass
class TaskLogResult:
    session: ChallengeSession
    log: ChallengeDailyLog
    evaluation: DayEvaluation
    xp_earned: int


def _find_day_log(db: Session, session_id: str, day: date) -> Optional[ChallengeDailyLog]:
    return db.query(ChallengeDailyLog).filter(
        ChallengeDailyLog.session_id == session_id,
        ChallengeDailyLog.date == day,
    ).with_for_update().first()


def _apply_task(
    db: Session,
    session: ChallengeSession,
    challenge_type: ChallengeType,
    column: str,
    completed: bool,
    day: date,
    number: int,
) -> Tuple[ChallengeDailyLog, DayEvaluation, int]:
    log = _find_day_log(db, session.id, day)
    previously_complete = bool(log.all_tasks_complete) if log else False

    if log is None:
        log = ChallengeDailyLog(session_id=session.id, user_id=session.user_id, date=day, day_number=number)
        for flag_column in TASK_COLUMNS.values():
            setattr(log, flag_column, False)
        db.add(log)
    setattr(log, column, completed)

    evaluation = rules.evaluate_day(challenge_type, _task_flags(log), previously_complete, number)
    log.all_tasks_complete = evaluation.all_tasks_complete
    log.passed = evaluation.passed

    # Backfilling an earlier day never moves progress backwards
    session.current_day = max(session.current_day or 1, number)
    xp_earned = apply_challenge_evaluation(db, session.user_id, evaluation, day)
    if evaluation.completes_session:
        session.status = SessionStatus.COMPLETED.value
        session.completed_at = day
    return log, evaluation, xp_earned


def log_challenge_task(db: Session, user_id: str, task_id: str, completed: bool, day: date) -> TaskLogResult:
    """
    Set one task flag for a challenge day and recompute the day's result.

    Validation (task id, day range, active session) happens before any
    write. Rewards fire only when the day flips to complete; the flag, the
    derived pass state, the session progress and the rewards commit together.
    A concurrent first write for the same day loses on the unique
    (session, date) constraint and is retried once as an update.
    """
    session = get_active_session(db, user_id)
    if session is None:
        raise NoActiveSession(user_id)

    challenge_type = ChallengeType(session.challenge_type)
    column = rules.validate_task_id(challenge_type, task_id)
    number = rules.day_number(session.start_date, day)

    try:
        with unit_of_work(db, "log_challenge_task"):
            log, evaluation, xp_earned = _apply_task(db, session, challenge_type, column, completed, day, number)
    except IntegrityError:
        logger.warning(f"Concurrent challenge log for session {session.id} on {day}; retrying as update")
        with unit_of_work(db, "log_challenge_task"):
            log, evaluation, xp_earned = _apply_task(db, session, challenge_type, column, completed, day, number)

    logger.info(
        f"Challenge task {task_id}={completed} for user {user_id} on day {number}: "
        f"complete={evaluation.all_tasks_complete}, xp={xp_earned}"
    )
    if evaluation.completes_session:
        logger.info(f"Challenge session {session.id} completed for user {user_id}")
    return TaskLogResult(session=session, log=log, evaluation=evaluation, xp_earned=xp_earned)


@dataclass
class ChallengeStatus:
    session: ChallengeSession
    current_day: int
    total_days: int
    completed_days: int
    today_log: Optional[ChallengeDailyLog]
    remaining_tasks: List[str]

    @property
    def on_track(self) -> bool:
        return not self.remaining_tasks

    @property
    def progress_percent(self) -> int:
        return round_half_up(Decimal(self.current_day * 100) / self.total_days)


def get_challenge_status(db: Session, user_id: str, today: date) -> Optional[ChallengeStatus]:
    """Progress of the active session, or None when there is none."""
    session = get_active_session(db, user_id)
    if session is None:
        return None

    challenge_type = ChallengeType(session.challenge_type)
    with unit_of_work(db, "get_challenge_status", commit=False):
        today_log = db.query(ChallengeDailyLog).filter(
            ChallengeDailyLog.session_id == session.id,
            ChallengeDailyLog.date == today,
        ).first()
        completed_days = db.query(ChallengeDailyLog).filter(
            ChallengeDailyLog.session_id == session.id,
            ChallengeDailyLog.passed.is_(True),
        ).count()

    return ChallengeStatus(
        session=session,
        current_day=rules.current_day(session.start_date, today),
        total_days=rules.CHALLENGE_LENGTH_DAYS,
        completed_days=completed_days,
        today_log=today_log,
        remaining_tasks=rules.remaining_tasks(challenge_type, _task_flags(today_log)),
    )
