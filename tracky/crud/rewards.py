"""
Rewards side of the streak and challenge flows.

Functions here add XP ledger and notification rows to the caller's session
without committing, so a reward is persisted if and only if the state change
that earned it is.
"""
from __future__ import annotations
from datetime import date
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from tracky.models.reward import XpEvent, Notification
from tracky.engines.streaks import STREAK_DAY_XP, STREAK_MILESTONE_XP, STREAK_MILESTONE_TITLES, StreakEvent
from tracky.engines.challenge import DayEvaluation
from tracky.crud.transaction import unit_of_work
from tracky.utils.logger import get_logger

logger = get_logger(__name__)


def award_xp(db: Session, user_id: str, amount: int, reason: str, event_date: date, day_number: Optional[int] = None) -> XpEvent:
    event = XpEvent(user_id=user_id, amount=amount, reason=reason, event_date=event_date, day_number=day_number)
    db.add(event)
    logger.info(f"Awarding {amount} XP to user {user_id} for {reason}")
    return event


def notify(db: Session, user_id: str, title: str, message: str, type: str = "achievement") -> Notification:
    notification = Notification(user_id=user_id, title=title, message=message, type=type)
    db.add(notification)
    return notification


def apply_streak_event(db: Session, user_id: str, event: StreakEvent) -> int:
    """Award the per-day streak XP plus any milestone bonus. Returns XP granted."""
    total = STREAK_DAY_XP
    award_xp(db, user_id, STREAK_DAY_XP, "streak_day", event.day)

    bonus = STREAK_MILESTONE_XP.get(event.length)
    if bonus:
        award_xp(db, user_id, bonus, f"streak_{event.length}_days", event.day)
        notify(
            db, user_id,
            title=STREAK_MILESTONE_TITLES[event.length],
            message=f"{event.length}-day streak! You earned {bonus} bonus XP.",
        )
        total += bonus
    return total


def apply_challenge_evaluation(db: Session, user_id: str, evaluation: DayEvaluation, event_date: date) -> int:
    """Persist the awards and milestone notification of a newly completed challenge day."""
    total = 0
    for award in evaluation.awards:
        award_xp(db, user_id, award.amount, award.reason, event_date, day_number=award.day_number)
        total += award.amount

    if evaluation.milestone is not None:
        notify(
            db, user_id,
            title=evaluation.milestone.notification_title,
            message=evaluation.milestone.notification_message,
        )
    return total


def get_total_xp(db: Session, user_id: str) -> int:
    with unit_of_work(db, "get_total_xp", commit=False):
        total = db.query(func.coalesce(func.sum(XpEvent.amount), 0)).filter(XpEvent.user_id == user_id).scalar()
    return int(total or 0)


def get_recent_notifications(db: Session, user_id: str, limit: int = 20) -> List[Notification]:
    with unit_of_work(db, "get_recent_notifications", commit=False):
        return db.query(Notification).filter(
            Notification.user_id == user_id
        ).order_by(Notification.created_at.desc(), Notification.id).limit(limit).all()
