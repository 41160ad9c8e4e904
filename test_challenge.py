#!/usr/bin/env python3
"""
75 day challenge: day numbering, pass rules, milestone rewards and sessions.
"""

from datetime import date, timedelta

import pytest

from tracky import crud
from tracky.crud import challenge as challenge_crud
from tracky.engines.challenge import (
    ChallengeType,
    REQUIRED_TASKS,
    current_day,
    day_number,
    evaluate_day,
    is_day_passed,
    remaining_tasks,
    validate_task_id,
)
from tracky.errors import ConflictingActiveSession, InvalidDay, NoActiveSession, UnknownTaskId
from tracky.models import ChallengeDailyLog, ChallengeSession, Habit, Notification, XpEvent

START = date(2024, 1, 1)
D = timedelta(days=1)

STRICT_TASKS = list(REQUIRED_TASKS[ChallengeType.STRICT])
RELAXED_TASKS = list(REQUIRED_TASKS[ChallengeType.RELAXED])


def _all(tasks, value=True):
    return {task_id: value for task_id in tasks}


# Day numbering

def test_day_number_boundaries():
    assert day_number(START, START) == 1
    assert day_number(START, date(2024, 3, 15)) == 75


@pytest.mark.parametrize("log_date", [date(2024, 3, 16), date(2023, 12, 31)])
def test_day_number_outside_challenge(log_date):
    with pytest.raises(InvalidDay):
        day_number(START, log_date)


def test_current_day_is_clamped():
    assert current_day(START, START - D) == 1
    assert current_day(START, START + 9 * D) == 10
    assert current_day(START, date(2024, 6, 1)) == 75


# Pass rules

def test_strict_day_needs_all_seven():
    assert is_day_passed(ChallengeType.STRICT, _all(STRICT_TASKS))
    for missing in STRICT_TASKS:
        tasks = _all(STRICT_TASKS)
        tasks[missing] = False
        assert not is_day_passed(ChallengeType.STRICT, tasks)


def test_relaxed_day_ignores_reflection():
    tasks = _all(RELAXED_TASKS)
    tasks["reflection"] = False
    assert is_day_passed(ChallengeType.RELAXED, tasks)


def test_task_vocabulary_is_per_type():
    assert validate_task_id(ChallengeType.STRICT, "photo") == "progress_photo"
    assert validate_task_id(ChallengeType.RELAXED, "reflection") == "reflection_done"
    with pytest.raises(UnknownTaskId):
        validate_task_id(ChallengeType.RELAXED, "photo")
    with pytest.raises(UnknownTaskId):
        validate_task_id(ChallengeType.STRICT, "reflection")
    with pytest.raises(UnknownTaskId):
        validate_task_id(ChallengeType.STRICT, "sleep")


def test_remaining_tasks():
    assert remaining_tasks(ChallengeType.RELAXED, None) == RELAXED_TASKS + ["reflection"]
    assert remaining_tasks(ChallengeType.RELAXED, {"workout_1": True, "diet": True}) == ["water", "reading", "reflection"]


# Rewards

def test_milestone_fires_on_completion_edge():
    evaluation = evaluate_day(ChallengeType.STRICT, _all(STRICT_TASKS), previously_complete=False, day_number=7)
    assert evaluation.passed
    assert [a.amount for a in evaluation.awards] == [25, 300]
    assert evaluation.milestone.notification_title == "One Week Unbroken"
    assert not evaluation.completes_session


def test_already_complete_day_fires_nothing():
    evaluation = evaluate_day(ChallengeType.STRICT, _all(STRICT_TASKS), previously_complete=True, day_number=7)
    assert evaluation.all_tasks_complete
    assert evaluation.awards == []
    assert evaluation.milestone is None


def test_incomplete_day_fires_nothing():
    evaluation = evaluate_day(ChallengeType.RELAXED, {"workout_1": True}, previously_complete=False, day_number=30)
    assert not evaluation.passed
    assert evaluation.awards == []


def test_relaxed_milestone_amounts_and_final_day():
    evaluation = evaluate_day(ChallengeType.RELAXED, _all(RELAXED_TASKS), previously_complete=False, day_number=75)
    assert [a.amount for a in evaluation.awards] == [15, 1200]
    assert evaluation.completes_session


# Persisted sessions

def _log_all(db, tasks, day):
    result = None
    for task_id in tasks:
        result = crud.log_challenge_task(db, "user-1", task_id, True, day)
    return result


def test_start_challenge_seeds_habits_and_awards_start_xp(db):
    session = crud.start_challenge(db, "user-1", ChallengeType.STRICT, START)
    assert session.status == "active"
    assert session.current_day == 1

    names = {h.name for h in db.query(Habit).filter(Habit.user_id == "user-1").all()}
    assert "Progress Photo" in names and len(names) == 7
    assert crud.get_total_xp(db, "user-1") == 100


def test_second_start_conflicts_and_leaves_original(db):
    original = crud.start_challenge(db, "user-1", ChallengeType.STRICT, START)

    with pytest.raises(ConflictingActiveSession) as excinfo:
        crud.start_challenge(db, "user-1", ChallengeType.RELAXED, START + 3 * D)
    assert excinfo.value.existing_session_id == original.id

    sessions = db.query(ChallengeSession).filter(ChallengeSession.user_id == "user-1").all()
    assert len(sessions) == 1
    assert sessions[0].challenge_type == "75_hard"
    assert sessions[0].start_date == START
    assert crud.get_total_xp(db, "user-1") == 100


def test_log_without_session(db):
    with pytest.raises(NoActiveSession):
        crud.log_challenge_task(db, "user-1", "workout_1", True, START)


def test_unknown_task_writes_nothing(db):
    crud.start_challenge(db, "user-1", ChallengeType.RELAXED, START)
    with pytest.raises(UnknownTaskId):
        crud.log_challenge_task(db, "user-1", "photo", True, START)
    assert db.query(ChallengeDailyLog).count() == 0


def test_out_of_range_day_writes_nothing(db):
    crud.start_challenge(db, "user-1", ChallengeType.STRICT, START)
    with pytest.raises(InvalidDay):
        crud.log_challenge_task(db, "user-1", "diet", True, date(2024, 3, 16))
    assert db.query(ChallengeDailyLog).count() == 0


def test_day_seven_milestone_fires_once(db):
    crud.start_challenge(db, "user-1", ChallengeType.STRICT, START)
    day7 = START + 6 * D

    result = _log_all(db, STRICT_TASKS, day7)
    assert result.evaluation.day_number == 7
    assert result.xp_earned == 325
    assert result.log.passed

    again = crud.log_challenge_task(db, "user-1", "diet", True, day7)
    assert again.xp_earned == 0
    assert again.evaluation.milestone is None

    milestone_events = db.query(XpEvent).filter(XpEvent.reason == "challenge_milestone_7").count()
    assert milestone_events == 1
    titles = [n.title for n in db.query(Notification).filter(Notification.title == "One Week Unbroken").all()]
    assert len(titles) == 1


def test_partial_day_is_not_passed(db):
    crud.start_challenge(db, "user-1", ChallengeType.RELAXED, START)
    result = crud.log_challenge_task(db, "user-1", "reflection", True, START)
    assert not result.log.passed
    assert result.log.reflection_done
    assert result.xp_earned == 0


def test_day_75_completes_session(db):
    crud.start_challenge(db, "user-1", ChallengeType.RELAXED, START)
    result = _log_all(db, RELAXED_TASKS, date(2024, 3, 15))

    assert result.evaluation.day_number == 75
    assert result.session.status == "completed"
    assert result.session.completed_at == date(2024, 3, 15)
    assert crud.get_active_session(db, "user-1") is None

    # A finished session no longer blocks a new one
    fresh = crud.start_challenge(db, "user-1", ChallengeType.STRICT, date(2024, 4, 1))
    assert fresh.status == "active"


def test_challenge_status(db):
    assert crud.get_challenge_status(db, "user-1", START) is None

    crud.start_challenge(db, "user-1", ChallengeType.RELAXED, START)
    _log_all(db, RELAXED_TASKS, START)
    crud.log_challenge_task(db, "user-1", "diet", True, START + D)

    status = crud.get_challenge_status(db, "user-1", START + D)
    assert status.current_day == 2
    assert status.completed_days == 1
    assert status.remaining_tasks == ["workout_1", "water", "reading", "reflection"]
    assert not status.on_track
    assert status.progress_percent == 3


def test_backfilled_day_keeps_progress(db):
    crud.start_challenge(db, "user-1", ChallengeType.STRICT, START)
    crud.log_challenge_task(db, "user-1", "diet", True, START + 4 * D)
    result = crud.log_challenge_task(db, "user-1", "diet", True, START + D)

    assert result.evaluation.day_number == 2
    assert result.session.current_day == 5


def test_lost_first_insert_is_retried_as_update(db, monkeypatch):
    crud.start_challenge(db, "user-1", ChallengeType.RELAXED, START)
    crud.log_challenge_task(db, "user-1", "workout_1", True, START)
    crud.log_challenge_task(db, "user-1", "diet", True, START)
    crud.log_challenge_task(db, "user-1", "water", True, START)

    # First lookup misses the row another request already inserted
    real_find = challenge_crud._find_day_log
    calls = []

    def stale_then_real(*args):
        calls.append(args)
        return None if len(calls) == 1 else real_find(*args)

    monkeypatch.setattr(challenge_crud, "_find_day_log", stale_then_real)
    result = crud.log_challenge_task(db, "user-1", "reading", True, START)
    monkeypatch.undo()

    assert len(calls) == 2
    assert result.log.passed
    assert result.log.diet_followed and result.log.reading_done
    assert result.xp_earned == 15
    assert db.query(ChallengeDailyLog).count() == 1
    assert db.query(XpEvent).filter(XpEvent.reason == "challenge_day_complete").count() == 1
