#!/usr/bin/env python3
"""
Streak tracking: pure transitions plus the persisted qualifying-day flow.
"""

import random
from datetime import date, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from tracky import crud
from tracky.crud import streak as streak_crud
from tracky.engines.streaks import (
    StreakState,
    advance_streak,
    effective_streak,
    is_streak_broken,
    streak_xp,
)
from tracky.errors import DependencyUnavailable
from tracky.models import Notification, XpEvent

D = timedelta(days=1)


def test_first_qualifying_day_creates_streak():
    state, event = advance_streak(StreakState(), date(2024, 1, 10))
    assert (state.current_streak, state.longest_streak) == (1, 1)
    assert state.streak_started_at == date(2024, 1, 10)
    assert event.length == 1 and not event.reset


def test_consecutive_day_continues_streak():
    last = date(2024, 1, 10)
    state = StreakState(current_streak=5, longest_streak=5, last_qualifying_date=last, streak_started_at=last - 4 * D)
    new_state, event = advance_streak(state, last + D)
    assert new_state.current_streak == 6
    assert new_state.longest_streak == 6
    assert new_state.last_qualifying_date == last + D
    assert new_state.streak_started_at == state.streak_started_at
    assert event.length == 6


def test_gap_resets_but_keeps_longest():
    last = date(2024, 1, 10)
    state = StreakState(current_streak=5, longest_streak=5, last_qualifying_date=last, streak_started_at=last - 4 * D)
    new_state, event = advance_streak(state, date(2024, 1, 13))
    assert new_state.current_streak == 1
    assert new_state.longest_streak == 5
    assert new_state.streak_started_at == date(2024, 1, 13)
    assert event.reset and event.length == 1


def test_same_day_is_noop():
    state, _ = advance_streak(StreakState(), date(2024, 1, 10))
    again, event = advance_streak(state, date(2024, 1, 10))
    assert again == state
    assert event is None


def test_longest_never_below_current_over_random_sequences():
    rng = random.Random(75)
    for _ in range(200):
        state = StreakState()
        day = date(2024, 1, 1)
        for _ in range(40):
            day += rng.choice([0, 1, 1, 1, 2, 5]) * D
            state, _ = advance_streak(state, day)
            assert state.longest_streak >= state.current_streak >= 1


def test_broken_is_derived_from_last_date():
    assert not is_streak_broken(None, date(2024, 1, 10))
    assert not is_streak_broken(date(2024, 1, 10), date(2024, 1, 10))
    assert not is_streak_broken(date(2024, 1, 9), date(2024, 1, 10))
    assert is_streak_broken(date(2024, 1, 8), date(2024, 1, 10))


def test_effective_streak():
    state = StreakState(current_streak=4, longest_streak=9, last_qualifying_date=date(2024, 1, 9))
    assert effective_streak(state, date(2024, 1, 10)) == 4
    assert effective_streak(state, date(2024, 1, 12)) == 0
    assert effective_streak(StreakState(), date(2024, 1, 12)) == 0


def test_streak_xp_includes_milestone_bonus():
    assert streak_xp(3) == 20
    assert streak_xp(7) == 70
    assert streak_xp(30) == 270


def test_record_qualifying_day_persists_and_awards(db, day):
    row, event = crud.record_qualifying_day(db, "user-1", day)
    assert row.current_streak == 1 and row.longest_streak == 1
    assert event is not None

    row, event = crud.record_qualifying_day(db, "user-1", day + D)
    assert row.current_streak == 2
    assert event.length == 2

    amounts = [e.amount for e in db.query(XpEvent).filter(XpEvent.user_id == "user-1").all()]
    assert amounts == [20, 20]


def test_record_qualifying_day_is_idempotent(db, day):
    crud.record_qualifying_day(db, "user-1", day)
    row, event = crud.record_qualifying_day(db, "user-1", day)
    assert event is None
    assert row.current_streak == 1
    assert crud.get_total_xp(db, "user-1") == 20


def test_record_qualifying_day_reset_after_gap(db, day):
    for offset in range(3):
        crud.record_qualifying_day(db, "user-1", day + offset * D)
    row, event = crud.record_qualifying_day(db, "user-1", day + 5 * D)
    assert event.reset
    assert row.current_streak == 1
    assert row.longest_streak == 3
    assert row.streak_started_at == day + 5 * D


def test_seven_day_streak_earns_milestone(db, day):
    for offset in range(7):
        crud.record_qualifying_day(db, "user-1", day + offset * D)

    assert crud.get_total_xp(db, "user-1") == 7 * 20 + 50
    titles = [n.title for n in db.query(Notification).filter(Notification.user_id == "user-1").all()]
    assert titles == ["One Week Strong!"]


def test_streaks_are_per_user(db, day):
    crud.record_qualifying_day(db, "user-1", day)
    crud.record_qualifying_day(db, "user-1", day + D)
    crud.record_qualifying_day(db, "user-2", day + D)

    assert crud.get_streak_state(db, "user-1").current_streak == 2
    assert crud.get_streak_state(db, "user-2").current_streak == 1
    assert crud.get_streak(db, "user-3") is None


def _store_down(*args, **kwargs):
    raise OperationalError("INSERT INTO xp_events", {}, Exception("connection lost"))


def test_failed_reward_write_leaves_streak_untouched(db, day, monkeypatch):
    crud.record_qualifying_day(db, "user-1", day)

    monkeypatch.setattr(streak_crud, "apply_streak_event", _store_down)
    with pytest.raises(DependencyUnavailable):
        crud.record_qualifying_day(db, "user-1", day + D)
    monkeypatch.undo()

    db.expire_all()
    row = crud.get_streak(db, "user-1")
    assert row.current_streak == 1
    assert row.last_qualifying_date == day
    assert db.query(XpEvent).count() == 1


def test_failed_commit_leaves_no_half_applied_increment(db, day, monkeypatch):
    crud.record_qualifying_day(db, "user-1", day)

    monkeypatch.setattr(db, "commit", _store_down)
    with pytest.raises(DependencyUnavailable):
        crud.record_qualifying_day(db, "user-1", day + D)
    monkeypatch.undo()

    db.expire_all()
    assert crud.get_streak_state(db, "user-1").current_streak == 1
    assert crud.get_total_xp(db, "user-1") == 20

    # The same day still counts once the store is back
    row, event = crud.record_qualifying_day(db, "user-1", day + D)
    assert row.current_streak == 2 and event is not None
