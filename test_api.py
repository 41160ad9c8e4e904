#!/usr/bin/env python3
"""
End-to-end flows through the HTTP API.
"""

from datetime import timedelta

from sqlalchemy.exc import OperationalError

from tracky import database
from tracky.crud import discipline as discipline_crud
from tracky.utils.dates import today_local


def _create_habit(client, headers, name):
    response = client.post("/habits", json={"name": name}, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["id"]


def test_root_and_health(client):
    assert client.get("/").status_code == 200
    health = client.get("/health").json()
    assert health["status"] == "healthy"


def test_engine_is_shared_and_lazy():
    assert not hasattr(database, "engine")
    assert database.get_engine() is database.get_engine()
    assert database.get_session_local().kw["bind"] is database.get_engine()


def test_request_id_is_echoed(client):
    response = client.get("/", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert client.get("/").headers["X-Request-ID"]


def test_user_header_is_required(client):
    response = client.get("/streaks/me")
    assert response.status_code == 401


def test_duplicate_habit_rejected(client, user_headers):
    _create_habit(client, user_headers, "Meditate")
    response = client.post("/habits", json={"name": "Meditate"}, headers=user_headers)
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "VALIDATION_ERROR"


def test_habit_toggles_update_score_and_streak(client, user_headers, day):
    first = _create_habit(client, user_headers, "Read")
    second = _create_habit(client, user_headers, "Stretch")

    response = client.post("/habits/log", json={"habit_id": first, "date": day.isoformat()}, headers=user_headers)
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["score"]["habits"] == 50
    assert body["score"]["total"] == 30
    assert body["all_habits_done"] is False
    assert body["streak"] is None

    body = client.post("/habits/log", json={"habit_id": second, "date": day.isoformat()}, headers=user_headers).json()
    assert body["score"]["habits"] == 100
    assert body["score"]["total"] == 60
    assert body["all_habits_done"] is True
    assert body["streak"]["current_streak"] == 1

    next_day = (day + timedelta(days=1)).isoformat()
    body = client.put(
        "/habits/log",
        json={"date": next_day, "habits": [{"habit_id": first, "completed": True}, {"habit_id": second, "completed": True}]},
        headers=user_headers,
    ).json()
    assert body["streak"]["current_streak"] == 2
    assert body["streak"]["longest_streak"] == 2


def test_repeat_toggle_does_not_double_count_streak(client, user_headers, day):
    habit = _create_habit(client, user_headers, "Read")
    payload = {"habit_id": habit, "date": day.isoformat()}
    client.post("/habits/log", json=payload, headers=user_headers)
    body = client.post("/habits/log", json=payload, headers=user_headers).json()
    assert body["streak"]["current_streak"] == 1

    rewards = client.get("/rewards/me", headers=user_headers).json()
    assert rewards["total_xp"] == 20


def test_unknown_habit_returns_404(client, user_headers, day):
    habit = _create_habit(client, user_headers, "Read")
    response = client.put(
        "/habits/log",
        json={"date": day.isoformat(), "habits": [{"habit_id": habit, "completed": True}, {"habit_id": "nope", "completed": True}]},
        headers=user_headers,
    )
    assert response.status_code == 404

    score = client.get("/discipline/score", params={"date": day.isoformat()}, headers=user_headers).json()
    assert score["habits"] == 0


def test_habits_are_scoped_to_user(client, user_headers, day):
    habit = _create_habit(client, user_headers, "Read")
    response = client.post(
        "/habits/log", json={"habit_id": habit, "date": day.isoformat()}, headers={"X-User-ID": "user-2"}
    )
    assert response.status_code == 404
    assert client.get("/habits", headers={"X-User-ID": "user-2"}).json() == []


def test_workout_and_learning_feed_composite(client, user_headers, day):
    response = client.post(
        "/fitness/workout", json={"date": day.isoformat(), "workout_type": "Strength", "duration_minutes": 45},
        headers=user_headers,
    )
    assert response.status_code == 200, response.text
    assert response.json()["score"]["fitness"] == 100
    assert response.json()["score"]["total"] == 20

    body = client.post(
        "/learning/log", json={"date": day.isoformat(), "pages_read": 5}, headers=user_headers
    ).json()
    assert body["score"]["learning"] == 100
    assert body["score"]["total"] == 40

    # Logging a rest day replaces the workout and removes the fitness credit
    body = client.post(
        "/fitness/workout", json={"date": day.isoformat(), "workout_type": "rest"}, headers=user_headers
    ).json()
    assert body["score"]["fitness"] == 0
    assert body["score"]["total"] == 20


def test_score_read_uses_cache(client, user_headers, day):
    first = client.get("/discipline/score", params={"date": day.isoformat()}, headers=user_headers).json()
    assert first["total"] == 0
    assert first["cached"] is False

    second = client.get("/discipline/score", params={"date": day.isoformat()}, headers=user_headers).json()
    assert second["cached"] is True


def test_discipline_checkin_five_factor(client, user_headers, day):
    response = client.post(
        "/discipline/checkin", json={"date": day.isoformat(), "woke_up_on_time": True}, headers=user_headers
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["total"] == 40
    assert body["factors"]["woke_up_on_time"] == 100
    assert body["grade"] == "D"


def test_discipline_trend(client, user_headers):
    today = today_local()
    client.post("/fitness/workout", json={"date": today.isoformat(), "workout_type": "run"}, headers=user_headers)

    body = client.get("/discipline/trend", params={"period": "week"}, headers=user_headers).json()
    assert body["days_logged"] == 1
    assert body["scores"][0]["fitness"] == 100

    assert client.get("/discipline/trend", params={"period": "year"}, headers=user_headers).status_code == 400


def test_streak_read_for_new_user(client, user_headers):
    body = client.get("/streaks/me", headers=user_headers).json()
    assert body["current_streak"] == 0
    assert body["effective_streak"] == 0
    assert body["is_broken"] is False


def test_challenge_start_conflict(client, user_headers):
    response = client.post(
        "/challenge/start", json={"challenge_type": "75_hard", "start_date": "2024-01-01"}, headers=user_headers
    )
    assert response.status_code == 200, response.text
    session_id = response.json()["session"]["id"]
    assert response.json()["xp_earned"] == 100

    response = client.post("/challenge/start", json={"challenge_type": "75_soft"}, headers=user_headers)
    assert response.status_code == 409
    assert response.json()["detail"]["existing_session_id"] == session_id


def test_challenge_rejects_bad_input(client, user_headers):
    assert client.post("/challenge/start", json={"challenge_type": "75_medium"}, headers=user_headers).status_code == 400

    client.post("/challenge/start", json={"challenge_type": "75_soft", "start_date": "2024-01-01"}, headers=user_headers)

    response = client.post(
        "/challenge/log", json={"task_id": "photo", "date": "2024-01-02"}, headers=user_headers
    )
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "UNKNOWN_TASK_ID"

    response = client.post(
        "/challenge/log", json={"task_id": "diet", "date": "2024-03-16"}, headers=user_headers
    )
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "INVALID_DAY"


def test_challenge_log_without_session(client, user_headers):
    response = client.post("/challenge/log", json={"task_id": "diet"}, headers=user_headers)
    assert response.status_code == 404


def test_challenge_log_completes_day(client, user_headers):
    client.post("/challenge/start", json={"challenge_type": "75_soft", "start_date": "2024-01-01"}, headers=user_headers)

    body = None
    for task_id in ("workout_1", "diet", "water", "reading"):
        body = client.post(
            "/challenge/log", json={"task_id": task_id, "date": "2024-01-07"}, headers=user_headers
        ).json()
    assert body["day_number"] == 7
    assert body["all_complete"] is True
    assert body["xp_earned"] == 215
    assert body["milestone"] == "One Week Unbroken"
    assert body["log"]["passed"] is True

    rewards = client.get("/rewards/me", headers=user_headers).json()
    assert rewards["total_xp"] == 50 + 215
    titles = {n["title"] for n in rewards["notifications"]}
    assert titles == {"Challenge Started!", "One Week Unbroken"}


def test_challenge_status(client, user_headers):
    assert client.get("/challenge/status", headers=user_headers).json()["active"] is False

    client.post("/challenge/start", json={"challenge_type": "75_hard"}, headers=user_headers)
    body = client.get("/challenge/status", headers=user_headers).json()
    assert body["active"] is True
    assert body["current_day"] == 1
    assert body["total_days"] == 75
    assert len(body["remaining_tasks"]) == 7
    assert body["on_track"] is False


def test_failed_rescore_answers_503_and_keeps_cache_consistent(client, user_headers, day, monkeypatch):
    habit = _create_habit(client, user_headers, "Read")
    payload = {"habit_id": habit, "date": day.isoformat()}
    assert client.post("/habits/log", json=payload, headers=user_headers).json()["score"]["total"] == 60

    def store_down(*args, **kwargs):
        raise OperationalError("UPDATE discipline_scores", {}, Exception("connection lost"))

    monkeypatch.setattr(discipline_crud, "_write_score", store_down)
    response = client.post("/habits/log", json={**payload, "completed": False}, headers=user_headers)
    monkeypatch.undo()

    assert response.status_code == 503
    assert response.json()["detail"]["error"] == "DEPENDENCY_UNAVAILABLE"

    # The un-toggle was rolled back with the score, so the cache still matches the facts
    score = client.get("/discipline/score", params={"date": day.isoformat()}, headers=user_headers).json()
    assert (score["habits"], score["total"], score["cached"]) == (100, 60, True)

    body = client.post("/habits/log", json={**payload, "completed": False}, headers=user_headers).json()
    assert (body["score"]["habits"], body["score"]["total"]) == (0, 0)
