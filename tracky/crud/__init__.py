from tracky.crud.habits import (
    create_habit,
    get_habits,
    get_habit,
    set_habit_completion,
    set_habit_completions,
    all_habits_completed,
)
from tracky.crud.activity import (
    log_workout,
    log_learning,
    save_discipline_checkin,
)
from tracky.crud.discipline import (
    recompute_discipline_score,
    write_facts_and_rescore,
    get_day_habit_facts,
    get_discipline_score,
    get_discipline_trend,
)
from tracky.crud.streak import (
    record_qualifying_day,
    get_streak,
    get_streak_state,
)
from tracky.crud.challenge import (
    start_challenge,
    log_challenge_task,
    get_challenge_status,
    get_active_session,
)
from tracky.crud.rewards import (
    get_total_xp,
    get_recent_notifications,
)

__all__ = [
    # Habit operations
    "create_habit",
    "get_habits",
    "get_habit",
    "set_habit_completion",
    "set_habit_completions",
    "all_habits_completed",

    # Activity facts
    "log_workout",
    "log_learning",
    "save_discipline_checkin",

    # Discipline score cache
    "recompute_discipline_score",
    "write_facts_and_rescore",
    "get_day_habit_facts",
    "get_discipline_score",
    "get_discipline_trend",

    # Streaks
    "record_qualifying_day",
    "get_streak",
    "get_streak_state",

    # Challenges
    "start_challenge",
    "log_challenge_task",
    "get_challenge_status",
    "get_active_session",

    # Rewards
    "get_total_xp",
    "get_recent_notifications",
]
