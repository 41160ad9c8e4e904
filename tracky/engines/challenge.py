"""
75 day challenge rules.

Maps the day's task flags to pass/fail, turns a log date into a day number,
and decides which rewards fire when a day flips from incomplete to complete.
Nothing here touches the database.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Mapping, Optional, Tuple

from tracky.errors import InvalidDay, UnknownTaskId

CHALLENGE_LENGTH_DAYS = 75


class ChallengeType(str, enum.Enum):
    STRICT = "75_hard"
    RELAXED = "75_soft"

    @property
    def display_name(self) -> str:
        return "75 Hard" if self is ChallengeType.STRICT else "75 Soft"


class SessionStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"


# Task id -> column on challenge_daily_logs
TASK_COLUMNS: Dict[str, str] = {
    "workout_1": "workout_1_done",
    "workout_2_outdoor": "workout_2_outdoor_done",
    "diet": "diet_followed",
    "water": "water_goal_done",
    "reading": "reading_done",
    "photo": "progress_photo",
    "no_alcohol": "no_alcohol",
    "reflection": "reflection_done",
}

REQUIRED_TASKS: Dict[ChallengeType, Tuple[str, ...]] = {
    ChallengeType.STRICT: (
        "workout_1", "workout_2_outdoor", "diet", "water", "reading", "photo", "no_alcohol",
    ),
    ChallengeType.RELAXED: ("workout_1", "diet", "water", "reading"),
}

# Tracked but never part of the pass condition
INFORMATIONAL_TASKS: Dict[ChallengeType, Tuple[str, ...]] = {
    ChallengeType.STRICT: (),
    ChallengeType.RELAXED: ("reflection",),
}

DAILY_COMPLETION_XP = {ChallengeType.STRICT: 25, ChallengeType.RELAXED: 15}
START_XP = {ChallengeType.STRICT: 100, ChallengeType.RELAXED: 50}


@dataclass(frozen=True)
class Milestone:
    day: int
    title: str
    xp_strict: int
    xp_relaxed: int

    def xp_for(self, challenge_type: ChallengeType) -> int:
        return self.xp_strict if challenge_type is ChallengeType.STRICT else self.xp_relaxed


MILESTONES: Dict[int, Milestone] = {
    m.day: m for m in (
        Milestone(7, "One Week Unbroken", 300, 200),
        Milestone(30, "Elite Discipline", 700, 500),
        Milestone(50, "Rare Mentality", 1000, 700),
        Milestone(75, "Challenge Complete!", 2000, 1200),
    )
}


def task_vocabulary(challenge_type: ChallengeType) -> Tuple[str, ...]:
    return REQUIRED_TASKS[challenge_type] + INFORMATIONAL_TASKS[challenge_type]


def validate_task_id(challenge_type: ChallengeType, task_id: str) -> str:
    """Return the log column for a task id, or raise UnknownTaskId."""
    if task_id not in task_vocabulary(challenge_type):
        raise UnknownTaskId(task_id, challenge_type.value)
    return TASK_COLUMNS[task_id]


def day_number(start_date: date, log_date: date) -> int:
    number = (log_date - start_date).days + 1
    if number < 1 or number > CHALLENGE_LENGTH_DAYS:
        raise InvalidDay(number, CHALLENGE_LENGTH_DAYS)
    return number


def current_day(start_date: date, today: date) -> int:
    """Day number for a status read: clamped instead of rejected."""
    return max(1, min((today - start_date).days + 1, CHALLENGE_LENGTH_DAYS))


def is_day_passed(challenge_type: ChallengeType, tasks: Mapping[str, bool]) -> bool:
    return all(tasks.get(task_id, False) for task_id in REQUIRED_TASKS[challenge_type])


def remaining_tasks(challenge_type: ChallengeType, tasks: Optional[Mapping[str, bool]]) -> List[str]:
    tasks = tasks or {}
    return [task_id for task_id in task_vocabulary(challenge_type) if not tasks.get(task_id, False)]


@dataclass(frozen=True)
class XpAward:
    amount: int
    reason: str
    day_number: int


@dataclass(frozen=True)
class MilestoneReached:
    milestone: Milestone
    xp: int
    day_number: int

    @property
    def notification_title(self) -> str:
        return self.milestone.title

    @property
    def notification_message(self) -> str:
        return f"Day {self.day_number} complete! You earned {self.xp} XP."


@dataclass(frozen=True)
class DayEvaluation:
    day_number: int
    all_tasks_complete: bool
    passed: bool
    awards: List[XpAward] = field(default_factory=list)
    milestone: Optional[MilestoneReached] = None
    completes_session: bool = False


def evaluate_day(
    challenge_type: ChallengeType,
    tasks: Mapping[str, bool],
    previously_complete: bool,
    day_number: int,
) -> DayEvaluation:
    """
    Recompute a day's result and the rewards it triggers.

    Rewards fire only on the false to true edge of all_tasks_complete, so
    re-evaluating an already complete day yields none.
    """
    complete = is_day_passed(challenge_type, tasks)
    if not complete or previously_complete:
        return DayEvaluation(day_number=day_number, all_tasks_complete=complete, passed=complete)

    awards = [XpAward(DAILY_COMPLETION_XP[challenge_type], "challenge_day_complete", day_number)]
    milestone = None
    entry = MILESTONES.get(day_number)
    if entry is not None:
        xp = entry.xp_for(challenge_type)
        milestone = MilestoneReached(milestone=entry, xp=xp, day_number=day_number)
        awards.append(XpAward(xp, f"challenge_milestone_{day_number}", day_number))

    return DayEvaluation(
        day_number=day_number,
        all_tasks_complete=True,
        passed=True,
        awards=awards,
        milestone=milestone,
        completes_session=day_number == CHALLENGE_LENGTH_DAYS,
    )
