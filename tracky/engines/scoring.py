"""
Discipline score calculation.

Two formulas coexist and are selected by name:

* FIVE_FACTOR scores the morning-routine check-in (wake time, no phone,
  cold shower, meditation, planning tomorrow) against a fixed weight table.
* DOMAIN_COMPOSITE scores the dashboard day: habits 60%, fitness 20%,
  learning 20%.

Both are pure functions of the facts passed in. Results are integers in
0..100, rounded half-up.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Sequence, Union


class ScoreFormula(str, enum.Enum):
    FIVE_FACTOR = "five_factor"
    DOMAIN_COMPOSITE = "domain_composite"


FIVE_FACTOR_WEIGHTS: Dict[str, Decimal] = {
    "woke_up_on_time": Decimal("0.40"),
    "no_phone_first_hour": Decimal("0.25"),
    "cold_shower": Decimal("0.15"),
    "meditated": Decimal("0.15"),
    "planned_tomorrow": Decimal("0.05"),
}

if sum(FIVE_FACTOR_WEIGHTS.values()) != Decimal("1"):
    raise RuntimeError("Five-factor weights must sum to 1.0")

DOMAIN_WEIGHTS: Dict[str, Decimal] = {
    "habits": Decimal("0.60"),
    "fitness": Decimal("0.20"),
    "learning": Decimal("0.20"),
}

REST_WORKOUT_TYPES = frozenset({"rest", "rest_day"})

MAX_SCORE = 100


def round_half_up(value: Union[Decimal, float, int]) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _clamp(value: int) -> int:
    return max(0, min(MAX_SCORE, value))


# ============================================
# INPUT FACTS
# ============================================

@dataclass(frozen=True)
class FiveFactorInput:
    woke_up_on_time: bool = False
    cold_shower: bool = False
    no_phone_first_hour: bool = False
    meditated: bool = False
    planned_tomorrow: bool = False


@dataclass(frozen=True)
class HabitFact:
    habit_id: str
    completed: bool
    weight: int = 1


@dataclass(frozen=True)
class WorkoutFact:
    workout_type: str
    effort: Optional[int] = None
    duration_minutes: Optional[int] = None

    @property
    def is_rest(self) -> bool:
        return self.workout_type.strip().lower() in REST_WORKOUT_TYPES


@dataclass(frozen=True)
class LearningFact:
    leetcode_solved: int = 0
    pages_read: int = 0
    study_hours: float = 0.0

    @property
    def any_activity(self) -> bool:
        return self.leetcode_solved >= 1 or self.pages_read >= 1 or self.study_hours > 0


@dataclass(frozen=True)
class DayFacts:
    """Everything the composite formula needs for one user-day."""
    habits: Sequence[HabitFact] = ()
    workout: Optional[WorkoutFact] = None
    learning: Optional[LearningFact] = None


# ============================================
# RESULTS
# ============================================

@dataclass(frozen=True)
class FiveFactorScore:
    total_score: int
    factors: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class CompositeScore:
    habits_score: int
    fitness_score: int
    learning_score: int
    total_score: int


# ============================================
# FORMULAS
# ============================================

def calculate_five_factor(checkin: FiveFactorInput) -> FiveFactorScore:
    """Each true factor contributes its weight fraction of 100."""
    factors = {
        name: MAX_SCORE if getattr(checkin, name) else 0
        for name in FIVE_FACTOR_WEIGHTS
    }
    raw = sum(Decimal(factors[name]) * weight for name, weight in FIVE_FACTOR_WEIGHTS.items())
    return FiveFactorScore(total_score=_clamp(round_half_up(raw)), factors=factors)


def calculate_habits_score(habits: Sequence[HabitFact]) -> int:
    if not habits:
        return 0
    completed = sum(1 for h in habits if h.completed)
    return _clamp(round_half_up(Decimal(MAX_SCORE * completed) / Decimal(len(habits))))


def calculate_fitness_score(workout: Optional[WorkoutFact]) -> int:
    # Binary credit; effort and duration are recorded but do not scale the score
    if workout is None or workout.is_rest:
        return 0
    return MAX_SCORE


def calculate_learning_score(learning: Optional[LearningFact]) -> int:
    if learning is None or not learning.any_activity:
        return 0
    return MAX_SCORE


def calculate_composite(facts: DayFacts) -> CompositeScore:
    habits_score = calculate_habits_score(facts.habits)
    fitness_score = calculate_fitness_score(facts.workout)
    learning_score = calculate_learning_score(facts.learning)

    raw = (
        DOMAIN_WEIGHTS["habits"] * habits_score
        + DOMAIN_WEIGHTS["fitness"] * fitness_score
        + DOMAIN_WEIGHTS["learning"] * learning_score
    )
    return CompositeScore(
        habits_score=habits_score,
        fitness_score=fitness_score,
        learning_score=learning_score,
        total_score=_clamp(round_half_up(raw)),
    )


def calculate_score(
    formula: ScoreFormula,
    facts: Union[FiveFactorInput, DayFacts],
) -> Union[FiveFactorScore, CompositeScore]:
    """Dispatch to the named formula."""
    if formula is ScoreFormula.FIVE_FACTOR:
        if not isinstance(facts, FiveFactorInput):
            raise TypeError("FIVE_FACTOR expects FiveFactorInput")
        return calculate_five_factor(facts)
    if formula is ScoreFormula.DOMAIN_COMPOSITE:
        if not isinstance(facts, DayFacts):
            raise TypeError("DOMAIN_COMPOSITE expects DayFacts")
        return calculate_composite(facts)
    raise ValueError(f"Unknown score formula: {formula}")


# ============================================
# INTERPRETATION
# ============================================

@dataclass(frozen=True)
class ScoreGrade:
    grade: str
    label: str
    message: str


_GRADES = (
    (90, ScoreGrade("S", "Exceptional", "You're in the top 1%. Legendary discipline.")),
    (80, ScoreGrade("A", "Excellent", "Outstanding day. Keep this energy.")),
    (70, ScoreGrade("B", "Good", "Solid progress. Push a bit harder tomorrow.")),
    (50, ScoreGrade("C", "Average", "Room for improvement. What held you back?")),
    (30, ScoreGrade("D", "Below Average", "Tough day. Tomorrow is a fresh start.")),
)
_FAILING = ScoreGrade("F", "Needs Work", "Everyone has off days. Get back on track.")


def interpret_score(score: int) -> ScoreGrade:
    for threshold, grade in _GRADES:
        if score >= threshold:
            return grade
    return _FAILING


@dataclass(frozen=True)
class PeriodSummary:
    average: int
    trend: str
    consistency: int
    days_logged: int


TREND_DEAD_BAND = 5


def summarize_period(totals: List[int]) -> PeriodSummary:
    """
    Average, trend and consistency for a run of daily totals in date order.

    Trend compares the mean of the second half against the first half and
    only reports movement beyond TREND_DEAD_BAND points. Consistency is the
    share of a 7 day week that was logged.
    """
    if not totals:
        return PeriodSummary(average=0, trend="stable", consistency=0, days_logged=0)

    average = round_half_up(Decimal(sum(totals)) / len(totals))

    midpoint = len(totals) // 2
    first, second = totals[:midpoint], totals[midpoint:]
    first_avg = Decimal(sum(first)) / (len(first) or 1)
    second_avg = Decimal(sum(second)) / (len(second) or 1)

    trend = "stable"
    if second_avg > first_avg + TREND_DEAD_BAND:
        trend = "up"
    elif second_avg < first_avg - TREND_DEAD_BAND:
        trend = "down"

    consistency = round_half_up(Decimal(len(totals) * 100) / 7)
    return PeriodSummary(average=average, trend=trend, consistency=consistency, days_logged=len(totals))
