from pydantic import BaseModel, Field
from typing import Dict, List, Optional
import datetime as dt

from tracky.engines.scoring import interpret_score


class DisciplineScoreResponse(BaseModel):
    date: dt.date
    habits: int = Field(..., ge=0, le=100)
    fitness: int = Field(..., ge=0, le=100)
    learning: int = Field(..., ge=0, le=100)
    total: int = Field(..., ge=0, le=100)
    grade: str
    label: str
    cached: Optional[bool] = None


class DisciplineCheckinRequest(BaseModel):
    date: Optional[dt.date] = None
    woke_up_on_time: bool = False
    cold_shower: bool = False
    no_phone_first_hour: bool = False
    meditated: bool = False
    planned_tomorrow: bool = False


class FiveFactorScoreResponse(BaseModel):
    date: dt.date
    total: int = Field(..., ge=0, le=100)
    factors: Dict[str, int]
    grade: str
    label: str
    message: str


class DisciplineTrendPoint(BaseModel):
    date: dt.date
    total: int
    habits: int
    fitness: int
    learning: int


class DisciplineTrendResponse(BaseModel):
    period: str
    scores: List[DisciplineTrendPoint]
    average: int
    trend: str
    consistency: int
    days_logged: int


def score_response(row, cached: Optional[bool] = None) -> DisciplineScoreResponse:
    """Build the API view of a cached discipline_scores row."""
    grade = interpret_score(row.total_score)
    return DisciplineScoreResponse(
        date=row.date,
        habits=row.habits_score,
        fitness=row.fitness_score,
        learning=row.learning_score,
        total=row.total_score,
        grade=grade.grade,
        label=grade.label,
        cached=cached,
    )
