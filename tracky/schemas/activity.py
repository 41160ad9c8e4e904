from pydantic import BaseModel, Field
from typing import Optional
from datetime import date

from tracky.schemas.discipline import DisciplineScoreResponse


class WorkoutLogRequest(BaseModel):
    date: date
    workout_type: str = Field(..., min_length=1, max_length=50)
    duration_minutes: Optional[int] = Field(None, ge=0)
    effort: Optional[int] = Field(None, ge=1, le=10)
    notes: Optional[str] = None


class LearningLogRequest(BaseModel):
    date: date
    leetcode_solved: int = Field(0, ge=0)
    pages_read: int = Field(0, ge=0)
    study_hours: float = Field(0.0, ge=0)


class ActivityLogResponse(BaseModel):
    success: bool = True
    date: date
    score: DisciplineScoreResponse
