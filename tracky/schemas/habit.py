from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime

from tracky.schemas.discipline import DisciplineScoreResponse
from tracky.schemas.streak import StreakSummary


class HabitCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    weight: int = Field(10, gt=0, description="Relative importance of the habit")
    domain: str = Field("personal", max_length=32)
    icon: Optional[str] = Field(None, max_length=16)
    sort_order: int = 0


class HabitResponse(BaseModel):
    id: str
    name: str
    weight: int
    domain: str
    icon: Optional[str]
    active: bool
    sort_order: int
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class HabitLogRequest(BaseModel):
    habit_id: str
    date: date
    completed: bool = True


class HabitToggle(BaseModel):
    habit_id: str
    completed: bool


class HabitBulkLogRequest(BaseModel):
    date: date
    habits: List[HabitToggle] = Field(..., min_length=1)


class HabitLogResponse(BaseModel):
    success: bool = True
    date: date
    score: DisciplineScoreResponse
    all_habits_done: bool
    streak: Optional[StreakSummary] = Field(None, description="Present when the day counted toward the streak")
    message: str
