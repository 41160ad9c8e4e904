from pydantic import BaseModel
from typing import Optional
from datetime import date


class StreakSummary(BaseModel):
    current_streak: int
    longest_streak: int
    last_qualifying_date: Optional[date]
    streak_started_at: Optional[date]


class StreakResponse(StreakSummary):
    user_id: str
    effective_streak: int
    is_broken: bool
    today_local_date: date
