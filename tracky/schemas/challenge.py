from pydantic import BaseModel, Field
from typing import List, Optional
import datetime as dt


class ChallengeStartRequest(BaseModel):
    challenge_type: str = Field(..., description="75_hard or 75_soft")
    start_date: Optional[dt.date] = None


class ChallengeSessionResponse(BaseModel):
    id: str
    challenge_type: str
    start_date: dt.date
    current_day: int
    status: str
    restart_count: int
    completed_at: Optional[dt.date] = None

    class Config:
        from_attributes = True


class ChallengeStartResponse(BaseModel):
    success: bool = True
    session: ChallengeSessionResponse
    xp_earned: int
    message: str


class ChallengeLogRequest(BaseModel):
    task_id: str = Field(..., min_length=1)
    completed: bool = True
    date: Optional[dt.date] = None


class ChallengeDailyLogResponse(BaseModel):
    date: dt.date
    day_number: int
    workout_1_done: bool
    workout_2_outdoor_done: bool
    diet_followed: bool
    water_goal_done: bool
    reading_done: bool
    progress_photo: bool
    no_alcohol: bool
    reflection_done: bool
    all_tasks_complete: bool
    passed: bool

    class Config:
        from_attributes = True


class ChallengeLogResponse(BaseModel):
    success: bool = True
    log: ChallengeDailyLogResponse
    day_number: int
    all_complete: bool
    xp_earned: int
    milestone: Optional[str] = None
    session_status: str


class ChallengeStatusResponse(BaseModel):
    active: bool
    message: Optional[str] = None
    session_id: Optional[str] = None
    challenge_type: Optional[str] = None
    start_date: Optional[dt.date] = None
    current_day: Optional[int] = None
    total_days: Optional[int] = None
    completed_days: Optional[int] = None
    restart_count: Optional[int] = None
    status: Optional[str] = None
    today_log: Optional[ChallengeDailyLogResponse] = None
    remaining_tasks: List[str] = []
    on_track: Optional[bool] = None
    progress_percent: Optional[int] = None
