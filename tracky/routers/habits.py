from fastapi import APIRouter, Depends, HTTPException, Request, Query
from sqlalchemy.orm import Session
from typing import List

from tracky.database import get_db
from tracky.dependencies import get_current_user_id
from tracky import crud
from tracky.schemas import (
    HabitCreate, HabitResponse, HabitLogRequest, HabitBulkLogRequest, HabitLogResponse,
    StreakSummary, score_response
)
from tracky.middleware.rate_limit import rate_limit_write
from tracky.errors import TrackyError
from tracky.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/habits", tags=["habits"])


def _after_habit_change(db: Session, user_id: str, day, score) -> HabitLogResponse:
    """
    Runs once the toggle and the rescored day have committed together: counts
    the day toward the streak if every active habit is done.
    """
    all_done = crud.all_habits_completed(crud.get_day_habit_facts(db, user_id, day))

    streak = None
    if all_done:
        row, _ = crud.record_qualifying_day(db, user_id, day)
        streak = StreakSummary(
            current_streak=row.current_streak,
            longest_streak=row.longest_streak,
            last_qualifying_date=row.last_qualifying_date,
            streak_started_at=row.streak_started_at,
        )

    return HabitLogResponse(
        date=day,
        score=score_response(score),
        all_habits_done=all_done,
        streak=streak,
        message="All habits complete!" if all_done else "Habits updated",
    )


@router.post("", response_model=HabitResponse)
@rate_limit_write
async def create_habit(
    request: Request,
    payload: HabitCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create a new habit for the current user."""
    try:
        habit = crud.create_habit(
            db, user_id, payload.name,
            weight=payload.weight, domain=payload.domain, icon=payload.icon, sort_order=payload.sort_order,
        )
        return HabitResponse.model_validate(habit)
    except HTTPException:
        raise
    except TrackyError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    except Exception as e:
        logger.exception(f"Failed to create habit for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create habit")


@router.get("", response_model=List[HabitResponse])
async def list_habits(
    include_inactive: bool = Query(False, description="Include archived habits"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """List the current user's habits."""
    try:
        habits = crud.get_habits(db, user_id, include_inactive=include_inactive)
        return [HabitResponse.model_validate(h) for h in habits]
    except TrackyError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    except Exception as e:
        logger.exception(f"Failed to list habits for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to list habits")


@router.post("/log", response_model=HabitLogResponse)
@rate_limit_write
async def log_habit(
    request: Request,
    payload: HabitLogRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Toggle one habit for a date."""
    try:
        _, score = crud.set_habit_completion(db, user_id, payload.habit_id, payload.date, payload.completed)
        return _after_habit_change(db, user_id, payload.date, score)
    except HTTPException:
        raise
    except TrackyError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    except Exception as e:
        logger.exception(f"Habit log error for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to log habit")


@router.put("/log", response_model=HabitLogResponse)
@rate_limit_write
async def bulk_log_habits(
    request: Request,
    payload: HabitBulkLogRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Toggle several habits for one date."""
    try:
        completions = {h.habit_id: h.completed for h in payload.habits}
        _, score = crud.set_habit_completions(db, user_id, payload.date, completions)
        return _after_habit_change(db, user_id, payload.date, score)
    except HTTPException:
        raise
    except TrackyError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    except Exception as e:
        logger.exception(f"Bulk habit log error for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to log habits")
