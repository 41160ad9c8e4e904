from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from tracky.database import get_db
from tracky.dependencies import get_current_user_id
from tracky import crud
from tracky.schemas import WorkoutLogRequest, ActivityLogResponse, score_response
from tracky.middleware.rate_limit import rate_limit_write
from tracky.errors import TrackyError
from tracky.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/fitness", tags=["fitness"])


@router.post("/workout", response_model=ActivityLogResponse)
@rate_limit_write
async def log_workout(
    request: Request,
    payload: WorkoutLogRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Record the day's workout and refresh the day's discipline score."""
    try:
        _, score = crud.log_workout(
            db, user_id, payload.date, payload.workout_type,
            duration_minutes=payload.duration_minutes, effort=payload.effort, notes=payload.notes,
        )
        return ActivityLogResponse(date=payload.date, score=score_response(score))
    except HTTPException:
        raise
    except TrackyError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    except Exception as e:
        logger.exception(f"Workout log error for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to log workout")
