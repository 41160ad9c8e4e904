from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from tracky.database import get_db
from tracky.dependencies import get_current_user_id
from tracky import crud
from tracky.schemas import LearningLogRequest, ActivityLogResponse, score_response
from tracky.middleware.rate_limit import rate_limit_write
from tracky.errors import TrackyError
from tracky.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/learning", tags=["learning"])


@router.post("/log", response_model=ActivityLogResponse)
@rate_limit_write
async def log_learning(
    request: Request,
    payload: LearningLogRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Record the day's learning counts and refresh the day's discipline score."""
    try:
        _, score = crud.log_learning(
            db, user_id, payload.date,
            leetcode_solved=payload.leetcode_solved,
            pages_read=payload.pages_read,
            study_hours=payload.study_hours,
        )
        return ActivityLogResponse(date=payload.date, score=score_response(score))
    except HTTPException:
        raise
    except TrackyError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    except Exception as e:
        logger.exception(f"Learning log error for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to log learning")
