from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tracky.database import get_db
from tracky.dependencies import get_current_user_id
from tracky.schemas.streak import StreakResponse
from tracky.crud.streak import get_streak_state
from tracky.engines.streaks import effective_streak, is_streak_broken
from tracky.errors import TrackyError
from tracky.utils.dates import today_local
from tracky.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/streaks", tags=["streaks"])


@router.get("/me", response_model=StreakResponse)
async def get_my_streak(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Get current user's streak, with whether it is broken as of today."""
    try:
        state = get_streak_state(db, user_id)
        today = today_local()
        return StreakResponse(
            user_id=user_id,
            current_streak=state.current_streak,
            longest_streak=state.longest_streak,
            last_qualifying_date=state.last_qualifying_date,
            streak_started_at=state.streak_started_at,
            effective_streak=effective_streak(state, today),
            is_broken=is_streak_broken(state.last_qualifying_date, today),
            today_local_date=today,
        )
    except TrackyError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    except Exception as e:
        logger.exception(f"Failed to get streak for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to get streak information")
