from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from tracky.database import get_db
from tracky.dependencies import get_current_user_id
from tracky.crud.rewards import get_recent_notifications, get_total_xp
from tracky.schemas.reward import NotificationResponse, RewardsResponse
from tracky.errors import TrackyError
from tracky.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/rewards", tags=["rewards"])


@router.get("/me", response_model=RewardsResponse)
async def get_my_rewards(
    limit: int = Query(20, ge=1, le=100, description="Notifications to return"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Total XP earned and the most recent notifications."""
    try:
        return RewardsResponse(
            user_id=user_id,
            total_xp=get_total_xp(db, user_id),
            notifications=[
                NotificationResponse.model_validate(n) for n in get_recent_notifications(db, user_id, limit)
            ],
        )
    except TrackyError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    except Exception as e:
        logger.exception(f"Failed to get rewards for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to get rewards")
