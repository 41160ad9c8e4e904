from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from tracky.database import get_db
from tracky.dependencies import get_current_user_id
from tracky import crud
from tracky.crud.challenge import parse_challenge_type
from tracky.engines.challenge import ChallengeType, START_XP
from tracky.schemas import (
    ChallengeStartRequest, ChallengeStartResponse, ChallengeSessionResponse,
    ChallengeLogRequest, ChallengeLogResponse, ChallengeDailyLogResponse, ChallengeStatusResponse
)
from tracky.middleware.rate_limit import rate_limit_write
from tracky.errors import TrackyError
from tracky.utils.dates import resolve_day, today_local
from tracky.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/challenge", tags=["challenge"])


@router.post("/start", response_model=ChallengeStartResponse)
@rate_limit_write
async def start_challenge(
    request: Request,
    payload: ChallengeStartRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Start a 75 Hard or 75 Soft challenge.
    Answers 409 with the existing session id when one is already active.
    """
    try:
        challenge_type = parse_challenge_type(payload.challenge_type)
        session = crud.start_challenge(db, user_id, challenge_type, resolve_day(payload.start_date))
        return ChallengeStartResponse(
            session=ChallengeSessionResponse.model_validate(session),
            xp_earned=START_XP[challenge_type],
            message=f"{challenge_type.display_name} challenge started!",
        )
    except HTTPException:
        raise
    except TrackyError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    except Exception as e:
        logger.exception(f"Challenge start error for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to start challenge")


@router.post("/log", response_model=ChallengeLogResponse)
@rate_limit_write
async def log_task(
    request: Request,
    payload: ChallengeLogRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Mark one challenge task done (or undone) for a date."""
    try:
        result = crud.log_challenge_task(
            db, user_id, payload.task_id, payload.completed, resolve_day(payload.date)
        )
        milestone = result.evaluation.milestone
        return ChallengeLogResponse(
            log=ChallengeDailyLogResponse.model_validate(result.log),
            day_number=result.evaluation.day_number,
            all_complete=result.evaluation.all_tasks_complete,
            xp_earned=result.xp_earned,
            milestone=milestone.notification_title if milestone else None,
            session_status=result.session.status,
        )
    except HTTPException:
        raise
    except TrackyError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    except Exception as e:
        logger.exception(f"Challenge log error for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to log task")


@router.get("/status", response_model=ChallengeStatusResponse)
async def get_status(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Progress of the active challenge."""
    try:
        status = crud.get_challenge_status(db, user_id, today_local())
        if status is None:
            return ChallengeStatusResponse(active=False, message="No active challenge")

        session = status.session
        return ChallengeStatusResponse(
            active=True,
            session_id=session.id,
            challenge_type=ChallengeType(session.challenge_type).value,
            start_date=session.start_date,
            current_day=status.current_day,
            total_days=status.total_days,
            completed_days=status.completed_days,
            restart_count=session.restart_count,
            status=session.status,
            today_log=ChallengeDailyLogResponse.model_validate(status.today_log) if status.today_log else None,
            remaining_tasks=status.remaining_tasks,
            on_track=status.on_track,
            progress_percent=status.progress_percent,
        )
    except TrackyError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    except Exception as e:
        logger.exception(f"Challenge status error for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to get status")
