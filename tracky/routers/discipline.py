from fastapi import APIRouter, Depends, HTTPException, Request, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional

from tracky.database import get_db
from tracky.dependencies import get_current_user_id
from tracky import crud
from tracky.schemas import (
    DisciplineCheckinRequest, DisciplineScoreResponse, DisciplineTrendPoint, DisciplineTrendResponse,
    FiveFactorScoreResponse, score_response
)
from tracky.engines.scoring import FiveFactorInput, ScoreFormula, calculate_score, interpret_score
from tracky.middleware.rate_limit import rate_limit_write
from tracky.errors import TrackyError
from tracky.utils.dates import resolve_day, today_local
from tracky.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/discipline", tags=["discipline"])


@router.post("/checkin", response_model=FiveFactorScoreResponse)
@rate_limit_write
async def submit_checkin(
    request: Request,
    payload: DisciplineCheckinRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Save the morning-routine check-in and score it with the five-factor formula."""
    try:
        day = resolve_day(payload.date)
        checkin = FiveFactorInput(
            woke_up_on_time=payload.woke_up_on_time,
            cold_shower=payload.cold_shower,
            no_phone_first_hour=payload.no_phone_first_hour,
            meditated=payload.meditated,
            planned_tomorrow=payload.planned_tomorrow,
        )
        crud.save_discipline_checkin(db, user_id, day, checkin)
        result = calculate_score(ScoreFormula.FIVE_FACTOR, checkin)
        grade = interpret_score(result.total_score)
        return FiveFactorScoreResponse(
            date=day,
            total=result.total_score,
            factors=result.factors,
            grade=grade.grade,
            label=grade.label,
            message=grade.message,
        )
    except HTTPException:
        raise
    except TrackyError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    except Exception as e:
        logger.exception(f"Discipline check-in error for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save check-in")


@router.get("/score", response_model=DisciplineScoreResponse)
async def get_score(
    day: Optional[date] = Query(None, alias="date"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Composite discipline score for a date (today by default)."""
    try:
        row, cached = crud.get_discipline_score(db, user_id, resolve_day(day))
        return score_response(row, cached=cached)
    except TrackyError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    except Exception as e:
        logger.exception(f"Discipline score error for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to calculate score")


@router.get("/trend", response_model=DisciplineTrendResponse)
async def get_trend(
    period: str = Query("week", description="week or month"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Scores for the last 7 days or the current month, with average and trend."""
    try:
        scores, summary = crud.get_discipline_trend(db, user_id, period, today_local())
        return DisciplineTrendResponse(
            period=period,
            scores=[
                DisciplineTrendPoint(
                    date=s.date,
                    total=s.total_score,
                    habits=s.habits_score,
                    fitness=s.fitness_score,
                    learning=s.learning_score,
                ) for s in scores
            ],
            average=summary.average,
            trend=summary.trend,
            consistency=summary.consistency,
            days_logged=summary.days_logged,
        )
    except TrackyError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    except Exception as e:
        logger.exception(f"Discipline trend error for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch trends")
