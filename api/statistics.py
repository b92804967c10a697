"""Statistics API router.

Every endpoint takes either ``period=week|month`` (ending today) or an
explicit ``start_date``/``end_date`` range in YYYY-MM-DD format.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.auth import CurrentUser, get_current_user
from database.deps import get_db_read
from schemas import CaloriePoint, MacroDistributionResponse, PeriodSummaryResponse, WeightPoint
from services import statistics

router = APIRouter(prefix="/api/statistics", tags=["statistics"])


@router.get("/weight-trend", response_model=List[WeightPoint])
def weight_trend(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    period: Optional[str] = None,
    db: Session = Depends(get_db_read),
    current: CurrentUser = Depends(get_current_user),
):
    start, end = statistics.resolve_period(period, start_date, end_date)
    return statistics.weight_trend(db, current.id, start, end)


@router.get("/calories-trend", response_model=List[CaloriePoint])
def calories_trend(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    period: Optional[str] = None,
    db: Session = Depends(get_db_read),
    current: CurrentUser = Depends(get_current_user),
):
    start, end = statistics.resolve_period(period, start_date, end_date)
    return statistics.calorie_trend(db, current.id, start, end)


@router.get("/period-summary", response_model=PeriodSummaryResponse)
def period_summary(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    period: Optional[str] = None,
    db: Session = Depends(get_db_read),
    current: CurrentUser = Depends(get_current_user),
):
    start, end = statistics.resolve_period(period, start_date, end_date)
    return statistics.period_summary(db, current.id, start, end)


@router.get("/macronutrient-distribution", response_model=MacroDistributionResponse)
def macronutrient_distribution(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    period: Optional[str] = None,
    db: Session = Depends(get_db_read),
    current: CurrentUser = Depends(get_current_user),
):
    start, end = statistics.resolve_period(period, start_date, end_date)
    return statistics.macro_distribution(db, current.id, start, end)
