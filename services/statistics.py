"""Statistics over a user's diary: weight and calorie trends, period
summaries and macronutrient distribution.

Daily values come from `services.diary_service` (and therefore the shared
nutrition aggregator) and are laid out on a continuous daily index with
pandas so that days without entries are still reported.
"""

from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
from sqlalchemy.orm import Session

from core.exceptions import ValidationError
from core.logger import get_logger
from core.numbers import round_1, round_half_up
from database import models
from services import diary_service
from services.nutrition_aggregator import NUTRIENTS, macro_distribution as distribution_of

logger = get_logger("services.statistics")

PERIOD_DAYS = {"week": 7, "month": 30}
MAX_RANGE_DAYS = 366


def resolve_period(
    period: Optional[str] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
    today: Optional[date] = None,
) -> Tuple[date, date]:
    """Turn a named period (week/month ending today) or an explicit range into dates.

    Raises:
        ValidationError: Unknown period, missing/invalid dates or an inverted range.
    """
    if period:
        days = PERIOD_DAYS.get(period.lower())
        if days is None:
            raise ValidationError("Invalid period. Use 'week' or 'month'.", field="period")
        end_date = today or date.today()
        return end_date - timedelta(days=days - 1), end_date

    if not start or not end:
        raise ValidationError(
            "Provide a valid 'period' (week/month) or 'start_date' and 'end_date' (YYYY-MM-DD).",
            field="start_date",
        )
    start_date = diary_service.parse_day(start, field="start_date")
    end_date = diary_service.parse_day(end, field="end_date")
    if start_date > end_date:
        raise ValidationError("start_date must not be after end_date", field="start_date")
    if (end_date - start_date).days + 1 > MAX_RANGE_DAYS:
        raise ValidationError(f"Date range may span at most {MAX_RANGE_DAYS} days", field="end_date")
    return start_date, end_date


def _daily_index(start: date, end: date) -> pd.DatetimeIndex:
    return pd.date_range(start=start, end=end, freq="D")


def _daily_frame(db: Session, user_id: int, start: date, end: date) -> pd.DataFrame:
    """One row per day with unrounded kcal/protein/fat/carbs consumed and kcal burned."""
    nutrition = diary_service.daily_nutrition(db, user_id, start, end)
    burned = diary_service.daily_burned(db, user_id, start, end)

    frame = pd.DataFrame(index=_daily_index(start, end), columns=list(NUTRIENTS) + ["burned"], dtype=float)
    for day, totals in nutrition.items():
        frame.loc[pd.Timestamp(day), list(NUTRIENTS)] = [totals[n] for n in NUTRIENTS]
    for day, value in burned.items():
        frame.loc[pd.Timestamp(day), "burned"] = value
    frame["logged_food"] = frame["kcal"].notna()
    return frame.fillna({column: 0.0 for column in list(NUTRIENTS) + ["burned"]})


def weight_trend(db: Session, user_id: int, start: date, end: date) -> List[Dict[str, Any]]:
    """Daily weights for the range, carrying the last known weight forward.

    Days before the first known weight (including the last log before
    `start`) are reported as None.
    """
    logs = (
        db.query(models.WeightLog)
        .filter(models.WeightLog.user_id == user_id, models.WeightLog.log_date >= start, models.WeightLog.log_date <= end)
        .order_by(models.WeightLog.log_date)
        .all()
    )
    previous = (
        db.query(models.WeightLog)
        .filter(models.WeightLog.user_id == user_id, models.WeightLog.log_date < start)
        .order_by(models.WeightLog.log_date.desc())
        .first()
    )

    index = _daily_index(start, end)
    series = pd.Series({pd.Timestamp(log.log_date): log.weight for log in logs}, dtype=float).reindex(index)
    if previous is not None and pd.isna(series.iloc[0]):
        series.iloc[0] = previous.weight
    series = series.ffill()

    return [
        {"date": ts.date().isoformat(), "weight": None if pd.isna(value) else float(value)}
        for ts, value in series.items()
    ]


def calorie_trend(db: Session, user_id: int, start: date, end: date) -> List[Dict[str, Any]]:
    """Daily ``{date, consumed, burned}`` in whole kcal."""
    frame = _daily_frame(db, user_id, start, end)
    return [
        {"date": ts.date().isoformat(), "consumed": round_half_up(row["kcal"]), "burned": round_half_up(row["burned"])}
        for ts, row in frame.iterrows()
    ]


def period_summary(db: Session, user_id: int, start: date, end: date) -> Dict[str, Any]:
    """Totals and per-day averages over the range."""
    frame = _daily_frame(db, user_id, start, end)
    days = len(frame)
    totals = frame[list(NUTRIENTS) + ["burned"]].sum()
    averages = totals / days if days else totals * 0

    logger.debug("Period summary user=%s %s..%s over %s days", user_id, start, end, days)
    return {
        "period": {"start_date": start.isoformat(), "end_date": end.isoformat(), "days": days},
        "avg_daily_kcal_consumed": round_half_up(float(averages["kcal"])),
        "avg_daily_protein": round_1(float(averages["protein"])),
        "avg_daily_fat": round_1(float(averages["fat"])),
        "avg_daily_carbs": round_1(float(averages["carbs"])),
        "total_kcal_consumed": round_half_up(float(totals["kcal"])),
        "total_protein": round_1(float(totals["protein"])),
        "total_fat": round_1(float(totals["fat"])),
        "total_carbs": round_1(float(totals["carbs"])),
        "total_kcal_burned_exercise": round_half_up(float(totals["burned"])),
        "avg_daily_kcal_burned_exercise": round_half_up(float(averages["burned"])),
        "days_with_food_log": int(frame["logged_food"].sum()),
        "days_with_activity_log": int((frame["burned"] > 0).sum()),
    }


def macro_distribution(db: Session, user_id: int, start: date, end: date) -> Dict[str, float]:
    """Grams of protein/fat/carbs over the range and their share of macro calories."""
    frame = _daily_frame(db, user_id, start, end)
    totals = frame[["protein", "fat", "carbs"]].sum()
    return distribution_of({macro: float(totals[macro]) for macro in ("protein", "fat", "carbs")})
