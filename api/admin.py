"""Admin API router: platform dashboard statistics."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.auth import CurrentUser, require_admin
from core.logger import get_logger
from database.deps import get_db_read
from schemas import AdminDashboardResponse
from services import admin_statistics

logger = get_logger("api.admin")
router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/statistics", response_model=AdminDashboardResponse)
def dashboard_statistics(
    period_days: Optional[int] = Query(None, description="Window for nutrition averages: 7, 30, 180 or 365"),
    db: Session = Depends(get_db_read),
    current: CurrentUser = Depends(require_admin),
):
    """Return platform-wide counts and nutrition averages. Admins only."""
    logger.info("Admin %s requested dashboard statistics", current.id)
    return admin_statistics.dashboard(db, period_days)
