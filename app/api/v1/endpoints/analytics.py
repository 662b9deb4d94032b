"""
Analytics API Endpoints
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_user
from app.core.security import TokenUser
from app.schemas.analytics import AnalyticsOverview
from app.services.analytics_service import DEFAULT_TIME_RANGE, TIME_RANGES, AnalyticsService

router = APIRouter()

@router.get("/overview", response_model=AnalyticsOverview)
async def get_analytics_overview(
    time_range: str = Query(DEFAULT_TIME_RANGE, pattern="^(" + "|".join(TIME_RANGES) + ")$"),
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Totals, savings rate, per-month figures and top categories over
    ``time_range`` (3months, 6months, 1year, 2years)
    """
    return await AnalyticsService(db).get_overview(current_user.id, time_range)
