"""
Dashboard API Endpoints
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_user
from app.core.security import TokenUser
from app.schemas.dashboard import (
    BudgetProgress,
    DashboardOverview,
    DashboardStats,
    DashboardSummary,
    FinancialSummary,
    MonthlyTrendPoint,
    TopCategory
)
from app.services.dashboard_service import DashboardService

router = APIRouter()

@router.get("/overview", response_model=DashboardOverview)
async def get_overview(
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Everything the dashboard page shows in one call
    """
    return await DashboardService(db).get_overview(current_user.id)

@router.get("/financial-summary", response_model=FinancialSummary)
async def get_financial_summary(
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await DashboardService(db).get_financial_summary(current_user.id)

@router.get("/top-categories", response_model=List[TopCategory])
async def get_top_categories(
    months: int = Query(1, ge=1, le=24),
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await DashboardService(db).get_top_categories(current_user.id, months)

@router.get("/budget-progress", response_model=List[BudgetProgress])
async def get_budget_progress(
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await DashboardService(db).get_budget_progress(current_user.id)

@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await DashboardService(db).get_stats(current_user.id)

@router.get("/summary", response_model=DashboardSummary)
async def get_summary(
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Last 30 days at a glance
    """
    return await DashboardService(db).get_summary(current_user.id)

@router.get("/monthly-trend", response_model=List[MonthlyTrendPoint])
async def get_monthly_trend(
    months: int = Query(6, ge=1, le=24),
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await DashboardService(db).get_monthly_trend(current_user.id, months)
