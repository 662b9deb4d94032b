"""
Budget API Endpoints
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_user
from app.core.security import TokenUser
from app.schemas.budget import (
    BudgetAlertResponse,
    BudgetCreate,
    BudgetListResponse,
    BudgetResponse,
    BudgetUpdate
)
from app.services.budget_service import BudgetService

router = APIRouter()

@router.get("/", response_model=BudgetListResponse)
async def get_budgets(
    category_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    is_active: Optional[bool] = None,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get budgets with spending progress and totals
    """
    return await BudgetService(db).get_budgets(
        current_user.id,
        category_id=category_id,
        start_date=start_date,
        end_date=end_date,
        is_active=is_active
    )

@router.get("/active", response_model=List[BudgetResponse])
async def get_active_budgets(
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get budgets whose current period contains today
    """
    return await BudgetService(db).get_active_budgets(current_user.id)

@router.get("/alerts", response_model=List[BudgetAlertResponse])
async def get_budget_alerts(
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get active budgets at or past their notification threshold
    """
    return await BudgetService(db).get_budget_alerts(current_user.id)

@router.get("/{budget_id}", response_model=BudgetResponse)
async def get_budget(
    budget_id: int,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await BudgetService(db).get_budget(budget_id, current_user.id)

@router.post("/", response_model=BudgetResponse, status_code=201)
async def create_budget(
    budget: BudgetCreate,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a category budget
    """
    return await BudgetService(db).create_budget(current_user.id, budget.model_dump())

@router.put("/{budget_id}", response_model=BudgetResponse)
async def update_budget(
    budget_id: int,
    budget: BudgetUpdate,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await BudgetService(db).update_budget(budget_id, current_user.id, budget.model_dump())

@router.delete("/{budget_id}")
async def delete_budget(
    budget_id: int,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await BudgetService(db).delete_budget(budget_id, current_user.id)
    return {"message": "Budget deleted successfully"}
