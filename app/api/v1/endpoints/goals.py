"""
Goal API Endpoints
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_user
from app.core.security import TokenUser
from app.schemas.goal import AddMoneyRequest, GoalCreate, GoalResponse, GoalUpdate
from app.services.goal_service import GoalService, goal_to_dict

router = APIRouter()

@router.get("/", response_model=List[GoalResponse])
async def get_goals(
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get active savings goals, newest first
    """
    goals = await GoalService(db).list_goals(current_user.id)
    return [goal_to_dict(goal) for goal in goals]

@router.get("/{goal_id}", response_model=GoalResponse)
async def get_goal(
    goal_id: int,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return goal_to_dict(await GoalService(db).get_goal(goal_id, current_user.id))

@router.post("/", response_model=GoalResponse, status_code=201)
async def create_goal(
    goal: GoalCreate,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return goal_to_dict(await GoalService(db).create_goal(current_user.id, goal.model_dump()))

@router.put("/{goal_id}", response_model=GoalResponse)
async def update_goal(
    goal_id: int,
    update_data: GoalUpdate,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    goal = await GoalService(db).update_goal(
        goal_id, current_user.id, update_data.model_dump(exclude_unset=True)
    )
    return goal_to_dict(goal)

@router.post("/{goal_id}/add-money", response_model=GoalResponse)
async def add_money(
    goal_id: int,
    request: AddMoneyRequest,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Add savings to a goal (capped at the target amount)
    """
    goal = await GoalService(db).add_money(goal_id, current_user.id, request.amount)
    return goal_to_dict(goal)

@router.delete("/{goal_id}")
async def delete_goal(
    goal_id: int,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await GoalService(db).delete_goal(goal_id, current_user.id)
    return {"message": "Goal deleted successfully"}
