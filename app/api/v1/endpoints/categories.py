"""
Category API Endpoints
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_user
from app.core.security import TokenUser
from app.schemas.category import CategoryCreate, CategoryResponse
from app.services.category_service import CategoryService

router = APIRouter()

@router.get("/", response_model=List[CategoryResponse])
async def get_categories(
    transaction_type: Optional[str] = Query(None, pattern="^(income|expense)$"),
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get the user's own categories together with the default ones
    """
    return await CategoryService(db).list_categories(current_user.id, transaction_type)

@router.post("/", response_model=CategoryResponse, status_code=201)
async def create_category(
    category: CategoryCreate,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await CategoryService(db).create_category(current_user.id, category.model_dump())
