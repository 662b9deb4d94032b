"""
Account API Endpoints
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_user
from app.core.security import TokenUser
from app.schemas.account import AccountCreate, AccountResponse, AccountUpdate
from app.services.account_service import AccountService

router = APIRouter()

@router.get("/", response_model=List[AccountResponse])
async def get_accounts(
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get the user's active accounts
    """
    return await AccountService(db).list_accounts(current_user.id)

@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: int,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await AccountService(db).get_account(account_id, current_user.id)

@router.post("/", response_model=AccountResponse, status_code=201)
async def create_account(
    account: AccountCreate,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await AccountService(db).create_account(current_user.id, account.model_dump())

@router.put("/{account_id}", response_model=AccountResponse)
async def update_account(
    account_id: int,
    update_data: AccountUpdate,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await AccountService(db).update_account(
        account_id, current_user.id, update_data.model_dump(exclude_unset=True)
    )

@router.delete("/{account_id}")
async def delete_account(
    account_id: int,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Deactivate an account
    """
    await AccountService(db).delete_account(account_id, current_user.id)
    return {"message": "Account deleted successfully"}
