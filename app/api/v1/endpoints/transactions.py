"""
Transaction API Endpoints
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_user
from app.core.security import TokenUser
from app.schemas.budget import BudgetWarningResponse
from app.schemas.transaction import (
    TransactionCreate,
    TransactionListResponse,
    TransactionResponse,
    TransactionResultResponse,
    TransactionUpdate
)
from app.services.transaction_service import TransactionService

router = APIRouter()

def _result(transaction, warning) -> TransactionResultResponse:
    response = TransactionResultResponse.model_validate(transaction)
    response.budget_warning = BudgetWarningResponse.from_warning(warning)
    return response

@router.post("/", response_model=TransactionResultResponse, status_code=201)
async def create_transaction(
    transaction: TransactionCreate,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a new transaction

    The response carries ``budget_warning`` when the expense pushes its
    category budget into the Warning, Critical or Exceeded tier.
    """
    db_transaction, warning = await TransactionService(db).create_transaction(
        current_user.id, transaction.model_dump()
    )
    return _result(db_transaction, warning)

@router.get("/", response_model=TransactionListResponse)
async def get_transactions(
    category_id: Optional[int] = None,
    account_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    transaction_type: Optional[str] = Query(None, pattern="^(income|expense)$"),
    min_amount: Optional[float] = Query(None, ge=0),
    max_amount: Optional[float] = Query(None, ge=0),
    search: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get user transactions with filters
    """
    return await TransactionService(db).list_transactions(
        current_user.id,
        category_id=category_id,
        account_id=account_id,
        start_date=start_date,
        end_date=end_date,
        transaction_type=transaction_type,
        min_amount=min_amount,
        max_amount=max_amount,
        search=search,
        page=page,
        page_size=page_size
    )

@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: int,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get specific transaction
    """
    return await TransactionService(db).get_transaction(transaction_id, current_user.id)

@router.put("/{transaction_id}", response_model=TransactionResultResponse)
async def update_transaction(
    transaction_id: int,
    update_data: TransactionUpdate,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    db_transaction, warning = await TransactionService(db).update_transaction(
        transaction_id, current_user.id, update_data.model_dump(exclude_unset=True)
    )
    return _result(db_transaction, warning)

@router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: int,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete transaction and revert its balance effect
    """
    await TransactionService(db).delete_transaction(transaction_id, current_user.id)
    return {"message": "Transaction deleted successfully"}
