"""
Quick-Add API Endpoint
"""

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_category_classifier, get_current_user, get_db, get_session_factory
from app.core.security import TokenUser
from app.ml.models.category_classifier import CategoryClassifier
from app.schemas.quick_add import QuickAddRequest, QuickAddResponse
from app.schemas.transaction import TransactionResponse
from app.services.quick_add_service import QuickAddService
from app.services.transaction_service import evaluate_in_background

router = APIRouter()

@router.post("/", response_model=QuickAddResponse)
async def quick_add(
    request: QuickAddRequest,
    background_tasks: BackgroundTasks,
    current_user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    session_factory=Depends(get_session_factory),
    classifier: Optional[CategoryClassifier] = Depends(get_category_classifier)
):
    """
    Record a transaction or answer a question from a chat message

    The budget check for a recorded transaction runs after the response
    is sent.
    """
    result = await QuickAddService(db, classifier=classifier).process(
        current_user.id, request.message, request.language, evaluate=False
    )

    transaction = result['transaction']
    if transaction is not None:
        background_tasks.add_task(evaluate_in_background, session_factory, transaction.id)

    return QuickAddResponse(
        type=result['type'],
        response=result['response'],
        transaction=TransactionResponse.model_validate(transaction) if transaction is not None else None
    )
