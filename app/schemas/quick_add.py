from pydantic import BaseModel, Field
from typing import Optional

from app.schemas.transaction import TransactionResponse

class QuickAddRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=500)
    language: str = Field("vi", pattern="^(vi|en)$")

# Budget warnings for quick-add transactions are delivered as notifications,
# the check runs after the response is sent
class QuickAddResponse(BaseModel):
    type: str  # transaction, query
    response: str
    transaction: Optional[TransactionResponse] = None
