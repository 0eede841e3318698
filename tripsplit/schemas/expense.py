from typing import List, Optional
from pydantic import BaseModel, Field
from datetime import datetime

from tripsplit.models.expense import Expense, Share


class ShareAllocation(BaseModel):
    participant_id: str
    percentage: float = Field(..., ge=0, le=100)

    model_config = {"from_attributes": True}


class ExpenseCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=500)
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    date: Optional[datetime] = None  # defaults to now
    paid_by: Optional[str] = None  # user id; defaults to the caller
    shares: List[ShareAllocation]


class ExpenseUpdate(BaseModel):
    """
    Partial update. ``shares``, when sent, replaces the whole share list;
    omitted participants lose their share.
    """
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    amount: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    date: Optional[datetime] = None
    shares: Optional[List[ShareAllocation]] = None


class ShareResponse(BaseModel):
    id: str
    participant_id: str
    percentage: float
    calculated_share: float

    @classmethod
    def from_model(cls, share: Share) -> "ShareResponse":
        return cls(
            id=str(share.share_id),
            participant_id=str(share.participant_id),
            percentage=share.percentage,
            calculated_share=share.calculated_share
        )


class ExpenseResponse(BaseModel):
    id: str
    trip_id: str
    description: str
    amount: float
    date: datetime
    paid_by: str
    shares: List[ShareResponse] = []
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, expense: Expense) -> "ExpenseResponse":
        return cls(
            id=str(expense.id),
            trip_id=str(expense.trip_id),
            description=expense.description,
            amount=expense.amount,
            date=expense.date,
            paid_by=str(expense.paid_by),
            shares=[ShareResponse.from_model(s) for s in expense.shares],
            created_at=expense.created_at,
            updated_at=expense.updated_at
        )
