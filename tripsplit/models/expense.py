"""
Expense model - one payment made by one trip member, split by percentage.

Design principles:
- Shares are embedded in the expense document: an expense and its shares are
  always inserted, replaced and deleted together
- ``calculated_share`` is stored at write time, never derived on read
- ``paid_by`` is the payer's user id (underlying identity), not a participant
  record id, so it survives participant records being recreated
"""

from typing import List
from datetime import datetime, timezone
from pydantic import BaseModel, Field

from tripsplit.models.base import MongoModel, PyObjectId


class Share(BaseModel):
    """
    Allocation of one expense to one participant.

    Invariants:
    - 0 <= percentage <= 100
    - calculated_share == expense.amount * percentage / 100
    """
    share_id: PyObjectId = Field(default_factory=PyObjectId)
    participant_id: PyObjectId
    percentage: float = Field(..., ge=0, le=100)
    calculated_share: float


class Expense(MongoModel):
    trip_id: PyObjectId
    description: str
    amount: float
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    paid_by: PyObjectId
    shares: List[Share] = []

    def total_percentage(self) -> float:
        return sum(share.percentage for share in self.shares)

    def share_for(self, participant_id) -> Share | None:
        pid = str(participant_id)
        for share in self.shares:
            if str(share.participant_id) == pid:
                return share
        return None
