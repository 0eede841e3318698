"""
Balance aggregation over a trip snapshot.

Algorithm:
1. paid = owed = 0 for every current participant
2. Each expense adds its amount to the payer's paid, where the payer is the
   participant whose user_id matches expense.paid_by
3. Each share adds its calculated_share to that participant's owed
4. balance = paid - owed

Sign convention (drives labeling, keep it):
- balance > 0: participant is owed money
- balance < 0: participant owes money
- |balance| <= tolerance: settled

With consistent data the balances sum to zero. Anything that breaks that
(unknown payer, share for a participant no longer in the trip, share set not
totalling 100%) is reported in ``diagnostics`` and never corrected here.
"""
import logging
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from tripsplit.core.config import settings
from tripsplit.core.errors import ConsistencyError
from tripsplit.models.expense import Expense
from tripsplit.models.trip import Participant, RegisteredParticipant
from tripsplit.utils.share_validation import is_complete_split

logger = logging.getLogger(__name__)

STATUS_OWED = "owed"
STATUS_OWES = "owes"
STATUS_SETTLED = "settled"


class ParticipantBalance(BaseModel):
    participant_id: str
    display_name: str
    paid: float = 0.0
    owed: float = 0.0
    balance: float = 0.0
    status: str = STATUS_SETTLED


class BalanceSheet(BaseModel):
    balances: Dict[str, ParticipantBalance] = {}
    trip_total: float = 0.0
    net_total: float = 0.0
    expense_count: int = 0
    diagnostics: List[str] = Field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not self.diagnostics

    def raise_for_consistency(self) -> None:
        if self.diagnostics:
            raise ConsistencyError(
                "Trip balances are inconsistent",
                {"diagnostics": self.diagnostics, "net_total": self.net_total}
            )


def balance_status(balance: float, tolerance: Optional[float] = None) -> str:
    if tolerance is None:
        tolerance = settings.SHARE_SUM_TOLERANCE
    if balance > tolerance:
        return STATUS_OWED
    if balance < -tolerance:
        return STATUS_OWES
    return STATUS_SETTLED


def compute_balances(
    participants: Sequence[Participant],
    expenses: Sequence[Expense],
    tolerance: Optional[float] = None,
) -> BalanceSheet:
    """Aggregate paid/owed/balance per participant from the current snapshot."""
    if tolerance is None:
        tolerance = settings.SHARE_SUM_TOLERANCE

    sheet = BalanceSheet(expense_count=len(expenses))
    payer_lookup: Dict[str, str] = {}

    for p in participants:
        pid = str(p.participant_id)
        sheet.balances[pid] = ParticipantBalance(
            participant_id=pid,
            display_name=p.display_name,
        )
        if isinstance(p, RegisteredParticipant):
            payer_lookup[str(p.user_id)] = pid

    for expense in expenses:
        sheet.trip_total += expense.amount

        payer_pid = payer_lookup.get(str(expense.paid_by))
        if payer_pid is None:
            sheet.diagnostics.append(
                f"Expense {expense.id}: payer {expense.paid_by} is not a current participant"
            )
        else:
            sheet.balances[payer_pid].paid += expense.amount

        total = expense.total_percentage()
        if not is_complete_split(total, tolerance):
            sheet.diagnostics.append(
                f"Expense {expense.id}: shares total {total:g}%"
            )

        for share in expense.shares:
            entry = sheet.balances.get(str(share.participant_id))
            if entry is None:
                sheet.diagnostics.append(
                    f"Expense {expense.id}: share for unknown participant {share.participant_id}"
                )
                continue
            entry.owed += share.calculated_share

    for entry in sheet.balances.values():
        entry.balance = entry.paid - entry.owed
        entry.status = balance_status(entry.balance, tolerance)
        sheet.net_total += entry.balance

    # Rounding accumulates per expense; a NaN residual is reported too
    allowed = tolerance * max(len(expenses), 1)
    if not abs(sheet.net_total) <= allowed:
        sheet.diagnostics.append(
            f"Balances do not net to zero (residual {sheet.net_total:.4f})"
        )

    for message in sheet.diagnostics:
        logger.warning(message)

    return sheet
