"""Share allocation validation and calculated-share arithmetic.

Pure functions: no database access. Trip membership is passed in explicitly
as the set of participant ids of the expense's trip.
"""
import math
from typing import Iterable, List, Optional, Protocol, Set

from tripsplit.core.config import settings
from tripsplit.core.errors import (
    DuplicateParticipant,
    InvalidAmount,
    InvalidDescription,
    ShareSumInvalid,
    UnknownParticipant,
)
from tripsplit.models.expense import Share


class Allocation(Protocol):
    participant_id: object
    percentage: float


def _tolerance(tolerance: Optional[float]) -> float:
    return settings.SHARE_SUM_TOLERANCE if tolerance is None else tolerance


def total_percentage(shares: Iterable[Allocation]) -> float:
    return sum(share.percentage for share in shares)


def is_complete_split(total: float, tolerance: Optional[float] = None) -> bool:
    """True when ``total`` is within the tolerance of 100%."""
    return abs(total - 100.0) <= _tolerance(tolerance)


def validate_share_allocation(
    shares: List[Allocation],
    participant_ids: Set[str],
    tolerance: Optional[float] = None,
) -> None:
    """
    Validate a proposed share list for one expense.

    Rules:
    - every participant_id is a participant of the expense's trip
    - each participant appears at most once
    - percentages sum to 100 within the absolute tolerance

    Raises the first failing rule; nothing is ever adjusted to make the
    allocation pass.
    """
    seen: Set[str] = set()
    for share in shares:
        pid = str(share.participant_id)
        if pid not in participant_ids:
            raise UnknownParticipant(pid)
        if pid in seen:
            raise DuplicateParticipant(pid)
        seen.add(pid)

    total = total_percentage(shares)
    if not is_complete_split(total, tolerance):
        raise ShareSumInvalid(total)


def validate_amount(amount: float) -> None:
    if amount is None or not math.isfinite(amount) or amount <= 0:
        raise InvalidAmount(amount)


def validate_description(description: Optional[str]) -> None:
    if description is None or not description.strip():
        raise InvalidDescription()


def calculate_share(amount: float, percentage: float) -> float:
    """Monetary portion of ``amount`` for ``percentage``. Not rounded."""
    return amount * percentage / 100


def build_shares(amount: float, shares: List[Allocation]) -> List[Share]:
    """Fresh Share records for an already validated allocation."""
    return [
        Share(
            participant_id=share.participant_id,
            percentage=share.percentage,
            calculated_share=calculate_share(amount, share.percentage),
        )
        for share in shares
    ]


def recalculate_shares(amount: float, shares: List[Share]) -> List[Share]:
    """Same shares (ids and percentages kept), calculated against a new amount."""
    return [
        share.model_copy(update={"calculated_share": calculate_share(amount, share.percentage)})
        for share in shares
    ]
