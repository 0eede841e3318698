"""
Expense operations: create, update, delete, read.

Authorization rules:
  - Create / read: caller must be the trip owner or a registered participant
  - Update / delete: caller must be the expense's payer or the trip owner

Every rule and every share validation runs before the first write. Update and
delete read, check and write inside one MongoDB transaction.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from tripsplit.core.config import settings
from tripsplit.core.errors import (
    ExpenseNotFound,
    Forbidden,
    PayerNotParticipant,
    TripNotFound,
)
from tripsplit.db.session import get_database
from tripsplit.models.expense import Expense
from tripsplit.models.trip import Trip
from tripsplit.repositories.expense_repo import ExpenseRepository
from tripsplit.repositories.trip_repo import TripRepository
from tripsplit.schemas.expense import ExpenseCreate, ExpenseUpdate
from tripsplit.utils.share_validation import (
    build_shares,
    recalculate_shares,
    validate_amount,
    validate_description,
    validate_share_allocation,
)

logger = logging.getLogger(__name__)


def _can_modify(expense: Expense, trip: Optional[Trip], user_id: str) -> bool:
    """Payer or trip owner."""
    if str(expense.paid_by) == str(user_id):
        return True
    return trip is not None and trip.is_owner(user_id)


class ExpenseService:
    @staticmethod
    async def create(trip_id: str, expense_in: ExpenseCreate, user_id: str) -> Expense:
        db = await get_database()

        trip = await TripRepository(db).get_trip(trip_id)
        if trip is None:
            raise TripNotFound(trip_id)
        if not trip.is_member(user_id):
            raise Forbidden()

        validate_description(expense_in.description)
        validate_amount(expense_in.amount)

        payer_id = expense_in.paid_by or user_id
        if not trip.is_member(payer_id):
            raise PayerNotParticipant(payer_id)

        validate_share_allocation(expense_in.shares, trip.participant_ids())

        expense = Expense(
            trip_id=trip.id,
            description=expense_in.description,
            amount=expense_in.amount,
            date=expense_in.date or datetime.now(timezone.utc),
            paid_by=payer_id,
            shares=build_shares(expense_in.amount, expense_in.shares)
        )
        expense = await ExpenseRepository(db).create_expense(expense)
        logger.info("Expense %s created in trip %s (%.2f)", expense.id, trip_id, expense.amount)
        return expense

    @staticmethod
    async def list_for_trip(trip_id: str, user_id: str) -> List[Expense]:
        db = await get_database()

        trip = await TripRepository(db).get_trip(trip_id)
        if trip is None:
            raise TripNotFound(trip_id)
        if not trip.is_member(user_id):
            raise Forbidden()

        return await ExpenseRepository(db).list_for_trip(trip_id)

    @staticmethod
    async def get_for_member(expense_id: str, user_id: str) -> Expense:
        db = await get_database()

        expense = await ExpenseRepository(db).get_expense(expense_id)
        if expense is None:
            raise ExpenseNotFound(expense_id)
        trip = await TripRepository(db).get_trip(str(expense.trip_id))
        if trip is None or not trip.is_member(user_id):
            raise Forbidden()
        return expense

    @staticmethod
    async def update(expense_id: str, expense_in: ExpenseUpdate, user_id: str) -> Expense:
        """
        Apply a partial update.

        - ``shares`` replaces the whole share list (no merge)
        - calculated shares use the effective amount: the new one if sent,
          else the stored one
        - an amount-only change recalculates the kept shares unless
          RECOMPUTE_SHARES_ON_AMOUNT_CHANGE is off
        """
        db = await get_database()
        expense_repo = ExpenseRepository(db)
        trip_repo = TripRepository(db)

        async with await db.client.start_session() as session:
            async with session.start_transaction():
                existing = await expense_repo.get_expense(expense_id, session=session)
                if existing is None:
                    raise ExpenseNotFound(expense_id)
                trip = await trip_repo.get_trip(str(existing.trip_id), session=session)
                if not _can_modify(existing, trip, user_id):
                    raise Forbidden("Only the payer or the trip owner can edit this expense")

                updates = {}
                if expense_in.description is not None:
                    validate_description(expense_in.description)
                    updates["description"] = expense_in.description

                amount = existing.amount
                if expense_in.amount is not None:
                    validate_amount(expense_in.amount)
                    amount = expense_in.amount
                    updates["amount"] = amount

                if expense_in.date is not None:
                    updates["date"] = expense_in.date

                if expense_in.shares is not None:
                    if trip is None:
                        raise TripNotFound(str(existing.trip_id))
                    validate_share_allocation(expense_in.shares, trip.participant_ids())
                    shares = build_shares(amount, expense_in.shares)
                    updates["shares"] = [share.model_dump() for share in shares]
                elif "amount" in updates and settings.RECOMPUTE_SHARES_ON_AMOUNT_CHANGE:
                    shares = recalculate_shares(amount, existing.shares)
                    updates["shares"] = [share.model_dump() for share in shares]

                if not updates:
                    return existing

                updated = await expense_repo.update_expense(expense_id, updates, session=session)
                if updated is None:
                    raise ExpenseNotFound(expense_id)

        logger.info("Expense %s updated (%s)", expense_id, ", ".join(sorted(updates)))
        return updated

    @staticmethod
    async def delete(expense_id: str, user_id: str) -> bool:
        """Remove an expense together with its shares."""
        db = await get_database()
        expense_repo = ExpenseRepository(db)

        async with await db.client.start_session() as session:
            async with session.start_transaction():
                existing = await expense_repo.get_expense(expense_id, session=session)
                if existing is None:
                    raise ExpenseNotFound(expense_id)
                trip = await TripRepository(db).get_trip(str(existing.trip_id), session=session)
                if not _can_modify(existing, trip, user_id):
                    raise Forbidden("Only the payer or the trip owner can delete this expense")

                deleted = await expense_repo.delete_expense(expense_id, session=session)
                if not deleted:
                    raise ExpenseNotFound(expense_id)

        logger.info("Expense %s deleted", expense_id)
        return True
