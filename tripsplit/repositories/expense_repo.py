"""
ExpenseRepository - expenses with their embedded shares.

An expense document holds its shares, so every write below touches one
document: inserting, replacing the share list and deleting are atomic
without further bookkeeping.
"""

from datetime import datetime, timezone
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from tripsplit.models.base import to_object_id
from tripsplit.models.expense import Expense


class ExpenseRepository:
    """Repository for trip expenses."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db.expenses

    async def create_expense(self, expense: Expense) -> Expense:
        result = await self.collection.insert_one(expense.to_document())
        expense.id = result.inserted_id
        return expense

    async def get_expense(self, expense_id: str, session=None) -> Optional[Expense]:
        oid = to_object_id(expense_id)
        if oid is None:
            return None
        doc = await self.collection.find_one({"_id": oid}, session=session)
        return Expense(**doc) if doc else None

    async def list_for_trip(self, trip_id: str) -> List[Expense]:
        """All expenses of a trip, newest first."""
        oid = to_object_id(trip_id)
        if oid is None:
            return []
        cursor = self.collection.find({"trip_id": oid}).sort("date", -1)
        docs = await cursor.to_list(None)
        return [Expense(**doc) for doc in docs]

    async def update_expense(self, expense_id: str, updates: dict, session=None) -> Optional[Expense]:
        """
        Apply ``updates`` with ``$set``.

        When ``updates`` carries ``shares`` the whole list is replaced; the
        caller passes already validated and calculated shares.
        """
        oid = to_object_id(expense_id)
        if oid is None:
            return None
        updates["updated_at"] = datetime.now(timezone.utc)
        doc = await self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
            session=session
        )
        return Expense(**doc) if doc else None

    async def delete_expense(self, expense_id: str, session=None) -> bool:
        oid = to_object_id(expense_id)
        if oid is None:
            return False
        result = await self.collection.delete_one({"_id": oid}, session=session)
        return result.deleted_count > 0

    async def delete_for_trip(self, trip_id: str, session=None) -> int:
        oid = to_object_id(trip_id)
        if oid is None:
            return 0
        result = await self.collection.delete_many({"trip_id": oid}, session=session)
        return result.deleted_count
