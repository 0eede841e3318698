from datetime import datetime, timezone
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from tripsplit.models.base import to_object_id
from tripsplit.models.trip import Participant, RegisteredParticipant, Trip


class TripRepository:
    """Trip database operations. Participants live inside the trip document."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db.trips

    async def create_trip(self, trip: Trip) -> Trip:
        result = await self.collection.insert_one(trip.to_document())
        trip.id = result.inserted_id
        return trip

    async def get_trip(self, trip_id: str, session=None) -> Optional[Trip]:
        oid = to_object_id(trip_id)
        if oid is None:
            return None
        doc = await self.collection.find_one({"_id": oid}, session=session)
        return Trip(**doc) if doc else None

    async def list_trips_for_user(self, user_id: str) -> List[Trip]:
        """Trips the user owns or participates in, most recently updated first."""
        oid = to_object_id(user_id)
        if oid is None:
            return []
        cursor = self.collection.find({
            "$or": [
                {"owner_id": oid},
                {"participants.user_id": oid}
            ]
        }).sort("updated_at", -1)
        docs = await cursor.to_list(None)
        return [Trip(**doc) for doc in docs]

    async def update_trip(self, trip_id: str, updates: dict) -> Optional[Trip]:
        oid = to_object_id(trip_id)
        if oid is None:
            return None
        updates["updated_at"] = datetime.now(timezone.utc)
        doc = await self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": updates},
            return_document=ReturnDocument.AFTER
        )
        return Trip(**doc) if doc else None

    async def add_participant(self, trip_id: str, participant: Participant) -> Optional[Trip]:
        """
        Append a participant.

        For a registered participant the filter also requires that the user is
        not already in the trip, so a concurrent duplicate add matches nothing
        and returns None.
        """
        oid = to_object_id(trip_id)
        if oid is None:
            return None
        query = {"_id": oid}
        if isinstance(participant, RegisteredParticipant):
            query["participants.user_id"] = {"$ne": participant.user_id}

        doc = await self.collection.find_one_and_update(
            query,
            {
                "$push": {"participants": participant.model_dump()},
                "$set": {"updated_at": datetime.now(timezone.utc)}
            },
            return_document=ReturnDocument.AFTER
        )
        return Trip(**doc) if doc else None

    async def delete_trip(self, trip_id: str, session=None) -> bool:
        oid = to_object_id(trip_id)
        if oid is None:
            return False
        result = await self.collection.delete_one({"_id": oid}, session=session)
        return result.deleted_count > 0
