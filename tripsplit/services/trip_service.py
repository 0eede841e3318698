import logging
from typing import List

from tripsplit.core.config import settings
from tripsplit.core.errors import (
    Forbidden,
    ParticipantAlreadyExists,
    TripNotFound,
    UserNotFound,
)
from tripsplit.db.session import get_database
from tripsplit.models.trip import PlaceholderParticipant, RegisteredParticipant, Trip
from tripsplit.models.user import User
from tripsplit.repositories.expense_repo import ExpenseRepository
from tripsplit.repositories.trip_repo import TripRepository
from tripsplit.repositories.user_repo import UserRepository
from tripsplit.schemas.trip import ParticipantAdd, TripCreate, TripUpdate
from tripsplit.utils.balances import BalanceSheet, compute_balances

logger = logging.getLogger(__name__)


class TripService:
    @staticmethod
    async def create(trip_in: TripCreate, owner: User) -> Trip:
        """Create a trip; the owner becomes its first participant."""
        db = await get_database()

        trip = Trip(
            name=trip_in.name,
            description=trip_in.description,
            owner_id=owner.id,
            participants=[RegisteredParticipant(user_id=owner.id, username=owner.username)]
        )
        trip = await TripRepository(db).create_trip(trip)
        logger.info("Trip %s created by %s", trip.id, owner.id)
        return trip

    @staticmethod
    async def list_for_user(user_id: str) -> List[Trip]:
        db = await get_database()
        return await TripRepository(db).list_trips_for_user(user_id)

    @staticmethod
    async def get_for_member(trip_id: str, user_id: str) -> Trip:
        """Load a trip the user owns or participates in."""
        db = await get_database()
        trip = await TripRepository(db).get_trip(trip_id)
        if trip is None:
            raise TripNotFound(trip_id)
        if not trip.is_member(user_id):
            raise Forbidden()
        return trip

    @staticmethod
    async def update(trip_id: str, trip_in: TripUpdate, user_id: str) -> Trip:
        db = await get_database()
        repo = TripRepository(db)

        trip = await repo.get_trip(trip_id)
        if trip is None:
            raise TripNotFound(trip_id)
        if not trip.is_owner(user_id):
            raise Forbidden("Only the trip owner can edit the trip")

        updates = trip_in.model_dump(exclude_unset=True)
        if not updates:
            return trip

        updated = await repo.update_trip(trip_id, updates)
        if updated is None:
            raise TripNotFound(trip_id)
        return updated

    @staticmethod
    async def delete(trip_id: str, user_id: str) -> bool:
        """Delete a trip and all of its expenses. Owner only."""
        db = await get_database()
        trip_repo = TripRepository(db)
        expense_repo = ExpenseRepository(db)

        async with await db.client.start_session() as session:
            async with session.start_transaction():
                trip = await trip_repo.get_trip(trip_id, session=session)
                if trip is None:
                    raise TripNotFound(trip_id)
                if not trip.is_owner(user_id):
                    raise Forbidden("Only the trip owner can delete the trip")

                removed = await expense_repo.delete_for_trip(trip_id, session=session)
                await trip_repo.delete_trip(trip_id, session=session)

        logger.info("Trip %s deleted with %d expenses", trip_id, removed)
        return True

    @staticmethod
    async def add_participant(trip_id: str, participant_in: ParticipantAdd, user_id: str) -> Trip:
        """Add a registered user (by email or username) or a named placeholder."""
        db = await get_database()
        trip_repo = TripRepository(db)

        trip = await trip_repo.get_trip(trip_id)
        if trip is None:
            raise TripNotFound(trip_id)
        if not trip.is_member(user_id):
            raise Forbidden()

        if participant_in.arbitrary_name:
            participant = PlaceholderParticipant(name=participant_in.arbitrary_name)
        else:
            user_repo = UserRepository(db)
            if participant_in.email:
                user = await user_repo.get_user_by_email(participant_in.email)
            else:
                user = await user_repo.get_user_by_username(participant_in.username)
            if user is None:
                raise UserNotFound(participant_in.email or participant_in.username)
            if trip.participant_for_user(user.id) is not None:
                raise ParticipantAlreadyExists(str(user.id))
            participant = RegisteredParticipant(user_id=user.id, username=user.username)

        updated = await trip_repo.add_participant(trip_id, participant)
        if updated is None:
            # Lost a race against an identical add
            if isinstance(participant, RegisteredParticipant):
                raise ParticipantAlreadyExists(str(participant.user_id))
            raise TripNotFound(trip_id)
        return updated

    @staticmethod
    async def get_balances(trip_id: str, user_id: str) -> BalanceSheet:
        """Balance sheet computed from the trip's current participants and expenses."""
        trip = await TripService.get_for_member(trip_id, user_id)

        db = await get_database()
        expenses = await ExpenseRepository(db).list_for_trip(trip_id)

        sheet = compute_balances(trip.participants, expenses)
        if not sheet.is_consistent:
            logger.error(
                "Trip %s balances inconsistent (net %.4f): %s",
                trip_id, sheet.net_total, "; ".join(sheet.diagnostics)
            )
            if settings.STRICT_BALANCE_CHECKS:
                sheet.raise_for_consistency()
        return sheet
