import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from bson import ObjectId

from tripsplit.models.expense import Expense, Share
from tripsplit.models.trip import PlaceholderParticipant, RegisteredParticipant, Trip
from tripsplit.models.user import User


def _async_context(value=None):
    """Stand-in for Motor's session / transaction async context managers."""
    cm = MagicMock()
    cm.__aenter__ = AsyncMock(return_value=value)
    cm.__aexit__ = AsyncMock(return_value=False)
    return cm


def _collection():
    collection = MagicMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
    collection.delete_many = AsyncMock(return_value=MagicMock(deleted_count=0))
    return collection


@pytest.fixture
def mock_db():
    """Mock Motor database with users / trips / expenses collections."""
    db = MagicMock()
    db.users = _collection()
    db.trips = _collection()
    db.expenses = _collection()

    session = MagicMock()
    session.start_transaction.return_value = _async_context()
    db.client.start_session = AsyncMock(return_value=_async_context(session))
    return db


@pytest.fixture
def patched_db(mock_db):
    """Route every service's get_database() to mock_db."""
    with patch("tripsplit.services.expense_service.get_database", return_value=mock_db), \
            patch("tripsplit.services.trip_service.get_database", return_value=mock_db):
        yield mock_db


@pytest.fixture
def alice():
    return User(name="Alice", username="alice", email="alice@example.com", hashed_password="x")


@pytest.fixture
def bob():
    return User(name="Bob", username="bob", email="bob@example.com", hashed_password="x")


@pytest.fixture
def carol():
    return User(name="Carol", username="carol", email="carol@example.com", hashed_password="x")


@pytest.fixture
def trip(alice, bob):
    """Trip owned by Alice with participants A (Alice) and B (Bob)."""
    return Trip(
        name="Lisbon",
        owner_id=alice.id,
        participants=[
            RegisteredParticipant(user_id=alice.id, username=alice.username),
            RegisteredParticipant(user_id=bob.id, username=bob.username),
        ]
    )


@pytest.fixture
def participant_a(trip):
    return trip.participants[0]


@pytest.fixture
def participant_b(trip):
    return trip.participants[1]


@pytest.fixture
def make_expense(trip):
    """Build a stored-looking expense: ``shares`` is [(participant, percentage), ...]."""
    def _make(amount, paid_by, shares, description="Expense"):
        return Expense(
            trip_id=trip.id,
            description=description,
            amount=amount,
            paid_by=paid_by,
            shares=[
                Share(
                    participant_id=p.participant_id,
                    percentage=pct,
                    calculated_share=amount * pct / 100
                )
                for p, pct in shares
            ]
        )
    return _make


@pytest.fixture
def placeholder():
    return PlaceholderParticipant(name="Dana")


@pytest.fixture
def apply_set():
    """side_effect for find_one_and_update that echoes the $set onto a document."""
    def _factory(document):
        async def _apply(query, update, **kwargs):
            return {**document, **update["$set"]}
        return _apply
    return _factory


@pytest.fixture
def set_find_result():
    """Make collection.find(...).sort(...).to_list(None) return ``docs``."""
    def _set(collection, docs):
        collection.find.return_value.sort.return_value.to_list = AsyncMock(return_value=docs)
    return _set
