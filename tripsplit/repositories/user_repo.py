from motor.motor_asyncio import AsyncIOMotorDatabase

from tripsplit.models.base import to_object_id
from tripsplit.models.user import User


class UserRepository:
    """User database operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db.users

    async def create_user(self, user: User) -> User:
        """Insert a new user."""
        result = await self.collection.insert_one(user.to_document())
        user.id = result.inserted_id
        return user

    async def get_user_by_id(self, user_id: str) -> User | None:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        doc = await self.collection.find_one({"_id": oid, "is_deleted": False})
        return User(**doc) if doc else None

    async def get_user_by_email(self, email: str) -> User | None:
        doc = await self.collection.find_one({"email": email, "is_deleted": False})
        return User(**doc) if doc else None

    async def get_user_by_username(self, username: str) -> User | None:
        doc = await self.collection.find_one({"username": username, "is_deleted": False})
        return User(**doc) if doc else None
