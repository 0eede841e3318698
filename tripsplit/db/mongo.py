import logging
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from tripsplit.core.config import settings

logger = logging.getLogger(__name__)

class MongoDatabase:
    """MongoDB connection manager."""

    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None

mongodb = MongoDatabase()

async def connect_to_mongo():
    """Connect to MongoDB."""
    mongodb.client = AsyncIOMotorClient(settings.MONGODB_URL)
    mongodb.db = mongodb.client[settings.DATABASE_NAME]

    await create_indexes()
    logger.info("Connected to MongoDB: %s", settings.DATABASE_NAME)

async def close_mongo_connection():
    """Disconnect from MongoDB."""
    if mongodb.client is not None:
        mongodb.client.close()
        mongodb.client = None
        mongodb.db = None
        logger.info("Disconnected from MongoDB")

async def create_indexes():
    """Create database indexes."""
    await mongodb.db["users"].create_index("email", unique=True)
    await mongodb.db["users"].create_index("username", unique=True)

    # Trips are listed by owner or by membership
    await mongodb.db["trips"].create_index("owner_id")
    await mongodb.db["trips"].create_index([("participants.user_id", 1)])

    await mongodb.db["expenses"].create_index([("trip_id", 1), ("date", -1)])
