import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from groupledger.core.config import settings

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
        logger.info("Disconnected from MongoDB")

async def create_indexes():
    """Create database indexes."""
    # Group membership lookups
    await mongodb.db["groups"].create_index([("members.user_id", 1), ("is_archived", 1)])

    # Full-history scans per group
    await mongodb.db["expenses"].create_index([("group_id", 1), ("created_at", -1)])
    await mongodb.db["settlements"].create_index([("group_id", 1), ("settled_at", -1)])
    await mongodb.db["settlements"].create_index([("from_user", 1), ("to_user", 1)])
