"""
MongoDB connection and index bootstrap.
"""
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from config import settings

logger = logging.getLogger(__name__)

client = AsyncIOMotorClient(
    settings.MONGODB_URI,
    serverSelectionTimeoutMS=settings.DB_SERVER_SELECTION_TIMEOUT_MS,
)
db = client[settings.DB_NAME]


def get_db() -> AsyncIOMotorDatabase:
    return db


async def init_indexes(database: AsyncIOMotorDatabase):
    """Create the indexes the services rely on. Unique indexes back the
    pre-write duplicate checks done in the services."""
    await database.donors.create_index([("id", ASCENDING)], unique=True)
    await database.donors.create_index([("email", ASCENDING)], unique=True)
    await database.donors.create_index([("phone", ASCENDING)], unique=True)
    await database.donors.create_index([("district", ASCENDING), ("blood_group", ASCENDING)])
    await database.donors.create_index([("is_active", ASCENDING)])

    await database.blood_requests.create_index([("id", ASCENDING)], unique=True)
    await database.blood_requests.create_index([("request_number", ASCENDING)], unique=True)
    await database.blood_requests.create_index([("district", ASCENDING), ("blood_group", ASCENDING)])
    await database.blood_requests.create_index([("status", ASCENDING), ("urgency", ASCENDING)])
    await database.blood_requests.create_index([("requested_at", DESCENDING)])
    await database.blood_requests.create_index([("contact_number", ASCENDING)])
    logger.info("Database indexes ensured")
