"""
Database connection and initialization
"""
import logging
from motor.motor_asyncio import AsyncIOMotorClient

logger = logging.getLogger(__name__)


def create_client(mongo_url: str) -> AsyncIOMotorClient:
    """Create the MongoDB client. Owned and closed by the app lifespan."""
    return AsyncIOMotorClient(
        mongo_url,
        maxPoolSize=20,
        minPoolSize=1,
        maxIdleTimeMS=30000,
        connectTimeoutMS=5000,
        serverSelectionTimeoutMS=5000,
        waitQueueTimeoutMS=10000
    )


async def create_database_indexes(db):
    """Create necessary indexes, including the slug uniqueness constraint"""
    # Guest list indexes
    await db.guests.create_index("id", unique=True)
    await db.guests.create_index("slug", unique=True)
    await db.guests.create_index("rsvp_status")
    await db.guests.create_index("invited")
    await db.guests.create_index("message_sent")
    await db.guests.create_index([("created_at", -1), ("id", 1)])
    await db.guests.create_index([("name", 1), ("id", 1)])

    # Legacy RSVP submissions
    await db.rsvp_submissions.create_index("id", unique=True)
    await db.rsvp_submissions.create_index("guest_slug")
    await db.rsvp_submissions.create_index([("created_at", -1)])

    # Activity logs indexes
    await db.activity_logs.create_index([("created_at", -1)])
    await db.activity_logs.create_index("action")

    logger.info("Database indexes created successfully")
