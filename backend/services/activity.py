"""
Activity log services for admin actions on guests
"""
import uuid
import logging
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

ACTION_RSVP_OVERRIDE = "rsvp_status_override"
ACTION_SLUG_CHANGE = "slug_change"


async def create_activity_log(db, action: str, guest: dict, details: dict = None):
    """Record an admin action against a guest"""
    entry = {
        "id": str(uuid.uuid4()),
        "action": action,
        "guest_id": guest.get("id"),
        "guest_slug": guest.get("slug"),
        "details": details or {},
        "created_at": datetime.now(timezone.utc).isoformat()
    }
    await db.activity_logs.insert_one(entry)
    entry.pop("_id", None)
    logger.info(f"Activity {action} on guest {guest.get('id')}: {entry['details']}")
    return entry


async def get_activity_logs(db, guest_id: str = None, limit: int = 100):
    """Most recent activity, optionally for one guest"""
    query = {"guest_id": guest_id} if guest_id else {}
    return await db.activity_logs.find(
        query, {"_id": 0}, sort=[("created_at", -1)], limit=limit
    ).to_list(None)
