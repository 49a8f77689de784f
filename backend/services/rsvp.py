"""
RSVP services: guest-record RSVP, group attendees and free-standing submissions
"""
import uuid
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import HTTPException
from pymongo.errors import PyMongoError

from core.config import (
    DEFAULT_COUNTRY, RSVP_ATTENDING, RSVP_NOT_ATTENDING, SUBMISSION_ATTENDANCE
)
from models.rsvp import GroupRSVPCreate, GroupRSVPResult, RSVPSubmission, RSVPSubmissionCreate
from services.guests import clean_text, get_guest_by_id, require_guest_by_slug
from utils.helpers import normalize_whatsapp

logger = logging.getLogger(__name__)

GUEST_ATTENDANCE = [RSVP_ATTENDING, RSVP_NOT_ATTENDING]


# ============================================
# GUEST RECORD RSVP
# ============================================

async def submit_guest_rsvp(db, slug: str, attendance: Optional[str], message: Optional[str]) -> dict:
    """
    Write a guest's answer onto their record. Re-submitting overwrites the
    previous answer; no history is kept.
    """
    if attendance not in GUEST_ATTENDANCE:
        raise HTTPException(status_code=400, detail="Attendance is required")

    guest = await require_guest_by_slug(db, slug)
    result = await db.guests.update_one(
        {"id": guest["id"]},
        {"$set": {
            "rsvp_status": attendance,
            "rsvp_message": clean_text(message),
            "updated_at": datetime.now(timezone.utc).isoformat()
        }}
    )
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Guest not found")

    logger.info(f"RSVP from guest {guest['slug']}: {attendance}")
    return await get_guest_by_id(db, guest["id"])


# ============================================
# FREE-STANDING SUBMISSIONS
# ============================================

def new_submission_document(name: str, attendance: str, email: str = None, phone: str = None,
                            guest_slug: str = None, number_of_guests: int = None,
                            message: str = None) -> dict:
    return {
        "id": str(uuid.uuid4()),
        "name": name,
        "email": clean_text(email),
        "phone": clean_text(phone),
        "guest_slug": clean_text(guest_slug),
        "attendance": attendance,
        "number_of_guests": number_of_guests or 1,
        "message": clean_text(message),
        "created_at": datetime.now(timezone.utc).isoformat()
    }


async def insert_submission(db, submission_doc: dict) -> RSVPSubmission:
    await db.rsvp_submissions.insert_one(submission_doc)
    submission_doc.pop("_id", None)
    return RSVPSubmission(**submission_doc)


async def create_submission(db, data: RSVPSubmissionCreate) -> RSVPSubmission:
    """Record a walk-in RSVP that is not tied to a guest record"""
    name = clean_text(data.name)
    if not name or not data.attendance:
        raise HTTPException(status_code=400, detail="Name and attendance status are required")
    if data.attendance not in SUBMISSION_ATTENDANCE:
        raise HTTPException(status_code=400, detail="Invalid attendance status")
    if data.number_of_guests is not None and data.number_of_guests < 0:
        raise HTTPException(status_code=400, detail="Invalid number of guests")

    submission = await insert_submission(db, new_submission_document(
        name=name,
        attendance=data.attendance,
        email=data.email,
        phone=data.phone,
        guest_slug=data.guest_slug,
        number_of_guests=data.number_of_guests,
        message=data.message,
    ))
    logger.info(f"RSVP submission {submission.id} from {submission.name}: {submission.attendance}")
    return submission


async def list_submissions(db) -> List[dict]:
    return await db.rsvp_submissions.find(
        {}, {"_id": 0}, sort=[("created_at", -1), ("id", 1)]
    ).to_list(None)


async def delete_submission(db, submission_id: str) -> bool:
    result = await db.rsvp_submissions.delete_one({"id": submission_id})
    return result.deleted_count > 0


async def delete_submissions(db, ids: Optional[List[str]] = None) -> int:
    """Delete the given submissions, or all of them when ids is None"""
    query = {} if ids is None else {"id": {"$in": ids}}
    result = await db.rsvp_submissions.delete_many(query)
    logger.info(f"Deleted {result.deleted_count} RSVP submission(s)")
    return result.deleted_count


# ============================================
# GROUP RSVP
# ============================================

async def submit_group_rsvp(db, data: GroupRSVPCreate) -> GroupRSVPResult:
    """
    One submission per attendee of a group invitation. The whole request is
    validated before anything is written; storage failures after that are
    reported per attendee.
    """
    attendees = []
    for attendee in data.attendees:
        name = (attendee.name or "").strip()
        phone = (attendee.phone or "").strip()
        if name or phone:
            attendees.append((name, phone))

    if not attendees:
        raise HTTPException(status_code=400, detail="Please add at least one attendee")
    if any(not name or not phone for name, phone in attendees):
        raise HTTPException(status_code=400, detail="Each attendee must include a name and phone number")
    if data.attendance not in GUEST_ATTENDANCE:
        raise HTTPException(status_code=400, detail="Attendance is required")
    if not clean_text(data.guest_slug):
        raise HTTPException(status_code=400, detail="Guest slug is required")

    guest = await require_guest_by_slug(db, data.guest_slug.strip())
    country = guest.get("country", DEFAULT_COUNTRY)

    documents = []
    for position, (name, phone) in enumerate(attendees, start=1):
        normalized = normalize_whatsapp(phone, country)
        if not normalized:
            raise HTTPException(status_code=400, detail=f"Attendee {position}: invalid phone number")
        documents.append(new_submission_document(
            name=name,
            attendance=data.attendance,
            phone=normalized,
            guest_slug=guest["slug"],
            number_of_guests=1,
            message=data.message,
        ))

    result = GroupRSVPResult()
    for position, document in enumerate(documents, start=1):
        try:
            result.items.append(await insert_submission(db, document))
        except PyMongoError as e:
            logger.error(f"Group RSVP for {guest['slug']}: attendee {position} failed: {e}")
            result.failed += 1
            result.errors.append(f"Attendee {position} ({document['name']}): could not be saved")
            continue
        result.submitted += 1

    logger.info(f"Group RSVP for {guest['slug']}: {result.submitted} submitted, {result.failed} failed")
    return result
