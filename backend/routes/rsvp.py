"""
Guest-facing RSVP routes
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from core.dependencies import get_db
from core.responses import api_response
from models import (
    GuestRSVPSubmit, GuestMessage, GroupRSVPCreate,
    RSVPSubmission, RSVPSubmissionCreate, IdList
)
from services.guests import require_guest_by_slug, public_guest_view, get_guest_messages
from services.rsvp import (
    submit_guest_rsvp, submit_group_rsvp, create_submission,
    list_submissions, delete_submission, delete_submissions
)
from utils.helpers import to_boolean

router = APIRouter(prefix="/api", tags=["rsvp"])


# ============================================
# PERSONAL INVITATION (by slug)
# ============================================

@router.get("/guests/{slug}")
async def get_public_guest(slug: str, db=Depends(get_db)):
    """Guest details for the invitation page; alreadyResponded drives the thank-you state"""
    guest = await require_guest_by_slug(db, slug)
    return api_response(public_guest_view(guest))


@router.post("/guests/{slug}")
async def submit_rsvp_for_guest(slug: str, data: GuestRSVPSubmit, db=Depends(get_db)):
    guest = await submit_guest_rsvp(db, slug, data.attendance, data.message)
    return api_response(public_guest_view(guest), message="RSVP submitted successfully")


@router.get("/guest-messages")
async def get_messages(db=Depends(get_db)):
    """Wishes left by guests with their RSVP"""
    messages = await get_guest_messages(db)
    return api_response([GuestMessage(**message) for message in messages])


# ============================================
# GROUP RSVP
# ============================================

@router.post("/rsvp-group")
async def submit_group(data: GroupRSVPCreate, db=Depends(get_db)):
    result = await submit_group_rsvp(db, data)
    if result.submitted == 0:
        return api_response(result, status_code=500, success=False,
                            message="Failed to submit RSVP. Please try again.")
    if result.failed:
        return api_response(result, status_code=201, success=False,
                            message=f"{result.failed} attendee(s) could not be saved")
    return api_response(result, status_code=201, message="RSVP submitted successfully")


# ============================================
# FREE-STANDING SUBMISSIONS
# ============================================

@router.get("/rsvp")
async def get_submissions(db=Depends(get_db)):
    submissions = await list_submissions(db)
    return api_response([RSVPSubmission(**submission) for submission in submissions])


@router.post("/rsvp")
async def add_submission(data: RSVPSubmissionCreate, db=Depends(get_db)):
    submission = await create_submission(db, data)
    return api_response(submission, status_code=201, message="RSVP submitted successfully")


@router.delete("/rsvp")
async def remove_submissions(
    delete_all: Optional[str] = Query(None, alias="deleteAll"),
    data: Optional[IdList] = Body(None),
    db=Depends(get_db)
):
    """Delete every submission (?deleteAll=true) or the ids in the body"""
    if to_boolean(delete_all):
        deleted = await delete_submissions(db)
    elif data and data.ids:
        deleted = await delete_submissions(db, [rsvp_id for rsvp_id in data.ids if rsvp_id])
    else:
        raise HTTPException(status_code=400, detail="ID is required for deletion")
    return api_response({"deleted": deleted}, message=f"Deleted {deleted} RSVP(s)")


@router.delete("/rsvp/{rsvp_id}")
async def remove_submission(rsvp_id: str, db=Depends(get_db)):
    if not await delete_submission(db, rsvp_id):
        raise HTTPException(status_code=404, detail="RSVP not found")
    return api_response(message="RSVP deleted successfully")
