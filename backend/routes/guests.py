"""
Guest list admin routes
"""
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from core.config import (
    SITE_URL, RSVP_STATUSES, ALLOWED_PAGE_SIZES, DEFAULT_PAGE_SIZE,
    SORT_FIELDS, DEFAULT_SORT_FIELD, DEFAULT_SORT_ORDER
)
from core.dependencies import get_db, get_wedding_data
from core.responses import api_response
from models import (
    Guest, GuestCreate, GuestUpdate, BulkMessageSentUpdate, SlugChange,
    GuestListPage, GuestImportRequest, InvitationMessage, IdList, ActivityLog
)
from services.guests import (
    create_guest, update_guest, bulk_update_message_sent, change_guest_slug,
    delete_guest, delete_guests, build_guest_query, list_guests,
    get_guest_stats, import_guests, export_guests_csv, require_guest
)
from services.activity import get_activity_logs
from services.messages import build_message, build_whatsapp_url
from utils.helpers import to_boolean, parse_positive_int

router = APIRouter(prefix="/api", tags=["guests"])


def guest_filters(
    invited: Optional[str] = None,
    message_sent: Optional[str] = Query(None, alias="messageSent"),
    rsvp_status: Optional[str] = Query(None, alias="rsvpStatus"),
    search: Optional[str] = None,
) -> dict:
    """Filter query shared by list, stats and export; unknown values are ignored"""
    return build_guest_query(
        invited=to_boolean(invited),
        message_sent=to_boolean(message_sent),
        rsvp_status=rsvp_status if rsvp_status in RSVP_STATUSES else None,
        search=search.strip() if search and search.strip() else None,
    )


def guest_sorting(
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
) -> tuple:
    return (
        sort_by if sort_by in SORT_FIELDS else DEFAULT_SORT_FIELD,
        sort_order if sort_order in ("asc", "desc") else DEFAULT_SORT_ORDER,
    )


# ============================================
# COLLECTION ENDPOINTS
# ============================================

@router.get("/guests")
async def get_guests(
    page: Optional[str] = None,
    page_size: Optional[str] = Query(None, alias="pageSize"),
    query: dict = Depends(guest_filters),
    sorting: tuple = Depends(guest_sorting),
    db=Depends(get_db)
):
    """Paginated, filtered guest list"""
    page_number = parse_positive_int(page, 1)
    size = parse_positive_int(page_size, DEFAULT_PAGE_SIZE)
    if size not in ALLOWED_PAGE_SIZES:
        size = DEFAULT_PAGE_SIZE

    sort_by, sort_order = sorting
    items, total = await list_guests(db, query, page_number, size, sort_by, sort_order)
    return api_response(GuestListPage(
        items=[Guest(**item) for item in items],
        page=page_number,
        page_size=size,
        total=total
    ))


@router.get("/guests/stats")
async def get_stats(query: dict = Depends(guest_filters), db=Depends(get_db)):
    """Invited / messaged / RSVP counters for the dashboard"""
    return api_response(await get_guest_stats(db, query))


@router.get("/guests/export")
async def export_guests(
    query: dict = Depends(guest_filters),
    sorting: tuple = Depends(guest_sorting),
    db=Depends(get_db)
):
    """Download the filtered guest list as CSV"""
    sort_by, sort_order = sorting
    content = await export_guests_csv(db, query, sort_by, sort_order)
    filename = f"guest-list-{datetime.now(timezone.utc).date().isoformat()}.csv"
    return StreamingResponse(
        iter([content]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


@router.post("/guests")
async def add_guest(data: GuestCreate, db=Depends(get_db)):
    guest = await create_guest(db, data)
    return api_response(Guest(**guest), status_code=201)


@router.post("/guests/import")
async def import_guest_csv(data: GuestImportRequest, db=Depends(get_db)):
    """Bulk create guests from CSV text; bad rows are reported, not fatal"""
    return api_response(await import_guests(db, data.csv))


@router.patch("/guests")
async def bulk_mark_message_sent(data: BulkMessageSentUpdate, db=Depends(get_db)):
    guests = await bulk_update_message_sent(db, data.ids, data.message_sent, data.message_sent_at)
    return api_response([Guest(**guest) for guest in guests])


@router.delete("/guests")
async def bulk_delete_guests(data: IdList, db=Depends(get_db)):
    deleted = await delete_guests(db, data.ids)
    return api_response(deleted)


# ============================================
# SINGLE GUEST ENDPOINTS (by id)
# ============================================

@router.get("/guests/{guest_id}/detail")
async def get_guest_detail(guest_id: str, db=Depends(get_db)):
    """Full guest record for the admin edit screen"""
    return api_response(Guest(**await require_guest(db, guest_id)))


@router.get("/guests/{guest_id}/activity")
async def get_guest_activity(guest_id: str, db=Depends(get_db)):
    """Admin overrides and slug changes for a guest, newest first"""
    await require_guest(db, guest_id)
    logs = await get_activity_logs(db, guest_id=guest_id)
    return api_response([ActivityLog(**log) for log in logs])


@router.get("/guests/{guest_id}/message")
async def get_invitation_message(
    guest_id: str,
    db=Depends(get_db),
    wedding_data=Depends(get_wedding_data)
):
    """Ready-to-send invitation text and WhatsApp link for a guest"""
    guest = await require_guest(db, guest_id)
    text = build_message(guest, wedding_data, SITE_URL)
    return api_response(InvitationMessage(
        message=text,
        whatsapp_url=build_whatsapp_url(guest["whatsapp"], text),
        language=guest.get("language", "id")
    ))


@router.patch("/guests/{guest_id}")
async def edit_guest(guest_id: str, data: GuestUpdate, db=Depends(get_db)):
    guest = await update_guest(db, guest_id, data)
    return api_response(Guest(**guest))


@router.put("/guests/{guest_id}/slug")
async def regenerate_slug(guest_id: str, data: SlugChange, db=Depends(get_db)):
    """Change a guest's slug. Previously shared links stop resolving."""
    guest = await change_guest_slug(db, guest_id, data.slug)
    return api_response(Guest(**guest))


@router.delete("/guests/{guest_id}")
async def remove_guest(guest_id: str, db=Depends(get_db)):
    if not await delete_guest(db, guest_id):
        raise HTTPException(status_code=404, detail="Guest not found")
    return api_response(1, message="Guest deleted")
