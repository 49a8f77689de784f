"""
Guest list services: slug allocation, CRUD, filtering, import and export
"""
import csv
import io
import re
import uuid
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import HTTPException
from pymongo.errors import DuplicateKeyError

from core.config import (
    COUNTRIES, DEFAULT_COUNTRY, LANGUAGES,
    RSVP_ATTENDING, RSVP_NOT_ATTENDING, RSVP_NOT_RESPONDED,
    GUEST_EXPORT_FIELDS, MAX_SLUG_INSERT_ATTEMPTS
)
from models.guest import (
    GuestCreate, GuestUpdate, GuestStats, GuestImportResult, PublicGuest
)
from services.activity import create_activity_log, ACTION_RSVP_OVERRIDE, ACTION_SLUG_CHANGE
from utils.helpers import (
    slugify, slug_candidate, normalize_whatsapp, get_language_for_country, to_boolean
)

logger = logging.getLogger(__name__)

FALLBACK_SLUG = "guest"


class SlugAllocationError(RuntimeError):
    """Every slug candidate was taken by a concurrent writer"""


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def resolve_country(value: Optional[str]) -> str:
    return value if value in COUNTRIES else DEFAULT_COUNTRY


def clean_text(value: Optional[str]) -> Optional[str]:
    """Trimmed text, None when blank"""
    if value is None:
        return None
    value = value.strip()
    return value or None


# ============================================
# LOOKUPS
# ============================================

async def get_guest_by_id(db, guest_id: str):
    return await db.guests.find_one({"id": guest_id}, {"_id": 0})


async def get_guest_by_slug(db, slug: str):
    return await db.guests.find_one({"slug": slug}, {"_id": 0})


async def require_guest(db, guest_id: str) -> dict:
    guest = await get_guest_by_id(db, guest_id)
    if not guest:
        raise HTTPException(status_code=404, detail="Guest not found")
    return guest


async def require_guest_by_slug(db, slug: str) -> dict:
    guest = await get_guest_by_slug(db, slug)
    if not guest:
        raise HTTPException(status_code=404, detail="Guest not found")
    return guest


# ============================================
# SLUG ALLOCATION
# ============================================

async def ensure_unique_slug(db, base: str, exclude_id: str = None) -> str:
    """First free slug among base, base-2, base-3, ..."""
    base = base or FALLBACK_SLUG
    counter = 1
    candidate = base
    while True:
        query = {"slug": candidate}
        if exclude_id:
            query["id"] = {"$ne": exclude_id}
        if not await db.guests.find_one(query, {"_id": 0, "id": 1}):
            return candidate
        counter += 1
        candidate = slug_candidate(base, counter)


async def insert_guest(db, guest_doc: dict, slug_base: str) -> dict:
    """
    Insert a guest under a free slug. The unique index on slug is the
    authority: a concurrent insert that wins the probed slug makes this
    one retry with the next suffix.
    """
    for attempt in range(MAX_SLUG_INSERT_ATTEMPTS):
        doc = dict(guest_doc)
        doc["slug"] = await ensure_unique_slug(db, slug_base)
        try:
            await db.guests.insert_one(doc)
        except DuplicateKeyError:
            logger.warning(f"Slug {doc['slug']} was taken concurrently (attempt {attempt + 1})")
            continue
        doc.pop("_id", None)
        return doc
    raise SlugAllocationError(f"Could not allocate a unique slug for '{slug_base}'")


def new_guest_document(name: str, whatsapp: str, country: str, title: str = None,
                       invited: bool = False, is_group: bool = False,
                       rsvp_status: str = None, language: str = None) -> dict:
    now = utc_now()
    return {
        "id": str(uuid.uuid4()),
        "name": name,
        "title": clean_text(title),
        "whatsapp": whatsapp,
        "invited": bool(invited),
        "is_group": bool(is_group),
        "rsvp_status": rsvp_status or RSVP_NOT_RESPONDED,
        "rsvp_message": None,
        "message_sent": False,
        "message_sent_at": None,
        "country": country,
        "language": language or get_language_for_country(country),
        "created_at": now,
        "updated_at": now
    }


# ============================================
# CREATE / UPDATE / DELETE
# ============================================

async def create_guest(db, data: GuestCreate) -> dict:
    """Create a guest with a normalized number and a unique slug"""
    name = clean_text(data.name)
    whatsapp = clean_text(data.whatsapp)
    if not name or not whatsapp:
        raise HTTPException(status_code=400, detail="Name and WhatsApp number are required")

    country = resolve_country(data.country)
    normalized = normalize_whatsapp(whatsapp, country)
    if not normalized:
        raise HTTPException(status_code=400, detail="Invalid WhatsApp number")

    guest_doc = new_guest_document(
        name=name,
        whatsapp=normalized,
        country=country,
        title=data.title,
        invited=data.invited,
        is_group=data.is_group,
        rsvp_status=data.rsvp_status,
        language=data.language,
    )
    guest = await insert_guest(db, guest_doc, slugify(name))
    logger.info(f"Created guest {guest['id']} ({guest['slug']})")
    return guest


async def update_guest(db, guest_id: str, data: GuestUpdate) -> dict:
    """Apply only the supplied fields; updated_at is always refreshed"""
    existing = await require_guest(db, guest_id)
    fields = data.model_dump(exclude_unset=True)
    update_data = {}

    if fields.get("name") is not None:
        name = clean_text(fields["name"])
        if not name:
            raise HTTPException(status_code=400, detail="Name cannot be empty")
        update_data["name"] = name
    if "title" in fields:
        update_data["title"] = clean_text(fields["title"])

    country = fields.get("country") or existing.get("country", DEFAULT_COUNTRY)
    if fields.get("country"):
        update_data["country"] = country
    if fields.get("whatsapp") is not None:
        normalized = normalize_whatsapp(fields["whatsapp"], country)
        if not normalized:
            raise HTTPException(status_code=400, detail="Invalid WhatsApp number")
        update_data["whatsapp"] = normalized
    if fields.get("language"):
        update_data["language"] = fields["language"]
    elif fields.get("country"):
        update_data["language"] = get_language_for_country(country)

    for field in ("invited", "is_group", "rsvp_status"):
        if fields.get(field) is not None:
            update_data[field] = fields[field]
    if "rsvp_message" in fields:
        update_data["rsvp_message"] = clean_text(fields["rsvp_message"])

    if fields.get("message_sent") is not None:
        update_data["message_sent"] = fields["message_sent"]
        if fields.get("message_sent_at") is not None:
            update_data["message_sent_at"] = fields["message_sent_at"]
        else:
            update_data["message_sent_at"] = utc_now() if fields["message_sent"] else None
    elif "message_sent_at" in fields:
        update_data["message_sent_at"] = fields["message_sent_at"]

    update_data["updated_at"] = utc_now()
    result = await db.guests.update_one({"id": guest_id}, {"$set": update_data})
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Guest not found")

    previous_status = existing.get("rsvp_status")
    new_status = update_data.get("rsvp_status")
    if new_status and new_status != previous_status:
        logger.info(f"Admin override of RSVP status for guest {guest_id}: {previous_status} -> {new_status}")
        await create_activity_log(db, ACTION_RSVP_OVERRIDE, existing, {
            "from": previous_status,
            "to": new_status
        })

    return await get_guest_by_id(db, guest_id)


async def bulk_update_message_sent(db, ids: List[str], message_sent: Optional[bool],
                                   message_sent_at: Optional[str] = None) -> List[dict]:
    """Toggle message-sent tracking for several guests at once"""
    ids = [guest_id for guest_id in ids if guest_id]
    if not ids:
        raise HTTPException(status_code=400, detail="Guest id is required")
    if message_sent is None:
        raise HTTPException(status_code=400, detail="messageSent is required")

    if message_sent_at is None and message_sent:
        message_sent_at = utc_now()
    elif not message_sent:
        message_sent_at = None

    await db.guests.update_many(
        {"id": {"$in": ids}},
        {"$set": {
            "message_sent": message_sent,
            "message_sent_at": message_sent_at,
            "updated_at": utc_now()
        }}
    )
    logger.info(f"Marked {len(ids)} guest(s) messageSent={message_sent}")
    return await db.guests.find(
        {"id": {"$in": ids}}, {"_id": 0}, sort=[("created_at", -1), ("id", 1)]
    ).to_list(None)


async def change_guest_slug(db, guest_id: str, requested: Optional[str] = None) -> dict:
    """
    Deliberately re-slug a guest. Existing share links stop working, so this
    is kept apart from the ordinary partial update.
    """
    existing = await require_guest(db, guest_id)
    source = requested if clean_text(requested) else existing["name"]
    base = slugify(source) or FALLBACK_SLUG

    for attempt in range(MAX_SLUG_INSERT_ATTEMPTS):
        candidate = await ensure_unique_slug(db, base, exclude_id=guest_id)
        if candidate == existing["slug"]:
            return existing
        try:
            await db.guests.update_one(
                {"id": guest_id},
                {"$set": {"slug": candidate, "updated_at": utc_now()}}
            )
        except DuplicateKeyError:
            logger.warning(f"Slug {candidate} was taken concurrently (attempt {attempt + 1})")
            continue
        await create_activity_log(db, ACTION_SLUG_CHANGE, existing, {
            "from": existing["slug"],
            "to": candidate
        })
        return await get_guest_by_id(db, guest_id)
    raise SlugAllocationError(f"Could not allocate a unique slug for '{base}'")


async def delete_guest(db, guest_id: str) -> bool:
    result = await db.guests.delete_one({"id": guest_id})
    if result.deleted_count:
        logger.info(f"Deleted guest {guest_id}")
    return result.deleted_count > 0


async def delete_guests(db, ids: List[str]) -> int:
    """Delete several guests; ids that no longer exist are simply not counted"""
    ids = [guest_id for guest_id in ids if guest_id]
    if not ids:
        raise HTTPException(status_code=400, detail="Guest id is required")
    result = await db.guests.delete_many({"id": {"$in": ids}})
    logger.info(f"Bulk deleted {result.deleted_count} of {len(ids)} guest(s)")
    return result.deleted_count


# ============================================
# LISTING
# ============================================

def build_guest_query(invited: Optional[bool] = None, message_sent: Optional[bool] = None,
                      rsvp_status: Optional[str] = None, search: Optional[str] = None) -> dict:
    """MongoDB filter for the admin guest list; None means no constraint"""
    query = {}
    if invited is not None:
        query["invited"] = invited
    if message_sent is not None:
        query["message_sent"] = message_sent
    if rsvp_status:
        query["rsvp_status"] = rsvp_status
    if search:
        query["name"] = {"$regex": re.escape(search), "$options": "i"}
    return query


def guest_sort(sort_by: str, sort_order: str) -> list:
    direction = 1 if sort_order == "asc" else -1
    # id breaks ties so pages never overlap
    return [(sort_by, direction), ("id", 1)]


async def list_guests(db, query: dict, page: int, page_size: int,
                      sort_by: str, sort_order: str):
    """One page of guests plus the total matching count"""
    total = await db.guests.count_documents(query)
    skip = (page - 1) * page_size
    # Pages past the end are empty; skip must also fit in a BSON int64
    if skip >= total:
        return [], total
    items = await db.guests.find(
        query, {"_id": 0},
        sort=guest_sort(sort_by, sort_order),
        skip=skip,
        limit=page_size
    ).to_list(None)
    return items, total


async def count_with(db, query: dict, condition: dict) -> int:
    return await db.guests.count_documents({"$and": [query, condition]} if query else condition)


async def get_guest_stats(db, query: dict) -> GuestStats:
    """Dashboard counters over the filtered guest list"""
    return GuestStats(
        total=await db.guests.count_documents(query),
        invited=await count_with(db, query, {"invited": True}),
        messaged=await count_with(db, query, {"message_sent": True}),
        attending=await count_with(db, query, {"rsvp_status": RSVP_ATTENDING}),
        not_attending=await count_with(db, query, {"rsvp_status": RSVP_NOT_ATTENDING}),
        not_responded=await count_with(db, query, {"rsvp_status": RSVP_NOT_RESPONDED}),
    )


async def get_guest_messages(db) -> List[dict]:
    """Guests who left a note with their RSVP, newest first"""
    return await db.guests.find(
        {"rsvp_message": {"$ne": None}},
        {"_id": 0, "id": 1, "name": 1, "title": 1, "slug": 1, "rsvp_status": 1, "rsvp_message": 1},
        sort=[("updated_at", -1), ("id", 1)]
    ).to_list(None)


def public_guest_view(guest: dict) -> PublicGuest:
    status = guest.get("rsvp_status", RSVP_NOT_RESPONDED)
    return PublicGuest(
        name=guest["name"],
        title=guest.get("title"),
        slug=guest["slug"],
        is_group=guest.get("is_group", False),
        rsvp_status=status,
        rsvp_message=guest.get("rsvp_message"),
        country=guest.get("country", DEFAULT_COUNTRY),
        language=guest.get("language", "id"),
        already_responded=not guest.get("is_group", False) and status != RSVP_NOT_RESPONDED,
    )


# ============================================
# CSV IMPORT / EXPORT
# ============================================

def parse_guest_csv(content: str) -> List[dict]:
    """Rows keyed by lower-cased header; blank lines are ignored"""
    lines = [line for line in content.splitlines() if line.strip()]
    if not lines:
        return []
    reader = csv.DictReader(io.StringIO("\n".join(lines)))
    reader.fieldnames = [header.strip().lower() for header in reader.fieldnames or []]
    rows = []
    for row in reader:
        rows.append({
            key: (value or "").strip()
            for key, value in row.items()
            if key and isinstance(value, str)
        })
    return rows


async def import_guests(db, content: Optional[str]) -> GuestImportResult:
    """
    Create a guest per CSV row. Invalid rows are skipped and reported as
    'Row N: ...' where the header is row 1.
    """
    if not content or not content.strip():
        raise HTTPException(status_code=400, detail="CSV content is required")

    result = GuestImportResult()
    for index, row in enumerate(parse_guest_csv(content)):
        row_number = index + 2
        name = row.get("name", "")
        whatsapp = row.get("whatsapp", "")
        if not name or not whatsapp:
            result.skipped += 1
            result.errors.append(f"Row {row_number}: missing name or whatsapp")
            continue

        country = resolve_country(row.get("country"))
        normalized = normalize_whatsapp(whatsapp, country)
        if not normalized:
            result.skipped += 1
            result.errors.append(f"Row {row_number}: invalid whatsapp")
            continue

        rsvp_status = row.get("rsvp_status")
        if rsvp_status not in (RSVP_ATTENDING, RSVP_NOT_ATTENDING):
            rsvp_status = RSVP_NOT_RESPONDED
        language = row.get("language")

        guest_doc = new_guest_document(
            name=name,
            whatsapp=normalized,
            country=country,
            title=row.get("title"),
            invited=to_boolean(row.get("invited")) or False,
            is_group=to_boolean(row.get("is_group")) or False,
            rsvp_status=rsvp_status,
            language=language if language in LANGUAGES else None,
        )
        try:
            await insert_guest(db, guest_doc, slugify(name))
        except SlugAllocationError as e:
            result.skipped += 1
            result.errors.append(f"Row {row_number}: {e}")
            continue
        result.imported += 1

    logger.info(f"Guest import finished: {result.imported} imported, {result.skipped} skipped")
    return result


def csv_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return "" if value is None else str(value)


async def export_guests_csv(db, query: dict, sort_by: str, sort_order: str) -> str:
    """Every guest matching the filters as CSV, all values quoted"""
    guests = await db.guests.find(
        query, {"_id": 0}, sort=guest_sort(sort_by, sort_order)
    ).to_list(None)

    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(GUEST_EXPORT_FIELDS)
    for guest in guests:
        writer.writerow([csv_value(guest.get(field)) for field in GUEST_EXPORT_FIELDS])
    return output.getvalue()
