"""
Guest list Pydantic models
"""
from typing import Optional, List, Literal

from .schemas import CamelModel

RSVPStatus = Literal["attending", "not_attending", "not_responded"]
Country = Literal["Indonesia", "Singapore", "United States", "Netherlands"]
Language = Literal["id", "en"]


class Guest(CamelModel):
    """A guest list record as stored"""
    id: str
    name: str
    title: Optional[str] = None
    whatsapp: str
    slug: str
    invited: bool = False
    is_group: bool = False
    rsvp_status: RSVPStatus = "not_responded"
    rsvp_message: Optional[str] = None
    message_sent: bool = False
    message_sent_at: Optional[str] = None
    country: Country = "Indonesia"
    language: Language = "id"
    created_at: str
    updated_at: str


class GuestCreate(CamelModel):
    """Create guest request. Name and whatsapp are checked by the service"""
    name: Optional[str] = None
    title: Optional[str] = None
    whatsapp: Optional[str] = None
    invited: bool = False
    is_group: bool = False
    rsvp_status: Optional[RSVPStatus] = None
    country: Optional[Country] = None
    language: Optional[Language] = None


class GuestUpdate(CamelModel):
    """Partial update; only fields present in the request are applied"""
    name: Optional[str] = None
    title: Optional[str] = None
    whatsapp: Optional[str] = None
    invited: Optional[bool] = None
    is_group: Optional[bool] = None
    rsvp_status: Optional[RSVPStatus] = None
    rsvp_message: Optional[str] = None
    message_sent: Optional[bool] = None
    message_sent_at: Optional[str] = None
    country: Optional[Country] = None
    language: Optional[Language] = None


class BulkMessageSentUpdate(CamelModel):
    ids: List[str] = []
    message_sent: Optional[bool] = None
    message_sent_at: Optional[str] = None


class SlugChange(CamelModel):
    # Falls back to the guest's name when omitted
    slug: Optional[str] = None


class GuestListPage(CamelModel):
    items: List[Guest]
    page: int
    page_size: int
    total: int


class GuestStats(CamelModel):
    total: int = 0
    invited: int = 0
    messaged: int = 0
    attending: int = 0
    not_attending: int = 0
    not_responded: int = 0


class GuestImportRequest(CamelModel):
    csv: Optional[str] = None


class GuestImportResult(CamelModel):
    imported: int = 0
    skipped: int = 0
    errors: List[str] = []


# Public Guest View (for the invitation page)
class PublicGuest(CamelModel):
    """Public view of a guest, without contact or admin tracking fields"""
    name: str
    title: Optional[str] = None
    slug: str
    is_group: bool = False
    rsvp_status: RSVPStatus = "not_responded"
    rsvp_message: Optional[str] = None
    country: Country = "Indonesia"
    language: Language = "id"
    already_responded: bool = False


class GuestRSVPSubmit(CamelModel):
    attendance: Optional[str] = None
    message: Optional[str] = None


class GuestMessage(CamelModel):
    """RSVP note shown in the guest messages feed"""
    id: str
    name: str
    title: Optional[str] = None
    slug: str
    rsvp_status: RSVPStatus
    rsvp_message: Optional[str] = None


class InvitationMessage(CamelModel):
    message: str
    whatsapp_url: str
    language: Language


class ActivityLog(CamelModel):
    """Admin action recorded against a guest"""
    id: str
    action: str
    guest_id: Optional[str] = None
    guest_slug: Optional[str] = None
    details: dict = {}
    created_at: str
