"""
Free-standing RSVP submission models (walk-in and group attendees)
"""
from typing import Optional, List, Literal

from .schemas import CamelModel


class RSVPSubmission(CamelModel):
    """A single RSVP row, independent of the guest list"""
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    guest_slug: Optional[str] = None
    attendance: Literal["attending", "not_attending", "pending"]
    number_of_guests: int = 1
    message: Optional[str] = None
    created_at: str


class RSVPSubmissionCreate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    guest_slug: Optional[str] = None
    attendance: Optional[str] = None
    number_of_guests: Optional[int] = None
    message: Optional[str] = None


class GroupAttendee(CamelModel):
    name: Optional[str] = ""
    phone: Optional[str] = ""


class GroupRSVPCreate(CamelModel):
    """One shared answer for every attendee of a group invitation"""
    attendees: List[GroupAttendee] = []
    attendance: Optional[str] = None
    message: Optional[str] = None
    guest_slug: Optional[str] = None


class GroupRSVPResult(CamelModel):
    submitted: int = 0
    failed: int = 0
    items: List[RSVPSubmission] = []
    errors: List[str] = []
