# Models package
from .schemas import CamelModel, IdList
from .guest import (
    Guest, GuestCreate, GuestUpdate, BulkMessageSentUpdate, SlugChange,
    GuestListPage, GuestStats, GuestImportRequest, GuestImportResult,
    PublicGuest, GuestRSVPSubmit, GuestMessage, InvitationMessage, ActivityLog
)
from .rsvp import (
    RSVPSubmission, RSVPSubmissionCreate, GroupAttendee,
    GroupRSVPCreate, GroupRSVPResult
)
from .wedding import WeddingData, WeddingEvent, Couple, Person
