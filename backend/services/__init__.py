# Services module exports
from .activity import create_activity_log, get_activity_logs
from .guests import (
    create_guest, update_guest, bulk_update_message_sent, change_guest_slug,
    delete_guest, delete_guests, ensure_unique_slug, insert_guest,
    build_guest_query, list_guests, get_guest_stats, get_guest_messages,
    import_guests, export_guests_csv, public_guest_view
)
from .messages import build_message, build_whatsapp_url
from .rsvp import (
    submit_guest_rsvp, submit_group_rsvp, create_submission,
    list_submissions, delete_submission, delete_submissions
)
from .wedding import load_wedding_data
