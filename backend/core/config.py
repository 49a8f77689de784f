"""
Application configuration and constants
"""
import os
from pathlib import Path
from dotenv import load_dotenv
import logging

ROOT_DIR = Path(__file__).parent.parent
load_dotenv(ROOT_DIR / '.env')

# Configure logging
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# MongoDB configuration
MONGO_URL = os.environ.get('MONGO_URL', 'mongodb://localhost:27017')
DB_NAME = os.environ.get('DB_NAME', 'wedding_invitation')

# Public site URL used in invitation links
SITE_URL = os.environ.get('SITE_URL', 'http://localhost:3000').rstrip('/')

CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')

# Optional JSON file overriding the bundled wedding data
WEDDING_DATA_FILE = os.environ.get('WEDDING_DATA_FILE', '')

# ============================================
# GUEST LIST CONSTANTS
# ============================================

RSVP_ATTENDING = "attending"
RSVP_NOT_ATTENDING = "not_attending"
RSVP_NOT_RESPONDED = "not_responded"
RSVP_STATUSES = [RSVP_ATTENDING, RSVP_NOT_ATTENDING, RSVP_NOT_RESPONDED]

# Legacy free-standing RSVP rows also accept "pending"
SUBMISSION_ATTENDANCE = [RSVP_ATTENDING, RSVP_NOT_ATTENDING, "pending"]

COUNTRY_INDONESIA = "Indonesia"
COUNTRY_DIALING_CODES = {
    "Indonesia": "62",
    "Singapore": "65",
    "United States": "1",
    "Netherlands": "31",
}
COUNTRIES = list(COUNTRY_DIALING_CODES)
DEFAULT_COUNTRY = COUNTRY_INDONESIA

LANGUAGES = ["id", "en"]

# Pagination
DEFAULT_PAGE_SIZE = 20
ALLOWED_PAGE_SIZES = [20, 50, 100, 500, 1000]
SORT_FIELDS = ["created_at", "name"]
DEFAULT_SORT_FIELD = "created_at"
DEFAULT_SORT_ORDER = "desc"

# Attempts at inserting a guest before giving up on slug collisions
MAX_SLUG_INSERT_ATTEMPTS = 5

WHATSAPP_SEND_URL = "https://api.whatsapp.com/send"

# CSV export column order
GUEST_EXPORT_FIELDS = [
    "name", "title", "whatsapp", "slug", "invited", "is_group",
    "rsvp_status", "rsvp_message", "message_sent", "message_sent_at",
    "country", "language", "created_at", "updated_at",
]
