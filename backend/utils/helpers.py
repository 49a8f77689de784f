"""
Utility helper functions for the guest list backend
"""
import re
from typing import Optional

from core.config import COUNTRY_DIALING_CODES, COUNTRY_INDONESIA, DEFAULT_COUNTRY


# ============ Slug Utilities ============

def slugify(value: str) -> str:
    """Turn a display name into a URL-safe slug"""
    slug = value.lower().strip()
    slug = re.sub(r'[^a-z0-9\s-]', '', slug)
    slug = re.sub(r'\s+', '-', slug)
    slug = re.sub(r'-+', '-', slug)
    return slug


def slug_candidate(base: str, counter: int) -> str:
    """Slug for the Nth guest sharing a base, e.g. jane-doe, jane-doe-2"""
    return base if counter <= 1 else f"{base}-{counter}"


# ============ Phone Utilities ============

def get_country_code(country: str) -> str:
    """Dialing code for a guest country, Indonesia when unknown"""
    return COUNTRY_DIALING_CODES.get(country, COUNTRY_DIALING_CODES[DEFAULT_COUNTRY])


def normalize_whatsapp(value: str, country: str = DEFAULT_COUNTRY) -> str:
    """
    Canonicalize a phone number to digits with the country dialing code.
    Returns an empty string when the input has no digits.
    """
    digits = re.sub(r'\D', '', value or '')
    if not digits:
        return ""
    country_code = get_country_code(country)
    if digits.startswith("0"):
        return f"{country_code}{digits[1:]}"
    if digits.startswith(country_code):
        return digits
    if country_code == COUNTRY_DIALING_CODES[COUNTRY_INDONESIA] and digits.startswith("8"):
        return f"{country_code}{digits}"
    return digits


def get_language_for_country(country: str) -> str:
    return "id" if country == COUNTRY_INDONESIA else "en"


# ============ Parsing Utilities ============

def to_boolean(value: Optional[str]) -> Optional[bool]:
    """Parse a CSV or query string flag; None when not recognizable"""
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in ("true", "1", "yes", "y"):
        return True
    if normalized in ("false", "0", "no", "n"):
        return False
    return None


def parse_positive_int(value: Optional[str], default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default
