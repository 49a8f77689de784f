"""
Utils package for the guest list backend
"""
from .helpers import (
    slugify,
    slug_candidate,
    get_country_code,
    normalize_whatsapp,
    get_language_for_country,
    to_boolean,
    parse_positive_int,
)

__all__ = [
    'slugify',
    'slug_candidate',
    'get_country_code',
    'normalize_whatsapp',
    'get_language_for_country',
    'to_boolean',
    'parse_positive_int',
]
