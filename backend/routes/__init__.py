"""
Routes package for the wedding guest API

Routes are organized by domain:
- health: Health check endpoint
- guests: Guest list administration (registered before rsvp so that
  /api/guests/stats and /api/guests/import win over /api/guests/{slug})
- rsvp: Guest-facing RSVP, group RSVP and free-standing submissions
- wedding: Wedding data payload
"""
from .health import router as health_router
from .guests import router as guests_router
from .rsvp import router as rsvp_router
from .wedding import router as wedding_router

__all__ = ['health_router', 'guests_router', 'rsvp_router', 'wedding_router']
