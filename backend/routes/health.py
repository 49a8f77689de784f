"""
Health check routes for the guest list API
"""
from fastapi import APIRouter, Depends

from core.dependencies import get_db

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(db=Depends(get_db)):
    """Health check endpoint for monitoring"""
    guests = await db.guests.count_documents({})
    return {"status": "healthy", "service": "wedding-guest-api", "guests": guests}
