"""
Wedding data route for the invitation site
"""
from fastapi import APIRouter, Depends

from core.dependencies import get_wedding_data
from core.responses import api_response

router = APIRouter(prefix="/api", tags=["wedding"])


@router.get("/wedding")
async def get_wedding(wedding_data=Depends(get_wedding_data)):
    return api_response(wedding_data)
