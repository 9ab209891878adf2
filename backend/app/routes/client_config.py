"""
Naviga8 Backend - Client Bootstrap Handlers
=============================================

What:  GET /api/google-key and GET /api/user-id.
Why:   The map page fetches its Maps key and, on first visit, an anonymous
       user id before it can save or list anything.
"""

import logging

from fastapi import APIRouter

from app.config import settings
from app.exceptions import ConfigurationError
from app.schemas.route import ErrorResponse, GoogleKeyResponse, UserIdResponse
from app.services.identity_service import identity_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Client"])


@router.get(
    "/google-key",
    response_model=GoogleKeyResponse,
    responses={500: {"description": "Key not configured", "model": ErrorResponse}},
    summary="Google Maps API key for the map client",
)
async def get_google_key() -> GoogleKeyResponse:
    key = settings.google_maps_api_key
    if not key or not key.strip():
        raise ConfigurationError(setting="GOOGLE_MAPS_API_KEY")
    return GoogleKeyResponse(key=key)


@router.get(
    "/user-id",
    response_model=UserIdResponse,
    summary="Issue a new anonymous user id",
)
async def get_user_id() -> UserIdResponse:
    return UserIdResponse(user_id=identity_service.generate_user_id())
