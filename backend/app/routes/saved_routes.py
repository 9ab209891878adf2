"""
Naviga8 Backend - Saved Route Handlers
========================================

What:  POST /save-route, GET /routes, DELETE /delete-route/{route_id}.
How:   Extracts body/query/path values, delegates to RouteService, returns JSON.
Who:   Called by the map page (save) and the saved-routes page (list, delete).

Paths are unprefixed; the map client calls them from the same origin.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.route import (
    ErrorResponse,
    RouteCreate,
    RouteDeleteResponse,
    RouteResponse,
)
from app.services.route_service import route_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Routes"])


@router.post(
    "/save-route",
    response_model=RouteResponse,
    responses={
        200: {"description": "Route saved", "model": RouteResponse},
        400: {"description": "Missing or malformed field", "model": ErrorResponse},
        409: {"description": "Route already saved", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Save an origin/destination pair",
)
async def save_route(
    payload: RouteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> RouteResponse:
    """
    Save a route for the anonymous user in the body.

    `origin` and `destination` may each be a plain string or an
    `{"address": "..."}` object; both are stored trimmed and capped at
    200 characters.
    """
    return await route_service.create_route(
        db=db,
        user_id=payload.user_id,
        origin=payload.origin,
        destination=payload.destination,
    )


@router.get(
    "/routes",
    response_model=List[RouteResponse],
    responses={
        400: {"description": "userId missing", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List a user's saved routes",
    description="Newest first, at most 50 routes.",
)
async def list_routes(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    db: AsyncSession = Depends(get_db_session),
) -> List[RouteResponse]:
    return await route_service.list_routes(db=db, user_id=user_id)


@router.delete(
    "/delete-route/{route_id}",
    response_model=RouteDeleteResponse,
    responses={
        400: {"description": "userId missing", "model": ErrorResponse},
        404: {"description": "Route not found or owned by another user", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete one of the user's routes",
)
async def delete_route(
    route_id: str,
    user_id: Optional[str] = Query(default=None, alias="userId"),
    db: AsyncSession = Depends(get_db_session),
) -> RouteDeleteResponse:
    """
    Delete the route only when both the id and the owner match.

    A route owned by someone else answers 404, the same as a missing one.
    """
    return await route_service.delete_route(db=db, route_id=route_id, user_id=user_id)
