"""
Naviga8 Backend - Route Service (Business Logic)
==================================================

What:  Create, list and delete saved routes for an anonymous user id.
How:   Validates and normalizes input, then issues the query or write through
       the request's AsyncSession.
Who:   Called by the route handlers in app.routes.saved_routes.

Operation Flow (POST /save-route):
    ┌──────────┐    ┌──────────────┐    ┌──────────────┐    ┌──────────┐
    │  Body    │───▶│  Required    │───▶│  Duplicate   │───▶│  Insert  │
    │  (Route) │    │  + normalize │    │  check (DB)  │    │  (DB)    │
    └──────────┘    └──────────────┘    └──────────────┘    └──────────┘

    The duplicate check and the insert are two statements. The unique
    constraint on the routes table turns a concurrent duplicate insert into
    an IntegrityError, reported as the same ConflictError.

Error Handling Strategy:
    ValidationError / ConflictError / NotFoundError propagate as-is.
    Anything raised by the driver is logged with full detail and wrapped in
    StoreError, which the API answers with a generic 500.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, desc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import ConflictError, NavigaError, NotFoundError, StoreError, ValidationError
from app.models.route import Route
from app.schemas.route import (
    AddressInput,
    RouteDeleteResponse,
    RouteResponse,
    normalize_address,
)

logger = logging.getLogger(__name__)


def _is_blank_user_id(user_id: Optional[str]) -> bool:
    # Same rule for save, list and delete, so a saved route stays reachable
    return user_id is None or not user_id.strip()


def _require_user_id(user_id: Optional[str]) -> str:
    if _is_blank_user_id(user_id):
        raise ValidationError(message="User ID required", field="userId")
    return user_id


class RouteService:
    """
    Business logic layer for saved routes.

    Responsibilities:
        - create_route(): required-field check, address normalization, uniqueness
        - list_routes(): newest-first listing for one user, capped
        - delete_route(): owner-scoped delete with not-found handling

    Stateless; the session is passed in on every call.
    """

    def __init__(self, list_limit: Optional[int] = None):
        self.list_limit = list_limit or settings.routes_list_limit

    async def create_route(
        self,
        db: AsyncSession,
        user_id: Optional[str],
        origin: Optional[AddressInput],
        destination: Optional[AddressInput],
    ) -> RouteResponse:
        """
        Save a route for a user.

        Steps:
            1. Reject absent userId / origin / destination (400)
            2. Normalize both addresses (trim, cap at 200 chars); reject empty (400)
            3. Look for an identical (userId, origin, destination) route (409)
            4. Insert and flush so the id and timestamps are populated

        Args:
            db: Async database session (injected by FastAPI)
            user_id: Anonymous owner id
            origin: Origin address, bare string or {"address": ...}
            destination: Destination address, same shapes as origin

        Returns:
            RouteResponse with the stored values

        Raises:
            ValidationError: Missing field or blank address
            ConflictError: Route already saved by this user
            StoreError: Database operation failed
        """
        missing = ["userId"] if _is_blank_user_id(user_id) else []
        missing += [
            name
            for name, value in (("origin", origin), ("destination", destination))
            if value is None or value == ""
        ]
        if missing:
            raise ValidationError(
                message="All fields are required",
                context={"missing": missing},
            )

        origin_address = normalize_address(origin)
        destination_address = normalize_address(destination)
        if not origin_address or not destination_address:
            raise ValidationError(
                message="Origin and destination addresses must not be empty",
                context={
                    "missing": [
                        name
                        for name, value in (
                            ("origin", origin_address),
                            ("destination", destination_address),
                        )
                        if not value
                    ]
                },
            )

        try:
            result = await db.execute(
                select(Route.id).where(
                    Route.user_id == user_id,
                    Route.origin_address == origin_address,
                    Route.destination_address == destination_address,
                )
            )
            if result.scalar_one_or_none() is not None:
                logger.info("Duplicate route rejected for user %s", user_id)
                raise ConflictError(context={"user_id": user_id})

            route = Route(
                user_id=user_id,
                origin_address=origin_address,
                destination_address=destination_address,
            )
            db.add(route)
            await db.flush()  # Assigns defaults without committing
            logger.info("Route %s saved for user %s", route.id, user_id)

            return RouteResponse.from_model(route)

        except NavigaError:
            raise
        except IntegrityError as e:
            # A concurrent request inserted the same route between our
            # check and our insert
            await db.rollback()
            logger.warning("Unique constraint rejected route for user %s: %s", user_id, e.orig)
            raise ConflictError(context={"user_id": user_id})
        except Exception as e:
            logger.error("Save route error: %s", str(e), exc_info=True)
            raise StoreError(
                message="Failed to save route",
                context={"error_type": type(e).__name__},
            )

    async def list_routes(self, db: AsyncSession, user_id: Optional[str]) -> List[RouteResponse]:
        """
        List a user's routes, newest first, at most `list_limit` of them.

        Query plan:
            SELECT * FROM routes WHERE user_id = :uid
            ORDER BY created_at DESC LIMIT :limit
            → served by idx_routes_user_id_created_at
        """
        user_id = _require_user_id(user_id)

        try:
            result = await db.execute(
                select(Route)
                .where(Route.user_id == user_id)
                .order_by(desc(Route.created_at))
                .limit(self.list_limit)
            )
            routes = list(result.scalars().all())
        except Exception as e:
            logger.error("Fetch routes error: %s", str(e), exc_info=True)
            raise StoreError(
                message="Failed to fetch routes",
                context={"error_type": type(e).__name__},
            )

        return [RouteResponse.from_model(route) for route in routes]

    async def delete_route(
        self,
        db: AsyncSession,
        route_id: str,
        user_id: Optional[str],
    ) -> RouteDeleteResponse:
        """
        Delete one route if, and only if, it belongs to `user_id`.

        An id that is not a valid UUID cannot match any row and is reported
        as not found, like a route owned by another user.

        Raises:
            ValidationError: userId missing
            NotFoundError: No route with this id for this user
            StoreError: Database operation failed
        """
        user_id = _require_user_id(user_id)

        try:
            parsed_id = uuid.UUID(route_id)
        except (TypeError, ValueError):
            raise NotFoundError(resource="route", resource_id=route_id)

        try:
            result = await db.execute(
                delete(Route).where(Route.id == parsed_id, Route.user_id == user_id)
            )
            deleted = result.rowcount
        except Exception as e:
            logger.error("Delete route error: %s", str(e), exc_info=True)
            raise StoreError(
                message="Failed to delete route",
                context={"route_id": route_id, "error_type": type(e).__name__},
            )

        if not deleted:
            raise NotFoundError(resource="route", resource_id=route_id)

        logger.info("Route %s deleted for user %s", route_id, user_id)
        return RouteDeleteResponse(id=route_id)


# ── Singleton Instance ────────────────────────────────────────────────────
route_service = RouteService()
