"""
Naviga8 Backend - Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract between the map client and backend.
How:   FastAPI uses these models to validate request bodies, serialize responses,
       and generate the OpenAPI documentation.
Who:   Used by route handlers as request/return types.

Field naming:
    Python attributes are snake_case; the wire format is camelCase
    (userId, createdAt, ...) through an alias generator. FastAPI serializes
    response models by alias, and requests accept either spelling.
"""

import uuid
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.route import MAX_ADDRESS_LENGTH


class CamelModel(BaseModel):
    """Base for every schema that travels as camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Address Input - the two shapes the client may send
# ══════════════════════════════════════════════════════════════════════════


class AddressPayload(CamelModel):
    """Object form of an address: {"address": "..."}."""
    address: Optional[str] = Field(default=None, description="Free-form address text")


# A bare string or an {"address": ...} object. normalize_address() is the
# only place that tells the two apart.
AddressInput = Union[str, AddressPayload]


def normalize_address(value: Optional[AddressInput]) -> str:
    """
    Convert either address shape to the stored string.

    Contract:
        - str            → the string itself
        - AddressPayload → its `address` (None counts as "")
        - None           → ""
    The result is stripped of surrounding whitespace and truncated to
    MAX_ADDRESS_LENGTH characters. An empty result means "no address"; the
    caller decides whether that is an error.
    """
    if value is None:
        return ""
    if isinstance(value, AddressPayload):
        raw = value.address or ""
    else:
        raw = value
    return raw.strip()[:MAX_ADDRESS_LENGTH]


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class RouteCreate(CamelModel):
    """
    Body of POST /save-route.

    Every field is optional at the schema level so that a missing field
    surfaces as the service's 400 "All fields are required" instead of a
    schema error listing.
    """
    user_id: Optional[str] = Field(default=None, description="Anonymous owner id")
    origin: Optional[AddressInput] = Field(
        default=None, description="Origin as a string or {address}"
    )
    destination: Optional[AddressInput] = Field(
        default=None, description="Destination as a string or {address}"
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class Address(CamelModel):
    address: str


class RouteResponse(CamelModel):
    """
    A stored route exactly as persisted.

    Returned by POST /save-route and as the items of GET /routes.
    """
    id: uuid.UUID = Field(description="Route identifier")
    user_id: str = Field(description="Anonymous owner id")
    origin: Address
    destination: Address
    created_at: datetime = Field(description="When the route was saved (UTC)")
    updated_at: datetime = Field(description="Last modification (UTC)")

    @classmethod
    def from_model(cls, route) -> "RouteResponse":
        """Builds the nested address objects from the flat ORM columns."""
        return cls(
            id=route.id,
            user_id=route.user_id,
            origin=Address(address=route.origin_address),
            destination=Address(address=route.destination_address),
            created_at=route.created_at,
            updated_at=route.updated_at,
        )


class RouteDeleteResponse(CamelModel):
    msg: str = Field(default="Route deleted successfully")
    id: str = Field(description="Identifier of the deleted route, as given in the path")


class GoogleKeyResponse(CamelModel):
    key: str = Field(description="Google Maps API key for the map client")


class UserIdResponse(CamelModel):
    user_id: str = Field(description="Freshly generated anonymous identifier")


class HealthResponse(CamelModel):
    """
    What:  Health check response showing service and store status.
    Who:   Returned by GET /health for monitoring and container health checks.
    """
    status: str = Field(description="OK, or DEGRADED when the store is unreachable")
    timestamp: datetime = Field(description="Server time (UTC)")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


# ══════════════════════════════════════════════════════════════════════════
# Error Response Model
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "conflict")
        message: Human-readable description for display to users
        details: Optional extra context (e.g., which fields were missing)
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
