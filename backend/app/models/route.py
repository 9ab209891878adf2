"""
Naviga8 Backend - Route SQLAlchemy Model
==========================================

What:  ORM model representing the `routes` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by RouteService for create/list/delete and by Alembic.

Table Design:
    - UUID primary key, generated in Python so SQLite (tests) and
      PostgreSQL (production) behave the same
    - user_id: TEXT, since clients choose their own id
    - origin_address / destination_address: already trimmed and capped at
      200 characters by the service layer
    - created_at / updated_at: UTC, set on insert; updated_at refreshed on update

    Unique constraint on (user_id, origin_address, destination_address):
        Backs up the service's existence check; two concurrent saves of the
        same route cannot both commit.

    Index on (user_id, created_at DESC):
        Serves "GET /routes?userId=..." - filter by owner, newest first.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

MAX_ADDRESS_LENGTH = 200


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Route(Base):
    """
    A saved origin/destination pair owned by an anonymous user id.

    Lifecycle:
        1. Created by POST /save-route
        2. Listed by GET /routes (scoped to user_id)
        3. Deleted by DELETE /delete-route/{id} (scoped to id + user_id)
        There is no update operation.
    """

    __tablename__ = "routes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Opaque route identifier assigned at creation",
    )

    # TEXT: the client picks the id, any length is accepted
    user_id: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Anonymous identifier of the owning client",
    )

    origin_address: Mapped[str] = mapped_column(
        String(MAX_ADDRESS_LENGTH),
        nullable=False,
        comment="Trimmed origin address",
    )

    destination_address: Mapped[str] = mapped_column(
        String(MAX_ADDRESS_LENGTH),
        nullable=False,
        comment="Trimmed destination address",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        comment="When this route was saved (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        comment="Last modification time (UTC)",
    )

    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "origin_address",
            "destination_address",
            name="uq_routes_user_origin_destination",
        ),
    )

    def __repr__(self) -> str:
        """Developer-friendly string representation for debugging."""
        return (
            f"<Route(id={self.id}, user_id='{self.user_id}', "
            f"origin='{self.origin_address}', destination='{self.destination_address}')>"
        )


Index("idx_routes_user_id_created_at", Route.user_id, Route.created_at.desc())
