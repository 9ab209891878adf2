"""
Naviga8 Backend - Route Service Unit Tests
============================================

What:  Tests for RouteService business logic (create, list, delete) and
       the address normalizer.
How:   Uses mock DB sessions (no real database).

What we test:
    ✅ Either address shape normalizes to a trimmed, capped string
    ✅ Missing fields raise ValidationError before touching the database
    ✅ Duplicate routes raise ConflictError (pre-check and unique constraint)
    ✅ Driver failures are wrapped in StoreError
    ✅ Delete is scoped by owner and reports NotFoundError
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy import Text
from sqlalchemy.exc import IntegrityError, OperationalError

from app.exceptions import ConflictError, NotFoundError, StoreError, ValidationError
from app.models.route import Route
from app.schemas.route import AddressPayload, normalize_address
from app.services.route_service import RouteService


def _result(scalar=None, rows=None, rowcount=None):
    result = MagicMock()
    result.scalar_one_or_none.return_value = scalar
    result.scalars.return_value.all.return_value = rows or []
    result.rowcount = rowcount
    return result


class TestNormalizeAddress:
    def test_string_is_trimmed(self):
        assert normalize_address("  Pune Station \n") == "Pune Station"

    def test_object_form_uses_address(self):
        assert normalize_address(AddressPayload(address=" Mumbai ")) == "Mumbai"

    def test_object_without_address_is_empty(self):
        assert normalize_address(AddressPayload()) == ""

    def test_none_is_empty(self):
        assert normalize_address(None) == ""

    def test_long_address_is_capped_after_trimming(self):
        raw = "   " + "a" * 250 + "   "
        assert normalize_address(raw) == "a" * 200


class TestRouteServiceCreate:
    """Tests for the create_route workflow."""

    def setup_method(self):
        self.service = RouteService(list_limit=50)

    @pytest.mark.asyncio
    async def test_create_route_success(self, mock_db_session):
        """New route is added, flushed and returned with normalized addresses."""
        mock_db_session.execute.return_value = _result(scalar=None)

        def fake_add(route):
            route.id = uuid.uuid4()
            route.created_at = route.updated_at = datetime.now(timezone.utc)

        mock_db_session.add.side_effect = fake_add

        result = await self.service.create_route(
            db=mock_db_session,
            user_id="user-1",
            origin="  Kyiv ",
            destination=AddressPayload(address=" Lviv  "),
        )

        assert result.user_id == "user-1"
        assert result.origin.address == "Kyiv"
        assert result.destination.address == "Lviv"
        mock_db_session.add.assert_called_once()
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "user_id, origin, destination, missing",
        [
            (None, "A", "B", ["userId"]),
            ("", "A", "B", ["userId"]),
            ("   ", "A", "B", ["userId"]),
            ("u1", None, "B", ["origin"]),
            ("u1", "A", None, ["destination"]),
            (None, None, None, ["userId", "origin", "destination"]),
        ],
    )
    async def test_missing_fields_rejected(self, mock_db_session, user_id, origin, destination, missing):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_route(mock_db_session, user_id, origin, destination)

        assert exc_info.value.message == "All fields are required"
        assert exc_info.value.context["missing"] == missing
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_blank_address_rejected(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_route(mock_db_session, "u1", "   ", AddressPayload())

        assert exc_info.value.context["missing"] == ["origin", "destination"]
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_route_conflicts(self, mock_db_session):
        """Existing (userId, origin, destination) → ConflictError, nothing added."""
        mock_db_session.execute.return_value = _result(scalar=uuid.uuid4())

        with pytest.raises(ConflictError):
            await self.service.create_route(mock_db_session, "u1", "A", "B")

        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_unique_constraint_violation_conflicts(self, mock_db_session):
        """A concurrent insert that wins the race surfaces as the same ConflictError."""
        mock_db_session.execute.return_value = _result(scalar=None)
        mock_db_session.flush.side_effect = IntegrityError(
            "INSERT INTO routes ...", {}, Exception("UNIQUE constraint failed")
        )

        with pytest.raises(ConflictError):
            await self.service.create_route(mock_db_session, "u1", "A", "B")

        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_driver_failure_becomes_store_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError(
            "SELECT ...", {}, Exception("connection refused")
        )

        with pytest.raises(StoreError) as exc_info:
            await self.service.create_route(mock_db_session, "u1", "A", "B")

        assert exc_info.value.message == "Failed to save route"
        assert exc_info.value.context == {"error_type": "OperationalError"}


class TestRouteServiceList:
    """Tests for list_routes."""

    def setup_method(self):
        self.service = RouteService(list_limit=50)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_id", [None, "", "   "])
    async def test_user_id_required(self, mock_db_session, user_id):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.list_routes(mock_db_session, user_id)

        assert exc_info.value.message == "User ID required"
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_routes_maps_rows(self, mock_db_session):
        rows = []
        for i in range(3):
            route = MagicMock()
            route.id = uuid.uuid4()
            route.user_id = "u1"
            route.origin_address = f"origin {i}"
            route.destination_address = f"destination {i}"
            route.created_at = route.updated_at = datetime.now(timezone.utc)
            rows.append(route)
        mock_db_session.execute.return_value = _result(rows=rows)

        result = await self.service.list_routes(mock_db_session, "u1")

        assert [r.origin.address for r in result] == ["origin 0", "origin 1", "origin 2"]
        mock_db_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_failure_becomes_store_error(self, mock_db_session):
        mock_db_session.execute.side_effect = RuntimeError("boom")

        with pytest.raises(StoreError):
            await self.service.list_routes(mock_db_session, "u1")


class TestRouteServiceDelete:
    """Tests for delete_route."""

    def setup_method(self):
        self.service = RouteService(list_limit=50)

    @pytest.mark.asyncio
    async def test_delete_owned_route(self, mock_db_session):
        route_id = str(uuid.uuid4())
        mock_db_session.execute.return_value = _result(rowcount=1)

        result = await self.service.delete_route(mock_db_session, route_id, "u1")

        assert result.msg == "Route deleted successfully"
        assert result.id == route_id

    @pytest.mark.asyncio
    async def test_delete_without_match_is_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = _result(rowcount=0)

        with pytest.raises(NotFoundError):
            await self.service.delete_route(mock_db_session, str(uuid.uuid4()), "someone-else")

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found(self, mock_db_session):
        with pytest.raises(NotFoundError):
            await self.service.delete_route(mock_db_session, "not-a-uuid", "u1")

        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_requires_user_id(self, mock_db_session):
        with pytest.raises(ValidationError):
            await self.service.delete_route(mock_db_session, str(uuid.uuid4()), None)


class TestRouteModel:
    def test_user_id_has_no_length_limit(self):
        """Client-chosen ids of any length must not fail inside the store."""
        column_type = Route.__table__.c.user_id.type

        assert isinstance(column_type, Text)
        assert column_type.length is None
