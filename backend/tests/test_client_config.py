"""
Naviga8 Backend - Client Bootstrap Tests
==========================================

What:  GET /api/google-key, GET /api/user-id and the IdentityService behind it.
"""

import re

import pytest

from app.config import settings
from app.services.identity_service import IdentityService, to_base36


class TestGoogleKey:

    @pytest.mark.asyncio
    async def test_unset_key_is_500(self, test_client, monkeypatch):
        monkeypatch.setattr(settings, "google_maps_api_key", "")

        response = await test_client.get("/api/google-key")

        assert response.status_code == 500
        assert response.json()["error"] == "configuration_error"
        assert response.json()["message"] == "API key not configured"

    @pytest.mark.asyncio
    async def test_blank_key_is_500(self, test_client, monkeypatch):
        monkeypatch.setattr(settings, "google_maps_api_key", "   ")

        response = await test_client.get("/api/google-key")

        assert response.status_code == 500

    @pytest.mark.asyncio
    async def test_configured_key_is_returned_exactly(self, test_client, monkeypatch):
        monkeypatch.setattr(settings, "google_maps_api_key", "AIza-test-key_123")

        response = await test_client.get("/api/google-key")

        assert response.status_code == 200
        assert response.json() == {"key": "AIza-test-key_123"}


class TestUserId:

    @pytest.mark.asyncio
    async def test_two_calls_return_different_ids(self, test_client):
        first = await test_client.get("/api/user-id")
        second = await test_client.get("/api/user-id")

        assert first.status_code == 200
        assert set(first.json()) == {"userId"}
        assert first.json()["userId"] != second.json()["userId"]

    def test_format_is_random_part_then_timestamp(self):
        service = IdentityService(clock=lambda: 1_700_000_000.123)

        user_id = service.generate_user_id()

        assert re.fullmatch(r"[0-9a-z]+", user_id)
        assert user_id.endswith(to_base36(1_700_000_000_123))
        assert len(user_id) == 9 + len(to_base36(1_700_000_000_123))

    def test_same_clock_still_differs(self):
        service = IdentityService(clock=lambda: 0.0)

        ids = {service.generate_user_id() for _ in range(20)}

        assert len(ids) == 20


class TestBase36:

    @pytest.mark.parametrize(
        "value, expected",
        [(0, "0"), (35, "z"), (36, "10"), (1295, "zz"), (1_700_000_000_123, "loyw3v5n")],
    )
    def test_known_values(self, value, expected):
        assert to_base36(value) == expected

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            to_base36(-1)
