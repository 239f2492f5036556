"""Tests for guest CRUD endpoints."""

import uuid
from datetime import date, timedelta

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _unique_email() -> str:
    return f"guest-{uuid.uuid4().hex[:8]}@test.com"


# ---------------------------------------------------------------------------
# POST /api/v1/guests
# ---------------------------------------------------------------------------


class TestCreateGuest:
    """Tests for creating guests."""

    async def test_create_success(self, client: AsyncClient) -> None:
        email = _unique_email()
        response = await client.post(
            "/api/v1/guests",
            json={
                "name": "Yemi Alade",
                "email": email,
                "phone": "+2348087654321",
                "nationality": "Nigerian",
                "id_type": "national_id",
                "notes": "Prefers a high floor",
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Yemi Alade"
        assert data["email"] == email
        assert data["id_type"] == "national_id"
        assert data["notes"] == "Prefers a high floor"
        assert data["total_bookings"] == 0
        assert float(data["total_spent"]) == 0
        assert data["is_blacklisted"] is False

    async def test_create_requires_phone(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/guests", json={"name": "No Phone", "email": _unique_email()})
        assert response.status_code == 422

    async def test_create_invalid_id_type(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/guests",
            json={"name": "Bad Id", "email": _unique_email(), "phone": "+2348000000001", "id_type": "library_card"},
        )
        assert response.status_code == 422

    async def test_create_duplicate_email(self, client: AsyncClient, test_guest: dict) -> None:
        response = await client.post(
            "/api/v1/guests",
            json={"name": "Second Guest", "email": test_guest["email"], "phone": "+2348000000002"},
        )
        assert response.status_code == 409
        assert "already exists" in response.json()["detail"].lower()


# ---------------------------------------------------------------------------
# GET /api/v1/guests
# ---------------------------------------------------------------------------


class TestListGuests:
    async def test_search(self, client: AsyncClient, test_guest: dict) -> None:
        response = await client.get("/api/v1/guests", params={"search": "test gu"})
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["id"] == test_guest["id"]

        response = await client.get("/api/v1/guests", params={"search": "nobody"})
        assert response.json()["total"] == 0

    async def test_blacklisted_filter(self, client: AsyncClient, test_guest: dict) -> None:
        await client.put(
            f"/api/v1/guests/{test_guest['id']}",
            json={"is_blacklisted": True, "blacklist_reason": "Damaged furniture"},
        )

        response = await client.get("/api/v1/guests", params={"blacklisted": True})
        assert [g["id"] for g in response.json()["items"]] == [test_guest["id"]]

        response = await client.get("/api/v1/guests", params={"blacklisted": False})
        assert response.json()["total"] == 0


# ---------------------------------------------------------------------------
# GET / PUT / DELETE /api/v1/guests/{id}
# ---------------------------------------------------------------------------


class TestGuestDetail:
    async def test_get(self, client: AsyncClient, test_guest: dict) -> None:
        response = await client.get(f"/api/v1/guests/{test_guest['id']}")
        assert response.status_code == 200
        assert response.json()["email"] == test_guest["email"]

    async def test_get_not_found(self, client: AsyncClient) -> None:
        response = await client.get(f"/api/v1/guests/{uuid.uuid4()}")
        assert response.status_code == 404

    async def test_update(self, client: AsyncClient, test_guest: dict) -> None:
        response = await client.put(
            f"/api/v1/guests/{test_guest['id']}",
            json={"phone": "+2348099999999", "notes": "Returning guest"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["phone"] == "+2348099999999"
        assert data["notes"] == "Returning guest"
        assert data["name"] == test_guest["name"]

    async def test_update_email_taken(self, client: AsyncClient, test_guest: dict) -> None:
        other = await client.post(
            "/api/v1/guests",
            json={"name": "Other Guest", "email": _unique_email(), "phone": "+2348000000003"},
        )
        response = await client.put(
            f"/api/v1/guests/{other.json()['id']}",
            json={"email": test_guest["email"]},
        )
        assert response.status_code == 409

    @pytest.mark.parametrize("field", ["name", "email", "phone", "is_blacklisted"])
    async def test_update_rejects_null_required_field(
        self, client: AsyncClient, test_guest: dict, field: str
    ) -> None:
        response = await client.put(f"/api/v1/guests/{test_guest['id']}", json={field: None})
        assert response.status_code == 422

    async def test_delete_keeps_bookings(self, client: AsyncClient, test_guest: dict, test_property: dict) -> None:
        check_in = date(2030, 6, 3)
        booking = await client.post(
            "/api/v1/bookings",
            json={
                "property_id": test_property["id"],
                "guest_name": test_guest["name"],
                "guest_email": test_guest["email"],
                "guest_phone": test_guest["phone"],
                "check_in": check_in.isoformat(),
                "check_out": (check_in + timedelta(days=2)).isoformat(),
            },
        )
        assert booking.status_code == 201

        response = await client.delete(f"/api/v1/guests/{test_guest['id']}")
        assert response.status_code == 200
        assert response.json()["message"] == "Guest deleted"

        detail = await client.get(f"/api/v1/bookings/{booking.json()['id']}")
        assert detail.status_code == 200
        assert detail.json()["guest_id"] is None
        assert detail.json()["guest_email"] == test_guest["email"]

    async def test_delete_removes_messages(self, client: AsyncClient, test_guest: dict) -> None:
        sent = await client.post(
            f"/api/v1/communications/messages/{test_guest['id']}",
            json={"subject": "Welcome", "message": "Your host will meet you at the gate."},
        )
        assert sent.status_code == 201

        response = await client.delete(f"/api/v1/guests/{test_guest['id']}")
        assert response.status_code == 200

        response = await client.get(f"/api/v1/communications/messages/{test_guest['id']}")
        assert response.status_code == 404


class TestGuestBookings:
    async def test_history(self, client: AsyncClient, test_guest: dict, test_property: dict) -> None:
        for offset in (0, 14):
            check_in = date(2030, 6, 3) + timedelta(days=offset)
            response = await client.post(
                "/api/v1/bookings",
                json={
                    "property_id": test_property["id"],
                    "guest_name": test_guest["name"],
                    "guest_email": test_guest["email"],
                    "guest_phone": test_guest["phone"],
                    "check_in": check_in.isoformat(),
                    "check_out": (check_in + timedelta(days=3)).isoformat(),
                },
            )
            assert response.status_code == 201

        response = await client.get(f"/api/v1/guests/{test_guest['id']}/bookings")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["items"][0]["check_in"] == "2030-06-17"
