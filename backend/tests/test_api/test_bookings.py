"""Tests for booking endpoints: creation, edits, lifecycle, and cancellation."""

import uuid
from datetime import date, timedelta

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

MONDAY = date(2030, 6, 3)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _booking_payload(property_id: str, check_in: date = MONDAY, nights: int = 2, **overrides) -> dict:
    payload = {
        "property_id": property_id,
        "guest_name": "Bola Ade",
        "guest_email": f"bola-{uuid.uuid4().hex[:8]}@test.com",
        "guest_phone": "+2348021234567",
        "check_in": check_in.isoformat(),
        "check_out": (check_in + timedelta(days=nights)).isoformat(),
        "number_of_guests": 2,
    }
    payload.update(overrides)
    return payload


async def _create(client: AsyncClient, property_id: str, **kwargs) -> dict:
    response = await client.post("/api/v1/bookings", json=_booking_payload(property_id, **kwargs))
    assert response.status_code == 201, response.text
    return response.json()


# ---------------------------------------------------------------------------
# POST /api/v1/bookings
# ---------------------------------------------------------------------------


class TestCreateBooking:
    """Tests for creating bookings."""

    async def test_create_success(self, client: AsyncClient, test_property: dict) -> None:
        response = await client.post(
            "/api/v1/bookings",
            json=_booking_payload(test_property["id"], special_requests="Late check-in around 10pm"),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["property_id"] == test_property["id"]
        assert data["status"] == "pending"
        assert data["payment_status"] == "unpaid"
        assert data["number_of_nights"] == 2
        assert float(data["base_amount"]) == 130000.00
        assert float(data["service_fee"]) == 6500.00
        assert float(data["total_amount"]) == 141500.00
        assert data["special_requests"] == "Late check-in around 10pm"
        assert data["guest_id"] is not None

    async def test_client_cannot_set_price(self, client: AsyncClient, test_property: dict) -> None:
        response = await client.post(
            "/api/v1/bookings",
            json=_booking_payload(test_property["id"], total_amount=1, status="confirmed"),
        )
        assert response.status_code == 201
        data = response.json()
        assert float(data["total_amount"]) == 141500.00
        assert data["status"] == "pending"

    async def test_overlap_conflict(self, client: AsyncClient, test_property: dict) -> None:
        await _create(client, test_property["id"], nights=4)

        response = await client.post(
            "/api/v1/bookings",
            json=_booking_payload(test_property["id"], check_in=MONDAY + timedelta(days=3)),
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "Property is not available for selected dates"

    async def test_back_to_back(self, client: AsyncClient, test_property: dict) -> None:
        await _create(client, test_property["id"], nights=4)
        await _create(client, test_property["id"], check_in=MONDAY + timedelta(days=4))

    async def test_too_many_guests(self, client: AsyncClient, test_property: dict) -> None:
        response = await client.post(
            "/api/v1/bookings",
            json=_booking_payload(test_property["id"], number_of_guests=5),
        )
        assert response.status_code == 422

    async def test_invalid_dates(self, client: AsyncClient, test_property: dict) -> None:
        response = await client.post(
            "/api/v1/bookings",
            json=_booking_payload(test_property["id"], check_out=MONDAY.isoformat()),
        )
        assert response.status_code == 422

    async def test_invalid_email(self, client: AsyncClient, test_property: dict) -> None:
        response = await client.post(
            "/api/v1/bookings",
            json=_booking_payload(test_property["id"], guest_email="not-an-email"),
        )
        assert response.status_code == 422

    async def test_unknown_property(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/bookings", json=_booking_payload(str(uuid.uuid4())))
        assert response.status_code == 404

    async def test_inactive_property(self, client: AsyncClient, test_property: dict) -> None:
        await client.put(f"/api/v1/properties/{test_property['id']}", json={"is_active": False})
        response = await client.post("/api/v1/bookings", json=_booking_payload(test_property["id"]))
        assert response.status_code == 409

    async def test_reuses_existing_guest(self, client: AsyncClient, test_property: dict, test_guest: dict) -> None:
        booking = await _create(client, test_property["id"], guest_email=test_guest["email"])
        assert booking["guest_id"] == test_guest["id"]

        response = await client.get(f"/api/v1/guests/{test_guest['id']}")
        assert response.json()["total_bookings"] == 1


# ---------------------------------------------------------------------------
# GET /api/v1/bookings
# ---------------------------------------------------------------------------


class TestListBookings:
    async def test_filters(self, client: AsyncClient, test_property: dict) -> None:
        first = await _create(client, test_property["id"])
        second = await _create(client, test_property["id"], check_in=MONDAY + timedelta(days=10))
        await client.post(f"/api/v1/bookings/{second['id']}/confirm")

        response = await client.get("/api/v1/bookings", params={"property_id": test_property["id"]})
        assert response.status_code == 200
        assert response.json()["total"] == 2

        response = await client.get("/api/v1/bookings", params={"status": "confirmed"})
        assert [b["id"] for b in response.json()["items"]] == [second["id"]]

        response = await client.get("/api/v1/bookings", params={"guest_email": first["guest_email"]})
        assert [b["id"] for b in response.json()["items"]] == [first["id"]]

        response = await client.get(
            "/api/v1/bookings",
            params={"start_date": (MONDAY + timedelta(days=5)).isoformat()},
        )
        assert [b["id"] for b in response.json()["items"]] == [second["id"]]

    async def test_invalid_status_filter(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/bookings", params={"status": "archived"})
        assert response.status_code == 422

    async def test_pagination(self, client: AsyncClient, test_property: dict) -> None:
        for week in range(3):
            await _create(client, test_property["id"], check_in=MONDAY + timedelta(weeks=week))

        response = await client.get("/api/v1/bookings", params={"skip": 1, "limit": 1})
        data = response.json()
        assert data["total"] == 3
        assert len(data["items"]) == 1


# ---------------------------------------------------------------------------
# GET / PUT /api/v1/bookings/{id}
# ---------------------------------------------------------------------------


class TestBookingDetailAndUpdate:
    async def test_detail_includes_property(self, client: AsyncClient, test_property: dict) -> None:
        booking = await _create(client, test_property["id"])

        response = await client.get(f"/api/v1/bookings/{booking['id']}")
        assert response.status_code == 200
        assert response.json()["property"]["id"] == test_property["id"]

    async def test_detail_not_found(self, client: AsyncClient) -> None:
        response = await client.get(f"/api/v1/bookings/{uuid.uuid4()}")
        assert response.status_code == 404

    async def test_update_dates_reprices(self, client: AsyncClient, test_property: dict) -> None:
        booking = await _create(client, test_property["id"])

        response = await client.put(
            f"/api/v1/bookings/{booking['id']}",
            json={"check_out": (MONDAY + timedelta(days=3)).isoformat()},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["number_of_nights"] == 3
        assert float(data["base_amount"]) == 195000.00
        assert float(data["total_amount"]) == 209750.00

    async def test_update_into_other_booking(self, client: AsyncClient, test_property: dict) -> None:
        booking = await _create(client, test_property["id"])
        await _create(client, test_property["id"], check_in=MONDAY + timedelta(days=2))

        response = await client.put(
            f"/api/v1/bookings/{booking['id']}",
            json={"check_out": (MONDAY + timedelta(days=3)).isoformat()},
        )
        assert response.status_code == 409

    async def test_update_payment(self, client: AsyncClient, test_property: dict) -> None:
        booking = await _create(client, test_property["id"])

        response = await client.put(
            f"/api/v1/bookings/{booking['id']}",
            json={"payment_status": "paid", "payment_method": "transfer", "payment_reference": "TRX-0001"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["payment_status"] == "paid"
        assert data["payment_reference"] == "TRX-0001"

    async def test_update_cancelled_booking(self, client: AsyncClient, test_property: dict) -> None:
        booking = await _create(client, test_property["id"])
        await client.post(f"/api/v1/bookings/{booking['id']}/cancel")

        response = await client.put(f"/api/v1/bookings/{booking['id']}", json={"number_of_guests": 1})
        assert response.status_code == 409

    @pytest.mark.parametrize("field", ["guest_name", "guest_email", "check_in", "payment_status"])
    async def test_update_rejects_null_required_field(
        self, client: AsyncClient, test_property: dict, field: str
    ) -> None:
        booking = await _create(client, test_property["id"])

        response = await client.put(f"/api/v1/bookings/{booking['id']}", json={field: None})
        assert response.status_code == 422

        detail = await client.get(f"/api/v1/bookings/{booking['id']}")
        assert detail.json()["guest_name"] == "Bola Ade"

    async def test_update_email_moves_guest_history(self, client: AsyncClient, test_property: dict) -> None:
        booking = await _create(client, test_property["id"])
        new_email = f"moved-{uuid.uuid4().hex[:8]}@test.com"

        response = await client.put(f"/api/v1/bookings/{booking['id']}", json={"guest_email": new_email})
        assert response.status_code == 200
        data = response.json()
        assert data["guest_id"] != booking["guest_id"]

        old_history = await client.get(f"/api/v1/guests/{booking['guest_id']}/bookings")
        new_history = await client.get(f"/api/v1/guests/{data['guest_id']}/bookings")
        assert old_history.json()["total"] == 0
        assert [b["id"] for b in new_history.json()["items"]] == [booking["id"]]

        new_guest = await client.get(f"/api/v1/guests/{data['guest_id']}")
        assert new_guest.json()["email"] == new_email
        assert new_guest.json()["total_bookings"] == 1


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    async def test_confirm_check_in_check_out(self, client: AsyncClient, test_property: dict) -> None:
        booking = await _create(client, test_property["id"])

        for action, expected in (("confirm", "confirmed"), ("check-in", "checked-in"), ("check-out", "checked-out")):
            response = await client.post(f"/api/v1/bookings/{booking['id']}/{action}")
            assert response.status_code == 200, response.text
            assert response.json()["status"] == expected

        guest = await client.get(f"/api/v1/guests/{booking['guest_id']}")
        assert float(guest.json()["total_spent"]) == 141500.00

    async def test_check_in_requires_confirmation(self, client: AsyncClient, test_property: dict) -> None:
        booking = await _create(client, test_property["id"])

        response = await client.post(f"/api/v1/bookings/{booking['id']}/check-in")
        assert response.status_code == 409

    async def test_cancel_with_reason(self, client: AsyncClient, test_property: dict) -> None:
        booking = await _create(client, test_property["id"])

        response = await client.post(
            f"/api/v1/bookings/{booking['id']}/cancel",
            json={"reason": "Flight cancelled"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "cancelled"
        assert data["cancellation_reason"] == "Flight cancelled"
        assert data["cancelled_at"] is not None

    async def test_cancel_twice(self, client: AsyncClient, test_property: dict) -> None:
        booking = await _create(client, test_property["id"])
        await client.post(f"/api/v1/bookings/{booking['id']}/cancel")

        response = await client.post(f"/api/v1/bookings/{booking['id']}/cancel")
        assert response.status_code == 409

    async def test_transition_unknown_booking(self, client: AsyncClient) -> None:
        response = await client.post(f"/api/v1/bookings/{uuid.uuid4()}/confirm")
        assert response.status_code == 404


# ---------------------------------------------------------------------------
# DELETE /api/v1/bookings/{id}
# ---------------------------------------------------------------------------


class TestDeleteBooking:
    async def test_delete_is_soft_cancel(self, client: AsyncClient, test_property: dict) -> None:
        booking = await _create(client, test_property["id"])

        response = await client.delete(f"/api/v1/bookings/{booking['id']}")
        assert response.status_code == 200
        assert response.json()["message"] == "Booking cancelled"

        detail = await client.get(f"/api/v1/bookings/{booking['id']}")
        assert detail.status_code == 200
        assert detail.json()["status"] == "cancelled"
        assert detail.json()["cancellation_reason"] == "Cancelled by user"

    async def test_delete_frees_dates(self, client: AsyncClient, test_property: dict) -> None:
        booking = await _create(client, test_property["id"])
        await client.delete(f"/api/v1/bookings/{booking['id']}")

        await _create(client, test_property["id"])

    async def test_delete_not_found(self, client: AsyncClient) -> None:
        response = await client.delete(f"/api/v1/bookings/{uuid.uuid4()}")
        assert response.status_code == 404
