"""
Tests for booking endpoints.
"""

from datetime import time, timedelta

import pytest
from httpx import AsyncClient

from app.models.booking import BookingStatus

from conftest import BOOKING_DAY


@pytest.mark.asyncio
async def test_create_booking(client: AsyncClient, booking_payload):
    """Public booking is created pending with joined display names."""
    response = await client.post("/api/v1/bookings", json=booking_payload)

    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Booking created successfully"
    booking = data["booking"]
    assert booking["status"] == "pending"
    assert booking["coach_id"] == booking_payload["coach_id"]
    assert booking["booking_date"] == BOOKING_DAY.isoformat()
    assert booking["start_time"] == "10:00:00"
    assert booking["end_time"] == "11:00:00"
    assert booking["coach_name"] == "Rahul Menon"
    assert booking["program_title"] == "Junior Batting Camp"
    assert booking["student_name"] == "Arjun Rao"


@pytest.mark.asyncio
async def test_create_booking_conflict(client: AsyncClient, booking_payload):
    """Overlapping request for the same coach returns 409."""
    first = await client.post("/api/v1/bookings", json=booking_payload)
    assert first.status_code == 201

    overlapping = {**booking_payload, "start_time": "10:30:00", "end_time": "11:30:00"}
    response = await client.post("/api/v1/bookings", json=overlapping)

    assert response.status_code == 409
    body = response.json()
    assert body["message"] == "Time slot is already booked"
    assert body["error"] == "Conflict"


@pytest.mark.asyncio
async def test_back_to_back_bookings_allowed(client: AsyncClient, booking_payload):
    await client.post("/api/v1/bookings", json=booking_payload)

    following = {**booking_payload, "start_time": "11:00:00", "end_time": "12:00:00"}
    response = await client.post("/api/v1/bookings", json=following)

    assert response.status_code == 201


@pytest.mark.asyncio
async def test_same_slot_with_other_coach_allowed(client: AsyncClient, booking_payload, other_coach):
    await client.post("/api/v1/bookings", json=booking_payload)

    response = await client.post(
        "/api/v1/bookings", json={**booking_payload, "coach_id": other_coach.id}
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_rebook_after_cancellation(client: AsyncClient, booking_payload):
    created = await client.post("/api/v1/bookings", json=booking_payload)
    booking_id = created.json()["booking"]["id"]

    await client.delete(f"/api/v1/bookings/{booking_id}")

    response = await client.post("/api/v1/bookings", json=booking_payload)
    assert response.status_code == 201


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["student_id", "program_id", "coach_id", "booking_date", "start_time", "end_time"])
async def test_create_booking_missing_field(client: AsyncClient, booking_payload, missing):
    payload = {k: v for k, v in booking_payload.items() if k != missing}

    response = await client.post("/api/v1/bookings", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "ValidationError"
    assert missing in body["message"]


@pytest.mark.asyncio
async def test_create_booking_end_before_start(client: AsyncClient, booking_payload):
    payload = {**booking_payload, "start_time": "12:00:00", "end_time": "11:00:00"}

    response = await client.post("/api/v1/bookings", json=payload)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_booking_rejects_utc_offset_times(client: AsyncClient, booking_payload):
    """Offset times cannot be compared with stored wall-clock times."""
    first = await client.post("/api/v1/bookings", json=booking_payload)
    assert first.status_code == 201

    response = await client.post(
        "/api/v1/bookings",
        json={**booking_payload, "start_time": "12:00:00+05:30", "end_time": "13:00:00+05:30"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "ValidationError"
    assert "UTC offset" in body["message"]


@pytest.mark.asyncio
async def test_create_booking_with_deactivated_coach(client: AsyncClient, admin_headers, booking_payload):
    await client.delete(f"/api/v1/coaches/{booking_payload['coach_id']}", headers=admin_headers)

    response = await client.post("/api/v1/bookings", json=booking_payload)

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidState"


@pytest.mark.asyncio
async def test_create_booking_unknown_student(client: AsyncClient, booking_payload):
    response = await client.post("/api/v1/bookings", json={**booking_payload, "student_id": 9999})

    assert response.status_code == 404
    assert response.json()["message"] == "Student not found"


@pytest.mark.asyncio
async def test_available_slots(client: AsyncClient, test_coach):
    response = await client.get(
        "/api/v1/bookings/available-slots",
        params={"coach_id": test_coach.id, "date": BOOKING_DAY.isoformat()},
    )

    assert response.status_code == 200
    slots = response.json()["availableSlots"]
    assert len(slots) == 9
    assert slots[0] == {"start_time": "09:00:00", "end_time": "10:00:00"}
    assert slots[-1] == {"start_time": "17:00:00", "end_time": "18:00:00"}


@pytest.mark.asyncio
async def test_available_slots_after_booking(client: AsyncClient, booking_payload, test_coach):
    await client.post("/api/v1/bookings", json=booking_payload)

    response = await client.get(
        "/api/v1/bookings/available-slots",
        params={"coach_id": test_coach.id, "date": BOOKING_DAY.isoformat()},
    )

    starts = [s["start_time"] for s in response.json()["availableSlots"]]
    assert len(starts) == 8
    assert "10:00:00" not in starts


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"coach_id": 1}, {"date": "2026-11-02"}, {}])
async def test_available_slots_missing_params(client: AsyncClient, params):
    response = await client.get("/api/v1/bookings/available-slots", params=params)

    assert response.status_code == 400
    assert response.json()["message"] == "Coach ID and date are required"


@pytest.mark.asyncio
async def test_list_bookings_requires_admin(client: AsyncClient):
    response = await client.get("/api/v1/bookings")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_bookings_order_and_pagination(client: AsyncClient, admin_headers, make_booking):
    later_day = BOOKING_DAY + timedelta(days=1)
    await make_booking(time(14), time(15))
    await make_booking(time(9), time(10))
    await make_booking(time(11), time(12), booking_date=later_day)

    response = await client.get("/api/v1/bookings", params={"limit": 2}, headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}
    assert [(b["booking_date"], b["start_time"]) for b in data["bookings"]] == [
        (later_day.isoformat(), "11:00:00"),
        (BOOKING_DAY.isoformat(), "09:00:00"),
    ]

    page_two = await client.get(
        "/api/v1/bookings", params={"limit": 2, "page": 2}, headers=admin_headers
    )
    assert [b["start_time"] for b in page_two.json()["bookings"]] == ["14:00:00"]


@pytest.mark.asyncio
async def test_list_bookings_filters(client: AsyncClient, admin_headers, make_booking):
    await make_booking(time(9), time(10), status=BookingStatus.CONFIRMED.value)
    await make_booking(time(10), time(11), status=BookingStatus.CANCELLED.value)
    await make_booking(time(9), time(10), booking_date=BOOKING_DAY + timedelta(days=3))

    by_status = await client.get(
        "/api/v1/bookings", params={"status": "confirmed"}, headers=admin_headers
    )
    assert [b["status"] for b in by_status.json()["bookings"]] == ["confirmed"]

    by_date = await client.get(
        "/api/v1/bookings", params={"date": BOOKING_DAY.isoformat()}, headers=admin_headers
    )
    assert by_date.json()["pagination"]["total"] == 2


@pytest.mark.asyncio
async def test_get_booking(client: AsyncClient, admin_headers, make_booking):
    booking = await make_booking(time(9), time(10))

    response = await client.get(f"/api/v1/bookings/{booking.id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["booking"]["id"] == booking.id


@pytest.mark.asyncio
async def test_get_booking_not_found(client: AsyncClient, admin_headers):
    response = await client.get("/api/v1/bookings/99999", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_booking_status_and_notes(client: AsyncClient, admin_headers, make_booking):
    booking = await make_booking(time(9), time(10))

    response = await client.put(
        f"/api/v1/bookings/{booking.id}",
        json={"status": "confirmed", "notes": "Bring own bat"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    updated = response.json()["booking"]
    assert updated["status"] == "confirmed"
    assert updated["notes"] == "Bring own bat"


@pytest.mark.asyncio
async def test_update_notes_only_keeps_status(client: AsyncClient, admin_headers, make_booking):
    booking = await make_booking(time(9), time(10), status=BookingStatus.CONFIRMED.value)

    response = await client.put(
        f"/api/v1/bookings/{booking.id}", json={"notes": "Moved to net 3"}, headers=admin_headers
    )

    assert response.json()["booking"]["status"] == "confirmed"


@pytest.mark.asyncio
async def test_update_illegal_transition(client: AsyncClient, admin_headers, make_booking):
    booking = await make_booking(time(9), time(10), status=BookingStatus.CANCELLED.value)

    response = await client.put(
        f"/api/v1/bookings/{booking.id}", json={"status": "confirmed"}, headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidState"


@pytest.mark.asyncio
async def test_update_unknown_status_value(client: AsyncClient, admin_headers, make_booking):
    booking = await make_booking(time(9), time(10))

    response = await client.put(
        f"/api/v1/bookings/{booking.id}", json={"status": "archived"}, headers=admin_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_booking_not_found(client: AsyncClient, admin_headers):
    response = await client.put(
        "/api/v1/bookings/99999", json={"status": "confirmed"}, headers=admin_headers
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_booking_requires_admin(client: AsyncClient, make_booking):
    booking = await make_booking(time(9), time(10))

    response = await client.put(f"/api/v1/bookings/{booking.id}", json={"status": "confirmed"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_cancel_booking(client: AsyncClient, make_booking):
    booking = await make_booking(time(9), time(10))

    response = await client.delete(f"/api/v1/bookings/{booking.id}")

    assert response.status_code == 200
    assert response.json() == {
        "message": "Booking cancelled successfully",
        "booking_id": booking.id,
        "status": "cancelled",
    }


@pytest.mark.asyncio
async def test_cancel_via_patch_route(client: AsyncClient, make_booking):
    booking = await make_booking(time(9), time(10))

    response = await client.patch(f"/api/v1/bookings/{booking.id}/cancel")

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"


@pytest.mark.asyncio
async def test_cancel_completed_booking(client: AsyncClient, admin_headers, make_booking):
    booking = await make_booking(time(9), time(10), status=BookingStatus.COMPLETED.value)

    response = await client.delete(f"/api/v1/bookings/{booking.id}")

    assert response.status_code == 400
    assert response.json()["message"] == "Cannot cancel completed booking"

    detail = await client.get(f"/api/v1/bookings/{booking.id}", headers=admin_headers)
    assert detail.json()["booking"]["status"] == "completed"


@pytest.mark.asyncio
async def test_cancel_booking_not_found(client: AsyncClient):
    response = await client.delete("/api/v1/bookings/99999")
    assert response.status_code == 404
