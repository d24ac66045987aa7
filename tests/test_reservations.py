"""Tests for reservation holds"""

from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import select, func

from app.models.notification import Notification
from app.models.reservation import Reservation, ReservationStatus
from app.services import reservations as reservation_service

CHECK_IN = "2026-03-01T00:00:00"
CHECK_OUT = "2026-03-03T00:00:00"


def _reservation_payload(room_type_id, **overrides):
    payload = {
        "room_type_id": str(room_type_id),
        "check_in_date": CHECK_IN,
        "check_out_date": CHECK_OUT,
        "adults_count": 2,
        "children_count": 0,
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_create_reservation_prices_deluxe_stay(
    test_db, test_guest, deluxe_type, deluxe_rooms, guest_client: AsyncClient
):
    """Deluxe at $100 with 10% off for two nights: 90 / 180 / 27 / 207"""
    before = datetime.utcnow()
    response = await guest_client.post("/reservations", json=_reservation_payload(deluxe_type.id))
    after = datetime.utcnow()

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["reservation_code"].startswith("RES-")
    assert data["guests"] == 2
    assert data["room_type_name"] == "Deluxe"
    assert data["subtotal_amount"] == 180
    assert data["tax_amount"] == 27
    assert data["total_amount"] == 207

    line = data["reserved_rooms"][0]
    assert line["room_number"] == "201"
    assert line["price_per_night"] == 90
    assert line["nights"] == 2
    assert line["subtotal"] == 180

    expires_at = datetime.fromisoformat(data["expires_at"])
    assert before + timedelta(minutes=15) <= expires_at + timedelta(seconds=1)
    assert expires_at <= after + timedelta(minutes=15)

    # Guest is told about the hold once the reservation is committed
    result = await test_db.execute(
        select(func.count(Notification.id)).where(Notification.recipient_id == test_guest.id)
    )
    assert result.scalar() == 1


@pytest.mark.asyncio
async def test_second_hold_takes_next_room_then_runs_out(
    deluxe_type, deluxe_rooms, client: AsyncClient, guest_headers, other_guest_headers
):
    first = await client.post("/reservations", json=_reservation_payload(deluxe_type.id), headers=guest_headers)
    second = await client.post(
        "/reservations", json=_reservation_payload(deluxe_type.id), headers=other_guest_headers
    )
    third = await client.post("/reservations", json=_reservation_payload(deluxe_type.id), headers=guest_headers)

    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["reserved_rooms"][0]["room_number"] == "201"
    assert second.json()["reserved_rooms"][0]["room_number"] == "202"

    assert third.status_code == 400
    assert third.json()["message"] == "No Deluxe rooms are available for these dates."


@pytest.mark.asyncio
async def test_create_reservation_validation(deluxe_type, deluxe_rooms, guest_client: AsyncClient):
    backwards = await guest_client.post(
        "/reservations",
        json=_reservation_payload(deluxe_type.id, check_in_date=CHECK_OUT, check_out_date=CHECK_IN),
    )
    assert backwards.status_code == 400
    assert backwards.json()["message"] == "Check-out date must be after check-in date"

    no_adults = await guest_client.post(
        "/reservations", json=_reservation_payload(deluxe_type.id, adults_count=0)
    )
    assert no_adults.status_code == 400
    assert "adults_count" in no_adults.json()["message"]

    missing_dates = await guest_client.post(
        "/reservations", json={"room_type_id": str(deluxe_type.id), "adults_count": 1}
    )
    assert missing_dates.status_code == 400


@pytest.mark.asyncio
async def test_unknown_room_type_is_not_found(deluxe_rooms, guest_client: AsyncClient):
    from uuid import uuid4

    response = await guest_client.post("/reservations", json=_reservation_payload(uuid4()))
    assert response.status_code == 404
    assert response.json()["message"] == "Room type not found"


@pytest.mark.asyncio
async def test_reservations_require_authentication(deluxe_type, client: AsyncClient):
    response = await client.post("/reservations", json=_reservation_payload(deluxe_type.id))
    assert response.status_code == 401
    assert "message" in response.json()


@pytest.mark.asyncio
async def test_lapsed_hold_reads_as_expired_before_sweep(
    test_db, test_guest, deluxe_type, deluxe_rooms, guest_client: AsyncClient
):
    stale = await reservation_service.create_reservation(
        test_db,
        guest_id=test_guest.id,
        room_type_id=deluxe_type.id,
        check_in=datetime(2026, 3, 1),
        check_out=datetime(2026, 3, 3),
        adults=1,
        now=datetime.utcnow() - timedelta(hours=1),
    )
    stale_id = stale.id

    response = await guest_client.get("/reservations/my")
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["status"] == "expired"

    # Nothing persisted yet
    result = await test_db.execute(select(Reservation.status).where(Reservation.id == stale_id))
    assert result.scalar_one() == ReservationStatus.PENDING

    # The lapsed hold no longer blocks room 201
    fresh = await guest_client.post("/reservations", json=_reservation_payload(deluxe_type.id))
    assert fresh.status_code == 201
    assert fresh.json()["reserved_rooms"][0]["room_number"] == "201"


@pytest.mark.asyncio
async def test_sweep_persists_expiry_and_is_idempotent(test_db, test_guest, deluxe_type, deluxe_rooms):
    now = datetime.utcnow()
    stale = await reservation_service.create_reservation(
        test_db, test_guest.id, deluxe_type.id, datetime(2026, 3, 1), datetime(2026, 3, 3), 1,
        now=now - timedelta(minutes=20),
    )
    live = await reservation_service.create_reservation(
        test_db, test_guest.id, deluxe_type.id, datetime(2026, 3, 1), datetime(2026, 3, 3), 1,
        now=now,
    )
    stale_id, live_id = stale.id, live.id

    assert await reservation_service.expire_stale_reservations(test_db, now=now) == 1
    assert await reservation_service.expire_stale_reservations(test_db, now=now) == 0

    result = await test_db.execute(
        select(Reservation.id, Reservation.status).where(Reservation.id.in_([stale_id, live_id]))
    )
    statuses = dict(result.all())
    assert statuses[stale_id] == ReservationStatus.EXPIRED
    assert statuses[live_id] == ReservationStatus.PENDING


@pytest.mark.asyncio
async def test_guest_can_cancel_own_pending_hold(
    deluxe_type, deluxe_rooms, client: AsyncClient, guest_headers, other_guest_headers
):
    created = await client.post("/reservations", json=_reservation_payload(deluxe_type.id), headers=guest_headers)
    reservation_id = created.json()["id"]

    foreign = await client.post(f"/reservations/{reservation_id}/cancel", headers=other_guest_headers)
    assert foreign.status_code == 404

    cancelled = await client.post(f"/reservations/{reservation_id}/cancel", headers=guest_headers)
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"

    again = await client.post(f"/reservations/{reservation_id}/cancel", headers=guest_headers)
    assert again.status_code == 400
    assert again.json()["message"] == "Cannot change reservation status from cancelled to cancelled"


@pytest.mark.asyncio
async def test_staff_lists_and_filters_reservations(
    test_db, test_guest, deluxe_type, deluxe_rooms, client: AsyncClient, guest_headers, staff_headers
):
    await reservation_service.create_reservation(
        test_db, test_guest.id, deluxe_type.id, datetime(2026, 3, 1), datetime(2026, 3, 3), 1,
        now=datetime.utcnow() - timedelta(hours=1),
    )
    await client.post("/reservations", json=_reservation_payload(deluxe_type.id), headers=guest_headers)

    forbidden = await client.get("/reservations", headers=guest_headers)
    assert forbidden.status_code == 403

    everything = await client.get("/reservations", headers=staff_headers)
    assert everything.status_code == 200
    assert len(everything.json()) == 2

    expired = await client.get("/reservations", params={"status": "expired"}, headers=staff_headers)
    assert [r["status"] for r in expired.json()] == ["expired"]

    pending = await client.get("/reservations", params={"status": "pending"}, headers=staff_headers)
    assert [r["status"] for r in pending.json()] == ["pending"]


@pytest.mark.asyncio
async def test_staff_status_override_follows_lifecycle(
    deluxe_type, deluxe_rooms, client: AsyncClient, guest_headers, staff_headers
):
    created = await client.post("/reservations", json=_reservation_payload(deluxe_type.id), headers=guest_headers)
    reservation_id = created.json()["id"]

    confirmed = await client.patch(
        f"/reservations/{reservation_id}/status", json={"status": "confirmed"}, headers=staff_headers
    )
    assert confirmed.status_code == 200
    assert confirmed.json()["status"] == "confirmed"

    reopened = await client.patch(
        f"/reservations/{reservation_id}/status", json={"status": "pending"}, headers=staff_headers
    )
    assert reopened.status_code == 400
    assert reopened.json()["message"] == "Cannot change reservation status from confirmed to pending"
