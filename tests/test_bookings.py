"""Tests for booking creation and lifecycle"""

from datetime import datetime, timedelta
from uuid import UUID

import pytest
from httpx import AsyncClient
from sqlalchemy import select, func

from app.models.booking import Booking
from app.models.housekeeping import HousekeepingTask
from app.models.payment import Payment, PaymentStatus
from app.models.reservation import Reservation, ReservationStatus
from app.models.room import Room, RoomStatus
from app.services import reservations as reservation_service

CHECK_IN = "2026-03-01T00:00:00"
CHECK_OUT = "2026-03-03T00:00:00"


async def _reserve(client, room_type_id, headers):
    response = await client.post(
        "/reservations",
        json={
            "room_type_id": str(room_type_id),
            "check_in_date": CHECK_IN,
            "check_out_date": CHECK_OUT,
            "adults_count": 2,
        },
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


async def _book(client, reservation, headers, total_price=207, payment_method="Card"):
    return await client.post(
        "/bookings",
        json={
            "reservation_id": reservation["id"],
            "total_price": total_price,
            "payment_method": payment_method,
        },
        headers=headers,
    )


async def _count(db, column, *criteria):
    result = await db.execute(select(func.count(column)).where(*criteria))
    return result.scalar()


@pytest.mark.asyncio
async def test_card_booking_confirms_reservation_and_reserves_room(
    test_db, deluxe_type, deluxe_rooms, client: AsyncClient, guest_headers
):
    reservation = await _reserve(client, deluxe_type.id, guest_headers)

    response = await _book(client, reservation, guest_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "confirmed"
    assert data["booking_code"].startswith("BK-")
    assert data["reservation_id"] == reservation["id"]
    assert data["total_price"] == 207
    assert data["subtotal_amount"] == 180
    assert data["tax_amount"] == 27
    assert data["booked_rooms"][0]["room_number"] == "201"
    assert data["payment"]["status"] == "completed"
    assert data["payment"]["payment_method"] == "Card"
    assert data["payment"]["amount"] == 207
    assert data["payment"]["transaction_id"].startswith("TXN-")
    assert data["payment_id"] == data["payment"]["id"]

    result = await test_db.execute(select(Reservation.status).where(Reservation.id == UUID(reservation["id"])))
    assert result.scalar_one() == ReservationStatus.CONFIRMED

    result = await test_db.execute(select(Room.status).where(Room.id == deluxe_rooms[0].id))
    assert result.scalar_one() == RoomStatus.RESERVED


@pytest.mark.asyncio
async def test_cash_booking_waits_for_front_desk(
    deluxe_type, deluxe_rooms, client: AsyncClient, guest_headers, staff_headers
):
    reservation = await _reserve(client, deluxe_type.id, guest_headers)
    created = await _book(client, reservation, guest_headers, payment_method="Cash")

    assert created.status_code == 201
    booking = created.json()
    assert booking["status"] == "confirmed_unpaid"
    assert booking["payment"]["status"] == "pending"
    assert booking["payment"]["transaction_id"] is None

    not_allowed = await client.post(f"/bookings/{booking['id']}/confirm-payment", headers=guest_headers)
    assert not_allowed.status_code == 403

    paid = await client.post(f"/bookings/{booking['id']}/confirm-payment", headers=staff_headers)
    assert paid.status_code == 200
    data = paid.json()
    assert data["message"] == "Payment confirmed successfully"
    assert data["booking"]["status"] == "confirmed"
    assert data["booking"]["payment"]["status"] == "completed"
    assert data["booking"]["payment"]["transaction_id"].startswith("CASH-")

    twice = await client.post(f"/bookings/{booking['id']}/confirm-payment", headers=staff_headers)
    assert twice.status_code == 400
    assert twice.json()["message"] == "Booking is not in unpaid state"


@pytest.mark.asyncio
async def test_price_mismatch_writes_nothing(
    test_db, deluxe_type, deluxe_rooms, client: AsyncClient, guest_headers
):
    reservation = await _reserve(client, deluxe_type.id, guest_headers)

    response = await _book(client, reservation, guest_headers, total_price=200)

    assert response.status_code == 400
    assert response.json()["message"] == "Total price mismatch. Expected 207, got 200."
    assert await _count(test_db, Booking.id) == 0
    assert await _count(test_db, Payment.id) == 0

    result = await test_db.execute(select(Room.status).where(Room.id == deluxe_rooms[0].id))
    assert result.scalar_one() == RoomStatus.AVAILABLE

    result = await test_db.execute(select(Reservation.status).where(Reservation.id == UUID(reservation["id"])))
    assert result.scalar_one() == ReservationStatus.PENDING


@pytest.mark.asyncio
async def test_booking_taken_room_fails_without_residue(
    test_db, deluxe_type, deluxe_rooms, client: AsyncClient, guest_headers, other_guest_headers
):
    reservation = await _reserve(client, deluxe_type.id, guest_headers)
    first = await _book(client, reservation, guest_headers)
    assert first.status_code == 201

    # Walk-in for a free room plus the taken one, overlapping the stay
    second = await client.post(
        "/bookings",
        json={
            "check_in_date": "2026-03-02T00:00:00",
            "check_out_date": "2026-03-04T00:00:00",
            "adults_count": 1,
            "booked_rooms": [
                {"room_id": str(deluxe_rooms[1].id), "price_per_night": 90, "nights": 2, "subtotal": 180},
                {"room_id": str(deluxe_rooms[0].id), "price_per_night": 90, "nights": 2, "subtotal": 180},
            ],
            "total_price": 414,
        },
        headers=other_guest_headers,
    )

    assert second.status_code == 400
    assert second.json()["message"] == "Room 201 is no longer available for these dates."
    assert await _count(test_db, Booking.id) == 1
    assert await _count(test_db, Payment.id) == 1

    result = await test_db.execute(
        select(Room.room_number, Room.status).where(Room.id.in_([r.id for r in deluxe_rooms]))
    )
    assert dict(result.all()) == {"201": RoomStatus.RESERVED, "202": RoomStatus.AVAILABLE}


@pytest.mark.asyncio
async def test_walk_in_booking_without_reservation(
    deluxe_type, deluxe_rooms, client: AsyncClient, guest_headers
):
    response = await client.post(
        "/bookings",
        json={
            "check_in_date": CHECK_IN,
            "check_out_date": CHECK_OUT,
            "adults_count": 1,
            "booked_rooms": [
                {"room_id": str(deluxe_rooms[1].id), "price_per_night": 90, "nights": 2, "subtotal": 180},
            ],
            "total_price": 207,
            "payment_method": "Card",
        },
        headers=guest_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["reservation_id"] is None
    assert data["booked_rooms"][0]["room_number"] == "202"


@pytest.mark.asyncio
async def test_booking_needs_rooms(deluxe_rooms, guest_client: AsyncClient):
    response = await guest_client.post(
        "/bookings",
        json={
            "check_in_date": CHECK_IN,
            "check_out_date": CHECK_OUT,
            "adults_count": 1,
            "total_price": 0,
        },
    )
    assert response.status_code == 400
    assert response.json()["message"] == "booked_rooms must contain at least one room"


@pytest.mark.asyncio
async def test_reservation_cannot_be_booked_twice(
    deluxe_type, deluxe_rooms, client: AsyncClient, guest_headers
):
    reservation = await _reserve(client, deluxe_type.id, guest_headers)
    assert (await _book(client, reservation, guest_headers)).status_code == 201

    again = await _book(client, reservation, guest_headers)
    assert again.status_code == 400
    assert again.json()["message"] == "Reservation is confirmed and cannot be booked."


@pytest.mark.asyncio
async def test_other_guests_reservation_is_not_found(
    deluxe_type, deluxe_rooms, client: AsyncClient, guest_headers, other_guest_headers
):
    reservation = await _reserve(client, deluxe_type.id, guest_headers)

    response = await _book(client, reservation, other_guest_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Reservation not found"


@pytest.mark.asyncio
async def test_expired_hold_cannot_be_booked_before_sweep(
    test_db, test_guest, deluxe_type, deluxe_rooms, client: AsyncClient, guest_headers
):
    stale = await reservation_service.create_reservation(
        test_db, test_guest.id, deluxe_type.id, datetime(2026, 3, 1), datetime(2026, 3, 3), 2,
        now=datetime.utcnow() - timedelta(hours=1),
    )
    stale_id = stale.id

    response = await _book(client, {"id": str(stale_id)}, guest_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Reservation has expired. Please make a new reservation."
    assert await _count(test_db, Booking.id) == 0
    assert await _count(test_db, Payment.id) == 0

    result = await test_db.execute(select(Room.status).where(Room.id == deluxe_rooms[0].id))
    assert result.scalar_one() == RoomStatus.AVAILABLE

    result = await test_db.execute(select(Reservation.status).where(Reservation.id == stale_id))
    assert result.scalar_one() == ReservationStatus.PENDING


@pytest.mark.asyncio
async def test_only_the_live_hold_gets_the_room(
    test_db, test_guest, deluxe_type, deluxe_rooms, client: AsyncClient, guest_headers, other_guest_headers
):
    stale = await reservation_service.create_reservation(
        test_db, test_guest.id, deluxe_type.id, datetime(2026, 3, 1), datetime(2026, 3, 3), 2,
        now=datetime.utcnow() - timedelta(hours=1),
    )
    stale_id = stale.id

    # The lapsed hold does not stop another guest from holding room 201
    live = await _reserve(client, deluxe_type.id, other_guest_headers)
    assert live["reserved_rooms"][0]["room_number"] == "201"

    winner = await _book(client, live, other_guest_headers)
    assert winner.status_code == 201
    assert winner.json()["booked_rooms"][0]["room_number"] == "201"

    loser = await _book(client, {"id": str(stale_id)}, guest_headers)
    assert loser.status_code == 400
    assert loser.json()["message"] == "Reservation has expired. Please make a new reservation."

    assert await _count(test_db, Booking.id) == 1
    assert await _count(test_db, Payment.id) == 1
    result = await test_db.execute(select(Room.status).where(Room.id == deluxe_rooms[0].id))
    assert result.scalar_one() == RoomStatus.RESERVED


@pytest.mark.asyncio
async def test_stay_lifecycle_and_checkout_housekeeping(
    test_db, deluxe_type, deluxe_rooms, client: AsyncClient, guest_headers, staff_headers
):
    reservation = await _reserve(client, deluxe_type.id, guest_headers)
    booking_id = (await _book(client, reservation, guest_headers)).json()["id"]
    room_id = deluxe_rooms[0].id

    guest_attempt = await client.patch(
        f"/bookings/{booking_id}/status", json={"status": "checked_in"}, headers=guest_headers
    )
    assert guest_attempt.status_code == 403

    checked_in = await client.patch(
        f"/bookings/{booking_id}/status", json={"status": "checked_in"}, headers=staff_headers
    )
    assert checked_in.status_code == 200
    assert checked_in.json()["status"] == "checked_in"
    result = await test_db.execute(select(Room.status).where(Room.id == room_id))
    assert result.scalar_one() == RoomStatus.OCCUPIED

    checked_out = await client.patch(
        f"/bookings/{booking_id}/status", json={"status": "checked_out"}, headers=staff_headers
    )
    assert checked_out.status_code == 200
    result = await test_db.execute(select(Room.status).where(Room.id == room_id))
    assert result.scalar_one() == RoomStatus.DIRTY

    result = await test_db.execute(select(HousekeepingTask.task).where(HousekeepingTask.room_id == room_id))
    assert result.scalars().all() == ["Checkout Cleaning"]

    back_in = await client.patch(
        f"/bookings/{booking_id}/status", json={"status": "checked_in"}, headers=staff_headers
    )
    assert back_in.status_code == 400
    assert back_in.json()["message"] == "Cannot change booking status from checked_out to checked_in"


@pytest.mark.asyncio
async def test_cancel_releases_room_and_refunds(
    test_db, deluxe_type, deluxe_rooms, client: AsyncClient, guest_headers, staff_headers
):
    reservation = await _reserve(client, deluxe_type.id, guest_headers)
    booking = (await _book(client, reservation, guest_headers)).json()

    response = await client.patch(
        f"/bookings/{booking['id']}/status", json={"status": "cancelled"}, headers=staff_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "cancelled"
    assert data["payment"]["status"] == "refunded"

    result = await test_db.execute(select(Room.status).where(Room.id == deluxe_rooms[0].id))
    assert result.scalar_one() == RoomStatus.AVAILABLE

    result = await test_db.execute(select(Payment.status).where(Payment.id == UUID(booking["payment_id"])))
    assert result.scalar_one() == PaymentStatus.REFUNDED


@pytest.mark.asyncio
async def test_booking_reads_are_scoped(
    deluxe_type, deluxe_rooms, client: AsyncClient, guest_headers, other_guest_headers, staff_headers
):
    reservation = await _reserve(client, deluxe_type.id, guest_headers)
    booking_id = (await _book(client, reservation, guest_headers)).json()["id"]

    mine = await client.get("/bookings/my", headers=guest_headers)
    assert [b["id"] for b in mine.json()] == [booking_id]

    theirs = await client.get("/bookings/my", headers=other_guest_headers)
    assert theirs.json() == []

    assert (await client.get(f"/bookings/{booking_id}", headers=guest_headers)).status_code == 200
    assert (await client.get(f"/bookings/{booking_id}", headers=other_guest_headers)).status_code == 404
    assert (await client.get(f"/bookings/{booking_id}", headers=staff_headers)).status_code == 200

    listing = await client.get("/bookings", params={"limit": 1}, headers=staff_headers)
    assert listing.status_code == 200
    assert listing.json()["pagination"] == {
        "current_page": 1,
        "total_pages": 1,
        "total_bookings": 1,
        "has_next": False,
        "has_prev": False,
    }
    assert (await client.get("/bookings", headers=guest_headers)).status_code == 403
