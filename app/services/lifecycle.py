"""Status transition rules for reservations and bookings"""

from typing import Dict, FrozenSet

from app.errors import InvalidTransitionError
from app.models.booking import BookingStatus
from app.models.reservation import ReservationStatus

RESERVATION_TRANSITIONS: Dict[ReservationStatus, FrozenSet[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset({
        ReservationStatus.CONFIRMED,
        ReservationStatus.EXPIRED,
        ReservationStatus.CANCELLED,
    }),
    ReservationStatus.CONFIRMED: frozenset(),
    ReservationStatus.EXPIRED: frozenset(),
    ReservationStatus.CANCELLED: frozenset(),
}

# confirmed_unpaid -> confirmed only happens through cash payment confirmation
BOOKING_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING_PAYMENT: frozenset({
        BookingStatus.CONFIRMED,
        BookingStatus.CONFIRMED_UNPAID,
        BookingStatus.CANCELLED,
    }),
    BookingStatus.CONFIRMED: frozenset({
        BookingStatus.CHECKED_IN,
        BookingStatus.CANCELLED,
    }),
    BookingStatus.CONFIRMED_UNPAID: frozenset({
        BookingStatus.CHECKED_IN,
        BookingStatus.CANCELLED,
    }),
    BookingStatus.CHECKED_IN: frozenset({BookingStatus.CHECKED_OUT}),
    BookingStatus.CHECKED_OUT: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}


def assert_reservation_transition(current: ReservationStatus, target: ReservationStatus) -> None:
    if target not in RESERVATION_TRANSITIONS[current]:
        raise InvalidTransitionError("reservation", current.value, target.value)


def assert_booking_transition(current: BookingStatus, target: BookingStatus) -> None:
    if target not in BOOKING_TRANSITIONS[current]:
        raise InvalidTransitionError("booking", current.value, target.value)
