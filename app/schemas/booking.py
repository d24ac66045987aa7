"""Booking and payment schemas"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, Field

from app.models.booking import Booking, BookingStatus
from app.models.payment import PaymentMethod, PaymentStatus
from app.schemas.reservation import ReservedRoomResponse, loaded


class BookedRoomLine(BaseModel):
    """One room on a booking request"""
    room_id: UUID
    price_per_night: float = Field(ge=0)
    nights: int = Field(ge=1)
    subtotal: float = Field(ge=0)


class BookingCreate(BaseModel):
    """Create booking request; omitted stay details come from the reservation"""
    reservation_id: Optional[UUID] = None
    check_in_date: Optional[datetime] = None
    check_out_date: Optional[datetime] = None
    adults_count: Optional[int] = Field(None, ge=1)
    children_count: Optional[int] = Field(None, ge=0)
    booked_rooms: List[BookedRoomLine] = []
    subtotal: Optional[float] = None
    tax: Optional[float] = None
    total_price: float
    payment_method: PaymentMethod = PaymentMethod.CARD


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class PaymentResponse(BaseModel):
    id: UUID
    booking_id: UUID
    amount: float
    currency: str
    payment_method: PaymentMethod
    status: PaymentStatus
    transaction_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BookingResponse(BaseModel):
    """Booking response"""
    id: UUID
    booking_code: str
    reservation_id: Optional[UUID]
    guest_id: UUID
    check_in_date: datetime
    check_out_date: datetime
    adults_count: int
    children_count: int
    guests: int
    booked_rooms: List[ReservedRoomResponse]
    subtotal_amount: float
    tax_amount: float
    total_price: float
    status: BookingStatus
    payment_id: Optional[UUID]
    payment: Optional[PaymentResponse] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, booking: Booking) -> "BookingResponse":
        lines = []
        for line in booking.booked_rooms:
            room = loaded(line, "room")
            lines.append(ReservedRoomResponse(
                room_id=line.room_id,
                room_number=room.room_number if room else None,
                price_per_night=line.price_per_night,
                nights=line.nights,
                subtotal=line.subtotal,
            ))

        payment = loaded(booking, "payment")
        return cls(
            id=booking.id,
            booking_code=booking.booking_code,
            reservation_id=booking.reservation_id,
            guest_id=booking.guest_id,
            check_in_date=booking.check_in_date,
            check_out_date=booking.check_out_date,
            adults_count=booking.adults_count,
            children_count=booking.children_count,
            guests=booking.adults_count + booking.children_count,
            booked_rooms=lines,
            subtotal_amount=booking.subtotal_amount,
            tax_amount=booking.tax_amount,
            total_price=booking.total_price,
            status=booking.status,
            payment_id=booking.payment_id,
            payment=PaymentResponse.model_validate(payment) if payment else None,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_bookings: int
    has_next: bool
    has_prev: bool


class BookingListResponse(BaseModel):
    """Paginated booking list"""
    bookings: List[BookingResponse]
    pagination: Pagination


class ConfirmPaymentResponse(BaseModel):
    message: str
    booking: BookingResponse
