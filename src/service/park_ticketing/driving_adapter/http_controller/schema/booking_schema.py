from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import EmailStr, Field

from src.service.park_ticketing.domain.entity.booking_entity import Booking
from src.service.park_ticketing.domain.enum.booking_status import (
    BookingStatus,
    PaymentMethod,
    PaymentStatus,
)
from src.service.park_ticketing.domain.value_object.booking_page import BookingPage
from src.service.park_ticketing.driving_adapter.http_controller.schema.base_schema import (
    CamelModel,
)
from src.service.park_ticketing.driving_adapter.http_controller.schema.ticket_schema import (
    TicketResponse,
)


class BookingItemRequest(CamelModel):
    ticket_type_id: UUID
    quantity: int


class BookingCreateRequest(CamelModel):
    model_config = CamelModel.model_config | {
        'json_schema_extra': {
            'examples': [
                {
                    'unitId': '0192f0a4-7c1e-7a3b-9a51-3c5e0f1d2b10',
                    'items': [
                        {'ticketTypeId': '0192f0a4-7c1e-7a3b-9a51-3c5e0f1d2b11', 'quantity': 2}
                    ],
                    'paymentMethod': 'telebirr',
                },
                {
                    'unitId': '0192f0a4-7c1e-7a3b-9a51-3c5e0f1d2b10',
                    'items': [
                        {'ticketTypeId': '0192f0a4-7c1e-7a3b-9a51-3c5e0f1d2b12', 'quantity': 1}
                    ],
                    'paymentMethod': 'cash',
                    'guestEmail': 'guest@example.com',
                    'guestName': 'Abebe Kebede',
                },
            ]
        }
    }

    unit_id: UUID
    items: List[BookingItemRequest]
    payment_method: PaymentMethod
    guest_email: Optional[EmailStr] = None
    guest_name: Optional[str] = Field(default=None, max_length=200)
    notes: Optional[str] = Field(default=None, max_length=1000)


class BookingItemResponse(CamelModel):
    id: UUID
    ticket_type_id: UUID
    ticket_type_name: Optional[str] = None
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


class PaymentResponse(CamelModel):
    id: UUID
    amount: Decimal
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    paid_at: Optional[datetime] = None


class BookingSummaryResponse(CamelModel):
    id: UUID
    reference: str
    unit_id: UUID
    unit_name: Optional[str] = None
    user_id: Optional[UUID] = None
    guest_email: Optional[str] = None
    guest_name: Optional[str] = None
    total_amount: Decimal
    total_quantity: int
    booking_status: BookingStatus
    payment_status: PaymentStatus
    payment_method: PaymentMethod
    notes: Optional[str] = None
    booked_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    items: List[BookingItemResponse] = []

    @classmethod
    def from_entity(cls, booking: Booking) -> 'BookingSummaryResponse':
        return cls.model_validate(booking)


class BookingResponse(BookingSummaryResponse):
    """Full aggregate"""

    tickets: List[TicketResponse] = []
    payment: Optional[PaymentResponse] = None

    @classmethod
    def from_entity(cls, booking: Booking) -> 'BookingResponse':
        return cls.model_validate(booking)


class BookingPageResponse(CamelModel):
    items: List[BookingSummaryResponse]
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def from_page(cls, booking_page: BookingPage) -> 'BookingPageResponse':
        return cls(
            items=[BookingSummaryResponse.from_entity(b) for b in booking_page.items],
            page=booking_page.page,
            limit=booking_page.limit,
            total=booking_page.total,
            total_pages=booking_page.total_pages,
        )


class AvailabilityResponse(CamelModel):
    unit_id: UUID
    quantity: int
    available: bool
    remaining: Optional[int] = None
