from datetime import datetime, timezone
from decimal import Decimal
import secrets
import string
from typing import List, Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import (
    AlreadyCancelledError,
    DomainError,
    ForbiddenError,
)
from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.domain.entity.ticket_entity import Ticket
from src.service.park_ticketing.domain.entity.user_entity import UserEntity
from src.service.park_ticketing.domain.enum.booking_status import (
    BookingStatus,
    PaymentMethod,
    PaymentStatus,
)


REFERENCE_ALPHABET = string.ascii_uppercase + string.digits
REFERENCE_LENGTH = 8


def generate_booking_reference(prefix: str) -> str:
    """e.g. BORA-7K2QX9AB"""
    suffix = ''.join(secrets.choice(REFERENCE_ALPHABET) for _ in range(REFERENCE_LENGTH))
    return f'{prefix}-{suffix}'


@attrs.define
class BookingItem:
    id: UUID
    booking_id: UUID
    ticket_type_id: UUID
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    ticket_type_name: Optional[str] = None


@attrs.define
class Payment:
    id: UUID
    booking_id: UUID
    amount: Decimal
    payment_method: PaymentMethod
    payment_status: PaymentStatus = PaymentStatus.PENDING
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


@attrs.define
class Booking:
    id: UUID
    reference: str
    unit_id: UUID
    total_amount: Decimal
    payment_method: PaymentMethod
    booking_status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    user_id: Optional[UUID] = None
    guest_email: Optional[str] = None
    guest_name: Optional[str] = None
    notes: Optional[str] = None
    booked_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    unit_name: Optional[str] = None
    items: List[BookingItem] = attrs.field(factory=list)
    tickets: List[Ticket] = attrs.field(factory=list)
    payment: Optional[Payment] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        id: UUID,
        reference: str,
        unit_id: UUID,
        total_amount: Decimal,
        payment_method: PaymentMethod,
        user_id: Optional[UUID] = None,
        guest_email: Optional[str] = None,
        guest_name: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> 'Booking':
        if user_id is None and not (guest_email and guest_name):
            raise DomainError('Guest bookings require guest email and guest name')

        return cls(
            id=id,
            reference=reference,
            unit_id=unit_id,
            total_amount=total_amount,
            payment_method=payment_method,
            booking_status=payment_method.initial_booking_status,
            payment_status=PaymentStatus.PENDING,
            user_id=user_id,
            guest_email=None if user_id else guest_email,
            guest_name=None if user_id else guest_name,
            notes=notes,
            booked_at=datetime.now(timezone.utc),
        )

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    def ensure_accessible_by(self, requester: UserEntity) -> None:
        if not requester.can_access(self.user_id):
            raise ForbiddenError('You do not have access to this booking')

    @Logger.io
    def cancel(self, *, now: Optional[datetime] = None) -> 'Booking':
        """
        Cancel booking (Domain validation)

        Raises:
            AlreadyCancelledError: booking was cancelled before
            DomainError: booking was refunded
        """
        if self.booking_status == BookingStatus.CANCELLED:
            raise AlreadyCancelledError()
        if self.booking_status == BookingStatus.REFUNDED:
            raise DomainError('Booking has been refunded and cannot be cancelled')

        # Only money actually taken is refunded; an unpaid payment just fails
        payment_status = (
            PaymentStatus.REFUNDED
            if self.payment_status == PaymentStatus.COMPLETED
            else PaymentStatus.FAILED
        )
        payment = self.payment
        if payment is not None:
            payment = attrs.evolve(payment, payment_status=payment_status)

        return attrs.evolve(
            self,
            booking_status=BookingStatus.CANCELLED,
            payment_status=payment_status,
            cancelled_at=now or datetime.now(timezone.utc),
            payment=payment,
        )

    @Logger.io
    def confirm_payment(self, *, now: Optional[datetime] = None) -> 'Booking':
        if self.booking_status in (BookingStatus.CANCELLED, BookingStatus.REFUNDED):
            raise DomainError('Cannot confirm payment for a cancelled booking')
        if self.payment_status != PaymentStatus.PENDING:
            raise DomainError(f'Payment is already {self.payment_status}')

        payment = self.payment
        if payment is not None:
            payment = attrs.evolve(
                payment,
                payment_status=PaymentStatus.COMPLETED,
                paid_at=now or datetime.now(timezone.utc),
            )

        return attrs.evolve(
            self,
            booking_status=BookingStatus.CONFIRMED,
            payment_status=PaymentStatus.COMPLETED,
            payment=payment,
        )

    def ensure_admits_entry(self) -> None:
        if self.booking_status != BookingStatus.CONFIRMED:
            raise DomainError(f'Booking is {self.booking_status}, tickets are not valid for entry')
