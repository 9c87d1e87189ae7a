"""ORM model <-> booking aggregate conversion shared by the booking repositories"""

from decimal import Decimal

from src.service.park_ticketing.domain.entity.booking_entity import Booking, BookingItem, Payment
from src.service.park_ticketing.domain.entity.ticket_entity import Ticket
from src.service.park_ticketing.domain.enum.booking_status import (
    BookingStatus,
    PaymentMethod,
    PaymentStatus,
)
from src.service.park_ticketing.driven_adapter.model.booking_model import (
    BookingItemModel,
    BookingModel,
    PaymentModel,
)
from src.service.park_ticketing.driven_adapter.model.ticket_model import TicketModel


def to_ticket(db_ticket: TicketModel) -> Ticket:
    return Ticket(
        id=db_ticket.id,
        booking_id=db_ticket.booking_id,
        booking_item_id=db_ticket.booking_item_id,
        ticket_code=db_ticket.ticket_code,
        qr_payload=db_ticket.qr_payload,
        is_used=db_ticket.is_used,
        used_at=db_ticket.used_at,
        issued_at=db_ticket.issued_at,
    )


def to_ticket_model(ticket: Ticket) -> TicketModel:
    return TicketModel(
        id=ticket.id,
        booking_id=ticket.booking_id,
        booking_item_id=ticket.booking_item_id,
        ticket_code=ticket.ticket_code,
        qr_payload=ticket.qr_payload,
        is_used=ticket.is_used,
        used_at=ticket.used_at,
        issued_at=ticket.issued_at,
    )


def to_booking_item(db_item: BookingItemModel) -> BookingItem:
    return BookingItem(
        id=db_item.id,
        booking_id=db_item.booking_id,
        ticket_type_id=db_item.ticket_type_id,
        ticket_type_name=db_item.ticket_type_name,
        quantity=db_item.quantity,
        unit_price=Decimal(db_item.unit_price),
        subtotal=Decimal(db_item.subtotal),
    )


def to_payment(db_payment: PaymentModel) -> Payment:
    return Payment(
        id=db_payment.id,
        booking_id=db_payment.booking_id,
        amount=Decimal(db_payment.amount),
        payment_method=PaymentMethod(db_payment.payment_method),
        payment_status=PaymentStatus(db_payment.payment_status),
        paid_at=db_payment.paid_at,
        created_at=db_payment.created_at,
    )


def to_booking(
    db_booking: BookingModel,
    *,
    with_items: bool = True,
    with_tickets: bool = False,
    with_payment: bool = True,
    with_unit: bool = True,
) -> Booking:
    """
    Relationships are declared lazy='raise', so callers state which ones they
    eager-loaded and only those are read.
    """
    return Booking(
        id=db_booking.id,
        reference=db_booking.reference,
        unit_id=db_booking.unit_id,
        total_amount=Decimal(db_booking.total_amount),
        payment_method=PaymentMethod(db_booking.payment_method),
        booking_status=BookingStatus(db_booking.booking_status),
        payment_status=PaymentStatus(db_booking.payment_status),
        user_id=db_booking.user_id,
        guest_email=db_booking.guest_email,
        guest_name=db_booking.guest_name,
        notes=db_booking.notes,
        booked_at=db_booking.booked_at,
        cancelled_at=db_booking.cancelled_at,
        unit_name=db_booking.unit.name if with_unit else None,
        items=[to_booking_item(item) for item in db_booking.items] if with_items else [],
        tickets=[to_ticket(ticket) for ticket in db_booking.tickets] if with_tickets else [],
        payment=to_payment(db_booking.payment) if with_payment and db_booking.payment else None,
    )
