from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


if TYPE_CHECKING:
    from src.service.park_ticketing.driven_adapter.model.bookable_unit_model import (
        BookableUnitModel,
    )
    from src.service.park_ticketing.driven_adapter.model.ticket_model import TicketModel


class BookingModel(Base):
    __tablename__ = 'booking'
    __table_args__ = (
        CheckConstraint(
            'user_id IS NOT NULL OR guest_email IS NOT NULL', name='ck_booking_owner_or_guest'
        ),
        CheckConstraint('total_amount >= 0', name='ck_booking_total_non_negative'),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)  # UUID7
    reference: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    user_id: Mapped[Optional[UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True, index=True)
    guest_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    guest_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    unit_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey('bookable_unit.id'), nullable=False, index=True
    )
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    booking_status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    payment_status: Mapped[str] = mapped_column(String(20), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    booked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    unit: Mapped['BookableUnitModel'] = relationship('BookableUnitModel', lazy='raise')
    items: Mapped[List['BookingItemModel']] = relationship(
        'BookingItemModel', lazy='raise', order_by='BookingItemModel.id'
    )
    tickets: Mapped[List['TicketModel']] = relationship(
        'TicketModel', lazy='raise', order_by='TicketModel.id'
    )
    payment: Mapped[Optional['PaymentModel']] = relationship(
        'PaymentModel', lazy='raise', uselist=False
    )


class BookingItemModel(Base):
    __tablename__ = 'booking_item'
    __table_args__ = (
        CheckConstraint('quantity > 0', name='ck_booking_item_quantity_positive'),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    booking_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey('booking.id', ondelete='CASCADE'), nullable=False, index=True
    )
    ticket_type_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey('ticket_type.id'), nullable=False
    )
    ticket_type_name: Mapped[str] = mapped_column(String(100), nullable=False)
    quantity: Mapped[int] = mapped_column(nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)


class PaymentModel(Base):
    __tablename__ = 'payment'

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    booking_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey('booking.id', ondelete='CASCADE'),
        nullable=False,
        unique=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)
    payment_status: Mapped[str] = mapped_column(String(20), nullable=False)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
