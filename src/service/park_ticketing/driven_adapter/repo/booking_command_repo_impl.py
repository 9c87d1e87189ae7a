"""
Booking Command Repository Implementation

Writes go through the Unit of Work session. Status transitions are
conditional UPDATEs so two concurrent cancellations cannot both succeed.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import selectinload

from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.park_ticketing.domain.entity.booking_entity import Booking
from src.service.park_ticketing.domain.enum.booking_status import BookingStatus, PaymentStatus
from src.service.park_ticketing.driven_adapter.model.booking_model import (
    BookingItemModel,
    BookingModel,
    PaymentModel,
)
from src.service.park_ticketing.driven_adapter.repo.booking_mapper import to_booking
from src.service.park_ticketing.driven_adapter.repo.session_mixin import SessionMixin


class BookingCommandRepoImpl(SessionMixin, IBookingCommandRepo):
    @Logger.io
    async def add(self, *, booking: Booking) -> None:
        async with self._get_session() as session:
            session.add(
                BookingModel(
                    id=booking.id,
                    reference=booking.reference,
                    user_id=booking.user_id,
                    guest_email=booking.guest_email,
                    guest_name=booking.guest_name,
                    unit_id=booking.unit_id,
                    total_amount=booking.total_amount,
                    booking_status=booking.booking_status.value,
                    payment_status=booking.payment_status.value,
                    payment_method=booking.payment_method.value,
                    notes=booking.notes,
                    booked_at=booking.booked_at or datetime.now(timezone.utc),
                )
            )
            # Header first so the children's foreign keys resolve
            await session.flush()

            session.add_all(
                [
                    BookingItemModel(
                        id=item.id,
                        booking_id=booking.id,
                        ticket_type_id=item.ticket_type_id,
                        ticket_type_name=item.ticket_type_name or '',
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                        subtotal=item.subtotal,
                    )
                    for item in booking.items
                ]
            )
            if booking.payment is not None:
                session.add(
                    PaymentModel(
                        id=booking.payment.id,
                        booking_id=booking.id,
                        amount=booking.payment.amount,
                        payment_method=booking.payment.payment_method.value,
                        payment_status=booking.payment.payment_status.value,
                        paid_at=booking.payment.paid_at,
                    )
                )
            await session.flush()

    @Logger.io
    async def get_by_id(self, *, booking_id: UUID, for_update: bool = False) -> Optional[Booking]:
        stmt = (
            select(BookingModel)
            .options(
                selectinload(BookingModel.items),
                selectinload(BookingModel.payment),
                selectinload(BookingModel.unit),
            )
            .where(BookingModel.id == booking_id)
        )
        if for_update:
            # Row lock on PostgreSQL; SQLite serializes writers anyway and ignores it
            stmt = stmt.with_for_update(of=BookingModel)

        async with self._get_session() as session:
            result = await session.execute(stmt.execution_options(populate_existing=True))
            db_booking = result.scalar_one_or_none()
            if db_booking is None:
                return None
            return to_booking(db_booking)

    @Logger.io
    async def update_status_to_cancelled(self, *, booking: Booking) -> bool:
        async with self._get_session() as session:
            result = await session.execute(
                update(BookingModel)
                .where(
                    BookingModel.id == booking.id,
                    BookingModel.booking_status != BookingStatus.CANCELLED.value,
                )
                .values(
                    booking_status=booking.booking_status.value,
                    payment_status=booking.payment_status.value,
                    cancelled_at=booking.cancelled_at,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:  # type: ignore[attr-defined]
                return False

            await session.execute(
                update(PaymentModel)
                .where(PaymentModel.booking_id == booking.id)
                .values(payment_status=booking.payment_status.value)
                .execution_options(synchronize_session=False)
            )
            return True

    @Logger.io
    async def update_payment_to_completed(self, *, booking: Booking) -> bool:
        paid_at = (booking.payment and booking.payment.paid_at) or datetime.now(timezone.utc)
        async with self._get_session() as session:
            result = await session.execute(
                update(BookingModel)
                .where(
                    BookingModel.id == booking.id,
                    BookingModel.payment_status == PaymentStatus.PENDING.value,
                    BookingModel.booking_status.not_in(
                        [BookingStatus.CANCELLED.value, BookingStatus.REFUNDED.value]
                    ),
                )
                .values(
                    booking_status=booking.booking_status.value,
                    payment_status=booking.payment_status.value,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:  # type: ignore[attr-defined]
                return False

            await session.execute(
                update(PaymentModel)
                .where(PaymentModel.booking_id == booking.id)
                .values(payment_status=booking.payment_status.value, paid_at=paid_at)
                .execution_options(synchronize_session=False)
            )
            return True
