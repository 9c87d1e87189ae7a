"""
Integration tests for cancellation, payment confirmation and gate validation
against a real SQLite database
"""

import asyncio
from datetime import date, timedelta

import pytest
from sqlalchemy import update

from src.platform.exception.exceptions import (
    AlreadyCancelledError,
    AlreadyUsedError,
    DomainError,
    PastDatedError,
)
from src.service.park_ticketing.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.park_ticketing.app.command.confirm_payment_use_case import (
    ConfirmPaymentUseCase,
)
from src.service.park_ticketing.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.park_ticketing.app.command.validate_ticket_use_case import ValidateTicketUseCase
from src.service.park_ticketing.app.query.list_bookings_use_case import ListBookingsUseCase
from src.service.park_ticketing.domain.enum.booking_status import (
    BookingStatus,
    PaymentMethod,
    PaymentStatus,
)
from src.service.park_ticketing.domain.value_object.requested_item import RequestedItem
from src.service.park_ticketing.driven_adapter.model.bookable_unit_model import BookableUnitModel
from src.service.park_ticketing.driven_adapter.repo.booking_query_repo_impl import (
    BookingQueryRepoImpl,
)
from test.service.park_ticketing.seed import get_tickets_sold, seed_ticket_type, seed_unit


@pytest.fixture
async def book(database, uow_factory, ticket_issuer):
    async def _book(requester, *, unit_id=None, quantity=2, payment_method=PaymentMethod.TELEBIRR):
        if unit_id is None:
            unit_id = await seed_unit(database, capacity=10)
        ticket_type_id = await seed_ticket_type(database, unit_id=unit_id)
        return await CreateBookingUseCase(
            uow=uow_factory(), ticket_issuer=ticket_issuer
        ).create_booking(
            unit_id=unit_id,
            requested_items=[RequestedItem(ticket_type_id=ticket_type_id, quantity=quantity)],
            payment_method=payment_method,
            requester=requester,
        )

    return _book


@pytest.mark.integration
class TestCancelBooking:
    @pytest.mark.asyncio
    async def test_cancel_releases_capacity(self, database, uow_factory, book, visitor):
        booking = await book(visitor, quantity=3)

        cancelled = await CancelBookingUseCase(uow=uow_factory()).cancel_booking(
            booking_id=booking.id, requester=visitor
        )

        stored = await BookingQueryRepoImpl(session_factory=database.session).get_by_id(
            booking_id=booking.id
        )
        assert cancelled.booking_status == BookingStatus.CANCELLED
        assert stored.booking_status == BookingStatus.CANCELLED
        assert stored.payment_status == PaymentStatus.FAILED
        assert stored.payment.payment_status == PaymentStatus.FAILED
        assert stored.cancelled_at is not None
        assert await get_tickets_sold(database, booking.unit_id) == 0

    @pytest.mark.asyncio
    async def test_cancel_after_cash_payment_refunds(self, database, uow_factory, book, visitor):
        booking = await book(visitor, payment_method=PaymentMethod.CASH)
        await ConfirmPaymentUseCase(uow=uow_factory()).confirm_payment(booking_id=booking.id)

        await CancelBookingUseCase(uow=uow_factory()).cancel_booking(
            booking_id=booking.id, requester=visitor
        )

        stored = await BookingQueryRepoImpl(session_factory=database.session).get_by_id(
            booking_id=booking.id
        )
        assert stored.booking_status == BookingStatus.CANCELLED
        assert stored.payment_status == PaymentStatus.REFUNDED
        assert stored.payment.payment_status == PaymentStatus.REFUNDED
        assert stored.payment.paid_at is not None

    @pytest.mark.asyncio
    async def test_second_cancel_changes_nothing(self, database, uow_factory, book, visitor):
        booking = await book(visitor, quantity=2)
        await CancelBookingUseCase(uow=uow_factory()).cancel_booking(
            booking_id=booking.id, requester=visitor
        )
        # Someone else buys in between
        await book(visitor, unit_id=booking.unit_id, quantity=1)

        with pytest.raises(AlreadyCancelledError):
            await CancelBookingUseCase(uow=uow_factory()).cancel_booking(
                booking_id=booking.id, requester=visitor
            )

        assert await get_tickets_sold(database, booking.unit_id) == 1

    @pytest.mark.asyncio
    async def test_concurrent_cancels_release_once(self, database, uow_factory, book, visitor):
        booking = await book(visitor, quantity=2)
        await book(visitor, unit_id=booking.unit_id, quantity=3)

        results = await asyncio.gather(
            *(
                CancelBookingUseCase(uow=uow_factory()).cancel_booking(
                    booking_id=booking.id, requester=visitor
                )
                for _ in range(3)
            ),
            return_exceptions=True,
        )

        assert sum(1 for r in results if not isinstance(r, BaseException)) == 1
        assert all(isinstance(r, AlreadyCancelledError) for r in results if isinstance(r, BaseException))
        assert await get_tickets_sold(database, booking.unit_id) == 3

    @pytest.mark.asyncio
    async def test_past_event_cannot_be_cancelled(self, database, uow_factory, book, visitor):
        booking = await book(visitor)
        async with database.session() as session:
            await session.execute(
                update(BookableUnitModel)
                .where(BookableUnitModel.id == booking.unit_id)
                .values(unit_date=date.today() - timedelta(days=2))
            )
            await session.commit()

        with pytest.raises(PastDatedError):
            await CancelBookingUseCase(uow=uow_factory()).cancel_booking(
                booking_id=booking.id, requester=visitor
            )

        assert await get_tickets_sold(database, booking.unit_id) == 2


@pytest.mark.integration
class TestConfirmPayment:
    @pytest.mark.asyncio
    async def test_cash_booking_confirmed_by_admin(self, database, uow_factory, book, visitor):
        booking = await book(visitor, payment_method=PaymentMethod.CASH)
        assert booking.booking_status == BookingStatus.PENDING

        await ConfirmPaymentUseCase(uow=uow_factory()).confirm_payment(booking_id=booking.id)

        stored = await BookingQueryRepoImpl(session_factory=database.session).get_by_id(
            booking_id=booking.id
        )
        assert stored.booking_status == BookingStatus.CONFIRMED
        assert stored.payment_status == PaymentStatus.COMPLETED
        assert stored.payment.payment_status == PaymentStatus.COMPLETED
        assert stored.payment.paid_at is not None

    @pytest.mark.asyncio
    async def test_confirm_twice(self, uow_factory, book, visitor):
        booking = await book(visitor, payment_method=PaymentMethod.CASH)
        await ConfirmPaymentUseCase(uow=uow_factory()).confirm_payment(booking_id=booking.id)

        with pytest.raises(DomainError):
            await ConfirmPaymentUseCase(uow=uow_factory()).confirm_payment(booking_id=booking.id)


@pytest.mark.integration
class TestGateValidation:
    @pytest.mark.asyncio
    async def test_ticket_admitted_once(self, uow_factory, ticket_issuer, book, visitor):
        """
        Given: a confirmed booking with 2 tickets
        When: the same ticket is validated twice
        Then: the first succeeds, the second fails with AlreadyUsed
        """
        booking = await book(visitor)
        ticket = booking.tickets[0]

        first = await ValidateTicketUseCase(
            uow=uow_factory(), ticket_issuer=ticket_issuer
        ).validate_ticket(ticket_code=ticket.ticket_code)

        with pytest.raises(AlreadyUsedError):
            await ValidateTicketUseCase(
                uow=uow_factory(), ticket_issuer=ticket_issuer
            ).validate_ticket(ticket_code=ticket.ticket_code)

        assert first.is_used is True

    @pytest.mark.asyncio
    async def test_concurrent_scans_admit_once(self, uow_factory, ticket_issuer, book, visitor):
        booking = await book(visitor)
        qr_payload = booking.tickets[1].qr_payload

        results = await asyncio.gather(
            *(
                ValidateTicketUseCase(
                    uow=uow_factory(), ticket_issuer=ticket_issuer
                ).validate_qr_payload(qr_payload=qr_payload)
                for _ in range(4)
            ),
            return_exceptions=True,
        )

        assert sum(1 for r in results if not isinstance(r, BaseException)) == 1
        assert all(isinstance(r, AlreadyUsedError) for r in results if isinstance(r, BaseException))

    @pytest.mark.asyncio
    async def test_cancelled_booking_tickets_rejected(
        self, uow_factory, ticket_issuer, book, visitor
    ):
        booking = await book(visitor)
        await CancelBookingUseCase(uow=uow_factory()).cancel_booking(
            booking_id=booking.id, requester=visitor
        )

        with pytest.raises(DomainError, match='not valid for entry'):
            await ValidateTicketUseCase(
                uow=uow_factory(), ticket_issuer=ticket_issuer
            ).validate_ticket(ticket_code=booking.tickets[0].ticket_code)


@pytest.mark.integration
class TestListBookings:
    @pytest.mark.asyncio
    async def test_my_bookings_newest_first_and_paginated(
        self, database, book, visitor, another_visitor
    ):
        created = [await book(visitor, quantity=1) for _ in range(3)]
        await book(another_visitor, quantity=1)
        use_case = ListBookingsUseCase(
            booking_query_repo=BookingQueryRepoImpl(session_factory=database.session)
        )

        first_page = await use_case.list_my_bookings(requester=visitor, page=1, limit=2)
        second_page = await use_case.list_my_bookings(requester=visitor, page=2, limit=2)

        assert first_page.total == 3
        assert first_page.total_pages == 2
        assert [b.id for b in first_page.items] == [created[2].id, created[1].id]
        assert [b.id for b in second_page.items] == [created[0].id]

    @pytest.mark.asyncio
    async def test_all_bookings_filtered_by_status(self, database, book, visitor):
        await book(visitor, payment_method=PaymentMethod.CASH)
        await book(visitor, payment_method=PaymentMethod.TELEBIRR)
        use_case = ListBookingsUseCase(
            booking_query_repo=BookingQueryRepoImpl(session_factory=database.session)
        )

        pending = await use_case.list_all_bookings(status=BookingStatus.PENDING)
        everything = await use_case.list_all_bookings()

        assert pending.total == 1
        assert pending.items[0].payment_method == PaymentMethod.CASH
        assert everything.total == 2

    @pytest.mark.asyncio
    async def test_limit_out_of_range(self, database, visitor):
        use_case = ListBookingsUseCase(
            booking_query_repo=BookingQueryRepoImpl(session_factory=database.session)
        )

        with pytest.raises(DomainError):
            await use_case.list_my_bookings(requester=visitor, page=1, limit=101)
