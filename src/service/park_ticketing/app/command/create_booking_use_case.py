from datetime import datetime, timezone
from typing import List, Optional, Self, Sequence
from uuid import UUID

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils.compat import uuid7

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import UnitNotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.app.interface.i_ticket_issuer import ITicketIssuer
from src.service.park_ticketing.app.park_clock import park_today
from src.service.park_ticketing.domain.entity.bookable_unit_entity import BookableUnit
from src.service.park_ticketing.domain.entity.booking_entity import (
    Booking,
    BookingItem,
    Payment,
    generate_booking_reference,
)
from src.service.park_ticketing.domain.entity.ticket_entity import Ticket
from src.service.park_ticketing.domain.entity.user_entity import UserEntity
from src.service.park_ticketing.domain.enum.booking_status import PaymentMethod, PaymentStatus
from src.service.park_ticketing.domain.price_resolver import PriceResolver, ResolvedLines
from src.service.park_ticketing.domain.value_object.requested_item import RequestedItem


class CreateBookingUseCase:
    """
    Create booking use case - one transaction for the whole aggregate

    Flow (all inside one Unit of Work):
    1. Load unit (must exist, be active and not past-dated)
    2. Resolve authoritative prices from the catalog
    3. Reserve capacity (conditional increment, fails with CapacityExceeded)
    4. Insert booking header, line items and payment record
    5. Issue one signed ticket per unit of quantity
    6. Commit - any failure before this rolls every effect back

    Dependencies:
    - uow: Unit of Work bundling catalog, ledger and command repositories
    - ticket_issuer: Ticket code and QR payload signer
    """

    def __init__(self, *, uow: AbstractUnitOfWork, ticket_issuer: ITicketIssuer) -> None:
        self.uow = uow
        self.ticket_issuer = ticket_issuer

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        ticket_issuer: ITicketIssuer = Depends(Provide[Container.ticket_issuer]),
    ) -> Self:
        return cls(uow=uow, ticket_issuer=ticket_issuer)

    @Logger.io
    async def create_booking(
        self,
        *,
        unit_id: UUID,
        requested_items: Sequence[RequestedItem],
        payment_method: PaymentMethod,
        requester: Optional[UserEntity] = None,
        guest_email: Optional[str] = None,
        guest_name: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Booking:
        """
        Raises:
            UnitNotFoundError: unit missing or inactive
            PastDatedError: event date before today (park timezone)
            TicketTypeNotFoundError / MismatchedUnitError / QuantityExceedsLimitError
            CapacityExceededError: not enough tickets left
            DomainError: guest booking without guest email and name
        """
        today = park_today()

        async with self.uow:
            unit = await self.uow.catalog_query_repo.get_unit(unit_id=unit_id)
            if unit is None or not unit.is_active:
                raise UnitNotFoundError()
            unit.ensure_not_past_dated(today)

            ticket_types = await self.uow.catalog_query_repo.get_ticket_types(
                ticket_type_ids=[item.ticket_type_id for item in requested_items]
            )
            resolved = PriceResolver.resolve_lines(
                unit_id=unit.id,
                requested_items=requested_items,
                ticket_types=ticket_types,
            )

            # Guest rules are checked before any capacity is taken
            booking = Booking.create(
                id=uuid7(),
                reference=generate_booking_reference(settings.PARK_IDENTIFIER),
                unit_id=unit.id,
                total_amount=resolved.total_amount,
                payment_method=payment_method,
                user_id=requester.id if requester else None,
                guest_email=guest_email,
                guest_name=guest_name,
                notes=notes,
            )

            await self.uow.capacity_ledger.reserve(
                unit_id=unit.id, quantity=resolved.total_quantity
            )

            booking = self._assemble(booking=booking, unit=unit, resolved=resolved)
            await self.uow.booking_command_repo.add(booking=booking)
            await self.uow.ticket_command_repo.add_all(tickets=booking.tickets)

            await self.uow.commit()

        Logger.base.info(
            f'🎟️ [CREATE-BOOKING] {booking.reference}: {resolved.total_quantity} tickets '
            f'for unit {unit.id}, total {booking.total_amount}'
        )
        return booking

    def _assemble(self, *, booking: Booking, unit: BookableUnit, resolved: ResolvedLines) -> Booking:
        now = datetime.now(timezone.utc)
        unit_date = unit.unit_date.isoformat() if unit.unit_date else None

        items: List[BookingItem] = []
        tickets: List[Ticket] = []
        for line in resolved.lines:
            item = BookingItem(
                id=uuid7(),
                booking_id=booking.id,
                ticket_type_id=line.ticket_type_id,
                ticket_type_name=line.ticket_type_name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                subtotal=line.subtotal,
            )
            items.append(item)

            for _ in range(line.quantity):
                issued = self.ticket_issuer.issue_ticket(
                    booking_reference=booking.reference, unit_date=unit_date
                )
                tickets.append(
                    Ticket(
                        id=uuid7(),
                        booking_id=booking.id,
                        booking_item_id=item.id,
                        ticket_code=issued.ticket_code,
                        qr_payload=issued.qr_payload,
                        issued_at=now,
                    )
                )

        payment = Payment(
            id=uuid7(),
            booking_id=booking.id,
            amount=booking.total_amount,
            payment_method=booking.payment_method,
            payment_status=PaymentStatus.PENDING,
            created_at=now,
        )

        return attrs.evolve(
            booking, unit_name=unit.name, items=items, tickets=tickets, payment=payment
        )
