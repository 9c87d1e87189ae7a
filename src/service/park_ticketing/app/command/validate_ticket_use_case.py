from datetime import datetime, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import (
    AlreadyUsedError,
    BookingNotFoundError,
    InvalidQrPayloadError,
    TicketNotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.app.interface.i_ticket_issuer import ITicketIssuer
from src.service.park_ticketing.domain.entity.ticket_entity import Ticket


class ValidateTicketUseCase:
    """
    Gate validation - admits a ticket exactly once.

    Flow:
    1. (QR only) verify signature and park, then match the stored payload
    2. Ticket must exist and its booking must be confirmed
    3. Conditional update is_used=false -> true; zero rows means AlreadyUsed
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
    async def validate_ticket(self, *, ticket_code: str) -> Ticket:
        return await self._admit(ticket_code=ticket_code)

    @Logger.io
    async def validate_qr_payload(self, *, qr_payload: str) -> Ticket:
        presented = qr_payload.strip()
        payload = self.ticket_issuer.verify(presented)
        return await self._admit(ticket_code=payload.ticket_code, presented_payload=presented)

    async def _admit(self, *, ticket_code: str, presented_payload: Optional[str] = None) -> Ticket:
        async with self.uow:
            ticket = await self.uow.ticket_command_repo.get_by_code(ticket_code=ticket_code)
            if ticket is None:
                raise TicketNotFoundError()
            if presented_payload is not None and ticket.qr_payload != presented_payload:
                # Validly signed but superseded or never stored for this ticket
                raise InvalidQrPayloadError()

            booking = await self.uow.booking_command_repo.get_by_id(booking_id=ticket.booking_id)
            if booking is None:
                raise BookingNotFoundError()
            booking.ensure_admits_entry()

            used_at = datetime.now(timezone.utc)
            used = ticket.mark_used(now=used_at)
            if not await self.uow.ticket_command_repo.mark_used(
                ticket_id=ticket.id, used_at=used_at
            ):
                raise AlreadyUsedError()
            await self.uow.commit()

        Logger.base.info(f'✅ [GATE] Ticket {ticket_code} admitted ({booking.reference})')
        return used
