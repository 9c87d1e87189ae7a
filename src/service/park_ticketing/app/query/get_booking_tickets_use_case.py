from typing import List, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import BookingNotFoundError, TicketNotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.park_ticketing.domain.entity.ticket_entity import Ticket
from src.service.park_ticketing.domain.entity.user_entity import UserEntity


class GetBookingTicketsUseCase:
    """Ticket reads go through the owning booking so the ownership rule is applied once"""

    def __init__(self, *, booking_query_repo: IBookingQueryRepo) -> None:
        self.booking_query_repo = booking_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
    ) -> Self:
        return cls(booking_query_repo=booking_query_repo)

    @Logger.io(truncate_content=True)
    async def get_tickets(self, *, booking_id: UUID, requester: UserEntity) -> List[Ticket]:
        booking = await self.booking_query_repo.get_by_id(booking_id=booking_id)
        if not booking:
            raise BookingNotFoundError()

        booking.ensure_accessible_by(requester)
        return booking.tickets

    @Logger.io
    async def get_ticket_by_code(self, *, ticket_code: str, requester: UserEntity) -> Ticket:
        booking = await self.booking_query_repo.get_by_ticket_code(ticket_code=ticket_code)
        if not booking:
            raise TicketNotFoundError()

        booking.ensure_accessible_by(requester)
        for ticket in booking.tickets:
            if ticket.ticket_code == ticket_code:
                return ticket
        raise TicketNotFoundError()
