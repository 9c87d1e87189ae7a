from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import AlreadyCancelledError, BookingNotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.app.park_clock import park_today
from src.service.park_ticketing.domain.entity.booking_entity import Booking
from src.service.park_ticketing.domain.entity.user_entity import UserEntity


class CancelBookingUseCase:
    """
    Cancel a booking and return its tickets to sale.

    The status flip is a conditional update, so of two concurrent cancellations
    only one releases capacity; the other gets AlreadyCancelled.
    """

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def cancel_booking(self, *, booking_id: UUID, requester: UserEntity) -> Booking:
        async with self.uow:
            booking = await self.uow.booking_command_repo.get_by_id(
                booking_id=booking_id, for_update=True
            )
            if booking is None:
                raise BookingNotFoundError()
            booking.ensure_accessible_by(requester)

            cancelled = booking.cancel()

            unit = await self.uow.catalog_query_repo.get_unit(unit_id=booking.unit_id)
            if unit is not None:
                unit.ensure_not_past_dated(park_today())

            if not await self.uow.booking_command_repo.update_status_to_cancelled(
                booking=cancelled
            ):
                raise AlreadyCancelledError()

            await self.uow.capacity_ledger.release(
                unit_id=booking.unit_id, quantity=booking.total_quantity
            )
            await self.uow.commit()

        Logger.base.info(
            f'🚫 [CANCEL] {cancelled.reference} cancelled, released {booking.total_quantity} tickets'
        )
        return cancelled
