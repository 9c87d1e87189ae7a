from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import BookingNotFoundError, DomainError
from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.domain.entity.booking_entity import Booking


class ConfirmPaymentUseCase:
    """Admin marks a pending (cash) payment as received, which confirms the booking"""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def confirm_payment(self, *, booking_id: UUID) -> Booking:
        async with self.uow:
            booking = await self.uow.booking_command_repo.get_by_id(
                booking_id=booking_id, for_update=True
            )
            if booking is None:
                raise BookingNotFoundError()

            confirmed = booking.confirm_payment()

            if not await self.uow.booking_command_repo.update_payment_to_completed(
                booking=confirmed
            ):
                raise DomainError('Payment is no longer pending')
            await self.uow.commit()

        Logger.base.info(f'💰 [PAYMENT] {confirmed.reference} payment completed')
        return confirmed
