from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import BookingNotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.park_ticketing.domain.entity.booking_entity import Booking
from src.service.park_ticketing.domain.entity.user_entity import UserEntity


class GetBookingUseCase:
    def __init__(self, *, booking_query_repo: IBookingQueryRepo) -> None:
        self.booking_query_repo = booking_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
    ) -> Self:
        return cls(booking_query_repo=booking_query_repo)

    @Logger.io
    async def get_booking(self, *, booking_id: UUID, requester: UserEntity) -> Booking:
        booking = await self.booking_query_repo.get_by_id(booking_id=booking_id)
        if not booking:
            raise BookingNotFoundError()

        booking.ensure_accessible_by(requester)
        return booking

    @Logger.io
    async def get_booking_by_reference(self, *, reference: str, requester: UserEntity) -> Booking:
        booking = await self.booking_query_repo.get_by_reference(reference=reference.upper())
        if not booking:
            raise BookingNotFoundError()

        booking.ensure_accessible_by(requester)
        return booking
