from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.park_ticketing.domain.entity.user_entity import UserEntity
from src.service.park_ticketing.domain.enum.booking_status import BookingStatus
from src.service.park_ticketing.domain.value_object.booking_page import BookingPage


class ListBookingsUseCase:
    def __init__(self, *, booking_query_repo: IBookingQueryRepo) -> None:
        self.booking_query_repo = booking_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
    ) -> Self:
        return cls(booking_query_repo=booking_query_repo)

    @staticmethod
    def _check_paging(page: int, limit: int) -> None:
        if page < 1:
            raise DomainError('page must be at least 1')
        if not 1 <= limit <= settings.MAX_PAGE_SIZE:
            raise DomainError(f'limit must be between 1 and {settings.MAX_PAGE_SIZE}')

    @Logger.io(truncate_content=True)
    async def list_my_bookings(
        self, *, requester: UserEntity, page: int = 1, limit: int = settings.DEFAULT_PAGE_SIZE
    ) -> BookingPage:
        self._check_paging(page, limit)
        return await self.booking_query_repo.list_by_user(
            user_id=requester.id, page=page, limit=limit
        )

    @Logger.io(truncate_content=True)
    async def list_all_bookings(
        self,
        *,
        status: Optional[BookingStatus] = None,
        page: int = 1,
        limit: int = settings.DEFAULT_PAGE_SIZE,
    ) -> BookingPage:
        self._check_paging(page, limit)
        return await self.booking_query_repo.list_all(status=status, page=page, limit=limit)
