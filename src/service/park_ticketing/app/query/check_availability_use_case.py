from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, UnitNotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.app.interface.i_capacity_ledger import ICapacityLedger
from src.service.park_ticketing.app.interface.i_catalog_query_repo import ICatalogQueryRepo
from src.service.park_ticketing.domain.value_object.availability import Availability


class CheckAvailabilityUseCase:
    """Advisory only - the answer may be stale by the time a booking is placed"""

    def __init__(
        self, *, catalog_query_repo: ICatalogQueryRepo, capacity_ledger: ICapacityLedger
    ) -> None:
        self.catalog_query_repo = catalog_query_repo
        self.capacity_ledger = capacity_ledger

    @classmethod
    @inject
    def depends(
        cls,
        catalog_query_repo: ICatalogQueryRepo = Depends(Provide[Container.catalog_query_repo]),
        capacity_ledger: ICapacityLedger = Depends(Provide[Container.capacity_ledger]),
    ) -> Self:
        return cls(catalog_query_repo=catalog_query_repo, capacity_ledger=capacity_ledger)

    @Logger.io
    async def check_availability(self, *, unit_id: UUID, quantity: int) -> Availability:
        if quantity < 1:
            raise DomainError('Quantity must be at least 1')

        unit = await self.catalog_query_repo.get_unit(unit_id=unit_id)
        if unit is None or not unit.is_active:
            raise UnitNotFoundError()

        return await self.capacity_ledger.check_availability(unit_id=unit_id, quantity=quantity)
