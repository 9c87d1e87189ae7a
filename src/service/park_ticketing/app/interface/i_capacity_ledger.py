from abc import ABC, abstractmethod
from uuid import UUID

from src.service.park_ticketing.domain.value_object.availability import Availability


class ICapacityLedger(ABC):
    """
    Tickets sold per bookable unit.

    check_availability is advisory only. reserve is the enforcement point and
    must be atomic with respect to concurrent reservations on the same unit.
    """

    @abstractmethod
    async def check_availability(self, *, unit_id: UUID, quantity: int) -> Availability:
        pass

    @abstractmethod
    async def reserve(self, *, unit_id: UUID, quantity: int) -> None:
        """
        Raises:
            CapacityExceededError: the increment would push tickets_sold past capacity
            UnitNotFoundError: the unit does not exist
        """
        pass

    @abstractmethod
    async def release(self, *, unit_id: UUID, quantity: int) -> None:
        pass
