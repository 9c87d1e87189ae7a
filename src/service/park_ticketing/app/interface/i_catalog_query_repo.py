from abc import ABC, abstractmethod
from typing import Collection, Dict, Optional
from uuid import UUID

from src.service.park_ticketing.domain.entity.bookable_unit_entity import BookableUnit
from src.service.park_ticketing.domain.entity.ticket_type_entity import TicketType


class ICatalogQueryRepo(ABC):
    """Read-only lookups of bookable units and ticket types"""

    @abstractmethod
    async def get_unit(self, *, unit_id: UUID) -> Optional[BookableUnit]:
        pass

    @abstractmethod
    async def get_ticket_types(self, *, ticket_type_ids: Collection[UUID]) -> Dict[UUID, TicketType]:
        """Ticket types keyed by id; unknown ids are simply absent"""
        pass
