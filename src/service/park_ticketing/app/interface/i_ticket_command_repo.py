from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Sequence
from uuid import UUID

from src.service.park_ticketing.domain.entity.ticket_entity import Ticket


class ITicketCommandRepo(ABC):
    @abstractmethod
    async def add_all(self, *, tickets: Sequence[Ticket]) -> None:
        pass

    @abstractmethod
    async def get_by_code(self, *, ticket_code: str) -> Optional[Ticket]:
        pass

    @abstractmethod
    async def mark_used(self, *, ticket_id: UUID, used_at: datetime) -> bool:
        """
        Conditional update, only flips unused tickets.

        Returns:
            False when the ticket was already used
        """
        pass
