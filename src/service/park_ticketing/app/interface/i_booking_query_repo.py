from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.service.park_ticketing.domain.entity.booking_entity import Booking
from src.service.park_ticketing.domain.entity.ticket_entity import Ticket
from src.service.park_ticketing.domain.enum.booking_status import BookingStatus
from src.service.park_ticketing.domain.value_object.booking_page import BookingPage


class IBookingQueryRepo(ABC):
    """Repository interface for booking read operations"""

    @abstractmethod
    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        """Full aggregate: line items, tickets and payment"""
        pass

    @abstractmethod
    async def get_by_reference(self, *, reference: str) -> Optional[Booking]:
        pass

    @abstractmethod
    async def get_by_ticket_code(self, *, ticket_code: str) -> Optional[Booking]:
        """Booking owning the ticket, with its tickets loaded"""
        pass

    @abstractmethod
    async def get_tickets(self, *, booking_id: UUID) -> List[Ticket]:
        pass

    @abstractmethod
    async def list_by_user(self, *, user_id: UUID, page: int, limit: int) -> BookingPage:
        """Newest first, line items loaded, tickets not loaded"""
        pass

    @abstractmethod
    async def list_all(
        self, *, status: Optional[BookingStatus], page: int, limit: int
    ) -> BookingPage:
        pass
