"""
Booking Command Repository Interface

Write side of the booking aggregate. Always used through the Unit of Work so
every call shares one transaction.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.park_ticketing.domain.entity.booking_entity import Booking


class IBookingCommandRepo(ABC):
    @abstractmethod
    async def add(self, *, booking: Booking) -> None:
        """Insert booking header, line items and payment record"""
        pass

    @abstractmethod
    async def get_by_id(self, *, booking_id: UUID, for_update: bool = False) -> Optional[Booking]:
        """Booking with its line items and payment (tickets not loaded)"""
        pass

    @abstractmethod
    async def update_status_to_cancelled(self, *, booking: Booking) -> bool:
        """
        Persist a cancelled booking.

        Returns:
            False when the stored booking was already cancelled (lost a race)
        """
        pass

    @abstractmethod
    async def update_payment_to_completed(self, *, booking: Booking) -> bool:
        """
        Returns:
            False when the stored payment was no longer pending
        """
        pass
