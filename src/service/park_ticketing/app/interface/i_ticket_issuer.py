from abc import ABC, abstractmethod
from typing import Optional

from src.service.park_ticketing.domain.value_object.qr_payload import IssuedTicket, QrPayload


class ITicketIssuer(ABC):
    @abstractmethod
    def issue_ticket(self, *, booking_reference: str, unit_date: Optional[str]) -> IssuedTicket:
        """Generate a unique ticket code and its signed QR payload"""
        pass

    @abstractmethod
    def verify(self, qr_payload: str) -> QrPayload:
        """
        Raises:
            InvalidQrPayloadError: malformed, tampered or foreign payload
        """
        pass
