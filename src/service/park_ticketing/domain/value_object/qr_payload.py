from typing import Any, Optional

import attrs


@attrs.frozen
class QrPayload:
    """Decoded content of a ticket QR code. Field names on the wire are kept short."""

    ticket_code: str
    booking_reference: str
    unit_date: Optional[str]
    park: str
    issued_at_ms: int

    def to_record(self) -> dict[str, Any]:
        return {
            'code': self.ticket_code,
            'ref': self.booking_reference,
            'date': self.unit_date,
            'park': self.park,
            'ts': self.issued_at_ms,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> 'QrPayload':
        return cls(
            ticket_code=record['code'],
            booking_reference=record['ref'],
            unit_date=record['date'],
            park=record['park'],
            issued_at_ms=int(record['ts']),
        )


@attrs.frozen
class IssuedTicket:
    ticket_code: str
    qr_payload: str
