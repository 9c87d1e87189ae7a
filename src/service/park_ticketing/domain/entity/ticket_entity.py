from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import AlreadyUsedError


@attrs.define
class Ticket:
    id: UUID
    booking_id: UUID
    booking_item_id: UUID
    ticket_code: str
    qr_payload: str
    is_used: bool = False
    used_at: Optional[datetime] = None
    issued_at: Optional[datetime] = None

    def mark_used(self, *, now: Optional[datetime] = None) -> 'Ticket':
        if self.is_used:
            raise AlreadyUsedError()
        return attrs.evolve(self, is_used=True, used_at=now or datetime.now(timezone.utc))
