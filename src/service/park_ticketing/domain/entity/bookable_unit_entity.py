from datetime import date, time
from typing import Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import PastDatedError
from src.service.park_ticketing.domain.enum.unit_kind import UnitKind
from src.service.park_ticketing.domain.value_object.availability import Availability


@attrs.define
class BookableUnit:
    """
    An event or a game, the thing a ticket grants access to.

    Events always carry a date and a finite capacity. Games may have neither,
    in which case they are open every day and never sell out.
    """

    id: UUID
    kind: UnitKind
    name: str
    capacity: Optional[int] = None
    tickets_sold: int = 0
    unit_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    is_active: bool = True
    description: Optional[str] = None

    @property
    def remaining(self) -> Optional[int]:
        if self.capacity is None:
            return None
        return max(self.capacity - self.tickets_sold, 0)

    def check_availability(self, quantity: int) -> Availability:
        remaining = self.remaining
        return Availability(
            available=remaining is None or quantity <= remaining,
            remaining=remaining,
        )

    def is_past_dated(self, today: date) -> bool:
        if self.kind != UnitKind.EVENT or self.unit_date is None:
            return False
        return self.unit_date < today

    def ensure_not_past_dated(self, today: date) -> None:
        if self.is_past_dated(today):
            raise PastDatedError(f'{self.name} took place on {self.unit_date} and is no longer bookable')
