import math
from typing import List

import attrs

from src.service.park_ticketing.domain.entity.booking_entity import Booking


@attrs.frozen
class BookingPage:
    items: List[Booking]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0
