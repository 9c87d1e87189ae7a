from decimal import Decimal
from typing import Optional
from uuid import UUID

import attrs


DEFAULT_MAX_QUANTITY_PER_BOOKING = 10


@attrs.define
class TicketType:
    """
    `category` is free text managed by the catalog. TicketCategory lists the
    usual ones but parks add their own (e.g. "vip").
    """

    id: UUID
    unit_id: UUID
    name: str
    category: str
    price: Decimal
    max_quantity_per_booking: int = DEFAULT_MAX_QUANTITY_PER_BOOKING
    is_active: bool = True
    description: Optional[str] = None
