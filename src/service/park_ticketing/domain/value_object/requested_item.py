from uuid import UUID

import attrs


@attrs.frozen
class RequestedItem:
    """One line of a purchase request. Prices are never taken from the client."""

    ticket_type_id: UUID
    quantity: int
