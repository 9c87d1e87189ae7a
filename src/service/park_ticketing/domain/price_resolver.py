"""
Price Resolver
Pure pricing logic over catalog data already loaded by a repository. No I/O here.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import List, Mapping, Sequence
from uuid import UUID

import attrs

from src.platform.exception.exceptions import (
    DomainError,
    MismatchedUnitError,
    QuantityExceedsLimitError,
    TicketTypeNotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.domain.entity.ticket_type_entity import TicketType
from src.service.park_ticketing.domain.value_object.requested_item import RequestedItem


CENT = Decimal('0.01')


def to_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@attrs.frozen
class ResolvedLine:
    ticket_type_id: UUID
    ticket_type_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


@attrs.frozen
class ResolvedLines:
    lines: List[ResolvedLine]
    total_quantity: int
    total_amount: Decimal


class PriceResolver:
    @staticmethod
    @Logger.io
    def resolve_lines(
        *,
        unit_id: UUID,
        requested_items: Sequence[RequestedItem],
        ticket_types: Mapping[UUID, TicketType],
    ) -> ResolvedLines:
        """
        Resolve authoritative prices for each requested line.

        Raises:
            DomainError: empty request, non-positive quantity or duplicated ticket type
            TicketTypeNotFoundError: unknown or inactive ticket type
            MismatchedUnitError: ticket type sold for a different event/game
            QuantityExceedsLimitError: quantity above the per-booking maximum
        """
        if not requested_items:
            raise DomainError('At least one ticket item is required')

        seen: set[UUID] = set()
        lines: List[ResolvedLine] = []
        for item in requested_items:
            if item.ticket_type_id in seen:
                raise DomainError('Each ticket type may only appear once per booking')
            seen.add(item.ticket_type_id)

            if item.quantity < 1:
                raise DomainError('Quantity must be at least 1')

            ticket_type = ticket_types.get(item.ticket_type_id)
            if ticket_type is None or not ticket_type.is_active:
                raise TicketTypeNotFoundError(f'Ticket type {item.ticket_type_id} not found')
            if ticket_type.unit_id != unit_id:
                raise MismatchedUnitError()
            if item.quantity > ticket_type.max_quantity_per_booking:
                raise QuantityExceedsLimitError(
                    f'Maximum {ticket_type.max_quantity_per_booking} tickets of type '
                    f'"{ticket_type.name}" per booking'
                )

            unit_price = to_money(ticket_type.price)
            lines.append(
                ResolvedLine(
                    ticket_type_id=ticket_type.id,
                    ticket_type_name=ticket_type.name,
                    quantity=item.quantity,
                    unit_price=unit_price,
                    subtotal=to_money(unit_price * item.quantity),
                )
            )

        return ResolvedLines(
            lines=lines,
            total_quantity=sum(line.quantity for line in lines),
            total_amount=to_money(sum((line.subtotal for line in lines), Decimal('0'))),
        )
