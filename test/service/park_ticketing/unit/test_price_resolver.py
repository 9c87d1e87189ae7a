"""
Unit tests for PriceResolver

Focus:
1. Authoritative prices come from the catalog, never from the request
2. Rejects unknown, inactive, foreign and over-limit ticket types
3. Money is kept to two decimals
"""

from decimal import Decimal

import pytest
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import (
    DomainError,
    MismatchedUnitError,
    QuantityExceedsLimitError,
    TicketTypeNotFoundError,
)
from src.service.park_ticketing.domain.entity.ticket_type_entity import TicketType
from src.service.park_ticketing.domain.enum.ticket_category import TicketCategory
from src.service.park_ticketing.domain.price_resolver import PriceResolver
from src.service.park_ticketing.domain.value_object.requested_item import RequestedItem


@pytest.mark.unit
class TestPriceResolver:
    @pytest.fixture
    def unit_id(self):
        return uuid7()

    @pytest.fixture
    def adult(self, unit_id):
        return TicketType(
            id=uuid7(),
            unit_id=unit_id,
            name='Adult',
            category=TicketCategory.ADULT,
            price=Decimal('150.00'),
            max_quantity_per_booking=4,
        )

    @pytest.fixture
    def child(self, unit_id):
        return TicketType(
            id=uuid7(),
            unit_id=unit_id,
            name='Child',
            category=TicketCategory.CHILD,
            price=Decimal('75.50'),
        )

    def test_resolves_lines_and_totals_from_catalog(self, unit_id, adult, child):
        """
        Given: adult 150.00 and child 75.50 in the catalog
        When: 2 adults and 3 children are requested
        Then: subtotals and total are computed from catalog prices
        """
        resolved = PriceResolver.resolve_lines(
            unit_id=unit_id,
            requested_items=[
                RequestedItem(ticket_type_id=adult.id, quantity=2),
                RequestedItem(ticket_type_id=child.id, quantity=3),
            ],
            ticket_types={adult.id: adult, child.id: child},
        )

        assert [line.subtotal for line in resolved.lines] == [Decimal('300.00'), Decimal('226.50')]
        assert resolved.total_quantity == 5
        assert resolved.total_amount == Decimal('526.50')
        assert resolved.lines[0].ticket_type_name == 'Adult'

    def test_quantity_above_limit(self, unit_id, adult):
        with pytest.raises(QuantityExceedsLimitError):
            PriceResolver.resolve_lines(
                unit_id=unit_id,
                requested_items=[RequestedItem(ticket_type_id=adult.id, quantity=5)],
                ticket_types={adult.id: adult},
            )

    def test_quantity_at_limit_is_accepted(self, unit_id, adult):
        resolved = PriceResolver.resolve_lines(
            unit_id=unit_id,
            requested_items=[RequestedItem(ticket_type_id=adult.id, quantity=4)],
            ticket_types={adult.id: adult},
        )
        assert resolved.total_amount == Decimal('600.00')

    def test_unknown_ticket_type(self, unit_id):
        with pytest.raises(TicketTypeNotFoundError):
            PriceResolver.resolve_lines(
                unit_id=unit_id,
                requested_items=[RequestedItem(ticket_type_id=uuid7(), quantity=1)],
                ticket_types={},
            )

    def test_inactive_ticket_type_is_not_found(self, unit_id, adult):
        adult.is_active = False
        with pytest.raises(TicketTypeNotFoundError):
            PriceResolver.resolve_lines(
                unit_id=unit_id,
                requested_items=[RequestedItem(ticket_type_id=adult.id, quantity=1)],
                ticket_types={adult.id: adult},
            )

    def test_ticket_type_of_another_unit(self, adult):
        with pytest.raises(MismatchedUnitError):
            PriceResolver.resolve_lines(
                unit_id=uuid7(),
                requested_items=[RequestedItem(ticket_type_id=adult.id, quantity=1)],
                ticket_types={adult.id: adult},
            )

    @pytest.mark.parametrize('quantity', [0, -1])
    def test_non_positive_quantity(self, unit_id, adult, quantity):
        with pytest.raises(DomainError):
            PriceResolver.resolve_lines(
                unit_id=unit_id,
                requested_items=[RequestedItem(ticket_type_id=adult.id, quantity=quantity)],
                ticket_types={adult.id: adult},
            )

    def test_empty_request(self, unit_id):
        with pytest.raises(DomainError, match='At least one'):
            PriceResolver.resolve_lines(unit_id=unit_id, requested_items=[], ticket_types={})

    def test_duplicated_ticket_type(self, unit_id, adult):
        with pytest.raises(DomainError, match='only appear once'):
            PriceResolver.resolve_lines(
                unit_id=unit_id,
                requested_items=[
                    RequestedItem(ticket_type_id=adult.id, quantity=1),
                    RequestedItem(ticket_type_id=adult.id, quantity=1),
                ],
                ticket_types={adult.id: adult},
            )
