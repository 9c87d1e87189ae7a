from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from uuid_utils.compat import uuid7

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.service.park_ticketing.domain.entity.bookable_unit_entity import BookableUnit
from src.service.park_ticketing.domain.entity.ticket_type_entity import TicketType
from src.service.park_ticketing.domain.enum.ticket_category import TicketCategory
from src.service.park_ticketing.domain.enum.unit_kind import UnitKind


class MockUnitOfWork(AbstractUnitOfWork):
    """UoW whose repositories are AsyncMocks; records commit/rollback"""

    def __init__(self) -> None:
        self.catalog_query_repo = MagicMock()
        self.catalog_query_repo.get_unit = AsyncMock()
        self.catalog_query_repo.get_ticket_types = AsyncMock(return_value={})
        self.capacity_ledger = MagicMock()
        self.capacity_ledger.reserve = AsyncMock()
        self.capacity_ledger.release = AsyncMock()
        self.booking_command_repo = MagicMock()
        self.booking_command_repo.add = AsyncMock()
        self.booking_command_repo.get_by_id = AsyncMock()
        self.booking_command_repo.update_status_to_cancelled = AsyncMock(return_value=True)
        self.booking_command_repo.update_payment_to_completed = AsyncMock(return_value=True)
        self.ticket_command_repo = MagicMock()
        self.ticket_command_repo.add_all = AsyncMock()
        self.ticket_command_repo.get_by_code = AsyncMock()
        self.ticket_command_repo.mark_used = AsyncMock(return_value=True)
        self.committed = False
        self.rolled_back = False

    async def _commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True


@pytest.fixture
def mock_uow() -> MockUnitOfWork:
    return MockUnitOfWork()


@pytest.fixture
def event_unit() -> BookableUnit:
    return BookableUnit(
        id=uuid7(),
        kind=UnitKind.EVENT,
        name='Meskel Bonfire Show',
        capacity=2,
        tickets_sold=0,
        unit_date=date.today() + timedelta(days=7),
    )


@pytest.fixture
def adult_ticket_type(event_unit) -> TicketType:
    return TicketType(
        id=uuid7(),
        unit_id=event_unit.id,
        name='Adult',
        category=TicketCategory.ADULT,
        price=Decimal('100.00'),
        max_quantity_per_booking=4,
    )
