"""
Capacity Ledger Implementation

tickets_sold is only ever changed by a single conditional UPDATE, so the
capacity check and the increment happen in one statement and two concurrent
reservations cannot both pass the check. The CHECK constraint on
bookable_unit is the last line behind it.
"""

from uuid import UUID

from sqlalchemy import case, or_, select, update

from src.platform.exception.exceptions import CapacityExceededError, UnitNotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.app.interface.i_capacity_ledger import ICapacityLedger
from src.service.park_ticketing.domain.value_object.availability import Availability
from src.service.park_ticketing.driven_adapter.model.bookable_unit_model import BookableUnitModel
from src.service.park_ticketing.driven_adapter.repo.session_mixin import SessionMixin


class CapacityLedgerImpl(SessionMixin, ICapacityLedger):
    @Logger.io
    async def check_availability(self, *, unit_id: UUID, quantity: int) -> Availability:
        async with self._get_session() as session:
            row = (
                await session.execute(
                    select(BookableUnitModel.capacity, BookableUnitModel.tickets_sold).where(
                        BookableUnitModel.id == unit_id
                    )
                )
            ).one_or_none()

        if row is None:
            raise UnitNotFoundError()

        capacity, tickets_sold = row
        if capacity is None:
            return Availability(available=True, remaining=None)
        remaining = max(capacity - tickets_sold, 0)
        return Availability(available=quantity <= remaining, remaining=remaining)

    @Logger.io
    async def reserve(self, *, unit_id: UUID, quantity: int) -> None:
        async with self._get_session() as session:
            result = await session.execute(
                update(BookableUnitModel)
                .where(
                    BookableUnitModel.id == unit_id,
                    or_(
                        BookableUnitModel.capacity.is_(None),
                        BookableUnitModel.tickets_sold + quantity <= BookableUnitModel.capacity,
                    ),
                )
                .values(tickets_sold=BookableUnitModel.tickets_sold + quantity)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 1:  # type: ignore[attr-defined]
                return

            # Nothing updated: either the unit is gone or it is sold out
            availability = await self.check_availability(unit_id=unit_id, quantity=quantity)

        Logger.base.warning(
            f'🎟️ [CAPACITY] Rejected {quantity} tickets for unit {unit_id}, '
            f'remaining={availability.remaining}'
        )
        raise CapacityExceededError(remaining=availability.remaining or 0)

    @Logger.io
    async def release(self, *, unit_id: UUID, quantity: int) -> None:
        async with self._get_session() as session:
            await session.execute(
                update(BookableUnitModel)
                .where(BookableUnitModel.id == unit_id)
                .values(
                    tickets_sold=case(
                        (
                            BookableUnitModel.tickets_sold >= quantity,
                            BookableUnitModel.tickets_sold - quantity,
                        ),
                        else_=0,
                    )
                )
                .execution_options(synchronize_session=False)
            )
