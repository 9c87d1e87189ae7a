from decimal import Decimal
from typing import Collection, Dict, Optional
from uuid import UUID

from sqlalchemy import select

from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.app.interface.i_catalog_query_repo import ICatalogQueryRepo
from src.service.park_ticketing.domain.entity.bookable_unit_entity import BookableUnit
from src.service.park_ticketing.domain.entity.ticket_type_entity import TicketType
from src.service.park_ticketing.domain.enum.unit_kind import UnitKind
from src.service.park_ticketing.driven_adapter.model.bookable_unit_model import BookableUnitModel
from src.service.park_ticketing.driven_adapter.model.ticket_type_model import TicketTypeModel
from src.service.park_ticketing.driven_adapter.repo.session_mixin import SessionMixin


class CatalogQueryRepoImpl(SessionMixin, ICatalogQueryRepo):
    @staticmethod
    def _to_unit(db_unit: BookableUnitModel) -> BookableUnit:
        return BookableUnit(
            id=db_unit.id,
            kind=UnitKind(db_unit.kind),
            name=db_unit.name,
            capacity=db_unit.capacity,
            tickets_sold=db_unit.tickets_sold,
            unit_date=db_unit.unit_date,
            start_time=db_unit.start_time,
            end_time=db_unit.end_time,
            is_active=db_unit.is_active,
            description=db_unit.description,
        )

    @staticmethod
    def _to_ticket_type(db_ticket_type: TicketTypeModel) -> TicketType:
        return TicketType(
            id=db_ticket_type.id,
            unit_id=db_ticket_type.unit_id,
            name=db_ticket_type.name,
            category=db_ticket_type.category,
            price=Decimal(db_ticket_type.price),
            max_quantity_per_booking=db_ticket_type.max_quantity_per_booking,
            is_active=db_ticket_type.is_active,
            description=db_ticket_type.description,
        )

    @Logger.io
    async def get_unit(self, *, unit_id: UUID) -> Optional[BookableUnit]:
        async with self._get_session() as session:
            result = await session.execute(
                select(BookableUnitModel).where(BookableUnitModel.id == unit_id)
            )
            db_unit = result.scalar_one_or_none()

        return self._to_unit(db_unit) if db_unit else None

    @Logger.io
    async def get_ticket_types(self, *, ticket_type_ids: Collection[UUID]) -> Dict[UUID, TicketType]:
        if not ticket_type_ids:
            return {}

        async with self._get_session() as session:
            result = await session.execute(
                select(TicketTypeModel).where(TicketTypeModel.id.in_(list(ticket_type_ids)))
            )
            db_ticket_types = result.scalars().all()

        return {row.id: self._to_ticket_type(row) for row in db_ticket_types}
