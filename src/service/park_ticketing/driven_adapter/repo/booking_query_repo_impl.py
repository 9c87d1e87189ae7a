from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.park_ticketing.domain.entity.booking_entity import Booking
from src.service.park_ticketing.domain.entity.ticket_entity import Ticket
from src.service.park_ticketing.domain.enum.booking_status import BookingStatus
from src.service.park_ticketing.domain.value_object.booking_page import BookingPage
from src.service.park_ticketing.driven_adapter.model.booking_model import BookingModel
from src.service.park_ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.park_ticketing.driven_adapter.repo.booking_mapper import to_booking, to_ticket
from src.service.park_ticketing.driven_adapter.repo.session_mixin import SessionMixin


_FULL_AGGREGATE = (
    selectinload(BookingModel.unit),
    selectinload(BookingModel.items),
    selectinload(BookingModel.tickets),
    selectinload(BookingModel.payment),
)

_LIST_ROW = (
    selectinload(BookingModel.unit),
    selectinload(BookingModel.items),
    selectinload(BookingModel.payment),
)


class BookingQueryRepoImpl(SessionMixin, IBookingQueryRepo):
    async def _get_one(self, *where_clauses) -> Optional[Booking]:
        async with self._get_session() as session:
            result = await session.execute(
                select(BookingModel).options(*_FULL_AGGREGATE).where(*where_clauses)
            )
            db_booking = result.scalar_one_or_none()
            if db_booking is None:
                return None
            return to_booking(db_booking, with_tickets=True)

    @Logger.io
    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        return await self._get_one(BookingModel.id == booking_id)

    @Logger.io
    async def get_by_reference(self, *, reference: str) -> Optional[Booking]:
        return await self._get_one(BookingModel.reference == reference)

    @Logger.io
    async def get_by_ticket_code(self, *, ticket_code: str) -> Optional[Booking]:
        owning_booking = select(TicketModel.booking_id).where(TicketModel.ticket_code == ticket_code)
        return await self._get_one(BookingModel.id.in_(owning_booking.scalar_subquery()))

    @Logger.io(truncate_content=True)
    async def get_tickets(self, *, booking_id: UUID) -> List[Ticket]:
        async with self._get_session() as session:
            result = await session.execute(
                select(TicketModel)
                .where(TicketModel.booking_id == booking_id)
                .order_by(TicketModel.id)
            )
            return [to_ticket(row) for row in result.scalars().all()]

    async def _paginate(self, *where_clauses, page: int, limit: int) -> BookingPage:
        async with self._get_session() as session:
            total = (
                await session.execute(
                    select(func.count()).select_from(BookingModel).where(*where_clauses)
                )
            ).scalar_one()

            result = await session.execute(
                select(BookingModel)
                .options(*_LIST_ROW)
                .where(*where_clauses)
                .order_by(BookingModel.booked_at.desc(), BookingModel.id.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
            items = [to_booking(row) for row in result.scalars().all()]

        return BookingPage(items=items, page=page, limit=limit, total=total)

    @Logger.io(truncate_content=True)
    async def list_by_user(self, *, user_id: UUID, page: int, limit: int) -> BookingPage:
        return await self._paginate(BookingModel.user_id == user_id, page=page, limit=limit)

    @Logger.io(truncate_content=True)
    async def list_all(
        self, *, status: Optional[BookingStatus], page: int, limit: int
    ) -> BookingPage:
        where_clauses = [] if status is None else [BookingModel.booking_status == status.value]
        return await self._paginate(*where_clauses, page=page, limit=limit)
