from datetime import datetime
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import select, update

from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.park_ticketing.domain.entity.ticket_entity import Ticket
from src.service.park_ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.park_ticketing.driven_adapter.repo.booking_mapper import (
    to_ticket,
    to_ticket_model,
)
from src.service.park_ticketing.driven_adapter.repo.session_mixin import SessionMixin


class TicketCommandRepoImpl(SessionMixin, ITicketCommandRepo):
    @Logger.io(truncate_content=True)
    async def add_all(self, *, tickets: Sequence[Ticket]) -> None:
        async with self._get_session() as session:
            session.add_all([to_ticket_model(ticket) for ticket in tickets])
            await session.flush()

    @Logger.io
    async def get_by_code(self, *, ticket_code: str) -> Optional[Ticket]:
        async with self._get_session() as session:
            result = await session.execute(
                select(TicketModel)
                .where(TicketModel.ticket_code == ticket_code)
                .execution_options(populate_existing=True)
            )
            db_ticket = result.scalar_one_or_none()

        return to_ticket(db_ticket) if db_ticket else None

    @Logger.io
    async def mark_used(self, *, ticket_id: UUID, used_at: datetime) -> bool:
        async with self._get_session() as session:
            result = await session.execute(
                update(TicketModel)
                .where(TicketModel.id == ticket_id, TicketModel.is_used.is_(False))
                .values(is_used=True, used_at=used_at)
                .execution_options(synchronize_session=False)
            )
        return result.rowcount == 1  # type: ignore[attr-defined]
