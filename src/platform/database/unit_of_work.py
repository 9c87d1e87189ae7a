"""
Unit of Work Pattern - one database session and transaction shared by every write-side repository

Architecture:
- UoW owns the session lifecycle (opened on enter, closed on exit)
- UoW owns commit/rollback; anything not committed is rolled back on exit
- Repositories receive the shared session from the UoW
- Storage failures leave the UoW as domain errors (see storage_error.py)
"""

from __future__ import annotations

import abc
from types import TracebackType
from typing import TYPE_CHECKING, AsyncContextManager, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession


if TYPE_CHECKING:
    from src.service.park_ticketing.app.interface.i_booking_command_repo import (
        IBookingCommandRepo,
    )
    from src.service.park_ticketing.app.interface.i_capacity_ledger import ICapacityLedger
    from src.service.park_ticketing.app.interface.i_catalog_query_repo import ICatalogQueryRepo
    from src.service.park_ticketing.app.interface.i_ticket_command_repo import (
        ITicketCommandRepo,
    )


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work for the park ticketing service

    Usage:
        async with uow:
            await uow.capacity_ledger.reserve(unit_id=..., quantity=...)
            await uow.booking_command_repo.add(booking=...)
            await uow.commit()
    """

    catalog_query_repo: ICatalogQueryRepo
    capacity_ledger: ICapacityLedger
    booking_command_repo: IBookingCommandRepo
    ticket_command_repo: ITicketCommandRepo

    _committed: bool = False

    async def __aenter__(self) -> AbstractUnitOfWork:
        self._committed = False
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if not self._committed:
            await self.rollback()

    async def commit(self) -> None:
        await self._commit()
        self._committed = True

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    SQLAlchemy implementation of Unit of Work

    The session comes from Database.session(), which translates storage errors
    raised inside the `async with` block.
    """

    def __init__(self, session_factory: Callable[[], AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory
        self._session_context: Optional[AsyncContextManager[AsyncSession]] = None
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> AbstractUnitOfWork:
        from src.service.park_ticketing.driven_adapter.repo.booking_command_repo_impl import (
            BookingCommandRepoImpl,
        )
        from src.service.park_ticketing.driven_adapter.repo.capacity_ledger_impl import (
            CapacityLedgerImpl,
        )
        from src.service.park_ticketing.driven_adapter.repo.catalog_query_repo_impl import (
            CatalogQueryRepoImpl,
        )
        from src.service.park_ticketing.driven_adapter.repo.ticket_command_repo_impl import (
            TicketCommandRepoImpl,
        )

        self._session_context = self.session_factory()
        self.session = await self._session_context.__aenter__()

        # Repositories share the UoW session
        self.catalog_query_repo = CatalogQueryRepoImpl(session=self.session)
        self.capacity_ledger = CapacityLedgerImpl(session=self.session)
        self.booking_command_repo = BookingCommandRepoImpl(session=self.session)
        self.ticket_command_repo = TicketCommandRepoImpl(session=self.session)

        return await super().__aenter__()

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        try:
            await super().__aexit__(exc_type, exc, tb)
        finally:
            session_context, self._session_context, self.session = self._session_context, None, None
            if session_context is not None:
                # Re-raises storage errors from the block as domain errors
                await session_context.__aexit__(exc_type, exc, tb)

    async def _commit(self) -> None:
        assert self.session is not None, 'UnitOfWork used outside `async with`'
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
