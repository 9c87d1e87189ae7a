from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession


class SessionMixin:
    """
    Session plumbing shared by repositories.

    A repository either shares the Unit of Work session (command side) or opens
    a short-lived one per call from session_factory (query side).
    """

    def __init__(
        self,
        session_factory: Optional[Callable[[], AsyncContextManager[AsyncSession]]] = None,
        *,
        session: Optional[AsyncSession] = None,
    ) -> None:
        self.session_factory = session_factory
        self.session = session

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        if self.session is not None:
            # Session injected by UoW - use directly (no context manager needed)
            yield self.session
        elif self.session_factory is not None:
            async with self.session_factory() as session:
                yield session
        else:
            raise RuntimeError('No session or session_factory available')
