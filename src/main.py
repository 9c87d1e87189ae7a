"""
Production FastAPI Application

Startup order: wire DI, resolve the ticket issuer (fails fast without a
signing secret), ensure tables.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Park Ticketing] Starting up...')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Park Ticketing] Dependency injection wired')

    # Raises ConfigurationError when TICKET_SIGNING_SECRET is missing
    container.ticket_issuer()
    Logger.base.info('🔏 [Park Ticketing] Ticket issuer ready')

    database = container.database()
    await database.create_tables()

    Logger.base.info('✅ [Park Ticketing] Ready to serve requests')

    yield

    Logger.base.info('🛑 [Park Ticketing] Shutting down...')
    await database.dispose()
    container.unwire()
    Logger.base.info('👋 [Park Ticketing] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
