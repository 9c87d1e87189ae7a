"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.park_ticketing.driven_adapter.repo.booking_query_repo_impl import (
    BookingQueryRepoImpl,
)
from src.service.park_ticketing.driven_adapter.repo.capacity_ledger_impl import CapacityLedgerImpl
from src.service.park_ticketing.driven_adapter.repo.catalog_query_repo_impl import (
    CatalogQueryRepoImpl,
)
from src.service.park_ticketing.driven_adapter.security.hmac_ticket_issuer import (
    HmacTicketIssuer,
)
from src.service.park_ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (engine manager bound to DATABASE_URL_ASYNC unless overridden)
    database = providers.Singleton(Database)

    # Unit of Work - new instance per request, owns one session/transaction
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork, session_factory=database.provided.session
    )

    # Read-side repositories (stateless - use session_factory per call)
    booking_query_repo = providers.Singleton(
        BookingQueryRepoImpl, session_factory=database.provided.session
    )
    catalog_query_repo = providers.Singleton(
        CatalogQueryRepoImpl, session_factory=database.provided.session
    )
    capacity_ledger = providers.Singleton(
        CapacityLedgerImpl, session_factory=database.provided.session
    )

    # Ticket issuer - secret resolved once; a missing secret fails startup
    ticket_issuer = providers.Singleton(
        HmacTicketIssuer,
        signing_secret=config_service.provided.TICKET_SIGNING_SECRET,
        park_identifier=config_service.provided.PARK_IDENTIFIER,
        code_prefix=config_service.provided.TICKET_CODE_PREFIX,
        max_age_seconds=config_service.provided.TICKET_QR_MAX_AGE_SECONDS,
    )

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth)


container = Container()
