"""
Test Configuration and Fixtures

This module provides:
- Environment setup before any application import (settings read env at import time)
- A throwaway SQLite database file per test (aiosqlite)
- Unit of Work, ticket issuer and requester fixtures
- Bearer headers for requesters (the TestClient lives in the API test module)

Architecture:
- Unit tests (test/**/unit/): mocked repositories, no database
- Integration tests (test/**/integration/): real SQLite file, real repositories
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    from test.constants import TEST_JWT_SECRET, TEST_PARK, TEST_SIGNING_SECRET

    os.environ['TICKET_SIGNING_SECRET'] = TEST_SIGNING_SECRET
    os.environ['SECRET_KEY'] = TEST_JWT_SECRET
    os.environ['PARK_IDENTIFIER'] = TEST_PARK
    os.environ.setdefault('DATABASE_URL', 'sqlite+aiosqlite:///./test_park_ticketing.db')


_early_setup_test_environment()

from collections.abc import AsyncGenerator, Callable  # noqa: E402

import pytest  # noqa: E402
from uuid_utils.compat import uuid7  # noqa: E402

from src.platform.database.orm_db_setting import Database  # noqa: E402
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork  # noqa: E402
from src.service.park_ticketing.domain.entity.user_entity import UserEntity  # noqa: E402
from src.service.park_ticketing.domain.enum.user_role import UserRole  # noqa: E402
from src.service.park_ticketing.driven_adapter.security.hmac_ticket_issuer import (  # noqa: E402
    HmacTicketIssuer,
)
from src.service.park_ticketing.driving_adapter.http_controller.auth.jwt_auth import (  # noqa: E402
    JwtAuth,
)
from test.constants import TEST_PARK, TEST_SIGNING_SECRET  # noqa: E402


# =============================================================================
# Database
# =============================================================================
@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    db = Database(url=f'sqlite+aiosqlite:///{tmp_path / "park_ticketing.db"}')
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
def uow_factory(database: Database) -> Callable[[], SqlAlchemyUnitOfWork]:
    return lambda: SqlAlchemyUnitOfWork(session_factory=database.session)


# =============================================================================
# Ticket issuance
# =============================================================================
@pytest.fixture
def ticket_issuer() -> HmacTicketIssuer:
    return HmacTicketIssuer(signing_secret=TEST_SIGNING_SECRET, park_identifier=TEST_PARK)


# =============================================================================
# Requesters
# =============================================================================
@pytest.fixture
def visitor() -> UserEntity:
    return UserEntity(id=uuid7(), email='visitor@example.com', name='Visitor', role=UserRole.VISITOR)


@pytest.fixture
def another_visitor() -> UserEntity:
    return UserEntity(id=uuid7(), email='other@example.com', name='Other', role=UserRole.VISITOR)


@pytest.fixture
def admin() -> UserEntity:
    return UserEntity(id=uuid7(), email='admin@example.com', name='Admin', role=UserRole.ADMIN)


# =============================================================================
# HTTP
# =============================================================================
@pytest.fixture
def auth_headers() -> Callable[[UserEntity], dict[str, str]]:
    jwt_auth = JwtAuth()

    def _headers(user: UserEntity) -> dict[str, str]:
        return {'Authorization': f'Bearer {jwt_auth.create_jwt_token(user)}'}

    return _headers
