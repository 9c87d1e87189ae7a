"""
Storage error translation

Maps SQLAlchemy / DBAPI failures onto the domain error taxonomy so that no
storage-engine detail leaks to callers.

- PostgreSQL (asyncpg): classified by SQLSTATE
- SQLite (aiosqlite): classified by message, SQLite has no SQLSTATE
"""

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from src.platform.exception.exceptions import (
    ConflictError,
    CustomBaseError,
    DomainError,
    TransientFailureError,
)


UNIQUE_VIOLATION = '23505'
FOREIGN_KEY_VIOLATION = '23503'
CHECK_VIOLATION = '23514'
NOT_NULL_VIOLATION = '23502'

# serialization_failure, deadlock_detected, lock_not_available, query_canceled (statement_timeout)
TRANSIENT_SQLSTATES = frozenset({'40001', '40P01', '55P03', '57014'})
TRANSIENT_SQLSTATE_CLASSES = frozenset({'08', '53', '57'})  # connection, resources, operator intervention

# SQLite lock contention (SQLITE_BUSY / SQLITE_LOCKED), the only retryable SQLite failures
SQLITE_CONTENTION_MESSAGES = ('database is locked', 'database table is locked', 'database is busy')


def _sqlstate(error: DBAPIError) -> str | None:
    orig = error.orig
    return getattr(orig, 'sqlstate', None) or getattr(orig, 'pgcode', None)


def _translate_integrity_error(error: IntegrityError) -> CustomBaseError:
    code = _sqlstate(error)
    message = str(error.orig).lower()

    if code == UNIQUE_VIOLATION or 'unique constraint' in message:
        return ConflictError('A record with this information already exists.')
    if code == FOREIGN_KEY_VIOLATION or 'foreign key constraint' in message:
        return DomainError('Referenced record does not exist.')
    if code in (CHECK_VIOLATION, NOT_NULL_VIOLATION) or 'constraint failed' in message:
        return DomainError('Data validation failed.')
    return DomainError('Data validation failed.')


def _is_sqlite_contention(error: OperationalError) -> bool:
    message = str(error.orig).lower()
    return any(fragment in message for fragment in SQLITE_CONTENTION_MESSAGES)


def _is_transient(error: BaseException) -> bool:
    if isinstance(error, (PoolTimeoutError, TimeoutError)):
        return True
    if isinstance(error, DBAPIError):
        if error.connection_invalidated:
            return True
        code = _sqlstate(error)
        if code and (code in TRANSIENT_SQLSTATES or code[:2] in TRANSIENT_SQLSTATE_CLASSES):
            return True
        if isinstance(error, OperationalError) and _is_sqlite_contention(error):
            return True
        if isinstance(error.orig, TimeoutError):
            return True
    return False


def translate_storage_error(error: BaseException) -> CustomBaseError | None:
    """Return the domain error for a storage failure, or None when it is not one."""
    if isinstance(error, CustomBaseError):
        return None
    if isinstance(error, IntegrityError):
        return _translate_integrity_error(error)
    if _is_transient(error):
        return TransientFailureError()
    return None
