"""
Loguru sink setup, shared by Logger.base and @Logger.io

- stdout always; an hourly rotated file under LOG_DIR when DEBUG is on
- stdlib logging (uvicorn, sqlalchemy, aiosqlite) is routed into loguru
- uvicorn access lines get a level from their HTTP status: rejected bookings
  and gate scans (4xx) are warnings, only 5xx is an error
"""

from contextvars import ContextVar
from datetime import datetime
from enum import StrEnum
import logging
import os
import sys
from typing import TYPE_CHECKING, Optional
import zoneinfo

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR
from src.platform.logging.service_context import get_service_context


LOG_DIR = os.environ.get('TEST_LOG_DIR', LOG_DIR)

SENSITIVE_KEYWORDS = {
    'password',
    'secret',
    'signing_secret',
    'token',
    'access_token',
    # A QR payload admits its holder at the gate
    'qr_payload',
}

# Loggers too chatty to forward below INFO
QUIET_LOGGERS = ('asyncio', 'aiosqlite', 'sqlalchemy.pool')

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


def _default_extra() -> dict[str, str]:
    return {
        ExtraField.SERVICE_CONTEXT: get_service_context(),
        ExtraField.CHAIN_START_TIME: '',
        ExtraField.CALL_TARGET: '',
    }


def access_log_level(message: str) -> Optional[str]:
    """
    Level for a uvicorn access line, e.g.
    '127.0.0.1:51234 - "POST /api/bookings HTTP/1.1" 400'

    Returns None when the message is not an access line.
    """
    if ' - "' not in message or ' HTTP/' not in message:
        return None
    try:
        status_code = int(message.rsplit('"', 1)[1].split()[0])
    except (ValueError, IndexError):
        return None

    if status_code >= 500:
        return 'ERROR'
    if status_code >= 400:
        return 'WARNING'
    if 200 <= status_code < 300:
        return 'SUCCESS'
    return 'INFO'


class InterceptHandler(logging.Handler):
    """Forward stdlib records to loguru, keeping the original caller location"""

    def __init__(self) -> None:
        super().__init__()
        self._bound = loguru_logger.bind(**_default_extra())

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno < logging.INFO and record.name.startswith(QUIET_LOGGERS):
            return

        message = record.getMessage()
        level: str | int | None = access_log_level(message)
        if level is None:
            try:
                level = loguru_logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        self._bound.opt(depth=depth, exception=record.exc_info).log(level, message)


io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)


def _log_file_path() -> str:
    stamp = datetime.now(zoneinfo.ZoneInfo(settings.PARK_TIMEZONE)).strftime('%Y-%m-%d_%H')
    prefix = 'test_' if os.environ.get('TEST_LOG_DIR') else ''
    return f'{LOG_DIR}/{prefix}{stamp}.log'


loguru_logger.remove()
custom_logger: 'LoguruLogger' = loguru_logger.bind(**_default_extra())

min_log_level = 'DEBUG' if settings.DEBUG else 'INFO'
custom_logger.add(sys.stdout, format=io_log_format, level=min_log_level, enqueue=True)

if settings.DEBUG:
    custom_logger.add(
        _log_file_path(),
        format=io_log_format,
        rotation='1 hour',
        retention='7 days',
        compression='gz',
        enqueue=True,
        level=min_log_level,
    )

logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
