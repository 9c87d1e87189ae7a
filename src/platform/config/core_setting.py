from pathlib import Path
from typing import List, Optional

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Park Ticketing'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Security (JWT issued by the identity provider, decoded here)
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    ALGORITHM: str = 'HS256'

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'park_ticketing'
    POSTGRES_PORT: int = 5432
    DATABASE_URL: Optional[str] = None  # Full URL override, e.g. sqlite+aiosqlite:///./park.db

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    # Connection pool (ignored for SQLite)
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 10  # seconds waiting for a pooled connection
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True

    # Timeouts surfaced to clients as TransientFailure
    DB_STATEMENT_TIMEOUT_MS: int = 5000
    DB_COMMAND_TIMEOUT_SECONDS: float = 10.0

    # Ticket issuance
    TICKET_SIGNING_SECRET: Optional[SecretStr] = None  # Required, checked at startup
    PARK_IDENTIFIER: str = 'BORA'
    TICKET_CODE_PREFIX: str = 'TKT'
    PARK_TIMEZONE: str = 'Africa/Addis_Ababa'
    TICKET_QR_MAX_AGE_SECONDS: Optional[int] = None  # Unset: QR payloads never go stale

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100


settings = Settings()  # type: ignore
