from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):
    # Pydantic Settings will automatically look for these as environment variables
    # or in a .env file

    # Database Settings
    POSTGRES_USER: str = "user"
    POSTGRES_PASSWORD: str = "password"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "mentorship_db"

    # Full URL override (e.g. "sqlite+aiosqlite:///./mentorlink.db"); POSTGRES_* is ignored when set
    DATABASE_URL: Optional[str] = None

    # SQLAlchemy Connection Pooling Settings
    # Refer to https://docs.sqlalchemy.org/en/20/core/engines.html#connection-pooling-options
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30 # seconds
    DB_POOL_RECYCLE: int = 1800 # seconds (30 minutes) - recycle connections older than this
    DB_ECHO: bool = False

    LOG_LEVEL: str = "INFO"

    # Notification Settings
    NOTIFICATIONS_ENABLED: bool = True

    # Lifecycle Rules
    # When False, duplicate/active/rejected-history checks on new requests are only logged
    ENFORCE_REQUEST_GUARDS: bool = False
    # Reject the student's other pending requests once one is accepted
    AUTO_REJECT_PENDING_ON_ACCEPT: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore" # Ignore extra env variables not defined here
    )

@lru_cache() # Cache settings to avoid re-reading on every call
def get_settings():
    """Returns a cached instance of the Settings."""
    return Settings()
