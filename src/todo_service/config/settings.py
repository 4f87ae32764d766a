from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from pathlib import Path
from typing import Literal
from functools import lru_cache
from ..validators.config_validators import normalize_case


class Settings(BaseSettings):
    """
    Application settings loaded from environment (and an optional `.env` file).
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"
    APP_NAME: str = "todo-service"

    # HTTP
    API_PREFIX: str = ""

    # Database configuration
    DB_URL: str | None = None
    POSTGRES_DRIVER: str = "psycopg"
    POSTGRES_USERNAME: str | None = None
    POSTGRES_PASSWORD: str | None = None
    POSTGRES_HOST: str | None = None
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str | None = None
    SQLITE_PATH: Path = Path("./data/todo.db")

    # Test database configuration
    TEST_POSTGRES_DB: str | None = None
    TESTING: bool = False

    # SQLAlchemy
    SQLALCHEMY_ECHO: bool = False
    DB_CREATE_SCHEMA: bool = True

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("logs")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    ENABLE_SQL_LOGGING: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Derived settings ---
    @property
    def DATABASE_URL(self) -> str:
        """
        Return the async SQLAlchemy URL the application should connect to.

        Resolution order:
        1. `DB_URL` when given explicitly.
        2. A Postgres URL when `POSTGRES_HOST` is configured. With `TESTING=True` and
           `TEST_POSTGRES_DB` set, the test database name replaces `POSTGRES_DB`.
        3. A local SQLite file (`SQLITE_PATH`) through the aiosqlite driver.
        """
        if self.DB_URL:
            return self.DB_URL

        if self.POSTGRES_HOST:
            database = self.POSTGRES_DB
            if self.TESTING and self.TEST_POSTGRES_DB:
                database = self.TEST_POSTGRES_DB
            return (
                f"postgresql+{self.POSTGRES_DRIVER}://"
                f"{self.POSTGRES_USERNAME}:{self.POSTGRES_PASSWORD}@"
                f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/"
                f"{database}"
            )

        return f"sqlite+aiosqlite:///{self.SQLITE_PATH.as_posix()}"

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Normalize LOG_LEVEL to upper case before the Literal check runs, so
        `LOG_LEVEL=debug` is accepted.
        """
        return normalize_case(v, upper=True)

    @field_validator("LOG_FORMAT", mode="before")
    @classmethod
    def normalize_log_format(cls, v: str | None) -> str | None:
        return normalize_case(v, upper=False)

    @field_validator("API_PREFIX", mode="after")
    @classmethod
    def normalize_api_prefix(cls, v: str) -> str:
        # "" or "/v1"; never a trailing slash
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v


# get_settings() takes no arguments and always returns the same settings from the environment,
# so it is cached; tests call get_settings.cache_clear() after changing the environment.
@lru_cache()
def get_settings() -> Settings:
    return Settings()
