from pydantic_settings import BaseSettings
from pydantic import ConfigDict, field_validator
from pathlib import Path
from typing import Literal
from functools import lru_cache
from ..validators.config_validators import to_uppercase, to_lowercase, split_comma_separated

SQLITE_FALLBACK_URL = "sqlite+aiosqlite:///./personal_library.db"


class Settings(BaseSettings):
    """
    Application settings loaded from environment.
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"

    # Include internal exception messages in 500 responses.
    # Off unless enabled explicitly, whatever ENV says.
    DIAGNOSTIC_MODE: bool = False

    # Database configuration
    DB_URL: str | None = None
    POSTGRES_DRIVER: str = "psycopg"
    POSTGRES_USERNAME: str | None = None
    POSTGRES_PASSWORD: str | None = None
    POSTGRES_HOST: str | None = None
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str | None = None

    # SQLAlchemy
    SQLALCHEMY_ECHO: bool = False
    AUTO_CREATE_SCHEMA: bool = True

    # HTTP
    CORS_ORIGINS: str = (
        "http://localhost:5173,http://localhost:5000,http://frontend,http://frontend:80"
    )

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("/var/log/personal-library")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    ENABLE_SQL_LOGGING: bool = False

    # --- Derived settings ---
    @property
    def DATABASE_URL(self) -> str:
        """
        Return the database URL the engine should connect to.

        Resolution order:
        - `DB_URL` when set explicitly.
        - A Postgres URL assembled from the `POSTGRES_*` values when host and db are set.
        - A local SQLite file otherwise, so the API runs without a database server.
        """
        if self.DB_URL:
            return self.DB_URL

        if self.POSTGRES_HOST and self.POSTGRES_DB:
            credentials = ""
            if self.POSTGRES_USERNAME:
                credentials = self.POSTGRES_USERNAME
                if self.POSTGRES_PASSWORD:
                    credentials += f":{self.POSTGRES_PASSWORD}"
                credentials += "@"
            return (
                f"postgresql+{self.POSTGRES_DRIVER}://"
                f"{credentials}"
                f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/"
                f"{self.POSTGRES_DB}"
            )

        return SQLITE_FALLBACK_URL

    @property
    def IS_DIAGNOSTIC(self) -> bool:
        return self.DIAGNOSTIC_MODE

    @property
    def CORS_ORIGIN_LIST(self) -> list[str]:
        return split_comma_separated(self.CORS_ORIGINS)

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Normalize the LOG_LEVEL environment variable value to uppercase,
        the form the logging module expects for level names.
        """
        return to_uppercase(v)

    @field_validator("LOG_FORMAT", "ENV", mode="before")
    def normalize_lowercase(cls, v: str | None) -> str | None:
        return to_lowercase(v)

    # --- ConfigDict settings ---
    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
