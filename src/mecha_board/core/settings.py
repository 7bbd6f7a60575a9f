"""Application settings and configuration.

This module defines all configuration options for the Mecha Board application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ASYNC_POSTGRES_SCHEME = "postgresql+asyncpg://"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Mecha Board", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # Database configuration. A DATABASE_URL selects PostgreSQL, otherwise the
    # embedded SQLite file is used.
    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    sqlite_path: str = Field(default="mecha_board.db", alias="SQLITE_PATH")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    slow_query_threshold_ms: int = Field(default=1000, alias="SLOW_QUERY_THRESHOLD_MS")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Bundled server runner
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_postgres(self) -> bool:
        """Return True when a client/server connection string is configured."""
        return bool(self.database_url)

    @property
    def is_production(self) -> bool:
        """Return True when running with the production environment flag."""
        return self.environment.strip().lower() == "production"

    @property
    def async_database_url(self) -> str:
        """Return a database URL usable by SQLAlchemy's async engine.

        PostgreSQL URLs are rewritten to the asyncpg driver; without a
        DATABASE_URL the SQLite file is addressed through aiosqlite.

        Returns:
            Database URL with an async driver
        """
        if not self.database_url:
            return f"sqlite+aiosqlite:///{self.sqlite_path}"
        url = self.database_url
        for prefix in ("postgres://", "postgresql://", "postgresql+psycopg://"):
            if url.startswith(prefix):
                return _ASYNC_POSTGRES_SCHEME + url[len(prefix):]
        return url


settings = Settings()
