"""
Relational store settings (POSTGRES_*).

Production runs on Postgres with pgvector; POSTGRES_URL can point at
SQLite (sqlite+aiosqlite:///...) for local runs and tests, in which case
the host/port/user parts are ignored and similarity search falls back to
the in-process NumPy index.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Connection target and pool sizing for the async engine."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    user: str = Field(default="postgres", description="PostgreSQL user")
    password: str = Field(default="postgres", description="PostgreSQL password")
    db: str = Field(default="spacerag", description="PostgreSQL database name")

    url: str | None = Field(
        default=None,
        description="Full async SQLAlchemy URL, overrides host/port/user/db when set",
    )

    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=20, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, description="Connection pool timeout in seconds")
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    sslmode: str = Field(default="disable", description="SSL mode (require for managed Postgres)")
    auto_create_tables: bool = Field(
        default=True,
        description="Create extension and tables on application startup",
    )

    @property
    def async_database_url(self) -> str:
        """POSTGRES_URL when set, otherwise an asyncpg URL built from the parts."""
        if self.url:
            return self.url
        ssl_param = "?ssl=require" if self.sslmode == "require" else ""
        return (
            f"postgresql+asyncpg://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.db}{ssl_param}"
        )

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured URL targets SQLite."""
        return self.async_database_url.startswith("sqlite")
