"""Exporter settings using pydantic-settings.

Settings are loaded from environment variables (or a .env file) with
defaults suitable for local use.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Permission storage database settings.

    Environment variables:
        PERMSCRIPT_DB_HOST: Database host (default: localhost)
        PERMSCRIPT_DB_PORT: Database port (default: 5432)
        PERMSCRIPT_DB_DATABASE: Database name (default: permissions)
        PERMSCRIPT_DB_USERNAME: Database user (default: permissions)
        PERMSCRIPT_DB_PASSWORD: Database password (required in production)
        PERMSCRIPT_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="PERMSCRIPT_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="permissions", description="Database name")
    username: str = Field(default="permissions", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )


class ExportSettings(BaseSettings):
    """Export job settings.

    Environment variables:
        PERMSCRIPT_EXPORT_WORKER_COUNT: Users loaded concurrently (default: 32)
        PERMSCRIPT_EXPORT_PROGRESS_INTERVAL_SECONDS: Seconds between user
            progress reports (default: 5.0)
        PERMSCRIPT_EXPORT_NOTIFY_FREQUENCY: Item interval for periodic
            progress messages (default: 500)
        PERMSCRIPT_EXPORT_INCLUDE_USERS: Export users as well (default: true)
        PERMSCRIPT_EXPORT_OUTPUT_DIRECTORY: Directory for relative output
            file names (default: current directory)
    """

    model_config = SettingsConfigDict(
        env_prefix="PERMSCRIPT_EXPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    worker_count: int = Field(
        default=32,
        description="Maximum number of users loaded concurrently",
        ge=1,
        le=256,
    )
    progress_interval_seconds: float = Field(
        default=5.0,
        description="Seconds between progress reports during the user export",
        gt=0,
        le=3600,
    )
    notify_frequency: int = Field(
        default=500,
        description="Item interval for periodic progress messages",
        ge=1,
    )
    include_users: bool = Field(
        default=True,
        description="Whether users are exported",
    )
    output_directory: Path = Field(
        default=Path("."),
        description="Directory that relative output file names resolve against",
    )

    def resolve_output(self, file_name: str | Path) -> Path:
        """Resolve an output file name against the output directory."""
        path = Path(file_name).expanduser()
        if path.is_absolute():
            return path
        return self.output_directory / path


class Settings(BaseSettings):
    """Main settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="permscript", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def export(self) -> ExportSettings:
        """Get export settings."""
        return get_export_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings."""
    return DatabaseSettings()


@lru_cache
def get_export_settings() -> ExportSettings:
    """Get cached export settings."""
    return ExportSettings()
