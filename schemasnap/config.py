"""Configuration management for schemasnap."""

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional


def _find_env_file() -> Optional[str]:
    """Return the first .env found in the working directory, ~/.schemasnap
    or the project root."""
    candidates = (
        Path(".env"),
        Path.home() / ".schemasnap" / ".env",
        Path(__file__).parent.parent / ".env",
    )
    for candidate in candidates:
        if candidate.is_file():
            return str(candidate)
    return None


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=_find_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # MySQL connection
    mysql_host: str = Field(
        default="localhost",
        description="MySQL server host"
    )
    mysql_port: int = Field(
        default=3306,
        description="MySQL server port"
    )
    mysql_user: str = Field(
        default="root",
        description="MySQL user name"
    )
    mysql_password: Optional[str] = Field(
        default=None,
        description="MySQL password"
    )
    mysql_database: Optional[str] = Field(
        default=None,
        description="Database to introspect"
    )
    mysql_charset: str = Field(
        default="utf8mb4",
        description="Connection character set"
    )
    mysql_connect_timeout: int = Field(
        default=10,
        description="Connection timeout in seconds"
    )

    # Run logging configuration
    run_logging_enabled: bool = Field(
        default=True,
        description="Enable database logging for CLI command runs"
    )
    run_logging_db_path: Optional[str] = Field(
        default=None,
        description="Path to runs database file (default: ~/.schemasnap/runs.db)"
    )
    run_logging_retention_days: int = Field(
        default=30,
        description="Number of days to retain run log entries"
    )


# Global settings instance
settings = Settings()
