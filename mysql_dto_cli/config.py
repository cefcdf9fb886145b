"""Configuration management for mysql-dto-cli."""

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional


def _find_env_file() -> Optional[str]:
    """Find .env file in multiple locations.

    Search order:
    1. Current working directory
    2. ~/.mysql-dto/.env
    3. Package directory (where this file is located)
    """
    # Current directory
    if os.path.exists(".env"):
        return ".env"

    # User config directory
    user_env = Path.home() / ".mysql-dto" / ".env"
    if user_env.exists():
        return str(user_env)

    # Package directory
    package_dir = Path(__file__).parent.parent
    package_env = package_dir / ".env"
    if package_env.exists():
        return str(package_env)

    return None


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # MySQL connection
    mysql_host: str = Field(
        default="localhost",
        description="MySQL server host"
    )
    mysql_port: int = Field(
        default=3306,
        description="MySQL server port"
    )
    mysql_user: Optional[str] = Field(
        default=None,
        description="MySQL user"
    )
    mysql_password: Optional[str] = Field(
        default=None,
        description="MySQL password"
    )
    mysql_database: Optional[str] = Field(
        default=None,
        description="Database to connect to"
    )

    # Output
    dto_output_dir: Optional[str] = Field(
        default=None,
        description="Directory receiving the generated .ts files"
    )

    # CLI run logging configuration
    cli_logging_enabled: bool = Field(
        default=True,
        description="Enable database logging for CLI command runs"
    )
    cli_logging_db_path: Optional[str] = Field(
        default=None,
        description="Path to CLI runs database file (default: ~/.mysql-dto/cli_runs.db)"
    )
    cli_logging_retention_days: int = Field(
        default=30,
        description="Number of days to retain CLI run log entries"
    )

    class Config:
        env_file = _find_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()
