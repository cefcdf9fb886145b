"""CLI run logging module for mysql-dto-cli.

Records each CLI command run in a local SQLite database to help with
debugging and auditing.
"""

from mysql_dto_cli.logging.cli_db import CLIRunDatabase, get_default_cli_db_path
from mysql_dto_cli.logging.cli_service import (
    CLIRunLogger,
    RunContext,
    get_cli_logger,
)

__all__ = [
    "CLIRunDatabase",
    "get_default_cli_db_path",
    "CLIRunLogger",
    "RunContext",
    "get_cli_logger",
]
