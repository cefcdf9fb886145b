"""CLI run logging service for mysql-dto-cli.

Provides a high-level interface for logging CLI command runs,
including automatic context capture and error handling.
"""

import logging
import os
import sys
import time
import traceback
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from mysql_dto_cli.logging.cli_db import CLIRunDatabase

logger = logging.getLogger(__name__)

# Global logger instance
_cli_logger: Optional["CLIRunLogger"] = None


def get_cli_logger() -> "CLIRunLogger":
    """Get or create the global CLI logger instance from settings."""
    global _cli_logger
    if _cli_logger is None:
        from mysql_dto_cli.config import settings

        _cli_logger = CLIRunLogger(
            db_path=settings.cli_logging_db_path,
            enabled=settings.cli_logging_enabled,
            retention_days=settings.cli_logging_retention_days,
        )
    return _cli_logger


@dataclass
class RunContext:
    """Context for a CLI run."""

    run_id: str
    command: str
    host: Optional[str] = None
    database_name: Optional[str] = None
    schema_filter: Optional[List[str]] = None
    output_dir: Optional[str] = None
    dry_run: bool = False
    start_time: float = field(default_factory=time.time)

    # Results that get populated during the run
    schemas_count: int = 0
    tables_count: int = 0
    columns_count: int = 0
    outputs_generated: List[str] = field(default_factory=list)
    files_written: int = 0


class CLIRunLogger:
    """High-level logger for CLI runs.

    Example usage:
        run_logger = get_cli_logger()

        with run_logger.log_run(command="generate", database_name="shop") as ctx:
            outputs = generator.generate()
            ctx.outputs_generated = [o.name for o in outputs]

            # If an error occurs, it is recorded and re-raised
    """

    def __init__(self, db_path: Optional[str] = None, enabled: bool = True, retention_days: int = 30):
        """Initialize the CLI run logger.

        Args:
            db_path: Path to the SQLite database. If None, uses default.
            enabled: Whether logging is enabled.
            retention_days: Runs older than this are purged on startup.
        """
        self.enabled = enabled
        self._db: Optional[CLIRunDatabase] = None

        if self.enabled:
            try:
                self._db = CLIRunDatabase(db_path)
                self._db.initialize()
                self._db.cleanup_old_runs(retention_days)
            except Exception as e:
                logger.warning("Failed to initialize CLI logging: %s", e)
                self._db = None
                self.enabled = False

    @property
    def db(self) -> Optional[CLIRunDatabase]:
        """Get the database instance."""
        return self._db

    def _get_environment_info(self) -> Dict[str, str]:
        """Get environment information for logging."""
        return {
            "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
            "package_version": self._get_package_version(),
            "working_directory": os.getcwd(),
        }

    def _get_package_version(self) -> str:
        """Get the mysql-dto-cli package version."""
        try:
            from importlib.metadata import version
            return version("mysql-dto-cli")
        except Exception:
            return "unknown"

    @contextmanager
    def log_run(
        self,
        command: str,
        host: Optional[str] = None,
        database_name: Optional[str] = None,
        schema_filter: Optional[List[str]] = None,
        output_dir: Optional[str] = None,
        dry_run: bool = False,
    ):
        """Context manager for logging a CLI run.

        Yields:
            RunContext that can be updated during the run
        """
        run_id = str(uuid.uuid4())[:8]
        ctx = RunContext(
            run_id=run_id,
            command=command,
            host=host,
            database_name=database_name,
            schema_filter=schema_filter,
            output_dir=output_dir,
            dry_run=dry_run,
        )

        if not self.enabled or self._db is None:
            yield ctx
            return

        try:
            env_info = self._get_environment_info()
            self._db.insert_run(
                run_id=run_id,
                command=command,
                host=host,
                database_name=database_name,
                schema_filter=schema_filter,
                output_dir=output_dir,
                dry_run=dry_run,
                python_version=env_info["python_version"],
                package_version=env_info["package_version"],
                working_directory=env_info["working_directory"],
            )
        except Exception as e:
            logger.warning("Failed to log run start: %s", e)

        try:
            yield ctx
        except Exception as e:
            duration_ms = int((time.time() - ctx.start_time) * 1000)
            try:
                self._db.update_error(
                    run_id=run_id,
                    error_message=str(e),
                    error_type=type(e).__name__,
                    error_traceback=traceback.format_exc(),
                    duration_ms=duration_ms,
                )
            except Exception as log_err:
                logger.warning("Failed to log run error: %s", log_err)

            logger.debug("CLI run %s failed after %dms: %s", run_id, duration_ms, e)
            raise

        duration_ms = int((time.time() - ctx.start_time) * 1000)
        try:
            self._update_run_results(ctx)
            self._db.update_success(run_id, duration_ms)
        except Exception as e:
            logger.warning("Failed to log run success: %s", e)

        logger.debug("CLI run %s completed successfully in %dms", run_id, duration_ms)

    def _update_run_results(self, ctx: RunContext) -> None:
        """Update the run entry with collected results."""
        if ctx.outputs_generated:
            self._db.update_generation_results(
                run_id=ctx.run_id,
                schemas_count=ctx.schemas_count,
                tables_count=ctx.tables_count,
                columns_count=ctx.columns_count,
                outputs_generated=ctx.outputs_generated,
                files_written=ctx.files_written,
            )

    def query_runs(
        self,
        status: Optional[str] = None,
        database_name: Optional[str] = None,
        since_hours: int = 24,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        """Query CLI runs with optional filters."""
        if not self.enabled or not self._db:
            return []

        return self._db.query_runs(
            status=status,
            database_name=database_name,
            since_hours=since_hours,
            limit=limit,
        )

    def get_stats(self, since_hours: int = 24) -> Dict[str, Any]:
        """Get statistics about CLI runs."""
        if not self.enabled or not self._db:
            return {"error": "Logging not enabled"}

        return self._db.get_stats(since_hours=since_hours)

    def get_run(self, run_id: str) -> Optional[Dict[str, Any]]:
        """Get a specific run by ID."""
        if not self.enabled or not self._db:
            return None

        return self._db.get_run_by_id(run_id)

