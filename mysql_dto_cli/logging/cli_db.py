"""Database operations for CLI run logging."""

import sqlite3
import logging
import json
from pathlib import Path
from typing import Optional, List, Dict, Any
from datetime import datetime, timedelta, timezone

logger = logging.getLogger(__name__)


# SQL schema for CLI run logging
SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS cli_runs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    run_id TEXT UNIQUE NOT NULL,
    timestamp TEXT NOT NULL,
    command TEXT NOT NULL,
    host TEXT,
    database_name TEXT,
    schema_filter TEXT,  -- JSON array
    output_dir TEXT,
    dry_run BOOLEAN DEFAULT FALSE,
    status TEXT DEFAULT 'started',  -- 'started', 'success', 'error'
    duration_ms INTEGER,

    -- Generation results
    schemas_count INTEGER,
    tables_count INTEGER,
    columns_count INTEGER,
    outputs_generated TEXT,  -- JSON array of module names
    files_written INTEGER,

    -- Error information
    error_message TEXT,
    error_type TEXT,
    error_traceback TEXT,

    -- Environment info
    python_version TEXT,
    package_version TEXT,
    working_directory TEXT
);

CREATE INDEX IF NOT EXISTS idx_cli_runs_timestamp ON cli_runs(timestamp);
CREATE INDEX IF NOT EXISTS idx_cli_runs_run_id ON cli_runs(run_id);
CREATE INDEX IF NOT EXISTS idx_cli_runs_status ON cli_runs(status);
"""


def _now() -> datetime:
    return datetime.now(timezone.utc)


def get_default_cli_db_path() -> str:
    """Get the default database path (~/.mysql-dto/cli_runs.db)."""
    app_dir = Path.home() / ".mysql-dto"
    app_dir.mkdir(exist_ok=True)
    return str(app_dir / "cli_runs.db")


class CLIRunDatabase:
    """SQLite database for CLI run logging."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses default.
        """
        self.db_path = db_path or get_default_cli_db_path()
        self._connection: Optional[sqlite3.Connection] = None
        self._initialized = False

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                isolation_level=None,  # Auto-commit mode
            )
            self._connection.row_factory = sqlite3.Row
        return self._connection

    def initialize(self) -> None:
        """Initialize database schema."""
        if self._initialized:
            return

        try:
            conn = self._get_connection()
            conn.executescript(SCHEMA_SQL)
            self._initialized = True
            logger.debug("CLI logging database initialized at %s", self.db_path)
        except Exception as e:
            logger.error("Failed to initialize CLI logging database: %s", e)
            raise

    def close(self) -> None:
        """Close database connection."""
        if self._connection:
            self._connection.close()
            self._connection = None
            self._initialized = False

    def insert_run(
        self,
        run_id: str,
        command: str,
        host: Optional[str] = None,
        database_name: Optional[str] = None,
        schema_filter: Optional[List[str]] = None,
        output_dir: Optional[str] = None,
        dry_run: bool = False,
        python_version: Optional[str] = None,
        package_version: Optional[str] = None,
        working_directory: Optional[str] = None,
    ) -> int:
        """Insert a new CLI run entry.

        Args:
            run_id: Unique identifier for this run
            command: Command name (e.g., 'generate')
            host: MySQL host
            database_name: Database connected to
            schema_filter: Schemas requested with --schema, if any
            output_dir: Output directory
            dry_run: Whether files were written
            python_version: Python version
            package_version: mysql-dto-cli version
            working_directory: Current working directory

        Returns:
            The row ID of the inserted entry
        """
        self.initialize()
        conn = self._get_connection()

        schema_filter_json = json.dumps(schema_filter) if schema_filter else None

        cursor = conn.execute(
            """
            INSERT INTO cli_runs (
                run_id, timestamp, command, host, database_name, schema_filter,
                output_dir, dry_run, status,
                python_version, package_version, working_directory
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, 'started', ?, ?, ?)
            """,
            (
                run_id, _now().isoformat(), command, host, database_name,
                schema_filter_json, output_dir, dry_run,
                python_version, package_version, working_directory,
            ),
        )
        return cursor.lastrowid

    def update_generation_results(
        self,
        run_id: str,
        schemas_count: int,
        tables_count: int,
        columns_count: int,
        outputs_generated: List[str],
        files_written: int,
    ) -> None:
        """Update run with generation results."""
        conn = self._get_connection()
        conn.execute(
            """
            UPDATE cli_runs
            SET schemas_count = ?, tables_count = ?, columns_count = ?,
                outputs_generated = ?, files_written = ?
            WHERE run_id = ?
            """,
            (
                schemas_count, tables_count, columns_count,
                json.dumps(outputs_generated), files_written, run_id,
            ),
        )

    def update_success(self, run_id: str, duration_ms: int) -> None:
        """Mark run as successful."""
        conn = self._get_connection()
        conn.execute(
            """
            UPDATE cli_runs
            SET status = 'success', duration_ms = ?
            WHERE run_id = ?
            """,
            (duration_ms, run_id),
        )

    def update_error(
        self,
        run_id: str,
        error_message: str,
        error_type: Optional[str] = None,
        error_traceback: Optional[str] = None,
        duration_ms: Optional[int] = None,
    ) -> None:
        """Mark run as failed with error details.

        Args:
            run_id: Run identifier
            error_message: Error message
            error_type: Exception type
            error_traceback: Full traceback
            duration_ms: Duration until error
        """
        conn = self._get_connection()
        conn.execute(
            """
            UPDATE cli_runs
            SET status = 'error', error_message = ?, error_type = ?,
                error_traceback = ?, duration_ms = ?
            WHERE run_id = ?
            """,
            (error_message, error_type, error_traceback, duration_ms, run_id),
        )

    def query_runs(
        self,
        status: Optional[str] = None,
        database_name: Optional[str] = None,
        since_hours: int = 24,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        """Query run entries with optional filters.

        Args:
            status: Filter by status
            database_name: Filter by database
            since_hours: Look back N hours (default 24)
            limit: Maximum number of results

        Returns:
            List of run entries as dictionaries, newest first
        """
        self.initialize()
        conn = self._get_connection()

        conditions = ["timestamp >= ?"]
        params: List[Any] = [(_now() - timedelta(hours=since_hours)).isoformat()]

        if status:
            conditions.append("status = ?")
            params.append(status)

        if database_name:
            conditions.append("database_name = ?")
            params.append(database_name)

        where_clause = " AND ".join(conditions)
        params.append(limit)

        query = f"""
            SELECT * FROM cli_runs
            WHERE {where_clause}
            ORDER BY timestamp DESC
            LIMIT ?
        """

        cursor = conn.execute(query, params)
        return [dict(row) for row in cursor.fetchall()]

    def get_run_by_id(self, run_id: str) -> Optional[Dict[str, Any]]:
        """Get a specific run by ID."""
        self.initialize()
        conn = self._get_connection()

        cursor = conn.execute(
            "SELECT * FROM cli_runs WHERE run_id = ?",
            (run_id,),
        )
        row = cursor.fetchone()

        return dict(row) if row else None

    def get_stats(self, since_hours: int = 24) -> Dict[str, Any]:
        """Get statistics about CLI runs.

        Args:
            since_hours: Look back N hours

        Returns:
            Dict with statistics
        """
        self.initialize()
        conn = self._get_connection()

        since_time = (_now() - timedelta(hours=since_hours)).isoformat()

        cursor = conn.execute(
            """
            SELECT
                COUNT(*) as total,
                SUM(CASE WHEN status = 'success' THEN 1 ELSE 0 END) as success_count,
                SUM(CASE WHEN status = 'error' THEN 1 ELSE 0 END) as error_count,
                AVG(duration_ms) as avg_duration_ms,
                SUM(schemas_count) as total_schemas,
                SUM(tables_count) as total_tables
            FROM cli_runs
            WHERE timestamp >= ?
            """,
            (since_time,),
        )
        row = cursor.fetchone()

        cursor = conn.execute(
            """
            SELECT run_id, timestamp, command, error_message, error_type
            FROM cli_runs
            WHERE timestamp >= ? AND status = 'error'
            ORDER BY timestamp DESC
            LIMIT 5
            """,
            (since_time,),
        )
        recent_errors = [dict(r) for r in cursor.fetchall()]

        return {
            "total_runs": row["total"] or 0,
            "success_count": row["success_count"] or 0,
            "error_count": row["error_count"] or 0,
            "avg_duration_ms": round(row["avg_duration_ms"] or 0, 2),
            "total_schemas_generated": row["total_schemas"] or 0,
            "total_tables_generated": row["total_tables"] or 0,
            "since_hours": since_hours,
            "recent_errors": recent_errors,
        }

    def cleanup_old_runs(self, retention_days: int = 30) -> int:
        """Delete runs older than retention period.

        Returns:
            Number of deleted rows
        """
        self.initialize()
        conn = self._get_connection()

        cutoff_time = _now() - timedelta(days=retention_days)
        cursor = conn.execute(
            "DELETE FROM cli_runs WHERE timestamp < ?",
            (cutoff_time.isoformat(),),
        )

        deleted = cursor.rowcount
        if deleted > 0:
            logger.info("Cleaned up %d old CLI run entries", deleted)

        return deleted

    def __enter__(self):
        """Context manager entry."""
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
