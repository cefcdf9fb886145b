"""MySQL system catalog reader."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import bindparam, create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import URL
from sqlalchemy.exc import SQLAlchemyError

from ..errors import ConnectionError, QueryError, ValidationError
from .base import CatalogReader
from .models import (
    SYSTEM_SCHEMAS,
    ColumnDescriptor,
    SchemaDescriptor,
    TableDescriptor,
    TableType,
)

logger = logging.getLogger(__name__)

MSG_DB_QUERY_ERROR = "DB query error"
MSG_DB_CONN_ERROR = "DB connection error"

SQL_PING = "SELECT 1 AS success"

SQL_SELECT_SCHEMATA_ALL = """
SELECT
  SCHEMA_NAME AS schema_name
FROM information_schema.schemata
WHERE CATALOG_NAME = 'def'
ORDER BY SCHEMA_NAME
"""

SQL_SELECT_SCHEMATA = """
SELECT
  SCHEMA_NAME AS schema_name
FROM information_schema.schemata
WHERE CATALOG_NAME = 'def'
  AND SCHEMA_NAME NOT IN :excluded
ORDER BY SCHEMA_NAME
"""

SQL_SELECT_TABLES = """
SELECT
  TABLE_NAME AS table_name,
  TABLE_COMMENT AS table_comment,
  TABLE_TYPE AS table_type
FROM information_schema.tables
WHERE TABLE_CATALOG = 'def'
  AND TABLE_SCHEMA = :schema
  AND TABLE_TYPE = :table_type
ORDER BY TABLE_NAME
"""

_COLUMN_FIELDS = """
  TABLE_NAME AS table_name,
  COLUMN_NAME AS column_name,
  ORDINAL_POSITION AS ordinal_position,
  COLUMN_DEFAULT AS column_default,
  IS_NULLABLE AS is_nullable,
  DATA_TYPE AS data_type,
  COLUMN_TYPE AS column_type,
  CHARACTER_MAXIMUM_LENGTH AS character_maximum_length,
  COLUMN_COMMENT AS column_comment,
  EXTRA AS extra,
  GENERATION_EXPRESSION AS generation_expression
"""

SQL_SELECT_COLUMNS = f"""
SELECT{_COLUMN_FIELDS}FROM information_schema.columns
WHERE TABLE_CATALOG = 'def'
  AND TABLE_SCHEMA = :schema
ORDER BY TABLE_NAME, ORDINAL_POSITION
"""

SQL_SELECT_COLUMNS_BY_TABLE = f"""
SELECT{_COLUMN_FIELDS}FROM information_schema.columns
WHERE TABLE_CATALOG = 'def'
  AND TABLE_SCHEMA = :schema
  AND TABLE_NAME = :table
ORDER BY ORDINAL_POSITION
"""


class MySqlCatalogReader(CatalogReader):
    """Reads information_schema through a pooled SQLAlchemy engine.

    Each query checks a connection out of the pool, runs exactly one
    statement and returns the connection before the method returns.
    """

    EXCLUDED_SCHEMAS = SYSTEM_SCHEMAS

    def __init__(
        self,
        database: str,
        host: str = "localhost",
        port: int = 3306,
        user: Optional[str] = None,
        password: Optional[str] = None,
        engine: Optional[Engine] = None,
        logger: logging.Logger = logger,
    ):
        """Initialize the reader.

        Args:
            database: Database to connect to (must not be empty)
            host: MySQL host
            port: MySQL port
            user: MySQL user
            password: MySQL password
            engine: Pre-built engine; when given, connection options are ignored
            logger: Logger receiving connection and query errors
        """
        if not database or database.strip() == "":
            raise ValidationError("invalid database name", details={"database": database})

        self.database = database
        self.host = host
        self.port = port
        self._logger = logger
        self._engine = engine or create_engine(
            URL.create(
                drivername="mysql+pymysql",
                username=user,
                password=password,
                host=host,
                port=int(port),
                database=database,
                query={"charset": "utf8mb4"},
            ),
            pool_pre_ping=True,
        )

    def close(self):
        """Dispose the connection pool."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def query(self, sql, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Run one parameterized query and return its rows as dictionaries.

        Args:
            sql: SQL text or a prepared ``text()`` clause
            params: Bound parameter values

        Raises:
            ConnectionError: if no connection could be checked out
            QueryError: if the statement failed
        """
        if self._engine is None:
            raise ConnectionError("connection pool is closed")

        try:
            conn = self._engine.connect()
        except SQLAlchemyError as e:
            self._logger.error("%s: %s", MSG_DB_CONN_ERROR, e)
            raise ConnectionError(MSG_DB_CONN_ERROR, details={"error": str(e)}) from e

        try:
            statement = text(sql) if isinstance(sql, str) else sql
            result = conn.execute(statement, params or {})
            return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            self._logger.error("%s: %s", MSG_DB_QUERY_ERROR, e)
            raise QueryError(MSG_DB_QUERY_ERROR, details={"error": str(e), "params": params or {}}) from e
        finally:
            conn.close()

    def ping(self) -> bool:
        rows = self.query(SQL_PING)
        self._logger.debug("Connection check returned %s", rows)
        return bool(rows) and rows[0].get("success") == 1

    def list_all_schemas(self) -> List[SchemaDescriptor]:
        rows = self.query(SQL_SELECT_SCHEMATA_ALL)
        return [SchemaDescriptor.from_row(row) for row in rows]

    def list_schemas(self) -> List[SchemaDescriptor]:
        statement = text(SQL_SELECT_SCHEMATA).bindparams(bindparam("excluded", expanding=True))
        params = {"excluded": sorted(self.EXCLUDED_SCHEMAS)}
        rows = self.query(statement, params)
        return [SchemaDescriptor.from_row(row) for row in rows]

    def list_tables(self, schema: str) -> List[TableDescriptor]:
        rows = self.query(SQL_SELECT_TABLES, {"schema": schema, "table_type": TableType.BASE_TABLE.value})
        return [TableDescriptor.from_row(row) for row in rows]

    def list_columns(self, schema: str) -> List[ColumnDescriptor]:
        rows = self.query(SQL_SELECT_COLUMNS, {"schema": schema})
        return self._to_columns(rows, schema)

    def list_table_columns(self, schema: str, table: str) -> List[ColumnDescriptor]:
        rows = self.query(SQL_SELECT_COLUMNS_BY_TABLE, {"schema": schema, "table": table})
        return self._to_columns(rows, schema)

    def _to_columns(self, rows: List[Dict[str, Any]], schema: str) -> List[ColumnDescriptor]:
        columns = []
        for row in rows:
            if not row.get("column_name"):
                self._logger.warning(
                    "Skipping column without a name in %s.%s", schema, row.get("table_name")
                )
                continue
            columns.append(ColumnDescriptor.from_row(row))
        return columns
