"""Shared pytest fixtures for mysql-dto-cli tests."""

import pytest
from typing import Dict, List, Optional

from mysql_dto_cli.database.base import CatalogReader
from mysql_dto_cli.database.models import (
    SYSTEM_SCHEMAS,
    ColumnDescriptor,
    SchemaDescriptor,
    TableDescriptor,
    YesNo,
)
from mysql_dto_cli.logging.cli_service import CLIRunLogger


class MockCatalogReader(CatalogReader):
    """In-memory CatalogReader for testing without a MySQL server.

    ``list_schemas`` returns the configured names unfiltered so tests can
    check that the generator drops system schemas on its own.
    """

    EXCLUDED_SCHEMAS = SYSTEM_SCHEMAS

    def __init__(
        self,
        schemas: List[Optional[str]],
        tables: Optional[Dict[str, List[TableDescriptor]]] = None,
        columns: Optional[Dict[str, List[ColumnDescriptor]]] = None,
        fail_on: Optional[Dict[str, Exception]] = None,
    ):
        self.host = "localhost"
        self.port = 3306
        self.database = "shop"
        self.schemas = schemas
        self.tables = tables or {}
        self.columns = columns or {}
        self.fail_on = fail_on or {}
        self.calls: List[tuple] = []
        self.closed = False

    def _record(self, method: str, *args):
        self.calls.append((method,) + args)
        if method in self.fail_on:
            raise self.fail_on[method]

    def close(self):
        self.closed = True

    def ping(self) -> bool:
        self._record("ping")
        return True

    def list_all_schemas(self) -> List[SchemaDescriptor]:
        self._record("list_all_schemas")
        return [SchemaDescriptor(name=name) for name in self.schemas]

    def list_schemas(self) -> List[SchemaDescriptor]:
        self._record("list_schemas")
        return [SchemaDescriptor(name=name) for name in self.schemas]

    def list_tables(self, schema: str) -> List[TableDescriptor]:
        self._record("list_tables", schema)
        return list(self.tables.get(schema, []))

    def list_columns(self, schema: str) -> List[ColumnDescriptor]:
        self._record("list_columns", schema)
        return list(self.columns.get(schema, []))

    def list_table_columns(self, schema: str, table: str) -> List[ColumnDescriptor]:
        self._record("list_table_columns", schema, table)
        return [c for c in self.columns.get(schema, []) if c.table_name == table]


def make_column(table: str, name: str, column_type: str, ordinal: int, **kwargs) -> ColumnDescriptor:
    """Build a ColumnDescriptor with data_type derived from column_type."""
    kwargs.setdefault("data_type", column_type.split("(")[0].split(" ")[0])
    return ColumnDescriptor(
        table_name=table,
        name=name,
        column_type=column_type,
        ordinal_position=ordinal,
        **kwargs,
    )


@pytest.fixture
def column_factory():
    return make_column


@pytest.fixture
def users_table():
    return TableDescriptor(name="users", comment="Registered users")


@pytest.fixture
def users_columns():
    """Columns of ``users``: an auto-increment id and two writable columns."""
    return [
        make_column("users", "id", "bigint unsigned", 1, extra="auto_increment"),
        make_column(
            "users", "email", "varchar(255)", 2,
            character_maximum_length=255, comment="Login email",
        ),
        make_column(
            "users", "bio", "varchar(255)", 3,
            character_maximum_length=255, is_nullable=YesNo.YES, comment="User biography",
        ),
    ]


@pytest.fixture
def tags_table():
    return TableDescriptor(name="tags")


@pytest.fixture
def tags_columns():
    """Columns of ``tags``: every column writable."""
    return [
        make_column("tags", "name", "varchar(64)", 1, character_maximum_length=64),
        make_column("tags", "weight", "decimal(10,2)", 2, is_nullable=YesNo.YES, column_default="1.00"),
    ]


@pytest.fixture
def mock_reader(users_table, users_columns, tags_table, tags_columns):
    """A catalog with one user schema, system schemas and a nameless schema row."""
    return MockCatalogReader(
        schemas=["information_schema", "mysql", "shop", None, "performance_schema", "sys"],
        tables={"shop": [users_table, tags_table]},
        columns={"shop": users_columns + tags_columns},
    )


@pytest.fixture
def mock_reader_factory():
    """Return the MockCatalogReader class for tests that build their own catalog."""
    return MockCatalogReader


@pytest.fixture
def run_logger(tmp_path):
    """A CLIRunLogger backed by a temporary SQLite file."""
    logger = CLIRunLogger(db_path=str(tmp_path / "cli_runs.db"))
    yield logger
    if logger.db:
        logger.db.close()


@pytest.fixture
def disabled_run_logger():
    return CLIRunLogger(enabled=False)
