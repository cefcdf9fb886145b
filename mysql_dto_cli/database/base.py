"""Abstract base class for system catalog readers."""

from abc import ABC, abstractmethod
from typing import List

from .models import ColumnDescriptor, SchemaDescriptor, TableDescriptor


class CatalogReader(ABC):
    """Reads schema, table and column descriptors from a database catalog.

    Subclasses must implement the abstract methods to provide
    database-specific queries. Every method issues one parameterized query.
    """

    # Override in subclasses to exclude system schemas
    EXCLUDED_SCHEMAS: frozenset = frozenset()

    @abstractmethod
    def close(self):
        """Release the connection pool."""
        pass

    @abstractmethod
    def ping(self) -> bool:
        """Run a trivial query to verify connectivity."""
        pass

    @abstractmethod
    def list_all_schemas(self) -> List[SchemaDescriptor]:
        """Get every schema, system schemas included, ordered by name."""
        pass

    @abstractmethod
    def list_schemas(self) -> List[SchemaDescriptor]:
        """Get user schemas (EXCLUDED_SCHEMAS removed), ordered by name."""
        pass

    @abstractmethod
    def list_tables(self, schema: str) -> List[TableDescriptor]:
        """Get the base tables of a schema, ordered by name.

        Args:
            schema: Schema name
        """
        pass

    @abstractmethod
    def list_columns(self, schema: str) -> List[ColumnDescriptor]:
        """Get the columns of every table in a schema.

        Callers group the result by ``table_name``.

        Args:
            schema: Schema name
        """
        pass

    @abstractmethod
    def list_table_columns(self, schema: str, table: str) -> List[ColumnDescriptor]:
        """Get the columns of one table, in ordinal order.

        Args:
            schema: Schema name
            table: Table name
        """
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
