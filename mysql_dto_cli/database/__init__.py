"""Database catalog module for mysql-dto-cli.

This module reads schemas, tables and columns from the MySQL system
catalog and maps native column types to TypeScript types.
"""

from .models import (
    YesNo,
    TableType,
    SchemaDescriptor,
    TableDescriptor,
    ColumnDescriptor,
    GeneratedOutput,
    SYSTEM_SCHEMAS,
    is_system_schema,
)
from .base import CatalogReader
from .type_mappers import TypeMapper, TypeCategory, MYSQL_TYPE_RULES
from .mysql import MySqlCatalogReader

__all__ = [
    # Data models
    "YesNo",
    "TableType",
    "SchemaDescriptor",
    "TableDescriptor",
    "ColumnDescriptor",
    "GeneratedOutput",
    "SYSTEM_SCHEMAS",
    "is_system_schema",
    # Base classes
    "CatalogReader",
    # Type mappers
    "TypeMapper",
    "TypeCategory",
    "MYSQL_TYPE_RULES",
    # Readers
    "MySqlCatalogReader",
]
