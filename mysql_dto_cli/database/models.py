"""Catalog descriptors read from information_schema."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class YesNo(str, Enum):
    """Two-valued flag used by information_schema (e.g. IS_NULLABLE)."""
    YES = "YES"
    NO = "NO"

    @classmethod
    def parse(cls, value: Any) -> "YesNo":
        """Parse a catalog value. A missing value (None) is NO.

        Raises:
            ValueError: If the value is neither YES nor NO
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NO
        text = str(value).strip().upper()
        for member in cls:
            if member.value == text:
                return member
        raise ValueError(f"Unknown YES/NO value: {value!r}")


class TableType(str, Enum):
    """Values of information_schema.tables.TABLE_TYPE."""
    BASE_TABLE = "BASE TABLE"
    VIEW = "VIEW"
    SYSTEM_VIEW = "SYSTEM VIEW"
    FOREIGN = "FOREIGN"
    LOCAL_TEMPORARY = "LOCAL TEMPORARY"

    @classmethod
    def parse(cls, value: Any) -> "TableType":
        text = str(value or "").strip().upper()
        for member in cls:
            if member.value == text:
                return member
        raise ValueError(f"Unknown table type: {value!r}")


# Schemas that belong to the server itself and never get models
SYSTEM_SCHEMAS = frozenset({"mysql", "sys", "information_schema", "performance_schema"})


def is_system_schema(name: str) -> bool:
    return name.lower() in SYSTEM_SCHEMAS


@dataclass(frozen=True)
class SchemaDescriptor:
    """One row of information_schema.schemata."""
    name: Optional[str]

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "SchemaDescriptor":
        return cls(name=row.get("schema_name"))


@dataclass(frozen=True)
class TableDescriptor:
    """One row of information_schema.tables."""
    name: Optional[str]
    comment: str = ""
    table_type: TableType = TableType.BASE_TABLE

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "TableDescriptor":
        return cls(
            name=row.get("table_name"),
            comment=row.get("table_comment") or "",
            table_type=TableType.parse(row.get("table_type") or TableType.BASE_TABLE.value),
        )


@dataclass(frozen=True)
class ColumnDescriptor:
    """One row of information_schema.columns.

    ``column_type`` is the full native type (``bigint unsigned``,
    ``varchar(255)``) and drives type mapping; ``data_type`` and
    ``character_maximum_length`` are only used for documentation.
    """
    table_name: Optional[str]
    name: str
    column_type: str
    data_type: str = ""
    character_maximum_length: Optional[int] = None
    is_nullable: YesNo = YesNo.NO
    column_default: Optional[str] = None
    comment: str = ""
    ordinal_position: int = 0
    extra: str = ""
    generation_expression: str = ""

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ColumnDescriptor":
        column_type = row.get("column_type") or row.get("data_type") or ""
        return cls(
            table_name=row.get("table_name"),
            name=row["column_name"],
            column_type=column_type,
            data_type=row.get("data_type") or column_type,
            character_maximum_length=row.get("character_maximum_length"),
            is_nullable=YesNo.parse(row.get("is_nullable")),
            column_default=row.get("column_default"),
            comment=row.get("column_comment") or "",
            ordinal_position=int(row.get("ordinal_position") or 0),
            extra=row.get("extra") or "",
            generation_expression=row.get("generation_expression") or "",
        )

    @property
    def nullable(self) -> bool:
        if self.is_nullable is YesNo.YES:
            return True
        elif self.is_nullable is YesNo.NO:
            return False
        raise ValueError(f"Unhandled nullability flag: {self.is_nullable!r}")

    @property
    def is_writable(self) -> bool:
        """Whether a client is expected to supply this column on insert/update.

        Auto-increment and generated (virtual or stored) columns are
        maintained by the server and are read-only.
        """
        extra = self.extra.lower()
        if "auto_increment" in extra:
            return False
        if "virtual generated" in extra or "stored generated" in extra:
            return False
        if self.generation_expression.strip():
            return False
        return True


@dataclass(frozen=True)
class GeneratedOutput:
    """A generated module: ``name`` is the schema name or ``_types``."""
    name: str
    content: str
