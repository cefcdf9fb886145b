"""TypeScript DTO generator for MySQL schemas."""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ..database.base import CatalogReader
from ..database.models import (
    ColumnDescriptor,
    GeneratedOutput,
    TableDescriptor,
    is_system_schema,
)
from ..database.type_mappers import TypeMapper
from .emitter import (
    DocBlock,
    FieldDecl,
    ImportDecl,
    InterfaceDecl,
    LineComment,
    Module,
    Section,
    TypeAlias,
)

logger = logging.getLogger(__name__)

COMMON_TYPES_NAME = "_types"
JSON_TYPE_NAME = "JsonType"
JSON_TYPE_DEFINITION = (
    "string | number | boolean | { [x: string]: JsonType } | Array<JsonType>"
)


class ColumnRenderer:
    """Renders one column as an interface field with its doc block."""

    def __init__(self, type_mapper: Optional[TypeMapper] = None):
        self.type_mapper = type_mapper or TypeMapper()

    def render(self, column: ColumnDescriptor) -> FieldDecl:
        doc = DocBlock()
        if column.comment:
            doc.add(column.comment)
        doc.add(f"Type: {self._native_type_text(column)}")
        doc.add(f"Default value: {self._default_text(column.column_default)}")

        type_expr = self.type_mapper.to_ts_type(column.column_type)
        if column.nullable:
            type_expr = f"{type_expr} | null"

        return FieldDecl(name=column.name, type_expr=type_expr, doc=doc)

    def _native_type_text(self, column: ColumnDescriptor) -> str:
        if not column.data_type:
            return column.column_type
        max_chars = f"({column.character_maximum_length})" if column.character_maximum_length else ""
        return f"{column.data_type}{max_chars}"

    def _default_text(self, default: Optional[str]) -> str:
        # Rendered even when there is no default
        return "null" if default is None else str(default)


class ModelEmitter:
    """Emits the DTO declarations for one table.

    If every column is writable, a single ``<table>DtoWritable`` interface is
    emitted together with the alias ``<table>Dto``. Otherwise
    ``<table>DtoWritable`` holds only the writable columns and
    ``<table>Dto`` extends it with the full column list.
    See ``ColumnDescriptor.is_writable`` for the writable predicate.
    """

    def __init__(self, column_renderer: Optional[ColumnRenderer] = None):
        self.column_renderer = column_renderer or ColumnRenderer()

    def emit(self, table: TableDescriptor, columns: Iterable[ColumnDescriptor]) -> Section:
        table_name = table.name or ""
        ordered = sorted(columns, key=lambda c: c.ordinal_position)
        all_fields = [(column, self.column_renderer.render(column)) for column in ordered]
        writable_fields = [f for column, f in all_fields if column.is_writable]

        writable_name = f"{table_name}DtoWritable"
        dto_name = f"{table_name}Dto"

        if len(writable_fields) == len(all_fields):
            doc = DocBlock().add(f"Model for read & write operations on table {table_name}")
            self._add_table_comment(doc, table)
            return Section([
                InterfaceDecl(name=writable_name, fields=[f for _, f in all_fields], doc=doc),
                TypeAlias(name=dto_name, target=writable_name),
            ])

        write_doc = DocBlock().add(f"Model for write operations on table {table_name}")
        self._add_table_comment(write_doc, table)
        read_doc = DocBlock().add(f"Model for read operations on table {table_name}")
        return Section([
            InterfaceDecl(name=writable_name, fields=writable_fields, doc=write_doc),
            InterfaceDecl(
                name=dto_name,
                fields=[f for _, f in all_fields],
                doc=read_doc,
                extends=writable_name,
            ),
        ])

    def _add_table_comment(self, doc: DocBlock, table: TableDescriptor):
        if table.comment:
            doc.add(table.comment)


class SchemaEmitter:
    """Assembles table models into one module per schema."""

    def __init__(self, model_emitter: Optional[ModelEmitter] = None, logger: logging.Logger = logger):
        self.model_emitter = model_emitter or ModelEmitter()
        self._logger = logger

    def emit_common_types(self) -> GeneratedOutput:
        """Emit the module shared by every schema (recursive JSON type).

        Nullability is left to the caller: ``JsonType | null``.
        """
        module = Module().add(
            LineComment("recursive JSON type; you can append nullable or not"),
            TypeAlias(name=JSON_TYPE_NAME, target=JSON_TYPE_DEFINITION),
        )
        return GeneratedOutput(name=COMMON_TYPES_NAME, content=module.render())

    def emit_schema(
        self,
        schema_name: str,
        tables: List[TableDescriptor],
        columns: List[ColumnDescriptor],
    ) -> GeneratedOutput:
        columns_by_table: Dict[str, List[ColumnDescriptor]] = defaultdict(list)
        for column in columns:
            columns_by_table[column.table_name].append(column)

        module = Module().add(ImportDecl(names=[JSON_TYPE_NAME], module=f"./{COMMON_TYPES_NAME}"))

        named_tables = []
        for table in tables:
            if not table.name:
                self._logger.debug("Skipping table without a name in schema %s", schema_name)
                continue
            named_tables.append(table)

        for table in sorted(named_tables, key=lambda t: t.name):
            self._logger.debug(" -- generate table models %s ...", table.name)
            module.sections.append(self.model_emitter.emit(table, columns_by_table.get(table.name, [])))

        return GeneratedOutput(name=schema_name, content=module.render())


@dataclass
class GenerationStats:
    """Counts collected during one generation run."""
    schemas_count: int = 0
    tables_count: int = 0
    columns_count: int = 0


class DtoGenerator:
    """Generates TypeScript DTO modules for every user schema of a database.

    Schemas are processed one at a time: tables are fetched, then columns,
    then the module is rendered in memory. Any error aborts the whole run.
    """

    def __init__(
        self,
        reader: CatalogReader,
        schema_filter: Optional[Iterable[str]] = None,
        type_mapper: Optional[TypeMapper] = None,
        logger: logging.Logger = logger,
    ):
        self.reader = reader
        self.schema_filter = set(schema_filter) if schema_filter else None
        self._logger = logger
        self.schema_emitter = SchemaEmitter(
            ModelEmitter(ColumnRenderer(type_mapper)),
            logger=logger,
        )
        self.stats = GenerationStats()

    def generate(self) -> List[GeneratedOutput]:
        """Return the shared types module followed by one module per schema."""
        self._logger.debug("DtoGenerator generating DTOs...")
        self.stats = GenerationStats()

        schema_rows = self.reader.list_schemas()
        output = [self.schema_emitter.emit_common_types()]

        for schema_row in schema_rows:
            schema_name = schema_row.name
            if not schema_name:
                continue
            if is_system_schema(schema_name):
                self._logger.debug("Skipping system schema %s", schema_name)
                continue
            if self.schema_filter is not None and schema_name not in self.schema_filter:
                continue
            if schema_name.lower() == COMMON_TYPES_NAME:
                # Its file would replace the shared types module
                self._logger.warning(
                    "Skipping schema %s: name is reserved for the shared types module", schema_name
                )
                continue
            output.append(self._generate_schema(schema_name))

        self._logger.debug("DtoGenerator generating DTOs... done!")
        return output

    def _generate_schema(self, schema_name: str) -> GeneratedOutput:
        self._logger.debug(" - generate schema %s ...", schema_name)

        tables = self.reader.list_tables(schema_name)
        columns = self.reader.list_columns(schema_name)
        schema_output = self.schema_emitter.emit_schema(schema_name, tables, columns)

        table_names = {t.name for t in tables if t.name}
        self.stats.schemas_count += 1
        self.stats.tables_count += len(table_names)
        self.stats.columns_count += sum(1 for c in columns if c.table_name in table_names)

        self._logger.debug(" - generate schema %s ... done!", schema_name)
        return schema_output
