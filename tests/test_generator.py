"""Tests for TypeScript DTO generation."""

import logging

import pytest

from mysql_dto_cli.database.models import TableDescriptor, YesNo
from mysql_dto_cli.errors import QueryError
from mysql_dto_cli.typescript.generator import (
    COMMON_TYPES_NAME,
    ColumnRenderer,
    DtoGenerator,
    ModelEmitter,
    SchemaEmitter,
)
from mysql_dto_cli.typescript.emitter import InterfaceDecl, Module, TypeAlias


def render_section(section) -> str:
    return Module([section]).render()


class TestColumnRenderer:
    """Test rendering a single column."""

    def test_not_nullable_numeric(self, column_factory):
        """NOT NULL numeric columns render without a null union."""
        column = column_factory("users", "id", "bigint unsigned", 1, is_nullable=YesNo.NO)
        field = ColumnRenderer().render(column)
        assert field.render()[-1] == "  id: number;"

    def test_nullable_text_with_comment(self, column_factory):
        """Nullable columns get a null union and the comment leads the doc block."""
        column = column_factory(
            "users", "bio", "varchar(255)", 3,
            character_maximum_length=255, is_nullable=YesNo.YES, comment="User biography",
        )
        lines = ColumnRenderer().render(column).render()
        assert lines == [
            "",
            "  /**",
            "   * User biography",
            "   * Type: varchar(255)",
            "   * Default value: null",
            "   */",
            "  bio: string | null;",
        ]

    def test_doc_block_without_comment(self, column_factory):
        """Without a comment the doc block holds type and default only."""
        column = column_factory("t", "n", "int", 1, column_default="0")
        doc = ColumnRenderer().render(column).doc
        assert doc.lines == ["Type: int", "Default value: 0"]

    def test_nullability_ignores_default(self, column_factory):
        """A missing default does not make a column nullable."""
        column = column_factory("t", "n", "int", 1, column_default=None, is_nullable=YesNo.NO)
        assert ColumnRenderer().render(column).type_expr == "number"

    def test_type_text_falls_back_to_column_type(self, column_factory):
        """The full column type is shown when the data type is missing."""
        column = column_factory("t", "n", "varchar(10)", 1, data_type="")
        assert ColumnRenderer().render(column).doc.lines[0] == "Type: varchar(10)"

    def test_json_column_is_any(self, column_factory):
        """JSON columns render as any."""
        column = column_factory("t", "payload", "json", 1, is_nullable=YesNo.YES)
        assert ColumnRenderer().render(column).type_expr == "any | null"


class TestModelEmitter:
    """Test per-table declarations."""

    def test_unified_shape(self, tags_table, tags_columns):
        """Tables with only writable columns get one interface and an alias."""
        section = ModelEmitter().emit(tags_table, tags_columns)
        assert render_section(section) == (
            "/**\n"
            " * Model for read & write operations on table tags\n"
            " */\n"
            "export interface tagsDtoWritable {\n"
            "\n"
            "  /**\n"
            "   * Type: varchar(64)\n"
            "   * Default value: null\n"
            "   */\n"
            "  name: string;\n"
            "\n"
            "  /**\n"
            "   * Type: decimal\n"
            "   * Default value: 1.00\n"
            "   */\n"
            "  weight: number | null;\n"
            "}\n"
            "export type tagsDto = tagsDtoWritable;\n"
        )

    def test_split_shape(self, users_table, users_columns):
        """Read-only columns split the model into two interfaces."""
        section = ModelEmitter().emit(users_table, users_columns)
        writable, full = section.declarations

        assert isinstance(writable, InterfaceDecl)
        assert writable.name == "usersDtoWritable"
        assert [f.name for f in writable.fields] == ["email", "bio"]

        assert isinstance(full, InterfaceDecl)
        assert full.name == "usersDto"
        assert full.extends == "usersDtoWritable"
        assert [f.name for f in full.fields] == ["id", "email", "bio"]

    def test_split_shape_text(self, users_table, users_columns):
        """Test the exact text of a split model."""
        text = render_section(ModelEmitter().emit(users_table, users_columns))
        assert text.startswith(
            "/**\n"
            " * Model for write operations on table users\n"
            " * Registered users\n"
            " */\n"
            "export interface usersDtoWritable {\n"
        )
        assert (
            "}\n"
            "/**\n"
            " * Model for read operations on table users\n"
            " */\n"
            "export interface usersDto extends usersDtoWritable {\n"
        ) in text
        assert "  id: number;" in text
        assert "  bio: string | null;" in text

    def test_fields_follow_ordinal_order(self, tags_table, column_factory):
        """Fields follow column ordinal positions."""
        columns = [
            column_factory("tags", "c", "int", 3),
            column_factory("tags", "a", "int", 1),
            column_factory("tags", "b", "int", 2),
        ]
        interface = ModelEmitter().emit(tags_table, columns).declarations[0]
        assert [f.name for f in interface.fields] == ["a", "b", "c"]

    def test_field_count_equals_column_count(self, tags_table, tags_columns):
        """Every column becomes exactly one field."""
        interface = ModelEmitter().emit(tags_table, tags_columns).declarations[0]
        assert len(interface.fields) == len(tags_columns)

    def test_table_without_columns(self):
        """A table with no columns still gets empty declarations."""
        section = ModelEmitter().emit(TableDescriptor(name="empty"), [])
        assert render_section(section) == (
            "/**\n"
            " * Model for read & write operations on table empty\n"
            " */\n"
            "export interface emptyDtoWritable {\n"
            "}\n"
            "export type emptyDto = emptyDtoWritable;\n"
        )

    def test_generated_column_forces_split(self, tags_table, column_factory):
        """Generated columns are read-only."""
        columns = [
            column_factory("tags", "name", "varchar(64)", 1),
            column_factory("tags", "slug", "varchar(64)", 2, extra="STORED GENERATED",
                           generation_expression="lower(`name`)"),
        ]
        writable, full = ModelEmitter().emit(tags_table, columns).declarations
        assert [f.name for f in writable.fields] == ["name"]
        assert full.extends == writable.name

    def test_unified_shape_declarations(self, tags_table, tags_columns):
        """The unified alias points at the writable interface."""
        interface, alias = ModelEmitter().emit(tags_table, tags_columns).declarations
        assert isinstance(alias, TypeAlias)
        assert alias.target == interface.name


class TestSchemaEmitter:
    """Test per-schema modules."""

    def test_common_types(self):
        """Test the shared JsonType module."""
        output = SchemaEmitter().emit_common_types()
        assert output.name == COMMON_TYPES_NAME
        assert output.content == (
            "// recursive JSON type; you can append nullable or not\n"
            "export type JsonType = string | number | boolean | "
            "{ [x: string]: JsonType } | Array<JsonType>;\n"
        )

    def test_schema_module_layout(self, users_table, users_columns, tags_table, tags_columns):
        """Schema modules start with the import and list tables by name."""
        output = SchemaEmitter().emit_schema("shop", [users_table, tags_table], users_columns + tags_columns)
        assert output.name == "shop"
        assert output.content.startswith("import { JsonType } from './_types';\n\n/**\n")
        # tables in name order, separated by one blank line
        assert output.content.index("tagsDtoWritable") < output.content.index("usersDtoWritable")
        assert "export type tagsDto = tagsDtoWritable;\n\n/**\n" in output.content
        assert output.content.endswith("}\n")

    def test_table_without_name_is_skipped(self, tags_table, tags_columns):
        """Tables with no name are left out."""
        output = SchemaEmitter().emit_schema("shop", [TableDescriptor(name=None), tags_table], tags_columns)
        assert output.content.count("export interface") == 1

    def test_schema_without_tables(self):
        """A schema with no tables holds only the import."""
        output = SchemaEmitter().emit_schema("empty", [], [])
        assert output.content == "import { JsonType } from './_types';\n"


class TestDtoGenerator:
    """Test the whole generation run."""

    def test_output_order(self, mock_reader):
        """The shared types module comes first."""
        outputs = DtoGenerator(mock_reader).generate()
        assert [o.name for o in outputs] == [COMMON_TYPES_NAME, "shop"]

    def test_system_schemas_are_never_generated(self, mock_reader_factory):
        """System schemas are dropped whatever their case."""
        reader = mock_reader_factory(schemas=["mysql", "SYS", "Information_Schema", "performance_schema"])
        outputs = DtoGenerator(reader).generate()
        assert [o.name for o in outputs] == [COMMON_TYPES_NAME]
        assert not any(call[0] == "list_tables" for call in reader.calls)

    def test_schema_without_name_is_skipped(self, mock_reader):
        """Schemas with no name are left out."""
        outputs = DtoGenerator(mock_reader).generate()
        assert None not in [o.name for o in outputs]

    def test_fetch_order_is_sequential(self, mock_reader):
        """Tables then columns are fetched per schema."""
        DtoGenerator(mock_reader).generate()
        assert mock_reader.calls == [
            ("list_schemas",),
            ("list_tables", "shop"),
            ("list_columns", "shop"),
        ]

    def test_same_table_name_in_two_schemas(self, mock_reader_factory, users_table, users_columns):
        """Equal table names in different schemas do not clash."""
        reader = mock_reader_factory(
            schemas=["a", "b"],
            tables={"a": [users_table], "b": [users_table]},
            columns={"a": users_columns, "b": users_columns},
        )
        outputs = DtoGenerator(reader).generate()
        assert [o.name for o in outputs] == [COMMON_TYPES_NAME, "a", "b"]
        assert outputs[1].content == outputs[2].content
        assert "usersDto" in outputs[1].content

    def test_schema_filter(self, mock_reader_factory):
        """Only requested schemas are generated."""
        reader = mock_reader_factory(schemas=["a", "b", "c"])
        outputs = DtoGenerator(reader, schema_filter=["b"]).generate()
        assert [o.name for o in outputs] == [COMMON_TYPES_NAME, "b"]

    def test_stats(self, mock_reader):
        """Test generation counters."""
        generator = DtoGenerator(mock_reader)
        generator.generate()
        assert generator.stats.schemas_count == 1
        assert generator.stats.tables_count == 2
        assert generator.stats.columns_count == 5

    def test_query_error_aborts_run(self, mock_reader_factory):
        """A failing query stops the run before the next schema."""
        reader = mock_reader_factory(
            schemas=["a", "b"],
            fail_on={"list_columns": QueryError("DB query error")},
        )
        with pytest.raises(QueryError):
            DtoGenerator(reader).generate()
        assert ("list_tables", "b") not in reader.calls

    def test_injected_logger(self, mock_reader, caplog):
        """Progress is logged to the injected logger."""
        test_logger = logging.getLogger("tests.generator")
        with caplog.at_level(logging.DEBUG, logger="tests.generator"):
            DtoGenerator(mock_reader, logger=test_logger).generate()
        messages = [r.getMessage() for r in caplog.records if r.name == "tests.generator"]
        assert "DtoGenerator generating DTOs..." in messages
        assert "Skipping system schema mysql" in messages

    def test_schema_named_like_shared_types_is_skipped(self, mock_reader_factory, caplog):
        """A schema called _types must not overwrite the shared types module."""
        reader = mock_reader_factory(schemas=["_types", "shop"])
        with caplog.at_level(logging.WARNING):
            outputs = DtoGenerator(reader).generate()

        assert [o.name for o in outputs] == [COMMON_TYPES_NAME, "shop"]
        assert outputs[0].content.startswith("// recursive JSON type")
        assert ("list_tables", "_types") not in reader.calls
        assert any("reserved" in r.getMessage() for r in caplog.records)
