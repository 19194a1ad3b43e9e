# ============================================================================
# DDL OPERATION TESTS
# ============================================================================
# STATUS: Tests - Rendered SQL for planned operations
# PURPOSE: Verify identifiers, literals, NOT NULL rules, FK actions, comments
# CREATED: 16 OCT 2026
# ============================================================================
"""
DDL Operation Tests

Statements are rendered with Composable.as_string() and no connection.

Run with:
    pytest tests/test_ddl.py -v
"""

import pytest
from psycopg import sql

from core.models.catalog import CatalogSnapshot
from core.models.compiled import CompiledField
from core.schema.ddl_utils import ConstraintBuilder, IndexBuilder
from core.schema.operations import (
    AddColumn,
    AddForeignKey,
    CommentOnConstraint,
    CommentOnType,
    CreateEnumType,
    CreateIndex,
    CreateTable,
    CreateUpdatedAtTrigger,
    Phase,
)
from core.schema.sql_generator import ColumnDef, TableBuilder


# ============================================================================
# HELPERS
# ============================================================================

def _render(operation):
    return [statement.as_string() for statement in operation.statements()]


def _column(name, nullable=True, primary_key=False, comment=None):
    return ColumnDef(
        name=name,
        type_sql=sql.SQL("TEXT"),
        nullable=nullable,
        primary_key=primary_key,
        comment=comment,
    )


# ============================================================================
# TABLES & COLUMNS
# ============================================================================

class TestCreateTable:
    def _operation(self):
        return CreateTable(
            schema="app",
            table="post",
            columns=(
                _column("id", nullable=False, primary_key=True),
                _column("title", nullable=False, comment="Headline"),
                *TableBuilder.timestamp_columns(),
            ),
            comment="A blog post",
        )

    def test_create_statement(self):
        create = _render(self._operation())[0]
        assert create.startswith('CREATE TABLE IF NOT EXISTS "app"."post"')
        assert '"id" TEXT,' in create
        assert '"title" TEXT NOT NULL' in create
        assert '"created_at" TIMESTAMPTZ NOT NULL DEFAULT NOW()' in create
        assert 'PRIMARY KEY ("id")' in create

    def test_comments(self):
        statements = _render(self._operation())
        assert statements[1] == 'COMMENT ON TABLE "app"."post" IS \'A blog post\''
        assert statements[2] == 'COMMENT ON COLUMN "app"."post"."title" IS \'Headline\''
        assert len(statements) == 3

    def test_apply_records_primary_key(self):
        snapshot = CatalogSnapshot(schema="app")
        self._operation().apply(snapshot)
        assert snapshot.tables["post"] == ["id", "title", "created_at", "updated_at"]
        assert "post_pkey" in snapshot.indexes


class TestAddColumn:
    def test_not_null_dropped_without_default(self):
        statement = _render(AddColumn("app", "post", _column("title", nullable=False)))[0]
        assert statement == 'ALTER TABLE "app"."post" ADD COLUMN IF NOT EXISTS "title" TEXT'

    def test_not_null_kept_with_default(self):
        created_at = TableBuilder.timestamp_columns()[0]
        statement = _render(AddColumn("app", "post", created_at))[0]
        assert statement.endswith('"created_at" TIMESTAMPTZ NOT NULL DEFAULT NOW()')


class TestColumnTypes:
    def test_enum_column_is_schema_qualified(self):
        field = CompiledField(
            name="history", column="history", storage_type="app_enum_1[]", host_type="List[Status]",
            enum_name="Status", enum_type=("app", "app_enum_1"), is_array=True,
        )
        assert TableBuilder.column_type(field).as_string() == '"app"."app_enum_1"[]'

    def test_catalog_type(self):
        field = CompiledField(name="n", column="n", storage_type="NUMERIC", host_type="int")
        assert TableBuilder.column_type(field).as_string() == "NUMERIC"


# ============================================================================
# ENUMS
# ============================================================================

class TestEnumStatements:
    def test_create_enum_keeps_order(self):
        operation = CreateEnumType("app", "app_enum_1", ("B", "A"), "Status")
        statement = _render(operation)[0]
        assert statement.startswith('CREATE TYPE "app"."app_enum_1" AS ENUM (')
        assert statement.index("'B'") < statement.index("'A'")

    def test_comment_is_a_literal(self):
        operation = CommentOnType("app", "app_enum_1", "@enum\n@enumName Status\nIt's done")
        statement = _render(operation)[0]
        assert statement.startswith('COMMENT ON TYPE "app"."app_enum_1" IS ')
        assert "It''s done" in statement


# ============================================================================
# INDEXES, KEYS, TRIGGERS
# ============================================================================

class TestIndexStatements:
    def test_unique_index_with_method(self):
        operation = CreateIndex("app", "post", "idx_unique_post_tags", ("tags",), unique=True, using="gin")
        assert _render(operation)[0] == (
            'CREATE UNIQUE INDEX IF NOT EXISTS "idx_unique_post_tags" '
            'ON "app"."post" USING gin ("tags")'
        )

    def test_deferred_phase(self):
        assert CreateIndex("app", "p", "i", ("c",)).phase == Phase.STRUCTURE
        assert CreateIndex("app", "p", "i", ("c",), deferred=True).phase == Phase.DEFERRED

    def test_bad_method_rejected(self):
        with pytest.raises(ValueError):
            IndexBuilder.create("app", "post", ["title"], using="gin; drop")


class TestForeignKeys:
    def test_statement(self):
        operation = AddForeignKey(
            schema="app", table="post", constraint="post_author_id_fkey",
            column="author_id", ref_table="user", ref_column="id", on_delete="CASCADE",
        )
        assert _render(operation)[0] == (
            'ALTER TABLE "app"."post" ADD CONSTRAINT "post_author_id_fkey" '
            'FOREIGN KEY ("author_id") REFERENCES "app"."user" ("id") '
            "ON DELETE CASCADE ON UPDATE CASCADE"
        )

    def test_unknown_action(self):
        with pytest.raises(ValueError, match="ON DELETE"):
            ConstraintBuilder.foreign_key("app", "post", "c", "a", "user", "id", on_delete="DROP")

    def test_constraint_comment(self):
        operation = CommentOnConstraint("app", "post", "post_author_id_fkey", "@foreignFieldName posts")
        assert _render(operation)[0] == (
            'COMMENT ON CONSTRAINT "post_author_id_fkey" ON "app"."post" '
            "IS '@foreignFieldName posts'"
        )
        assert operation.phase == Phase.DEFERRED


class TestTrigger:
    def test_function_and_trigger(self):
        function, trigger = _render(CreateUpdatedAtTrigger("app", "post"))
        assert '"app".update_updated_at_column()' in function
        assert 'CREATE TRIGGER "trg_post_updated_at"' in trigger
        assert 'BEFORE UPDATE ON "app"."post"' in trigger
