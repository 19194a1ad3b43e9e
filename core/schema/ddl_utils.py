# ============================================================================
# DDL UTILITIES
# ============================================================================
# STATUS: Core - DRY utilities for SQL DDL generation
# PURPOSE: Naming, index, enum, constraint, trigger, and comment builders
# LAST_REVIEWED: 16 OCT 2026
# EXPORTS: snake_case, safe_identifier, enum_type_name, bounded_name, smart_tags,
#          IndexBuilder, EnumBuilder, ConstraintBuilder, TriggerBuilder,
#          CommentBuilder, SchemaUtils
# DEPENDENCIES: psycopg
# ============================================================================
"""
DDL Utilities - Shared SQL Generation Patterns.

All builders return psycopg.sql.Composed objects. The three fragment
types are never mixed up:

    sql.Identifier  identifiers (validated or hashed first)
    sql.Literal     values (quoted by the driver)
    sql.SQL         constant SQL text only

Usage:
    from core.schema.ddl_utils import IndexBuilder, EnumBuilder

    idx = IndexBuilder.create('app', 'post', ['author_id'])
    cursor.execute(idx)

    stmt = EnumBuilder.create('app', enum_type_name('app', 'Status'), ['A', 'B'])
    cursor.execute(stmt)
"""

import hashlib
import re
from typing import Dict, List, Optional, Sequence, Union

from psycopg import sql


# ============================================================================
# NAMING
# ============================================================================

# PostgreSQL truncates identifiers longer than NAMEDATALEN - 1 bytes
MAX_IDENTIFIER_LENGTH = 63

_SAFE_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def snake_case(name: str) -> str:
    """Case-fold a schema name to the database convention (authorId -> author_id)."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    return name.lower()


def safe_identifier(name: str, what: str = "identifier") -> str:
    """
    Validate a name against the safe identifier character set.

    Raises:
        ValueError: if the name could not be used unquoted
    """
    if not isinstance(name, str) or not _SAFE_IDENTIFIER.match(name):
        raise ValueError(f"unsafe {what}: {name!r}")
    return name


def _short_hash(value: str, length: int = 8) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:length]


def bounded_name(name: str) -> str:
    """Keep a generated name within the identifier limit (stable hash suffix)."""
    if len(name.encode("utf-8")) <= MAX_IDENTIFIER_LENGTH:
        return name
    return f"{name[:MAX_IDENTIFIER_LENGTH - 9]}_{_short_hash(name)}"


def enum_type_name(schema: str, enum_name: str) -> str:
    """
    Derive the PostgreSQL type name for an enumeration.

    The logical name is hashed rather than interpolated, so schema content
    never reaches identifier position.
    """
    return f"{safe_identifier(schema, 'schema name')}_enum_{_short_hash(enum_name)}"


def smart_tags(tags: Dict[str, str]) -> str:
    """Render introspection tags, one '@tag value' per line."""
    return "\n".join(f"@{key} {value}" for key, value in tags.items())


def foreign_key_constraint_name(table: str, column: str) -> str:
    return bounded_name(f"{table}_{column}_fkey")


def unique_index_name(table: str, column: str) -> str:
    return bounded_name(f"{table}_{column}_uindex")


# ============================================================================
# INDEX BUILDER
# ============================================================================

class IndexBuilder:
    """
    Builder for PostgreSQL index DDL statements.

    All methods are static and return sql.Composed objects.
    """

    @staticmethod
    def _normalize_columns(columns: Union[str, Sequence[str]]) -> List[str]:
        """Convert single column or sequence to list."""
        if isinstance(columns, str):
            return [columns]
        return list(columns)

    @staticmethod
    def generate_index_name(
        table: str,
        columns: Sequence[str],
        prefix: str = 'idx',
        suffix: str = ''
    ) -> str:
        """Generate conventional index name."""
        col_part = '_'.join(columns)
        name = f"{prefix}_{table}_{col_part}"
        if suffix:
            name = f"{name}_{suffix}"
        return bounded_name(name)

    @staticmethod
    def create(
        schema: str,
        table: str,
        columns: Union[str, Sequence[str]],
        name: Optional[str] = None,
        unique: bool = False,
        using: Optional[str] = None,
    ) -> sql.Composed:
        """
        Create an index.

        Args:
            schema: Schema name
            table: Table name
            columns: Column name(s) to index
            name: Optional custom index name
            unique: If True, create a UNIQUE index
            using: Optional access method (btree, hash, gin, gist, brin)

        Returns:
            sql.Composed CREATE INDEX statement
        """
        cols = IndexBuilder._normalize_columns(columns)
        idx_name = name or IndexBuilder.generate_index_name(
            table, cols, prefix='idx_unique' if unique else 'idx'
        )

        stmt = sql.SQL("CREATE {unique}INDEX IF NOT EXISTS {name} ON {schema}.{table}").format(
            unique=sql.SQL("UNIQUE " if unique else ""),
            name=sql.Identifier(idx_name),
            schema=sql.Identifier(schema),
            table=sql.Identifier(table),
        )

        if using:
            stmt = sql.SQL("{} USING {}").format(
                stmt, sql.SQL(safe_identifier(using, "index method"))
            )

        col_sql = sql.SQL(", ").join(sql.Identifier(c) for c in cols)
        return sql.SQL("{} ({})").format(stmt, col_sql)


# ============================================================================
# ENUM BUILDER
# ============================================================================

class EnumBuilder:
    """Builder for PostgreSQL enum type DDL."""

    @staticmethod
    def create(schema: str, type_name: str, values: Sequence[str]) -> sql.Composed:
        """CREATE TYPE ... AS ENUM with values in declared order."""
        return sql.SQL("CREATE TYPE {}.{} AS ENUM ({})").format(
            sql.Identifier(schema),
            sql.Identifier(type_name),
            sql.SQL(", ").join(sql.Literal(v) for v in values),
        )

    @staticmethod
    def column_type(schema: str, type_name: str, is_array: bool = False) -> sql.Composed:
        """Schema-qualified enum column type, array-wrapped if requested."""
        type_sql = sql.SQL("{}.{}").format(sql.Identifier(schema), sql.Identifier(type_name))
        if is_array:
            return sql.SQL("{}[]").format(type_sql)
        return type_sql


# ============================================================================
# CONSTRAINT BUILDER
# ============================================================================

class ConstraintBuilder:
    """Builder for foreign key constraints."""

    ON_DELETE_ACTIONS = ("CASCADE", "SET NULL", "RESTRICT", "NO ACTION")

    @staticmethod
    def foreign_key(
        schema: str,
        table: str,
        constraint: str,
        column: str,
        ref_table: str,
        ref_column: str,
        on_delete: str = "SET NULL",
    ) -> sql.Composed:
        """ALTER TABLE ... ADD CONSTRAINT ... FOREIGN KEY ... REFERENCES ..."""
        if on_delete not in ConstraintBuilder.ON_DELETE_ACTIONS:
            raise ValueError(f"unsupported ON DELETE action: {on_delete}")

        return sql.SQL(
            "ALTER TABLE {schema}.{table} ADD CONSTRAINT {constraint} "
            "FOREIGN KEY ({column}) REFERENCES {schema}.{ref_table} ({ref_column}) "
            "ON DELETE {on_delete} ON UPDATE CASCADE"
        ).format(
            schema=sql.Identifier(schema),
            table=sql.Identifier(table),
            constraint=sql.Identifier(constraint),
            column=sql.Identifier(column),
            ref_table=sql.Identifier(ref_table),
            ref_column=sql.Identifier(ref_column),
            on_delete=sql.SQL(on_delete),
        )


# ============================================================================
# TRIGGER BUILDER
# ============================================================================

class TriggerBuilder:
    """
    Builder for PostgreSQL trigger DDL statements.
    """

    @staticmethod
    def updated_at_function(schema: str) -> sql.Composed:
        """
        Create the update_updated_at_column() trigger function.
        """
        return sql.SQL("""
            CREATE OR REPLACE FUNCTION {schema}.update_updated_at_column()
            RETURNS TRIGGER
            LANGUAGE plpgsql
            AS $$
            BEGIN
                NEW.updated_at = NOW();
                RETURN NEW;
            END;
            $$
        """).format(schema=sql.Identifier(schema))

    @staticmethod
    def trigger_name(table: str) -> str:
        return bounded_name(f"trg_{table}_updated_at")

    @staticmethod
    def updated_at_trigger(
        schema: str,
        table: str,
        trigger_name: Optional[str] = None
    ) -> sql.Composed:
        """
        Create trigger that calls update_updated_at_column() on UPDATE.
        """
        trig_name = trigger_name or TriggerBuilder.trigger_name(table)

        return sql.SQL("""
            CREATE TRIGGER {name}
            BEFORE UPDATE ON {schema}.{table}
            FOR EACH ROW
            EXECUTE FUNCTION {schema}.update_updated_at_column()
        """).format(
            name=sql.Identifier(trig_name),
            schema=sql.Identifier(schema),
            table=sql.Identifier(table)
        )

    @staticmethod
    def updated_at(schema: str, table: str) -> List[sql.Composed]:
        """
        Create complete updated_at trigger setup for a table.
        """
        return [
            TriggerBuilder.updated_at_function(schema),
            TriggerBuilder.updated_at_trigger(schema, table),
        ]


# ============================================================================
# COMMENT BUILDER
# ============================================================================

class CommentBuilder:
    """
    Builder for PostgreSQL COMMENT statements.

    Comment text is always a sql.Literal.
    """

    @staticmethod
    def table(schema: str, table: str, comment: str) -> sql.Composed:
        """Add comment to table."""
        return sql.SQL("COMMENT ON TABLE {}.{} IS {}").format(
            sql.Identifier(schema),
            sql.Identifier(table),
            sql.Literal(comment)
        )

    @staticmethod
    def column(schema: str, table: str, column: str, comment: str) -> sql.Composed:
        """Add comment to column."""
        return sql.SQL("COMMENT ON COLUMN {}.{}.{} IS {}").format(
            sql.Identifier(schema),
            sql.Identifier(table),
            sql.Identifier(column),
            sql.Literal(comment)
        )

    @staticmethod
    def type(schema: str, type_name: str, comment: str) -> sql.Composed:
        """Add comment to a type."""
        return sql.SQL("COMMENT ON TYPE {}.{} IS {}").format(
            sql.Identifier(schema),
            sql.Identifier(type_name),
            sql.Literal(comment)
        )

    @staticmethod
    def constraint(schema: str, table: str, constraint: str, comment: str) -> sql.Composed:
        """Add comment to a table constraint."""
        return sql.SQL("COMMENT ON CONSTRAINT {} ON {}.{} IS {}").format(
            sql.Identifier(constraint),
            sql.Identifier(schema),
            sql.Identifier(table),
            sql.Literal(comment)
        )


# ============================================================================
# SCHEMA UTILITIES
# ============================================================================

class SchemaUtils:
    """
    Utility methods for schema-level DDL operations.
    """

    @staticmethod
    def create_schema(schema: str) -> sql.Composed:
        """
        Create schema if missing.
        """
        return sql.SQL("CREATE SCHEMA IF NOT EXISTS {}").format(
            sql.Identifier(schema)
        )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    'MAX_IDENTIFIER_LENGTH',
    'snake_case',
    'safe_identifier',
    'bounded_name',
    'enum_type_name',
    'smart_tags',
    'foreign_key_constraint_name',
    'unique_index_name',
    'IndexBuilder',
    'EnumBuilder',
    'ConstraintBuilder',
    'TriggerBuilder',
    'CommentBuilder',
    'SchemaUtils',
]
