# ============================================================================
# COMPILED ENTITY TO SQL GENERATOR
# ============================================================================
# STATUS: Core - Table DDL generation from compiled entities
# PURPOSE: Column definitions, CREATE TABLE, and ADD COLUMN statements
# LAST_REVIEWED: 16 OCT 2026
# EXPORTS: ColumnDef, TableBuilder
# DEPENDENCIES: psycopg
# ============================================================================
"""
Compiled Entity to PostgreSQL Table Generator.

Turns the field compiler's output into column definitions. The
compiled model is the single source of truth for table structure.

Conventions:
    - Primary key: the ID field's column (TEXT PRIMARY KEY)
    - Reference fields: <field>_id TEXT, constraint added separately
    - Timestamps: created_at / updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()

Usage:
    columns = TableBuilder.columns_for(compiled_entity, timestamps=True)
    stmt = TableBuilder.create_table("app", compiled_entity.table, columns)
    cursor.execute(stmt)
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from psycopg import sql

from core.logging import ComponentType, get_logger
from core.models.compiled import CompiledEntity, CompiledField
from core.schema.ddl_utils import EnumBuilder

logger = get_logger(__name__, ComponentType.SYNCHRONIZER)

TIMESTAMP_COLUMNS = ("created_at", "updated_at")


@dataclass(frozen=True)
class ColumnDef:
    """One column of a table definition."""
    name: str
    type_sql: sql.Composable
    nullable: bool = True
    primary_key: bool = False
    default_sql: Optional[sql.Composable] = None
    comment: Optional[str] = None

    def definition(self, allow_not_null: bool = True) -> sql.Composed:
        """Column definition fragment: name, type, NOT NULL, DEFAULT."""
        parts = [sql.Identifier(self.name), sql.SQL(" "), self.type_sql]
        # Primary key columns get NOT NULL from the PRIMARY KEY table constraint
        if not self.primary_key and not self.nullable and (
            allow_not_null or self.default_sql is not None
        ):
            parts.append(sql.SQL(" NOT NULL"))
        if self.default_sql is not None:
            parts.extend([sql.SQL(" DEFAULT "), self.default_sql])
        return sql.Composed(parts)


class TableBuilder:
    """
    Convert compiled entities to PostgreSQL table DDL.
    """

    @staticmethod
    def column_type(field: CompiledField) -> sql.Composable:
        """SQL type for a compiled field (enum types are schema-qualified)."""
        if field.enum_type is not None:
            schema, type_name = field.enum_type
            return EnumBuilder.column_type(schema, type_name, is_array=field.is_array)
        # storage_type comes from the type catalog, never from schema text
        return sql.SQL(field.storage_type)

    @staticmethod
    def column_for(field: CompiledField) -> ColumnDef:
        return ColumnDef(
            name=field.column,
            type_sql=TableBuilder.column_type(field),
            nullable=field.nullable and not field.primary_key,
            primary_key=field.primary_key,
            comment=field.description,
        )

    @staticmethod
    def timestamp_columns() -> List[ColumnDef]:
        return [
            ColumnDef(
                name=name,
                type_sql=sql.SQL("TIMESTAMPTZ"),
                nullable=False,
                default_sql=sql.SQL("NOW()"),
            )
            for name in TIMESTAMP_COLUMNS
        ]

    @staticmethod
    def columns_for(entity: CompiledEntity, timestamps: bool = False) -> List[ColumnDef]:
        """
        Column definitions for an entity, in field declaration order.

        Timestamp columns are appended unless a declared field already
        maps onto the same column name.
        """
        columns = [TableBuilder.column_for(f) for f in entity.fields]
        if timestamps:
            taken = {c.name for c in columns}
            columns.extend(c for c in TableBuilder.timestamp_columns() if c.name not in taken)
        logger.debug(f"Columns for {entity.table}: {[c.name for c in columns]}")
        return columns

    @staticmethod
    def create_table(schema: str, table: str, columns: Sequence[ColumnDef]) -> sql.Composed:
        """
        CREATE TABLE IF NOT EXISTS with a PRIMARY KEY table constraint.
        """
        parts = [c.definition() for c in columns]

        primary_key = [c.name for c in columns if c.primary_key]
        if primary_key:
            parts.append(
                sql.SQL("PRIMARY KEY ({})").format(
                    sql.SQL(", ").join(sql.Identifier(col) for col in primary_key)
                )
            )

        return sql.SQL("CREATE TABLE IF NOT EXISTS {}.{} ({})").format(
            sql.Identifier(schema),
            sql.Identifier(table),
            sql.SQL(", ").join(parts)
        )

    @staticmethod
    def add_column(schema: str, table: str, column: ColumnDef) -> sql.Composed:
        """
        ALTER TABLE ... ADD COLUMN IF NOT EXISTS.

        NOT NULL is only kept when the column has a default; existing
        rows would otherwise reject the new column.
        """
        return sql.SQL("ALTER TABLE {}.{} ADD COLUMN IF NOT EXISTS {}").format(
            sql.Identifier(schema),
            sql.Identifier(table),
            column.definition(allow_not_null=False),
        )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ['ColumnDef', 'TableBuilder', 'TIMESTAMP_COLUMNS']
