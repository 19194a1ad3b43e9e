# ============================================================================
# SCHEMA OPERATIONS
# ============================================================================
# STATUS: Core - Typed reconciliation steps
# PURPOSE: One value object per DDL change; renders SQL and predicts state
# CREATED: 16 OCT 2026
# EXPORTS: Operation, Phase, CreateSchema, CreateEnumType, CommentOnType,
#          CreateTable, AddColumn, CreateIndex, AddForeignKey,
#          CommentOnConstraint, CreateUpdatedAtTrigger
# DEPENDENCIES: psycopg
# ============================================================================
"""
Schema Operations

The synchronizer plans a list of operations by diffing the model against
a CatalogSnapshot. Each operation can:

    statements()  render its psycopg.sql statements
    apply(snap)   update a snapshot to reflect its effect

Applying a full plan to the snapshot it was planned from and planning
again yields an empty plan.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from psycopg import sql

from core.models.catalog import CatalogSnapshot
from core.schema.ddl_utils import (
    CommentBuilder,
    ConstraintBuilder,
    EnumBuilder,
    IndexBuilder,
    SchemaUtils,
    TriggerBuilder,
)
from core.schema.sql_generator import ColumnDef, TableBuilder


class Phase(str, Enum):
    """Execution phases, in order."""
    ENUMS = "enums"
    STRUCTURE = "structure"
    DEFERRED = "deferred"


class Operation:
    """Base class for planned operations."""

    phase: Phase = Phase.STRUCTURE

    def statements(self) -> List[sql.Composed]:
        raise NotImplementedError

    def apply(self, snapshot: CatalogSnapshot) -> None:
        raise NotImplementedError

    def describe(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class CreateSchema(Operation):
    schema: str

    phase = Phase.ENUMS

    def statements(self) -> List[sql.Composed]:
        return [SchemaUtils.create_schema(self.schema)]

    def apply(self, snapshot: CatalogSnapshot) -> None:
        snapshot.schema_exists = True

    def describe(self) -> str:
        return f"create schema {self.schema}"


@dataclass(frozen=True)
class CreateEnumType(Operation):
    schema: str
    type_name: str
    values: Tuple[str, ...]
    enum_name: str

    phase = Phase.ENUMS

    def statements(self) -> List[sql.Composed]:
        return [EnumBuilder.create(self.schema, self.type_name, self.values)]

    def apply(self, snapshot: CatalogSnapshot) -> None:
        snapshot.enums[self.type_name] = list(self.values)

    def describe(self) -> str:
        return f"create enum type {self.type_name} for {self.enum_name}"


@dataclass(frozen=True)
class CommentOnType(Operation):
    schema: str
    type_name: str
    comment: str

    phase = Phase.ENUMS

    def statements(self) -> List[sql.Composed]:
        return [CommentBuilder.type(self.schema, self.type_name, self.comment)]

    def apply(self, snapshot: CatalogSnapshot) -> None:
        snapshot.type_comments[self.type_name] = self.comment

    def describe(self) -> str:
        return f"comment on type {self.type_name}"


@dataclass(frozen=True)
class CreateTable(Operation):
    schema: str
    table: str
    columns: Tuple[ColumnDef, ...]
    comment: Optional[str] = None

    def statements(self) -> List[sql.Composed]:
        stmts = [TableBuilder.create_table(self.schema, self.table, self.columns)]
        if self.comment:
            stmts.append(CommentBuilder.table(self.schema, self.table, self.comment))
        for column in self.columns:
            if column.comment:
                stmts.append(
                    CommentBuilder.column(self.schema, self.table, column.name, column.comment)
                )
        return stmts

    def apply(self, snapshot: CatalogSnapshot) -> None:
        snapshot.tables[self.table] = [c.name for c in self.columns]
        primary_key = [c.name for c in self.columns if c.primary_key]
        if primary_key:
            snapshot.constraints.setdefault((self.table, f"{self.table}_pkey"), None)
            snapshot.indexes.add(f"{self.table}_pkey")

    def describe(self) -> str:
        return f"create table {self.table} ({len(self.columns)} columns)"


@dataclass(frozen=True)
class AddColumn(Operation):
    schema: str
    table: str
    column: ColumnDef

    def statements(self) -> List[sql.Composed]:
        stmts = [TableBuilder.add_column(self.schema, self.table, self.column)]
        if self.column.comment:
            stmts.append(
                CommentBuilder.column(self.schema, self.table, self.column.name, self.column.comment)
            )
        return stmts

    def apply(self, snapshot: CatalogSnapshot) -> None:
        snapshot.tables.setdefault(self.table, []).append(self.column.name)

    def describe(self) -> str:
        return f"add column {self.table}.{self.column.name}"


@dataclass(frozen=True)
class CreateIndex(Operation):
    schema: str
    table: str
    name: str
    columns: Tuple[str, ...]
    unique: bool = False
    using: Optional[str] = None
    deferred: bool = False

    @property
    def phase(self) -> Phase:
        return Phase.DEFERRED if self.deferred else Phase.STRUCTURE

    def statements(self) -> List[sql.Composed]:
        return [
            IndexBuilder.create(
                self.schema, self.table, self.columns,
                name=self.name, unique=self.unique, using=self.using,
            )
        ]

    def apply(self, snapshot: CatalogSnapshot) -> None:
        snapshot.indexes.add(self.name)

    def describe(self) -> str:
        kind = "unique index" if self.unique else "index"
        return f"create {kind} {self.name} on {self.table} ({', '.join(self.columns)})"


@dataclass(frozen=True)
class AddForeignKey(Operation):
    schema: str
    table: str
    constraint: str
    column: str
    ref_table: str
    ref_column: str
    on_delete: str = "SET NULL"

    def statements(self) -> List[sql.Composed]:
        return [
            ConstraintBuilder.foreign_key(
                self.schema, self.table, self.constraint, self.column,
                self.ref_table, self.ref_column, on_delete=self.on_delete,
            )
        ]

    def apply(self, snapshot: CatalogSnapshot) -> None:
        snapshot.constraints.setdefault((self.table, self.constraint), None)

    def describe(self) -> str:
        return f"add foreign key {self.constraint} ({self.table}.{self.column} -> {self.ref_table})"


@dataclass(frozen=True)
class CommentOnConstraint(Operation):
    schema: str
    table: str
    constraint: str
    comment: str

    phase = Phase.DEFERRED

    def statements(self) -> List[sql.Composed]:
        return [CommentBuilder.constraint(self.schema, self.table, self.constraint, self.comment)]

    def apply(self, snapshot: CatalogSnapshot) -> None:
        snapshot.constraints[(self.table, self.constraint)] = self.comment

    def describe(self) -> str:
        return f"comment on constraint {self.constraint}"


@dataclass(frozen=True)
class CreateUpdatedAtTrigger(Operation):
    schema: str
    table: str

    def statements(self) -> List[sql.Composed]:
        return TriggerBuilder.updated_at(self.schema, self.table)

    def apply(self, snapshot: CatalogSnapshot) -> None:
        snapshot.triggers.add((self.table, TriggerBuilder.trigger_name(self.table)))

    def describe(self) -> str:
        return f"create updated_at trigger on {self.table}"


__all__ = [
    "Phase",
    "Operation",
    "CreateSchema",
    "CreateEnumType",
    "CommentOnType",
    "CreateTable",
    "AddColumn",
    "CreateIndex",
    "AddForeignKey",
    "CommentOnConstraint",
    "CreateUpdatedAtTrigger",
]
