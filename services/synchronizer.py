# ============================================================================
# SCHEMA SYNCHRONIZER
# ============================================================================
# STATUS: Service - Reconcile a live schema with the compiled model
# PURPOSE: Plan additive DDL against a catalog snapshot, then execute it
# CREATED: 16 OCT 2026
# EXPORTS: SchemaSynchronizer, reconcile, enum_comment
# DEPENDENCIES: psycopg
# ============================================================================
"""
Schema Synchronizer

Reconciliation is split in two:

    plan(model, snapshot)       pure: diff the model against a
                                CatalogSnapshot, return ordered operations
    reconcile(model, catalog)   fetch snapshot, plan, execute in order

Every guard (index-count limit, enum drift) runs while planning, so a
refused run executes nothing at all.

Plan order:
    1. schema, enum types and enum comments                (Phase.ENUMS)
    2. tables, columns, indexes, triggers, foreign keys    (Phase.STRUCTURE)
    3. constraint comments and one-to-one unique indexes   (Phase.DEFERRED)

Nothing is ever dropped. Every operation is skipped when the snapshot
already shows its effect, so a second run plans nothing.

Usage:
    with PostgreSQLRepository().get_connection() as conn:
        reconcile(model, conn, SyncOptions(schema_name="app"))
"""

from typing import Dict, List, Optional

from core.config.options import SyncOptions
from core.contracts import RelationKind
from core.errors import SyncError
from core.logging import ComponentType, get_logger, log_checkpoint, log_context
from core.models.catalog import CatalogSnapshot
from core.models.compiled import CompiledEntity
from core.models.entity import Entity
from core.models.enumeration import Enumeration
from core.models.relation import Relation
from core.models.schema_model import SchemaModel
from core.schema.ddl_utils import (
    IndexBuilder,
    TriggerBuilder,
    enum_type_name,
    foreign_key_constraint_name,
    smart_tags,
    snake_case,
    unique_index_name,
)
from core.schema.operations import (
    AddColumn,
    AddForeignKey,
    CommentOnConstraint,
    CommentOnType,
    CreateEnumType,
    CreateIndex,
    CreateSchema,
    CreateTable,
    CreateUpdatedAtTrigger,
    Operation,
    Phase,
)
from core.schema.sql_generator import TIMESTAMP_COLUMNS, TableBuilder
from infrastructure.catalog import Catalog, PostgresCatalog
from services.field_compiler import FieldCompiler

logger = get_logger(__name__, ComponentType.SYNCHRONIZER)

_PHASE_ORDER = {Phase.ENUMS: 0, Phase.STRUCTURE: 1, Phase.DEFERRED: 2}


def enum_comment(enumeration: Enumeration) -> str:
    """Introspection comment for an enum type."""
    comment = "@enum\n" + smart_tags({"enumName": enumeration.name})
    if enumeration.description:
        comment = f"{comment}\n{enumeration.description}"
    return comment


class _Planner:
    """Accumulates operations and keeps a predicted snapshot in step."""

    def __init__(self, snapshot: CatalogSnapshot):
        self.state = snapshot.copy()
        self.operations: List[Operation] = []

    def add(self, operation: Operation) -> None:
        logger.debug(f"Planned: {operation.describe()}")
        self.operations.append(operation)
        operation.apply(self.state)

    def ordered(self) -> List[Operation]:
        return sorted(self.operations, key=lambda op: _PHASE_ORDER[op.phase])


class SchemaSynchronizer:
    """
    Plans and runs reconciliation for one target schema.
    """

    def __init__(self, options: Optional[SyncOptions] = None):
        self.options = options or SyncOptions.from_defaults()
        self.schema = self.options.schema_name
        self.compiler = FieldCompiler(self.schema)

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def plan(self, model: SchemaModel, snapshot: CatalogSnapshot) -> List[Operation]:
        """
        Diff the model against a snapshot.

        Raises:
            SyncError: index-count limit exceeded, enum drift, or an
                       unsupported relation kind
        """
        with log_context(schema=self.schema, operation="plan"):
            self._check_index_limits(model.entities)

            planner = _Planner(snapshot)
            if not planner.state.schema_exists:
                planner.add(CreateSchema(self.schema))

            self._plan_enums(planner, model.enums)

            enums = model.enum_map()
            compiled = {e.name: self.compiler.compile_entity(e, enums) for e in model.entities}
            for entity in model.entities:
                with log_context(entity=entity.name):
                    self._plan_entity(planner, entity, compiled[entity.name])

            for relation in model.relations:
                with log_context(relation=relation.describe()):
                    self._plan_relation(planner, relation, compiled)

            operations = planner.ordered()
            log_checkpoint("plan_ready", {
                "operations": len(operations),
                "by_phase": {
                    phase.value: sum(1 for op in operations if op.phase == phase)
                    for phase in Phase
                },
            })
            return operations

    def _check_index_limits(self, entities: List[Entity]) -> None:
        limit = self.options.index_count_limit
        for entity in entities:
            if len(entity.indexes) > limit:
                raise SyncError(
                    f"too many indexes on entity {entity.name}: "
                    f"{len(entity.indexes)} declared, limit is {limit}",
                    entity=entity.name,
                )

    def _plan_enums(self, planner: _Planner, enumerations: List[Enumeration]) -> None:
        for enumeration in enumerations:
            with log_context(enum_name=enumeration.name):
                type_name = enum_type_name(self.schema, enumeration.name)
                live = planner.state.enums.get(type_name)

                if live is None:
                    planner.add(CreateEnumType(
                        schema=self.schema,
                        type_name=type_name,
                        values=tuple(enumeration.values),
                        enum_name=enumeration.name,
                    ))
                elif list(live) != list(enumeration.values):
                    raise SyncError(
                        f"Can't modify enum {enumeration.name!r} between runs: "
                        f"before [{','.join(live)}], after [{','.join(enumeration.values)}]. "
                        f"Rebuild the schema to make this change",
                        enum_name=enumeration.name,
                    )

                comment = enum_comment(enumeration)
                if planner.state.type_comments.get(type_name) != comment:
                    planner.add(CommentOnType(self.schema, type_name, comment))

    def _plan_entity(self, planner: _Planner, entity: Entity, compiled: CompiledEntity) -> None:
        table = compiled.table
        timestamps = self.options.timestamp_columns
        columns = TableBuilder.columns_for(compiled, timestamps=timestamps)

        if not planner.state.has_table(table):
            planner.add(CreateTable(self.schema, table, tuple(columns), compiled.description))
        else:
            for column in columns:
                if not planner.state.has_column(table, column.name):
                    planner.add(AddColumn(self.schema, table, column))

        for spec in entity.indexes:
            index_columns = tuple(compiled.column_for(name) for name in spec.fields)
            name = IndexBuilder.generate_index_name(
                table, index_columns, prefix="idx_unique" if spec.unique else "idx"
            )
            if name not in planner.state.indexes:
                planner.add(CreateIndex(
                    schema=self.schema,
                    table=table,
                    name=name,
                    columns=index_columns,
                    unique=bool(spec.unique),
                    using=spec.using.value if spec.using else None,
                ))

        # Only maintain updated_at when it is the generated timestamp column
        declared_columns = {f.column for f in compiled.fields}
        if timestamps and TIMESTAMP_COLUMNS[1] not in declared_columns:
            trigger = (table, TriggerBuilder.trigger_name(table))
            if trigger not in planner.state.triggers:
                planner.add(CreateUpdatedAtTrigger(self.schema, table))

    def _plan_relation(
        self,
        planner: _Planner,
        relation: Relation,
        compiled: Dict[str, CompiledEntity],
    ) -> None:
        if relation.kind not in (RelationKind.BELONGS_TO, RelationKind.HAS_ONE, RelationKind.HAS_MANY):
            raise SyncError(f"Relation type is not supported: {relation.kind}")

        owner = compiled[relation.key_owner]
        target = compiled[relation.key_target]
        column = snake_case(relation.foreign_key)
        key_field = next((f for f in owner.fields if f.column == column and f.is_foreign_key), None)
        if key_field is None:
            raise SyncError(
                f"{owner.name} has no foreign key column {column} for {relation.describe()}",
                entity=owner.name,
            )

        constraint = foreign_key_constraint_name(owner.table, column)
        if not planner.state.has_constraint(owner.table, constraint):
            planner.add(AddForeignKey(
                schema=self.schema,
                table=owner.table,
                constraint=constraint,
                column=column,
                ref_table=target.table,
                ref_column=target.primary_key.column,
                on_delete="SET NULL" if key_field.nullable else "CASCADE",
            ))

        if relation.kind == RelationKind.BELONGS_TO:
            return

        if relation.kind == RelationKind.HAS_ONE:
            tags = smart_tags({"singleForeignFieldName": relation.field_name})
        else:
            tags = smart_tags({"foreignFieldName": relation.field_name})

        if planner.state.constraint_comment(owner.table, constraint) != tags:
            planner.add(CommentOnConstraint(self.schema, owner.table, constraint, tags))

        if relation.kind == RelationKind.HAS_ONE:
            index_name = unique_index_name(owner.table, column)
            if index_name not in planner.state.indexes:
                planner.add(CreateIndex(
                    schema=self.schema,
                    table=owner.table,
                    name=index_name,
                    columns=(column,),
                    unique=True,
                    deferred=True,
                ))

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def reconcile(self, model: SchemaModel, catalog: Catalog) -> List[Operation]:
        """
        Snapshot, plan, and execute.

        Operations run in plan order. A failing statement aborts the run;
        operations already executed stay applied.

        Returns:
            The executed operations
        """
        with log_context(schema=self.schema, operation="reconcile"):
            snapshot = catalog.fetch_snapshot(self.schema)
            operations = self.plan(model, snapshot)

            logger.info(f"Reconciling schema {self.schema}: {len(operations)} operations")
            enum_ops = [op for op in operations if op.phase == Phase.ENUMS]
            for index, operation in enumerate(operations):
                catalog.execute(operation)
                if index + 1 == len(enum_ops):
                    log_checkpoint("enums_reconciled", {"operations": len(enum_ops)})
            if not enum_ops:
                log_checkpoint("enums_reconciled", {"operations": 0})

            log_checkpoint("sync_complete", {
                "operations": len(operations),
                "entities": len(model.entities),
                "enums": len(model.enums),
            })
            return operations


def reconcile(model: SchemaModel, conn, options: Optional[SyncOptions] = None) -> List[Operation]:
    """
    Reconcile a live database with the model.

    Args:
        model: Extracted schema model
        conn: psycopg connection (or any Catalog)
        options: SyncOptions (defaults from the environment when omitted)
    """
    catalog = conn if isinstance(conn, Catalog) else PostgresCatalog(conn)
    return SchemaSynchronizer(options).reconcile(model, catalog)


__all__ = ["SchemaSynchronizer", "reconcile", "enum_comment"]
