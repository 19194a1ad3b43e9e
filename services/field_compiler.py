# ============================================================================
# FIELD COMPILER
# ============================================================================
# STATUS: Service - Entity fields to storage representation
# PURPOSE: Column names, PostgreSQL types, key/index flags, value codecs
# CREATED: 16 OCT 2026
# EXPORTS: FieldCompiler, compile_fields
# DEPENDENCIES: none
# ============================================================================
"""
Field Compiler

For each declared entity field, resolve how it is stored:

    scalar           TYPE_CATALOG storage kind          (Int -> INTEGER)
    scalar array     JSONB
    enum             "<schema>"."<schema>_enum_<hash>"  (array: ...[])
    json shape       JSONB (arrays too)
    reference        <field>_id TEXT, host type str

plus indexed/unique from the entity's IndexSpecs and the codec for kinds
that translate values at the read/write boundary (BigInt, Bytes).
"""

from typing import Dict, Iterable, List

from core.contracts import FieldKind
from core.errors import SchemaError
from core.logging import ComponentType, get_logger
from core.models.compiled import CompiledEntity, CompiledField
from core.models.entity import Entity, EntityField
from core.models.enumeration import Enumeration
from core.schema import type_catalog
from core.schema.codecs import codec_for
from core.schema.ddl_utils import enum_type_name, safe_identifier, snake_case

logger = get_logger(__name__, ComponentType.COMPILER)


def _enum_map(enums: Iterable[Enumeration]) -> Dict[str, Enumeration]:
    if isinstance(enums, dict):
        return dict(enums)
    return {e.name: e for e in enums}


class FieldCompiler:
    """
    Compiles entity fields for one target schema.

    Usage:
        compiler = FieldCompiler("app")
        compiled = compiler.compile(entity, model.enums)
    """

    def __init__(self, schema_name: str = "public"):
        self.schema_name = safe_identifier(schema_name, "schema name")

    def compile(self, entity: Entity, enums: Iterable[Enumeration]) -> List[CompiledField]:
        """
        Compile every declared field of an entity, in declaration order.

        Raises:
            SchemaError: if an enum field names an enumeration not in enums
        """
        enum_map = _enum_map(enums)
        return [self.compile_field(entity, f, enum_map) for f in entity.fields]

    def compile_entity(self, entity: Entity, enums: Iterable[Enumeration]) -> CompiledEntity:
        compiled = CompiledEntity(
            name=entity.name,
            table=self.table_name(entity.name),
            fields=self.compile(entity, enums),
            description=entity.description,
        )
        logger.debug(f"Compiled {entity.name} -> {self.schema_name}.{compiled.table}")
        return compiled

    @staticmethod
    def table_name(entity_name: str) -> str:
        return safe_identifier(snake_case(entity_name), "table name")

    @staticmethod
    def column_name(field: EntityField) -> str:
        if field.is_reference:
            return safe_identifier(snake_case(field.foreign_key), "column name")
        return safe_identifier(snake_case(field.name), "column name")

    def compile_field(
        self,
        entity: Entity,
        field: EntityField,
        enum_map: Dict[str, Enumeration],
    ) -> CompiledField:
        indexed, unique = entity.index_flags(field.name)
        common = dict(
            name=field.name,
            column=self.column_name(field),
            is_array=field.is_array,
            nullable=field.nullable,
            primary_key=field.is_primary_key,
            indexed=indexed,
            unique=unique,
            description=field.description,
        )

        if field.is_enum:
            if field.enum not in enum_map:
                raise SchemaError(
                    f'Schema: undefined enum "{field.enum}" on field "{field.name}" '
                    f'in "type {entity.name} @entity"',
                    entity=entity.name,
                    field=field.name,
                )
            type_name = enum_type_name(self.schema_name, field.enum)
            return CompiledField(
                storage_type=f"{type_name}[]" if field.is_array else type_name,
                host_type=f"List[{field.enum}]" if field.is_array else field.enum,
                enum_name=field.enum,
                enum_type=(self.schema_name, type_name),
                **common,
            )

        if field.is_reference:
            key = type_catalog.resolve(FieldKind.ID)
            return CompiledField(
                storage_type=key.storage_kind,
                host_type=key.host_kind,
                reference=field.reference,
                **common,
            )

        entry = type_catalog.resolve(field.kind)
        host_type = field.json_shape or entry.host_kind
        storage_type = entry.storage_kind
        if field.is_array:
            storage_type = type_catalog.ARRAY_STORAGE_KIND
            host_type = f"List[{host_type}]"

        return CompiledField(
            storage_type=storage_type,
            host_type=host_type,
            kind=field.kind,
            json_shape=field.json_shape,
            # Array values are stored as one JSON document; element codecs do not apply
            codec=None if field.is_array else codec_for(field.kind),
            **common,
        )


def compile_fields(
    entity: Entity,
    enums: Iterable[Enumeration],
    schema_name: str = "public",
) -> List[CompiledField]:
    """Module-level shortcut for FieldCompiler(schema_name).compile()."""
    return FieldCompiler(schema_name).compile(entity, enums)


def compile_model_entities(model, schema_name: str = "public") -> List[CompiledEntity]:
    compiler = FieldCompiler(schema_name)
    enums = model.enum_map()
    return [compiler.compile_entity(e, enums) for e in model.entities]


__all__ = ["FieldCompiler", "compile_fields", "compile_model_entities"]
