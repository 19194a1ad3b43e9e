# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Model exports
# PURPOSE: Central export point for document, schema, compiled, and catalog models
# LAST_REVIEWED: 16 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

    document      parser output (SchemaDocument and declarations)
    entity, enumeration, relation, schema_model
                  extractor output (SchemaModel)
    compiled      field compiler output (CompiledField, CompiledEntity)
    catalog       live database state (CatalogSnapshot)
"""

from core.models.document import (
    TypeRef,
    DirectiveUsage,
    FieldDeclaration,
    DeclarationKind,
    TypeDeclaration,
    ArgumentDeclaration,
    DirectiveDeclaration,
    SchemaDocument,
)
from core.models.entity import EntityField, IndexSpec, Entity, resolve_index_flags
from core.models.enumeration import Enumeration, JsonShape, JsonShapeField
from core.models.relation import Relation
from core.models.schema_model import SchemaModel
from core.models.compiled import CompiledField, CompiledEntity
from core.models.catalog import CatalogSnapshot

__all__ = [
    # Document
    "TypeRef",
    "DirectiveUsage",
    "FieldDeclaration",
    "DeclarationKind",
    "TypeDeclaration",
    "ArgumentDeclaration",
    "DirectiveDeclaration",
    "SchemaDocument",
    # Schema model
    "EntityField",
    "IndexSpec",
    "Entity",
    "resolve_index_flags",
    "Enumeration",
    "JsonShape",
    "JsonShapeField",
    "Relation",
    "SchemaModel",
    # Compiled
    "CompiledField",
    "CompiledEntity",
    # Catalog
    "CatalogSnapshot",
]
