# ============================================================================
# SERVICES MODULE
# ============================================================================
# STATUS: Core - Pipeline stages
# PURPOSE: Load, extract, compile, reconcile, and generate
# CREATED: 16 OCT 2026
# ============================================================================
"""
Services Module

One service per pipeline stage:

    document_loader   schema file -> SchemaDocument
    extractor         SchemaDocument -> SchemaModel
    field_compiler    Entity -> CompiledField list
    synchronizer      SchemaModel + live database -> executed DDL
    codegen           SchemaModel -> generated Python sources

Usage:
    from services import load_schema_document, extract, reconcile

    model = extract(load_schema_document("schema.graphql"))
    with PostgreSQLRepository().get_connection() as conn:
        reconcile(model, conn)
"""

from .document_loader import load_schema_document, parse_sdl, parse_yaml
from .extractor import SchemaExtractor, extract
from .field_compiler import FieldCompiler, compile_fields, compile_model_entities
from .synchronizer import SchemaSynchronizer, enum_comment, reconcile
from .codegen import ArtifactGenerator, ArtifactResult, generate_artifacts

__all__ = [
    "load_schema_document",
    "parse_sdl",
    "parse_yaml",
    "SchemaExtractor",
    "extract",
    "FieldCompiler",
    "compile_fields",
    "compile_model_entities",
    "SchemaSynchronizer",
    "enum_comment",
    "reconcile",
    "ArtifactGenerator",
    "ArtifactResult",
    "generate_artifacts",
]
