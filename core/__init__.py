# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export contracts, errors, and models
# LAST_REVIEWED: 16 OCT 2026
# ============================================================================

from core.contracts import FieldKind, RelationKind, Directive, IndexMethod
from core.errors import (
    ModelSyncError,
    SchemaError,
    EncodingError,
    SyncError,
    ArtifactError,
)
from core.models import (
    SchemaDocument,
    SchemaModel,
    Entity,
    EntityField,
    IndexSpec,
    Enumeration,
    JsonShape,
    Relation,
    CompiledField,
    CompiledEntity,
)

__all__ = [
    # Enums
    "FieldKind",
    "RelationKind",
    "Directive",
    "IndexMethod",
    # Errors
    "ModelSyncError",
    "SchemaError",
    "EncodingError",
    "SyncError",
    "ArtifactError",
    # Models
    "SchemaDocument",
    "SchemaModel",
    "Entity",
    "EntityField",
    "IndexSpec",
    "Enumeration",
    "JsonShape",
    "Relation",
    "CompiledField",
    "CompiledEntity",
]
