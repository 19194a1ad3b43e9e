# ============================================================================
# ERROR TAXONOMY
# ============================================================================
# STATUS: Core - Exceptions raised by the compile/reconcile pipeline
# PURPOSE: Carry the offending entity/field/enum/constraint to the caller
# CREATED: 14 OCT 2026
# EXPORTS: ModelSyncError, SchemaError, EncodingError, SyncError, ArtifactError
# ============================================================================
"""
Pipeline exceptions.

All errors propagate synchronously to the caller. None of them are
retried internally.
"""

from typing import Any, Optional


class ModelSyncError(Exception):
    """Base exception for all pipeline errors."""
    pass


class SchemaError(ModelSyncError):
    """Malformed or inconsistent schema declarations."""

    def __init__(self, message: str, entity: str = None, field: str = None):
        self.entity = entity
        self.field = field
        super().__init__(message)


class EncodingError(ModelSyncError, ValueError):
    """A runtime value does not satisfy a field's encoding contract."""

    def __init__(self, message: str, field: str = None, value: Any = None):
        self.field = field
        self.value = value
        super().__init__(message)


class SyncError(ModelSyncError):
    """Reconciliation refused to continue (index limit, enum drift, ...)."""

    def __init__(
        self,
        message: str,
        entity: Optional[str] = None,
        enum_name: Optional[str] = None,
        constraint: Optional[str] = None,
    ):
        self.entity = entity
        self.enum_name = enum_name
        self.constraint = constraint
        super().__init__(message)


class ArtifactError(ModelSyncError, OSError):
    """Rendering or writing a generated artifact failed."""

    def __init__(self, message: str, artifact: str = None):
        self.artifact = artifact
        super().__init__(message)


__all__ = [
    "ModelSyncError",
    "SchemaError",
    "EncodingError",
    "SyncError",
    "ArtifactError",
]
