# ============================================================================
# ENTITY MODEL
# ============================================================================
# STATUS: Core model - Normalized entity, field, and index declarations
# PURPOSE: Extractor output for record types that materialize as tables
# CREATED: 14 OCT 2026
# EXPORTS: EntityField, IndexSpec, Entity, resolve_index_flags
# DEPENDENCIES: pydantic
# ============================================================================
"""
Entity Model

An Entity is a schema-declared record type that materializes as a table.
Fields keep their declaration order. Exactly one field has kind ID; it is
the primary key.

Field typing is a closed union:
    kind=<scalar>                 plain scalar column
    enum=<name>                   enumeration column
    kind=Json, json_shape=<name>  structured JSON column
    reference=<entity>            foreign key column (<field>_id)
"""

from typing import List, Optional, Sequence, Tuple
from pydantic import BaseModel, Field, model_validator

from core.contracts import FieldKind, IndexMethod


class EntityField(BaseModel):
    """One declared field of an entity."""
    name: str
    kind: Optional[FieldKind] = None
    enum: Optional[str] = Field(default=None, description="Enumeration name for enum fields")
    json_shape: Optional[str] = Field(default=None, description="Embedded JsonShape name")
    reference: Optional[str] = Field(default=None, description="Target entity for reference fields")
    nullable: bool = True
    is_array: bool = False
    description: Optional[str] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_single_type(self) -> "EntityField":
        declared = [x for x in (self.kind, self.enum, self.reference) if x is not None]
        if len(declared) != 1:
            raise ValueError(f"field {self.name} must have exactly one of kind, enum, reference")
        if self.json_shape is not None and self.kind != FieldKind.JSON:
            raise ValueError(f"field {self.name} embeds a JSON shape but is not Json kind")
        return self

    @property
    def is_primary_key(self) -> bool:
        return self.kind == FieldKind.ID

    @property
    def is_enum(self) -> bool:
        return self.enum is not None

    @property
    def is_reference(self) -> bool:
        return self.reference is not None

    @property
    def foreign_key(self) -> Optional[str]:
        """Foreign key attribute name for reference fields (author -> authorId)."""
        if self.reference is None:
            return None
        return f"{self.name}Id"


class IndexSpec(BaseModel):
    """
    Index declaration over declared field names.

    unique is tri-state: True, False, or None (not declared either way).
    """
    fields: List[str]
    unique: Optional[bool] = None
    using: Optional[IndexMethod] = None

    model_config = {"frozen": True}

    def names_only(self, field_name: str) -> bool:
        return len(self.fields) == 1 and self.fields[0] == field_name


def resolve_index_flags(field_name: str, indexes: Sequence[IndexSpec]) -> Tuple[bool, Optional[bool]]:
    """
    Resolve (indexed, unique) for one field.

    indexed is True if any index names the field. unique takes the first
    explicit verdict (True or False) from a single-field index naming it;
    later indexes never override it. None means no verdict was declared.
    """
    indexed = False
    unique: Optional[bool] = None
    for spec in indexes:
        if field_name not in spec.fields:
            continue
        indexed = True
        if unique is None and spec.names_only(field_name) and spec.unique is not None:
            unique = spec.unique
    return indexed, unique


class Entity(BaseModel):
    """A record type that materializes as one table."""
    name: str
    fields: List[EntityField]
    indexes: List[IndexSpec] = Field(default_factory=list)
    description: Optional[str] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_primary_key(self) -> "Entity":
        ids = [f for f in self.fields if f.is_primary_key]
        if len(ids) != 1:
            raise ValueError(f"entity {self.name} must have exactly one ID field, found {len(ids)}")
        return self

    @property
    def primary_key(self) -> EntityField:
        return next(f for f in self.fields if f.is_primary_key)

    def field(self, name: str) -> Optional[EntityField]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def index_flags(self, field_name: str) -> Tuple[bool, Optional[bool]]:
        return resolve_index_flags(field_name, self.indexes)


__all__ = [
    "EntityField",
    "IndexSpec",
    "Entity",
    "resolve_index_flags",
]
