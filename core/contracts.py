# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Closed enumerations shared by every component
# PURPOSE: Field kinds, relation kinds, and directive names
# CREATED: 14 OCT 2026
# EXPORTS: FieldKind, RelationKind, Directive, IndexMethod
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the schema compiler.

These enums cross every boundary:
- Schema document (directive and scalar names)
- Compiled model (field and relation kinds)
- PostgreSQL (index access methods)
"""

from enum import Enum


# ============================================================================
# FIELD KINDS
# ============================================================================

class FieldKind(str, Enum):
    """
    Scalar field kinds.

    Values are the scalar names used in schema documents. Every member
    has exactly one row in the type catalog.
    """
    BIG_INT = "BigInt"           # Integer64, stored as exact decimal
    BIG_DECIMAL = "BigDecimal"
    BOOLEAN = "Boolean"
    BYTES = "Bytes"              # Stored as binary, exposed as hex text
    DATE = "Date"                # Timestamp
    FLOAT = "Float"
    ID = "ID"                    # Identifier, always the primary key
    INT = "Int"                  # Int32
    JSON = "Json"                # Opaque JSON value or JsonShape
    STRING = "String"

    @classmethod
    def names(cls) -> frozenset:
        return frozenset(member.value for member in cls)


# ============================================================================
# RELATION KINDS
# ============================================================================

class RelationKind(str, Enum):
    """
    Inferred inter-entity association kinds.

        belongsTo: owner holds the foreign key
        hasOne:    inverse of a unique belongsTo
        hasMany:   inverse of a non-unique belongsTo
    """
    BELONGS_TO = "belongsTo"
    HAS_ONE = "hasOne"
    HAS_MANY = "hasMany"


# ============================================================================
# DIRECTIVES
# ============================================================================

class Directive(str, Enum):
    """Directive names understood by the extractor."""
    ENTITY = "entity"
    JSON_FIELD = "jsonField"
    DERIVED_FROM = "derivedFrom"
    INDEX = "index"
    COMPOSITE_INDEXES = "compositeIndexes"


class IndexMethod(str, Enum):
    """PostgreSQL index access methods accepted in @index(using: ...)."""
    BTREE = "btree"
    HASH = "hash"
    GIN = "gin"
    GIST = "gist"
    BRIN = "brin"


__all__ = [
    "FieldKind",
    "RelationKind",
    "Directive",
    "IndexMethod",
]
