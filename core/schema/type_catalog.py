# ============================================================================
# TYPE CATALOG
# ============================================================================
# STATUS: Core - Static scalar kind mapping
# PURPOSE: Map each FieldKind to its PostgreSQL column type and Python type
# CREATED: 14 OCT 2026
# EXPORTS: TypeEntry, TYPE_CATALOG, resolve, is_scalar
# DEPENDENCIES: none
# ============================================================================
"""
Type Catalog.

One row per FieldKind. Adding a kind means adding a row here and,
if the value needs translation at the read/write boundary, one entry
in core.schema.codecs.ENCODING_RULES.
"""

from dataclasses import dataclass
from typing import Dict, Union

from core.contracts import FieldKind
from core.errors import SchemaError


@dataclass(frozen=True)
class TypeEntry:
    """Storage and host representation for one scalar kind."""
    kind: FieldKind
    storage_kind: str
    host_kind: str


TYPE_CATALOG: Dict[FieldKind, TypeEntry] = {
    FieldKind.BIG_INT: TypeEntry(FieldKind.BIG_INT, "NUMERIC", "int"),
    FieldKind.BIG_DECIMAL: TypeEntry(FieldKind.BIG_DECIMAL, "NUMERIC", "Decimal"),
    FieldKind.BOOLEAN: TypeEntry(FieldKind.BOOLEAN, "BOOLEAN", "bool"),
    FieldKind.BYTES: TypeEntry(FieldKind.BYTES, "BYTEA", "str"),
    FieldKind.DATE: TypeEntry(FieldKind.DATE, "TIMESTAMPTZ", "datetime"),
    FieldKind.FLOAT: TypeEntry(FieldKind.FLOAT, "DOUBLE PRECISION", "float"),
    FieldKind.ID: TypeEntry(FieldKind.ID, "TEXT", "str"),
    FieldKind.INT: TypeEntry(FieldKind.INT, "INTEGER", "int"),
    FieldKind.JSON: TypeEntry(FieldKind.JSON, "JSONB", "Dict[str, Any]"),
    FieldKind.STRING: TypeEntry(FieldKind.STRING, "TEXT", "str"),
}

# Arrays of scalars and of JSON shapes collapse into one JSONB column
ARRAY_STORAGE_KIND = TYPE_CATALOG[FieldKind.JSON].storage_kind


def is_scalar(kind_name: str) -> bool:
    """True if kind_name names a catalogued scalar kind."""
    return kind_name in FieldKind.names()


def resolve(kind: Union[str, FieldKind]) -> TypeEntry:
    """
    Look up the catalog row for a scalar kind.

    Args:
        kind: FieldKind or its schema name (e.g. "BigInt")

    Returns:
        TypeEntry with storage_kind and host_kind

    Raises:
        SchemaError: if the name is not a known scalar kind
    """
    try:
        return TYPE_CATALOG[FieldKind(kind)]
    except ValueError:
        raise SchemaError(f'Schema: undefined scalar type "{kind}"')


__all__ = [
    "TypeEntry",
    "TYPE_CATALOG",
    "ARRAY_STORAGE_KIND",
    "is_scalar",
    "resolve",
]
