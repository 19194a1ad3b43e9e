# ============================================================================
# COMPILED FIELD MODEL
# ============================================================================
# STATUS: Core model - Field compiler output
# PURPOSE: Storage representation and encoding rule of one entity field
# CREATED: 15 OCT 2026
# EXPORTS: CompiledField, CompiledEntity
# DEPENDENCIES: dataclasses
# ============================================================================
"""
Compiled Field Model

What the field compiler resolves for each declared field: its column
name and PostgreSQL type, key and index flags, and the codec used at the
read/write boundary (None means pass-through).
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from core.contracts import FieldKind
from core.schema.codecs import ValueCodec


@dataclass(frozen=True)
class CompiledField:
    """Storage representation of one entity field."""
    name: str
    column: str
    storage_type: str
    host_type: str
    kind: Optional[FieldKind] = None
    enum_name: Optional[str] = None
    enum_type: Optional[Tuple[str, str]] = None  # (schema, hashed type name)
    json_shape: Optional[str] = None
    reference: Optional[str] = None
    is_array: bool = False
    nullable: bool = True
    primary_key: bool = False
    indexed: bool = False
    unique: Optional[bool] = None
    description: Optional[str] = None
    codec: Optional[ValueCodec] = field(default=None, compare=False, repr=False)

    @property
    def is_enum(self) -> bool:
        return self.enum_type is not None

    @property
    def is_json(self) -> bool:
        return self.json_shape is not None or self.kind == FieldKind.JSON

    @property
    def is_foreign_key(self) -> bool:
        return self.reference is not None


@dataclass(frozen=True)
class CompiledEntity:
    """An entity with its table name and compiled fields."""
    name: str
    table: str
    fields: List[CompiledField]
    description: Optional[str] = None

    @property
    def primary_key(self) -> CompiledField:
        return next(f for f in self.fields if f.primary_key)

    def field(self, name: str) -> Optional[CompiledField]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def column_for(self, name: str) -> str:
        compiled = self.field(name)
        if compiled is None:
            raise KeyError(f"{self.name} has no field {name}")
        return compiled.column


__all__ = ["CompiledField", "CompiledEntity"]
