# ============================================================================
# SCHEMA DOCUMENT MODEL
# ============================================================================
# STATUS: Core model - Abstract parsed schema document
# PURPOSE: Parser-independent input to the schema model extractor
# CREATED: 14 OCT 2026
# EXPORTS: TypeRef, DirectiveUsage, FieldDeclaration, TypeDeclaration,
#          DirectiveDeclaration, SchemaDocument, BASE_SCALARS, BASE_DIRECTIVES
# DEPENDENCIES: pydantic
# ============================================================================
"""
Schema Document Model

The document is what an external parser produces from schema text
(GraphQL SDL, or a YAML serialization of this same model). It only
records declarations; all meaning is assigned by the extractor.

Base declarations (built-in scalars and directives) are merged into
every document by SchemaDocument.with_base() before user declarations
are interpreted.
"""

from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator

from core.contracts import Directive, FieldKind


class TypeRef(BaseModel):
    """
    Reference to a named type, with list/non-null wrapping.

    `[Post!]!` -> name="Post", is_array=True, nullable=False, item_nullable=False
    """
    name: str
    nullable: bool = True
    is_array: bool = False
    item_nullable: bool = True

    model_config = {"frozen": True}


class DirectiveUsage(BaseModel):
    """A directive applied to a type or field, e.g. @index(unique: true)."""
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}


class FieldDeclaration(BaseModel):
    """A field inside an object type declaration."""
    name: str
    type: TypeRef
    description: Optional[str] = None
    directives: List[DirectiveUsage] = Field(default_factory=list)

    model_config = {"frozen": True}

    def directive(self, name: str) -> Optional[DirectiveUsage]:
        for usage in self.directives:
            if usage.name == name:
                return usage
        return None


class DeclarationKind(str, Enum):
    """Kinds of top-level type declarations."""
    OBJECT = "object"
    ENUM = "enum"
    SCALAR = "scalar"


class TypeDeclaration(BaseModel):
    """
    A top-level type declaration.

    OBJECT declarations carry fields; ENUM declarations carry values
    in declared order; SCALAR declarations carry only a name.
    """
    kind: DeclarationKind
    name: str
    description: Optional[str] = None
    directives: List[DirectiveUsage] = Field(default_factory=list)
    fields: List[FieldDeclaration] = Field(default_factory=list)
    values: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    def directive(self, name: str) -> Optional[DirectiveUsage]:
        for usage in self.directives:
            if usage.name == name:
                return usage
        return None


class ArgumentDeclaration(BaseModel):
    """Directive argument signature, e.g. `field: String!`."""
    name: str
    type: TypeRef


class DirectiveDeclaration(BaseModel):
    """A directive definition with its allowed locations."""
    name: str
    arguments: List[ArgumentDeclaration] = Field(default_factory=list)
    locations: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    def argument(self, name: str) -> Optional[ArgumentDeclaration]:
        for arg in self.arguments:
            if arg.name == name:
                return arg
        return None


# ============================================================================
# BASE DECLARATIONS
# ============================================================================

BASE_SCALARS: List[str] = [
    FieldKind.ID.value,
    FieldKind.STRING.value,
    FieldKind.INT.value,
    FieldKind.FLOAT.value,
    FieldKind.BOOLEAN.value,
    FieldKind.BIG_INT.value,
    FieldKind.BIG_DECIMAL.value,
    FieldKind.DATE.value,
    FieldKind.BYTES.value,
]

BASE_DIRECTIVES: List[DirectiveDeclaration] = [
    DirectiveDeclaration(
        name=Directive.DERIVED_FROM.value,
        arguments=[ArgumentDeclaration(name="field", type=TypeRef(name="String", nullable=False))],
        locations=["FIELD_DEFINITION"],
    ),
    DirectiveDeclaration(name=Directive.ENTITY.value, locations=["OBJECT"]),
    DirectiveDeclaration(name=Directive.JSON_FIELD.value, locations=["OBJECT"]),
    DirectiveDeclaration(
        name=Directive.INDEX.value,
        arguments=[
            ArgumentDeclaration(name="unique", type=TypeRef(name="Boolean")),
            ArgumentDeclaration(name="using", type=TypeRef(name="String")),
        ],
        locations=["FIELD_DEFINITION"],
    ),
    DirectiveDeclaration(
        name=Directive.COMPOSITE_INDEXES.value,
        arguments=[
            ArgumentDeclaration(
                name="fields",
                type=TypeRef(name="String", is_array=True, nullable=False),
            ),
        ],
        locations=["OBJECT"],
    ),
]

# SDL rendering of the base declarations (fed to the GraphQL parser)
BASE_SDL = """
scalar BigInt
scalar BigDecimal
scalar Date
scalar Bytes

directive @derivedFrom(field: String!) on FIELD_DEFINITION
directive @entity on OBJECT
directive @jsonField on OBJECT
directive @index(unique: Boolean, using: String) on FIELD_DEFINITION
directive @compositeIndexes(fields: [[String]]!) on OBJECT
"""


# ============================================================================
# DOCUMENT
# ============================================================================

class SchemaDocument(BaseModel):
    """
    A parsed schema description.

    Types keep their declaration order; the extractor relies on it for
    entity, enum-value, and relation ordering.
    """
    scalars: List[str] = Field(default_factory=list)
    directives: List[DirectiveDeclaration] = Field(default_factory=list)
    types: List[TypeDeclaration] = Field(default_factory=list)

    @field_validator("types", mode="before")
    @classmethod
    def handle_mapping_input(cls, v):
        """Allow {Name: {kind: ..., ...}} as shorthand for a list."""
        if isinstance(v, dict):
            return [{"name": name, **(body or {})} for name, body in v.items()]
        return v

    def with_base(self) -> "SchemaDocument":
        """Return a copy with built-in scalars and directives merged in first."""
        scalars = list(BASE_SCALARS)
        scalars.extend(s for s in self.scalars if s not in scalars)

        directives = list(BASE_DIRECTIVES)
        known = {d.name for d in directives}
        directives.extend(d for d in self.directives if d.name not in known)

        return SchemaDocument(scalars=scalars, directives=directives, types=list(self.types))

    def directive_declaration(self, name: str) -> Optional[DirectiveDeclaration]:
        for declaration in self.directives:
            if declaration.name == name:
                return declaration
        return None


__all__ = [
    "TypeRef",
    "DirectiveUsage",
    "FieldDeclaration",
    "DeclarationKind",
    "TypeDeclaration",
    "ArgumentDeclaration",
    "DirectiveDeclaration",
    "SchemaDocument",
    "BASE_SCALARS",
    "BASE_DIRECTIVES",
    "BASE_SDL",
]
