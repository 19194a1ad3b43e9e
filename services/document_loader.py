# ============================================================================
# SCHEMA DOCUMENT LOADER
# ============================================================================
# STATUS: Service - Schema text to SchemaDocument
# PURPOSE: Parse GraphQL SDL or YAML schema files into the document model
# CREATED: 16 OCT 2026
# EXPORTS: load_schema_document, parse_sdl, parse_yaml
# DEPENDENCIES: graphql-core, pyyaml, pydantic
# ============================================================================
"""
Schema Document Loader

Two input formats produce the same SchemaDocument:

    .graphql / .gql   GraphQL SDL. The text is validated against the base
                      scalars and directives with graphql-core's
                      extend_schema, then converted declaration by
                      declaration (declaration order is kept).
    .yaml / .yml      A YAML serialization of SchemaDocument. Field types
                      may be written in SDL notation ("[Post!]!").

Any parse or validation failure raises SchemaError.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from graphql import (
    GraphQLError,
    GraphQLSchema,
    build_ast_schema,
    extend_schema,
    parse,
    parse_type,
    value_from_ast_untyped,
)
from graphql.language import (
    DirectiveDefinitionNode,
    DirectiveNode,
    EnumTypeDefinitionNode,
    ListTypeNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    ScalarTypeDefinitionNode,
    TypeExtensionNode,
    TypeNode,
)
from pydantic import ValidationError

from core.errors import SchemaError
from core.logging import ComponentType, get_logger
from core.models.document import (
    BASE_SDL,
    ArgumentDeclaration,
    DeclarationKind,
    DirectiveDeclaration,
    DirectiveUsage,
    FieldDeclaration,
    SchemaDocument,
    TypeDeclaration,
    TypeRef,
)

logger = get_logger(__name__, ComponentType.LOADER)

SDL_SUFFIXES = (".graphql", ".gql")
YAML_SUFFIXES = (".yaml", ".yml")


# ============================================================================
# SDL CONVERSION
# ============================================================================

@lru_cache(maxsize=1)
def _base_schema() -> GraphQLSchema:
    return build_ast_schema(parse(BASE_SDL))


def _type_ref(node: TypeNode) -> TypeRef:
    """Convert a GraphQL type node; nested lists collapse to one array level."""
    nullable = True
    if isinstance(node, NonNullTypeNode):
        nullable = False
        node = node.type

    if not isinstance(node, ListTypeNode):
        return TypeRef(name=node.name.value, nullable=nullable)

    inner = node.type
    item_nullable = True
    if isinstance(inner, NonNullTypeNode):
        item_nullable = False
        inner = inner.type
    while isinstance(inner, (ListTypeNode, NonNullTypeNode)):
        inner = inner.type
    return TypeRef(
        name=inner.name.value,
        nullable=nullable,
        is_array=True,
        item_nullable=item_nullable,
    )


def _directives(nodes: List[DirectiveNode]) -> List[DirectiveUsage]:
    return [
        DirectiveUsage(
            name=d.name.value,
            arguments={a.name.value: value_from_ast_untyped(a.value) for a in d.arguments or ()},
        )
        for d in nodes or ()
    ]


def _description(node) -> Union[str, None]:
    return node.description.value if node.description is not None else None


def parse_sdl(text: str) -> SchemaDocument:
    """
    Parse and validate GraphQL SDL into a SchemaDocument.

    Raises:
        SchemaError: on syntax errors, unknown types or directives,
                     or invalid directive arguments
    """
    try:
        ast = parse(text)
        extend_schema(_base_schema(), ast)
    except (GraphQLError, TypeError) as e:
        raise SchemaError(f"Schema: invalid schema document: {e}") from e

    scalars: List[str] = []
    directives: List[DirectiveDeclaration] = []
    types: List[TypeDeclaration] = []

    for definition in ast.definitions:
        if isinstance(definition, TypeExtensionNode):
            raise SchemaError(
                f"Schema: type extensions are not supported ({definition.name.value})"
            )
        if isinstance(definition, ScalarTypeDefinitionNode):
            scalars.append(definition.name.value)
        elif isinstance(definition, DirectiveDefinitionNode):
            directives.append(DirectiveDeclaration(
                name=definition.name.value,
                arguments=[
                    ArgumentDeclaration(name=a.name.value, type=_type_ref(a.type))
                    for a in definition.arguments or ()
                ],
                locations=[loc.value for loc in definition.locations],
            ))
        elif isinstance(definition, EnumTypeDefinitionNode):
            types.append(TypeDeclaration(
                kind=DeclarationKind.ENUM,
                name=definition.name.value,
                description=_description(definition),
                directives=_directives(definition.directives),
                values=[v.name.value for v in definition.values or ()],
            ))
        elif isinstance(definition, ObjectTypeDefinitionNode):
            types.append(TypeDeclaration(
                kind=DeclarationKind.OBJECT,
                name=definition.name.value,
                description=_description(definition),
                directives=_directives(definition.directives),
                fields=[
                    FieldDeclaration(
                        name=f.name.value,
                        type=_type_ref(f.type),
                        description=_description(f),
                        directives=_directives(f.directives),
                    )
                    for f in definition.fields or ()
                ],
            ))
        else:
            logger.warning(f"Ignoring unsupported declaration: {definition.kind}")

    return SchemaDocument(scalars=scalars, directives=directives, types=types)


# ============================================================================
# YAML CONVERSION
# ============================================================================

def _normalize_type(value: Any) -> Any:
    """Accept SDL notation for field types ("[Post!]!")."""
    if isinstance(value, str):
        try:
            return _type_ref(parse_type(value)).model_dump()
        except GraphQLError as e:
            raise SchemaError(f"Schema: invalid type reference {value!r}: {e}") from e
    return value


def _normalize_yaml(data: Dict[str, Any]) -> Dict[str, Any]:
    types = data.get("types")
    declarations = types.values() if isinstance(types, dict) else (types or [])
    for declaration in declarations:
        if not isinstance(declaration, dict):
            continue
        for field in declaration.get("fields") or []:
            if isinstance(field, dict) and "type" in field:
                field["type"] = _normalize_type(field["type"])
    return data


def parse_yaml(text: str) -> SchemaDocument:
    """
    Parse a YAML serialization of SchemaDocument.

    Raises:
        SchemaError: on YAML syntax errors or an invalid document shape
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SchemaError(f"Schema: invalid YAML document: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SchemaError("Schema: YAML document must be a mapping")

    try:
        return SchemaDocument.model_validate(_normalize_yaml(data))
    except ValidationError as e:
        raise SchemaError(f"Schema: invalid YAML document: {e}") from e


# ============================================================================
# FILE LOADING
# ============================================================================

def load_schema_document(path: Union[str, Path]) -> SchemaDocument:
    """
    Load a schema file, choosing the parser by suffix.

    Args:
        path: .graphql/.gql (SDL) or .yaml/.yml file

    Returns:
        SchemaDocument (base declarations not yet merged)
    """
    path = Path(path)
    suffix = path.suffix.lower()

    with open(path, encoding="utf-8") as f:
        text = f.read()

    if suffix in YAML_SUFFIXES:
        document = parse_yaml(text)
    elif suffix in SDL_SUFFIXES:
        document = parse_sdl(text)
    else:
        raise SchemaError(
            f"Schema: unsupported schema file type {suffix!r} "
            f"(expected one of {', '.join(SDL_SUFFIXES + YAML_SUFFIXES)})"
        )

    logger.info(f"Loaded schema document {path} ({len(document.types)} declarations)")
    return document


__all__ = [
    "load_schema_document",
    "parse_sdl",
    "parse_yaml",
    "SDL_SUFFIXES",
    "YAML_SUFFIXES",
]
