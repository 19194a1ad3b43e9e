# ============================================================================
# SCHEMA MODEL EXTRACTOR
# ============================================================================
# STATUS: Service - SchemaDocument to SchemaModel
# PURPOSE: Classify declarations, build entities/enums/shapes, infer relations
# CREATED: 16 OCT 2026
# EXPORTS: SchemaExtractor, extract
# DEPENDENCIES: pydantic
# ============================================================================
"""
Schema Model Extractor

Walks a parsed SchemaDocument (base declarations merged in first) and
produces a normalized SchemaModel:

    enum Foo { ... }              -> Enumeration
    type Foo @jsonField { ... }   -> JsonShape
    type Foo @entity { ... }      -> Entity (+ IndexSpecs)

Relations are inferred, never declared:

    Post.author: User                                -> belongsTo(Post -> User)
    User.posts: [Post] @derivedFrom(field: "author") -> hasMany(User -> Post)
                                                        or hasOne when Post.author
                                                        has @index(unique: true)

Every rejection raises SchemaError naming the entity and field.
"""

from typing import Any, Dict, List, Optional, Set, Tuple

from pydantic import ValidationError

from core.contracts import Directive, FieldKind, IndexMethod, RelationKind
from core.errors import SchemaError
from core.logging import ComponentType, get_logger, log_checkpoint, log_context
from core.models.document import (
    DeclarationKind,
    FieldDeclaration,
    SchemaDocument,
    TypeDeclaration,
    TypeRef,
)
from core.models.entity import Entity, EntityField, IndexSpec
from core.models.enumeration import Enumeration, JsonShape, JsonShapeField
from core.models.relation import Relation
from core.models.schema_model import SchemaModel
from core.schema.ddl_utils import safe_identifier
from services.field_compiler import FieldCompiler

logger = get_logger(__name__, ComponentType.EXTRACTOR)

_LOCATION_OBJECT = "OBJECT"
_LOCATION_FIELD = "FIELD_DEFINITION"


def _matches_scalar(value: Any, type_name: str) -> bool:
    if type_name == "Boolean":
        return isinstance(value, bool)
    if type_name in ("String", "ID"):
        return isinstance(value, str)
    if type_name == "Int":
        return isinstance(value, int) and not isinstance(value, bool)
    if type_name == "Float":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return True


def _matches_type(value: Any, type_ref: TypeRef) -> bool:
    """Check a directive argument value against its declared type."""
    if value is None:
        return type_ref.nullable
    if not type_ref.is_array:
        return _matches_scalar(value, type_ref.name)
    if not isinstance(value, list):
        return False

    def item_ok(item: Any) -> bool:
        if item is None:
            return type_ref.item_nullable
        if isinstance(item, list):
            return all(item_ok(i) for i in item)
        return _matches_scalar(item, type_ref.name)

    return all(item_ok(item) for item in value)


def _check_name(name: str, what: str, entity: str, field: Optional[str] = None) -> None:
    """Declared names become table, column and class names."""
    try:
        safe_identifier(name, what)
    except ValueError as e:
        raise SchemaError(
            f"Schema: invalid {what} {name!r}: names must match [A-Za-z_][A-Za-z0-9_]*",
            entity=entity, field=field,
        ) from e


class SchemaExtractor:
    """
    Builds a SchemaModel from one SchemaDocument.

    Usage:
        model = SchemaExtractor(document).extract()
    """

    def __init__(self, document: SchemaDocument):
        self.document = document.with_base()
        self._objects: Dict[str, TypeDeclaration] = {}
        self._enums: Dict[str, TypeDeclaration] = {}
        self._entity_names: List[str] = []
        self._shape_names: List[str] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def extract(self) -> SchemaModel:
        """Run every extraction pass and return the model."""
        with log_context(operation="extract"):
            self._index_declarations()
            self._validate_directives()

            enums = [self._build_enum(self._enums[name]) for name in self._enums]
            shapes = [self._build_shape(self._objects[name]) for name in self._shape_names]
            entities = [self._build_entity(self._objects[name]) for name in self._entity_names]
            self._check_storage_names(entities)
            relations = self._infer_relations(entities)

            model = SchemaModel(
                entities=entities,
                enums=enums,
                json_shapes=shapes,
                relations=relations,
            )

            log_checkpoint("extraction_complete", {
                "entities": len(entities),
                "enums": len(enums),
                "json_shapes": len(shapes),
                "relations": len(relations),
            })
            return model

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _index_declarations(self) -> None:
        seen: Set[str] = set(self.document.scalars)
        for declaration in self.document.types:
            if declaration.kind == DeclarationKind.SCALAR:
                continue
            _check_name(declaration.name, "type name", entity=declaration.name)
            for field in declaration.fields:
                _check_name(field.name, "field name", entity=declaration.name, field=field.name)
            if declaration.name in seen:
                raise SchemaError(
                    f"Schema: type {declaration.name} is declared more than once",
                    entity=declaration.name,
                )
            seen.add(declaration.name)

            if declaration.kind == DeclarationKind.ENUM:
                self._enums[declaration.name] = declaration
                continue

            self._objects[declaration.name] = declaration
            is_entity = declaration.directive(Directive.ENTITY.value) is not None
            is_shape = declaration.directive(Directive.JSON_FIELD.value) is not None
            if is_entity and is_shape:
                raise SchemaError(
                    f"Schema: type {declaration.name} cannot be both @entity and @jsonField",
                    entity=declaration.name,
                )
            if is_entity:
                self._entity_names.append(declaration.name)
            elif is_shape:
                self._shape_names.append(declaration.name)
            else:
                raise SchemaError(
                    f"Schema: type {declaration.name} must be annotated with @entity or @jsonField",
                    entity=declaration.name,
                )

    def _validate_directives(self) -> None:
        for declaration in self.document.types:
            for usage in declaration.directives:
                self._check_directive(usage.name, usage.arguments, _LOCATION_OBJECT,
                                      declaration.name, None)
            for field in declaration.fields:
                for usage in field.directives:
                    self._check_directive(usage.name, usage.arguments, _LOCATION_FIELD,
                                          declaration.name, field.name)

    def _check_directive(
        self,
        name: str,
        arguments: Dict[str, Any],
        location: str,
        owner: str,
        field: Optional[str],
    ) -> None:
        where = f"{owner}.{field}" if field else owner
        declaration = self.document.directive_declaration(name)
        if declaration is None:
            raise SchemaError(f"Schema: unknown directive @{name} on {where}", entity=owner, field=field)
        if declaration.locations and location not in declaration.locations:
            raise SchemaError(
                f"Schema: directive @{name} is not allowed on {where}", entity=owner, field=field
            )
        for arg_name, value in arguments.items():
            argument = declaration.argument(arg_name)
            if argument is None:
                raise SchemaError(
                    f"Schema: unknown argument {arg_name!r} for @{name} on {where}",
                    entity=owner, field=field,
                )
            if not _matches_type(value, argument.type):
                raise SchemaError(
                    f"Schema: argument {arg_name!r} of @{name} on {where} "
                    f"expects {argument.type.name}{'[]' if argument.type.is_array else ''}, "
                    f"got {value!r}",
                    entity=owner, field=field,
                )
        for argument in declaration.arguments:
            if not argument.type.nullable and arguments.get(argument.name) is None:
                raise SchemaError(
                    f"Schema: directive @{name} on {where} requires argument {argument.name!r}",
                    entity=owner, field=field,
                )

    # ------------------------------------------------------------------
    # Enumerations and JSON shapes
    # ------------------------------------------------------------------

    def _build_enum(self, declaration: TypeDeclaration) -> Enumeration:
        with log_context(enum_name=declaration.name):
            try:
                return Enumeration(
                    name=declaration.name,
                    values=list(declaration.values),
                    description=declaration.description,
                )
            except ValidationError as e:
                raise SchemaError(
                    f"Schema: invalid enum {declaration.name}: {e.errors()[0]['msg']}",
                    entity=declaration.name,
                ) from e

    def _build_shape(self, declaration: TypeDeclaration) -> JsonShape:
        fields = []
        for field in declaration.fields:
            type_name = field.type.name
            if self._is_scalar(type_name):
                member = JsonShapeField(
                    name=field.name, kind=FieldKind(type_name),
                    nullable=field.type.nullable, is_array=field.type.is_array,
                )
            elif type_name in self._shape_names:
                member = JsonShapeField(
                    name=field.name, shape=type_name,
                    nullable=field.type.nullable, is_array=field.type.is_array,
                )
            else:
                raise SchemaError(
                    f'Schema: undefined type "{type_name}" on field "{field.name}" '
                    f'in "type {declaration.name} @jsonField"',
                    entity=declaration.name, field=field.name,
                )
            fields.append(member)
        return JsonShape(name=declaration.name, fields=fields, description=declaration.description)

    def _is_scalar(self, type_name: str) -> bool:
        if type_name not in self.document.scalars:
            return False
        if type_name not in FieldKind.names():
            # Declared scalar without a storage mapping
            raise SchemaError(f'Schema: scalar "{type_name}" has no storage type')
        return True

    # ------------------------------------------------------------------
    # Entities
    # ------------------------------------------------------------------

    def _build_entity(self, declaration: TypeDeclaration) -> Entity:
        with log_context(entity=declaration.name):
            fields: List[EntityField] = []
            indexes: List[IndexSpec] = []
            derived: Set[str] = set()

            for field in declaration.fields:
                with log_context(field=field.name):
                    if field.directive(Directive.DERIVED_FROM.value) is not None:
                        self._check_derived_field(declaration, field)
                        derived.add(field.name)
                        continue
                    fields.append(self._build_field(declaration, field))
                    index = self._field_index(declaration, field)
                    if index is not None:
                        indexes.append(index)

            indexes.extend(self._composite_indexes(declaration, {f.name for f in fields}, derived))

            primary_keys = [f.name for f in fields if f.is_primary_key]
            if len(primary_keys) != 1:
                raise SchemaError(
                    f"Schema: entity {declaration.name} must have exactly one ID field, "
                    f"found {len(primary_keys)}",
                    entity=declaration.name,
                )

            entity = Entity(
                name=declaration.name,
                fields=fields,
                indexes=indexes,
                description=declaration.description,
            )
            logger.debug(f"Entity {entity.name}: {len(fields)} fields, {len(indexes)} indexes")
            return entity

    def _check_storage_names(self, entities: List[Entity]) -> None:
        """Distinct entities and fields must not fold to the same table or column."""
        tables: Dict[str, str] = {}
        for entity in entities:
            table = FieldCompiler.table_name(entity.name)
            if table in tables:
                raise SchemaError(
                    f"Schema: entities {tables[table]} and {entity.name} both map to table {table}",
                    entity=entity.name,
                )
            tables[table] = entity.name

            columns: Dict[str, str] = {}
            for field in entity.fields:
                column = FieldCompiler.column_name(field)
                if column in columns:
                    raise SchemaError(
                        f"Schema: fields {entity.name}.{columns[column]} and "
                        f"{entity.name}.{field.name} both map to column {column}",
                        entity=entity.name, field=field.name,
                    )
                columns[column] = field.name

    def _build_field(self, owner: TypeDeclaration, field: FieldDeclaration) -> EntityField:
        type_ref = field.type
        type_name = type_ref.name
        common = dict(
            name=field.name,
            nullable=type_ref.nullable,
            is_array=type_ref.is_array,
            description=field.description,
        )

        if self._is_scalar(type_name):
            if type_name == FieldKind.ID.value and type_ref.is_array:
                raise SchemaError(
                    f"Schema: ID field {owner.name}.{field.name} cannot be a list",
                    entity=owner.name, field=field.name,
                )
            return EntityField(kind=FieldKind(type_name), **common)
        if type_name in self._enums:
            return EntityField(enum=type_name, **common)
        if type_name in self._shape_names:
            return EntityField(kind=FieldKind.JSON, json_shape=type_name, **common)
        if type_name in self._entity_names:
            if type_ref.is_array:
                raise SchemaError(
                    f"Schema: list of entities on {owner.name}.{field.name} "
                    f"requires @derivedFrom",
                    entity=owner.name, field=field.name,
                )
            return EntityField(reference=type_name, **common)

        raise SchemaError(
            f'Schema: undefined type "{type_name}" on field "{field.name}" '
            f'in "type {owner.name} @entity"',
            entity=owner.name, field=field.name,
        )

    def _field_index(self, owner: TypeDeclaration, field: FieldDeclaration) -> Optional[IndexSpec]:
        usage = field.directive(Directive.INDEX.value)
        if usage is None:
            return None
        return IndexSpec(
            fields=[field.name],
            unique=usage.arguments.get("unique"),
            using=self._index_method(usage.arguments.get("using"), owner.name, field.name),
        )

    @staticmethod
    def _index_method(value: Optional[str], entity: str, field: Optional[str]) -> Optional[IndexMethod]:
        if value is None:
            return None
        try:
            return IndexMethod(value.lower())
        except ValueError:
            raise SchemaError(
                f"Schema: unsupported index method {value!r} on {entity} "
                f"(expected one of {', '.join(m.value for m in IndexMethod)})",
                entity=entity, field=field,
            )

    def _composite_indexes(
        self,
        owner: TypeDeclaration,
        field_names: Set[str],
        derived: Set[str],
    ) -> List[IndexSpec]:
        usage = owner.directive(Directive.COMPOSITE_INDEXES.value)
        if usage is None:
            return []

        specs = []
        for group in usage.arguments.get("fields") or []:
            if not isinstance(group, list) or not group:
                raise SchemaError(
                    f"Schema: @compositeIndexes on {owner.name} expects non-empty lists of field names",
                    entity=owner.name,
                )
            if len(set(group)) != len(group):
                raise SchemaError(
                    f"Schema: @compositeIndexes on {owner.name} repeats a field in {group}",
                    entity=owner.name,
                )
            for name in group:
                if name in derived:
                    raise SchemaError(
                        f"Schema: derived field {owner.name}.{name} cannot be indexed",
                        entity=owner.name, field=name,
                    )
                if name not in field_names:
                    raise SchemaError(
                        f"Schema: @compositeIndexes on {owner.name} names unknown field {name!r}",
                        entity=owner.name, field=name,
                    )
            specs.append(IndexSpec(fields=list(group)))
        return specs

    # ------------------------------------------------------------------
    # Relations
    # ------------------------------------------------------------------

    def _check_derived_field(self, owner: TypeDeclaration, field: FieldDeclaration) -> None:
        """Validate a @derivedFrom field against the field it points at."""
        if field.directive(Directive.INDEX.value) is not None:
            raise SchemaError(
                f"Schema: derived field {owner.name}.{field.name} cannot be indexed",
                entity=owner.name, field=field.name,
            )
        target_name = field.type.name
        if target_name not in self._entity_names:
            raise SchemaError(
                f"Schema: @derivedFrom field {owner.name}.{field.name} must have an entity type, "
                f"got {target_name}",
                entity=owner.name, field=field.name,
            )
        back_field = field.directive(Directive.DERIVED_FROM.value).arguments["field"]
        target = self._objects[target_name]
        for candidate in target.fields:
            if candidate.name != back_field:
                continue
            if candidate.type.name != owner.name or candidate.type.is_array:
                raise SchemaError(
                    f"Schema: @derivedFrom on {owner.name}.{field.name} points at "
                    f"{target_name}.{back_field}, which does not reference {owner.name}",
                    entity=owner.name, field=field.name,
                )
            if candidate.directive(Directive.DERIVED_FROM.value) is not None:
                raise SchemaError(
                    f"Schema: @derivedFrom on {owner.name}.{field.name} points at "
                    f"another derived field {target_name}.{back_field}",
                    entity=owner.name, field=field.name,
                )
            return
        raise SchemaError(
            f"Schema: @derivedFrom on {owner.name}.{field.name} points at "
            f"{target_name}.{back_field}, which does not exist",
            entity=owner.name, field=field.name,
        )

    def _infer_relations(self, entities: List[Entity]) -> List[Relation]:
        """Emit relations entity by entity, in field declaration order."""
        by_name = {e.name: e for e in entities}
        relations: List[Relation] = []
        sources: Set[Tuple[str, str]] = set()

        for entity in entities:
            declaration = self._objects[entity.name]
            for field in declaration.fields:
                usage = field.directive(Directive.DERIVED_FROM.value)
                if usage is None:
                    declared = entity.field(field.name)
                    if declared is not None and declared.is_reference:
                        relations.append(Relation(
                            from_entity=entity.name,
                            to_entity=declared.reference,
                            kind=RelationKind.BELONGS_TO,
                            foreign_key=declared.foreign_key,
                            field_name=declared.name,
                        ))
                    continue

                target = by_name[field.type.name]
                back_field = target.field(usage.arguments["field"])
                source = (target.name, back_field.name)
                if source in sources:
                    raise SchemaError(
                        f"Schema: {target.name}.{back_field.name} is the source of more than "
                        f"one @derivedFrom relation (again on {entity.name}.{field.name})",
                        entity=entity.name, field=field.name,
                    )
                sources.add(source)

                _, unique = target.index_flags(back_field.name)
                kind = RelationKind.HAS_ONE if unique is True else RelationKind.HAS_MANY
                if kind == RelationKind.HAS_MANY and not field.type.is_array:
                    logger.warning(
                        f"{entity.name}.{field.name} is single-valued but "
                        f"{target.name}.{back_field.name} is not unique; inferring hasMany"
                    )
                relations.append(Relation(
                    from_entity=entity.name,
                    to_entity=target.name,
                    kind=kind,
                    foreign_key=back_field.foreign_key,
                    field_name=field.name,
                ))

        for relation in relations:
            logger.debug(f"Relation {relation.describe()}")
        return relations


def extract(document: SchemaDocument) -> SchemaModel:
    """Build the SchemaModel for one document."""
    return SchemaExtractor(document).extract()


__all__ = ["SchemaExtractor", "extract"]
