# ============================================================================
# ARTIFACT GENERATOR
# ============================================================================
# STATUS: Service - Compiled model to Python source files
# PURPOSE: Render pydantic models, enums, and JSON interfaces with Jinja2
# CREATED: 16 OCT 2026
# EXPORTS: ArtifactGenerator, ArtifactResult, generate_artifacts
# DEPENDENCIES: jinja2
# ============================================================================
"""
Artifact Generator

Renders the compiled model into an importable package:

    <output_dir>/
        __init__.py          package index (only if anything was generated)
        enums.py             class Status(str, Enum)
        interfaces.py        pydantic models for @jsonField shapes
        models/
            __init__.py      model index
            <entity>.py      one pydantic model per entity, carrying
                             __sql_table__ / __sql_schema__ /
                             __sql_primary_key__ / __sql_foreign_keys__ /
                             __sql_indexes__ / __relations__

The models/ directory is recreated on every run. Any template or file
failure raises ArtifactError naming the artifact.
"""

import keyword
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from core.config.defaults import get_defaults
from core.errors import ArtifactError
from core.logging import ComponentType, get_logger, log_checkpoint, log_context
from core.models.compiled import CompiledEntity, CompiledField
from core.models.enumeration import JsonShape, JsonShapeField
from core.models.schema_model import SchemaModel
from core.schema import type_catalog
from core.schema.ddl_utils import IndexBuilder, snake_case
from services.field_compiler import FieldCompiler

logger = get_logger(__name__, ComponentType.CODEGEN)

TEMPLATES_DIR = Path(__file__).parent / "templates"


@dataclass
class ArtifactResult:
    """What one generator run produced."""
    output_dir: str
    files: List[str] = field(default_factory=list)
    models: bool = False
    enums: bool = False
    interfaces: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "output_dir": self.output_dir,
            "files": list(self.files),
            "models": self.models,
            "enums": self.enums,
            "interfaces": self.interfaces,
        }


def _attribute(name: str) -> str:
    """Python attribute name for a schema field (keywords get a trailing _)."""
    return f"{name}_" if keyword.iskeyword(name) else name


def _upper_first(name: str) -> str:
    return name[:1].upper() + name[1:]


class ArtifactGenerator:
    """
    Renders source artifacts for a SchemaModel.

    Usage:
        result = ArtifactGenerator("src/types").run(model)
    """

    def __init__(
        self,
        output_dir: Union[str, Path, None] = None,
        schema_name: str = "public",
        recreate_models_dir: Optional[bool] = None,
    ):
        defaults = get_defaults().codegen
        self.output_dir = Path(output_dir or defaults.output_dir)
        self.schema_name = schema_name
        self.recreate_models_dir = (
            defaults.recreate_models_dir if recreate_models_dir is None else recreate_models_dir
        )
        self._env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters["pyrepr"] = repr

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, model: SchemaModel) -> ArtifactResult:
        """Render every artifact for the model."""
        with log_context(operation="codegen"):
            result = ArtifactResult(output_dir=str(self.output_dir))
            self._prepare_dir(self.output_dir / "models", recreate=self.recreate_models_dir)

            self.generate_models(model, result)
            self.generate_interfaces(model, result)
            self.generate_enums(model, result)

            if result.models or result.enums or result.interfaces:
                self._render("index.py.j2", self.output_dir / "__init__.py", "index", {
                    "export": result,
                })
                result.files.append(str(self.output_dir / "__init__.py"))
                logger.info("Types index generated")

            log_checkpoint("artifacts_written", result.to_dict())
            return result

    def generate_models(self, model: SchemaModel, result: ArtifactResult) -> None:
        compiler = FieldCompiler(self.schema_name)
        enums = model.enum_map()
        modules = []

        for entity in model.entities:
            with log_context(entity=entity.name):
                compiled = compiler.compile_entity(entity, enums)
                module = snake_case(entity.name)
                path = self.output_dir / "models" / f"{module}.py"
                self._render("model.py.j2", path, entity.name, self._model_context(model, compiled))
                result.files.append(str(path))
                modules.append({"module": module, "class_name": _upper_first(entity.name)})
                logger.info(f"Model {entity.name} generated")

        if modules:
            path = self.output_dir / "models" / "__init__.py"
            self._render("models_index.py.j2", path, "models index", {"modules": modules})
            result.files.append(str(path))
            result.models = True

    def generate_interfaces(self, model: SchemaModel, result: ArtifactResult) -> None:
        if not model.json_shapes:
            return
        shapes = [
            {
                "class_name": _upper_first(shape.name),
                "description": shape.description,
                "fields": [self._shape_field(f) for f in shape.fields],
            }
            for shape in self._shapes_in_dependency_order(model.json_shapes)
        ]
        path = self.output_dir / "interfaces.py"
        self._render("interfaces.py.j2", path, "json interfaces", {"shapes": shapes})
        result.files.append(str(path))
        result.interfaces = True

    def generate_enums(self, model: SchemaModel, result: ArtifactResult) -> None:
        if not model.enums:
            return
        enums = [
            {
                "class_name": _upper_first(e.name),
                "description": e.description,
                "members": self._enum_members(e.values),
            }
            for e in model.enums
        ]
        path = self.output_dir / "enums.py"
        self._render("enums.py.j2", path, "enums", {"enums": enums})
        result.files.append(str(path))
        result.enums = True

    # ------------------------------------------------------------------
    # Template contexts
    # ------------------------------------------------------------------

    def _model_context(self, model: SchemaModel, compiled: CompiledEntity) -> Dict[str, Any]:
        entity = model.entity(compiled.name)
        tables = {e.name: FieldCompiler.table_name(e.name) for e in model.entities}

        foreign_keys = {}
        for f in compiled.fields:
            if f.is_foreign_key:
                target = model.entity(f.reference)
                target_pk = snake_case(target.primary_key.name)
                foreign_keys[f.column] = f"{self.schema_name}.{tables[f.reference]}({target_pk})"

        indexes = []
        for spec in entity.indexes:
            columns = [compiled.column_for(name) for name in spec.fields]
            indexes.append({
                "name": IndexBuilder.generate_index_name(
                    compiled.table, columns, prefix="idx_unique" if spec.unique else "idx"
                ),
                "columns": columns,
                "unique": bool(spec.unique),
                "using": spec.using.value if spec.using else None,
            })

        relations = [
            {
                "kind": r.kind.value,
                "to": r.to_entity,
                "foreign_key": r.foreign_key,
                "field": r.field_name,
            }
            for r in model.relations_from(compiled.name)
        ]

        fields = [self._entity_field(f) for f in compiled.fields]
        return {
            "class_name": _upper_first(compiled.name),
            "entity_name": compiled.name,
            "description": compiled.description,
            "table": compiled.table,
            "schema": self.schema_name,
            "primary_key": [compiled.primary_key.column],
            "foreign_keys": foreign_keys,
            "indexes": indexes,
            "relations": relations,
            "fields": fields,
            "enum_imports": sorted({_upper_first(f.enum_name) for f in compiled.fields if f.is_enum}),
            "interface_imports": sorted({
                _upper_first(f.json_shape) for f in compiled.fields if f.json_shape
            }),
        }

    @staticmethod
    def _field_args(required: bool, alias: Optional[str], description: Optional[str]) -> str:
        """Keyword arguments for Field(...); empty when a bare annotation will do."""
        args = []
        if not required:
            args.append("default=None")
        if alias:
            args.append(f"alias={alias!r}")
        if description:
            args.append(f"description={description!r}")
        return ", ".join(args)

    @staticmethod
    def _annotation(base: str, is_array: bool, nullable: bool) -> str:
        annotation = f"List[{base}]" if is_array else base
        return f"Optional[{annotation}]" if nullable else annotation

    def _entity_field(self, f: CompiledField) -> Dict[str, Any]:
        if f.is_enum:
            base = _upper_first(f.enum_name)
        elif f.json_shape:
            base = _upper_first(f.json_shape)
        elif f.kind is not None:
            base = type_catalog.resolve(f.kind).host_kind
        else:
            base = type_catalog.resolve("ID").host_kind

        # Reference fields hold the key, named after the column (author -> author_id)
        attribute = _attribute(f.column if f.is_foreign_key else f.name)
        alias = None if f.is_foreign_key or attribute == f.name else f.name
        return {
            "attribute": attribute,
            "annotation": self._annotation(base, f.is_array, f.nullable),
            "field_args": self._field_args(not f.nullable, alias, f.description),
            "primary_key": f.primary_key,
            "indexed": f.indexed,
            "unique": f.unique,
            "codec": f.codec.name if f.codec is not None else None,
        }

    def _shape_field(self, f: JsonShapeField) -> Dict[str, Any]:
        base = _upper_first(f.shape) if f.shape else type_catalog.resolve(f.kind).host_kind
        attribute = _attribute(f.name)
        return {
            "attribute": attribute,
            "annotation": self._annotation(base, f.is_array, f.nullable),
            "field_args": self._field_args(
                not f.nullable, f.name if attribute != f.name else None, None
            ),
        }

    @classmethod
    def _enum_members(cls, values: List[str]) -> List[Dict[str, str]]:
        """Member names for enum values, suffixed when two values sanitize alike."""
        taken = set()
        members = []
        for value in values:
            base = cls._enum_member(value)
            member = base
            n = 2
            while member in taken:
                member = f"{base}_{n}"
                n += 1
            taken.add(member)
            members.append({"member": member, "value": value})
        return members

    @staticmethod
    def _enum_member(value: str) -> str:
        member = value if value.isidentifier() else "".join(
            c if c.isalnum() or c == "_" else "_" for c in value
        )
        if not member or member[0].isdigit():
            member = f"_{member}"
        if keyword.iskeyword(member):
            member = f"{member}_"
        return member

    @staticmethod
    def _shapes_in_dependency_order(shapes: List[JsonShape]) -> List[JsonShape]:
        """Nested shapes first so class bodies can refer to them."""
        by_name = {s.name: s for s in shapes}
        ordered: List[JsonShape] = []
        done = set()
        visiting = set()

        def visit(shape: JsonShape) -> None:
            if shape.name in done or shape.name in visiting:
                return
            visiting.add(shape.name)
            for nested in shape.nested_shapes:
                if nested in by_name:
                    visit(by_name[nested])
            visiting.discard(shape.name)
            done.add(shape.name)
            ordered.append(shape)

        for shape in shapes:
            visit(shape)
        return ordered

    # ------------------------------------------------------------------
    # File output
    # ------------------------------------------------------------------

    @staticmethod
    def _prepare_dir(path: Path, recreate: bool) -> None:
        try:
            if recreate and path.exists():
                shutil.rmtree(path)
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArtifactError(f"Failed to prepare {path}: {e}", artifact=str(path)) from e

    def _render(self, template_name: str, output_path: Path, artifact: str, context: Dict[str, Any]) -> None:
        try:
            content = self._env.get_template(template_name).render(**context)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(content, encoding="utf-8")
        except (TemplateError, OSError, TypeError, ValueError) as e:
            raise ArtifactError(
                f"When rendering {artifact} to {output_path}: {e}", artifact=artifact
            ) from e
        logger.debug(f"Wrote {output_path}")


def generate_artifacts(
    model: SchemaModel,
    output_dir: Union[str, Path],
    schema_name: str = "public",
) -> ArtifactResult:
    """Module-level shortcut for ArtifactGenerator(...).run(model)."""
    return ArtifactGenerator(output_dir, schema_name=schema_name).run(model)


__all__ = ["ArtifactGenerator", "ArtifactResult", "generate_artifacts"]
