# ============================================================================
# FIELD COMPILER TESTS
# ============================================================================
# STATUS: Tests - Entity fields to storage representation
# PURPOSE: Verify columns, storage/host types, enum types, flags, codecs
# CREATED: 16 OCT 2026
# ============================================================================
"""
Field Compiler Tests

Run with:
    pytest tests/test_field_compiler.py -v
"""

import itertools

import pytest

from core.contracts import FieldKind
from core.errors import SchemaError
from core.models.entity import Entity, EntityField, IndexSpec
from core.models.enumeration import Enumeration
from core.schema.codecs import BigIntCodec, BytesCodec
from core.schema.ddl_utils import enum_type_name
from services.field_compiler import FieldCompiler, compile_fields


# ============================================================================
# HELPERS
# ============================================================================

STATUS = Enumeration(name="Status", values=["DRAFT", "PUBLISHED"])


def _entity(*fields, indexes=()):
    return Entity(
        name="BlogPost",
        fields=[EntityField(name="id", kind=FieldKind.ID, nullable=False), *fields],
        indexes=list(indexes),
    )


def _compile(entity, schema="app"):
    return {f.name: f for f in FieldCompiler(schema).compile(entity, [STATUS])}


# ============================================================================
# NAMES
# ============================================================================

class TestNames:
    def test_table_name(self):
        assert FieldCompiler.table_name("BlogPost") == "blog_post"

    def test_column_names(self):
        fields = _compile(_entity(
            EntityField(name="createdBy", kind=FieldKind.STRING),
            EntityField(name="author", reference="User"),
        ))
        assert fields["createdBy"].column == "created_by"
        assert fields["author"].column == "author_id"

    def test_compile_entity(self):
        compiled = FieldCompiler("app").compile_entity(_entity(), [STATUS])
        assert compiled.table == "blog_post"
        assert compiled.primary_key.column == "id"

    def test_unsafe_schema_name(self):
        with pytest.raises(ValueError):
            FieldCompiler("app; drop")


# ============================================================================
# TYPES
# ============================================================================

class TestStorageTypes:
    @pytest.mark.parametrize("kind,storage,host", [
        (FieldKind.STRING, "TEXT", "str"),
        (FieldKind.INT, "INTEGER", "int"),
        (FieldKind.BIG_INT, "NUMERIC", "int"),
        (FieldKind.BIG_DECIMAL, "NUMERIC", "Decimal"),
        (FieldKind.DATE, "TIMESTAMPTZ", "datetime"),
        (FieldKind.BYTES, "BYTEA", "str"),
        (FieldKind.JSON, "JSONB", "Dict[str, Any]"),
    ])
    def test_scalar(self, kind, storage, host):
        compiled = _compile(_entity(EntityField(name="value", kind=kind)))["value"]
        assert compiled.storage_type == storage
        assert compiled.host_type == host

    def test_primary_key(self):
        compiled = _compile(_entity())["id"]
        assert compiled.primary_key
        assert compiled.storage_type == "TEXT"

    def test_scalar_array_is_jsonb(self):
        compiled = _compile(_entity(EntityField(name="tags", kind=FieldKind.STRING, is_array=True)))["tags"]
        assert compiled.storage_type == "JSONB"
        assert compiled.host_type == "List[str]"

    def test_json_shape(self):
        compiled = _compile(_entity(
            EntityField(name="meta", kind=FieldKind.JSON, json_shape="Meta"),
        ))["meta"]
        assert compiled.storage_type == "JSONB"
        assert compiled.host_type == "Meta"
        assert compiled.is_json

    def test_enum(self):
        compiled = _compile(_entity(EntityField(name="status", enum="Status")))["status"]
        type_name = enum_type_name("app", "Status")
        assert compiled.enum_type == ("app", type_name)
        assert compiled.storage_type == type_name
        assert compiled.host_type == "Status"
        assert compiled.is_enum

    def test_enum_array(self):
        compiled = _compile(_entity(EntityField(name="history", enum="Status", is_array=True)))["history"]
        assert compiled.storage_type.endswith("[]")
        assert compiled.host_type == "List[Status]"

    def test_undefined_enum(self):
        with pytest.raises(SchemaError, match='undefined enum "Kind"'):
            _compile(_entity(EntityField(name="kind", enum="Kind")))

    def test_reference(self):
        compiled = _compile(_entity(EntityField(name="author", reference="User", nullable=False)))["author"]
        assert compiled.is_foreign_key
        assert compiled.storage_type == "TEXT"
        assert compiled.host_type == "str"
        assert not compiled.nullable


# ============================================================================
# CODECS
# ============================================================================

class TestCodecs:
    def test_codec_assignment(self):
        fields = _compile(_entity(
            EntityField(name="supply", kind=FieldKind.BIG_INT),
            EntityField(name="hash", kind=FieldKind.BYTES),
            EntityField(name="name", kind=FieldKind.STRING),
        ))
        assert isinstance(fields["supply"].codec, BigIntCodec)
        assert isinstance(fields["hash"].codec, BytesCodec)
        assert fields["name"].codec is None

    def test_arrays_have_no_codec(self):
        fields = _compile(_entity(EntityField(name="hashes", kind=FieldKind.BYTES, is_array=True)))
        assert fields["hashes"].codec is None


# ============================================================================
# INDEX FLAGS
# ============================================================================

class TestIndexFlags:
    def test_unindexed(self):
        compiled = _compile(_entity(EntityField(name="title", kind=FieldKind.STRING)))["title"]
        assert not compiled.indexed
        assert compiled.unique is None

    def test_composite_index_sets_indexed_only(self):
        compiled = _compile(_entity(
            EntityField(name="title", kind=FieldKind.STRING),
            indexes=[IndexSpec(fields=["id", "title"], unique=True)],
        ))["title"]
        assert compiled.indexed
        assert compiled.unique is None

    @pytest.mark.parametrize(
        "first,second",
        list(itertools.product([None, True, False], repeat=2)),
    )
    def test_first_explicit_verdict_wins(self, first, second):
        compiled = _compile(_entity(
            EntityField(name="title", kind=FieldKind.STRING),
            indexes=[
                IndexSpec(fields=["title"], unique=first),
                IndexSpec(fields=["title"], unique=second),
            ],
        ))["title"]
        expected = first if first is not None else second
        assert compiled.indexed
        assert compiled.unique is expected


class TestModuleShortcut:
    def test_compile_fields_keeps_order(self):
        entity = _entity(
            EntityField(name="b", kind=FieldKind.STRING),
            EntityField(name="a", kind=FieldKind.STRING),
        )
        assert [f.name for f in compile_fields(entity, {"Status": STATUS})] == ["id", "b", "a"]
