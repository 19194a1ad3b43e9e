# ============================================================================
# TYPE CATALOG & NAMING TESTS
# ============================================================================
# STATUS: Tests - Scalar catalog and identifier helpers
# PURPOSE: Verify storage/host kinds, snake_case, bounded and hashed names
# CREATED: 16 OCT 2026
# ============================================================================
"""
Type Catalog & Naming Tests

Run with:
    pytest tests/test_type_catalog.py -v
"""

import pytest

from core.contracts import FieldKind
from core.errors import SchemaError
from core.schema import type_catalog
from core.schema.ddl_utils import (
    MAX_IDENTIFIER_LENGTH,
    IndexBuilder,
    bounded_name,
    enum_type_name,
    foreign_key_constraint_name,
    safe_identifier,
    smart_tags,
    snake_case,
    unique_index_name,
)


# ============================================================================
# TYPE CATALOG
# ============================================================================

class TestTypeCatalog:
    def test_every_kind_has_an_entry(self):
        assert set(type_catalog.TYPE_CATALOG) == set(FieldKind)

    @pytest.mark.parametrize("kind,storage,host", [
        ("ID", "TEXT", "str"),
        ("String", "TEXT", "str"),
        ("Int", "INTEGER", "int"),
        ("Float", "DOUBLE PRECISION", "float"),
        ("Boolean", "BOOLEAN", "bool"),
        ("BigInt", "NUMERIC", "int"),
        ("BigDecimal", "NUMERIC", "Decimal"),
        ("Date", "TIMESTAMPTZ", "datetime"),
        ("Bytes", "BYTEA", "str"),
        ("Json", "JSONB", "Dict[str, Any]"),
    ])
    def test_resolve(self, kind, storage, host):
        entry = type_catalog.resolve(kind)
        assert entry.storage_kind == storage
        assert entry.host_kind == host

    def test_resolve_accepts_enum_member(self):
        assert type_catalog.resolve(FieldKind.INT).storage_kind == "INTEGER"

    def test_unknown_kind_raises(self):
        with pytest.raises(SchemaError, match="Geometry"):
            type_catalog.resolve("Geometry")

    def test_is_scalar(self):
        assert type_catalog.is_scalar("BigInt")
        assert not type_catalog.is_scalar("Post")

    def test_arrays_are_jsonb(self):
        assert type_catalog.ARRAY_STORAGE_KIND == "JSONB"


# ============================================================================
# IDENTIFIERS
# ============================================================================

class TestSnakeCase:
    @pytest.mark.parametrize("name,expected", [
        ("author", "author"),
        ("authorId", "author_id"),
        ("BlogPost", "blog_post"),
        ("HTTPRequest", "http_request"),
        ("version2Name", "version2_name"),
    ])
    def test_snake_case(self, name, expected):
        assert snake_case(name) == expected


class TestSafeIdentifier:
    def test_accepts_plain_names(self):
        assert safe_identifier("blog_post") == "blog_post"

    @pytest.mark.parametrize("name", ["", "1abc", "bad-name", 'x"; DROP', None])
    def test_rejects_unsafe_names(self, name):
        with pytest.raises(ValueError):
            safe_identifier(name)


class TestGeneratedNames:
    def test_short_names_unchanged(self):
        assert bounded_name("post_author_id_fkey") == "post_author_id_fkey"

    def test_long_names_bounded_and_stable(self):
        long = "a" * 80
        first = bounded_name(long)
        assert len(first) == MAX_IDENTIFIER_LENGTH
        assert bounded_name(long) == first
        assert bounded_name("a" * 79 + "b") != first

    def test_enum_type_name_hashes_logical_name(self):
        name = enum_type_name("app", "Status")
        assert name.startswith("app_enum_")
        assert len(name) == len("app_enum_") + 8
        assert "Status" not in name
        assert enum_type_name("app", "Status") == name
        assert enum_type_name("app", "Kind") != name

    def test_enum_type_name_rejects_unsafe_schema(self):
        with pytest.raises(ValueError):
            enum_type_name("bad schema", "Status")

    def test_constraint_names(self):
        assert foreign_key_constraint_name("post", "author_id") == "post_author_id_fkey"
        assert unique_index_name("profile", "user_id") == "profile_user_id_uindex"

    def test_index_names(self):
        assert IndexBuilder.generate_index_name("post", ["title"]) == "idx_post_title"
        assert IndexBuilder.generate_index_name(
            "post", ["author_id", "title"], prefix="idx_unique"
        ) == "idx_unique_post_author_id_title"

    def test_smart_tags(self):
        assert smart_tags({"foreignFieldName": "posts"}) == "@foreignFieldName posts"
        assert smart_tags({"a": "1", "b": "2"}) == "@a 1\n@b 2"
