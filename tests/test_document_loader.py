# ============================================================================
# SCHEMA DOCUMENT LOADER TESTS
# ============================================================================
# STATUS: Tests - SDL and YAML parsing
# PURPOSE: Verify both input formats produce the same SchemaDocument
# CREATED: 16 OCT 2026
# ============================================================================
"""
Schema Document Loader Tests

Run with:
    pytest tests/test_document_loader.py -v
"""

import pytest

from core.errors import SchemaError
from core.models.document import DeclarationKind
from services.document_loader import load_schema_document, parse_sdl, parse_yaml


SDL = '''
"""Publication status"""
enum Status { DRAFT PUBLISHED }

type Meta @jsonField {
  tags: [String!]
}

type User @entity {
  id: ID!
  name: String! @index(unique: true)
  posts: [Post!]! @derivedFrom(field: "author")
}

type Post @entity @compositeIndexes(fields: [["author", "title"]]) {
  id: ID!
  title: String
  author: User!
  status: Status
  meta: Meta
}
'''

YAML = '''
types:
  - kind: enum
    name: Status
    description: Publication status
    values: [DRAFT, PUBLISHED]
  - kind: object
    name: Meta
    directives: [{name: jsonField}]
    fields:
      - {name: tags, type: "[String!]"}
  - kind: object
    name: User
    directives: [{name: entity}]
    fields:
      - {name: id, type: "ID!"}
      - name: name
        type: "String!"
        directives: [{name: index, arguments: {unique: true}}]
      - name: posts
        type: "[Post!]!"
        directives: [{name: derivedFrom, arguments: {field: author}}]
  - kind: object
    name: Post
    directives:
      - name: entity
      - name: compositeIndexes
        arguments: {fields: [[author, title]]}
    fields:
      - {name: id, type: "ID!"}
      - {name: title, type: String}
      - {name: author, type: "User!"}
      - {name: status, type: Status}
      - {name: meta, type: Meta}
'''


# ============================================================================
# SDL
# ============================================================================

class TestParseSdl:
    def test_declarations_keep_order(self):
        document = parse_sdl(SDL)
        assert [t.name for t in document.types] == ["Status", "Meta", "User", "Post"]

    def test_enum(self):
        status = parse_sdl(SDL).types[0]
        assert status.kind == DeclarationKind.ENUM
        assert status.values == ["DRAFT", "PUBLISHED"]
        assert status.description == "Publication status"

    def test_type_refs(self):
        user = parse_sdl(SDL).types[2]
        id_field, name_field, posts = user.fields
        assert id_field.type.name == "ID" and not id_field.type.nullable
        assert not name_field.type.is_array
        assert posts.type.is_array
        assert not posts.type.nullable
        assert not posts.type.item_nullable

    def test_directive_arguments(self):
        user = parse_sdl(SDL).types[2]
        assert user.fields[1].directive("index").arguments == {"unique": True}
        assert user.fields[2].directive("derivedFrom").arguments == {"field": "author"}

    def test_list_argument(self):
        post = parse_sdl(SDL).types[3]
        assert post.directive("compositeIndexes").arguments == {"fields": [["author", "title"]]}

    def test_syntax_error(self):
        with pytest.raises(SchemaError, match="invalid schema document"):
            parse_sdl("type User @entity {")

    def test_unknown_type(self):
        with pytest.raises(SchemaError):
            parse_sdl("type User @entity { id: ID! pet: Pet }")

    def test_unknown_directive(self):
        with pytest.raises(SchemaError):
            parse_sdl("type User @table { id: ID! }")

    def test_type_extension_rejected(self):
        with pytest.raises(SchemaError):
            parse_sdl("type User @entity { id: ID! }\nextend type User { name: String }")


# ============================================================================
# YAML
# ============================================================================

class TestParseYaml:
    def test_same_document_as_sdl(self):
        from_yaml = parse_yaml(YAML)
        from_sdl = parse_sdl(SDL)
        assert [t.name for t in from_yaml.types] == [t.name for t in from_sdl.types]
        assert from_yaml.types[2].fields == from_sdl.types[2].fields
        assert from_yaml.types[3].directives == from_sdl.types[3].directives

    def test_mapping_shorthand(self):
        document = parse_yaml("types:\n  Status: {kind: enum, values: [A, B]}\n")
        assert document.types[0].name == "Status"
        assert document.types[0].values == ["A", "B"]

    def test_empty_document(self):
        assert parse_yaml("").types == []

    def test_not_a_mapping(self):
        with pytest.raises(SchemaError, match="mapping"):
            parse_yaml("- a\n- b\n")

    def test_yaml_syntax_error(self):
        with pytest.raises(SchemaError, match="invalid YAML"):
            parse_yaml("types: [unclosed")

    def test_invalid_shape(self):
        with pytest.raises(SchemaError):
            parse_yaml("types:\n  - {kind: table, name: X}\n")

    def test_invalid_type_notation(self):
        with pytest.raises(SchemaError, match="invalid type reference"):
            parse_yaml("types:\n  - {kind: object, name: X, fields: [{name: a, type: '[String'}]}\n")


# ============================================================================
# FILES
# ============================================================================

class TestLoadSchemaDocument:
    def test_dispatch_by_suffix(self, tmp_path):
        sdl_path = tmp_path / "schema.graphql"
        sdl_path.write_text(SDL)
        yaml_path = tmp_path / "schema.yml"
        yaml_path.write_text(YAML)

        assert len(load_schema_document(sdl_path).types) == 4
        assert len(load_schema_document(str(yaml_path)).types) == 4

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "schema.json"
        path.write_text("{}")
        with pytest.raises(SchemaError, match="unsupported schema file type"):
            load_schema_document(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_schema_document(tmp_path / "missing.graphql")
