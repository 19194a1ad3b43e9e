# ============================================================================
# ARTIFACT GENERATOR TESTS
# ============================================================================
# STATUS: Tests - Generated models, enums, interfaces
# PURPOSE: Verify rendered sources, metadata, directory handling, errors
# CREATED: 16 OCT 2026
# ============================================================================
"""
Artifact Generator Tests

Run with:
    pytest tests/test_codegen.py -v
"""

import importlib
import sys

import pytest

from core.errors import ArtifactError
from services.codegen import ArtifactGenerator, generate_artifacts
from services.document_loader import parse_sdl, parse_yaml
from services.extractor import extract


# ============================================================================
# HELPERS
# ============================================================================

BLOG = '''
"""Publication status"""
enum Status { DRAFT PUBLISHED }

type Meta @jsonField {
  tags: [String!]
  origin: Origin
}

type Origin @jsonField {
  url: String!
}

type User @entity {
  id: ID!
  email: String! @index(unique: true)
  posts: [Post!]! @derivedFrom(field: "author")
}

"""A blog post"""
type Post @entity {
  id: ID!
  title: String @index
  author: User!
  status: Status!
  meta: Meta
  supply: BigInt
  from: String
}
'''

STAGES = '''
types:
  - kind: enum
    name: Stage
    values: [in-progress, in_progress]
  - kind: object
    name: Task
    directives: [{name: entity}]
    fields:
      - {name: id, type: "ID!"}
      - {name: stage, type: "Stage!"}
'''


def _model(sdl: str = BLOG):
    return extract(parse_sdl(sdl))


def _generate(tmp_path, name="gen_types", **kwargs):
    output = tmp_path / name
    result = ArtifactGenerator(output, schema_name="app", **kwargs).run(_model())
    return output, result


# ============================================================================
# OUTPUT LAYOUT
# ============================================================================

class TestLayout:
    def test_files(self, tmp_path):
        output, result = _generate(tmp_path)
        assert sorted(p.relative_to(output).as_posix() for p in output.rglob("*.py")) == [
            "__init__.py",
            "enums.py",
            "interfaces.py",
            "models/__init__.py",
            "models/post.py",
            "models/user.py",
        ]
        assert result.models and result.enums and result.interfaces
        assert len(result.files) == 6

    def test_sources_compile(self, tmp_path):
        output, _ = _generate(tmp_path)
        for path in output.rglob("*.py"):
            compile(path.read_text(), str(path), "exec")

    def test_models_dir_recreated(self, tmp_path):
        stale = tmp_path / "gen_types" / "models" / "stale.py"
        stale.parent.mkdir(parents=True)
        stale.write_text("x = 1\n")
        _generate(tmp_path)
        assert not stale.exists()

    def test_models_dir_kept_when_asked(self, tmp_path):
        stale = tmp_path / "gen_types" / "models" / "stale.py"
        stale.parent.mkdir(parents=True)
        stale.write_text("x = 1\n")
        _generate(tmp_path, recreate_models_dir=False)
        assert stale.exists()

    def test_nothing_to_generate(self, tmp_path):
        result = generate_artifacts(_model("scalar Geometry"), tmp_path / "empty")
        assert result.files == []
        assert not (tmp_path / "empty" / "__init__.py").exists()

    def test_only_enums(self, tmp_path):
        result = generate_artifacts(_model("enum Kind { A B }"), tmp_path / "enums_only")
        index = (tmp_path / "enums_only" / "__init__.py").read_text()
        assert result.enums and not result.models
        assert "from .enums import *" in index
        assert "from .models import *" not in index


# ============================================================================
# CONTENT
# ============================================================================

class TestContent:
    def test_model_metadata(self, tmp_path):
        output, _ = _generate(tmp_path)
        source = (output / "models" / "post.py").read_text()

        assert "__sql_table__: ClassVar[str] = 'post'" in source
        assert "__sql_schema__: ClassVar[str] = 'app'" in source
        assert "__sql_primary_key__: ClassVar[List[str]] = ['id']" in source
        assert "{'author_id': 'app.user(id)'}" in source
        assert "'name': 'idx_post_title'" in source
        assert "A blog post" in source

    def test_model_fields(self, tmp_path):
        output, _ = _generate(tmp_path)
        source = (output / "models" / "post.py").read_text()

        assert "    id: str\n" in source
        assert "    author_id: str\n" in source
        assert "    status: Status\n" in source
        assert "    title: Optional[str] = Field(default=None)" in source
        assert "    meta: Optional[Meta] = Field(default=None)" in source
        assert "    from_: Optional[str] = Field(default=None, alias='from')" in source
        assert "# stored via the bigint codec" in source
        assert "from ..enums import Status" in source
        assert "from ..interfaces import Meta" in source

    def test_relations(self, tmp_path):
        output, _ = _generate(tmp_path)
        user = (output / "models" / "user.py").read_text()
        assert "'kind': 'hasMany'" in user
        assert "'foreign_key': 'authorId'" in user
        assert "'field': 'posts'" in user
        assert "    posts:" not in user

    def test_enums(self, tmp_path):
        output, _ = _generate(tmp_path)
        source = (output / "enums.py").read_text()
        assert "class Status(str, Enum):" in source
        assert "DRAFT = 'DRAFT'" in source
        assert "Publication status" in source

    def test_interfaces_nested_first(self, tmp_path):
        output, _ = _generate(tmp_path)
        source = (output / "interfaces.py").read_text()
        assert source.index("class Origin(") < source.index("class Meta(")
        assert "tags: Optional[List[str]] = Field(default=None)" in source

    def test_enum_member_names(self):
        assert ArtifactGenerator._enum_member("in-progress") == "in_progress"
        assert ArtifactGenerator._enum_member("1st") == "_1st"
        assert ArtifactGenerator._enum_member("class") == "class_"

    def test_colliding_enum_members_are_suffixed(self):
        members = ArtifactGenerator._enum_members(["A-B", "A_B", "A B"])
        assert [m["member"] for m in members] == ["A_B", "A_B_2", "A_B_3"]
        assert [m["value"] for m in members] == ["A-B", "A_B", "A B"]


# ============================================================================
# IMPORT
# ============================================================================

class TestGeneratedPackage:
    def test_import_and_validate(self, tmp_path, monkeypatch):
        _generate(tmp_path, name="blog_types")
        monkeypatch.syspath_prepend(str(tmp_path))
        try:
            package = importlib.import_module("blog_types")
            post = package.Post(id="p1", author_id="u1", status="DRAFT", **{"from": "rss"})
            assert post.status is package.Status.DRAFT
            assert post.from_ == "rss"
            assert package.Post.__sql_foreign_keys__ == {"author_id": "app.user(id)"}
            assert package.Meta(origin={"url": "x"}).origin.url == "x"
        finally:
            for name in [m for m in sys.modules if m.split(".")[0] == "blog_types"]:
                del sys.modules[name]

    def test_enum_with_colliding_values_imports(self, tmp_path, monkeypatch):
        model = extract(parse_yaml(STAGES))
        ArtifactGenerator(tmp_path / "stage_types").run(model)
        monkeypatch.syspath_prepend(str(tmp_path))
        try:
            enums = importlib.import_module("stage_types.enums")
            assert enums.Stage.in_progress.value == "in-progress"
            assert enums.Stage.in_progress_2.value == "in_progress"
            assert len(enums.Stage) == 2
        finally:
            for name in [m for m in sys.modules if m.split(".")[0] == "stage_types"]:
                del sys.modules[name]


# ============================================================================
# ERRORS
# ============================================================================

class TestErrors:
    def test_output_path_is_a_file(self, tmp_path):
        blocker = tmp_path / "blocked"
        blocker.write_text("")
        with pytest.raises(ArtifactError) as exc_info:
            ArtifactGenerator(blocker).run(_model())
        assert "blocked" in str(exc_info.value)

    def test_template_failure_names_artifact(self, tmp_path, monkeypatch):
        generator = ArtifactGenerator(tmp_path / "out")
        from jinja2 import TemplateError

        def broken(name):
            raise TemplateError("boom")

        monkeypatch.setattr(generator._env, "get_template", broken)
        with pytest.raises(ArtifactError) as exc_info:
            generator.run(_model())
        assert exc_info.value.artifact == "User"

    def test_render_type_error_names_artifact(self, tmp_path, monkeypatch):
        generator = ArtifactGenerator(tmp_path / "out")

        class BadTemplate:
            def render(self, **context):
                raise TypeError("not iterable")

        monkeypatch.setattr(generator._env, "get_template", lambda name: BadTemplate())
        with pytest.raises(ArtifactError) as exc_info:
            generator.run(_model())
        assert exc_info.value.artifact == "User"
        assert "not iterable" in str(exc_info.value)
