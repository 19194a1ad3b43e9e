# ============================================================================
# CONFIGURATION & LOGGING TESTS
# ============================================================================
# STATUS: Tests - Defaults, SyncOptions, structured logging
# PURPOSE: Verify environment overrides, option validation, log context
# CREATED: 16 OCT 2026
# ============================================================================
"""
Configuration & Logging Tests

Run with:
    pytest tests/test_config_logging.py -v
"""

import json
import logging
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from core.config import SyncDefaults, SyncOptions, get_defaults, reset_defaults
from core.logging import (
    ComponentType,
    LogContext,
    StructuredFormatter,
    get_current_context,
    get_logger,
    log_checkpoint,
    log_context,
)
from services.document_loader import load_schema_document, parse_sdl
from services.extractor import extract
from services.field_compiler import FieldCompiler


# ============================================================================
# DEFAULTS & OPTIONS
# ============================================================================

class TestDefaults:
    def teardown_method(self):
        reset_defaults()

    def test_builtin_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            reset_defaults()
            defaults = get_defaults()
        assert defaults.sync.schema_name == "public"
        assert defaults.sync.timestamp_columns is True
        assert defaults.sync.index_count_limit == 10
        assert defaults.codegen.output_dir == "generated"
        assert not defaults.database.configured

    def test_environment_overrides(self):
        env = {
            "SYNC_SCHEMA": "app",
            "SYNC_TIMESTAMP_COLUMNS": "false",
            "SYNC_INDEX_COUNT_LIMIT": "3",
            "CODEGEN_OUTPUT_DIR": "src/types",
            "DATABASE_URL": "postgresql://db/app",
        }
        with patch.dict("os.environ", env, clear=True):
            reset_defaults()
            defaults = get_defaults()
        assert defaults.sync == SyncDefaults(schema_name="app", timestamp_columns=False, index_count_limit=3)
        assert defaults.codegen.output_dir == "src/types"
        assert defaults.database.configured

    def test_defaults_cached(self):
        assert get_defaults() is get_defaults()


class TestSyncOptions:
    def test_from_defaults_with_overrides(self):
        options = SyncOptions.from_defaults(
            SyncDefaults(schema_name="app"), index_count_limit=2, schema_name=None,
        )
        assert options.schema_name == "app"
        assert options.index_count_limit == 2
        assert options.timestamp_columns is True

    @pytest.mark.parametrize("name", ["", "1app", "app-data", "a" * 64])
    def test_rejects_bad_schema_names(self, name):
        with pytest.raises(ValidationError):
            SyncOptions(schema_name=name)

    def test_rejects_negative_limit(self):
        with pytest.raises(ValidationError):
            SyncOptions(index_count_limit=-1)

    def test_frozen(self):
        options = SyncOptions()
        with pytest.raises(ValidationError):
            options.schema_name = "other"


# ============================================================================
# LOGGING
# ============================================================================

class TestLogContext:
    def test_field_attribute_and_extra_default(self):
        context = LogContext(field="author")
        assert context.field == "author"
        assert context.extra == {}
        assert LogContext().extra is not context.extra
        assert context.to_dict() == {"field": "author"}

    def test_field_context_is_inherited(self):
        with log_context(entity="Post", field="author"):
            with log_context(relation="author"):
                context = get_current_context()
        assert context.field == "author"
        assert context.relation == "author"

    def test_nested_context_merges(self):
        with log_context(schema="app"):
            with log_context(entity="Post"):
                context = get_current_context()
                assert context.schema == "app"
                assert context.entity == "Post"
            assert get_current_context().entity is None
        assert get_current_context().schema is None

    def test_structured_formatter(self):
        record = logging.LogRecord("services.synchronizer", logging.INFO, __file__, 1, "hello", None, None)
        record.extra = {"checkpoint": "plan_ready"}
        with log_context(schema="app", entity="Post"):
            payload = json.loads(StructuredFormatter().format(record))
        assert payload["message"] == "hello"
        assert payload["context"] == {"schema": "app", "entity": "Post"}
        assert payload["data"] == {"checkpoint": "plan_ready"}

    def test_context_logger_adds_component(self, caplog):
        logger = get_logger("tests.component", ComponentType.COMPILER)
        with caplog.at_level(logging.INFO, logger="tests.component"):
            with log_context(entity="Post"):
                logger.info("compiled")
        record = caplog.records[-1]
        assert record.extra["component"] == "compiler"
        assert record.extra["entity"] == "Post"


class TestCheckpoints:
    def test_checkpoint_payload(self, caplog):
        with caplog.at_level(logging.INFO, logger="checkpoint"):
            with log_context(schema="app"):
                log_checkpoint("plan_ready", {"operations": 3})
        record = caplog.records[-1]
        assert record.getMessage() == "CHECKPOINT: plan_ready"
        assert record.extra["schema"] == "app"
        assert record.extra["data"] == {"operations": 3}

    def test_extraction_emits_checkpoint(self, caplog):
        with caplog.at_level(logging.INFO, logger="checkpoint"):
            extract(parse_sdl("type User @entity { id: ID! }"))
        checkpoints = [r.extra["checkpoint"] for r in caplog.records if r.name == "checkpoint"]
        assert checkpoints == ["extraction_complete"]

    def test_pipeline_loggers_tag_component(self, caplog, tmp_path):
        path = tmp_path / "schema.graphql"
        path.write_text("type User @entity { id: ID! }", encoding="utf-8")
        with caplog.at_level(logging.DEBUG):
            model = extract(load_schema_document(path))
            FieldCompiler("app").compile_entity(model.entity("User"), model.enums)
        components = {
            r.name: r.extra["component"]
            for r in caplog.records
            if r.name in ("services.document_loader", "services.field_compiler")
        }
        assert components == {
            "services.document_loader": "loader",
            "services.field_compiler": "compiler",
        }
