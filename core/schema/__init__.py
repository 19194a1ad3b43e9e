# ============================================================================
# SCHEMA MODULE
# ============================================================================
# STATUS: Core - Type catalog, value codecs, and DDL building blocks
# PURPOSE: Storage mapping and psycopg.sql builders shared by the services
# LAST_REVIEWED: 16 OCT 2026
# ============================================================================
"""
Schema Module

Leaf modules only; sql_generator and operations import the compiled
models and are imported directly:

    from core.schema.sql_generator import TableBuilder
    from core.schema.operations import CreateTable
"""

from core.schema.type_catalog import (
    TYPE_CATALOG,
    TypeEntry,
    resolve,
    is_scalar,
)
from core.schema.codecs import (
    ValueCodec,
    BigIntCodec,
    BytesCodec,
    ENCODING_RULES,
    codec_for,
    encode_row,
    decode_row,
)
from core.schema.ddl_utils import (
    IndexBuilder,
    EnumBuilder,
    ConstraintBuilder,
    TriggerBuilder,
    CommentBuilder,
    SchemaUtils,
    enum_type_name,
    snake_case,
)

__all__ = [
    # Type catalog
    "TYPE_CATALOG",
    "TypeEntry",
    "resolve",
    "is_scalar",
    # Codecs
    "ValueCodec",
    "BigIntCodec",
    "BytesCodec",
    "ENCODING_RULES",
    "codec_for",
    "encode_row",
    "decode_row",
    # Builders
    "IndexBuilder",
    "EnumBuilder",
    "ConstraintBuilder",
    "TriggerBuilder",
    "CommentBuilder",
    "SchemaUtils",
    "enum_type_name",
    "snake_case",
]
