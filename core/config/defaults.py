# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for synchronization, codegen, and database access
# LAST_REVIEWED: 16 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for the synchronizer, the artifact generator
and database connectivity. These can be overridden via environment
variables or command line flags.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional


_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class SyncDefaults:
    """
    Defaults for schema reconciliation.

    Controls the target schema, timestamp columns and the index guard.
    """
    schema_name: str = "public"
    timestamp_columns: bool = True
    index_count_limit: int = 10

    @classmethod
    def from_env(cls) -> "SyncDefaults":
        """Create from environment variables."""
        return cls(
            schema_name=os.getenv("SYNC_SCHEMA", "public"),
            timestamp_columns=_env_bool("SYNC_TIMESTAMP_COLUMNS", True),
            index_count_limit=int(os.getenv("SYNC_INDEX_COUNT_LIMIT", 10)),
        )


@dataclass(frozen=True)
class CodegenDefaults:
    """
    Defaults for artifact generation.
    """
    output_dir: str = "generated"
    recreate_models_dir: bool = True

    @classmethod
    def from_env(cls) -> "CodegenDefaults":
        """Create from environment variables."""
        return cls(
            output_dir=os.getenv("CODEGEN_OUTPUT_DIR", "generated"),
            recreate_models_dir=_env_bool("CODEGEN_RECREATE_MODELS_DIR", True),
        )


@dataclass(frozen=True)
class DatabaseDefaults:
    """
    Defaults for PostgreSQL connectivity.

    A full DATABASE_URL wins over the individual POSTGRES_* settings.
    """
    url: Optional[str] = None
    host: Optional[str] = None
    port: int = 5432
    database: Optional[str] = None
    user: str = "postgres"
    password: str = ""
    sslmode: str = "prefer"

    @property
    def configured(self) -> bool:
        return bool(self.url) or bool(self.host and self.database)

    @classmethod
    def from_env(cls) -> "DatabaseDefaults":
        """Create from environment variables."""
        return cls(
            url=os.getenv("DATABASE_URL") or None,
            host=os.getenv("POSTGRES_HOST") or None,
            port=int(os.getenv("POSTGRES_PORT", 5432)),
            database=os.getenv("POSTGRES_DB") or None,
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", ""),
            sslmode=os.getenv("POSTGRES_SSLMODE", "prefer"),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    sync: SyncDefaults = field(default_factory=SyncDefaults)
    codegen: CodegenDefaults = field(default_factory=CodegenDefaults)
    database: DatabaseDefaults = field(default_factory=DatabaseDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            sync=SyncDefaults.from_env(),
            codegen=CodegenDefaults.from_env(),
            database=DatabaseDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SyncDefaults",
    "CodegenDefaults",
    "DatabaseDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
