# ============================================================================
# SYNC OPTIONS
# ============================================================================
# STATUS: Core - Runtime options for reconcile()
# PURPOSE: Validated option object built from defaults or CLI flags
# CREATED: 16 OCT 2026
# EXPORTS: SyncOptions
# DEPENDENCIES: pydantic
# ============================================================================
"""
Sync Options

    options = SyncOptions.from_defaults()
    options = SyncOptions(schema_name="app", index_count_limit=5)
"""

from typing import Optional

from pydantic import BaseModel, Field

from core.config.defaults import SyncDefaults, get_defaults


class SyncOptions(BaseModel):
    """Options passed to the synchronizer."""

    model_config = {"frozen": True}

    schema_name: str = Field(
        default="public",
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        max_length=63,
        description="Target PostgreSQL schema",
    )
    timestamp_columns: bool = Field(
        default=True,
        description="Add created_at/updated_at columns and the updated_at trigger",
    )
    index_count_limit: int = Field(
        default=10,
        ge=0,
        description="Maximum declared indexes per entity",
    )

    @classmethod
    def from_defaults(cls, defaults: Optional[SyncDefaults] = None, **overrides) -> "SyncOptions":
        """Build from SyncDefaults (environment), applying non-None overrides."""
        defaults = defaults or get_defaults().sync
        values = {
            "schema_name": defaults.schema_name,
            "timestamp_columns": defaults.timestamp_columns,
            "index_count_limit": defaults.index_count_limit,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


__all__ = ["SyncOptions"]
