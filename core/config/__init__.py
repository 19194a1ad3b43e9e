# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# LAST_REVIEWED: 16 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration, defaults and runtime options.
"""

from core.config.defaults import (
    SyncDefaults,
    CodegenDefaults,
    DatabaseDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)
from core.config.options import SyncOptions

__all__ = [
    "SyncDefaults",
    "CodegenDefaults",
    "DatabaseDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
    "SyncOptions",
]
