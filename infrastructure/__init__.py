# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Infrastructure - Database access
# PURPOSE: PostgreSQL connectivity and catalog snapshot/execution
# LAST_REVIEWED: 16 OCT 2026
# ============================================================================
"""
Infrastructure module.

Provides:
- PostgreSQLRepository: connection management
- PostgresCatalog: live catalog snapshot and operation execution
- InMemoryCatalog: snapshot-backed catalog for dry runs and tests

Usage:
    from infrastructure import PostgreSQLRepository, PostgresCatalog

    repo = PostgreSQLRepository()
    with repo.get_connection() as conn:
        snapshot = PostgresCatalog(conn).fetch_snapshot("app")
"""

from infrastructure.postgresql import PostgreSQLRepository
from infrastructure.catalog import (
    Catalog,
    CatalogSnapshot,
    PostgresCatalog,
    InMemoryCatalog,
)

__all__ = [
    # PostgreSQL
    'PostgreSQLRepository',
    # Catalog
    'Catalog',
    'CatalogSnapshot',
    'PostgresCatalog',
    'InMemoryCatalog',
]
