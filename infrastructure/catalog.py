# ============================================================================
# CATALOG ACCESS
# ============================================================================
# STATUS: Infrastructure - Live catalog snapshot and operation execution
# PURPOSE: Read pg_catalog state for one schema; apply planned operations
# CREATED: 16 OCT 2026
# EXPORTS: Catalog, PostgresCatalog, InMemoryCatalog, CatalogSnapshot
# DEPENDENCIES: psycopg
# ============================================================================
"""
Catalog Access

Two implementations of the same small interface:

    fetch_snapshot(schema) -> CatalogSnapshot
    execute(operation)     -> None

PostgresCatalog reads pg_namespace, pg_type/pg_enum, pg_class/pg_attribute,
pg_indexes, pg_constraint and pg_trigger with bound parameters, and runs
each operation's statements in its own transaction.

InMemoryCatalog applies operations to a snapshot and records the
statements it was asked to run. It backs dry runs and tests.

Usage:
    repo = PostgreSQLRepository()
    with repo.get_connection() as conn:
        catalog = PostgresCatalog(conn)
        snapshot = catalog.fetch_snapshot("app")
"""

from typing import List, Optional

from psycopg import sql
from psycopg.rows import dict_row

from core.logging import ComponentType, get_logger
from core.models.catalog import CatalogSnapshot
from core.schema.operations import Operation

logger = get_logger(__name__, ComponentType.INFRASTRUCTURE)


# ============================================================================
# CATALOG QUERIES
# ============================================================================

SCHEMA_EXISTS_QUERY = """
    SELECT 1 AS present FROM pg_namespace WHERE nspname = %s
"""

ENUM_LABELS_QUERY = """
    SELECT t.typname AS type_name, e.enumlabel AS label
    FROM pg_type t
    JOIN pg_enum e ON e.enumtypid = t.oid
    JOIN pg_namespace n ON n.oid = t.typnamespace
    WHERE n.nspname = %s
    ORDER BY t.typname, e.enumsortorder
"""

TYPE_COMMENTS_QUERY = """
    SELECT t.typname AS type_name, obj_description(t.oid, 'pg_type') AS comment
    FROM pg_type t
    JOIN pg_namespace n ON n.oid = t.typnamespace
    WHERE n.nspname = %s AND t.typtype = 'e'
"""

TABLE_COLUMNS_QUERY = """
    SELECT c.relname AS table_name, a.attname AS column_name
    FROM pg_class c
    JOIN pg_namespace n ON n.oid = c.relnamespace
    LEFT JOIN pg_attribute a
        ON a.attrelid = c.oid AND a.attnum > 0 AND NOT a.attisdropped
    WHERE n.nspname = %s AND c.relkind IN ('r', 'p')
    ORDER BY c.relname, a.attnum
"""

INDEXES_QUERY = """
    SELECT indexname AS index_name FROM pg_indexes WHERE schemaname = %s
"""

CONSTRAINTS_QUERY = """
    SELECT cl.relname AS table_name,
           con.conname AS constraint_name,
           obj_description(con.oid, 'pg_constraint') AS comment
    FROM pg_constraint con
    JOIN pg_class cl ON cl.oid = con.conrelid
    JOIN pg_namespace n ON n.oid = cl.relnamespace
    WHERE n.nspname = %s
"""

TRIGGERS_QUERY = """
    SELECT cl.relname AS table_name, tg.tgname AS trigger_name
    FROM pg_trigger tg
    JOIN pg_class cl ON cl.oid = tg.tgrelid
    JOIN pg_namespace n ON n.oid = cl.relnamespace
    WHERE n.nspname = %s AND NOT tg.tgisinternal
"""


class Catalog:
    """Interface shared by the live and in-memory catalogs."""

    def fetch_snapshot(self, schema: str) -> CatalogSnapshot:
        raise NotImplementedError

    def execute(self, operation: Operation) -> None:
        raise NotImplementedError


# ============================================================================
# POSTGRESQL CATALOG
# ============================================================================

class PostgresCatalog(Catalog):
    """
    Catalog backed by a live psycopg connection.

    Each operation runs in its own transaction. A failing statement rolls
    back that operation only; earlier operations stay committed.
    """

    def __init__(self, conn):
        self.conn = conn

    def _fetch_all(self, query: str, params: tuple) -> list:
        with self.conn.cursor(row_factory=dict_row) as cur:
            cur.execute(query, params)
            return cur.fetchall()

    def fetch_snapshot(self, schema: str) -> CatalogSnapshot:
        """Read the catalog state of one schema."""
        params = (schema,)
        snapshot = CatalogSnapshot.empty(schema)

        snapshot.schema_exists = bool(self._fetch_all(SCHEMA_EXISTS_QUERY, params))
        if not snapshot.schema_exists:
            logger.debug(f"Schema {schema} does not exist yet")
            return snapshot

        for row in self._fetch_all(ENUM_LABELS_QUERY, params):
            snapshot.enums.setdefault(row["type_name"], []).append(row["label"])

        for row in self._fetch_all(TYPE_COMMENTS_QUERY, params):
            snapshot.type_comments[row["type_name"]] = row["comment"]

        for row in self._fetch_all(TABLE_COLUMNS_QUERY, params):
            columns = snapshot.tables.setdefault(row["table_name"], [])
            if row["column_name"] is not None:
                columns.append(row["column_name"])

        snapshot.indexes = {row["index_name"] for row in self._fetch_all(INDEXES_QUERY, params)}

        for row in self._fetch_all(CONSTRAINTS_QUERY, params):
            snapshot.constraints[(row["table_name"], row["constraint_name"])] = row["comment"]

        snapshot.triggers = {
            (row["table_name"], row["trigger_name"])
            for row in self._fetch_all(TRIGGERS_QUERY, params)
        }

        logger.debug(f"Snapshot of {schema}: {snapshot.to_dict()}")
        return snapshot

    def render(self, statement: sql.Composable) -> str:
        return statement.as_string(self.conn)

    def execute(self, operation: Operation) -> None:
        """Run one operation's statements and commit."""
        logger.debug(f"Executing: {operation.describe()}")
        try:
            with self.conn.cursor() as cur:
                for statement in operation.statements():
                    cur.execute(statement)
            self.conn.commit()
        except Exception:
            logger.error(f"Operation failed: {operation.describe()}")
            self.conn.rollback()
            raise


# ============================================================================
# IN-MEMORY CATALOG
# ============================================================================

class InMemoryCatalog(Catalog):
    """
    Catalog backed by a CatalogSnapshot.

    Applies operations to the snapshot and records what would have been
    executed, in order.
    """

    def __init__(self, snapshot: Optional[CatalogSnapshot] = None, schema: str = "public"):
        self.snapshot = snapshot if snapshot is not None else CatalogSnapshot.empty(schema)
        self.operations: List[Operation] = []
        self.statements: List[sql.Composable] = []

    def fetch_snapshot(self, schema: str) -> CatalogSnapshot:
        if schema != self.snapshot.schema:
            return CatalogSnapshot.empty(schema)
        return self.snapshot.copy()

    def execute(self, operation: Operation) -> None:
        self.operations.append(operation)
        self.statements.extend(operation.statements())
        operation.apply(self.snapshot)

    def reset_log(self) -> None:
        """Forget recorded operations, keeping the catalog state."""
        self.operations = []
        self.statements = []


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "Catalog",
    "CatalogSnapshot",
    "PostgresCatalog",
    "InMemoryCatalog",
]
