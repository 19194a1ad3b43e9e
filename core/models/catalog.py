# ============================================================================
# CATALOG SNAPSHOT MODEL
# ============================================================================
# STATUS: Core model - Live database state, fetched once per reconcile
# PURPOSE: Functional diff target for the synchronizer
# CREATED: 16 OCT 2026
# EXPORTS: CatalogSnapshot
# DEPENDENCIES: dataclasses
# ============================================================================
"""
Catalog Snapshot

Everything the synchronizer needs to know about one PostgreSQL schema:

    - whether the schema exists
    - enum types and their labels in sort order, plus type comments
    - tables and their columns
    - index names
    - constraints (per table) and their comments
    - triggers (per table)

The synchronizer diffs the model against a snapshot; operations can be
applied to a snapshot to predict the post-run state.
"""

import copy
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple


@dataclass
class CatalogSnapshot:
    """Point-in-time view of one schema's catalog."""
    schema: str
    schema_exists: bool = False
    enums: Dict[str, List[str]] = field(default_factory=dict)
    type_comments: Dict[str, Optional[str]] = field(default_factory=dict)
    tables: Dict[str, List[str]] = field(default_factory=dict)
    indexes: Set[str] = field(default_factory=set)
    constraints: Dict[Tuple[str, str], Optional[str]] = field(default_factory=dict)
    triggers: Set[Tuple[str, str]] = field(default_factory=set)

    @classmethod
    def empty(cls, schema: str) -> "CatalogSnapshot":
        return cls(schema=schema)

    def copy(self) -> "CatalogSnapshot":
        return copy.deepcopy(self)

    def has_table(self, table: str) -> bool:
        return table in self.tables

    def has_column(self, table: str, column: str) -> bool:
        return column in self.tables.get(table, [])

    def has_constraint(self, table: str, constraint: str) -> bool:
        return (table, constraint) in self.constraints

    def constraint_comment(self, table: str, constraint: str) -> Optional[str]:
        return self.constraints.get((table, constraint))

    def to_dict(self) -> Dict[str, object]:
        """Summary for logging and CLI status output."""
        return {
            "schema": self.schema,
            "schema_exists": self.schema_exists,
            "enum_types": sorted(self.enums),
            "tables": {t: len(cols) for t, cols in sorted(self.tables.items())},
            "indexes": len(self.indexes),
            "constraints": len(self.constraints),
            "triggers": len(self.triggers),
        }


__all__ = ["CatalogSnapshot"]
