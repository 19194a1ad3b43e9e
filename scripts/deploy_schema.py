#!/usr/bin/env python
# ============================================================================
# SCHEMA DEPLOYMENT SCRIPT
# ============================================================================
# PURPOSE: Reconcile a PostgreSQL schema with an annotated schema file
# USAGE:
#   python scripts/deploy_schema.py --schema schema.graphql --dry-run
#   python scripts/deploy_schema.py --schema schema.graphql --db-schema app
# ============================================================================

import sys
import os
import argparse

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import SyncOptions
from core.errors import ModelSyncError
from core.logging import configure_logging
from infrastructure import PostgresCatalog, PostgreSQLRepository
from services import SchemaSynchronizer, extract, load_schema_document


def main():
    parser = argparse.ArgumentParser(
        description="Reconcile a PostgreSQL schema with an annotated schema file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/deploy_schema.py --schema schema.graphql --dry-run
  python scripts/deploy_schema.py --schema schema.yaml --db-schema app

Environment Variables:
  DATABASE_URL            Full PostgreSQL connection string
  POSTGRES_HOST           Database host
  POSTGRES_DB             Database name
  POSTGRES_USER           Database user (default: postgres)
  POSTGRES_PASSWORD       Database password
  POSTGRES_PORT           Database port (default: 5432)
  POSTGRES_SSLMODE        SSL mode (default: prefer)
  SYNC_SCHEMA             Target schema (default: public)
  SYNC_INDEX_COUNT_LIMIT  Max declared indexes per entity (default: 10)
  SYNC_TIMESTAMP_COLUMNS  Add created_at/updated_at (default: true)
        """
    )
    parser.add_argument("--schema", required=True, help="Schema file (.graphql, .gql, .yaml, .yml)")
    parser.add_argument("--db-schema", type=str, help="Target PostgreSQL schema")
    parser.add_argument("--dry-run", action="store_true", help="Print planned DDL without executing")
    parser.add_argument("--connection", type=str, help="PostgreSQL connection string (overrides environment)")
    parser.add_argument("--index-limit", type=int, help="Max declared indexes per entity")
    parser.add_argument(
        "--no-timestamps",
        action="store_true",
        help="Do not add created_at/updated_at columns",
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    configure_logging("DEBUG" if args.verbose else "INFO", json_output=args.json_logs)

    try:
        options = SyncOptions.from_defaults(
            schema_name=args.db_schema,
            index_count_limit=args.index_limit,
            timestamp_columns=False if args.no_timestamps else None,
        )
        model = extract(load_schema_document(args.schema))
    except (ModelSyncError, OSError, ValueError) as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)

    print("=" * 70)
    print("MODELSYNC - Schema Deployment")
    print("=" * 70)
    print(f"Schema file: {args.schema}")
    print(f"Target schema: {options.schema_name}")
    print(f"Entities: {len(model.entities)}  Enums: {len(model.enums)}  Relations: {len(model.relations)}")
    print(f"Mode: {'DRY RUN' if args.dry_run else 'EXECUTE'}")
    print("=" * 70)

    synchronizer = SchemaSynchronizer(options)
    repository = PostgreSQLRepository(connection_string=args.connection)

    try:
        with repository.get_connection() as conn:
            catalog = PostgresCatalog(conn)
            if args.dry_run:
                snapshot = catalog.fetch_snapshot(options.schema_name)
                operations = synchronizer.plan(model, snapshot)
                print(f"\n[PLAN] {len(operations)} operations\n")
                for operation in operations:
                    print(f"-- {operation.describe()}")
                    for statement in operation.statements():
                        print(f"{catalog.render(statement)};")
            else:
                operations = synchronizer.reconcile(model, catalog)
                print(f"\n[RESULTS] {len(operations)} operations executed\n")
                for operation in operations:
                    print(f"✅ {operation.describe()}")
    except (ModelSyncError, ValueError) as e:
        print("\n" + "=" * 70)
        print("❌ Deployment failed!")
        print(f"   - {e}")
        print("=" * 70)
        sys.exit(1)

    print("\n" + "=" * 70)
    if args.dry_run:
        print("Dry run complete, nothing executed")
    else:
        print("✅ Deployment completed successfully!")
    print("=" * 70)


if __name__ == "__main__":
    main()
