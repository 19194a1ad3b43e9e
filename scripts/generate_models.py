#!/usr/bin/env python
# ============================================================================
# MODEL GENERATION SCRIPT
# ============================================================================
# PURPOSE: Generate pydantic models, enums, and interfaces from a schema file
# USAGE:
#   python scripts/generate_models.py --schema schema.graphql --output src/types
# ============================================================================

import sys
import os
import argparse

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import get_defaults
from core.errors import ModelSyncError
from core.logging import configure_logging
from services import ArtifactGenerator, extract, load_schema_document


def main():
    defaults = get_defaults()
    parser = argparse.ArgumentParser(description="Generate Python sources from an annotated schema file")
    parser.add_argument("--schema", required=True, help="Schema file (.graphql, .gql, .yaml, .yml)")
    parser.add_argument(
        "--output",
        default=defaults.codegen.output_dir,
        help=f"Output package directory (default: {defaults.codegen.output_dir})",
    )
    parser.add_argument(
        "--db-schema",
        default=defaults.sync.schema_name,
        help="Schema written into __sql_schema__",
    )
    parser.add_argument(
        "--keep-models-dir",
        action="store_true",
        help="Do not delete the models/ directory before writing",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    configure_logging("DEBUG" if args.verbose else "INFO")

    try:
        model = extract(load_schema_document(args.schema))
        generator = ArtifactGenerator(
            args.output,
            schema_name=args.db_schema,
            recreate_models_dir=False if args.keep_models_dir else None,
        )
        result = generator.run(model)
    except (ModelSyncError, OSError) as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)

    print(f"✅ Generated {len(result.files)} files in {result.output_dir}")
    for path in result.files:
        print(f"   {path}")


if __name__ == "__main__":
    main()
