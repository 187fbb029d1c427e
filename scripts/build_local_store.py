#!/usr/bin/env python3
"""Build a local DuckDB store and seed it from a player statistics CSV.

Run this once to use the service without a hosted Supabase project.
Point DATABASE_PATH at the resulting file.

Usage:
    python scripts/build_local_store.py [csv_path] [--output data/squad_stats.duckdb]

Default csv_path: data/player-statistics.csv (relative to repo root)
"""
import argparse
import asyncio
import sys
from pathlib import Path

from squad_stats.repositories.duckdb_store import DuckDBTableStore
from squad_stats.services.csv_import import import_csv_file

REPO_ROOT = Path(__file__).parent.parent


async def build_local_store(csv_path: Path, output_path: Path, fresh: bool = False) -> int:
    """Create the DuckDB store at output_path and import csv_path into it.

    Args:
        csv_path: Player statistics CSV file
        output_path: Where to write the .duckdb file
        fresh: Remove an existing file first

    Returns:
        Number of imported players
    """
    if fresh and output_path.exists():
        output_path.unlink()
        print(f"Removed existing {output_path}")

    store = DuckDBTableStore(output_path)
    result = await import_csv_file(store, csv_path)
    if not result.success:
        raise RuntimeError(result.error)
    return result.count


def main():
    parser = argparse.ArgumentParser(description="Build a local DuckDB player store")
    parser.add_argument(
        "csv_path",
        nargs="?",
        type=Path,
        default=REPO_ROOT / "data" / "player-statistics.csv",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=REPO_ROOT / "data" / "squad_stats.duckdb",
    )
    parser.add_argument("--fresh", action="store_true", help="Replace an existing store")
    args = parser.parse_args()

    if not args.csv_path.exists():
        print(f"Error: CSV file not found: {args.csv_path}")
        sys.exit(1)

    try:
        count = asyncio.run(build_local_store(args.csv_path, args.output, fresh=args.fresh))
    except RuntimeError as e:
        print(f"Error: import failed: {e}")
        sys.exit(1)

    print(f"\nDone! Imported {count} players into {args.output}")
    print(f"Set DATABASE_PATH={args.output} to use it.")


if __name__ == "__main__":
    main()
