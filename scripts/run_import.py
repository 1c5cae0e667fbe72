#!/usr/bin/env python3
"""
Validate a bulk inventory spreadsheet and optionally insert the valid rows.

Reads a .csv/.xlsx template, validates every row against the branch table
and prints a per-row issue report plus the batch summary.  Nothing is
written unless --commit is given.

Usage:
    python3 scripts/run_import.py --file <path> [options]

Examples:
    # Validate only
    python3 scripts/run_import.py --file inventar.xlsx

    # Validate and insert valid rows
    python3 scripts/run_import.py --file inventar.xlsx --commit --actor-id operator-1

    # Fresh local database with two branches
    python3 scripts/run_import.py --file inventar.csv --create-tables --branch Markaz --branch Narpay
"""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

DB_URL = "sqlite:///jewel_ledger.db"


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Validate a bulk inventory spreadsheet and optionally commit it.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--file", required=True, type=Path, help="Path to a .csv, .xlsx or .xlsm file.")
    parser.add_argument("--sheet", default=None, help="Sheet name (xlsx only). Default: active sheet.")
    parser.add_argument(
        "--today",
        type=lambda s: date.fromisoformat(s),
        default=None,
        help="Date used for blank purchase dates (YYYY-MM-DD). Default: today.",
    )
    parser.add_argument("--commit", action="store_true", help="Insert the valid rows.")
    parser.add_argument("--actor-id", default="cli", help="Actor recorded on inserted rows.")
    parser.add_argument("--db-url", default=DB_URL, help=f"Database URL (default: {DB_URL!r}).")
    parser.add_argument("--create-tables", action="store_true", help="Create missing tables first.")
    parser.add_argument(
        "--branch",
        action="append",
        default=[],
        help="Add a branch by name before validating (repeatable).",
    )
    return parser.parse_args()


def main() -> int:
    args = _parse_args()

    source_path = args.file.resolve()
    if not source_path.is_file():
        print(f"ERROR: File not found: {source_path}", file=sys.stderr)
        return 1

    # Lazy imports so we fail fast on args first
    from sqlalchemy import select

    from jewel_kernel.db.engine import create_tables, init_engine_from_url, session_scope
    from jewel_kernel.domain.clock import SystemClock
    from jewel_kernel.exceptions import JewelKernelError
    from jewel_kernel.models.branch import BranchModel
    from jewel_services.import_service import InventoryImportService

    init_engine_from_url(args.db_url)
    if args.create_tables:
        create_tables()

    if args.branch:
        with session_scope() as session:
            existing = set(session.scalars(select(BranchModel.name)))
            for name in args.branch:
                if name not in existing:
                    session.add(BranchModel(name=name, is_central=name.lower() == "markaz"))

    service = InventoryImportService(session_scope, clock=SystemClock())
    options = {"sheet": args.sheet} if args.sheet else {}

    def _progress(processed: int, total: int) -> None:
        print(f"  validated {processed}/{total}", file=sys.stderr)

    try:
        records, summary = service.preview_file(
            source_path, options, today=args.today, progress=_progress
        )
    except (JewelKernelError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    for record in records:
        if not record.issues:
            continue
        status = "OK  " if record.is_valid else "FAIL"
        print(f"Row {record.source_row_index:>5} {status}")
        for issue in record.issues:
            print(f"        [{issue.severity.value}] {issue.code}: {issue.message}")

    print()
    print(f"Rows:     {summary.total_rows}")
    print(f"Valid:    {summary.valid_rows}")
    print(f"Invalid:  {summary.invalid_rows}")
    print(f"Warnings: {summary.warning_rows}")
    print(f"Value:    {summary.total_value:,.2f}")
    for title, breakdown in (
        ("Category", summary.by_category),
        ("Supplier", summary.by_supplier),
        ("Branch", summary.by_branch),
    ):
        if breakdown:
            parts = ", ".join(f"{k}={v}" for k, v in sorted(breakdown.items()))
            print(f"{title + ':':<10}{parts}")

    if args.commit:
        ids = service.commit(records, actor_id=args.actor_id)
        print(f"\nInserted {len(ids)} item(s).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
