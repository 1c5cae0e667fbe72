#!/usr/bin/env python3
"""
Preview or record a lump payment to a supplier.

Prints the supplier's outstanding balance, which items the payment covers
(oldest first) and the price variance against the recorded raw prices.
Nothing is written unless --commit is given.

Usage:
    python3 scripts/record_payment.py --supplier <name> --amount <n> --price-per-gram <n> [--commit]
"""

from __future__ import annotations

import argparse
import sys
from decimal import Decimal
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

DB_URL = "sqlite:///jewel_ledger.db"


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Allocate a supplier payment across outstanding items.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--supplier", required=True, help="Supplier name exactly as stored on items.")
    parser.add_argument("--amount", required=True, type=Decimal, help="Total amount available.")
    parser.add_argument("--price-per-gram", required=True, type=Decimal, help="Agreed price per gram.")
    parser.add_argument("--commit", action="store_true", help="Record the payment.")
    parser.add_argument("--actor-id", default="cli", help="Actor recorded on the payment.")
    parser.add_argument("--reference", default=None, help="Receipt or transfer reference.")
    parser.add_argument("--db-url", default=DB_URL, help=f"Database URL (default: {DB_URL!r}).")
    return parser.parse_args()


def main() -> int:
    args = _parse_args()

    from jewel_engines.payment_allocation import PaymentEnvelope
    from jewel_kernel.db.engine import init_engine_from_url, session_scope
    from jewel_kernel.domain.clock import SystemClock
    from jewel_kernel.exceptions import JewelKernelError
    from jewel_services.payment_service import SupplierPaymentService

    init_engine_from_url(args.db_url)
    service = SupplierPaymentService(session_scope, clock=SystemClock())

    try:
        envelope = PaymentEnvelope(
            supplier_name=args.supplier,
            total_amount_available=args.amount,
            agreed_price_per_gram=args.price_per_gram,
        )
        balance = service.outstanding(args.supplier)
        print(
            f"Outstanding: {balance.item_count} item(s), {balance.total_weight} g, "
            f"{balance.total_original_cost:,.2f} at recorded prices"
        )

        if args.commit:
            allocation = service.commit(
                envelope, actor_id=args.actor_id, reference=args.reference
            ).allocation
        else:
            allocation = service.preview(envelope)
    except JewelKernelError as e:
        print(f"ERROR [{e.code}]: {e}", file=sys.stderr)
        return 1

    for line in allocation.lines:
        print(
            f"  {line.item_id}  {line.weight} g  "
            f"{line.original_cost:,.2f} -> {line.payment_cost:,.2f}  ({line.price_variance:+,.2f})"
        )
    print(f"Weight:    {allocation.total_weight} g")
    print(f"Paid:      {allocation.total_payment_cost:,.2f}")
    print(f"Variance:  {allocation.price_variance:+,.2f}")
    print(f"Remaining: {allocation.remaining_amount:,.2f}")
    if not args.commit:
        print("\nPreview only; rerun with --commit to record.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
