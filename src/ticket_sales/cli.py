"""Command-line interface for generating ticket sales reports.

Examples:
  # Report from a JSON snapshot for the week containing 2024-06-13
  ticket-sales-report --snapshot data/snapshot.json --date 2024-06-13

  # Previous week, as JSON, against Supabase (SUPABASE_URL / SUPABASE_ANON_KEY)
  ticket-sales-report --supabase --date 2024-06-13 --prev 1 --json

  # Client login restricts the report to the client's concerts
  ticket-sales-report --snapshot snapshot.json --credentials creds.json \
      --email mazzika@zeko.com --password ...
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from typing import Sequence

from ticket_sales.access import CredentialStore, Identity
from ticket_sales.config import ReportConfig, SourceSettings
from ticket_sales.exceptions import TicketSalesError
from ticket_sales.formatters.console import format_report_for_console
from ticket_sales.report import generate_report
from ticket_sales.sources.base import RecordSource
from ticket_sales.sources.memory import InMemoryRecordSource
from ticket_sales.sources.supabase import SupabaseRecordSource
from ticket_sales.weekly import next_week, previous_week, to_date


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a ticket sales report.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--snapshot", type=str, help="Path to a JSON snapshot of source records.")
    source.add_argument(
        "--supabase",
        action="store_true",
        help="Read records from Supabase (SUPABASE_URL and SUPABASE_ANON_KEY).",
    )
    parser.add_argument(
        "--date",
        type=str,
        default=None,
        help="Reference date YYYY-MM-DD; the report covers its Monday-Sunday week (default: today).",
    )
    nav = parser.add_mutually_exclusive_group()
    nav.add_argument("--prev", type=_non_negative_int, default=0, metavar="N", help="Move N weeks back.")
    nav.add_argument("--next", type=_non_negative_int, default=0, metavar="N", help="Move N weeks forward.")
    parser.add_argument("--timezone", type=str, default="UTC", help="Report timezone (default: UTC).")
    parser.add_argument(
        "--workers", type=int, default=1, help="Threads used to fetch source collections (default: 1)."
    )
    parser.add_argument("--credentials", type=str, help="Path to a JSON credentials file.")
    parser.add_argument("--email", type=str, help="Client email (requires --credentials).")
    parser.add_argument("--password", type=str, help="Client password (requires --credentials).")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")
    return parser


def resolve_reference_date(value: str | None, prev: int = 0, next_: int = 0) -> date:
    """Apply week navigation to the requested (or today's) date."""
    ref = to_date(value) if value else date.today()
    for _ in range(prev):
        ref = previous_week(ref)
    for _ in range(next_):
        ref = next_week(ref)
    return ref


def _login(args: argparse.Namespace) -> Identity | None:
    if not (args.email or args.password or args.credentials):
        return None
    if not (args.email and args.password and args.credentials):
        raise TicketSalesError("--email, --password and --credentials must be given together")
    store = CredentialStore.from_json(args.credentials)
    return store.authenticate(args.email, args.password)


def _source(args: argparse.Namespace) -> RecordSource:
    if args.supabase:
        return SupabaseRecordSource(SourceSettings.from_env())
    return InMemoryRecordSource.from_json(args.snapshot)


def main(argv: Sequence[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Process exit code: 0 on success, 1 on a reporting error, 2 on bad arguments.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        reference_date = resolve_reference_date(args.date, args.prev, args.next)
    except ValueError as e:
        print(f"[ERROR] Invalid --date: {e}", file=sys.stderr)
        return 2

    try:
        config = ReportConfig(timezone=args.timezone, fetch_workers=args.workers)
        identity = _login(args)
        report = generate_report(reference_date, _source(args), identity=identity, config=config)
    except TicketSalesError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(format_report_for_console(report, encoding=sys.stdout.encoding))
    return 0


if __name__ == "__main__":
    sys.exit(main())
