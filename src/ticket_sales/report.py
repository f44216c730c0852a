"""Report assembly and the generate_report entry point.

generate_report runs the whole engine for one request:

1. fetch_snapshot: every source collection (join barrier)
2. build_catalog_index: ticket/concert lookups
3. classify_all + summarize: booking counts and revenue
4. aggregate_ticket_stats: per (concert, ticket) sold/available/remaining
5. bucket_week: seven day slots of the reference week
6. assemble_report: one immutable Report

Nothing is cached between calls: identical source data gives equal reports.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from ticket_sales.access import Identity
from ticket_sales.aggregate import AggregatedTicketStat, aggregate_ticket_stats
from ticket_sales.bookings import BookingTotals, classify_all, paid_only, summarize
from ticket_sales.catalog import build_catalog_index
from ticket_sales.config import ReportConfig
from ticket_sales.sources.base import RecordSource
from ticket_sales.sources.fetch import fetch_snapshot
from ticket_sales.weekly import WeeklyBucket, bucket_week, to_date, week_bounds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Report:
    """Immutable snapshot of ticket-sales performance.

    Attributes:
        reference_date: Date the weekly window was computed from.
        total_users: Platform user count from the record source.
        total_concerts: Platform concert count from the record source.
        bookings_total: Number of bookings in scope, paid or unpaid.
        tickets_paid_count: Number of paid bookings.
        bookings_unpaid_count: Number of unpaid bookings.
        revenue: Sum of parsable totals over paid bookings.
        tickets_sold: Sum of line-item quantities over paid bookings.
        per_ticket_stats: Per (concert, ticket) stats, grouped by concert.
        weekly_bucket: Seven day slots of the reference week.
        scope: Sorted concert ids the report is restricted to, or None.
    """

    reference_date: date
    total_users: int
    total_concerts: int
    bookings_total: int
    tickets_paid_count: int
    bookings_unpaid_count: int
    revenue: float
    tickets_sold: int
    per_ticket_stats: tuple[AggregatedTicketStat, ...]
    weekly_bucket: WeeklyBucket
    scope: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Plain nested dict (JSON-serialisable) representation."""
        return {
            "reference_date": self.reference_date.isoformat(),
            "total_users": self.total_users,
            "total_concerts": self.total_concerts,
            "bookings_total": self.bookings_total,
            "tickets_paid_count": self.tickets_paid_count,
            "bookings_unpaid_count": self.bookings_unpaid_count,
            "revenue": self.revenue,
            "tickets_sold": self.tickets_sold,
            "per_ticket_stats": [stat.to_dict() for stat in self.per_ticket_stats],
            "weekly_bucket": self.weekly_bucket.to_dict(),
            "scope": list(self.scope) if self.scope is not None else None,
        }


def assemble_report(
    reference_date: date,
    totals: BookingTotals,
    per_ticket_stats: tuple[AggregatedTicketStat, ...],
    weekly_bucket: WeeklyBucket,
    *,
    total_users: int,
    total_concerts: int,
    identity: Identity | None = None,
) -> Report:
    """Combine engine outputs into a Report. Field copying only."""
    scope = None
    if identity is not None and not identity.unrestricted:
        scope = tuple(sorted(identity.concert_ids))

    return Report(
        reference_date=reference_date,
        total_users=total_users,
        total_concerts=total_concerts,
        bookings_total=totals.bookings_total,
        tickets_paid_count=totals.paid_count,
        bookings_unpaid_count=totals.unpaid_count,
        revenue=totals.revenue,
        tickets_sold=totals.tickets_sold,
        per_ticket_stats=tuple(per_ticket_stats),
        weekly_bucket=weekly_bucket,
        scope=scope,
    )


def generate_report(
    reference_date: date | datetime | str,
    source: RecordSource,
    *,
    identity: Identity | None = None,
    config: ReportConfig | None = None,
) -> Report:
    """Compute a fresh report from the record source.

    Args:
        reference_date: Any date in the week to bucket (date, datetime or
            YYYY-MM-DD string).
        source: Record source providing bookings, tickets, concerts and counts.
        identity: Optional authenticated identity; its concert scope restricts
            bookings, tickets and concerts.
        config: Report configuration. Defaults to ReportConfig().

    Returns:
        Report for the request.

    Raises:
        SourceUnavailableError: If the record source fails to return any
            collection. A report is never built from partial data.
        ValueError: If reference_date is a string not in YYYY-MM-DD format.

    Examples:
        >>> source = InMemoryRecordSource.from_json("snapshot.json")
        >>> report = generate_report("2024-06-13", source)
        >>> report.weekly_bucket.week_start
        datetime.date(2024, 6, 10)

    """
    config = config or ReportConfig()
    ref = to_date(reference_date)
    week = week_bounds(ref)

    snapshot = fetch_snapshot(source, week, identity=identity, config=config)

    catalog = build_catalog_index(snapshot.tickets, snapshot.concerts)
    classified = classify_all(snapshot.bookings)
    totals = summarize(classified)
    stats = aggregate_ticket_stats(catalog, paid_only(classified))
    weekly = bucket_week(ref, classify_all(snapshot.week_bookings), timezone=config.timezone)

    report = assemble_report(
        ref,
        totals,
        stats,
        weekly,
        total_users=snapshot.user_count,
        total_concerts=snapshot.concert_count,
        identity=identity,
    )
    logger.info(
        "Generated report for week %s to %s: %d bookings, revenue %.2f",
        weekly.week_start,
        weekly.week_end,
        report.bookings_total,
        report.revenue,
    )
    return report
