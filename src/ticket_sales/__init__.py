"""Ticket Sales Core - sales aggregation and weekly bucketing for ticketing.

This package turns raw booking, ticket and concert records into a ticket
sales report:

- **Catalog index**: ticket/concert lookups by id, with sentinel names
- **Booking classifier**: paid/unpaid status, parsed totals and quantities
- **Per-ticket aggregation**: sold/available/remaining per concert and ticket
- **Weekly bucketing**: Monday-to-Sunday day slots of sales and bookings

Module Structure:
    ticket_sales.report: generate_report entry point and Report type
    ticket_sales.catalog: CatalogIndex
    ticket_sales.bookings: booking classifier
    ticket_sales.aggregate: per-ticket aggregation
    ticket_sales.weekly: week windows and day buckets
    ticket_sales.sources: record sources (in-memory/JSON, Supabase)
    ticket_sales.access: client credentials and concert scopes

Quick Start:
    >>> from ticket_sales import InMemoryRecordSource, generate_report
    >>>
    >>> source = InMemoryRecordSource.from_json("snapshot.json")
    >>> report = generate_report("2024-06-13", source)
    >>> report.weekly_bucket.week_start
    datetime.date(2024, 6, 10)
    >>> [s.quantity_remaining for s in report.per_ticket_stats]
    [75]
"""

__version__ = "0.1.0"

from ticket_sales.access import CredentialStore, Identity
from ticket_sales.config import ReportConfig, SourceSettings
from ticket_sales.exceptions import (
    AuthenticationError,
    ConfigError,
    SourceUnavailableError,
    TicketSalesError,
)
from ticket_sales.report import Report, generate_report
from ticket_sales.sources import InMemoryRecordSource, SupabaseRecordSource

__all__ = [
    "AuthenticationError",
    "ConfigError",
    "CredentialStore",
    "Identity",
    "InMemoryRecordSource",
    "Report",
    "ReportConfig",
    "SourceSettings",
    "SourceUnavailableError",
    "SupabaseRecordSource",
    "TicketSalesError",
    "__version__",
    "generate_report",
]
