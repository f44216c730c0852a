"""Record sources: where bookings, tickets and concerts come from.

- InMemoryRecordSource: rows held in memory or loaded from a JSON snapshot.
- SupabaseRecordSource: rows read from a Supabase project's REST API.
- fetch_snapshot: fetch every collection a report needs (join barrier).
"""

from ticket_sales.sources.base import BookingFilter, RecordSource
from ticket_sales.sources.fetch import SourceSnapshot, fetch_snapshot
from ticket_sales.sources.memory import InMemoryRecordSource
from ticket_sales.sources.supabase import SupabaseRecordSource

__all__ = [
    "BookingFilter",
    "InMemoryRecordSource",
    "RecordSource",
    "SourceSnapshot",
    "SupabaseRecordSource",
    "fetch_snapshot",
]
