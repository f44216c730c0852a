"""Record source protocol and booking filters.

A record source is anything that can hand over the three record collections
(bookings, tickets, concerts) and the two platform counts. Sources return
plain rows (dicts); normalisation happens in ticket_sales.records.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Mapping, Protocol, Sequence
from zoneinfo import ZoneInfo

from ticket_sales.config import DEFAULT_TIMEZONE
from ticket_sales.records import Booking


@dataclass(frozen=True)
class BookingFilter:
    """Restrictions a record source applies when fetching bookings.

    Attributes:
        date_range: Inclusive (start, end) dates on created_at, taken in
            ``timezone``. None means no date restriction.
        paid_only: Only return bookings whose status is True.
        concert_ids: Canonical concert ids to keep. None means all concerts.
        timezone: IANA timezone the date range is expressed in.
    """

    date_range: tuple[date, date] | None = None
    paid_only: bool = False
    concert_ids: frozenset[str] | None = None
    timezone: str = DEFAULT_TIMEZONE

    def instant_range(self) -> tuple[datetime, datetime] | None:
        """Return the date range as [start, end) timezone-aware datetimes.

        The end bound is midnight after ``date_range[1]``, so the whole last
        day (through 23:59:59.999999) is included.
        """
        if self.date_range is None:
            return None
        tz = ZoneInfo(self.timezone)
        start, end = self.date_range
        return (
            datetime.combine(start, time.min, tzinfo=tz),
            datetime.combine(end + timedelta(days=1), time.min, tzinfo=tz),
        )


class RecordSource(Protocol):
    """Protocol for record sources consumed by generate_report.

    Implementations raise on failure (any exception is reported as
    SourceUnavailableError); an empty list means "no data".

    Example:
        def build(source: RecordSource) -> Report:
            return generate_report(date.today(), source)

    """

    def fetch_bookings(self, booking_filter: BookingFilter | None = None) -> Sequence[Mapping[str, Any] | Booking]:
        ...

    def fetch_tickets(self) -> Sequence[Mapping[str, Any]]:
        ...

    def fetch_concerts(self) -> Sequence[Mapping[str, Any]]:
        ...

    def count_users(self) -> int:
        ...

    def count_concerts(self) -> int:
        ...
