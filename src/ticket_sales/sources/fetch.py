"""Fetch every collection a report needs before any computation starts.

fetch_snapshot is the join barrier between the record source and the
engine: it issues all source calls (sequentially, or on a thread pool when
``ReportConfig.fetch_workers > 1``), waits for every one of them, and only
then returns a complete SourceSnapshot. A failing call aborts the snapshot
with SourceUnavailableError.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Mapping

from ticket_sales.access import Identity
from ticket_sales.config import ReportConfig
from ticket_sales.exceptions import SourceUnavailableError, TicketSalesError
from ticket_sales.parsing import canonical_id
from ticket_sales.records import concert_id_of
from ticket_sales.sources.base import BookingFilter, RecordSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceSnapshot:
    """All source collections for one report request.

    Attributes:
        bookings: Every booking in scope.
        week_bookings: Bookings in scope created during the report week.
        tickets: Ticket catalog rows in scope.
        concerts: Concert catalog rows in scope.
        user_count: Platform user count.
        concert_count: Platform concert count.
    """

    bookings: list[Any]
    week_bookings: list[Any]
    tickets: list[Any]
    concerts: list[Any]
    user_count: int
    concert_count: int


def _call(name: str, fn: Callable[[], Any]) -> Any:
    try:
        result = fn()
    except TicketSalesError:
        raise
    except Exception as e:
        raise SourceUnavailableError(f"Record source failed to return {name}: {e}", collection=name) from e
    if result is None:
        raise SourceUnavailableError(f"Record source returned no {name}", collection=name)
    return result


def _in_scope(
    rows: list[Any], identity: Identity | None, key: Callable[[Any], str | None] = concert_id_of
) -> list[Any]:
    if identity is None or identity.unrestricted:
        return list(rows)
    return [r for r in rows if key(r) in identity.concert_ids]


def _concert_row_id(row: Any) -> str | None:
    if isinstance(row, Mapping):
        return canonical_id(row.get("id"))
    return concert_id_of(row)


def fetch_snapshot(
    source: RecordSource,
    week: tuple[date, date],
    *,
    identity: Identity | None = None,
    config: ReportConfig | None = None,
) -> SourceSnapshot:
    """Fetch all collections needed for a report.

    Args:
        source: Record source to read from.
        week: Inclusive (Monday, Sunday) dates of the report week.
        identity: Optional identity; its concert scope is applied to bookings,
            tickets and concerts.
        config: Report configuration (timezone, fetch workers).

    Returns:
        Complete SourceSnapshot.

    Raises:
        SourceUnavailableError: If any source call fails or returns None.

    """
    config = config or ReportConfig()
    scope = None if identity is None or identity.unrestricted else identity.concert_ids

    all_filter = BookingFilter(concert_ids=scope, timezone=config.timezone)
    week_filter = BookingFilter(date_range=week, concert_ids=scope, timezone=config.timezone)

    calls: dict[str, Callable[[], Any]] = {
        "bookings": lambda: source.fetch_bookings(all_filter),
        "week_bookings": lambda: source.fetch_bookings(week_filter),
        "tickets": source.fetch_tickets,
        "concerts": source.fetch_concerts,
        "user_count": source.count_users,
        "concert_count": source.count_concerts,
    }

    if config.fetch_workers > 1:
        with ThreadPoolExecutor(max_workers=config.fetch_workers) as pool:
            futures = {name: pool.submit(_call, name, fn) for name, fn in calls.items()}
            # result() re-raises the first failure in call order
            results = {name: future.result() for name, future in futures.items()}
    else:
        results = {name: _call(name, fn) for name, fn in calls.items()}

    snapshot = SourceSnapshot(
        bookings=_in_scope(list(results["bookings"]), identity),
        week_bookings=_in_scope(list(results["week_bookings"]), identity),
        tickets=_in_scope(list(results["tickets"]), identity),
        concerts=_in_scope(list(results["concerts"]), identity, _concert_row_id),
        user_count=int(results["user_count"]),
        concert_count=int(results["concert_count"]),
    )
    logger.info(
        "Fetched snapshot: %d bookings (%d this week), %d tickets, %d concerts",
        len(snapshot.bookings),
        len(snapshot.week_bookings),
        len(snapshot.tickets),
        len(snapshot.concerts),
    )
    return snapshot
