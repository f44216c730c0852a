"""In-memory record source, optionally loaded from a JSON snapshot file.

Snapshot format::

    {
        "bookings": [{"id": 1, "status": true, "concertid": 6, "total": "500",
                      "created_at": "2024-06-13T10:00:00Z",
                      "tickets": [{"ticket_id": 1, "quantity": "2"}]}],
        "tickets": [{"id": 1, "ticket_name": "VIP", "price": 250, "quantity": 100,
                     "concert_id": 6}],
        "concerts": [{"id": 6, "concert_name": "Mazzika"}],
        "users": 42
    }

``users`` may be a count or a list of user rows.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Mapping, Sequence

from ticket_sales.exceptions import ConfigError
from ticket_sales.records import Booking
from ticket_sales.sources.base import BookingFilter
from ticket_sales.weekly import to_local_timestamp

logger = logging.getLogger(__name__)


def booking_matches(booking: Booking, booking_filter: BookingFilter) -> bool:
    """Return True if a booking passes every restriction of booking_filter."""
    if booking_filter.paid_only and booking.status is not True:
        return False
    if booking_filter.concert_ids is not None and booking.concert_id not in booking_filter.concert_ids:
        return False

    bounds = booking_filter.instant_range()
    if bounds is None:
        return True
    ts = to_local_timestamp(booking.created_at, booking_filter.timezone)
    if ts is None:
        return False
    start, end = bounds
    return start <= ts.to_pydatetime() < end


class InMemoryRecordSource:
    """Record source over rows held in memory.

    Rows are returned as deep copies so callers cannot alter the source.

    Example:
        >>> source = InMemoryRecordSource(bookings=[...], tickets=[...], concerts=[...])
        >>> report = generate_report("2024-06-13", source)

    """

    def __init__(
        self,
        bookings: Sequence[Mapping[str, Any]] = (),
        tickets: Sequence[Mapping[str, Any]] = (),
        concerts: Sequence[Mapping[str, Any]] = (),
        users: int | Sequence[Any] = 0,
    ) -> None:
        self._bookings = [dict(b) for b in bookings]
        self._tickets = [dict(t) for t in tickets]
        self._concerts = [dict(c) for c in concerts]
        self._user_count = users if isinstance(users, int) else len(users)

    @classmethod
    def from_json(cls, path: str | Path) -> InMemoryRecordSource:
        """Load a source from a JSON snapshot file.

        Raises:
            ConfigError: If the file cannot be read, parsed, or has the wrong shape.
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigError(f"Cannot load snapshot from {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Snapshot {path} must contain a JSON object")
        for key in ("bookings", "tickets", "concerts"):
            if not isinstance(data.get(key, []), list):
                raise ConfigError(f"Snapshot key '{key}' must be a list")

        users = data.get("users", 0)
        if not isinstance(users, (int, list)) or isinstance(users, bool):
            raise ConfigError("Snapshot key 'users' must be a count or a list")

        source = cls(
            bookings=data.get("bookings", []),
            tickets=data.get("tickets", []),
            concerts=data.get("concerts", []),
            users=users,
        )
        logger.info(
            "Loaded snapshot %s: %d bookings, %d tickets, %d concerts",
            path,
            len(source._bookings),
            len(source._tickets),
            len(source._concerts),
        )
        return source

    def fetch_bookings(self, booking_filter: BookingFilter | None = None) -> list[dict[str, Any]]:
        rows = self._bookings
        if booking_filter is not None:
            rows = [r for r in rows if booking_matches(Booking.from_record(r), booking_filter)]
        return copy.deepcopy(rows)

    def fetch_tickets(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self._tickets)

    def fetch_concerts(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self._concerts)

    def count_users(self) -> int:
        return self._user_count

    def count_concerts(self) -> int:
        return len(self._concerts)
