"""Weekly bucketing of bookings into Monday-to-Sunday day slots.

A week runs Monday 00:00 through Sunday 23:59:59 in the report timezone.
Each booking lands in the slot of its creation day (Monday=0 ... Sunday=6):

- booking_count counts every booking, paid or unpaid.
- sales_total sums the totals of paid bookings whose total is a finite number.

The bucketer does not check that bookings fall inside the week; the record
source is asked for the week's date range and does that filtering.
"""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable

import pandas as pd

from ticket_sales.bookings import ClassifiedBooking, classify
from ticket_sales.config import DEFAULT_TIMEZONE

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def to_date(value: date | datetime | str) -> date:
    """Coerce a date, datetime or YYYY-MM-DD string to a date.

    Raises:
        ValueError: If a string is not in YYYY-MM-DD format.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value, "%Y-%m-%d").date()


def week_bounds(reference_date: date | datetime | str) -> tuple[date, date]:
    """Return the (Monday, Sunday) dates of the week containing reference_date.

    Examples:
        >>> week_bounds(date(2024, 6, 13))
        (datetime.date(2024, 6, 10), datetime.date(2024, 6, 16))
        >>> week_bounds("2024-06-16")
        (datetime.date(2024, 6, 10), datetime.date(2024, 6, 16))

    """
    d = to_date(reference_date)
    monday = d - timedelta(days=d.weekday())
    return monday, monday + timedelta(days=DAYS_PER_WEEK - 1)


def previous_week(reference_date: date | datetime | str) -> date:
    return to_date(reference_date) - timedelta(days=DAYS_PER_WEEK)


def next_week(reference_date: date | datetime | str) -> date:
    return to_date(reference_date) + timedelta(days=DAYS_PER_WEEK)


def to_local_timestamp(value: Any, timezone: str = DEFAULT_TIMEZONE) -> pd.Timestamp | None:
    """Parse a booking timestamp and convert it to the report timezone.

    Naive timestamps are taken as UTC. Numbers are Unix epoch seconds.

    Returns:
        Timezone-aware Timestamp, or None if the value cannot be parsed.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, numbers.Real):
            ts = pd.Timestamp(value, unit="s")
        else:
            ts = pd.Timestamp(value)
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return ts.tz_convert(timezone)


def day_index(value: Any, timezone: str = DEFAULT_TIMEZONE) -> int | None:
    """Monday-anchored day index (Monday=0 ... Sunday=6) of a timestamp.

    Examples:
        >>> day_index("2024-06-16T12:00:00Z")  # Sunday
        6
        >>> day_index("2024-06-10T00:00:00Z")  # Monday
        0

    """
    ts = to_local_timestamp(value, timezone)
    return None if ts is None else int(ts.dayofweek)


@dataclass(frozen=True)
class DayBucket:
    day_index: int
    date: date
    sales_total: float
    booking_count: int

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_index]

    def to_dict(self) -> dict[str, Any]:
        return {
            "day_index": self.day_index,
            "date": self.date.isoformat(),
            "sales_total": self.sales_total,
            "booking_count": self.booking_count,
        }


@dataclass(frozen=True)
class WeeklyBucket:
    """Seven day slots of one Monday-to-Sunday week.

    Attributes:
        week_start: Monday of the week.
        week_end: Sunday of the week.
        days: Seven DayBucket slots, Monday first.
        total_sales: Sum of the seven sales_total values.
    """

    week_start: date
    week_end: date
    days: tuple[DayBucket, ...]
    total_sales: float

    @property
    def booking_count(self) -> int:
        return sum(day.booking_count for day in self.days)

    def to_dict(self) -> dict[str, Any]:
        return {
            "week_start": self.week_start.isoformat(),
            "week_end": self.week_end.isoformat(),
            "total_sales": self.total_sales,
            "days": [day.to_dict() for day in self.days],
        }


def bucket_week(
    reference_date: date | datetime | str,
    bookings: Iterable[Any],
    timezone: str = DEFAULT_TIMEZONE,
) -> WeeklyBucket:
    """Bucket bookings into the seven days of the week containing reference_date.

    Args:
        reference_date: Any date inside the wanted week.
        bookings: ClassifiedBooking objects, Booking objects or raw rows
            (already restricted to the week by the record source).
        timezone: IANA timezone used to take the calendar day of created_at.

    Returns:
        WeeklyBucket for the week. Bookings whose created_at cannot be parsed
        are skipped with a warning.

    """
    week_start, week_end = week_bounds(reference_date)

    rows = []
    skipped = 0
    for booking in bookings:
        if not isinstance(booking, ClassifiedBooking):
            booking = classify(booking)
        idx = day_index(booking.created_at, timezone)
        if idx is None:
            skipped += 1
            continue
        rows.append(
            {
                "day_index": idx,
                "sales_total": booking.total if booking.paid and booking.total_valid else 0.0,
                "booking_count": 1,
            }
        )

    if skipped:
        logger.warning("Skipped %d booking(s) with unparsable created_at", skipped)

    slots = pd.DataFrame(rows, columns=["day_index", "sales_total", "booking_count"]).astype(
        {"day_index": "int64", "sales_total": "float64", "booking_count": "int64"}
    )
    per_day = (
        slots.groupby("day_index")[["sales_total", "booking_count"]]
        .sum()
        .reindex(range(DAYS_PER_WEEK), fill_value=0)
    )

    days = tuple(
        DayBucket(
            day_index=i,
            date=week_start + timedelta(days=i),
            sales_total=float(per_day.at[i, "sales_total"]),
            booking_count=int(per_day.at[i, "booking_count"]),
        )
        for i in range(DAYS_PER_WEEK)
    )

    logger.debug(
        "Bucketed %d booking(s) into week %s to %s", len(rows), week_start, week_end
    )

    return WeeklyBucket(
        week_start=week_start,
        week_end=week_end,
        days=days,
        total_sales=sum(day.sales_total for day in days),
    )
