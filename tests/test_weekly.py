"""Tests for week windows and weekly bucketing."""

from datetime import date, datetime, timezone
from typing import Any

import pytest

from ticket_sales.bookings import classify_all
from ticket_sales.weekly import (
    bucket_week,
    day_index,
    next_week,
    previous_week,
    to_local_timestamp,
    week_bounds,
)


def test_week_bounds_for_thursday() -> None:
    assert week_bounds(date(2024, 6, 13)) == (date(2024, 6, 10), date(2024, 6, 16))


@pytest.mark.parametrize(
    "reference",
    ["2024-06-10", "2024-06-16", date(2024, 6, 12), datetime(2024, 6, 15, 23, 59)],
)
def test_week_bounds_monday_to_sunday(reference: Any) -> None:
    start, end = week_bounds(reference)
    assert start == date(2024, 6, 10)
    assert end == date(2024, 6, 16)
    assert start.weekday() == 0
    assert end.weekday() == 6


def test_week_bounds_across_year_end() -> None:
    assert week_bounds(date(2025, 1, 1)) == (date(2024, 12, 30), date(2025, 1, 5))


def test_week_bounds_rejects_bad_string() -> None:
    with pytest.raises(ValueError):
        week_bounds("13/06/2024")


def test_navigation_moves_seven_days() -> None:
    assert previous_week(date(2024, 6, 13)) == date(2024, 6, 6)
    assert next_week("2024-06-13") == date(2024, 6, 20)
    assert week_bounds(next_week(date(2024, 6, 16)))[0] == date(2024, 6, 17)


def test_day_index_sunday_and_monday() -> None:
    assert day_index("2024-06-16T12:00:00Z") == 6
    assert day_index("2024-06-10T00:00:00Z") == 0
    assert day_index("2024-06-15T23:59:59Z") == 5


def test_day_index_naive_timestamps_are_utc() -> None:
    assert day_index("2024-06-13 10:00:00") == 3
    assert day_index(datetime(2024, 6, 13, 10, 0)) == 3


def test_day_index_uses_report_timezone() -> None:
    # 20:00 UTC Sunday is 05:00 Monday in Tokyo
    assert day_index("2024-06-16T20:00:00Z") == 6
    assert day_index("2024-06-16T20:00:00Z", "Asia/Tokyo") == 0
    assert day_index(datetime(2024, 6, 16, 20, tzinfo=timezone.utc), "Asia/Tokyo") == 0


@pytest.mark.parametrize("value", [None, "", "not a date"])
def test_unparsable_timestamps(value: Any) -> None:
    assert to_local_timestamp(value) is None
    assert day_index(value) is None


def test_numeric_timestamps_are_epoch_seconds() -> None:
    ts = to_local_timestamp(1718272800)
    assert ts is not None
    assert ts.isoformat() == "2024-06-13T10:00:00+00:00"
    assert day_index(1718272800.0) == 3
    assert day_index(1718272800, "Asia/Tokyo") == 3
    assert to_local_timestamp(True) is None


def test_bucket_week(booking_rows: list[dict[str, Any]]) -> None:
    in_week = [b for b in booking_rows if b["id"] != 5]
    bucket = bucket_week(date(2024, 6, 13), classify_all(in_week))

    assert bucket.week_start == date(2024, 6, 10)
    assert bucket.week_end == date(2024, 6, 16)
    assert [d.day_index for d in bucket.days] == list(range(7))
    assert [d.date for d in bucket.days][0] == date(2024, 6, 10)
    assert [d.booking_count for d in bucket.days] == [2, 0, 0, 1, 0, 0, 1]
    # Monday holds one unpaid and one malformed-total booking
    assert [d.sales_total for d in bucket.days] == [0.0, 0.0, 0.0, 37500.0, 0.0, 0.0, 1000.0]
    assert bucket.total_sales == 38500.0
    assert bucket.total_sales == sum(d.sales_total for d in bucket.days)
    assert bucket.booking_count == 4


def test_bucket_week_does_not_filter_by_range(booking_rows: list[dict[str, Any]]) -> None:
    """Range filtering belongs to the record source; the bucketer only maps days."""
    previous = [b for b in booking_rows if b["id"] == 5]
    bucket = bucket_week(date(2024, 6, 13), previous)
    assert bucket.days[0].booking_count == 1
    assert bucket.days[0].sales_total == 500.0


def test_bucket_week_accepts_raw_rows() -> None:
    bucket = bucket_week(
        "2024-06-13",
        [{"status": True, "total": "10.5", "created_at": "2024-06-11T10:00:00Z"}],
    )
    assert bucket.days[1].sales_total == 10.5


def test_bucket_week_skips_unplaceable_bookings() -> None:
    bucket = bucket_week(
        "2024-06-13",
        [
            {"status": True, "total": "10", "created_at": None},
            {"status": True, "total": "10", "created_at": "garbage"},
        ],
    )
    assert bucket.booking_count == 0
    assert bucket.total_sales == 0.0


def test_empty_week() -> None:
    bucket = bucket_week(date(2024, 6, 13), [])
    assert len(bucket.days) == 7
    assert all(d.booking_count == 0 and d.sales_total == 0.0 for d in bucket.days)
    assert bucket.total_sales == 0.0


def test_weekly_bucket_to_dict() -> None:
    bucket = bucket_week(
        "2024-06-13", [{"status": True, "total": 5, "created_at": "2024-06-16T10:00:00Z"}]
    )
    data = bucket.to_dict()
    assert data["week_start"] == "2024-06-10"
    assert data["week_end"] == "2024-06-16"
    assert data["total_sales"] == 5.0
    assert data["days"][6] == {
        "day_index": 6,
        "date": "2024-06-16",
        "sales_total": 5.0,
        "booking_count": 1,
    }
    assert bucket.days[6].day_name == "Sunday"
