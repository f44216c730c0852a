"""End-to-end tests for generate_report."""

import json
from datetime import date
from typing import Any
from unittest.mock import Mock

import pytest

from ticket_sales import generate_report
from ticket_sales.access import Identity
from ticket_sales.aggregate import AggregatedTicketStat
from ticket_sales.bookings import BookingTotals
from ticket_sales.config import ReportConfig
from ticket_sales.exceptions import SourceUnavailableError
from ticket_sales.formatters.console import format_report_for_console, sanitize_for_console
from ticket_sales.report import assemble_report
from ticket_sales.sources.memory import InMemoryRecordSource
from ticket_sales.weekly import bucket_week, next_week, previous_week


def test_generate_report(source: InMemoryRecordSource) -> None:
    report = generate_report("2024-06-13", source)

    assert report.reference_date == date(2024, 6, 13)
    assert report.total_users == 42
    assert report.total_concerts == 2
    assert report.bookings_total == 5
    assert report.tickets_paid_count == 4
    assert report.bookings_unpaid_count == 1
    assert report.revenue == 39000.0
    assert report.tickets_sold == 32
    assert report.scope is None

    assert [(s.ticket_name, s.quantity_sold, s.quantity_available, s.quantity_remaining) for s in report.per_ticket_stats] == [
        ("VIP", 25, 100, 75),
        ("Regular", 3, 300, 297),
        ("Deck Pass", 4, 50, 46),
    ]

    weekly = report.weekly_bucket
    assert (weekly.week_start, weekly.week_end) == (date(2024, 6, 10), date(2024, 6, 16))
    assert [d.booking_count for d in weekly.days] == [2, 0, 0, 1, 0, 0, 1]
    assert weekly.total_sales == 38500.0


def test_malformed_total_still_counted(source: InMemoryRecordSource) -> None:
    """Booking 4 is paid with total "abc": counted, but adds nothing to revenue."""
    report = generate_report("2024-06-13", source)
    assert report.tickets_paid_count == 4
    assert report.revenue == 37500.0 + 1000.0 + 500.0
    assert report.weekly_bucket.days[0].booking_count == 2
    assert report.weekly_bucket.days[0].sales_total == 0.0


def test_generate_report_is_idempotent(source: InMemoryRecordSource) -> None:
    first = generate_report(date(2024, 6, 13), source)
    second = generate_report(date(2024, 6, 13), source)
    assert first == second
    assert first.to_dict() == second.to_dict()


def test_week_navigation_recomputes_window(source: InMemoryRecordSource) -> None:
    current = date(2024, 6, 13)
    previous = generate_report(previous_week(current), source)

    assert previous.weekly_bucket.week_start == date(2024, 6, 3)
    assert [d.booking_count for d in previous.weekly_bucket.days] == [1, 0, 0, 0, 0, 0, 0]
    assert previous.weekly_bucket.total_sales == 500.0
    # Totals do not depend on the week
    assert previous.bookings_total == 5

    following = generate_report(next_week(current), source)
    assert following.weekly_bucket.week_start == date(2024, 6, 17)
    assert following.weekly_bucket.total_sales == 0.0


def test_scoped_report(source: InMemoryRecordSource) -> None:
    identity = Identity(email="mazzika@zeko.com", concert_ids=frozenset({"6"}))
    report = generate_report("2024-06-13", source, identity=identity)

    assert report.scope == ("6",)
    assert report.bookings_total == 3
    assert report.tickets_paid_count == 3
    assert report.revenue == 39000.0
    assert report.tickets_sold == 28
    assert {s.concert_name for s in report.per_ticket_stats} == {"Mazzika"}
    assert report.weekly_bucket.total_sales == 38500.0
    assert report.weekly_bucket.booking_count == 2


def test_empty_source() -> None:
    report = generate_report("2024-06-13", InMemoryRecordSource())

    assert report.bookings_total == 0
    assert report.revenue == 0.0
    assert report.per_ticket_stats == ()
    assert report.weekly_bucket.total_sales == 0.0
    assert len(report.weekly_bucket.days) == 7


def test_source_failure_propagates(source: InMemoryRecordSource) -> None:
    source.fetch_bookings = Mock(side_effect=OSError("disk gone"))  # type: ignore[method-assign]
    with pytest.raises(SourceUnavailableError, match="disk gone"):
        generate_report("2024-06-13", source)


def test_concurrent_fetch_gives_same_report(source: InMemoryRecordSource) -> None:
    sequential = generate_report("2024-06-13", source)
    concurrent = generate_report("2024-06-13", source, config=ReportConfig(fetch_workers=6))
    assert sequential == concurrent


def test_timezone_moves_bookings_between_days(source: InMemoryRecordSource) -> None:
    # Booking 2 (Sunday 20:00 UTC) is Monday 05:00 in Tokyo, outside the Tokyo week
    report = generate_report("2024-06-13", source, config=ReportConfig(timezone="Asia/Tokyo"))
    assert report.weekly_bucket.days[6].booking_count == 0
    assert report.weekly_bucket.total_sales == 37500.0


def test_report_is_immutable(source: InMemoryRecordSource) -> None:
    report = generate_report("2024-06-13", source)
    with pytest.raises(AttributeError):
        report.revenue = 0.0  # type: ignore[misc]
    assert isinstance(report.per_ticket_stats, tuple)


def test_to_dict_is_json_serialisable(source: InMemoryRecordSource) -> None:
    data = json.loads(json.dumps(generate_report("2024-06-13", source).to_dict()))

    assert data["reference_date"] == "2024-06-13"
    assert data["bookings_total"] == 5
    assert data["per_ticket_stats"][0] == {
        "concert_name": "Mazzika",
        "ticket_name": "VIP",
        "quantity_sold": 25,
        "quantity_available": 100,
        "quantity_remaining": 75,
        "price": 1500.0,
    }
    assert data["weekly_bucket"]["week_end"] == "2024-06-16"
    assert data["scope"] is None


def test_assemble_report_copies_fields() -> None:
    totals = BookingTotals(bookings_total=3, paid_count=2, unpaid_count=1, revenue=50.0, tickets_sold=4)
    stats = (AggregatedTicketStat("Mazzika", "VIP", 4, 10, 6),)
    weekly = bucket_week("2024-06-13", [])

    report = assemble_report(
        date(2024, 6, 13),
        totals,
        stats,
        weekly,
        total_users=9,
        total_concerts=2,
        identity=Identity(email="x@zeko.com", concert_ids=frozenset({"13", "6"})),
    )

    assert report.bookings_total == 3
    assert report.tickets_paid_count == 2
    assert report.bookings_unpaid_count == 1
    assert report.per_ticket_stats == stats
    assert report.weekly_bucket is weekly
    assert report.scope == ("13", "6")


def test_console_format(source: InMemoryRecordSource) -> None:
    text = format_report_for_console(generate_report("2024-06-13", source))
    assert "week 2024-06-10 to 2024-06-16" in text
    assert "Mazzika" in text
    assert "Deck Pass" in text
    assert "39,000.00" in text
    assert "Sunday" in text


def test_console_format_empty() -> None:
    text = format_report_for_console(generate_report("2024-06-13", InMemoryRecordSource()))
    assert "No ticket data available." in text



def test_mixed_id_types_join(source: InMemoryRecordSource) -> None:
    """Bookings reference concert "6" and ticket "2" as strings; catalog uses ints."""
    report = generate_report("2024-06-13", source)
    regular = [s for s in report.per_ticket_stats if s.ticket_name == "Regular"][0]
    assert regular.quantity_sold == 3


def test_console_format_keeps_non_latin_names() -> None:
    source = InMemoryRecordSource(
        tickets=[{"id": 1, "ticket_name": "كبار الزوار", "quantity": 10, "concert_id": 6}],
        concerts=[{"id": 6, "concert_name": "مزيكا 🎵"}],
    )
    text = format_report_for_console(generate_report("2024-06-13", source))

    assert "مزيكا" in text
    assert "كبار الزوار" in text
    assert "🎵" not in text


def test_sanitize_for_narrow_console() -> None:
    assert sanitize_for_console("Mazzika 🎉 مزيكا", encoding="cp1252") == "Mazzika  ?????"
    assert sanitize_for_console("Café", encoding="cp1252") == "Café"
