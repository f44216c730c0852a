"""Shared fixtures: a small two-concert catalog and a week of bookings.

Week of 2024-06-10 (Mon) to 2024-06-16 (Sun), plus one booking from the
previous week.
"""

from typing import Any

import pytest

from ticket_sales.sources.memory import InMemoryRecordSource


@pytest.fixture
def concert_rows() -> list[dict[str, Any]]:
    return [
        {"id": 6, "concert_name": "Mazzika"},
        {"id": "13", "concert_name": "Yacht Festival"},
    ]


@pytest.fixture
def ticket_rows() -> list[dict[str, Any]]:
    return [
        {"id": 1, "ticket_name": " VIP ", "price": "1500", "quantity": 100, "concert_id": 6},
        {"id": 2, "ticket_name": "Regular", "price": 500, "quantity": "300", "concert_id": "6"},
        {"id": 3, "ticket_name": "Deck Pass", "price": 800, "quantity": 50, "concert_id": 13},
    ]


@pytest.fixture
def booking_rows() -> list[dict[str, Any]]:
    return [
        # Thursday, paid
        {
            "id": 1,
            "status": True,
            "concertid": 6,
            "total": "37500",
            "created_at": "2024-06-13T10:00:00Z",
            "tickets": [{"ticket_id": 1, "quantity": "25"}],
        },
        # Sunday evening, paid
        {
            "id": 2,
            "status": True,
            "concertid": "6",
            "total": 1000,
            "created_at": "2024-06-16T20:00:00+00:00",
            "tickets": [{"ticket_id": "2", "quantity": 2}],
        },
        # Monday, unpaid
        {
            "id": 3,
            "status": False,
            "concertid": 13,
            "total": "800",
            "created_at": "2024-06-10T08:30:00Z",
            "tickets": [{"ticket_id": 3, "quantity": 1}],
        },
        # Monday, paid with a malformed total
        {
            "id": 4,
            "status": True,
            "concertid": 13,
            "total": "abc",
            "created_at": "2024-06-10T09:00:00Z",
            "tickets": [{"ticket_id": 3, "quantity": "4"}],
        },
        # Previous week, paid
        {
            "id": 5,
            "status": True,
            "concertid": 6,
            "total": "500",
            "created_at": "2024-06-03T12:00:00Z",
            "tickets": [{"ticket_id": 2, "quantity": "1"}],
        },
    ]


@pytest.fixture
def source(
    booking_rows: list[dict[str, Any]],
    ticket_rows: list[dict[str, Any]],
    concert_rows: list[dict[str, Any]],
) -> InMemoryRecordSource:
    return InMemoryRecordSource(
        bookings=booking_rows, tickets=ticket_rows, concerts=concert_rows, users=42
    )
