"""Booking classifier: payment status, totals and line-item quantities.

Every booking is classified as paid (status flag exactly ``True``) or unpaid,
its total is parsed into a float and its line-item quantities into
non-negative integers. Malformed values degrade to zero; nothing here raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from ticket_sales.parsing import parse_quantity, parse_total
from ticket_sales.records import Booking

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassifiedLineItem:
    ticket_id: str | None
    quantity: int


@dataclass(frozen=True)
class ClassifiedBooking:
    """A booking with its status and numeric fields resolved.

    Attributes:
        booking: Source booking.
        paid: True only when the source status flag is the boolean True.
        total: Parsed total; 0.0 when the source value was not a finite number.
        total_valid: False when the total had to be replaced by 0.0.
        line_items: Line items with parsed quantities.
    """

    booking: Booking
    paid: bool
    total: float
    total_valid: bool
    line_items: tuple[ClassifiedLineItem, ...]

    @property
    def concert_id(self) -> str | None:
        return self.booking.concert_id

    @property
    def created_at(self) -> Any:
        return self.booking.created_at

    @property
    def quantity(self) -> int:
        """Total number of tickets across all line items."""
        return sum(item.quantity for item in self.line_items)


def classify(booking: Any) -> ClassifiedBooking:
    """Classify one booking (a Booking or a raw booking row).

    Args:
        booking: Booking instance or dict row from the record source.

    Returns:
        ClassifiedBooking. Never raises on malformed values.

    """
    if not isinstance(booking, Booking):
        booking = Booking.from_record(booking)

    total = parse_total(booking.total)
    if total is None:
        logger.debug("Booking %s has unparsable total %r; counting it as 0", booking.id, booking.total)

    items = tuple(
        ClassifiedLineItem(ticket_id=item.ticket_id, quantity=parse_quantity(item.quantity))
        for item in booking.line_items
    )

    return ClassifiedBooking(
        booking=booking,
        paid=booking.status is True,
        total=total if total is not None else 0.0,
        total_valid=total is not None,
        line_items=items,
    )


def classify_all(bookings: Iterable[Any]) -> list[ClassifiedBooking]:
    return [classify(b) for b in bookings]


def paid_only(classified: Iterable[ClassifiedBooking]) -> list[ClassifiedBooking]:
    return [b for b in classified if b.paid]


@dataclass(frozen=True)
class BookingTotals:
    """Counts and revenue over a set of classified bookings.

    Attributes:
        bookings_total: Number of bookings, paid or not, malformed or not.
        paid_count: Number of paid bookings.
        unpaid_count: Number of unpaid bookings.
        revenue: Sum of valid totals over paid bookings.
        tickets_sold: Sum of line-item quantities over paid bookings.
    """

    bookings_total: int = 0
    paid_count: int = 0
    unpaid_count: int = 0
    revenue: float = 0.0
    tickets_sold: int = 0


def summarize(classified: Iterable[ClassifiedBooking]) -> BookingTotals:
    """Compute booking counts, revenue and tickets sold."""
    bookings_total = paid_count = tickets_sold = 0
    revenue = 0.0
    for booking in classified:
        bookings_total += 1
        if not booking.paid:
            continue
        paid_count += 1
        revenue += booking.total
        tickets_sold += booking.quantity

    return BookingTotals(
        bookings_total=bookings_total,
        paid_count=paid_count,
        unpaid_count=bookings_total - paid_count,
        revenue=revenue,
        tickets_sold=tickets_sold,
    )
