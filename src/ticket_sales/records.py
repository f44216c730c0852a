"""Source record types and normalisation.

Record sources hand over plain dicts (rows from the bookings, tickets and
concerts tables). This module turns them into small frozen dataclasses,
accepting the column spellings seen upstream (``concertid``, ``concert_id``,
``concertId`` ...). Ids are canonicalised here; amounts and quantities stay raw
until the booking classifier parses them.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping

from ticket_sales.parsing import canonical_id, clean_name, parse_quantity, parse_total

logger = logging.getLogger(__name__)

UNKNOWN_TICKET = "Unknown Ticket"
UNKNOWN_CONCERT = "Unknown Concert"

_BOOKING_CONCERT_KEYS = ("concertid", "concert_id", "concertId")
_CREATED_AT_KEYS = ("created_at", "createdAt")
_LINE_ITEMS_KEYS = ("tickets", "line_items", "lineItems")
_TICKET_ID_KEYS = ("ticket_id", "ticketId")
_TICKET_NAME_KEYS = ("ticket_name", "ticketName", "name")
_AVAILABLE_KEYS = ("quantity", "available_quantity", "availableQuantity")
_CONCERT_NAME_KEYS = ("concert_name", "concertName", "name", "title")


def _first(record: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return None


@dataclass(frozen=True)
class LineItem:
    """One (ticket, quantity) pair within a booking; quantity is still raw."""

    ticket_id: str | None
    quantity: Any = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> LineItem:
        return cls(
            ticket_id=canonical_id(_first(record, _TICKET_ID_KEYS)),
            quantity=record.get("quantity"),
        )


def _line_items(raw: Any) -> tuple[LineItem, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.debug("Ignoring unparsable line items payload: %r", raw[:80])
            return ()
    if not isinstance(raw, list):
        return ()
    return tuple(LineItem.from_record(item) for item in raw if isinstance(item, Mapping))


@dataclass(frozen=True)
class Booking:
    """A purchase transaction for zero or more tickets against one concert.

    Attributes:
        id: Canonical booking id (may be None for anonymous rows).
        status: Raw payment flag; only ``True`` means paid.
        concert_id: Canonical concert id.
        created_at: Raw creation timestamp (ISO string or datetime).
        total: Raw total (number or string).
        line_items: Ordered line items.
    """

    id: str | None
    status: Any
    concert_id: str | None
    created_at: Any
    total: Any
    line_items: tuple[LineItem, ...] = ()

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Booking:
        return cls(
            id=canonical_id(record.get("id")),
            status=record.get("status"),
            concert_id=canonical_id(_first(record, _BOOKING_CONCERT_KEYS)),
            created_at=_first(record, _CREATED_AT_KEYS),
            total=record.get("total"),
            line_items=_line_items(_first(record, _LINE_ITEMS_KEYS)),
        )


@dataclass(frozen=True)
class TicketCatalogEntry:
    """A ticket type on sale for one concert.

    ``available_quantity`` is the catalog's inventory figure (the ``quantity``
    column upstream).
    """

    id: str | None
    ticket_name: str
    price: float | None
    available_quantity: int
    concert_id: str | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> TicketCatalogEntry:
        return cls(
            id=canonical_id(record.get("id")),
            ticket_name=clean_name(_first(record, _TICKET_NAME_KEYS)) or UNKNOWN_TICKET,
            price=parse_total(record.get("price")),
            available_quantity=parse_quantity(_first(record, _AVAILABLE_KEYS)),
            concert_id=canonical_id(_first(record, _BOOKING_CONCERT_KEYS)),
        )


@dataclass(frozen=True)
class ConcertCatalogEntry:
    """A concert (event) that tickets are sold for."""

    id: str | None
    concert_name: str

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> ConcertCatalogEntry:
        return cls(
            id=canonical_id(record.get("id")),
            concert_name=clean_name(_first(record, _CONCERT_NAME_KEYS)) or UNKNOWN_CONCERT,
        )


UNKNOWN_TICKET_ENTRY = TicketCatalogEntry(
    id=None, ticket_name=UNKNOWN_TICKET, price=None, available_quantity=0
)
UNKNOWN_CONCERT_ENTRY = ConcertCatalogEntry(id=None, concert_name=UNKNOWN_CONCERT)


def as_bookings(records: list[Any]) -> list[Booking]:
    """Normalise booking rows, passing through already-built Booking objects."""
    return [r if isinstance(r, Booking) else Booking.from_record(r) for r in records]


def as_tickets(records: list[Any]) -> list[TicketCatalogEntry]:
    return [
        r if isinstance(r, TicketCatalogEntry) else TicketCatalogEntry.from_record(r)
        for r in records
    ]


def as_concerts(records: list[Any]) -> list[ConcertCatalogEntry]:
    return [
        r if isinstance(r, ConcertCatalogEntry) else ConcertCatalogEntry.from_record(r)
        for r in records
    ]


def concert_id_of(record: Any) -> str | None:
    """Canonical concert id a booking or ticket row belongs to.

    Concert rows (and ConcertCatalogEntry objects) are their own concert.
    """
    if isinstance(record, (Booking, TicketCatalogEntry)):
        return record.concert_id
    if isinstance(record, ConcertCatalogEntry):
        return record.id
    return canonical_id(_first(record, _BOOKING_CONCERT_KEYS))
