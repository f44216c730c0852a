"""Catalog index for resolving ticket and concert ids to names.

Bookings reference tickets and concerts by id, and those ids arrive typed
inconsistently (6, 6.0, "6"). The CatalogIndex keys both catalogs by the
canonical string form of the id and resolves unknown ids to sentinel entries
("Unknown Ticket", "Unknown Concert") instead of failing.
"""

from __future__ import annotations

from typing import Any, Iterable

from ticket_sales.parsing import canonical_id
from ticket_sales.records import (
    UNKNOWN_CONCERT_ENTRY,
    UNKNOWN_TICKET_ENTRY,
    ConcertCatalogEntry,
    TicketCatalogEntry,
    as_concerts,
    as_tickets,
)


class CatalogIndex:
    """Lookup of ticket and concert catalog entries by id.

    Example:
        >>> index = build_catalog_index(
        ...     [{"id": 1, "ticket_name": " VIP ", "quantity": 100, "concert_id": 6}],
        ...     [{"id": "6", "concert_name": "Mazzika"}],
        ... )
        >>> index.ticket_name("1")
        'VIP'
        >>> index.concert_name(6)
        'Mazzika'
        >>> index.concert_name(99)
        'Unknown Concert'

    """

    def __init__(
        self,
        tickets: Iterable[TicketCatalogEntry],
        concerts: Iterable[ConcertCatalogEntry],
    ) -> None:
        """Index catalog entries; a repeated id keeps the last entry seen.

        Args:
            tickets: Ticket catalog entries, in catalog order.
            concerts: Concert catalog entries, in catalog order.

        """
        self.tickets: tuple[TicketCatalogEntry, ...] = tuple(tickets)
        self.concerts: tuple[ConcertCatalogEntry, ...] = tuple(concerts)
        self._tickets = {t.id: t for t in self.tickets if t.id is not None}
        self._concerts = {c.id: c for c in self.concerts if c.id is not None}

    def ticket(self, ticket_id: Any) -> TicketCatalogEntry:
        """Return the catalog entry for a ticket id, or the Unknown Ticket sentinel."""
        return self._tickets.get(canonical_id(ticket_id), UNKNOWN_TICKET_ENTRY)

    def concert(self, concert_id: Any) -> ConcertCatalogEntry:
        """Return the catalog entry for a concert id, or the Unknown Concert sentinel."""
        return self._concerts.get(canonical_id(concert_id), UNKNOWN_CONCERT_ENTRY)

    def ticket_name(self, ticket_id: Any) -> str:
        return self.ticket(ticket_id).ticket_name

    def concert_name(self, concert_id: Any) -> str:
        return self.concert(concert_id).concert_name

    def has_ticket(self, ticket_id: Any) -> bool:
        return canonical_id(ticket_id) in self._tickets

    def has_concert(self, concert_id: Any) -> bool:
        return canonical_id(concert_id) in self._concerts


def build_catalog_index(tickets: Iterable[Any], concerts: Iterable[Any]) -> CatalogIndex:
    """Build a CatalogIndex from raw catalog rows (dicts) or catalog entries.

    Args:
        tickets: Ticket rows as returned by the record source.
        concerts: Concert rows as returned by the record source.

    Returns:
        CatalogIndex over both catalogs. Pure construction, no side effects.

    """
    return CatalogIndex(as_tickets(list(tickets)), as_concerts(list(concerts)))
