"""Per-ticket aggregation: sold, available and remaining quantities.

Joins paid bookings' line items to the catalogs and produces one
AggregatedTicketStat per (concert name, ticket name) cell.

Grain:
    - One row per (concert_name, ticket_name) present in the catalogs.
    - Cells are keyed by trimmed names, not ids: two catalog rows with the same
      concert and ticket names collapse into one cell (available quantities
      are summed, the first catalog price is kept).
    - Tickets without sales still appear with quantity_sold = 0.
    - Sold quantities that resolve to no cell are dropped: unknown ticket ids,
      tickets booked under another concert, and unknown concert ids other
      than the ticket's own.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Iterable

import pandas as pd

from ticket_sales.bookings import ClassifiedBooking
from ticket_sales.catalog import CatalogIndex
from ticket_sales.records import TicketCatalogEntry

logger = logging.getLogger(__name__)

KEY_COLUMNS = ["concert_name", "ticket_name"]


@dataclass(frozen=True)
class AggregatedTicketStat:
    """Sales figures for one ticket type of one concert.

    ``quantity_remaining`` is ``quantity_available - quantity_sold`` and is
    not clamped: oversold tickets show a negative remainder.
    """

    concert_name: str
    ticket_name: str
    quantity_sold: int
    quantity_available: int
    quantity_remaining: int
    price: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _catalog_cells(catalog: CatalogIndex, tickets: Iterable[TicketCatalogEntry]) -> pd.DataFrame:
    """One row per catalog ticket, ordered by concert then catalog position."""
    rows = [
        {
            "concert_name": catalog.concert_name(t.concert_id),
            "ticket_name": t.ticket_name,
            "quantity_available": t.available_quantity,
            "price": t.price,
        }
        for t in tickets
    ]
    if not rows:
        return pd.DataFrame(columns=KEY_COLUMNS + ["quantity_available", "price"])

    df = pd.DataFrame(rows)

    # Concert catalog order first, then concerts only reachable through tickets
    concert_rank: dict[str, int] = {}
    for concert in catalog.concerts:
        concert_rank.setdefault(concert.concert_name, len(concert_rank))
    for name in df["concert_name"]:
        concert_rank.setdefault(name, len(concert_rank))

    df["_concert_rank"] = df["concert_name"].map(concert_rank)
    df = df.sort_values("_concert_rank", kind="mergesort").drop(columns="_concert_rank")

    return df.groupby(KEY_COLUMNS, sort=False, as_index=False).agg(
        quantity_available=("quantity_available", "sum"),
        price=("price", "first"),
    )


def _counts_toward_catalog(catalog: CatalogIndex, booking: ClassifiedBooking, ticket_id: str | None) -> bool:
    # Sentinel names for missing references must not collect sales, even when
    # a real cell shares the name (a blank catalog name reads "Unknown Ticket")
    if not catalog.has_ticket(ticket_id):
        return False
    if catalog.has_concert(booking.concert_id):
        return True
    return catalog.ticket(ticket_id).concert_id == booking.concert_id


def _sold_quantities(catalog: CatalogIndex, paid_bookings: Iterable[ClassifiedBooking]) -> pd.DataFrame:
    rows = [
        {
            "concert_name": catalog.concert_name(booking.concert_id),
            "ticket_name": catalog.ticket_name(item.ticket_id),
            "quantity_sold": item.quantity,
        }
        for booking in paid_bookings
        for item in booking.line_items
        if _counts_toward_catalog(catalog, booking, item.ticket_id)
    ]
    if not rows:
        return pd.DataFrame(
            {
                "concert_name": pd.Series(dtype=object),
                "ticket_name": pd.Series(dtype=object),
                "quantity_sold": pd.Series(dtype="int64"),
            }
        )

    return pd.DataFrame(rows).groupby(KEY_COLUMNS, sort=False, as_index=False)["quantity_sold"].sum()


def aggregate_ticket_stats(
    catalog: CatalogIndex,
    paid_bookings: Iterable[ClassifiedBooking],
    all_tickets: Iterable[TicketCatalogEntry] | None = None,
) -> tuple[AggregatedTicketStat, ...]:
    """Aggregate paid bookings into per-(concert, ticket) sales figures.

    Args:
        catalog: CatalogIndex built from the ticket and concert catalogs.
        paid_bookings: Classified bookings; only paid ones are counted.
        all_tickets: Ticket catalog entries that define the cells. Defaults to
            every ticket in ``catalog``.

    Returns:
        Tuple of AggregatedTicketStat grouped by concert (concert catalog
        order) then by ticket (ticket catalog order).

    Examples:
        >>> stats = aggregate_ticket_stats(index, classify_all(paid_rows))
        >>> stats[0].quantity_remaining
        75

    """
    tickets = catalog.tickets if all_tickets is None else tuple(all_tickets)
    cells = _catalog_cells(catalog, tickets)
    if cells.empty:
        logger.info("Ticket catalog is empty; no per-ticket stats to report")
        return ()

    paid = [b for b in paid_bookings if b.paid]
    sold = _sold_quantities(catalog, paid)

    merged = cells.merge(sold, on=KEY_COLUMNS, how="left")
    merged["quantity_sold"] = merged["quantity_sold"].fillna(0).astype(int)
    merged["quantity_available"] = merged["quantity_available"].astype(int)
    merged["quantity_remaining"] = merged["quantity_available"] - merged["quantity_sold"]

    dropped = int(sold["quantity_sold"].sum()) - int(merged["quantity_sold"].sum()) if not sold.empty else 0
    if dropped:
        logger.debug("Dropped %d sold ticket(s) with no matching catalog cell", dropped)

    return tuple(
        AggregatedTicketStat(
            concert_name=row.concert_name,
            ticket_name=row.ticket_name,
            quantity_sold=int(row.quantity_sold),
            quantity_available=int(row.quantity_available),
            quantity_remaining=int(row.quantity_remaining),
            price=None if pd.isna(row.price) else float(row.price),
        )
        for row in merged.itertuples(index=False)
    )


def stats_by_concert(
    stats: Iterable[AggregatedTicketStat],
) -> dict[str, list[AggregatedTicketStat]]:
    """Group stats by concert name, keeping their order."""
    grouped: dict[str, list[AggregatedTicketStat]] = {}
    for stat in stats:
        grouped.setdefault(stat.concert_name, []).append(stat)
    return grouped
