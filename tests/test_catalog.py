"""Tests for the catalog index."""

from typing import Any

from ticket_sales.catalog import build_catalog_index
from ticket_sales.records import UNKNOWN_CONCERT, UNKNOWN_TICKET


def test_lookup_by_any_id_spelling(
    ticket_rows: list[dict[str, Any]], concert_rows: list[dict[str, Any]]
) -> None:
    index = build_catalog_index(ticket_rows, concert_rows)

    assert index.ticket_name(1) == "VIP"
    assert index.ticket_name("1") == "VIP"
    assert index.ticket_name(2.0) == "Regular"
    assert index.concert_name(6) == "Mazzika"
    assert index.concert_name("13") == "Yacht Festival"
    assert index.concert_name(13) == "Yacht Festival"


def test_ticket_names_are_trimmed(
    ticket_rows: list[dict[str, Any]], concert_rows: list[dict[str, Any]]
) -> None:
    index = build_catalog_index(ticket_rows, concert_rows)
    assert index.ticket(1).ticket_name == "VIP"
    assert index.ticket(1).available_quantity == 100
    assert index.ticket(1).price == 1500.0
    assert index.ticket(1).concert_id == "6"


def test_missing_ids_resolve_to_sentinels(
    ticket_rows: list[dict[str, Any]], concert_rows: list[dict[str, Any]]
) -> None:
    index = build_catalog_index(ticket_rows, concert_rows)

    assert index.ticket_name(999) == UNKNOWN_TICKET
    assert index.ticket(999).available_quantity == 0
    assert index.ticket_name(None) == UNKNOWN_TICKET
    assert index.concert_name("nope") == UNKNOWN_CONCERT
    assert not index.has_ticket(999)
    assert index.has_concert("6")


def test_empty_catalogs() -> None:
    index = build_catalog_index([], [])
    assert index.tickets == ()
    assert index.concerts == ()
    assert index.concert_name(1) == UNKNOWN_CONCERT


def test_duplicate_id_keeps_last_entry() -> None:
    index = build_catalog_index(
        [
            {"id": 1, "ticket_name": "Old Name", "quantity": 5},
            {"id": "1", "ticket_name": "New Name", "quantity": 9},
        ],
        [],
    )
    assert index.ticket_name(1) == "New Name"
    assert index.ticket(1).available_quantity == 9
    assert len(index.tickets) == 2


def test_blank_names_fall_back_to_sentinels() -> None:
    index = build_catalog_index(
        [{"id": 1, "ticket_name": "   ", "quantity": 5}],
        [{"id": 2, "concert_name": None}],
    )
    assert index.ticket_name(1) == UNKNOWN_TICKET
    assert index.concert_name(2) == UNKNOWN_CONCERT
