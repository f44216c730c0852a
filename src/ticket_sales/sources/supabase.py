"""Supabase record source over the PostgREST HTTP API.

Reads the ``bookings``, ``tickets``, ``concerts`` and ``users`` tables of a
Supabase project with plain HTTP requests:

- rows: GET /rest/v1/<table>?select=*&order=id.asc paged with Range headers
- counts: HEAD with ``Prefer: count=exact`` and the Content-Range header

Any HTTP, network or decoding failure raises SourceUnavailableError carrying
the table name. Transient 429/5xx responses are retried by the session.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ticket_sales.config import SourceSettings
from ticket_sales.exceptions import SourceUnavailableError
from ticket_sales.sources.base import BookingFilter

logger = logging.getLogger(__name__)

BOOKINGS_TABLE = "bookings"
TICKETS_TABLE = "tickets"
CONCERTS_TABLE = "concerts"
USERS_TABLE = "users"

# Column names used by the bookings table
BOOKING_CONCERT_COLUMN = "concertid"
BOOKING_CREATED_COLUMN = "created_at"

PAGE_SIZE = 1000
# Stable row order for offset paging
ORDER_BY = "id.asc"


def make_session(settings: SourceSettings) -> requests.Session:
    """Create a requests Session with retry logic and Supabase auth headers.

    Configures the session with:
    - apikey and bearer Authorization headers
    - Retry adapter with exponential backoff on 429, 500, 502, 503, 504

    Args:
        settings: Connection settings (API key, retries).

    Returns:
        Configured requests.Session object.

    """
    s = requests.Session()
    s.headers.update(
        {
            "apikey": settings.api_key,
            "Authorization": f"Bearer {settings.api_key}",
            "Accept": "application/json",
        }
    )
    retry = Retry(
        total=settings.retries,
        connect=settings.retries,
        read=settings.retries,
        status=settings.retries,
        backoff_factor=0.8,  # 0.8, 1.6, 3.2, ...
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset({"GET", "HEAD"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    return s


def parse_content_range_total(header: str | None) -> int | None:
    """Extract the total from a Content-Range header like "0-24/25" or "*/25".

    Examples:
        >>> parse_content_range_total("0-24/25")
        25
        >>> parse_content_range_total("*/*") is None
        True

    """
    if not header or "/" not in header:
        return None
    total = header.rsplit("/", 1)[1].strip()
    return int(total) if total.isdigit() else None


class SupabaseRecordSource:
    """Record source reading a Supabase project's REST API.

    Example:
        >>> source = SupabaseRecordSource(SourceSettings.from_env())
        >>> report = generate_report(date.today(), source)

    """

    def __init__(self, settings: SourceSettings, session: requests.Session | None = None) -> None:
        self.settings = settings
        self.base_url = f"{settings.url.rstrip('/')}/rest/v1"
        self._shared_session = session
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        """HTTP session for the calling thread.

        An injected session is shared by every thread. Otherwise each thread
        gets its own session.
        """
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, "session", None)
        if session is None:
            session = make_session(self.settings)
            self._local.session = session
        return session

    def _request(
        self,
        method: str,
        table: str,
        params: list[tuple[str, str]],
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        url = f"{self.base_url}/{table}"
        try:
            response = self.session.request(
                method, url, params=params, headers=headers, timeout=self.settings.timeout
            )
        except requests.RequestException as e:
            raise SourceUnavailableError(
                f"Request to '{table}' failed: {e}", collection=table
            ) from e

        if response.status_code >= 400:
            snippet = (response.text or "").replace("\n", " ")[:200]
            raise SourceUnavailableError(
                f"'{table}' returned HTTP {response.status_code}: {snippet}",
                collection=table,
            )
        return response

    def _fetch_rows(self, table: str, params: list[tuple[str, str]] | None = None) -> list[dict[str, Any]]:
        """Read every row of a table, one Range page at a time.

        Pages are ordered by id so offsets stay stable. The server may return
        fewer rows than requested (``max-rows``), so paging continues until the
        exact count from Content-Range is reached. Without a count, a short
        page ends the read.
        """
        query = [("select", "*"), ("order", ORDER_BY)] + (params or [])
        rows: list[dict[str, Any]] = []
        offset = 0
        while True:
            headers = {
                "Range-Unit": "items",
                "Range": f"{offset}-{offset + PAGE_SIZE - 1}",
                "Prefer": "count=exact",
            }
            response = self._request("GET", table, query, headers=headers)
            try:
                page = response.json()
            except ValueError as e:
                raise SourceUnavailableError(
                    f"'{table}' returned invalid JSON: {e}", collection=table
                ) from e
            if not isinstance(page, list):
                raise SourceUnavailableError(
                    f"'{table}' returned {type(page).__name__}, expected a list",
                    collection=table,
                )

            rows.extend(page)
            total = parse_content_range_total(response.headers.get("Content-Range"))
            if not page:
                if total is not None and len(rows) < total:
                    logger.warning(
                        "%s reported %d row(s) but paging ended at %d", table, total, len(rows)
                    )
                break
            offset += len(page)
            if total is None:
                if len(page) < PAGE_SIZE:
                    break
            elif offset >= total:
                break

        logger.info("Fetched %d row(s) from %s", len(rows), table)
        return rows

    def _count(self, table: str) -> int:
        response = self._request(
            "HEAD", table, [("select", "*")], headers={"Prefer": "count=exact"}
        )
        total = parse_content_range_total(response.headers.get("Content-Range"))
        if total is None:
            raise SourceUnavailableError(
                f"'{table}' did not report a row count", collection=table
            )
        return total

    def fetch_bookings(self, booking_filter: BookingFilter | None = None) -> list[dict[str, Any]]:
        params: list[tuple[str, str]] = []
        if booking_filter is not None:
            if booking_filter.paid_only:
                params.append(("status", "eq.true"))
            if booking_filter.concert_ids is not None:
                ids = ",".join(sorted(booking_filter.concert_ids))
                params.append((BOOKING_CONCERT_COLUMN, f"in.({ids})"))
            bounds = booking_filter.instant_range()
            if bounds is not None:
                start, end = bounds
                params.append((BOOKING_CREATED_COLUMN, f"gte.{start.isoformat()}"))
                params.append((BOOKING_CREATED_COLUMN, f"lt.{end.isoformat()}"))
        return self._fetch_rows(BOOKINGS_TABLE, params)

    def fetch_tickets(self) -> list[dict[str, Any]]:
        return self._fetch_rows(TICKETS_TABLE)

    def fetch_concerts(self) -> list[dict[str, Any]]:
        return self._fetch_rows(CONCERTS_TABLE)

    def count_users(self) -> int:
        return self._count(USERS_TABLE)

    def count_concerts(self) -> int:
        return self._count(CONCERTS_TABLE)
