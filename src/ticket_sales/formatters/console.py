"""Console output formatting utilities."""

from __future__ import annotations

import re

from ticket_sales.aggregate import stats_by_concert
from ticket_sales.report import Report


# Emoji, pictographs, dingbats, variation selectors and joiners
_EMOJI_RE = re.compile(
    "["
    "\U0001F000-\U0001FAFF"
    "\U00002600-\U000027BF"
    "\U0000FE00-\U0000FE0F"
    "\U0000200D"
    "]+"
)


def sanitize_for_console(text: str, encoding: str | None = None) -> str:
    """Sanitize text for console output.

    Emoji are removed. Letters in any script (e.g. Arabic concert names) are
    kept. When ``encoding`` is given, characters that encoding cannot
    represent become "?" so printing on narrow consoles (cp1252) cannot fail.

    Args:
        text: Text that may contain emoji or non-Latin names.
        encoding: Target console encoding, e.g. ``sys.stdout.encoding``.

    Returns:
        Sanitized text safe for console output.
    """
    text = _EMOJI_RE.sub("", text)
    if encoding:
        text = text.encode(encoding, errors="replace").decode(encoding)
    return text


def format_amount(value: float) -> str:
    return f"{value:,.2f}"


def format_report_for_console(report: Report, encoding: str | None = None) -> str:
    """Build a human-readable summary of a report for console output.

    Args:
        report: Report to format.
        encoding: Optional console encoding passed to sanitize_for_console.

    Returns:
        Multi-line text: headline counts, per-ticket breakdown and the week.
    """
    weekly = report.weekly_bucket
    lines = []
    lines.append(f"Ticket Sales Report - week {weekly.week_start} to {weekly.week_end}")
    lines.append("=" * 60)
    if report.scope is not None:
        lines.append(f"Concerts in scope: {', '.join(report.scope)}")
    lines.append(f"Users:            {report.total_users}")
    lines.append(f"Concerts:         {report.total_concerts}")
    lines.append(
        f"Bookings:         {report.bookings_total} "
        f"({report.tickets_paid_count} paid, {report.bookings_unpaid_count} unpaid)"
    )
    lines.append(f"Tickets sold:     {report.tickets_sold}")
    lines.append(f"Revenue:          {format_amount(report.revenue)}")
    lines.append("")

    lines.append("Ticket Breakdown")
    lines.append("-" * 60)
    if not report.per_ticket_stats:
        lines.append("No ticket data available.")
    for concert, stats in stats_by_concert(report.per_ticket_stats).items():
        lines.append(concert)
        for stat in stats:
            price = "-" if stat.price is None else format_amount(stat.price)
            lines.append(
                f"  {stat.ticket_name:<20} price {price:>10}  sold {stat.quantity_sold:>6}"
                f"  available {stat.quantity_available:>6}  left {stat.quantity_remaining:>6}"
            )
    lines.append("")

    lines.append(f"Weekly Sales (total {format_amount(weekly.total_sales)})")
    lines.append("-" * 60)
    for day in weekly.days:
        lines.append(
            f"  {day.day_name:<10} {day.date}  sales {format_amount(day.sales_total):>12}"
            f"  bookings {day.booking_count:>4}"
        )

    return sanitize_for_console("\n".join(lines), encoding)
