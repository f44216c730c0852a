"""Example: weekly ticket sales report from a JSON snapshot

This example builds a report for the week containing a reference date, then
walks one week back and prints the per-ticket breakdown grouped by concert.

Prerequisites:
- Run from the repository root (reads examples/snapshot.json)
"""

from pathlib import Path

from ticket_sales import InMemoryRecordSource, generate_report
from ticket_sales.aggregate import stats_by_concert
from ticket_sales.formatters import format_report_for_console
from ticket_sales.weekly import previous_week

reference_date = "2024-06-13"  # Any day of the week - MODIFY AS NEEDED

source = InMemoryRecordSource.from_json(Path("examples/snapshot.json"))

report = generate_report(reference_date, source)
print(format_report_for_console(report))

print("\nPer-ticket stats by concert:")
for concert, stats in stats_by_concert(report.per_ticket_stats).items():
    sold = sum(s.quantity_sold for s in stats)
    print(f"  {concert}: {sold} sold across {len(stats)} ticket types")

# Same source, previous week: only the weekly bucket changes
earlier = generate_report(previous_week(report.reference_date), source)
print(f"\nPrevious week ({earlier.weekly_bucket.week_start}): {earlier.weekly_bucket.total_sales:,.2f}")
