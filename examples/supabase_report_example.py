"""Example: scoped report against a live Supabase project

Prerequisites:
- Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables
- Create credentials.json mapping client emails to passwords and concert ids
"""

from ticket_sales import CredentialStore, ReportConfig, SourceSettings, generate_report
from ticket_sales.sources import SupabaseRecordSource

settings = SourceSettings.from_env()
source = SupabaseRecordSource(settings)

store = CredentialStore.from_json("credentials.json")
identity = store.authenticate("mazzika@zeko.com", "change-me")  # MODIFY AS NEEDED

# Six collections fetched in parallel, week bucketed in Cairo local time
config = ReportConfig(timezone="Africa/Cairo", fetch_workers=6)
report = generate_report("2024-06-13", source, identity=identity, config=config)

print(f"Scope: {report.scope}")
print(f"Revenue: {report.revenue:,.2f}")
for day in report.weekly_bucket.days:
    print(f"  {day.day_name:<10} {day.sales_total:>12,.2f}")
