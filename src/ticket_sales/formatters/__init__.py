"""Text formatters for reports."""

from ticket_sales.formatters.console import format_report_for_console

__all__ = ["format_report_for_console"]
