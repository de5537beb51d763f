"""Derived statistics over the store: dashboard figures and weekly reports."""

from techwriter.reports.dashboard import documentation_debt, team_stats, today_stats
from techwriter.reports.formatting import format_date, format_duration, format_elapsed
from techwriter.reports.weekly import (
    project_breakdown,
    render_email_summary,
    save_weekly_summary,
    week_range,
    weekly_stats,
)

__all__ = [
    "documentation_debt",
    "format_date",
    "format_duration",
    "format_elapsed",
    "project_breakdown",
    "render_email_summary",
    "save_weekly_summary",
    "team_stats",
    "today_stats",
    "week_range",
    "weekly_stats",
]
