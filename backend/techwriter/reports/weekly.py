"""Weekly report: time per category, per project, and the email body.

Time blocks are selected by their ``date`` (the timer's start instant)
inside a Monday-to-Sunday window.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta, timezone
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from techwriter.db.query import Query
from techwriter.models import TimeBlock
from techwriter.models.vocabulary import UNKNOWN_PROJECT, map_work_phase_to_category
from techwriter.reports.formatting import format_date, format_duration

if TYPE_CHECKING:
    from techwriter.db.store import Store

logger = logging.getLogger(__name__)


class WeeklyStats(BaseModel):
    total: int = 0
    deep_work: int = 0
    shallow_work: int = 0
    meetings: int = 0
    planning: int = 0
    other: int = 0


class ProjectTime(BaseModel):
    project_name: str
    team: str
    minutes: int
    percent: int


_CATEGORY_FIELDS = {
    "deepWork": "deep_work",
    "shallowWork": "shallow_work",
    "meetings": "meetings",
    "planning": "planning",
    "other": "other",
}


def week_range(day: date | datetime | None = None) -> tuple[datetime, datetime]:
    """Monday 00:00 to Sunday 23:59:59.999999 (UTC) of the week holding ``day``."""
    if day is None:
        day = datetime.now(timezone.utc)
    if isinstance(day, datetime):
        day = day.astimezone(timezone.utc).date() if day.tzinfo else day.date()
    monday = day - timedelta(days=day.weekday())
    start = datetime.combine(monday, time.min, tzinfo=timezone.utc)
    end = datetime.combine(monday + timedelta(days=6), time.max, tzinfo=timezone.utc)
    return start, end


def blocks_between(store: Store, start: datetime, end: datetime) -> list[TimeBlock]:
    return store.time_blocks.query(
        Query(collection="time_blocks", ranges={"date": (start, end)}, order_by="start_time")
    )


def weekly_stats(blocks: list[TimeBlock]) -> WeeklyStats:
    """Sum block durations overall and per time category.

    Blocks without a duration (still running) are skipped.
    """
    stats = WeeklyStats()
    for block in blocks:
        if not block.duration:
            continue
        stats.total += block.duration
        field = _CATEGORY_FIELDS[map_work_phase_to_category(block.type)]
        setattr(stats, field, getattr(stats, field) + block.duration)
    return stats


def project_breakdown(blocks: list[TimeBlock]) -> list[ProjectTime]:
    """Minutes per project, largest first, using the names cached on each block."""
    minutes: dict[str, int] = defaultdict(int)
    labels: dict[str, tuple[str, str]] = {}
    for block in blocks:
        if not block.project_id or not block.duration:
            continue
        minutes[block.project_id] += block.duration
        labels.setdefault(
            block.project_id,
            (block.project_name or UNKNOWN_PROJECT, block.project_team or ""),
        )

    total = sum(minutes.values())
    rows = [
        ProjectTime(
            project_name=labels[pid][0],
            team=labels[pid][1],
            minutes=mins,
            percent=round(mins / total * 100) if total else 0,
        )
        for pid, mins in minutes.items()
    ]
    rows.sort(key=lambda row: row.minutes, reverse=True)
    return rows


def _bullets(items: list[str]) -> str:
    return "\n".join(f"• {item}" for item in items)


def render_email_summary(
    week_start: datetime,
    week_end: datetime,
    stats: WeeklyStats,
    breakdown: list[ProjectTime],
    completed: list[str] | None = None,
    in_progress: list[str] | None = None,
    generated_on: date | datetime | None = None,
) -> str:
    """Render the plain-text weekly summary email. Blank list items are dropped."""
    completed = [item.strip() for item in completed or [] if item.strip()]
    in_progress = [item.strip() for item in in_progress or [] if item.strip()]
    generated_on = generated_on or datetime.now(timezone.utc)

    allocation = [f"{p.project_name} ({p.team}): {format_duration(p.minutes)}" for p in breakdown]
    return (
        f"Weekly Summary - {format_date(week_start)} to {format_date(week_end)}\n"
        "\n"
        "Time Breakdown:\n"
        f"• Total Time: {format_duration(stats.total)}\n"
        f"• Deep Work: {format_duration(stats.deep_work)}\n"
        f"• Meetings: {format_duration(stats.meetings)}\n"
        f"• Planning: {format_duration(stats.planning)}\n"
        "\n"
        "Project Time Allocation:\n"
        f"{_bullets(allocation)}\n"
        "\n"
        "Completed This Week:\n"
        f"{_bullets(completed)}\n"
        "\n"
        "In Progress:\n"
        f"{_bullets(in_progress)}\n"
        "\n"
        f"Generated on {format_date(generated_on)}"
    )


def email_subject(week_start: datetime, week_end: datetime) -> str:
    return f"Weekly Summary - {format_date(week_start)} to {format_date(week_end)}"


def save_weekly_summary(
    store: Store,
    week_start: datetime,
    payload: dict[str, Any] | None = None,
) -> str:
    """Archive a snapshot of the week holding ``week_start``. Returns the summary id.

    When ``payload`` is omitted the week's stats and project breakdown
    are computed and stored.
    """
    start, end = week_range(week_start)
    if payload is None:
        blocks = blocks_between(store, start, end)
        payload = {
            "stats": weekly_stats(blocks).model_dump(),
            "projects": [row.model_dump() for row in project_breakdown(blocks)],
        }
    summary_id = store.weekly_summaries.create(week_start=start, week_end=end, payload=payload)
    logger.info("Archived weekly summary %s (%s)", summary_id[:8], format_date(start))
    return summary_id
