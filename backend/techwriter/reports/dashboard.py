"""Dashboard figures: today's totals, documentation debt, per-team activity."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import TYPE_CHECKING

from pydantic import BaseModel
from sqlmodel import select

from techwriter.db.query import Query
from techwriter.models import Project, Team, TimeBlock
from techwriter.models.base import ensure_utc
from techwriter.models.vocabulary import calculate_maintenance_status, map_work_phase_to_category

if TYPE_CHECKING:
    from techwriter.db.store import Store

# Worst first
DEBT_ORDER = {"critical": 0, "outdated": 1, "stale": 2}
RECENT_DAYS = 30


class TodayStats(BaseModel):
    total_minutes: int = 0
    deep_work_minutes: int = 0
    completed_tasks: int = 0
    active_projects: int = 0


class DebtItem(BaseModel):
    project_id: str
    name: str
    team: str
    maintenance_status: str
    last_updated: datetime | None


class TeamStats(BaseModel):
    team_id: str
    name: str
    total_projects: int = 0
    active_projects: int = 0
    total_time: int = 0
    recent_time: int = 0
    recent_blocks: int = 0


def today_stats(store: Store, day: date | datetime | None = None) -> TodayStats:
    if day is None:
        day = store.clock.now()
    if isinstance(day, datetime):
        day = ensure_utc(day).date()
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    end = start + timedelta(days=1) - timedelta(microseconds=1)

    stats = TodayStats(active_projects=len(store.projects.active()))
    blocks = store.time_blocks.query(Query(collection="time_blocks", ranges={"date": (start, end)}))
    for block in blocks:
        if not block.duration:
            continue
        stats.total_minutes += block.duration
        if map_work_phase_to_category(block.type) == "deepWork":
            stats.deep_work_minutes += block.duration
        if block.status == "completed":
            stats.completed_tasks += 1
    return stats


def documentation_debt(store: Store, now: datetime | None = None, limit: int = 10) -> list[DebtItem]:
    """Non-archived projects whose docs are stale or worse, worst and oldest first.

    Status is recomputed from ``last_updated`` rather than read from the
    cached column, which only changes on write.
    """
    now = now or store.clock.now()
    items = []
    for project in store.projects.active():
        status = calculate_maintenance_status(ensure_utc(project.last_updated), now)
        if status not in DEBT_ORDER:
            continue
        items.append(DebtItem(
            project_id=project.id,
            name=project.name,
            team=project.team,
            maintenance_status=status,
            last_updated=ensure_utc(project.last_updated),
        ))

    oldest = datetime.min.replace(tzinfo=timezone.utc)
    items.sort(key=lambda i: (DEBT_ORDER[i.maintenance_status], i.last_updated or oldest))
    return items[:limit]


def team_stats(store: Store, now: datetime | None = None) -> list[TeamStats]:
    """Project counts and tracked time for every team, most recently active first."""
    now = now or store.clock.now()
    since = now - timedelta(days=RECENT_DAYS)

    with store.session() as session:
        teams = session.exec(select(Team)).all()
        projects = session.exec(select(Project)).all()
        blocks = session.exec(select(TimeBlock).where(TimeBlock.project_team.is_not(None))).all()

    results = []
    for team in teams:
        row = TeamStats(team_id=team.id, name=team.name)
        for project in projects:
            if project.team == team.name:
                row.total_projects += 1
                if project.status != "archived":
                    row.active_projects += 1
        for block in blocks:
            if block.project_team != team.name:
                continue
            row.total_time += block.duration or 0
            if ensure_utc(block.start_time) >= since:
                row.recent_time += block.duration or 0
                row.recent_blocks += 1
        results.append(row)

    results.sort(key=lambda r: r.recent_time, reverse=True)
    return results
