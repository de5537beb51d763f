"""Data migrations: row-level repairs that schema revisions cannot express.

- migrate_time_blocks(): backfill project_name / project_team on time
  blocks and timers created before those fields were cached
- migrate_teams_data(): make sure teams exist for every project's team
  name, seeding the default set when the team collection is empty

Both are idempotent and return the number of rows they wrote.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import func, or_
from sqlmodel import Session, select

from techwriter.models import ActiveTimer, Project, Team, TimeBlock
from techwriter.models.vocabulary import DEFAULT_TEAMS, TEAM_COLORS, UNKNOWN_PROJECT

if TYPE_CHECKING:
    from techwriter.db.store import Store

logger = logging.getLogger(__name__)


def migrate_time_blocks(store: Store) -> int:
    """Copy the referenced project's name and team onto records missing them.

    Records whose project no longer exists get ``"Unknown Project"``.
    """
    updated = 0
    with store.session() as session:
        projects = {p.id: p for p in session.exec(select(Project)).all()}
        for model in (TimeBlock, ActiveTimer):
            rows = session.exec(
                select(model).where(
                    model.project_id.is_not(None),
                    model.project_id != "",
                    or_(model.project_name.is_(None), model.project_name == ""),
                )
            ).all()
            for row in rows:
                project = projects.get(row.project_id)
                row.project_name = project.name if project else UNKNOWN_PROJECT
                row.project_team = project.team if project else ""
                session.add(row)
                updated += 1
        session.commit()

    if updated:
        logger.info("Backfilled project fields on %d time records", updated)
        store.notify("time_blocks", "active_timers")
    return updated


def teams_for_names(
    session: Session,
    names: list[str],
    now=None,
    *,
    include_defaults: bool = False,
) -> list[Team]:
    """Build (unsaved) Team rows for ``names`` missing from the team table.

    Matching is case-insensitive and ``names`` are de-duplicated the same
    way, keeping the first spelling seen. With ``include_defaults`` the
    default team set is appended after the given names.
    """
    existing = {name.lower() for name in session.exec(select(Team.name)).all()}
    wanted = list(names) + (list(DEFAULT_TEAMS) if include_defaults else [])

    teams: list[Team] = []
    for name in wanted:
        name = (name or "").strip()
        if not name or name.lower() in existing:
            continue
        existing.add(name.lower())
        color = TEAM_COLORS[len(teams) % len(TEAM_COLORS)]
        team = Team(name=name, color=color)
        if now is not None:
            team.created_at = now
            team.updated_at = now
        teams.append(team)
    return teams


def migrate_teams_data(store: Store) -> int:
    """Seed default teams if none exist, then add a Team for every orphaned project team name."""
    now = store.clock.now()
    with store.session() as session:
        created: list[Team] = []
        if session.exec(select(func.count()).select_from(Team)).one() == 0:
            created += teams_for_names(session, [], now, include_defaults=True)
            session.add_all(created)
            session.flush()

        project_teams = session.exec(select(Project.team).distinct()).all()
        orphans = teams_for_names(session, [name for name in project_teams if name], now)
        session.add_all(orphans)
        created += orphans
        session.commit()

    if created:
        logger.info("Created %d teams: %s", len(created), ", ".join(t.name for t in created))
        store.notify("teams")
    return len(created)


def run_data_migrations(store: Store) -> dict[str, int]:
    """Run every data migration in order."""
    return {
        "teams": migrate_teams_data(store),
        "time_blocks": migrate_time_blocks(store),
    }
