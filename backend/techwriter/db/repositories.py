"""Collection repositories: uniform CRUD over each record table.

Every repository offers ``create / get / require / update / delete /
clear / query / count / all``. Subclasses add the write-time rules of
their collection: Project→Team references, case-insensitive team names,
denormalized project fields on time blocks and timers, immutability of
completed blocks and archived summaries.

Each call runs in its own session and commits before returning; the
store then notifies subscribers of the touched collection.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar, get_args

from sqlalchemy import delete as sa_delete
from sqlalchemy import func
from sqlmodel import Session, SQLModel, select

from techwriter.db.query import Query, build_statement
from techwriter.exceptions import (
    DuplicateNameError,
    ImmutableRecordError,
    NotFoundError,
    ReferentialError,
)
from techwriter.models import ActiveTimer, Preference, Project, Team, TimeBlock, WeeklySummary
from techwriter.models.base import ensure_utc, normalize_timestamps
from techwriter.models.vocabulary import (
    TEAM_COLORS,
    Priority,
    ProjectStatus,
    TeamStatus,
    TimeBlockStatus,
    TimerStatus,
    calculate_maintenance_status,
)

if TYPE_CHECKING:
    from techwriter.db.store import Store

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=SQLModel)


class Repository(Generic[T]):
    """CRUD over one collection."""

    model: type[T]
    name: str
    key_field: str = "id"
    # Other collections an update may write to
    touches: tuple[str, ...] = ()
    # Field name → Literal alias of its allowed values
    choices: dict[str, Any] = {}

    def __init__(self, store: Store) -> None:
        self._store = store

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get(self, record_id: str) -> T | None:
        with self._store.session() as session:
            return session.get(self.model, record_id)

    def require(self, record_id: str) -> T:
        """Like ``get`` but raises NotFoundError when absent."""
        record = self.get(record_id)
        if record is None:
            raise NotFoundError(self.name, record_id)
        return record

    def all(self) -> list[T]:
        with self._store.session() as session:
            return list(session.exec(select(self.model)).all())

    def count(self) -> int:
        with self._store.session() as session:
            return session.exec(select(func.count()).select_from(self.model)).one()

    def query(self, query: Query | None = None, **kwargs: Any) -> list[T]:
        """Run a Query (or build one from keyword arguments) against this collection."""
        if query is None:
            query = Query(collection=self.name, **kwargs)
        elif query.collection != self.name:
            raise ValueError(f"Query for {query.collection} run against {self.name}")
        with self._store.session() as session:
            return list(session.exec(build_statement(self.model, query)).all())

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def create(self, record: T | dict[str, Any] | None = None, **fields: Any) -> str:
        """Validate, stamp and persist a new record. Returns its identifier."""
        record = self._coerce(record, fields)
        self._check_choices({name: getattr(record, name) for name in self.choices})
        self._stamp_created(record)
        normalize_timestamps(record)

        with self._store.session() as session:
            self.before_create(session, record)
            session.add(record)
            session.commit()
            record_id = getattr(record, self.key_field)

        logger.debug("Created %s %s", self.name, record_id)
        self._store.notify(self.name)
        return record_id

    def update(self, record_id: str, **fields: Any) -> T:
        """Merge ``fields`` into an existing record and persist it.

        Raises:
            NotFoundError: If no record has ``record_id``.
        """
        self._check_fields(fields)
        with self._store.session() as session:
            record = session.get(self.model, record_id)
            if record is None:
                raise NotFoundError(self.name, record_id)
            fields = self._validate_update(record, fields)
            self.before_update(session, record, fields)
            for name, value in fields.items():
                setattr(record, name, value)
            if "updated_at" in self.model.model_fields:
                record.updated_at = self._store.clock.now()
            normalize_timestamps(record)
            session.add(record)
            session.commit()

        self._store.notify(self.name, *self.touches)
        return record

    def delete(self, record_id: str) -> None:
        """Hard-delete one record.

        Raises:
            NotFoundError: If no record has ``record_id``.
        """
        with self._store.session() as session:
            record = session.get(self.model, record_id)
            if record is None:
                raise NotFoundError(self.name, record_id)
            self.before_delete(session, record)
            session.delete(record)
            session.commit()
        self._store.notify(self.name)

    def clear(self) -> int:
        """Delete every record in the collection. Returns the number removed."""
        with self._store.session() as session:
            removed = self.clear_in(session)
            session.commit()
        self._store.notify(self.name)
        return removed

    def clear_in(self, session: Session) -> int:
        """Delete every record inside an open transaction (no commit, no notify)."""
        result = session.connection().execute(sa_delete(self.model))
        return result.rowcount or 0

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def before_create(self, session: Session, record: T) -> None:
        pass

    def before_update(self, session: Session, record: T, fields: dict[str, Any]) -> None:
        pass

    def before_delete(self, session: Session, record: T) -> None:
        pass

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _coerce(self, record: T | dict[str, Any] | None, fields: dict[str, Any]) -> T:
        if isinstance(record, self.model):
            return record
        data = dict(record or {})
        data.update(fields)
        self._check_fields(data)
        return self.model.model_validate(data)

    def _check_fields(self, fields: dict[str, Any]) -> None:
        unknown = set(fields) - set(self.model.model_fields)
        if unknown:
            raise ValueError(f"Unknown fields for {self.name}: {sorted(unknown)}")

    def _validate_update(self, record: T, fields: dict[str, Any]) -> dict[str, Any]:
        """Coerce ``fields`` the way ``create`` would (ISO strings to datetimes, ...)."""
        merged = record.model_dump()
        merged.update(fields)
        validated = self.model.model_validate(merged)
        values = {name: getattr(validated, name) for name in fields}
        self._check_choices(values)
        return values

    def _check_choices(self, values: dict[str, Any]) -> None:
        for name, value in values.items():
            allowed = get_args(self.choices.get(name))
            if allowed and value not in allowed:
                raise ValueError(
                    f"Invalid {name} for {self.name}: {value!r} (expected one of {list(allowed)})"
                )

    def _stamp_created(self, record: T) -> None:
        now = self._store.clock.now()
        if "created_at" in self.model.model_fields:
            record.created_at = now
        if "updated_at" in self.model.model_fields:
            record.updated_at = now


class TeamRepository(Repository[Team]):
    model = Team
    name = "teams"
    touches = ("projects",)
    choices = {"status": TeamStatus}

    def find_by_name(self, name: str, session: Session | None = None) -> Team | None:
        """Case-insensitive lookup by team name."""
        stmt = select(Team).where(func.lower(Team.name) == name.strip().lower())
        if session is not None:
            return session.exec(stmt).first()
        with self._store.session() as own:
            return own.exec(stmt).first()

    def active(self) -> list[Team]:
        return self.query(where={"status": "active"}, order_by="name")

    def before_create(self, session: Session, record: Team) -> None:
        record.name = record.name.strip()
        if not record.name:
            raise ValueError("Team name is required")
        if record.color not in TEAM_COLORS:
            record.color = TEAM_COLORS[0]
        if self.find_by_name(record.name, session) is not None:
            raise DuplicateNameError(f"A team with this name already exists: {record.name}")

    def before_update(self, session: Session, record: Team, fields: dict[str, Any]) -> None:
        new_name = fields.get("name")
        if new_name is not None:
            new_name = new_name.strip()
            if not new_name:
                raise ValueError("Team name is required")
            clash = self.find_by_name(new_name, session)
            if clash is not None and clash.id != record.id:
                raise DuplicateNameError(f"A team with this name already exists: {new_name}")
            fields["name"] = new_name
            if new_name != record.name:
                # Projects reference teams by name
                projects = session.exec(select(Project).where(Project.team == record.name)).all()
                for project in projects:
                    project.team = new_name
                    session.add(project)

        if fields.get("status") == "archived" and record.status != "archived":
            active_projects = session.exec(
                select(func.count()).select_from(Project).where(
                    Project.team == record.name,
                    Project.status != "archived",
                )
            ).one()
            if active_projects:
                raise ReferentialError(
                    f"Cannot archive team with {active_projects} active projects"
                )

    def before_delete(self, session: Session, record: Team) -> None:
        referencing = session.exec(
            select(func.count()).select_from(Project).where(Project.team == record.name)
        ).one()
        if referencing:
            raise ReferentialError(
                f"Team {record.name} is referenced by {referencing} projects"
            )


class ProjectRepository(Repository[Project]):
    model = Project
    name = "projects"
    choices = {"status": ProjectStatus, "priority": Priority}

    def active(self) -> list[Project]:
        """Projects that are not archived."""
        return self.query(not_equal={"status": "archived"}, order_by="name")

    def archive(self, project_id: str) -> Project:
        return self.update(project_id, status="archived")

    def before_create(self, session: Session, record: Project) -> None:
        record.team = self._resolve_team(session, record.team)
        if record.last_updated is None:
            record.last_updated = self._store.clock.now()
        record.maintenance_status = calculate_maintenance_status(
            record.last_updated, self._store.clock.now()
        )

    def before_update(self, session: Session, record: Project, fields: dict[str, Any]) -> None:
        if "team" in fields and fields["team"] != record.team:
            fields["team"] = self._resolve_team(session, fields["team"])
        if "last_updated" in fields:
            fields["maintenance_status"] = calculate_maintenance_status(
                fields["last_updated"], self._store.clock.now()
            )

    def _resolve_team(self, session: Session, team_name: str) -> str:
        """Return the canonical name of an existing, non-archived team.

        Raises:
            ReferentialError: If no such team exists.
        """
        team = self._store.teams.find_by_name(team_name or "", session)
        if team is None:
            raise ReferentialError(f"Team does not exist: {team_name!r}")
        if team.status == "archived":
            raise ReferentialError(f"Team is archived: {team.name}")
        return team.name


class _ProjectCacheMixin:
    """Copies the project's current name and team onto new records."""

    def _cache_project_fields(self, session: Session, record: TimeBlock | ActiveTimer) -> None:
        if not record.project_id or record.project_name:
            return
        project = session.get(Project, record.project_id)
        if project is None:
            raise ReferentialError(f"Project does not exist: {record.project_id}")
        record.project_name = project.name
        record.project_team = project.team


class TimeBlockRepository(_ProjectCacheMixin, Repository[TimeBlock]):
    model = TimeBlock
    name = "time_blocks"
    choices = {"status": TimeBlockStatus}

    def before_create(self, session: Session, record: TimeBlock) -> None:
        self._cache_project_fields(session, record)

    def before_update(self, session: Session, record: TimeBlock, fields: dict[str, Any]) -> None:
        if record.status == "completed":
            raise ImmutableRecordError(f"Time block {record.id} is completed")

    def finalize(self, block_id: str) -> TimeBlock:
        """Complete an ``active`` block created outside the timer engine."""
        block = self.require(block_id)
        end_time = self._store.clock.now()
        duration = int((end_time - ensure_utc(block.start_time)).total_seconds() // 60)
        return self.update(block_id, end_time=end_time, duration=duration, status="completed")


class ActiveTimerRepository(_ProjectCacheMixin, Repository[ActiveTimer]):
    model = ActiveTimer
    name = "active_timers"
    choices = {"status": TimerStatus}

    def before_create(self, session: Session, record: ActiveTimer) -> None:
        self._cache_project_fields(session, record)


class PreferenceRepository(Repository[Preference]):
    model = Preference
    name = "preferences"
    key_field = "key"

    def get_value(self, key: str, default: Any = None) -> Any:
        pref = self.get(key)
        return pref.value if pref is not None else default

    def set_value(self, key: str, value: Any) -> None:
        """Insert or replace a preference."""
        with self._store.session() as session:
            pref = session.get(Preference, key)
            if pref is None:
                pref = Preference(key=key, value=value)
            else:
                pref.value = value
            session.add(pref)
            session.commit()
        self._store.notify(self.name)

    def remove(self, key: str) -> bool:
        with self._store.session() as session:
            pref = session.get(Preference, key)
            if pref is None:
                return False
            session.delete(pref)
            session.commit()
        self._store.notify(self.name)
        return True


class WeeklySummaryRepository(Repository[WeeklySummary]):
    model = WeeklySummary
    name = "weekly_summaries"

    def before_update(self, session: Session, record: WeeklySummary, fields: dict[str, Any]) -> None:
        raise ImmutableRecordError(f"Weekly summary {record.id} is archived")
