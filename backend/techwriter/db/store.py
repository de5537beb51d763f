"""Store — the handle every caller holds onto instead of a global database.

Owns the engine, the clock and the six collection repositories, and
fans out change notifications to live-query subscribers.

Usage:
    store = open_store("sqlite:///data/techwriter.db")
    team_id = store.teams.create(name="Team Delta")
    unsubscribe = store.subscribe(Query(collection="projects"), render_projects)
    ...
    store.close()
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.engine import Engine
from sqlmodel import Session

from techwriter.clock import Clock, SystemClock
from techwriter.config import Settings
from techwriter.config import settings as default_settings
from techwriter.db.data_migrations import run_data_migrations
from techwriter.db.database import current_revision, open_engine
from techwriter.db.query import Query
from techwriter.db.repositories import (
    ActiveTimerRepository,
    PreferenceRepository,
    ProjectRepository,
    Repository,
    TeamRepository,
    TimeBlockRepository,
    WeeklySummaryRepository,
)

logger = logging.getLogger(__name__)

# Children before parents
CLEAR_ORDER: tuple[str, ...] = (
    "active_timers",
    "time_blocks",
    "weekly_summaries",
    "preferences",
    "projects",
    "teams",
)

# Parents before children
LOAD_ORDER: tuple[str, ...] = (
    "teams",
    "projects",
    "time_blocks",
    "active_timers",
    "weekly_summaries",
    "preferences",
)

Subscriber = Callable[[list[Any]], None]


class Store:
    """Handle to one opened TechWriter database."""

    def __init__(self, engine: Engine, clock: Clock | None = None) -> None:
        self.engine = engine
        self.clock: Clock = clock or SystemClock()
        self.teams = TeamRepository(self)
        self.projects = ProjectRepository(self)
        self.time_blocks = TimeBlockRepository(self)
        self.active_timers = ActiveTimerRepository(self)
        self.preferences = PreferenceRepository(self)
        self.weekly_summaries = WeeklySummaryRepository(self)
        self._subscribers: dict[int, tuple[Query, Subscriber]] = {}
        self._next_token = 0
        self._closed = False

    # ------------------------------------------------------------------
    # Sessions and collections
    # ------------------------------------------------------------------

    def session(self) -> Session:
        """A new session whose objects stay readable after commit."""
        return Session(self.engine, expire_on_commit=False)

    def collection(self, name: str) -> Repository:
        if name not in CLEAR_ORDER:
            raise KeyError(f"Unknown collection: {name}")
        return getattr(self, name)

    def counts(self) -> dict[str, int]:
        return {name: self.collection(name).count() for name in LOAD_ORDER}

    def schema_version(self) -> int:
        """The applied schema revision as an integer (0 for an empty database)."""
        revision = current_revision(self.engine)
        return int(revision) if revision else 0

    # ------------------------------------------------------------------
    # Live queries
    # ------------------------------------------------------------------

    def subscribe(self, query: Query, callback: Subscriber) -> Callable[[], None]:
        """Run ``query`` now and again after every committed write to its collection.

        Returns a callable that cancels the subscription.
        """
        self.collection(query.collection)
        token = self._next_token
        self._next_token += 1
        self._subscribers[token] = (query, callback)
        self._deliver(query, callback)

        def unsubscribe() -> None:
            self._subscribers.pop(token, None)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def notify(self, *collections: str) -> None:
        """Re-run subscribed queries over the given collections."""
        touched = set(collections)
        for query, callback in list(self._subscribers.values()):
            if query.collection in touched:
                self._deliver(query, callback)

    def _deliver(self, query: Query, callback: Subscriber) -> None:
        try:
            rows = self.collection(query.collection).query(query)
            callback(rows)
        except Exception as e:
            logger.warning("Subscriber for %s failed: %s", query.collection, e, exc_info=True)

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------

    def clear_all_in(self, session: Session) -> dict[str, int]:
        """Delete every record of every collection, children first, without committing."""
        return {name: self.collection(name).clear_in(session) for name in CLEAR_ORDER}

    def reset_all(self, confirm: Callable[[str], bool]) -> bool:
        """Wipe all six collections after an explicit confirmation.

        Returns False (and changes nothing) if the confirmation is declined.
        """
        if not confirm("This will permanently delete all your time blocks, projects, and settings. "
                       "Are you absolutely sure?"):
            return False

        with self.session() as session:
            removed = self.clear_all_in(session)
            session.commit()

        logger.info("All data cleared: %s", removed)
        self.notify(*CLEAR_ORDER)
        return True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        if self._closed:
            return
        self._subscribers.clear()
        self.engine.dispose()
        self._closed = True

    def __enter__(self) -> Store:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def open_store(
    database_url: str | None = None,
    *,
    clock: Clock | None = None,
    config: Settings | None = None,
) -> Store:
    """Open (creating or upgrading as needed) the database and return its Store.

    Raises:
        StorageUnavailable: If the database cannot be opened.
    """
    config = config or default_settings
    engine = open_engine(database_url or config.database_url)
    store = Store(engine, clock=clock)
    if config.run_data_migrations_on_open:
        run_data_migrations(store)
    return store
