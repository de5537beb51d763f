"""Tests for schema upgrades and the data migrations run at open."""

import pytest
from sqlalchemy import text

from techwriter.db.data_migrations import migrate_teams_data, migrate_time_blocks, run_data_migrations
from techwriter.db.database import apply_migrations, build_engine, current_revision
from techwriter.db.store import Store
from techwriter.exceptions import StorageUnavailable
from techwriter.models.vocabulary import DEFAULT_TEAMS, UNKNOWN_PROJECT

LEGACY_TS = "2024-11-04 09:00:00.000000"


def _legacy_engine(tmp_path):
    """A database still on the first schema revision, holding pre-team data."""
    engine = build_engine(f"sqlite:///{tmp_path / 'legacy.db'}")
    apply_migrations(engine, "0001")
    with engine.begin() as conn:
        conn.execute(text(
            "INSERT INTO project (id, name, team, description, status, priority, created_at, updated_at) "
            "VALUES ('1', 'Install Guide', 'Alpha', '', 'in-progress', 'high', :ts, :ts), "
            "       ('2', 'CLI Reference', 'Beta', '', 'planning', 'low', :ts, :ts)"
        ), {"ts": LEGACY_TS})
        conn.execute(text(
            "INSERT INTO time_block (id, type, project_id, description, date, start_time, duration, status, created_at) "
            "VALUES ('10', 'deep-work', '1', 'draft', :ts, :ts, 50, 'completed', :ts), "
            "       ('11', 'meeting', '99', 'sync', :ts, :ts, 30, 'completed', :ts), "
            "       ('12', 'planning', NULL, 'plan', :ts, :ts, 15, 'completed', :ts)"
        ), {"ts": LEGACY_TS})
    return engine


def test_fresh_store_is_at_latest_schema(store):
    assert store.schema_version() == 3


def test_upgrade_keeps_existing_rows(tmp_path, clock):
    engine = _legacy_engine(tmp_path)
    assert current_revision(engine) == "0001"

    apply_migrations(engine)
    store = Store(engine, clock=clock)
    try:
        assert store.schema_version() == 3
        assert store.projects.count() == 2
        assert store.time_blocks.count() == 3
        assert store.projects.require("1").content_type == "other"
        assert store.time_blocks.require("10").project_name is None
    finally:
        store.close()


def test_migrate_time_blocks_backfills_cached_fields(tmp_path, clock):
    engine = _legacy_engine(tmp_path)
    apply_migrations(engine)
    store = Store(engine, clock=clock)
    try:
        assert migrate_time_blocks(store) == 2

        known = store.time_blocks.require("10")
        assert known.project_name == "Install Guide"
        assert known.project_team == "Alpha"

        orphan = store.time_blocks.require("11")
        assert orphan.project_name == UNKNOWN_PROJECT
        assert orphan.project_team == ""

        assert store.time_blocks.require("12").project_name is None
        assert migrate_time_blocks(store) == 0
    finally:
        store.close()


def test_migrate_teams_data_seeds_defaults_and_orphans(tmp_path, clock):
    engine = _legacy_engine(tmp_path)
    apply_migrations(engine)
    store = Store(engine, clock=clock)
    try:
        created = migrate_teams_data(store)
        names = {t.name for t in store.teams.all()}

        assert created == len(DEFAULT_TEAMS) + 2
        assert names == set(DEFAULT_TEAMS) | {"Alpha", "Beta"}
        assert migrate_teams_data(store) == 0
    finally:
        store.close()


def test_migrate_teams_data_keeps_existing_teams(store):
    store.teams.create(name="Docs Guild")
    assert migrate_teams_data(store) == 0
    assert [t.name for t in store.teams.all()] == ["Docs Guild"]


def test_run_data_migrations_reports_counts(tmp_path, clock):
    engine = _legacy_engine(tmp_path)
    apply_migrations(engine)
    store = Store(engine, clock=clock)
    try:
        assert run_data_migrations(store) == {"teams": 6, "time_blocks": 2}
    finally:
        store.close()


def test_open_store_runs_data_migrations(config, clock):
    from techwriter.db import open_store

    config.run_data_migrations_on_open = True
    with open_store(config=config, clock=clock) as store:
        assert {t.name for t in store.teams.all()} == set(DEFAULT_TEAMS)


def test_unopenable_database_raises_storage_unavailable(tmp_path):
    from techwriter.db import open_store

    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file in the way")
    with pytest.raises(StorageUnavailable):
        open_store(f"sqlite:///{blocker / 'techwriter.db'}")


def test_migrate_time_blocks_treats_empty_project_id_as_none(store):
    block_id = store.time_blocks.create(type="meeting", project_id="", duration=30)

    assert migrate_time_blocks(store) == 0
    assert store.time_blocks.require(block_id).project_name is None
