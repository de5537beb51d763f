"""Tests for Store: collection CRUD, queries, subscriptions, reset."""

from datetime import datetime, timedelta, timezone

import pytest

from techwriter.db import Query
from techwriter.exceptions import ImmutableRecordError, NotFoundError


def test_create_assigns_uuid_and_stamps(store, clock):
    team_id = store.teams.create(name="Team Delta")
    team = store.teams.require(team_id)

    assert len(team_id) == 36
    assert team.created_at.replace(tzinfo=timezone.utc) == clock.now()
    assert team.updated_at.replace(tzinfo=timezone.utc) == clock.now()


def test_update_stamps_updated_at(store, team, clock):
    clock.advance(hours=2)
    updated = store.teams.update(team.id, lead="Sam")

    assert updated.lead == "Sam"
    assert updated.updated_at == clock.now()
    assert store.teams.require(team.id).lead == "Sam"


def test_update_missing_id_raises(store):
    with pytest.raises(NotFoundError) as exc:
        store.projects.update("missing", name="x")
    assert exc.value.collection == "projects"


def test_delete_missing_id_raises(store):
    with pytest.raises(NotFoundError):
        store.time_blocks.delete("missing")


def test_update_rejects_unknown_fields(store, team):
    with pytest.raises(ValueError):
        store.teams.update(team.id, nickname="A")


def test_query_filters_orders_and_pages(store, project, clock):
    base = clock.now()
    for i in range(5):
        store.time_blocks.create(
            type="writing",
            project_id=project.id,
            date=base + timedelta(days=i),
            start_time=base + timedelta(days=i),
            duration=10 * (i + 1),
        )

    rows = store.time_blocks.query(
        ranges={"date": (base + timedelta(days=1), base + timedelta(days=3))},
        order_by="start_time",
        descending=True,
    )
    assert [r.duration for r in rows] == [40, 30, 20]

    page = store.time_blocks.query(order_by="duration", offset=1, limit=2)
    assert [r.duration for r in page] == [20, 30]

    open_ended = store.time_blocks.query(ranges={"date": (base + timedelta(days=4), None)})
    assert len(open_ended) == 1


def test_query_not_equal_and_where(store, team):
    store.projects.create(name="A", team=team.name, status="published")
    store.projects.create(name="B", team=team.name, status="archived")

    assert [p.name for p in store.projects.active()] == ["A"]
    assert store.projects.query(where={"status": "archived"})[0].name == "B"


def test_query_unknown_field_raises(store):
    with pytest.raises(ValueError):
        store.projects.query(where={"colour": "red"})


def test_subscribe_delivers_now_and_after_writes(store, team):
    seen = []
    unsubscribe = store.subscribe(Query(collection="projects", order_by="name"), seen.append)
    assert seen == [[]]

    store.projects.create(name="Release Notes 3.2", team=team.name)
    assert [p.name for p in seen[-1]] == ["Release Notes 3.2"]

    unsubscribe()
    store.projects.create(name="Another", team=team.name)
    assert len(seen) == 2
    assert store.subscriber_count == 0


def test_subscribers_of_other_collections_are_not_called(store, team):
    calls = []
    store.subscribe(Query(collection="time_blocks"), calls.append)
    store.projects.create(name="Docs", team=team.name)
    assert len(calls) == 1


def test_failing_subscriber_does_not_abort_write(store, team):
    def broken(rows):
        if rows:
            raise RuntimeError("render failed")

    store.subscribe(Query(collection="projects"), broken)
    project_id = store.projects.create(name="Docs", team=team.name)
    assert store.projects.get(project_id) is not None


def test_completed_time_block_is_immutable(store, project):
    block_id = store.time_blocks.create(type="writing", project_id=project.id, duration=5)
    with pytest.raises(ImmutableRecordError):
        store.time_blocks.update(block_id, description="edited")


def test_finalize_active_block(store, project, clock):
    block_id = store.time_blocks.create(
        type="writing", project_id=project.id, start_time=clock.now(), status="active",
    )
    clock.advance(minutes=42, seconds=59)
    block = store.time_blocks.finalize(block_id)

    assert block.status == "completed"
    assert block.duration == 42


def test_weekly_summary_is_immutable(store):
    summary_id = store.weekly_summaries.create(
        week_start=datetime(2025, 1, 6, tzinfo=timezone.utc),
        week_end=datetime(2025, 1, 12, 23, 59, tzinfo=timezone.utc),
        payload={"completed": ["Auth guide"]},
    )
    with pytest.raises(ImmutableRecordError):
        store.weekly_summaries.update(summary_id, payload={})


def test_preferences_upsert(store):
    assert store.preferences.get_value("theme", "light") == "light"
    store.preferences.set_value("theme", "dark")
    store.preferences.set_value("theme", "solarized")

    assert store.preferences.get_value("theme") == "solarized"
    assert store.preferences.count() == 1
    assert store.preferences.remove("theme") is True
    assert store.preferences.remove("theme") is False


def test_reset_all_requires_confirmation(store, project, confirmer):
    store.preferences.set_value("theme", "dark")

    declined = confirmer(False)
    assert store.reset_all(declined) is False
    assert store.projects.count() == 1
    assert len(declined.prompts) == 1

    assert store.reset_all(confirmer(True)) is True
    assert all(count == 0 for count in store.counts().values())


def test_unknown_collection(store):
    with pytest.raises(KeyError):
        store.collection("widgets")


def test_close_is_idempotent(store):
    store.close()
    store.close()
