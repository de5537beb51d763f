"""Tests for dashboard figures."""

from datetime import timedelta

from techwriter.reports import documentation_debt, team_stats, today_stats


def test_today_stats(store, project, clock):
    today = clock.now()
    store.time_blocks.create(type="writing", project_id=project.id, date=today, start_time=today, duration=60)
    store.time_blocks.create(type="meeting", date=today, start_time=today, duration=30)
    store.time_blocks.create(
        type="writing", project_id=project.id, date=today - timedelta(days=1),
        start_time=today - timedelta(days=1), duration=45,
    )

    stats = today_stats(store)

    assert stats.total_minutes == 90
    assert stats.deep_work_minutes == 60
    assert stats.completed_tasks == 2
    assert stats.active_projects == 1


def test_documentation_debt_worst_first(store, team, clock):
    now = clock.now()
    store.projects.create(name="Fresh", team=team.name, last_updated=now - timedelta(days=10))
    store.projects.create(name="Stale", team=team.name, last_updated=now - timedelta(days=100))
    store.projects.create(name="Ancient", team=team.name, last_updated=now - timedelta(days=400))
    store.projects.create(name="Outdated", team=team.name, last_updated=now - timedelta(days=200))
    archived = store.projects.create(name="Gone", team=team.name, last_updated=now - timedelta(days=500))
    store.projects.archive(archived)

    debt = documentation_debt(store)

    assert [d.name for d in debt] == ["Ancient", "Outdated", "Stale"]
    assert [d.maintenance_status for d in debt] == ["critical", "outdated", "stale"]


def test_documentation_debt_recomputes_with_clock(store, team, clock):
    store.projects.create(name="Guide", team=team.name)
    assert documentation_debt(store) == []

    later = clock.now() + timedelta(days=120)
    assert [d.maintenance_status for d in documentation_debt(store, later)] == ["stale"]


def test_team_stats(store, project, team, clock):
    now = clock.now()
    store.teams.create(name="Team Beta")
    store.projects.create(name="Old", team=team.name, status="archived")
    store.time_blocks.create(type="writing", project_id=project.id, start_time=now, duration=40)
    store.time_blocks.create(
        type="writing", project_id=project.id, start_time=now - timedelta(days=45), duration=20,
    )

    stats = {s.name: s for s in team_stats(store)}

    alpha = stats["Team Alpha"]
    assert alpha.total_projects == 2
    assert alpha.active_projects == 1
    assert alpha.total_time == 60
    assert alpha.recent_time == 40
    assert alpha.recent_blocks == 1
    assert stats["Team Beta"].total_time == 0
    assert team_stats(store)[0].name == "Team Alpha"
