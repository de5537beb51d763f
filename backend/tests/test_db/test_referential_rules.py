"""Tests for cross-collection write rules: teams, projects, cached project fields."""

from datetime import datetime, timedelta

import pytest

from techwriter.exceptions import DuplicateNameError, ReferentialError


def test_project_requires_existing_team(store, team):
    with pytest.raises(ReferentialError):
        store.projects.create(name="Orphan", team="Nonexistent")

    project_id = store.projects.create(name="Guide", team="Team Alpha")
    assert store.projects.require(project_id).team == "Team Alpha"


def test_project_team_match_is_case_insensitive(store, team):
    project_id = store.projects.create(name="Guide", team="team alpha")
    assert store.projects.require(project_id).team == "Team Alpha"


def test_project_rejects_archived_team(store, team):
    store.teams.update(team.id, status="archived")
    with pytest.raises(ReferentialError):
        store.projects.create(name="Guide", team=team.name)


def test_project_update_revalidates_team(store, project):
    with pytest.raises(ReferentialError):
        store.projects.update(project.id, team="Ghost Team")


def test_maintenance_status_cached_on_write(store, team, clock):
    project_id = store.projects.create(
        name="Old Docs", team=team.name, last_updated=clock.now() - timedelta(days=200),
    )
    assert store.projects.require(project_id).maintenance_status == "outdated"

    store.projects.update(project_id, last_updated=clock.now())
    assert store.projects.require(project_id).maintenance_status == "current"


def test_project_update_accepts_iso_strings(store, project):
    store.projects.update(
        project.id, last_updated="2024-01-01T00:00:00Z", due_date="2025-02-01T00:00:00Z",
    )

    updated = store.projects.require(project.id)
    assert updated.last_updated.replace(tzinfo=None) == datetime(2024, 1, 1)
    assert updated.due_date.replace(tzinfo=None) == datetime(2025, 2, 1)
    assert updated.maintenance_status == "critical"


def test_project_rejects_unknown_status_and_priority(store, team):
    with pytest.raises(ValueError, match="status"):
        store.projects.create(name="Guide", team=team.name, status="bogus")
    with pytest.raises(ValueError, match="priority"):
        store.projects.create(name="Guide", team=team.name, priority="urgent")
    assert store.projects.count() == 0


def test_status_updates_are_checked(store, project, team):
    with pytest.raises(ValueError):
        store.teams.update(team.id, status="frozen")
    with pytest.raises(ValueError):
        store.projects.update(project.id, priority="urgent")

    assert store.teams.require(team.id).status == "active"
    assert store.projects.require(project.id).priority == "medium"
    assert store.projects.update(project.id, status="review").status == "review"


def test_project_defaults_last_updated_to_now(store, project, clock):
    assert project.last_updated.replace(tzinfo=None) == clock.now().replace(tzinfo=None)
    assert project.maintenance_status == "current"


def test_team_names_are_unique_case_insensitively(store, team):
    with pytest.raises(DuplicateNameError):
        store.teams.create(name="TEAM ALPHA")
    with pytest.raises(ValueError):
        store.teams.create(name="   ")


def test_team_unknown_color_falls_back(store):
    team_id = store.teams.create(name="Team Mauve", color="mauve")
    assert store.teams.require(team_id).color == "blue"


def test_team_rename_carries_projects_along(store, project, team):
    store.teams.update(team.id, name="Platform Docs")
    assert store.projects.require(project.id).team == "Platform Docs"


def test_team_rename_cannot_collide(store, team):
    store.teams.create(name="Team Beta")
    with pytest.raises(DuplicateNameError):
        store.teams.update(team.id, name="team beta")


def test_cannot_archive_team_with_active_projects(store, project, team):
    with pytest.raises(ReferentialError, match="1 active projects"):
        store.teams.update(team.id, status="archived")

    store.projects.archive(project.id)
    assert store.teams.update(team.id, status="archived").status == "archived"


def test_cannot_delete_referenced_team(store, project, team):
    with pytest.raises(ReferentialError):
        store.teams.delete(team.id)


def test_time_block_caches_project_fields(store, project):
    block_id = store.time_blocks.create(type="writing", project_id=project.id, duration=15)
    block = store.time_blocks.require(block_id)
    assert block.project_name == "Auth API Guide"
    assert block.project_team == "Team Alpha"


def test_project_rename_does_not_rewrite_history(store, project):
    block_id = store.time_blocks.create(type="writing", project_id=project.id, duration=15)
    store.projects.update(project.id, name="Auth Guide v2")

    assert store.time_blocks.require(block_id).project_name == "Auth API Guide"


def test_time_block_with_unknown_project_rejected(store):
    with pytest.raises(ReferentialError):
        store.time_blocks.create(type="writing", project_id="nope", duration=15)


def test_time_block_without_project_is_allowed(store):
    block_id = store.time_blocks.create(type="meeting", duration=30)
    assert store.time_blocks.require(block_id).project_name is None


def test_time_record_statuses_are_checked(store, project):
    with pytest.raises(ValueError, match="status"):
        store.time_blocks.create(type="meeting", duration=30, status="done")
    with pytest.raises(ValueError, match="status"):
        store.active_timers.create(type="writing", project_id=project.id, status="running")
