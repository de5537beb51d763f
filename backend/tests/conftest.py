"""Shared test fixtures for TechWriter backend tests."""

import os
import sys
from datetime import datetime, timezone

import pytest

# Ensure backend is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from techwriter.clock import ManualClock
from techwriter.config import Settings
from techwriter.db import open_store


class RecordingNotifier:
    """Notifier that keeps every (kind, message) pair."""

    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def notify(self, kind, message):
        self.messages.append((kind, message))

    def kinds(self) -> list[str]:
        return [kind for kind, _ in self.messages]


class ScriptedConfirmer:
    """Confirmer answering from a script of replies, then ``default``."""

    def __init__(self, *answers: bool, default: bool = True):
        self.answers = list(answers)
        self.default = default
        self.prompts: list[str] = []

    def __call__(self, message: str) -> bool:
        self.prompts.append(message)
        if self.answers:
            return self.answers.pop(0)
        return self.default


@pytest.fixture
def clock():
    """Pinned at Monday 2025-01-06 09:00 UTC."""
    return ManualClock(datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def config(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'techwriter.db'}",
        backup_dir=str(tmp_path / "backups"),
        max_backups=3,
        run_data_migrations_on_open=False,
    )


@pytest.fixture
def store(config, clock):
    """Empty store on a temporary SQLite file."""
    s = open_store(config=config, clock=clock)
    yield s
    s.close()


@pytest.fixture
def team(store):
    team_id = store.teams.create(name="Team Alpha", lead="Dana")
    return store.teams.require(team_id)


@pytest.fixture
def project(store, team):
    project_id = store.projects.create(
        name="Auth API Guide",
        team=team.name,
        content_type="api-docs",
        status="in-progress",
    )
    return store.projects.require(project_id)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def confirmer():
    return ScriptedConfirmer
