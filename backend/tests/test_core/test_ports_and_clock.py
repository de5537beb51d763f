"""Tests for the notification ports, clocks and in-memory stores."""

import logging
from datetime import datetime, timezone

from techwriter.clock import ManualClock, SystemClock
from techwriter.db import open_store
from techwriter.notifications import LoggingNotifier, approve_all, deny_all
from techwriter.reports.weekly import email_subject, week_range


def test_logging_notifier_levels(caplog):
    notifier = LoggingNotifier()
    with caplog.at_level(logging.INFO, logger="techwriter.notifications"):
        notifier.notify("success", "Timer paused")
        notifier.notify("error", "Failed to stop timer")

    levels = [(r.levelname, r.getMessage()) for r in caplog.records]
    assert ("INFO", "Timer paused") in levels
    assert ("ERROR", "Failed to stop timer") in levels


def test_default_confirmers():
    assert deny_all("Delete everything?") is False
    assert approve_all("Delete everything?") is True


def test_manual_clock_set_and_advance():
    clock = ManualClock()
    clock.set(datetime(2025, 3, 3, 8, 0))
    assert clock.now().tzinfo == timezone.utc
    assert clock.advance(minutes=90) == datetime(2025, 3, 3, 9, 30, tzinfo=timezone.utc)


def test_system_clock_is_utc():
    assert SystemClock().now().tzinfo == timezone.utc


def test_in_memory_store(config, clock):
    with open_store("sqlite:///:memory:", config=config, clock=clock) as store:
        team_id = store.teams.create(name="Team Delta")
        store.teams.create(name="Team Old", status="archived")

        assert store.schema_version() == 3
        assert [t.id for t in store.teams.active()] == [team_id]


def test_email_subject():
    start, end = week_range(datetime(2025, 1, 8, tzinfo=timezone.utc))
    assert email_subject(start, end) == "Weekly Summary - Jan 6, 2025 to Jan 12, 2025"
