"""Tests for backup wire conversion on the record models."""

from datetime import datetime, timezone

from techwriter.models import Preference, Project, TimeBlock, WeeklySummary


def test_from_wire_maps_camel_case_and_keeps_unknown_fields():
    project = Project.from_wire({
        "id": 7,
        "name": "SDK Reference",
        "team": "Team Beta",
        "contentType": "reference",
        "lastUpdated": "2025-01-02T10:00:00.000Z",
        "legacyOwner": "kim",
    })

    assert project.id == "7"
    assert project.content_type == "reference"
    assert project.last_updated.year == 2025
    assert project.extra == {"legacyOwner": "kim"}


def test_to_wire_emits_camel_case_and_restores_extra():
    block = TimeBlock(
        id="b1",
        type="writing",
        project_id="p1",
        project_name="SDK Reference",
        date=datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc),
        start_time=datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc),
        duration=30,
        extra={"mood": "focused"},
    )

    wire = block.to_wire()
    assert wire["projectId"] == "p1"
    assert wire["projectName"] == "SDK Reference"
    assert wire["startTime"] == "2025-01-06T09:00:00+00:00"
    assert wire["mood"] == "focused"
    assert "extra" not in wire


def test_integer_project_reference_is_coerced():
    block = TimeBlock.from_wire({
        "id": 3,
        "type": "deep-work",
        "projectId": 12,
        "date": "2024-11-04T09:00:00Z",
        "startTime": "2024-11-04T09:00:00Z",
    })
    assert block.project_id == "12"


def test_weekly_summary_payload_is_flattened():
    summary = WeeklySummary.from_wire({
        "id": "w1",
        "weekStart": "2025-01-06T00:00:00Z",
        "weekEnd": "2025-01-12T23:59:59Z",
        "createdAt": "2025-01-12T18:00:00Z",
        "completed": ["Auth guide"],
    })
    assert summary.payload == {"completed": ["Auth guide"]}
    assert summary.to_wire()["completed"] == ["Auth guide"]


def test_preference_drops_unknown_fields():
    pref = Preference.from_wire({"id": 4, "key": "theme", "value": "dark"})
    assert pref.to_wire() == {"key": "theme", "value": "dark"}
