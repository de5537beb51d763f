"""Fixed catalogs: content types, work phases, document versions, maintenance statuses.

Lookups fall back to a default entry rather than raising, so records
carrying values from older releases still render.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel

TeamStatus = Literal["active", "archived"]
ProjectStatus = Literal["planning", "in-progress", "review", "published", "archived"]
Priority = Literal["high", "medium", "low"]
TimerStatus = Literal["active", "paused"]
TimeBlockStatus = Literal["active", "completed"]
MaintenanceStatus = Literal["current", "stale", "outdated", "critical", "deprecated"]


class CatalogEntry(BaseModel):
    value: str
    label: str
    color: str = "gray"
    days_threshold: int | None = None


CONTENT_TYPES: list[CatalogEntry] = [
    CatalogEntry(value="api-docs", label="API Documentation", color="blue"),
    CatalogEntry(value="user-guides", label="User Guides", color="green"),
    CatalogEntry(value="release-notes", label="Release Notes", color="purple"),
    CatalogEntry(value="tutorials", label="Tutorials", color="yellow"),
    CatalogEntry(value="technical-specs", label="Technical Specifications", color="gray"),
    CatalogEntry(value="reference", label="Reference Documentation", color="indigo"),
    CatalogEntry(value="troubleshooting", label="Troubleshooting Guides", color="red"),
    CatalogEntry(value="onboarding", label="Onboarding Materials", color="teal"),
    CatalogEntry(value="other", label="Other Documentation", color="gray"),
]

WORK_PHASES: list[CatalogEntry] = [
    CatalogEntry(value="research", label="Research & Discovery", color="blue"),
    CatalogEntry(value="writing", label="Writing & Creation", color="green"),
    CatalogEntry(value="review-editing", label="Review & Editing", color="yellow"),
    CatalogEntry(value="version-updates", label="Version Updates", color="purple"),
    CatalogEntry(value="publishing", label="Publishing & Distribution", color="indigo"),
    CatalogEntry(value="maintenance", label="Maintenance & Updates", color="orange"),
]

DOCUMENT_VERSIONS: list[CatalogEntry] = [
    CatalogEntry(value="draft-1", label="Draft v1 (Initial)", color="gray"),
    CatalogEntry(value="draft-2", label="Draft v2 (Technical Review)", color="blue"),
    CatalogEntry(value="draft-3", label="Draft v3 (Stakeholder Review)", color="yellow"),
    CatalogEntry(value="draft-final", label="Draft (Final Edits)", color="orange"),
    CatalogEntry(value="published-1-0", label="Published v1.0", color="green"),
    CatalogEntry(value="update-minor", label="Update in Progress (Minor)", color="purple"),
    CatalogEntry(value="update-major", label="Major Revision in Progress", color="red"),
    CatalogEntry(value="deprecated", label="Deprecated", color="gray"),
]

MAINTENANCE_STATUSES: list[CatalogEntry] = [
    CatalogEntry(value="current", label="Current (< 3 months)", color="green", days_threshold=90),
    CatalogEntry(value="stale", label="Stale (3-6 months)", color="yellow", days_threshold=180),
    CatalogEntry(value="outdated", label="Outdated (6+ months)", color="orange", days_threshold=365),
    CatalogEntry(value="critical", label="Critical - Needs Urgent Update", color="red"),
    CatalogEntry(value="deprecated", label="Deprecated", color="gray"),
]

# Time-block types used before work phases existed
LEGACY_BLOCK_TYPES: dict[str, str] = {
    "deep-work": "Deep Work",
    "shallow-work": "Shallow Work",
    "meeting": "Meeting",
    "planning": "Planning",
    "break": "Break",
}

WORK_PHASE_CATEGORIES: dict[str, str] = {
    "research": "deepWork",
    "writing": "deepWork",
    "review-editing": "deepWork",
    "version-updates": "shallowWork",
    "publishing": "shallowWork",
    "maintenance": "shallowWork",
    "meeting": "meetings",
    "planning": "planning",
    # legacy block types
    "deep-work": "deepWork",
    "shallow-work": "shallowWork",
}

TIME_CATEGORY_LABELS: dict[str, str] = {
    "deepWork": "Deep Work",
    "shallowWork": "Shallow Work",
    "meetings": "Meetings",
    "planning": "Planning",
    "other": "Other",
}

TEAM_COLORS: tuple[str, ...] = (
    "blue", "green", "purple", "yellow", "red", "indigo", "pink", "teal",
)

DEFAULT_TEAMS: tuple[str, ...] = ("Team Alpha", "Team Beta", "Team Gamma", "Other")

UNKNOWN_PROJECT = "Unknown Project"


def _lookup(entries: list[CatalogEntry], value: str | None, default: CatalogEntry) -> CatalogEntry:
    for entry in entries:
        if entry.value == value:
            return entry
    return default


def get_content_type(value: str | None) -> CatalogEntry:
    return _lookup(CONTENT_TYPES, value, CONTENT_TYPES[-1])


def get_work_phase(value: str | None) -> CatalogEntry:
    return _lookup(WORK_PHASES, value, WORK_PHASES[0])


def get_document_version(value: str | None) -> CatalogEntry:
    return _lookup(DOCUMENT_VERSIONS, value, DOCUMENT_VERSIONS[0])


def get_maintenance_status(value: str | None) -> CatalogEntry:
    return _lookup(MAINTENANCE_STATUSES, value, MAINTENANCE_STATUSES[0])


def map_work_phase_to_category(work_phase: str | None) -> str:
    return WORK_PHASE_CATEGORIES.get(work_phase or "", "other")


def get_time_category_label(category: str) -> str:
    return TIME_CATEGORY_LABELS.get(category, "Other")


def calculate_maintenance_status(
    last_updated: datetime | None,
    now: datetime | None = None,
) -> str:
    """Classify documentation staleness from the age of ``last_updated``.

    Age is counted in whole days: under 90 is ``current``, under 180
    ``stale``, under 365 ``outdated``, anything older (or a missing date)
    ``critical``.
    """
    if last_updated is None:
        return "critical"

    now = now or datetime.now(timezone.utc)
    if last_updated.tzinfo is None:
        last_updated = last_updated.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    days = (now - last_updated).days
    for entry in MAINTENANCE_STATUSES:
        if entry.days_threshold is not None and days < entry.days_threshold:
            return entry.value
    return "critical"
