"""Project model."""

from __future__ import annotations

from datetime import datetime

from sqlmodel import JSON, Column, SQLModel
from sqlmodel import Field as SQLField

from techwriter.models.base import WireMixin, new_id, utcnow


class Project(WireMixin, SQLModel, table=True):
    """A documentation project owned by a team."""

    __tablename__ = "project"

    id: str = SQLField(default_factory=new_id, primary_key=True)
    name: str = SQLField(index=True)
    team: str = SQLField(default="", index=True)  # Team.name
    description: str = ""
    status: str = SQLField(default="planning", index=True)  # ProjectStatus
    priority: str = "medium"  # Priority
    content_type: str = SQLField(default="other", index=True)
    version: str = SQLField(default="draft-1", index=True)
    due_date: datetime | None = None
    last_updated: datetime | None = SQLField(default=None, index=True)
    # Cached from last_updated on write; recompute for display
    maintenance_status: str = SQLField(default="current", index=True)
    created_at: datetime = SQLField(default_factory=utcnow, index=True)
    updated_at: datetime = SQLField(default_factory=utcnow)
    extra: dict = SQLField(default_factory=dict, sa_column=Column(JSON))
