"""Time tracking models: completed time blocks and in-flight timers.

``project_name`` / ``project_team`` are copies of the project's fields
taken when the record is created. Renaming a project later does not
touch them.
"""

from __future__ import annotations

from datetime import datetime

from sqlmodel import JSON, Column, SQLModel
from sqlmodel import Field as SQLField

from techwriter.models.base import WireMixin, new_id, utcnow


class TimeBlock(WireMixin, SQLModel, table=True):
    """A record of time spent on one task. Immutable once completed."""

    __tablename__ = "time_block"

    id: str = SQLField(default_factory=new_id, primary_key=True)
    type: str = SQLField(index=True)  # work phase (or legacy block type)
    content_type: str = SQLField(default="other", index=True)
    project_id: str | None = SQLField(default=None, index=True)
    project_name: str | None = None
    project_team: str | None = SQLField(default=None, index=True)
    description: str = ""
    date: datetime = SQLField(default_factory=utcnow, index=True)
    start_time: datetime = SQLField(default_factory=utcnow, index=True)
    end_time: datetime | None = SQLField(default=None, index=True)
    duration: int | None = None  # minutes, floor-rounded
    status: str = "completed"  # "active" | "completed"
    created_at: datetime = SQLField(default_factory=utcnow)
    extra: dict = SQLField(default_factory=dict, sa_column=Column(JSON))


class ActiveTimer(WireMixin, SQLModel, table=True):
    """A running or paused timer. Removed when stopped."""

    __tablename__ = "active_timer"

    id: str = SQLField(default_factory=new_id, primary_key=True)
    type: str = SQLField(index=True)
    project_id: str | None = SQLField(default=None, index=True)
    project_name: str | None = None
    project_team: str | None = None
    description: str = ""
    content_type: str = "other"
    start_time: datetime = SQLField(default_factory=utcnow, index=True)
    status: str = SQLField(default="active", index=True)  # "active" | "paused"
    created_at: datetime = SQLField(default_factory=utcnow)
    extra: dict = SQLField(default_factory=dict, sa_column=Column(JSON))
