"""Weekly summary archive."""

from __future__ import annotations

from datetime import datetime

from sqlmodel import JSON, Column, SQLModel
from sqlmodel import Field as SQLField

from techwriter.models.base import WireMixin, new_id, utcnow


class WeeklySummary(WireMixin, SQLModel, table=True):
    """Snapshot of one week's report. Not mutated after creation.

    The free-form body lives in ``payload`` and is flattened into the
    record in backup files.
    """

    __tablename__ = "weekly_summary"
    __wire_extra__ = "payload"

    id: str = SQLField(default_factory=new_id, primary_key=True)
    week_start: datetime = SQLField(index=True)
    week_end: datetime = SQLField(index=True)
    created_at: datetime = SQLField(default_factory=utcnow, index=True)
    payload: dict = SQLField(default_factory=dict, sa_column=Column(JSON))
