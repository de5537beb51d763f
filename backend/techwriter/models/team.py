"""Team model."""

from __future__ import annotations

from datetime import datetime

from sqlmodel import JSON, Column, SQLModel
from sqlmodel import Field as SQLField

from techwriter.models.base import WireMixin, new_id, utcnow


class Team(WireMixin, SQLModel, table=True):
    """A documentation team. Projects reference teams by name."""

    __tablename__ = "team"

    id: str = SQLField(default_factory=new_id, primary_key=True)
    name: str = SQLField(index=True)  # unique, case-insensitive (enforced on write)
    description: str = ""
    lead: str = ""
    status: str = SQLField(default="active", index=True)  # TeamStatus
    color: str = "blue"
    created_at: datetime = SQLField(default_factory=utcnow)
    updated_at: datetime = SQLField(default_factory=utcnow)
    extra: dict = SQLField(default_factory=dict, sa_column=Column(JSON))
