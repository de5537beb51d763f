"""Key-value preferences (theme, last backup date, ...)."""

from __future__ import annotations

from typing import Any

from sqlmodel import JSON, Column, SQLModel
from sqlmodel import Field as SQLField

from techwriter.models.base import WireMixin

THEME_KEY = "theme"
LAST_BACKUP_KEY = "lastBackupDate"


class Preference(WireMixin, SQLModel, table=True):
    __tablename__ = "preference"
    __wire_extra__ = None

    key: str = SQLField(primary_key=True)
    value: Any = SQLField(default=None, sa_column=Column(JSON))
