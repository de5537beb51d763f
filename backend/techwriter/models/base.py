"""Shared helpers for record models: timestamps and backup wire conversion.

Records are stored with snake_case columns. Backup documents use the
camelCase names of the earlier browser-based store, so every table model can
convert itself to and from that wire shape. Fields the model does not
know about are kept in an overflow JSON column (``extra`` by default)
and written back out on export.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from pydantic.alias_generators import to_camel, to_snake

# Columns holding references to other records' ids
ID_FIELDS = ("id", "project_id")


def new_id() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on the way back)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class WireMixin:
    """Backup-format conversion for SQLModel tables."""

    # Name of the overflow JSON column, or None
    __wire_extra__ = "extra"

    @classmethod
    def from_wire(cls, data: dict[str, Any]):
        """Build a record from a camelCase backup dict.

        Integer ids from older backups are coerced to strings, and so are
        foreign keys, so references between imported records still line up.
        """
        fields = cls.model_fields  # type: ignore[attr-defined]
        extra_field = cls.__wire_extra__
        known: dict[str, Any] = {}
        overflow: dict[str, Any] = {}
        for key, value in data.items():
            name = to_snake(key)
            if name in fields and name != extra_field:
                known[name] = value
            else:
                overflow[key] = value

        for name in ID_FIELDS:
            if name in known and known[name] is not None:
                known[name] = str(known[name])
        if extra_field:
            known[extra_field] = overflow
        return cls.model_validate(known)  # type: ignore[attr-defined]

    def to_wire(self) -> dict[str, Any]:
        """Serialize to a camelCase dict with ISO-8601 timestamps."""
        extra_field = self.__wire_extra__
        out: dict[str, Any] = {}
        for name in type(self).model_fields:  # type: ignore[attr-defined]
            if name == extra_field:
                continue
            value = getattr(self, name)
            if isinstance(value, datetime):
                value = ensure_utc(value).isoformat()
            out[to_camel(name)] = value
        if extra_field:
            for key, value in (getattr(self, extra_field) or {}).items():
                out.setdefault(key, value)
        return out


def normalize_timestamps(record) -> None:
    """Convert every datetime attribute of ``record`` to UTC in place."""
    for name in type(record).model_fields:
        value = getattr(record, name)
        if isinstance(value, datetime):
            setattr(record, name, ensure_utc(value))
