"""Query descriptors for collection reads and live subscriptions."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field
from sqlmodel import select

from techwriter.models.base import ensure_utc


class Query(BaseModel):
    """Filter, order and page over one collection.

    Field names are the record's attribute names (``start_time``,
    ``project_team``...). ``ranges`` bounds are inclusive and either side
    may be ``None``.

    Usage:
        Query(collection="time_blocks",
              ranges={"date": (monday, sunday)},
              order_by="start_time", descending=True, limit=20)
    """

    collection: str
    where: dict[str, Any] = Field(default_factory=dict)
    not_equal: dict[str, Any] = Field(default_factory=dict)
    ranges: dict[str, tuple[Any, Any]] = Field(default_factory=dict)
    order_by: str | None = None
    descending: bool = False
    offset: int = 0
    limit: int | None = None


def _bind(value: Any) -> Any:
    # Timestamps are stored as naive UTC
    if isinstance(value, datetime):
        return ensure_utc(value)
    return value


def build_statement(model, query: Query):
    """Translate a Query into a SELECT over ``model``.

    Raises:
        ValueError: If the query names a field the model does not have.
    """

    def column(name: str):
        if name not in model.model_fields:
            raise ValueError(f"Unknown field for {model.__name__}: {name}")
        return getattr(model, name)

    stmt = select(model)
    for name, value in query.where.items():
        stmt = stmt.where(column(name) == _bind(value))
    for name, value in query.not_equal.items():
        stmt = stmt.where(column(name) != _bind(value))
    for name, (low, high) in query.ranges.items():
        if low is not None:
            stmt = stmt.where(column(name) >= _bind(low))
        if high is not None:
            stmt = stmt.where(column(name) <= _bind(high))

    if query.order_by:
        order_col = column(query.order_by)
        stmt = stmt.order_by(order_col.desc() if query.descending else order_col)
    if query.offset:
        stmt = stmt.offset(query.offset)
    if query.limit is not None:
        stmt = stmt.limit(query.limit)
    return stmt
