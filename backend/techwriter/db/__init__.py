"""Persistence layer: engine setup, migrations, repositories and the Store handle."""

from techwriter.db.query import Query
from techwriter.db.store import Store, open_store

__all__ = ["Query", "Store", "open_store"]
