"""Persistence layer: SQLite connection helpers, schema and keyed stores."""
from .migrate import migrate
from .repository import EntityStore, ScanRow, as_utc, new_id, utcnow
from .sqlite import get_conn

__all__ = ["EntityStore", "ScanRow", "as_utc", "get_conn", "migrate", "new_id", "utcnow"]
