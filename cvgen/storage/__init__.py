"""SQLite storage for cvgen.

Public API:
- Database: shared aiosqlite connection and schema
"""

from cvgen.storage.database import Database, new_id, normalize_id, parse_datetime, utc_now

__all__ = [
    "Database",
    "new_id",
    "normalize_id",
    "parse_datetime",
    "utc_now",
]
