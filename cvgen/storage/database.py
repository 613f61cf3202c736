"""SQLite database shared by the cvgen repositories.

This module owns the aiosqlite connection and the schema for master
profiles, generated CVs, cover letters and user credits.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite

CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS master_profiles (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL UNIQUE,
    resume_data TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS generated_cvs (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    name TEXT NOT NULL,
    cv_data TEXT NOT NULL,
    template_id TEXT,
    job_url TEXT,
    job_title TEXT,
    company_name TEXT,
    job_description TEXT,
    match_score INTEGER CHECK (match_score IS NULL OR (match_score BETWEEN 0 AND 100)),
    ai_suggestions TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS cover_letters (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    cv_id TEXT,
    content TEXT NOT NULL,
    job_title TEXT,
    company_name TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS user_credits (
    user_id TEXT PRIMARY KEY,
    free_used INTEGER NOT NULL DEFAULT 0 CHECK (free_used >= 0),
    free_limit INTEGER NOT NULL CHECK (free_limit >= 0),
    paid_credits INTEGER NOT NULL DEFAULT 0 CHECK (paid_credits >= 0),
    total_generations INTEGER NOT NULL DEFAULT 0 CHECK (total_generations >= 0),
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""

CREATE_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS idx_generated_cvs_user ON generated_cvs(user_id, created_at);
CREATE INDEX IF NOT EXISTS idx_cover_letters_user ON cover_letters(user_id, created_at);
"""


class Database:
    """Async SQLite database holding all cvgen tables.

    A single aiosqlite connection is opened lazily, at most once, and shared
    by every repository constructed with this database.
    """

    def __init__(self, db_path: Path | str):
        """Initialize the database.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._connection: aiosqlite.Connection | None = None
        self._connect_lock = asyncio.Lock()

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Get the database connection.

        Yields:
            An aiosqlite connection with row access by column name.
        """
        if self._connection is None:
            async with self._connect_lock:
                if self._connection is None:
                    conn = await aiosqlite.connect(self.db_path)
                    conn.row_factory = aiosqlite.Row
                    self._connection = conn
        yield self._connection

    async def initialize(self) -> None:
        """Initialize the database, creating tables if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        async with self.connection() as conn:
            await conn.executescript(CREATE_TABLES_SQL)
            await conn.executescript(CREATE_INDEX_SQL)
            await conn.commit()

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None

    async def __aenter__(self) -> Database:
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


def new_id() -> str:
    """Generate a new record identifier."""
    return str(uuid.uuid4())


def normalize_id(value: str | None) -> str | None:
    """Return the canonical form of a record identifier, or None if malformed."""
    if not value:
        return None
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        return None


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def parse_datetime(value: str | None) -> datetime | None:
    """Parse an ISO timestamp stored in the database."""
    if value is None:
        return None
    return datetime.fromisoformat(value)
