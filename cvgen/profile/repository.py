"""Database repository for master profiles."""

from __future__ import annotations

import aiosqlite

from cvgen.profile.models import MasterProfile
from cvgen.resume.models import ResumeDocument
from cvgen.storage.database import Database, new_id, parse_datetime, utc_now


class ProfileRepository:
    """Async SQLite repository for master profiles, keyed by user."""

    def __init__(self, database: Database):
        """Initialize the repository.

        Args:
            database: Shared cvgen database.
        """
        self.database = database

    async def get(self, user_id: str) -> MasterProfile | None:
        """Get a user's profile.

        Returns:
            The profile if found, None otherwise.
        """
        async with self.database.connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM master_profiles WHERE user_id = ?",
                (user_id,),
            )
            row = await cursor.fetchone()

        if row is None:
            return None
        return self._row_to_profile(row)

    async def upsert(self, user_id: str, resume_data: ResumeDocument) -> MasterProfile:
        """Create the user's profile or replace its document in place.

        Returns:
            The stored profile.
        """
        now = utc_now().isoformat()
        async with self.database.connection() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO master_profiles (id, user_id, resume_data, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE
                SET resume_data = excluded.resume_data, updated_at = excluded.updated_at
                RETURNING *
                """,
                (new_id(), user_id, resume_data.to_json(), now, now),
            )
            rows = await cursor.fetchall()
            await conn.commit()

        return self._row_to_profile(rows[0])

    async def delete(self, user_id: str) -> bool:
        """Delete a user's profile.

        Returns:
            True if a profile was deleted.
        """
        async with self.database.connection() as conn:
            cursor = await conn.execute(
                "DELETE FROM master_profiles WHERE user_id = ?",
                (user_id,),
            )
            await conn.commit()
            return cursor.rowcount > 0

    def _row_to_profile(self, row: aiosqlite.Row) -> MasterProfile:
        return MasterProfile(
            id=row["id"],
            user_id=row["user_id"],
            resume_data=ResumeDocument.from_json(row["resume_data"]),
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )
