"""Database repository for cover letters."""

from __future__ import annotations

import aiosqlite

from cvgen.cover_letter.models import CoverLetterRecord
from cvgen.storage.database import Database, parse_datetime, utc_now


class CoverLetterRepository:
    """Async SQLite repository for cover letters, scoped by owner."""

    def __init__(self, database: Database):
        """Initialize the repository.

        Args:
            database: Shared cvgen database.
        """
        self.database = database

    async def insert(self, letter: CoverLetterRecord) -> CoverLetterRecord:
        """Insert a new cover letter."""
        async with self.database.connection() as conn:
            await conn.execute(
                """
                INSERT INTO cover_letters (
                    id, user_id, cv_id, content, job_title, company_name,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    letter.id,
                    letter.user_id,
                    letter.cv_id,
                    letter.content,
                    letter.job_title,
                    letter.company_name,
                    letter.created_at.isoformat() if letter.created_at else None,
                    letter.updated_at.isoformat() if letter.updated_at else None,
                ),
            )
            await conn.commit()
        return letter

    async def get(self, user_id: str, letter_id: str) -> CoverLetterRecord | None:
        """Get a cover letter owned by a user."""
        async with self.database.connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM cover_letters WHERE id = ? AND user_id = ?",
                (letter_id, user_id),
            )
            row = await cursor.fetchone()

        if row is None:
            return None
        return self._row_to_record(row)

    async def list_for_user(self, user_id: str) -> list[CoverLetterRecord]:
        """List a user's cover letters, newest first."""
        async with self.database.connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM cover_letters
                WHERE user_id = ?
                ORDER BY created_at DESC, rowid DESC
                """,
                (user_id,),
            )
            rows = await cursor.fetchall()

        return [self._row_to_record(row) for row in rows]

    async def update_content(
        self, user_id: str, letter_id: str, content: str
    ) -> CoverLetterRecord | None:
        """Replace the text of a cover letter.

        Returns:
            The updated letter, or None if the user owns no such letter.
        """
        async with self.database.connection() as conn:
            cursor = await conn.execute(
                """
                UPDATE cover_letters
                SET content = ?, updated_at = ?
                WHERE id = ? AND user_id = ?
                RETURNING *
                """,
                (content, utc_now().isoformat(), letter_id, user_id),
            )
            rows = await cursor.fetchall()
            await conn.commit()

        if not rows:
            return None
        return self._row_to_record(rows[0])

    async def delete(self, user_id: str, letter_id: str) -> bool:
        """Delete a cover letter owned by a user.

        Returns:
            True if a letter was deleted.
        """
        async with self.database.connection() as conn:
            cursor = await conn.execute(
                "DELETE FROM cover_letters WHERE id = ? AND user_id = ?",
                (letter_id, user_id),
            )
            await conn.commit()
            return cursor.rowcount > 0

    def _row_to_record(self, row: aiosqlite.Row) -> CoverLetterRecord:
        return CoverLetterRecord(
            id=row["id"],
            user_id=row["user_id"],
            cv_id=row["cv_id"],
            content=row["content"],
            job_title=row["job_title"],
            company_name=row["company_name"],
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )
