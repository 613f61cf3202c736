"""Database repository for generated CVs.

Every query is scoped by owner: a CV id that belongs to another user
behaves exactly like an id that does not exist.
"""

from __future__ import annotations

import aiosqlite

from cvgen.ai.models import JobAnalysis
from cvgen.cv.models import CVListItem, GeneratedCV
from cvgen.resume.models import ResumeDocument
from cvgen.storage.database import Database, parse_datetime, utc_now

LIST_COLUMNS = (
    "id, name, template_id, job_title, company_name, match_score, created_at, updated_at"
)


class CVRepository:
    """Async SQLite repository for generated CVs."""

    def __init__(self, database: Database):
        """Initialize the repository.

        Args:
            database: Shared cvgen database.
        """
        self.database = database

    async def insert(self, cv: GeneratedCV) -> GeneratedCV:
        """Insert a new CV.

        Args:
            cv: The CV to insert; its id and timestamps must be set.

        Returns:
            The inserted CV.
        """
        async with self.database.connection() as conn:
            await conn.execute(
                """
                INSERT INTO generated_cvs (
                    id, user_id, name, cv_data, template_id, job_url, job_title,
                    company_name, job_description, match_score, ai_suggestions,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    cv.id,
                    cv.user_id,
                    cv.name,
                    cv.cv_data.to_json(),
                    cv.template_id,
                    cv.job_url,
                    cv.job_title,
                    cv.company_name,
                    cv.job_description,
                    cv.match_score,
                    cv.ai_suggestions.model_dump_json() if cv.ai_suggestions else None,
                    cv.created_at.isoformat() if cv.created_at else None,
                    cv.updated_at.isoformat() if cv.updated_at else None,
                ),
            )
            await conn.commit()
        return cv

    async def get(self, user_id: str, cv_id: str) -> GeneratedCV | None:
        """Get a CV owned by a user.

        Returns:
            The CV if found, None otherwise.
        """
        async with self.database.connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM generated_cvs WHERE id = ? AND user_id = ?",
                (cv_id, user_id),
            )
            row = await cursor.fetchone()

        if row is None:
            return None
        return self._row_to_cv(row)

    async def count(self, user_id: str) -> int:
        """Count the CVs owned by a user."""
        async with self.database.connection() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM generated_cvs WHERE user_id = ?",
                (user_id,),
            )
            row = await cursor.fetchone()
        return row[0]

    async def list_page(self, user_id: str, limit: int, offset: int) -> list[CVListItem]:
        """List a user's CVs, newest first.

        Args:
            user_id: Owner of the CVs.
            limit: Maximum number of items.
            offset: Number of items to skip.
        """
        async with self.database.connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT {LIST_COLUMNS} FROM generated_cvs
                WHERE user_id = ?
                ORDER BY created_at DESC, rowid DESC
                LIMIT ? OFFSET ?
                """,
                (user_id, limit, offset),
            )
            rows = await cursor.fetchall()

        return [self._row_to_list_item(row) for row in rows]

    async def update(
        self,
        user_id: str,
        cv_id: str,
        *,
        name: str | None = None,
        cv_data: ResumeDocument | None = None,
        template_id: str | None = None,
    ) -> GeneratedCV | None:
        """Update the provided fields of a CV, leaving the others unchanged.

        Returns:
            The updated CV, or None if the user owns no such CV.
        """
        async with self.database.connection() as conn:
            cursor = await conn.execute(
                """
                UPDATE generated_cvs
                SET name = COALESCE(?, name),
                    cv_data = COALESCE(?, cv_data),
                    template_id = COALESCE(?, template_id),
                    updated_at = ?
                WHERE id = ? AND user_id = ?
                RETURNING *
                """,
                (
                    name,
                    cv_data.to_json() if cv_data is not None else None,
                    template_id,
                    utc_now().isoformat(),
                    cv_id,
                    user_id,
                ),
            )
            rows = await cursor.fetchall()
            await conn.commit()

        if not rows:
            return None
        return self._row_to_cv(rows[0])

    async def delete(self, user_id: str, cv_id: str) -> bool:
        """Delete a CV owned by a user.

        Returns:
            True if a CV was deleted.
        """
        async with self.database.connection() as conn:
            cursor = await conn.execute(
                "DELETE FROM generated_cvs WHERE id = ? AND user_id = ?",
                (cv_id, user_id),
            )
            await conn.commit()
            return cursor.rowcount > 0

    def _row_to_cv(self, row: aiosqlite.Row) -> GeneratedCV:
        suggestions = row["ai_suggestions"]
        return GeneratedCV(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            cv_data=ResumeDocument.from_json(row["cv_data"]),
            template_id=row["template_id"],
            job_url=row["job_url"],
            job_title=row["job_title"],
            company_name=row["company_name"],
            job_description=row["job_description"],
            match_score=row["match_score"],
            ai_suggestions=JobAnalysis.model_validate_json(suggestions)
            if suggestions
            else None,
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )

    def _row_to_list_item(self, row: aiosqlite.Row) -> CVListItem:
        return CVListItem(
            id=row["id"],
            name=row["name"],
            template_id=row["template_id"],
            job_title=row["job_title"],
            company_name=row["company_name"],
            match_score=row["match_score"],
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )
