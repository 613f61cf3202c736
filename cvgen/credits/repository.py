"""Database repository for the credit ledger.

Every mutation is a single SQL statement so concurrent requests never lose
an increment.
"""

from __future__ import annotations

import aiosqlite

from cvgen.credits.models import CreditLedgerEntry
from cvgen.storage.database import Database, parse_datetime, utc_now

INSERT_IF_MISSING_SQL = """
INSERT INTO user_credits (
    user_id, free_used, free_limit, paid_credits, total_generations,
    created_at, updated_at
) VALUES (?, 0, ?, 0, 0, ?, ?)
ON CONFLICT(user_id) DO NOTHING
"""

# Draw from the free allowance first, then from paid credits. Column
# references on the right-hand side read the row as it was before the update.
CONSUME_SQL = """
UPDATE user_credits
SET free_used = CASE WHEN free_used < free_limit THEN free_used + 1 ELSE free_used END,
    paid_credits = CASE
        WHEN free_used >= free_limit AND paid_credits > 0 THEN paid_credits - 1
        ELSE paid_credits
    END,
    total_generations = total_generations + 1,
    updated_at = ?
WHERE user_id = ?
"""

CONDITIONAL_SQL = " AND (free_used < free_limit OR paid_credits > 0)"


class CreditRepository:
    """Async SQLite repository for user credit counters."""

    def __init__(self, database: Database):
        """Initialize the repository.

        Args:
            database: Shared cvgen database.
        """
        self.database = database

    async def get(self, user_id: str) -> CreditLedgerEntry | None:
        """Get the ledger entry of a user, if one exists."""
        async with self.database.connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM user_credits WHERE user_id = ?",
                (user_id,),
            )
            row = await cursor.fetchone()

        if row is None:
            return None
        return self._row_to_entry(row)

    async def get_or_create(self, user_id: str, free_limit: int) -> CreditLedgerEntry:
        """Get the ledger entry of a user, creating it on first access.

        Args:
            user_id: Owner of the entry.
            free_limit: Free allowance for a newly created entry.
        """
        async with self.database.connection() as conn:
            await self._insert_if_missing(conn, user_id, free_limit)
            await conn.commit()
            cursor = await conn.execute(
                "SELECT * FROM user_credits WHERE user_id = ?",
                (user_id,),
            )
            row = await cursor.fetchone()

        return self._row_to_entry(row)

    async def increment_usage(self, user_id: str, free_limit: int) -> CreditLedgerEntry:
        """Count one generation against a user's allowance.

        Counters never go below zero: once both the free allowance and the
        paid credits are exhausted only ``total_generations`` moves.

        Returns:
            The entry after the update.
        """
        async with self.database.connection() as conn:
            await self._insert_if_missing(conn, user_id, free_limit)
            cursor = await conn.execute(
                CONSUME_SQL + " RETURNING *",
                (utc_now().isoformat(), user_id),
            )
            rows = await cursor.fetchall()
            await conn.commit()

        return self._row_to_entry(rows[0])

    async def try_consume(self, user_id: str, free_limit: int) -> CreditLedgerEntry | None:
        """Consume one credit only if the user still has one.

        The availability check and the decrement are one conditional
        statement, so two concurrent callers can never both take the last
        credit.

        Returns:
            The updated entry, or None when no credit was available.
        """
        async with self.database.connection() as conn:
            await self._insert_if_missing(conn, user_id, free_limit)
            cursor = await conn.execute(
                CONSUME_SQL + CONDITIONAL_SQL + " RETURNING *",
                (utc_now().isoformat(), user_id),
            )
            rows = await cursor.fetchall()
            await conn.commit()

        if not rows:
            return None
        return self._row_to_entry(rows[0])

    async def add_paid_credits(
        self, user_id: str, amount: int, free_limit: int
    ) -> CreditLedgerEntry:
        """Add purchased or granted credits to a user's balance."""
        async with self.database.connection() as conn:
            await self._insert_if_missing(conn, user_id, free_limit)
            cursor = await conn.execute(
                """
                UPDATE user_credits
                SET paid_credits = paid_credits + ?, updated_at = ?
                WHERE user_id = ?
                RETURNING *
                """,
                (amount, utc_now().isoformat(), user_id),
            )
            rows = await cursor.fetchall()
            await conn.commit()

        return self._row_to_entry(rows[0])

    async def _insert_if_missing(
        self, conn: aiosqlite.Connection, user_id: str, free_limit: int
    ) -> None:
        now = utc_now().isoformat()
        await conn.execute(INSERT_IF_MISSING_SQL, (user_id, free_limit, now, now))

    def _row_to_entry(self, row: aiosqlite.Row) -> CreditLedgerEntry:
        return CreditLedgerEntry(
            user_id=row["user_id"],
            free_used=row["free_used"],
            free_limit=row["free_limit"],
            paid_credits=row["paid_credits"],
            total_generations=row["total_generations"],
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )
