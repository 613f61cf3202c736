"""Data models for the credit ledger."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


def remaining_credits(free_used: int, free_limit: int, paid_credits: int) -> int:
    """Compute the generations still available to a user.

    The free component is clamped at zero before paid credits are added, so
    the result is never negative.
    """
    return max(0, free_limit - free_used) + max(0, paid_credits)


@dataclass
class CreditLedgerEntry:
    """Per-user generation allowance and usage.

    Attributes:
        user_id: Owner of the ledger entry.
        free_used: Free generations consumed so far.
        free_limit: Free generations granted to the user.
        paid_credits: Purchased or granted credits still available.
        total_generations: Every generation ever counted (monotonic).
        created_at: When the entry was created.
        updated_at: When the entry last changed.
    """

    user_id: str
    free_used: int
    free_limit: int
    paid_credits: int
    total_generations: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def free_remaining(self) -> int:
        """Free generations left, never negative."""
        return max(0, self.free_limit - self.free_used)

    @property
    def remaining(self) -> int:
        """Total generations left (free + paid), never negative."""
        return remaining_credits(self.free_used, self.free_limit, self.paid_credits)

    def to_dict(self) -> dict:
        """Serialize the entry to a dictionary.

        Returns:
            Dictionary representation including derived balances.
        """
        return {
            "user_id": self.user_id,
            "free_used": self.free_used,
            "free_limit": self.free_limit,
            "free_remaining": self.free_remaining,
            "paid_credits": self.paid_credits,
            "total_generations": self.total_generations,
            "remaining": self.remaining,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
