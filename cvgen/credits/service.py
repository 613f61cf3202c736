"""Business logic service for the credit ledger.

Credits gate AI generation. Availability is checked before a generation
starts and one credit is consumed only after the generated artifact has been
saved.
"""

from __future__ import annotations

import logging

from cvgen.config.settings import Settings, get_settings
from cvgen.credits.models import CreditLedgerEntry
from cvgen.credits.repository import CreditRepository

logger = logging.getLogger(__name__)


class OutOfCreditsError(Exception):
    """Raised when a user has no generation credits left."""

    kind = "out-of-credits"

    def __init__(self, entry: CreditLedgerEntry):
        super().__init__("out of generation credits")
        self.entry = entry


class CreditLedger:
    """Per-user generation allowance: free quota first, then paid credits."""

    def __init__(self, repository: CreditRepository, settings: Settings | None = None):
        """Initialize the ledger.

        Args:
            repository: Credit repository for database access.
            settings: Optional Settings. Uses global settings if not provided.
        """
        self.repository = repository
        self.settings = settings or get_settings()

    @property
    def free_limit(self) -> int:
        """Free allowance granted to new users."""
        return self.settings.free_generations_limit

    async def get_or_create(self, user_id: str) -> CreditLedgerEntry:
        """Get a user's ledger entry, creating it on first access."""
        return await self.repository.get_or_create(user_id, self.free_limit)

    async def check_available(self, user_id: str) -> CreditLedgerEntry:
        """Ensure the user can afford one generation.

        Does not consume anything.

        Returns:
            The current ledger entry.

        Raises:
            OutOfCreditsError: If nothing remains.
        """
        entry = await self.get_or_create(user_id)
        if entry.remaining <= 0:
            logger.info(f"User {user_id} is out of credits (used {entry.free_used}/{entry.free_limit})")
            raise OutOfCreditsError(entry)
        return entry

    async def consume_one(self, user_id: str) -> CreditLedgerEntry:
        """Count one generation, drawing from free usage before paid credits.

        Returns:
            The ledger entry after the increment.
        """
        entry = await self.repository.increment_usage(user_id, self.free_limit)
        logger.debug(f"Consumed one credit for user {user_id}; {entry.remaining} remaining")
        return entry

    async def try_consume(self, user_id: str) -> bool:
        """Atomically consume one credit if, and only if, one is available.

        Returns:
            True when a credit was granted.
        """
        entry = await self.repository.try_consume(user_id, self.free_limit)
        return entry is not None

    async def grant(self, user_id: str, amount: int) -> CreditLedgerEntry:
        """Add paid credits to a user's balance.

        Raises:
            ValueError: If amount is not positive.
        """
        if amount <= 0:
            raise ValueError(f"credit amount must be positive, got {amount}")
        entry = await self.repository.add_paid_credits(user_id, amount, self.free_limit)
        logger.info(f"Granted {amount} credits to user {user_id}")
        return entry
