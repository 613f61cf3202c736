"""Credit ledger for AI generations.

Public API:
- CreditLedger: availability checks and consumption
- CreditRepository: database repository for ledger entries
- CreditLedgerEntry: per-user counters with the derived balance
- OutOfCreditsError: raised when nothing remains
"""

from cvgen.credits.models import CreditLedgerEntry, remaining_credits
from cvgen.credits.repository import CreditRepository
from cvgen.credits.service import CreditLedger, OutOfCreditsError

__all__ = [
    "CreditLedger",
    "CreditRepository",
    "CreditLedgerEntry",
    "OutOfCreditsError",
    "remaining_credits",
]
