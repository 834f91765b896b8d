"""Collaborator interfaces consumed by the analysis engine"""

from typing import List, Protocol

from ledger_insights.domain.models import Bill, BudgetLimit, TransactionRecord


class TransactionRepository(Protocol):
    """Source of ledger transactions for a period."""

    async def get_transactions_for_period(
        self, month: int, year: int
    ) -> List[TransactionRecord]:  # pragma: no cover - interface
        """Raises LedgerAPIError on upstream failure."""
        ...


class BillRepository(Protocol):
    async def get_active_bills(self) -> List[Bill]:  # pragma: no cover - interface
        ...


class BudgetLimitRepository(Protocol):
    async def get_budget_limits(
        self, month: int, year: int
    ) -> List[BudgetLimit]:  # pragma: no cover - interface
        ...


class ExclusionLookup(Protocol):
    async def is_excluded(self, description: str, amount: str) -> bool:  # pragma: no cover - interface
        ...
