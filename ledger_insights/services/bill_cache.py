"""Time-boxed cache of the active bill collection"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from ledger_insights.domain.interfaces import BillRepository
from ledger_insights.domain.models import Bill
from ledger_insights.infrastructure.observability.metrics import bill_cache_counter

DEFAULT_TTL_SECONDS = 5 * 60


@dataclass(frozen=True)
class BillCacheEntry:
    bills: List[Bill]
    fetched_at: float


class BillCache:
    """
    Holds the full active-bill collection for a fixed TTL.

    One global entry, replaced wholesale on refresh. Concurrent callers that
    both see an expired entry will each fetch; the last assignment wins and
    every assignment is a complete collection.
    """

    def __init__(
        self,
        repository: BillRepository,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None,
    ):
        self.repository = repository
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)
        self._entry: Optional[BillCacheEntry] = None

    def is_valid(self) -> bool:
        if self._entry is None:
            return False
        return (self.clock() - self._entry.fetched_at) <= self.ttl_seconds

    async def get_active_bills(self) -> List[Bill]:
        """Return cached bills, fetching from the repository on miss or expiry"""
        if self.is_valid():
            bill_cache_counter.labels(result="hit").inc()
            self.logger.debug("Using cached bills data")
            return self._entry.bills

        bill_cache_counter.labels(result="miss").inc()
        self.logger.debug("Fetching active bills from ledger")
        fetched = await self.repository.get_active_bills()
        active = [bill for bill in fetched if bill.active]

        self._entry = BillCacheEntry(bills=active, fetched_at=self.clock())
        self.logger.info(
            "Fetched active bills",
            extra={"active_bills": len(active), "total_bills": len(fetched)},
        )
        return active

    def invalidate(self) -> None:
        self._entry = None
