"""Template-method pipeline shared by transaction analysis calculators"""

import inspect
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Generic, List, Optional, TypeVar, Union

from ledger_insights.domain.exceptions import InvalidPeriodError, LedgerAPIError
from ledger_insights.domain.interfaces import TransactionRepository
from ledger_insights.domain.models import Period, TransactionRecord
from ledger_insights.domain.result import (
    AnalysisErrorKind,
    AnalysisResult,
    Err,
    Ok,
    build_analysis_error,
)
from ledger_insights.infrastructure.observability.metrics import record_analysis
from ledger_insights.services.classification import TransactionClassifier
from ledger_insights.utils.date_utils import validate_month_year

T = TypeVar("T")


class TransactionAnalysisService(ABC, Generic[T]):
    """
    Base class for calculators over one month of transactions.

    Flow:
    1. Validate month/year (invalid -> VALIDATION error, no fetch)
    2. Fetch transactions for the period (failure -> FETCH error)
    3. Run the subclass aggregation (exception -> CALCULATION error, or FETCH
       when a collaborator raises LedgerAPIError)

    Subclasses set ``operation_name`` and implement ``analyze_transactions``,
    which may be sync or async.
    """

    operation_name: str = "analyzeTransactions"

    def __init__(
        self,
        transaction_repository: TransactionRepository,
        classifier: TransactionClassifier,
        logger: Optional[logging.Logger] = None,
    ):
        self.transaction_repository = transaction_repository
        self.classifier = classifier
        self.logger = logger or logging.getLogger(__name__)

    async def execute_analysis(self, month: int, year: int) -> AnalysisResult[T]:
        operation = self.operation_name

        try:
            validate_month_year(month, year)
        except InvalidPeriodError as e:
            self.logger.warning(
                "Invalid date parameters",
                extra={"month": month, "year": year, "operation": operation, "error": str(e)},
            )
            return self._fail(AnalysisErrorKind.VALIDATION, month, year, e)

        try:
            transactions = await self.transaction_repository.get_transactions_for_period(month, year)
        except Exception as e:
            self.logger.error(
                "Failed to fetch transactions",
                extra={
                    "month": month,
                    "year": year,
                    "operation": operation,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            return self._fail(AnalysisErrorKind.FETCH, month, year, e)

        transactions = list(transactions or [])
        self.logger.debug(
            "Fetched transactions",
            extra={"month": month, "year": year, "operation": operation, "transaction_count": len(transactions)},
        )

        try:
            outcome = self.analyze_transactions(transactions, Period(month, year))
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except Exception as e:
            # Collaborators consulted during analysis may still fail upstream
            kind = AnalysisErrorKind.FETCH if isinstance(e, LedgerAPIError) else AnalysisErrorKind.CALCULATION
            self.logger.error(
                "Analysis failed",
                extra={
                    "month": month,
                    "year": year,
                    "operation": operation,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            return self._fail(kind, month, year, e)

        self.logger.debug(
            "Analysis completed",
            extra={"month": month, "year": year, "operation": operation},
        )
        record_analysis(operation, "ok")
        return Ok(outcome)

    @abstractmethod
    def analyze_transactions(
        self, transactions: List[TransactionRecord], period: Period
    ) -> Union[T, Awaitable[T]]:
        """Domain-specific aggregation over the fetched transactions"""

    def _fail(self, kind: AnalysisErrorKind, month: int, year: int, cause: Exception) -> Err:
        record_analysis(self.operation_name, kind.value)
        return Err(build_analysis_error(kind, month, year, self.operation_name, cause))
