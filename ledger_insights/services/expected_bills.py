"""Expected bill load per month and per year, built on the recurrence engine"""

import logging
from typing import List, Optional

from ledger_insights.domain.exceptions import BillCalculationError, InvalidAmountError, InvalidPeriodError
from ledger_insights.domain.models import Bill
from ledger_insights.domain.recurrence import (
    is_due_in_month,
    is_known_frequency,
    parse_amount,
    yearly_occurrence_amount,
)
from ledger_insights.domain.result import (
    AnalysisErrorKind,
    AnalysisResult,
    Err,
    Ok,
    build_analysis_error,
)
from ledger_insights.infrastructure.observability.metrics import record_analysis
from ledger_insights.services.bill_cache import BillCache
from ledger_insights.utils.date_utils import validate_month_year, validate_year

# Malformed bill data fails the calculation instead of escaping the service
BAD_BILL_DATA_ERRORS = (InvalidAmountError, BillCalculationError, ArithmeticError, TypeError, ValueError)


class ExpectedBillService:
    """Answers "what should bills cost" questions for a month or a year"""

    def __init__(self, bill_cache: BillCache, logger: Optional[logging.Logger] = None):
        self.bill_cache = bill_cache
        self.logger = logger or logging.getLogger(__name__)

    async def get_expected_sum_for_month(self, month: int, year: int) -> AnalysisResult[float]:
        """
        Sum amount_max over active bills due in the month.

        A single malformed amount fails the whole calculation; partial totals
        are never returned.
        """
        operation = "getExpectedSumForMonth"

        try:
            validate_month_year(month, year)
        except InvalidPeriodError as e:
            return self._fail(AnalysisErrorKind.VALIDATION, month, year, operation, e)

        try:
            bills = await self.bill_cache.get_active_bills()
        except Exception as e:
            return self._fail(AnalysisErrorKind.FETCH, month, year, operation, e)

        try:
            due_bills = self._due_bills(bills, month, year)
            total = sum(parse_amount(bill.amount_max) for bill in due_bills)
        except BAD_BILL_DATA_ERRORS as e:
            return self._fail(AnalysisErrorKind.CALCULATION, month, year, operation, e)

        self.logger.info(
            "Calculated expected bills for month",
            extra={"month": month, "year": year, "total_amount": total, "bill_count": len(due_bills)},
        )
        record_analysis(operation, "ok")
        return Ok(total)

    async def get_average_monthly_bills_for_year(self, year: int) -> AnalysisResult[float]:
        """Average monthly bill load: yearly projection of every active bill / 12"""
        operation = "getAverageMonthlyBillsForYear"

        try:
            validate_year(year)
        except InvalidPeriodError as e:
            return self._fail(AnalysisErrorKind.VALIDATION, None, year, operation, e)

        try:
            bills = await self.bill_cache.get_active_bills()
        except Exception as e:
            return self._fail(AnalysisErrorKind.FETCH, None, year, operation, e)

        total_yearly = 0.0
        try:
            for bill in bills:
                self._warn_if_unknown_frequency(bill)
                yearly_amount = yearly_occurrence_amount(bill, year)
                self.logger.debug(
                    "Projected yearly bill amount",
                    extra={"bill_name": bill.name, "yearly_amount": yearly_amount, "frequency": bill.frequency},
                )
                total_yearly += yearly_amount
        except BAD_BILL_DATA_ERRORS as e:
            return self._fail(AnalysisErrorKind.CALCULATION, None, year, operation, e)

        monthly_average = total_yearly / 12
        self.logger.info(
            "Calculated average monthly bills",
            extra={"year": year, "total_yearly": total_yearly, "monthly_average": monthly_average},
        )
        record_analysis(operation, "ok")
        return Ok(monthly_average)

    def invalidate_cache(self) -> None:
        self.bill_cache.invalidate()

    def _due_bills(self, bills: List[Bill], month: int, year: int) -> List[Bill]:
        due = []
        for bill in bills:
            self._warn_if_unknown_frequency(bill)
            if is_due_in_month(bill, month, year):
                due.append(bill)
        return due

    def _warn_if_unknown_frequency(self, bill: Bill) -> None:
        if not is_known_frequency(bill.frequency):
            self.logger.warning(
                "Unknown repeat frequency",
                extra={"bill_name": bill.name, "frequency": bill.frequency},
            )

    def _fail(
        self,
        kind: AnalysisErrorKind,
        month: Optional[int],
        year: int,
        operation: str,
        cause: Exception,
    ) -> Err:
        error = build_analysis_error(kind, month, year, operation, cause)
        log = self.logger.warning if kind is AnalysisErrorKind.VALIDATION else self.logger.error
        log(
            error.message,
            extra={
                "month": month,
                "year": year,
                "operation": operation,
                "error_kind": kind.value,
                "error_type": type(cause).__name__,
            },
        )
        record_analysis(operation, kind.value)
        return Err(error)
