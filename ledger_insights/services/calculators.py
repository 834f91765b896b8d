"""Domain calculators plugged into the transaction analysis pipeline"""

import logging
import math
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from ledger_insights.domain.exceptions import BillCalculationError, ConfigurationError, LedgerAPIError
from ledger_insights.domain.interfaces import BudgetLimitRepository, TransactionRepository
from ledger_insights.domain.models import (
    AdditionalIncomeSummary,
    BillComparison,
    BudgetVarianceLine,
    BudgetVarianceReport,
    Period,
    TransactionRecord,
    UnbudgetedExpenseSummary,
)
from ledger_insights.domain.result import AnalysisErrorKind, AnalysisResult
from ledger_insights.services.analysis import TransactionAnalysisService
from ledger_insights.services.classification import TransactionClassifier
from ledger_insights.services.expected_bills import ExpectedBillService


def _sum_amounts(
    transactions: Iterable[TransactionRecord],
    logger: logging.Logger,
    label: str,
    absolute: bool = False,
) -> float:
    """Sum transaction amounts, skipping unparseable ones with a warning"""
    total = 0.0
    for transaction in transactions:
        try:
            amount = float(transaction.amount)
            if not math.isfinite(amount):
                raise ValueError(transaction.amount)
        except (TypeError, ValueError):
            logger.warning(
                f"Invalid {label} amount found",
                extra={"journal_id": transaction.journal_id, "amount": transaction.amount},
            )
            continue
        total += abs(amount) if absolute else amount
    return total


class PaycheckSurplusService(TransactionAnalysisService[float]):
    """Actual paycheck income for a month minus the configured expectation"""

    operation_name = "calculatePaycheckSurplus"

    def __init__(
        self,
        transaction_repository: TransactionRepository,
        classifier: TransactionClassifier,
        expected_monthly_paycheck: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(transaction_repository, classifier, logger)
        self.expected_monthly_paycheck = expected_monthly_paycheck

    async def calculate_paycheck_surplus(self, month: int, year: int) -> AnalysisResult[float]:
        return await self.execute_analysis(month, year)

    def analyze_transactions(self, transactions: List[TransactionRecord], period: Period) -> float:
        paychecks = [t for t in transactions if self.classifier.is_paycheck(t)]
        total = _sum_amounts(paychecks, self.logger, "paycheck")
        expected = self._expected_paycheck_amount()
        surplus = total - expected

        self.logger.debug(
            "Calculated paycheck surplus",
            extra={
                "month": period.month,
                "year": period.year,
                "expected_paycheck_amount": expected,
                "total_paycheck_amount": total,
                "surplus": surplus,
                "paycheck_count": len(paychecks),
            },
        )
        return surplus

    def _expected_paycheck_amount(self) -> float:
        if self.expected_monthly_paycheck is None:
            error = ConfigurationError("Expected monthly paycheck amount not configured")
            self.logger.warning(str(error), extra={"operation": self.operation_name, "fallback": 0.0})
            return 0.0
        return float(self.expected_monthly_paycheck)


class DisposableIncomeService(TransactionAnalysisService[float]):
    """Total spent from disposable income (absolute amounts)"""

    operation_name = "calculateDisposableIncome"

    async def calculate_disposable_income(self, month: int, year: int) -> AnalysisResult[float]:
        return await self.execute_analysis(month, year)

    def analyze_transactions(self, transactions: List[TransactionRecord], period: Period) -> float:
        disposable = [t for t in transactions if self.classifier.is_disposable_income(t)]
        total = _sum_amounts(disposable, self.logger, "disposable income", absolute=True)

        self.logger.debug(
            "Calculated disposable income total",
            extra={"month": period.month, "year": period.year, "total": total, "transaction_count": len(disposable)},
        )
        return total


class UnbudgetedExpenseService(TransactionAnalysisService[UnbudgetedExpenseSummary]):
    """
    Expenses that fell outside every budget.

    A transaction counts when:
    - it is a bill, or
    - it has no budget, is not supplemented by disposable income, is not
      excluded, is not a deposit, and comes from a valid expense account.

    Transfers must additionally have no destination or match a configured
    (source, destination) pair.
    """

    operation_name = "calculateUnbudgetedExpenses"

    def __init__(
        self,
        transaction_repository: TransactionRepository,
        classifier: TransactionClassifier,
        valid_expense_accounts: Sequence[str] = (),
        valid_transfers: Sequence[Tuple[str, str]] = (),
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(transaction_repository, classifier, logger)
        self.valid_expense_accounts = set(valid_expense_accounts)
        self.valid_transfers = {tuple(pair) for pair in valid_transfers}

        if not self.valid_expense_accounts:
            self.logger.warning(
                str(ConfigurationError("No expense accounts configured")),
                extra={"operation": self.operation_name, "fallback": "all source accounts"},
            )

    async def calculate_unbudgeted_expenses(
        self, month: int, year: int
    ) -> AnalysisResult[UnbudgetedExpenseSummary]:
        return await self.execute_analysis(month, year)

    async def analyze_transactions(
        self, transactions: List[TransactionRecord], period: Period
    ) -> UnbudgetedExpenseSummary:
        expenses = []
        for transaction in transactions:
            if not await self._should_count_expense(transaction):
                continue
            if self.classifier.is_transfer(transaction) and not self._should_count_transfer(transaction):
                continue
            expenses.append(transaction)

        total = _sum_amounts(expenses, self.logger, "unbudgeted expense", absolute=True)
        self.logger.debug(
            "Calculated unbudgeted expenses",
            extra={"month": period.month, "year": period.year, "total": total, "transaction_count": len(expenses)},
        )
        return UnbudgetedExpenseSummary(transactions=expenses, total=total)

    async def _should_count_expense(self, transaction: TransactionRecord) -> bool:
        if self.classifier.is_bill(transaction):
            return True

        if transaction.budget_id:
            return False
        if self.classifier.is_deposit(transaction):
            return False
        if self.classifier.is_supplemented_by_disposable(transaction.tags):
            return False
        if not self._is_expense_account(transaction.source_id):
            return False
        return not await self.classifier.is_excluded_transaction(transaction.description, transaction.amount)

    def _should_count_transfer(self, transaction: TransactionRecord) -> bool:
        if not transaction.destination_id:
            return True
        return (transaction.source_id, transaction.destination_id) in self.valid_transfers

    def _is_expense_account(self, account_id: Optional[str]) -> bool:
        if not self.valid_expense_accounts:
            return True
        return account_id in self.valid_expense_accounts


class BudgetVarianceService(TransactionAnalysisService[BudgetVarianceReport]):
    """Allocated vs actually spent, per budget, for one month"""

    operation_name = "calculateBudgetVariance"

    def __init__(
        self,
        transaction_repository: TransactionRepository,
        classifier: TransactionClassifier,
        budget_limit_repository: BudgetLimitRepository,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(transaction_repository, classifier, logger)
        self.budget_limit_repository = budget_limit_repository

    async def calculate_budget_variance(
        self, month: int, year: int
    ) -> AnalysisResult[BudgetVarianceReport]:
        return await self.execute_analysis(month, year)

    async def analyze_transactions(
        self, transactions: List[TransactionRecord], period: Period
    ) -> BudgetVarianceReport:
        limits = await self.budget_limit_repository.get_budget_limits(period.month, period.year)

        spending = [
            t for t in transactions if t.budget_id and self.classifier.is_withdrawal(t)
        ]
        lines = []
        for limit in limits:
            budget_transactions = [t for t in spending if t.budget_id == limit.budget_id]
            spent = _sum_amounts(budget_transactions, self.logger, "budgeted expense", absolute=True)
            lines.append(
                BudgetVarianceLine(
                    budget_id=limit.budget_id,
                    budget_name=limit.budget_name,
                    allocated=limit.amount,
                    spent=spent,
                )
            )

        report = BudgetVarianceReport(lines=lines)
        self.logger.debug(
            "Calculated budget variance",
            extra={
                "month": period.month,
                "year": period.year,
                "total_allocated": report.total_allocated,
                "total_spent": report.total_spent,
                "surplus": report.surplus,
                "budget_count": len(lines),
            },
        )
        return report


class AdditionalIncomeService(TransactionAnalysisService[AdditionalIncomeSummary]):
    """
    Deposits beyond regular payroll.

    A deposit counts when it lands in a valid destination account, has a
    positive amount, does not match an excluded description pattern, and
    (optionally) is not disposable income.
    """

    operation_name = "calculateAdditionalIncome"

    def __init__(
        self,
        transaction_repository: TransactionRepository,
        classifier: TransactionClassifier,
        valid_destination_accounts: Sequence[str] = (),
        excluded_patterns: Sequence[str] = (),
        exclude_disposable_income: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(transaction_repository, classifier, logger)
        self.valid_destination_accounts = set(valid_destination_accounts)
        self.excluded_patterns = [self._normalize(p) for p in excluded_patterns if p.strip()]
        self.exclude_disposable_income = exclude_disposable_income

        if not self.valid_destination_accounts:
            self.logger.warning(
                str(ConfigurationError("No valid destination accounts configured")),
                extra={"operation": self.operation_name, "fallback": "all destination accounts"},
            )
        if not self.excluded_patterns:
            self.logger.warning(
                "No excluded descriptions specified - all deposits will be considered additional income"
            )

    async def calculate_additional_income(
        self, month: int, year: int
    ) -> AnalysisResult[AdditionalIncomeSummary]:
        return await self.execute_analysis(month, year)

    def analyze_transactions(
        self, transactions: List[TransactionRecord], period: Period
    ) -> AdditionalIncomeSummary:
        income = [
            t
            for t in transactions
            if self.classifier.is_deposit(t)
            and self._has_valid_destination(t)
            and self._is_positive(t)
            and not self._matches_excluded_pattern(t)
            and not (self.exclude_disposable_income and self.classifier.is_disposable_income(t))
        ]
        total = _sum_amounts(income, self.logger, "additional income")

        if not income:
            self.logger.debug(
                "No additional income found",
                extra={"month": period.month, "year": period.year},
            )
        return AdditionalIncomeSummary(transactions=income, total=total)

    def _has_valid_destination(self, transaction: TransactionRecord) -> bool:
        if not self.valid_destination_accounts:
            return True
        return transaction.destination_id in self.valid_destination_accounts

    def _matches_excluded_pattern(self, transaction: TransactionRecord) -> bool:
        if not transaction.description:
            self.logger.warning("Transaction found with no description", extra={"journal_id": transaction.journal_id})
            return False
        description = self._normalize(transaction.description)
        return any(pattern in description for pattern in self.excluded_patterns)

    @staticmethod
    def _is_positive(transaction: TransactionRecord) -> bool:
        try:
            return float(transaction.amount) > 0
        except (TypeError, ValueError):
            return False

    @staticmethod
    def _normalize(value: str) -> str:
        collapsed = re.sub(r"[-_\s]+", " ", value.lower().strip())
        return re.sub(r"[^\w\s]", "", collapsed)


class BillComparisonService(TransactionAnalysisService[BillComparison]):
    """Expected bill load for a month against bill transactions actually recorded"""

    operation_name = "calculateBillComparison"

    def __init__(
        self,
        transaction_repository: TransactionRepository,
        classifier: TransactionClassifier,
        expected_bill_service: ExpectedBillService,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(transaction_repository, classifier, logger)
        self.expected_bill_service = expected_bill_service

    async def calculate_bill_comparison(self, month: int, year: int) -> AnalysisResult[BillComparison]:
        return await self.execute_analysis(month, year)

    async def analyze_transactions(
        self, transactions: List[TransactionRecord], period: Period
    ) -> BillComparison:
        expected = await self.expected_bill_service.get_expected_sum_for_month(period.month, period.year)
        if not expected.ok:
            if expected.error.kind is AnalysisErrorKind.FETCH:
                raise LedgerAPIError(expected.error.message) from expected.error.cause
            raise BillCalculationError(expected.error.message) from expected.error.cause

        bill_transactions = [t for t in transactions if self.classifier.is_bill(t)]
        actual = _sum_amounts(bill_transactions, self.logger, "bill", absolute=True)

        return BillComparison(
            expected_total=expected.value,
            actual_total=actual,
            bill_transaction_count=len(bill_transactions),
        )
