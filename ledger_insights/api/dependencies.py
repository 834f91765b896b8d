"""Dependency injection for FastAPI endpoints"""

from functools import lru_cache

from fastapi import Request

from ledger_insights.config import settings
from ledger_insights.infrastructure.clients.ledger import FireflyClient
from ledger_insights.services.bill_cache import BillCache
from ledger_insights.services.calculators import (
    AdditionalIncomeService,
    BillComparisonService,
    BudgetVarianceService,
    DisposableIncomeService,
    PaycheckSurplusService,
    UnbudgetedExpenseService,
)
from ledger_insights.services.classification import TransactionClassifier
from ledger_insights.services.exclusions import ExclusionList
from ledger_insights.services.expected_bills import ExpectedBillService
from ledger_insights.services.validation import TransactionValidator


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


@lru_cache
def get_ledger_client() -> FireflyClient:
    """Provide the ledger API client"""
    return FireflyClient()


@lru_cache
def get_classifier() -> TransactionClassifier:
    return TransactionClassifier(
        settings.classification_config(),
        ExclusionList(settings.excluded_transactions),
    )


@lru_cache
def get_expected_bill_service() -> ExpectedBillService:
    """Shared instance so the bill cache survives across requests"""
    cache = BillCache(get_ledger_client(), ttl_seconds=settings.bill_cache_ttl_seconds)
    return ExpectedBillService(cache)


@lru_cache
def get_transaction_validator() -> TransactionValidator:
    return TransactionValidator(get_classifier())


@lru_cache
def get_paycheck_surplus_service() -> PaycheckSurplusService:
    return PaycheckSurplusService(
        get_ledger_client(),
        get_classifier(),
        expected_monthly_paycheck=settings.expected_monthly_paycheck,
    )


@lru_cache
def get_disposable_income_service() -> DisposableIncomeService:
    return DisposableIncomeService(get_ledger_client(), get_classifier())


@lru_cache
def get_unbudgeted_expense_service() -> UnbudgetedExpenseService:
    return UnbudgetedExpenseService(
        get_ledger_client(),
        get_classifier(),
        valid_expense_accounts=settings.valid_expense_accounts,
        valid_transfers=settings.valid_transfers,
    )


@lru_cache
def get_budget_variance_service() -> BudgetVarianceService:
    client = get_ledger_client()
    return BudgetVarianceService(client, get_classifier(), budget_limit_repository=client)


@lru_cache
def get_additional_income_service() -> AdditionalIncomeService:
    return AdditionalIncomeService(
        get_ledger_client(),
        get_classifier(),
        valid_destination_accounts=settings.valid_destination_accounts,
        excluded_patterns=settings.excluded_additional_income_patterns,
        exclude_disposable_income=settings.exclude_disposable_income,
    )


@lru_cache
def get_bill_comparison_service() -> BillComparisonService:
    return BillComparisonService(get_ledger_client(), get_classifier(), get_expected_bill_service())
