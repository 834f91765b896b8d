"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Callable, List
from fastapi.testclient import TestClient

from ledger_insights.api.main import create_app
from ledger_insights.domain.models import (
    Bill,
    BudgetLimit,
    ClassificationConfig,
    ExcludedTransaction,
    TransactionRecord,
)
from ledger_insights.services.classification import TransactionClassifier
from ledger_insights.services.exclusions import ExclusionList


class FakeTransactionRepository:
    """Records every fetch so tests can assert on I/O"""

    def __init__(self, transactions: List[TransactionRecord] | None = None, error: Exception | None = None):
        self.transactions = transactions or []
        self.error = error
        self.calls: List[tuple[int, int]] = []

    async def get_transactions_for_period(self, month: int, year: int) -> List[TransactionRecord]:
        self.calls.append((month, year))
        if self.error is not None:
            raise self.error
        return list(self.transactions)


class FakeBillRepository:
    def __init__(self, bills: List[Bill] | None = None, error: Exception | None = None):
        self.bills = bills or []
        self.error = error
        self.calls = 0

    async def get_active_bills(self) -> List[Bill]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.bills)


class FakeBudgetLimitRepository:
    def __init__(self, limits: List[BudgetLimit]):
        self.limits = limits

    async def get_budget_limits(self, month: int, year: int) -> List[BudgetLimit]:
        return list(self.limits)


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def classification_config() -> ClassificationConfig:
    return ClassificationConfig(
        no_name_expense_account_id="5",
        disposable_income_tag="Disposable Income",
        bills_tag="Bills",
        paycheck_tag="Paycheck",
    )


@pytest.fixture
def exclusion_list() -> ExclusionList:
    return ExclusionList(
        [
            ExcludedTransaction(description="Mortgage Payment", amount="1,850.00"),
            ExcludedTransaction(description="Savings Sweep"),
            ExcludedTransaction(amount="$42.42"),
        ]
    )


@pytest.fixture
def classifier(classification_config: ClassificationConfig, exclusion_list: ExclusionList) -> TransactionClassifier:
    return TransactionClassifier(classification_config, exclusion_list)


@pytest.fixture
def make_transaction() -> Callable[..., TransactionRecord]:
    """Factory for transaction records with sensible withdrawal defaults"""

    def _make(**overrides) -> TransactionRecord:
        fields = {
            "description": "Groceries",
            "amount": "54.20",
            "date": date(2024, 3, 12),
            "type": "withdrawal",
            "tags": [],
            "journal_id": "1",
            "source_id": "1",
            "destination_id": "20",
        }
        fields.update(overrides)
        return TransactionRecord(**fields)

    return _make


@pytest.fixture
def make_bill() -> Callable[..., Bill]:
    def _make(**overrides) -> Bill:
        fields = {
            "name": "Internet",
            "amount_min": "100.00",
            "amount_max": "100.00",
            "start_date": date(2024, 1, 15),
            "frequency": "monthly",
            "skip": 0,
            "active": True,
        }
        fields.update(overrides)
        return Bill(**fields)

    return _make


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def transaction_repository_factory() -> Callable[..., FakeTransactionRepository]:
    return FakeTransactionRepository


@pytest.fixture
def bill_repository_factory() -> Callable[..., FakeBillRepository]:
    return FakeBillRepository


@pytest.fixture
def budget_limit_repository_factory() -> Callable[..., FakeBudgetLimitRepository]:
    return FakeBudgetLimitRepository


@pytest.fixture
def app():
    """FastAPI app; tests install dependency overrides on it"""
    return create_app()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
