"""
E2E tests for one household month served by the mock ledger.

The real FireflyClient talks to mock_ledger.main over an in-process ASGI
transport, so pagination, parsing, classification and the HTTP surface are
exercised together.

Household (March 2024):
- Two ACME payroll deposits of $2600, expected paycheck $5000
- Rent, Internet and a half-yearly car insurance bill due
- Groceries and Dining budgets, one disposable-income cinema trip
- A side-income Etsy sale and a transfer to savings
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from ledger_insights.api import dependencies
from ledger_insights.config import settings
from ledger_insights.infrastructure.clients.ledger import FireflyClient
from mock_ledger.main import app as mock_ledger_app

PROVIDERS = [
    dependencies.get_classifier,
    dependencies.get_expected_bill_service,
    dependencies.get_transaction_validator,
    dependencies.get_paycheck_surplus_service,
    dependencies.get_disposable_income_service,
    dependencies.get_unbudgeted_expense_service,
    dependencies.get_budget_variance_service,
    dependencies.get_additional_income_service,
    dependencies.get_bill_comparison_service,
]


@pytest.fixture
def household(monkeypatch):
    ledger = FireflyClient(
        base_url="http://mock-ledger/api",
        token="test-token",
        backoff_base=0,
        transport=httpx.ASGITransport(app=mock_ledger_app),
    )
    monkeypatch.setattr(dependencies, "get_ledger_client", lambda: ledger)
    monkeypatch.setattr(settings, "expected_monthly_paycheck", 5000.0)
    monkeypatch.setattr(settings, "valid_expense_accounts", ["1"])
    monkeypatch.setattr(settings, "valid_destination_accounts", ["1"])
    monkeypatch.setattr(settings, "excluded_additional_income_patterns", ["payroll"])

    for provider in PROVIDERS:
        provider.cache_clear()
    yield ledger
    for provider in PROVIDERS:
        provider.cache_clear()


@pytest.mark.integration
def test_expected_bills_for_march(client: TestClient, household):
    """Rent + Internet + half-yearly insurance; yearly domain is due in July"""
    response = client.get("/v1/bills/expected", params={"month": 3, "year": 2024})

    assert response.status_code == 200
    assert response.json()["expected_total"] == pytest.approx(2180.0)


@pytest.mark.integration
def test_average_monthly_bills(client: TestClient, household):
    response = client.get("/v1/bills/average", params={"year": 2024})

    assert response.status_code == 200
    assert response.json()["average_monthly"] == pytest.approx(1681.25)


@pytest.mark.integration
def test_paycheck_surplus(client: TestClient, household):
    response = client.get("/v1/analysis/paycheck-surplus", params={"month": 3, "year": 2024})

    assert response.status_code == 200
    assert response.json()["amount"] == pytest.approx(200.0)


@pytest.mark.integration
def test_unbudgeted_expenses(client: TestClient, household):
    """Bills count, savings transfer and budgeted spending do not"""
    response = client.get("/v1/analysis/unbudgeted-expenses", params={"month": 3, "year": 2024})

    data = response.json()
    assert [t["description"] for t in data["transactions"]] == ["Rent", "Internet", "Hardware store"]
    assert data["total"] == pytest.approx(1622.0)


@pytest.mark.integration
def test_additional_income(client: TestClient, household):
    response = client.get("/v1/analysis/additional-income", params={"month": 3, "year": 2024})

    data = response.json()
    assert [t["description"] for t in data["transactions"]] == ["Etsy sale"]
    assert data["total"] == pytest.approx(140.0)


@pytest.mark.integration
def test_budget_variance(client: TestClient, household):
    response = client.get("/v1/analysis/budget-variance", params={"month": 3, "year": 2024})

    data = response.json()
    budgets = {b["budget_name"]: b for b in data["budgets"]}
    assert budgets["Groceries"]["remaining"] == pytest.approx(189.55)
    assert budgets["Dining"]["remaining"] == pytest.approx(35.0)
    assert data["surplus"] == pytest.approx(224.55)


@pytest.mark.integration
def test_bill_comparison(client: TestClient, household):
    """Insurance has not been paid yet this month"""
    response = client.get("/v1/bills/comparison", params={"month": 3, "year": 2024})

    data = response.json()
    assert data["expected_total"] == pytest.approx(2180.0)
    assert data["actual_total"] == pytest.approx(1580.0)
    assert data["variance"] == pytest.approx(-600.0)
    assert data["bill_transaction_count"] == 2


@pytest.mark.integration
def test_disposable_income(client: TestClient, household):
    response = client.get("/v1/analysis/disposable-income", params={"month": 3, "year": 2024})
    assert response.json()["amount"] == pytest.approx(30.0)
