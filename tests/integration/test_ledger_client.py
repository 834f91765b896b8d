"""Integration tests for the ledger HTTP client using httpx.MockTransport"""

import httpx
import pytest
from datetime import date
from ledger_insights.domain.exceptions import LedgerAPIError
from ledger_insights.infrastructure.clients.ledger import FireflyClient


def _split(journal_id, **overrides):
    split = {
        "transaction_journal_id": journal_id,
        "description": "Groceries",
        "amount": "54.20",
        "date": "2024-03-12T00:00:00+00:00",
        "type": "withdrawal",
        "tags": [],
        "category_id": None,
        "category_name": None,
        "budget_id": 3,
        "bill_id": None,
        "subscription_id": None,
        "source_id": 1,
        "destination_id": 20,
    }
    split.update(overrides)
    return split


def _page(data, page, total_pages):
    return {"data": data, "meta": {"pagination": {"current_page": page, "total_pages": total_pages}}}


def _client(handler, **kwargs):
    return FireflyClient(
        base_url="http://ledger.test/api",
        token="secret",
        max_retries=kwargs.pop("max_retries", 3),
        backoff_base=0,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


async def test_transactions_follow_pagination_and_flatten_splits():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        page = int(request.url.params["page"])
        if page == 1:
            documents = [{"id": "10", "attributes": {"transactions": [_split(1), _split(2, tags=["Bills"])]}}]
        else:
            documents = [{"id": "11", "attributes": {"transactions": [_split(3, date="2024-03-31T22:00:00-05:00")]}}]
        return httpx.Response(200, json=_page(documents, page, 2))

    transactions = await _client(handler).get_transactions_for_period(3, 2024)

    assert [t.journal_id for t in transactions] == ["1", "2", "3"]
    assert transactions[0].budget_id == "3"
    assert transactions[1].tags == ["Bills"]
    assert transactions[2].date == date(2024, 4, 1)
    assert requests[0].url.params["start"] == "2024-03-01"
    assert requests[0].url.params["end"] == "2024-03-31"
    assert requests[0].headers["Authorization"] == "Bearer secret"
    assert len(requests) == 2


async def test_active_bills_are_parsed_and_filtered():
    documents = [
        {
            "id": "1",
            "attributes": {
                "name": "Internet",
                "amount_min": "80.00",
                "amount_max": "85.00",
                "date": "2024-01-15T00:00:00+00:00",
                "end_date": None,
                "repeat_freq": "monthly",
                "skip": 0,
                "active": True,
            },
        },
        {
            "id": "2",
            "attributes": {
                "name": "Old Gym",
                "amount_min": "40.00",
                "amount_max": "40.00",
                "date": "2020-01-01",
                "repeat_freq": "monthly",
                "active": False,
            },
        },
    ]

    def handler(request):
        return httpx.Response(200, json=_page(documents, 1, 1))

    bills = await _client(handler).get_active_bills()

    assert len(bills) == 1
    assert bills[0].bill_id == "1"
    assert bills[0].amount_max == "85.00"
    assert bills[0].start_date == date(2024, 1, 15)
    assert bills[0].frequency == "monthly"


async def test_budget_limits_joined_with_names():
    def handler(request):
        if request.url.path.endswith("/budget-limits"):
            data = [
                {"id": "100", "attributes": {"budget_id": "1", "amount": "400.00"}},
                {"id": "101", "attributes": {"budget_id": "9", "amount": "50.00"}},
            ]
        else:
            data = [{"id": "1", "attributes": {"name": "Groceries"}}]
        return httpx.Response(200, json=_page(data, 1, 1))

    limits = await _client(handler).get_budget_limits(3, 2024)

    assert [(limit.budget_id, limit.budget_name, limit.amount) for limit in limits] == [
        ("1", "Groceries", 400.0),
        ("9", "Unknown", 50.0),
    ]


async def test_retries_server_errors_then_succeeds():
    attempts = {"count": 0}

    def handler(request):
        attempts["count"] += 1
        if attempts["count"] < 3:
            return httpx.Response(503)
        return httpx.Response(200, json=_page([], 1, 1))

    transactions = await _client(handler).get_transactions_for_period(3, 2024)

    assert transactions == []
    assert attempts["count"] == 3


async def test_gives_up_after_max_retries():
    attempts = {"count": 0}

    def handler(request):
        attempts["count"] += 1
        return httpx.Response(500)

    with pytest.raises(LedgerAPIError, match="500 after 2 attempts"):
        await _client(handler, max_retries=2).get_active_bills()
    assert attempts["count"] == 2


async def test_client_errors_fail_immediately():
    attempts = {"count": 0}

    def handler(request):
        attempts["count"] += 1
        return httpx.Response(401)

    with pytest.raises(LedgerAPIError, match="401"):
        await _client(handler).get_active_bills()
    assert attempts["count"] == 1


async def test_network_errors_are_retried():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(LedgerAPIError, match="unreachable"):
        await _client(handler).get_transactions_for_period(3, 2024)


async def test_missing_data_is_rejected():
    def handler(request):
        return httpx.Response(200, json={"meta": {}})

    with pytest.raises(LedgerAPIError, match="No bills data"):
        await _client(handler).get_active_bills()
