"""Firefly III ledger API client with exponential backoff retry logic"""

import asyncio
from typing import Any, Dict, List, Optional

import httpx

from ledger_insights.config import settings
from ledger_insights.domain.exceptions import LedgerAPIError
from ledger_insights.domain.models import Bill, BudgetLimit, TransactionRecord
from ledger_insights.infrastructure.observability.metrics import ledger_failure_counter, ledger_latency_histogram
from ledger_insights.utils.date_utils import month_date_range, parse_ledger_date


class FireflyClient:
    """Client for the ledger's JSON:API endpoints (transactions, bills, budgets)"""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.ledger_api_base).rstrip("/")
        self.token = token if token is not None else settings.ledger_api_token
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = max_retries or settings.http_max_retries
        self.backoff_base = settings.http_backoff_base if backoff_base is None else backoff_base
        self.transport = transport

    async def get_transactions_for_period(self, month: int, year: int) -> List[TransactionRecord]:
        """
        Fetch every transaction split dated within the month.

        Raises:
            LedgerAPIError: On timeout, HTTP errors, or invalid response
        """
        start, end = month_date_range(month, year)
        documents = await self._get_all_pages(
            "transactions",
            "/v1/transactions",
            {"start": start.isoformat(), "end": end.isoformat()},
        )

        try:
            return [
                self._parse_transaction(split)
                for document in documents
                for split in document.get("attributes", {}).get("transactions", [])
            ]
        except (KeyError, ValueError, TypeError) as e:
            raise LedgerAPIError(f"Invalid transaction data from ledger: {e}") from e

    async def get_active_bills(self) -> List[Bill]:
        documents = await self._get_all_pages("bills", "/v1/bills")

        try:
            bills = [self._parse_bill(document) for document in documents]
        except (KeyError, ValueError, TypeError) as e:
            raise LedgerAPIError(f"Invalid bill data from ledger: {e}") from e
        return [bill for bill in bills if bill.active]

    async def get_budget_limits(self, month: int, year: int) -> List[BudgetLimit]:
        """Budget limits for the month, joined with budget names"""
        start, end = month_date_range(month, year)
        budgets = await self._get_all_pages("budgets", "/v1/budgets")
        limits = await self._get_all_pages(
            "budget_limits",
            "/v1/budget-limits",
            {"start": start.isoformat(), "end": end.isoformat()},
        )

        try:
            names = {str(budget["id"]): budget["attributes"]["name"] for budget in budgets}
            return [
                BudgetLimit(
                    budget_id=str(limit["attributes"]["budget_id"]),
                    budget_name=names.get(str(limit["attributes"]["budget_id"]), "Unknown"),
                    amount=float(limit["attributes"]["amount"]),
                )
                for limit in limits
            ]
        except (KeyError, ValueError, TypeError) as e:
            raise LedgerAPIError(f"Invalid budget data from ledger: {e}") from e

    async def _get_all_pages(
        self,
        resource: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """Follow meta.pagination until every page has been read"""
        documents: List[Dict[str, Any]] = []
        page = 1

        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self._headers(),
            transport=self.transport,
        ) as client:
            while True:
                payload = await self._get_with_retry(client, resource, path, {**(params or {}), "page": page})
                if not isinstance(payload, dict) or "data" not in payload:
                    raise LedgerAPIError(f"No {resource} data received from ledger")

                documents.extend(payload["data"])
                pagination = payload.get("meta", {}).get("pagination", {})
                if page >= int(pagination.get("total_pages", 1)):
                    return documents
                page += 1

    async def _get_with_retry(
        self,
        client: httpx.AsyncClient,
        resource: str,
        path: str,
        params: Dict[str, Any],
    ) -> Any:
        """
        GET with retry logic.

        Retry strategy:
        - Exponential backoff: base, 2*base, 4*base, ...
        - Retries on 5xx errors and network failures
        - 4xx errors fail immediately
        """
        attempt = 0
        while True:
            try:
                with ledger_latency_histogram.labels(resource=resource).time():
                    response = await client.get(path, params=params)
                    response.raise_for_status()
                    return response.json()

            except httpx.HTTPStatusError as e:
                ledger_failure_counter.labels(resource=resource).inc()
                if e.response.status_code < 500:
                    raise LedgerAPIError(f"Ledger API error: {e.response.status_code}") from e
                attempt += 1
                if attempt >= self.max_retries:
                    raise LedgerAPIError(
                        f"Ledger API error: {e.response.status_code} after {attempt} attempts"
                    ) from e

            except httpx.TimeoutException as e:
                ledger_failure_counter.labels(resource=resource).inc()
                attempt += 1
                if attempt >= self.max_retries:
                    raise LedgerAPIError(f"Ledger API timeout after {self.timeout}s") from e

            except httpx.RequestError as e:
                ledger_failure_counter.labels(resource=resource).inc()
                attempt += 1
                if attempt >= self.max_retries:
                    raise LedgerAPIError(f"Ledger API unreachable: {e}") from e

            except ValueError as e:
                raise LedgerAPIError(f"Invalid JSON from ledger: {e}") from e

            backoff = self.backoff_base * (2 ** (attempt - 1))
            await asyncio.sleep(backoff)

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.api+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    @staticmethod
    def _parse_transaction(split: Dict[str, Any]) -> TransactionRecord:
        return TransactionRecord(
            description=split["description"],
            amount=str(split["amount"]),
            date=parse_ledger_date(split["date"]),
            type=split["type"],
            tags=split.get("tags"),
            journal_id=_optional_str(split.get("transaction_journal_id")),
            category_id=_optional_str(split.get("category_id")),
            category_name=split.get("category_name"),
            budget_id=_optional_str(split.get("budget_id")),
            bill_id=_optional_str(split.get("bill_id")),
            subscription_id=_optional_str(split.get("subscription_id")),
            source_id=_optional_str(split.get("source_id")),
            destination_id=_optional_str(split.get("destination_id")),
        )

    @staticmethod
    def _parse_bill(document: Dict[str, Any]) -> Bill:
        attributes = document["attributes"]
        end_date = attributes.get("end_date")
        return Bill(
            bill_id=_optional_str(document.get("id")),
            name=attributes["name"],
            amount_min=str(attributes["amount_min"]),
            amount_max=str(attributes["amount_max"]),
            start_date=parse_ledger_date(attributes["date"]),
            end_date=parse_ledger_date(end_date) if end_date else None,
            frequency=attributes["repeat_freq"],
            skip=int(attributes.get("skip") or 0),
            active=bool(attributes.get("active", False)),
        )


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)
