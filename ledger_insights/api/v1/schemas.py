"""Pydantic schemas for API request/response validation"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from ledger_insights.domain.models import TransactionRecord


class ExpectedBillsResponse(BaseModel):
    """Response for GET /v1/bills/expected"""

    month: int
    year: int
    expected_total: float


class AverageBillsResponse(BaseModel):
    """Response for GET /v1/bills/average"""

    year: int
    average_monthly: float


class BillComparisonResponse(BaseModel):
    month: int
    year: int
    expected_total: float
    actual_total: float
    variance: float
    bill_transaction_count: int


class AmountResponse(BaseModel):
    """Single-figure analysis result"""

    month: int
    year: int
    operation: str
    amount: float


class TransactionSchema(BaseModel):
    """Ledger transaction split"""

    description: str
    amount: str
    date: date
    type: str = Field(..., pattern="^(deposit|withdrawal|transfer)$")
    tags: Optional[List[str]] = None
    journal_id: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    budget_id: Optional[str] = None
    bill_id: Optional[str] = None
    subscription_id: Optional[str] = None
    source_id: Optional[str] = None
    destination_id: Optional[str] = None

    @classmethod
    def from_record(cls, record: TransactionRecord) -> "TransactionSchema":
        return cls(**vars(record))

    def to_record(self) -> TransactionRecord:
        return TransactionRecord(**self.model_dump())


class TransactionListResponse(BaseModel):
    month: int
    year: int
    total: float
    transactions: List[TransactionSchema]


class BudgetVarianceLineSchema(BaseModel):
    budget_id: str
    budget_name: str
    allocated: float
    spent: float
    remaining: float


class BudgetVarianceResponse(BaseModel):
    """Response for GET /v1/analysis/budget-variance"""

    month: int
    year: int
    total_allocated: float
    total_spent: float
    surplus: float
    budgets: List[BudgetVarianceLineSchema]


class TriageRequest(BaseModel):
    """Request body for POST /v1/transactions/triage"""

    transactions: List[TransactionSchema]
    include_already_categorized: bool = False


class TriageItem(BaseModel):
    journal_id: Optional[str]
    description: str
    should_categorize: bool
    should_set_budget: bool


class TriageResponse(BaseModel):
    items: List[TriageItem]
