"""Domain models - pure Python dataclasses representing ledger entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Sequence


class BillFrequency(str, Enum):
    """Repeat frequencies understood by the recurrence calculator"""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    HALF_YEAR = "half-year"
    YEARLY = "yearly"


class TransactionType(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TRANSFER = "transfer"


@dataclass
class Bill:
    """Recurring expected obligation from the ledger"""

    name: str
    amount_min: str
    amount_max: str
    start_date: date
    frequency: str  # BillFrequency value, unknown values are kept as-is
    skip: int = 0  # monthly only: 1 = every other month
    active: bool = True
    end_date: Optional[date] = None  # inclusive
    bill_id: Optional[str] = None


@dataclass(frozen=True)
class Period:
    """A (month, year) pair, the unit of analysis"""

    month: int
    year: int

    def __str__(self) -> str:
        return f"{self.month}/{self.year}"


@dataclass
class TransactionRecord:
    """Single split of a ledger transaction"""

    description: str
    amount: str
    date: date
    type: str  # TransactionType value
    tags: Optional[List[str]] = None
    journal_id: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    budget_id: Optional[str] = None
    bill_id: Optional[str] = None
    subscription_id: Optional[str] = None
    source_id: Optional[str] = None
    destination_id: Optional[str] = None


@dataclass(frozen=True)
class ClassificationConfig:
    """Static inputs for the transaction classifier"""

    no_name_expense_account_id: str
    disposable_income_tag: str
    bills_tag: Optional[str] = None
    paycheck_tag: Optional[str] = None


@dataclass
class ExcludedTransaction:
    """Exclusion list entry, a missing field matches anything"""

    description: Optional[str] = None
    amount: Optional[str] = None
    reason: Optional[str] = None


@dataclass
class BudgetLimit:
    """Amount allocated to a budget for a period"""

    budget_id: str
    budget_name: str
    amount: float


@dataclass
class BudgetVarianceLine:
    budget_id: str
    budget_name: str
    allocated: float
    spent: float

    @property
    def remaining(self) -> float:
        return self.allocated - self.spent


@dataclass
class BudgetVarianceReport:
    """Allocated vs spent for every budget in a period"""

    lines: List[BudgetVarianceLine] = field(default_factory=list)

    @property
    def total_allocated(self) -> float:
        return sum(line.allocated for line in self.lines)

    @property
    def total_spent(self) -> float:
        return sum(line.spent for line in self.lines)

    @property
    def surplus(self) -> float:
        """Positive = under budget, negative = over budget"""
        return self.total_allocated - self.total_spent


@dataclass
class UnbudgetedExpenseSummary:
    transactions: Sequence[TransactionRecord]
    total: float


@dataclass
class AdditionalIncomeSummary:
    transactions: Sequence[TransactionRecord]
    total: float


@dataclass
class BillComparison:
    """Expected bill load for a month vs bills actually paid"""

    expected_total: float
    actual_total: float
    bill_transaction_count: int

    @property
    def variance(self) -> float:
        return self.actual_total - self.expected_total
