"""GET /v1/analysis/* - Monthly transaction analysis endpoints"""

from typing import List

from fastapi import APIRouter, Depends, Query, Request

from ledger_insights.api.dependencies import (
    get_additional_income_service,
    get_budget_variance_service,
    get_disposable_income_service,
    get_paycheck_surplus_service,
    get_request_id,
    get_unbudgeted_expense_service,
)
from ledger_insights.api.v1.errors import unwrap_or_raise
from ledger_insights.api.v1.schemas import (
    AmountResponse,
    BudgetVarianceLineSchema,
    BudgetVarianceResponse,
    TransactionListResponse,
    TransactionSchema,
)
from ledger_insights.domain.models import BudgetVarianceReport, TransactionRecord
from ledger_insights.services.calculators import (
    AdditionalIncomeService,
    BudgetVarianceService,
    DisposableIncomeService,
    PaycheckSurplusService,
    UnbudgetedExpenseService,
)

router = APIRouter()


@router.get("/analysis/paycheck-surplus", response_model=AmountResponse)
async def get_paycheck_surplus(
    request: Request,
    month: int = Query(...),
    year: int = Query(...),
    service: PaycheckSurplusService = Depends(get_paycheck_surplus_service),
):
    """Paycheck income received minus the expected monthly paycheck"""
    result = await service.calculate_paycheck_surplus(month, year)
    response = result.map(
        lambda surplus: AmountResponse(month=month, year=year, operation=service.operation_name, amount=surplus)
    )
    return unwrap_or_raise(response, get_request_id(request))


@router.get("/analysis/disposable-income", response_model=AmountResponse)
async def get_disposable_income(
    request: Request,
    month: int = Query(...),
    year: int = Query(...),
    service: DisposableIncomeService = Depends(get_disposable_income_service),
):
    result = await service.calculate_disposable_income(month, year)
    response = result.map(
        lambda total: AmountResponse(month=month, year=year, operation=service.operation_name, amount=total)
    )
    return unwrap_or_raise(response, get_request_id(request))


@router.get("/analysis/unbudgeted-expenses", response_model=TransactionListResponse)
async def get_unbudgeted_expenses(
    request: Request,
    month: int = Query(...),
    year: int = Query(...),
    service: UnbudgetedExpenseService = Depends(get_unbudgeted_expense_service),
):
    """Expenses that were not assigned to any budget"""
    result = await service.calculate_unbudgeted_expenses(month, year)
    response = result.map(lambda summary: _transaction_list(month, year, summary.total, summary.transactions))
    return unwrap_or_raise(response, get_request_id(request))


@router.get("/analysis/additional-income", response_model=TransactionListResponse)
async def get_additional_income(
    request: Request,
    month: int = Query(...),
    year: int = Query(...),
    service: AdditionalIncomeService = Depends(get_additional_income_service),
):
    result = await service.calculate_additional_income(month, year)
    response = result.map(lambda summary: _transaction_list(month, year, summary.total, summary.transactions))
    return unwrap_or_raise(response, get_request_id(request))


@router.get("/analysis/budget-variance", response_model=BudgetVarianceResponse)
async def get_budget_variance(
    request: Request,
    month: int = Query(...),
    year: int = Query(...),
    service: BudgetVarianceService = Depends(get_budget_variance_service),
):
    """Allocated vs spent per budget; positive surplus means under budget"""
    result = await service.calculate_budget_variance(month, year)
    response = result.map(lambda report: _variance_response(month, year, report))
    return unwrap_or_raise(response, get_request_id(request))


def _variance_response(month: int, year: int, report: BudgetVarianceReport) -> BudgetVarianceResponse:
    return BudgetVarianceResponse(
        month=month,
        year=year,
        total_allocated=report.total_allocated,
        total_spent=report.total_spent,
        surplus=report.surplus,
        budgets=[
            BudgetVarianceLineSchema(
                budget_id=line.budget_id,
                budget_name=line.budget_name,
                allocated=line.allocated,
                spent=line.spent,
                remaining=line.remaining,
            )
            for line in report.lines
        ],
    )


def _transaction_list(
    month: int, year: int, total: float, transactions: List[TransactionRecord]
) -> TransactionListResponse:
    return TransactionListResponse(
        month=month,
        year=year,
        total=total,
        transactions=[TransactionSchema.from_record(t) for t in transactions],
    )
