"""GET /v1/bills/* - Expected bill load endpoints"""

from fastapi import APIRouter, Depends, Query, Request

from ledger_insights.api.dependencies import (
    get_bill_comparison_service,
    get_expected_bill_service,
    get_request_id,
)
from ledger_insights.api.v1.errors import unwrap_or_raise
from ledger_insights.api.v1.schemas import (
    AverageBillsResponse,
    BillComparisonResponse,
    ExpectedBillsResponse,
)
from ledger_insights.services.calculators import BillComparisonService
from ledger_insights.services.expected_bills import ExpectedBillService

router = APIRouter()


@router.get("/bills/expected", response_model=ExpectedBillsResponse)
async def get_expected_bills(
    request: Request,
    month: int = Query(..., description="Month (1-12)"),
    year: int = Query(..., description="Four-digit year"),
    service: ExpectedBillService = Depends(get_expected_bill_service),
):
    """Sum of bills expected to fall due in the month"""
    result = await service.get_expected_sum_for_month(month, year)
    response = result.map(lambda total: ExpectedBillsResponse(month=month, year=year, expected_total=total))
    return unwrap_or_raise(response, get_request_id(request))


@router.get("/bills/average", response_model=AverageBillsResponse)
async def get_average_bills(
    request: Request,
    year: int = Query(..., description="Four-digit year"),
    service: ExpectedBillService = Depends(get_expected_bill_service),
):
    """Average monthly bill load projected over the year"""
    result = await service.get_average_monthly_bills_for_year(year)
    response = result.map(lambda average: AverageBillsResponse(year=year, average_monthly=average))
    return unwrap_or_raise(response, get_request_id(request))


@router.get("/bills/comparison", response_model=BillComparisonResponse)
async def get_bill_comparison(
    request: Request,
    month: int = Query(...),
    year: int = Query(...),
    service: BillComparisonService = Depends(get_bill_comparison_service),
):
    """Expected vs actually recorded bill payments for the month"""
    result = await service.calculate_bill_comparison(month, year)
    response = result.map(
        lambda comparison: BillComparisonResponse(
            month=month,
            year=year,
            expected_total=comparison.expected_total,
            actual_total=comparison.actual_total,
            variance=comparison.variance,
            bill_transaction_count=comparison.bill_transaction_count,
        )
    )
    return unwrap_or_raise(response, get_request_id(request))
