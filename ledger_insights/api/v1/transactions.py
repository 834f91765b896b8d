"""POST /v1/transactions/triage - Decide which transactions need categorizing or budgeting"""

from fastapi import APIRouter, Depends

from ledger_insights.api.dependencies import get_transaction_validator
from ledger_insights.api.v1.schemas import TriageItem, TriageRequest, TriageResponse
from ledger_insights.services.validation import TransactionValidator

router = APIRouter()


@router.post("/transactions/triage", response_model=TriageResponse)
async def triage_transactions(
    request_body: TriageRequest,
    validator: TransactionValidator = Depends(get_transaction_validator),
):
    """
    Flag each transaction for the categorization workflow.

    - should_categorize: not a transfer, and uncategorized unless
      include_already_categorized is set
    - should_set_budget: not a bill, disposable income, excluded, or deposit
    """
    items = []
    for transaction in request_body.transactions:
        record = transaction.to_record()
        items.append(
            TriageItem(
                journal_id=record.journal_id,
                description=record.description,
                should_categorize=validator.should_process_transaction(
                    record, request_body.include_already_categorized
                ),
                should_set_budget=await validator.should_set_budget(record),
            )
        )
    return TriageResponse(items=items)
