"""Processing decisions built from classifier predicates"""

import logging
from typing import Any, Mapping, Optional

from ledger_insights.domain.models import TransactionRecord
from ledger_insights.services.classification import TransactionClassifier


class TransactionValidator:
    """Decides whether a transaction should be categorized or budgeted"""

    def __init__(self, classifier: TransactionClassifier, logger: Optional[logging.Logger] = None):
        self.classifier = classifier
        self.logger = logger or logging.getLogger(__name__)

    def should_process_transaction(
        self,
        transaction: TransactionRecord,
        include_already_categorized: bool,
    ) -> bool:
        """
        Transfers are never processed. Categorized transactions are processed
        only when include_already_categorized is set.
        """
        if self.classifier.is_transfer(transaction):
            return False
        return include_already_categorized or not self.classifier.has_a_category(transaction)

    async def should_set_budget(self, transaction: TransactionRecord) -> bool:
        """Bills, disposable income, excluded transactions and deposits get no budget"""
        is_excluded = await self.classifier.is_excluded_transaction(
            transaction.description,
            transaction.amount,
        )

        return (
            not self.classifier.is_bill(transaction)
            and not self.classifier.is_disposable_income(transaction)
            and not is_excluded
            and not self.classifier.is_deposit(transaction)
        )

    def validate_transaction_data(
        self,
        transaction: TransactionRecord,
        results_by_journal_id: Mapping[str, Any],
    ) -> bool:
        """Reject transactions without a journal id or without a matching result"""
        journal_id = transaction.journal_id

        if not journal_id:
            self.logger.warning("Missing journal ID", extra={"description": transaction.description})
            return False

        if journal_id not in results_by_journal_id:
            self.logger.warning(
                "No classification results found",
                extra={"description": transaction.description, "journal_id": journal_id},
            )
            return False

        return True

    def category_or_budget_changed(
        self,
        transaction: TransactionRecord,
        new_category_name: Optional[str] = None,
        new_budget_id: Optional[str] = None,
    ) -> bool:
        category_changed = bool(new_category_name) and transaction.category_name != new_category_name
        budget_changed = bool(new_budget_id) and transaction.budget_id != new_budget_id
        return category_changed or budget_changed
