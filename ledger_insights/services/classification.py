"""Transaction classification predicates"""

from typing import Iterable, Optional

from ledger_insights.domain.interfaces import ExclusionLookup
from ledger_insights.domain.models import ClassificationConfig, TransactionRecord, TransactionType


class TransactionClassifier:
    """
    Derives semantic categories from a transaction record.

    Every predicate except is_excluded_transaction is a pure function of the
    record and the configuration supplied at construction.
    """

    def __init__(self, config: ClassificationConfig, exclusion_lookup: ExclusionLookup):
        self.config = config
        self.exclusion_lookup = exclusion_lookup

    def is_transfer(self, transaction: TransactionRecord) -> bool:
        return transaction.type == TransactionType.TRANSFER

    def is_deposit(self, transaction: TransactionRecord) -> bool:
        return transaction.type == TransactionType.DEPOSIT

    def is_withdrawal(self, transaction: TransactionRecord) -> bool:
        return transaction.type == TransactionType.WITHDRAWAL

    def is_bill(self, transaction: TransactionRecord) -> bool:
        """Linked to a bill/subscription, or carrying the bills tag"""
        if transaction.bill_id or transaction.subscription_id:
            return True
        return self._has_tag(transaction.tags, self.config.bills_tag)

    def is_disposable_income(self, transaction: TransactionRecord) -> bool:
        return self._has_tag(transaction.tags, self.config.disposable_income_tag)

    def is_supplemented_by_disposable(self, tags: Optional[Iterable[str]]) -> bool:
        return self._has_tag(tags, self.config.disposable_income_tag)

    def is_paycheck(self, transaction: TransactionRecord) -> bool:
        return self._has_tag(transaction.tags, self.config.paycheck_tag)

    def has_no_destination(self, destination_id: Optional[str]) -> bool:
        return destination_id == self.config.no_name_expense_account_id

    def has_a_category(self, transaction: TransactionRecord) -> bool:
        return transaction.category_id is not None

    async def is_excluded_transaction(self, description: str, amount: str) -> bool:
        return await self.exclusion_lookup.is_excluded(description, amount)

    @staticmethod
    def _has_tag(tags: Optional[Iterable[str]], tag: Optional[str]) -> bool:
        if not tags or not tag:
            return False
        return tag in tags
