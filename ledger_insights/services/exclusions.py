"""Configured list of transactions that never receive a budget"""

import logging
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, List, Optional, Tuple

from ledger_insights.domain.exceptions import InvalidAmountError
from ledger_insights.domain.models import ExcludedTransaction

_AMOUNT_PATTERN = re.compile(r"^-?\d*\.?\d+$")


def normalize_amount(amount: str) -> Decimal:
    """
    Normalize a currency string to a 2-decimal absolute value.

    Handles "$1,234.50", "(45.00)" accounting negatives and plain "-12.3".
    """
    if not amount or not amount.strip():
        raise InvalidAmountError("Amount cannot be empty")

    cleaned = re.sub(r"[()$€£¥,]", "", amount).strip()
    if not _AMOUNT_PATTERN.match(cleaned):
        raise InvalidAmountError(f"Invalid amount format: {amount}")

    try:
        value = Decimal(cleaned)
    except InvalidOperation as e:
        raise InvalidAmountError(f"Invalid amount format: {amount}") from e
    return abs(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class ExclusionList:
    """In-memory exclusion lookup matching on description and/or amount"""

    def __init__(
        self,
        entries: Iterable[ExcludedTransaction] = (),
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.entries: List[ExcludedTransaction] = []
        self._entries: List[Tuple[ExcludedTransaction, Optional[Decimal]]] = []
        for entry in entries:
            if not entry.description and not entry.amount:
                self.logger.warning("Ignoring empty exclusion entry", extra={"reason": entry.reason})
                continue
            try:
                entry_amount = normalize_amount(entry.amount) if entry.amount else None
            except InvalidAmountError as e:
                self.logger.warning(
                    "Ignoring exclusion entry with invalid amount",
                    extra={"description": entry.description, "amount": entry.amount, "error": str(e)},
                )
                continue
            self.entries.append(entry)
            self._entries.append((entry, entry_amount))

    async def is_excluded(self, description: str, amount: str) -> bool:
        """
        True when any entry matches; absent entry fields match anything.

        An unparseable transaction amount never matches an entry that carries
        an amount.
        """
        normalized: Optional[Decimal] = None
        amount_checked = False

        for entry, entry_amount in self._entries:
            if entry.description and entry.description != description:
                continue
            if entry_amount is not None:
                if not amount_checked:
                    normalized = self._normalize_transaction_amount(description, amount)
                    amount_checked = True
                if normalized is None or entry_amount != normalized:
                    continue
            return True
        return False

    def _normalize_transaction_amount(self, description: str, amount: str) -> Optional[Decimal]:
        try:
            return normalize_amount(amount)
        except InvalidAmountError as e:
            self.logger.warning(
                "Unparseable transaction amount in exclusion check",
                extra={"description": description, "amount": amount, "error": str(e)},
            )
            return None
