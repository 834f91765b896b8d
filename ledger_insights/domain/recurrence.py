"""Bill recurrence engine - decides when bills fall due and what they cost per year"""

import math

from ledger_insights.domain.exceptions import BillCalculationError, InvalidAmountError
from ledger_insights.domain.models import Bill, BillFrequency
from ledger_insights.utils.date_utils import first_day_of_month, last_day_of_month

# Occurrences per year for fixed-interval frequencies (monthly depends on skip)
OCCURRENCES_PER_YEAR = {
    BillFrequency.WEEKLY: 52,
    BillFrequency.QUARTERLY: 4,
    BillFrequency.HALF_YEAR: 2,
    BillFrequency.YEARLY: 1,
}


def is_known_frequency(frequency: str) -> bool:
    return frequency in {f.value for f in BillFrequency}


def parse_amount(value: str) -> float:
    """Parse a decimal amount string; must be finite and non-negative"""
    try:
        amount = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidAmountError(f"Invalid amount format: {value!r}") from e

    if not math.isfinite(amount) or amount < 0:
        raise InvalidAmountError(f"Amount must be a finite non-negative number: {value!r}")
    return amount


def monthly_interval(bill: Bill) -> int:
    """Months between occurrences of a monthly bill (skip=1 means every other month)"""
    skip = bill.skip or 0
    if isinstance(skip, bool) or not isinstance(skip, int) or skip < 0:
        raise BillCalculationError(f"Invalid skip value for bill {bill.name!r}: {skip!r}")
    return skip + 1


def is_due_in_month(bill: Bill, target_month: int, target_year: int) -> bool:
    """
    Decide whether a bill has an occurrence in the target month.

    Rules, in order:
    - Ended before the first of the month: not due
    - Starts after the last day of the month: not due
    - Starts inside the month: due (first occurrence)
    - Otherwise apply the frequency pattern counted from the start month

    Unknown frequencies are never due.
    """
    if bill.end_date is not None and bill.end_date < first_day_of_month(target_month, target_year):
        return False

    if bill.start_date > last_day_of_month(target_month, target_year):
        return False

    start_month = bill.start_date.month
    start_year = bill.start_date.year
    if start_year == target_year and start_month == target_month:
        return True

    months_elapsed = (target_year - start_year) * 12 + (target_month - start_month)

    if bill.frequency == BillFrequency.WEEKLY:
        # A weekly bill lands in every month
        return True
    if bill.frequency == BillFrequency.MONTHLY:
        interval = monthly_interval(bill)
        return months_elapsed >= 0 and months_elapsed % interval == 0
    if bill.frequency == BillFrequency.QUARTERLY:
        return months_elapsed >= 0 and months_elapsed % 3 == 0
    if bill.frequency == BillFrequency.HALF_YEAR:
        return months_elapsed >= 0 and months_elapsed % 6 == 0
    if bill.frequency == BillFrequency.YEARLY:
        return target_month == start_month and target_year >= start_year

    return False


def yearly_occurrence_amount(bill: Bill, target_year: int) -> float:
    """
    Project what a bill costs over the target year.

    Returns a full steady-state year of occurrences even when the bill starts
    part-way through the target year. Bills starting after the year or ending
    before it contribute nothing.

    Raises:
        InvalidAmountError: amount_max is not a finite non-negative number
        BillCalculationError: a monthly bill has a negative skip
    """
    amount = parse_amount(bill.amount_max)

    if bill.start_date.year > target_year:
        return 0.0
    if bill.end_date is not None and bill.end_date.year < target_year:
        return 0.0

    if bill.frequency == BillFrequency.MONTHLY:
        interval = monthly_interval(bill)
        return amount * (12 / interval)

    if not is_known_frequency(bill.frequency):
        return 0.0
    return amount * OCCURRENCES_PER_YEAR[BillFrequency(bill.frequency)]
