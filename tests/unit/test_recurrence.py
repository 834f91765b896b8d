"""Unit tests for bill recurrence logic"""

import pytest
from datetime import date
from ledger_insights.domain.exceptions import BillCalculationError, InvalidAmountError
from ledger_insights.domain.recurrence import (
    is_due_in_month,
    is_known_frequency,
    monthly_interval,
    parse_amount,
    yearly_occurrence_amount,
)


def test_quarterly_bill_due_every_third_month(make_bill):
    """Quarterly bill starting March: due Mar/Jun/Sep/Dec, not Apr/May"""
    bill = make_bill(frequency="quarterly", start_date=date(2024, 3, 10))

    for month in (3, 6, 9, 12):
        assert is_due_in_month(bill, month, 2024)
    assert not is_due_in_month(bill, 4, 2024)
    assert not is_due_in_month(bill, 5, 2024)
    # Pattern continues into later years
    assert is_due_in_month(bill, 3, 2025)
    assert not is_due_in_month(bill, 4, 2025)


def test_yearly_bill_due_only_in_start_month(make_bill):
    """Yearly bill starting June 2023: due June 2024+, never May/July"""
    bill = make_bill(frequency="yearly", start_date=date(2023, 6, 1))

    assert is_due_in_month(bill, 6, 2024)
    assert is_due_in_month(bill, 6, 2026)
    assert not is_due_in_month(bill, 5, 2024)
    assert not is_due_in_month(bill, 7, 2024)
    assert not is_due_in_month(bill, 7, 2023)


def test_monthly_bill_with_skip(make_bill):
    """skip=1 starting January: due Jan, Mar, May; not Feb, Apr"""
    bill = make_bill(frequency="monthly", skip=1, start_date=date(2024, 1, 5))

    assert is_due_in_month(bill, 1, 2024)
    assert is_due_in_month(bill, 3, 2024)
    assert is_due_in_month(bill, 5, 2024)
    assert not is_due_in_month(bill, 2, 2024)
    assert not is_due_in_month(bill, 4, 2024)
    # 12 months later is an even offset
    assert is_due_in_month(bill, 1, 2025)


def test_monthly_bill_without_skip_due_every_month(make_bill):
    bill = make_bill(frequency="monthly", start_date=date(2023, 11, 30))
    assert all(is_due_in_month(bill, month, 2024) for month in range(1, 13))


def test_end_dated_bill(make_bill):
    """Bill ending 2024-05-31 is due in May 2024, not June 2024"""
    bill = make_bill(start_date=date(2024, 1, 1), end_date=date(2024, 5, 31))

    assert is_due_in_month(bill, 5, 2024)
    assert not is_due_in_month(bill, 6, 2024)


def test_future_start_bill(make_bill):
    """Bill starting July 2024: not due June, due July and August"""
    bill = make_bill(start_date=date(2024, 7, 1))

    assert not is_due_in_month(bill, 6, 2024)
    assert is_due_in_month(bill, 7, 2024)
    assert is_due_in_month(bill, 8, 2024)


def test_first_occurrence_in_start_month_regardless_of_frequency(make_bill):
    bill = make_bill(frequency="half-year", start_date=date(2024, 2, 28))
    assert is_due_in_month(bill, 2, 2024)
    assert not is_due_in_month(bill, 5, 2024)
    assert is_due_in_month(bill, 8, 2024)


def test_weekly_bill_due_every_month_once_started(make_bill):
    bill = make_bill(frequency="weekly", start_date=date(2024, 1, 3))
    assert is_due_in_month(bill, 2, 2024)
    assert is_due_in_month(bill, 11, 2024)
    assert not is_due_in_month(bill, 12, 2023)


def test_unknown_frequency_never_due_after_start(make_bill):
    bill = make_bill(frequency="fortnightly", start_date=date(2024, 1, 1))
    assert not is_due_in_month(bill, 2, 2024)
    assert not is_known_frequency("fortnightly")
    assert is_known_frequency("half-year")


def test_yearly_amount_per_frequency(make_bill):
    """Steady-state yearly projection per frequency"""
    start = date(2023, 1, 1)
    assert yearly_occurrence_amount(make_bill(amount_max="25", frequency="weekly", start_date=start), 2024) == 1300
    assert yearly_occurrence_amount(make_bill(amount_max="120", frequency="monthly", start_date=start), 2024) == 1440
    assert yearly_occurrence_amount(make_bill(amount_max="50", frequency="monthly", skip=1, start_date=start), 2024) == 300
    assert yearly_occurrence_amount(make_bill(amount_max="300", frequency="quarterly", start_date=start), 2024) == 1200
    assert yearly_occurrence_amount(make_bill(amount_max="400", frequency="half-year", start_date=start), 2024) == 800
    assert yearly_occurrence_amount(make_bill(amount_max="1200", frequency="yearly", start_date=start), 2024) == 1200


def test_yearly_amount_ignores_partial_year_start(make_bill):
    """A bill starting in November still projects a full year"""
    bill = make_bill(amount_max="100", frequency="monthly", start_date=date(2024, 11, 1))
    assert yearly_occurrence_amount(bill, 2024) == 1200


def test_yearly_amount_zero_outside_active_years(make_bill):
    future = make_bill(start_date=date(2025, 1, 1))
    ended = make_bill(start_date=date(2020, 1, 1), end_date=date(2023, 12, 31))
    unknown = make_bill(frequency="fortnightly", start_date=date(2020, 1, 1))

    assert yearly_occurrence_amount(future, 2024) == 0
    assert yearly_occurrence_amount(ended, 2024) == 0
    assert yearly_occurrence_amount(unknown, 2024) == 0


def test_yearly_amount_rejects_malformed_amount(make_bill):
    bill = make_bill(amount_max="not-a-number")
    with pytest.raises(InvalidAmountError):
        yearly_occurrence_amount(bill, 2024)


@pytest.mark.parametrize("value", ["abc", "", "nan", "inf", "-5.00"])
def test_parse_amount_rejects_invalid(value):
    with pytest.raises(InvalidAmountError):
        parse_amount(value)


def test_parse_amount_accepts_decimal_strings():
    assert parse_amount("99.95") == 99.95
    assert parse_amount("0") == 0.0


def test_monthly_interval(make_bill):
    assert monthly_interval(make_bill(skip=0)) == 1
    assert monthly_interval(make_bill(skip=2)) == 3
    assert monthly_interval(make_bill(skip=None)) == 1


def test_negative_skip_is_rejected(make_bill):
    bill = make_bill(skip=-1, start_date=date(2024, 1, 1))

    with pytest.raises(BillCalculationError):
        is_due_in_month(bill, 3, 2024)
    with pytest.raises(BillCalculationError):
        yearly_occurrence_amount(bill, 2024)
