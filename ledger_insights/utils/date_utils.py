"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, timezone
from typing import Tuple

from ledger_insights.domain.exceptions import InvalidPeriodError

MIN_YEAR = 1900
MAX_YEAR = 9999


def validate_month_year(month: int, year: int) -> None:
    """Raise InvalidPeriodError unless month is 1-12 and year is four digits"""
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise InvalidPeriodError("Month must be an integer between 1 and 12")
    if isinstance(year, bool) or not isinstance(year, int) or not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidPeriodError("Year must be a valid 4-digit year")


def validate_year(year: int) -> None:
    validate_month_year(1, year)


def first_day_of_month(month: int, year: int) -> date:
    return date(year, month, 1)


def last_day_of_month(month: int, year: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def month_date_range(month: int, year: int) -> Tuple[date, date]:
    """First and last day of the month (inclusive)"""
    return first_day_of_month(month, year), last_day_of_month(month, year)


def parse_ledger_date(value: str) -> date:
    """
    Parse a ledger date or timestamp into a UTC calendar date.

    Date-only strings are taken as-is. Timestamps with an offset are converted
    to UTC first, so "2024-03-01T00:00:00+00:00" stays in March regardless of
    the local timezone.
    """
    if "T" not in value:
        return date.fromisoformat(value)

    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()
