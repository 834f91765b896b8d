"""Result type for analysis operations.

Services return ``Ok(value)`` or ``Err(AnalysisError)`` instead of raising, so
callers handle failures explicitly:

    result = await service.calculate_paycheck_surplus(3, 2024)
    if result.ok:
        print(result.value)
    else:
        print(result.error.user_message)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")


class AnalysisErrorKind(str, Enum):
    VALIDATION = "validation"
    FETCH = "fetch"
    CALCULATION = "calculation"
    CONFIGURATION = "configuration"


@dataclass(frozen=True)
class AnalysisError:
    """Structured failure with period and operation context"""

    kind: AnalysisErrorKind
    month: Optional[int]
    year: int
    operation: str
    message: str
    user_message: str
    cause: Optional[BaseException] = None


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def map(self, fn: Callable[[T], U]) -> "Ok[U]":
        return Ok(fn(self.value))


@dataclass(frozen=True)
class Err:
    error: AnalysisError

    @property
    def ok(self) -> bool:
        return False

    def map(self, fn: Callable) -> "Err":
        return self


AnalysisResult = Union[Ok[T], Err]


def _describe_period(month: Optional[int], year: int) -> str:
    if month is None:
        return f"year {year}"
    return f"{month}/{year}"


def build_analysis_error(
    kind: AnalysisErrorKind,
    month: Optional[int],
    year: int,
    operation: str,
    cause: Optional[BaseException] = None,
) -> AnalysisError:
    """Create an AnalysisError with technical and user-facing messages"""
    period = _describe_period(month, year)
    detail = f": {cause}" if cause is not None else ""

    if kind is AnalysisErrorKind.VALIDATION:
        message = f"Invalid period {period} for {operation}{detail}"
        user_message = (
            f"The period {period} is invalid. Please provide a month between 1 and 12 "
            "and a four-digit year."
        )
    elif kind is AnalysisErrorKind.FETCH:
        message = f"Failed to fetch ledger data for {operation} on {period}{detail}"
        user_message = (
            f"Unable to retrieve ledger data for {period}. "
            "Please check your connection and try again."
        )
    elif kind is AnalysisErrorKind.CONFIGURATION:
        message = f"Invalid configuration for {operation}{detail}"
        user_message = "The service is not configured correctly. Please check your configuration."
    else:
        message = f"Calculation failed for {operation} on {period}{detail}"
        user_message = f"An error occurred while calculating {operation} for {period}."

    return AnalysisError(
        kind=kind,
        month=month,
        year=year,
        operation=operation,
        message=message,
        user_message=user_message,
        cause=cause,
    )
