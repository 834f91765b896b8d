"""Translate analysis errors into HTTP responses"""

import logging
from typing import TypeVar

from fastapi import HTTPException

from ledger_insights.domain.result import AnalysisErrorKind, AnalysisResult

T = TypeVar("T")

STATUS_BY_KIND = {
    AnalysisErrorKind.VALIDATION: 422,
    AnalysisErrorKind.FETCH: 503,
    AnalysisErrorKind.CALCULATION: 500,
    AnalysisErrorKind.CONFIGURATION: 500,
}


def unwrap_or_raise(result: AnalysisResult[T], request_id: str) -> T:
    """Return the Ok value, or raise HTTPException carrying the error message"""
    if result.ok:
        return result.value

    error = result.error
    logging.warning(
        f"Analysis error: {error.message}",
        extra={"request_id": request_id, "operation": error.operation, "error_kind": error.kind.value},
    )
    raise HTTPException(
        status_code=STATUS_BY_KIND[error.kind],
        detail={"kind": error.kind.value, "message": error.message, "user_message": error.user_message},
    )
