"""
Error bodies returned by the journal API.

All failures share one envelope so clients only need a single parser:

    {
        "error": {
            "code": "NOT_FOUND",
            "message": "Entry not found",
            "details": {"entry_id": "6f1c..."},
            "correlation_id": "ab12cd34"
        }
    }

``details`` and ``correlation_id`` are omitted when empty.
"""

from enum import Enum
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# Inference and storage failures are server-side from the client's view
STATUS_BY_CODE = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.EXTERNAL_SERVICE_ERROR: 500,
    ErrorCode.DATABASE_ERROR: 500,
    ErrorCode.INTERNAL_ERROR: 500,
}


class ErrorBody(BaseModel):
    code: ErrorCode
    message: str
    details: Optional[Dict[str, Any]] = None
    correlation_id: Optional[str] = None


class ErrorEnvelope(BaseModel):
    error: ErrorBody


def request_correlation_id(request: Optional[Request]) -> Optional[str]:
    """Correlation ID that CorrelationMiddleware stored on the request."""
    if request is None:
        return None
    return getattr(request.state, "correlation_id", None)


def error_response(
    code: ErrorCode,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    request: Optional[Request] = None,
) -> JSONResponse:
    """Render an ErrorEnvelope with the status code that belongs to ``code``."""
    envelope = ErrorEnvelope(
        error=ErrorBody(
            code=code,
            message=message,
            details=details or None,
            correlation_id=request_correlation_id(request),
        )
    )
    return JSONResponse(
        status_code=STATUS_BY_CODE[code],
        content=envelope.model_dump(mode="json", exclude_none=True),
    )


def validation_error(
    message: str,
    details: Optional[Dict[str, Any]] = None,
    request: Optional[Request] = None,
) -> JSONResponse:
    return error_response(ErrorCode.VALIDATION_ERROR, message, details, request)


def entry_not_found(entry_id: str, request: Optional[Request] = None) -> JSONResponse:
    return error_response(ErrorCode.NOT_FOUND, "Entry not found", {"entry_id": entry_id}, request)


def inference_error(model: str, reason: str, request: Optional[Request] = None) -> JSONResponse:
    """Sentiment or keyword analysis failed after retries; nothing was stored."""
    return error_response(
        ErrorCode.EXTERNAL_SERVICE_ERROR,
        "Failed to analyze entry content",
        {"service": model, "reason": reason},
        request,
    )


def database_error(
    reason: str,
    operation: Optional[str] = None,
    request: Optional[Request] = None,
) -> JSONResponse:
    """
    A statement failed. ``reason`` is the DatabaseError message, which is
    always one of our own fixed strings, never driver output.
    """
    details = {"reason": reason}
    if operation:
        details["operation"] = operation
    return error_response(ErrorCode.DATABASE_ERROR, "Database operation failed", details, request)


def internal_error(request: Optional[Request] = None) -> JSONResponse:
    # Never echo the exception text; it may contain entry content
    return error_response(ErrorCode.INTERNAL_ERROR, "Internal server error", request=request)
