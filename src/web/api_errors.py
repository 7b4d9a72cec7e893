"""
Unified API Error Response System.

Every error leaving the intake API has the same JSON body so the client
can handle failures in one place. Intake core errors are translated to
APIError here; routes never build error responses by hand.

Usage:
    from web.api_errors import register_exception_handlers
    register_exception_handlers(app)
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from intake.exceptions import (
    DuplicateMember,
    IncompleteMember,
    IntakeError,
    InvalidFieldValue,
    MalformedPath,
    MemberNotFound,
    SessionClosed,
    SessionLimitReached,
    SessionNotFound,
    StepNotFound,
)

logger = logging.getLogger(__name__)

HTTP_422 = 422


# =============================================================================
# ERROR CODES
# =============================================================================


class ErrorCode(str, Enum):
    """
    Standardized error codes for API responses.

    Categories:
    - VALIDATION_*: Input validation errors (400, 422)
    - RESOURCE_*: Resource-related errors (404, 409)
    - BUSINESS_*: Wizard rule errors (400, 409)
    - SERVER_*: Server-side errors (500)
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    VALIDATION_INVALID_FORMAT = "VALIDATION_INVALID_FORMAT"
    VALIDATION_MALFORMED_PATH = "VALIDATION_MALFORMED_PATH"
    VALIDATION_INCOMPLETE_MEMBER = "VALIDATION_INCOMPLETE_MEMBER"

    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_ALREADY_EXISTS = "RESOURCE_ALREADY_EXISTS"
    RESOURCE_CONFLICT = "RESOURCE_CONFLICT"

    BUSINESS_RULE_VIOLATION = "BUSINESS_RULE_VIOLATION"
    BUSINESS_OPERATION_NOT_ALLOWED = "BUSINESS_OPERATION_NOT_ALLOWED"

    SERVER_INTERNAL_ERROR = "SERVER_INTERNAL_ERROR"


ERROR_CODE_STATUS_MAP: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.VALIDATION_INVALID_FORMAT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.VALIDATION_MALFORMED_PATH: status.HTTP_400_BAD_REQUEST,
    ErrorCode.VALIDATION_INCOMPLETE_MEMBER: status.HTTP_400_BAD_REQUEST,
    ErrorCode.RESOURCE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.RESOURCE_ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.RESOURCE_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.BUSINESS_RULE_VIOLATION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.BUSINESS_OPERATION_NOT_ALLOWED: status.HTTP_409_CONFLICT,
    ErrorCode.SERVER_INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Most specific class first; IntakeError is the fallback.
INTAKE_ERROR_CODES = (
    (MalformedPath, ErrorCode.VALIDATION_MALFORMED_PATH),
    (InvalidFieldValue, ErrorCode.VALIDATION_INVALID_FORMAT),
    (IncompleteMember, ErrorCode.VALIDATION_INCOMPLETE_MEMBER),
    (MemberNotFound, ErrorCode.RESOURCE_NOT_FOUND),
    (SessionNotFound, ErrorCode.RESOURCE_NOT_FOUND),
    (StepNotFound, ErrorCode.RESOURCE_NOT_FOUND),
    (DuplicateMember, ErrorCode.RESOURCE_ALREADY_EXISTS),
    (SessionClosed, ErrorCode.BUSINESS_OPERATION_NOT_ALLOWED),
    (SessionLimitReached, ErrorCode.RESOURCE_CONFLICT),
    (IntakeError, ErrorCode.BUSINESS_RULE_VIOLATION),
)


# =============================================================================
# ERROR RESPONSE MODELS
# =============================================================================


class FieldError(BaseModel):
    """Individual field validation error."""
    field: str = Field(..., description="Field name that caused the error")
    message: str = Field(..., description="Error message for this field")
    code: str = Field(default="invalid", description="Error code for this field")


class ErrorResponse(BaseModel):
    """Standardized API error response."""
    error: bool = Field(default=True, description="Always true for errors")
    code: str = Field(..., description="Error code from ErrorCode enum")
    message: str = Field(..., description="Human-readable error message")
    status_code: int = Field(..., description="HTTP status code")
    timestamp: str = Field(..., description="ISO 8601 timestamp")
    request_id: str = Field(..., description="Unique request identifier for tracking")
    path: Optional[str] = Field(None, description="Request path that caused the error")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error context")
    field_errors: Optional[List[FieldError]] = Field(None, description="Field-specific validation errors")


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


# =============================================================================
# API ERROR EXCEPTION
# =============================================================================


class APIError(Exception):
    """
    Exception carrying a standardized error response.

    Usage:
        raise APIError(
            code=ErrorCode.RESOURCE_NOT_FOUND,
            message="Session not found",
            details={"session_id": session_id},
        )
    """

    def __init__(
        self,
        code: Union[ErrorCode, str],
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        field_errors: Optional[List[Dict[str, str]]] = None,
    ):
        self.code = code if isinstance(code, ErrorCode) else ErrorCode(code)
        self.message = message
        self.status_code = status_code or ERROR_CODE_STATUS_MAP.get(
            self.code, status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        self.details = details
        self.field_errors = field_errors
        super().__init__(message)

    @classmethod
    def from_intake_error(cls, exc: IntakeError) -> "APIError":
        code = next(c for error_type, c in INTAKE_ERROR_CODES if isinstance(exc, error_type))
        field_errors = None
        if isinstance(exc, InvalidFieldValue):
            field_errors = [{"field": exc.field, "message": exc.reason, "code": "invalid_value"}]
        return cls(code=code, message=exc.message, details=exc.details or None, field_errors=field_errors)

    def to_response(self, request_id: str, path: Optional[str] = None) -> ErrorResponse:
        """Convert to ErrorResponse model."""
        field_error_models = None
        if self.field_errors:
            field_error_models = [
                FieldError(
                    field=fe.get("field", "unknown"),
                    message=fe.get("message", "Invalid value"),
                    code=fe.get("code", "invalid"),
                )
                for fe in self.field_errors
            ]

        return ErrorResponse(
            error=True,
            code=self.code.value,
            message=self.message,
            status_code=self.status_code,
            timestamp=_timestamp(),
            request_id=request_id,
            path=path,
            details=self.details,
            field_errors=field_error_models,
        )


def get_request_id(request: Request) -> str:
    """Get or generate request ID for tracking."""
    request_id = request.headers.get("X-Request-ID")
    if not request_id:
        request_id = str(uuid.uuid4())
    return request_id


def _api_error_response(request: Request, exc: APIError) -> JSONResponse:
    request_id = get_request_id(request)
    log_level = logging.WARNING if exc.status_code < 500 else logging.ERROR
    logger.log(
        log_level,
        f"[{request_id}] APIError: {exc.code.value} - {exc.message}",
        extra={
            "request_id": request_id,
            "error_code": exc.code.value,
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
        },
    )
    response = exc.to_response(request_id, request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content=response.model_dump(),
        headers={"X-Request-ID": request_id},
    )


# =============================================================================
# GLOBAL EXCEPTION HANDLERS
# =============================================================================


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        return _api_error_response(request, exc)

    @app.exception_handler(IntakeError)
    async def intake_error_handler(request: Request, exc: IntakeError) -> JSONResponse:
        return _api_error_response(request, APIError.from_intake_error(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Handle Pydantic validation errors."""
        request_id = get_request_id(request)

        field_errors = []
        for error in exc.errors():
            field_path = ".".join(str(loc) for loc in error["loc"] if loc != "body")
            field_errors.append(
                FieldError(field=field_path or "body", message=error["msg"], code=error["type"])
            )

        logger.warning(f"[{request_id}] Validation error: {len(field_errors)} field(s)")

        response = ErrorResponse(
            error=True,
            code=ErrorCode.VALIDATION_ERROR.value,
            message="Request validation failed",
            status_code=HTTP_422,
            timestamp=_timestamp(),
            request_id=request_id,
            path=request.url.path,
            field_errors=field_errors,
        )
        return JSONResponse(
            status_code=HTTP_422,
            content=response.model_dump(),
            headers={"X-Request-ID": request_id},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Handle standard HTTP exceptions."""
        request_id = get_request_id(request)

        status_to_code = {
            400: ErrorCode.VALIDATION_ERROR,
            404: ErrorCode.RESOURCE_NOT_FOUND,
            405: ErrorCode.BUSINESS_OPERATION_NOT_ALLOWED,
            409: ErrorCode.RESOURCE_CONFLICT,
        }
        error_code = status_to_code.get(exc.status_code, ErrorCode.SERVER_INTERNAL_ERROR)

        logger.warning(f"[{request_id}] HTTP {exc.status_code}: {exc.detail}")

        response = ErrorResponse(
            error=True,
            code=error_code.value,
            message=str(exc.detail) if exc.detail else "An error occurred",
            status_code=exc.status_code,
            timestamp=_timestamp(),
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=response.model_dump(),
            headers={"X-Request-ID": request_id},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all. Internal details are logged, never returned."""
        request_id = get_request_id(request)

        logger.error(
            f"[{request_id}] Unhandled exception: {type(exc).__name__}: {exc}",
            exc_info=True,
        )

        response = ErrorResponse(
            error=True,
            code=ErrorCode.SERVER_INTERNAL_ERROR.value,
            message="An unexpected error occurred. Please try again later.",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            timestamp=_timestamp(),
            request_id=request_id,
            path=request.url.path,
            details={"support": f"Reference ID: {request_id}"},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=response.model_dump(),
            headers={"X-Request-ID": request_id},
        )
