"""
Error envelope.

Every failure leaves the API as::

    {"success": false, "error": ..., "message": ..., "category": ..., "data": null}

Application errors (``CustomException``) and FastAPI's own HTTP and
request-validation errors reach :class:`ExceptionTranslator` through the
app's exception handlers. Anything else escaping a route is caught by
:class:`ExceptionHandlingMiddleware`, logged, and reported as a 500 that
hides the internal detail.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
import logging
from typing import Any, Iterable, Optional

from ..schemas.result import Error, Result, ErrorCategory
from .exception import CustomException

logger = logging.getLogger(__name__)

STATUS_CATEGORIES = {
    400: ErrorCategory.BAD_REQUEST,
    401: ErrorCategory.AUTHENTICATION,
    403: ErrorCategory.AUTHORIZATION,
    404: ErrorCategory.NOT_FOUND,
    409: ErrorCategory.RESOURCE_CONFLICT,
    422: ErrorCategory.VALIDATION,
}


def category_for_status(status_code: int) -> ErrorCategory:
    if status_code in STATUS_CATEGORIES:
        return STATUS_CATEGORIES[status_code]
    if status_code >= 500:
        return ErrorCategory.INTERNAL
    if status_code >= 400:
        return ErrorCategory.BAD_REQUEST
    return ErrorCategory.CUSTOM


def describe_validation_errors(errors: Iterable[Any]) -> str:
    """'body -> name: Field required; body -> email: ...'"""
    parts = []
    for err in errors:
        location = " -> ".join(str(part) for part in err.get("loc", ()))
        parts.append(f"{location}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts) or "Validation failed"


def error_response(error: Error, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=Result.failure(error).model_dump(),
        headers=headers,
    )


class ExceptionTranslator:
    """Maps an exception to the failure envelope."""

    def __init__(self, log_internal_errors: bool = True):
        self.log_internal_errors = log_internal_errors

    async def __call__(self, request: Request, ex: Exception) -> JSONResponse:
        return self.translate(ex, request)

    def translate(self, ex: Exception, request: Request) -> JSONResponse:
        if isinstance(ex, CustomException):
            return error_response(
                Error(
                    error=ex.detail,
                    message=ex.message,
                    status_code=ex.status_code,
                    category=ex.category,
                ),
                headers=ex.headers,
            )

        if isinstance(ex, RequestValidationError):
            # Malformed input is a 400 here, not FastAPI's default 422
            return error_response(
                Error(
                    error="Validation failed",
                    message=describe_validation_errors(ex.errors()),
                    status_code=400,
                    category=ErrorCategory.VALIDATION,
                )
            )

        if isinstance(ex, StarletteHTTPException):
            return error_response(
                Error(
                    error=ex.detail if isinstance(ex.detail, str) else str(ex.detail),
                    status_code=ex.status_code,
                    category=category_for_status(ex.status_code),
                ),
                headers=ex.headers,
            )

        return self.internal_error(ex, request)

    def internal_error(self, ex: Exception, request: Request) -> JSONResponse:
        if self.log_internal_errors:
            logger.error(
                "Unhandled exception on %s %s",
                request.method,
                request.url.path,
                exc_info=ex,
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "client": request.client.host if request.client else None,
                },
            )

        return error_response(
            Error(
                error="Server error",
                message="An unexpected error occurred. Please try again later.",
                status_code=500,
                category=ErrorCategory.INTERNAL,
            )
        )


class ExceptionHandlingMiddleware(BaseHTTPMiddleware):
    """Last line of defence for exceptions no handler claimed."""

    def __init__(self, app, log_internal_errors: bool = True):
        super().__init__(app)
        self.translator = ExceptionTranslator(log_internal_errors)

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as ex:
            return self.translator.translate(ex, request)


def register_exception_handlers(app: FastAPI, log_internal_errors: bool = True) -> None:
    """Route FastAPI's own HTTP and validation errors through the translator."""
    translator = ExceptionTranslator(log_internal_errors)
    app.add_exception_handler(StarletteHTTPException, translator)
    app.add_exception_handler(RequestValidationError, translator)
