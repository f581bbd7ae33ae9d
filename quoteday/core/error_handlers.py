"""
Error handlers for the FastAPI application.

Every error leaves the service with the same body:
``{"success": false, "error": <code>, "message": ..., "request_id": ...}``.
"""

from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
from typing import Dict, Any, Optional

from quoteday.core.exceptions import QuoteServiceException, ErrorCode

logger = logging.getLogger(__name__)

# HTTP status codes raised directly by FastAPI/Starlette
_STATUS_ERROR_CODES = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.UNAUTHORIZED,
    404: ErrorCode.NOT_FOUND,
    422: ErrorCode.VALIDATION_ERROR,
    429: ErrorCode.RATE_LIMIT_EXCEEDED,
}


def error_body(
    error_code: str,
    message: Optional[str] = None,
    request_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": error_code}
    if message:
        body["message"] = message
    if details:
        body["details"] = details
    if request_id:
        body["request_id"] = request_id
    return body


def error_response(
    status_code: int,
    error_code: str,
    message: Optional[str] = None,
    request: Optional[Request] = None,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """Build the standard error response."""
    request_id = getattr(request.state, "request_id", None) if request is not None else None
    return JSONResponse(
        status_code=status_code,
        content=error_body(error_code, message, request_id, details),
    )


async def handle_quote_service_exception(request: Request, exc: QuoteServiceException) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")
    logger.warning(
        f"QuoteServiceException in request {request_id}: {exc.message}",
        extra={
            "request_id": request_id,
            "error_code": exc.error_code.value,
            "status_code": exc.status_code,
            "request_path": request.url.path,
        },
    )
    # Auth failures only expose the code; the reason stays in the log
    details = None if exc.error_code == ErrorCode.UNAUTHORIZED else exc.details
    return error_response(exc.status_code, exc.error_code.value, exc.message, request, details)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle Pydantic validation errors with field information.

    Args:
        request: FastAPI request object
        exc: RequestValidationError instance

    Returns:
        JSONResponse with validation error details
    """
    request_id = getattr(request.state, "request_id", "unknown")
    validation_errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.warning(
        f"Validation error in request {request_id}: {len(validation_errors)} field errors",
        extra={"request_id": request_id, "request_path": request.url.path},
    )
    return error_response(
        422,
        ErrorCode.VALIDATION_ERROR.value,
        "Request validation failed",
        request,
        {"validation_errors": validation_errors},
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")
    error_code = _STATUS_ERROR_CODES.get(exc.status_code, ErrorCode.INTERNAL_SERVER_ERROR)
    logger.warning(
        f"HTTP exception in request {request_id}: {exc.status_code} - {exc.detail}",
        extra={"request_id": request_id, "status_code": exc.status_code, "request_path": request.url.path},
    )
    return error_response(exc.status_code, error_code.value, str(exc.detail), request)


async def handle_generic_exception(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected exceptions with traceback and hide their content from clients."""
    request_id = getattr(request.state, "request_id", "unknown")
    logger.error(
        f"Unhandled exception in request {request_id}: {type(exc).__name__}: {str(exc)}",
        exc_info=True,
        extra={
            "request_id": request_id,
            "exception_type": type(exc).__name__,
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )
    return error_response(
        500,
        ErrorCode.INTERNAL_SERVER_ERROR.value,
        "An internal server error occurred",
        request,
    )


def setup_error_handlers(app):
    """
    Set up all error handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(QuoteServiceException, handle_quote_service_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_generic_exception)
