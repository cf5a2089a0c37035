"""
Centralized Error Handlers for Thoughtboard

Global FastAPI exception handlers that turn every failure into the same
response shape.
"""

from traceback import format_exc
from typing import Any, Union

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from thoughtboard.config import settings
from thoughtboard.exceptions import AppException, DatabaseException, ErrorCode
from thoughtboard.utils.logging_config import get_logger


logger = get_logger(__name__)


class ErrorResponse:
    """
    Standard error response format.

    Every API error uses this shape:
    {
        "success": false,
        "error": "ERROR_CODE",
        "message": "Message shown to the user",
        "details": {...},  // optional
        "status_code": 400
    }
    """

    @staticmethod
    def create(
        error_code: Union[ErrorCode, str],
        message: str,
        status_code: int,
        details: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        response: dict[str, Any] = {
            "success": False,
            "error": error_code.value if isinstance(error_code, ErrorCode) else error_code,
            "message": message,
            "status_code": status_code,
        }
        if details:
            response["details"] = details
        return response


def log_error(
    error: Exception,
    request: Request | None = None,
    level: str = "ERROR",
    extra: dict[str, Any] | None = None,
) -> None:
    """
    Log an error with request context.

    Args:
        error: The exception
        request: FastAPI request (optional)
        level: Log level (ERROR, WARNING, INFO)
        extra: Additional fields to bind
    """
    log_data: dict[str, Any] = {
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

    if request:
        client_host: str | None = None
        if request.client is not None:
            client_host = request.client.host
        log_data.update({
            "method": request.method,
            "url": str(request.url),
            "client": client_host,
        })

    if extra:
        log_data.update(extra)

    logger.bind(**log_data).log(
        level.upper(),
        "{} on {}: {}",
        log_data["error_type"],
        log_data.get("url", "-"),
        log_data["error_message"],
    )


def _validation_errors(raw_errors, skip_location: int = 0) -> list[dict[str, Any]]:
    return [
        {
            "field": ".".join(str(loc) for loc in error["loc"][skip_location:]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in raw_errors
    ]


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register every exception handler on the FastAPI application.

    Called from main.py.
    """

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request, exc: AppException
    ) -> JSONResponse:
        log_error(exc, request, level="ERROR" if exc.status_code >= 500 else "WARNING")

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse.create(
                error_code=exc.code,
                message=exc.message,
                status_code=exc.status_code,
                details=exc.details if exc.details else None,
            ),
            headers=exc.headers,
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(
        request: Request, exc: SQLAlchemyError
    ) -> JSONResponse:
        """Storage failures surface as DB_001 without leaking the statement"""
        log_error(exc, request, level="ERROR")
        logger.opt(exception=exc).debug("Database failure")

        error = DatabaseException(
            details={"reason": type(exc).__name__} if settings.DEBUG else None
        )
        return JSONResponse(
            status_code=error.status_code,
            content=ErrorResponse.create(
                error_code=error.code,
                message=error.message,
                status_code=error.status_code,
                details=error.details or None,
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Plain HTTPExceptions raised by FastAPI or Starlette"""
        error_code_map = {
            400: ErrorCode.VALIDATION_ERROR,
            401: ErrorCode.INVALID_TOKEN,
            403: ErrorCode.PERMISSION_DENIED,
            429: ErrorCode.RATE_LIMIT_EXCEEDED,
            500: ErrorCode.INTERNAL_SERVER_ERROR,
            503: ErrorCode.SERVICE_UNAVAILABLE,
        }
        error_code = error_code_map.get(exc.status_code, f"HTTP_{exc.status_code}")

        log_error(exc, request, level="WARNING")

        message = exc.detail
        if isinstance(message, dict):
            message = message.get("message", "HTTP error")

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse.create(
                error_code=error_code,
                message=str(message) if message else "HTTP error",
                status_code=exc.status_code,
            ),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed request bodies, paths or queries are reported as 400"""
        errors = _validation_errors(exc.errors(), skip_location=1)

        log_error(
            exc,
            request,
            level="WARNING",
            extra={"validation_errors": errors},
        )

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse.create(
                error_code=ErrorCode.VALIDATION_ERROR,
                message="Validation error - please check your input",
                status_code=400,
                details={"validation_errors": errors},
            ),
        )

    @app.exception_handler(ValidationError)
    async def pydantic_validation_exception_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        """Response model validation failed"""
        errors = _validation_errors(exc.errors())

        log_error(
            exc,
            request,
            level="ERROR",
            extra={"validation_errors": errors},
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse.create(
                error_code=ErrorCode.VALIDATION_ERROR,
                message="Response validation error",
                status_code=500,
                details={"validation_errors": errors},
            ),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """
        Catch-all handler.

        Tracebacks are only exposed in DEBUG mode.
        """
        log_error(exc, request, level="ERROR")
        logger.opt(exception=exc).debug("Unhandled exception")

        if settings.DEBUG:
            message = f"{type(exc).__name__}: {str(exc)}"
            details = {"traceback": format_exc()}
        else:
            message = "Server error"
            details = None

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse.create(
                error_code=ErrorCode.INTERNAL_SERVER_ERROR,
                message=message,
                status_code=500,
                details=details,
            ),
        )
