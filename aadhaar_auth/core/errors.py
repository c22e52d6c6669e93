from contextlib import contextmanager
from typing import Iterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from aadhaar_auth.core.exceptions import (
    AuthServiceError,
    AuthenticationError,
    ConflictError,
    UnexpectedError,
    ValidationError,
)
from aadhaar_auth.core.logging import get_logger
from aadhaar_auth.schemas.response import ErrorResponse

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred. Please try again later."


@contextmanager
def surface_failures(operation: str, message: str) -> Iterator[None]:
    """
    Collapses unanticipated failures of a request handler into one generic error.

    Client errors (validation, authentication) pass through untouched. Anything
    else is logged with the failing operation and re-raised carrying `message`,
    so the response never reveals internal detail.
    """
    try:
        yield
    except (ValidationError, AuthenticationError):
        raise
    except ConflictError as exc:
        logger.error(
            f"{operation} failed: uniqueness violation",
            extra={"operation": operation, "field": exc.field}
        )
        raise ConflictError(message, field=exc.field) from exc
    except Exception as exc:
        logger.error(
            f"{operation} failed: {exc}",
            extra={"operation": operation},
            exc_info=True
        )
        raise UnexpectedError(message) from exc


def _field_errors(exc: RequestValidationError) -> list:
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", "invalid value"),
        }
        for error in exc.errors()
    ]


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(AuthServiceError)
    async def service_exception_handler(request: Request, exc: AuthServiceError):
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(message=exc.message).body()
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handles standard HTTP exceptions (404, 405, etc.)
        """
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(message=str(exc.detail)).body(),
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handles malformed request bodies before any handler logic runs.
        """
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(
                message="Invalid request body",
                details=_field_errors(exc)
            ).body()
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all for unhandled exceptions.
        """
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "method": request.method,
                "url": str(request.url),
                "client": request.client.host if request.client else "unknown"
            },
            exc_info=True
        )

        return JSONResponse(
            status_code=500,
            content=ErrorResponse(message=INTERNAL_ERROR_MESSAGE).body()
        )
