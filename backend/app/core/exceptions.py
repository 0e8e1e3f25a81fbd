"""
Application error taxonomy and the handlers that turn it into HTTP responses.

Services raise the domain errors below; nothing else reaches the transport
layer. Every error renders as:

    {"success": false, "error": "<kind>", "message": "<text>"}

Persistence failures (any SQLAlchemyError that escapes a service) are logged
with full detail and answered with a generic StoreError message.
"""

from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.logging import get_logger
from app.core.metrics import record_store_error

logger = get_logger(__name__)


class AcademyError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind: str = "Error"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, **context: Any):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)


class ValidationError(AcademyError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "ValidationError"
    default_message = "Invalid request"


class Conflict(AcademyError):
    status_code = status.HTTP_409_CONFLICT
    kind = "Conflict"
    default_message = "Time slot is already booked"


class NotFound(AcademyError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "NotFound"
    default_message = "Resource not found"


class InvalidState(AcademyError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "InvalidState"
    default_message = "Operation not allowed in the current state"


class StoreError(AcademyError):
    kind = "StoreError"
    default_message = "Internal server error"


class Unauthorized(AcademyError):
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "Unauthorized"
    default_message = "You are not logged in"


class Forbidden(AcademyError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "Forbidden"
    default_message = "You do not have permission to perform this action"


def error_body(kind: str, message: str) -> dict:
    return {"success": False, "error": kind, "message": message}


def _describe_validation(exc: RequestValidationError) -> str:
    missing = []
    other = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "request"
        if err.get("type") == "missing":
            missing.append(field)
        else:
            other.append(f"{field}: {err.get('msg')}")
    if missing:
        return f"Missing required fields: {', '.join(missing)}"
    return "; ".join(other) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(AcademyError)
    async def academy_error_handler(request: Request, exc: AcademyError) -> JSONResponse:
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.kind, exc.message),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _describe_validation(exc)
        logger.info("request_rejected", reason="validation", detail=message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(ValidationError.kind, message),
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("store_error", error=str(exc), path=request.url.path)
        record_store_error()
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(StoreError.kind, StoreError.default_message),
        )
