"""
Exception handlers for the API.

Every failure leaves the API in the same envelope (ErrorResponse):
1. TaskTrackerError subclasses raised by services (400 / 404 / 500)
2. Pydantic request validation errors (422)
3. Stray SQLAlchemy errors that escaped a service (500, STORAGE_ERROR)

Internal details (SQL, stack traces) are logged, never returned.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from ..core.exceptions import StorageError, TaskTrackerError
from ..core.logging import get_logger
from .schemas import ErrorBody, ErrorDetail, ErrorResponse

logger = get_logger(__name__)


def error_response(
    status_code: int, code: str, message: str, details: list[ErrorDetail] | None = None
) -> JSONResponse:
    """Build a JSONResponse in the ErrorResponse format."""
    body = ErrorResponse(error=ErrorBody(code=code, message=message, details=details))
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def task_tracker_error_handler(request: Request, exc: TaskTrackerError) -> JSONResponse:
    """Convert a domain error into ErrorResponse with its own status code."""
    if exc.status_code >= 500:
        logger.error(f"API Error: {exc.code} - {exc.message}")
    else:
        logger.warning(f"API Error: {exc.code} - {exc.message}")

    details = None
    if exc.details:
        details = [ErrorDetail(field=d["field"], message=d["message"]) for d in exc.details]

    return error_response(exc.status_code, exc.code, exc.message, details)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Convert pydantic's error list into ErrorResponse (422).

    Pydantic:
        {"detail": [{"type": "string_too_short", "loc": ["body", "title"], "msg": "..."}]}

    Ours:
        {"error": {"code": "VALIDATION_ERROR", "message": "...",
                   "details": [{"field": "title", "message": "..."}]}}
    """
    logger.warning(f"Validation Error: {exc.errors()}")

    details = []
    for error in exc.errors():
        # loc is the path to the field, e.g. ["body", "title"] or ["query", "tag"]
        field_path = error.get("loc", [])
        field_name = field_path[-1] if field_path else "unknown"

        if len(field_path) > 1 and field_path[0] == "body":
            field_name = ".".join(str(p) for p in field_path[1:])

        details.append(
            ErrorDetail(field=str(field_name), message=error.get("msg", "Invalid value"))
        )

    return error_response(
        422,
        "VALIDATION_ERROR",
        "Request validation failed",
        details,
    )


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Database failure that no service wrapped: generic 500, no retry."""
    logger.error(f"Storage Error: {type(exc).__name__}: {exc}", exc_info=exc)
    error = StorageError("Storage operation failed")
    return error_response(error.status_code, error.code, error.message)


def register_error_handlers(app: FastAPI) -> None:
    """
    Register all error handlers on the application.

    Called from main.py:
        register_error_handlers(app)
    """
    app.add_exception_handler(TaskTrackerError, task_tracker_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)

    logger.info("Error handlers registered")
