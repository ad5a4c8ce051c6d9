"""
Domain errors shared by the service and API layers.

Services raise these; `api.errors` turns them into the common
ErrorResponse envelope:

    {"error": {"code": "NOT_FOUND", "message": "...", "details": null}}
"""


class TaskTrackerError(Exception):
    """
    Base class for all errors reported to the caller.

    Usage:
        raise TaskTrackerError(
            code="CONFLICT",
            message="Something went wrong",
            status_code=409,
        )
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: list[dict] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ValidationError(TaskTrackerError):
    """
    Input rejected before any state was touched (400).

    Usage:
        raise ValidationError("Task title cannot be empty", field="title")
    """

    def __init__(self, message: str, field: str | None = None):
        details = [{"field": field, "message": message}] if field else None
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=400,
            details=details,
        )


class NotFoundError(TaskTrackerError):
    """
    Resource does not exist (404).

    Usage:
        raise NotFoundError("Task", 123)
        # Message: "Task with id=123 not found"
    """

    def __init__(self, resource: str, resource_id: int | str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(
            code="NOT_FOUND",
            message=f"{resource} with id={resource_id} not found",
            status_code=404,
        )


class StorageError(TaskTrackerError):
    """The store failed to carry out an operation (500). Never retried."""

    def __init__(self, message: str):
        super().__init__(code="STORAGE_ERROR", message=message, status_code=500)
