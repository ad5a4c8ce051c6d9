"""
Pydantic schemas for the API.

DTOs (Data Transfer Objects) passed over HTTP, kept separate from the
SQLAlchemy models so the wire format is under our control.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models import TaskStatus

# ============================================================================
# TAG SCHEMAS
# ============================================================================


class TagResponse(BaseModel):
    """
    Tag as embedded in a task.

    Example:
    {"name": "errand"}
    """

    name: str

    model_config = ConfigDict(from_attributes=True)


class TagListItem(TagResponse):
    """Tag in GET /tags."""

    id: int


# ============================================================================
# TASK SCHEMAS
# ============================================================================


class TaskFields(BaseModel):
    """Fields shared by create and update requests."""

    title: str = Field(..., min_length=1, max_length=255, description="Task title")
    description: str | None = Field(None, description="Free text description")
    due_date: date | None = Field(None, description="Deadline (YYYY-MM-DD)")
    location: str | None = Field(None, max_length=255, description="Where the task happens")
    tags: list[str] = Field(default_factory=list, description="Tag names")

    @field_validator("due_date", mode="before")
    @classmethod
    def empty_due_date_is_none(cls, value):
        # Browser forms send "" for an unset date input
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TaskCreate(TaskFields):
    """
    Body of POST /tasks.

    Example:
    {
        "title": "Buy milk",
        "description": "Two bottles",
        "due_date": "2026-01-21",
        "location": "Corner supermarket",
        "tags": ["shopping", "errand"]
    }

    Tags are created on the fly if they do not exist.
    """

    pass


class TaskUpdate(TaskFields):
    """
    Body of PUT /tasks/{id}.

    Full replace: every field must be sent. A missing optional field is
    stored as null and a missing tag list removes all tags.

    Example:
    {
        "title": "Buy milk",
        "description": null,
        "due_date": null,
        "location": null,
        "status": "completed",
        "tags": ["errand"]
    }
    """

    status: TaskStatus = Field(..., description="pending or completed")


class TaskResponse(BaseModel):
    """
    Task as returned by the query endpoint (GET /tasks).

    Example:
    {
        "id": 1,
        "title": "Buy milk",
        "description": "Two bottles",
        "due_date": "2026-01-21",
        "location": "Corner supermarket",
        "status": "pending",
        "tags": [{"name": "shopping"}, {"name": "errand"}]
    }
    """

    id: int
    title: str
    description: str | None
    due_date: date | None
    location: str | None
    status: TaskStatus
    tags: list[TagResponse] = []

    model_config = ConfigDict(from_attributes=True)


class TaskDetailResponse(TaskResponse):
    """Task as returned by the commands: adds the timestamps."""

    created_at: datetime
    updated_at: datetime


class DeleteResponse(BaseModel):
    """
    Result of DELETE /tasks/{id}.

    `deleted` is false when there was no such task; the request still
    succeeds.
    """

    message: str = "Deleted"
    deleted: bool


# ============================================================================
# COMMON SCHEMAS
# ============================================================================


class ErrorDetail(BaseModel):
    """
    Error tied to one request field.

    Example:
    {"field": "title", "message": "String should have at least 1 character"}
    """

    field: str = Field(..., description="Name of the offending field")
    message: str = Field(..., description="What is wrong with it")


class ErrorBody(BaseModel):
    """
    Error code, message and optional per-field details.

    Codes:
    - VALIDATION_ERROR: bad input (400 from services, 422 from request parsing)
    - NOT_FOUND: task does not exist
    - STORAGE_ERROR: the database failed
    - RATE_LIMIT_EXCEEDED: too many requests
    """

    code: str = Field(..., description="Error code (VALIDATION_ERROR, NOT_FOUND, etc.)")
    message: str = Field(..., description="Human-readable message")
    details: list[ErrorDetail] | None = Field(
        default=None, description="Per-field errors (validation)"
    )


class ErrorResponse(BaseModel):
    """
    Envelope for every API error.

    Example:
    {
        "error": {
            "code": "NOT_FOUND",
            "message": "Task with id=999 not found",
            "details": null
        }
    }
    """

    error: ErrorBody
