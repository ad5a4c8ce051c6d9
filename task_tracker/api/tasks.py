"""
API endpoints for tasks.

Read path:
- GET /tasks?q=&tag=          query with optional filters

Write path:
- POST /tasks                 create
- PUT /tasks/{id}             full replace
- POST /tasks/{id}/toggle     pending <-> completed
- DELETE /tasks/{id}          delete

Domain errors (ValidationError, NotFoundError, StorageError) propagate to
the handlers in errors.py, which render them as ErrorResponse.
"""

from fastapi import APIRouter, Depends, Query, status

from ..services import TaskService
from .dependencies import get_task_service
from .schemas import (
    DeleteResponse,
    ErrorResponse,
    TaskCreate,
    TaskDetailResponse,
    TaskResponse,
    TaskUpdate,
)

router = APIRouter(prefix="/tasks", tags=["tasks"])


# ============================================================================
# QUERY TASKS
# ============================================================================


@router.get(
    "",
    response_model=list[TaskResponse],
    summary="Search tasks",
    description="""
    List tasks with their tags, ordered by due date (tasks without a date last).

    **Filters** (combined with AND, both optional):
    - q: case-insensitive substring of title, description or location
    - tag: exact tag name

    No match returns an empty list.
    """,
)
async def get_tasks(
    q: str | None = Query(None, description="Text to look for in title, description, location"),
    tag: str | None = Query(None, description="Exact tag name"),
    service: TaskService = Depends(get_task_service),
) -> list[TaskResponse]:
    """
    Examples:
    ```
    GET /tasks                     # everything
    GET /tasks?q=milk              # "milk" anywhere in title/description/location
    GET /tasks?tag=errand          # tasks tagged "errand"
    GET /tasks?q=park&tag=health   # both
    ```
    """
    tasks = await service.search_tasks(q=q, tag=tag)
    return [TaskResponse.model_validate(t) for t in tasks]


# ============================================================================
# CREATE TASK
# ============================================================================


@router.post(
    "",
    response_model=TaskDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
    description="Create a task in status `pending`. Unknown tags are created.",
    responses={
        201: {"description": "Task created"},
        400: {"model": ErrorResponse, "description": "Validation error"},
        422: {"model": ErrorResponse, "description": "Malformed request"},
    },
)
async def create_task(
    data: TaskCreate, service: TaskService = Depends(get_task_service)
) -> TaskDetailResponse:
    task = await service.create_task(
        title=data.title,
        description=data.description,
        due_date=data.due_date,
        location=data.location,
        tag_names=data.tags,
    )
    return TaskDetailResponse.model_validate(task)


# ============================================================================
# UPDATE TASK
# ============================================================================


@router.put(
    "/{task_id}",
    response_model=TaskDetailResponse,
    summary="Replace a task",
    description="""
    Overwrite every field of the task and replace its tag set.

    This is not a patch: send the current values of the fields you keep.
    """,
    responses={
        200: {"description": "Task updated"},
        400: {"model": ErrorResponse, "description": "Validation error"},
        404: {"model": ErrorResponse, "description": "Task not found"},
    },
)
async def update_task(
    task_id: int, data: TaskUpdate, service: TaskService = Depends(get_task_service)
) -> TaskDetailResponse:
    task = await service.update_task(
        task_id=task_id,
        title=data.title,
        description=data.description,
        due_date=data.due_date,
        location=data.location,
        status=data.status,
        tag_names=data.tags,
    )
    return TaskDetailResponse.model_validate(task)


# ============================================================================
# TOGGLE STATUS
# ============================================================================


@router.post(
    "/{task_id}/toggle",
    response_model=TaskDetailResponse,
    summary="Toggle task status",
    description="Switch between `pending` and `completed`. Other fields and tags stay as they are.",
    responses={
        200: {"description": "Status switched"},
        404: {"model": ErrorResponse, "description": "Task not found"},
    },
)
async def toggle_task_status(
    task_id: int, service: TaskService = Depends(get_task_service)
) -> TaskDetailResponse:
    task = await service.toggle_status(task_id)
    return TaskDetailResponse.model_validate(task)


# ============================================================================
# DELETE TASK
# ============================================================================


@router.delete(
    "/{task_id}",
    response_model=DeleteResponse,
    summary="Delete a task",
    description="""
    Delete a task and its tag links. Tags themselves are kept.

    Deleting an id that does not exist still succeeds; `deleted` is then false.
    """,
)
async def delete_task(
    task_id: int, service: TaskService = Depends(get_task_service)
) -> DeleteResponse:
    deleted = await service.delete_task(task_id)
    return DeleteResponse(deleted=deleted)
