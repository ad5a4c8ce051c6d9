"""
API endpoints for tags.

Tags are read-only here: they are created through task commands
(find-or-create by name) and never deleted.
"""

from fastapi import APIRouter, Depends

from ..services import TagService
from .dependencies import get_tag_service
from .schemas import TagListItem

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=list[TagListItem], summary="List all tags")
async def get_tags(service: TagService = Depends(get_tag_service)) -> list[TagListItem]:
    """
    All tags in alphabetical order, including tags no task uses anymore.

    Example:
    ```
    GET /tags
    [{"id": 2, "name": "errand"}, {"id": 1, "name": "shopping"}]
    ```
    """
    tags = await service.list_tags()
    return [TagListItem.model_validate(t) for t in tags]
