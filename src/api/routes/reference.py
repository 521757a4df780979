import logging

from fastapi import APIRouter, Depends

from src.api.deps import get_category_repo, get_tag_repo
from src.api.errors import APIError
from src.api.schemas import CategoryListResponse, CategoryResponse, TagListResponse, TagResponse
from src.ports.repo import CategoryRepoPort, StorageError, TagRepoPort

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/categories", response_model=CategoryListResponse)
def list_categories(repo: CategoryRepoPort = Depends(get_category_repo)) -> CategoryListResponse:
    """Active categories, by name."""
    try:
        categories = repo.list_active()
    except StorageError as e:
        logger.exception("Failed to list categories")
        raise APIError(500, "Storage operation failed", "STORAGE_FAILURE") from e
    return CategoryListResponse(
        data=[CategoryResponse.model_validate(c, from_attributes=True) for c in categories]
    )


@router.get("/tags", response_model=TagListResponse)
def list_tags(repo: TagRepoPort = Depends(get_tag_repo)) -> TagListResponse:
    """All tags, by name."""
    try:
        tags = repo.list_all()
    except StorageError as e:
        logger.exception("Failed to list tags")
        raise APIError(500, "Storage operation failed", "STORAGE_FAILURE") from e
    return TagListResponse(
        data=[TagResponse.model_validate(t, from_attributes=True) for t in tags]
    )
