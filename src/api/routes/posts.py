from fastapi import APIRouter, Depends, status

from src.api.deps import get_current_actor, get_post_component
from src.api.errors import parse_path_id, raise_for_errors
from src.api.schemas import (
    PaginationResponse,
    PostCreateRequest,
    PostListResponse,
    PostResponse,
    PostUpdateRequest,
)
from src.components.posts import (
    CreateDraftInput,
    GetPublishedPostInput,
    ListPublishedInput,
    PostComponent,
    PublishPostInput,
    UpdateDraftInput,
)
from src.domain.entities import Actor, Post

router = APIRouter()

POST_NOT_FOUND = "Post not found"


def _to_response(post: Post | None) -> PostResponse:
    return PostResponse.model_validate(post, from_attributes=True)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    req: PostCreateRequest,
    actor: Actor = Depends(get_current_actor),
    component: PostComponent = Depends(get_post_component),
) -> PostResponse:
    """Create a draft post."""
    result = component.run_create_draft(
        CreateDraftInput(
            actor=actor,
            title=req.title,
            content=req.content,
            category_ids=req.category_ids,
            tag_ids=req.tag_ids,
        )
    )
    raise_for_errors(result.errors)
    return _to_response(result.post)


@router.get("", response_model=PostListResponse)
def list_posts(
    page: str | None = None,
    limit: str | None = None,
    sort: str | None = None,
    category: str | None = None,
    tag: str | None = None,
    component: PostComponent = Depends(get_post_component),
) -> PostListResponse:
    """Public listing of published posts."""
    result = component.run_list_published(
        ListPublishedInput(
            page=page,
            limit=limit,
            sort=sort,
            category_slug=category,
            tag_slug=tag,
        )
    )
    raise_for_errors(result.errors)
    return PostListResponse(
        data=[_to_response(p) for p in result.posts],
        pagination=PaginationResponse.model_validate(result.pagination, from_attributes=True),
    )


@router.get("/id/{post_id}", response_model=PostResponse)
def get_post(
    post_id: str,
    component: PostComponent = Depends(get_post_component),
) -> PostResponse:
    """Public detail by id. Drafts are not found."""
    uid = parse_path_id(post_id, POST_NOT_FOUND, "POST_NOT_FOUND")
    result = component.run_get_published(GetPublishedPostInput(post_id=uid))
    raise_for_errors(result.errors)
    return _to_response(result.post)


@router.get("/slug/{slug}", response_model=PostResponse)
def get_post_by_slug(
    slug: str,
    component: PostComponent = Depends(get_post_component),
) -> PostResponse:
    """Public detail by slug."""
    result = component.run_get_published(GetPublishedPostInput(slug=slug))
    raise_for_errors(result.errors)
    return _to_response(result.post)


@router.patch("/id/{post_id}/publish", response_model=PostResponse)
def publish_post(
    post_id: str,
    actor: Actor = Depends(get_current_actor),
    component: PostComponent = Depends(get_post_component),
) -> PostResponse:
    """Publish a draft."""
    uid = parse_path_id(post_id, POST_NOT_FOUND, "POST_NOT_FOUND")
    result = component.run_publish(PublishPostInput(actor=actor, post_id=uid))
    raise_for_errors(result.errors)
    return _to_response(result.post)


@router.patch("/id/{post_id}", response_model=PostResponse)
def update_draft(
    post_id: str,
    req: PostUpdateRequest,
    actor: Actor = Depends(get_current_actor),
    component: PostComponent = Depends(get_post_component),
) -> PostResponse:
    """Edit a draft. Published posts are read-only."""
    uid = parse_path_id(post_id, POST_NOT_FOUND, "POST_NOT_FOUND")
    result = component.run_update_draft(
        UpdateDraftInput(
            actor=actor,
            post_id=uid,
            title=req.title,
            content=req.content,
            category_ids=req.category_ids,
            tag_ids=req.tag_ids,
        )
    )
    raise_for_errors(result.errors)
    return _to_response(result.post)
