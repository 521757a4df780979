from fastapi import APIRouter, Depends, status

from src.api.deps import get_comment_component, get_current_actor
from src.api.errors import parse_path_id, raise_for_errors
from src.api.schemas import (
    AuthorResponse,
    CommentCreateRequest,
    CommentListResponse,
    CommentResponse,
    CommentThreadResponse,
    PaginationResponse,
    ReplyResponse,
)
from src.components.comments import (
    CommentComponent,
    CommentThread,
    ListApprovedInput,
    SubmitCommentInput,
)
from src.domain.entities import Actor

router = APIRouter()


def _thread_response(thread: CommentThread) -> CommentThreadResponse:
    return CommentThreadResponse(
        id=thread.id,
        post_id=thread.post_id,
        author=AuthorResponse.model_validate(thread.author, from_attributes=True),
        content=thread.content,
        status=thread.status,
        parent_comment_id=thread.parent_comment_id,
        created_at=thread.created_at,
        replies=[ReplyResponse.model_validate(r, from_attributes=True) for r in thread.replies],
    )


@router.post(
    "/id/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_comment(
    post_id: str,
    req: CommentCreateRequest,
    actor: Actor = Depends(get_current_actor),
    component: CommentComponent = Depends(get_comment_component),
) -> CommentResponse:
    """Submit a comment for moderation."""
    uid = parse_path_id(post_id, "Post not found", "POST_NOT_FOUND")
    result = component.run_submit(
        SubmitCommentInput(
            actor=actor,
            post_id=uid,
            content=req.content,
            parent_comment_id=req.parent_comment_id,
        )
    )
    raise_for_errors(result.errors)
    assert result.comment is not None and result.author is not None
    return CommentResponse(
        id=result.comment.id,
        post_id=result.comment.post_id,
        author=AuthorResponse.model_validate(result.author, from_attributes=True),
        content=result.comment.content,
        status=result.comment.status,
        parent_comment_id=result.comment.parent_comment_id,
        created_at=result.comment.created_at,
    )


@router.get("/id/{post_id}/comments", response_model=CommentListResponse)
def list_comments(
    post_id: str,
    page: str | None = None,
    limit: str | None = None,
    sort: str | None = None,
    component: CommentComponent = Depends(get_comment_component),
) -> CommentListResponse:
    """Approved top-level comments with their approved replies."""
    uid = parse_path_id(post_id, "Post not found", "POST_NOT_FOUND")
    result = component.run_list_approved(
        ListApprovedInput(post_id=uid, page=page, limit=limit, sort=sort)
    )
    raise_for_errors(result.errors)
    return CommentListResponse(
        data=[_thread_response(t) for t in result.threads],
        pagination=PaginationResponse.model_validate(result.pagination, from_attributes=True),
    )
