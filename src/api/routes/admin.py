from fastapi import APIRouter, Depends

from src.api.deps import get_comment_component, get_current_actor, get_post_component
from src.api.errors import parse_path_id, raise_for_errors
from src.api.schemas import (
    ApprovedModerationResponse,
    ModerationRequest,
    PendingCommentListResponse,
    PendingCommentResponse,
    PostCollectionResponse,
    PostResponse,
    RejectedModerationResponse,
)
from src.components.comments import (
    ApprovedModeration,
    CommentComponent,
    ListPendingInput,
    ModerateCommentInput,
)
from src.components.posts import ListAllPostsInput, PostComponent
from src.domain.entities import Actor

router = APIRouter()


@router.patch(
    "/comments/{comment_id}/moderate",
    response_model=ApprovedModerationResponse | RejectedModerationResponse,
)
def moderate_comment(
    comment_id: str,
    req: ModerationRequest,
    actor: Actor = Depends(get_current_actor),
    component: CommentComponent = Depends(get_comment_component),
) -> ApprovedModerationResponse | RejectedModerationResponse:
    """Approve, reject or mark a pending comment as spam."""
    uid = parse_path_id(comment_id, "Comment not found", "COMMENT_NOT_FOUND")
    result = component.run_moderate(
        ModerateCommentInput(actor=actor, comment_id=uid, status=req.status)
    )
    raise_for_errors(result.errors)
    if isinstance(result.result, ApprovedModeration):
        return ApprovedModerationResponse.model_validate(result.result, from_attributes=True)
    return RejectedModerationResponse.model_validate(result.result, from_attributes=True)


@router.get("/comments/pending", response_model=PendingCommentListResponse)
def list_pending_comments(
    actor: Actor = Depends(get_current_actor),
    component: CommentComponent = Depends(get_comment_component),
) -> PendingCommentListResponse:
    """Moderation queue, oldest first."""
    result = component.run_list_pending(ListPendingInput(actor=actor))
    raise_for_errors(result.errors)
    return PendingCommentListResponse(
        data=[
            PendingCommentResponse.model_validate(c, from_attributes=True)
            for c in result.comments
        ]
    )


@router.get("/posts", response_model=PostCollectionResponse)
def list_all_posts(
    actor: Actor = Depends(get_current_actor),
    component: PostComponent = Depends(get_post_component),
) -> PostCollectionResponse:
    """Every post in every status."""
    result = component.run_list_all(ListAllPostsInput(actor=actor))
    raise_for_errors(result.errors)
    return PostCollectionResponse(
        data=[PostResponse.model_validate(p, from_attributes=True) for p in result.posts]
    )
