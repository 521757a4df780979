"""Post component - draft creation and editing, publishing and public reads."""

from src.components.posts.component import PostComponent, run
from src.components.posts.models import (
    CreateDraftInput,
    CreateDraftOutput,
    GetPublishedPostInput,
    GetPublishedPostOutput,
    ListAllPostsInput,
    ListAllPostsOutput,
    ListPublishedInput,
    ListPublishedOutput,
    PublishPostInput,
    PublishPostOutput,
    UpdateDraftInput,
    UpdateDraftOutput,
)
from src.components.posts.ports import CategoryRepoPort, ClockPort, PostRepoPort, TagRepoPort

__all__ = [
    # Entry point
    "run",
    # Component
    "PostComponent",
    # Models
    "CreateDraftInput",
    "CreateDraftOutput",
    "UpdateDraftInput",
    "UpdateDraftOutput",
    "PublishPostInput",
    "PublishPostOutput",
    "GetPublishedPostInput",
    "GetPublishedPostOutput",
    "ListPublishedInput",
    "ListPublishedOutput",
    "ListAllPostsInput",
    "ListAllPostsOutput",
    # Ports
    "PostRepoPort",
    "CategoryRepoPort",
    "TagRepoPort",
    "ClockPort",
]
