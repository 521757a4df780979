"""
Authorization predicates.

A closed table of (action, role) -> grant. A grant is either unconditional
or restricted to resources the actor authored. Anything missing from the
table is denied.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from src.domain.entities import Actor, Role


class Action(str, Enum):
    CREATE_POST = "post:create"
    EDIT_DRAFT = "post:edit_draft"
    PUBLISH_POST = "post:publish"
    LIST_ALL_POSTS = "post:list_all"
    SUBMIT_COMMENT = "comment:submit"
    MODERATE_COMMENT = "comment:moderate"
    LIST_PENDING_COMMENTS = "comment:list_pending"


class Grant(str, Enum):
    ANY = "any"
    OWN = "own"


PERMISSIONS: dict[Action, dict[Role, Grant]] = {
    Action.CREATE_POST: {Role.ADMIN: Grant.ANY, Role.EDITOR: Grant.ANY},
    Action.EDIT_DRAFT: {Role.ADMIN: Grant.ANY, Role.EDITOR: Grant.OWN},
    Action.PUBLISH_POST: {Role.ADMIN: Grant.ANY, Role.EDITOR: Grant.OWN},
    Action.LIST_ALL_POSTS: {Role.ADMIN: Grant.ANY},
    Action.SUBMIT_COMMENT: {
        Role.ADMIN: Grant.ANY,
        Role.EDITOR: Grant.ANY,
        Role.VIEWER: Grant.ANY,
    },
    # Ownership for moderation is checked against the comment's post.
    Action.MODERATE_COMMENT: {Role.ADMIN: Grant.ANY, Role.EDITOR: Grant.OWN},
    Action.LIST_PENDING_COMMENTS: {Role.ADMIN: Grant.ANY},
}


def grant_for(role: Role, action: Action) -> Grant | None:
    return PERMISSIONS.get(action, {}).get(role)


def has_any_grant(actor: Actor, action: Action) -> bool:
    """True if the actor's role could perform the action on some resource."""
    return grant_for(actor.role, action) is not None


def owns(actor: Actor, resource: Any) -> bool:
    author_id = getattr(resource, "author_id", None)
    if author_id is None:
        return False
    return str(author_id) == str(actor.id)


def can(actor: Actor | None, action: Action, resource: Any = None) -> bool:
    """
    Decide whether the actor may perform the action.

    Args:
        actor: Verified caller, or None for anonymous requests
        action: Action being attempted
        resource: Object carrying ``author_id`` for ownership-scoped grants

    Returns:
        True if allowed
    """
    if actor is None:
        return False

    grant = grant_for(actor.role, action)
    if grant is None:
        return False
    if grant is Grant.ANY:
        return True

    return resource is not None and owns(actor, resource)
