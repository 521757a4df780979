import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.adapters.auth.identity import JWTIdentityGate
from src.adapters.clock import SystemClock
from src.adapters.sqlite.repos import (
    SQLiteCategoryRepo,
    SQLiteCommentRepo,
    SQLitePostRepo,
    SQLiteTagRepo,
    SQLiteUserRepo,
)
from src.api.errors import APIError, unauthenticated
from src.components.comments import CommentComponent
from src.components.posts import PostComponent
from src.domain.entities import Actor, User
from src.ports.auth import AuthenticationError
from src.ports.repo import StorageError
from src.rules.loader import load_rules
from src.rules.models import Rules

logger = logging.getLogger(__name__)

DEV_JWT_SECRET = "dev-secret-unsafe"


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("CMS_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "cms.db")
        self.rules_path = Path(os.environ.get("CMS_RULES_PATH", self.base_dir / "rules.yaml"))
        self.migrations_dir = Path(
            os.environ.get("CMS_MIGRATIONS_DIR", self.base_dir / "migrations")
        )

    def jwt_secret(self, rules: Rules) -> str:
        return os.environ.get(rules.auth.jwt_secret_env, DEV_JWT_SECRET)


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Repos ---
def get_user_repo(settings: Settings = Depends(get_settings)) -> SQLiteUserRepo:
    return SQLiteUserRepo(settings.db_path)


def get_post_repo(settings: Settings = Depends(get_settings)) -> SQLitePostRepo:
    return SQLitePostRepo(settings.db_path)


def get_comment_repo(settings: Settings = Depends(get_settings)) -> SQLiteCommentRepo:
    return SQLiteCommentRepo(settings.db_path)


def get_category_repo(settings: Settings = Depends(get_settings)) -> SQLiteCategoryRepo:
    return SQLiteCategoryRepo(settings.db_path)


def get_tag_repo(settings: Settings = Depends(get_settings)) -> SQLiteTagRepo:
    return SQLiteTagRepo(settings.db_path)


# Time adapter for deterministic time operations
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# --- Components ---
def get_post_component(
    rules: Rules = Depends(get_rules),
    post_repo: SQLitePostRepo = Depends(get_post_repo),
    category_repo: SQLiteCategoryRepo = Depends(get_category_repo),
    tag_repo: SQLiteTagRepo = Depends(get_tag_repo),
    clock: SystemClock = Depends(get_clock),
) -> PostComponent:
    """Get post lifecycle component."""
    return PostComponent(
        post_repo,
        category_repo,
        tag_repo,
        clock,
        content_rules=rules.content,
        page_rules=rules.pagination.posts,
    )


def get_comment_component(
    rules: Rules = Depends(get_rules),
    comment_repo: SQLiteCommentRepo = Depends(get_comment_repo),
    post_repo: SQLitePostRepo = Depends(get_post_repo),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    clock: SystemClock = Depends(get_clock),
) -> CommentComponent:
    """Get comment lifecycle component."""
    return CommentComponent(
        comment_repo,
        post_repo,
        user_repo,
        clock,
        content_rules=rules.content,
        page_rules=rules.pagination.comments,
    )


# --- Auth ---
bearer_scheme = HTTPBearer(auto_error=False)


def get_identity_gate(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> JWTIdentityGate:
    return JWTIdentityGate.from_rules(rules.auth, settings.jwt_secret(rules))


def get_current_actor(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    gate: JWTIdentityGate = Depends(get_identity_gate),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    clock: SystemClock = Depends(get_clock),
) -> Actor:
    if credentials is None or not credentials.credentials:
        raise unauthenticated("Not authenticated")

    try:
        actor = gate.verify(credentials.credentials)
    except AuthenticationError as e:
        raise unauthenticated(str(e)) from e

    # Mirror the caller locally so posts and comments can reference them.
    try:
        user_repo.save(
            User(id=actor.id, email=actor.email, role=actor.role, created_at=clock.now())
        )
    except StorageError as e:
        logger.exception("Failed to mirror user %s", actor.id)
        raise APIError(500, "Storage operation failed", "STORAGE_FAILURE") from e

    return actor
