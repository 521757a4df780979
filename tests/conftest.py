from collections.abc import Iterator
from pathlib import Path
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from src.adapters.auth.identity import issue_token
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import (
    SQLiteCategoryRepo,
    SQLiteCommentRepo,
    SQLitePostRepo,
    SQLiteTagRepo,
    SQLiteUserRepo,
)
from src.domain.entities import Category, Role, Tag, User
from src.rules.loader import load_rules
from src.rules.models import Rules

PROJECT_ROOT = Path(__file__).resolve().parent.parent
TEST_JWT_SECRET = "test-secret"


@pytest.fixture
def rules() -> Rules:
    """The real rules file from the project root."""
    return load_rules(PROJECT_ROOT / "rules.yaml")


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    """A migrated SQLite database in a temp dir."""
    path = str(tmp_path / "cms.db")
    SQLiteMigrator(path, str(PROJECT_ROOT / "migrations")).run_migrations()
    return path


@pytest.fixture
def user_repo(db_path: str) -> SQLiteUserRepo:
    return SQLiteUserRepo(db_path)


@pytest.fixture
def post_repo(db_path: str) -> SQLitePostRepo:
    return SQLitePostRepo(db_path)


@pytest.fixture
def comment_repo(db_path: str) -> SQLiteCommentRepo:
    return SQLiteCommentRepo(db_path)


@pytest.fixture
def category_repo(db_path: str) -> SQLiteCategoryRepo:
    repo = SQLiteCategoryRepo(db_path)
    repo.save(Category(name="News", slug="news"))
    repo.save(Category(name="Archive", slug="archive", is_active=False))
    return repo


@pytest.fixture
def tag_repo(db_path: str) -> SQLiteTagRepo:
    repo = SQLiteTagRepo(db_path)
    repo.save(Tag(name="Python", slug="python"))
    return repo


@pytest.fixture
def author(user_repo: SQLiteUserRepo) -> User:
    user = User(id=uuid4(), email="editor@example.com", role=Role.EDITOR)
    user_repo.save(user)
    return user


# --- API ---


@pytest.fixture
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    """
    App client backed by a fresh database.

    Settings and rules are cached per process, so the caches are cleared
    around each test.
    """
    from src.api.deps import get_rules, get_settings
    from src.api.main import app

    monkeypatch.setenv("CMS_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("CMS_RULES_PATH", str(PROJECT_ROOT / "rules.yaml"))
    monkeypatch.setenv("CMS_MIGRATIONS_DIR", str(PROJECT_ROOT / "migrations"))
    monkeypatch.setenv("CMS_JWT_SECRET", TEST_JWT_SECRET)
    get_settings.cache_clear()
    get_rules.cache_clear()

    with TestClient(app) as test_client:
        yield test_client

    get_settings.cache_clear()
    get_rules.cache_clear()


@pytest.fixture
def api_db_path(client: TestClient) -> str:
    from src.api.deps import get_settings

    return get_settings().db_path


@pytest.fixture
def seed_category(api_db_path: str) -> Category:
    category = Category(name="News", slug="news")
    SQLiteCategoryRepo(api_db_path).save(category)
    return category


def auth_headers(role: Role | str | None, user_id: UUID | None = None, email: str = "") -> dict:
    token = issue_token(
        user_id or uuid4(),
        TEST_JWT_SECRET,
        role=role,
        email=email or "user@example.com",
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_headers():
    """Factory for bearer headers of a given role (and optionally a fixed user id)."""
    return auth_headers
