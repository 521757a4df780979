import sqlite3
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime
from typing import Any
from uuid import UUID

from src.domain.entities import Category, Comment, Post, Role, SortOrder, Tag, User
from src.ports.repo import SlugTakenError, StorageError


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def _ts(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _placeholders(count: int) -> str:
    return ", ".join("?" for _ in range(count))


class _SQLiteRepo:
    """One connection per call; sqlite3 errors surface as StorageError."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(str(e)) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()


class SQLiteUserRepo(_SQLiteRepo):
    def get_by_id(self, user_id: UUID) -> User | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (str(user_id),)).fetchone()
        if not row:
            return None
        return User(
            id=UUID(row["id"]),
            email=row["email"],
            role=Role(row["role"]),
            created_at=_dt(row["created_at"]),
        )

    def save(self, user: User) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO users (id, email, role, created_at) VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO NOTHING
                """,
                (str(user.id), user.email, user.role.value, _ts(user.created_at)),
            )


class SQLiteCategoryRepo(_SQLiteRepo):
    def existing_ids(self, ids: Sequence[UUID]) -> set[UUID]:
        if not ids:
            return set()
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT id FROM categories WHERE id IN ({_placeholders(len(ids))})",
                [str(i) for i in ids],
            ).fetchall()
        return {UUID(r["id"]) for r in rows}

    def list_active(self) -> list[Category]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM categories WHERE is_active = 1 ORDER BY name ASC"
            ).fetchall()
        return [self._row_to_category(r) for r in rows]

    def save(self, category: Category) -> Category:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO categories (id, name, slug, is_active, created_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name=excluded.name,
                    slug=excluded.slug,
                    is_active=excluded.is_active
                """,
                (
                    str(category.id),
                    category.name,
                    category.slug,
                    1 if category.is_active else 0,
                    _ts(category.created_at),
                ),
            )
        return category

    def _row_to_category(self, row: dict[str, Any]) -> Category:
        return Category(
            id=UUID(row["id"]),
            name=row["name"],
            slug=row["slug"],
            is_active=bool(row["is_active"]),
            created_at=_dt(row["created_at"]),
        )


class SQLiteTagRepo(_SQLiteRepo):
    def existing_ids(self, ids: Sequence[UUID]) -> set[UUID]:
        if not ids:
            return set()
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT id FROM tags WHERE id IN ({_placeholders(len(ids))})",
                [str(i) for i in ids],
            ).fetchall()
        return {UUID(r["id"]) for r in rows}

    def list_all(self) -> list[Tag]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM tags ORDER BY name ASC").fetchall()
        return [
            Tag(
                id=UUID(r["id"]),
                name=r["name"],
                slug=r["slug"],
                created_at=_dt(r["created_at"]),
            )
            for r in rows
        ]

    def save(self, tag: Tag) -> Tag:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO tags (id, name, slug, created_at) VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET name=excluded.name, slug=excluded.slug
                """,
                (str(tag.id), tag.name, tag.slug, _ts(tag.created_at)),
            )
        return tag


class SQLitePostRepo(_SQLiteRepo):
    def create(self, post: Post) -> Post:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO posts (
                    id, title, content, slug, author_id, status,
                    published_at, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(post.id),
                    post.title,
                    post.content,
                    post.slug,
                    str(post.author_id),
                    post.status,
                    _ts(post.published_at),
                    _ts(post.created_at),
                    _ts(post.updated_at),
                ),
            )
            self._insert_links(conn, post)
        return post

    @staticmethod
    def _insert_links(conn: sqlite3.Connection, post: Post) -> None:
        conn.executemany(
            "INSERT INTO post_categories (post_id, category_id) VALUES (?, ?)",
            [(str(post.id), str(c)) for c in post.category_ids],
        )
        conn.executemany(
            "INSERT INTO post_tags (post_id, tag_id) VALUES (?, ?)",
            [(str(post.id), str(t)) for t in post.tag_ids],
        )

    def get_by_id(self, post_id: UUID) -> Post | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM posts WHERE id = ?", (str(post_id),)).fetchone()
            return self._hydrate(conn, row) if row else None

    def get_by_slug(self, slug: str, status: str = "published") -> Post | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM posts WHERE slug = ? AND status = ? ORDER BY created_at DESC",
                (slug, status),
            ).fetchone()
            return self._hydrate(conn, row) if row else None

    def slug_taken(self, slug: str, exclude_post_id: UUID) -> bool:
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT 1 FROM posts
                WHERE slug = ? AND status = 'published' AND id != ?
                LIMIT 1
                """,
                (slug, str(exclude_post_id)),
            ).fetchone()
        return row is not None

    def count_active_categories(self, post_id: UUID) -> int:
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT COUNT(*) AS n FROM post_categories pc
                JOIN categories c ON c.id = pc.category_id
                WHERE pc.post_id = ? AND c.is_active = 1
                """,
                (str(post_id),),
            ).fetchone()
        return int(row["n"])

    def update_draft(self, post: Post) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                """
                UPDATE posts SET title = ?, content = ?, slug = ?, updated_at = ?
                WHERE id = ? AND status = 'draft'
                """,
                (post.title, post.content, post.slug, _ts(post.updated_at), str(post.id)),
            )
            if cursor.rowcount != 1:
                return False
            conn.execute("DELETE FROM post_categories WHERE post_id = ?", (str(post.id),))
            conn.execute("DELETE FROM post_tags WHERE post_id = ?", (str(post.id),))
            self._insert_links(conn, post)
        return True

    def mark_published(self, post: Post) -> bool:
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    """
                    UPDATE posts
                    SET status = 'published', slug = ?, published_at = ?, updated_at = ?
                    WHERE id = ? AND status = 'draft'
                    """,
                    (post.slug, _ts(post.published_at), _ts(post.updated_at), str(post.id)),
                )
                return cursor.rowcount == 1
        except StorageError as e:
            # A concurrent publish claimed the slug first.
            if isinstance(e.__cause__, sqlite3.IntegrityError):
                raise SlugTakenError(post.slug) from e
            raise

    def list_published(
        self,
        offset: int,
        limit: int,
        sort: SortOrder,
        category_slug: str | None = None,
        tag_slug: str | None = None,
    ) -> list[Post]:
        where, params = self._published_filter(category_slug, tag_slug)
        direction = "ASC" if sort == "oldest" else "DESC"
        with self._connect() as conn:
            rows = conn.execute(
                f"""
                SELECT p.* FROM posts p {where}
                ORDER BY p.published_at {direction}, p.id {direction}
                LIMIT ? OFFSET ?
                """,
                [*params, limit, offset],
            ).fetchall()
            return [self._hydrate(conn, r) for r in rows]

    def count_published(
        self, category_slug: str | None = None, tag_slug: str | None = None
    ) -> int:
        where, params = self._published_filter(category_slug, tag_slug)
        with self._connect() as conn:
            row = conn.execute(f"SELECT COUNT(*) AS n FROM posts p {where}", params).fetchone()
        return int(row["n"])

    def list_all(self) -> list[Post]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM posts ORDER BY created_at DESC").fetchall()
            return [self._hydrate(conn, r) for r in rows]

    def _published_filter(
        self, category_slug: str | None, tag_slug: str | None
    ) -> tuple[str, list[Any]]:
        clauses = ["p.status = 'published'"]
        params: list[Any] = []
        if category_slug:
            clauses.append(
                """EXISTS (
                    SELECT 1 FROM post_categories pc JOIN categories c ON c.id = pc.category_id
                    WHERE pc.post_id = p.id AND c.slug = ?
                )"""
            )
            params.append(category_slug)
        if tag_slug:
            clauses.append(
                """EXISTS (
                    SELECT 1 FROM post_tags pt JOIN tags t ON t.id = pt.tag_id
                    WHERE pt.post_id = p.id AND lower(t.slug) = lower(?)
                )"""
            )
            params.append(tag_slug)
        return "WHERE " + " AND ".join(clauses), params

    def _hydrate(self, conn: sqlite3.Connection, row: dict[str, Any]) -> Post:
        category_rows = conn.execute(
            "SELECT category_id FROM post_categories WHERE post_id = ?", (row["id"],)
        ).fetchall()
        tag_rows = conn.execute(
            "SELECT tag_id FROM post_tags WHERE post_id = ?", (row["id"],)
        ).fetchall()
        return Post(
            id=UUID(row["id"]),
            title=row["title"],
            content=row["content"],
            slug=row["slug"],
            author_id=UUID(row["author_id"]),
            status=row["status"],
            published_at=_dt(row["published_at"]),
            created_at=_dt(row["created_at"]),
            updated_at=_dt(row["updated_at"]),
            category_ids=[UUID(r["category_id"]) for r in category_rows],
            tag_ids=[UUID(r["tag_id"]) for r in tag_rows],
        )


class SQLiteCommentRepo(_SQLiteRepo):
    def create(self, comment: Comment) -> Comment:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO comments (
                    id, post_id, author_id, content, status,
                    parent_comment_id, created_at, approved_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(comment.id),
                    str(comment.post_id),
                    str(comment.author_id),
                    comment.content,
                    comment.status,
                    str(comment.parent_comment_id) if comment.parent_comment_id else None,
                    _ts(comment.created_at),
                    _ts(comment.approved_at),
                ),
            )
        return comment

    def get_by_id(self, comment_id: UUID) -> Comment | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM comments WHERE id = ?", (str(comment_id),)
            ).fetchone()
        return self._row_to_comment(row) if row else None

    def mark_moderated(self, comment: Comment) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                """
                UPDATE comments SET status = ?, approved_at = ?
                WHERE id = ? AND status = 'pending'
                """,
                (comment.status, _ts(comment.approved_at), str(comment.id)),
            )
            return cursor.rowcount == 1

    def list_approved_top_level(
        self, post_id: UUID, offset: int, limit: int, sort: SortOrder
    ) -> list[Comment]:
        direction = "DESC" if sort == "newest" else "ASC"
        with self._connect() as conn:
            rows = conn.execute(
                f"""
                SELECT * FROM comments
                WHERE post_id = ? AND status = 'approved' AND parent_comment_id IS NULL
                ORDER BY created_at {direction}, id {direction}
                LIMIT ? OFFSET ?
                """,
                (str(post_id), limit, offset),
            ).fetchall()
        return [self._row_to_comment(r) for r in rows]

    def count_approved_top_level(self, post_id: UUID) -> int:
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT COUNT(*) AS n FROM comments
                WHERE post_id = ? AND status = 'approved' AND parent_comment_id IS NULL
                """,
                (str(post_id),),
            ).fetchone()
        return int(row["n"])

    def list_approved_replies(self, post_id: UUID, parent_comment_id: UUID) -> list[Comment]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM comments
                WHERE post_id = ? AND parent_comment_id = ? AND status = 'approved'
                ORDER BY created_at ASC, id ASC
                """,
                (str(post_id), str(parent_comment_id)),
            ).fetchall()
        return [self._row_to_comment(r) for r in rows]

    def list_pending(self) -> list[Comment]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM comments WHERE status = 'pending' ORDER BY created_at ASC, id ASC"
            ).fetchall()
        return [self._row_to_comment(r) for r in rows]

    def _row_to_comment(self, row: dict[str, Any]) -> Comment:
        return Comment(
            id=UUID(row["id"]),
            post_id=UUID(row["post_id"]),
            author_id=UUID(row["author_id"]),
            content=row["content"],
            status=row["status"],
            parent_comment_id=UUID(row["parent_comment_id"]) if row["parent_comment_id"] else None,
            created_at=_dt(row["created_at"]),
            approved_at=_dt(row["approved_at"]),
        )
