import sqlite3
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from src.domain.entities import Post, PostPage, User
from src.domain.policy import as_utc, is_visible

UPDATABLE_POST_FIELDS = ("title", "content", "is_draft", "published_at")


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def _dt_to_db(value: datetime | None) -> str | None:
    return as_utc(value).isoformat() if value else None


def _dt_from_db(value: str | None) -> datetime | None:
    return as_utc(datetime.fromisoformat(value)) if value else None


class SQLitePostRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def create(
        self,
        author_id: UUID,
        title: str,
        content: str,
        is_draft: bool = False,
        published_at: datetime | None = None,
    ) -> Post:
        now = datetime.now(UTC)
        post = Post(
            id=uuid4(),
            author_id=author_id,
            title=title,
            content=content,
            is_draft=is_draft,
            published_at=as_utc(published_at) if published_at else None,
            created_at=now,
            updated_at=now,
        )
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO posts (
                    id, author_id, title, content, is_draft,
                    published_at, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
                (
                    str(post.id),
                    str(post.author_id),
                    post.title,
                    post.content,
                    int(post.is_draft),
                    _dt_to_db(post.published_at),
                    _dt_to_db(post.created_at),
                    _dt_to_db(post.updated_at),
                ),
            )
            conn.commit()
            return post
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_id(self, post_id: UUID) -> Post | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM posts WHERE id = ?", (str(post_id),)).fetchone()
            if not row:
                return None
            return self._map_row(row)
        finally:
            conn.close()

    def list_visible(self, now: datetime, page: int = 1, page_size: int = 20) -> PostPage:
        """
        Return one page of publicly visible posts in insertion order.

        Drafts are dropped in SQL; the remaining rows still go through
        is_visible so the list and the single-post fetch can never disagree
        about what is public. Scheduled rows are scanned on every call.
        """
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM posts WHERE is_draft = 0 ORDER BY seq ASC"
            ).fetchall()
        finally:
            conn.close()

        visible = [post for post in map(self._map_row, rows) if is_visible(post, now)]
        start = (page - 1) * page_size
        return PostPage(
            items=visible[start : start + page_size],
            total=len(visible),
            page=page,
            page_size=page_size,
        )

    def update(self, post_id: UUID, fields: dict[str, Any]) -> Post | None:
        """Apply a partial update. Only the columns present in `fields` are written."""
        updates = {k: v for k, v in fields.items() if k in UPDATABLE_POST_FIELDS}

        assignments = []
        params: list[Any] = []
        for key, value in updates.items():
            assignments.append(f"{key} = ?")
            if key == "is_draft":
                params.append(int(bool(value)))
            elif key == "published_at":
                params.append(_dt_to_db(value))
            else:
                params.append(value)

        assignments.append("updated_at = ?")
        params.append(_dt_to_db(datetime.now(UTC)))
        params.append(str(post_id))

        conn = self._get_conn()
        try:
            cursor = conn.execute(
                f"UPDATE posts SET {', '.join(assignments)} WHERE id = ?",  # noqa: S608
                params,
            )
            conn.commit()
            if cursor.rowcount == 0:
                return None
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

        return self.get_by_id(post_id)

    def delete(self, post_id: UUID) -> bool:
        conn = self._get_conn()
        try:
            cursor = conn.execute("DELETE FROM posts WHERE id = ?", (str(post_id),))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Post:
        return Post(
            id=UUID(row["id"]),
            author_id=UUID(row["author_id"]),
            title=row["title"],
            content=row["content"],
            is_draft=bool(row["is_draft"]),
            published_at=_dt_from_db(row["published_at"]),
            created_at=_dt_from_db(row["created_at"]) or datetime.min.replace(tzinfo=UTC),
            updated_at=_dt_from_db(row["updated_at"]) or datetime.min.replace(tzinfo=UTC),
        )


class SQLiteUserRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def save(self, user: User) -> User:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO users (
                    id, email, display_name, password_hash, status, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    email=excluded.email,
                    display_name=excluded.display_name,
                    password_hash=excluded.password_hash,
                    status=excluded.status,
                    updated_at=excluded.updated_at
            """,
                (
                    str(user.id),
                    user.email,
                    user.display_name,
                    user.password_hash,
                    user.status,
                    _dt_to_db(user.created_at),
                    _dt_to_db(user.updated_at),
                ),
            )
            conn.commit()
            return user
        finally:
            conn.close()

    def get_by_email(self, email: str) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def get_by_id(self, user_id: UUID) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (str(user_id),)).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def get_many(self, user_ids: Iterable[UUID]) -> dict[UUID, User]:
        ids = sorted({str(uid) for uid in user_ids})
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        conn = self._get_conn()
        try:
            rows = conn.execute(
                f"SELECT * FROM users WHERE id IN ({placeholders})",  # noqa: S608
                ids,
            ).fetchall()
            users = [self._map_row(row) for row in rows]
            return {user.id: user for user in users}
        finally:
            conn.close()

    def list_all(self) -> list[User]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM users ORDER BY email").fetchall()
            return [self._map_row(row) for row in rows]
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> User:
        return User(
            id=UUID(row["id"]),
            email=row["email"],
            display_name=row["display_name"],
            password_hash=row["password_hash"],
            status=row["status"],
            created_at=_dt_from_db(row["created_at"]) or datetime.min.replace(tzinfo=UTC),
            updated_at=_dt_from_db(row["updated_at"]) or datetime.min.replace(tzinfo=UTC),
        )
