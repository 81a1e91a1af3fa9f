import json
import sqlite3
from datetime import datetime
from typing import Any
from uuid import UUID

from src.core.entities import DeferredTask
from src.domain.entities import Comment, Post, User


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def parse_dt(s: str | None) -> datetime | None:
    return datetime.fromisoformat(s) if s else None


def parse_uuid(s: str | None) -> UUID | None:
    return UUID(s) if s else None


def _iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt else None


class SQLiteRepoBase:
    """Base class for SQLite repositories."""

    def __init__(self, db_path: str, connection: sqlite3.Connection | None = None):
        self.db_path = db_path
        self._external_conn = connection

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection (uses external if provided)."""
        if self._external_conn is not None:
            return self._external_conn

        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def _should_close(self) -> bool:
        """Whether to close connection after use."""
        return self._external_conn is None

    def _release(self, conn: sqlite3.Connection) -> None:
        if self._should_close():
            conn.close()

    def _commit(self, conn: sqlite3.Connection) -> None:
        if self._should_close():
            conn.commit()


class SQLiteUserRepo(SQLiteRepoBase):
    def save(self, user: User) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO users (
                    id, email, display_name, password_hash, admin, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    email=excluded.email,
                    display_name=excluded.display_name,
                    password_hash=excluded.password_hash,
                    admin=excluded.admin,
                    updated_at=excluded.updated_at
            """,
                (
                    str(user.id),
                    user.email,
                    user.display_name,
                    user.password_hash,
                    1 if user.admin else 0,
                    user.created_at.isoformat(),
                    user.updated_at.isoformat(),
                ),
            )
            self._commit(conn)
        finally:
            self._release(conn)

    def get_by_email(self, email: str) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
            return self._map_row(row) if row else None
        finally:
            self._release(conn)

    def get_by_id(self, user_id: UUID) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (str(user_id),)).fetchone()
            return self._map_row(row) if row else None
        finally:
            self._release(conn)

    def list_all(self) -> list[User]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM users ORDER BY email").fetchall()
            return [self._map_row(row) for row in rows]
        finally:
            self._release(conn)

    def _map_row(self, row: dict[str, Any]) -> User:
        return User(
            id=UUID(row["id"]),
            email=row["email"],
            display_name=row["display_name"] or "",
            password_hash=row["password_hash"] or "",
            admin=bool(row["admin"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


class SQLitePostRepo(SQLiteRepoBase):
    def save(self, post: Post) -> Post:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO posts (
                    id, title, body, published, owner_user_id, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title=excluded.title,
                    body=excluded.body,
                    published=excluded.published,
                    owner_user_id=excluded.owner_user_id,
                    updated_at=excluded.updated_at
            """,
                (
                    str(post.id),
                    post.title,
                    post.body,
                    1 if post.published else 0,
                    str(post.owner_user_id) if post.owner_user_id else None,
                    post.created_at.isoformat(),
                    post.updated_at.isoformat(),
                ),
            )
            self._commit(conn)
            return post
        except Exception:
            conn.rollback()
            raise
        finally:
            self._release(conn)

    def get_by_id(self, post_id: UUID) -> Post | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM posts WHERE id = ?", (str(post_id),)).fetchone()
            return self._map_row(row) if row else None
        finally:
            self._release(conn)

    def list_posts(self, published: bool | None = None) -> list[Post]:
        conn = self._get_conn()
        try:
            query = "SELECT * FROM posts"
            params: list[int] = []
            if published is not None:
                query += " WHERE published = ?"
                params.append(1 if published else 0)
            query += " ORDER BY created_at DESC"
            rows = conn.execute(query, params).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            self._release(conn)

    def delete(self, post_id: UUID) -> None:
        conn = self._get_conn()
        try:
            # Delete comments first (handles DBs without ON DELETE CASCADE)
            conn.execute("DELETE FROM comments WHERE post_id = ?", (str(post_id),))
            conn.execute("DELETE FROM posts WHERE id = ?", (str(post_id),))
            self._commit(conn)
        finally:
            self._release(conn)

    def _map_row(self, row: dict[str, Any]) -> Post:
        return Post(
            id=UUID(row["id"]),
            title=row["title"],
            body=row["body"],
            published=bool(row["published"]),
            owner_user_id=parse_uuid(row["owner_user_id"]),
            created_at=parse_dt(row["created_at"]) or datetime.min,
            updated_at=parse_dt(row["updated_at"]) or datetime.min,
        )


class SQLiteCommentRepo(SQLiteRepoBase):
    def save(self, comment: Comment) -> Comment:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO comments (
                    id, body, post_id, author_user_id, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    body=excluded.body,
                    updated_at=excluded.updated_at
            """,
                (
                    str(comment.id),
                    comment.body,
                    str(comment.post_id),
                    str(comment.author_user_id) if comment.author_user_id else None,
                    comment.created_at.isoformat(),
                    comment.updated_at.isoformat(),
                ),
            )
            self._commit(conn)
            return comment
        except Exception:
            conn.rollback()
            raise
        finally:
            self._release(conn)

    def get_by_id(self, comment_id: UUID) -> Comment | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM comments WHERE id = ?", (str(comment_id),)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            self._release(conn)

    def list_by_post(self, post_id: UUID) -> list[Comment]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM comments WHERE post_id = ? ORDER BY created_at DESC",
                (str(post_id),),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            self._release(conn)

    def count_by_post(self, post_id: UUID) -> int:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT COUNT(*) AS n FROM comments WHERE post_id = ?", (str(post_id),)
            ).fetchone()
            return int(row["n"])
        finally:
            self._release(conn)

    def delete(self, comment_id: UUID) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM comments WHERE id = ?", (str(comment_id),))
            self._commit(conn)
        finally:
            self._release(conn)

    def _map_row(self, row: dict[str, Any]) -> Comment:
        return Comment(
            id=UUID(row["id"]),
            body=row["body"],
            post_id=UUID(row["post_id"]),
            author_user_id=parse_uuid(row["author_user_id"]),
            created_at=parse_dt(row["created_at"]) or datetime.min,
            updated_at=parse_dt(row["updated_at"]) or datetime.min,
        )


class SQLiteDeferredTaskRepo(SQLiteRepoBase):
    """SQLite implementation of DeferredTaskRepoPort."""

    def get_by_id(self, task_id: UUID) -> DeferredTask | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM deferred_tasks WHERE id = ?", (str(task_id),)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            self._release(conn)

    def save(self, task: DeferredTask) -> DeferredTask:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO deferred_tasks (
                    id, task_name, payload_json, not_before, status, attempts,
                    last_attempt_at, next_retry_at, completed_at,
                    error_message, claimed_by, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    status=excluded.status,
                    attempts=excluded.attempts,
                    last_attempt_at=excluded.last_attempt_at,
                    next_retry_at=excluded.next_retry_at,
                    completed_at=excluded.completed_at,
                    error_message=excluded.error_message,
                    claimed_by=excluded.claimed_by,
                    updated_at=excluded.updated_at
                """,
                (
                    str(task.id),
                    task.task_name,
                    json.dumps(task.payload),
                    task.not_before.isoformat(),
                    task.status,
                    task.attempts,
                    _iso(task.last_attempt_at),
                    _iso(task.next_retry_at),
                    _iso(task.completed_at),
                    task.error_message,
                    task.claimed_by,
                    task.created_at.isoformat(),
                    task.updated_at.isoformat(),
                ),
            )
            self._commit(conn)
            return task
        finally:
            self._release(conn)

    def claim_next_runnable(self, worker_id: str, now_utc: datetime) -> DeferredTask | None:
        conn = self._get_conn()
        try:
            now_iso = now_utc.isoformat()

            while True:
                row = conn.execute(
                    """
                    SELECT * FROM deferred_tasks
                    WHERE (status = 'queued' AND not_before <= ?)
                       OR (status = 'retry_wait' AND next_retry_at <= ?)
                    ORDER BY not_before ASC
                    LIMIT 1
                    """,
                    (now_iso, now_iso),
                ).fetchone()

                if not row:
                    return None

                # Claim it; zero rows means another worker got there first
                cursor = conn.execute(
                    """
                    UPDATE deferred_tasks
                    SET status = 'running', claimed_by = ?, updated_at = ?
                    WHERE id = ? AND status IN ('queued', 'retry_wait')
                    """,
                    (worker_id, now_iso, row["id"]),
                )
                self._commit(conn)

                if cursor.rowcount == 1:
                    break

            claimed = self._map_row(row)
            claimed.status = "running"
            claimed.claimed_by = worker_id
            claimed.updated_at = now_utc
            return claimed
        finally:
            self._release(conn)

    def list_pending(self) -> list[DeferredTask]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM deferred_tasks "
                "WHERE status IN ('queued', 'running', 'retry_wait') ORDER BY not_before ASC"
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            self._release(conn)

    def list_by_name(self, task_name: str) -> list[DeferredTask]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM deferred_tasks WHERE task_name = ? ORDER BY created_at DESC",
                (task_name,),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            self._release(conn)

    def _map_row(self, row: dict[str, Any]) -> DeferredTask:
        return DeferredTask(
            id=UUID(row["id"]),
            task_name=row["task_name"],
            payload=json.loads(row["payload_json"] or "{}"),
            not_before=datetime.fromisoformat(row["not_before"]),
            status=row["status"],
            attempts=row["attempts"],
            last_attempt_at=parse_dt(row["last_attempt_at"]),
            next_retry_at=parse_dt(row["next_retry_at"]),
            completed_at=parse_dt(row["completed_at"]),
            error_message=row["error_message"],
            claimed_by=row["claimed_by"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
