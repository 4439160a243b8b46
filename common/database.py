"""PostgreSQL connection pool and topic table operations."""

import logging
import threading
from typing import Any, List, Optional, Tuple, Union

from psycopg2.extras import RealDictCursor
from psycopg2.pool import PoolError, ThreadedConnectionPool

from common.model import CategoryCount, Topic
from common.settings import Settings

logger = logging.getLogger(__name__)


CREATE_TOPICS_TABLE = """
    CREATE TABLE IF NOT EXISTS topics (
        id SERIAL PRIMARY KEY,
        title VARCHAR(255) NOT NULL,
        category VARCHAR(100),
        keywords TEXT,
        preview TEXT,
        content TEXT,
        author VARCHAR(100),
        created_date TIMESTAMP DEFAULT (NOW() AT TIME ZONE 'UTC'),
        views INT DEFAULT 0,
        helpful INT DEFAULT 0
    )
"""

TOPIC_COLUMNS = (
    "id, title, category, keywords, preview, content, author, "
    "created_date, views, helpful"
)

# Only these columns may be bumped by increment_counter()
COUNTER_COLUMNS = frozenset({"views", "helpful"})


class PoolTimeout(PoolError):
    """No connection became free within the acquire timeout."""


def build_topic_query(
    search: Optional[str] = None,
    category: Optional[str] = None,
    limit: Union[int, str, None] = None,
) -> Tuple[str, List[Any]]:
    """Assemble the SELECT for listing topics.

    Args:
        search: Substring matched case-insensitively against title, keywords
                and content. Empty means no text filter.
        category: Exact category to keep. Empty or "all" means every category.
        limit: Row cap, passed through as a query parameter unvalidated.

    Returns:
        Tuple of (sql, params) ready for cursor.execute().
    """
    sql = f"SELECT {TOPIC_COLUMNS} FROM topics"
    params: List[Any] = []
    conditions = []

    if search:
        conditions.append("(title ILIKE %s OR keywords ILIKE %s OR content ILIKE %s)")
        pattern = f"%{search}%"
        params.extend([pattern, pattern, pattern])

    if category and category != "all":
        conditions.append("category = %s")
        params.append(category)

    if conditions:
        sql += " WHERE " + " AND ".join(conditions)

    sql += " ORDER BY created_date DESC"

    if limit is not None:
        sql += " LIMIT %s"
        params.append(limit)

    return sql, params


class _Connection:
    def __init__(self, store: "TopicStore") -> None:
        self._store = store
        if not store._slots.acquire(timeout=store.acquire_timeout):
            raise PoolTimeout(
                f"Timed out after {store.acquire_timeout:g}s waiting for a database connection"
            )
        try:
            self._conn = store._pool.getconn()
        except Exception:
            store._slots.release()
            raise

    def __enter__(self):
        return self

    def __exit__(self, exc_type, *_):
        try:
            if exc_type:
                self._conn.rollback()
            else:
                self._conn.commit()
        finally:
            # Connections that died mid-request are discarded instead of reused
            self._store._pool.putconn(self._conn, close=bool(self._conn.closed))
            self._store._slots.release()

    def cursor(self):
        return self._conn.cursor(cursor_factory=RealDictCursor)


class TopicStore:
    """Pooled access to the topics table.

    At most ``max_connections`` operations run against the database at once;
    further callers block for up to ``acquire_timeout`` seconds before failing
    with PoolTimeout. All methods are blocking and meant to be called from a
    worker thread.
    """

    def __init__(
        self,
        pool: ThreadedConnectionPool,
        max_connections: int = 10,
        acquire_timeout: float = 60.0,
    ) -> None:
        self._pool = pool
        self._slots = threading.BoundedSemaphore(max_connections)
        self.max_connections = max_connections
        self.acquire_timeout = acquire_timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "TopicStore":
        connect_kwargs = dict(
            host=settings.postgres_host,
            port=settings.postgres_port,
            database=settings.postgres_db,
            user=settings.postgres_user,
            password=settings.postgres_password,
            sslmode=settings.postgres_sslmode,
            connect_timeout=10,
            keepalives=1,
            keepalives_idle=30,
            keepalives_interval=10,
            keepalives_count=5,
        )
        if settings.statement_timeout:
            timeout_ms = int(settings.statement_timeout * 1000)
            connect_kwargs["options"] = f"-c statement_timeout={timeout_ms}"

        # minconn=0 so the pool connects lazily and startup never needs the database
        pool = ThreadedConnectionPool(0, settings.pool_max_size, **connect_kwargs)
        logger.info(
            "Connection pool ready for %s:%s/%s (max %d connections)",
            settings.postgres_host,
            settings.postgres_port,
            settings.postgres_db,
            settings.pool_max_size,
        )
        return cls(
            pool,
            max_connections=settings.pool_max_size,
            acquire_timeout=settings.pool_acquire_timeout,
        )

    def close(self) -> None:
        if not self._pool.closed:
            self._pool.closeall()
            logger.info("Connection pool closed")

    def connection(self) -> _Connection:
        return _Connection(self)

    def init_schema(self) -> None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(CREATE_TOPICS_TABLE)
        logger.info("Topics table ready")

    def list_topics(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        limit: Union[int, str, None] = None,
    ) -> List[Topic]:
        sql, params = build_topic_query(search, category, limit)
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(sql, params)
            rows = cursor.fetchall()
            return [Topic.from_db_row(dict(row)) for row in rows]

    def get_topic(self, topic_id: int) -> Optional[Topic]:
        with self.connection() as conn:
            sql = f"SELECT {TOPIC_COLUMNS} FROM topics WHERE id = %s"
            cursor = conn.cursor()
            cursor.execute(sql, (topic_id,))
            row = cursor.fetchone()
            return Topic.from_db_row(dict(row)) if row else None

    def insert_topic(
        self,
        title: Optional[str],
        category: Optional[str],
        keywords: str,
        preview: str,
        content: Optional[str],
        author: str,
    ) -> int:
        """Insert a topic row.

        Returns:
            The id assigned by the database.
        """
        dml = (
            "INSERT INTO topics (title, category, keywords, preview, content, author) "
            "VALUES (%s, %s, %s, %s, %s, %s) "
            "RETURNING id"
        )
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(dml, (title, category, keywords, preview, content, author))
            return cursor.fetchone()["id"]

    def update_topic(
        self,
        topic_id: int,
        title: Optional[str],
        category: Optional[str],
        keywords: str,
        preview: str,
        content: Optional[str],
        author: str,
    ) -> int:
        """Overwrite every editable column of a topic.

        Returns:
            Number of rows changed (0 when the id does not exist).
        """
        dml = (
            "UPDATE topics SET title = %s, category = %s, keywords = %s, "
            "preview = %s, content = %s, author = %s "
            "WHERE id = %s"
        )
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                dml, (title, category, keywords, preview, content, author, topic_id)
            )
            return cursor.rowcount

    def increment_counter(self, topic_id: int, column: str) -> int:
        """Atomically add one to a counter column.

        The increment happens inside the UPDATE statement, so concurrent
        callers never overwrite each other's bumps.

        Returns:
            Number of rows changed (0 when the id does not exist).
        """
        if column not in COUNTER_COLUMNS:
            raise ValueError(f"Not a counter column: {column}")

        with self.connection() as conn:
            dml = f"UPDATE topics SET {column} = {column} + 1 WHERE id = %s"
            cursor = conn.cursor()
            cursor.execute(dml, (topic_id,))
            return cursor.rowcount

    def delete_topic(self, topic_id: int) -> int:
        """Delete a topic.

        Deleting an id that does not exist is not an error.

        Returns:
            Number of rows removed.
        """
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM topics WHERE id = %s", (topic_id,))
            return cursor.rowcount

    def category_counts(self) -> List[CategoryCount]:
        with self.connection() as conn:
            sql = (
                "SELECT category, COUNT(*) AS count FROM topics "
                "GROUP BY category "
                "ORDER BY count DESC, category ASC"
            )
            cursor = conn.cursor()
            cursor.execute(sql)
            rows = cursor.fetchall()
            return [CategoryCount.from_db_row(dict(row)) for row in rows]
